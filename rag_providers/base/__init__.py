"""Provider-agnostic base layer: contracts, models, errors and infrastructure.

Import concrete symbols from their modules (``base.adapter``, ``base.models``,
``base.errors`` ...); this package module stays empty so importing any one of
them does not load the rest.
"""
