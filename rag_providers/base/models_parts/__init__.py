"""Model parts package; import from `rag_providers.base.models` for the stable surface."""
