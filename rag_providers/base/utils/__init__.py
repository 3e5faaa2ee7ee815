"""Small shared helpers for adapters."""
