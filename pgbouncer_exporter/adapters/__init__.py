"""Infrastructure adapters behind the core protocols."""
