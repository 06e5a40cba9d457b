"""Core scrape engine: coercion, health state and orchestration."""
