"""Configuration layer — TOML discovery, pydantic models, logging setup."""
