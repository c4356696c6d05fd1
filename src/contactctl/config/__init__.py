"""Configuration — pydantic models, unified settings, logging setup."""
