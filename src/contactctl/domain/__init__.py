"""Domain layer — note parsing, link rules, contact and graph models.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
