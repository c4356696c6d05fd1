"""Infrastructure layer — note storage, templates, vault wiring.

This layer depends on stdlib and Jinja2. It never imports from
services, commands, or output.
"""
