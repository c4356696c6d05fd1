"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, contactctl.toml only contains
overrides. A fresh vault needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- contactctl.toml sections ---


class VaultConfig(BaseModel):
    """[vault] section."""

    model_config = {"frozen": True}

    name: str = "my-vault"


class ContactsConfig(BaseModel):
    """[contacts] section."""

    model_config = {"frozen": True}

    folder: str = "Contacts"
    linked_files_heading: str = "## Linked Files"
    require_existing_file: bool = False
    max_id_length: int = Field(default=50, ge=1)


class GraphConfig(BaseModel):
    """[graph] section.

    Layout forces are passed through untouched to the renderer.
    """

    model_config = {"frozen": True}

    node_size: float = 8
    contact_node_color: str = "#5c7cfa"
    file_node_color: str = "#82c91e"
    implied_strength: float = 0.5
    link_strength: float = 30
    repel_force: float = 200
    center_force: float = 0.3
