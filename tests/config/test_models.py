"""Tests for config models — defaults and validation."""

import pytest
from pydantic import ValidationError

from contactctl.config.models import ContactsConfig, GraphConfig, VaultConfig


class TestDefaults:
    def test_contacts_defaults(self) -> None:
        cfg = ContactsConfig()
        assert cfg.folder == "Contacts"
        assert cfg.linked_files_heading == "## Linked Files"
        assert cfg.require_existing_file is False
        assert cfg.max_id_length == 50

    def test_graph_defaults(self) -> None:
        cfg = GraphConfig()
        assert cfg.node_size == 8
        assert cfg.implied_strength == 0.5
        assert (cfg.link_strength, cfg.repel_force, cfg.center_force) == (30, 200, 0.3)

    def test_vault_defaults(self) -> None:
        assert VaultConfig().name == "my-vault"


class TestValidation:
    def test_frozen(self) -> None:
        cfg = ContactsConfig()
        with pytest.raises(ValidationError):
            cfg.folder = "Other"  # type: ignore[misc]

    def test_max_id_length_positive(self) -> None:
        with pytest.raises(ValidationError):
            ContactsConfig(max_id_length=0)
