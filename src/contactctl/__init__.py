"""contactctl — contact records and relationship graphs for Markdown vaults."""

__version__ = "0.1.0"
