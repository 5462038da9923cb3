"""Core building blocks: parsing, storage, settings, credentials."""
