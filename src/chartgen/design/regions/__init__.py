"""Chart region implementations."""
