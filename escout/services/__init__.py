"""Service layer for escout."""
