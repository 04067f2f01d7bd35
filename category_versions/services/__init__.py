"""Services for category version management."""
