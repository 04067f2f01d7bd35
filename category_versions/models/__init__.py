"""Enumerations shared by schemas and services."""

from category_versions.models.enums import CategoryType, EditMode

__all__ = ["CategoryType", "EditMode"]
