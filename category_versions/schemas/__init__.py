"""Pydantic schemas for remote records and sync payloads."""

from category_versions.schemas.category import (
    Category,
    CategoryCreateItem,
    CategorySyncRequest,
    CategorySyncResult,
    CategoryUpdateItem,
    CreatedCategory,
)
from category_versions.schemas.version import (
    CategoryVersion,
    CategoryVersionCreate,
    CategoryVersionUpdate,
)

__all__ = [
    "Category",
    "CategoryCreateItem",
    "CategoryUpdateItem",
    "CategorySyncRequest",
    "CategorySyncResult",
    "CreatedCategory",
    "CategoryVersion",
    "CategoryVersionCreate",
    "CategoryVersionUpdate",
]
