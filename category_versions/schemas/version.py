"""Category version schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from category_versions.schemas._fields import Identifier, OptionalIdentifier


class CategoryVersion(BaseModel):
    """A named, depth-bounded configuration that owns one category tree."""

    model_config = ConfigDict(extra="ignore")

    id: Identifier
    name: str
    description: str | None = None
    levels_count: int = Field(..., ge=1)
    is_active: bool = False
    workspace: OptionalIdentifier = None
    created_by: OptionalIdentifier = None
    created_at: datetime | None = None


class CategoryVersionCreate(BaseModel):
    """Create a new category version."""

    name: str = Field(..., min_length=1, max_length=255)
    levels_count: int = Field(..., ge=1)
    description: str | None = None


class CategoryVersionUpdate(BaseModel):
    """Update version metadata. The level count cannot be revised."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
