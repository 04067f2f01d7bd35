"""Category schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from category_versions.schemas._fields import Identifier, OptionalIdentifier


class Category(BaseModel):
    """A category node as held in the draft list.

    A node is identified either by a persisted ``id`` or, before its first
    synchronization, by a client-generated ``temp_id``. Exactly one of the two
    is populated. The parent is referenced the same way.
    """

    model_config = ConfigDict(extra="ignore")

    id: OptionalIdentifier = None
    temp_id: str | None = None
    name: str = ""
    description: str | None = None
    level: int = Field(1, ge=1)
    is_active: bool = True
    parent_id: OptionalIdentifier = None
    parent_temp_id: str | None = None
    # The remote store lists child ids instead of a parent reference
    children: list[Identifier] = Field(default_factory=list, exclude=True)

    @model_validator(mode="after")
    def check_references(self) -> "Category":
        """Enforce the single-identifier and single-parent-reference rules."""
        if bool(self.id) == bool(self.temp_id):
            raise ValueError("Exactly one of id or temp_id must be set")
        if self.parent_id and self.parent_temp_id:
            raise ValueError("Only one of parent_id or parent_temp_id may be set")
        return self

    @property
    def key(self) -> str:
        """Identifier used to index this node: id if persisted, else temp_id."""
        return self.id or self.temp_id

    @property
    def parent_key(self) -> str | None:
        """Resolved parent reference, or None for a root."""
        return self.parent_id or self.parent_temp_id

    @property
    def is_pending(self) -> bool:
        """True until the node has been persisted."""
        return self.temp_id is not None

    def matches(self, id: str | None = None, temp_id: str | None = None) -> bool:
        """Check whether this node is addressed by the given id or temp_id."""
        return bool((id and self.id == id) or (temp_id and self.temp_id == temp_id))


class CategoryCreateItem(BaseModel):
    """A new category in a sync request, numbered with backend levels."""

    temp_id: str
    name: str
    description: str | None = None
    level: int
    parent_id: str | None = None
    parent_temp_id: str | None = None


class CategoryUpdateItem(BaseModel):
    """An existing category in a sync request, numbered with backend levels."""

    id: str
    name: str
    description: str | None = None
    level: int
    parent_id: str | None = None
    parent_temp_id: str | None = None


class CategorySyncRequest(BaseModel):
    """Atomic create/update/delete request for one version's tree."""

    create: list[CategoryCreateItem] = Field(default_factory=list)
    update: list[CategoryUpdateItem] = Field(default_factory=list)
    delete: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict:
        """Serialize for the wire.

        Updates only carry ``parent_temp_id`` when a persisted node was moved
        under a node that does not exist server-side yet.
        """
        return {
            "create": [item.model_dump() for item in self.create],
            "update": [
                item.model_dump(exclude={"parent_temp_id"} if item.parent_temp_id is None else None)
                for item in self.update
            ],
            "delete": list(self.delete),
        }


class CreatedCategory(BaseModel):
    """Server-assigned id for a category sent with a temp_id."""

    model_config = ConfigDict(extra="ignore")

    temp_id: str
    id: Identifier


class CategorySyncResult(BaseModel):
    """Result reported by the remote store after a sync."""

    model_config = ConfigDict(extra="ignore")

    created: list[CreatedCategory] = Field(default_factory=list)
    updated: list[Identifier] = Field(default_factory=list)
    deleted: list[Identifier] = Field(default_factory=list)
    deactivated: list[Identifier] = Field(default_factory=list)
    errors: list = Field(default_factory=list)

    @property
    def temp_id_mapping(self) -> dict[str, str]:
        """Map of temp_id to the id the store assigned."""
        return {item.temp_id: item.id for item in self.created}
