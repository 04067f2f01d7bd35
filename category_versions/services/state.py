"""Explicit state shared by the coordinator, editor and lifecycle manager."""

from dataclasses import dataclass, field

from category_versions.models.enums import EditMode
from category_versions.schemas.category import Category
from category_versions.schemas.version import CategoryVersion


@dataclass
class CategoryEditorState:
    """Everything a view needs to render versions and the draft tree.

    One instance per (workspace, category type) editing surface. The draft
    list is owned by the single active edit session.
    """

    versions: list[CategoryVersion] = field(default_factory=list)
    active_version: CategoryVersion | None = None
    selected_version: CategoryVersion | None = None
    categories: list[Category] = field(default_factory=list)
    deleted_ids: list[str] = field(default_factory=list)
    invalid_ids: list[str] = field(default_factory=list)
    is_loading: bool = False
    error: str | None = None
    mode: EditMode = EditMode.VIEWING

    @property
    def is_editing(self) -> bool:
        return self.mode == EditMode.EDITING

    def find_version(self, version_id: str | None) -> CategoryVersion | None:
        """Look up a loaded version by id."""
        if version_id is None:
            return None
        return next((v for v in self.versions if v.id == version_id), None)

    def reset_tracking(self) -> None:
        """Forget deletions and validation highlights."""
        self.deleted_ids = []
        self.invalid_ids = []
