"""Coordinates loading, editing and synchronizing a version's category tree."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from category_versions.config import Settings, get_settings
from category_versions.exceptions import (
    CategoryVersionError,
    EditSessionError,
    InvalidCategoryName,
    NoVersionSelected,
    SyncInProgress,
    ValidationFailed,
)
from category_versions.models.enums import CategoryType, EditMode
from category_versions.schemas.category import (
    Category,
    CategoryCreateItem,
    CategorySyncRequest,
    CategorySyncResult,
    CategoryUpdateItem,
)
from category_versions.schemas.version import CategoryVersion
from category_versions.services.category_api import CategoryApiClient
from category_versions.services.completeness import find_incomplete, find_unnamed
from category_versions.services.draft_editor import DraftEditor
from category_versions.services.levels import categories_to_display, level_shift
from category_versions.services.state import CategoryEditorState

logger = logging.getLogger(__name__)


class VersionSyncCoordinator:
    """Owns the editor state for one (workspace, type) surface.

    Loads versions and categories, runs the edit-mode state machine, and
    pushes the draft back to the remote store as a single atomic sync.
    Failures are recorded in ``state.error`` and re-raised; the draft list
    and edit mode are left untouched so the user can retry.
    """

    def __init__(
        self,
        api: CategoryApiClient | None = None,
        state: CategoryEditorState | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.api = api or CategoryApiClient(self.settings)
        self.state = state or CategoryEditorState()
        self.editor = DraftEditor(self.state)
        self.max_levels = self.settings.max_category_levels
        self._syncing: set[str] = set()
        self._categories_request_seq = 0
        self._in_flight = 0

    @contextmanager
    def remote_action(
        self,
        action: str,
        is_stale: Callable[[], bool] | None = None,
        **context: Any,
    ) -> Iterator[None]:
        """Track loading and error state around a remote operation.

        ``is_loading`` stays set while any action is in flight. A failure of
        an action that ``is_stale`` reports as superseded is logged and
        re-raised but does not replace ``state.error``.
        """
        self._in_flight += 1
        self.state.is_loading = True
        self.state.error = None
        try:
            yield
        except CategoryVersionError as e:
            if is_stale is None or not is_stale():
                self.state.error = str(e)
            logger.error(
                f"Category version action {action} failed: {e}",
                extra={
                    **context,
                    "error_type": type(e).__name__,
                    "action": f"{action}_failed",
                    "component": type(self).__name__,
                },
            )
            raise
        finally:
            self._in_flight -= 1
            self.state.is_loading = self._in_flight > 0

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def fetch_versions(
        self, workspace_id: str, category_type: CategoryType
    ) -> list[CategoryVersion]:
        """Load all versions and keep or reset the selection.

        The selection falls back to the active version only when nothing is
        selected or the selected version no longer exists.
        """
        self.state.invalid_ids = []
        with self.remote_action(
            "fetch_versions", workspace_id=workspace_id, category_type=str(category_type)
        ):
            versions = await self.api.list_versions(workspace_id, category_type)

        active = next((v for v in versions if v.is_active), None)
        self.state.versions = versions
        self.state.active_version = active

        selected = self.state.selected_version
        current = self.state.find_version(selected.id) if selected else None
        if current is None:
            self.state.selected_version = active
        else:
            self.state.selected_version = current

        logger.info(
            f"Loaded {len(versions)} {category_type} versions for workspace {workspace_id}",
            extra={
                "workspace_id": workspace_id,
                "category_type": str(category_type),
                "version_id": active.id if active else None,
                "action": "fetch_versions_success",
                "component": type(self).__name__,
            },
        )
        return versions

    async def fetch_categories(
        self,
        workspace_id: str,
        category_type: CategoryType,
        version_id: str | None = None,
    ) -> list[Category]:
        """Replace the draft list with the store's categories for a version.

        The version is the explicit one, else the selected one, else the
        active one. Levels arrive in backend numbering and are converted for
        display. A response overtaken by a newer fetch is discarded.
        """
        self.state.invalid_ids = []
        target_id = version_id or (
            self.state.selected_version.id if self.state.selected_version else None
        ) or (self.state.active_version.id if self.state.active_version else None)

        self._categories_request_seq += 1
        request_seq = self._categories_request_seq

        with self.remote_action(
            "fetch_categories",
            is_stale=lambda: request_seq != self._categories_request_seq,
            workspace_id=workspace_id,
            category_type=str(category_type),
            version_id=target_id,
        ):
            fetched = await self.api.list_categories(workspace_id, category_type, target_id)
            version = self.state.find_version(target_id)
            levels_count = version.levels_count if version else self.max_levels
            categories = categories_to_display(fetched, levels_count, self.max_levels)

        if request_seq != self._categories_request_seq:
            logger.debug(f"Discarding stale category response for version {target_id}")
            return self.state.categories

        self.state.categories = categories
        self.state.reset_tracking()
        logger.info(
            f"Loaded {len(categories)} categories for version {target_id}",
            extra={
                "workspace_id": workspace_id,
                "category_type": str(category_type),
                "version_id": target_id,
                "action": "fetch_categories_success",
                "component": type(self).__name__,
            },
        )
        return categories

    async def load(self, workspace_id: str, category_type: CategoryType) -> list[Category]:
        """Fetch versions, then the categories of the resolved version."""
        await self.fetch_versions(workspace_id, category_type)
        return await self.fetch_categories(workspace_id, category_type)

    def select_version(self, version: CategoryVersion | None) -> None:
        """Switch the version being viewed, dropping the current draft."""
        self.state.selected_version = version
        self.state.categories = []
        self.state.reset_tracking()

    # ------------------------------------------------------------------
    # Edit mode
    # ------------------------------------------------------------------

    def start_editing(self) -> None:
        """Enter edit mode for the selected version."""
        if self.state.selected_version is None:
            self.state.error = "No version selected to edit."
            raise NoVersionSelected("No version selected to edit.")
        if self.state.is_editing:
            raise EditSessionError("An edit session is already open.")
        self.state.mode = EditMode.EDITING
        self.state.reset_tracking()

    def stop_editing(self) -> None:
        """Leave edit mode without saving. Re-fetch to restore the stored tree."""
        self.state.mode = EditMode.VIEWING
        self.state.reset_tracking()

    # ------------------------------------------------------------------
    # Draft mutations
    # ------------------------------------------------------------------

    def add_category(
        self,
        parent_id: str | None,
        parent_temp_id: str | None,
        level: int | None = None,
        **data: Any,
    ) -> Category:
        try:
            return self.editor.add_category(parent_id, parent_temp_id, level=level, **data)
        except CategoryVersionError as e:
            self.state.error = str(e)
            raise

    def update_category(
        self, id: str | None, temp_id: str | None, data: dict[str, Any]
    ) -> Category | None:
        return self.editor.update_category(id, temp_id, data)

    def rename_category(self, id: str | None, temp_id: str | None, name: str) -> Category | None:
        return self.editor.rename_category(id, temp_id, name)

    def move_category(
        self,
        id: str | None,
        temp_id: str | None,
        new_parent_id: str | None,
        new_parent_temp_id: str | None,
    ) -> Category | None:
        return self.editor.move_category(id, temp_id, new_parent_id, new_parent_temp_id)

    def delete_category(self, id: str | None, temp_id: str | None) -> bool:
        return self.editor.delete_category(id, temp_id)

    def set_categories(self, categories: list[Category]) -> None:
        self.editor.set_categories(categories)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def build_sync_request(self, version: CategoryVersion) -> CategorySyncRequest:
        """Partition the draft into creates, updates and deletes in backend levels."""
        shift = level_shift(version.levels_count, self.max_levels)
        create = []
        update = []
        for c in self.state.categories:
            if c.temp_id:
                create.append(
                    CategoryCreateItem(
                        temp_id=c.temp_id,
                        name=c.name,
                        description=c.description,
                        level=c.level + shift,
                        parent_id=c.parent_id,
                        parent_temp_id=c.parent_temp_id,
                    )
                )
            elif c.id:
                update.append(
                    CategoryUpdateItem(
                        id=c.id,
                        name=c.name,
                        description=c.description,
                        level=c.level + shift,
                        parent_id=c.parent_id,
                        parent_temp_id=c.parent_temp_id,
                    )
                )
        return CategorySyncRequest(
            create=create, update=update, delete=list(self.state.deleted_ids)
        )

    async def save_changes(
        self, workspace_id: str, category_type: CategoryType
    ) -> CategorySyncResult:
        """Validate the draft and synchronize it with the remote store.

        Nothing is sent if the tree is incomplete or a node has no name. On
        success every pending node carries its server id and edit mode ends.
        """
        version = self.state.selected_version
        context = {
            "workspace_id": workspace_id,
            "category_type": str(category_type),
            "version_id": version.id if version else None,
        }

        with self.remote_action("save_changes", **context):
            self.state.invalid_ids = []
            if version is None:
                raise NoVersionSelected()
            if version.id in self._syncing:
                raise SyncInProgress(f"A save for version {version.name} is already in progress.")

            incomplete = find_incomplete(self.state.categories, version.levels_count)
            if incomplete:
                self.state.invalid_ids = [c.key for c in incomplete]
                logger.warning(
                    f"Save blocked: {len(incomplete)} incomplete categories in version {version.id}"
                )
                raise ValidationFailed(
                    invalid_ids=[c.key for c in incomplete],
                    names=[c.name for c in incomplete],
                    levels_count=version.levels_count,
                )

            unnamed = find_unnamed(self.state.categories)
            if unnamed:
                self.state.invalid_ids = [c.key for c in unnamed]
                logger.warning(
                    f"Save blocked: {len(unnamed)} unnamed categories in version {version.id}"
                )
                raise InvalidCategoryName(
                    f"Category name cannot be empty ({len(unnamed)} unnamed categories)."
                )

            request = self.build_sync_request(version)
            self._syncing.add(version.id)
            try:
                result = await self.api.sync_categories(
                    workspace_id, category_type, version.id, request
                )
            finally:
                self._syncing.discard(version.id)

        self._promote_created(result.temp_id_mapping)
        self.state.deleted_ids = []
        logger.info(
            f"Synchronized version {version.id}: {len(request.create)} created, "
            f"{len(request.update)} updated, {len(request.delete)} deleted",
            extra={**context, "action": "save_changes_success", "component": type(self).__name__},
        )

        try:
            await self.fetch_categories(workspace_id, category_type, version.id)
        except CategoryVersionError as e:
            logger.warning(f"Saved version {version.id} but could not reload its categories: {e}")
        self.state.mode = EditMode.VIEWING
        return result

    def _promote_created(self, mapping: dict[str, str]) -> None:
        """Swap temp ids for the ids the store assigned."""
        if not mapping:
            return
        promoted = []
        for c in self.state.categories:
            update: dict[str, Any] = {}
            if c.temp_id in mapping:
                update.update(id=mapping[c.temp_id], temp_id=None)
            if c.parent_temp_id in mapping:
                update.update(parent_id=mapping[c.parent_temp_id], parent_temp_id=None)
            promoted.append(c.model_copy(update=update) if update else c)
        self.state.categories = promoted
