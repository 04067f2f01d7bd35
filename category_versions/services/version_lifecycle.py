"""Create, edit and activate category versions."""

import logging
from typing import Any

from category_versions.exceptions import LevelOutOfRange
from category_versions.models.enums import CategoryType
from category_versions.schemas.version import (
    CategoryVersion,
    CategoryVersionCreate,
    CategoryVersionUpdate,
)
from category_versions.services.version_sync import VersionSyncCoordinator

logger = logging.getLogger(__name__)


class VersionLifecycleManager:
    """Version-level operations that share state with a VersionSyncCoordinator.

    After every change the version list is reloaded so the active and
    selected versions reflect the store.
    """

    def __init__(self, coordinator: VersionSyncCoordinator):
        self.coordinator = coordinator
        self.api = coordinator.api
        self.state = coordinator.state
        self.max_levels = coordinator.max_levels

    async def create_version(
        self,
        workspace_id: str,
        category_type: CategoryType,
        data: CategoryVersionCreate | dict[str, Any],
    ) -> CategoryVersion | None:
        """Create a version. It is neither activated nor selected."""
        payload = CategoryVersionCreate.model_validate(data)
        context = {"workspace_id": workspace_id, "category_type": str(category_type)}

        with self.coordinator.remote_action("create_version", **context):
            if payload.levels_count > self.max_levels:
                raise LevelOutOfRange(
                    f"levels_count must be between 1 and {self.max_levels}, "
                    f"got {payload.levels_count}"
                )
            created = await self.api.create_version(workspace_id, category_type, payload)

        logger.info(
            f"Created {category_type} version '{payload.name}' with {payload.levels_count} levels",
            extra={
                **context,
                "version_id": created.id if created else None,
                "action": "create_version_success",
                "component": type(self).__name__,
            },
        )
        await self.coordinator.fetch_versions(workspace_id, category_type)
        return created

    async def update_version(
        self,
        workspace_id: str,
        category_type: CategoryType,
        version_id: str,
        data: CategoryVersionUpdate | dict[str, Any],
    ) -> CategoryVersion | None:
        """Edit a version's name or description.

        ``levels_count`` is fixed at creation; passing it here is rejected.
        """
        payload = CategoryVersionUpdate.model_validate(data)
        context = {
            "workspace_id": workspace_id,
            "category_type": str(category_type),
            "version_id": version_id,
        }

        with self.coordinator.remote_action("update_version", **context):
            updated = await self.api.update_version(
                workspace_id, category_type, version_id, payload
            )

        logger.info(
            f"Updated {category_type} version {version_id}",
            extra={**context, "action": "update_version_success", "component": type(self).__name__},
        )
        await self.coordinator.fetch_versions(workspace_id, category_type)
        return updated

    async def activate_version(
        self, workspace_id: str, category_type: CategoryType, version_id: str
    ) -> None:
        """Make a version the active one.

        If it is also the version being viewed, its categories are reloaded.
        """
        context = {
            "workspace_id": workspace_id,
            "category_type": str(category_type),
            "version_id": version_id,
        }

        with self.coordinator.remote_action("activate_version", **context):
            await self.api.activate_version(workspace_id, category_type, version_id)

        logger.info(
            f"Activated {category_type} version {version_id}",
            extra={
                **context,
                "action": "activate_version_success",
                "component": type(self).__name__,
            },
        )
        await self.coordinator.fetch_versions(workspace_id, category_type)

        selected = self.state.selected_version
        if selected is not None and selected.id == version_id:
            await self.coordinator.fetch_categories(workspace_id, category_type, version_id)
