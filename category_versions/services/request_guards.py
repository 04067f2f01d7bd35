"""Request guards applied to every outgoing call to the remote store."""

import logging

import httpx

from category_versions.exceptions import RequestBlocked

logger = logging.getLogger(__name__)

MODIFYING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class ArchivedWorkspaceGuard:
    """Blocks writes against a workspace that is being inspected read-only.

    Installed as an httpx request hook. Activation calls are let through so a
    version can still be switched while inspecting.
    """

    def __init__(self) -> None:
        self.inspected_workspace_id: str | None = None

    @property
    def is_inspecting(self) -> bool:
        return self.inspected_workspace_id is not None

    def start_inspecting(self, workspace_id: str) -> None:
        self.inspected_workspace_id = str(workspace_id)

    def stop_inspecting(self) -> None:
        self.inspected_workspace_id = None

    def blocks(self, method: str, path: str) -> bool:
        """Check whether a request would modify the inspected workspace."""
        if not self.is_inspecting or method.upper() not in MODIFYING_METHODS:
            return False
        if "/activate/" in path:
            return False
        marker = f"/workspaces/{self.inspected_workspace_id}"
        return path.endswith(marker) or f"{marker}/" in path

    async def __call__(self, request: httpx.Request) -> None:
        if self.blocks(request.method, request.url.path):
            logger.warning(
                f"Blocked {request.method} {request.url.path} while inspecting archived workspace"
            )
            raise RequestBlocked(
                "Operation cancelled: Cannot modify archived workspace in inspect mode."
            )
