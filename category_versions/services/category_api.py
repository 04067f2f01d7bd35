"""HTTP client for the remote category store."""

import logging
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError

from category_versions.config import Settings, get_settings
from category_versions.exceptions import RemoteFailure, RequestBlocked
from category_versions.models.enums import CategoryType
from category_versions.schemas.category import Category, CategorySyncRequest, CategorySyncResult
from category_versions.schemas.version import (
    CategoryVersion,
    CategoryVersionCreate,
    CategoryVersionUpdate,
)
from category_versions.services.request_guards import ArchivedWorkspaceGuard

logger = logging.getLogger(__name__)


class CategoryApiClient:
    """Client for the version and category endpoints of the remote store.

    Levels are passed through exactly as the store numbers them; translation
    to display numbering is the caller's job.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        guard: ArchivedWorkspaceGuard | None = None,
        on_unauthorized: Callable[[], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.base_url = self.settings.api_base_url.rstrip("/")
        self.timeout = self.settings.request_timeout
        self.guard = guard or ArchivedWorkspaceGuard()
        self.on_unauthorized = on_unauthorized
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.api_token:
            headers["Authorization"] = f"Bearer {self.settings.api_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self._headers(),
                event_hooks={"request": [self.guard]},
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=json, params=params)
        except RequestBlocked:
            raise
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling {method} {path}: {e}")
            raise RemoteFailure(f"Could not reach category store: {e}") from e

        if response.status_code == 401 and self.on_unauthorized is not None:
            self.on_unauthorized()

        if response.is_error:
            detail = _error_detail(response)
            logger.error(f"{method} {path} failed with status {response.status_code}: {detail}")
            raise RemoteFailure(
                f"Request failed with status code {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteFailure(f"Invalid JSON from {method} {path}") from e

    def _versions_path(self, workspace_id: str, category_type: CategoryType) -> str:
        return f"/api/workspaces/{workspace_id}/{CategoryType(category_type).versions_segment}/"

    async def list_versions(
        self, workspace_id: str, category_type: CategoryType
    ) -> list[CategoryVersion]:
        """Fetch all versions of a classification type."""
        data = await self._request("GET", self._versions_path(workspace_id, category_type))
        return _parse_list(CategoryVersion, _unwrap_results(data))

    async def create_version(
        self, workspace_id: str, category_type: CategoryType, data: CategoryVersionCreate
    ) -> CategoryVersion | None:
        """Create a version. The store does not activate it."""
        body = await self._request(
            "POST", self._versions_path(workspace_id, category_type), json=data.model_dump()
        )
        return _parse_one(CategoryVersion, body) if body else None

    async def update_version(
        self,
        workspace_id: str,
        category_type: CategoryType,
        version_id: str,
        data: CategoryVersionUpdate,
    ) -> CategoryVersion | None:
        """Patch version metadata."""
        body = await self._request(
            "PATCH",
            f"{self._versions_path(workspace_id, category_type)}{version_id}/",
            json=data.model_dump(exclude_unset=True),
        )
        return _parse_one(CategoryVersion, body) if body else None

    async def activate_version(
        self, workspace_id: str, category_type: CategoryType, version_id: str
    ) -> None:
        """Mark a version active; the store deactivates the previous one."""
        await self._request(
            "POST", f"{self._versions_path(workspace_id, category_type)}{version_id}/activate/"
        )

    async def list_categories(
        self,
        workspace_id: str,
        category_type: CategoryType,
        version_id: str | None = None,
    ) -> list[Category]:
        """Fetch the flat category list of a version, in backend level numbering."""
        params = {"version": version_id} if version_id else None
        data = await self._request(
            "GET",
            f"/api/v1/finance/{CategoryType(category_type).categories_segment}/",
            params=params,
        )
        return link_children(_parse_list(Category, _unwrap_results(data)))

    async def sync_categories(
        self,
        workspace_id: str,
        category_type: CategoryType,
        version_id: str,
        request: CategorySyncRequest,
    ) -> CategorySyncResult:
        """Apply creates, updates and deletes to a version in one transaction."""
        body = await self._request(
            "POST",
            f"{self._versions_path(workspace_id, category_type)}{version_id}/sync/",
            json=request.to_payload(),
        )
        if not body:
            return CategorySyncResult()
        return _parse_one(CategorySyncResult, body)


def link_children(categories: list[Category]) -> list[Category]:
    """Fill in ``parent_id`` from the ``children`` lists the store returns."""
    parent_of: dict[str, str] = {}
    for c in categories:
        for child_id in c.children:
            parent_of.setdefault(child_id, c.key)

    if not parent_of:
        return categories
    return [
        c if c.parent_key or c.key not in parent_of
        else c.model_copy(update={"parent_id": parent_of[c.key]})
        for c in categories
    ]


def _unwrap_results(data: Any) -> list:
    """Accept either a bare list or a paginated ``{"results": [...]}`` page."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get("results") or []
    return []


def _parse_list(model, items: list) -> list:
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError as e:
        raise RemoteFailure(f"Malformed {model.__name__} data from category store") from e


def _parse_one(model, data: Any):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RemoteFailure(f"Malformed {model.__name__} data from category store") from e


def _error_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        return body.get("detail") or body.get("error") or body
    return body
