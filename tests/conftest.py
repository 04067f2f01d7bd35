"""Pytest configuration and fixtures."""

import pytest

from category_versions.config import Settings
from category_versions.services.category_api import CategoryApiClient
from category_versions.services.request_guards import ArchivedWorkspaceGuard
from category_versions.services.state import CategoryEditorState
from category_versions.services.version_lifecycle import VersionLifecycleManager
from category_versions.services.version_sync import VersionSyncCoordinator
from tests.fake_store import FakeCategoryStore


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        api_base_url="http://store.test",
        api_token="test-token",
        request_timeout=5.0,
        max_category_levels=5,
        environment="development",
    )


@pytest.fixture
def store():
    """Fake remote store with one active two-level expense version."""
    fake = FakeCategoryStore()
    fake.add_version("Default", levels_count=2, is_active=True)
    return fake


@pytest.fixture
def guard():
    return ArchivedWorkspaceGuard()


@pytest.fixture
def api(settings, store, guard):
    """API client wired to the fake store."""
    return CategoryApiClient(settings, guard=guard, transport=store.transport())


@pytest.fixture
def coordinator(settings, api):
    """Coordinator with fresh state."""
    return VersionSyncCoordinator(api=api, state=CategoryEditorState(), settings=settings)


@pytest.fixture
def lifecycle(coordinator):
    return VersionLifecycleManager(coordinator)
