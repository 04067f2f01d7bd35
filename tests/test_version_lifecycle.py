"""Tests for creating, editing and activating versions."""

import pytest
from pydantic import ValidationError

from category_versions.exceptions import LevelOutOfRange, RemoteFailure
from category_versions.models.enums import CategoryType
from category_versions.schemas.version import CategoryVersionCreate
from tests.fake_store import WORKSPACE_ID

EXPENSE = CategoryType.EXPENSE


def category_requests(store):
    return [r for r in store.requests if "-categories/" in r.url.path]


@pytest.mark.asyncio
async def test_create_version_is_not_activated_or_selected(lifecycle, coordinator, store):
    """Test that a new version is neither activated nor selected."""
    await coordinator.fetch_versions(WORKSPACE_ID, EXPENSE)

    created = await lifecycle.create_version(
        WORKSPACE_ID, EXPENSE, {"name": "2027", "levels_count": 3, "description": "Next year"}
    )

    state = coordinator.state
    assert created.name == "2027"
    assert not created.is_active
    assert [v.name for v in state.versions] == ["Default", "2027"]
    assert state.active_version.name == "Default"
    assert state.selected_version.name == "Default"


@pytest.mark.asyncio
async def test_create_version_rejects_excess_depth(lifecycle, coordinator, store):
    """Test that a levels_count beyond the maximum is refused before sending."""
    sent_before = len(store.requests)

    with pytest.raises(LevelOutOfRange):
        await lifecycle.create_version(
            WORKSPACE_ID, EXPENSE, CategoryVersionCreate(name="Deep", levels_count=6)
        )

    assert len(store.requests) == sent_before
    assert "between 1 and 5" in coordinator.state.error


@pytest.mark.asyncio
async def test_create_version_rejects_empty_name(lifecycle):
    """Test that a version needs a name."""
    with pytest.raises(ValidationError):
        await lifecycle.create_version(WORKSPACE_ID, EXPENSE, {"name": "", "levels_count": 2})


@pytest.mark.asyncio
async def test_update_version_refreshes_selection(lifecycle, coordinator, store):
    """Test that the selected version reflects an update."""
    await coordinator.fetch_versions(WORKSPACE_ID, EXPENSE)
    version_id = coordinator.state.selected_version.id

    await lifecycle.update_version(WORKSPACE_ID, EXPENSE, version_id, {"name": "Household"})

    assert coordinator.state.selected_version.name == "Household"
    assert coordinator.state.selected_version.levels_count == 2


@pytest.mark.asyncio
async def test_update_version_rejects_levels_count(lifecycle, coordinator, store):
    """Test that levels_count cannot be changed after creation."""
    await coordinator.fetch_versions(WORKSPACE_ID, EXPENSE)
    version_id = coordinator.state.selected_version.id
    sent_before = len(store.requests)

    with pytest.raises(ValidationError):
        await lifecycle.update_version(
            WORKSPACE_ID, EXPENSE, version_id, {"name": "Deeper", "levels_count": 4}
        )

    assert len(store.requests) == sent_before
    assert store.versions[0]["levels_count"] == 2


@pytest.mark.asyncio
async def test_activate_other_version_keeps_selection(lifecycle, coordinator, store):
    """Test that activating another version does not reload categories."""
    other = store.add_version("Next", levels_count=3)
    await coordinator.load(WORKSPACE_ID, EXPENSE)
    loads_before = len(category_requests(store))

    await lifecycle.activate_version(WORKSPACE_ID, EXPENSE, str(other["id"]))

    state = coordinator.state
    assert state.active_version.name == "Next"
    assert state.selected_version.name == "Default"
    assert len(category_requests(store)) == loads_before


@pytest.mark.asyncio
async def test_activate_selected_version_reloads_categories(lifecycle, coordinator, store):
    """Test that activating the selected version reloads its categories."""
    other = store.add_version("Next", levels_count=3)
    store.add_category(other, "Utilities", level=3)
    await coordinator.fetch_versions(WORKSPACE_ID, EXPENSE)
    coordinator.select_version(coordinator.state.find_version(str(other["id"])))

    await lifecycle.activate_version(WORKSPACE_ID, EXPENSE, str(other["id"]))

    state = coordinator.state
    assert state.active_version.id == str(other["id"])
    assert [(c.name, c.level) for c in state.categories] == [("Utilities", 1)]


@pytest.mark.asyncio
async def test_activate_failure_is_recorded(lifecycle, coordinator, store):
    """Test that a failed activation leaves the state as it was."""
    await coordinator.fetch_versions(WORKSPACE_ID, EXPENSE)
    store.fail("activate_version", 404)

    with pytest.raises(RemoteFailure):
        await lifecycle.activate_version(WORKSPACE_ID, EXPENSE, "999")

    assert coordinator.state.error == "Request failed with status code 404"
    assert coordinator.state.active_version.name == "Default"
