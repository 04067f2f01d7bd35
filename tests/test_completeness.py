"""Tests for the save-time completeness check."""

from category_versions.schemas.category import Category
from category_versions.services.completeness import (
    find_incomplete,
    find_unnamed,
    validate_completeness,
)


def test_complete_tree_passes():
    """Test that a tree with every leaf at the last level is complete."""
    categories = [
        Category(id="1", name="Food", level=1),
        Category(id="2", name="Groceries", level=2, parent_id="1"),
        Category(temp_id="t1", name="Housing", level=1),
        Category(temp_id="t2", name="Rent", level=2, parent_temp_id="t1"),
    ]
    assert validate_completeness(categories, levels_count=2) == []


def test_short_leaves_are_reported():
    """Only the leaves that stop short are flagged, not their complete siblings."""
    categories = [
        Category(id="1", name="Food", level=1),
        Category(id="2", name="Groceries", level=2, parent_id="1"),
        Category(id="3", name="Transport", level=1),
        Category(temp_id="t1", name="Fuel", level=2, parent_id="3"),
        Category(temp_id="t2", name="Travel", level=1),
    ]

    assert validate_completeness(categories, levels_count=2) == ["t2"]


def test_leaf_at_wrong_depth_in_three_level_tree():
    """Test that only the short branch of a deeper tree is reported."""
    categories = [
        Category(id="1", name="Food", level=1),
        Category(id="2", name="Groceries", level=2, parent_id="1"),
        Category(id="3", name="Dining", level=2, parent_id="1"),
        Category(id="4", name="Lunch", level=3, parent_id="3"),
    ]

    incomplete = find_incomplete(categories, levels_count=3)

    assert [c.name for c in incomplete] == ["Groceries"]


def test_single_level_root_is_a_complete_leaf():
    """Test that a root is a complete leaf in a one-level version."""
    categories = [Category(temp_id="t1", name="Misc", level=1)]
    assert validate_completeness(categories, levels_count=1) == []


def test_empty_list_is_complete():
    """Test that an empty list has nothing to report."""
    assert validate_completeness([], levels_count=3) == []


def test_orphan_counts_as_leaf():
    """A node whose parent was deleted is judged on its own level."""
    categories = [Category(id="2", name="Groceries", level=2, parent_id="1")]
    assert validate_completeness(categories, levels_count=2) == []
    assert validate_completeness(categories, levels_count=3) == ["2"]


def test_blank_names_are_found():
    """Test that empty and whitespace-only names are reported."""
    categories = [
        Category(id="1", name="Food", level=1),
        Category(temp_id="t1", name="", level=2, parent_id="1"),
        Category(temp_id="t2", name=" \t", level=2, parent_id="1"),
    ]
    assert [c.key for c in find_unnamed(categories)] == ["t1", "t2"]
