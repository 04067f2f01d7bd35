"""Completeness check run before a draft tree may be saved."""

from collections.abc import Sequence

from category_versions.schemas.category import Category


def find_incomplete(categories: Sequence[Category], levels_count: int) -> list[Category]:
    """Return the leaves that stop short of (or run past) the required depth.

    A leaf is any node no other node names as its parent. Every leaf must sit
    exactly at ``levels_count``.
    """
    referenced = {c.parent_key for c in categories if c.parent_key}
    return [c for c in categories if c.key not in referenced and c.level != levels_count]


def validate_completeness(categories: Sequence[Category], levels_count: int) -> list[str]:
    """Identifiers of incomplete leaves, empty when the tree may be saved."""
    return [c.key for c in find_incomplete(categories, levels_count)]


def find_unnamed(categories: Sequence[Category]) -> list[Category]:
    """Return the nodes whose name is empty once surrounding whitespace is dropped."""
    return [c for c in categories if not c.name.strip()]
