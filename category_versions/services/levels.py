"""Translation between backend and display level numbering.

The remote store numbers levels on a fixed scale ending at ``max_levels``
(5 by default): a version with ``N`` levels uses backend levels
``max_levels - N + 1`` through ``max_levels``. Users see the same tree
numbered ``1`` through ``N``. The two are related by a constant shift of
``max_levels - N``.

Translated levels never leave the process: lists are converted to display
numbering right after a fetch and back to backend numbering right before a
write.
"""

from collections.abc import Iterable

from category_versions.exceptions import LevelOutOfRange
from category_versions.schemas.category import Category

DEFAULT_MAX_LEVELS = 5


def level_shift(levels_count: int, max_levels: int = DEFAULT_MAX_LEVELS) -> int:
    """Offset between backend and display numbering for a version."""
    if not 1 <= levels_count <= max_levels:
        raise LevelOutOfRange(
            f"levels_count must be between 1 and {max_levels}, got {levels_count}"
        )
    return max_levels - levels_count


def to_display(backend_level: int, levels_count: int, max_levels: int = DEFAULT_MAX_LEVELS) -> int:
    """Convert a backend level to the version's 1..N numbering."""
    return backend_level - level_shift(levels_count, max_levels)


def to_backend(display_level: int, levels_count: int, max_levels: int = DEFAULT_MAX_LEVELS) -> int:
    """Convert a display level back to the backend's fixed numbering."""
    return display_level + level_shift(levels_count, max_levels)


def categories_to_display(
    categories: Iterable[Category], levels_count: int, max_levels: int = DEFAULT_MAX_LEVELS
) -> list[Category]:
    """Return copies of fetched categories renumbered for display."""
    shift = level_shift(levels_count, max_levels)
    if shift == 0:
        return list(categories)
    return [c.model_copy(update={"level": c.level - shift}) for c in categories]
