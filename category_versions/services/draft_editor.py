"""Mutations applied to the draft category list during an edit session."""

import logging
import uuid
from typing import Any

from category_versions.exceptions import (
    DuplicateSiblingName,
    InvalidCategoryName,
    InvalidMove,
    LevelOutOfRange,
    NoVersionSelected,
)
from category_versions.schemas.category import Category
from category_versions.services.state import CategoryEditorState

logger = logging.getLogger(__name__)


class DraftEditor:
    """Edits the flat category list held in a CategoryEditorState.

    New nodes get a fresh ``temp_id``; deleting a persisted node records its
    id so the next sync removes it server-side. Children of a deleted node are
    not touched and show up as roots until they are deleted or moved as well.
    """

    def __init__(self, state: CategoryEditorState):
        self.state = state

    def find(self, id: str | None = None, temp_id: str | None = None) -> Category | None:
        """Locate a node by id or temp_id."""
        return next((c for c in self.state.categories if c.matches(id, temp_id)), None)

    def set_categories(self, categories: list[Category]) -> None:
        """Replace the draft list wholesale."""
        self.state.categories = list(categories)

    def add_category(
        self,
        parent_id: str | None,
        parent_temp_id: str | None,
        level: int | None = None,
        name: str = "",
        description: str | None = None,
    ) -> Category:
        """Append a new, not yet persisted node under the given parent.

        The level defaults to one below the parent (1 for a root); an explicit
        level must agree with it. A non-empty name is checked against the new
        siblings before anything is added.
        """
        version = self.state.selected_version
        if version is None:
            logger.warning("Cannot add category, no version selected")
            raise NoVersionSelected("Cannot add category, no version selected.")

        parent_key = parent_id or parent_temp_id
        if parent_key:
            parent = self.find(parent_id, parent_temp_id)
            if parent is None:
                raise InvalidMove(f"Parent {parent_key} is not in the category list")
            expected_level = parent.level + 1
        else:
            expected_level = 1
        if level is None:
            level = expected_level
        if level != expected_level:
            raise LevelOutOfRange(
                f"Level {level} does not fit under {parent_key or 'the root'}, "
                f"expected {expected_level}"
            )
        if level > version.levels_count:
            raise LevelOutOfRange(
                f"Level {level} is outside 1..{version.levels_count} for version {version.name}"
            )

        if name.strip():
            name = self._check_sibling_name(parent_key, name)

        category = Category(
            temp_id=str(uuid.uuid4()),
            name=name,
            description=description,
            level=level,
            parent_id=parent_id,
            parent_temp_id=None if parent_id else parent_temp_id,
        )
        self.state.categories = [*self.state.categories, category]
        logger.debug(f"Added category {category.temp_id} at level {level}")
        return category

    def update_category(
        self, id: str | None, temp_id: str | None, data: dict[str, Any]
    ) -> Category | None:
        """Merge ``data`` into the matching node. Returns None if nothing matched."""
        updated = None
        categories = []
        for c in self.state.categories:
            if updated is None and c.matches(id, temp_id):
                updated = Category.model_validate({**c.model_dump(), **data})
                categories.append(updated)
            else:
                categories.append(c)

        if updated is None:
            logger.debug(f"No category matches id={id} temp_id={temp_id}; update ignored")
            return None
        self.state.categories = categories
        return updated

    def delete_category(self, id: str | None, temp_id: str | None) -> bool:
        """Remove the matching node and remember persisted ids for the next sync."""
        target = self.find(id, temp_id)
        if target is None:
            return False

        self.state.categories = [c for c in self.state.categories if c is not target]
        if target.id and target.id not in self.state.deleted_ids:
            self.state.deleted_ids = [*self.state.deleted_ids, target.id]
        logger.debug(f"Deleted category {target.key}")
        return True

    def validate_name(self, id: str | None, temp_id: str | None, name: str) -> str:
        """Check a proposed name against the node's siblings.

        Returns the trimmed name. Siblings share the node's resolved parent
        reference; comparison ignores case and surrounding whitespace.
        """
        target = self.find(id, temp_id)
        parent_key = target.parent_key if target else None
        return self._check_sibling_name(parent_key, name, exclude=target)

    def _check_sibling_name(
        self, parent_key: str | None, name: str, exclude: Category | None = None
    ) -> str:
        trimmed = name.strip()
        if not trimmed:
            raise InvalidCategoryName("Category name cannot be empty.")

        lowered = trimmed.lower()
        for c in self.state.categories:
            if c is exclude or c.parent_key != parent_key:
                continue
            if c.name.strip().lower() == lowered:
                logger.warning(f"Rejected duplicate sibling name '{trimmed}'")
                raise DuplicateSiblingName(trimmed)
        return trimmed

    def rename_category(self, id: str | None, temp_id: str | None, name: str) -> Category | None:
        """Validate and apply a name edit. Nothing changes if validation fails."""
        trimmed = self.validate_name(id, temp_id, name)
        return self.update_category(id, temp_id, {"name": trimmed})

    def move_category(
        self,
        id: str | None,
        temp_id: str | None,
        new_parent_id: str | None,
        new_parent_temp_id: str | None,
    ) -> Category | None:
        """Re-parent a node, renumbering it and its descendants.

        Passing no parent makes the node a root. The move is rejected if it
        would create a cycle, exceed the version's depth, or clash with a
        name among the new siblings.
        """
        target = self.find(id, temp_id)
        if target is None:
            return None

        new_parent_key = new_parent_id or new_parent_temp_id
        if new_parent_key:
            new_parent = self.find(new_parent_id, new_parent_temp_id)
            if new_parent is None:
                raise InvalidMove(f"Parent {new_parent_key} is not in the category list")
            new_level = new_parent.level + 1
        else:
            new_level = 1

        subtree = self._subtree_keys(target.key)
        if new_parent_key in subtree:
            raise InvalidMove(f"Cannot move category {target.key} under itself or its descendants")

        delta = new_level - target.level
        if delta:
            version = self.state.selected_version
            levels_count = version.levels_count if version else None
            deepest = max(c.level for c in self.state.categories if c.key in subtree) + delta
            if levels_count is not None and deepest > levels_count:
                raise LevelOutOfRange(
                    f"Moving {target.key} would place categories at level {deepest}, "
                    f"beyond {levels_count}"
                )

        if target.name.strip():
            self._check_sibling_name(new_parent_key, target.name, exclude=target)

        categories = []
        for c in self.state.categories:
            if c is target:
                c = Category.model_validate(
                    {
                        **c.model_dump(),
                        "parent_id": new_parent_id if new_parent_id else None,
                        "parent_temp_id": None if new_parent_id else new_parent_temp_id,
                        "level": new_level,
                    }
                )
            elif delta and c.key in subtree:
                c = c.model_copy(update={"level": c.level + delta})
            categories.append(c)
        self.state.categories = categories
        logger.debug(f"Moved category {target.key} under {new_parent_key or 'root'}")
        return self.find(id, temp_id)

    def _subtree_keys(self, root_key: str) -> set[str]:
        """Keys of a node and all of its descendants."""
        children: dict[str, list[str]] = {}
        for c in self.state.categories:
            if c.parent_key:
                children.setdefault(c.parent_key, []).append(c.key)

        keys = set()
        stack = [root_key]
        while stack:
            key = stack.pop()
            if key in keys:
                continue
            keys.add(key)
            stack.extend(children.get(key, []))
        return keys
