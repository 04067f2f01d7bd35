"""Enums for classification types and editor state."""

from enum import StrEnum


class CategoryType(StrEnum):
    """Classification type a category version belongs to."""

    EXPENSE = "expense"
    INCOME = "income"

    @property
    def versions_segment(self) -> str:
        """Path segment of the version collection for this type."""
        return f"{self.value}-versions"

    @property
    def categories_segment(self) -> str:
        """Path segment of the category collection for this type."""
        return f"{self.value}-categories"


class EditMode(StrEnum):
    """States of the draft edit session."""

    VIEWING = "viewing"
    EDITING = "editing"
