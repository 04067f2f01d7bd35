"""Error taxonomy for category version operations.

Every error is recoverable from the caller's point of view: the draft list and
edit mode are left as they were before the failing operation.
"""


class CategoryVersionError(Exception):
    """Base class for all category version errors."""


class NoVersionSelected(CategoryVersionError):
    """An add or save was attempted without a version to target."""

    def __init__(self, message: str = "No version selected to save to."):
        super().__init__(message)


class ValidationFailed(CategoryVersionError):
    """The completeness check rejected the draft tree."""

    def __init__(self, invalid_ids: list[str], names: list[str], levels_count: int):
        self.invalid_ids = invalid_ids
        self.names = names
        self.levels_count = levels_count
        super().__init__(
            f"Validation Failed: All branches must reach level {levels_count}. "
            f"Incomplete categories: {', '.join(names)}"
        )


class InvalidCategoryName(CategoryVersionError):
    """A category name is empty or otherwise unusable."""


class DuplicateSiblingName(InvalidCategoryName):
    """A sibling under the same parent already uses this name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Category "{name}" already exists in this level.')


class LevelOutOfRange(CategoryVersionError):
    """A level or levels_count lies outside the allowed range."""


class InvalidMove(CategoryVersionError):
    """A parent reference is unknown, or would place a category under itself."""


class EditSessionError(CategoryVersionError):
    """The requested edit-mode transition is not allowed."""


class SyncInProgress(CategoryVersionError):
    """A synchronization for the same version is still outstanding."""


class RemoteFailure(CategoryVersionError):
    """The remote store could not be reached or rejected the request."""

    def __init__(self, message: str, status_code: int | None = None, detail=None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class RequestBlocked(RemoteFailure):
    """A mutating request was refused before it was sent."""
