"""Shared field coercion for identifiers coming from the remote store."""

from typing import Annotated, Any

from pydantic import BeforeValidator


def _coerce_identifier(value: Any) -> Any:
    """Normalize integer ids to strings and blank ids to None."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and not value.strip():
        return None
    return value


Identifier = Annotated[str, BeforeValidator(_coerce_identifier)]
OptionalIdentifier = Annotated[str | None, BeforeValidator(_coerce_identifier)]
