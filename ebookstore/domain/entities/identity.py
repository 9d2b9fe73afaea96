"""Canonical identity type for every entity reference."""

from typing import Union
from uuid import UUID

from ..exceptions import InvalidInput

EntityId = UUID


def parse_entity_id(value: Union[str, UUID], label: str = "id") -> UUID:
    """Coerce a raw identifier into the canonical ``UUID`` form.

    Raises:
        InvalidInput: If the value is empty or not a valid UUID.
    """
    if isinstance(value, UUID):
        return value
    if not value:
        raise InvalidInput(f"{label} is required")
    try:
        return UUID(str(value).strip())
    except (ValueError, AttributeError, TypeError):
        raise InvalidInput(f"Invalid {label}: {value}")
