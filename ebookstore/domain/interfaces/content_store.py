"""Content store interface."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentStore(Protocol):
    """Protocol for one retrieval path of book file bytes."""

    name: str

    async def fetch(self, reference: str) -> bytes:
        """Return the full object identified by ``reference``.

        Raises:
            ContentUnavailable: If the object cannot be retrieved.
        """
        ...
