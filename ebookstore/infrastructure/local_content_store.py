"""Local file system implementation of ContentStore."""

import asyncio
import posixpath
from pathlib import Path
from typing import Union

from ..domain.exceptions import ContentUnavailable
from ..domain.interfaces.content_store import ContentStore


class LocalContentStore(ContentStore):
    """Reads book files from the local upload directory.

    Only the basename of a reference is used, so a reference can never point
    outside ``base_dir``.
    """

    name = "local"

    def __init__(self, base_dir: Union[str, Path] = "uploads/books"):
        self.base_dir = Path(base_dir)

    def resolve(self, reference: str) -> Path:
        filename = posixpath.basename(reference.replace("\\", "/"))
        if not filename or filename in (".", ".."):
            raise ContentUnavailable(f"No filename in reference: {reference}")
        return self.base_dir / filename

    async def fetch(self, reference: str) -> bytes:
        path = self.resolve(reference)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ContentUnavailable(f"Error reading book file {path}: {e}")
