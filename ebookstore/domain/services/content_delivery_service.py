"""Content delivery service: streams purchased book files to their owners."""

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote, urlparse
from uuid import UUID

from ..entities.book import Book
from ..exceptions import ContentUnavailable, Forbidden, NotFound, UpstreamFailure
from ..interfaces.book_repository import BookRepository
from ..interfaces.content_store import ContentStore
from ..interfaces.user_repository import UserRepository
from .entitlement_service import EntitlementService
from .token_service import TokenService

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
NO_STORE_CACHE_CONTROL = "private, no-cache, no-store, must-revalidate"


@dataclass
class DeliveredContent:
    """A fully buffered book file ready to be sent to the reader."""

    body: bytes
    filename: str
    media_type: str = PDF_MEDIA_TYPE
    source: str = ""
    headers: dict[str, str] = field(default_factory=dict)


def content_disposition(filename: str) -> str:
    """Build an inline Content-Disposition header value.

    Header values must be latin-1, so non-ASCII titles get an ASCII fallback
    plus an RFC 5987 ``filename*`` parameter.
    """
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "'").strip()
    value = f'inline; filename="{ascii_name or "book.pdf"}"'
    if ascii_name != filename:
        value += f"; filename*=UTF-8''{quote(filename)}"
    return value


class ContentDeliveryService:
    """Resolves a book's content reference and returns its bytes.

    Each reference has a primary and at most one fallback retrieval path:

    - ``s3://bucket/key``: S3, then the local upload directory by basename
    - ``http(s)://...``: HTTP GET, then the local upload directory by basename
    - anything else: the local upload directory, then S3 under ``s3_key_prefix``

    The whole object is buffered in memory; range requests are not supported,
    so book size is bounded by available memory.
    """

    def __init__(
        self,
        token_service: TokenService,
        user_repository: UserRepository,
        book_repository: BookRepository,
        entitlement_service: EntitlementService,
        local_store: ContentStore,
        s3_store: Optional[ContentStore] = None,
        http_store: Optional[ContentStore] = None,
        s3_key_prefix: str = "books/",
    ):
        self.token_service = token_service
        self.user_repository = user_repository
        self.book_repository = book_repository
        self.entitlement_service = entitlement_service
        self.local_store = local_store
        self.s3_store = s3_store
        self.http_store = http_store
        self.s3_key_prefix = s3_key_prefix

    async def fetch_content(self, token: Optional[str], book_id: UUID) -> DeliveredContent:
        """Return the book file for the token's user.

        Entitlement is checked before the book lookup, so a user who does not
        own ``book_id`` gets ``Forbidden`` whether or not the book exists.

        Raises:
            Unauthenticated: Missing or invalid token.
            NotFound: User or book record missing.
            Forbidden: The user has not purchased the book.
            UpstreamFailure: Both retrieval paths failed.
        """
        identity = self.token_service.verify(token)

        user = await self.user_repository.get_user(identity.user_id)
        if user is None:
            raise NotFound("User not found")

        if not self.entitlement_service.has_entitlement_for(user, book_id):
            logger.warning(f"User {user.id} denied access to unpurchased book {book_id}")
            raise Forbidden("You haven't purchased this book")

        book = await self.book_repository.get_book(book_id)
        if book is None:
            raise NotFound("Book not found")

        body, source = await self._retrieve(book)
        filename = f"{book.title}.pdf"
        return DeliveredContent(
            body=body,
            filename=filename,
            source=source,
            headers={
                "Content-Disposition": content_disposition(filename),
                "Content-Length": str(len(body)),
                "Cache-Control": NO_STORE_CACHE_CONTROL,
            },
        )

    def retrieval_paths(self, reference: str) -> list[tuple[ContentStore, str]]:
        """Return the ordered (store, reference) attempts for ``reference``."""
        scheme = urlparse(reference).scheme.lower()
        basename = posixpath.basename(urlparse(reference).path) or reference

        paths: list[tuple[Optional[ContentStore], str]]
        if scheme == "s3":
            paths = [(self.s3_store, reference), (self.local_store, basename)]
        elif scheme in ("http", "https"):
            paths = [(self.http_store, reference), (self.local_store, basename)]
        else:
            paths = [(self.local_store, reference), (self.s3_store, f"{self.s3_key_prefix}{basename}")]

        return [(store, ref) for store, ref in paths if store is not None]

    async def _retrieve(self, book: Book) -> tuple[bytes, str]:
        paths = self.retrieval_paths(book.file_url)
        for attempt, (store, reference) in enumerate(paths):
            try:
                body = await store.fetch(reference)
                if attempt:
                    logger.info(f"Served book {book.id} from fallback store {store.name}")
                return body, store.name
            except ContentUnavailable as e:
                logger.warning(f"Store {store.name} could not deliver book {book.id}: {e}")

        logger.error(f"All retrieval paths failed for book {book.id} ({book.file_url})")
        raise UpstreamFailure("Failed to fetch book content")
