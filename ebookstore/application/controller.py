"""Bookstore controller for handling business logic and coordination."""

import logging
from datetime import timedelta
from typing import Optional

from ..domain.entities import (
    Book,
    BookSummary,
    CatalogPage,
    CatalogQuery,
    CreateBookRequest,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    ProgressListResponse,
    ProgressResponse,
    PurchaseRequest,
    PurchaseResult,
    RegisterRequest,
    SaveProgressRequest,
    UserSummary,
    parse_entity_id,
)
from ..domain.exceptions import Forbidden, InvalidInput
from ..domain.interfaces.book_repository import BookRepository
from ..domain.interfaces.content_store import ContentStore
from ..domain.interfaces.progress_repository import ProgressRepository
from ..domain.interfaces.user_repository import UserRepository
from ..domain.services import (
    AccountService,
    CatalogService,
    ContentDeliveryService,
    DeliveredContent,
    EntitlementService,
    ReadingProgressService,
    TokenService,
)
from ..infrastructure.connection import StorageConnection
from ..infrastructure.table_schemas import TableSchema

logger = logging.getLogger(__name__)


class BookstoreController:
    """
    Controller for coordinating bookstore operations.

    This controller is injected with the storage backends and builds the
    domain services on top of them, keeping the API layer thin. Raw ids from
    the transport are parsed into the canonical identity type here.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        book_repository: BookRepository,
        progress_repository: ProgressRepository,
        local_store: ContentStore,
        token_service: TokenService,
        s3_store: Optional[ContentStore] = None,
        http_store: Optional[ContentStore] = None,
        connection: Optional[StorageConnection] = None,
        table_schemas: Optional[list[TableSchema]] = None,
        s3_key_prefix: str = "books/",
        bcrypt_rounds: int = 12,
        page_size: int = 12,
        max_page_size: int = 100,
    ):
        """
        Initialize the controller with injected dependencies.

        Args:
            user_repository: Credential store
            book_repository: Catalog store
            progress_repository: Progress store
            local_store: Local upload directory content store
            token_service: Issues and verifies session tokens
            s3_store: Optional S3 content store
            http_store: Optional HTTP content store
            connection: Shared AWS connection, closed on shutdown
            table_schemas: Tables to create on startup, if any
        """
        self.user_repository = user_repository
        self.book_repository = book_repository
        self.progress_repository = progress_repository
        self.token_service = token_service
        self.connection = connection
        self.table_schemas = table_schemas or []

        self.entitlements = EntitlementService(user_repository, book_repository)
        self.accounts = AccountService(user_repository, book_repository, token_service, bcrypt_rounds)
        self.catalog = CatalogService(book_repository, token_service, page_size, max_page_size)
        self.delivery = ContentDeliveryService(
            token_service=token_service,
            user_repository=user_repository,
            book_repository=book_repository,
            entitlement_service=self.entitlements,
            local_store=local_store,
            s3_store=s3_store,
            http_store=http_store,
            s3_key_prefix=s3_key_prefix,
        )
        self.progress = ReadingProgressService(
            token_service=token_service,
            user_repository=user_repository,
            book_repository=book_repository,
            progress_repository=progress_repository,
            entitlement_service=self.entitlements,
        )

        logger.info("BookstoreController initialized with providers")

    async def startup(self) -> None:
        """Create missing tables before the first request is served."""
        if self.connection is not None and self.table_schemas:
            await self.connection.ensure_tables(self.table_schemas)

    async def shutdown(self) -> None:
        if self.connection is not None:
            await self.connection.close()
            logger.info("Storage connection closed")

    # Accounts

    async def register(self, request: RegisterRequest) -> UserSummary:
        return await self.accounts.register(request)

    async def login(self, request: LoginRequest) -> LoginResponse:
        return await self.accounts.login(request)

    async def get_profile(self, token: Optional[str]) -> ProfileResponse:
        return await self.accounts.get_profile(token)

    # Catalog

    async def list_books(self, query: CatalogQuery) -> CatalogPage:
        return await self.catalog.list_books(query)

    async def get_book(self, book_id: str) -> BookSummary:
        book = await self.catalog.get_book(parse_entity_id(book_id, "book id"))
        return book.summary()

    async def create_book(self, token: Optional[str], request: CreateBookRequest) -> Book:
        return await self.catalog.create_book(token, request)

    # Purchases and content

    async def purchase(self, token: Optional[str], request: PurchaseRequest) -> PurchaseResult:
        """Purchase a book for the token's user.

        Raises:
            Forbidden: If the request names a different user than the token.
        """
        identity = self.token_service.verify(token)
        if request.user_id is not None and request.user_id != identity.user_id:
            logger.warning(f"Token for user {identity.user_id} tried to purchase for {request.user_id}")
            raise Forbidden("Unauthorized")

        return await self.entitlements.purchase(identity.user_id, request.book_id)

    async def fetch_content(self, token: Optional[str], book_id: str) -> DeliveredContent:
        return await self.delivery.fetch_content(token, parse_entity_id(book_id, "book id"))

    # Reading progress

    async def save_progress(self, token: Optional[str], request: SaveProgressRequest) -> ProgressResponse:
        progress = await self.progress.save_progress(
            token,
            request.book_id,
            request.current_page,
            request.total_pages,
            request.reading_time,
        )
        return ProgressResponse(progress=progress)

    async def get_progress(self, token: Optional[str], book_id: Optional[str]) -> ProgressResponse:
        """Return the caller's progress in a book; ``progress`` is None if there is none yet."""
        self.token_service.verify(token)
        if not book_id:
            raise InvalidInput("Book ID is required")

        progress = await self.progress.get_progress(token, parse_entity_id(book_id, "book id"))
        return ProgressResponse(progress=progress)

    async def list_progress(self, token: Optional[str]) -> ProgressListResponse:
        return ProgressListResponse(progress=await self.progress.list_progress(token))

    def get_health_status(self) -> dict:
        """
        Get application health status.

        Returns:
            Dict containing health status information
        """
        return {
            "status": "healthy",
            "providers": {
                "user_repository": type(self.user_repository).__name__,
                "book_repository": type(self.book_repository).__name__,
                "progress_repository": type(self.progress_repository).__name__,
                "content_stores": [
                    store.name
                    for store in (self.delivery.local_store, self.delivery.s3_store, self.delivery.http_store)
                    if store is not None
                ],
            },
        }


def build_controller(settings) -> BookstoreController:
    """Construct the storage backends named by ``settings`` and wire the controller.

    Called once at process start; every repository shares the same
    ``StorageConnection``.
    """
    from ..infrastructure import (
        DynamoDBBookRepository,
        DynamoDBProgressRepository,
        DynamoDBUserRepository,
        HttpContentStore,
        LocalBookRepository,
        LocalContentStore,
        LocalProgressRepository,
        LocalUserRepository,
        S3ContentStore,
        StorageConnection,
        register_schemas,
    )

    token_service = TokenService(
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.token_ttl_days),
    )

    connection = None
    if settings.storage_backend == "dynamodb" or settings.enable_s3_content:
        connection = StorageConnection(
            region_name=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            aws_session_token=settings.aws_session_token,
        )

    table_schemas = []
    if settings.storage_backend == "dynamodb":
        user_repository = DynamoDBUserRepository(connection, settings.users_table_name)
        book_repository = DynamoDBBookRepository(connection, settings.books_table_name)
        progress_repository = DynamoDBProgressRepository(connection, settings.progress_table_name)
        if settings.create_tables:
            table_schemas = register_schemas(
                settings.users_table_name,
                settings.books_table_name,
                settings.progress_table_name,
            )
    else:
        user_repository = LocalUserRepository()
        book_repository = LocalBookRepository(seed_file=settings.seed_books_file)
        progress_repository = LocalProgressRepository()

    s3_store = None
    if settings.enable_s3_content:
        s3_store = S3ContentStore(connection, settings.content_bucket_name)

    return BookstoreController(
        user_repository=user_repository,
        book_repository=book_repository,
        progress_repository=progress_repository,
        local_store=LocalContentStore(settings.upload_dir),
        token_service=token_service,
        s3_store=s3_store,
        http_store=HttpContentStore(timeout=settings.http_content_timeout),
        connection=connection,
        table_schemas=table_schemas,
        s3_key_prefix=settings.content_key_prefix,
        bcrypt_rounds=settings.bcrypt_rounds,
        page_size=settings.catalog_page_size,
        max_page_size=settings.catalog_max_page_size,
    )
