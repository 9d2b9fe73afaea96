"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

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
    SortOrder,
)
from ..domain.exceptions import BookstoreError, Unauthenticated
from .config import Settings, settings
from .controller import BookstoreController, build_controller

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

CATALOG_CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=300"

bearer_scheme = HTTPBearer(auto_error=False)


def get_controller(request: Request) -> BookstoreController:
    return request.app.state.controller


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Token from an ``Authorization: Bearer`` header, if present."""
    return credentials.credentials if credentials else None


def register_exception_handlers(app: FastAPI) -> None:
    """Translate every failure into ``{"error": ..., "code": ...}``."""

    @app.exception_handler(BookstoreError)
    async def bookstore_error_handler(request: Request, exc: BookstoreError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Missing or invalid fields",
                "code": "invalid_input",
                "details": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
            },
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "code": "unknown"},
        )


def create_app(
    app_settings: Optional[Settings] = None,
    controller: Optional[BookstoreController] = None,
) -> FastAPI:
    """Build the FastAPI app.

    The controller (and with it the storage connection) is constructed once
    here and torn down when the application shuts down.
    """
    app_settings = app_settings or settings
    controller = controller or build_controller(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await controller.startup()
        try:
            yield
        finally:
            await controller.shutdown()

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.controller = controller

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check(controller: BookstoreController = Depends(get_controller)):
        """Health check endpoint."""
        return controller.get_health_status()

    # Accounts

    @app.post("/api/users/register", status_code=status.HTTP_201_CREATED)
    async def register(body: RegisterRequest, controller: BookstoreController = Depends(get_controller)):
        user = await controller.register(body)
        return {"message": "User registered successfully", "user": user}

    @app.post("/api/users/login", response_model=LoginResponse)
    async def login(body: LoginRequest, controller: BookstoreController = Depends(get_controller)):
        return await controller.login(body)

    @app.get("/api/users/profile", response_model=ProfileResponse)
    async def profile(
        token: Optional[str] = Depends(bearer_token),
        controller: BookstoreController = Depends(get_controller),
    ):
        return await controller.get_profile(token)

    @app.post("/api/users/buy", response_model=PurchaseResult)
    async def buy(
        body: PurchaseRequest,
        token: Optional[str] = Depends(bearer_token),
        controller: BookstoreController = Depends(get_controller),
    ):
        """Purchase a book. Buying an owned book again succeeds without changes."""
        return await controller.purchase(token, body)

    # Reading progress

    @app.post("/api/users/progress", response_model=ProgressResponse)
    async def save_progress(
        body: SaveProgressRequest,
        token: Optional[str] = Depends(bearer_token),
        controller: BookstoreController = Depends(get_controller),
    ):
        return await controller.save_progress(token, body)

    @app.get("/api/users/progress", response_model=ProgressResponse)
    async def get_progress(
        book_id: Optional[str] = Query(None, alias="bookId"),
        token: Optional[str] = Depends(bearer_token),
        controller: BookstoreController = Depends(get_controller),
    ):
        """Get reading progress for one book; ``progress`` is null if none was saved."""
        return await controller.get_progress(token, book_id)

    @app.get("/api/users/progress/all", response_model=ProgressListResponse)
    async def list_progress(
        token: Optional[str] = Depends(bearer_token),
        controller: BookstoreController = Depends(get_controller),
    ):
        return await controller.list_progress(token)

    # Catalog

    @app.get("/api/books", response_model=CatalogPage)
    async def list_books(
        response: Response,
        page: int = Query(1, ge=1),
        limit: Optional[int] = Query(None, ge=1),
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = Query("newest", alias="sortBy"),
        sort_order: Optional[SortOrder] = Query(None, alias="sortOrder"),
        controller: BookstoreController = Depends(get_controller),
    ):
        """List books with filtering, sorting and pagination."""
        query = CatalogQuery(
            page=page,
            limit=limit,
            category=category,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        result = await controller.list_books(query)
        response.headers["Cache-Control"] = CATALOG_CACHE_CONTROL
        return result

    @app.post("/api/books", response_model=Book, status_code=status.HTTP_201_CREATED)
    async def create_book(
        body: CreateBookRequest,
        token: Optional[str] = Depends(bearer_token),
        controller: BookstoreController = Depends(get_controller),
    ):
        """Add a book to the catalog (admin only)."""
        return await controller.create_book(token, body)

    @app.get("/api/books/{book_id}", response_model=BookSummary)
    async def get_book(book_id: str, controller: BookstoreController = Depends(get_controller)):
        return await controller.get_book(book_id)

    @app.get("/api/books/{book_id}/pdf")
    async def get_pdf(
        book_id: str,
        token: Optional[str] = Query(None),
        header_token: Optional[str] = Depends(bearer_token),
        controller: BookstoreController = Depends(get_controller),
    ):
        """Serve the PDF of a purchased book.

        The token may come from the Authorization header or, for viewers that
        cannot set headers, the ``token`` query parameter.
        """
        content = await controller.fetch_content(header_token or token, book_id)
        return Response(content=content.body, media_type=content.media_type, headers=content.headers)

    return app


app = create_app()
