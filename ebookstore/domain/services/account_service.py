"""Account service: registration, login, profile and admin provisioning."""

import logging
from typing import Optional

from ..entities.requests import LoginRequest, LoginResponse, ProfileResponse, RegisterRequest
from ..entities.user import User, UserRole, UserSummary
from ..exceptions import Conflict, NotFound, Unauthenticated
from ..interfaces.book_repository import BookRepository
from ..interfaces.user_repository import UserRepository
from .passwords import hash_password_async, verify_password_async
from .token_service import TokenService

logger = logging.getLogger(__name__)


class AccountService:
    """Manages user accounts and issues session tokens."""

    def __init__(
        self,
        user_repository: UserRepository,
        book_repository: BookRepository,
        token_service: TokenService,
        bcrypt_rounds: int = 12,
    ):
        self.user_repository = user_repository
        self.book_repository = book_repository
        self.token_service = token_service
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, request: RegisterRequest) -> UserSummary:
        """Create a regular user account.

        Raises:
            Conflict: If the email is already registered.
        """
        if await self.user_repository.get_user_by_email(request.email):
            raise Conflict("Email already registered")

        user = User(
            name=request.name,
            email=request.email,
            password_hash=await hash_password_async(request.password, rounds=self.bcrypt_rounds),
            role=UserRole.USER,
        )
        await self.user_repository.create_user(user)
        logger.info(f"Registered user {user.id}")
        return user.summary()

    async def login(self, request: LoginRequest) -> LoginResponse:
        """Check credentials and issue a token.

        Raises:
            NotFound: If no user has this email.
            Unauthenticated: If the password does not match.
        """
        user = await self.user_repository.get_user_by_email(request.email)
        if user is None:
            raise NotFound("User not found")

        if not await verify_password_async(request.password, user.password_hash):
            logger.warning(f"Failed login for user {user.id}")
            raise Unauthenticated("Invalid credentials")

        token = self.token_service.issue(user.id, user.role)
        return LoginResponse(token=token, user=user.summary())

    async def get_profile(self, token: Optional[str]) -> ProfileResponse:
        """Return the caller's summary and purchased books."""
        identity = self.token_service.verify(token)
        user = await self.user_repository.get_user(identity.user_id)
        if user is None:
            raise NotFound("User not found")

        books = await self.book_repository.get_books(sorted(user.owned_books))
        return ProfileResponse(
            user=user.summary(),
            purchased_books=[book.summary() for book in books],
        )

    async def provision_admin(self, name: str, email: str, password: str) -> Optional[User]:
        """Create the first admin account out of band.

        Returns:
            The new admin, or None if an admin already exists.

        Raises:
            Conflict: If the email belongs to an existing non-admin user.
        """
        if await self.user_repository.has_role(UserRole.ADMIN):
            logger.info("Admin already exists")
            return None

        admin = User(
            name=name,
            email=email.lower(),
            password_hash=await hash_password_async(password, rounds=self.bcrypt_rounds),
            role=UserRole.ADMIN,
        )
        await self.user_repository.create_user(admin)
        logger.info(f"Created admin {admin.id}")
        return admin
