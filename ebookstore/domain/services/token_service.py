"""Signed session tokens carrying user identity and role."""

import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from pydantic import BaseModel

from ..entities.user import UserRole
from ..exceptions import Unauthenticated

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(days=7)


class TokenIdentity(BaseModel):
    """Identity asserted by a verified token."""

    user_id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class TokenService:
    """Issues and verifies JWT bearer tokens.

    Expiry is the only invalidation mechanism; there is no revocation list.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TOKEN_TTL,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: UUID, role: UserRole) -> str:
        """Create a signed token binding ``user_id`` and ``role``."""
        now = datetime.utcnow()
        claims = {
            "sub": str(user_id),
            "role": UserRole(role).value,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> TokenIdentity:
        """Verify ``token`` and return the identity it carries.

        Fails closed: a missing token, bad signature, expiry or malformed
        payload all raise ``Unauthenticated``.
        """
        if not token:
            raise Unauthenticated("No token provided")

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            logger.warning(f"Rejected token: {e}")
            raise Unauthenticated("Invalid token")

        try:
            return TokenIdentity(user_id=UUID(payload["sub"]), role=UserRole(payload["role"]))
        except (KeyError, TypeError, ValueError):
            logger.warning("Rejected token with malformed payload")
            raise Unauthenticated("Invalid token")
