"""JWT authentication provider implementation.

Token payload structure:
    {
        "sub": "username",
        "email": "user@example.com",
        "name": "Display Name",
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Optional

import structlog
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWTAuthProvider:
    """JWT-based authentication provider (shared-secret signing)."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract user info.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError as exc:
            logger.debug("token_rejected", reason=str(exc))
            return None

        username = payload.get("sub")
        email = payload.get("email")

        if not username or not email:
            return None

        return TokenUser(
            username=username,
            email=email,
            display_name=payload.get("name"),
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.username,
            "email": user.email,
            "exp": expire,
        }
        if user.display_name:
            payload["name"] = user.display_name

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
