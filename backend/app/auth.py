"""Bearer token issuance and verification.

Tokens are HS256 JWTs carrying the deployment's single client code and an
expiry. There is no per-user identity and no revocation: a token is valid
until it expires, and only if it names the configured client.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import settings
from app.errors import InternalError, UnauthorizedError

logger = logging.getLogger(__name__)

CLIENT_CODE_CLAIM = "client_code"

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenClaims:
    client_code: str
    expires_at: datetime


class TokenService:
    """Issues and verifies signed client tokens.

    Args:
        secret_key: Shared HMAC secret.
        client_code: The one client identity this deployment recognises.
        expires_in: Token lifetime from issuance.
        algorithm: JWT signing algorithm.
    """

    def __init__(
        self,
        secret_key: str,
        client_code: str,
        expires_in: timedelta = timedelta(hours=24),
        algorithm: str = "HS256",
    ):
        self.secret_key = secret_key
        self.client_code = client_code
        self.expires_in = expires_in
        self.algorithm = algorithm

    def issue_token(self, now: datetime | None = None) -> str:
        """Create a signed token for the configured client.

        Args:
            now: Issuance time; defaults to the current UTC time.

        Raises:
            InternalError: If signing fails.
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            CLIENT_CODE_CLAIM: self.client_code,
            "exp": issued_at + self.expires_in,
        }
        try:
            return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        except JWTError as e:
            logger.error(
                "failed to generate token",
                extra={"structured_fields": {"error": repr(e)}},
            )
            raise InternalError("failed to generate token") from e

    def verify_token(self, token: str) -> TokenClaims:
        """Check signature, expiry and client code.

        Returns:
            The verified claims.

        Raises:
            UnauthorizedError: If any check fails.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise UnauthorizedError("Invalid or expired token") from None

        if payload.get(CLIENT_CODE_CLAIM) != self.client_code:
            raise UnauthorizedError("Token issued for an unrecognized client")

        expires_at = payload.get("exp")
        if not isinstance(expires_at, (int, float)):
            raise UnauthorizedError("Invalid or expired token")

        return TokenClaims(
            client_code=payload[CLIENT_CODE_CLAIM],
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )


@lru_cache
def get_token_service() -> TokenService:
    """Token service bound to application settings."""
    return TokenService(
        secret_key=settings.jwt_secret_key,
        client_code=settings.jwt_client_code,
        expires_in=timedelta(hours=settings.access_token_expiry_hours),
        algorithm=settings.jwt_algorithm,
    )


async def verify_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> str:
    """Validate the request's bearer token.

    Returns:
        The authenticated client code.

    Raises:
        UnauthorizedError: 401 if token is missing, invalid, expired or
            issued for another client.
    """
    if credentials is None:
        raise UnauthorizedError("Missing authentication token")

    claims = token_service.verify_token(credentials.credentials)
    return claims.client_code
