"""
ShipTrack Backend — Access Token Issuer/Verifier
==================================================

What:  Issues and verifies signed, expiring JWT access tokens.
How:   python-jose HS256 signatures over the claim set
       {id, email, is_admin, iat, exp}. Verification returns a frozen
       AuthenticatedIdentity; nothing else in the app reads raw claims.
Who:   UserService (issue on register/login) and the auth dependency
       (verify on every shipment request).

Token lifetime:
    settings.access_token_expire_minutes, one day by default.

Failure reasons:
    malformed          token cannot be parsed, or its claims have the wrong shape
    expired            the exp claim is in the past
    invalid_signature  signature does not match the server secret
    The reason is for server logs only. Callers see one InvalidTokenError.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from shiptrack.config import settings
from shiptrack.exceptions import ConfigurationError
from shiptrack.schemas.auth import AuthenticatedIdentity

logger = logging.getLogger(__name__)

MALFORMED = "malformed"
EXPIRED = "expired"
INVALID_SIGNATURE = "invalid_signature"


class InvalidTokenError(Exception):
    """Token rejected. `reason` is one of MALFORMED, EXPIRED, INVALID_SIGNATURE."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid token ({reason})")


class TokenService:
    """
    Signs and verifies access tokens.

    Stateless apart from the injected secret, algorithm and lifetime, so one
    instance is shared by every request.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    # Settings are read lazily so tests and the lifespan check see env changes.
    @property
    def secret(self) -> str:
        secret = self._secret if self._secret is not None else settings.jwt_secret
        if not secret:
            raise ConfigurationError(
                context={"setting": "JWT_SECRET", "problem": "missing"},
            )
        return secret

    @property
    def algorithm(self) -> str:
        return self._algorithm or settings.jwt_algorithm

    @property
    def lifetime(self) -> timedelta:
        minutes = self._expire_minutes or settings.access_token_expire_minutes
        return timedelta(minutes=minutes)

    def issue(self, identity: AuthenticatedIdentity) -> str:
        """Sign a token for the given identity, valid for `lifetime`."""
        now = datetime.now(timezone.utc)
        claims = {
            "id": identity.id,
            "email": identity.email,
            "is_admin": identity.is_admin,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> AuthenticatedIdentity:
        """
        Validate a token and return the identity it was issued for.

        Raises:
            InvalidTokenError: malformed, expired or wrongly signed token
            ConfigurationError: no signing secret configured
        """
        secret = self.secret

        try:
            jwt.get_unverified_header(token)
        except JWTError:
            raise InvalidTokenError(MALFORMED)

        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise InvalidTokenError(EXPIRED)
        except JWTError as e:
            logger.debug("Token rejected by signature check: %s", e)
            raise InvalidTokenError(INVALID_SIGNATURE)

        try:
            return AuthenticatedIdentity.model_validate(payload)
        except PydanticValidationError:
            raise InvalidTokenError(MALFORMED)


token_service = TokenService()
