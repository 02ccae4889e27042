"""
ShipTrack Backend — User Service (Registration & Login)
=========================================================

What:  Account registration and login, each ending in an access token.
How:   Validates input, talks to the CredentialStore, hashes/verifies with
       PasswordHasher, signs with TokenService.
Who:   Called by the /api/auth route handlers.

Flows:
    register: validate → email unique? → hash → insert → issue token
    login:    validate → lookup → verify password → issue token

bcrypt is CPU-bound (~250ms at cost 12), so it runs in a worker thread via
asyncio.to_thread and does not stall other requests on the event loop.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.exceptions import ConflictError, InvalidCredentialsError, ValidationError
from shiptrack.models.user import User
from shiptrack.schemas.auth import AuthenticatedIdentity, AuthResponse, UserResponse
from shiptrack.security.passwords import password_hasher
from shiptrack.security.tokens import token_service
from shiptrack.store import store

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class UserService:
    """
    Business logic for accounts.

    Error Handling Strategy:
        Input problems raise ValidationError, a taken email raises
        ConflictError (from the store or the pre-check), and any login
        failure raises InvalidCredentialsError with the same message whether
        the email or the password was wrong.
    """

    async def register(
        self,
        db: AsyncSession,
        email: Optional[str],
        password: Optional[str],
        contact_name: Optional[str],
        address: Optional[str],
        company_name: Optional[str] = None,
        phone_number: Optional[str] = None,
        is_admin: Optional[bool] = None,
    ) -> AuthResponse:
        """
        Create an account and return a token for it.

        Raises:
            ValidationError: required field missing, or password too short
            ConflictError: email already registered
            ConfigurationError: token signing secret missing
        """
        if not email or not password or not contact_name or not address:
            raise ValidationError(message="Required fields are missing")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )

        if await store.find_user_by_email(db, email) is not None:
            raise ConflictError(message="User already exists")

        hashed = await asyncio.to_thread(password_hasher.hash, password)

        user = await store.insert_user(
            db,
            User(
                email=email,
                password=hashed,
                company_name=company_name,
                contact_name=contact_name,
                address=address,
                phone_number=phone_number,
                is_admin=bool(is_admin),
            ),
        )
        logger.info("Registered user %s (admin=%s)", user.id, user.is_admin)

        return AuthResponse(
            message="User created successfully",
            token=self._issue_token(user),
            user=UserResponse.model_validate(user),
        )

    async def login(
        self,
        db: AsyncSession,
        email: Optional[str],
        password: Optional[str],
    ) -> AuthResponse:
        """
        Check credentials and return a fresh token.

        Raises:
            ValidationError: email or password missing
            InvalidCredentialsError: unknown email or wrong password
        """
        if not email or not password:
            raise ValidationError(message="Email and password are required")

        user = await store.find_user_by_email(db, email)
        if user is None:
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(password_hasher.verify, password, user.password):
            logger.info("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentialsError(context={"user_id": user.id})

        return AuthResponse(
            message="Login successful",
            token=self._issue_token(user),
            user=UserResponse.model_validate(user),
        )

    @staticmethod
    def _issue_token(user: User) -> str:
        return token_service.issue(
            AuthenticatedIdentity(id=user.id, email=user.email, is_admin=user.is_admin)
        )


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
