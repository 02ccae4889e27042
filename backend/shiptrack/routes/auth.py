"""
ShipTrack Backend — Auth Route Handlers
=========================================

What:  POST /api/auth/register and POST /api/auth/login.
How:   Parse the JSON body, delegate to UserService, return the token.
Who:   Called by the frontend sign-up and sign-in forms.

Both endpoints are public; every other /api route except /api/health
requires the token they return.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.database import get_db_session
from shiptrack.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from shiptrack.schemas.common import ErrorResponse
from shiptrack.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Missing fields, short password, or email taken", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    """
    Create an account and return an access token plus the public user fields.

    Required: email, password (8+ characters), contact_name, address.
    Optional: company_name, phone_number, is_admin (defaults to false).
    """
    return await user_service.register(
        db=db,
        email=body.email,
        password=body.password,
        contact_name=body.contact_name,
        address=body.address,
        company_name=body.company_name,
        phone_number=body.phone_number,
        is_admin=body.is_admin,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Log in with email and password",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.login(db=db, email=body.email, password=body.password)
