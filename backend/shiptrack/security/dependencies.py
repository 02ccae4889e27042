"""
ShipTrack Backend — Authentication Dependency (Auth Gate)
===========================================================

What:  FastAPI dependency that guards every shipment endpoint.
How:   Reads `Authorization: Bearer <token>`, verifies it with TokenService,
       and hands the route an AuthenticatedIdentity.

Outcomes:
    no bearer token          → UnauthenticatedError (401 "Access token required")
    token fails verification → ForbiddenError       (403 "Invalid or expired token")
    token valid              → AuthenticatedIdentity returned to the route

Verification is synchronous; nothing here touches the database.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shiptrack.exceptions import ForbiddenError, UnauthenticatedError
from shiptrack.schemas.auth import AuthenticatedIdentity
from shiptrack.security.tokens import InvalidTokenError, token_service

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must produce our own 401 body, not FastAPI's
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedIdentity:
    """Resolve the caller's identity from the bearer token or reject the request."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()

    try:
        return token_service.verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Rejected access token: %s", e.reason)
        raise ForbiddenError(
            message="Invalid or expired token",
            context={"reason": e.reason},
        )
