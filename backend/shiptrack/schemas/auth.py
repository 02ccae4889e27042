"""
ShipTrack Backend — Authentication Schemas
============================================

What:  Pydantic models for the register/login API contract and the
       verified identity carried through a request.

Request bodies declare every field optional on purpose: presence and length
rules are business rules enforced in UserService, which answers 400 with a
specific message instead of FastAPI's generic 422.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Identity: produced only by TokenService.verify()
# ══════════════════════════════════════════════════════════════════════════


class AuthenticatedIdentity(BaseModel):
    """
    The caller of the current request, as proven by a valid access token.

    Immutable; reconstructed from signed claims on every request and never
    persisted.
    """
    id: int
    email: str
    is_admin: bool = False

    model_config = {"frozen": True}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    """Body of POST /api/auth/register."""
    email: Optional[str] = None
    password: Optional[str] = None
    contact_name: Optional[str] = None
    address: Optional[str] = None
    company_name: Optional[str] = None
    phone_number: Optional[str] = None
    is_admin: Optional[bool] = None


class LoginRequest(BaseModel):
    """Body of POST /api/auth/login."""
    email: Optional[str] = None
    password: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """
    Public projection of a user.

    The password hash is deliberately absent; building this model from an
    ORM User drops it.
    """
    id: int
    email: str
    company_name: Optional[str] = None
    contact_name: str
    is_admin: bool

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Returned by register (201) and login (200)."""
    message: str = Field(description="Human-readable success message")
    token: str = Field(description="Bearer access token, valid for one day")
    user: UserResponse
