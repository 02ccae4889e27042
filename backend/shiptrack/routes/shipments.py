"""
ShipTrack Backend — Shipment Route Handlers
=============================================

What:  The /api/shipments endpoints.
How:   Every handler depends on get_current_identity, so an unauthenticated
       or invalid-token request is rejected before any handler code runs.
       Authorization (owner/admin) is decided by ShipmentService.

Route Inventory:
    POST  /api/shipments                              create (caller is owner)
    GET   /api/shipments/track/{tracking_number}      owner or admin
    GET   /api/shipments/my-shipments                 caller's shipments
    GET   /api/shipments/all                          admin
    PATCH /api/shipments/{tracking_number}/status     admin
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.database import get_db_session
from shiptrack.schemas.auth import AuthenticatedIdentity
from shiptrack.schemas.common import ErrorResponse
from shiptrack.schemas.shipment import (
    ShipmentCreateRequest,
    ShipmentDetailResponse,
    ShipmentListResponse,
    ShipmentMutationResponse,
    StatusUpdateRequest,
)
from shiptrack.security.dependencies import get_current_identity
from shiptrack.services.shipment_service import shipment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shipments", tags=["Shipments"])

AUTH_ERRORS = {
    401: {"description": "Access token required", "model": ErrorResponse},
    403: {"description": "Invalid token or not permitted", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=ShipmentMutationResponse,
    responses={
        **AUTH_ERRORS,
        400: {"description": "Recipient missing or tracking number collision", "model": ErrorResponse},
        404: {"description": "Account no longer exists", "model": ErrorResponse},
    },
    summary="Create a shipment",
)
async def create_shipment(
    body: ShipmentCreateRequest,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ShipmentMutationResponse:
    """Sender name and address are copied from the caller's account."""
    return await shipment_service.create(
        db=db,
        identity=identity,
        recipient_name=body.recipient_name,
        recipient_address=body.recipient_address,
        package_description=body.package_description,
        package_weight=body.package_weight,
        package_dimensions=body.package_dimensions,
    )


@router.get(
    "/track/{tracking_number}",
    response_model=ShipmentDetailResponse,
    responses={
        **AUTH_ERRORS,
        404: {"description": "Shipment not found", "model": ErrorResponse},
    },
    summary="Track a shipment by tracking number",
)
async def track_shipment(
    tracking_number: str,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ShipmentDetailResponse:
    return await shipment_service.track(db=db, tracking_number=tracking_number, identity=identity)


@router.get(
    "/my-shipments",
    response_model=ShipmentListResponse,
    responses=AUTH_ERRORS,
    summary="List the caller's shipments (newest first)",
)
async def my_shipments(
    skip: int = Query(default=0, ge=0, description="Rows to skip"),
    limit: Optional[int] = Query(
        default=None, ge=1, le=100,
        description="Maximum rows to return. Omit to return every shipment.",
    ),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ShipmentListResponse:
    return await shipment_service.list_mine(db=db, identity=identity, skip=skip, limit=limit)


@router.get(
    "/all",
    response_model=ShipmentListResponse,
    responses=AUTH_ERRORS,
    summary="List every shipment (admin only, newest first)",
)
async def all_shipments(
    skip: int = Query(default=0, ge=0, description="Rows to skip"),
    limit: Optional[int] = Query(
        default=None, ge=1, le=100,
        description="Maximum rows to return. Omit to return every shipment.",
    ),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ShipmentListResponse:
    return await shipment_service.list_all(db=db, identity=identity, skip=skip, limit=limit)


@router.patch(
    "/{tracking_number}/status",
    response_model=ShipmentMutationResponse,
    responses={
        **AUTH_ERRORS,
        400: {"description": "Invalid or missing status", "model": ErrorResponse},
        404: {"description": "Shipment not found", "model": ErrorResponse},
    },
    summary="Update a shipment's status (admin only)",
)
async def update_shipment_status(
    tracking_number: str,
    body: StatusUpdateRequest,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ShipmentMutationResponse:
    """Allowed values: Pending, InTransit, Delivered, Cancelled. Any value may follow any other."""
    return await shipment_service.update_status(
        db=db,
        tracking_number=tracking_number,
        status=body.status,
        identity=identity,
    )
