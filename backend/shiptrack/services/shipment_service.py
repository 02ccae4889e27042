"""
ShipTrack Backend — Shipment Service
======================================

What:  Shipment lifecycle: create, track, list (own / all), status update.
How:   Every operation receives the caller's AuthenticatedIdentity (already
       verified by the auth dependency) and applies the ownership/admin
       rules before touching the CredentialStore.
Who:   Called by the /api/shipments route handlers.

Authorization rules:
    create         any authenticated user; the caller becomes the owner
    track          owner or admin
    list_mine      any authenticated user, own shipments only
    list_all       admin
    update_status  admin

Status changes are not restricted to a transition graph: any of the four
ShipmentStatus values may replace any other.
"""

import logging
import secrets
import string
import time
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.exceptions import ForbiddenError, NotFoundError, ValidationError
from shiptrack.models.shipment import Shipment, ShipmentStatus
from shiptrack.schemas.auth import AuthenticatedIdentity
from shiptrack.schemas.shipment import (
    ShipmentDetailResponse,
    ShipmentListResponse,
    ShipmentMutationResponse,
    ShipmentResponse,
)
from shiptrack.store import store

logger = logging.getLogger(__name__)

TRACKING_PREFIX = "TRK"
TRACKING_SUFFIX_LENGTH = 5
TRACKING_ALPHABET = string.ascii_uppercase + string.digits


def generate_tracking_number() -> str:
    """
    Build a tracking number: "TRK" + epoch milliseconds + 5 chars of [A-Z0-9].

    Example: TRK1718035200123K7Q2Z

    Collisions are very unlikely but possible; the unique constraint on
    shipments.tracking_number rejects a duplicate at insert time.
    """
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_SUFFIX_LENGTH))
    return f"{TRACKING_PREFIX}{millis}{suffix}"


class ShipmentService:
    """Business logic for shipments. Stateless; one shared instance."""

    async def create(
        self,
        db: AsyncSession,
        identity: AuthenticatedIdentity,
        recipient_name: Optional[str],
        recipient_address: Optional[str],
        package_description: Optional[str] = None,
        package_weight: Optional[float] = None,
        package_dimensions: Optional[str] = None,
    ) -> ShipmentMutationResponse:
        """
        Create a shipment owned by the caller.

        Workflow:
            1. Load the caller's account (sender details come from it)
            2. Generate a tracking number
            3. Insert with status Pending

        Raises:
            NotFoundError: token is valid but the user row no longer exists
            ValidationError: recipient name or address missing
            ConflictError: tracking number collision
        """
        owner = await store.find_user_by_id(db, identity.id)
        if owner is None:
            raise NotFoundError(resource="User", resource_id=str(identity.id))

        if not recipient_name or not recipient_address:
            raise ValidationError(message="Recipient name and address are required")

        shipment = await store.insert_shipment(
            db,
            Shipment(
                tracking_number=generate_tracking_number(),
                user_id=owner.id,
                sender_name=owner.contact_name,
                sender_address=owner.address,
                recipient_name=recipient_name,
                recipient_address=recipient_address,
                package_description=package_description,
                package_weight=package_weight,
                package_dimensions=package_dimensions,
                status=ShipmentStatus.PENDING.value,
            ),
        )
        logger.info("Shipment %s created by user %s", shipment.tracking_number, owner.id)

        return ShipmentMutationResponse(
            message="Shipment created successfully",
            shipment=ShipmentResponse.model_validate(shipment),
        )

    async def track(
        self,
        db: AsyncSession,
        tracking_number: str,
        identity: AuthenticatedIdentity,
    ) -> ShipmentDetailResponse:
        """
        Look up one shipment by tracking number.

        Raises:
            NotFoundError: no shipment with that tracking number
            ForbiddenError: caller is neither the owner nor an admin
        """
        shipment = await store.find_shipment_by_tracking_number(db, tracking_number)
        if shipment is None:
            raise NotFoundError(resource="Shipment", resource_id=tracking_number)

        if shipment.user_id != identity.id and not identity.is_admin:
            logger.info(
                "User %s denied access to shipment %s", identity.id, tracking_number
            )
            raise ForbiddenError(message="Access denied")

        return ShipmentDetailResponse(shipment=ShipmentResponse.model_validate(shipment))

    async def list_mine(
        self,
        db: AsyncSession,
        identity: AuthenticatedIdentity,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> ShipmentListResponse:
        """The caller's own shipments, newest first."""
        shipments = await store.find_shipments_by_user(db, identity.id, skip=skip, limit=limit)
        return ShipmentListResponse(
            shipments=[ShipmentResponse.model_validate(s) for s in shipments]
        )

    async def list_all(
        self,
        db: AsyncSession,
        identity: AuthenticatedIdentity,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> ShipmentListResponse:
        """
        Every shipment in the system, newest first.

        Raises:
            ForbiddenError: caller is not an admin
        """
        self._require_admin(identity)
        shipments = await store.find_all_shipments(db, skip=skip, limit=limit)
        return ShipmentListResponse(
            shipments=[ShipmentResponse.model_validate(s) for s in shipments]
        )

    async def update_status(
        self,
        db: AsyncSession,
        tracking_number: str,
        status: Optional[str],
        identity: AuthenticatedIdentity,
    ) -> ShipmentMutationResponse:
        """
        Replace a shipment's status.

        Raises:
            ForbiddenError: caller is not an admin
            ValidationError: status missing or not a ShipmentStatus value
            NotFoundError: no shipment with that tracking number
        """
        self._require_admin(identity)

        if not status or status not in ShipmentStatus.values():
            raise ValidationError(
                message="Invalid or missing status",
                field="status",
                context={"allowed": ShipmentStatus.values()},
            )

        shipment = await store.update_shipment_status(db, tracking_number, status)
        if shipment is None:
            raise NotFoundError(resource="Shipment", resource_id=tracking_number)

        logger.info(
            "Shipment %s status set to %s by admin %s", tracking_number, status, identity.id
        )
        return ShipmentMutationResponse(
            message="Status updated successfully",
            shipment=ShipmentResponse.model_validate(shipment),
        )

    @staticmethod
    def _require_admin(identity: AuthenticatedIdentity) -> None:
        if not identity.is_admin:
            logger.info("Non-admin user %s attempted an admin operation", identity.id)
            raise ForbiddenError(message="Admin access required")


# ── Singleton Instance ────────────────────────────────────────────────────
shipment_service = ShipmentService()
