"""
ShipTrack Backend — Credential Store
======================================

What:  The only module that issues SQL. Looks up, inserts and updates users
       and shipments on behalf of the services.
How:   Async SQLAlchemy against the request-scoped AsyncSession passed into
       every call. Writes are flushed (not committed); get_db_session()
       commits once the request succeeds.
Who:   UserService and ShipmentService.

Error translation:
    IntegrityError (unique key violated) → ConflictError (400)
    any other SQLAlchemyError            → DatabaseError (500)
    row not found                        → None (services decide on 404)
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.exceptions import ConflictError, DatabaseError
from shiptrack.models.shipment import Shipment
from shiptrack.models.user import User

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Persistence gateway for users and shipments.

    Stateless: every method receives the session to use, so a single
    instance is shared across all requests.
    """

    # ── Users ─────────────────────────────────────────────────────────────

    async def insert_user(self, db: AsyncSession, user: User) -> User:
        """
        Insert a new user row and return it with its assigned id.

        Raises:
            ConflictError: the email is already registered (unique constraint)
            DatabaseError: any other database failure
        """
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning("User insert violated a unique constraint: %s", e.orig)
            raise ConflictError(message="User already exists")
        except SQLAlchemyError as e:
            logger.error("Database error inserting user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "insert_user"})
        return user

    async def find_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        return await self._scalar_one_or_none(
            db, select(User).where(User.email == email), "find_user_by_email"
        )

    async def find_user_by_id(self, db: AsyncSession, user_id: int) -> Optional[User]:
        return await self._scalar_one_or_none(
            db, select(User).where(User.id == user_id), "find_user_by_id"
        )

    # ── Shipments ─────────────────────────────────────────────────────────

    async def insert_shipment(self, db: AsyncSession, shipment: Shipment) -> Shipment:
        """
        Insert a new shipment row.

        Raises:
            ConflictError: tracking_number collided with an existing row
            DatabaseError: any other database failure
        """
        db.add(shipment)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning(
                "Shipment insert violated a unique constraint (tracking_number=%s): %s",
                shipment.tracking_number,
                e.orig,
            )
            raise ConflictError(
                message="Tracking number collision, please retry",
                context={"tracking_number": shipment.tracking_number},
            )
        except SQLAlchemyError as e:
            logger.error("Database error inserting shipment: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "insert_shipment"})
        return shipment

    async def find_shipment_by_tracking_number(
        self, db: AsyncSession, tracking_number: str
    ) -> Optional[Shipment]:
        return await self._scalar_one_or_none(
            db,
            select(Shipment).where(Shipment.tracking_number == tracking_number),
            "find_shipment_by_tracking_number",
        )

    async def find_shipments_by_user(
        self,
        db: AsyncSession,
        user_id: int,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Shipment]:
        """Shipments owned by `user_id`, newest first."""
        query = select(Shipment).where(Shipment.user_id == user_id)
        return await self._list(db, query, skip, limit, "find_shipments_by_user")

    async def find_all_shipments(
        self,
        db: AsyncSession,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Shipment]:
        """Every shipment, newest first."""
        return await self._list(db, select(Shipment), skip, limit, "find_all_shipments")

    async def update_shipment_status(
        self, db: AsyncSession, tracking_number: str, status: str
    ) -> Optional[Shipment]:
        """
        Set the status of a shipment.

        Returns:
            The updated shipment, or None when no shipment has that tracking number.
        """
        shipment = await self.find_shipment_by_tracking_number(db, tracking_number)
        if shipment is None:
            return None

        shipment.status = status
        shipment.updated_at = datetime.now(timezone.utc)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating shipment %s: %s", tracking_number, str(e))
            raise DatabaseError(context={"operation": "update_shipment_status"})
        return shipment

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _scalar_one_or_none(self, db: AsyncSession, query, operation: str):
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error in %s: %s", operation, str(e), exc_info=True)
            raise DatabaseError(context={"operation": operation})
        return result.scalar_one_or_none()

    async def _list(
        self,
        db: AsyncSession,
        query,
        skip: int,
        limit: Optional[int],
        operation: str,
    ) -> List[Shipment]:
        # id breaks ties between rows created within the same clock tick
        query = query.order_by(desc(Shipment.created_at), desc(Shipment.id))
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error in %s: %s", operation, str(e), exc_info=True)
            raise DatabaseError(context={"operation": operation})
        return list(result.scalars().all())


# ── Singleton Instance ────────────────────────────────────────────────────
store = CredentialStore()
