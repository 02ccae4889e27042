"""
ShipTrack Backend — Shipment SQLAlchemy Model
================================================

What:  ORM model representing the `shipments` table, plus the status enum.
Who:   Written by ShipmentService through the CredentialStore; read by Alembic.

Table Design:
    - tracking_number: externally shared identifier, UNIQUE. The generator
      in ShipmentService is probabilistic; this constraint is what actually
      guarantees uniqueness.
    - sender_name / sender_address: copied from the owner at creation time.
      Later profile edits do not rewrite past shipments.
    - status: one of ShipmentStatus, stored as its string value.

Indexes:
    idx_shipments_user_id     → "my shipments" lookups
    idx_shipments_created_at  → newest-first listings
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from shiptrack.database import Base


class ShipmentStatus(str, enum.Enum):
    """
    Shipment lifecycle states.

    Transitions are unconstrained: an admin may move a shipment from any
    status to any other (e.g. Pending → Delivered directly).
    """

    PENDING = "Pending"
    IN_TRANSIT = "InTransit"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Shipment(Base):
    """
    A package sent by a registered user.

    Lifecycle:
        1. Created by its owner (status = Pending)
        2. Status changed only by admins
        3. Never deleted
    """

    __tablename__ = "shipments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    tracking_number: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="Public identifier: TRK + epoch millis + random suffix",
    )

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        comment="Owner of the shipment",
    )

    # ── Sender snapshot ───────────────────────────────────────────────────
    sender_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sender_address: Mapped[str] = mapped_column(String(500), nullable=False)

    # ── Recipient ─────────────────────────────────────────────────────────
    recipient_name: Mapped[str] = mapped_column(String(255), nullable=False)
    recipient_address: Mapped[str] = mapped_column(String(500), nullable=False)

    # ── Package ───────────────────────────────────────────────────────────
    package_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    package_weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    package_dimensions: Mapped[str | None] = mapped_column(String(100), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ShipmentStatus.PENDING.value,
        server_default=text("'Pending'"),
        comment="Pending, InTransit, Delivered, Cancelled",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_shipments_user_id", "user_id"),
        Index("idx_shipments_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Shipment(tracking_number='{self.tracking_number}', "
            f"status='{self.status}', user_id={self.user_id})>"
        )
