"""
ShipTrack Backend — Shipment Schemas
======================================

What:  Pydantic request/response models for the /api/shipments endpoints.
Who:   Route handlers (request parsing) and ShipmentService (responses).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ShipmentCreateRequest(BaseModel):
    """Body of POST /api/shipments. Sender details come from the caller's account."""
    recipient_name: Optional[str] = None
    recipient_address: Optional[str] = None
    package_description: Optional[str] = None
    package_weight: Optional[float] = None
    package_dimensions: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    """Body of PATCH /api/shipments/{tracking_number}/status."""
    status: Optional[str] = Field(
        default=None,
        description="One of: Pending, InTransit, Delivered, Cancelled",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ShipmentResponse(BaseModel):
    """Full representation of a shipment row."""
    id: int
    tracking_number: str
    user_id: int
    sender_name: str
    sender_address: str
    recipient_name: str
    recipient_address: str
    package_description: Optional[str] = None
    package_weight: Optional[float] = None
    package_dimensions: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ShipmentDetailResponse(BaseModel):
    """GET /api/shipments/track/{tracking_number}"""
    shipment: ShipmentResponse


class ShipmentMutationResponse(BaseModel):
    """Returned after creating a shipment or changing its status."""
    message: str
    shipment: ShipmentResponse


class ShipmentListResponse(BaseModel):
    """GET /api/shipments/my-shipments and GET /api/shipments/all, newest first."""
    shipments: List[ShipmentResponse]
