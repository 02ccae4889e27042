"""
ShipTrack Backend — Shipment Service Unit Tests
=================================================

What:  Tests for ShipmentService ownership/admin rules and status updates.
How:   The CredentialStore is patched; no database is involved.

What we test:
    ✅ Tracking numbers have the TRK + millis + 5 char shape
    ✅ Creation snapshots the owner's name and address, status Pending
    ✅ Track: owner and admin allowed, anyone else forbidden, unknown 404
    ✅ Admin-only list_all and update_status
    ✅ Invalid status rejected before any write
"""

import re
import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shiptrack.exceptions import ForbiddenError, NotFoundError, ValidationError
from shiptrack.models.shipment import ShipmentStatus
from shiptrack.services.shipment_service import ShipmentService, generate_tracking_number

TRACKING_PATTERN = re.compile(r"^TRK(\d+)[A-Z0-9]{5}$")


class TestTrackingNumber:

    def test_format(self):
        match = TRACKING_PATTERN.match(generate_tracking_number())
        assert match is not None

    def test_embeds_current_millis(self):
        before = int(time.time() * 1000)
        millis = int(TRACKING_PATTERN.match(generate_tracking_number()).group(1))
        after = int(time.time() * 1000)
        assert before <= millis <= after

    def test_consecutive_numbers_differ(self):
        assert len({generate_tracking_number() for _ in range(50)}) == 50


class TestShipmentServiceCreate:

    def setup_method(self):
        self.service = ShipmentService()
        self.owner = MagicMock()
        self.owner.id = 1
        self.owner.contact_name = "Ada Sender"
        self.owner.address = "1 Origin Road"

    @pytest.mark.asyncio
    async def test_create_success(self, mock_db_session, identity, make_shipment):
        async def insert(db, shipment):
            return make_shipment(
                tracking_number=shipment.tracking_number,
                user_id=shipment.user_id,
                sender_name=shipment.sender_name,
                sender_address=shipment.sender_address,
                recipient_name=shipment.recipient_name,
                recipient_address=shipment.recipient_address,
                package_weight=shipment.package_weight,
                status=shipment.status,
            )

        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_user_by_id = AsyncMock(return_value=self.owner)
            mock_store.insert_shipment = AsyncMock(side_effect=insert)

            result = await self.service.create(
                db=mock_db_session,
                identity=identity,
                recipient_name="Bob Recipient",
                recipient_address="2 Destination Ave",
                package_weight=2.5,
            )

        assert result.message == "Shipment created successfully"
        shipment = result.shipment
        assert TRACKING_PATTERN.match(shipment.tracking_number)
        assert shipment.status == "Pending"
        assert shipment.user_id == 1
        assert shipment.sender_name == "Ada Sender"
        assert shipment.sender_address == "1 Origin Road"
        assert shipment.package_weight == 2.5

    @pytest.mark.asyncio
    async def test_create_missing_recipient(self, mock_db_session, identity):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_user_by_id = AsyncMock(return_value=self.owner)
            mock_store.insert_shipment = AsyncMock()

            with pytest.raises(ValidationError) as exc_info:
                await self.service.create(
                    db=mock_db_session,
                    identity=identity,
                    recipient_name="Bob Recipient",
                    recipient_address=None,
                )

            assert exc_info.value.message == "Recipient name and address are required"
            mock_store.insert_shipment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_for_deleted_account(self, mock_db_session, identity):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_user_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await self.service.create(
                    db=mock_db_session,
                    identity=identity,
                    recipient_name="Bob Recipient",
                    recipient_address="2 Destination Ave",
                )

        assert exc_info.value.message == "User not found"


class TestShipmentServiceTrack:

    def setup_method(self):
        self.service = ShipmentService()

    @pytest.mark.asyncio
    async def test_owner_can_track(self, mock_db_session, identity, make_shipment):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_shipment_by_tracking_number = AsyncMock(
                return_value=make_shipment(user_id=identity.id)
            )
            result = await self.service.track(mock_db_session, "TRK1718035200123ABCDE", identity)

        assert result.shipment.tracking_number == "TRK1718035200123ABCDE"

    @pytest.mark.asyncio
    async def test_admin_can_track_any(self, mock_db_session, admin_identity, make_shipment):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_shipment_by_tracking_number = AsyncMock(
                return_value=make_shipment(user_id=1)
            )
            result = await self.service.track(
                mock_db_session, "TRK1718035200123ABCDE", admin_identity
            )

        assert result.shipment.user_id == 1

    @pytest.mark.asyncio
    async def test_other_user_forbidden(self, mock_db_session, identity, make_shipment):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_shipment_by_tracking_number = AsyncMock(
                return_value=make_shipment(user_id=42)
            )
            with pytest.raises(ForbiddenError) as exc_info:
                await self.service.track(mock_db_session, "TRK1718035200123ABCDE", identity)

        assert exc_info.value.message == "Access denied"

    @pytest.mark.asyncio
    async def test_unknown_tracking_number(self, mock_db_session, identity):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_shipment_by_tracking_number = AsyncMock(return_value=None)
            with pytest.raises(NotFoundError) as exc_info:
                await self.service.track(mock_db_session, "TRK0NOPE0", identity)

        assert exc_info.value.message == "Shipment not found"


class TestShipmentServiceLists:

    def setup_method(self):
        self.service = ShipmentService()

    @pytest.mark.asyncio
    async def test_list_mine_passes_caller_and_paging(self, mock_db_session, identity, make_shipment):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_shipments_by_user = AsyncMock(
                return_value=[make_shipment(id=2), make_shipment(id=1)]
            )
            result = await self.service.list_mine(mock_db_session, identity, skip=5, limit=10)

            mock_store.find_shipments_by_user.assert_awaited_once_with(
                mock_db_session, identity.id, skip=5, limit=10
            )
        assert [s.id for s in result.shipments] == [2, 1]

    @pytest.mark.asyncio
    async def test_list_all_requires_admin(self, mock_db_session, identity):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_all_shipments = AsyncMock()
            with pytest.raises(ForbiddenError) as exc_info:
                await self.service.list_all(mock_db_session, identity)

            mock_store.find_all_shipments.assert_not_awaited()
        assert exc_info.value.message == "Admin access required"

    @pytest.mark.asyncio
    async def test_list_all_as_admin(self, mock_db_session, admin_identity, make_shipment):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.find_all_shipments = AsyncMock(
                return_value=[make_shipment(id=3, user_id=1), make_shipment(id=2, user_id=2)]
            )
            result = await self.service.list_all(mock_db_session, admin_identity)

        assert len(result.shipments) == 2


class TestShipmentServiceUpdateStatus:

    def setup_method(self):
        self.service = ShipmentService()

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, mock_db_session, identity):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.update_shipment_status = AsyncMock()
            with pytest.raises(ForbiddenError):
                await self.service.update_status(
                    mock_db_session, "TRK1718035200123ABCDE", "Delivered", identity
                )

            mock_store.update_shipment_status.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [None, "", "Lost", "in transit", "pending"])
    async def test_invalid_status_rejected_without_write(
        self, mock_db_session, admin_identity, status
    ):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.update_shipment_status = AsyncMock()
            with pytest.raises(ValidationError) as exc_info:
                await self.service.update_status(
                    mock_db_session, "TRK1718035200123ABCDE", status, admin_identity
                )

            mock_store.update_shipment_status.assert_not_awaited()
        assert exc_info.value.message == "Invalid or missing status"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ShipmentStatus.values())
    async def test_any_status_accepted(self, mock_db_session, admin_identity, make_shipment, status):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.update_shipment_status = AsyncMock(
                return_value=make_shipment(status=status)
            )
            result = await self.service.update_status(
                mock_db_session, "TRK1718035200123ABCDE", status, admin_identity
            )

        assert result.message == "Status updated successfully"
        assert result.shipment.status == status

    @pytest.mark.asyncio
    async def test_unknown_shipment(self, mock_db_session, admin_identity):
        with patch("shiptrack.services.shipment_service.store") as mock_store:
            mock_store.update_shipment_status = AsyncMock(return_value=None)
            with pytest.raises(NotFoundError):
                await self.service.update_status(
                    mock_db_session, "TRK0NOPE0", "Delivered", admin_identity
                )
