"""
ShipTrack Backend — Credential Store Unit Tests
=================================================

What:  Tests for database error translation in CredentialStore.
How:   Mock AsyncSession; flush/execute are made to raise SQLAlchemy errors.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from shiptrack.exceptions import ConflictError, DatabaseError
from shiptrack.models.user import User
from shiptrack.store import CredentialStore


def _integrity_error():
    return IntegrityError("INSERT ...", {}, Exception("duplicate key value"))


class TestCredentialStoreUsers:

    def setup_method(self):
        self.store = CredentialStore()
        self.user = User(
            email="ada@example.com",
            password="$2b$04$hash",
            contact_name="Ada",
            address="1 Origin Road",
        )

    @pytest.mark.asyncio
    async def test_insert_user_flushes(self, mock_db_session):
        result = await self.store.insert_user(mock_db_session, self.user)

        assert result is self.user
        mock_db_session.add.assert_called_once_with(self.user)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, mock_db_session):
        mock_db_session.flush = AsyncMock(side_effect=_integrity_error())

        with pytest.raises(ConflictError) as exc_info:
            await self.store.insert_user(mock_db_session, self.user)

        assert exc_info.value.message == "User already exists"

    @pytest.mark.asyncio
    async def test_other_database_failure(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT ...", {}, Exception("connection lost"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.store.insert_user(mock_db_session, self.user)

        # Driver details stay in the logs, not in the client-facing message
        assert "connection lost" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_find_user_by_email(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = self.user
        mock_db_session.execute.return_value = mock_result

        assert await self.store.find_user_by_email(mock_db_session, "ada@example.com") is self.user

    @pytest.mark.asyncio
    async def test_lookup_failure_is_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT ...", {}, Exception("timeout"))
        )

        with pytest.raises(DatabaseError):
            await self.store.find_user_by_id(mock_db_session, 1)


class TestCredentialStoreShipments:

    def setup_method(self):
        self.store = CredentialStore()

    @pytest.mark.asyncio
    async def test_tracking_number_collision_is_conflict(self, mock_db_session, make_shipment):
        mock_db_session.flush = AsyncMock(side_effect=_integrity_error())

        with pytest.raises(ConflictError) as exc_info:
            await self.store.insert_shipment(mock_db_session, make_shipment())

        assert "Tracking number" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_update_status_unknown_returns_none(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        assert await self.store.update_shipment_status(mock_db_session, "TRK0", "Delivered") is None
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_status_sets_status_and_timestamp(self, mock_db_session, make_shipment):
        shipment = make_shipment(status="Pending")
        before = shipment.updated_at
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = shipment
        mock_db_session.execute.return_value = mock_result

        result = await self.store.update_shipment_status(
            mock_db_session, shipment.tracking_number, "InTransit"
        )

        assert result.status == "InTransit"
        assert result.updated_at >= before
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_returns_rows(self, mock_db_session, make_shipment):
        rows = [make_shipment(id=2), make_shipment(id=1)]
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = rows
        mock_db_session.execute.return_value = mock_result

        assert await self.store.find_all_shipments(mock_db_session, skip=0, limit=10) == rows
