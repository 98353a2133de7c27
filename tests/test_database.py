"""
Unit tests for the MongoDB connection manager.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import AutoReconnect, OperationFailure

from brainsort.database import Database


def make_database(ping) -> Database:
    db = Database()
    db.client = MagicMock()
    db.client.admin.command = ping
    db.db = MagicMock()
    return db


class TestCheckConnection:

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self):
        ping = AsyncMock(side_effect=[AutoReconnect("primary stepped down"), {"ok": 1}, {"ok": 1}])
        db = make_database(ping)
        db._connected = True

        with patch.object(db, "_ensure_indexes", AsyncMock()) as ensure_indexes:
            assert await db.check_connection() is False
            assert db.is_connected() is False

            assert await db.check_connection() is True
            assert await db.check_connection() is True

        assert db.is_connected() is True
        assert ping.await_count == 3
        ensure_indexes.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_client(self):
        assert await Database().check_connection() is False


class TestConnect:

    @pytest.mark.asyncio
    async def test_operation_failure_falls_back_to_degraded_mode(self):
        client = MagicMock()
        client.admin.command = AsyncMock(return_value={"ok": 1})
        db = Database()

        with patch("brainsort.database.AsyncIOMotorClient", return_value=client), \
                patch.object(db, "_ensure_indexes", AsyncMock(side_effect=OperationFailure("duplicate key"))):
            await db.connect(max_retries=2, retry_delay=0)

        assert db.is_connected() is False
        assert db.client is client

    @pytest.mark.asyncio
    async def test_degraded_start_recovers_on_check(self):
        client = MagicMock()
        client.admin.command = AsyncMock(side_effect=[
            AutoReconnect("no server"),
            {"ok": 1},
        ])
        db = Database()

        with patch("brainsort.database.AsyncIOMotorClient", return_value=client), \
                patch.object(db, "_ensure_indexes", AsyncMock()):
            await db.connect(max_retries=1, retry_delay=0)
            assert db.is_connected() is False

            assert await db.check_connection() is True

        assert db.is_connected() is True
