import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from familyhub.obs.audit import AuditLogger


def _pool_with(conn):
	pool = MagicMock()
	pool.acquire.return_value.__aenter__.return_value = conn
	return pool


@pytest.mark.asyncio
async def test_record_inserts_serialised_details():
	conn = MagicMock()
	conn.execute = AsyncMock()
	target = uuid4()
	with patch("familyhub.obs.audit.get_pool", AsyncMock(return_value=_pool_with(conn))):
		await AuditLogger().record("update", "actor-1", target, "contribution", {"fields": ["amount"]})

	args = conn.execute.call_args.args
	assert "INSERT INTO audit_logs" in args[0]
	assert args[2:6] == ("update", "actor-1", str(target), "contribution")
	assert json.loads(args[6]) == {"fields": ["amount"]}


@pytest.mark.asyncio
async def test_record_swallows_store_failures():
	conn = MagicMock()
	conn.execute = AsyncMock(side_effect=RuntimeError("audit table missing"))
	with patch("familyhub.obs.audit.get_pool", AsyncMock(return_value=_pool_with(conn))), \
		patch("familyhub.obs.audit._log") as log, \
		patch("familyhub.obs.audit.metrics.audit_write") as counter:
		result = await AuditLogger().record("delete", "actor-1", uuid4(), "event")

	assert result is None
	log.warning.assert_called_once()
	assert log.warning.call_args.args[0] == "audit_write_failed"
	counter.assert_called_once_with(False)


@pytest.mark.asyncio
async def test_record_swallows_pool_failures():
	with patch("familyhub.obs.audit.get_pool", AsyncMock(side_effect=OSError("connection refused"))), \
		patch("familyhub.obs.audit._log") as log:
		await AuditLogger().record("login", "actor-1")
	log.warning.assert_called_once()


@pytest.mark.asyncio
async def test_fetch_caps_limit_and_decodes_details():
	row = {
		"id": uuid4(),
		"action": "create",
		"user_id": uuid4(),
		"target_id": uuid4(),
		"target_type": "document",
		"details": json.dumps({"title": "Minutes"}),
		"created_at": datetime.now(timezone.utc),
	}
	conn = MagicMock()
	conn.fetch = AsyncMock(return_value=[row])
	with patch("familyhub.obs.audit.get_pool", AsyncMock(return_value=_pool_with(conn))):
		records = await AuditLogger().fetch(target_type="document", limit=5000)

	query, *params = conn.fetch.call_args.args
	assert "target_type = $1" in query
	assert params == ["document", 200]
	assert records[0].details == {"title": "Minutes"}
	assert records[0].target_id == str(row["target_id"])
