"""Best-effort audit trail persisted to the ``audit_logs`` table.

``AuditLogger.record`` never raises: a failed insert is logged and counted,
and the primary request carries on.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict

from familyhub.domain.exceptions import AuditFault
from familyhub.infra.postgres import get_pool
from familyhub.obs import metrics
from familyhub.obs.logging import get_logger

_log = get_logger("familyhub.audit")

MAX_FETCH_LIMIT = 200


class AuditRecord(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	action: str
	user_id: Optional[UUID] = None
	target_id: Optional[str] = None
	target_type: Optional[str] = None
	details: Optional[Any] = None
	created_at: datetime


def _encode_details(details: Any) -> Optional[str]:
	if details is None:
		return None
	return json.dumps(details, default=str)


def _decode_details(raw: Any) -> Any:
	if isinstance(raw, str):
		try:
			return json.loads(raw)
		except ValueError:
			return raw
	return raw


class AuditLogger:
	"""Append-only writer for audit records."""

	async def _write(
		self,
		action: str,
		actor_id: Optional[str],
		target_id: Optional[str],
		target_type: Optional[str],
		details: Any,
	) -> None:
		try:
			pool = await get_pool()
			async with pool.acquire() as conn:
				await conn.execute(
					"""
					INSERT INTO audit_logs (id, action, user_id, target_id, target_type, details, created_at)
					VALUES ($1, $2, $3, $4, $5, $6::jsonb, $7)
					""",
					uuid4(),
					action,
					str(actor_id) if actor_id is not None else None,
					str(target_id) if target_id is not None else None,
					target_type,
					_encode_details(details),
					datetime.now(timezone.utc),
				)
		except Exception as exc:
			raise AuditFault(str(exc)) from exc

	async def record(
		self,
		action: str,
		actor_id: Optional[str],
		target_id: Optional[Any] = None,
		target_type: Optional[str] = None,
		details: Optional[Mapping[str, Any]] = None,
	) -> None:
		try:
			await self._write(action, actor_id, target_id, target_type, details)
		except AuditFault:
			metrics.audit_write(False)
			_log.warning(
				"audit_write_failed",
				exc_info=True,
				extra={
					"action": action,
					"actor_id": actor_id,
					"target_id": str(target_id) if target_id is not None else None,
					"target_type": target_type,
				},
			)
			return
		metrics.audit_write(True)

	async def fetch(
		self,
		*,
		user_id: Optional[str] = None,
		target_type: Optional[str] = None,
		target_id: Optional[str] = None,
		limit: int = 50,
	) -> list[AuditRecord]:
		"""Return the most recent audit records matching every given filter."""
		conditions: list[str] = []
		values: list[Any] = []
		for column, value in (("user_id", user_id), ("target_type", target_type), ("target_id", target_id)):
			if value is None:
				continue
			values.append(str(value))
			conditions.append(f"{column} = ${len(values)}")
		values.append(max(1, min(limit, MAX_FETCH_LIMIT)))
		where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				SELECT id, action, user_id, target_id, target_type, details, created_at
				FROM audit_logs
				{where}
				ORDER BY created_at DESC
				LIMIT ${len(values)}
				""",
				*values,
			)
		records = []
		for row in rows:
			data = dict(row)
			data["details"] = _decode_details(data.get("details"))
			if data.get("target_id") is not None:
				data["target_id"] = str(data["target_id"])
			records.append(AuditRecord.model_validate(data))
		return records


audit_logger = AuditLogger()
