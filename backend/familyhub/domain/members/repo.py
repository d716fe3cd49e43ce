"""Postgres access for members (``users`` table)."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple
from uuid import UUID

import asyncpg

from familyhub.domain.common.repository import FilterSpec, TableRepository, TableSpec
from familyhub.domain.exceptions import ConflictError
from familyhub.domain.members import models

MEMBERS = TableSpec(
	table="users",
	model=models.Member,
	alias="u",
	columns=(
		"email",
		"password_hash",
		"name",
		"role",
		"phone",
		"birth_date",
		"address",
		"bio",
		"avatar_url",
		"status",
	),
	updatable=(
		"email",
		"password_hash",
		"name",
		"role",
		"phone",
		"birth_date",
		"address",
		"bio",
		"avatar_url",
		"status",
	),
	filters={"role": FilterSpec("role"), "status": FilterSpec("status")},
	search_columns=("name", "email"),
	order_by="name ASC",
)


class MemberRepository(TableRepository[models.Member]):
	spec = MEMBERS

	async def create(self, data: Mapping[str, Any], *, conn: Optional[asyncpg.Connection] = None) -> models.Member:
		try:
			return await super().create(data, conn=conn)
		except asyncpg.UniqueViolationError as exc:
			raise ConflictError("email_taken") from exc

	async def update(
		self,
		entity_id: UUID | str,
		changes: Mapping[str, Any],
		*,
		conn: Optional[asyncpg.Connection] = None,
	) -> Optional[models.Member]:
		try:
			return await super().update(entity_id, changes, conn=conn)
		except asyncpg.UniqueViolationError as exc:
			raise ConflictError("email_taken") from exc

	async def credentials(self, *, email: Optional[str] = None, member_id: UUID | str | None = None) -> Optional[Tuple[models.Member, str]]:
		"""Return the member and its password hash, looked up by email or id."""
		column, value = ("email", email) if email is not None else ("id", member_id)
		async with self.connection() as conn:
			record = await conn.fetchrow(f"SELECT * FROM users WHERE {column} = $1", value)
		if record is None:
			return None
		return models.Member.model_validate(dict(record)), record["password_hash"]
