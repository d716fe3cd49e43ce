"""Generic asyncpg repository driven by a per-table descriptor.

Each entity family describes its table once with a :class:`TableSpec`;
:class:`TableRepository` turns that description into create / get / list /
update / delete queries. Subclasses add the domain-specific reads.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar
from uuid import UUID, uuid4

import asyncpg
from pydantic import BaseModel

from familyhub.domain.common.update_builder import UNSET, build_update
from familyhub.infra.postgres import get_pool

ModelT = TypeVar("ModelT", bound=BaseModel)

MANAGED_COLUMNS = frozenset({"id", "created_at", "updated_at"})
_OPERATORS = frozenset({"=", ">=", "<=", ">", "<"})


@dataclass(frozen=True, slots=True)
class FilterSpec:
	"""A single conjunctive filter: ``<alias>.<column> <op> $n``."""

	column: str
	op: str = "="

	def __post_init__(self) -> None:
		if self.op not in _OPERATORS:
			raise ValueError(f"unsupported filter operator: {self.op}")


@dataclass(frozen=True)
class TableSpec:
	table: str
	model: Type[BaseModel]
	columns: Sequence[str]
	updatable: Sequence[str] = ()
	filters: Mapping[str, FilterSpec] = field(default_factory=dict)
	search_columns: Sequence[str] = ()
	order_by: str = "created_at DESC"
	alias: str = "t"
	# Read-only enrichment, e.g. ", u.name AS user_name" with a matching join
	select_extra: str = ""
	joins: str = ""

	def __post_init__(self) -> None:
		managed = MANAGED_COLUMNS.intersection(self.columns) | MANAGED_COLUMNS.intersection(self.updatable)
		if managed:
			raise ValueError(f"{self.table}: server-managed columns are not writable: {sorted(managed)}")

	@property
	def select_sql(self) -> str:
		return f"SELECT {self.alias}.*{self.select_extra} FROM {self.table} {self.alias}{self.joins}"

	@property
	def enriched(self) -> bool:
		return bool(self.joins)


def affected_rows(status: str) -> int:
	"""Parse asyncpg command status strings such as ``DELETE 1``."""
	try:
		return int(status.split()[-1])
	except (AttributeError, IndexError, ValueError):
		return 0


class TableRepository(Generic[ModelT]):
	spec: TableSpec

	def __init__(self, spec: Optional[TableSpec] = None) -> None:
		if spec is not None:
			self.spec = spec

	@asynccontextmanager
	async def connection(self, conn: Optional[asyncpg.Connection] = None) -> AsyncIterator[asyncpg.Connection]:
		if conn is not None:
			yield conn
			return
		pool = await get_pool()
		async with pool.acquire() as acquired:
			yield acquired

	@asynccontextmanager
	async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				yield conn

	def _to_model(self, record: Optional[Mapping[str, Any]]) -> Optional[ModelT]:
		if record is None:
			return None
		return self.spec.model.model_validate(dict(record))  # type: ignore[return-value]

	def _to_models(self, records: Iterable[Mapping[str, Any]]) -> List[ModelT]:
		return [self.spec.model.model_validate(dict(record)) for record in records]  # type: ignore[misc]

	async def create(self, data: Mapping[str, Any], *, conn: Optional[asyncpg.Connection] = None) -> ModelT:
		"""Insert a row; id and both timestamps are always generated here."""
		allowed = set(self.spec.columns)
		now = datetime.now(timezone.utc)
		row: Dict[str, Any] = {"id": uuid4()}
		for column, value in data.items():
			if column in allowed and value is not UNSET:
				row[column] = value
		row["created_at"] = now
		row["updated_at"] = now
		columns = list(row)
		placeholders = ", ".join(f"${idx}" for idx in range(1, len(columns) + 1))
		async with self.connection(conn) as active:
			record = await active.fetchrow(
				f"INSERT INTO {self.spec.table} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *",
				*row.values(),
			)
			if self.spec.enriched:
				return await self.get(row["id"], conn=active)  # type: ignore[return-value]
		return self._to_model(record)  # type: ignore[return-value]

	async def get(self, entity_id: UUID | str, *, conn: Optional[asyncpg.Connection] = None) -> Optional[ModelT]:
		async with self.connection(conn) as active:
			record = await active.fetchrow(
				f"{self.spec.select_sql} WHERE {self.spec.alias}.id = $1",
				entity_id,
			)
		return self._to_model(record)

	async def list(
		self,
		filters: Optional[Mapping[str, Any]] = None,
		*,
		search: Optional[str] = None,
		limit: Optional[int] = None,
		conn: Optional[asyncpg.Connection] = None,
	) -> List[ModelT]:
		"""List rows matching every filter (AND); ``search`` is a case-insensitive substring match."""
		alias = self.spec.alias
		conditions: List[str] = []
		values: List[Any] = []
		for key, value in (filters or {}).items():
			if value is None or value is UNSET:
				continue
			filter_spec = self.spec.filters.get(key)
			if filter_spec is None:
				raise ValueError(f"{self.spec.table}: unknown filter {key}")
			values.append(value)
			conditions.append(f"{alias}.{filter_spec.column} {filter_spec.op} ${len(values)}")
		if search and self.spec.search_columns:
			values.append(f"%{search.strip()}%")
			idx = len(values)
			matches = " OR ".join(f"{alias}.{column} ILIKE ${idx}" for column in self.spec.search_columns)
			conditions.append(f"({matches})")
		query = self.spec.select_sql
		if conditions:
			query += " WHERE " + " AND ".join(conditions)
		query += f" ORDER BY {alias}.{self.spec.order_by}"
		if limit is not None:
			values.append(limit)
			query += f" LIMIT ${len(values)}"
		async with self.connection(conn) as active:
			records = await active.fetch(query, *values)
		return self._to_models(records)

	async def update(
		self,
		entity_id: UUID | str,
		changes: Mapping[str, Any],
		*,
		conn: Optional[asyncpg.Connection] = None,
	) -> Optional[ModelT]:
		"""Apply a sparse change set; an empty one returns the current row without writing."""
		plan = build_update(changes, allowed=self.spec.updatable)
		if plan.is_empty:
			return await self.get(entity_id, conn=conn)
		async with self.connection(conn) as active:
			record = await active.fetchrow(plan.statement(self.spec.table), *plan.params, entity_id)
			if record is not None and self.spec.enriched:
				return await self.get(entity_id, conn=active)
		return self._to_model(record)

	async def delete(self, entity_id: UUID | str, *, conn: Optional[asyncpg.Connection] = None) -> bool:
		async with self.connection(conn) as active:
			status = await active.execute(f"DELETE FROM {self.spec.table} WHERE id = $1", entity_id)
		return affected_rows(status) == 1
