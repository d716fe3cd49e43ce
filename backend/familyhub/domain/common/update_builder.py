"""Build parameterised ``UPDATE ... SET`` statements from sparse change sets.

Fields carrying :data:`UNSET` are skipped; an explicit ``None`` is kept and
clears the column. ``updated_at`` is always the last assignment, and the
row id is bound after it, so placeholder ``$n`` always lines up with
``params[n - 1]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

__all__ = ["UNSET", "UpdatePlan", "build_update"]


class _Unset:
	_instance: Optional["_Unset"] = None

	def __new__(cls) -> "_Unset":
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance

	def __bool__(self) -> bool:
		return False

	def __repr__(self) -> str:
		return "UNSET"


UNSET: Any = _Unset()

TIMESTAMP_COLUMN = "updated_at"


@dataclass(slots=True)
class UpdatePlan:
	columns: List[str] = field(default_factory=list)
	assignments: List[str] = field(default_factory=list)
	params: List[Any] = field(default_factory=list)

	@property
	def is_empty(self) -> bool:
		return not self.columns

	def statement(self, table: str, *, key_column: str = "id") -> str:
		"""Render the full statement; the key is bound as the last parameter."""
		if self.is_empty:
			raise ValueError("empty update plan")
		return (
			f"UPDATE {table} SET {', '.join(self.assignments)} "
			f"WHERE {key_column} = ${len(self.params) + 1} RETURNING *"
		)


def build_update(
	changes: Mapping[str, Any],
	*,
	allowed: Iterable[str],
	now: Optional[datetime] = None,
) -> UpdatePlan:
	"""Translate ``changes`` into ordered assignments and matching params.

	Columns outside ``allowed`` raise ``ValueError``. An empty plan (no
	eligible fields) gets no timestamp assignment either, so callers can
	short-circuit without issuing a write.
	"""
	allowed_set = frozenset(allowed)
	plan = UpdatePlan()
	for column, value in changes.items():
		if value is UNSET:
			continue
		if column not in allowed_set:
			raise ValueError(f"column not updatable: {column}")
		plan.params.append(value)
		plan.columns.append(column)
		plan.assignments.append(f"{column} = ${len(plan.params)}")
	if plan.is_empty:
		return plan
	plan.params.append(now or datetime.now(timezone.utc))
	plan.assignments.append(f"{TIMESTAMP_COLUMN} = ${len(plan.params)}")
	return plan
