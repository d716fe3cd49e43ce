"""Row models and financial aggregates for contributions."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict

STATUSES = ("pending", "completed", "refunded", "cancelled")
SOURCE_TYPES = ("monthly", "event", "project", "other")

_ZERO = Decimal("0")


class Contribution(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	user_id: UUID
	amount: Decimal
	payment_date: date
	payment_method: str
	status: str
	source_type: str
	source_id: Optional[UUID] = None
	notes: Optional[str] = None
	receipt_path: Optional[str] = None
	user_name: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class FinancialSummary(BaseModel):
	"""Totals by status and source.

	Cancelled contributions only count toward ``total_cancelled``; the overall
	total and the per-source totals leave them out.
	"""

	total_contributions: Decimal = _ZERO
	total_pending: Decimal = _ZERO
	total_completed: Decimal = _ZERO
	total_refunded: Decimal = _ZERO
	total_cancelled: Decimal = _ZERO
	monthly_contributions: Decimal = _ZERO
	event_contributions: Decimal = _ZERO
	project_contributions: Decimal = _ZERO
	other_contributions: Decimal = _ZERO

	@classmethod
	def from_buckets(cls, buckets: Iterable[Tuple[str, str, Any]]) -> "FinancialSummary":
		"""Fold ``(status, source_type, amount)`` rows into a summary."""
		totals: Dict[str, Decimal] = {}
		for status, source_type, amount in buckets:
			value = Decimal(str(amount or 0))
			if status in STATUSES:
				key = f"total_{status}"
				totals[key] = totals.get(key, _ZERO) + value
			if status == "cancelled":
				continue
			totals["total_contributions"] = totals.get("total_contributions", _ZERO) + value
			if source_type in SOURCE_TYPES:
				key = f"{source_type}_contributions"
				totals[key] = totals.get(key, _ZERO) + value
		return cls(**totals)


class FinancialPeriodSummary(BaseModel):
	period: str
	total_amount: Decimal = _ZERO
	completed_amount: Decimal = _ZERO
	pending_amount: Decimal = _ZERO

	@classmethod
	def fold(cls, buckets: Iterable[Tuple[str, str, Any]]) -> List["FinancialPeriodSummary"]:
		"""Fold ``(period, status, amount)`` rows, keeping first-seen period order."""
		periods: Dict[str, FinancialPeriodSummary] = {}
		for period, status, amount in buckets:
			value = Decimal(str(amount or 0))
			summary = periods.setdefault(period, cls(period=period))
			if status == "cancelled":
				continue
			summary.total_amount += value
			if status == "completed":
				summary.completed_amount += value
			elif status == "pending":
				summary.pending_amount += value
		return list(periods.values())


class PaymentMethodStat(BaseModel):
	payment_method: str
	count: int
	total_amount: Decimal


class TopContributor(BaseModel):
	user_id: UUID
	user_name: Optional[str] = None
	contribution_count: int
	total_amount: Decimal


def bucket_rows(records: Iterable[Mapping[str, Any]], *keys: str) -> List[Tuple[Any, ...]]:
	return [tuple(record[key] for key in keys) for record in records]
