"""Postgres access for contributions and their financial aggregates."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from familyhub.domain.common.repository import FilterSpec, TableRepository, TableSpec
from familyhub.domain.contributions import models

CONTRIBUTIONS = TableSpec(
	table="contributions",
	model=models.Contribution,
	alias="c",
	columns=(
		"user_id",
		"amount",
		"payment_date",
		"payment_method",
		"status",
		"source_type",
		"source_id",
		"notes",
		"receipt_path",
	),
	updatable=(
		"user_id",
		"amount",
		"payment_date",
		"payment_method",
		"status",
		"source_type",
		"source_id",
		"notes",
		"receipt_path",
	),
	filters={
		"user_id": FilterSpec("user_id"),
		"status": FilterSpec("status"),
		"source_type": FilterSpec("source_type"),
		"source_id": FilterSpec("source_id"),
		"payment_method": FilterSpec("payment_method"),
		"from_date": FilterSpec("payment_date", ">="),
		"to_date": FilterSpec("payment_date", "<="),
	},
	search_columns=("notes", "payment_method"),
	order_by="payment_date DESC",
	select_extra=", u.name AS user_name",
	joins=" LEFT JOIN users u ON u.id = c.user_id",
)


class ContributionRepository(TableRepository[models.Contribution]):
	spec = CONTRIBUTIONS

	async def summary(self, user_id: Optional[UUID] = None) -> models.FinancialSummary:
		where, args = ("WHERE user_id = $1", [user_id]) if user_id is not None else ("", [])
		async with self.connection() as conn:
			records = await conn.fetch(
				f"""
				SELECT status, source_type, COALESCE(SUM(amount), 0) AS total
				FROM contributions
				{where}
				GROUP BY status, source_type
				""",
				*args,
			)
		return models.FinancialSummary.from_buckets(
			models.bucket_rows(records, "status", "source_type", "total")
		)

	async def period_summaries(self, granularity: str, year: Optional[int] = None) -> List[models.FinancialPeriodSummary]:
		"""Totals per ``YYYY-MM`` (granularity ``month``) or ``YYYY`` (``year``), newest first."""
		pattern = {"month": "YYYY-MM", "year": "YYYY"}[granularity]
		where, args = ("WHERE EXTRACT(YEAR FROM payment_date) = $2", [year]) if year is not None else ("", [])
		async with self.connection() as conn:
			records = await conn.fetch(
				f"""
				SELECT to_char(payment_date, $1) AS period, status, COALESCE(SUM(amount), 0) AS total
				FROM contributions
				{where}
				GROUP BY 1, 2
				ORDER BY 1 DESC
				""",
				pattern,
				*args,
			)
		return models.FinancialPeriodSummary.fold(models.bucket_rows(records, "period", "status", "total"))

	async def payment_method_stats(self) -> List[models.PaymentMethodStat]:
		async with self.connection() as conn:
			records = await conn.fetch(
				"""
				SELECT payment_method, COUNT(*) AS count, COALESCE(SUM(amount), 0) AS total_amount
				FROM contributions
				WHERE status = 'completed'
				GROUP BY payment_method
				ORDER BY total_amount DESC
				"""
			)
		return [models.PaymentMethodStat.model_validate(dict(record)) for record in records]

	async def top_contributors(self, limit: int = 10) -> List[models.TopContributor]:
		async with self.connection() as conn:
			records = await conn.fetch(
				"""
				SELECT c.user_id, u.name AS user_name, COUNT(*) AS contribution_count,
					COALESCE(SUM(c.amount), 0) AS total_amount
				FROM contributions c
				LEFT JOIN users u ON u.id = c.user_id
				WHERE c.status = 'completed'
				GROUP BY c.user_id, u.name
				ORDER BY total_amount DESC
				LIMIT $1
				""",
				limit,
			)
		return [models.TopContributor.model_validate(dict(record)) for record in records]
