"""Postgres access for monthly contribution sessions."""

from __future__ import annotations

from familyhub.domain.common.repository import FilterSpec, TableRepository, TableSpec
from familyhub.domain.monthly import models

SESSIONS = TableSpec(
	table="monthly_contribution_sessions",
	model=models.MonthlySession,
	alias="s",
	columns=(
		"name",
		"description",
		"start_date",
		"monthly_target_amount",
		"duration_months",
		"payment_deadline_day",
		"status",
		"created_by",
	),
	updatable=(
		"name",
		"description",
		"start_date",
		"monthly_target_amount",
		"duration_months",
		"payment_deadline_day",
		"status",
	),
	filters={"status": FilterSpec("status")},
	search_columns=("name", "description"),
)

ASSIGNMENTS = TableSpec(
	table="monthly_contribution_assignments",
	model=models.MonthlyAssignment,
	alias="a",
	columns=("session_id", "user_id", "monthly_amount"),
	updatable=("monthly_amount",),
	filters={"session_id": FilterSpec("session_id"), "user_id": FilterSpec("user_id")},
	order_by="created_at ASC",
	select_extra=", u.name AS user_name",
	joins=" LEFT JOIN users u ON u.id = a.user_id",
)


class SessionRepository(TableRepository[models.MonthlySession]):
	spec = SESSIONS


class MonthlyAssignmentRepository(TableRepository[models.MonthlyAssignment]):
	spec = ASSIGNMENTS
