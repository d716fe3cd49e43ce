"""Postgres access for projects; child rows cascade with their project."""

from __future__ import annotations

from familyhub.domain.common.repository import FilterSpec, TableRepository, TableSpec
from familyhub.domain.projects import models

PROJECTS = TableSpec(
	table="projects",
	model=models.Project,
	alias="pr",
	columns=("name", "description", "start_date", "end_date", "target_amount", "status", "created_by"),
	updatable=("name", "description", "start_date", "end_date", "target_amount", "status"),
	filters={
		"status": FilterSpec("status"),
		"created_by": FilterSpec("created_by"),
		"from_date": FilterSpec("start_date", ">="),
		"to_date": FilterSpec("start_date", "<="),
	},
	search_columns=("name", "description"),
	order_by="start_date DESC",
)

PHASES = TableSpec(
	table="project_phases",
	model=models.ProjectPhase,
	alias="ph",
	columns=("project_id", "name", "description", "start_date", "end_date", "status"),
	updatable=("name", "description", "start_date", "end_date", "status"),
	filters={"project_id": FilterSpec("project_id"), "status": FilterSpec("status")},
	order_by="start_date ASC NULLS LAST",
)

PROJECT_PARTICIPANTS = TableSpec(
	table="project_participants",
	model=models.ProjectParticipant,
	alias="pp",
	columns=("project_id", "user_id", "status"),
	updatable=("status",),
	filters={"project_id": FilterSpec("project_id"), "user_id": FilterSpec("user_id"), "status": FilterSpec("status")},
	order_by="created_at ASC",
	select_extra=", u.name AS user_name",
	joins=" LEFT JOIN users u ON u.id = pp.user_id",
)

PROJECT_CONTRIBUTIONS = TableSpec(
	table="project_contributions",
	model=models.ProjectContribution,
	alias="pc",
	columns=("project_id", "user_id", "amount", "payment_date", "payment_method", "status", "notes"),
	updatable=("amount", "payment_date", "payment_method", "status", "notes"),
	filters={"project_id": FilterSpec("project_id"), "user_id": FilterSpec("user_id"), "status": FilterSpec("status")},
	order_by="payment_date DESC",
)

PROJECT_ASSIGNMENTS = TableSpec(
	table="project_contribution_assignments",
	model=models.ProjectAssignment,
	alias="pa",
	columns=("project_id", "user_id", "amount", "due_date"),
	updatable=("amount", "due_date"),
	filters={"project_id": FilterSpec("project_id"), "user_id": FilterSpec("user_id")},
	order_by="created_at ASC",
)


class ProjectRepository(TableRepository[models.Project]):
	spec = PROJECTS


class PhaseRepository(TableRepository[models.ProjectPhase]):
	spec = PHASES


class ProjectParticipantRepository(TableRepository[models.ProjectParticipant]):
	spec = PROJECT_PARTICIPANTS


class ProjectContributionRepository(TableRepository[models.ProjectContribution]):
	spec = PROJECT_CONTRIBUTIONS


class ProjectAssignmentRepository(TableRepository[models.ProjectAssignment]):
	spec = PROJECT_ASSIGNMENTS
