"""Postgres access for events and their child tables."""

from __future__ import annotations

from familyhub.domain.common.repository import FilterSpec, TableRepository, TableSpec
from familyhub.domain.events import models

EVENTS = TableSpec(
	table="events",
	model=models.Event,
	alias="e",
	columns=("name", "description", "location", "start_date", "end_date", "target_amount", "status", "created_by"),
	updatable=("name", "description", "location", "start_date", "end_date", "target_amount", "status"),
	filters={
		"status": FilterSpec("status"),
		"created_by": FilterSpec("created_by"),
		"from_date": FilterSpec("start_date", ">="),
		"to_date": FilterSpec("start_date", "<="),
	},
	search_columns=("name", "description", "location"),
	order_by="start_date DESC",
)

PARTICIPANTS = TableSpec(
	table="event_participants",
	model=models.EventParticipant,
	alias="p",
	columns=("event_id", "user_id", "status"),
	updatable=("status",),
	filters={"event_id": FilterSpec("event_id"), "user_id": FilterSpec("user_id"), "status": FilterSpec("status")},
	order_by="created_at ASC",
	select_extra=", u.name AS user_name",
	joins=" LEFT JOIN users u ON u.id = p.user_id",
)

EVENT_CONTRIBUTIONS = TableSpec(
	table="event_contributions",
	model=models.EventContribution,
	alias="ec",
	columns=("event_id", "user_id", "amount", "payment_date", "payment_method", "status", "notes"),
	updatable=("amount", "payment_date", "payment_method", "status", "notes"),
	filters={"event_id": FilterSpec("event_id"), "user_id": FilterSpec("user_id"), "status": FilterSpec("status")},
	order_by="payment_date DESC",
)

ASSIGNMENTS = TableSpec(
	table="event_contribution_assignments",
	model=models.EventAssignment,
	alias="ea",
	columns=("event_id", "user_id", "amount", "due_date"),
	updatable=("amount", "due_date"),
	filters={"event_id": FilterSpec("event_id"), "user_id": FilterSpec("user_id")},
	order_by="created_at ASC",
)


class EventRepository(TableRepository[models.Event]):
	spec = EVENTS


class ParticipantRepository(TableRepository[models.EventParticipant]):
	spec = PARTICIPANTS


class EventContributionRepository(TableRepository[models.EventContribution]):
	spec = EVENT_CONTRIBUTIONS


class EventAssignmentRepository(TableRepository[models.EventAssignment]):
	spec = ASSIGNMENTS
