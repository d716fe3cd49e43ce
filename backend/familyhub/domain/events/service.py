"""Event workflows composed from one audited CRUD per table."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from familyhub.domain.common.crud import AuditedCrud
from familyhub.domain.events import models, schemas
from familyhub.domain.events.repo import (
	EventAssignmentRepository,
	EventContributionRepository,
	EventRepository,
	ParticipantRepository,
)
from familyhub.infra.auth import AuthenticatedUser
from familyhub.obs.audit import AuditLogger


class EventService:
	def __init__(
		self,
		events: Optional[EventRepository] = None,
		participants: Optional[ParticipantRepository] = None,
		contributions: Optional[EventContributionRepository] = None,
		assignments: Optional[EventAssignmentRepository] = None,
		*,
		audit: Optional[AuditLogger] = None,
	) -> None:
		def crud(repository, target_type: str) -> AuditedCrud:
			return AuditedCrud(
				repository,
				target_type=target_type,
				write_roles="event_write",
				delete_roles="event_delete",
				audit=audit,
			)

		self.events: AuditedCrud[models.Event] = crud(events or EventRepository(), "event")
		self.participants: AuditedCrud[models.EventParticipant] = crud(
			participants or ParticipantRepository(), "event_participant"
		)
		self.contributions: AuditedCrud[models.EventContribution] = crud(
			contributions or EventContributionRepository(), "event_contribution"
		)
		self.assignments: AuditedCrud[models.EventAssignment] = crud(
			assignments or EventAssignmentRepository(), "event_assignment"
		)

	async def list_events(
		self,
		*,
		status: Optional[str] = None,
		from_date=None,
		to_date=None,
		q: Optional[str] = None,
	) -> List[models.Event]:
		return await self.events.list({"status": status, "from_date": from_date, "to_date": to_date}, search=q)

	async def get_event(self, event_id: UUID) -> models.Event:
		return await self.events.get(event_id)

	async def create_event(self, actor: Optional[AuthenticatedUser], payload: schemas.EventCreate) -> models.Event:
		data = payload.model_dump()
		data["created_by"] = actor.id if actor is not None else None
		return await self.events.create(actor, data)

	async def update_event(self, actor: Optional[AuthenticatedUser], event_id: UUID, payload: schemas.EventUpdate) -> models.Event:
		return await self.events.update(actor, event_id, payload.model_dump(exclude_unset=True))

	async def delete_event(self, actor: Optional[AuthenticatedUser], event_id: UUID) -> None:
		await self.events.delete(actor, event_id)

	# Participants

	async def list_participants(self, event_id: UUID) -> List[models.EventParticipant]:
		return await self.participants.list({"event_id": event_id})

	async def add_participant(
		self, actor: Optional[AuthenticatedUser], payload: schemas.ParticipantCreate
	) -> models.EventParticipant:
		return await self.participants.create(actor, payload.model_dump())

	async def update_participant_status(
		self, actor: Optional[AuthenticatedUser], participant_id: UUID, payload: schemas.ParticipantStatusUpdate
	) -> models.EventParticipant:
		return await self.participants.update(actor, participant_id, {"status": payload.status})

	async def remove_participant(self, actor: Optional[AuthenticatedUser], participant_id: UUID) -> None:
		await self.participants.delete(actor, participant_id)

	# Event contributions

	async def list_contributions(self, event_id: UUID) -> List[models.EventContribution]:
		return await self.contributions.list({"event_id": event_id})

	async def add_contribution(
		self, actor: Optional[AuthenticatedUser], payload: schemas.EventContributionCreate
	) -> models.EventContribution:
		return await self.contributions.create(actor, payload.model_dump())

	async def update_contribution(
		self, actor: Optional[AuthenticatedUser], contribution_id: UUID, payload: schemas.EventContributionUpdate
	) -> models.EventContribution:
		return await self.contributions.update(actor, contribution_id, payload.model_dump(exclude_unset=True))

	async def delete_contribution(self, actor: Optional[AuthenticatedUser], contribution_id: UUID) -> None:
		await self.contributions.delete(actor, contribution_id)

	# Contribution assignments

	async def list_assignments(self, event_id: UUID) -> List[models.EventAssignment]:
		return await self.assignments.list({"event_id": event_id})

	async def create_assignment(
		self, actor: Optional[AuthenticatedUser], payload: schemas.AssignmentCreate
	) -> models.EventAssignment:
		return await self.assignments.create(actor, payload.model_dump())

	async def update_assignment(
		self, actor: Optional[AuthenticatedUser], assignment_id: UUID, payload: schemas.AssignmentUpdate
	) -> models.EventAssignment:
		return await self.assignments.update(actor, assignment_id, payload.model_dump(exclude_unset=True))

	async def delete_assignment(self, actor: Optional[AuthenticatedUser], assignment_id: UUID) -> None:
		await self.assignments.delete(actor, assignment_id)
