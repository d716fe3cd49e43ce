"""Event API routes: events, participants, contributions and assignments."""

from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from familyhub.api.responses import Deleted
from familyhub.domain.events import models, schemas
from familyhub.domain.events.service import EventService
from familyhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/events", tags=["events"])


def get_event_service() -> EventService:
	return EventService()


@router.get("", response_model=List[models.Event])
async def list_events_endpoint(
	status: Optional[schemas.EventStatus] = None,
	from_date: Optional[date] = None,
	to_date: Optional[date] = None,
	q: Optional[str] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> List[models.Event]:
	return await service.list_events(status=status, from_date=from_date, to_date=to_date, q=q)


@router.post("", response_model=models.Event, status_code=201)
async def create_event_endpoint(
	payload: schemas.EventCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.Event:
	return await service.create_event(auth_user, payload)


# Participants

@router.post("/participants", response_model=models.EventParticipant, status_code=201)
async def add_participant_endpoint(
	payload: schemas.ParticipantCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.EventParticipant:
	return await service.add_participant(auth_user, payload)


@router.api_route("/participants/{participant_id}", methods=["PUT", "PATCH"], response_model=models.EventParticipant)
async def update_participant_endpoint(
	participant_id: UUID,
	payload: schemas.ParticipantStatusUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.EventParticipant:
	return await service.update_participant_status(auth_user, participant_id, payload)


@router.delete("/participants/{participant_id}", response_model=Deleted)
async def remove_participant_endpoint(
	participant_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> Deleted:
	await service.remove_participant(auth_user, participant_id)
	return Deleted(id=participant_id)


# Event contributions

@router.post("/contributions", response_model=models.EventContribution, status_code=201)
async def add_event_contribution_endpoint(
	payload: schemas.EventContributionCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.EventContribution:
	return await service.add_contribution(auth_user, payload)


@router.api_route("/contributions/{contribution_id}", methods=["PUT", "PATCH"], response_model=models.EventContribution)
async def update_event_contribution_endpoint(
	contribution_id: UUID,
	payload: schemas.EventContributionUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.EventContribution:
	return await service.update_contribution(auth_user, contribution_id, payload)


@router.delete("/contributions/{contribution_id}", response_model=Deleted)
async def delete_event_contribution_endpoint(
	contribution_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> Deleted:
	await service.delete_contribution(auth_user, contribution_id)
	return Deleted(id=contribution_id)


# Contribution assignments

@router.post("/assignments", response_model=models.EventAssignment, status_code=201)
async def create_assignment_endpoint(
	payload: schemas.AssignmentCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.EventAssignment:
	return await service.create_assignment(auth_user, payload)


@router.api_route("/assignments/{assignment_id}", methods=["PUT", "PATCH"], response_model=models.EventAssignment)
async def update_assignment_endpoint(
	assignment_id: UUID,
	payload: schemas.AssignmentUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.EventAssignment:
	return await service.update_assignment(auth_user, assignment_id, payload)


@router.delete("/assignments/{assignment_id}", response_model=Deleted)
async def delete_assignment_endpoint(
	assignment_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> Deleted:
	await service.delete_assignment(auth_user, assignment_id)
	return Deleted(id=assignment_id)


# Single event and its children

@router.get("/{event_id}", response_model=models.Event)
async def get_event_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.Event:
	return await service.get_event(event_id)


@router.api_route("/{event_id}", methods=["PUT", "PATCH"], response_model=models.Event)
async def update_event_endpoint(
	event_id: UUID,
	payload: schemas.EventUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> models.Event:
	return await service.update_event(auth_user, event_id, payload)


@router.delete("/{event_id}", response_model=Deleted)
async def delete_event_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> Deleted:
	await service.delete_event(auth_user, event_id)
	return Deleted(id=event_id)


@router.get("/{event_id}/participants", response_model=List[models.EventParticipant])
async def list_participants_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> List[models.EventParticipant]:
	return await service.list_participants(event_id)


@router.get("/{event_id}/contributions", response_model=List[models.EventContribution])
async def list_event_contributions_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> List[models.EventContribution]:
	return await service.list_contributions(event_id)


@router.get("/{event_id}/assignments", response_model=List[models.EventAssignment])
async def list_assignments_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: EventService = Depends(get_event_service),
) -> List[models.EventAssignment]:
	return await service.list_assignments(event_id)
