"""Project API routes: projects, phases, participants, contributions and assignments."""

from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from familyhub.api.responses import Deleted
from familyhub.domain.projects import models, schemas
from familyhub.domain.projects.service import ProjectService
from familyhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/projects", tags=["projects"])


def get_project_service() -> ProjectService:
	return ProjectService()


@router.get("", response_model=List[models.Project])
async def list_projects_endpoint(
	status: Optional[schemas.ProjectStatus] = None,
	from_date: Optional[date] = None,
	to_date: Optional[date] = None,
	q: Optional[str] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> List[models.Project]:
	return await service.list_projects(status=status, from_date=from_date, to_date=to_date, q=q)


@router.post("", response_model=models.Project, status_code=201)
async def create_project_endpoint(
	payload: schemas.ProjectCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.Project:
	return await service.create_project(auth_user, payload)


# Phases

@router.post("/phases", response_model=models.ProjectPhase, status_code=201)
async def add_phase_endpoint(
	payload: schemas.PhaseCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.ProjectPhase:
	return await service.add_phase(auth_user, payload)


@router.api_route("/phases/{phase_id}", methods=["PUT", "PATCH"], response_model=models.ProjectPhase)
async def update_phase_endpoint(
	phase_id: UUID,
	payload: schemas.PhaseUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.ProjectPhase:
	return await service.update_phase(auth_user, phase_id, payload)


@router.delete("/phases/{phase_id}", response_model=Deleted)
async def delete_phase_endpoint(
	phase_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> Deleted:
	await service.delete_phase(auth_user, phase_id)
	return Deleted(id=phase_id)


# Participants

@router.post("/participants", response_model=models.ProjectParticipant, status_code=201)
async def add_participant_endpoint(
	payload: schemas.ParticipantCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.ProjectParticipant:
	return await service.add_participant(auth_user, payload)


@router.api_route("/participants/{participant_id}", methods=["PUT", "PATCH"], response_model=models.ProjectParticipant)
async def update_participant_endpoint(
	participant_id: UUID,
	payload: schemas.ParticipantStatusUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.ProjectParticipant:
	return await service.update_participant_status(auth_user, participant_id, payload)


@router.delete("/participants/{participant_id}", response_model=Deleted)
async def remove_participant_endpoint(
	participant_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> Deleted:
	await service.remove_participant(auth_user, participant_id)
	return Deleted(id=participant_id)


# Contributions

@router.post("/contributions", response_model=models.ProjectContribution, status_code=201)
async def add_project_contribution_endpoint(
	payload: schemas.ContributionCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.ProjectContribution:
	return await service.add_contribution(auth_user, payload)


@router.api_route("/contributions/{contribution_id}", methods=["PUT", "PATCH"], response_model=models.ProjectContribution)
async def update_project_contribution_endpoint(
	contribution_id: UUID,
	payload: schemas.ContributionUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.ProjectContribution:
	return await service.update_contribution(auth_user, contribution_id, payload)


@router.delete("/contributions/{contribution_id}", response_model=Deleted)
async def delete_project_contribution_endpoint(
	contribution_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> Deleted:
	await service.delete_contribution(auth_user, contribution_id)
	return Deleted(id=contribution_id)


# Contribution assignments

@router.post("/assignments", response_model=models.ProjectAssignment, status_code=201)
async def create_project_assignment_endpoint(
	payload: schemas.AssignmentCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.ProjectAssignment:
	return await service.create_assignment(auth_user, payload)


@router.api_route("/assignments/{assignment_id}", methods=["PUT", "PATCH"], response_model=models.ProjectAssignment)
async def update_project_assignment_endpoint(
	assignment_id: UUID,
	payload: schemas.AssignmentUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.ProjectAssignment:
	return await service.update_assignment(auth_user, assignment_id, payload)


@router.delete("/assignments/{assignment_id}", response_model=Deleted)
async def delete_project_assignment_endpoint(
	assignment_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> Deleted:
	await service.delete_assignment(auth_user, assignment_id)
	return Deleted(id=assignment_id)


# Single project and its children

@router.get("/{project_id}", response_model=models.Project)
async def get_project_endpoint(
	project_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.Project:
	return await service.get_project(project_id)


@router.api_route("/{project_id}", methods=["PUT", "PATCH"], response_model=models.Project)
async def update_project_endpoint(
	project_id: UUID,
	payload: schemas.ProjectUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> models.Project:
	return await service.update_project(auth_user, project_id, payload)


@router.delete("/{project_id}", response_model=Deleted)
async def delete_project_endpoint(
	project_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> Deleted:
	await service.delete_project(auth_user, project_id)
	return Deleted(id=project_id)


@router.get("/{project_id}/phases", response_model=List[models.ProjectPhase])
async def list_phases_endpoint(
	project_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> List[models.ProjectPhase]:
	return await service.list_phases(project_id)


@router.get("/{project_id}/participants", response_model=List[models.ProjectParticipant])
async def list_project_participants_endpoint(
	project_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> List[models.ProjectParticipant]:
	return await service.list_participants(project_id)


@router.get("/{project_id}/contributions", response_model=List[models.ProjectContribution])
async def list_project_contributions_endpoint(
	project_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> List[models.ProjectContribution]:
	return await service.list_contributions(project_id)


@router.get("/{project_id}/assignments", response_model=List[models.ProjectAssignment])
async def list_project_assignments_endpoint(
	project_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ProjectService = Depends(get_project_service),
) -> List[models.ProjectAssignment]:
	return await service.list_assignments(project_id)
