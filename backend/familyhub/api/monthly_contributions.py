"""Monthly contribution session API routes."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from familyhub.api.responses import Deleted
from familyhub.domain.monthly import models, schemas
from familyhub.domain.monthly.service import MonthlyContributionService
from familyhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/monthly-contributions", tags=["monthly-contributions"])


def get_monthly_service() -> MonthlyContributionService:
	return MonthlyContributionService()


@router.get("", response_model=List[models.MonthlySession])
async def list_sessions_endpoint(
	status: Optional[schemas.SessionStatus] = None,
	q: Optional[str] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> List[models.MonthlySession]:
	return await service.list_sessions(status=status, q=q)


@router.post("", response_model=models.MonthlySession, status_code=201)
async def create_session_endpoint(
	payload: schemas.SessionCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> models.MonthlySession:
	return await service.create_session(auth_user, payload)


@router.post("/assignments", response_model=models.MonthlyAssignment, status_code=201)
async def create_assignment_endpoint(
	payload: schemas.AssignmentCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> models.MonthlyAssignment:
	return await service.create_assignment(auth_user, payload)


@router.api_route("/assignments/{assignment_id}", methods=["PUT", "PATCH"], response_model=models.MonthlyAssignment)
async def update_assignment_endpoint(
	assignment_id: UUID,
	payload: schemas.AssignmentUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> models.MonthlyAssignment:
	return await service.update_assignment(auth_user, assignment_id, payload)


@router.delete("/assignments/{assignment_id}", response_model=Deleted)
async def delete_assignment_endpoint(
	assignment_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> Deleted:
	await service.delete_assignment(auth_user, assignment_id)
	return Deleted(id=assignment_id)


@router.get("/{session_id}", response_model=models.MonthlySession)
async def get_session_endpoint(
	session_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> models.MonthlySession:
	return await service.get_session(session_id)


@router.api_route("/{session_id}", methods=["PUT", "PATCH"], response_model=models.MonthlySession)
async def update_session_endpoint(
	session_id: UUID,
	payload: schemas.SessionUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> models.MonthlySession:
	return await service.update_session(auth_user, session_id, payload)


@router.delete("/{session_id}", response_model=Deleted)
async def delete_session_endpoint(
	session_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> Deleted:
	await service.delete_session(auth_user, session_id)
	return Deleted(id=session_id)


@router.get("/{session_id}/assignments", response_model=List[models.MonthlyAssignment])
async def list_assignments_endpoint(
	session_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MonthlyContributionService = Depends(get_monthly_service),
) -> List[models.MonthlyAssignment]:
	return await service.list_assignments(session_id)
