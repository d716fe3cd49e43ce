"""Member administration and audit-trail API routes."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from familyhub.api.responses import Deleted
from familyhub.domain.common import policies
from familyhub.domain.members import models, schemas
from familyhub.domain.members.service import MemberService
from familyhub.infra.auth import AuthenticatedUser, get_current_user
from familyhub.obs.audit import MAX_FETCH_LIMIT, AuditLogger, AuditRecord, audit_logger
from familyhub.settings import roles_for

router = APIRouter(tags=["members"])


def get_member_service() -> MemberService:
	return MemberService()


def get_audit_logger() -> AuditLogger:
	return audit_logger


@router.get("/api/members", response_model=List[models.Member])
async def list_members_endpoint(
	role: Optional[schemas.MemberRole] = None,
	status: Optional[schemas.MemberStatus] = None,
	q: Optional[str] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MemberService = Depends(get_member_service),
) -> List[models.Member]:
	return await service.list_members(auth_user, role=role, status=status, q=q)


@router.post("/api/members", response_model=models.Member, status_code=201)
async def create_member_endpoint(
	payload: schemas.MemberCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MemberService = Depends(get_member_service),
) -> models.Member:
	return await service.create_member(auth_user, payload)


@router.get("/api/members/{member_id}", response_model=models.Member)
async def get_member_endpoint(
	member_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MemberService = Depends(get_member_service),
) -> models.Member:
	return await service.get_member(member_id)


@router.api_route("/api/members/{member_id}", methods=["PUT", "PATCH"], response_model=models.Member)
async def update_member_endpoint(
	member_id: UUID,
	payload: schemas.MemberUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MemberService = Depends(get_member_service),
) -> models.Member:
	return await service.update_member(auth_user, member_id, payload)


@router.patch("/api/members/{member_id}/status", response_model=models.Member)
async def member_status_endpoint(
	member_id: UUID,
	payload: schemas.StatusUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MemberService = Depends(get_member_service),
) -> models.Member:
	return await service.set_status(auth_user, member_id, payload)


@router.delete("/api/members/{member_id}", response_model=Deleted)
async def delete_member_endpoint(
	member_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MemberService = Depends(get_member_service),
) -> Deleted:
	await service.delete_member(auth_user, member_id)
	return Deleted(id=member_id)


@router.get("/api/audit-logs", response_model=List[AuditRecord], tags=["audit"])
async def audit_logs_endpoint(
	user_id: Optional[UUID] = None,
	target_type: Optional[str] = None,
	target_id: Optional[UUID] = None,
	limit: int = Query(default=50, ge=1, le=MAX_FETCH_LIMIT),
	auth_user: AuthenticatedUser = Depends(get_current_user),
	audit: AuditLogger = Depends(get_audit_logger),
) -> List[AuditRecord]:
	policies.require_roles(auth_user, roles_for("audit_read"))
	return await audit.fetch(
		user_id=str(user_id) if user_id else None,
		target_type=target_type,
		target_id=str(target_id) if target_id else None,
		limit=limit,
	)
