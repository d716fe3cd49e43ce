"""Login and self-service credential endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from familyhub.api.members import get_member_service
from familyhub.domain.members import models, schemas
from familyhub.domain.members.service import MemberService
from familyhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/auth", tags=["identity"])


@router.post("/login", response_model=models.LoginResult)
async def login(
	payload: schemas.LoginRequest,
	service: MemberService = Depends(get_member_service),
) -> models.LoginResult:
	return await service.login(payload)


@router.get("/me", response_model=models.Member)
async def me(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MemberService = Depends(get_member_service),
) -> models.Member:
	return await service.get_member(auth_user.id)


@router.post("/change-password")
async def change_password(
	payload: schemas.ChangePasswordRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MemberService = Depends(get_member_service),
) -> dict[str, bool]:
	await service.change_password(auth_user, payload)
	return {"ok": True}
