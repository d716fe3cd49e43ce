"""Member administration and credential workflows."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from familyhub.domain.common import policies
from familyhub.domain.common.crud import AuditedCrud
from familyhub.domain.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError, ValidationError
from familyhub.domain.members import models, schemas
from familyhub.domain.members.repo import MemberRepository
from familyhub.infra import jwt as jwt_helper
from familyhub.infra.auth import AuthenticatedUser
from familyhub.infra.password import check_needs_rehash, hash_password, verify_password
from familyhub.obs.audit import AuditLogger
from familyhub.settings import roles_for


class MemberService:
	def __init__(self, repository: Optional[MemberRepository] = None, *, audit: Optional[AuditLogger] = None) -> None:
		self.repository = repository or MemberRepository()
		self.crud: AuditedCrud[models.Member] = AuditedCrud(
			self.repository,
			target_type="member",
			write_roles="member_admin",
			delete_roles="member_admin",
			audit=audit,
		)

	async def list_members(
		self,
		actor: Optional[AuthenticatedUser],
		*,
		role: Optional[str] = None,
		status: Optional[str] = None,
		q: Optional[str] = None,
	) -> List[models.Member]:
		policies.require_roles(actor, roles_for("member_manage"))
		return await self.crud.list({"role": role, "status": status}, search=q)

	async def get_member(self, member_id: UUID | str) -> models.Member:
		return await self.crud.get(member_id)

	async def create_member(self, actor: Optional[AuthenticatedUser], payload: schemas.MemberCreate) -> models.Member:
		actor = policies.require_roles(actor, roles_for("member_manage"))
		data = payload.model_dump(exclude={"password"})
		data["password_hash"] = hash_password(payload.password)
		member = await self.repository.create(data)
		await self.crud.record("create", actor, member.id, {"email": member.email, "role": member.role})
		return member

	async def update_member(
		self, actor: Optional[AuthenticatedUser], member_id: UUID, payload: schemas.MemberUpdate
	) -> models.Member:
		actor = self.crud.authorize_write(actor)
		changes = payload.model_dump(exclude_unset=True)
		if changes.get("status") == "inactive":
			policies.assert_not_self(actor, member_id)
		if "password" in changes:
			changes["password_hash"] = hash_password(changes.pop("password"))
		member = await self.repository.update(member_id, changes)
		if member is None:
			raise NotFoundError(self.crud.not_found)
		await self.crud.record("update", actor, member_id, {"fields": sorted(changes)})
		return member

	async def set_status(
		self, actor: Optional[AuthenticatedUser], member_id: UUID, payload: schemas.StatusUpdate
	) -> models.Member:
		actor = self.crud.authorize_write(actor)
		policies.assert_not_self(actor, member_id)
		member = await self.repository.update(member_id, {"status": payload.status})
		if member is None:
			raise NotFoundError(self.crud.not_found)
		await self.crud.record("status_change", actor, member_id, {"status": payload.status})
		return member

	async def delete_member(self, actor: Optional[AuthenticatedUser], member_id: UUID) -> None:
		actor = self.crud.authorize_delete(actor)
		policies.assert_not_self(actor, member_id)
		if not await self.repository.delete(member_id):
			raise NotFoundError(self.crud.not_found)
		await self.crud.record("delete", actor, member_id)

	async def login(self, payload: schemas.LoginRequest) -> models.LoginResult:
		found = await self.repository.credentials(email=payload.email)
		if found is None or not verify_password(found[1], payload.password):
			raise UnauthenticatedError("invalid_credentials")
		member, password_hash = found
		if member.status != "active":
			raise ForbiddenError("account_inactive")
		if check_needs_rehash(password_hash):
			await self.repository.update(member.id, {"password_hash": hash_password(payload.password)})
		token = jwt_helper.issue_for_member(str(member.id), member.email, member.name, (member.role,))
		await self.crud.audit.record("login", str(member.id), member.id, "member")
		return models.LoginResult(access_token=token, user=member)

	async def change_password(
		self, actor: Optional[AuthenticatedUser], payload: schemas.ChangePasswordRequest
	) -> None:
		actor = policies.require_actor(actor)
		found = await self.repository.credentials(member_id=actor.id)
		if found is None:
			raise NotFoundError(self.crud.not_found)
		if not verify_password(found[1], payload.current_password):
			raise ValidationError("invalid_current_password")
		await self.repository.update(actor.id, {"password_hash": hash_password(payload.new_password)})
		await self.crud.record("change_password", actor, actor.id)
