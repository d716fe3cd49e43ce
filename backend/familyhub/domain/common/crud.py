"""Audited create/read/update/delete flow for a single table.

``AuditedCrud`` wires a :class:`TableRepository` to the role configuration
and the audit trail: authorize, persist, record one audit entry, return.
Entity services compose one instance per table they own.
"""

from __future__ import annotations

from typing import Any, Generic, List, Mapping, Optional, TypeVar
from uuid import UUID

from familyhub.domain.common import policies
from familyhub.domain.common.repository import TableRepository
from familyhub.domain.exceptions import NotFoundError
from familyhub.infra.auth import AuthenticatedUser
from familyhub.obs.audit import AuditLogger, audit_logger
from familyhub.settings import roles_for

ModelT = TypeVar("ModelT")


class AuditedCrud(Generic[ModelT]):
	def __init__(
		self,
		repository: TableRepository,
		*,
		target_type: str,
		write_roles: str,
		delete_roles: str,
		audit: Optional[AuditLogger] = None,
	) -> None:
		self.repository = repository
		self.target_type = target_type
		self._write_roles = write_roles
		self._delete_roles = delete_roles
		self.audit = audit or audit_logger

	@property
	def not_found(self) -> str:
		return f"{self.target_type}_not_found"

	def authorize_write(self, actor: Optional[AuthenticatedUser]) -> AuthenticatedUser:
		return policies.require_roles(actor, roles_for(self._write_roles))

	def authorize_delete(self, actor: Optional[AuthenticatedUser]) -> AuthenticatedUser:
		return policies.require_roles(actor, roles_for(self._delete_roles))

	async def record(
		self,
		action: str,
		actor: AuthenticatedUser,
		target_id: Any,
		details: Optional[Mapping[str, Any]] = None,
	) -> None:
		await self.audit.record(action, actor.id, target_id, self.target_type, details)

	async def get(self, entity_id: UUID | str) -> ModelT:
		entity = await self.repository.get(entity_id)
		if entity is None:
			raise NotFoundError(self.not_found)
		return entity

	async def list(self, filters: Optional[Mapping[str, Any]] = None, *, search: Optional[str] = None) -> List[ModelT]:
		return await self.repository.list(filters, search=search)

	async def create(self, actor: Optional[AuthenticatedUser], data: Mapping[str, Any]) -> ModelT:
		actor = self.authorize_write(actor)
		entity = await self.repository.create(data)
		await self.record("create", actor, entity.id, {"fields": sorted(k for k, v in data.items() if v is not None)})
		return entity

	async def update(self, actor: Optional[AuthenticatedUser], entity_id: UUID | str, changes: Mapping[str, Any]) -> ModelT:
		actor = self.authorize_write(actor)
		entity = await self.repository.update(entity_id, changes)
		if entity is None:
			raise NotFoundError(self.not_found)
		# Recorded even when the change set was empty and nothing was written
		await self.record("update", actor, entity_id, {"fields": sorted(changes)})
		return entity

	async def delete(self, actor: Optional[AuthenticatedUser], entity_id: UUID | str) -> None:
		actor = self.authorize_delete(actor)
		if not await self.repository.delete(entity_id):
			raise NotFoundError(self.not_found)
		await self.record("delete", actor, entity_id)
