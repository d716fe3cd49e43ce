"""Monthly session workflows."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from familyhub.domain.common.crud import AuditedCrud
from familyhub.domain.monthly import models, schemas
from familyhub.domain.monthly.repo import MonthlyAssignmentRepository, SessionRepository
from familyhub.infra.auth import AuthenticatedUser
from familyhub.obs.audit import AuditLogger


class MonthlyContributionService:
	def __init__(
		self,
		sessions: Optional[SessionRepository] = None,
		assignments: Optional[MonthlyAssignmentRepository] = None,
		*,
		audit: Optional[AuditLogger] = None,
	) -> None:
		self.sessions: AuditedCrud[models.MonthlySession] = AuditedCrud(
			sessions or SessionRepository(),
			target_type="monthly_session",
			write_roles="session_write",
			delete_roles="session_delete",
			audit=audit,
		)
		self.assignments: AuditedCrud[models.MonthlyAssignment] = AuditedCrud(
			assignments or MonthlyAssignmentRepository(),
			target_type="monthly_assignment",
			write_roles="session_write",
			delete_roles="session_delete",
			audit=audit,
		)

	async def list_sessions(self, *, status: Optional[str] = None, q: Optional[str] = None) -> List[models.MonthlySession]:
		return await self.sessions.list({"status": status}, search=q)

	async def get_session(self, session_id: UUID) -> models.MonthlySession:
		return await self.sessions.get(session_id)

	async def create_session(self, actor: Optional[AuthenticatedUser], payload: schemas.SessionCreate) -> models.MonthlySession:
		data = payload.model_dump()
		data["created_by"] = actor.id if actor is not None else None
		return await self.sessions.create(actor, data)

	async def update_session(
		self, actor: Optional[AuthenticatedUser], session_id: UUID, payload: schemas.SessionUpdate
	) -> models.MonthlySession:
		return await self.sessions.update(actor, session_id, payload.model_dump(exclude_unset=True))

	async def delete_session(self, actor: Optional[AuthenticatedUser], session_id: UUID) -> None:
		await self.sessions.delete(actor, session_id)

	async def list_assignments(self, session_id: UUID) -> List[models.MonthlyAssignment]:
		return await self.assignments.list({"session_id": session_id})

	async def create_assignment(
		self, actor: Optional[AuthenticatedUser], payload: schemas.AssignmentCreate
	) -> models.MonthlyAssignment:
		return await self.assignments.create(actor, payload.model_dump())

	async def update_assignment(
		self, actor: Optional[AuthenticatedUser], assignment_id: UUID, payload: schemas.AssignmentUpdate
	) -> models.MonthlyAssignment:
		return await self.assignments.update(actor, assignment_id, payload.model_dump(exclude_unset=True))

	async def delete_assignment(self, actor: Optional[AuthenticatedUser], assignment_id: UUID) -> None:
		await self.assignments.delete(actor, assignment_id)
