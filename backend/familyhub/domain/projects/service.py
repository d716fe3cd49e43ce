"""Project workflows: one audited CRUD per table plus parent checks for child rows."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional
from uuid import UUID

from familyhub.domain.common import policies
from familyhub.domain.common.crud import AuditedCrud
from familyhub.domain.exceptions import ForbiddenError, ValidationError
from familyhub.domain.projects import models, schemas
from familyhub.domain.projects.repo import (
	PhaseRepository,
	ProjectAssignmentRepository,
	ProjectContributionRepository,
	ProjectParticipantRepository,
	ProjectRepository,
)
from familyhub.infra.auth import AuthenticatedUser
from familyhub.obs.audit import AuditLogger
from familyhub.settings import roles_for


def check_schedule(current, changes: Mapping[str, Any]) -> None:
	"""Reject a partial update whose merged dates would end before they start."""
	start = changes.get("start_date", current.start_date)
	end = changes.get("end_date", current.end_date)
	if start is not None and end is not None and end < start:
		raise ValidationError("end_date_before_start_date")


class ProjectService:
	def __init__(
		self,
		projects: Optional[ProjectRepository] = None,
		phases: Optional[PhaseRepository] = None,
		participants: Optional[ProjectParticipantRepository] = None,
		contributions: Optional[ProjectContributionRepository] = None,
		assignments: Optional[ProjectAssignmentRepository] = None,
		*,
		audit: Optional[AuditLogger] = None,
	) -> None:
		def crud(repository, target_type: str) -> AuditedCrud:
			return AuditedCrud(
				repository,
				target_type=target_type,
				write_roles="project_write",
				delete_roles="project_delete",
				audit=audit,
			)

		self.projects: AuditedCrud[models.Project] = crud(projects or ProjectRepository(), "project")
		self.phases: AuditedCrud[models.ProjectPhase] = crud(phases or PhaseRepository(), "project_phase")
		self.participants: AuditedCrud[models.ProjectParticipant] = crud(
			participants or ProjectParticipantRepository(), "project_participant"
		)
		self.contributions: AuditedCrud[models.ProjectContribution] = crud(
			contributions or ProjectContributionRepository(), "project_contribution"
		)
		self.assignments: AuditedCrud[models.ProjectAssignment] = crud(
			assignments or ProjectAssignmentRepository(), "project_assignment"
		)

	async def list_projects(
		self,
		*,
		status: Optional[str] = None,
		from_date=None,
		to_date=None,
		q: Optional[str] = None,
	) -> List[models.Project]:
		return await self.projects.list({"status": status, "from_date": from_date, "to_date": to_date}, search=q)

	async def get_project(self, project_id: UUID) -> models.Project:
		return await self.projects.get(project_id)

	async def create_project(self, actor: Optional[AuthenticatedUser], payload: schemas.ProjectCreate) -> models.Project:
		data = payload.model_dump()
		data["created_by"] = actor.id if actor is not None else None
		return await self.projects.create(actor, data)

	async def update_project(
		self, actor: Optional[AuthenticatedUser], project_id: UUID, payload: schemas.ProjectUpdate
	) -> models.Project:
		self.projects.authorize_write(actor)
		changes = payload.model_dump(exclude_unset=True)
		if "start_date" in changes or "end_date" in changes:
			check_schedule(await self.projects.get(project_id), changes)
		return await self.projects.update(actor, project_id, changes)

	async def delete_project(self, actor: Optional[AuthenticatedUser], project_id: UUID) -> None:
		# Phases, participants, contributions and assignments go with it (ON DELETE CASCADE)
		await self.projects.delete(actor, project_id)

	async def _require_project(self, project_id: UUID) -> models.Project:
		return await self.projects.get(project_id)

	# Phases

	async def list_phases(self, project_id: UUID) -> List[models.ProjectPhase]:
		return await self.phases.list({"project_id": project_id})

	async def add_phase(self, actor: Optional[AuthenticatedUser], payload: schemas.PhaseCreate) -> models.ProjectPhase:
		actor = self.phases.authorize_write(actor)
		await self._require_project(payload.project_id)
		return await self.phases.create(actor, payload.model_dump())

	async def update_phase(
		self, actor: Optional[AuthenticatedUser], phase_id: UUID, payload: schemas.PhaseUpdate
	) -> models.ProjectPhase:
		self.phases.authorize_write(actor)
		changes = payload.model_dump(exclude_unset=True)
		if "start_date" in changes or "end_date" in changes:
			check_schedule(await self.phases.get(phase_id), changes)
		return await self.phases.update(actor, phase_id, changes)

	async def delete_phase(self, actor: Optional[AuthenticatedUser], phase_id: UUID) -> None:
		await self.phases.delete(actor, phase_id)

	# Participants

	async def list_participants(self, project_id: UUID) -> List[models.ProjectParticipant]:
		return await self.participants.list({"project_id": project_id})

	async def add_participant(
		self, actor: Optional[AuthenticatedUser], payload: schemas.ParticipantCreate
	) -> models.ProjectParticipant:
		actor = self.participants.authorize_write(actor)
		await self._require_project(payload.project_id)
		return await self.participants.create(actor, payload.model_dump())

	async def update_participant_status(
		self, actor: Optional[AuthenticatedUser], participant_id: UUID, payload: schemas.ParticipantStatusUpdate
	) -> models.ProjectParticipant:
		return await self.participants.update(actor, participant_id, {"status": payload.status})

	async def remove_participant(self, actor: Optional[AuthenticatedUser], participant_id: UUID) -> None:
		await self.participants.delete(actor, participant_id)

	# Contributions

	async def list_contributions(self, project_id: UUID) -> List[models.ProjectContribution]:
		return await self.contributions.list({"project_id": project_id})

	async def add_contribution(
		self, actor: Optional[AuthenticatedUser], payload: schemas.ContributionCreate
	) -> models.ProjectContribution:
		"""Managers record anyone's contribution; other members only their own."""
		actor = policies.require_actor(actor)
		if not actor.has_any_role(roles_for("project_write")) and str(payload.user_id) != str(actor.id):
			raise ForbiddenError("insufficient_role")
		await self._require_project(payload.project_id)
		data = payload.model_dump()
		contribution = await self.contributions.repository.create(data)
		await self.contributions.record(
			"create", actor, contribution.id, {"amount": str(contribution.amount), "project_id": str(payload.project_id)}
		)
		return contribution

	async def update_contribution(
		self, actor: Optional[AuthenticatedUser], contribution_id: UUID, payload: schemas.ContributionUpdate
	) -> models.ProjectContribution:
		return await self.contributions.update(actor, contribution_id, payload.model_dump(exclude_unset=True))

	async def delete_contribution(self, actor: Optional[AuthenticatedUser], contribution_id: UUID) -> None:
		await self.contributions.delete(actor, contribution_id)

	# Contribution assignments

	async def list_assignments(self, project_id: UUID) -> List[models.ProjectAssignment]:
		return await self.assignments.list({"project_id": project_id})

	async def create_assignment(
		self, actor: Optional[AuthenticatedUser], payload: schemas.AssignmentCreate
	) -> models.ProjectAssignment:
		actor = self.assignments.authorize_write(actor)
		await self._require_project(payload.project_id)
		return await self.assignments.create(actor, payload.model_dump())

	async def update_assignment(
		self, actor: Optional[AuthenticatedUser], assignment_id: UUID, payload: schemas.AssignmentUpdate
	) -> models.ProjectAssignment:
		return await self.assignments.update(actor, assignment_id, payload.model_dump(exclude_unset=True))

	async def delete_assignment(self, actor: Optional[AuthenticatedUser], assignment_id: UUID) -> None:
		await self.assignments.delete(actor, assignment_id)
