"""Contribution workflows: receipts, role checks and audit entries."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from fastapi import UploadFile

from familyhub.domain.common import policies
from familyhub.domain.common.crud import AuditedCrud
from familyhub.domain.contributions import models, schemas
from familyhub.domain.contributions.repo import ContributionRepository
from familyhub.domain.exceptions import ForbiddenError, NotFoundError, ValidationError
from familyhub.infra.auth import AuthenticatedUser
from familyhub.infra.storage import RECEIPTS, Download, FileStore, extension_of, get_file_store
from familyhub.obs.audit import AuditLogger
from familyhub.settings import roles_for

TOP_CONTRIBUTORS_MAX = 100


def check_source_reference(source_type: Optional[str], source_id: Optional[UUID]) -> None:
	if schemas.source_reference_missing(source_type, source_id):
		raise ValidationError("source_id_required")


class ContributionService:
	def __init__(
		self,
		repository: Optional[ContributionRepository] = None,
		*,
		files: Optional[FileStore] = None,
		audit: Optional[AuditLogger] = None,
	) -> None:
		self.repository = repository or ContributionRepository()
		self.files = files or get_file_store()
		self.crud: AuditedCrud[models.Contribution] = AuditedCrud(
			self.repository,
			target_type="contribution",
			write_roles="contribution_write",
			delete_roles="contribution_delete",
			audit=audit,
		)

	async def list_contributions(self, filters: Optional[Mapping[str, Any]] = None) -> List[models.Contribution]:
		return await self.crud.list(filters)

	async def get_contribution(self, contribution_id: UUID) -> models.Contribution:
		return await self.crud.get(contribution_id)

	async def by_user(self, user_id: UUID) -> List[models.Contribution]:
		return await self.crud.list({"user_id": user_id})

	async def by_source(self, source_type: str, source_id: Optional[UUID] = None) -> List[models.Contribution]:
		return await self.crud.list({"source_type": source_type, "source_id": source_id})

	async def create_contribution(
		self,
		actor: Optional[AuthenticatedUser],
		payload: schemas.ContributionCreate,
		receipt: Optional[UploadFile] = None,
	) -> models.Contribution:
		actor = self.crud.authorize_write(actor)
		data: Dict[str, Any] = payload.model_dump()
		if receipt is not None:
			staged = await self.files.stage(receipt)
			data["receipt_path"] = self.files.commit(staged, RECEIPTS)
		try:
			contribution = await self.repository.create(data)
		except Exception:
			self.files.purge(data.get("receipt_path"))
			raise
		await self.crud.record(
			"create",
			actor,
			contribution.id,
			{
				"amount": str(contribution.amount),
				"source_type": contribution.source_type,
				"has_receipt": contribution.receipt_path is not None,
			},
		)
		return contribution

	async def update_contribution(
		self,
		actor: Optional[AuthenticatedUser],
		contribution_id: UUID,
		changes: Mapping[str, Any],
		receipt: Optional[UploadFile] = None,
	) -> models.Contribution:
		actor = self.crud.authorize_write(actor)
		changes = dict(changes)
		current: Optional[models.Contribution] = None
		if receipt is not None or "source_type" in changes or "source_id" in changes:
			current = await self.crud.get(contribution_id)
			check_source_reference(
				changes.get("source_type", current.source_type),
				changes.get("source_id", current.source_id),
			)
		new_key: Optional[str] = None
		if receipt is not None:
			staged = await self.files.stage(receipt)
			new_key = self.files.commit(staged, RECEIPTS)
			changes["receipt_path"] = new_key
		try:
			contribution = await self.repository.update(contribution_id, changes)
		except Exception:
			self.files.purge(new_key)
			raise
		if contribution is None:
			self.files.purge(new_key)
			raise NotFoundError(self.crud.not_found)
		if new_key is not None and current is not None:
			self.files.retire(current.receipt_path, new_key)
		await self.crud.record("update", actor, contribution_id, {"fields": sorted(changes)})
		return contribution

	async def delete_contribution(self, actor: Optional[AuthenticatedUser], contribution_id: UUID) -> None:
		actor = self.crud.authorize_delete(actor)
		current = await self.crud.get(contribution_id)
		if not await self.repository.delete(contribution_id):
			raise NotFoundError(self.crud.not_found)
		await self.crud.record("delete", actor, contribution_id, {"amount": str(current.amount)})
		self.files.purge(current.receipt_path)

	async def receipt_download(self, actor: Optional[AuthenticatedUser], contribution_id: UUID) -> Download:
		"""Stream a receipt to the contributing member or a contribution manager."""
		actor = policies.require_actor(actor)
		contribution = await self.crud.get(contribution_id)
		if str(contribution.user_id) != str(actor.id) and not actor.has_any_role(roles_for("contribution_write")):
			raise ForbiddenError("receipt_forbidden")
		if not contribution.receipt_path:
			raise NotFoundError("receipt_not_found")
		download = self.files.download(
			contribution.receipt_path,
			f"receipt-{contribution.id}{extension_of(contribution.receipt_path)}",
		)
		await self.crud.record("download", actor, contribution.id, {"file": "receipt"})
		return download

	async def summary(self, user_id: Optional[UUID] = None) -> models.FinancialSummary:
		return await self.repository.summary(user_id)

	async def monthly_summary(self, year: Optional[int] = None) -> List[models.FinancialPeriodSummary]:
		return await self.repository.period_summaries("month", year)

	async def yearly_summary(self) -> List[models.FinancialPeriodSummary]:
		return await self.repository.period_summaries("year")

	async def payment_method_stats(self) -> List[models.PaymentMethodStat]:
		return await self.repository.payment_method_stats()

	async def top_contributors(self, limit: int = 10) -> List[models.TopContributor]:
		return await self.repository.top_contributors(max(1, min(limit, TOP_CONTRIBUTORS_MAX)))
