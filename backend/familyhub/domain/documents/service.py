"""Document library workflows: uploads, replacements and downloads."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from fastapi import UploadFile

from familyhub.domain.common import policies
from familyhub.domain.common.crud import AuditedCrud
from familyhub.domain.documents import models, schemas
from familyhub.domain.documents.repo import CategoryRepository, DocumentRepository
from familyhub.domain.exceptions import NotFoundError
from familyhub.infra.auth import AuthenticatedUser
from familyhub.infra.storage import DOCUMENTS, Download, FileStore, extension_of, get_file_store
from familyhub.obs.audit import AuditLogger


class DocumentService:
	def __init__(
		self,
		documents: Optional[DocumentRepository] = None,
		categories: Optional[CategoryRepository] = None,
		*,
		files: Optional[FileStore] = None,
		audit: Optional[AuditLogger] = None,
	) -> None:
		self.repository = documents or DocumentRepository()
		self.files = files or get_file_store()
		self.documents: AuditedCrud[models.Document] = AuditedCrud(
			self.repository,
			target_type="document",
			write_roles="document_write",
			delete_roles="document_write",
			audit=audit,
		)
		self.categories: AuditedCrud[models.DocumentCategory] = AuditedCrud(
			categories or CategoryRepository(),
			target_type="document_category",
			write_roles="document_write",
			delete_roles="category_delete",
			audit=audit,
		)

	async def list_documents(
		self,
		*,
		category_id: Optional[UUID] = None,
		uploaded_by: Optional[UUID] = None,
		q: Optional[str] = None,
	) -> List[models.Document]:
		return await self.documents.list({"category_id": category_id, "uploaded_by": uploaded_by}, search=q)

	async def get_document(self, document_id: UUID) -> models.Document:
		return await self.documents.get(document_id)

	async def upload_document(
		self,
		actor: Optional[AuthenticatedUser],
		payload: schemas.DocumentCreate,
		file: UploadFile,
	) -> models.Document:
		# Any authenticated member may contribute to the library
		actor = policies.require_actor(actor)
		staged = await self.files.stage(file)
		key = self.files.commit(staged, DOCUMENTS)
		data: Dict[str, Any] = payload.model_dump()
		data.update(file_path=key, file_type=staged.content_type, file_size=staged.size, uploaded_by=actor.id)
		try:
			document = await self.repository.create(data)
		except Exception:
			self.files.purge(key)
			raise
		await self.documents.record(
			"create", actor, document.id, {"title": document.title, "file_size": document.file_size}
		)
		return document

	async def update_document(
		self,
		actor: Optional[AuthenticatedUser],
		document_id: UUID,
		changes: Mapping[str, Any],
		file: Optional[UploadFile] = None,
	) -> models.Document:
		actor = self.documents.authorize_write(actor)
		changes = dict(changes)
		new_key: Optional[str] = None
		old_key: Optional[str] = None
		if file is not None:
			current = await self.documents.get(document_id)
			old_key = current.file_path
			staged = await self.files.stage(file)
			new_key = self.files.commit(staged, DOCUMENTS)
			changes.update(file_path=new_key, file_type=staged.content_type, file_size=staged.size)
		try:
			document = await self.repository.update(document_id, changes)
		except Exception:
			self.files.purge(new_key)
			raise
		if document is None:
			self.files.purge(new_key)
			raise NotFoundError(self.documents.not_found)
		# The row now points at the new file
		self.files.retire(old_key, new_key)
		await self.documents.record("update", actor, document_id, {"fields": sorted(changes)})
		return document

	async def delete_document(self, actor: Optional[AuthenticatedUser], document_id: UUID) -> None:
		actor = self.documents.authorize_delete(actor)
		current = await self.documents.get(document_id)
		if not await self.repository.delete(document_id):
			raise NotFoundError(self.documents.not_found)
		await self.documents.record("delete", actor, document_id, {"title": current.title})
		self.files.purge(current.file_path)

	async def document_download(self, actor: AuthenticatedUser, document_id: UUID) -> Download:
		document = await self.documents.get(document_id)
		download = self.files.download(document.file_path, f"{document.title}{extension_of(document.file_path)}")
		await self.documents.record("download", actor, document.id)
		return download

	# Categories

	async def list_categories(self) -> List[models.DocumentCategory]:
		return await self.categories.list()

	async def get_category(self, category_id: UUID) -> models.DocumentCategory:
		return await self.categories.get(category_id)

	async def create_category(
		self, actor: Optional[AuthenticatedUser], payload: schemas.CategoryCreate
	) -> models.DocumentCategory:
		data = payload.model_dump()
		data["created_by"] = actor.id if actor is not None else None
		return await self.categories.create(actor, data)

	async def update_category(
		self, actor: Optional[AuthenticatedUser], category_id: UUID, payload: schemas.CategoryUpdate
	) -> models.DocumentCategory:
		return await self.categories.update(actor, category_id, payload.model_dump(exclude_unset=True))

	async def delete_category(self, actor: Optional[AuthenticatedUser], category_id: UUID) -> None:
		await self.categories.delete(actor, category_id)
