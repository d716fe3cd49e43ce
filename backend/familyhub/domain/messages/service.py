"""Messaging workflows: sending, mailbox views and per-recipient state."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from fastapi import UploadFile

from familyhub.domain.common import policies as common_policies
from familyhub.domain.exceptions import NotFoundError, ValidationError
from familyhub.domain.messages import models, policies, schemas
from familyhub.domain.messages.repo import MessageRepository
from familyhub.infra.auth import AuthenticatedUser
from familyhub.infra.storage import ATTACHMENTS, Download, FileStore, get_file_store
from familyhub.obs.audit import AuditLogger, audit_logger
from familyhub.settings import roles_for, settings


def _now() -> datetime:
	return datetime.now(timezone.utc)


class MessageService:
	def __init__(
		self,
		repository: Optional[MessageRepository] = None,
		*,
		files: Optional[FileStore] = None,
		audit: Optional[AuditLogger] = None,
	) -> None:
		self.repository = repository or MessageRepository()
		self.files = files or get_file_store()
		self.audit = audit or audit_logger

	async def _load(self, message_id: UUID) -> Tuple[models.Message, List[models.MessageRecipient]]:
		message = await self.repository.get(message_id)
		if message is None:
			raise NotFoundError("message_not_found")
		recipients = await self.repository.recipients.list({"message_id": message.id})
		return message, recipients

	async def _record(self, action: str, actor: AuthenticatedUser, target_id, target_type: str = "message", details=None) -> None:
		await self.audit.record(action, actor.id, target_id, target_type, details)

	async def send_message(
		self,
		actor: Optional[AuthenticatedUser],
		payload: schemas.MessageCreate,
		attachments: Sequence[UploadFile] = (),
	) -> models.MessageDetail:
		actor = common_policies.require_actor(actor)
		if len(attachments) > settings.max_message_attachments:
			raise ValidationError("too_many_attachments")
		if payload.parent_id is not None:
			parent, parent_recipients = await self._load(payload.parent_id)
			policies.assert_party(actor, parent, parent_recipients)

		committed: List[str] = []
		rows = []
		try:
			for upload in attachments:
				staged = await self.files.stage(upload)
				key = self.files.commit(staged, ATTACHMENTS)
				committed.append(key)
				rows.append(
					{
						"file_name": staged.original_name,
						"file_path": key,
						"file_size": staged.size,
						"file_type": staged.content_type,
					}
				)
			message = await self.repository.create_with_recipients(
				{
					"sender_id": actor.id,
					"subject": payload.subject,
					"content": payload.content,
					"parent_id": payload.parent_id,
				},
				payload.recipient_ids,
				rows,
			)
		except Exception:
			for key in committed:
				self.files.purge(key)
			raise
		await self._record(
			"create",
			actor,
			message.id,
			details={"recipients": len(payload.recipient_ids), "attachments": len(rows)},
		)
		return await self._detail(message)

	async def _detail(
		self, message: models.Message, recipients: Optional[List[models.MessageRecipient]] = None
	) -> models.MessageDetail:
		if recipients is None:
			recipients = await self.repository.recipients.list({"message_id": message.id})
		attachments = await self.repository.attachments.list({"message_id": message.id})
		return models.MessageDetail(**message.model_dump(), recipients=recipients, attachments=attachments)

	async def get_message(self, actor: AuthenticatedUser, message_id: UUID) -> models.MessageDetail:
		"""Return a message to one of its parties; a recipient's first read stamps ``read_at``."""
		message, recipients = await self._load(message_id)
		policies.assert_party(actor, message, recipients)
		row = policies.recipient_row(actor, recipients)
		if row is not None and row.read_at is None:
			updated = await self.repository.recipients.update(row.id, {"read_at": _now()})
			if updated is not None:
				recipients = [updated if r.id == row.id else r for r in recipients]
			await self._record("read", actor, message.id)
		return await self._detail(message, recipients)

	async def get_thread(self, actor: AuthenticatedUser, message_id: UUID) -> models.MessageThread:
		message, recipients = await self._load(message_id)
		policies.assert_party(actor, message, recipients)
		root_id = message.parent_id or message.id
		messages = await self.repository.thread(root_id)
		ids = [m.id for m in messages]
		thread_recipients: List[models.MessageRecipient] = []
		thread_attachments: List[models.MessageAttachment] = []
		for mid in ids:
			thread_recipients.extend(await self.repository.recipients.list({"message_id": mid}))
			thread_attachments.extend(await self.repository.attachments.list({"message_id": mid}))
		return models.MessageThread(messages=messages, recipients=thread_recipients, attachments=thread_attachments)

	async def inbox(self, actor: AuthenticatedUser) -> List[models.MessageSummary]:
		return await self.repository.inbox(actor.id)

	async def trash(self, actor: AuthenticatedUser) -> List[models.MessageSummary]:
		return await self.repository.inbox(actor.id, deleted=True)

	async def sent(self, actor: AuthenticatedUser) -> List[models.MessageSummary]:
		return await self.repository.sent(actor.id)

	async def unread_count(self, actor: AuthenticatedUser) -> models.UnreadCount:
		return models.UnreadCount(count=await self.repository.unread_count(actor.id))

	async def search(self, actor: AuthenticatedUser, text: str) -> List[models.MessageSummary]:
		if not text or not text.strip():
			raise ValidationError("search_text_required")
		return await self.repository.search(actor.id, text)

	async def list_all(self, actor: Optional[AuthenticatedUser]) -> List[models.MessageSummary]:
		common_policies.require_roles(actor, roles_for("message_admin"))
		return await self.repository.all_summaries()

	async def _set_recipient_state(
		self, actor: AuthenticatedUser, message_id: UUID, action: str, changes: dict
	) -> models.MessageRecipient:
		_, recipients = await self._load(message_id)
		row = policies.require_recipient(actor, recipients)
		updated = await self.repository.recipients.update(row.id, changes)
		if updated is None:
			raise NotFoundError("message_not_found")
		await self._record(action, actor, message_id)
		return updated

	async def mark_read(self, actor: AuthenticatedUser, message_id: UUID) -> models.MessageRecipient:
		return await self._set_recipient_state(actor, message_id, "read", {"read_at": _now()})

	async def mark_deleted(self, actor: AuthenticatedUser, message_id: UUID) -> models.MessageRecipient:
		return await self._set_recipient_state(actor, message_id, "soft_delete", {"deleted_at": _now()})

	async def restore(self, actor: AuthenticatedUser, message_id: UUID) -> models.MessageRecipient:
		return await self._set_recipient_state(actor, message_id, "restore", {"deleted_at": None})

	async def delete_permanently(self, actor: AuthenticatedUser, message_id: UUID) -> None:
		message = await self.repository.get(message_id)
		if message is None:
			raise NotFoundError("message_not_found")
		policies.assert_sender(actor, message)
		keys = await self.repository.hard_delete(message_id)
		if keys is None:
			raise NotFoundError("message_not_found")
		await self._record("permanent_delete", actor, message_id, details={"attachments": len(keys)})
		for key in keys:
			self.files.purge(key)

	async def attachment_download(self, actor: AuthenticatedUser, message_id: UUID, attachment_id: UUID) -> Download:
		message, recipients = await self._load(message_id)
		policies.assert_party(actor, message, recipients)
		attachment = await self.repository.attachments.get(attachment_id)
		if attachment is None or attachment.message_id != message.id:
			raise NotFoundError("attachment_not_found")
		download = self.files.download(attachment.file_path, attachment.file_name)
		await self._record("download", actor, attachment.id, target_type="message_attachment")
		return download
