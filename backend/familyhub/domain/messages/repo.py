"""Postgres access for messages, recipients and attachments."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence
from uuid import UUID

from familyhub.domain.common.repository import FilterSpec, TableRepository, TableSpec
from familyhub.domain.messages import models

MESSAGES = TableSpec(
	table="messages",
	model=models.Message,
	alias="m",
	columns=("sender_id", "subject", "content", "parent_id", "has_attachments"),
	filters={"sender_id": FilterSpec("sender_id"), "parent_id": FilterSpec("parent_id")},
	search_columns=("subject", "content"),
	select_extra=", s.name AS sender_name",
	joins=" LEFT JOIN users s ON s.id = m.sender_id",
)

RECIPIENTS = TableSpec(
	table="message_recipients",
	model=models.MessageRecipient,
	alias="r",
	columns=("message_id", "recipient_id"),
	updatable=("read_at", "deleted_at"),
	filters={"message_id": FilterSpec("message_id"), "recipient_id": FilterSpec("recipient_id")},
	order_by="created_at ASC",
	select_extra=", u.name AS recipient_name",
	joins=" LEFT JOIN users u ON u.id = r.recipient_id",
)

ATTACHMENTS = TableSpec(
	table="message_attachments",
	model=models.MessageAttachment,
	alias="a",
	columns=("message_id", "file_name", "file_path", "file_size", "file_type"),
	filters={"message_id": FilterSpec("message_id")},
	order_by="created_at ASC",
)

PREVIEW_LENGTH = 120

_SUMMARY_SELECT = f"""
	SELECT m.id, m.sender_id, s.name AS sender_name, m.subject,
		LEFT(m.content, {PREVIEW_LENGTH}) AS preview, m.parent_id, m.has_attachments, m.created_at,
		(SELECT COUNT(*) FROM message_recipients rc WHERE rc.message_id = m.id) AS recipient_count
"""


class RecipientRepository(TableRepository[models.MessageRecipient]):
	spec = RECIPIENTS


class AttachmentRepository(TableRepository[models.MessageAttachment]):
	spec = ATTACHMENTS


class MessageRepository(TableRepository[models.Message]):
	spec = MESSAGES

	def __init__(
		self,
		recipients: Optional[RecipientRepository] = None,
		attachments: Optional[AttachmentRepository] = None,
	) -> None:
		super().__init__()
		self.recipients = recipients or RecipientRepository()
		self.attachments = attachments or AttachmentRepository()

	async def create_with_recipients(
		self,
		data: Mapping[str, Any],
		recipient_ids: Sequence[UUID],
		attachments: Sequence[Mapping[str, Any]] = (),
	) -> models.Message:
		"""Insert the message, one recipient row per member and its attachments atomically."""
		async with self.transaction() as conn:
			message = await self.create({**data, "has_attachments": bool(attachments)}, conn=conn)
			for recipient_id in recipient_ids:
				await self.recipients.create({"message_id": message.id, "recipient_id": recipient_id}, conn=conn)
			for attachment in attachments:
				await self.attachments.create({**attachment, "message_id": message.id}, conn=conn)
		return message

	async def hard_delete(self, message_id: UUID) -> Optional[List[str]]:
		"""Remove attachments, recipients and the message; return the attachment keys to purge.

		Returns ``None`` when the message did not exist.
		"""
		async with self.transaction() as conn:
			rows = await conn.fetch(
				"DELETE FROM message_attachments WHERE message_id = $1 RETURNING file_path",
				message_id,
			)
			await conn.execute("DELETE FROM message_recipients WHERE message_id = $1", message_id)
			if not await self.delete(message_id, conn=conn):
				return None
		return [row["file_path"] for row in rows]

	async def thread(self, root_id: UUID) -> List[models.Message]:
		async with self.connection() as conn:
			records = await conn.fetch(
				f"{self.spec.select_sql} WHERE m.id = $1 OR m.parent_id = $1 ORDER BY m.created_at ASC",
				root_id,
			)
		return self._to_models(records)

	async def _summaries(self, query: str, *args: Any) -> List[models.MessageSummary]:
		async with self.connection() as conn:
			records = await conn.fetch(query, *args)
		return [models.MessageSummary.model_validate(dict(record)) for record in records]

	async def inbox(self, user_id: UUID | str, *, deleted: bool = False) -> List[models.MessageSummary]:
		state = "IS NOT NULL" if deleted else "IS NULL"
		return await self._summaries(
			f"""
			{_SUMMARY_SELECT}, r.read_at, r.deleted_at
			FROM message_recipients r
			JOIN messages m ON m.id = r.message_id
			LEFT JOIN users s ON s.id = m.sender_id
			WHERE r.recipient_id = $1 AND r.deleted_at {state}
			ORDER BY m.created_at DESC
			""",
			user_id,
		)

	async def sent(self, user_id: UUID | str) -> List[models.MessageSummary]:
		return await self._summaries(
			f"""
			{_SUMMARY_SELECT}
			FROM messages m
			LEFT JOIN users s ON s.id = m.sender_id
			WHERE m.sender_id = $1
			ORDER BY m.created_at DESC
			""",
			user_id,
		)

	async def search(self, user_id: UUID | str, text: str) -> List[models.MessageSummary]:
		"""Case-insensitive subject/content match among messages the member sent or still holds."""
		return await self._summaries(
			f"""
			{_SUMMARY_SELECT}, r.read_at, r.deleted_at
			FROM messages m
			LEFT JOIN users s ON s.id = m.sender_id
			LEFT JOIN message_recipients r ON r.message_id = m.id AND r.recipient_id = $1
			WHERE (m.sender_id = $1 OR (r.id IS NOT NULL AND r.deleted_at IS NULL))
				AND (m.subject ILIKE $2 OR m.content ILIKE $2)
			ORDER BY m.created_at DESC
			""",
			user_id,
			f"%{text.strip()}%",
		)

	async def all_summaries(self) -> List[models.MessageSummary]:
		return await self._summaries(
			f"""
			{_SUMMARY_SELECT}
			FROM messages m
			LEFT JOIN users s ON s.id = m.sender_id
			ORDER BY m.created_at DESC
			"""
		)

	async def unread_count(self, user_id: UUID | str) -> int:
		async with self.connection() as conn:
			count = await conn.fetchval(
				"""
				SELECT COUNT(*) FROM message_recipients
				WHERE recipient_id = $1 AND read_at IS NULL AND deleted_at IS NULL
				""",
				user_id,
			)
		return int(count or 0)
