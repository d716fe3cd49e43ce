"""Row models and read views for messages."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class Message(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	sender_id: UUID
	subject: str
	content: str
	parent_id: Optional[UUID] = None
	has_attachments: bool = False
	sender_name: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class MessageRecipient(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	message_id: UUID
	recipient_id: UUID
	read_at: Optional[datetime] = None
	deleted_at: Optional[datetime] = None
	recipient_name: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class MessageAttachment(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	message_id: UUID
	file_name: str
	file_path: str
	file_size: int
	file_type: str
	created_at: datetime
	updated_at: datetime


class MessageDetail(Message):
	recipients: List[MessageRecipient] = []
	attachments: List[MessageAttachment] = []


class MessageThread(BaseModel):
	messages: List[Message]
	recipients: List[MessageRecipient]
	attachments: List[MessageAttachment]


class MessageSummary(BaseModel):
	"""Mailbox row; ``read_at``/``deleted_at`` are the viewing member's own flags."""

	model_config = ConfigDict(from_attributes=True)

	id: UUID
	sender_id: UUID
	sender_name: Optional[str] = None
	subject: str
	preview: str
	parent_id: Optional[UUID] = None
	has_attachments: bool = False
	recipient_count: int = 0
	read_at: Optional[datetime] = None
	deleted_at: Optional[datetime] = None
	created_at: datetime


class UnreadCount(BaseModel):
	count: int
