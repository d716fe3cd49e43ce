"""Row models for documents and categories."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class Document(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	title: str
	description: Optional[str] = None
	file_path: str
	file_type: str
	file_size: int
	category_id: Optional[UUID] = None
	uploaded_by: Optional[UUID] = None
	category_name: Optional[str] = None
	uploader_name: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class DocumentCategory(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	name: str
	description: Optional[str] = None
	created_by: Optional[UUID] = None
	created_at: datetime
	updated_at: datetime
