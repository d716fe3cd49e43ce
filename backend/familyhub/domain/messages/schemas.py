"""Request payloads for message endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from familyhub.domain.common.validation import OptionalUUID, Text


class MessageCreate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	subject: Text
	content: Text
	recipient_ids: List[UUID] = Field(min_length=1)
	parent_id: OptionalUUID = None

	@field_validator("recipient_ids", mode="before")
	@classmethod
	def _split_recipients(cls, value):
		# Multipart forms send either repeated fields or one comma-separated value
		if isinstance(value, str):
			value = [value]
		if isinstance(value, (list, tuple)):
			flat: List[str] = []
			for item in value:
				if isinstance(item, str):
					flat.extend(part.strip() for part in item.split(",") if part.strip())
				else:
					flat.append(item)
			return flat
		return value

	@field_validator("recipient_ids", mode="after")
	@classmethod
	def _dedupe(cls, value: List[UUID]) -> List[UUID]:
		return list(dict.fromkeys(value))
