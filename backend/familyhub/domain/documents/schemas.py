"""Request payloads for document endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from familyhub.domain.common.validation import OptionalText, OptionalUUID, Text


class DocumentCreate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	title: Text
	description: OptionalText = None
	category_id: OptionalUUID = None


class DocumentUpdate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	title: Optional[Text] = None
	description: OptionalText = None
	category_id: OptionalUUID = None

	@model_validator(mode="after")
	def _title_stays_set(self) -> "DocumentUpdate":
		if "title" in self.model_fields_set and self.title is None:
			raise ValueError("title cannot be cleared")
		return self


class CategoryCreate(BaseModel):
	name: Text
	description: OptionalText = None


class CategoryUpdate(BaseModel):
	name: Optional[Text] = None
	description: OptionalText = None

	@model_validator(mode="after")
	def _name_stays_set(self) -> "CategoryUpdate":
		if "name" in self.model_fields_set and self.name is None:
			raise ValueError("name cannot be cleared")
		return self
