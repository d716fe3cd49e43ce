"""Request payloads for contribution endpoints."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from familyhub.domain.common.validation import OptionalText, OptionalUUID, PositiveAmount, Text

ContributionStatus = Literal["pending", "completed", "refunded", "cancelled"]
SourceType = Literal["monthly", "event", "project", "other"]


def source_reference_missing(source_type: Optional[str], source_id: Optional[UUID]) -> bool:
	"""Only `other` contributions may stand without a source record."""
	return source_type != "other" and source_id is None


class ContributionCreate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	user_id: UUID
	amount: PositiveAmount
	payment_date: date
	payment_method: Text
	status: ContributionStatus = "pending"
	source_type: SourceType
	source_id: OptionalUUID = None
	notes: OptionalText = None

	@model_validator(mode="after")
	def _source_reference(self) -> "ContributionCreate":
		if source_reference_missing(self.source_type, self.source_id):
			raise ValueError("source_id is required unless source_type is 'other'")
		return self


class ContributionUpdate(BaseModel):
	"""Partial update; omitted fields are left untouched, explicit nulls clear them."""

	model_config = ConfigDict(extra="ignore")

	user_id: Optional[UUID] = None
	amount: Optional[PositiveAmount] = None
	payment_date: Optional[date] = None
	payment_method: Optional[Text] = None
	status: Optional[ContributionStatus] = None
	source_type: Optional[SourceType] = None
	source_id: OptionalUUID = None
	notes: OptionalText = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "ContributionUpdate":
		for name in ("user_id", "amount", "payment_date", "payment_method", "status", "source_type"):
			if name in self.model_fields_set and getattr(self, name) is None:
				raise ValueError(f"{name} cannot be cleared")
		return self
