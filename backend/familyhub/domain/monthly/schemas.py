"""Request payloads for monthly contribution endpoints."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from familyhub.domain.common.validation import OptionalText, PositiveAmount, Text

SessionStatus = Literal["active", "completed", "cancelled"]
DeadlineDay = Annotated[int, Field(ge=1, le=31)]
DurationMonths = Annotated[int, Field(ge=1)]


class SessionCreate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	name: Text
	description: OptionalText = None
	start_date: date
	monthly_target_amount: PositiveAmount
	duration_months: DurationMonths
	payment_deadline_day: DeadlineDay
	status: SessionStatus = "active"


class SessionUpdate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	name: Optional[Text] = None
	description: OptionalText = None
	start_date: Optional[date] = None
	monthly_target_amount: Optional[PositiveAmount] = None
	duration_months: Optional[DurationMonths] = None
	payment_deadline_day: Optional[DeadlineDay] = None
	status: Optional[SessionStatus] = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "SessionUpdate":
		for name in self.model_fields_set - {"description"}:
			if getattr(self, name) is None:
				raise ValueError(f"{name} cannot be cleared")
		return self


class AssignmentCreate(BaseModel):
	session_id: UUID
	user_id: UUID
	monthly_amount: PositiveAmount


class AssignmentUpdate(BaseModel):
	monthly_amount: PositiveAmount
