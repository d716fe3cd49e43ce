"""Request payloads for event endpoints."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from familyhub.domain.common.validation import OptionalAmount, OptionalDate, OptionalText, PositiveAmount, Text

EventStatus = Literal["planned", "ongoing", "completed", "cancelled"]
ParticipantStatus = Literal["invited", "confirmed", "declined"]
EventContributionStatus = Literal["pending", "completed", "refunded"]


class _DateRange(BaseModel):
	model_config = ConfigDict(extra="ignore")

	@model_validator(mode="after")
	def _ordered_dates(self):
		start = getattr(self, "start_date", None)
		end = getattr(self, "end_date", None)
		if start is not None and end is not None and end < start:
			raise ValueError("end_date must not be before start_date")
		return self


class EventCreate(_DateRange):
	name: Text
	description: OptionalText = None
	location: OptionalText = None
	start_date: date
	end_date: OptionalDate = None
	target_amount: OptionalAmount = None
	status: EventStatus = "planned"


class EventUpdate(_DateRange):
	name: Optional[Text] = None
	description: OptionalText = None
	location: OptionalText = None
	start_date: Optional[date] = None
	end_date: OptionalDate = None
	target_amount: OptionalAmount = None
	status: Optional[EventStatus] = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "EventUpdate":
		for name in ("name", "start_date", "status"):
			if name in self.model_fields_set and getattr(self, name) is None:
				raise ValueError(f"{name} cannot be cleared")
		return self


class ParticipantCreate(BaseModel):
	event_id: UUID
	user_id: UUID
	status: ParticipantStatus = "invited"


class ParticipantStatusUpdate(BaseModel):
	status: ParticipantStatus


class EventContributionCreate(BaseModel):
	event_id: UUID
	user_id: UUID
	amount: PositiveAmount
	payment_date: date
	payment_method: Text
	status: EventContributionStatus = "pending"
	notes: OptionalText = None


class EventContributionUpdate(BaseModel):
	amount: Optional[PositiveAmount] = None
	payment_date: Optional[date] = None
	payment_method: Optional[Text] = None
	status: Optional[EventContributionStatus] = None
	notes: OptionalText = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "EventContributionUpdate":
		for name in ("amount", "payment_date", "payment_method", "status"):
			if name in self.model_fields_set and getattr(self, name) is None:
				raise ValueError(f"{name} cannot be cleared")
		return self


class AssignmentCreate(BaseModel):
	event_id: UUID
	user_id: UUID
	amount: PositiveAmount
	due_date: OptionalDate = None


class AssignmentUpdate(BaseModel):
	amount: Optional[PositiveAmount] = None
	due_date: OptionalDate = None

	@model_validator(mode="after")
	def _amount_stays_set(self) -> "AssignmentUpdate":
		if "amount" in self.model_fields_set and self.amount is None:
			raise ValueError("amount cannot be cleared")
		return self
