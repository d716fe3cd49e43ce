"""Request payloads for project endpoints."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from familyhub.domain.common.validation import OptionalAmount, OptionalDate, OptionalText, PositiveAmount, Text

ProjectStatus = Literal["planned", "in_progress", "completed", "cancelled"]
PhaseStatus = Literal["pending", "in_progress", "completed"]
ParticipantStatus = Literal["invited", "confirmed", "declined"]
ContributionStatus = Literal["pending", "completed", "refunded"]


class _Schedule(BaseModel):
	model_config = ConfigDict(extra="ignore")

	@model_validator(mode="after")
	def _ordered_dates(self):
		start = getattr(self, "start_date", None)
		end = getattr(self, "end_date", None)
		if start is not None and end is not None and end < start:
			raise ValueError("end_date must not be before start_date")
		return self


def _keep_required(model: BaseModel, *names: str) -> None:
	for name in names:
		if name in model.model_fields_set and getattr(model, name) is None:
			raise ValueError(f"{name} cannot be cleared")


class ProjectCreate(_Schedule):
	name: Text
	description: OptionalText = None
	start_date: date
	end_date: OptionalDate = None
	target_amount: OptionalAmount = None
	status: ProjectStatus = "planned"


class ProjectUpdate(_Schedule):
	name: Optional[Text] = None
	description: OptionalText = None
	start_date: Optional[date] = None
	end_date: OptionalDate = None
	target_amount: OptionalAmount = None
	status: Optional[ProjectStatus] = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "ProjectUpdate":
		_keep_required(self, "name", "start_date", "status")
		return self


class PhaseCreate(_Schedule):
	project_id: UUID
	name: Text
	description: OptionalText = None
	start_date: OptionalDate = None
	end_date: OptionalDate = None
	status: PhaseStatus = "pending"


class PhaseUpdate(_Schedule):
	name: Optional[Text] = None
	description: OptionalText = None
	start_date: OptionalDate = None
	end_date: OptionalDate = None
	status: Optional[PhaseStatus] = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "PhaseUpdate":
		_keep_required(self, "name", "status")
		return self


class ParticipantCreate(BaseModel):
	project_id: UUID
	user_id: UUID
	status: ParticipantStatus = "invited"


class ParticipantStatusUpdate(BaseModel):
	status: ParticipantStatus


class ContributionCreate(BaseModel):
	project_id: UUID
	user_id: UUID
	amount: PositiveAmount
	payment_date: date
	payment_method: Text
	status: ContributionStatus = "pending"
	notes: OptionalText = None


class ContributionUpdate(BaseModel):
	amount: Optional[PositiveAmount] = None
	payment_date: Optional[date] = None
	payment_method: Optional[Text] = None
	status: Optional[ContributionStatus] = None
	notes: OptionalText = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "ContributionUpdate":
		_keep_required(self, "amount", "payment_date", "payment_method", "status")
		return self


class AssignmentCreate(BaseModel):
	project_id: UUID
	user_id: UUID
	amount: PositiveAmount
	due_date: OptionalDate = None


class AssignmentUpdate(BaseModel):
	amount: Optional[PositiveAmount] = None
	due_date: OptionalDate = None

	@model_validator(mode="after")
	def _amount_stays_set(self) -> "AssignmentUpdate":
		_keep_required(self, "amount")
		return self
