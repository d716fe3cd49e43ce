"""Row models for monthly contribution sessions."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class MonthlySession(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	name: str
	description: Optional[str] = None
	start_date: date
	monthly_target_amount: Decimal
	duration_months: int
	payment_deadline_day: int
	status: str
	created_by: Optional[UUID] = None
	created_at: datetime
	updated_at: datetime


class MonthlyAssignment(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	session_id: UUID
	user_id: UUID
	monthly_amount: Decimal
	user_name: Optional[str] = None
	created_at: datetime
	updated_at: datetime
