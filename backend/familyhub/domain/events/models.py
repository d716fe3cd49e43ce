"""Row models for events and their child tables."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class Event(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	name: str
	description: Optional[str] = None
	location: Optional[str] = None
	start_date: date
	end_date: Optional[date] = None
	target_amount: Optional[Decimal] = None
	status: str
	created_by: Optional[UUID] = None
	created_at: datetime
	updated_at: datetime


class EventParticipant(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	event_id: UUID
	user_id: UUID
	status: str
	user_name: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class EventContribution(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	event_id: UUID
	user_id: UUID
	amount: Decimal
	payment_date: date
	payment_method: str
	status: str
	notes: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class EventAssignment(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	event_id: UUID
	user_id: UUID
	amount: Decimal
	due_date: Optional[date] = None
	created_at: datetime
	updated_at: datetime
