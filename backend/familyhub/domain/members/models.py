"""Member row model; the password hash never leaves the repository."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

ROLES = ("super_admin", "intermediate", "standard", "admin", "treasurer", "manager")


class Member(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	email: str
	name: str
	role: str
	phone: Optional[str] = None
	birth_date: Optional[date] = None
	address: Optional[str] = None
	bio: Optional[str] = None
	avatar_url: Optional[str] = None
	status: str
	created_at: datetime
	updated_at: datetime


class LoginResult(BaseModel):
	access_token: str
	token_type: str = "bearer"
	user: Member
