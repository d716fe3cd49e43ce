"""Request payloads for member and auth endpoints."""

from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from familyhub.domain.common.validation import OptionalDate, OptionalText, Text

MemberRole = Literal["super_admin", "intermediate", "standard", "admin", "treasurer", "manager"]
MemberStatus = Literal["active", "inactive"]
MIN_PASSWORD_LENGTH = 8


def _normalise_email(value: str) -> str:
	value = value.strip().lower()
	local, _, domain = value.partition("@")
	if not local or "." not in domain:
		raise ValueError("invalid email address")
	return value


Email = Annotated[str, AfterValidator(_normalise_email)]
Password = Annotated[str, Field(min_length=MIN_PASSWORD_LENGTH)]


class MemberCreate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	email: Email
	password: Password
	name: Text
	role: MemberRole = "standard"
	phone: OptionalText = None
	birth_date: OptionalDate = None
	address: OptionalText = None
	bio: OptionalText = None
	avatar_url: OptionalText = None
	status: MemberStatus = "active"


class MemberUpdate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	email: Optional[Email] = None
	password: Optional[Password] = None
	name: Optional[Text] = None
	role: Optional[MemberRole] = None
	phone: OptionalText = None
	birth_date: OptionalDate = None
	address: OptionalText = None
	bio: OptionalText = None
	avatar_url: OptionalText = None
	status: Optional[MemberStatus] = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "MemberUpdate":
		for name in ("email", "password", "name", "role", "status"):
			if name in self.model_fields_set and getattr(self, name) is None:
				raise ValueError(f"{name} cannot be cleared")
		return self


class StatusUpdate(BaseModel):
	status: MemberStatus


class LoginRequest(BaseModel):
	email: Email
	password: str


class ChangePasswordRequest(BaseModel):
	current_password: str
	new_password: Password
