"""Request payloads for family tree endpoints."""

from __future__ import annotations

from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from familyhub.domain.common.validation import OptionalDate, OptionalText, OptionalUUID, Text

Gender = Literal["male", "female", "other"]
RelationshipType = Literal["parent", "child", "spouse", "sibling", "other"]

# Reciprocal row written alongside each relationship; "other" stays one-sided
INVERSE_TYPES = {"parent": "child", "child": "parent", "spouse": "spouse", "sibling": "sibling"}


def lifespan_is_ordered(birth_date, death_date) -> bool:
	return birth_date is None or death_date is None or death_date >= birth_date


class MemberCreate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	profile_id: OptionalUUID = None
	first_name: Text
	last_name: Text
	maiden_name: OptionalText = None
	gender: Gender
	birth_date: OptionalDate = None
	birth_place: OptionalText = None
	death_date: OptionalDate = None
	death_place: OptionalText = None
	bio: OptionalText = None
	is_alive: bool = True

	@model_validator(mode="after")
	def _lifespan(self) -> "MemberCreate":
		if not lifespan_is_ordered(self.birth_date, self.death_date):
			raise ValueError("death_date must not be before birth_date")
		if self.death_date is not None:
			self.is_alive = False
		return self


class MemberUpdate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	profile_id: OptionalUUID = None
	first_name: Optional[Text] = None
	last_name: Optional[Text] = None
	maiden_name: OptionalText = None
	gender: Optional[Gender] = None
	birth_date: OptionalDate = None
	birth_place: OptionalText = None
	death_date: OptionalDate = None
	death_place: OptionalText = None
	bio: OptionalText = None
	is_alive: Optional[bool] = None

	@model_validator(mode="after")
	def _required_stay_set(self) -> "MemberUpdate":
		for name in ("first_name", "last_name", "gender", "is_alive"):
			if name in self.model_fields_set and getattr(self, name) is None:
				raise ValueError(f"{name} cannot be cleared")
		return self


class RelationshipCreate(BaseModel):
	from_member_id: UUID
	to_member_id: UUID
	relationship_type: RelationshipType
	relationship_details: OptionalText = None
	start_date: OptionalDate = None
	end_date: OptionalDate = None

	@model_validator(mode="after")
	def _distinct_members(self) -> "RelationshipCreate":
		if self.from_member_id == self.to_member_id:
			raise ValueError("a member cannot be related to themselves")
		if self.start_date and self.end_date and self.end_date < self.start_date:
			raise ValueError("end_date must not be before start_date")
		return self


class RelationshipUpdate(BaseModel):
	relationship_details: OptionalText = None
	start_date: OptionalDate = None
	end_date: OptionalDate = None
