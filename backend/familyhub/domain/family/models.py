"""Row models and read views for the family tree."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FamilyMember(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: UUID
	profile_id: Optional[UUID] = None
	first_name: str
	last_name: str
	maiden_name: Optional[str] = None
	gender: str
	birth_date: Optional[date] = None
	birth_place: Optional[str] = None
	death_date: Optional[date] = None
	death_place: Optional[str] = None
	bio: Optional[str] = None
	photo_path: Optional[str] = None
	is_alive: bool = True
	created_at: datetime
	updated_at: datetime


class FamilyRelationship(BaseModel):
	"""``to_member`` is the ``relationship_type`` of ``from_member``."""

	model_config = ConfigDict(from_attributes=True)

	id: UUID
	from_member_id: UUID
	to_member_id: UUID
	relationship_type: str
	relationship_details: Optional[str] = None
	start_date: Optional[date] = None
	end_date: Optional[date] = None
	to_member_name: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class MemberRelations(BaseModel):
	member: FamilyMember
	parents: List[FamilyMember] = Field(default_factory=list)
	children: List[FamilyMember] = Field(default_factory=list)
	spouses: List[FamilyMember] = Field(default_factory=list)
	siblings: List[FamilyMember] = Field(default_factory=list)
	others: List[FamilyMember] = Field(default_factory=list)


class FamilyTree(BaseModel):
	members: List[FamilyMember] = Field(default_factory=list)
	relationships: List[FamilyRelationship] = Field(default_factory=list)
