"""Postgres access for family members and relationships."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence
from uuid import UUID

from familyhub.domain.common.repository import FilterSpec, TableRepository, TableSpec
from familyhub.domain.family import models

FAMILY_MEMBERS = TableSpec(
	table="family_members",
	model=models.FamilyMember,
	alias="fm",
	columns=(
		"profile_id",
		"first_name",
		"last_name",
		"maiden_name",
		"gender",
		"birth_date",
		"birth_place",
		"death_date",
		"death_place",
		"bio",
		"photo_path",
		"is_alive",
	),
	updatable=(
		"profile_id",
		"first_name",
		"last_name",
		"maiden_name",
		"gender",
		"birth_date",
		"birth_place",
		"death_date",
		"death_place",
		"bio",
		"photo_path",
		"is_alive",
	),
	filters={
		"profile_id": FilterSpec("profile_id"),
		"gender": FilterSpec("gender"),
		"is_alive": FilterSpec("is_alive"),
	},
	search_columns=("first_name", "last_name", "maiden_name", "birth_place", "death_place", "bio"),
	order_by="last_name ASC, first_name ASC",
)

RELATIONSHIPS = TableSpec(
	table="family_relationships",
	model=models.FamilyRelationship,
	alias="fr",
	columns=("from_member_id", "to_member_id", "relationship_type", "relationship_details", "start_date", "end_date"),
	updatable=("relationship_details", "start_date", "end_date"),
	filters={
		"from_member_id": FilterSpec("from_member_id"),
		"to_member_id": FilterSpec("to_member_id"),
		"relationship_type": FilterSpec("relationship_type"),
	},
	order_by="created_at ASC",
	select_extra=", tm.first_name || ' ' || tm.last_name AS to_member_name",
	joins=" LEFT JOIN family_members tm ON tm.id = fr.to_member_id",
)


class FamilyMemberRepository(TableRepository[models.FamilyMember]):
	spec = FAMILY_MEMBERS


class RelationshipRepository(TableRepository[models.FamilyRelationship]):
	"""Relationships are written in reciprocal pairs; both rows change in one transaction."""

	spec = RELATIONSHIPS

	async def create_pair(
		self, data: Mapping[str, Any], mirror: Optional[Mapping[str, Any]] = None
	) -> models.FamilyRelationship:
		async with self.transaction() as conn:
			created = await self.create(data, conn=conn)
			if mirror is not None:
				await self.create(mirror, conn=conn)
		return created

	async def update_pair(
		self, ids: Sequence[UUID], changes: Mapping[str, Any]
	) -> Optional[models.FamilyRelationship]:
		async with self.transaction() as conn:
			updated = [await self.update(entity_id, changes, conn=conn) for entity_id in ids]
		return updated[0] if updated else None

	async def delete_pair(self, ids: Sequence[UUID]) -> bool:
		async with self.transaction() as conn:
			removed = [await self.delete(entity_id, conn=conn) for entity_id in ids]
		return bool(removed) and removed[0]
