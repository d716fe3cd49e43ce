"""Family tree workflows: members with photos, reciprocal relationships and tree views."""

from __future__ import annotations

from collections import deque
from typing import Any, Dict, List, Mapping, Optional, Set
from uuid import UUID

from fastapi import UploadFile

from familyhub.domain.common.crud import AuditedCrud
from familyhub.domain.exceptions import ConflictError, NotFoundError, ValidationError
from familyhub.domain.family import models, schemas
from familyhub.domain.family.repo import FamilyMemberRepository, RelationshipRepository
from familyhub.infra.auth import AuthenticatedUser
from familyhub.infra.storage import FAMILY_PHOTOS, Download, FileStore, extension_of, get_file_store
from familyhub.obs.audit import AuditLogger
from familyhub.settings import settings

DEFAULT_TREE_DEGREE = 2

# Relations view buckets, keyed by the type of the member's outgoing rows
_BUCKETS = {"parent": "parents", "child": "children", "spouse": "spouses", "sibling": "siblings", "other": "others"}


class FamilyService:
	def __init__(
		self,
		members: Optional[FamilyMemberRepository] = None,
		relationships: Optional[RelationshipRepository] = None,
		*,
		files: Optional[FileStore] = None,
		audit: Optional[AuditLogger] = None,
	) -> None:
		self.member_repository = members or FamilyMemberRepository()
		self.relationship_repository = relationships or RelationshipRepository()
		self.files = files or get_file_store()
		self.members: AuditedCrud[models.FamilyMember] = AuditedCrud(
			self.member_repository,
			target_type="family_member",
			write_roles="family_write",
			delete_roles="family_delete",
			audit=audit,
		)
		self.relationships: AuditedCrud[models.FamilyRelationship] = AuditedCrud(
			self.relationship_repository,
			target_type="family_relationship",
			write_roles="family_write",
			delete_roles="family_delete",
			audit=audit,
		)

	# Members

	async def list_members(
		self,
		*,
		q: Optional[str] = None,
		profile_id: Optional[UUID] = None,
		gender: Optional[str] = None,
	) -> List[models.FamilyMember]:
		return await self.members.list({"profile_id": profile_id, "gender": gender}, search=q)

	async def search_members(self, q: Optional[str]) -> List[models.FamilyMember]:
		if not q or not q.strip():
			raise ValidationError("query_required")
		return await self.members.list(search=q)

	async def get_member(self, member_id: UUID) -> models.FamilyMember:
		return await self.members.get(member_id)

	async def member_for_profile(self, profile_id: UUID) -> models.FamilyMember:
		matches = await self.members.list({"profile_id": profile_id})
		if not matches:
			raise NotFoundError(self.members.not_found)
		return matches[0]

	async def _commit_photo(self, photo: UploadFile) -> str:
		staged = await self.files.stage(
			photo,
			allowed_types=settings.family_photo_types,
			max_bytes=settings.family_photo_max_bytes,
		)
		return self.files.commit(staged, FAMILY_PHOTOS)

	async def create_member(
		self,
		actor: Optional[AuthenticatedUser],
		payload: schemas.MemberCreate,
		photo: Optional[UploadFile] = None,
	) -> models.FamilyMember:
		actor = self.members.authorize_write(actor)
		data: Dict[str, Any] = payload.model_dump()
		if photo is not None:
			data["photo_path"] = await self._commit_photo(photo)
		try:
			member = await self.member_repository.create(data)
		except Exception:
			self.files.purge(data.get("photo_path"))
			raise
		await self.members.record(
			"create",
			actor,
			member.id,
			{"name": f"{member.first_name} {member.last_name}", "has_photo": member.photo_path is not None},
		)
		return member

	async def update_member(
		self,
		actor: Optional[AuthenticatedUser],
		member_id: UUID,
		changes: Mapping[str, Any],
		photo: Optional[UploadFile] = None,
	) -> models.FamilyMember:
		actor = self.members.authorize_write(actor)
		changes = dict(changes)
		current: Optional[models.FamilyMember] = None
		if photo is not None or "birth_date" in changes or "death_date" in changes:
			current = await self.members.get(member_id)
			if not schemas.lifespan_is_ordered(
				changes.get("birth_date", current.birth_date),
				changes.get("death_date", current.death_date),
			):
				raise ValidationError("death_date_before_birth_date")
		if changes.get("death_date") is not None and "is_alive" not in changes:
			changes["is_alive"] = False
		new_key: Optional[str] = None
		if photo is not None:
			new_key = await self._commit_photo(photo)
			changes["photo_path"] = new_key
		try:
			member = await self.member_repository.update(member_id, changes)
		except Exception:
			self.files.purge(new_key)
			raise
		if member is None:
			self.files.purge(new_key)
			raise NotFoundError(self.members.not_found)
		if new_key is not None and current is not None:
			self.files.retire(current.photo_path, new_key)
		await self.members.record("update", actor, member_id, {"fields": sorted(changes)})
		return member

	async def delete_member(self, actor: Optional[AuthenticatedUser], member_id: UUID) -> None:
		actor = self.members.authorize_delete(actor)
		current = await self.members.get(member_id)
		# Relationships on either side are removed with the member (ON DELETE CASCADE)
		if not await self.member_repository.delete(member_id):
			raise NotFoundError(self.members.not_found)
		await self.members.record(
			"delete", actor, member_id, {"name": f"{current.first_name} {current.last_name}"}
		)
		self.files.purge(current.photo_path)

	async def remove_photo(self, actor: Optional[AuthenticatedUser], member_id: UUID) -> models.FamilyMember:
		actor = self.members.authorize_write(actor)
		current = await self.members.get(member_id)
		if not current.photo_path:
			raise NotFoundError("photo_not_found")
		member = await self.member_repository.update(member_id, {"photo_path": None})
		if member is None:
			raise NotFoundError(self.members.not_found)
		self.files.retire(current.photo_path)
		await self.members.record("update", actor, member_id, {"fields": ["photo_path"]})
		return member

	async def photo_download(self, member_id: UUID) -> Download:
		member = await self.members.get(member_id)
		if not member.photo_path:
			raise NotFoundError("photo_not_found")
		return self.files.download(
			member.photo_path,
			f"photo-{member.first_name}-{member.last_name}{extension_of(member.photo_path)}",
		)

	async def member_relations(self, member_id: UUID) -> models.MemberRelations:
		member = await self.members.get(member_id)
		view = models.MemberRelations(member=member)
		outgoing = await self.relationships.list({"from_member_id": member_id})
		# "other" rows have no reciprocal, so incoming ones are listed too
		incoming = await self.relationships.list({"to_member_id": member_id, "relationship_type": "other"})
		seen: Set[tuple] = set()
		for relationship in outgoing + incoming:
			outgoing_row = str(relationship.from_member_id) == str(member_id)
			relative_id = relationship.to_member_id if outgoing_row else relationship.from_member_id
			bucket = _BUCKETS[relationship.relationship_type]
			if (bucket, str(relative_id)) in seen:
				continue
			relative = await self.member_repository.get(relative_id)
			if relative is None:
				continue
			seen.add((bucket, str(relative_id)))
			getattr(view, bucket).append(relative)
		return view

	# Relationships

	async def list_relationships(
		self,
		*,
		from_member_id: Optional[UUID] = None,
		to_member_id: Optional[UUID] = None,
		relationship_type: Optional[str] = None,
	) -> List[models.FamilyRelationship]:
		return await self.relationships.list(
			{
				"from_member_id": from_member_id,
				"to_member_id": to_member_id,
				"relationship_type": relationship_type,
			}
		)

	async def get_relationship(self, relationship_id: UUID) -> models.FamilyRelationship:
		return await self.relationships.get(relationship_id)

	async def member_relationships(self, member_id: UUID) -> List[models.FamilyRelationship]:
		"""Rows on either side of a member, each listed once."""
		await self.members.get(member_id)
		rows: Dict[str, models.FamilyRelationship] = {}
		for relationship in await self.relationships.list({"from_member_id": member_id}):
			rows[str(relationship.id)] = relationship
		for relationship in await self.relationships.list({"to_member_id": member_id}):
			rows.setdefault(str(relationship.id), relationship)
		return list(rows.values())

	async def _mirror_of(self, relationship: models.FamilyRelationship) -> Optional[models.FamilyRelationship]:
		inverse = schemas.INVERSE_TYPES.get(relationship.relationship_type)
		if inverse is None:
			return None
		matches = await self.relationships.list(
			{
				"from_member_id": relationship.to_member_id,
				"to_member_id": relationship.from_member_id,
				"relationship_type": inverse,
			}
		)
		return matches[0] if matches else None

	async def create_relationship(
		self, actor: Optional[AuthenticatedUser], payload: schemas.RelationshipCreate
	) -> models.FamilyRelationship:
		actor = self.relationships.authorize_write(actor)
		await self.members.get(payload.from_member_id)
		await self.members.get(payload.to_member_id)
		existing = await self.relationships.list(
			{
				"from_member_id": payload.from_member_id,
				"to_member_id": payload.to_member_id,
				"relationship_type": payload.relationship_type,
			}
		)
		if existing:
			raise ConflictError("relationship_exists")
		data = payload.model_dump()
		mirror: Optional[Dict[str, Any]] = None
		inverse = schemas.INVERSE_TYPES.get(payload.relationship_type)
		if inverse is not None:
			mirror = {
				**data,
				"from_member_id": payload.to_member_id,
				"to_member_id": payload.from_member_id,
				"relationship_type": inverse,
			}
		relationship = await self.relationship_repository.create_pair(data, mirror)
		await self.relationships.record(
			"create",
			actor,
			relationship.id,
			{
				"relationship_type": relationship.relationship_type,
				"from_member_id": str(relationship.from_member_id),
				"to_member_id": str(relationship.to_member_id),
				"reciprocal": mirror is not None,
			},
		)
		return relationship

	async def update_relationship(
		self, actor: Optional[AuthenticatedUser], relationship_id: UUID, payload: schemas.RelationshipUpdate
	) -> models.FamilyRelationship:
		actor = self.relationships.authorize_write(actor)
		current = await self.relationships.get(relationship_id)
		changes = payload.model_dump(exclude_unset=True)
		start = changes.get("start_date", current.start_date)
		end = changes.get("end_date", current.end_date)
		if start is not None and end is not None and end < start:
			raise ValidationError("end_date_before_start_date")
		ids = [relationship_id]
		mirror = await self._mirror_of(current)
		if mirror is not None:
			ids.append(mirror.id)
		relationship = await self.relationship_repository.update_pair(ids, changes)
		if relationship is None:
			raise NotFoundError(self.relationships.not_found)
		await self.relationships.record("update", actor, relationship_id, {"fields": sorted(changes)})
		return relationship

	async def delete_relationship(self, actor: Optional[AuthenticatedUser], relationship_id: UUID) -> None:
		actor = self.relationships.authorize_delete(actor)
		current = await self.relationships.get(relationship_id)
		ids = [relationship_id]
		mirror = await self._mirror_of(current)
		if mirror is not None:
			ids.append(mirror.id)
		if not await self.relationship_repository.delete_pair(ids):
			raise NotFoundError(self.relationships.not_found)
		await self.relationships.record(
			"delete", actor, relationship_id, {"relationship_type": current.relationship_type, "reciprocal": mirror is not None}
		)

	# Tree views

	async def tree(self) -> models.FamilyTree:
		return models.FamilyTree(
			members=await self.members.list(),
			relationships=await self.relationships.list(),
		)

	async def member_tree(self, member_id: UUID, degree: int = DEFAULT_TREE_DEGREE) -> models.FamilyTree:
		"""Members within ``degree`` relationship hops of ``member_id`` and the rows between them."""
		await self.members.get(member_id)
		relationships = await self.relationships.list()
		neighbours: Dict[str, Set[str]] = {}
		for relationship in relationships:
			a, b = str(relationship.from_member_id), str(relationship.to_member_id)
			neighbours.setdefault(a, set()).add(b)
			neighbours.setdefault(b, set()).add(a)

		start = str(member_id)
		distance = {start: 0}
		queue = deque([start])
		while queue:
			current = queue.popleft()
			if distance[current] >= degree:
				continue
			for neighbour in neighbours.get(current, ()):
				if neighbour not in distance:
					distance[neighbour] = distance[current] + 1
					queue.append(neighbour)

		members = [member for member in await self.members.list() if str(member.id) in distance]
		return models.FamilyTree(
			members=members,
			relationships=[
				r for r in relationships if str(r.from_member_id) in distance and str(r.to_member_id) in distance
			],
		)
