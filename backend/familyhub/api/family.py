"""Family tree API routes: members, photos, relationships and tree views."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from familyhub.api.forms import read_payload
from familyhub.api.responses import Deleted, file_response
from familyhub.domain.family import models, schemas
from familyhub.domain.family.service import DEFAULT_TREE_DEGREE, FamilyService
from familyhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/family", tags=["family"])

MAX_TREE_DEGREE = 5


def get_family_service() -> FamilyService:
	return FamilyService()


# Members

@router.get("/members", response_model=List[models.FamilyMember])
async def list_members_endpoint(
	q: Optional[str] = None,
	profile_id: Optional[UUID] = None,
	gender: Optional[schemas.Gender] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> List[models.FamilyMember]:
	return await service.list_members(q=q, profile_id=profile_id, gender=gender)


@router.get("/members/search", response_model=List[models.FamilyMember])
async def search_members_endpoint(
	query: Optional[str] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> List[models.FamilyMember]:
	return await service.search_members(query)


@router.get("/members/profile/{profile_id}", response_model=models.FamilyMember)
async def member_for_profile_endpoint(
	profile_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyMember:
	return await service.member_for_profile(profile_id)


@router.post("/members", response_model=models.FamilyMember, status_code=201)
async def create_member_endpoint(
	request: Request,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyMember:
	payload = await read_payload(request)
	return await service.create_member(auth_user, payload.parse(schemas.MemberCreate), payload.file("photo"))


@router.get("/members/{member_id}", response_model=models.FamilyMember)
async def get_member_endpoint(
	member_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyMember:
	return await service.get_member(member_id)


@router.get("/members/{member_id}/relations", response_model=models.MemberRelations)
async def member_relations_endpoint(
	member_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.MemberRelations:
	return await service.member_relations(member_id)


@router.get("/members/{member_id}/photo")
async def member_photo_endpoint(
	member_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
):
	return file_response(await service.photo_download(member_id))


@router.delete("/members/{member_id}/photo", response_model=models.FamilyMember)
async def remove_member_photo_endpoint(
	member_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyMember:
	return await service.remove_photo(auth_user, member_id)


@router.api_route("/members/{member_id}", methods=["PUT", "PATCH"], response_model=models.FamilyMember)
async def update_member_endpoint(
	member_id: UUID,
	request: Request,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyMember:
	payload = await read_payload(request, partial=True)
	changes = payload.parse(schemas.MemberUpdate).model_dump(exclude_unset=True)
	return await service.update_member(auth_user, member_id, changes, payload.file("photo"))


@router.delete("/members/{member_id}", response_model=Deleted)
async def delete_member_endpoint(
	member_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> Deleted:
	await service.delete_member(auth_user, member_id)
	return Deleted(id=member_id)


# Relationships

@router.get("/relationships", response_model=List[models.FamilyRelationship])
async def list_relationships_endpoint(
	from_member_id: Optional[UUID] = None,
	to_member_id: Optional[UUID] = None,
	relationship_type: Optional[schemas.RelationshipType] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> List[models.FamilyRelationship]:
	return await service.list_relationships(
		from_member_id=from_member_id, to_member_id=to_member_id, relationship_type=relationship_type
	)


@router.post("/relationships", response_model=models.FamilyRelationship, status_code=201)
async def create_relationship_endpoint(
	payload: schemas.RelationshipCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyRelationship:
	return await service.create_relationship(auth_user, payload)


@router.get("/relationships/member/{member_id}", response_model=List[models.FamilyRelationship])
async def member_relationships_endpoint(
	member_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> List[models.FamilyRelationship]:
	return await service.member_relationships(member_id)


@router.get("/relationships/{relationship_id}", response_model=models.FamilyRelationship)
async def get_relationship_endpoint(
	relationship_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyRelationship:
	return await service.get_relationship(relationship_id)


@router.api_route("/relationships/{relationship_id}", methods=["PUT", "PATCH"], response_model=models.FamilyRelationship)
async def update_relationship_endpoint(
	relationship_id: UUID,
	payload: schemas.RelationshipUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyRelationship:
	return await service.update_relationship(auth_user, relationship_id, payload)


@router.delete("/relationships/{relationship_id}", response_model=Deleted)
async def delete_relationship_endpoint(
	relationship_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> Deleted:
	await service.delete_relationship(auth_user, relationship_id)
	return Deleted(id=relationship_id)


# Tree views

@router.get("/tree", response_model=models.FamilyTree)
async def family_tree_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyTree:
	return await service.tree()


@router.get("/tree/member/{member_id}", response_model=models.FamilyTree)
async def member_tree_endpoint(
	member_id: UUID,
	degree: int = Query(default=DEFAULT_TREE_DEGREE, ge=1, le=MAX_TREE_DEGREE),
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: FamilyService = Depends(get_family_service),
) -> models.FamilyTree:
	return await service.member_tree(member_id, degree)
