"""Document library API routes."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from familyhub.api.forms import read_payload
from familyhub.api.responses import Deleted, file_response
from familyhub.domain.documents import models, schemas
from familyhub.domain.documents.service import DocumentService
from familyhub.domain.exceptions import ValidationError
from familyhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/documents", tags=["documents"])


def get_document_service() -> DocumentService:
	return DocumentService()


@router.get("", response_model=List[models.Document])
async def list_documents_endpoint(
	category_id: Optional[UUID] = None,
	uploaded_by: Optional[UUID] = None,
	q: Optional[str] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> List[models.Document]:
	return await service.list_documents(category_id=category_id, uploaded_by=uploaded_by, q=q)


@router.post("", response_model=models.Document, status_code=201)
async def upload_document_endpoint(
	request: Request,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> models.Document:
	payload = await read_payload(request)
	data = payload.parse(schemas.DocumentCreate)
	upload = payload.file("file")
	if upload is None:
		raise ValidationError("file_required")
	return await service.upload_document(auth_user, data, upload)


# Categories

@router.get("/categories", response_model=List[models.DocumentCategory])
async def list_categories_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> List[models.DocumentCategory]:
	return await service.list_categories()


@router.post("/categories", response_model=models.DocumentCategory, status_code=201)
async def create_category_endpoint(
	payload: schemas.CategoryCreate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> models.DocumentCategory:
	return await service.create_category(auth_user, payload)


@router.get("/categories/{category_id}", response_model=models.DocumentCategory)
async def get_category_endpoint(
	category_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> models.DocumentCategory:
	return await service.get_category(category_id)


@router.api_route("/categories/{category_id}", methods=["PUT", "PATCH"], response_model=models.DocumentCategory)
async def update_category_endpoint(
	category_id: UUID,
	payload: schemas.CategoryUpdate,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> models.DocumentCategory:
	return await service.update_category(auth_user, category_id, payload)


@router.delete("/categories/{category_id}", response_model=Deleted)
async def delete_category_endpoint(
	category_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> Deleted:
	await service.delete_category(auth_user, category_id)
	return Deleted(id=category_id)


@router.get("/category/{category_id}", response_model=List[models.Document])
async def documents_by_category_endpoint(
	category_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> List[models.Document]:
	return await service.list_documents(category_id=category_id)


@router.get("/user/{user_id}", response_model=List[models.Document])
async def documents_by_user_endpoint(
	user_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> List[models.Document]:
	return await service.list_documents(uploaded_by=user_id)


# Single document

@router.get("/{document_id}", response_model=models.Document)
async def get_document_endpoint(
	document_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> models.Document:
	return await service.get_document(document_id)


@router.get("/{document_id}/download")
async def download_document_endpoint(
	document_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
):
	return file_response(await service.document_download(auth_user, document_id))


@router.api_route("/{document_id}", methods=["PUT", "PATCH"], response_model=models.Document)
async def update_document_endpoint(
	document_id: UUID,
	request: Request,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> models.Document:
	payload = await read_payload(request, partial=True)
	changes = payload.parse(schemas.DocumentUpdate).model_dump(exclude_unset=True)
	return await service.update_document(auth_user, document_id, changes, payload.file("file"))


@router.delete("/{document_id}", response_model=Deleted)
async def delete_document_endpoint(
	document_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DocumentService = Depends(get_document_service),
) -> Deleted:
	await service.delete_document(auth_user, document_id)
	return Deleted(id=document_id)
