"""Messaging API routes."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from familyhub.api.forms import read_payload
from familyhub.api.responses import Deleted, file_response
from familyhub.domain.messages import models, schemas
from familyhub.domain.messages.service import MessageService
from familyhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/messages", tags=["messages"])


def get_message_service() -> MessageService:
	return MessageService()


@router.get("", response_model=List[models.MessageSummary])
async def list_all_messages_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> List[models.MessageSummary]:
	return await service.list_all(auth_user)


@router.post("", response_model=models.MessageDetail, status_code=201)
async def send_message_endpoint(
	request: Request,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> models.MessageDetail:
	payload = await read_payload(request)
	data = payload.parse(schemas.MessageCreate)
	return await service.send_message(auth_user, data, payload.file_list("attachments"))


@router.get("/inbox", response_model=List[models.MessageSummary])
async def inbox_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> List[models.MessageSummary]:
	return await service.inbox(auth_user)


@router.get("/sent", response_model=List[models.MessageSummary])
async def sent_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> List[models.MessageSummary]:
	return await service.sent(auth_user)


@router.get("/trash", response_model=List[models.MessageSummary])
async def trash_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> List[models.MessageSummary]:
	return await service.trash(auth_user)


@router.get("/unread-count", response_model=models.UnreadCount)
async def unread_count_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> models.UnreadCount:
	return await service.unread_count(auth_user)


@router.get("/search", response_model=List[models.MessageSummary])
async def search_messages_endpoint(
	q: str = Query(default=""),
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> List[models.MessageSummary]:
	return await service.search(auth_user, q)


@router.get("/thread/{message_id}", response_model=models.MessageThread)
async def thread_endpoint(
	message_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> models.MessageThread:
	return await service.get_thread(auth_user, message_id)


@router.get("/{message_id}", response_model=models.MessageDetail)
async def get_message_endpoint(
	message_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> models.MessageDetail:
	return await service.get_message(auth_user, message_id)


@router.patch("/{message_id}/read", response_model=models.MessageRecipient)
async def mark_read_endpoint(
	message_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> models.MessageRecipient:
	return await service.mark_read(auth_user, message_id)


@router.patch("/{message_id}/delete", response_model=models.MessageRecipient)
async def soft_delete_endpoint(
	message_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> models.MessageRecipient:
	return await service.mark_deleted(auth_user, message_id)


@router.patch("/{message_id}/restore", response_model=models.MessageRecipient)
async def restore_endpoint(
	message_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> models.MessageRecipient:
	return await service.restore(auth_user, message_id)


@router.delete("/{message_id}", response_model=Deleted)
async def delete_message_endpoint(
	message_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
) -> Deleted:
	await service.delete_permanently(auth_user, message_id)
	return Deleted(id=message_id)


@router.get("/{message_id}/attachments/{attachment_id}")
async def download_attachment_endpoint(
	message_id: UUID,
	attachment_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessageService = Depends(get_message_service),
):
	return file_response(await service.attachment_download(auth_user, message_id, attachment_id))
