"""Party checks for message access."""

from __future__ import annotations

from typing import Iterable, Optional

from familyhub.domain.exceptions import ForbiddenError
from familyhub.domain.messages import models
from familyhub.infra.auth import AuthenticatedUser


def is_sender(actor: AuthenticatedUser, message: models.Message) -> bool:
	return str(message.sender_id) == str(actor.id)


def recipient_row(
	actor: AuthenticatedUser, recipients: Iterable[models.MessageRecipient]
) -> Optional[models.MessageRecipient]:
	for row in recipients:
		if str(row.recipient_id) == str(actor.id):
			return row
	return None


def assert_party(
	actor: AuthenticatedUser, message: models.Message, recipients: Iterable[models.MessageRecipient]
) -> None:
	if is_sender(actor, message) or recipient_row(actor, recipients) is not None:
		return
	raise ForbiddenError("not_message_party")


def assert_sender(actor: AuthenticatedUser, message: models.Message) -> None:
	if not is_sender(actor, message):
		raise ForbiddenError("sender_required")


def require_recipient(
	actor: AuthenticatedUser, recipients: Iterable[models.MessageRecipient]
) -> models.MessageRecipient:
	row = recipient_row(actor, recipients)
	if row is None:
		raise ForbiddenError("recipient_required")
	return row
