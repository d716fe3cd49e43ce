"""Actor-based authorization checks shared across entity services."""

from __future__ import annotations

from typing import Iterable, Optional

from familyhub.domain.exceptions import ForbiddenError, UnauthenticatedError
from familyhub.infra.auth import AuthenticatedUser


def require_actor(actor: Optional[AuthenticatedUser]) -> AuthenticatedUser:
	if actor is None or not actor.id:
		raise UnauthenticatedError()
	return actor


def require_roles(actor: Optional[AuthenticatedUser], allowed: Iterable[str]) -> AuthenticatedUser:
	"""Ensure the actor holds at least one of ``allowed``; an empty set admits any member."""
	actor = require_actor(actor)
	allowed = tuple(allowed)
	if allowed and not actor.has_any_role(allowed):
		raise ForbiddenError("insufficient_role")
	return actor


def assert_not_self(actor: AuthenticatedUser, target_id: object) -> None:
	if str(actor.id) == str(target_id):
		raise ForbiddenError("cannot_modify_self")
