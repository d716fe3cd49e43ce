"""Exception taxonomy shared by every FamilyHub service."""

from __future__ import annotations

from fastapi import status


class FamilyHubError(Exception):
	"""Base class for domain errors that map onto an HTTP status."""

	status_code: int = status.HTTP_400_BAD_REQUEST
	detail: str = "familyhub_error"

	def __init__(self, detail: str | None = None) -> None:
		super().__init__(detail or self.detail)
		if detail:
			self.detail = detail


class ValidationError(FamilyHubError):
	"""Missing or malformed input detected before any store access."""

	status_code = status.HTTP_400_BAD_REQUEST
	detail = "validation_error"


class UnauthenticatedError(FamilyHubError):
	"""No identity was established for the request."""

	status_code = status.HTTP_401_UNAUTHORIZED
	detail = "authentication_required"


class ForbiddenError(FamilyHubError):
	"""The actor is known but not allowed to perform the operation."""

	status_code = status.HTTP_403_FORBIDDEN
	detail = "forbidden"


AuthorizationError = ForbiddenError


class NotFoundError(FamilyHubError):
	status_code = status.HTTP_404_NOT_FOUND
	detail = "not_found"


class ConflictError(FamilyHubError):
	"""Raised for conflicting writes (e.g., duplicate email)."""

	status_code = status.HTTP_409_CONFLICT
	detail = "conflict"


class StorageFault(FamilyHubError):
	"""Filesystem or store operation failed unexpectedly."""

	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
	detail = "internal_error"


class AuditFault(Exception):
	"""Audit record could not be persisted. Never leaves the audit logger."""
