"""Response helpers shared by the routers."""

from __future__ import annotations

from uuid import UUID

from fastapi.responses import FileResponse
from pydantic import BaseModel

from familyhub.infra.storage import Download


class Deleted(BaseModel):
	id: UUID
	deleted: bool = True


def file_response(download: Download) -> FileResponse:
	"""Stream a stored upload under its logical download name."""
	return FileResponse(
		path=download.path,
		filename=download.filename,
		media_type=download.media_type,
	)
