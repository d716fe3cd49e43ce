"""Helpers for endpoints that accept either multipart forms or JSON bodies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar

from fastapi import Request, UploadFile
from pydantic import BaseModel
from starlette.datastructures import UploadFile as StarletteUploadFile

from familyhub.domain.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Fields that may legitimately repeat in a multipart body
_LIST_FIELDS = frozenset({"recipient_ids"})


@dataclass
class Payload:
	fields: Dict[str, Any] = field(default_factory=dict)
	files: Dict[str, List[UploadFile]] = field(default_factory=dict)

	def file(self, name: str) -> Optional[UploadFile]:
		uploads = self.files.get(name) or []
		return uploads[0] if uploads else None

	def file_list(self, name: str) -> List[UploadFile]:
		return list(self.files.get(name) or [])

	def parse(self, schema: Type[SchemaT]) -> SchemaT:
		return schema.model_validate(self.fields)


async def read_payload(request: Request, *, partial: bool = False) -> Payload:
	"""Collect scalar fields and uploads from the request body.

	Blank form values are dropped on create and mean "clear this field" when
	``partial`` is set. File parts without a filename are ignored.
	"""
	content_type = request.headers.get("content-type", "")
	if content_type.startswith("application/json"):
		try:
			body = await request.json()
		except ValueError as exc:
			raise ValidationError("invalid_json") from exc
		if not isinstance(body, dict):
			raise ValidationError("invalid_json")
		return Payload(fields=body)

	form = await request.form()
	payload = Payload()
	for key, value in form.multi_items():
		name = key[:-2] if key.endswith("[]") else key
		if isinstance(value, StarletteUploadFile):
			if value.filename:
				payload.files.setdefault(name, []).append(value)
			continue
		if name in _LIST_FIELDS:
			payload.fields.setdefault(name, []).append(value)
			continue
		if value == "":
			if partial:
				payload.fields[name] = None
			continue
		payload.fields[name] = value
	return payload
