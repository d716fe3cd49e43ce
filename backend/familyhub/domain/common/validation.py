"""Annotated field types reused by the entity schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import AfterValidator, BeforeValidator


def positive_amount(value: Decimal) -> Decimal:
	if value <= 0:
		raise ValueError("must be greater than zero")
	return value


def blank_to_none(value: Any) -> Any:
	if isinstance(value, str) and not value.strip():
		return None
	return value


def require_text(value: str) -> str:
	if not value.strip():
		raise ValueError("must not be blank")
	return value.strip()


PositiveAmount = Annotated[Decimal, AfterValidator(positive_amount)]
Text = Annotated[str, AfterValidator(require_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]
OptionalUUID = Annotated[Optional[UUID], BeforeValidator(blank_to_none)]
OptionalDate = Annotated[Optional[date], BeforeValidator(blank_to_none)]
OptionalAmount = Annotated[Optional[PositiveAmount], BeforeValidator(blank_to_none)]
