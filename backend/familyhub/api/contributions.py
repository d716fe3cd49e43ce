"""Contribution API routes."""

from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from familyhub.api.forms import read_payload
from familyhub.api.responses import Deleted, file_response
from familyhub.domain.contributions import models, schemas
from familyhub.domain.contributions.service import ContributionService
from familyhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/contributions", tags=["contributions"])


def get_contribution_service() -> ContributionService:
	return ContributionService()


@router.get("", response_model=List[models.Contribution])
async def list_contributions_endpoint(
	user_id: Optional[UUID] = None,
	status: Optional[schemas.ContributionStatus] = None,
	source_type: Optional[schemas.SourceType] = None,
	source_id: Optional[UUID] = None,
	payment_method: Optional[str] = None,
	from_date: Optional[date] = None,
	to_date: Optional[date] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> List[models.Contribution]:
	return await service.list_contributions(
		{
			"user_id": user_id,
			"status": status,
			"source_type": source_type,
			"source_id": source_id,
			"payment_method": payment_method,
			"from_date": from_date,
			"to_date": to_date,
		}
	)


@router.get("/summary", response_model=models.FinancialSummary)
async def financial_summary_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> models.FinancialSummary:
	return await service.summary()


@router.get("/monthly-summary", response_model=List[models.FinancialPeriodSummary])
async def monthly_summary_endpoint(
	year: Optional[int] = Query(default=None, ge=1900, le=9999),
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> List[models.FinancialPeriodSummary]:
	return await service.monthly_summary(year)


@router.get("/yearly-summary", response_model=List[models.FinancialPeriodSummary])
async def yearly_summary_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> List[models.FinancialPeriodSummary]:
	return await service.yearly_summary()


@router.get("/payment-methods", response_model=List[models.PaymentMethodStat])
async def payment_methods_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> List[models.PaymentMethodStat]:
	return await service.payment_method_stats()


@router.get("/top-contributors", response_model=List[models.TopContributor])
async def top_contributors_endpoint(
	limit: int = Query(default=10, ge=1, le=100),
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> List[models.TopContributor]:
	return await service.top_contributors(limit)


@router.get("/user/{user_id}", response_model=List[models.Contribution])
async def contributions_by_user_endpoint(
	user_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> List[models.Contribution]:
	return await service.by_user(user_id)


@router.get("/user/{user_id}/summary", response_model=models.FinancialSummary)
async def user_summary_endpoint(
	user_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> models.FinancialSummary:
	return await service.summary(user_id)


@router.get("/source/{source_type}", response_model=List[models.Contribution])
@router.get("/source/{source_type}/{source_id}", response_model=List[models.Contribution])
async def contributions_by_source_endpoint(
	source_type: schemas.SourceType,
	source_id: Optional[UUID] = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> List[models.Contribution]:
	return await service.by_source(source_type, source_id)


@router.get("/{contribution_id}", response_model=models.Contribution)
async def get_contribution_endpoint(
	contribution_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> models.Contribution:
	return await service.get_contribution(contribution_id)


@router.get("/{contribution_id}/receipt")
async def download_receipt_endpoint(
	contribution_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
):
	return file_response(await service.receipt_download(auth_user, contribution_id))


@router.post("", response_model=models.Contribution, status_code=201)
async def create_contribution_endpoint(
	request: Request,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> models.Contribution:
	payload = await read_payload(request)
	data = payload.parse(schemas.ContributionCreate)
	return await service.create_contribution(auth_user, data, payload.file("receipt"))


@router.api_route("/{contribution_id}", methods=["PUT", "PATCH"], response_model=models.Contribution)
async def update_contribution_endpoint(
	contribution_id: UUID,
	request: Request,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> models.Contribution:
	payload = await read_payload(request, partial=True)
	changes = payload.parse(schemas.ContributionUpdate).model_dump(exclude_unset=True)
	return await service.update_contribution(auth_user, contribution_id, changes, payload.file("receipt"))


@router.delete("/{contribution_id}", response_model=Deleted)
async def delete_contribution_endpoint(
	contribution_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ContributionService = Depends(get_contribution_service),
) -> Deleted:
	await service.delete_contribution(auth_user, contribution_id)
	return Deleted(id=contribution_id)
