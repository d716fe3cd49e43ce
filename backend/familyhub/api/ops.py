"""Operations endpoints providing health checks and Prometheus metrics."""

from __future__ import annotations

import asyncio
from time import perf_counter

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from familyhub.infra import postgres
from familyhub.obs.logging import get_logger
from familyhub.settings import settings

router = APIRouter(prefix="", tags=["ops"])

_log = get_logger("familyhub.health")


@router.get("/health/live")
async def health_live() -> dict[str, str]:
	return {"status": "ok", "service": settings.service_name}


@router.get("/health/ready")
async def health_ready() -> Response:
	start = perf_counter()
	try:
		pool = await postgres.get_pool()
		async with pool.acquire() as conn:
			await asyncio.wait_for(conn.execute("SELECT 1"), timeout=0.5)
	except Exception as exc:
		_log.warning("postgres_readiness_failed", exc_info=True)
		payload = {"status": "unavailable", "postgres": {"ok": False}}
		if settings.show_error_details():
			payload["postgres"]["error"] = str(exc)
		return JSONResponse(content=payload, status_code=503)
	latency_ms = round((perf_counter() - start) * 1000, 2)
	return JSONResponse(content={"status": "ok", "postgres": {"ok": True, "latency_ms": latency_ms}})


@router.get("/metrics")
async def metrics_endpoint() -> Response:
	return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
