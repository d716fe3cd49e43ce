"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from familyhub.api import (
	auth,
	contributions,
	documents,
	events,
	family,
	members,
	messages,
	monthly_contributions,
	ops,
	projects,
)
from familyhub.api.errors import install_error_handlers
from familyhub.infra import postgres
from familyhub.infra.storage import get_file_store
from familyhub.obs import init as obs_init
from familyhub.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
	await postgres.init_pool()
	get_file_store().ensure_layout()
	try:
		yield
	finally:
		await postgres.close_pool()


app = FastAPI(title="FamilyHub API", lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(settings.cors_allow_origins)
if not allow_origins:
	allow_origins = ["http://localhost:3000", "http://localhost:5173"] if settings.is_dev() else []

# Starlette disallows wildcard '*' with allow_credentials=True
allow_credentials = "*" not in allow_origins

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=allow_credentials,
	allow_methods=["*"],
	allow_headers=["*"],
)
obs_init(app)

app.include_router(auth.router)
app.include_router(members.router)
app.include_router(contributions.router)
app.include_router(events.router)
app.include_router(projects.router)
app.include_router(monthly_contributions.router)
app.include_router(documents.router)
app.include_router(messages.router)
app.include_router(family.router)
app.include_router(ops.router)
