import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Settings require a signing key at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-familyhub-tests")

# Ensure backend package and test helpers are importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
TESTS_ROOT = Path(__file__).resolve().parent
for path in (BACKEND_ROOT, TESTS_ROOT):
	if str(path) not in sys.path:
		sys.path.insert(0, str(path))

from familyhub.infra import postgres
from familyhub.infra.storage import FileStore, set_file_store
from familyhub.main import app
from familyhub.settings import settings

from fakes import FakeAudit


@pytest.fixture(autouse=True)
def patch_postgres(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(postgres, "init_pool", _noop)
	monkeypatch.setattr(postgres, "close_pool", _noop)


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Ensure a consistent test environment.

	Most API tests authenticate via X-User-Id/X-User-Roles headers, which are only
	accepted in dev mode.
	"""
	original_env = settings.environment
	settings.environment = "dev"
	try:
		yield
	finally:
		settings.environment = original_env


@pytest.fixture
def file_store(tmp_path):
	store = FileStore(tmp_path / "uploads")
	store.ensure_layout()
	set_file_store(store)
	try:
		yield store
	finally:
		set_file_store(None)


@pytest.fixture
def audit():
	return FakeAudit()


@pytest.fixture(autouse=True)
def clear_overrides():
	try:
		yield
	finally:
		app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api_client():
	# Unhandled errors still produce the JSON 500 body instead of propagating into the test
	transport = ASGITransport(app=app, raise_app_exceptions=False)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
