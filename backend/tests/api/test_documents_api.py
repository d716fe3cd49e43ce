from unittest.mock import patch

import pytest

from familyhub.api.documents import get_document_service
from familyhub.domain.documents.repo import CATEGORIES, DOCUMENTS
from familyhub.domain.documents.service import DocumentService
from familyhub.main import app

from fakes import FakeTable, member_headers, new_id

MEMBER = new_id()
ADMIN = new_id()


@pytest.fixture
def library(file_store, audit):
	documents = FakeTable(DOCUMENTS)
	categories = FakeTable(CATEGORIES)
	service = DocumentService(documents, categories, files=file_store, audit=audit)
	app.dependency_overrides[get_document_service] = lambda: service
	return documents, categories


async def _upload(api_client, title="Bylaws", name="bylaws.pdf", content=b"%PDF bylaws"):
	return await api_client.post(
		"/api/documents",
		data={"title": title, "description": ""},
		files={"file": (name, content, "application/pdf")},
		headers=member_headers(MEMBER, "standard"),
	)


@pytest.mark.asyncio
async def test_any_member_can_upload(api_client, library, file_store, audit):
	response = await _upload(api_client)

	assert response.status_code == 201
	body = response.json()
	assert body["uploaded_by"] == MEMBER
	assert body["file_type"] == "application/pdf"
	assert body["file_size"] == len(b"%PDF bylaws")
	assert body["description"] is None
	assert (file_store.root / body["file_path"]).is_file()
	assert audit.actions() == ["create"]


@pytest.mark.asyncio
async def test_upload_without_file_is_rejected(api_client, library):
	response = await api_client.post(
		"/api/documents", data={"title": "Empty"}, headers=member_headers(MEMBER, "standard")
	)
	assert response.status_code == 400
	assert response.json()["detail"] == "file_required"
	assert library[0].writes == []


@pytest.mark.asyncio
async def test_unsupported_type_is_rejected(api_client, library, file_store):
	response = await api_client.post(
		"/api/documents",
		data={"title": "Script"},
		files={"file": ("run.exe", b"MZ", "application/x-msdownload")},
		headers=member_headers(MEMBER, "standard"),
	)
	assert response.status_code == 400
	assert response.json()["detail"] == "unsupported_file_type"
	assert list((file_store.root / "documents").iterdir()) == []


@pytest.mark.asyncio
async def test_replace_file_on_update(api_client, library, file_store):
	created = (await _upload(api_client)).json()

	response = await api_client.put(
		f"/api/documents/{created['id']}",
		data={"title": "Bylaws 2024"},
		files={"file": ("bylaws-2024.pdf", b"%PDF new", "application/pdf")},
		headers=member_headers(ADMIN, "admin"),
	)

	assert response.status_code == 200
	body = response.json()
	assert body["title"] == "Bylaws 2024"
	assert body["file_size"] == len(b"%PDF new")
	assert body["file_path"] != created["file_path"]
	assert not (file_store.root / created["file_path"]).exists()


@pytest.mark.asyncio
async def test_delete_requires_write_role_and_purges(api_client, library, file_store, audit):
	created = (await _upload(api_client)).json()

	forbidden = await api_client.delete(f"/api/documents/{created['id']}", headers=member_headers(MEMBER, "standard"))
	assert forbidden.status_code == 403

	response = await api_client.delete(f"/api/documents/{created['id']}", headers=member_headers(ADMIN, "admin"))
	assert response.status_code == 200
	assert not (file_store.root / created["file_path"]).exists()
	assert audit.actions() == ["create", "delete"]


@pytest.mark.asyncio
async def test_download_named_after_title(api_client, library):
	created = (await _upload(api_client)).json()

	response = await api_client.get(f"/api/documents/{created['id']}/download", headers=member_headers(MEMBER))

	assert response.status_code == 200
	assert response.content == b"%PDF bylaws"
	assert "Bylaws.pdf" in response.headers["content-disposition"]


@pytest.mark.asyncio
async def test_category_lifecycle(api_client, library, audit):
	created = await api_client.post(
		"/api/documents/categories",
		json={"name": "Minutes"},
		headers=member_headers(new_id(), "manager"),
	)
	assert created.status_code == 201
	category_id = created.json()["id"]

	listing = await api_client.get("/api/documents/categories", headers=member_headers(MEMBER))
	assert [c["name"] for c in listing.json()] == ["Minutes"]

	by_manager = await api_client.delete(
		f"/api/documents/categories/{category_id}", headers=member_headers(new_id(), "manager")
	)
	assert by_manager.status_code == 403

	by_admin = await api_client.delete(
		f"/api/documents/categories/{category_id}", headers=member_headers(ADMIN, "admin")
	)
	assert by_admin.status_code == 200
	assert [entry["target_type"] for entry in audit.entries] == ["document_category", "document_category"]


@pytest.mark.asyncio
async def test_failed_update_keeps_stored_document(api_client, library, file_store, audit):
	created = (await _upload(api_client)).json()
	documents, _ = library
	documents.fail_next_write = RuntimeError("update failed")

	response = await api_client.put(
		f"/api/documents/{created['id']}",
		data={"title": "Bylaws 2024"},
		files={"file": ("bylaws-2024.pdf", b"%PDF new", "application/pdf")},
		headers=member_headers(ADMIN, "admin"),
	)

	assert response.status_code == 500
	row = documents.rows[created["id"]]
	assert row["file_path"] == created["file_path"]
	assert (file_store.root / row["file_path"]).read_bytes() == b"%PDF bylaws"
	assert len(list((file_store.root / "documents").iterdir())) == 1
	assert audit.actions() == ["create"]


@pytest.mark.asyncio
async def test_failed_commit_on_update_surfaces_and_keeps_row(api_client, library, file_store, audit):
	created = (await _upload(api_client)).json()
	documents, _ = library

	with patch("familyhub.infra.storage.shutil.move", side_effect=OSError("disk full")):
		response = await api_client.put(
			f"/api/documents/{created['id']}",
			files={"file": ("bylaws-2024.pdf", b"%PDF new", "application/pdf")},
			headers=member_headers(ADMIN, "admin"),
		)

	assert response.status_code == 500
	assert response.json()["detail"] == "file_commit_failed"
	assert documents.writes == ["create"]
	assert (file_store.root / created["file_path"]).is_file()
	assert audit.actions() == ["create"]
