from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest

from familyhub.api.contributions import get_contribution_service
from familyhub.domain.contributions.repo import CONTRIBUTIONS
from familyhub.domain.contributions.service import ContributionService
from familyhub.main import app

from fakes import FakeTable, member_headers, new_id

TREASURER = new_id()
ADMIN = new_id()
MEMBER = new_id()


@pytest.fixture
def contributions(file_store, audit):
	table = FakeTable(CONTRIBUTIONS)
	service = ContributionService(table, files=file_store, audit=audit)
	app.dependency_overrides[get_contribution_service] = lambda: service
	return table


def _form(**overrides):
	data = {
		"user_id": MEMBER,
		"amount": "50.00",
		"payment_date": "2024-03-01",
		"payment_method": "bank_transfer",
		"source_type": "other",
		"notes": "",
	}
	data.update(overrides)
	return data


def _receipt():
	return {"receipt": ("receipt.pdf", b"%PDF-1.4 receipt", "application/pdf")}


def _seed(table, **values):
	row = {
		"user_id": MEMBER,
		"amount": Decimal("20"),
		"payment_date": date(2024, 1, 5),
		"payment_method": "cash",
		"status": "completed",
		"source_type": "other",
	}
	row.update(values)
	return table.seed(**row)


@pytest.mark.asyncio
async def test_standard_member_cannot_create(api_client, contributions, file_store, audit):
	response = await api_client.post(
		"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(MEMBER, "standard")
	)

	assert response.status_code == 403
	assert response.json()["detail"] == "insufficient_role"
	assert contributions.rows == {}
	assert list((file_store.root / "receipts").iterdir()) == []
	assert audit.entries == []


@pytest.mark.asyncio
async def test_missing_identity_is_unauthenticated(api_client, contributions):
	response = await api_client.get("/api/contributions")
	assert response.status_code == 401


@pytest.mark.asyncio
async def test_treasurer_creates_with_receipt(api_client, contributions, file_store, audit):
	response = await api_client.post(
		"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(TREASURER, "treasurer")
	)

	assert response.status_code == 201
	body = response.json()
	assert body["status"] == "pending"
	assert body["notes"] is None
	assert body["receipt_path"].startswith("receipts/")
	assert (file_store.root / body["receipt_path"]).read_bytes() == b"%PDF-1.4 receipt"
	assert audit.actions() == ["create"]
	assert audit.entries[0]["user_id"] == TREASURER
	assert audit.entries[0]["target_type"] == "contribution"
	assert audit.entries[0]["details"]["has_receipt"] is True


@pytest.mark.asyncio
async def test_invalid_amount_is_rejected_before_any_write(api_client, contributions, audit):
	response = await api_client.post(
		"/api/contributions", data=_form(amount="-5"), headers=member_headers(TREASURER, "treasurer")
	)

	assert response.status_code == 400
	assert response.json()["detail"] == "validation_error"
	assert contributions.writes == []
	assert audit.entries == []


@pytest.mark.asyncio
async def test_failed_insert_removes_committed_receipt(api_client, contributions, file_store, audit):
	contributions.fail_next_write = RuntimeError("insert failed")

	response = await api_client.post(
		"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(ADMIN, "admin")
	)

	assert response.status_code == 500
	assert list((file_store.root / "receipts").iterdir()) == []
	assert audit.entries == []


@pytest.mark.asyncio
async def test_empty_update_is_audited_without_write(api_client, contributions, audit):
	existing = _seed(contributions)

	response = await api_client.put(
		f"/api/contributions/{existing.id}", json={}, headers=member_headers(TREASURER, "treasurer")
	)

	assert response.status_code == 200
	assert contributions.writes == []
	assert audit.actions() == ["update"]
	assert audit.entries[0]["details"] == {"fields": []}


@pytest.mark.asyncio
async def test_partial_update_clears_optional_field(api_client, contributions, audit):
	existing = _seed(contributions, notes="paid at picnic")

	response = await api_client.patch(
		f"/api/contributions/{existing.id}",
		json={"notes": None, "status": "refunded"},
		headers=member_headers(ADMIN, "admin"),
	)

	assert response.status_code == 200
	body = response.json()
	assert body["notes"] is None
	assert body["status"] == "refunded"
	assert body["payment_method"] == "cash"
	assert audit.entries[-1]["details"] == {"fields": ["notes", "status"]}


@pytest.mark.asyncio
async def test_update_replaces_receipt(api_client, contributions, file_store):
	created = await api_client.post(
		"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(ADMIN, "admin")
	)
	old_key = created.json()["receipt_path"]

	response = await api_client.put(
		f"/api/contributions/{created.json()['id']}",
		data={"payment_method": "cash"},
		files={"receipt": ("new.png", b"\x89PNG", "image/png")},
		headers=member_headers(ADMIN, "admin"),
	)

	assert response.status_code == 200
	new_key = response.json()["receipt_path"]
	assert new_key.endswith(".png")
	assert (file_store.root / new_key).is_file()
	assert not (file_store.root / old_key).exists()


@pytest.mark.asyncio
async def test_update_unknown_contribution_is_404(api_client, contributions, audit):
	response = await api_client.put(
		f"/api/contributions/{new_id()}", json={"notes": "x"}, headers=member_headers(ADMIN, "admin")
	)
	assert response.status_code == 404
	assert response.json()["detail"] == "contribution_not_found"
	assert audit.entries == []


@pytest.mark.asyncio
async def test_delete_requires_delete_role_and_purges_receipt(api_client, contributions, file_store, audit):
	created = await api_client.post(
		"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(ADMIN, "admin")
	)
	contribution_id = created.json()["id"]
	key = created.json()["receipt_path"]

	forbidden = await api_client.delete(
		f"/api/contributions/{contribution_id}", headers=member_headers(TREASURER, "treasurer")
	)
	assert forbidden.status_code == 403
	assert (file_store.root / key).is_file()

	response = await api_client.delete(
		f"/api/contributions/{contribution_id}", headers=member_headers(ADMIN, "admin")
	)
	assert response.status_code == 200
	assert response.json() == {"id": contribution_id, "deleted": True}
	assert not (file_store.root / key).exists()
	assert audit.actions() == ["create", "delete"]

	missing = await api_client.delete(
		f"/api/contributions/{contribution_id}", headers=member_headers(ADMIN, "admin")
	)
	assert missing.status_code == 404


@pytest.mark.asyncio
async def test_receipt_download_uses_logical_filename(api_client, contributions):
	created = await api_client.post(
		"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(ADMIN, "admin")
	)
	contribution_id = created.json()["id"]

	response = await api_client.get(
		f"/api/contributions/{contribution_id}/receipt", headers=member_headers(MEMBER, "standard")
	)

	assert response.status_code == 200
	assert response.content == b"%PDF-1.4 receipt"
	assert f"receipt-{contribution_id}.pdf" in response.headers["content-disposition"]


@pytest.mark.asyncio
async def test_list_filters_by_status(api_client, contributions):
	_seed(contributions, status="completed")
	_seed(contributions, status="pending")

	response = await api_client.get(
		"/api/contributions?status=pending", headers=member_headers(MEMBER, "standard")
	)

	assert response.status_code == 200
	assert [row["status"] for row in response.json()] == ["pending"]


@pytest.mark.asyncio
async def test_failed_update_keeps_previous_receipt(api_client, contributions, file_store, audit):
	created = await api_client.post(
		"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(ADMIN, "admin")
	)
	contribution_id = created.json()["id"]
	old_key = created.json()["receipt_path"]
	contributions.fail_next_write = RuntimeError("update failed")

	response = await api_client.put(
		f"/api/contributions/{contribution_id}",
		data={"payment_method": "cash"},
		files={"receipt": ("new.png", b"\x89PNG", "image/png")},
		headers=member_headers(ADMIN, "admin"),
	)

	assert response.status_code == 500
	row = contributions.rows[contribution_id]
	assert row["receipt_path"] == old_key
	assert (file_store.root / old_key).read_bytes() == b"%PDF-1.4 receipt"
	assert [p.name for p in (file_store.root / "receipts").iterdir()] == [old_key.split("/")[-1]]
	assert audit.actions() == ["create"]


@pytest.mark.asyncio
async def test_failed_receipt_commit_leaves_contribution_untouched(api_client, contributions, file_store, audit):
	created = (
		await api_client.post(
			"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(ADMIN, "admin")
		)
	).json()

	with patch("familyhub.infra.storage.shutil.move", side_effect=OSError("disk full")):
		response = await api_client.put(
			f"/api/contributions/{created['id']}",
			data={"notes": "scan"},
			files={"receipt": ("new.png", b"\x89PNG", "image/png")},
			headers=member_headers(ADMIN, "admin"),
		)

	assert response.status_code == 500
	assert response.json()["detail"] == "file_commit_failed"
	assert contributions.writes == ["create"]
	assert contributions.rows[created["id"]]["notes"] is None
	assert (file_store.root / created["receipt_path"]).is_file()
	assert audit.actions() == ["create"]


@pytest.mark.asyncio
async def test_switching_source_type_requires_source_id(api_client, contributions, audit):
	existing = _seed(contributions, source_type="other")

	response = await api_client.patch(
		f"/api/contributions/{existing.id}", json={"source_type": "event"}, headers=member_headers(ADMIN, "admin")
	)

	assert response.status_code == 400
	assert response.json()["detail"] == "source_id_required"
	assert contributions.writes == []
	assert audit.entries == []


@pytest.mark.asyncio
async def test_clearing_source_id_of_event_contribution_is_rejected(api_client, contributions):
	existing = _seed(contributions, source_type="event", source_id=new_id())

	response = await api_client.patch(
		f"/api/contributions/{existing.id}", json={"source_id": None}, headers=member_headers(ADMIN, "admin")
	)

	assert response.status_code == 400
	assert response.json()["detail"] == "source_id_required"
	assert contributions.writes == []


@pytest.mark.asyncio
async def test_switching_source_type_with_source_id(api_client, contributions):
	existing = _seed(contributions, source_type="other")
	event_id = new_id()

	response = await api_client.patch(
		f"/api/contributions/{existing.id}",
		json={"source_type": "event", "source_id": event_id},
		headers=member_headers(ADMIN, "admin"),
	)

	assert response.status_code == 200
	assert response.json()["source_type"] == "event"
	assert response.json()["source_id"] == event_id


@pytest.mark.asyncio
async def test_receipt_download_is_limited_to_owner_and_managers(api_client, contributions, audit):
	created = await api_client.post(
		"/api/contributions", data=_form(), files=_receipt(), headers=member_headers(ADMIN, "admin")
	)
	contribution_id = created.json()["id"]

	stranger = await api_client.get(
		f"/api/contributions/{contribution_id}/receipt", headers=member_headers(new_id(), "standard")
	)
	assert stranger.status_code == 403
	assert stranger.json()["detail"] == "receipt_forbidden"

	treasurer = await api_client.get(
		f"/api/contributions/{contribution_id}/receipt", headers=member_headers(TREASURER, "treasurer")
	)
	assert treasurer.status_code == 200
	assert audit.actions() == ["create", "download"]
