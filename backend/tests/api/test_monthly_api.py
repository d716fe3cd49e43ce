import pytest

from familyhub.api.monthly_contributions import get_monthly_service
from familyhub.domain.monthly.repo import ASSIGNMENTS, SESSIONS
from familyhub.domain.monthly.service import MonthlyContributionService
from familyhub.main import app

from fakes import FakeTable, member_headers, new_id

MANAGER = new_id()


@pytest.fixture
def sessions(audit):
	sessions = FakeTable(SESSIONS)
	assignments = FakeTable(ASSIGNMENTS)
	service = MonthlyContributionService(sessions, assignments, audit=audit)
	app.dependency_overrides[get_monthly_service] = lambda: service
	return sessions


def _session(**overrides):
	body = {
		"name": "Dues 2024",
		"start_date": "2024-01-01",
		"monthly_target_amount": "25.00",
		"duration_months": 12,
		"payment_deadline_day": 15,
	}
	body.update(overrides)
	return body


@pytest.mark.asyncio
async def test_deadline_day_out_of_range_never_reaches_store(api_client, sessions, audit):
	response = await api_client.post(
		"/api/monthly-contributions",
		json=_session(payment_deadline_day=32),
		headers=member_headers(MANAGER, "intermediate"),
	)

	assert response.status_code == 400
	assert response.json()["detail"] == "validation_error"
	assert sessions.writes == []
	assert audit.entries == []


@pytest.mark.asyncio
async def test_manager_creates_session_with_creator(api_client, sessions, audit):
	response = await api_client.post(
		"/api/monthly-contributions", json=_session(), headers=member_headers(MANAGER, "intermediate")
	)

	assert response.status_code == 201
	body = response.json()
	assert body["status"] == "active"
	assert body["created_by"] == MANAGER
	assert body["created_at"] == body["updated_at"]
	assert audit.entries[0]["target_type"] == "monthly_session"


@pytest.mark.asyncio
async def test_standard_member_cannot_create_session(api_client, sessions):
	response = await api_client.post(
		"/api/monthly-contributions", json=_session(), headers=member_headers(new_id(), "standard")
	)
	assert response.status_code == 403
	assert sessions.writes == []


@pytest.mark.asyncio
async def test_update_cannot_clear_required_field(api_client, sessions):
	created = await api_client.post(
		"/api/monthly-contributions", json=_session(), headers=member_headers(MANAGER, "intermediate")
	)

	response = await api_client.patch(
		f"/api/monthly-contributions/{created.json()['id']}",
		json={"name": None},
		headers=member_headers(MANAGER, "intermediate"),
	)
	assert response.status_code == 400


@pytest.mark.asyncio
async def test_assignments_listed_per_session(api_client, sessions):
	created = await api_client.post(
		"/api/monthly-contributions", json=_session(), headers=member_headers(MANAGER, "intermediate")
	)
	session_id = created.json()["id"]
	member = new_id()

	assigned = await api_client.post(
		"/api/monthly-contributions/assignments",
		json={"session_id": session_id, "user_id": member, "monthly_amount": "10"},
		headers=member_headers(MANAGER, "intermediate"),
	)
	assert assigned.status_code == 201

	listing = await api_client.get(
		f"/api/monthly-contributions/{session_id}/assignments", headers=member_headers(member, "standard")
	)
	assert [row["user_id"] for row in listing.json()] == [member]


@pytest.mark.asyncio
async def test_delete_requires_admin(api_client, sessions, audit):
	created = await api_client.post(
		"/api/monthly-contributions", json=_session(), headers=member_headers(MANAGER, "intermediate")
	)
	session_id = created.json()["id"]

	forbidden = await api_client.delete(
		f"/api/monthly-contributions/{session_id}", headers=member_headers(MANAGER, "intermediate")
	)
	assert forbidden.status_code == 403

	response = await api_client.delete(
		f"/api/monthly-contributions/{session_id}", headers=member_headers(new_id(), "super_admin")
	)
	assert response.status_code == 200
	assert response.json()["deleted"] is True
	assert audit.actions() == ["create", "delete"]
