from datetime import date

import pytest

from familyhub.api.family import get_family_service
from familyhub.domain.family.repo import FAMILY_MEMBERS
from familyhub.domain.family.service import FamilyService
from familyhub.main import app
from familyhub.settings import settings

from fakes import FakeRelationshipRepository, FakeTable, member_headers, new_id

MEMBER = new_id()
ADMIN = new_id()
PNG = b"\x89PNG\r\n\x1a\n portrait"


@pytest.fixture
def family(file_store, audit):
	members = FakeTable(FAMILY_MEMBERS)
	relationships = FakeRelationshipRepository()
	service = FamilyService(members, relationships, files=file_store, audit=audit)
	app.dependency_overrides[get_family_service] = lambda: service
	return members, relationships


def _person(members, first, last="Okafor", **values):
	return members.seed(first_name=first, last_name=last, gender="other", is_alive=True, **values)


async def _relate(api_client, from_id, to_id, relationship_type, headers=None):
	return await api_client.post(
		"/api/family/relationships",
		json={"from_member_id": str(from_id), "to_member_id": str(to_id), "relationship_type": relationship_type},
		headers=headers or member_headers(MEMBER),
	)


@pytest.mark.asyncio
async def test_any_member_adds_relative_with_photo(api_client, family, file_store, audit):
	response = await api_client.post(
		"/api/family/members",
		data={"first_name": "Ada", "last_name": "Lovelace", "gender": "female", "birth_place": "London"},
		files={"photo": ("ada.png", PNG, "image/png")},
		headers=member_headers(MEMBER),
	)

	assert response.status_code == 201
	body = response.json()
	assert body["is_alive"] is True
	assert body["photo_path"].startswith("family_photos/")
	assert (file_store.root / body["photo_path"]).read_bytes() == PNG
	assert audit.entries[0]["target_type"] == "family_member"
	assert audit.entries[0]["details"] == {"name": "Ada Lovelace", "has_photo": True}


@pytest.mark.asyncio
async def test_photo_must_be_an_image(api_client, family, file_store):
	members, _ = family
	response = await api_client.post(
		"/api/family/members",
		data={"first_name": "Ada", "last_name": "Lovelace", "gender": "female"},
		files={"photo": ("ada.pdf", b"%PDF", "application/pdf")},
		headers=member_headers(MEMBER),
	)

	assert response.status_code == 400
	assert response.json()["detail"] == "unsupported_file_type"
	assert members.writes == []
	assert list((file_store.root / "family_photos").iterdir()) == []


@pytest.mark.asyncio
async def test_photo_size_limit(api_client, family, monkeypatch):
	monkeypatch.setattr(settings, "family_photo_max_bytes", 4)
	response = await api_client.post(
		"/api/family/members",
		data={"first_name": "Ada", "last_name": "Lovelace", "gender": "female"},
		files={"photo": ("ada.png", PNG, "image/png")},
		headers=member_headers(MEMBER),
	)
	assert response.status_code == 400
	assert response.json()["detail"] == "file_too_large"


@pytest.mark.asyncio
async def test_death_date_marks_member_deceased(api_client, family):
	response = await api_client.post(
		"/api/family/members",
		json={
			"first_name": "Chidi",
			"last_name": "Okafor",
			"gender": "male",
			"birth_date": "1920-03-01",
			"death_date": "1990-07-12",
		},
		headers=member_headers(MEMBER),
	)
	assert response.status_code == 201
	assert response.json()["is_alive"] is False

	invalid = await api_client.post(
		"/api/family/members",
		json={
			"first_name": "Ngozi",
			"last_name": "Okafor",
			"gender": "female",
			"birth_date": "1950-01-01",
			"death_date": "1940-01-01",
		},
		headers=member_headers(MEMBER),
	)
	assert invalid.status_code == 400


@pytest.mark.asyncio
async def test_update_checks_stored_birth_date(api_client, family):
	members, _ = family
	member = _person(members, "Ngozi", birth_date=date(1950, 1, 1))

	response = await api_client.patch(
		f"/api/family/members/{member.id}", json={"death_date": "1949-12-31"}, headers=member_headers(MEMBER)
	)

	assert response.status_code == 400
	assert response.json()["detail"] == "death_date_before_birth_date"
	assert members.writes == []


@pytest.mark.asyncio
async def test_photo_download_uses_member_name(api_client, family):
	created = await api_client.post(
		"/api/family/members",
		data={"first_name": "Ada", "last_name": "Lovelace", "gender": "female"},
		files={"photo": ("portrait.png", PNG, "image/png")},
		headers=member_headers(MEMBER),
	)

	response = await api_client.get(f"/api/family/members/{created.json()['id']}/photo", headers=member_headers(MEMBER))

	assert response.status_code == 200
	assert response.content == PNG
	assert "photo-Ada-Lovelace.png" in response.headers["content-disposition"]


@pytest.mark.asyncio
async def test_replacing_photo_retires_old_file(api_client, family, file_store):
	created = (
		await api_client.post(
			"/api/family/members",
			data={"first_name": "Ada", "last_name": "Lovelace", "gender": "female"},
			files={"photo": ("old.png", PNG, "image/png")},
			headers=member_headers(MEMBER),
		)
	).json()

	response = await api_client.put(
		f"/api/family/members/{created['id']}",
		data={"bio": "Mathematician"},
		files={"photo": ("new.jpg", b"\xff\xd8 jpeg", "image/jpeg")},
		headers=member_headers(MEMBER),
	)

	assert response.status_code == 200
	new_key = response.json()["photo_path"]
	assert new_key != created["photo_path"]
	assert not (file_store.root / created["photo_path"]).exists()
	assert (file_store.root / new_key).read_bytes() == b"\xff\xd8 jpeg"


@pytest.mark.asyncio
async def test_failed_update_keeps_previous_photo(api_client, family, file_store, audit):
	members, _ = family
	created = (
		await api_client.post(
			"/api/family/members",
			data={"first_name": "Ada", "last_name": "Lovelace", "gender": "female"},
			files={"photo": ("old.png", PNG, "image/png")},
			headers=member_headers(MEMBER),
		)
	).json()
	members.fail_next_write = RuntimeError("update failed")

	response = await api_client.put(
		f"/api/family/members/{created['id']}",
		data={"bio": "Mathematician"},
		files={"photo": ("new.png", b"\x89PNG new", "image/png")},
		headers=member_headers(MEMBER),
	)

	assert response.status_code == 500
	assert members.rows[created["id"]]["photo_path"] == created["photo_path"]
	assert [p.name for p in (file_store.root / "family_photos").iterdir()] == [created["photo_path"].split("/")[-1]]
	assert audit.actions() == ["create"]


@pytest.mark.asyncio
async def test_remove_photo(api_client, family, file_store):
	created = (
		await api_client.post(
			"/api/family/members",
			data={"first_name": "Ada", "last_name": "Lovelace", "gender": "female"},
			files={"photo": ("old.png", PNG, "image/png")},
			headers=member_headers(MEMBER),
		)
	).json()

	response = await api_client.delete(f"/api/family/members/{created['id']}/photo", headers=member_headers(MEMBER))

	assert response.status_code == 200
	assert response.json()["photo_path"] is None
	assert not (file_store.root / created["photo_path"]).exists()

	again = await api_client.get(f"/api/family/members/{created['id']}/photo", headers=member_headers(MEMBER))
	assert again.status_code == 404
	assert again.json()["detail"] == "photo_not_found"


@pytest.mark.asyncio
async def test_delete_member_is_admin_only_and_purges_photo(api_client, family, file_store, audit):
	created = (
		await api_client.post(
			"/api/family/members",
			data={"first_name": "Ada", "last_name": "Lovelace", "gender": "female"},
			files={"photo": ("ada.png", PNG, "image/png")},
			headers=member_headers(MEMBER),
		)
	).json()

	refused = await api_client.delete(f"/api/family/members/{created['id']}", headers=member_headers(MEMBER, "standard"))
	assert refused.status_code == 403

	removed = await api_client.delete(f"/api/family/members/{created['id']}", headers=member_headers(ADMIN, "admin"))
	assert removed.status_code == 200
	assert not (file_store.root / created["photo_path"]).exists()
	assert audit.actions() == ["create", "delete"]


@pytest.mark.asyncio
async def test_search_and_profile_lookup(api_client, family):
	members, _ = family
	profile = new_id()
	_person(members, "Ada", "Lovelace", birth_place="London", profile_id=profile)
	_person(members, "Chidi", birth_place="Enugu")

	missing_query = await api_client.get("/api/family/members/search", headers=member_headers(MEMBER))
	assert missing_query.status_code == 400
	assert missing_query.json()["detail"] == "query_required"

	found = await api_client.get("/api/family/members/search", params={"query": "enugu"}, headers=member_headers(MEMBER))
	assert [row["first_name"] for row in found.json()] == ["Chidi"]

	by_profile = await api_client.get(f"/api/family/members/profile/{profile}", headers=member_headers(MEMBER))
	assert by_profile.json()["first_name"] == "Ada"

	unknown = await api_client.get(f"/api/family/members/profile/{new_id()}", headers=member_headers(MEMBER))
	assert unknown.status_code == 404
	assert unknown.json()["detail"] == "family_member_not_found"


@pytest.mark.asyncio
async def test_parent_relationship_writes_reciprocal_row(api_client, family, audit):
	members, relationships = family
	mother = _person(members, "Amaka")
	son = _person(members, "Emeka")

	# Amaka is Emeka's parent
	response = await _relate(api_client, son.id, mother.id, "parent")

	assert response.status_code == 201
	rows = {(str(r["from_member_id"]), str(r["to_member_id"]), r["relationship_type"]) for r in relationships.rows.values()}
	assert rows == {(str(son.id), str(mother.id), "parent"), (str(mother.id), str(son.id), "child")}
	assert audit.entries[-1]["details"]["reciprocal"] is True

	son_view = (await api_client.get(f"/api/family/members/{son.id}/relations", headers=member_headers(MEMBER))).json()
	mother_view = (await api_client.get(f"/api/family/members/{mother.id}/relations", headers=member_headers(MEMBER))).json()
	assert [m["first_name"] for m in son_view["parents"]] == ["Amaka"]
	assert [m["first_name"] for m in mother_view["children"]] == ["Emeka"]
	assert son_view["children"] == [] and mother_view["parents"] == []


@pytest.mark.asyncio
async def test_other_relationship_is_one_sided_but_listed_for_both(api_client, family):
	members, relationships = family
	godparent = _person(members, "Bola")
	child = _person(members, "Tobi")

	response = await _relate(api_client, child.id, godparent.id, "other")

	assert response.status_code == 201
	assert len(relationships.rows) == 1
	child_view = (await api_client.get(f"/api/family/members/{child.id}/relations", headers=member_headers(MEMBER))).json()
	godparent_view = (
		await api_client.get(f"/api/family/members/{godparent.id}/relations", headers=member_headers(MEMBER))
	).json()
	assert [m["first_name"] for m in child_view["others"]] == ["Bola"]
	assert [m["first_name"] for m in godparent_view["others"]] == ["Tobi"]

	both_sides = await api_client.get(f"/api/family/relationships/member/{godparent.id}", headers=member_headers(MEMBER))
	assert len(both_sides.json()) == 1


@pytest.mark.asyncio
async def test_relationship_validation(api_client, family):
	members, relationships = family
	ada = _person(members, "Ada")
	bola = _person(members, "Bola")

	unknown = await _relate(api_client, ada.id, new_id(), "sibling")
	assert unknown.status_code == 404
	assert unknown.json()["detail"] == "family_member_not_found"

	self_link = await _relate(api_client, ada.id, ada.id, "sibling")
	assert self_link.status_code == 400

	assert (await _relate(api_client, ada.id, bola.id, "sibling")).status_code == 201
	duplicate = await _relate(api_client, ada.id, bola.id, "sibling")
	assert duplicate.status_code == 409
	assert duplicate.json()["detail"] == "relationship_exists"
	assert len(relationships.rows) == 2


@pytest.mark.asyncio
async def test_relationship_update_and_delete_apply_to_both_rows(api_client, family, audit):
	members, relationships = family
	ada = _person(members, "Ada")
	bola = _person(members, "Bola")
	created = (await _relate(api_client, ada.id, bola.id, "spouse")).json()

	updated = await api_client.patch(
		f"/api/family/relationships/{created['id']}",
		json={"start_date": "2001-06-16", "relationship_details": "Married in Lagos"},
		headers=member_headers(MEMBER),
	)
	assert updated.status_code == 200
	assert {r["relationship_details"] for r in relationships.rows.values()} == {"Married in Lagos"}

	refused = await api_client.delete(f"/api/family/relationships/{created['id']}", headers=member_headers(MEMBER))
	assert refused.status_code == 403

	removed = await api_client.delete(
		f"/api/family/relationships/{created['id']}", headers=member_headers(ADMIN, "admin")
	)
	assert removed.status_code == 200
	assert relationships.rows == {}
	assert audit.actions() == ["create", "update", "delete"]
	assert audit.entries[-1]["target_type"] == "family_relationship"


@pytest.mark.asyncio
async def test_failed_reciprocal_write_leaves_no_rows(api_client, family, monkeypatch):
	members, relationships = family
	ada = _person(members, "Ada")
	bola = _person(members, "Bola")
	original_create = relationships.create
	calls = []

	async def create_then_fail(data, *, conn=None):
		calls.append(data["relationship_type"])
		if len(calls) == 2:
			raise RuntimeError("mirror insert failed")
		return await original_create(data, conn=conn)

	monkeypatch.setattr(relationships, "create", create_then_fail)

	response = await _relate(api_client, ada.id, bola.id, "parent")

	assert response.status_code == 500
	assert calls == ["parent", "child"]
	assert relationships.rows == {}


@pytest.mark.asyncio
async def test_member_tree_is_limited_by_degree(api_client, family):
	members, _ = family
	grandparent = _person(members, "Ife")
	parent = _person(members, "Kemi")
	child = _person(members, "Lola")
	grandchild = _person(members, "Moyo")
	for older, younger in ((grandparent, parent), (parent, child), (child, grandchild)):
		assert (await _relate(api_client, younger.id, older.id, "parent")).status_code == 201

	default = await api_client.get(f"/api/family/tree/member/{grandparent.id}", headers=member_headers(MEMBER))
	assert {m["first_name"] for m in default.json()["members"]} == {"Ife", "Kemi", "Lola"}
	assert len(default.json()["relationships"]) == 4

	close = await api_client.get(
		f"/api/family/tree/member/{grandparent.id}", params={"degree": 1}, headers=member_headers(MEMBER)
	)
	assert {m["first_name"] for m in close.json()["members"]} == {"Ife", "Kemi"}

	too_deep = await api_client.get(
		f"/api/family/tree/member/{grandparent.id}", params={"degree": 9}, headers=member_headers(MEMBER)
	)
	assert too_deep.status_code == 400

	whole = await api_client.get("/api/family/tree", headers=member_headers(MEMBER))
	assert len(whole.json()["members"]) == 4
	assert len(whole.json()["relationships"]) == 6
