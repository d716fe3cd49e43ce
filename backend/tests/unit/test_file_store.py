import io
from unittest.mock import patch

import pytest
from starlette.datastructures import Headers, UploadFile

from familyhub.domain.exceptions import NotFoundError, StorageFault, ValidationError
from familyhub.infra.storage import ATTACHMENTS, DOCUMENTS, RECEIPTS, TEMP, FileStore


def make_upload(name: str = "receipt.pdf", content: bytes = b"%PDF-1.4 test", content_type: str = "application/pdf"):
	return UploadFile(file=io.BytesIO(content), filename=name, headers=Headers({"content-type": content_type}))


@pytest.fixture
def store(tmp_path):
	store = FileStore(tmp_path, max_bytes=64)
	store.ensure_layout()
	return store


@pytest.mark.asyncio
async def test_stage_then_commit_moves_into_destination(store):
	staged = await store.stage(make_upload())
	assert staged.path.is_file()
	assert staged.path.parent.parent == store.root / TEMP

	key = store.commit(staged, RECEIPTS)

	assert key.startswith("receipts/")
	assert key.endswith(".pdf")
	assert (store.root / key).read_bytes() == b"%PDF-1.4 test"
	assert not staged.path.exists()
	assert list((store.root / TEMP).iterdir()) == []


@pytest.mark.asyncio
async def test_stage_rejects_unsupported_type(store):
	with pytest.raises(ValidationError) as exc:
		await store.stage(make_upload("run.sh", b"echo", "application/x-sh"))
	assert exc.value.detail == "unsupported_file_type"


@pytest.mark.asyncio
async def test_stage_rejects_oversized_upload(store):
	with pytest.raises(ValidationError) as exc:
		await store.stage(make_upload(content=b"x" * 65))
	assert exc.value.detail == "file_too_large"


@pytest.mark.asyncio
async def test_stage_call_limits_narrow_store_defaults(store):
	with pytest.raises(ValidationError) as exc:
		await store.stage(make_upload(), allowed_types=("image/png",))
	assert exc.value.detail == "unsupported_file_type"

	with pytest.raises(ValidationError) as exc:
		await store.stage(make_upload("a.png", b"x" * 10, "image/png"), allowed_types=("image/png",), max_bytes=8)
	assert exc.value.detail == "file_too_large"

	staged = await store.stage(make_upload("a.png", b"x" * 10, "IMAGE/PNG"), allowed_types=("image/png",), max_bytes=500)
	assert staged.size == 10


@pytest.mark.asyncio
async def test_replace_removes_previous_file(store):
	old_key = store.commit(await store.stage(make_upload("old.pdf")), DOCUMENTS)
	new_key = store.replace(old_key, await store.stage(make_upload("new.pdf")), DOCUMENTS)

	assert new_key != old_key
	assert (store.root / new_key).is_file()
	assert not (store.root / old_key).exists()


@pytest.mark.asyncio
async def test_replace_keeps_new_file_when_old_cleanup_fails(store):
	old_key = store.commit(await store.stage(make_upload("old.pdf")), DOCUMENTS)
	staged = await store.stage(make_upload("new.pdf"))

	with patch.object(store, "purge", side_effect=StorageFault("file_purge_failed")):
		new_key = store.replace(old_key, staged, DOCUMENTS)

	assert (store.root / new_key).is_file()
	assert (store.root / old_key).is_file()


def test_purge_missing_or_empty_key_is_a_no_op(store):
	assert store.purge(None) is False
	assert store.purge("") is False
	assert store.purge("receipts/nothing-here.pdf") is False


@pytest.mark.asyncio
async def test_commit_failure_raises_storage_fault(store):
	staged = await store.stage(make_upload())
	with patch("familyhub.infra.storage.shutil.move", side_effect=OSError("disk full")):
		with pytest.raises(StorageFault) as exc:
			store.commit(staged, ATTACHMENTS)
	assert exc.value.detail == "file_commit_failed"
	assert list((store.root / ATTACHMENTS).iterdir()) == []


def test_resolve_refuses_paths_outside_root(store):
	with pytest.raises(ValidationError):
		store.resolve("../../etc/passwd")


@pytest.mark.asyncio
async def test_download_uses_logical_name(store):
	key = store.commit(await store.stage(make_upload()), RECEIPTS)

	download = store.download(key, "receipt-42.pdf")

	assert download.path == store.root / key
	assert download.filename == "receipt-42.pdf"
	assert download.media_type == "application/pdf"
	with pytest.raises(NotFoundError):
		store.download("receipts/missing.pdf", "x.pdf")


@pytest.mark.asyncio
async def test_discard_drops_staged_upload(store):
	staged = await store.stage(make_upload())
	store.discard(staged)
	assert not staged.path.exists()
	assert list((store.root / TEMP).iterdir()) == []


@pytest.mark.asyncio
async def test_retire_drops_superseded_file_only(store):
	old_key = store.commit(await store.stage(make_upload("old.pdf")), RECEIPTS)
	new_key = store.commit(await store.stage(make_upload("new.pdf")), RECEIPTS)

	assert store.retire(old_key, new_key) is True
	assert not (store.root / old_key).exists()
	assert (store.root / new_key).is_file()
	assert store.retire(new_key, new_key) is False
	assert store.retire(None, new_key) is False
	assert (store.root / new_key).is_file()


@pytest.mark.asyncio
async def test_retire_logs_instead_of_raising(store):
	old_key = store.commit(await store.stage(make_upload("old.pdf")), RECEIPTS)

	with patch("familyhub.infra.storage.Path.unlink", side_effect=PermissionError("locked")):
		assert store.retire(old_key) is False

	assert (store.root / old_key).is_file()
