"""Local upload storage: staging area plus per-purpose permanent folders.

Uploads land in ``<root>/temp/<ulid>/<original name>``. Committing moves the
file to ``<root>/<destination>/<ulid><ext>`` and returns the relative key
stored on the entity row (e.g. ``receipts/01HX....pdf``).
"""

from __future__ import annotations

import mimetypes
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

import ulid
from fastapi import UploadFile

from familyhub.domain.exceptions import NotFoundError, StorageFault, ValidationError
from familyhub.obs import metrics
from familyhub.obs.logging import get_logger
from familyhub.settings import settings

RECEIPTS = "receipts"
ATTACHMENTS = "attachments"
DOCUMENTS = "documents"
TEMP = "temp"
FAMILY_PHOTOS = "family_photos"
SUBFOLDERS = (RECEIPTS, ATTACHMENTS, DOCUMENTS, TEMP, FAMILY_PHOTOS)

_log = get_logger("familyhub.storage")


@dataclass(slots=True)
class StagedFile:
    path: Path
    original_name: str
    content_type: str
    size: int

    @property
    def extension(self) -> str:
        return PurePosixPath(self.original_name).suffix.lower()


@dataclass(slots=True)
class Download:
    path: Path
    filename: str
    media_type: Optional[str] = None


def _safe_name(filename: Optional[str]) -> str:
    # Browsers may send a full client path; keep the last component only
    name = PurePosixPath((filename or "").replace("\\", "/")).name.strip()
    return name or "upload"


def extension_of(key: str) -> str:
    return PurePosixPath(key).suffix.lower()


class FileStore:
    """Filesystem-backed upload lifecycle: stage, commit, replace, purge."""

    def __init__(
        self,
        root: Path | str | None = None,
        *,
        max_bytes: Optional[int] = None,
        allowed_types: Optional[Iterable[str]] = None,
    ) -> None:
        self._root = Path(root if root is not None else settings.upload_root).resolve()
        self._max_bytes = max_bytes if max_bytes is not None else settings.max_upload_bytes
        types = allowed_types if allowed_types is not None else settings.allowed_upload_types
        self._allowed_types = frozenset(t.lower() for t in types)

    @property
    def root(self) -> Path:
        return self._root

    def ensure_layout(self) -> None:
        for sub in SUBFOLDERS:
            (self._root / sub).mkdir(parents=True, exist_ok=True)

    def resolve(self, key: str) -> Path:
        """Map a stored key to an absolute path, refusing keys outside the root."""
        candidate = (self._root / key).resolve()
        if candidate != self._root and self._root not in candidate.parents:
            raise ValidationError("invalid_file_path")
        return candidate

    def download(self, key: Optional[str], filename: str) -> Download:
        """Resolve a stored key for streaming under a logical download name."""
        if not key:
            raise NotFoundError("file_not_found")
        path = self.resolve(key)
        if not path.is_file():
            raise NotFoundError("file_not_found")
        media_type, _ = mimetypes.guess_type(filename)
        return Download(path=path, filename=filename, media_type=media_type or "application/octet-stream")

    async def stage(
        self,
        upload: UploadFile,
        *,
        allowed_types: Optional[Iterable[str]] = None,
        max_bytes: Optional[int] = None,
    ) -> StagedFile:
        """Write an upload to the staging area; per-call limits narrow the store defaults."""
        content_type = (upload.content_type or "application/octet-stream").lower()
        allowed = self._allowed_types
        if allowed_types is not None:
            allowed = frozenset(t.lower() for t in allowed_types)
        if allowed and content_type not in allowed:
            metrics.file_op("stage", ok=False)
            raise ValidationError("unsupported_file_type")
        limit = self._max_bytes if max_bytes is None else min(max_bytes, self._max_bytes)
        content = await upload.read()
        if len(content) > limit:
            metrics.file_op("stage", ok=False)
            raise ValidationError("file_too_large")
        original_name = _safe_name(upload.filename)
        staging_dir = self._root / TEMP / ulid.new().str
        try:
            staging_dir.mkdir(parents=True, exist_ok=True)
            path = staging_dir / original_name
            path.write_bytes(content)
        except OSError as exc:
            metrics.file_op("stage", ok=False)
            _log.error("file_stage_failed", exc_info=True, extra={"file_name": original_name})
            raise StorageFault("file_stage_failed") from exc
        metrics.file_op("stage")
        return StagedFile(path=path, original_name=original_name, content_type=content_type, size=len(content))

    def commit(self, staged: StagedFile, destination: str) -> str:
        """Move a staged upload into ``destination`` under a fresh unique name."""
        if destination not in SUBFOLDERS or destination == TEMP:
            raise ValueError(f"unknown upload destination: {destination}")
        final_name = f"{ulid.new().str}{staged.extension}"
        target_dir = self._root / destination
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(staged.path), str(target_dir / final_name))
        except OSError as exc:
            metrics.file_op("commit", ok=False)
            _log.error(
                "file_commit_failed",
                exc_info=True,
                extra={"staged": str(staged.path), "destination": destination},
            )
            raise StorageFault("file_commit_failed") from exc
        self._remove_staging_dir(staged.path.parent)
        metrics.file_op("commit")
        return f"{destination}/{final_name}"

    def replace(self, old_key: Optional[str], staged: StagedFile, destination: str) -> str:
        """Commit the new file, then drop the old one; failing to drop it is only logged.

        Services that persist the new key afterwards should call :meth:`commit`
        and :meth:`retire` separately, retiring only once the row is written.
        """
        new_key = self.commit(staged, destination)
        self.retire(old_key, new_key)
        return new_key

    def retire(self, old_key: Optional[str], new_key: Optional[str] = None) -> bool:
        """Drop a superseded file. Failures are logged, never raised."""
        if not old_key or old_key == new_key:
            return False
        try:
            removed = self.purge(old_key)
        except (StorageFault, ValidationError):
            metrics.file_op("replace", ok=False)
            _log.warning("file_replace_cleanup_failed", extra={"old_key": old_key, "new_key": new_key})
            return False
        metrics.file_op("replace")
        return removed

    def purge(self, key: Optional[str]) -> bool:
        """Delete a stored file. Returns False when there was nothing to delete."""
        if not key:
            return False
        path = self.resolve(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            metrics.file_op("purge", ok=False)
            _log.error("file_purge_failed", exc_info=True, extra={"key": key})
            raise StorageFault("file_purge_failed") from exc
        metrics.file_op("purge")
        return True

    def discard(self, staged: Optional[StagedFile]) -> None:
        """Best-effort removal of a staged upload that will not be committed."""
        if staged is None:
            return
        try:
            staged.path.unlink(missing_ok=True)
        except OSError:
            metrics.file_op("discard", ok=False)
            _log.warning("file_discard_failed", exc_info=True, extra={"staged": str(staged.path)})
            return
        self._remove_staging_dir(staged.path.parent)
        metrics.file_op("discard")

    def _remove_staging_dir(self, directory: Path) -> None:
        if directory.parent != self._root / TEMP:
            return
        try:
            directory.rmdir()
        except OSError:
            _log.debug("staging_dir_not_removed", extra={"dir": str(directory)})


_store: Optional[FileStore] = None


def get_file_store() -> FileStore:
    global _store
    if _store is None:
        _store = FileStore()
    return _store


def set_file_store(store: Optional[FileStore]) -> None:
    global _store
    _store = store
