import logging
from collections.abc import Callable
from datetime import datetime
from datetime import timezone

from pydantic import ValidationError

from app.core.exceptions import FileRecordNotFoundError
from app.core.exceptions import UnsupportedFormatError
from app.core.validation import is_supported_mime_type
from app.models.file_models import FileRecord
from app.models.file_models import FileStatus
from app.services.analysis_repository import AnalysisRepository
from app.services.storage.kv_store import FILES_KEY
from app.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_content_preview(data: bytes, max_chars: int) -> str:
    """Best-effort text preview of the first *max_chars* characters of *data*.

    Binary formats (PDF, DOCX, PPTX) decode to mostly replacement characters,
    which is acceptable: the preview is informative only and never fails.
    """
    if max_chars <= 0 or not data:
        return ""
    # A UTF-8 character is at most 4 bytes
    return data[: max_chars * 4].decode("utf-8", errors="replace")[:max_chars]


class FileRegistry:
    """Persisted metadata of uploaded course documents, in insertion order."""

    def __init__(
        self,
        store: KeyValueStore,
        analyses: AnalysisRepository,
        preview_chars: int = 1000,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.analyses = analyses
        self.preview_chars = preview_chars
        self.clock = clock
        self._last_id = 0

    def _load(self) -> list[FileRecord]:
        records: list[FileRecord] = []
        for raw in self.store.get_item(FILES_KEY, []):
            try:
                records.append(FileRecord.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed file record: %s", e)
        return records

    def _save(self, records: list[FileRecord]) -> None:
        self.store.set_item(FILES_KEY, [r.to_storage() for r in records])

    def _new_file_id(self, records: list[FileRecord]) -> str:
        # Time-based, strictly increasing: an id freed by a delete is never handed out again
        candidate = max(int(self.clock().timestamp() * 1000), self._last_id + 1)
        taken = {r.id for r in records}
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def upload_file(self, name: str, mime_type: str | None, data: bytes, owner_id: str) -> FileRecord:
        """Register an uploaded document with status ``pending``.

        Args:
            name: Original file name, extension included.
            mime_type: Declared MIME type; only PDF, DOCX and PPTX are accepted.
            data: Raw file content. Only a short text preview is kept.
            owner_id: Id of the session uploading the file.

        Raises:
            UnsupportedFormatError: If *mime_type* is not accepted. The registry is left unchanged.
        """
        if not is_supported_mime_type(mime_type):
            logger.info("Rejected upload of '%s' with unsupported type %s", name, mime_type)
            raise UnsupportedFormatError()

        records = self._load()
        record = FileRecord(
            id=self._new_file_id(records),
            name=name,
            mime_type=mime_type,
            size=len(data),
            uploaded_at=self.clock(),
            owner_id=owner_id,
            status=FileStatus.PENDING,
            content_preview=build_content_preview(data, self.preview_chars),
        )
        records.append(record)
        self._save(records)
        logger.info("[%s] Registered '%s' (%d bytes) for owner %s", record.id, name, record.size, owner_id)
        return record

    def list_files(self, owner_id: str) -> list[FileRecord]:
        return [r for r in self._load() if r.owner_id == owner_id]

    def get_file(self, file_id: str) -> FileRecord:
        for record in self._load():
            if record.id == file_id:
                return record
        raise FileRecordNotFoundError()

    def find_file(self, file_id: str) -> FileRecord | None:
        try:
            return self.get_file(file_id)
        except FileRecordNotFoundError:
            return None

    def set_status(self, file_id: str, status: FileStatus) -> FileRecord | None:
        """Update the lifecycle status. Reserved to the analysis pipeline.

        Returns None, without raising, when the record was deleted in the meantime.
        """
        records = self._load()
        for record in records:
            if record.id == file_id:
                record.status = status
                self._save(records)
                logger.debug("[%s] Status -> %s", file_id, status.value)
                return record
        logger.warning("[%s] Status update to %s skipped: file no longer exists", file_id, status.value)
        return None

    def delete_file(self, file_id: str) -> None:
        """Remove the record and its analysis result. Deleting an unknown id is a no-op."""
        records = self._load()
        remaining = [r for r in records if r.id != file_id]
        if len(remaining) != len(records):
            self._save(remaining)
            logger.info("[%s] File record deleted", file_id)

        if self.analyses.get(file_id) is not None:
            logger.info("[%s] Deleting associated analysis result", file_id)
        self.analyses.delete(file_id)
