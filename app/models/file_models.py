from datetime import datetime
from enum import Enum

from app.models.common import CamelModel


class FileStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class FileRecord(CamelModel):
    """Metadata and lifecycle status of one uploaded course document."""

    id: str
    name: str
    mime_type: str
    size: int
    uploaded_at: datetime
    owner_id: str
    status: FileStatus = FileStatus.PENDING
    content_preview: str | None = None


class FileListResponse(CamelModel):
    files: list[FileRecord]


class DeleteResponse(CamelModel):
    success: bool = True
    id: str
