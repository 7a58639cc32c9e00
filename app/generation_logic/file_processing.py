"""Handles reading and registering uploaded course documents.

The primary entry point is `_register_uploaded_file`, which checks the
declared MIME type, reads the UploadFile within the size limit and hands the
bytes to the FileRegistry. `_upload_and_analyze` chains the upload
with the base analysis, as the upload page does.
"""

import logging

from fastapi import HTTPException
from fastapi import UploadFile

from app.core.exceptions import UnsupportedFormatError
from app.core.validation import is_supported_mime_type
from app.models.file_models import FileRecord
from app.services.file_registry import FileRegistry
from app.services.pipeline import AnalysisPipeline

__all__ = [
    "_read_upload",
    "_register_uploaded_file",
    "_upload_and_analyze",
]

logger = logging.getLogger(__name__)


async def _read_upload(f_obj: UploadFile, request_id: str, max_size: int) -> bytes:
    """Read the full content of *f_obj*, rejecting payloads over *max_size* bytes with a 413."""
    filename = f_obj.filename or "unknown_file"
    try:
        await f_obj.seek(0)
        contents = await f_obj.read()
    except Exception as read_err:
        logger.error("[%s] Failed to read file content for %s: %s", request_id, filename, read_err, exc_info=True)
        raise HTTPException(
            status_code=400,
            detail=f"Impossible de lire '{filename}'.",
        ) from read_err

    if len(contents) > max_size:
        logger.warning("[%s] Rejected %s: %d bytes exceeds limit of %d", request_id, filename, len(contents), max_size)
        raise HTTPException(
            status_code=413,
            detail=f"Fichier trop volumineux (max {max_size // (1024 * 1024)} MB)",
        )
    return contents


async def _register_uploaded_file(
    f_obj: UploadFile,
    registry: FileRegistry,
    owner_id: str,
    request_id: str,
    max_size: int,
) -> FileRecord:
    filename = f_obj.filename or "unknown_file"
    # Declared type first: an unsupported document is rejected whatever its size
    if not is_supported_mime_type(f_obj.content_type):
        logger.warning("[%s] Rejected %s: unsupported type %s", request_id, filename, f_obj.content_type)
        raise UnsupportedFormatError()
    contents = await _read_upload(f_obj, request_id, max_size)
    logger.debug("[%s] Read %s (%d bytes, declared type %s)", request_id, filename, len(contents), f_obj.content_type)
    return registry.upload_file(filename, f_obj.content_type, contents, owner_id)


async def _upload_and_analyze(
    f_obj: UploadFile,
    registry: FileRegistry,
    pipeline: AnalysisPipeline,
    owner_id: str,
    request_id: str,
    max_size: int,
) -> FileRecord:
    """Register the upload, run the base analysis and return the updated record.

    An analysis failure propagates; the record is left in ``failed`` state.
    """
    record = await _register_uploaded_file(f_obj, registry, owner_id, request_id, max_size)
    logger.info("[%s] Upload registered as %s, starting analysis", request_id, record.id)
    await pipeline.analyze_content(record.id)
    return registry.get_file(record.id)
