"""Defines constants and small checks for upload and request validation."""

import logging
import re

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

# Only the declared MIME type decides whether a document is accepted
ALLOWED_MIME_TYPES: frozenset[str] = frozenset({PDF_MIME, DOCX_MIME, PPTX_MIME})

_DOCUMENT_EXTENSION_RE = re.compile(r"\.(pdf|docx|pptx)$", re.IGNORECASE)


def is_supported_mime_type(mime_type: str | None) -> bool:
    return mime_type in ALLOWED_MIME_TYPES


def strip_document_extension(filename: str) -> str:
    """Returns *filename* without a trailing .pdf/.docx/.pptx extension (any case)."""
    return _DOCUMENT_EXTENSION_RE.sub("", filename)


def looks_like_email(value: str) -> bool:
    # Same leniency as the client-side form check: an '@' is enough
    return "@" in value
