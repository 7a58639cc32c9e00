import pytest

from app.core.validation import ALLOWED_MIME_TYPES
from app.core.validation import is_supported_mime_type
from app.core.validation import looks_like_email
from app.core.validation import strip_document_extension


def test_allowed_mime_types_are_exactly_pdf_docx_pptx():
    assert ALLOWED_MIME_TYPES == {
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    }


@pytest.mark.parametrize("mime", ["text/plain", "application/msword", "image/png", None, ""])
def test_other_mime_types_are_not_supported(mime):
    assert not is_supported_mime_type(mime)


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("Cours.pdf", "Cours"),
        ("Cours.PDF", "Cours"),
        ("TD 3.docx", "TD 3"),
        ("slides.v2.pptx", "slides.v2"),
        ("notes.txt", "notes.txt"),
        ("pdf", "pdf"),
    ],
)
def test_strip_document_extension(filename, expected):
    assert strip_document_extension(filename) == expected


def test_looks_like_email():
    assert looks_like_email("a@b")
    assert not looks_like_email("ab.fr")
