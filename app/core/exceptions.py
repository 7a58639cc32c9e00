"""Core custom exceptions for the application."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure taxonomy shared by every service. The HTTP layer branches on it."""

    DUPLICATE_ACCOUNT = "DuplicateAccount"
    INVALID_CREDENTIALS = "InvalidCredentials"
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    FILE_NOT_FOUND = "FileNotFound"
    ANALYSIS_NOT_FOUND = "AnalysisNotFound"


class OptiCoursError(Exception):
    """Base exception for expected, user-facing failures."""

    kind: ErrorKind
    default_message = "Une erreur est survenue."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class DuplicateAccountError(OptiCoursError):
    """Raised when registering an email that already has an account."""

    kind = ErrorKind.DUPLICATE_ACCOUNT
    default_message = "Cet email est déjà utilisé"


class InvalidCredentialsError(OptiCoursError):
    """Raised when no account matches both email and password."""

    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "Email ou mot de passe incorrect"


class UnsupportedFormatError(OptiCoursError):
    """Raised when an uploaded document is not a PDF, DOCX or PPTX file."""

    kind = ErrorKind.UNSUPPORTED_FORMAT
    default_message = "Format de fichier non supporté. Veuillez charger un fichier PDF, DOCX ou PPTX."


class FileRecordNotFoundError(OptiCoursError):
    """Raised when a file id has no FileRecord."""

    kind = ErrorKind.FILE_NOT_FOUND
    default_message = "Fichier non trouvé"


class AnalysisNotFoundError(OptiCoursError):
    """Raised when a file id has no AnalysisResult to read or merge into."""

    kind = ErrorKind.ANALYSIS_NOT_FOUND
    default_message = "Analyse non trouvée. Veuillez réessayer plus tard."
