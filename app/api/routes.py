import logging
from collections.abc import Callable
from functools import wraps
from typing import Any
from uuid import uuid4

from fastapi import APIRouter
from fastapi import Depends
from fastapi import File
from fastapi import Form
from fastapi import HTTPException
from fastapi import Request
from fastapi import UploadFile
from fastapi import status
from fastapi.responses import StreamingResponse

from app.core.config import Settings
from app.core.deps import get_delivery_service
from app.core.deps import get_file_registry
from app.core.deps import get_pipeline
from app.core.deps import get_session_store
from app.core.deps import get_settings_dep
from app.core.exceptions import AnalysisNotFoundError
from app.core.exceptions import FileRecordNotFoundError
from app.core.exceptions import OptiCoursError
from app.core.security import require_session
from app.generation_logic.artifact_orchestrator import _stream_missing_artifacts
from app.generation_logic.artifact_orchestrator import fill_missing_artifacts
from app.generation_logic.file_processing import _register_uploaded_file
from app.generation_logic.file_processing import _upload_and_analyze
from app.models.analysis_models import AnalysisResult
from app.models.analysis_models import Artifact
from app.models.delivery_models import DeliveryAck
from app.models.delivery_models import EmailRequest
from app.models.file_models import DeleteResponse
from app.models.file_models import FileListResponse
from app.models.file_models import FileRecord
from app.models.session_models import AuthResponse
from app.models.session_models import LoginRequest
from app.models.session_models import RegisterRequest
from app.models.session_models import Session
from app.services.delivery import DeliveryService
from app.services.file_registry import FileRegistry
from app.services.pipeline import AnalysisPipeline
from app.services.session_store import SessionStore

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Error Handling Decorator for pipeline endpoints ---
def handle_pipeline_errors(func: Callable) -> Callable:
    """Decorator turning unexpected pipeline failures into a traced 500.

    Expected failures (OptiCoursError, HTTPException) propagate unchanged to the
    application's exception handlers.
    """

    @wraps(func)
    async def wrapper(request: Request, *args: Any, **kwargs: Any) -> Any:
        # Generate request_id and store in request.state
        request_id = str(uuid4())
        request.state.request_id = request_id

        try:
            return await func(request, *args, **kwargs)
        except (OptiCoursError, HTTPException):
            raise
        except Exception as e:
            logger.error(
                "[%s] Unexpected error during analysis: %s",
                request_id,
                str(e),
                exc_info=True,
            )
            raise HTTPException(
                status_code=500,
                detail=f"Une erreur inattendue est survenue pendant l'analyse (trace: {request_id}).",
            ) from e

    return wrapper


def _owned_file(files: FileRegistry, file_id: str, session: Session) -> FileRecord:
    """Return the record if it belongs to *session*; other users' files are reported as missing."""
    record = files.get_file(file_id)
    if record.owner_id != session.id:
        logger.warning("Session %s attempted to access file %s of another owner", session.id, file_id)
        raise FileRecordNotFoundError()
    return record


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, tags=["Auth"])
async def register(payload: RegisterRequest, sessions: SessionStore = Depends(get_session_store)) -> AuthResponse:
    session, token = sessions.register(payload.email, payload.password, payload.name, payload.institution)
    return AuthResponse(session=session, token=token)


@router.post("/auth/login", response_model=AuthResponse, tags=["Auth"])
async def login(payload: LoginRequest, sessions: SessionStore = Depends(get_session_store)) -> AuthResponse:
    session, token = sessions.login(payload.email, payload.password)
    return AuthResponse(session=session, token=token)


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT, tags=["Auth"])
async def logout(sessions: SessionStore = Depends(get_session_store)) -> None:
    sessions.logout()


@router.get("/auth/session", response_model=Session | None, tags=["Auth"])
async def current_session(sessions: SessionStore = Depends(get_session_store)) -> Session | None:
    """The persisted session, or null when nobody is signed in."""
    return sessions.current_session()


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@router.get("/files", response_model=FileListResponse, tags=["Files"])
async def list_files(
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
) -> FileListResponse:
    return FileListResponse(files=files.list_files(session.id))


@router.post("/files", response_model=FileRecord, status_code=status.HTTP_201_CREATED, tags=["Files"])
@handle_pipeline_errors
async def upload_file(
    request: Request,
    file: UploadFile = File(...),
    analyze: bool = Form(default=False),
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings_dep),
) -> FileRecord:
    """Uploads a PDF, DOCX or PPTX course document.

    With ``analyze=true`` the base analysis runs before the response is sent, and
    the returned record is ``completed``.
    """
    request_id = request.state.request_id
    logger.info("[%s] Upload of '%s' (analyze=%s)", request_id, file.filename, analyze)
    if analyze:
        return await _upload_and_analyze(file, files, pipeline, session.id, request_id, settings.max_file_size)
    return await _register_uploaded_file(file, files, session.id, request_id, settings.max_file_size)


@router.delete("/files/{file_id}", response_model=DeleteResponse, tags=["Files"])
async def delete_file(
    file_id: str,
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
) -> DeleteResponse:
    record = files.find_file(file_id)
    if record is not None and record.owner_id != session.id:
        raise FileRecordNotFoundError()
    files.delete_file(file_id)
    return DeleteResponse(id=file_id)


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


@router.post(
    "/analysis/{file_id}",
    response_model=AnalysisResult,
    response_model_exclude_none=True,
    tags=["Analysis"],
)
@handle_pipeline_errors
async def analyze_file(
    request: Request,
    file_id: str,
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> AnalysisResult:
    _owned_file(files, file_id, session)
    logger.info("[%s] Analysis requested for %s", request.state.request_id, file_id)
    return await pipeline.analyze_content(file_id)


@router.get(
    "/analysis/{file_id}",
    response_model=AnalysisResult,
    response_model_exclude_none=True,
    tags=["Analysis"],
)
async def get_analysis(
    file_id: str,
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> AnalysisResult:
    _owned_file(files, file_id, session)
    result = pipeline.get_analysis_results(file_id)
    if result is None:
        raise AnalysisNotFoundError()
    return result


@router.post("/analysis/{file_id}/artifacts/{artifact}", tags=["Analysis"])
@handle_pipeline_errors
async def generate_artifact(
    request: Request,
    file_id: str,
    artifact: Artifact,
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> dict[str, Any]:
    """Runs a single generator and returns the artifact now stored for the file."""
    _owned_file(files, file_id, session)
    value = await pipeline.generate(file_id, artifact)
    return {"artifact": artifact.value, "payload": value.model_dump(mode="json", by_alias=True)}


@router.post("/analysis/{file_id}/complete", tags=["Analysis"])
@handle_pipeline_errors
async def complete_analysis(
    request: Request,
    file_id: str,
    stream: bool = False,
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> Any:
    """Generates every artifact still missing for the file.

    Returns the merged AnalysisResult, or with ``stream=true`` an NDJSON stream.

    Potential Stream Events:
    - `status`: Number of artifacts to generate.
    - `artifact`: One generator finished.
    - `data`: The merged analysis record.
    - `error`: Indicates a failure during processing.
    - `finished`: Indicates the stream has successfully completed.
    """
    _owned_file(files, file_id, session)
    if stream:
        return StreamingResponse(
            _stream_missing_artifacts(pipeline, file_id),
            media_type="application/x-ndjson",
        )
    result = await fill_missing_artifacts(pipeline, file_id)
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


@router.post("/export/{file_id}/pdf", response_model=DeliveryAck, tags=["Delivery"])
async def export_pdf(
    file_id: str,
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
    delivery: DeliveryService = Depends(get_delivery_service),
) -> DeliveryAck:
    _owned_file(files, file_id, session)
    return await delivery.export_to_pdf(file_id)


@router.post("/export/{file_id}/pptx", response_model=DeliveryAck, tags=["Delivery"])
async def export_pptx(
    file_id: str,
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
    delivery: DeliveryService = Depends(get_delivery_service),
) -> DeliveryAck:
    _owned_file(files, file_id, session)
    return await delivery.export_to_pptx(file_id)


@router.post("/email/{file_id}", response_model=DeliveryAck, tags=["Delivery"])
async def send_results(
    file_id: str,
    payload: EmailRequest,
    session: Session = Depends(require_session),
    files: FileRegistry = Depends(get_file_registry),
    delivery: DeliveryService = Depends(get_delivery_service),
) -> DeliveryAck:
    _owned_file(files, file_id, session)
    return await delivery.send_results(file_id, payload.email)
