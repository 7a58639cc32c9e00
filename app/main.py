import logging
import random

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import router
from app.core.config import Settings
from app.core.config import settings as default_settings
from app.core.deps import build_services
from app.core.exceptions import ErrorKind
from app.core.exceptions import OptiCoursError
from app.core.latency import Latency
from app.core.logging import setup_logging
from app.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

# HTTP status returned for each failure kind
ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.DUPLICATE_ACCOUNT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNSUPPORTED_FORMAT: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    ErrorKind.FILE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ANALYSIS_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def create_app(
    settings: Settings | None = None,
    latency: Latency | None = None,
    rng: random.Random | None = None,
    store: KeyValueStore | None = None,
) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)

    app = FastAPI(
        title="OptiCours API",
        description="Démonstration : import de cours et contenus pédagogiques simulés",
    )
    app.state.services = build_services(settings, latency=latency, rng=rng, store=store)

    @app.exception_handler(OptiCoursError)
    async def opticours_exception_handler(_request: Request, exc: OptiCoursError) -> JSONResponse:
        status_code = ERROR_STATUS_CODES.get(exc.kind, status.HTTP_400_BAD_REQUEST)
        logger.info("%s: %s (status: %d)", exc.kind.value, exc.message, status_code)
        return JSONResponse({"error": exc.message, "kind": exc.kind.value}, status_code=status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.error(f"HTTP exception: {exc.detail} (status: {exc.status_code})")
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        # Log the detailed Pydantic validation errors to the server console
        logger.error("Request validation failed: %s", exc.errors(), exc_info=False)
        return JSONResponse(
            {"error": "Input validation failed", "details": jsonable_encoder(exc.errors())},
            status_code=422,
        )

    @app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
    async def health_check() -> dict[str, str]:
        logger.info("Health check endpoint called")
        return {"status": "ok"}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
