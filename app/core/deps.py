import logging
import random
from dataclasses import dataclass

from fastapi import Request

from app.core.config import Settings
from app.core.latency import Latency
from app.core.latency import NoLatency
from app.core.latency import SimulatedLatency
from app.services.analysis_repository import AnalysisRepository
from app.services.delivery import DeliveryService
from app.services.file_registry import FileRegistry
from app.services.pipeline import AnalysisPipeline
from app.services.session_store import SessionStore
from app.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything built once per application and shared by the request handlers."""

    settings: Settings
    store: KeyValueStore
    sessions: SessionStore
    analyses: AnalysisRepository
    files: FileRegistry
    pipeline: AnalysisPipeline
    delivery: DeliveryService


def build_services(
    settings: Settings,
    latency: Latency | None = None,
    rng: random.Random | None = None,
    store: KeyValueStore | None = None,
) -> Services:
    """Wire the store and services together. Tests pass their own latency, rng or store."""
    if latency is None:
        latency = SimulatedLatency(settings.latency_seconds) if settings.simulate_latency else NoLatency()
    if rng is None:
        rng = random.Random(settings.random_seed)
    if store is None:
        store = KeyValueStore(settings.storage_path)

    analyses = AnalysisRepository(store)
    files = FileRegistry(store, analyses, preview_chars=settings.content_preview_chars)
    logger.info("Services ready (storage: %s)", settings.storage_path or "memory")
    return Services(
        settings=settings,
        store=store,
        sessions=SessionStore(store),
        analyses=analyses,
        files=files,
        pipeline=AnalysisPipeline(files, analyses, latency, rng=rng),
        delivery=DeliveryService(analyses, latency, email_template_name=settings.email_template_name),
    )


def get_services(request: Request) -> Services:
    """Returns the application services for dependency injection."""
    return request.app.state.services


def get_session_store(request: Request) -> SessionStore:
    return get_services(request).sessions


def get_file_registry(request: Request) -> FileRegistry:
    return get_services(request).files


def get_pipeline(request: Request) -> AnalysisPipeline:
    return get_services(request).pipeline


def get_delivery_service(request: Request) -> DeliveryService:
    return get_services(request).delivery


def get_settings_dep(request: Request) -> Settings:
    return get_services(request).settings
