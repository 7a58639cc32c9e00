import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from app.core.exceptions import AnalysisNotFoundError
from app.core.exceptions import OptiCoursError
from app.models.analysis_models import AnalysisResult
from app.models.analysis_models import Artifact
from app.services.pipeline import AnalysisPipeline

__all__ = [
    "_create_stream_event",
    "_stream_missing_artifacts",
    "fill_missing_artifacts",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# NDJSON event helper
# ---------------------------------------------------------------------------


def _create_stream_event(
    event_type: str,
    message: str | None = None,
    payload: dict[str, Any] | None = None,
    artifact: str | None = None,
    kind: str | None = None,
) -> str:
    """Serialize a Server-Sent Event (SSE)-style dict to an NDJSON line."""
    event: dict[str, Any] = {"type": event_type}
    if message is not None:
        event["message"] = message
    if artifact is not None:
        event["artifact"] = artifact
    if kind is not None:
        event["kind"] = kind
    if payload is not None:
        event["payload"] = payload
    return json.dumps(event, ensure_ascii=False) + "\n"


def _require_results(pipeline: AnalysisPipeline, file_id: str) -> AnalysisResult:
    result = pipeline.get_analysis_results(file_id)
    if result is None:
        raise AnalysisNotFoundError()
    return result


# ---------------------------------------------------------------------------
# Fill-missing orchestration
# ---------------------------------------------------------------------------


async def fill_missing_artifacts(pipeline: AnalysisPipeline, file_id: str) -> AnalysisResult:
    """Run the generators of every absent artifact concurrently, then return the refreshed record.

    Artifacts already present are never regenerated, so a partially generated
    analysis can be resumed and a complete one is left untouched.

    Raises:
        AnalysisNotFoundError: If the file has not been analyzed.
    """
    result = _require_results(pipeline, file_id)
    missing = result.missing_artifacts()
    if not missing:
        logger.info("[%s] All artifacts already present", file_id)
        return result

    logger.info("[%s] Generating %d missing artifacts: %s", file_id, len(missing), ", ".join(a.value for a in missing))
    outcomes = await asyncio.gather(
        *(pipeline.generate(file_id, artifact) for artifact in missing),
        return_exceptions=True,
    )
    # Every generator has settled; report the first failure
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return _require_results(pipeline, file_id)


async def _stream_missing_artifacts(pipeline: AnalysisPipeline, file_id: str) -> AsyncGenerator[str, None]:
    """Same as :func:`fill_missing_artifacts`, yielding NDJSON progress events.

    Events: ``status``, one ``artifact`` per generator as it completes, ``data``
    with the merged record, then ``finished``. Failures yield ``error`` and end
    the stream.
    """
    try:
        result = _require_results(pipeline, file_id)
        missing = result.missing_artifacts()
        yield _create_stream_event(
            "status",
            message=f"{len(missing)} contenu(s) à générer.",
        )

        async def _run(artifact: Artifact) -> Artifact:
            await pipeline.generate(file_id, artifact)
            return artifact

        tasks = [asyncio.ensure_future(_run(artifact)) for artifact in missing]
        try:
            for done in asyncio.as_completed(tasks):
                artifact = await done
                yield _create_stream_event("artifact", message=f"{artifact.value} généré.", artifact=artifact.value)
        finally:
            # Settle the remaining generators before reporting, so nothing merges after the last event
            await asyncio.gather(*tasks, return_exceptions=True)

        final = _require_results(pipeline, file_id)
        yield _create_stream_event(
            "data",
            message="Analyse complète.",
            payload=final.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        yield _create_stream_event("finished", message="Stream completed successfully.")

    except OptiCoursError as e:
        logger.warning("[%s] Artifact stream stopped: %s", file_id, e)
        yield _create_stream_event("error", message=e.message, kind=e.kind.value)
    except Exception:
        logger.exception("[%s] Unexpected error while generating artifacts", file_id)
        yield _create_stream_event(
            "error",
            message="Une erreur est survenue lors de la récupération des données d'analyse.",
        )
