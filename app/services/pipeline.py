from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime
from datetime import timezone

from app.core.exceptions import FileRecordNotFoundError
from app.core.latency import Latency
from app.core.validation import strip_document_extension
from app.generation_logic.static_content import BASE_OVERVIEW
from app.generation_logic.static_content import build_artifact
from app.models.analysis_models import AnalysisResult
from app.models.analysis_models import Artifact
from app.models.analysis_models import BaseContent
from app.models.analysis_models import CourseSheet
from app.models.analysis_models import Quiz
from app.models.analysis_models import SlideOutline
from app.models.analysis_models import Suggestions
from app.models.analysis_models import Summary
from app.models.analysis_models import TPSheet
from app.models.common import CamelModel
from app.models.file_models import FileRecord
from app.models.file_models import FileStatus
from app.services.analysis_repository import AnalysisRepository
from app.services.file_registry import FileRegistry

# Configure module logger
logger = logging.getLogger(__name__)

# Latency step name for each generator
ARTIFACT_LATENCY_STEPS: dict[Artifact, str] = {
    Artifact.SUGGESTIONS: "suggestions",
    Artifact.SUMMARY: "summary",
    Artifact.QUIZ: "quiz",
    Artifact.SLIDES: "slides",
    Artifact.COURSE_SHEET: "course_sheet",
    Artifact.TP_SHEET: "tp_sheet",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisPipeline:
    """Orchestrates the simulated analysis of uploaded course documents.

    A file goes ``pending -> processing -> completed`` (or ``failed``) through
    :meth:`analyze_content`. The six generators then each fill one artifact of
    the stored AnalysisResult; they may run concurrently.
    """

    def __init__(
        self,
        registry: FileRegistry,
        analyses: AnalysisRepository,
        latency: Latency,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        logger.info("Initializing AnalysisPipeline")
        self.registry = registry
        self.analyses = analyses
        self.latency = latency
        self.rng = rng or random.Random()
        self.clock = clock

    def _build_base_content(self, record: FileRecord) -> BaseContent:
        # word count and read time are placeholders, drawn from the injected random source
        return BaseContent(
            title=strip_document_extension(record.name),
            overview=BASE_OVERVIEW,
            word_count=self.rng.randint(1000, 5999),
            read_time=self.rng.randint(10, 39),
        )

    async def analyze_content(self, file_id: str) -> AnalysisResult:
        """Run the base analysis of a file and mark it completed.

        Re-running on a file that already has an AnalysisResult keeps every
        stored field as is.

        Raises:
            FileRecordNotFoundError: If *file_id* has no FileRecord.
            Exception: Anything raised while analyzing, after the file is marked ``failed``.
        """
        record = self.registry.get_file(file_id)

        existing = self.analyses.get(file_id)
        if existing is not None:
            logger.info("[%s] Already analyzed, keeping existing result", file_id)
            if record.status != FileStatus.COMPLETED:
                self.registry.set_status(file_id, FileStatus.COMPLETED)
            return existing

        logger.info("[%s] Starting analysis of '%s'", file_id, record.name)
        self.registry.set_status(file_id, FileStatus.PROCESSING)
        try:
            await self.latency.wait("analysis")

            # The file may have been deleted while we were waiting
            record = self.registry.get_file(file_id)
            result = AnalysisResult(
                file_id=file_id,
                analyzed_at=self.clock(),
                content=self._build_base_content(record),
            )
            result = await self.analyses.save_if_absent(result)
            self.registry.set_status(file_id, FileStatus.COMPLETED)
            logger.info("[%s] Analysis completed", file_id)
            return result
        except FileRecordNotFoundError:
            logger.warning("[%s] File deleted during analysis, result discarded", file_id)
            raise
        except Exception:
            logger.exception("[%s] Analysis failed", file_id)
            self.registry.set_status(file_id, FileStatus.FAILED)
            raise

    async def generate(self, file_id: str, artifact: Artifact) -> CamelModel:
        """Produce *artifact* and merge it into the stored AnalysisResult.

        An artifact already present is never overwritten; its stored value is returned.

        Raises:
            AnalysisNotFoundError: If the file has no AnalysisResult to merge into.
        """
        logger.info("[%s] Generating %s", file_id, artifact.value)
        await self.latency.wait(ARTIFACT_LATENCY_STEPS[artifact])
        return await self.analyses.merge_artifact(file_id, artifact, build_artifact(artifact))

    async def generate_suggestions(self, file_id: str) -> Suggestions:
        return await self.generate(file_id, Artifact.SUGGESTIONS)

    async def generate_summary(self, file_id: str) -> Summary:
        return await self.generate(file_id, Artifact.SUMMARY)

    async def generate_quiz(self, file_id: str) -> Quiz:
        return await self.generate(file_id, Artifact.QUIZ)

    async def generate_slides(self, file_id: str) -> SlideOutline:
        return await self.generate(file_id, Artifact.SLIDES)

    async def generate_course_sheet(self, file_id: str) -> CourseSheet:
        return await self.generate(file_id, Artifact.COURSE_SHEET)

    async def generate_tp_sheet(self, file_id: str) -> TPSheet:
        return await self.generate(file_id, Artifact.TP_SHEET)

    def get_analysis_results(self, file_id: str) -> AnalysisResult | None:
        """Current AnalysisResult of *file_id*, or None. Never raises."""
        return self.analyses.get(file_id)
