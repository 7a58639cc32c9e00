import asyncio
import logging
from collections import defaultdict

from pydantic import ValidationError

from app.core.exceptions import AnalysisNotFoundError
from app.models.analysis_models import AnalysisResult
from app.models.analysis_models import Artifact
from app.models.common import CamelModel
from app.services.storage.kv_store import ANALYSIS_KEY
from app.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class AnalysisRepository:
    """Persisted map fileId -> AnalysisResult.

    Writers go through a per-file asyncio.Lock and always read-merge-write the
    stored record, so generators running concurrently on the same file never
    lose each other's field.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def lock_for(self, file_id: str) -> asyncio.Lock:
        return self._locks[file_id]

    def get(self, file_id: str) -> AnalysisResult | None:
        raw = self.store.get_item(ANALYSIS_KEY, {}).get(file_id)
        if raw is None:
            return None
        try:
            return AnalysisResult.model_validate(raw)
        except ValidationError as e:
            logger.error("[%s] Stored analysis result is malformed, ignoring it: %s", file_id, e)
            return None

    def _put(self, result: AnalysisResult) -> None:
        analysis = self.store.get_item(ANALYSIS_KEY, {})
        analysis[result.file_id] = result.to_storage()
        self.store.set_item(ANALYSIS_KEY, analysis)

    async def save_if_absent(self, result: AnalysisResult) -> AnalysisResult:
        """Store *result* unless a record already exists; return the stored record."""
        async with self.lock_for(result.file_id):
            existing = self.get(result.file_id)
            if existing is not None:
                return existing
            self._put(result)
            return result

    async def merge_artifact(self, file_id: str, artifact: Artifact, value: CamelModel) -> CamelModel:
        """Set one artifact field on the stored record, unless it is already set.

        Returns:
            The value now stored for *artifact* (the existing one if it was already present).

        Raises:
            AnalysisNotFoundError: If there is no record to merge into.
        """
        async with self.lock_for(file_id):
            result = self.get(file_id)
            if result is None:
                raise AnalysisNotFoundError()

            existing = result.get_artifact(artifact)
            if existing is not None:
                logger.debug("[%s] %s already present, keeping it", file_id, artifact.value)
                return existing

            setattr(result, artifact.field_name, value)
            self._put(result)
            logger.info("[%s] Stored %s", file_id, artifact.value)
            return value

    def delete(self, file_id: str) -> None:
        analysis = self.store.get_item(ANALYSIS_KEY, {})
        if file_id in analysis:
            del analysis[file_id]
            self.store.set_item(ANALYSIS_KEY, analysis)
        self._locks.pop(file_id, None)
