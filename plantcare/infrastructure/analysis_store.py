"""
Infrastructure layer: Persistence for completed plant analyses.

The store is constructed by the application entry point and handed to
request handlers through dependency injection. Records are never updated
after creation; they are only read or deleted.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from plantcare.domain.models import PlantAnalysis, PlantAnalysisCreate

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class AnalysisStore(ABC):
    """Keyed storage for PlantAnalysis records."""

    @abstractmethod
    def create(self, record: PlantAnalysisCreate) -> PlantAnalysis:
        """Assign an id and timestamp, store the record and return it."""

    @abstractmethod
    def get_by_id(self, analysis_id: str) -> Optional[PlantAnalysis]:
        """Return the record with this id, or None."""

    @abstractmethod
    def list_all(self) -> List[PlantAnalysis]:
        """Return every record, most recent first."""

    @abstractmethod
    def delete_by_id(self, analysis_id: str) -> bool:
        """Remove a record. Returns True if it existed."""

    def clear(self) -> int:
        """
        Delete every record one id at a time.

        Ids removed by someone else in the meantime are skipped.

        Returns:
            Number of records this call removed
        """
        deleted = 0
        for analysis in self.list_all():
            if self.delete_by_id(analysis.id):
                deleted += 1
        logger.info(f"Cleared {deleted} plant analyses")
        return deleted


class InMemoryAnalysisStore(AnalysisStore):
    """
    Dict-backed store for a single-process deployment.

    No locking: mutations are plain dict operations. Reads return deep
    copies of the stored records.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ):
        """
        Initialize an empty store.

        Args:
            clock: Source of analysis timestamps
            id_factory: Source of unique record ids
        """
        self._clock = clock
        self._id_factory = id_factory
        self._analyses: Dict[str, PlantAnalysis] = {}

    def __len__(self) -> int:
        return len(self._analyses)

    def create(self, record: PlantAnalysisCreate) -> PlantAnalysis:
        analysis_id = self._id_factory()
        while analysis_id in self._analyses:
            analysis_id = self._id_factory()

        analysis = PlantAnalysis(
            **record.model_dump(),
            id=analysis_id,
            analysis_date=self._clock(),
        )
        self._analyses[analysis_id] = analysis
        logger.info(f"Stored plant analysis {analysis_id} ({analysis.common_name})")
        return analysis.model_copy(deep=True)

    def get_by_id(self, analysis_id: str) -> Optional[PlantAnalysis]:
        analysis = self._analyses.get(analysis_id)
        return analysis.model_copy(deep=True) if analysis is not None else None

    def list_all(self) -> List[PlantAnalysis]:
        ordered = sorted(
            self._analyses.values(),
            key=lambda analysis: analysis.analysis_date,
            reverse=True,
        )
        return [analysis.model_copy(deep=True) for analysis in ordered]

    def delete_by_id(self, analysis_id: str) -> bool:
        removed = self._analyses.pop(analysis_id, None)
        if removed is None:
            logger.debug(f"Plant analysis {analysis_id} not found for deletion")
            return False
        logger.info(f"Deleted plant analysis {analysis_id}")
        return True
