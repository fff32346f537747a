"""Progress tracking utilities."""

import asyncio
import logging
import threading
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..challenges.types import GradingResult
from ..errors import LayerLockedError
from ..identity.models import Identity
from .database import Database

logger = logging.getLogger(__name__)


class LayerStatus(str, Enum):
    """Navigation status of one layer."""

    LOCKED = "locked"
    UNLOCKED = "unlocked"
    COMPLETED = "completed"


class LayerRecord(BaseModel):
    """Recorded progress for one layer. Replaced whole, never edited."""

    model_config = ConfigDict(frozen=True)

    completed: bool = Field(default=False)
    latest: Optional[GradingResult] = Field(default=None)
    attempts: int = Field(default=0)


class QuestProgressSummary(BaseModel):
    """Completion summary for one quest."""

    quest_id: str
    layer_count: int
    completed_layers: int
    attempts: int
    complete: bool

    @property
    def percent(self) -> int:
        if self.layer_count == 0:
            return 0
        return round(100 * self.completed_layers / self.layer_count)


class ProgressTracker:
    """Track per-identity, per-quest, per-layer progress.

    The in-memory records are authoritative. When a database is attached,
    outcomes for persistent identities are mirrored to it in the background;
    a failed write is logged and never undoes the in-memory outcome.
    """

    def __init__(self, db: Optional[Database] = None):
        """Initialize the progress tracker.

        Args:
            db: Database to mirror outcomes into, if any
        """
        self.db = db
        self._records: dict[tuple[str, str], dict[int, LayerRecord]] = {}
        self._lock = threading.Lock()
        self._pending: set[asyncio.Task] = set()

    def record_outcome(
        self,
        identity: Identity,
        quest_id: str,
        layer_index: int,
        result: GradingResult,
    ) -> LayerRecord:
        """Record a graded submission for a layer.

        A completed layer stays completed; later outcomes only replace the
        latest result shown for it.

        Args:
            identity: The learner
            quest_id: Quest being played
            layer_index: Layer the result belongs to
            result: The grading result

        Returns:
            The new record for the layer

        Raises:
            LayerLockedError: If the layer is not unlocked yet
        """
        with self._lock:
            if not self._is_unlocked(identity.id, quest_id, layer_index):
                raise LayerLockedError(f"Layer {layer_index} of quest {quest_id!r} is locked")

            layers = self._records.setdefault((identity.id, quest_id), {})
            previous = layers.get(layer_index, LayerRecord())
            record = LayerRecord(
                completed=previous.completed or result.correct,
                latest=result,
                attempts=previous.attempts + 1,
            )
            layers[layer_index] = record

        if record.completed and not previous.completed:
            logger.info("%s completed layer %d of %s", identity.username or identity.id, layer_index, quest_id)

        self._mirror(identity, quest_id, layer_index, record)
        return record

    def get_record(self, identity: Identity, quest_id: str, layer_index: int) -> LayerRecord:
        """Get the record for one layer (empty if never attempted)."""
        with self._lock:
            return self._records.get((identity.id, quest_id), {}).get(layer_index, LayerRecord())

    def latest_outcome(self, identity: Identity, quest_id: str, layer_index: int) -> Optional[GradingResult]:
        """Get the most recent grading result for a layer."""
        return self.get_record(identity, quest_id, layer_index).latest

    def is_completed(self, identity: Identity, quest_id: str, layer_index: int) -> bool:
        return self.get_record(identity, quest_id, layer_index).completed

    def is_unlocked(self, identity: Identity, quest_id: str, layer_index: int) -> bool:
        """Layer 0 is always unlocked; layer i needs layer i-1 completed."""
        with self._lock:
            return self._is_unlocked(identity.id, quest_id, layer_index)

    def get_status(self, identity: Identity, quest_id: str, layer_count: int) -> dict[int, LayerStatus]:
        """Get the status of every layer of a quest."""
        status = {}
        for index in range(layer_count):
            if self.is_completed(identity, quest_id, index):
                status[index] = LayerStatus.COMPLETED
            elif self.is_unlocked(identity, quest_id, index):
                status[index] = LayerStatus.UNLOCKED
            else:
                status[index] = LayerStatus.LOCKED
        return status

    def summary(self, identity: Identity, quest_id: str, layer_count: int) -> QuestProgressSummary:
        """Get a completion summary for a quest."""
        with self._lock:
            layers = dict(self._records.get((identity.id, quest_id), {}))
        completed = sum(
            1 for index, record in layers.items() if record.completed and 0 <= index < layer_count
        )
        return QuestProgressSummary(
            quest_id=quest_id,
            layer_count=layer_count,
            completed_layers=completed,
            attempts=sum(record.attempts for record in layers.values()),
            complete=layer_count > 0 and completed == layer_count,
        )

    def _is_unlocked(self, identity_id: str, quest_id: str, layer_index: int) -> bool:
        if layer_index < 0:
            return False
        if layer_index == 0:
            return True
        previous = self._records.get((identity_id, quest_id), {}).get(layer_index - 1)
        return previous is not None and previous.completed

    # Persistence
    def _mirror(self, identity: Identity, quest_id: str, layer_index: int, record: LayerRecord) -> None:
        """Schedule a background write of one record."""
        if self.db is None or not identity.is_persistent:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No event loop running; progress for %s not persisted", quest_id)
            return

        task = loop.create_task(self._persist(identity.id, quest_id, layer_index, record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self, identity_id: str, quest_id: str, layer_index: int, record: LayerRecord) -> None:
        db = self.db
        if db is None:
            logger.debug("Database detached; dropping write for %s", quest_id)
            return
        latest = record.latest
        try:
            await db.save_layer_record(
                identity_id,
                quest_id,
                layer_index,
                completed=record.completed,
                latest_correct=latest.correct if latest else None,
                latest_answer=latest.answer_given if latest else None,
                attempts=record.attempts,
            )
            if latest is not None:
                await db.log_attempt(identity_id, quest_id, layer_index, latest.answer_given, latest.correct)
        except Exception as exc:
            logger.warning("Could not persist progress for layer %d of %s: %s", layer_index, quest_id, exc)

    async def flush(self) -> None:
        """Wait for pending background writes."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def load(self, identity: Identity, quest_id: str) -> None:
        """Merge stored progress for a quest into memory.

        Guests are never loaded. Failures are logged and leave memory as is.
        """
        if self.db is None or not identity.is_persistent:
            return
        try:
            rows = await self.db.load_layer_records(identity.id, quest_id)
        except Exception as exc:
            logger.warning("Could not load progress for %s: %s", quest_id, exc)
            return

        with self._lock:
            layers = self._records.setdefault((identity.id, quest_id), {})
            for row in rows:
                index = int(row["layer_index"])
                current = layers.get(index)
                stored_latest = None
                if row["latest_correct"] is not None:
                    stored_latest = GradingResult(correct=row["latest_correct"], answer_given=row["latest_answer"])
                if current is None:
                    layers[index] = LayerRecord(
                        completed=row["completed"],
                        latest=stored_latest,
                        attempts=row["attempts"],
                    )
                else:
                    layers[index] = LayerRecord(
                        completed=current.completed or row["completed"],
                        latest=current.latest or stored_latest,
                        attempts=max(current.attempts, row["attempts"]),
                    )
        logger.debug("Loaded %d stored layer records for %s", len(rows), quest_id)

    async def get_history_stats(self, identity: Identity, quest_id: Optional[str] = None) -> dict:
        """Get stored attempt statistics; empty stats when nothing is stored."""
        empty = {"total_attempts": 0, "successful": 0, "success_rate": 0}
        if self.db is None or not identity.is_persistent:
            return empty
        try:
            return await self.db.get_attempt_stats(identity.id, quest_id)
        except Exception as exc:
            logger.warning("Could not read attempt stats: %s", exc)
            return empty
