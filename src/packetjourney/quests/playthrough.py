"""One learner playing one quest."""

import logging
from typing import Any, Optional

from ..challenges.engine import ChallengeRuntime
from ..challenges.types import GradingResult
from ..identity.models import Identity
from ..storage.progress import LayerStatus, ProgressTracker, QuestProgressSummary
from .models import Layer, Quest
from .sequencer import LayerSequencer

logger = logging.getLogger(__name__)


class QuestPlaythrough:
    """Wires the tracker, the sequencer and a runtime for the active layer.

    Submitting through the runtime records the outcome in the tracker; the
    sequencer then decides whether ``advance`` may move on.
    """

    def __init__(self, quest: Quest, identity: Identity, tracker: ProgressTracker):
        self.quest = quest
        self.identity = identity
        self.tracker = tracker
        self.sequencer = LayerSequencer(quest, tracker, identity)
        self.runtime: Optional[ChallengeRuntime] = None
        self.sequencer.resume()
        self._start_layer()

    @property
    def layer(self) -> Optional[Layer]:
        return self.sequencer.current_layer()

    def _start_layer(self) -> None:
        layer = self.sequencer.current_layer()
        if layer is None:
            self.runtime = None
            return
        self.runtime = ChallengeRuntime(
            layer.challenge,
            on_answer=lambda result, index=layer.index: self._record(index, result),
        )

    def _record(self, layer_index: int, result: GradingResult) -> None:
        self.tracker.record_outcome(self.identity, self.quest.id, layer_index, result)

    def select(self, value: Any) -> bool:
        if self.runtime is None:
            return False
        return self.runtime.select(value)

    def clear_selection(self) -> bool:
        if self.runtime is None:
            return False
        return self.runtime.clear_selection()

    def submit(self) -> Optional[GradingResult]:
        """Submit the current selection; None if the quest is complete."""
        if self.runtime is None:
            return None
        return self.runtime.submit()

    def retry(self) -> None:
        """Clear the current answer so the layer can be tried again."""
        if self.runtime is not None:
            self.runtime.reset()

    def advance(self) -> bool:
        """Move to the next layer if the current one has been passed."""
        if not self.sequencer.advance():
            return False
        self._start_layer()
        return True

    def is_complete(self) -> bool:
        return self.sequencer.is_complete()

    def status(self) -> dict[int, LayerStatus]:
        return self.tracker.get_status(self.identity, self.quest.id, self.quest.layer_count)

    def summary(self) -> QuestProgressSummary:
        return self.tracker.summary(self.identity, self.quest.id, self.quest.layer_count)
