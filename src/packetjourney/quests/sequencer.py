"""Layer ordering within a quest."""

import logging
from typing import Optional

from ..identity.models import Identity
from ..storage.progress import ProgressTracker
from .models import Layer, Quest

logger = logging.getLogger(__name__)


class LayerSequencer:
    """Holds the active layer of one quest for one learner.

    Reads outcomes from the tracker to decide whether it may advance; it
    never writes them.
    """

    def __init__(self, quest: Quest, tracker: ProgressTracker, identity: Identity):
        self.quest = quest
        self.tracker = tracker
        self.identity = identity
        self._index = 0
        self._complete = False

    @property
    def current_index(self) -> int:
        return self._index

    def current_layer(self) -> Optional[Layer]:
        """The active layer, or None once the quest is complete."""
        if self._complete:
            return None
        return self.quest.layers[self._index]

    def is_complete(self) -> bool:
        return self._complete

    def can_advance(self) -> bool:
        """Whether the current layer has been passed."""
        if self._complete:
            return False
        return self.tracker.is_completed(self.identity, self.quest.id, self._index)

    def advance(self) -> bool:
        """Move past the current layer.

        Returns:
            True if the sequencer moved (or the quest completed), False if
            the current layer has not been passed or nothing is left
        """
        if not self.can_advance():
            logger.debug("Advance rejected on layer %d of %s", self._index, self.quest.id)
            return False

        if self._index == self.quest.last_index:
            self._complete = True
            logger.info("Quest %s complete for %s", self.quest.id, self.identity.username or self.identity.id)
        else:
            self._index += 1
        return True

    def resume(self) -> None:
        """Jump to the first layer not yet completed."""
        for layer in self.quest.layers:
            if not self.tracker.is_completed(self.identity, self.quest.id, layer.index):
                self._index = layer.index
                self._complete = False
                return
        self._index = self.quest.last_index
        self._complete = True
