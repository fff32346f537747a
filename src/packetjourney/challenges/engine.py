"""Challenge execution engine."""

import copy
import logging
from enum import Enum
from typing import Any, Callable, Optional

from ..errors import ChallengeValidationError
from .types import BaseChallenge, GradingResult

logger = logging.getLogger(__name__)


class ChallengeState(str, Enum):
    """Lifecycle of one challenge instance."""

    UNANSWERED = "unanswered"
    SELECTED = "selected"
    SUBMITTED = "submitted"


class ChallengeRuntime:
    """Interaction lifecycle for a single active challenge.

    Works with any challenge that satisfies the ``BaseChallenge`` contract and
    never looks at variant-specific fields.
    """

    def __init__(
        self,
        challenge: BaseChallenge,
        on_answer: Optional[Callable[[GradingResult], None]] = None,
    ):
        """Initialize the runtime.

        Args:
            challenge: The challenge being played
            on_answer: Called once with the grading result on submission
        """
        self.challenge = challenge
        self._on_answer = on_answer
        self._state = ChallengeState.UNANSWERED
        self._selection: Any = None
        self._result: Optional[GradingResult] = None

    @property
    def state(self) -> ChallengeState:
        return self._state

    @property
    def selection(self) -> Any:
        return copy.deepcopy(self._selection)

    @property
    def result(self) -> Optional[GradingResult]:
        return self._result

    @property
    def can_submit(self) -> bool:
        """Whether the submit action should be enabled."""
        return self._state == ChallengeState.SELECTED

    @property
    def feedback(self) -> Optional[str]:
        """Explanation to show once graded, None before that."""
        if self._result is None:
            return None
        return self.challenge.explanation

    def select(self, value: Any) -> bool:
        """Replace the current selection.

        Args:
            value: One of the challenge's legal selections

        Returns:
            False if the challenge was already submitted, True otherwise

        Raises:
            ChallengeValidationError: If the value is not a legal selection
        """
        if self._state == ChallengeState.SUBMITTED:
            logger.debug("Ignoring selection after submit: %r", value)
            return False

        if not self.challenge.accepts(value):
            raise ChallengeValidationError(f"{value!r} is not a valid selection for this challenge")

        if self._state == ChallengeState.SELECTED and self.challenge.normalize(value) == self.challenge.normalize(
            self._selection
        ):
            return True

        self._selection = copy.deepcopy(value)
        self._state = ChallengeState.SELECTED
        return True

    def clear_selection(self) -> bool:
        """Drop an incomplete answer; returns False once submitted."""
        if self._state == ChallengeState.SUBMITTED:
            return False
        self._selection = None
        self._state = ChallengeState.UNANSWERED
        return True

    def submit(self) -> GradingResult:
        """Grade the current selection.

        Calling again after submission returns the same result without
        notifying a second time.

        Raises:
            ChallengeValidationError: If nothing has been selected
        """
        if self._result is not None:
            return self._result

        if self._state != ChallengeState.SELECTED:
            raise ChallengeValidationError("Cannot submit without a selection")

        self._result = self.challenge.grade(copy.deepcopy(self._selection))
        self._state = ChallengeState.SUBMITTED
        logger.debug("Graded %s: correct=%s", self.challenge.type, self._result.correct)

        if self._on_answer is not None:
            try:
                self._on_answer(self._result)
            except Exception:
                logger.exception("Answer callback failed; keeping submitted state")

        return self._result

    def reset(self) -> None:
        """Return to the unanswered state for a retry."""
        self._state = ChallengeState.UNANSWERED
        self._selection = None
        self._result = None
