"""Challenge system for interactive learning."""

from .types import (
    BaseChallenge,
    Challenge,
    ChallengeType,
    ChoiceChallenge,
    GradingResult,
    HeadersChallenge,
    Option,
    SequenceChallenge,
    StatusCodeChallenge,
    parse_challenge,
)
from .engine import ChallengeRuntime, ChallengeState

__all__ = [
    "BaseChallenge",
    "Challenge",
    "ChallengeRuntime",
    "ChallengeState",
    "ChallengeType",
    "ChoiceChallenge",
    "GradingResult",
    "HeadersChallenge",
    "Option",
    "SequenceChallenge",
    "StatusCodeChallenge",
    "parse_challenge",
]
