"""UI widgets."""

from .challenge_view import ChallengeView, FeedbackPanel, OptionButton, challenge_view_for
from .quest_card import QuestCard

__all__ = ["ChallengeView", "FeedbackPanel", "OptionButton", "QuestCard", "challenge_view_for"]
