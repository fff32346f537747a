"""Quests, their layers and how a learner moves through them."""

from .catalog import QuestCatalog, parse_quest
from .models import Difficulty, Layer, LayerKind, Quest, QuestFilter, QuestPage, QuestSummary
from .playthrough import QuestPlaythrough
from .sequencer import LayerSequencer

__all__ = [
    "Difficulty",
    "Layer",
    "LayerKind",
    "LayerSequencer",
    "Quest",
    "QuestCatalog",
    "QuestFilter",
    "QuestPage",
    "QuestPlaythrough",
    "QuestSummary",
    "parse_quest",
]
