"""Storage module for persistence."""

from .database import Database
from .progress import LayerRecord, LayerStatus, ProgressTracker, QuestProgressSummary

__all__ = ["Database", "LayerRecord", "LayerStatus", "ProgressTracker", "QuestProgressSummary"]
