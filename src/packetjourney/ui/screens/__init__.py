"""UI Screens."""

from .home import HomeScreen
from .play import PlayScreen
from .quests import QuestsScreen

__all__ = ["HomeScreen", "PlayScreen", "QuestsScreen"]
