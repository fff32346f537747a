"""Quest content source: built-in quests plus JSON files on disk."""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from ..errors import QuestContentError
from .builtin import BUILTIN_QUESTS
from .models import Difficulty, Quest, QuestFilter, QuestPage

logger = logging.getLogger(__name__)

_DIFFICULTY_RANK = {
    Difficulty.BEGINNER: 0,
    Difficulty.INTERMEDIATE: 1,
    Difficulty.ADVANCED: 2,
}


def _normalize_layers(quest_id: str, layers: Any) -> Any:
    """Order layers by their index and give id-less layers a stable id."""
    if not isinstance(layers, list) or not all(isinstance(layer, dict) for layer in layers):
        return layers

    def position(layer: dict) -> int:
        value = layer.get("index", layer.get("order", 0))
        return value if isinstance(value, int) else 0

    normalized = []
    for layer in sorted(layers, key=position):
        layer = dict(layer)
        if "id" not in layer:
            layer["id"] = f"{quest_id}-layer-{position(layer)}"
        normalized.append(layer)
    return normalized


def parse_quest(data: dict) -> Quest:
    """Validate one quest mapping.

    Raises:
        QuestContentError: If the quest or any of its layers is invalid
    """
    if not isinstance(data, dict):
        raise QuestContentError("?", "quest content must be an object")
    quest_id = str(data.get("id") or "?")
    data = {**data, "layers": _normalize_layers(quest_id, data.get("layers"))}
    try:
        return Quest.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'quest'}: {error['msg']}" for error in exc.errors()
        )
        raise QuestContentError(quest_id, problems) from exc


class QuestCatalog:
    """In-memory catalog of validated quests.

    A quest that fails validation is left out and its error kept in
    ``load_errors``; other quests still load.
    """

    def __init__(
        self,
        sources: Optional[Iterable[dict]] = None,
        quests_dir: Optional[Path] = None,
    ):
        """Initialize the catalog.

        Args:
            sources: Quest mappings; defaults to the built-in quests
            quests_dir: Directory of extra ``*.json`` quest files
        """
        self._sources = list(BUILTIN_QUESTS if sources is None else sources)
        self.quests_dir = quests_dir
        self._quests: dict[str, Quest] = {}
        self.load_errors: dict[str, str] = {}
        self._loaded = False

    def load(self) -> None:
        """(Re)load every source."""
        self._quests.clear()
        self.load_errors.clear()

        for data in self._sources:
            self._load_one(data, origin="builtin")

        if self.quests_dir is not None:
            for path in sorted(self.quests_dir.glob("*.json")):
                self._load_file(path)

        self._loaded = True
        logger.info("Loaded %d quests (%d rejected)", len(self._quests), len(self.load_errors))

    def _load_file(self, path: Path) -> None:
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Could not read quest file %s: %s", path, exc)
            self.load_errors[str(path)] = str(exc)
            return

        entries = content if isinstance(content, list) else [content]
        for data in entries:
            self._load_one(data, origin=str(path))

    def _load_one(self, data: Any, origin: str) -> None:
        try:
            self.add_quest(data)
        except QuestContentError as exc:
            logger.error("Skipping quest from %s: %s", origin, exc)
            self.load_errors[exc.quest_id] = str(exc)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def add_quest(self, data: dict) -> Quest:
        """Validate and register one quest.

        Raises:
            QuestContentError: If the quest is invalid or its id is taken
        """
        quest = parse_quest(data)
        if quest.id in self._quests:
            raise QuestContentError(quest.id, "duplicate quest id")
        self._quests[quest.id] = quest
        return quest

    def get_quest_with_layers(self, quest_id: str) -> Optional[Quest]:
        """Get a quest by id, or None if there is no such quest."""
        self._ensure_loaded()
        return self._quests.get(quest_id)

    def list_quests(self, quest_filter: Optional[QuestFilter] = None) -> QuestPage:
        """List quest summaries matching a filter, one page at a time."""
        self._ensure_loaded()
        quest_filter = quest_filter or QuestFilter()

        quests = list(self._quests.values())
        if quest_filter.difficulty is not None:
            quests = [q for q in quests if q.difficulty == quest_filter.difficulty]
        if quest_filter.search:
            needle = quest_filter.search.strip().lower()
            quests = [q for q in quests if needle in q.title.lower() or needle in q.description.lower()]

        quests.sort(key=lambda q: (_DIFFICULTY_RANK[q.difficulty], q.title.lower()))

        start = (quest_filter.page - 1) * quest_filter.limit
        page_items = quests[start:start + quest_filter.limit]

        return QuestPage(
            items=[quest.summary() for quest in page_items],
            page=quest_filter.page,
            limit=quest_filter.limit,
            total=len(quests),
        )

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._quests)
