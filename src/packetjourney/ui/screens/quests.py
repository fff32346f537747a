"""Screen for browsing quests."""

from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Input, Label, Static

from ...identity.models import GUEST_IDENTITY
from ...quests.models import Difficulty, QuestFilter
from ..widgets.quest_card import QuestCard

_DIFFICULTY_CYCLE: list[Optional[Difficulty]] = [
    None,
    Difficulty.BEGINNER,
    Difficulty.INTERMEDIATE,
    Difficulty.ADVANCED,
]

PAGE_SIZE = 5


class QuestsScreen(Screen):
    """Browse, filter and pick a quest."""

    CSS = """
    #filters {
        height: auto;
    }

    #filters Input {
        width: 1fr;
    }

    #quest-list {
        height: 1fr;
    }

    #quest-actions {
        height: auto;
        padding: 1 0;
    }

    #quest-actions Button {
        margin-right: 1;
    }
    """

    BINDINGS = [
        Binding("d", "cycle_difficulty", "Difficulty", show=False),
        Binding("n", "next_page", "Next page", show=False),
        Binding("b", "prev_page", "Prev page", show=False),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._difficulty_index = 0
        self._search: Optional[str] = None
        self._page = 1
        self._total_pages = 1

    def compose(self) -> ComposeResult:
        """Compose the quests screen."""
        with Container(id="main-content"):
            yield Static("Quests", classes="title")
            with Horizontal(id="filters"):
                yield Input(placeholder="Search quests...", id="input-search")
                yield Button("Difficulty: all (d)", id="btn-difficulty", variant="default")
            yield Label("", id="page-info")
            yield VerticalScroll(id="quest-list")
            with Horizontal(id="quest-actions"):
                yield Button("Back", id="btn-back", variant="default")
                yield Button("Prev (b)", id="btn-prev", variant="default")
                yield Button("Next (n)", id="btn-next", variant="default")

    async def on_screen_resume(self) -> None:
        await self.refresh_quests()

    async def refresh_quests(self) -> None:
        """Reload the current page of quests."""
        difficulty = _DIFFICULTY_CYCLE[self._difficulty_index]
        page = self.app.catalog.list_quests(
            QuestFilter(difficulty=difficulty, search=self._search, page=self._page, limit=PAGE_SIZE)
        )
        self._total_pages = page.pages

        identity = self.app.identity_session.identity or GUEST_IDENTITY
        quest_list = self.query_one("#quest-list", VerticalScroll)
        await quest_list.remove_children()

        cards = []
        for summary in page.items:
            await self.app.tracker.load(identity, summary.id)
            progress = self.app.tracker.summary(identity, summary.id, summary.layer_count)
            cards.append(QuestCard(summary, progress))
        if cards:
            await quest_list.mount_all(cards)
        else:
            await quest_list.mount(Static("No quests match.", classes="hint"))

        self.query_one("#page-info", Label).update(f"Page {page.page} of {page.pages} - {page.total} quests")
        self.query_one("#btn-prev", Button).disabled = page.page <= 1
        self.query_one("#btn-next", Button).disabled = page.page >= page.pages
        label = difficulty.value if difficulty else "all"
        self.query_one("#btn-difficulty", Button).label = f"Difficulty: {label} (d)"

    async def action_cycle_difficulty(self) -> None:
        self._difficulty_index = (self._difficulty_index + 1) % len(_DIFFICULTY_CYCLE)
        self._page = 1
        await self.refresh_quests()

    async def action_next_page(self) -> None:
        if self._page < self._total_pages:
            self._page += 1
            await self.refresh_quests()

    async def action_prev_page(self) -> None:
        if self._page > 1:
            self._page -= 1
            await self.refresh_quests()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        self._search = event.value.strip() or None
        self._page = 1
        await self.refresh_quests()

    def on_quest_card_play(self, message: QuestCard.Play) -> None:
        self.app.start_quest(message.quest_id)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        button_id = event.button.id

        if button_id == "btn-back":
            self.app.switch_screen("home")
        elif button_id == "btn-difficulty":
            await self.action_cycle_difficulty()
        elif button_id == "btn-next":
            await self.action_next_page()
        elif button_id == "btn-prev":
            await self.action_prev_page()
