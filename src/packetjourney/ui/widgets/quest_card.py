"""Widget for displaying a quest in the listing."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Label, Static

from ...quests.models import QuestSummary
from ...storage.progress import QuestProgressSummary


class QuestCard(Widget, can_focus=True):
    """A card displaying one quest and the learner's progress on it."""

    DEFAULT_CSS = """
    QuestCard {
        height: auto;
        margin: 1 0;
        padding: 1 2;
        border: solid $primary;
        background: $surface-darken-1;
    }

    QuestCard:focus {
        border: solid $success;
        background: $surface-lighten-1;
    }

    QuestCard .quest-title {
        color: $success;
        text-style: bold;
    }

    QuestCard .quest-meta {
        color: $warning;
        text-style: italic;
    }

    QuestCard .card-actions {
        height: auto;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("enter", "play", "Play", show=False),
        Binding("p", "play", "Play", show=False),
    ]

    class Play(Message):
        """Message emitted when the learner wants to play a quest."""

        def __init__(self, quest_id: str) -> None:
            self.quest_id = quest_id
            super().__init__()

    def __init__(
        self,
        quest: QuestSummary,
        progress: QuestProgressSummary,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.quest = quest
        self.progress = progress

    def compose(self) -> ComposeResult:
        """Compose the card."""
        yield Label(self.quest.title, classes="quest-title")
        yield Static(self.quest.description, markup=False)
        yield Static(
            f"{self.quest.difficulty.value} | {self.quest.layer_count} layers | "
            f"{self._progress_text()}",
            classes="quest-meta",
        )
        with Horizontal(classes="card-actions"):
            label = "Review (p)" if self.progress.complete else "Play (p)"
            yield Button(label, classes="btn-play", variant="primary")

    def _progress_text(self) -> str:
        if self.progress.complete:
            return "complete"
        if self.progress.completed_layers == 0:
            return "not started"
        return f"{self.progress.completed_layers}/{self.progress.layer_count} done"

    def action_play(self) -> None:
        self.post_message(self.Play(self.quest.id))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses within the card."""
        event.stop()
        self.action_play()
