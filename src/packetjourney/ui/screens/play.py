"""Screen for playing one quest layer by layer."""

import logging
from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Label, Static

from ...errors import ChallengeValidationError, LayerLockedError
from ...identity.models import Identity
from ...quests.models import Quest
from ...quests.playthrough import QuestPlaythrough
from ...storage.progress import LayerStatus
from ..widgets.challenge_view import ChallengeView, FeedbackPanel, challenge_view_for

logger = logging.getLogger(__name__)

_STATUS_MARKS = {
    LayerStatus.COMPLETED: "[x]",
    LayerStatus.UNLOCKED: "[ ]",
    LayerStatus.LOCKED: "[-]",
}


class PlayScreen(Screen):
    """Walk through the layers of a quest, one challenge at a time."""

    CSS = """
    #layer-status {
        padding: 1;
        background: $surface-darken-1;
        border: solid $primary;
        margin: 1 0;
        height: auto;
    }

    #challenge-area {
        height: auto;
    }

    #play-actions {
        height: auto;
        padding: 1 0;
    }

    #play-actions Button {
        margin-right: 1;
    }

    #quest-complete {
        padding: 1;
        border: solid $success;
        margin: 1 0;
        height: auto;
    }
    """

    BINDINGS = [
        Binding("s", "submit", "Submit", show=False),
        Binding("r", "retry", "Retry", show=False),
        Binding("n", "next_layer", "Next", show=False),
    ]

    def __init__(self, quest: Quest, identity: Identity, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.quest = quest
        self.identity = identity
        self.playthrough: Optional[QuestPlaythrough] = None

    def compose(self) -> ComposeResult:
        """Compose the play screen."""
        with Container(id="main-content"):
            yield Static(self.quest.title, classes="title", markup=False)
            yield Static(self.quest.description, classes="subtitle", markup=False)
            yield Label("Loading progress...", id="layer-status")
            yield Vertical(id="challenge-area")
            yield FeedbackPanel(id="feedback")
            yield Static("", id="quest-complete", markup=False)
            with Horizontal(id="play-actions"):
                yield Button("Submit (s)", id="btn-submit", variant="primary", disabled=True)
                yield Button("Retry (r)", id="btn-retry", variant="warning", disabled=True)
                yield Button("Next (n)", id="btn-next", variant="success", disabled=True)
                yield Button("Back", id="btn-back", variant="default")

    def on_mount(self) -> None:
        self.query_one("#feedback", FeedbackPanel).display = False
        self.query_one("#quest-complete", Static).display = False
        self.run_worker(self._start(), exclusive=True, group="play")

    async def _start(self) -> None:
        await self.app.tracker.load(self.identity, self.quest.id)
        self.playthrough = QuestPlaythrough(self.quest, self.identity, self.app.tracker)
        await self._show_layer()

    async def _show_layer(self) -> None:
        """Render the active layer, or the completion summary."""
        if self.playthrough is None:
            return
        area = self.query_one("#challenge-area", Vertical)
        await area.remove_children()
        self.query_one("#feedback", FeedbackPanel).clear()
        self._update_status()

        runtime = self.playthrough.runtime
        if runtime is None:
            self._show_complete()
            return

        layer = self.playthrough.layer
        await area.mount(Static(f"Layer {layer.index + 1}: {layer.kind.value}", classes="section-header"))
        await area.mount(challenge_view_for(runtime.challenge))
        self._update_buttons()

    def _update_status(self) -> None:
        if self.playthrough is None:
            return
        current = self.playthrough.sequencer.current_index
        parts = []
        for index, status in self.playthrough.status().items():
            marker = ">" if index == current and not self.playthrough.is_complete() else " "
            parts.append(f"{marker}{_STATUS_MARKS[status]} {self.quest.layers[index].kind.value}")
        self.query_one("#layer-status", Label).update("  ".join(parts))

    def _update_buttons(self) -> None:
        runtime = self.playthrough.runtime if self.playthrough else None
        submitted = runtime is not None and runtime.result is not None
        self.query_one("#btn-submit", Button).disabled = runtime is None or not runtime.can_submit
        self.query_one("#btn-retry", Button).disabled = not submitted
        self.query_one("#btn-next", Button).disabled = not (
            self.playthrough is not None and self.playthrough.sequencer.can_advance()
        )

    def _show_complete(self) -> None:
        if self.playthrough is None:
            return
        summary = self.playthrough.summary()
        panel = self.query_one("#quest-complete", Static)
        panel.update(
            f"Quest complete! {summary.completed_layers}/{summary.layer_count} layers "
            f"in {summary.attempts} attempts."
        )
        panel.display = True
        for button_id in ("#btn-submit", "#btn-retry", "#btn-next"):
            self.query_one(button_id, Button).disabled = True

    def on_challenge_view_selected(self, message: ChallengeView.Selected) -> None:
        if self.playthrough is None:
            return
        if message.value is None:
            self.playthrough.clear_selection()
            self._update_buttons()
            return
        try:
            self.playthrough.select(message.value)
        except ChallengeValidationError as exc:
            logger.debug("Ignoring selection: %s", exc)
        self._update_buttons()

    def action_submit(self) -> None:
        if self.playthrough is None or self.playthrough.runtime is None:
            return
        if not self.playthrough.runtime.can_submit:
            return
        try:
            result = self.playthrough.submit()
        except (ChallengeValidationError, LayerLockedError) as exc:
            self.app.notify(str(exc), title="Cannot submit", severity="error")
            return
        if result is None:
            return

        self.query_one(ChallengeView).lock()
        self.query_one("#feedback", FeedbackPanel).show(
            result.correct, self.playthrough.runtime.challenge.explanation
        )
        self._update_status()
        self._update_buttons()

    async def action_retry(self) -> None:
        if self.playthrough is None or self.playthrough.runtime is None:
            return
        self.playthrough.retry()
        await self._show_layer()

    async def action_next_layer(self) -> None:
        if self.playthrough is None:
            return
        if not self.playthrough.advance():
            self.app.notify("Answer this layer correctly to move on", title="Locked")
            return
        await self._show_layer()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        button_id = event.button.id

        if button_id == "btn-submit":
            self.action_submit()
        elif button_id == "btn-retry":
            await self.action_retry()
        elif button_id == "btn-next":
            await self.action_next_layer()
        elif button_id == "btn-back":
            self.app.pop_screen()
