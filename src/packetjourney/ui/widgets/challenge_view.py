"""Widgets for answering a challenge."""

from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Input, Label, Static

from ...challenges.types import (
    HEADER_SUGGESTIONS,
    BaseChallenge,
    HeadersChallenge,
    SequenceChallenge,
)


class OptionButton(Button):
    """A button carrying the option value it selects."""

    def __init__(self, label: str, value: Any, **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.value = value


class ChallengeView(Widget):
    """Base for the answer input of one challenge."""

    DEFAULT_CSS = """
    ChallengeView {
        height: auto;
    }

    ChallengeView .question {
        margin: 1 0;
        text-style: bold;
    }

    ChallengeView OptionButton {
        width: 100%;
        margin: 0 0 1 0;
    }

    ChallengeView OptionButton.-chosen {
        background: $primary;
        text-style: bold;
    }
    """

    class Selected(Message):
        """Emitted whenever the learner's answer changes; None when it is incomplete."""

        def __init__(self, value: Any) -> None:
            self.value = value
            super().__init__()

    def __init__(self, challenge: BaseChallenge, **kwargs) -> None:
        super().__init__(**kwargs)
        self.challenge = challenge
        self.locked = False

    def lock(self) -> None:
        """Disable input once the answer is submitted."""
        self.locked = True
        for widget in self.query("Button, Input"):
            widget.disabled = True


class OptionsView(ChallengeView):
    """Pick exactly one option."""

    def compose(self) -> ComposeResult:
        yield Static(self.challenge.question, classes="question", markup=False)
        for option in self.challenge.options:
            label = option.label if not option.description else f"{option.label}  - {option.description}"
            yield OptionButton(label, option.value, classes="option")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if not isinstance(event.button, OptionButton) or self.locked:
            return
        event.stop()
        for button in self.query(OptionButton):
            button.set_class(button is event.button, "-chosen")
        self.post_message(self.Selected(event.button.value))


class OrderingView(ChallengeView):
    """Build an ordering by pressing steps in execution order."""

    def __init__(self, challenge: SequenceChallenge, **kwargs) -> None:
        super().__init__(challenge, **kwargs)
        self._order: list[int] = []

    def compose(self) -> ComposeResult:
        yield Static(self.challenge.question, classes="question", markup=False)
        for option in self.challenge.options:
            yield OptionButton(option.label, option.value, classes="option")
        yield Label("Order: (press steps in order)", id="ordering")
        yield Button("Clear order", id="btn-clear-order", variant="default")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if self.locked:
            return
        event.stop()
        if event.button.id == "btn-clear-order":
            self._order = []
            for button in self.query(OptionButton):
                button.disabled = False
        elif isinstance(event.button, OptionButton):
            self._order.append(event.button.value)
            event.button.disabled = True
        else:
            return

        steps = self.challenge.steps
        shown = " -> ".join(steps[index] for index in self._order) or "(press steps in order)"
        self.query_one("#ordering", Label).update(f"Order: {shown}")
        if len(self._order) == len(steps):
            self.post_message(self.Selected(list(self._order)))
        else:
            self.post_message(self.Selected(None))


class HeadersView(ChallengeView):
    """Fill in a value for each required header."""

    def compose(self) -> ComposeResult:
        yield Static(self.challenge.question, classes="question", markup=False)
        for position, option in enumerate(self.challenge.options):
            with Vertical(classes="header-field"):
                yield Label(option.label)
                if option.description:
                    yield Static(option.description, classes="hint", markup=False)
                suggestions = HEADER_SUGGESTIONS.get(option.label, [])
                placeholder = f"Enter {option.label} value..."
                if suggestions:
                    placeholder += f" (e.g. {suggestions[0].strip()})"
                yield Input(placeholder=placeholder, id=f"header-{position}")

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if self.locked:
            return
        values = {}
        for position, header in enumerate(self.challenge.required_headers):
            values[header] = self.query_one(f"#header-{position}", Input).value
        if all(value.strip() for value in values.values()):
            self.post_message(self.Selected(values))
        else:
            self.post_message(self.Selected(None))


def challenge_view_for(challenge: BaseChallenge) -> ChallengeView:
    """Pick the input widget for a challenge."""
    if isinstance(challenge, SequenceChallenge):
        return OrderingView(challenge)
    if isinstance(challenge, HeadersChallenge):
        return HeadersView(challenge)
    return OptionsView(challenge)


class FeedbackPanel(Horizontal):
    """Correct/incorrect banner with the explanation."""

    DEFAULT_CSS = """
    FeedbackPanel {
        height: auto;
        padding: 1;
        margin: 1 0;
    }

    FeedbackPanel.-correct {
        border: solid $success;
    }

    FeedbackPanel.-incorrect {
        border: solid $error;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("", id="feedback-text", markup=False)

    def show(self, correct: bool, explanation: str) -> None:
        self.set_class(correct, "-correct")
        self.set_class(not correct, "-incorrect")
        headline = "Correct!" if correct else "Incorrect"
        text = f"{headline}\n{explanation}" if explanation else headline
        self.query_one("#feedback-text", Static).update(text)
        self.display = True

    def clear(self) -> None:
        self.remove_class("-correct", "-incorrect")
        self.query_one("#feedback-text", Static).update("")
        self.display = False
