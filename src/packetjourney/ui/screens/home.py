"""Home screen with identity and quick actions."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Input, Label, Static

from ...errors import IdentityError
from ...identity.session import IdentityState


class HomeScreen(Screen):
    """Welcome screen: who is playing, and where to go next."""

    CSS = """
    #status-section {
        height: auto;
        margin: 1 0;
        padding: 1;
        background: $surface-darken-1;
        border: solid $primary;
    }

    #login-form {
        height: auto;
        margin: 1 0;
    }

    #login-buttons {
        height: auto;
    }

    #actions {
        height: auto;
        margin: 1 0;
    }

    #actions Button {
        width: 100%;
        margin: 1 0;
    }

    #actions Button:focus {
        background: $success;
    }
    """

    BINDINGS = [
        Binding("g", "guest", "Guest", show=False),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.registering = False

    def compose(self) -> ComposeResult:
        """Compose the home screen."""
        with Container(id="main-content"):
            yield Static("packetjourney", classes="title")
            yield Static(
                "Follow a request through the browser, the network, the API and the database",
                classes="subtitle",
            )

            with Vertical(id="status-section"):
                yield Label("Checking who you are...", id="identity-status")

            with Vertical(id="login-form"):
                yield Input(placeholder="Username", id="input-username")
                yield Input(placeholder="Email", id="input-email")
                yield Input(placeholder="Password", password=True, id="input-password")
                with Horizontal(id="login-buttons"):
                    yield Button("Log In", id="btn-login", variant="primary")
                    yield Button("New here? Register", id="btn-mode", variant="default")
                    yield Button("Continue as Guest (g)", id="btn-guest", variant="success")

            with Vertical(id="actions"):
                yield Button("Browse Quests", id="btn-quests", variant="warning")
                yield Button("Log Out", id="btn-logout", variant="default")

            yield Static("Press ? for keyboard shortcuts", classes="hint")

    def on_mount(self) -> None:
        self.query_one("#input-username", Input).display = False
        self.refresh_identity()

    def on_screen_resume(self) -> None:
        self.refresh_identity()

    def refresh_identity(self) -> None:
        """Update the identity display and which actions are available."""
        session = self.app.identity_session
        status = self.query_one("#identity-status", Label)

        if session.state == IdentityState.LOADING:
            status.update("Checking who you are...")
        elif session.identity is None:
            status.update("Not signed in. Log in or continue as a guest.")
        elif session.is_guest:
            status.update("Playing as Guest - progress is kept until you quit")
        else:
            status.update(f"Signed in as {session.identity.username}")

        signed_in = session.identity is not None
        self.query_one("#login-form").display = not signed_in
        self.query_one("#btn-quests", Button).disabled = not signed_in
        self.query_one("#btn-logout", Button).disabled = not signed_in

    def action_guest(self) -> None:
        self.app.identity_session.continue_as_guest()
        self.refresh_identity()

    async def _login(self) -> None:
        email = self.query_one("#input-email", Input).value
        password = self.query_one("#input-password", Input).value
        try:
            identity = await self.app.identity_session.login(email, password)
        except IdentityError as exc:
            self.app.notify(str(exc), title="Login failed", severity="error")
            return
        self.query_one("#input-password", Input).value = ""
        self.app.notify(f"Welcome back, {identity.username}!", title="Logged in")
        self.refresh_identity()

    def toggle_mode(self) -> None:
        """Switch the form between logging in and creating an account."""
        self.registering = not self.registering
        self.query_one("#input-username", Input).display = self.registering
        self.query_one("#btn-login", Button).label = "Register" if self.registering else "Log In"
        self.query_one("#btn-mode", Button).label = (
            "Have an account? Log in" if self.registering else "New here? Register"
        )

    async def _register(self) -> None:
        username = self.query_one("#input-username", Input).value
        email = self.query_one("#input-email", Input).value
        password = self.query_one("#input-password", Input).value
        try:
            identity = await self.app.identity_session.register(username, email, password)
        except IdentityError as exc:
            self.app.notify(str(exc), title="Registration failed", severity="error")
            return
        self.query_one("#input-password", Input).value = ""
        self.app.notify(f"Welcome, {identity.username}!", title="Account created")
        self.refresh_identity()

    async def _logout(self) -> None:
        await self.app.identity_session.logout()
        self.refresh_identity()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        button_id = event.button.id

        if button_id == "btn-login":
            submit = self._register() if self.registering else self._login()
            self.run_worker(submit, exclusive=True, group="identity")
        elif button_id == "btn-mode":
            self.toggle_mode()
        elif button_id == "btn-guest":
            self.action_guest()
        elif button_id == "btn-logout":
            self.run_worker(self._logout(), exclusive=True, group="identity")
        elif button_id == "btn-quests":
            self.app.switch_screen("quests")
