"""Main Textual application."""

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..errors import PersistenceError
from ..identity.models import Identity
from ..identity.session import IdentitySession
from ..quests.catalog import QuestCatalog
from ..settings import Settings, get_settings
from ..storage.database import Database
from ..storage.progress import ProgressTracker
from .screens.home import HomeScreen
from .screens.play import PlayScreen
from .screens.quests import QuestsScreen

logger = logging.getLogger(__name__)


class PacketJourneyApp(App):
    """Quests that follow a web request through the stack."""

    TITLE = "packetjourney"
    SUB_TITLE = "Follow a request from browser to database"

    CSS = """
    Screen {
        background: $surface;
    }

    #main-content {
        width: 100%;
        height: 100%;
        padding: 1 2;
    }

    .title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    .subtitle {
        color: $text-muted;
        margin-bottom: 2;
    }

    .section-header {
        text-style: bold;
        margin: 1 0;
    }

    .hint {
        color: $text-muted;
        text-style: italic;
    }

    /* Vim-style focus indicators */
    *:focus {
        border: solid $success;
    }

    Button:focus {
        background: $primary-darken-1;
    }
    """

    BINDINGS = [
        # Screen navigation (number keys)
        Binding("1", "go_home", "1:Home", show=True),
        Binding("2", "browse_quests", "2:Quests", show=True),
        # Vim navigation
        Binding("j", "focus_next", "j:Down", show=True),
        Binding("k", "focus_previous", "k:Up", show=True),
        # Top/bottom
        Binding("g", "go_top", "g:Top", show=False),
        Binding("G", "go_bottom", "G:Bottom", show=False),
        # Quit/help
        Binding("q", "quit", "q:Quit", show=True),
        Binding("?", "help", "?:Help", show=True),
        # Escape to go back
        Binding("escape", "go_back", "Esc:Back", show=False),
    ]

    SCREENS = {
        "home": HomeScreen,
        "quests": QuestsScreen,
    }

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[QuestCatalog] = None,
        tracker: Optional[ProgressTracker] = None,
        identity_session: Optional[IdentitySession] = None,
        db: Optional[Database] = None,
    ):
        """Initialize the app.

        Args:
            settings: Runtime settings; read from the environment by default
            catalog: Quest catalog; built-in quests by default
            tracker: Progress tracker; in-memory only by default
            identity_session: Who is playing; no backend by default
            db: Progress database, connected on mount when given
        """
        super().__init__()
        self.settings = settings or get_settings()
        self.db = db
        self.catalog = catalog or QuestCatalog(quests_dir=self.settings.quests_dir)
        self.tracker = tracker or ProgressTracker(db)
        self.identity_session = identity_session or IdentitySession()
        self.identity_session.on_change = self._identity_changed

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen("home")
        self.run_worker(self._startup(), exclusive=True, name="startup")

    async def _startup(self) -> None:
        """Open storage and find out who is playing."""
        if self.db is not None:
            try:
                await self.db.connect()
            except PersistenceError as exc:
                logger.warning("Progress database unavailable, progress will not be saved: %s", exc)
                self.db = None
                self.tracker.db = None
        await self.identity_session.resolve()

    def _identity_changed(self, identity: Optional[Identity]) -> None:
        # May fire before the home screen has composed.
        self.call_after_refresh(self._refresh_home)

    def _refresh_home(self) -> None:
        screen = self.screen
        if isinstance(screen, HomeScreen) and screen.is_mounted:
            screen.refresh_identity()

    def start_quest(self, quest_id: str) -> None:
        """Open a quest for the current identity."""
        identity = self.identity_session.identity
        if identity is None:
            self.notify("Log in or continue as a guest first", title="Who is playing?")
            return
        quest = self.catalog.get_quest_with_layers(quest_id)
        if quest is None:
            self.notify(f"Quest {quest_id!r} not found", title="Error", severity="error")
            return
        self.push_screen(PlayScreen(quest, identity))

    async def action_quit(self) -> None:
        """Quit the application, flushing saved progress first."""
        await self.tracker.flush()
        if self.db is not None:
            await self.db.close()
        await self.identity_session.close()
        self.exit()

    def action_go_home(self) -> None:
        """Navigate to home screen."""
        self.switch_screen("home")

    def action_browse_quests(self) -> None:
        """Navigate to the quest list."""
        if self.identity_session.identity is None:
            self.notify("Log in or continue as a guest first", title="Who is playing?")
            return
        self.switch_screen("quests")

    def action_go_back(self) -> None:
        """Go back to previous screen or home."""
        if len(self.screen_stack) > 2:
            self.pop_screen()
        else:
            self.switch_screen("home")

    def action_focus_next(self) -> None:
        """Move focus to next focusable widget (vim j)."""
        self.screen.focus_next()

    def action_focus_previous(self) -> None:
        """Move focus to previous focusable widget (vim k)."""
        self.screen.focus_previous()

    def action_go_top(self) -> None:
        """Go to first focusable widget (vim g/gg)."""
        focusables = list(self.screen.query("*:focusable"))
        if focusables:
            focusables[0].focus()

    def action_go_bottom(self) -> None:
        """Go to last focusable widget (vim G)."""
        focusables = list(self.screen.query("*:focusable"))
        if focusables:
            focusables[-1].focus()

    def action_help(self) -> None:
        """Show help."""
        self.notify(
            "Navigation: j/k=Down/Up, g/G=Top/Bottom, Esc=Back\n"
            "Screens: 1=Home, 2=Quests\n"
            "Quests: d=Difficulty, n/b=Next/Prev page, p=Play\n"
            "Playing: s=Submit, r=Retry, n=Next layer\n"
            "Other: q=Quit",
            title="Keyboard Shortcuts",
            timeout=10,
        )
