"""Main TUI application for diskscope."""

import asyncio
from typing import Optional

from rich.markup import escape
from textual.app import App
from textual.binding import Binding

from diskscope.config import Settings, load_settings
from diskscope.context_menu import ContextMenuController
from diskscope.mutations import MutationCoordinator
from diskscope.session import ScanBackend, ScanSession
from diskscope.tui.screens import ConfirmScreen, MainScreen
from diskscope.views import ViewSwitcher


class DiskscopeApp(App):
    """Interactive disk usage explorer."""

    TITLE = "diskscope"
    SUB_TITLE = "Disk usage explorer"

    CSS_PATH = "styles.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("?", "help", "Help"),
        Binding("d", "toggle_dark", "Toggle Dark"),
    ]

    SCREENS = {
        "main": MainScreen,
    }

    def __init__(
        self,
        path: Optional[str] = None,
        settings: Optional[Settings] = None,
        demo_fallback: bool = False,
        backend: Optional[ScanBackend] = None,
    ):
        super().__init__()
        settings = settings or load_settings()
        self.initial_path = path
        self.session = ScanSession.from_settings(settings, backend=backend)
        if demo_fallback:
            self.session.demo_fallback = True
        self.switcher = ViewSwitcher(delay=settings.switch_delay)
        self.coordinator = MutationCoordinator(
            self.session,
            confirm=self.confirm,
            notify_error=self.show_error,
        )
        self.menu = ContextMenuController(self.coordinator)

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self.push_screen("main")

    async def confirm(self, message: str) -> bool:
        """Ask the user through a modal dialog. Must be awaited from a worker."""
        answer: asyncio.Future = asyncio.get_running_loop().create_future()
        self.push_screen(ConfirmScreen(message), answer.set_result)
        return bool(await answer)

    def show_error(self, message: str) -> None:
        self.notify(escape(message), title="Operation failed", severity="error", timeout=8)

    def action_help(self) -> None:
        """Show help information."""
        self.notify(
            "1-4 switch views, Enter opens a folder, Backspace goes up, "
            "M opens the action menu, S scans, R rescans",
            title="Help",
            timeout=5,
        )


def run_tui(path: Optional[str] = None, demo_fallback: bool = False) -> None:
    """Run the interactive TUI.

    Args:
        path: Directory to scan on start (configured or platform default if None)
        demo_fallback: Show demo data instead of an error when the scan fails
    """
    app = DiskscopeApp(path=path, demo_fallback=demo_fallback)
    app.run()
