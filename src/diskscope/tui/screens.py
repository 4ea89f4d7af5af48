"""TUI screens for diskscope."""

from typing import Optional

from rich.markup import escape
from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Label, OptionList, Static
from textual.widgets.option_list import Option

from diskscope.context_menu import ContextMenuController
from diskscope.display import list_row_name
from diskscope.formatting import format_bytes
from diskscope.models import MutationResult, find_node
from diskscope.projector import BARCHART_LIMIT, ListProjection, rank_children
from diskscope.session import ScanSession
from diskscope.tui.widgets import ProjectionPanel, ScanStatus
from diskscope.views import ViewMode

DONE_MESSAGES = {
    "open": "Opened in file manager",
    "copy": "Path copied",
    "delete": "Deleted, rescanning...",
}


class MainScreen(Screen):
    """Scan status, active projection and the entries of the current node."""

    BINDINGS = [
        Binding("s", "scan", "Scan"),
        Binding("r", "rescan", "Rescan"),
        Binding("1", "view('treemap')", "Treemap"),
        Binding("2", "view('sunburst')", "Sunburst"),
        Binding("3", "view('barchart')", "Bars"),
        Binding("4", "view('list')", "List"),
        Binding("backspace", "go_up", "Up"),
        Binding("m", "menu", "Menu"),
        Binding("space", "toggle_node", "Expand", show=False),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.current_path: Optional[str] = None
        self.list_projection = ListProjection(None)
        self._row_paths: list[str] = []
        self._result = None
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="main-container"):
            yield ScanStatus(id="scan-status")

            with Horizontal(id="content"):
                with Vertical(id="left-panel"):
                    yield Static("[bold]Entries[/bold]", id="entries-header")
                    yield DataTable(id="entries-table")

                with VerticalScroll(id="right-panel"):
                    yield ProjectionPanel(id="projection")

        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#entries-table", DataTable)
        table.cursor_type = "row"
        table.add_columns("Name", "Size")

        app = self.app
        app.switcher.on_commit = lambda mode: self._refresh_view()
        self._unsubscribe = app.session.subscribe(self._on_session_change)
        self._on_session_change(app.session)
        if app.session.result is None and not app.session.is_scanning:
            app.session.start_scan(app.initial_path)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()

    @property
    def current_node(self):
        result = self.app.session.result
        if result is None:
            return None
        if self.current_path is not None:
            node = find_node(result.root, self.current_path)
            if node is not None:
                return node
        return result.root

    def _on_session_change(self, session: ScanSession) -> None:
        self.query_one("#scan-status", ScanStatus).show_session(session)
        if session.result is not self._result:
            self._result = session.result
            if session.result is not None and self.current_path is not None:
                if find_node(session.result.root, self.current_path) is None:
                    self.current_path = None
            self.list_projection = ListProjection(self.current_node)
            self._refresh_view()

    def _refresh_view(self) -> None:
        node = self.current_node
        if self.list_projection.root is not node:
            self.list_projection = ListProjection(node)
        self.query_one("#projection", ProjectionPanel).show_projection(
            self.app.switcher, node, self.list_projection
        )
        self._update_table(node)

    def _update_table(self, node) -> None:
        table = self.query_one("#entries-table", DataTable)
        previous = table.cursor_row or 0
        table.clear()
        self._row_paths = []
        if node is None:
            return

        if self.app.switcher.mode is ViewMode.LIST:
            for row in self.list_projection.rows():
                table.add_row(list_row_name(row), row.formatted_size)
                self._row_paths.append(row.path)
        else:
            for child in rank_children(node, BARCHART_LIMIT):
                icon = "📁 " if child.is_dir else "📄 "
                table.add_row(Text(icon + child.name), format_bytes(child.size))
                self._row_paths.append(child.path)

        if self._row_paths:
            table.move_cursor(row=min(previous, len(self._row_paths) - 1))

    def _highlighted_path(self) -> Optional[str]:
        table = self.query_one("#entries-table", DataTable)
        row = table.cursor_row
        if row is None or not 0 <= row < len(self._row_paths):
            return None
        return self._row_paths[row]

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter drills into a directory."""
        if not 0 <= event.cursor_row < len(self._row_paths):
            return
        result = self.app.session.result
        node = find_node(result.root, self._row_paths[event.cursor_row]) if result else None
        if node is None or not node.is_dir or node is self.current_node:
            return
        self.current_path = node.path
        self._refresh_view()

    def action_go_up(self) -> None:
        node = self.current_node
        result = self.app.session.result
        if node is None or result is None or node is result.root:
            return
        parent = self._parent_of(result.root, node.path)
        self.current_path = parent.path if parent is not None else None
        self._refresh_view()

    @staticmethod
    def _parent_of(root, path: str):
        stack = [root]
        while stack:
            node = stack.pop()
            for child in node.children:
                if child.path == path:
                    return node
                stack.append(child)
        return None

    def action_scan(self) -> None:
        if self.app.session.start_scan(self.app.initial_path) is None:
            self.notify("A scan is already running", severity="warning")

    def action_rescan(self) -> None:
        if self.app.session.rescan() is None:
            self.notify("Nothing to rescan yet", severity="warning")

    def action_view(self, mode: str) -> None:
        self.app.switcher.set_view_mode(ViewMode(mode))
        self._refresh_view()

    def action_toggle_node(self) -> None:
        if self.app.switcher.mode is not ViewMode.LIST:
            return
        path = self._highlighted_path()
        if path is None:
            return
        self.list_projection.toggle(path)
        self._refresh_view()

    def action_menu(self) -> None:
        path = self._highlighted_path()
        result = self.app.session.result
        node = find_node(result.root, path) if result and path is not None else None
        if node is None:
            self.notify("Select an entry first", severity="warning")
            return

        menu = self.app.menu
        table = self.query_one("#entries-table", DataTable)
        menu.open(node, x=0, y=table.cursor_row)

        def chosen(action: Optional[str]) -> None:
            if action is None:
                menu.close()
            else:
                self.run_worker(self._invoke(menu, action))

        self.app.push_screen(ContextMenuScreen(menu), chosen)

    async def _invoke(self, menu: ContextMenuController, action: str) -> None:
        outcome = await menu.invoke(action)
        if isinstance(outcome, dict):
            self.notify(
                "\n".join(f"{key.title()}: {escape(str(value))}" for key, value in outcome.items()),
                title="Properties",
                timeout=8,
            )
        elif isinstance(outcome, MutationResult) and outcome.success:
            self.notify(DONE_MESSAGES.get(outcome.action, "Done"), timeout=3)


class ContextMenuScreen(ModalScreen[Optional[str]]):
    """Actions for the node the menu was opened on."""

    BINDINGS = [Binding("escape", "close_menu", "Close")]

    def __init__(self, menu: ContextMenuController):
        super().__init__()
        self.menu = menu

    def compose(self) -> ComposeResult:
        target = self.menu.target
        with Vertical(id="menu-container"):
            if target is not None:
                yield Label(Text(target.name, style="bold"), id="menu-title")
                yield Label("Folder" if target.is_dir else "File", id="menu-kind")
            yield OptionList(
                *[
                    Option(Text(item.label, style="red" if item.dangerous else ""), id=item.action)
                    for item in self.menu.items()
                ],
                id="menu-options",
            )

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id)

    def on_click(self, event: events.Click) -> None:
        # A click on the dimmed backdrop lands on the screen itself
        if event.widget is self:
            self.menu.click_outside()
            self.dismiss(None)

    def action_close_menu(self) -> None:
        self.menu.handle_key("escape")
        self.dismiss(None)


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no confirmation for destructive actions."""

    BINDINGS = [
        Binding("y", "answer(True)", "Yes"),
        Binding("n", "answer(False)", "No"),
        Binding("escape", "answer(False)", "Cancel"),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-container"):
            yield Static(Text(self.message), id="confirm-message")
            with Horizontal(id="confirm-buttons"):
                yield Button("Delete", variant="error", id="btn-yes")
                yield Button("Cancel", variant="default", id="btn-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-yes")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)
