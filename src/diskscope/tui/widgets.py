"""Custom widgets for the diskscope TUI."""

from rich.text import Text
from textual.widgets import Static

from diskscope.display import progress_text, render_projection, scan_summary
from diskscope.projector import ListProjection
from diskscope.session import ScanSession, ScanState
from diskscope.views import ViewMode, ViewSwitcher


class ScanStatus(Static):
    """Scan state line: latest progress while scanning, summary afterwards."""

    def show_session(self, session: ScanSession) -> None:
        if session.state is ScanState.SCANNING:
            self.update(progress_text(session.progress))
        elif session.state is ScanState.FAILED:
            self.update(Text(f"Scan failed: {session.error}", style="bold red"))
        elif session.result is not None:
            self.update(scan_summary(session.result, demo=session.used_fallback))
        else:
            self.update(Text('Press "s" to start a scan', style="dim"))


class ProjectionPanel(Static):
    """Renders the active projection; blank while the view is switching."""

    def show_projection(self, switcher: ViewSwitcher, node, list_projection: ListProjection) -> None:
        height = max(5, self.size.height or 20)
        rendered = switcher.render(
            {
                ViewMode.TREEMAP: lambda: render_projection(ViewMode.TREEMAP, node, height=height),
                ViewMode.SUNBURST: lambda: render_projection(ViewMode.SUNBURST, node),
                ViewMode.BARCHART: lambda: render_projection(ViewMode.BARCHART, node),
                ViewMode.LIST: lambda: render_projection(ViewMode.LIST, node, list_projection=list_projection),
            }
        )
        if rendered is None:
            self.update(Text("Switching view...", style="dim"))
        else:
            self.update(rendered)
