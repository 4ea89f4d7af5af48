"""Rich terminal display for diskscope."""

from typing import Optional, Union

from rich.console import Console, ConsoleOptions, RenderResult
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from diskscope.formatting import fit_label, format_bytes, truncate
from diskscope.layout import squarify
from diskscope.models import DirectoryNode, FileNode, MutationResult, ScanProgress, ScanResult
from diskscope.projector import (
    BarEntry,
    ListProjection,
    ListRow,
    SunburstEntry,
    SunburstProjection,
    TreemapEntry,
    project_barchart,
    project_sunburst,
    project_treemap,
)
from diskscope.views import ViewMode

console = Console()

# Terminal cells measured in the pixel units the label-fit thresholds use
CELL_WIDTH_PX = 8
CELL_HEIGHT_PX = 16
BOLD_FONT_SIZE = 12
RING_ROWS = 3
BAR_WIDTH = 30
USAGE_WIDTH = 10


class TreemapGrid:
    """Treemap drawn as coloured character blocks."""

    def __init__(self, entries: list[TreemapEntry], height: int = 20):
        self.entries = entries
        self.height = height

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        height = self.height
        chars = [[" "] * width for _ in range(height)]
        styles = [[""] * width for _ in range(height)]

        for rect, entry in squarify(self.entries, width, height):
            x0, x1 = round(rect.x), min(width, round(rect.x + rect.w))
            y0, y1 = round(rect.y), min(height, round(rect.y + rect.h))
            if x1 <= x0 or y1 <= y0:
                continue
            style = f"white on {entry.color}"
            for y in range(y0, y1):
                for x in range(x0, x1):
                    styles[y][x] = style

            label = fit_label(entry.name, entry.size, (x1 - x0) * CELL_WIDTH_PX, (y1 - y0) * CELL_HEIGHT_PX)
            if label is None:
                continue
            if label.font_size >= BOLD_FONT_SIZE:
                style = f"bold {style}"
            lines = [label.name] if label.size_text is None else [label.name, label.size_text]
            for offset, line in enumerate(lines):
                y = y0 + offset
                if y >= y1:
                    break
                for i, ch in enumerate(line[: max(0, x1 - x0 - 1)]):
                    chars[y][x0 + 1 + i] = ch
                    styles[y][x0 + 1 + i] = style

        for y in range(height):
            line = Text()
            for x in range(width):
                line.append(chars[y][x], styles[y][x] or None)
            yield line


class SunburstRings:
    """Sunburst rings unrolled into two horizontal bands, inner ring on top."""

    def __init__(self, projection: SunburstProjection):
        self.projection = projection

    def _band(self, entries: list[SunburstEntry], total: int, width: int) -> list[Text]:
        rows = [Text() for _ in range(RING_ROWS)]
        used = 0
        for i, entry in enumerate(entries):
            if i == len(entries) - 1:
                cells = width - used
            else:
                cells = round(entry.value / total * width) if total else 0
            cells = max(0, min(cells, width - used))
            if cells == 0:
                continue
            used += cells
            style = f"white on {entry.color}"
            label = fit_label(entry.name, entry.value, cells * CELL_WIDTH_PX, RING_ROWS * CELL_HEIGHT_PX)
            for row_index, row in enumerate(rows):
                text = ""
                if label is not None and row_index == RING_ROWS // 2:
                    text = label.name[: cells - 1]
                row.append(f" {text}".ljust(cells)[:cells], style)
        return rows

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        inner, outer = self.projection.inner, self.projection.outer
        if not inner:
            yield Text("No data to display", style="dim")
            return
        yield Text("Level 1", style="bold")
        yield from self._band(inner, self.projection.inner_total, width)
        if outer:
            yield Text("Level 2", style="bold")
            yield from self._band(outer, self.projection.outer_total, width)

        legend = Table(show_header=True, header_style="bold", box=None)
        legend.add_column("")
        legend.add_column("Name")
        legend.add_column("Size", justify="right")
        legend.add_column("Path", style="dim")
        for entry in inner + outer:
            indent = "  " * entry.level
            legend.add_row(
                Text("■", style=entry.color),
                Text(f"{indent}{entry.name}"),
                entry.formatted_size,
                Text(entry.path),
            )
        yield legend


def barchart_table(entries: list[BarEntry]) -> Table:
    """Ranked bar chart as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("")

    largest = max((e.size for e in entries), default=0)
    for rank, entry in enumerate(entries, 1):
        filled = round(BAR_WIDTH * entry.size / largest) if largest else 0
        table.add_row(
            str(rank),
            Text(entry.name),
            entry.formatted_size,
            Text("█" * filled, style=entry.color),
        )
    return table


def _usage_bar(share: float) -> Text:
    filled = round(USAGE_WIDTH * share)
    bar = Text("█" * filled, style="blue")
    bar.append("░" * (USAGE_WIDTH - filled), style="dim")
    return bar


def list_row_name(row: ListRow) -> Text:
    """Indented name with expand marker and file/folder icon."""
    if row.expandable:
        marker = "▾ " if row.expanded else "▸ "
    else:
        marker = "  "
    icon = "📁 " if row.is_dir else "📄 "
    return Text("  " * row.depth + marker + icon + row.name)


def list_table(rows: list[ListRow]) -> Table:
    """Expandable list view as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Usage")
    table.add_column("Size", justify="right")
    for row in rows:
        table.add_row(list_row_name(row), _usage_bar(row.share), row.formatted_size)
    return table


def render_projection(
    mode: ViewMode,
    node: Union[DirectoryNode, FileNode, None],
    list_projection: Optional[ListProjection] = None,
    height: int = 20,
):
    """
    Renderable for one view mode of a node.

    Args:
        mode: View to render
        node: Node to project (None renders a placeholder)
        list_projection: Existing list state to keep expansion across renders
        height: Treemap height in rows
    """
    if node is None:
        return Text("No data to display", style="dim")

    mode = ViewMode(mode)
    if mode is ViewMode.TREEMAP:
        return TreemapGrid(project_treemap(node), height=height)
    if mode is ViewMode.SUNBURST:
        return SunburstRings(project_sunburst(node))
    if mode is ViewMode.BARCHART:
        entries = project_barchart(node)
        if not entries:
            return Text("No data to display", style="dim")
        return barchart_table(entries)
    projection = list_projection if list_projection is not None else ListProjection(node)
    return list_table(projection.rows())


def scan_summary(result: ScanResult, demo: bool = False) -> Text:
    """One-line summary of a scan result."""
    text = Text()
    text.append(f"Files scanned: {result.file_count}  ")
    text.append(f"Total size: {format_bytes(result.total_size)}  ")
    errors_style = "yellow" if result.error_count else None
    text.append(f"Errors: {result.error_count}", style=errors_style)
    if demo:
        text.append("  (demo data)", style="bold yellow")
    return text


def progress_text(progress: Optional[ScanProgress]) -> Text:
    """Latest scan progress, or a waiting message before the first frame."""
    if progress is None:
        return Text("Scanning directories...", style="dim")
    return Text.assemble(
        ("Scanning ", "bold blue"),
        f"{progress.files_processed} files, {format_bytes(progress.total_size_so_far)}  ",
        (truncate(progress.current_path, 60), "dim"),
    )


def show_projection(
    mode: ViewMode,
    node: Union[DirectoryNode, FileNode, None],
    title: Optional[str] = None,
) -> None:
    """Print a projection of a node."""
    if title:
        console.print(f"[bold]{escape(title)}[/bold]")
    console.print(render_projection(mode, node))


def show_scan_summary(result: ScanResult, demo: bool = False) -> None:
    console.print(scan_summary(result, demo=demo))
    console.print()


def show_mutation_result(result: MutationResult) -> None:
    """Display result of a file operation."""
    if result.cancelled:
        console.print("[yellow]Cancelled[/yellow]")
    elif result.success:
        console.print(f"[green]✓[/green] {result.action}: {escape(result.path)}")
    else:
        console.print(f"[red]✗[/red] {result.action}: {escape(result.path)}")
        if result.error:
            console.print(f"  [red]Error: {escape(result.error)}[/red]")


def show_scanning_progress() -> Progress:
    """Create progress display for a running scan."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
