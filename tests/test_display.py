"""Tests for display module."""

from io import StringIO
from unittest.mock import patch

from rich.console import Console

from diskscope.display import (
    SunburstRings,
    TreemapGrid,
    confirm_action,
    list_row_name,
    progress_text,
    render_projection,
    scan_summary,
    show_mutation_result,
    show_projection,
)
from diskscope.models import MutationResult, ScanProgress, find_node, parse_tree
from diskscope.projector import ListProjection, SunburstProjection, project_treemap
from diskscope.views import ViewMode


def _render(renderable, width=100):
    console = Console(file=StringIO(), width=width, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestRenderProjection:
    def test_none_node(self):
        assert "No data to display" in _render(render_projection(ViewMode.TREEMAP, None))

    def test_treemap_labels(self, demo_result):
        output = _render(render_projection(ViewMode.TREEMAP, demo_result.root, height=20))
        assert "Documents" in output
        assert len(output.splitlines()) == 20

    def test_treemap_grid_height(self, demo_result):
        output = _render(TreemapGrid(project_treemap(demo_result.root), height=8))
        assert len(output.splitlines()) == 8

    def test_sunburst_legend(self, demo_result):
        output = _render(render_projection(ViewMode.SUNBURST, demo_result.root))
        assert "Level 1" in output
        assert "Level 2" in output
        assert "large_file.pdf" in output
        assert "512.0 MB" in output

    def test_sunburst_empty(self):
        assert "No data to display" in _render(SunburstRings(SunburstProjection()))

    def test_barchart(self, demo_result):
        output = _render(render_projection(ViewMode.BARCHART, demo_result.root))
        assert output.index("Documents") < output.index("Applications") < output.index("System")
        assert "256.0 MB" in output

    def test_barchart_leaf(self, demo_result):
        leaf = find_node(demo_result.root, "/demo/Documents/large_file.pdf")
        assert "No data to display" in _render(render_projection(ViewMode.BARCHART, leaf))

    def test_list_uses_given_projection(self, demo_result):
        projection = ListProjection(demo_result.root)
        projection.toggle("/demo/Documents")
        output = _render(render_projection(ViewMode.LIST, demo_result.root, list_projection=projection))
        assert "Documents" in output
        assert "large_file.pdf" not in output
        assert "Chrome.app" in output


class TestListRowName:
    def test_markers(self, demo_result):
        projection = ListProjection(demo_result.root)
        rows = {row.path: row for row in projection.rows()}
        assert "▾" in list_row_name(rows["/demo/Documents"]).plain
        assert list_row_name(rows["/demo/Documents/large_file.pdf"]).plain.startswith("    ")

        projection.toggle("/demo/Documents")
        rows = {row.path: row for row in projection.rows()}
        assert "▸" in list_row_name(rows["/demo/Documents"]).plain


class TestSummaries:
    def test_scan_summary(self, demo_result):
        text = scan_summary(demo_result).plain
        assert "Files scanned: 150" in text
        assert "Total size: 1.0 GB" in text
        assert "Errors: 0" in text
        assert "demo" not in text

    def test_scan_summary_demo(self, demo_result):
        assert "(demo data)" in scan_summary(demo_result, demo=True).plain

    def test_progress_text_waiting(self):
        assert progress_text(None).plain == "Scanning directories..."

    def test_progress_text(self):
        text = progress_text(ScanProgress(current_path="/home/a", files_processed=12, total_size_so_far=2048)).plain
        assert "12 files" in text
        assert "2.0 KB" in text
        assert "/home/a" in text


class TestShowMutationResult:
    def test_cancelled(self):
        with patch("diskscope.display.console") as mock_console:
            show_mutation_result(MutationResult(action="delete", path="/x", success=False, cancelled=True))
            assert "Cancelled" in mock_console.print.call_args[0][0]

    def test_failure_shows_error(self):
        with patch("diskscope.display.console") as mock_console:
            show_mutation_result(MutationResult(action="delete", path="/x", success=False, error="denied"))
            printed = " ".join(call[0][0] for call in mock_console.print.call_args_list)
            assert "denied" in printed


class TestConfirmAction:
    def test_confirm(self):
        with patch("rich.prompt.Confirm.ask", return_value=True):
            assert confirm_action("Delete?") is True


class TestMarkupInPaths:
    def _capture(self):
        return Console(file=StringIO(), width=200, color_system=None)

    def test_mutation_result_with_brackets(self):
        console = self._capture()
        with patch("diskscope.display.console", console):
            show_mutation_result(MutationResult(action="delete", path="/tmp/a[/b]"))
            show_mutation_result(
                MutationResult(action="delete", path="/tmp/a[/b]", success=False, error="bad [/red] name")
            )
        output = console.file.getvalue()
        assert "/tmp/a[/b]" in output
        assert "bad [/red] name" in output

    def test_projection_title_with_brackets(self, demo_result):
        console = self._capture()
        with patch("diskscope.display.console", console):
            show_projection(ViewMode.BARCHART, demo_result.root, title="/tmp/a[/b]")
        assert "/tmp/a[/b]" in console.file.getvalue()

    def test_names_with_markup_rendered_literally(self):
        root = parse_tree(
            {
                "name": "r",
                "path": "/r",
                "size": 20,
                "is_dir": True,
                "children": [
                    {"name": "x[/b]", "path": "/r/x[/b]", "size": 10, "is_dir": True, "children": [
                        {"name": "[red]y", "path": "/r/x[/b]/[red]y", "size": 10},
                    ]},
                ],
            }
        )
        assert "x[/b]" in _render(render_projection(ViewMode.BARCHART, root), width=200)
        assert "[red]y" in _render(render_projection(ViewMode.SUNBURST, root), width=200)
