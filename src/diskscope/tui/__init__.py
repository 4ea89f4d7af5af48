"""Interactive terminal interface for diskscope."""

from diskscope.tui.app import DiskscopeApp, run_tui

__all__ = ["DiskscopeApp", "run_tui"]
