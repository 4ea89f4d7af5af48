"""Active view selection with a debounced, cancellable switch."""

import asyncio
from enum import Enum
from typing import Callable, Mapping, Optional, Protocol, TypeVar

from loguru import logger

DEFAULT_SWITCH_DELAY = 0.15

T = TypeVar("T")


class ViewMode(str, Enum):
    """The four projections of a size tree."""

    TREEMAP = "treemap"
    SUNBURST = "sunburst"
    BARCHART = "barchart"
    LIST = "list"


class Cancellable(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Cancellable]


def loop_scheduler(delay: float, callback: Callable[[], None]) -> Cancellable:
    """Schedule on the running asyncio loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


class ViewSwitcher:
    """
    Holds the active view mode.

    A switch first enters a ``switching`` phase in which nothing renders,
    then commits after ``delay`` seconds. A new request during that phase
    replaces the pending one, so at most one commit is ever scheduled.
    """

    def __init__(
        self,
        mode: ViewMode = ViewMode.TREEMAP,
        delay: float = DEFAULT_SWITCH_DELAY,
        scheduler: Optional[Scheduler] = None,
        on_commit: Optional[Callable[[ViewMode], None]] = None,
    ):
        self.mode = mode
        self.delay = delay
        self.scheduler = scheduler or loop_scheduler
        self.on_commit = on_commit
        self.switching = False
        self.pending_mode: Optional[ViewMode] = None
        self._handle: Optional[Cancellable] = None

    def set_view_mode(self, mode: ViewMode) -> None:
        mode = ViewMode(mode)
        if not self.switching and mode is self.mode:
            return

        if self._handle is not None:
            self._handle.cancel()
        self.switching = True
        self.pending_mode = mode
        self._handle = self.scheduler(self.delay, self._commit)
        logger.debug(f"Switching view to {mode.value}")

    def _commit(self) -> None:
        if self.pending_mode is None:
            return
        self.mode = self.pending_mode
        self.pending_mode = None
        self.switching = False
        self._handle = None
        if self.on_commit:
            self.on_commit(self.mode)

    def render(self, projectors: Mapping[ViewMode, Callable[[], T]]) -> Optional[T]:
        """Run the active mode's projector, or nothing while a switch is pending."""
        if self.switching:
            return None
        return projectors[self.mode]()
