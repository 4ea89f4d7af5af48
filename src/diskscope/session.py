"""Scan lifecycle: one scan at a time, latest progress, stored result."""

import asyncio
from enum import Enum
from typing import Callable, Optional, Protocol

from loguru import logger

from diskscope.config import Settings
from diskscope.demo import demo_scan_result
from diskscope.models import ScanProgress, ScanResult
from diskscope.scanner import (
    DEFAULT_MAX_DEPTH,
    MAX_FILES,
    MAX_SCAN_SECONDS,
    default_scan_path,
    scan_directory,
)

ProgressSink = Callable[[ScanProgress], object]
Listener = Callable[["ScanSession"], None]


class ScanState(str, Enum):
    """Lifecycle state of a ScanSession."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    FAILED = "failed"


class ScanBackend(Protocol):
    async def scan(self, path: str, on_progress: ProgressSink) -> ScanResult:
        """Scan ``path``, reporting progress frames, and return the result."""
        ...


class ThreadedScanBackend:
    """Runs the directory walker in a worker thread."""

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_files: int = MAX_FILES,
        max_seconds: float = MAX_SCAN_SECONDS,
    ):
        self.max_depth = max_depth
        self.max_files = max_files
        self.max_seconds = max_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "ThreadedScanBackend":
        return cls(
            max_depth=settings.scan_max_depth,
            max_files=settings.scan_max_files,
            max_seconds=settings.scan_timeout,
        )

    async def scan(self, path: str, on_progress: ProgressSink) -> ScanResult:
        loop = asyncio.get_running_loop()

        def report(frame: ScanProgress) -> None:
            # Called from the worker thread
            loop.call_soon_threadsafe(on_progress, frame)

        return await asyncio.to_thread(
            scan_directory,
            path,
            report,
            max_depth=self.max_depth,
            max_files=self.max_files,
            max_seconds=self.max_seconds,
        )


class ScanSession:
    """
    Owns the scan lifecycle.

    States move IDLE -> SCANNING -> COMPLETED or FAILED, and any state but
    SCANNING accepts a new scan. A scan request while SCANNING is ignored.
    Scans cannot be cancelled.

    Must be driven from a running asyncio event loop.
    """

    def __init__(
        self,
        backend: Optional[ScanBackend] = None,
        demo_fallback: bool = False,
        default_path: Optional[str] = None,
    ):
        self.backend = backend or ThreadedScanBackend()
        self.demo_fallback = demo_fallback
        self.default_path = default_path
        self.state = ScanState.IDLE
        self.result: Optional[ScanResult] = None
        self.progress: Optional[ScanProgress] = None
        self.error: Optional[str] = None
        self.used_fallback = False
        self.last_path: Optional[str] = None
        self.requests = 0
        self._task: Optional[asyncio.Task] = None
        self._listeners: list[Listener] = []

    @classmethod
    def from_settings(cls, settings: Settings, backend: Optional[ScanBackend] = None) -> "ScanSession":
        return cls(
            backend=backend or ThreadedScanBackend.from_settings(settings),
            demo_fallback=settings.demo_fallback,
            default_path=settings.default_scan_path,
        )

    @property
    def is_scanning(self) -> bool:
        return self.state is ScanState.SCANNING

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(session)`` after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Scan session listener failed")

    def start_scan(self, path: Optional[str] = None) -> Optional[asyncio.Task]:
        """
        Start scanning ``path`` unless a scan is already running.

        Args:
            path: Directory to scan; falls back to the configured default,
                then the platform default

        Returns:
            The task running the scan, or None if the request was ignored
        """
        if self.state is ScanState.SCANNING:
            logger.debug(f"Scan of {self.last_path} still running, ignoring request")
            return None

        scan_path = path or self.default_path or default_scan_path()
        loop = asyncio.get_running_loop()

        self.state = ScanState.SCANNING
        self.progress = None
        self.error = None
        self.used_fallback = False
        self.last_path = scan_path
        self.requests += 1
        logger.info(f"Starting scan of {scan_path}")

        self._task = loop.create_task(self._run(scan_path))
        self._notify()
        return self._task

    def rescan(self) -> Optional[asyncio.Task]:
        """Scan the last used path again. None if nothing was scanned yet or a scan is running."""
        if self.last_path is None:
            return None
        return self.start_scan(self.last_path)

    def ingest_progress(self, frame: ScanProgress) -> bool:
        """Keep ``frame`` as the latest progress. Frames outside a scan are dropped."""
        if self.state is not ScanState.SCANNING:
            return False
        self.progress = frame
        self._notify()
        return True

    def clear(self) -> bool:
        """Forget the stored result. Not allowed while scanning."""
        if self.state is ScanState.SCANNING:
            return False
        self.result = None
        self.error = None
        self.used_fallback = False
        self.state = ScanState.IDLE
        self._notify()
        return True

    async def wait(self) -> None:
        """Wait for the running scan, if any, to resolve."""
        if self._task is not None:
            await self._task

    async def _run(self, path: str) -> None:
        try:
            result = await self.backend.scan(path, self.ingest_progress)
        except Exception as e:
            self._fail(path, e)
        else:
            self._complete(result)

    def _complete(self, result: ScanResult) -> None:
        self.result = result
        self.progress = None
        self.state = ScanState.COMPLETED
        logger.info(
            f"Scan of {self.last_path} finished: {result.file_count} files, "
            f"{result.error_count} errors"
        )
        self._notify()

    def _fail(self, path: str, error: Exception) -> None:
        self.progress = None
        self.error = str(error) or type(error).__name__
        if self.demo_fallback:
            logger.warning(f"Scan of {path} failed ({self.error}), showing demo data")
            self.result = demo_scan_result()
            self.used_fallback = True
            self.state = ScanState.COMPLETED
        else:
            logger.error(f"Scan of {path} failed: {self.error}")
            self.state = ScanState.FAILED
        self._notify()
