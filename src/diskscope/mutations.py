"""Delete, open and copy operations against scanned paths."""

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

from loguru import logger

from diskscope import fileops
from diskscope.errors import MutationError
from diskscope.models import MutationResult
from diskscope.session import ScanSession

ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]
ErrorCallback = Callable[[str], None]


class FileOperations:
    """The platform side effects the coordinator calls, one method per action."""

    def delete(self, path: str) -> None:
        fileops.delete_path(path)

    def reveal(self, path: str) -> None:
        fileops.reveal_in_file_manager(path)

    def copy(self, path: str) -> None:
        fileops.copy_to_clipboard(path)


def _decline(message: str) -> bool:
    return False


def _ignore(message: str) -> None:
    pass


class MutationCoordinator:
    """
    Runs file operations and keeps the scan in step with them.

    Failures are reported once through ``notify_error`` and never retried.
    A successful delete starts a rescan of the last scanned path; the cached
    result is left untouched until that rescan resolves.
    """

    def __init__(
        self,
        session: ScanSession,
        confirm: Optional[ConfirmCallback] = None,
        notify_error: Optional[ErrorCallback] = None,
        operations: Optional[FileOperations] = None,
    ):
        self.session = session
        self.confirm = confirm or _decline
        self.notify_error = notify_error or _ignore
        self.operations = operations or FileOperations()

    async def _run(self, action: str, path: str, operation: Callable[[str], None]) -> MutationResult:
        try:
            await asyncio.to_thread(operation, path)
        except (MutationError, OSError) as e:
            message = str(e)
            logger.error(f"{action} failed for {path}: {message}")
            self.notify_error(message)
            return MutationResult(action=action, path=path, success=False, error=message)
        return MutationResult(action=action, path=path)

    async def open_in_explorer(self, path: str) -> MutationResult:
        return await self._run("open", path, self.operations.reveal)

    async def copy_path(self, path: str) -> MutationResult:
        return await self._run("copy", path, self.operations.copy)

    async def delete_file_or_folder(self, path: str) -> MutationResult:
        """
        Delete ``path`` after the user confirms, then rescan.

        Args:
            path: File or folder to delete

        Returns:
            MutationResult; ``cancelled`` is set when confirmation was declined
        """
        answer = self.confirm(f"Delete {path}? This cannot be undone.")
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            logger.debug(f"Delete of {path} cancelled")
            return MutationResult(action="delete", path=path, success=False, cancelled=True)

        result = await self._run("delete", path, self.operations.delete)
        if result.success:
            if self.session.rescan() is None:
                logger.warning(f"Rescan after deleting {path} was not started")
        return result
