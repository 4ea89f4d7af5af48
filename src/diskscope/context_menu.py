"""Context menu over a snapshot of the clicked node."""

from dataclasses import dataclass
from typing import Optional, Union

from loguru import logger

from diskscope.formatting import format_bytes
from diskscope.models import ContextMenuState, DirectoryNode, FileNode, MutationResult, NodeSnapshot
from diskscope.mutations import MutationCoordinator

OPEN = "open"
COPY = "copy"
PROPERTIES = "properties"
DELETE = "delete"


@dataclass(frozen=True)
class MenuItem:
    action: str
    label: str
    dangerous: bool = False


class ContextMenuController:
    """
    Opens a menu on a node and fires file actions at it.

    The node is copied by value when the menu opens, so a rescan while the
    menu is visible cannot change what it shows or targets.
    """

    def __init__(self, coordinator: MutationCoordinator):
        self.coordinator = coordinator
        self.state = ContextMenuState()

    @property
    def visible(self) -> bool:
        return self.state.visible

    @property
    def target(self) -> Optional[NodeSnapshot]:
        return self.state.target

    def open(self, node: Union[DirectoryNode, FileNode, NodeSnapshot], x: int, y: int) -> None:
        snapshot = node if isinstance(node, NodeSnapshot) else NodeSnapshot.from_node(node)
        self.state = ContextMenuState(visible=True, x=x, y=y, target=snapshot)

    def close(self) -> None:
        self.state = ContextMenuState()

    def handle_key(self, key: str) -> bool:
        """Close on Escape. Returns whether the key was handled."""
        if self.visible and key == "escape":
            self.close()
            return True
        return False

    def click_outside(self) -> None:
        self.close()

    def items(self) -> list[MenuItem]:
        target = self.target
        if target is None:
            return []
        kind = "folder" if target.is_dir else "file"
        return [
            MenuItem(OPEN, f"Open {kind} in explorer"),
            MenuItem(COPY, "Copy path"),
            MenuItem(PROPERTIES, "Properties"),
            MenuItem(DELETE, f"Delete {kind}", dangerous=True),
        ]

    def properties(self) -> dict:
        target = self.target
        if target is None:
            return {}
        return {
            "name": target.name,
            "path": target.path,
            "type": "Folder" if target.is_dir else "File",
            "size": format_bytes(target.size),
            "items": target.child_count,
        }

    async def invoke(self, action: str) -> Optional[Union[MutationResult, dict]]:
        """
        Fire a menu action at the snapshot, then close the menu.

        Returns:
            MutationResult for file actions, a dict for properties, None if
            the menu is closed or the action is unknown
        """
        target = self.target
        if target is None:
            return None

        if action == PROPERTIES:
            info = self.properties()
            self.close()
            return info

        operations = {
            OPEN: self.coordinator.open_in_explorer,
            COPY: self.coordinator.copy_path,
            DELETE: self.coordinator.delete_file_or_folder,
        }
        operation = operations.get(action)
        if operation is None:
            logger.warning(f"Unknown context menu action: {action}")
            return None

        pending = operation(target.path)
        self.close()
        return await pending
