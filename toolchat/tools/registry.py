"""Default tool registry assembly."""

from __future__ import annotations

from toolchat.tools import ToolRegistry
from toolchat.tools.file_tool import CREATE_FILE, DELETE_FILE, EDIT_FILE, LIST_FILES, READ_FILE, RENAME_FILE
from toolchat.tools.folder_tool import CREATE_FOLDER, DELETE_FOLDER, RENAME_FOLDER
from toolchat.tools.terminal_tool import TERMINAL_RUN


def build_tool_registry() -> ToolRegistry:
    return ToolRegistry(
        [
            READ_FILE,
            LIST_FILES,
            EDIT_FILE,
            CREATE_FILE,
            DELETE_FILE,
            RENAME_FILE,
            CREATE_FOLDER,
            DELETE_FOLDER,
            RENAME_FOLDER,
            TERMINAL_RUN,
        ]
    )
