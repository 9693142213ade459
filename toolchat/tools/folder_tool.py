"""Directory tools: create, delete and rename folder trees."""

from __future__ import annotations

import os
import shutil

from toolchat.errors import NotFoundError, ToolIOError, ValidationError
from toolchat.tools import ToolDescriptor, ToolSpec
from toolchat.tools._args import decode_arguments, object_schema, require_str, string_property


def create_folder(raw_arguments: bytes) -> str:
    """Create a directory and any missing parents; an existing directory is fine."""
    args = decode_arguments(raw_arguments)
    path = require_str(args, "path")

    try:
        os.makedirs(path, exist_ok=True)
    except OSError as exc:
        raise ToolIOError(f"failed to create directory: {exc}") from exc
    return f"Successfully created directory {path}"


def delete_folder(raw_arguments: bytes) -> str:
    """Recursively remove a directory tree."""
    args = decode_arguments(raw_arguments)
    path = require_str(args, "path")

    if not os.path.lexists(path):
        raise NotFoundError(f"directory does not exist: {path}")
    if not os.path.isdir(path) or os.path.islink(path):
        raise ValidationError(f"{path} is not a directory, use delete_file instead")
    try:
        shutil.rmtree(path)
    except OSError as exc:
        raise ToolIOError(f"failed to delete directory: {exc}") from exc
    return f"Successfully deleted directory {path}"


def rename_folder(raw_arguments: bytes) -> str:
    """Move a directory tree, creating the destination's parent directories."""
    args = decode_arguments(raw_arguments)
    if not args.get("old_path") or not args.get("new_path"):
        raise ValidationError("both old_path and new_path must be provided")
    old_path = require_str(args, "old_path")
    new_path = require_str(args, "new_path")

    if not os.path.lexists(old_path):
        raise NotFoundError(f"source directory does not exist: {old_path}")

    parent = os.path.dirname(new_path)
    if parent and parent != ".":
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as exc:
            raise ToolIOError(f"failed to create parent directory: {exc}") from exc
    try:
        os.rename(old_path, new_path)
    except OSError as exc:
        raise ToolIOError(f"failed to rename directory: {exc}") from exc
    return f"Successfully renamed directory {old_path} to {new_path}"


CREATE_FOLDER = ToolSpec(
    descriptor=ToolDescriptor(
        name="create_folder",
        description="Create a new directory/folder. Creates parent directories if they don't exist.",
        parameters=object_schema({"path": string_property("The path of the directory to create")}, ["path"]),
    ),
    fn=create_folder,
)

DELETE_FOLDER = ToolSpec(
    descriptor=ToolDescriptor(
        name="delete_folder",
        description=(
            "Delete a directory/folder and all its contents. Use with extreme caution as this action cannot be undone."
        ),
        parameters=object_schema({"path": string_property("The path of the directory to delete")}, ["path"]),
    ),
    fn=delete_folder,
)

RENAME_FOLDER = ToolSpec(
    descriptor=ToolDescriptor(
        name="rename_folder",
        description="Rename or move a directory from one location to another.",
        parameters=object_schema(
            {
                "old_path": string_property("The current path of the directory"),
                "new_path": string_property("The new path for the directory"),
            },
            ["old_path", "new_path"],
        ),
    ),
    fn=rename_folder,
)
