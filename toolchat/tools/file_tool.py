"""File tools: read, list, edit, create, delete and rename single files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterator, List

from toolchat.errors import NotFoundError, ToolError, ToolIOError, ValidationError
from toolchat.tools import ToolDescriptor, ToolSpec
from toolchat.tools._args import decode_arguments, object_schema, optional_str, require_str, string_property

logger = logging.getLogger(__name__)


def _ensure_parent(path: str) -> None:
    """Create the parent directories of ``path`` when it has any."""
    parent = os.path.dirname(path)
    if parent and parent != ".":
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as exc:
            raise ToolIOError(f"failed to create directory: {exc}") from exc


def _write(path: str, content: str) -> None:
    try:
        Path(path).write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ToolIOError(f"failed to create file: {exc}") from exc


def _create_new_file(path: str, content: str) -> str:
    _ensure_parent(path)
    _write(path, content)
    return f"Successfully created file {path}"


# ----------------------------------------------------------------- read_file
def read_file(raw_arguments: bytes) -> str:
    """Return the full text of a file."""
    args = decode_arguments(raw_arguments)
    path = require_str(args, "path")

    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as exc:
        raise NotFoundError(f"file does not exist: {path}") from exc
    except OSError as exc:
        raise ToolIOError(f"failed to read file {path}: {exc}") from exc


# ---------------------------------------------------------------- list_files
def _walk(root: str, relative: str = "") -> Iterator[str]:
    """Depth-first walk in lexical order; each directory is listed before its contents."""
    current = os.path.join(root, relative) if relative else root
    with os.scandir(current) as it:
        entries = sorted(it, key=lambda entry: entry.name)
    for entry in entries:
        rel = f"{relative}/{entry.name}" if relative else entry.name
        if entry.is_dir(follow_symlinks=False):
            yield rel + "/"
            yield from _walk(root, rel)
        else:
            yield rel


def list_files(raw_arguments: bytes) -> str:
    """
    List files and directories below a path, recursively.

    Returns
    -------
    str
        JSON array of paths relative to the listed directory, directories
        suffixed with ``/``.
    """
    args = decode_arguments(raw_arguments)
    directory = optional_str(args, "path", ".")

    if not os.path.exists(directory):
        raise NotFoundError(f"directory does not exist: {directory}")
    if not os.path.isdir(directory):
        raise ValidationError(f"not a directory: {directory}")
    try:
        files: List[str] = list(_walk(directory))
    except OSError as exc:
        raise ToolIOError(f"failed to list {directory}: {exc}") from exc
    return json.dumps(files)


# ----------------------------------------------------------------- edit_file
def edit_file(raw_arguments: bytes) -> str:
    """
    Replace every occurrence of ``old_str`` with ``new_str``.

    A missing file is created with ``new_str`` as content when ``old_str`` is
    empty.
    """
    args = decode_arguments(raw_arguments)
    path = require_str(args, "path")
    old_str = require_str(args, "old_str", allow_empty=True)
    new_str = require_str(args, "new_str", allow_empty=True)
    if old_str == new_str:
        raise ValidationError("old_str and new_str must be different")

    try:
        content = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        if old_str == "":
            return _create_new_file(path, new_str)
        raise NotFoundError(f"file does not exist: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ToolIOError(f"failed to read file {path}: {exc}") from exc

    if old_str == "":
        raise ValidationError("old_str cannot be empty when the file already exists")
    if old_str not in content:
        raise ToolError("old_str not found in file")

    _write(path, content.replace(old_str, new_str))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Edited %s: replaced %d occurrence(s)", path, content.count(old_str))
    return "OK"


# --------------------------------------------------------------- create_file
def create_file(raw_arguments: bytes) -> str:
    args = decode_arguments(raw_arguments)
    path = require_str(args, "path")
    content = require_str(args, "content", allow_empty=True)
    return _create_new_file(path, content)


# --------------------------------------------------------------- delete_file
def delete_file(raw_arguments: bytes) -> str:
    args = decode_arguments(raw_arguments)
    path = require_str(args, "path")

    if not os.path.lexists(path):
        raise NotFoundError(f"file does not exist: {path}")
    if os.path.isdir(path) and not os.path.islink(path):
        raise ValidationError(f"{path} is a directory, use delete_folder instead")
    try:
        os.remove(path)
    except OSError as exc:
        raise ToolIOError(f"failed to delete file: {exc}") from exc
    return f"Successfully deleted file {path}"


# --------------------------------------------------------------- rename_file
def rename_file(raw_arguments: bytes) -> str:
    args = decode_arguments(raw_arguments)
    if not args.get("old_path") or not args.get("new_path"):
        raise ValidationError("both old_path and new_path must be provided")
    old_path = require_str(args, "old_path")
    new_path = require_str(args, "new_path")

    if not os.path.lexists(old_path):
        raise NotFoundError(f"source file does not exist: {old_path}")
    _ensure_parent(new_path)
    try:
        os.replace(old_path, new_path)
    except OSError as exc:
        raise ToolIOError(f"failed to rename file: {exc}") from exc
    return f"Successfully renamed {old_path} to {new_path}"


# --------------------------------------------------------------------- specs
READ_FILE = ToolSpec(
    descriptor=ToolDescriptor(
        name="read_file",
        description=(
            "Read the contents of a given relative file path. Use this when you want to see what's inside a file. "
            "Do not use this with directory names."
        ),
        parameters=object_schema(
            {"path": string_property("The relative path of a file in the working directory.")},
            ["path"],
        ),
    ),
    fn=read_file,
)

LIST_FILES = ToolSpec(
    descriptor=ToolDescriptor(
        name="list_files",
        description=(
            "List files and directories at a given path. If no path is provided, lists files in the current directory."
        ),
        parameters=object_schema(
            {
                "path": string_property(
                    "Optional relative path to list files from. Defaults to current directory if not provided."
                )
            },
            [],
        ),
    ),
    fn=list_files,
)

EDIT_FILE = ToolSpec(
    descriptor=ToolDescriptor(
        name="edit_file",
        description=(
            "Make edits to a text file.\n\n"
            "Replaces 'old_str' with 'new_str' in the given file. 'old_str' and 'new_str' MUST be different "
            "from each other.\n\n"
            "If the file specified with path doesn't exist, it will be created when 'old_str' is empty.\n"
        ),
        parameters=object_schema(
            {
                "path": string_property("The path to the file"),
                "old_str": string_property(
                    "Text to search for - must match exactly. Every occurrence is replaced. "
                    "Use an empty string to create a new file."
                ),
                "new_str": string_property("Text to replace old_str with"),
            },
            ["path", "old_str", "new_str"],
        ),
    ),
    fn=edit_file,
)

CREATE_FILE = ToolSpec(
    descriptor=ToolDescriptor(
        name="create_file",
        description="Create a new file with specified content. If the file already exists, it will be overwritten.",
        parameters=object_schema(
            {
                "path": string_property("The path where the file should be created"),
                "content": string_property("The content to write to the file"),
            },
            ["path", "content"],
        ),
    ),
    fn=create_file,
)

DELETE_FILE = ToolSpec(
    descriptor=ToolDescriptor(
        name="delete_file",
        description="Delete an existing file. Use with caution as this action cannot be undone.",
        parameters=object_schema({"path": string_property("The path of the file to delete")}, ["path"]),
    ),
    fn=delete_file,
)

RENAME_FILE = ToolSpec(
    descriptor=ToolDescriptor(
        name="rename_file",
        description="Rename or move a file from one location to another.",
        parameters=object_schema(
            {
                "old_path": string_property("The current path of the file"),
                "new_path": string_property("The new path for the file"),
            },
            ["old_path", "new_path"],
        ),
    ),
    fn=rename_file,
)
