import pytest

from toolchat.errors import UnknownToolError
from toolchat.tools import ToolDescriptor, ToolRegistry, ToolSpec
from toolchat.tools.registry import build_tool_registry


def test_default_registry_order():
    assert build_tool_registry().names() == [
        "read_file",
        "list_files",
        "edit_file",
        "create_file",
        "delete_file",
        "rename_file",
        "create_folder",
        "delete_folder",
        "rename_folder",
        "terminal_run",
    ]


def test_every_descriptor_declares_an_object_schema():
    for descriptor in build_tool_registry().descriptors():
        assert descriptor.description
        assert descriptor.parameters["type"] == "object"
        assert isinstance(descriptor.parameters["required"], list)
        assert set(descriptor.parameters["required"]) <= set(descriptor.parameters["properties"])


def test_lookup_and_require():
    registry = build_tool_registry()

    assert registry.lookup("read_file").name == "read_file"
    assert registry.lookup("create_website") is None
    assert "terminal_run" in registry
    with pytest.raises(UnknownToolError, match="^tool not found$"):
        registry.require("create_website")


def test_duplicate_names_rejected():
    spec = ToolSpec(descriptor=ToolDescriptor("dup", "d", {"type": "object"}), fn=lambda raw: "")
    with pytest.raises(ValueError, match="dup"):
        ToolRegistry([spec, spec])
