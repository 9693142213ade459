import pytest
from groq import GroqError

from toolchat.completion import GroqCompletionClient, descriptor_to_tool, turn_to_message
from toolchat.conversation import Role, Turn
from toolchat.errors import ProtocolError
from toolchat.tools.registry import build_tool_registry
from tests.conftest import DummyCompletion, DummyGroq, DummyToolCall, tool_call


def test_turn_to_message_for_each_role():
    assistant = Turn.assistant("", (tool_call("c1", "read_file", path="a.txt"),))

    assert turn_to_message(Turn.user("hi")) == {"role": "user", "content": "hi"}
    assert turn_to_message(Turn.assistant("plain")) == {"role": "assistant", "content": "plain"}
    assert turn_to_message(assistant) == {
        "role": "assistant",
        "content": None,
        "tool_calls": [
            {"id": "c1", "type": "function", "function": {"name": "read_file", "arguments": '{"path": "a.txt"}'}}
        ],
    }
    assert turn_to_message(Turn.tool_result("c1", "body")) == {"role": "tool", "content": "body", "tool_call_id": "c1"}


def test_descriptor_to_tool_uses_function_shape():
    registry = build_tool_registry()
    tool = descriptor_to_tool(registry.lookup("read_file").descriptor)

    assert tool["type"] == "function"
    assert tool["function"]["name"] == "read_file"
    assert tool["function"]["parameters"]["required"] == ["path"]


def test_complete_sends_transcript_and_tools():
    groq = DummyGroq("Hello! I'm just a mock.")
    client = GroqCompletionClient(client=groq, model="dummy", max_tokens=123)
    registry = build_tool_registry()

    turn = client.complete([Turn.user("hi")], registry.descriptors())

    assert turn.role is Role.ASSISTANT
    assert turn.content == "Hello! I'm just a mock."
    assert turn.tool_calls == ()
    request = groq.requests[0]
    assert request["model"] == "dummy"
    assert request["max_tokens"] == 123
    assert request["messages"] == [{"role": "user", "content": "hi"}]
    assert request["tool_choice"] == "auto"
    assert [t["function"]["name"] for t in request["tools"]] == registry.names()


def test_complete_without_tools_omits_tool_choice():
    groq = DummyGroq("ok")
    GroqCompletionClient(client=groq, model="dummy").complete([Turn.user("hi")], [])
    assert "tools" not in groq.requests[0]
    assert "tool_choice" not in groq.requests[0]


def test_complete_parses_tool_calls_as_bytes():
    reply = DummyCompletion(
        None,
        [
            DummyToolCall("call_1", "list_files", "{}"),
            DummyToolCall("call_2", "read_file", '{"path": "main.go"}'),
        ],
    )
    client = GroqCompletionClient(client=DummyGroq(reply), model="dummy")

    turn = client.complete([Turn.user("look around")], [])

    assert turn.content == ""
    assert [(c.id, c.name, c.raw_arguments) for c in turn.tool_calls] == [
        ("call_1", "list_files", b"{}"),
        ("call_2", "read_file", b'{"path": "main.go"}'),
    ]


def test_complete_uses_model_from_environment():
    client = GroqCompletionClient(client=DummyGroq("x"))
    assert client.model == "dummy-model"


def test_api_error_becomes_protocol_error():
    client = GroqCompletionClient(client=DummyGroq(GroqError("rate limited")), model="dummy")
    with pytest.raises(ProtocolError, match="rate limited"):
        client.complete([Turn.user("hi")], [])


def test_empty_choices_is_protocol_error():
    empty = DummyCompletion("unused")
    empty.choices = []
    client = GroqCompletionClient(client=DummyGroq(empty), model="dummy")
    with pytest.raises(ProtocolError, match="no choices"):
        client.complete([Turn.user("hi")], [])


def test_tool_call_without_id_is_protocol_error():
    reply = DummyCompletion(None, [DummyToolCall(None, "list_files", "{}")])
    client = GroqCompletionClient(client=DummyGroq(reply), model="dummy")
    with pytest.raises(ProtocolError, match="has no id"):
        client.complete([Turn.user("look")], [])
