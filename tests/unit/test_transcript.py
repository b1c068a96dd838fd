"""Test transcript readers."""

import json
from pathlib import Path

import pytest

from authorlog.utils.transcript import TranscriptFormat, TranscriptReader


def _write_jsonl(path: Path, entries: list) -> str:
    lines = [entry if isinstance(entry, str) else json.dumps(entry) for entry in entries]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


def _write_json(path: Path, document: object) -> str:
    path.write_text(json.dumps(document), encoding="utf-8")
    return str(path)


@pytest.fixture
def reader() -> TranscriptReader:
    return TranscriptReader()


def test_claude_transcript_latest_model_and_prompts(reader, tmp_path):
    path = _write_jsonl(
        tmp_path / "session.jsonl",
        [
            {"type": "summary", "summary": "Refactor"},
            {"type": "user", "message": {"role": "user", "content": "fix the bug"}},
            {
                "type": "assistant",
                "message": {
                    "role": "assistant",
                    "model": "claude-sonnet-4",
                    "content": [
                        {"type": "text", "text": "On it"},
                        {"type": "tool_use", "id": "toolu_1", "name": "Edit", "input": {"file_path": "/a.py"}},
                    ],
                },
            },
            {
                "type": "user",
                "message": {"role": "user", "content": [{"type": "tool_result", "tool_use_id": "toolu_1"}]},
            },
            {"type": "assistant", "message": {"role": "assistant", "model": "claude-opus-4", "content": "Done"}},
        ],
    )

    summary = reader.read(path)

    assert summary.latest_model == "claude-opus-4"
    assert summary.user_messages == ("fix the bug",)
    assert [call.name for call in summary.tool_calls] == ["Edit"]
    assert summary.tool_calls[0].arguments == {"file_path": "/a.py"}
    assert summary.tool_calls[0].call_id == "toolu_1"


def test_synthetic_model_is_ignored(reader, tmp_path):
    path = _write_jsonl(
        tmp_path / "session.jsonl",
        [
            {"type": "assistant", "message": {"role": "assistant", "model": "claude-sonnet-4", "content": "a"}},
            {"type": "assistant", "message": {"role": "assistant", "model": "<synthetic>", "content": "b"}},
        ],
    )

    assert reader.read(path).latest_model == "claude-sonnet-4"


def test_malformed_lines_are_skipped(reader, tmp_path):
    path = _write_jsonl(
        tmp_path / "session.jsonl",
        [
            "{not json",
            {"role": "user", "content": "hello"},
            "[1, 2, 3]",
            {"role": "assistant", "model": "gpt-4.1", "content": "hi"},
        ],
    )

    summary = reader.read(path)

    assert summary.latest_model == "gpt-4.1"
    assert summary.user_messages == ("hello",)


def test_openai_tool_calls_with_string_arguments(reader, tmp_path):
    path = _write_jsonl(
        tmp_path / "chat.jsonl",
        [
            {
                "role": "assistant",
                "tool_calls": [
                    {"id": "call_1", "function": {"name": "write_file", "arguments": '{"path": "x.py"}'}},
                    {"id": "call_2", "function": {"name": "shell", "arguments": "ls -la"}},
                    {"id": "call_3", "function": {"name": "noop", "arguments": ""}},
                ],
            },
            {"role": "tool", "content": "ok"},
        ],
    )

    calls = reader.read(path).tool_calls

    assert [call.name for call in calls] == ["write_file", "shell", "noop"]
    assert calls[0].arguments == {"path": "x.py"}
    assert calls[1].arguments == {"raw_arguments": "ls -la"}
    assert calls[2].arguments == {}


def test_codex_rollout(reader, tmp_path):
    path = _write_jsonl(
        tmp_path / "rollout-2025-01-01T00-00-00-abc.jsonl",
        [
            {"type": "session_meta", "payload": {"id": "abc"}},
            {"type": "turn_context", "payload": {"model": "gpt-5-codex", "cwd": "/repo"}},
            {
                "type": "response_item",
                "payload": {"type": "message", "role": "user", "content": [{"type": "input_text", "text": "add tests"}]},
            },
            {
                "type": "response_item",
                "payload": {
                    "type": "function_call",
                    "name": "apply_patch",
                    "arguments": '{"input": "*** Begin Patch"}',
                    "call_id": "c1",
                },
            },
            {"type": "response_item", "payload": {"type": "function_call_output", "call_id": "c1"}},
        ],
    )

    summary = reader.read(path)

    assert summary.latest_model == "gpt-5-codex"
    assert summary.user_messages == ("add tests",)
    assert [call.name for call in summary.tool_calls] == ["apply_patch"]


def test_gemini_document(reader, tmp_path):
    path = _write_json(
        tmp_path / "session-1.json",
        {
            "sessionId": "s1",
            "messages": [
                {"type": "user", "content": "rename the module"},
                {
                    "type": "gemini",
                    "model": "gemini-2.5-pro",
                    "content": "renaming",
                    "toolCalls": [{"id": "t1", "name": "replace", "args": {"file_path": "/repo/a.py"}}],
                },
            ],
        },
    )

    summary = reader.read(path, TranscriptFormat.GEMINI)

    assert summary.latest_model == "gemini-2.5-pro"
    assert summary.user_messages == ("rename the module",)
    assert summary.tool_calls[0].name == "replace"
    assert summary.tool_calls[0].arguments == {"file_path": "/repo/a.py"}


def test_continue_document_falls_back_to_document_model(reader, tmp_path):
    path = _write_json(
        tmp_path / "session.json",
        {
            "model": "claude-3-5-sonnet",
            "history": [
                {"message": {"role": "user", "content": "hi"}},
                {"message": {"role": "assistant", "content": "hello"}},
            ],
        },
    )

    summary = reader.read(path, "continue")

    assert summary.latest_model == "claude-3-5-sonnet"
    assert summary.user_messages == ("hi",)


def test_copilot_document(reader, tmp_path):
    path = _write_json(
        tmp_path / "chat.json",
        {
            "requests": [
                {
                    "message": {"text": "explain this"},
                    "modelId": "copilot/gpt-4o",
                    "response": [
                        {"value": "Sure"},
                        {"kind": "toolInvocationSerialized", "toolId": "copilot_editFile", "toolCallId": "e1"},
                    ],
                }
            ]
        },
    )

    summary = reader.read(path, TranscriptFormat.COPILOT)

    assert summary.latest_model == "copilot/gpt-4o"
    assert summary.user_messages == ("explain this",)
    assert [call.name for call in summary.tool_calls] == ["copilot_editFile"]


def test_missing_file_yields_empty_summary(reader, tmp_path):
    assert reader.read(str(tmp_path / "nope.jsonl")).is_empty


def test_empty_path_yields_empty_summary(reader):
    assert reader.read("").is_empty


def test_directory_yields_empty_summary(reader, tmp_path):
    assert reader.read(str(tmp_path)).is_empty


def test_malformed_document_yields_empty_summary(reader, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{ nope", encoding="utf-8")

    assert reader.read(str(path), TranscriptFormat.GEMINI).is_empty


def test_oversize_document_is_not_read(tmp_path):
    path = _write_json(tmp_path / "big.json", {"messages": [{"type": "gemini", "model": "m", "content": "x" * 200}]})

    assert TranscriptReader(max_document_bytes=64).read(path, TranscriptFormat.GEMINI).is_empty


def test_unknown_format_reads_as_jsonl(reader, tmp_path):
    path = _write_jsonl(tmp_path / "t.jsonl", [{"role": "assistant", "model": "m1", "content": "x"}])

    assert reader.read(path, "mystery").latest_model == "m1"


def test_iter_tool_calls_is_lazy_and_restartable(reader, tmp_path):
    path = _write_jsonl(
        tmp_path / "t.jsonl",
        [
            {"role": "assistant", "tool_calls": [{"id": "1", "function": {"name": "a", "arguments": "{}"}}]},
            {"role": "assistant", "tool_calls": [{"id": "2", "function": {"name": "b", "arguments": "{}"}}]},
        ],
    )

    calls = reader.iter_tool_calls(path)
    assert next(calls).name == "a"
    assert [call.name for call in reader.iter_tool_calls(path)] == ["a", "b"]


def test_iter_tool_calls_missing_file_is_empty(reader, tmp_path):
    assert list(reader.iter_tool_calls(str(tmp_path / "missing.jsonl"))) == []


def test_oversized_integer_line_is_skipped(reader, tmp_path):
    path = _write_jsonl(
        tmp_path / "t.jsonl",
        [
            {"role": "assistant", "model": "claude-sonnet-4", "content": "x"},
            '{"n": ' + "1" * 5000 + "}",
        ],
    )

    assert reader.read(path).latest_model == "claude-sonnet-4"


def test_deeply_nested_line_is_skipped(reader, tmp_path):
    path = _write_jsonl(
        tmp_path / "t.jsonl",
        [
            {"role": "assistant", "model": "claude-sonnet-4", "content": "x"},
            "[" * 200000,
        ],
    )

    assert reader.read(path).latest_model == "claude-sonnet-4"


def test_oversized_integer_arguments_stay_raw(reader, tmp_path):
    arguments = '{"n": ' + "9" * 5000 + "}"
    path = _write_jsonl(
        tmp_path / "t.jsonl",
        [{"role": "assistant", "tool_calls": [{"id": "1", "function": {"name": "calc", "arguments": arguments}}]}],
    )

    assert reader.read(path).tool_calls[0].arguments == {"raw_arguments": arguments}


def test_unparseable_document_yields_empty_summary(reader, tmp_path):
    path = tmp_path / "deep.json"
    path.write_text("[" * 200000, encoding="utf-8")

    assert reader.read(str(path), TranscriptFormat.GEMINI).is_empty
