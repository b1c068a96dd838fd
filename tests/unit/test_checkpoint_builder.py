"""Tests for CheckpointBuilder."""

import json

import pytest

from authorlog.core.errors import BuildError, InvalidHookEvent, InvalidPath, MissingRequiredField, UnknownTool
from authorlog.core.models import CheckpointKind, ToolId
from authorlog.hooks.checkpoint import CheckpointBuilder, build_checkpoint, classify_event
from authorlog.utils.transcript import TranscriptReader


def _payload(hook_input: dict) -> dict:
    return {"hook_input": json.dumps(hook_input)}


def _claude(event: str, **extra) -> dict:
    hook_input = {"session_id": "sess-1", "hook_event_name": event, "tool_input": {"file_path": "/a/b.py"}}
    hook_input.update(extra)
    return _payload(hook_input)


class RecordingReader(TranscriptReader):
    def __init__(self):
        super().__init__()
        self.calls = []

    def read(self, path, transcript_format="jsonl"):
        self.calls.append((path, transcript_format))
        return super().read(path, transcript_format)


def test_claude_pre_tool_use_is_human():
    checkpoint = build_checkpoint("claude", _claude("PreToolUse"), "/a")

    assert checkpoint.kind is CheckpointKind.HUMAN
    assert checkpoint.file_path == ["/a/b.py"]
    assert checkpoint.source_tool is ToolId.CLAUDE
    assert checkpoint.session_id == "sess-1"


def test_claude_post_tool_use_is_ai_agent():
    assert build_checkpoint(ToolId.CLAUDE, _claude("PostToolUse"), "/a").kind is CheckpointKind.AI_AGENT


def test_gemini_without_session_id():
    payload = _payload({"hook_event_name": "AfterTool", "transcript_path": "/t/s.json"})

    with pytest.raises(MissingRequiredField) as exc_info:
        build_checkpoint("gemini", payload, "/repo")

    assert exc_info.value.field_name == "session_id"
    assert exc_info.value.tool_id == "gemini"
    assert str(exc_info.value) == "[gemini] session_id not found in hook_input"


def test_cursor_with_empty_workspace_roots():
    payload = _payload({"conversation_id": "c", "hook_event_name": "afterFileEdit", "workspace_roots": []})

    with pytest.raises(MissingRequiredField) as exc_info:
        build_checkpoint("cursor", payload, "/repo")

    assert exc_info.value.field_name == "workspace_roots"


def test_ai_tab_blank_model_and_tool():
    payload = _payload(
        {"hook_event_name": "after_edit", "model": "", "tool": "", "edited_filepaths": ["a.py"], "cwd": "/repo"}
    )

    checkpoint = build_checkpoint("ai_tab", payload, "/repo")

    assert checkpoint.model == "unknown"
    assert "tool" not in checkpoint.metadata
    assert "metadata" not in checkpoint.to_dict()
    assert checkpoint.file_path == ["/repo/a.py"]


def test_octal_escaped_filename_matches_typed_name():
    escaped = '"\\346\\227\\245\\346\\234\\254\\350\\252\\236.txt"'
    typed = "日本語.txt"

    from_escaped = build_checkpoint("claude", _claude("PostToolUse", tool_input={"file_path": escaped}), "/repo")
    from_typed = build_checkpoint("claude", _claude("PostToolUse", tool_input={"file_path": typed}), "/repo")

    assert from_escaped.file_path == from_typed.file_path == ["/repo/日本語.txt"]


@pytest.mark.parametrize("model", [None, "", "   ", "\t\n"])
def test_blank_model_becomes_unknown(model):
    extra = {} if model is None else {"model": model}
    assert build_checkpoint("claude", _claude("PreToolUse", **extra), "/a").model == "unknown"


@pytest.mark.parametrize("model", ["claude-opus-4", "gpt-4o", "my model v2"])
def test_model_preserved_verbatim(model):
    assert build_checkpoint("claude", _claude("PreToolUse", model=model), "/a").model == model


def test_blank_file_paths_are_dropped():
    payload = _payload(
        {"hook_event_name": "after_edit", "sessionId": "s", "edited_filepaths": ["", "  ", "a.py"]}
    )

    checkpoint = build_checkpoint("github-copilot", payload, "/ws")

    assert checkpoint.file_path == ["/ws/a.py"]


def test_no_file_paths_leaves_file_path_unset():
    checkpoint = build_checkpoint("claude", _payload({"session_id": "s", "hook_event_name": "PreToolUse"}), "/a")
    assert checkpoint.file_path is None
    assert "file_path" not in checkpoint.to_dict()


def test_unknown_tool():
    with pytest.raises(UnknownTool) as exc_info:
        build_checkpoint("windsurf", _claude("PreToolUse"), "/a")
    assert str(exc_info.value).startswith("[windsurf]")


def test_invalid_event():
    with pytest.raises(InvalidHookEvent):
        build_checkpoint("claude", _claude("Stop"), "/a")


def test_relative_path_without_cwd_fails():
    with pytest.raises(MissingRequiredField) as exc_info:
        build_checkpoint("claude", _claude("PreToolUse", tool_input={"file_path": "b.py"}), "")
    assert exc_info.value.field_name == "cwd"


def test_cursor_path_outside_roots():
    payload = _payload(
        {
            "conversation_id": "c",
            "hook_event_name": "afterFileEdit",
            "workspace_roots": ["/ws/api"],
            "file_path": "/etc/passwd",
        }
    )

    with pytest.raises(InvalidPath) as exc_info:
        build_checkpoint("cursor", payload, "/ws/api")

    assert exc_info.value.tool_id == "cursor"


def test_cursor_relative_file_and_dirty_files():
    payload = _payload(
        {
            "conversation_id": "c",
            "hook_event_name": "afterFileEdit",
            "workspace_roots": ["/ws/api"],
            "file_path": "src/x.py",
            "dirty_files": {"src/y.py": "buffer"},
        }
    )

    checkpoint = build_checkpoint("cursor", payload, "/nowhere")

    assert checkpoint.cwd == "/ws/api"
    assert checkpoint.file_path == ["/ws/api/src/x.py"]
    assert checkpoint.dirty_files == ["/ws/api/src/y.py"]


def test_model_from_transcript_when_payload_has_none(tmp_path):
    transcript = tmp_path / "sess-1.jsonl"
    transcript.write_text(
        json.dumps({"type": "assistant", "message": {"role": "assistant", "model": "claude-opus-4", "content": "x"}})
        + "\n",
        encoding="utf-8",
    )
    builder = CheckpointBuilder(read_transcripts=True)

    checkpoint = builder.build("claude", _claude("PostToolUse", transcript_path=str(transcript)), "/a")

    assert checkpoint.model == "claude-opus-4"
    assert checkpoint.transcript_path == str(transcript)


def test_payload_model_wins_over_transcript(tmp_path):
    reader = RecordingReader()
    builder = CheckpointBuilder(transcript_reader=reader, read_transcripts=True)

    payload = _claude("PostToolUse", model="gpt-4o", transcript_path=str(tmp_path / "t.jsonl"))
    checkpoint = builder.build("claude", payload, "/a")

    assert checkpoint.model == "gpt-4o"
    assert reader.calls == []


def test_missing_transcript_does_not_fail(tmp_path):
    payload = _claude("PostToolUse", transcript_path=str(tmp_path / "gone.jsonl"))
    checkpoint = CheckpointBuilder(read_transcripts=True).build("claude", payload, "/a")
    assert checkpoint.model == "unknown"


def test_empty_transcript_does_not_fail(tmp_path):
    transcript = tmp_path / "empty.jsonl"
    transcript.write_text("\n\n   \n", encoding="utf-8")

    checkpoint = CheckpointBuilder(read_transcripts=True).build(
        "claude", _claude("PostToolUse", transcript_path=str(transcript)), "/a"
    )

    assert checkpoint.model == "unknown"


def test_transcripts_can_be_disabled(tmp_path):
    reader = RecordingReader()
    builder = CheckpointBuilder(transcript_reader=reader, read_transcripts=False)

    builder.build("claude", _claude("PostToolUse", transcript_path=str(tmp_path / "t.jsonl")), "/a")

    assert reader.calls == []


def test_transcript_format_is_passed_through(tmp_path):
    reader = RecordingReader()
    builder = CheckpointBuilder(transcript_reader=reader, read_transcripts=True)
    path = str(tmp_path / "session-1.json")

    builder.build("gemini", _payload({"session_id": "g", "transcript_path": path, "hook_event_name": "AfterTool"}), "/r")

    assert reader.calls == [(path, "gemini")]


def test_errors_carry_tool_id_for_every_preset():
    for tool in ToolId:
        with pytest.raises(BuildError) as exc_info:
            build_checkpoint(tool, {}, "/repo")
        assert exc_info.value.tool_id == tool.value


def test_classify_event():
    assert classify_event("codex", "agent-turn-complete") is CheckpointKind.AI_AGENT
    with pytest.raises(InvalidHookEvent) as exc_info:
        classify_event("cursor", "PreToolUse")
    assert exc_info.value.tool_id == "cursor"


def test_to_dict_is_json_ready():
    data = build_checkpoint("claude", _claude("PostToolUse", model="m"), "/a").to_dict()

    assert data == {
        "kind": "ai_agent",
        "session_id": "sess-1",
        "model": "m",
        "cwd": "/a",
        "source_tool": "claude",
        "file_path": ["/a/b.py"],
    }
    assert json.loads(json.dumps(data)) == data
