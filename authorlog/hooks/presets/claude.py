"""Claude Code preset.

Native payload (Claude Code hooks):
{
    "session_id": "8f7c...",
    "transcript_path": "~/.claude/projects/-repo/8f7c....jsonl",
    "cwd": "/repo",
    "hook_event_name": "PostToolUse",
    "tool_name": "Edit",
    "tool_input": {"file_path": "/repo/app.py", ...}
}

The VS Code integration relays Claude hooks with camelCase keys
(`hookEventName`, `sessionId`, `transcriptPath`, `tool_input.filePath`).
That shape is detected first; everything else is parsed as native.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from authorlog.core.models import CheckpointFields, CheckpointKind, ToolId
from authorlog.hooks.presets.base import (
    HOOK_EVENT_FIELD,
    FieldRule,
    HookEnvelope,
    PresetBase,
    RawPayload,
    parse_envelope,
    payload_cwd,
    transcript_stem,
)
from authorlog.hooks.utils.parse_helpers import first_str, tool_input_paths

CLAUDE_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "PreToolUse": CheckpointKind.HUMAN,
        "PostToolUse": CheckpointKind.AI_AGENT,
    }
)

_NATIVE_SESSION_KEYS = ("session_id",)
_NATIVE_PATH_KEYS = ("file_path", "notebook_path")

_VSCODE_MARKERS = ("hookEventName", "sessionId", "transcriptPath")
_VSCODE_EVENT_KEYS = ("hookEventName", HOOK_EVENT_FIELD)
_VSCODE_SESSION_KEYS = ("sessionId", "session_id")
_VSCODE_TRANSCRIPT_KEYS = ("transcriptPath", "transcript_path")
_VSCODE_PATH_KEYS = ("filePath", "file_path", "path")


def is_vscode_payload(data: Mapping[str, Any]) -> bool:
    """True for Claude hooks relayed by the VS Code integration."""
    return any(marker in data for marker in _VSCODE_MARKERS)


class ClaudePreset(PresetBase):
    """Claude Code hooks: PreToolUse is the human baseline, PostToolUse the AI edit."""

    tool_id = ToolId.CLAUDE
    event_kinds = CLAUDE_EVENT_KINDS

    def field_rules(self, envelope: HookEnvelope) -> tuple[FieldRule, ...]:
        if is_vscode_payload(envelope.hook_input):
            return (FieldRule("session_id", _VSCODE_SESSION_KEYS),)
        # The transcript filename doubles as the session id
        return (FieldRule("session_id", _NATIVE_SESSION_KEYS + ("transcript_path",)),)

    def event_keys(self, envelope: HookEnvelope) -> tuple[str, ...]:
        if is_vscode_payload(envelope.hook_input):
            return _VSCODE_EVENT_KEYS
        return self.event_name_keys

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        envelope = parse_envelope(raw)
        data = envelope.hook_input
        if is_vscode_payload(data):
            return self._extract_vscode(data, cwd)
        return self._extract_native(data, cwd)

    @staticmethod
    def _extract_vscode(data: Mapping[str, Any], cwd: str) -> CheckpointFields:
        return CheckpointFields(
            session_id=first_str(data, _VSCODE_SESSION_KEYS) or "",
            cwd=payload_cwd(data, cwd, ("cwd", "workspaceFolder")),
            model=first_str(data, ("model",)),
            file_paths=tool_input_paths(data, _VSCODE_PATH_KEYS),
            transcript_path=first_str(data, _VSCODE_TRANSCRIPT_KEYS),
        )

    @staticmethod
    def _extract_native(data: Mapping[str, Any], cwd: str) -> CheckpointFields:
        transcript_path = first_str(data, ("transcript_path",))
        session_id = first_str(data, _NATIVE_SESSION_KEYS) or transcript_stem(transcript_path) or ""
        return CheckpointFields(
            session_id=session_id,
            cwd=payload_cwd(data, cwd),
            model=first_str(data, ("model",)),
            file_paths=tool_input_paths(data, _NATIVE_PATH_KEYS),
            transcript_path=transcript_path,
        )
