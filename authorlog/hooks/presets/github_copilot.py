"""GitHub Copilot (VS Code) preset.

Two payload generations are in the wild and both must keep working:

- legacy extension events `before_edit` / `after_edit`, carrying
  `will_edit_filepaths` / `edited_filepaths`, `dirtyFiles`,
  `workspaceFolder` and `chatSessionPath`;
- native agent hooks `PreToolUse` / `PostToolUse`, carrying `tool_input`
  and `transcript_path`.

Event names are validated against the union of both vocabularies.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from authorlog.core.models import CheckpointFields, CheckpointKind, HookPhase, ToolId
from authorlog.hooks.presets.base import (
    HOOK_EVENT_FIELD,
    FieldRule,
    PresetBase,
    RawPayload,
    parse_envelope,
    payload_cwd,
    transcript_stem,
)
from authorlog.hooks.presets.gemini import transcript_format_for
from authorlog.hooks.utils.parse_helpers import first_list, first_str, path_keys, tool_input_paths
from authorlog.utils.transcript import TranscriptFormat

LEGACY_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "before_edit": CheckpointKind.HUMAN,
        "after_edit": CheckpointKind.AI_AGENT,
    }
)
NATIVE_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "PreToolUse": CheckpointKind.HUMAN,
        "PostToolUse": CheckpointKind.AI_AGENT,
    }
)
COPILOT_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType({**LEGACY_EVENT_KINDS, **NATIVE_EVENT_KINDS})

_SESSION_KEYS = ("sessionId", "session_id", "chatSessionId")
_CWD_KEYS = ("workspaceFolder", "cwd")


class GithubCopilotPreset(PresetBase):
    tool_id = ToolId.GITHUB_COPILOT
    event_kinds = COPILOT_EVENT_KINDS
    event_name_keys = (HOOK_EVENT_FIELD, "hookEventName")
    # A legacy chat session file is named after the session
    required_fields = (FieldRule("session_id", _SESSION_KEYS + ("chatSessionPath",)),)

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        envelope = parse_envelope(raw)
        data = envelope.hook_input
        event_name = envelope.event_name(self.event_name_keys) or ""
        if event_name in LEGACY_EVENT_KINDS:
            return self._extract_legacy(data, cwd, self.phase(envelope))
        return self._extract_native(data, cwd)

    @staticmethod
    def _extract_legacy(data: Mapping[str, Any], cwd: str, phase: HookPhase) -> CheckpointFields:
        chat_session_path = first_str(data, ("chatSessionPath",))
        if phase is HookPhase.BEFORE:
            file_paths = first_list(data, ("will_edit_filepaths", "willEditFilepaths"))
        else:
            file_paths = first_list(data, ("edited_filepaths", "editedFilepaths"))
        return CheckpointFields(
            session_id=first_str(data, _SESSION_KEYS) or transcript_stem(chat_session_path) or "",
            cwd=payload_cwd(data, cwd, _CWD_KEYS),
            model=first_str(data, ("model", "modelId")),
            file_paths=file_paths,
            transcript_path=chat_session_path,
            transcript_format=transcript_format_for(chat_session_path, TranscriptFormat.COPILOT),
            dirty_files=path_keys(data.get("dirtyFiles", data.get("dirty_files"))),
        )

    @staticmethod
    def _extract_native(data: Mapping[str, Any], cwd: str) -> CheckpointFields:
        transcript_path = first_str(data, ("transcript_path", "transcriptPath", "chatSessionPath"))
        return CheckpointFields(
            session_id=first_str(data, _SESSION_KEYS) or transcript_stem(transcript_path) or "",
            cwd=payload_cwd(data, cwd, ("cwd", "workspaceFolder")),
            model=first_str(data, ("model", "modelId")),
            file_paths=tool_input_paths(data, ("filePath", "file_path", "path")),
            transcript_path=transcript_path,
            transcript_format=transcript_format_for(transcript_path, TranscriptFormat.COPILOT),
        )
