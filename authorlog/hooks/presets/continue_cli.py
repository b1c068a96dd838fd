"""Continue CLI preset.

Continue mirrors Claude Code's hook vocabulary (PreToolUse/PostToolUse) but
reports the model explicitly and stores sessions as JSON documents with a
`history` array.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from authorlog.core.models import CheckpointFields, CheckpointKind, ToolId
from authorlog.hooks.presets.base import FieldRule, PresetBase, RawPayload, parse_envelope, payload_cwd
from authorlog.hooks.presets.gemini import transcript_format_for
from authorlog.hooks.utils.parse_helpers import first_str, tool_input_paths
from authorlog.utils.transcript import TranscriptFormat

CONTINUE_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "PreToolUse": CheckpointKind.HUMAN,
        "PostToolUse": CheckpointKind.AI_AGENT,
    }
)


class ContinueCliPreset(PresetBase):
    tool_id = ToolId.CONTINUE_CLI
    event_kinds = CONTINUE_EVENT_KINDS
    required_fields = (
        FieldRule("session_id"),
        FieldRule("transcript_path"),
    )

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        data = parse_envelope(raw).hook_input
        transcript_path = first_str(data, ("transcript_path",))
        return CheckpointFields(
            session_id=first_str(data, ("session_id",)) or "",
            cwd=payload_cwd(data, cwd),
            model=first_str(data, ("model",)),
            file_paths=tool_input_paths(data, ("file_path", "filepath", "path")),
            transcript_path=transcript_path,
            transcript_format=transcript_format_for(transcript_path, TranscriptFormat.CONTINUE),
        )
