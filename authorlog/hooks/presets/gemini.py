"""Gemini CLI preset.

Gemini CLI hooks use BeforeTool/AfterTool and always report session_id and
transcript_path. Session transcripts are JSON documents
(~/.gemini/tmp/<hash>/chats/session-*.json); newer builds may write JSONL.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from authorlog.core.models import CheckpointFields, CheckpointKind, ToolId
from authorlog.hooks.presets.base import FieldRule, PresetBase, RawPayload, parse_envelope, payload_cwd
from authorlog.hooks.utils.parse_helpers import first_str, tool_input_paths
from authorlog.utils.transcript import TranscriptFormat

GEMINI_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "BeforeTool": CheckpointKind.HUMAN,
        "AfterTool": CheckpointKind.AI_AGENT,
    }
)


def transcript_format_for(path: str | None, document_format: TranscriptFormat) -> str:
    """JSON documents end in .json; anything else is read as JSONL."""
    if path and path.lower().endswith(".json"):
        return document_format.value
    return TranscriptFormat.JSONL.value


class GeminiPreset(PresetBase):
    tool_id = ToolId.GEMINI
    event_kinds = GEMINI_EVENT_KINDS
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
            file_paths=tool_input_paths(data, ("file_path", "absolute_path", "path")),
            transcript_path=transcript_path,
            transcript_format=transcript_format_for(transcript_path, TranscriptFormat.GEMINI),
        )
