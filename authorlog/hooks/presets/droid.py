"""Factory Droid preset.

Droid follows Claude Code's hook vocabulary. Some Droid builds omit the
session id entirely; each such invocation gets a freshly generated id.
"""

from __future__ import annotations

import uuid
from types import MappingProxyType
from typing import Mapping

from authorlog.core.models import CheckpointFields, CheckpointKind, ToolId
from authorlog.hooks.presets.base import PresetBase, RawPayload, parse_envelope, payload_cwd
from authorlog.hooks.utils.parse_helpers import first_str, tool_input_paths

DROID_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "PreToolUse": CheckpointKind.HUMAN,
        "PostToolUse": CheckpointKind.AI_AGENT,
    }
)

SESSION_ID_KEYS = ("session_id", "sessionId")


class DroidPreset(PresetBase):
    tool_id = ToolId.DROID
    event_kinds = DROID_EVENT_KINDS

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        data = parse_envelope(raw).hook_input
        return CheckpointFields(
            session_id=first_str(data, SESSION_ID_KEYS) or str(uuid.uuid4()),
            cwd=payload_cwd(data, cwd),
            model=first_str(data, ("model",)),
            file_paths=tool_input_paths(data, ("file_path", "path")),
            transcript_path=first_str(data, ("transcript_path",)),
        )
