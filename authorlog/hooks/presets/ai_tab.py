"""Inline-completion ("tab") preset.

Editor extensions report tab completions around the edit they apply:
{
    "hook_event_name": "after_edit",
    "tool": "copilot-tab",
    "model": "gpt-4o-copilot",
    "repo_working_dir": "/repo",
    "edited_filepaths": ["src/app.py"],
    "dirty_files": {"src/app.py": "<buffer contents>"},
    "completion_id": "cmpl-42"
}
Blank `tool` and `model` values count as absent.
"""

from __future__ import annotations

import uuid
from types import MappingProxyType
from typing import Mapping

from authorlog.core.models import CheckpointFields, CheckpointKind, HookPhase, ToolId
from authorlog.hooks.presets.base import PresetBase, RawPayload, parse_envelope, payload_cwd
from authorlog.hooks.utils.parse_helpers import first_list, first_str, optional_metadata, path_keys

AI_TAB_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "before_edit": CheckpointKind.HUMAN,
        "after_edit": CheckpointKind.AI_AGENT,
    }
)

SESSION_ID_KEYS = ("session_id", "completion_id")
_CWD_KEYS = ("repo_working_dir", "cwd")


class AiTabPreset(PresetBase):
    """Tab completions around an edit.

    after_edit is recorded as an ai_agent checkpoint, matching the other
    presets' after-edit events. CheckpointKind.AI_TAB names inline
    completions as a category but no event maps to it here.
    """

    tool_id = ToolId.AI_TAB
    event_kinds = AI_TAB_EVENT_KINDS

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        envelope = parse_envelope(raw)
        data = envelope.hook_input
        if self.phase(envelope) is HookPhase.BEFORE:
            file_paths = first_list(data, ("will_edit_filepaths", "file_path"))
        else:
            file_paths = first_list(data, ("edited_filepaths", "file_path"))
        return CheckpointFields(
            session_id=first_str(data, SESSION_ID_KEYS) or str(uuid.uuid4()),
            cwd=payload_cwd(data, cwd, _CWD_KEYS),
            model=first_str(data, ("model",)),
            file_paths=file_paths,
            dirty_files=path_keys(data.get("dirty_files")),
            completion_id=first_str(data, ("completion_id",)),
            metadata=optional_metadata(tool=first_str(data, ("tool",))),
        )
