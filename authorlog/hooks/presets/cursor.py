"""Cursor preset.

Cursor hooks identify the chat by conversation_id and report every open
workspace folder in workspace_roots; there is no single cwd. Edited files
are resolved against the root that contains them.
"""

from __future__ import annotations

import os
from types import MappingProxyType
from typing import Mapping, Sequence

from authorlog.core.models import CheckpointFields, CheckpointKind, ToolId
from authorlog.core.paths import canonical_roots, find_containing_root
from authorlog.hooks.presets.base import FieldRule, PresetBase, RawPayload, parse_envelope
from authorlog.hooks.utils.parse_helpers import first_str, optional_metadata, path_keys, str_list
from authorlog.utils.git_paths import unescape_git_path

CURSOR_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "beforeSubmitPrompt": CheckpointKind.HUMAN,
        "afterFileEdit": CheckpointKind.AI_AGENT,
    }
)


def _working_root(file_paths: Sequence[str], roots: Sequence[str]) -> str:
    """First root holding an edited file, else the first root."""
    for path in file_paths:
        candidate = unescape_git_path(path)
        if os.path.isabs(candidate):
            root = find_containing_root(os.path.normpath(candidate), roots)
            if root:
                return root
    return roots[0]


class CursorPreset(PresetBase):
    tool_id = ToolId.CURSOR
    event_kinds = CURSOR_EVENT_KINDS
    required_fields = (
        FieldRule("conversation_id"),
        FieldRule("workspace_roots", is_list=True),
    )

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        data = parse_envelope(raw).hook_input
        roots = canonical_roots(str_list(data.get("workspace_roots")))
        file_paths = str_list(data.get("file_path"))
        conversation_id = first_str(data, ("conversation_id",)) or ""
        return CheckpointFields(
            session_id=conversation_id,
            cwd=_working_root(file_paths, roots) if roots else cwd,
            model=first_str(data, ("model",)),
            file_paths=file_paths,
            transcript_path=first_str(data, ("transcript_path",)),
            workspace_roots=roots,
            dirty_files=path_keys(data.get("dirty_files")),
            metadata=optional_metadata(generation_id=first_str(data, ("generation_id",))),
        )
