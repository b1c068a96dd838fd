"""Codex CLI preset.

Codex notify payloads use dashed keys and a `type` field instead of
hook_event_name:
{
    "type": "agent-turn-complete",
    "thread-id": "019b7ea7-b98c-7431-bf04-ffc0dcd6eec4",
    "turn-id": "12345",
    "cwd": "/repo"
}
Hook-style payloads (PreToolUse/PostToolUse) carry session_id instead.
"""

from __future__ import annotations

import glob
import logging
from datetime import datetime, timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from authorlog.core.models import CheckpointFields, CheckpointKind, ToolId
from authorlog.hooks.presets.base import (
    HOOK_EVENT_FIELD,
    FieldRule,
    PresetBase,
    RawPayload,
    parse_envelope,
    payload_cwd,
)
from authorlog.hooks.utils.parse_helpers import first_str, tool_input_paths

logger = logging.getLogger(__name__)

CODEX_EVENT_KINDS: Mapping[str, CheckpointKind] = MappingProxyType(
    {
        "PreToolUse": CheckpointKind.HUMAN,
        "PostToolUse": CheckpointKind.AI_AGENT,
        "agent-turn-complete": CheckpointKind.AI_AGENT,
    }
)

SESSION_ID_KEYS = ("session_id", "thread_id", "thread-id")
_TRANSCRIPT_KEYS = ("transcript_path", "rollout_path")
_SEARCH_DAYS = 7


def discover_transcript_path(session_id: str, sessions_dir: Optional[Path] = None) -> Optional[str]:
    """Find a Codex rollout file for a session id.

    Codex stores transcripts at:
    ~/.codex/sessions/YYYY/MM/DD/rollout-{timestamp}-{session_id}.jsonl

    Recent days are searched first, then the whole tree.
    """
    if "/" in session_id or "\\" in session_id:
        logger.debug("Codex session id is not a file name component: %r", session_id)
        return None

    root = sessions_dir or Path.home() / ".codex" / "sessions"
    if not root.is_dir():
        logger.debug("Codex sessions directory not found: %s", root)
        return None

    pattern = f"rollout-*-{glob.escape(session_id)}.jsonl"
    today = datetime.now()
    for days_back in range(_SEARCH_DAYS):
        day = today - timedelta(days=days_back)
        date_dir = root / f"{day.year}" / f"{day.month:02d}" / f"{day.day:02d}"
        try:
            for session_file in date_dir.glob(pattern):
                return str(session_file)
        except (ValueError, OSError) as exc:
            logger.debug("Error searching Codex date directory %s: %s", date_dir, exc)

    try:
        for session_file in root.rglob(pattern):
            return str(session_file)
    except (ValueError, OSError) as exc:
        logger.debug("Error searching Codex sessions %s: %s", root, exc)
        return None

    logger.debug("Codex transcript not found for session %s", session_id)
    return None


class CodexPreset(PresetBase):
    tool_id = ToolId.CODEX
    event_kinds = CODEX_EVENT_KINDS
    event_name_keys = (HOOK_EVENT_FIELD, "type")
    required_fields = (FieldRule("session_id", SESSION_ID_KEYS),)

    def __init__(self, sessions_dir: Optional[Path] = None) -> None:
        self.sessions_dir = sessions_dir

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        data = parse_envelope(raw).hook_input
        session_id = first_str(data, SESSION_ID_KEYS) or ""
        transcript_path = first_str(data, _TRANSCRIPT_KEYS)
        if transcript_path is None and session_id:
            transcript_path = discover_transcript_path(session_id, self.sessions_dir)
        return CheckpointFields(
            session_id=session_id,
            cwd=payload_cwd(data, cwd),
            model=first_str(data, ("model",)),
            file_paths=tool_input_paths(data, ("file_path", "path")),
            transcript_path=transcript_path,
        )
