"""Checkpoint data model shared by presets and the builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from authorlog.constants import TRANSCRIPT_DEFAULT_FORMAT, UNKNOWN_MODEL


class ToolId(str, Enum):
    """Supported AI coding tools (closed set)."""

    CLAUDE = "claude"
    GEMINI = "gemini"
    CONTINUE_CLI = "continue-cli"
    CODEX = "codex"
    CURSOR = "cursor"
    GITHUB_COPILOT = "github-copilot"
    DROID = "droid"
    AI_TAB = "ai_tab"

    @classmethod
    def from_str(cls, value: str) -> "ToolId":
        """Convert a string to ToolId, raising ValueError on unknown values.

        Matching ignores case and treats `-` and `_` as equivalent, so
        `continue_cli`, `GitHub-Copilot` and `ai-tab` all resolve.
        """
        normalized = value.strip().lower().replace("_", "-")
        for member in cls:
            if member.value.replace("_", "-") == normalized:
                return member
        raise ValueError(f"Unknown tool '{value}'")


class CheckpointKind(str, Enum):
    """Who produced the change a checkpoint describes."""

    HUMAN = "human"
    AI_AGENT = "ai_agent"
    AI_TAB = "ai_tab"


class HookPhase(str, Enum):
    """Whether a hook fires before or after the edit."""

    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class ToolCallSummary:
    """A single tool invocation recovered from a transcript."""

    name: str
    arguments: Mapping[str, object] = field(default_factory=dict)
    call_id: Optional[str] = None


@dataclass(frozen=True)
class TranscriptSummary:
    """What a transcript contributes to a checkpoint."""

    latest_model: Optional[str] = None
    tool_calls: tuple[ToolCallSummary, ...] = ()
    user_messages: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.latest_model is None and not self.tool_calls and not self.user_messages


@dataclass
class CheckpointFields:
    """Fields a preset extracts from a hook payload before enrichment.

    Paths are raw (not yet unescaped or resolved). `model` is None when the
    payload carried no usable model name.
    """

    session_id: str
    cwd: str
    model: Optional[str] = None
    file_paths: list[str] = field(default_factory=list)
    transcript_path: Optional[str] = None
    transcript_format: str = TRANSCRIPT_DEFAULT_FORMAT
    workspace_roots: tuple[str, ...] = ()
    dirty_files: list[str] = field(default_factory=list)
    completion_id: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Checkpoint:
    """Canonical record of one observed code-change event."""

    kind: CheckpointKind
    session_id: str
    cwd: str
    source_tool: ToolId
    model: str = UNKNOWN_MODEL
    file_path: Optional[list[str]] = None
    transcript_path: Optional[str] = None
    dirty_files: Optional[list[str]] = None
    completion_id: Optional[str] = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:  # guard: loose-dict - JSON output
        """Serialize to a JSON-ready dict, dropping absent values."""
        data: dict[str, object] = {  # guard: loose-dict - JSON output
            "kind": self.kind.value,
            "session_id": self.session_id,
            "model": self.model,
            "cwd": self.cwd,
            "source_tool": self.source_tool.value,
        }
        if self.file_path is not None:
            data["file_path"] = list(self.file_path)
        if self.transcript_path is not None:
            data["transcript_path"] = self.transcript_path
        if self.dirty_files is not None:
            data["dirty_files"] = list(self.dirty_files)
        if self.completion_id is not None:
            data["completion_id"] = self.completion_id
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data
