"""Agent presets: one payload parser per supported AI coding tool."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Union

from authorlog.core.errors import UnknownTool
from authorlog.core.models import ToolId
from authorlog.hooks.presets.ai_tab import AiTabPreset
from authorlog.hooks.presets.base import Preset, PresetBase
from authorlog.hooks.presets.claude import ClaudePreset
from authorlog.hooks.presets.codex import CodexPreset
from authorlog.hooks.presets.continue_cli import ContinueCliPreset
from authorlog.hooks.presets.cursor import CursorPreset
from authorlog.hooks.presets.droid import DroidPreset
from authorlog.hooks.presets.gemini import GeminiPreset
from authorlog.hooks.presets.github_copilot import GithubCopilotPreset

__all__ = [
    "AiTabPreset",
    "ClaudePreset",
    "CodexPreset",
    "ContinueCliPreset",
    "CursorPreset",
    "DroidPreset",
    "GeminiPreset",
    "GithubCopilotPreset",
    "Preset",
    "PresetBase",
    "get_preset",
    "resolve_tool_id",
]

_PRESETS: Mapping[ToolId, Preset] = MappingProxyType(
    {
        ToolId.CLAUDE: ClaudePreset(),
        ToolId.GEMINI: GeminiPreset(),
        ToolId.CONTINUE_CLI: ContinueCliPreset(),
        ToolId.CODEX: CodexPreset(),
        ToolId.CURSOR: CursorPreset(),
        ToolId.GITHUB_COPILOT: GithubCopilotPreset(),
        ToolId.DROID: DroidPreset(),
        ToolId.AI_TAB: AiTabPreset(),
    }
)

_unregistered = set(ToolId) - set(_PRESETS)
if _unregistered:
    raise RuntimeError(f"No preset registered for: {sorted(tool.value for tool in _unregistered)}")


def resolve_tool_id(tool: Union[ToolId, str]) -> ToolId:
    """Normalize a tool identifier, raising UnknownTool for anything else."""
    if isinstance(tool, ToolId):
        return tool
    if not isinstance(tool, str):
        raise UnknownTool(repr(tool))
    try:
        return ToolId.from_str(tool)
    except ValueError as exc:
        raise UnknownTool(tool) from exc


def get_preset(tool: Union[ToolId, str]) -> Preset:
    """Get the preset for a tool."""
    return _PRESETS[resolve_tool_id(tool)]
