"""Checkpoint build errors.

Every fatal error derives from BuildError and names the offending field or
value so callers can report `[tool] message` precisely. TranscriptReadError
sits outside that hierarchy: transcript problems are recovered
inside TranscriptReader and never reach callers of build_checkpoint.
"""

from __future__ import annotations

from typing import Optional


class BuildError(Exception):
    """Base class for errors that abort a single checkpoint build."""

    def __init__(self, message: str, *, tool_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.tool_id = tool_id

    def with_tool(self, tool_id: str) -> "BuildError":
        """Attach the originating tool id (first one wins) and return self."""
        if self.tool_id is None:
            self.tool_id = tool_id
        return self

    def __str__(self) -> str:
        if self.tool_id:
            return f"[{self.tool_id}] {self.message}"
        return self.message


class MissingRequiredField(BuildError):
    """A required payload field is absent, blank, or empty."""

    def __init__(self, field_name: str, *, tool_id: Optional[str] = None) -> None:
        super().__init__(f"{field_name} not found in hook_input", tool_id=tool_id)
        self.field_name = field_name


class InvalidJson(BuildError):
    """The payload or its hook_input is not a JSON object."""

    def __init__(self, detail: str, *, tool_id: Optional[str] = None) -> None:
        super().__init__(f"Invalid JSON in hook_input: {detail}", tool_id=tool_id)
        self.detail = detail


class InvalidHookEvent(BuildError):
    """The hook event name is not in the preset's vocabulary."""

    def __init__(self, event_name: str, *, tool_id: Optional[str] = None) -> None:
        super().__init__(f"Invalid hook_event_name: {event_name!r}", tool_id=tool_id)
        self.event_name = event_name


class InvalidPath(BuildError):
    """A file path is empty after unescaping or escapes the declared roots."""

    def __init__(self, detail: str, *, tool_id: Optional[str] = None) -> None:
        super().__init__(f"Invalid path: {detail}", tool_id=tool_id)
        self.detail = detail


class UnknownTool(BuildError):
    """No preset is registered for the requested tool id."""

    def __init__(self, tool_id: str) -> None:
        super().__init__(f"Unknown tool: {tool_id!r}", tool_id=tool_id)
        self.requested_tool = tool_id


class TranscriptReadError(Exception):
    """A transcript could not be read; always recovered as an empty summary."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read transcript {path}: {reason}")
        self.path = path
        self.reason = reason
