"""Tolerant readers for agent session transcripts.

Transcripts only enrich a checkpoint (model name, tool calls, user prompts);
they never decide whether a checkpoint is valid. Every failure mode here
(missing file, unreadable path, malformed line, oversize document) degrades
to an empty or partial TranscriptSummary instead of raising.

Supported layouts:
- JSONL, one entry per line: Claude Code and Droid (`message` envelopes),
  Codex rollouts (`turn_context` / `response_item`), and plain
  OpenAI-style chat messages (`role` + `tool_calls`).
- JSON documents: Gemini CLI sessions (`messages`), Continue CLI sessions
  (`history`) and VS Code Copilot chat sessions (`requests`).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, cast

from authorlog.constants import PLACEHOLDER_MODELS, TRANSCRIPT_MAX_DOCUMENT_BYTES
from authorlog.core.errors import TranscriptReadError
from authorlog.core.models import ToolCallSummary, TranscriptSummary

logger = logging.getLogger(__name__)


class TranscriptFormat(str, Enum):
    """On-disk transcript layouts."""

    JSONL = "jsonl"
    GEMINI = "gemini"
    CONTINUE = "continue"
    COPILOT = "copilot"

    @classmethod
    def coerce(cls, value: "TranscriptFormat | str") -> "TranscriptFormat":
        if isinstance(value, TranscriptFormat):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            logger.debug("Unknown transcript format %r; reading as JSONL", value)
            return cls.JSONL


@dataclass
class _Message:
    """One normalized transcript message."""

    role: str
    model: Optional[str] = None
    text: str = ""
    tool_calls: list[ToolCallSummary] = field(default_factory=list)
    has_tool_result: bool = False


def _clean_str(value: object) -> Optional[str]:
    if isinstance(value, str):
        cleaned = value.strip()
        return cleaned or None
    return None


def _clean_model(value: object) -> Optional[str]:
    model = _clean_str(value)
    if model is None or model in PLACEHOLDER_MODELS:
        return None
    return model


def _parse_arguments(raw_arguments: object) -> Mapping[str, object]:
    """Parse tool-call arguments into a mapping; absent arguments become {}."""
    if isinstance(raw_arguments, dict):
        return cast(dict[str, object], raw_arguments)  # guard: loose-dict - External tool input
    if isinstance(raw_arguments, str):
        if not raw_arguments.strip():
            return {}
        try:
            parsed = json.loads(raw_arguments)
        except (ValueError, RecursionError):
            return {"raw_arguments": raw_arguments}
        if isinstance(parsed, dict):
            return cast(dict[str, object], parsed)  # guard: loose-dict - External tool input
        return {"raw_arguments": raw_arguments}
    return {}


def _tool_call(name: object, arguments: object, call_id: object) -> Optional[ToolCallSummary]:
    tool_name = _clean_str(name)
    if tool_name is None:
        return None
    return ToolCallSummary(name=tool_name, arguments=_parse_arguments(arguments), call_id=_clean_str(call_id))


def _content_message(role: str, content: object, model: object = None) -> _Message:
    """Normalize Anthropic/OpenAI-style content (string or list of blocks)."""
    message = _Message(role=role, model=_clean_model(model))
    if isinstance(content, str):
        message.text = content
        return message
    if not isinstance(content, list):
        return message

    texts: list[str] = []
    for block in content:
        if isinstance(block, str):
            texts.append(block)
            continue
        if not isinstance(block, dict):
            continue
        block_type = block.get("type")
        if block_type in ("text", "input_text", "output_text"):
            text = block.get("text")
            if isinstance(text, str):
                texts.append(text)
        elif block_type == "tool_use":
            call = _tool_call(block.get("name"), block.get("input"), block.get("id"))
            if call:
                message.tool_calls.append(call)
        elif block_type == "tool_result":
            message.has_tool_result = True
    message.text = "\n".join(texts)
    return message


def _openai_tool_calls(raw_calls: object) -> list[ToolCallSummary]:
    calls: list[ToolCallSummary] = []
    if not isinstance(raw_calls, list):
        return calls
    for raw in raw_calls:
        if not isinstance(raw, dict):
            continue
        function = raw.get("function")
        if isinstance(function, dict):
            call = _tool_call(function.get("name"), function.get("arguments"), raw.get("id"))
        else:
            call = _tool_call(raw.get("name"), raw.get("arguments", raw.get("args")), raw.get("id"))
        if call:
            calls.append(call)
    return calls


# ---------------------------------------------------------------------------
# JSONL entries
# ---------------------------------------------------------------------------


def _messages_from_codex_entry(entry: Mapping[str, object]) -> Iterator[_Message]:
    entry_type = entry.get("type")
    payload = entry.get("payload")
    if not isinstance(payload, dict):
        return

    if entry_type == "turn_context":
        model = _clean_model(payload.get("model"))
        if model:
            yield _Message(role="context", model=model)
        return

    payload_type = payload.get("type")
    if payload_type == "message":
        role = _clean_str(payload.get("role"))
        if role:
            yield _content_message(role, payload.get("content"))
    elif payload_type == "function_call":
        call = _tool_call(payload.get("name"), payload.get("arguments"), payload.get("call_id"))
        if call:
            yield _Message(role="assistant", tool_calls=[call])
    elif payload_type == "custom_tool_call":
        call = _tool_call(payload.get("name"), payload.get("input"), payload.get("call_id"))
        if call:
            yield _Message(role="assistant", tool_calls=[call])
    elif payload_type in ("function_call_output", "custom_tool_call_output"):
        yield _Message(role="tool", has_tool_result=True)


def _messages_from_jsonl_entry(entry: Mapping[str, object]) -> Iterator[_Message]:
    """Normalize one JSONL entry; unknown entry types yield nothing."""
    entry_type = entry.get("type")

    if entry_type in ("turn_context", "response_item"):
        yield from _messages_from_codex_entry(entry)
        return

    message = entry.get("message")
    if isinstance(message, dict):
        role = _clean_str(message.get("role")) or _clean_str(entry_type)
        if role in ("user", "assistant"):
            normalized = _content_message(role, message.get("content"), message.get("model"))
            normalized.tool_calls.extend(_openai_tool_calls(message.get("tool_calls")))
            yield normalized
        return

    role = _clean_str(entry.get("role"))
    if role in ("user", "assistant"):
        normalized = _content_message(role, entry.get("content"), entry.get("model"))
        normalized.tool_calls.extend(_openai_tool_calls(entry.get("tool_calls")))
        yield normalized
    elif role == "tool":
        yield _Message(role="tool", has_tool_result=True)


# ---------------------------------------------------------------------------
# JSON documents
# ---------------------------------------------------------------------------


def _dict_items(value: object) -> Iterator[Mapping[str, object]]:
    if isinstance(value, list):
        for item in value:
            if isinstance(item, dict):
                yield cast(dict[str, object], item)  # guard: loose-dict - External JSON message


def _messages_from_gemini(document: Mapping[str, object]) -> Iterator[_Message]:
    for item in _dict_items(document.get("messages")):
        msg_type = item.get("type")
        if msg_type == "user":
            yield _content_message("user", item.get("content"))
        elif msg_type == "gemini":
            message = _content_message("assistant", item.get("content"), item.get("model"))
            message.tool_calls.extend(_openai_tool_calls(item.get("toolCalls")))
            yield message


def _messages_from_continue(document: Mapping[str, object]) -> Iterator[_Message]:
    document_model = document.get("model")
    for item in _dict_items(document.get("history")):
        message = item.get("message")
        if not isinstance(message, dict):
            continue
        role = _clean_str(message.get("role"))
        if role == "user":
            yield _content_message("user", message.get("content"))
        elif role == "assistant":
            normalized = _content_message(
                "assistant", message.get("content"), message.get("model") or item.get("model") or document_model
            )
            normalized.tool_calls.extend(_openai_tool_calls(message.get("toolCalls")))
            yield normalized
        elif role == "tool":
            yield _Message(role="tool", has_tool_result=True)


def _messages_from_copilot(document: Mapping[str, object]) -> Iterator[_Message]:
    for request in _dict_items(document.get("requests")):
        prompt = request.get("message")
        if isinstance(prompt, dict) and isinstance(prompt.get("text"), str):
            yield _Message(role="user", text=cast(str, prompt["text"]))

        reply = _Message(role="assistant", model=_clean_model(request.get("modelId")))
        texts: list[str] = []
        for part in _dict_items(request.get("response")):
            kind = part.get("kind")
            if kind == "toolInvocationSerialized":
                call = _tool_call(part.get("toolId"), part.get("toolSpecificData"), part.get("toolCallId"))
                if call:
                    reply.tool_calls.append(call)
            elif kind is None and isinstance(part.get("value"), str):
                texts.append(cast(str, part["value"]))
        reply.text = "".join(texts)
        yield reply


_DOCUMENT_READERS = {
    TranscriptFormat.GEMINI: _messages_from_gemini,
    TranscriptFormat.CONTINUE: _messages_from_continue,
    TranscriptFormat.COPILOT: _messages_from_copilot,
}


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------


def _summarize(messages: Iterable[_Message]) -> TranscriptSummary:
    latest_model: Optional[str] = None
    tool_calls: list[ToolCallSummary] = []
    user_messages: list[str] = []

    for message in messages:
        tool_calls.extend(message.tool_calls)
        if message.has_tool_result:
            # Tool output relayed as a user turn is not something the user typed
            continue
        if message.model:
            latest_model = message.model
        if message.role == "user" and message.text.strip():
            user_messages.append(message.text)

    return TranscriptSummary(
        latest_model=latest_model,
        tool_calls=tuple(tool_calls),
        user_messages=tuple(user_messages),
    )


class TranscriptReader:
    """Read transcripts front to back, one line (or one document) at a time."""

    def __init__(self, max_document_bytes: int = TRANSCRIPT_MAX_DOCUMENT_BYTES) -> None:
        self.max_document_bytes = max_document_bytes

    def read(self, path: str, transcript_format: TranscriptFormat | str = TranscriptFormat.JSONL) -> TranscriptSummary:
        """Summarize a transcript; any read failure yields an empty summary."""
        try:
            return _summarize(self._iter_messages(path, TranscriptFormat.coerce(transcript_format)))
        except TranscriptReadError as exc:
            logger.warning("Transcript unavailable, continuing without it: %s", exc)
            return TranscriptSummary()

    def iter_tool_calls(
        self, path: str, transcript_format: TranscriptFormat | str = TranscriptFormat.JSONL
    ) -> Iterator[ToolCallSummary]:
        """Lazily yield tool calls; each new iteration re-reads the file once."""
        try:
            for message in self._iter_messages(path, TranscriptFormat.coerce(transcript_format)):
                yield from message.tool_calls
        except TranscriptReadError as exc:
            logger.warning("Transcript unavailable, continuing without it: %s", exc)

    def _iter_messages(self, path: str, transcript_format: TranscriptFormat) -> Iterator[_Message]:
        resolved = self._check_path(path)
        if transcript_format is TranscriptFormat.JSONL:
            yield from self._iter_jsonl(resolved)
            return
        document = self._load_document(resolved)
        yield from _DOCUMENT_READERS[transcript_format](document)

    @staticmethod
    def _check_path(path: str) -> Path:
        if not path or not path.strip():
            raise TranscriptReadError(repr(path), "empty path")
        resolved = Path(path).expanduser()
        try:
            if not resolved.exists():
                raise TranscriptReadError(str(resolved), "file not found")
            if not resolved.is_file():
                raise TranscriptReadError(str(resolved), "not a regular file")
        except OSError as exc:
            raise TranscriptReadError(str(resolved), str(exc)) from exc
        return resolved

    @staticmethod
    def _iter_jsonl(path: Path) -> Iterator[_Message]:
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                for line_number, line in enumerate(f, start=1):
                    if not line.strip():
                        continue
                    try:
                        entry: object = json.loads(line)
                    except (ValueError, RecursionError):
                        logger.debug("Skipping malformed transcript line %s:%d", path, line_number)
                        continue
                    if isinstance(entry, dict):
                        yield from _messages_from_jsonl_entry(cast(dict[str, object], entry))
        except OSError as exc:
            raise TranscriptReadError(str(path), str(exc)) from exc

    def _load_document(self, path: Path) -> Mapping[str, object]:
        try:
            size = path.stat().st_size
            if size > self.max_document_bytes:
                raise TranscriptReadError(str(path), f"document is {size} bytes (limit {self.max_document_bytes})")
            raw_text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise TranscriptReadError(str(path), str(exc)) from exc

        if not raw_text.strip():
            return {}
        try:
            document: object = json.loads(raw_text)
        except (ValueError, RecursionError) as exc:
            raise TranscriptReadError(str(path), f"malformed JSON document: {exc}") from exc
        if not isinstance(document, dict):
            raise TranscriptReadError(str(path), "JSON document is not an object")
        return cast(dict[str, object], document)  # guard: loose-dict - External JSON document
