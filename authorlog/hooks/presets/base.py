"""Preset protocol and the validation scaffolding shared by all presets.

Every preset sees the same envelope: a JSON object carrying `hook_input`
(an object, or the JSON text of one). Envelope checks are identical for all
presets and always run before any preset-specific field check:

1. payload text that is not valid JSON -> InvalidJson
2. `hook_input` missing or blank -> MissingRequiredField("hook_input")
3. `hook_input` text that is not a JSON object -> InvalidJson
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Union

from authorlog.core.errors import InvalidHookEvent, InvalidJson, MissingRequiredField
from authorlog.core.models import CheckpointFields, CheckpointKind, HookPhase, ToolId
from authorlog.hooks.utils.parse_helpers import coerce_str, first_str, str_list

RawPayload = Union[str, bytes, Mapping[str, Any], "HookEnvelope"]

HOOK_INPUT_FIELD = "hook_input"
HOOK_EVENT_FIELD = "hook_event_name"


@dataclass(frozen=True)
class HookEnvelope:
    """A parsed payload: the outer document plus its hook_input object."""

    outer: Mapping[str, Any]
    hook_input: Mapping[str, Any]

    def event_name(self, keys: tuple[str, ...]) -> Optional[str]:
        """Look up the event name in hook_input first, then the outer document."""
        return first_str(self.hook_input, keys) or first_str(self.outer, keys)


def _loads_object(text: Union[str, bytes], what: str) -> Mapping[str, Any]:
    try:
        value = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise InvalidJson(f"{what}: {type(exc).__name__}: {exc}") from exc
    if not isinstance(value, dict):
        raise InvalidJson(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def parse_envelope(raw: RawPayload) -> HookEnvelope:
    """Apply the envelope checks shared by every preset."""
    if isinstance(raw, HookEnvelope):
        return raw

    if isinstance(raw, (str, bytes)):
        outer = _loads_object(raw, "payload")
    elif isinstance(raw, Mapping):
        outer = raw
    else:
        raise InvalidJson(f"payload must be a JSON object, got {type(raw).__name__}")

    hook_input = outer.get(HOOK_INPUT_FIELD)
    if hook_input is None or (isinstance(hook_input, (str, bytes)) and not hook_input.strip()):
        raise MissingRequiredField(HOOK_INPUT_FIELD)
    if isinstance(hook_input, (str, bytes)):
        hook_input = _loads_object(hook_input, HOOK_INPUT_FIELD)
    elif not isinstance(hook_input, Mapping):
        raise InvalidJson(f"{HOOK_INPUT_FIELD} must be a JSON object, got {type(hook_input).__name__}")
    if not hook_input:
        raise MissingRequiredField(HOOK_INPUT_FIELD)

    return HookEnvelope(outer=outer, hook_input=hook_input)


@dataclass(frozen=True)
class FieldRule:
    """A required field: reported under `name`, satisfied by any of `keys`.

    Keys are tried in order; the first present, non-blank value wins. With
    `is_list`, the value must be a JSON array holding at least one
    non-blank string.
    """

    name: str
    keys: tuple[str, ...] = ()
    is_list: bool = False

    @property
    def candidates(self) -> tuple[str, ...]:
        return self.keys or (self.name,)

    def is_satisfied(self, data: Mapping[str, Any]) -> bool:
        if self.is_list:
            return any(str_list(data.get(key)) for key in self.candidates if isinstance(data.get(key), list))
        return first_str(data, self.candidates) is not None

    def check(self, data: Mapping[str, Any]) -> None:
        if not self.is_satisfied(data):
            raise MissingRequiredField(self.name)


class Preset(Protocol):
    """Capability set every agent preset implements."""

    tool_id: ToolId

    def validate(self, raw: RawPayload) -> None:
        """Raise the first violated field rule, or return None."""
        ...

    def classify(self, raw: RawPayload) -> CheckpointKind:
        """Map the hook event name to a checkpoint kind."""
        ...

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        """Pull checkpoint fields out of a validated payload."""
        ...

    def kind_for_event(self, event_name: str) -> CheckpointKind:
        """Static event-name lookup."""
        ...


class PresetBase:
    """Shared validate/classify behavior driven by class-level tables.

    Subclasses set `tool_id`, `event_kinds` (an immutable mapping) and
    `required_fields`, and implement extract().
    """

    tool_id: ToolId
    event_kinds: Mapping[str, CheckpointKind]
    event_name_keys: tuple[str, ...] = (HOOK_EVENT_FIELD,)
    required_fields: tuple[FieldRule, ...] = ()

    def field_rules(self, envelope: HookEnvelope) -> tuple[FieldRule, ...]:
        """Ordered rules for this payload; override when the shape varies."""
        return self.required_fields

    def event_keys(self, envelope: HookEnvelope) -> tuple[str, ...]:
        return self.event_name_keys

    def validate(self, raw: RawPayload) -> None:
        envelope = parse_envelope(raw)
        for rule in self.field_rules(envelope):
            rule.check(envelope.hook_input)

    def classify(self, raw: RawPayload) -> CheckpointKind:
        envelope = parse_envelope(raw)
        event_name = envelope.event_name(self.event_keys(envelope))
        if event_name is None:
            raise MissingRequiredField(HOOK_EVENT_FIELD)
        return self.kind_for_event(event_name)

    def kind_for_event(self, event_name: str) -> CheckpointKind:
        """Static table lookup; the only input is the event name."""
        kind = self.event_kinds.get(event_name)
        if kind is None:
            raise InvalidHookEvent(event_name)
        return kind

    def phase(self, raw: RawPayload) -> HookPhase:
        """Before-edit hooks are the human-attributed ones."""
        return HookPhase.BEFORE if self.classify(raw) is CheckpointKind.HUMAN else HookPhase.AFTER

    def extract(self, raw: RawPayload, cwd: str) -> CheckpointFields:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tool_id={self.tool_id.value!r})"


def payload_cwd(data: Mapping[str, Any], cwd: str, keys: tuple[str, ...] = ("cwd",)) -> str:
    """Prefer the cwd the agent reported; fall back to the invocation cwd."""
    return first_str(data, keys) or coerce_str(cwd) or ""


def transcript_stem(transcript_path: Optional[str]) -> Optional[str]:
    """Session ids some agents encode only in their transcript filename."""
    if not transcript_path:
        return None
    return coerce_str(Path(transcript_path).stem)
