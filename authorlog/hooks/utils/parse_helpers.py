"""Shared parsing helpers for hook presets."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional


def coerce_str(value: object) -> str | None:
    """Normalize a value to a non-empty string, or None."""
    if isinstance(value, str):
        cleaned = value.strip()
        return cleaned or None
    return None


def get_str(data: Mapping[str, Any], key: str) -> str | None:
    """Fetch a string from a specific top-level key (no nesting)."""
    return coerce_str(data.get(key))


def first_str(data: Mapping[str, Any], keys: Iterable[str]) -> str | None:
    """Return the first present, non-blank string among keys, in order."""
    for key in keys:
        found = get_str(data, key)
        if found:
            return found
    return None


def get_mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Fetch a nested object, or an empty mapping when absent or mistyped."""
    value = data.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def str_list(value: object) -> list[str]:
    """Keep the non-blank string entries of a JSON array (or a lone string)."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


def first_list(data: Mapping[str, Any], keys: Iterable[str]) -> list[str]:
    """Return the first non-empty string list among keys, in order."""
    for key in keys:
        found = str_list(data.get(key))
        if found:
            return found
    return []


def path_keys(value: object) -> list[str]:
    """Paths named by a list of strings or by the keys of a path->content object."""
    if isinstance(value, Mapping):
        return [key for key in value if isinstance(key, str) and key.strip()]
    return str_list(value)


def tool_input_paths(data: Mapping[str, Any], keys: Iterable[str], container: str = "tool_input") -> list[str]:
    """Collect file paths a tool call names inside its input object."""
    tool_input = get_mapping(data, container)
    paths: list[str] = []
    for key in keys:
        for path in str_list(tool_input.get(key)):
            if path not in paths:
                paths.append(path)
    return paths


def optional_metadata(**values: Optional[str]) -> dict[str, str]:
    """Build a metadata dict, dropping blank values."""
    return {key: cleaned for key, value in values.items() if (cleaned := coerce_str(value))}
