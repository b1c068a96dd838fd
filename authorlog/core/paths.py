"""Resolve hook-reported file paths into canonical absolute paths."""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional, Sequence

from authorlog.core.errors import InvalidPath
from authorlog.utils.git_paths import unescape_git_path

logger = logging.getLogger(__name__)


def _canonical(path: str) -> str:
    return os.path.normpath(unescape_git_path(path))


def _is_within(path: str, root: str) -> bool:
    try:
        return os.path.commonpath([path, root]) == root
    except ValueError:
        # Mixed absolute/relative or different drives
        return False


def canonical_roots(workspace_roots: Iterable[object]) -> tuple[str, ...]:
    """Unescape and normalize workspace roots, dropping blank entries."""
    roots: list[str] = []
    for root in workspace_roots:
        if not isinstance(root, str) or not root.strip():
            continue
        canonical = _canonical(root.strip())
        if canonical not in roots:
            roots.append(canonical)
    return tuple(roots)


def find_containing_root(path: str, workspace_roots: Sequence[str]) -> Optional[str]:
    """Return the first workspace root that contains an absolute path."""
    for root in workspace_roots:
        if _is_within(path, root):
            return root
    return None


class PathResolver:
    """Turn raw hook paths into canonical absolute paths.

    Every path goes through unescape_git_path first, so octal-escaped,
    NFC and NFD spellings of a filename resolve to the same string. No
    symlinks are followed; normalization is purely lexical.
    """

    def resolve(self, raw_path: str, cwd: str, workspace_roots: Sequence[str] = ()) -> str:
        """Resolve one path against cwd or the matching workspace root.

        Raises:
            InvalidPath: the path is empty after unescaping, is relative with
                nothing to anchor it, or lies outside every declared root.
        """
        unescaped = unescape_git_path(raw_path)
        if not unescaped.strip():
            raise InvalidPath(f"empty path (raw value {raw_path!r})")

        roots = canonical_roots(workspace_roots)
        if os.path.isabs(unescaped):
            combined = os.path.normpath(unescaped)
        else:
            base = self._base_for_relative(unescaped, cwd, roots)
            if not base:
                raise InvalidPath(f"relative path {unescaped!r} has no cwd or workspace root")
            combined = os.path.normpath(os.path.join(base, unescaped))

        if roots and find_containing_root(combined, roots) is None:
            raise InvalidPath(f"{combined!r} is outside workspace roots {list(roots)}")
        return combined

    def resolve_many(
        self,
        raw_paths: Iterable[object],
        cwd: str,
        workspace_roots: Sequence[str] = (),
    ) -> Optional[list[str]]:
        """Resolve a list of paths, skipping blank entries.

        Returns None when nothing is left after filtering, never an empty list.
        Duplicates (including NFC/NFD twins) collapse to the first occurrence.
        """
        resolved: list[str] = []
        for raw in raw_paths:
            if not isinstance(raw, str) or not raw.strip():
                continue
            path = self.resolve(raw.strip(), cwd, workspace_roots)
            if path not in resolved:
                resolved.append(path)
        return resolved or None

    @staticmethod
    def _base_for_relative(path: str, cwd: str, roots: Sequence[str]) -> str:
        canonical_cwd = _canonical(cwd) if cwd and cwd.strip() else ""
        if not roots:
            return canonical_cwd
        if canonical_cwd and find_containing_root(canonical_cwd, roots):
            return canonical_cwd
        for root in roots:
            if os.path.exists(os.path.join(root, path)):
                return root
        logger.debug("No workspace root holds %s; anchoring at %s", path, roots[0])
        return roots[0]
