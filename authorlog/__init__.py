"""Public package surface."""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_FALLBACK_VERSION = "0.0.0"


def _version_from_pyproject() -> str:
    """Read the version from a source checkout's pyproject.toml."""
    pyproject_path = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return _FALLBACK_VERSION

    project = data.get("project")
    project_version = project.get("version") if isinstance(project, dict) else None
    return project_version if isinstance(project_version, str) else _FALLBACK_VERSION


def _resolve_version() -> str:
    """Prefer installed metadata, falling back to the source tree."""
    try:
        return version("authorlog")
    except PackageNotFoundError:
        return _version_from_pyproject()


__version__ = _resolve_version()

__all__ = ["__version__"]
