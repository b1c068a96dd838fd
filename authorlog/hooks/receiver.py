#!/usr/bin/env python3
"""Hook receiver: turn one agent hook invocation into a checkpoint on stdout.

Agents call this from their hook configuration, e.g.

    authorlog-checkpoint claude --hook-input stdin
    authorlog-checkpoint codex '{"type": "agent-turn-complete", ...}'

The checkpoint is printed as a single JSON line. Fatal build errors are
reported on stderr as `error: [<tool>] <message>` with exit status 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Optional, Sequence

from authorlog.config import get_config
from authorlog.constants import ENV_LOG_LEVEL
from authorlog.core.errors import BuildError
from authorlog.core.models import ToolId
from authorlog.hooks.checkpoint import CheckpointBuilder
from authorlog.logging_config import setup_logging

logger = logging.getLogger(__name__)

_STDIN_MARKERS = frozenset({"stdin", "-"})


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="authorlog hook receiver")
    parser.add_argument(
        "tool",
        help=f"Agent preset ({', '.join(tool.value for tool in ToolId)})",
    )
    parser.add_argument(
        "payload",
        nargs="?",
        default=None,
        help="Hook payload JSON passed as an argument (Codex notify)",
    )
    parser.add_argument(
        "--hook-input",
        default=None,
        help="Hook payload JSON, or 'stdin' / '-' to read it from standard input",
    )
    parser.add_argument("--cwd", default=None, help="Working directory for relative paths (default: current)")
    parser.add_argument("--log-level", default=None, help="Override AUTHORLOG_LOG_LEVEL")
    return parser.parse_args(argv)


def _read_stdin() -> str:
    if sys.stdin is None or sys.stdin.isatty():
        return ""
    return sys.stdin.read()


def _hook_input_text(args: argparse.Namespace) -> str:
    """Resolve where the hook JSON comes from: flag, positional, or stdin."""
    if args.hook_input is not None and args.hook_input.strip() not in _STDIN_MARKERS:
        return args.hook_input
    if args.hook_input is None and args.payload:
        return args.payload
    return _read_stdin()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.log_level or os.getenv(ENV_LOG_LEVEL) or get_config().log_level)

    hook_input = _hook_input_text(args)
    cwd = args.cwd or os.getcwd()
    logger.debug("Hook receiver start: tool=%s cwd=%s input_len=%d", args.tool, cwd, len(hook_input))

    try:
        checkpoint = CheckpointBuilder().build(args.tool, {"hook_input": hook_input}, cwd)
    except BuildError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    # ASCII escapes keep undecodable path bytes (surrogates) printable
    print(json.dumps(checkpoint.to_dict()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
