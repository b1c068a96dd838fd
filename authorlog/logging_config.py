"""authorlog logging configuration.

Hook receivers print checkpoints on stdout, so log records always go to
stderr. The level comes from `AUTHORLOG_LOG_LEVEL` (default WARNING).
Library modules only create loggers; handlers are attached here, once, by
entry points.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from authorlog.constants import DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "authorlog-stderr"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the `authorlog` logger.

    Args:
        level: Optional override for `AUTHORLOG_LOG_LEVEL`.
    """
    level_name = (level or os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    resolved = logging.getLevelName(level_name)
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    root = logging.getLogger("authorlog")
    root.setLevel(resolved)
    if any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
