"""Build many checkpoints concurrently.

Used when re-scanning history: each payload is independent, so builds run on
a thread pool and a failure is recorded on its own result instead of
aborting the batch. Results come back in input order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from authorlog.config import get_config
from authorlog.core.errors import BuildError
from authorlog.core.models import Checkpoint, ToolId
from authorlog.hooks.checkpoint import CheckpointBuilder
from authorlog.hooks.presets.base import RawPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchRequest:
    """One payload to build."""

    source_tool: Union[ToolId, str]
    raw_payload: RawPayload
    cwd: str


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one request: exactly one of checkpoint/error is set."""

    index: int
    checkpoint: Optional[Checkpoint] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.checkpoint is not None


def build_checkpoints(
    requests: Iterable[BatchRequest],
    *,
    max_workers: Optional[int] = None,
    builder: Optional[CheckpointBuilder] = None,
) -> list[BatchResult]:
    """Build every request; any failure is captured on its own result."""
    pending = list(requests)
    if not pending:
        return []

    workers = max_workers or get_config().batch.max_workers
    shared_builder = builder or CheckpointBuilder()

    def _run(index: int, request: BatchRequest) -> BatchResult:
        try:
            checkpoint = shared_builder.build(request.source_tool, request.raw_payload, request.cwd)
        except BuildError as exc:
            return BatchResult(index=index, error=exc)
        except Exception as exc:
            logger.exception("Checkpoint build %d failed unexpectedly", index)
            return BatchResult(index=index, error=exc)
        return BatchResult(index=index, checkpoint=checkpoint)

    with ThreadPoolExecutor(max_workers=min(workers, len(pending))) as pool:
        results = list(pool.map(_run, range(len(pending)), pending))

    failed = sum(1 for result in results if not result.ok)
    if failed:
        logger.warning("Batch finished with %d of %d checkpoints failing", failed, len(results))
    return results
