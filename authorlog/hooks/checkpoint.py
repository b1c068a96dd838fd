"""Build canonical checkpoints from agent hook payloads.

One call, one checkpoint: select the preset, validate, classify, extract,
resolve paths, then optionally enrich from the transcript. Each step
short-circuits; a partially valid checkpoint is never returned.
Transcripts are supplementary: a missing or broken transcript never fails a
build, it only leaves the model unresolved.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from authorlog.config import get_config
from authorlog.constants import UNKNOWN_MODEL
from authorlog.core.errors import BuildError, MissingRequiredField
from authorlog.core.models import Checkpoint, CheckpointKind, ToolId
from authorlog.core.paths import PathResolver
from authorlog.hooks.presets import get_preset, resolve_tool_id
from authorlog.hooks.presets.base import RawPayload, parse_envelope
from authorlog.hooks.utils.parse_helpers import coerce_str
from authorlog.utils.transcript import TranscriptReader

logger = logging.getLogger(__name__)


class CheckpointBuilder:
    """Orchestrates preset parsing and enrichment for a single payload.

    Holds only immutable collaborators, so one instance can serve any number
    of concurrent builds.
    """

    def __init__(
        self,
        path_resolver: Optional[PathResolver] = None,
        transcript_reader: Optional[TranscriptReader] = None,
        read_transcripts: Optional[bool] = None,
    ) -> None:
        settings = get_config().transcript
        self.path_resolver = path_resolver or PathResolver()
        self.transcript_reader = transcript_reader or TranscriptReader(settings.max_document_bytes)
        self.read_transcripts = settings.enabled if read_transcripts is None else read_transcripts

    def build(self, source_tool: Union[ToolId, str], raw: RawPayload, cwd: str) -> Checkpoint:
        """Build one checkpoint.

        Raises:
            BuildError: the first failed step, tagged with the tool id.
        """
        tool_label = source_tool.value if isinstance(source_tool, ToolId) else str(source_tool)
        try:
            tool_id = resolve_tool_id(source_tool)
            tool_label = tool_id.value
            return self._build(tool_id, raw, cwd)
        except BuildError as exc:
            exc.with_tool(tool_label)
            logger.debug("Checkpoint build failed: %s", exc)
            raise

    def _build(self, tool_id: ToolId, raw: RawPayload, cwd: str) -> Checkpoint:
        preset = get_preset(tool_id)
        envelope = parse_envelope(raw)
        preset.validate(envelope)
        kind = preset.classify(envelope)
        fields = preset.extract(envelope, cwd)

        if not coerce_str(fields.session_id):
            raise MissingRequiredField("session_id")
        checkpoint_cwd = coerce_str(fields.cwd)
        if checkpoint_cwd is None:
            raise MissingRequiredField("cwd")

        file_path = self.path_resolver.resolve_many(fields.file_paths, checkpoint_cwd, fields.workspace_roots)
        dirty_files = self.path_resolver.resolve_many(fields.dirty_files, checkpoint_cwd, fields.workspace_roots)
        transcript_path = coerce_str(fields.transcript_path)

        model = coerce_str(fields.model)
        if model is None and transcript_path and self.read_transcripts:
            summary = self.transcript_reader.read(transcript_path, fields.transcript_format)
            model = summary.latest_model

        checkpoint = Checkpoint(
            kind=kind,
            session_id=fields.session_id.strip(),
            cwd=checkpoint_cwd,
            source_tool=tool_id,
            model=model or UNKNOWN_MODEL,
            file_path=file_path,
            transcript_path=transcript_path,
            dirty_files=dirty_files,
            completion_id=coerce_str(fields.completion_id),
            metadata=dict(fields.metadata),
        )
        logger.debug(
            "Checkpoint built: tool=%s kind=%s session=%s files=%d",
            tool_id.value,
            kind.value,
            checkpoint.session_id[:8],
            len(file_path or ()),
        )
        return checkpoint


def classify_event(source_tool: Union[ToolId, str], event_name: str) -> CheckpointKind:
    """Kind for a (tool, event name) pair, without a payload."""
    tool_id = resolve_tool_id(source_tool)
    try:
        return get_preset(tool_id).kind_for_event(event_name)
    except BuildError as exc:
        raise exc.with_tool(tool_id.value)


def build_checkpoint(source_tool: Union[ToolId, str], raw_payload: RawPayload, cwd: str) -> Checkpoint:
    """Build a checkpoint with default collaborators."""
    return CheckpointBuilder().build(source_tool, raw_payload, cwd)


__all__ = [
    "CheckpointBuilder",
    "build_checkpoint",
    "classify_event",
]
