from pydantic import BaseModel, ConfigDict, Field, field_validator

from authorlog.constants import BATCH_MAX_WORKERS, DEFAULT_LOG_LEVEL, TRANSCRIPT_MAX_DOCUMENT_BYTES

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class TranscriptConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    enabled: bool = True
    max_document_bytes: int = Field(default=TRANSCRIPT_MAX_DOCUMENT_BYTES, gt=0)


class BatchConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_workers: int = Field(default=BATCH_MAX_WORKERS, ge=1, le=256)


class AuthorlogConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    log_level: str = DEFAULT_LOG_LEVEL
    transcript: TranscriptConfig = TranscriptConfig()
    batch: BatchConfig = BatchConfig()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        normalized = v.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {v}. Expected one of {', '.join(_LOG_LEVELS)}")
        return normalized
