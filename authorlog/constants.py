"""Constants used across authorlog.

Defaults here are not user-configurable; tunables live in authorlog.config.
"""

# Stored when no usable model name is reported
UNKNOWN_MODEL = "unknown"

# Model markers that never identify a real model
PLACEHOLDER_MODELS = frozenset({"<synthetic>"})

# Transcript limits
TRANSCRIPT_MAX_DOCUMENT_BYTES = 16 * 1024 * 1024
TRANSCRIPT_DEFAULT_FORMAT = "jsonl"

# Batch builds
BATCH_MAX_WORKERS = 8

# Environment
ENV_LOG_LEVEL = "AUTHORLOG_LOG_LEVEL"
ENV_CONFIG_PATH = "AUTHORLOG_CONFIG_PATH"
ENV_DOTENV_PATH = "AUTHORLOG_ENV_PATH"
DEFAULT_CONFIG_PATH = "~/.authorlog/authorlog.yml"
DEFAULT_LOG_LEVEL = "WARNING"
