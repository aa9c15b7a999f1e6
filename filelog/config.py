"""Configuration module — frozen dataclass loaded from YAML and environment variables."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from filelog.writer import DEFAULT_MAX_FILE_SIZE_BYTES

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "log.txt"


def default_path(root: str | None = None) -> str:
    """``<root>/log.txt``, where root defaults to ``LOG_ROOT`` or the working directory."""
    root = root or os.environ.get("LOG_ROOT")
    if not root:
        root = os.getcwd()
    return os.path.join(root.rstrip("/\\") or root, LOG_FILE_NAME)


@dataclass(frozen=True)
class Config:
    log_file: str = field(default_factory=default_path)
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    timezone: str | None = None


def load_yaml(path: str | None = None) -> dict:
    """Load the optional YAML config file named by *path* or ``CONFIG_PATH``.

    No path yields an empty dict. A file that cannot be read or parsed, or
    is not a mapping, is ignored with a warning.
    """
    path = path or os.environ.get("CONFIG_PATH")
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Cannot load config file %s (%s), using defaults", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring it", path)
        return {}
    return data


def _parse_size(raw_bytes, raw_mb, default: int) -> int:
    # Bytes take precedence over megabytes
    try:
        if raw_bytes is not None:
            size = int(raw_bytes)
        elif raw_mb is not None:
            size = int(float(raw_mb) * 1024 * 1024)
        else:
            return default
    except (TypeError, ValueError, OverflowError):
        logger.warning("Invalid max file size (%r / %r MB), using %d bytes", raw_bytes, raw_mb, default)
        return default

    if size <= 0:
        logger.warning("Max file size must be positive, got %d; using %d bytes", size, default)
        return default
    return size


def load_config(path: str | None = None) -> Config:
    """Build Config from defaults <- YAML file <- environment variables."""
    data = load_yaml(path)

    log_file = os.environ.get("LOG_FILE") or data.get("log_file")
    if not log_file:
        log_file = default_path(os.environ.get("LOG_ROOT") or data.get("log_root"))

    env_bytes = os.environ.get("MAX_FILE_SIZE_BYTES")
    env_mb = os.environ.get("MAX_FILE_SIZE_MB")
    if env_bytes is not None or env_mb is not None:
        max_size = _parse_size(env_bytes, env_mb, DEFAULT_MAX_FILE_SIZE_BYTES)
    else:
        max_size = _parse_size(
            data.get("max_file_size_bytes"),
            data.get("max_file_size_mb"),
            DEFAULT_MAX_FILE_SIZE_BYTES,
        )

    tz_name = os.environ.get("LOG_TIMEZONE") or data.get("timezone") or None
    if tz_name is not None and not isinstance(tz_name, str):
        logger.warning("Timezone must be a name, got %r; ignoring it", tz_name)
        tz_name = None

    return Config(
        log_file=str(log_file),
        max_file_size_bytes=max_size,
        timezone=tz_name,
    )
