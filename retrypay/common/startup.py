"""Startup-time helpers for logging the effective settings."""

from retrypay.common.config import CommonSettings
from retrypay.common.logging import logger

SECRET_MARKERS = ("KEY", "SECRET", "PASSWORD", "TOKEN")


def startup_config(config: CommonSettings) -> dict[str, str]:
    """Map each setting's env var name to its effective value, secrets redacted."""

    snapshot = {}
    for field_name in type(config).model_fields:
        env_name = field_name.upper()
        if any(marker in env_name for marker in SECRET_MARKERS):
            snapshot[env_name] = "<redacted>"
        else:
            snapshot[env_name] = str(getattr(config, field_name))
    return snapshot


def log_startup_config(config: CommonSettings) -> None:
    """Log the resolved configuration once when the app boots."""

    logger.info("startup_config=%s", startup_config(config))
