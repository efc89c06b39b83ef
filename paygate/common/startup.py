"""Startup-time helpers for safe config logging."""

from paygate.common.config import settings
from paygate.common.logging import logger

_SECRET_MARKERS = ("key", "secret", "password", "token")


def _safe_value(field: str) -> str:
    """Return a settings value as text, redacted for secret-like field names."""

    if any(marker in field for marker in _SECRET_MARKERS):
        return "<redacted>"
    value = getattr(settings, field, None)
    if value is None:
        return "<unset>"
    return str(value)


def log_startup_config(service_name: str, fields: list[str]) -> None:
    """Log the resolved value of selected settings fields for troubleshooting."""

    config = {"service": service_name}
    config.update({field: _safe_value(field) for field in fields})
    logger.info("startup_config=%s", config)
