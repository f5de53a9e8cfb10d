"""Startup-time helpers for safe config logging."""

import os

from crowdpay.common.logging import logger


SECRET_MARKERS = ["KEY", "SECRET", "PASSWORD", "TOKEN"]


def _safe_env(name: str) -> str:
    """Return env value with simple redaction for secret-like variable names."""

    value = os.getenv(name)
    if value is None:
        return "<unset>"
    if any(secret in name for secret in SECRET_MARKERS):
        return "<redacted>"
    return value


def log_startup_config(service_name: str, keys: list[str]) -> dict[str, str]:
    """Log selected startup config keys for quick troubleshooting."""

    config = {"service": service_name}
    for key in keys:
        config[key] = _safe_env(key)
    logger.info("startup_config=%s", config)
    return config


def warn_missing_credentials(client_id: str, client_secret: str) -> bool:
    """Warn when provider credentials are absent; returns True if any is missing."""

    missing = [
        name
        for name, value in (("PAYPAL_CLIENT_ID", client_id), ("PAYPAL_CLIENT_SECRET", client_secret))
        if not value
    ]
    if missing:
        logger.warning("provider credentials missing keys=%s; provider calls will fail", missing)
        return True
    return False
