"""Environment-driven settings for the downloader backend."""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _int_env(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


def _float_env(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


def _bool_env(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _origins_env(name, default="*"):
    raw = os.environ.get(name, default).strip()
    if raw in ("", "*"):
        return "*"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


HOST = os.environ.get("HOST", "0.0.0.0")
PORT = _int_env("PORT", 3000)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = _origins_env("CORS_ORIGINS")

RELAY_CHUNK_SIZE = _int_env("RELAY_CHUNK_SIZE", 64 * 1024)
UPSTREAM_CONNECT_TIMEOUT = _float_env("UPSTREAM_CONNECT_TIMEOUT", 15.0)
UPSTREAM_USER_AGENT = os.environ.get("UPSTREAM_USER_AGENT", DEFAULT_USER_AGENT)

YTDLP_NO_CHECK_CERTIFICATE = _bool_env("YTDLP_NO_CHECK_CERTIFICATE", True)
