import logging
import os

_CONFIGURED = False
_LEVEL_NAMES = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _resolve_log_level(override: str | None = None) -> int:
    raw = (override or os.getenv("LOG_LEVEL", "INFO")).strip().upper()
    if raw in _LEVEL_NAMES:
        return getattr(logging, raw, logging.INFO)
    return logging.INFO


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once; later calls only adjust the level when one is given."""
    global _CONFIGURED
    resolved = _resolve_log_level(level)
    if _CONFIGURED:
        if level is not None:
            logging.getLogger().setLevel(resolved)
        return

    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("uvicorn.error").setLevel(resolved)
    logging.getLogger("uvicorn.access").setLevel(resolved)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    _CONFIGURED = True
