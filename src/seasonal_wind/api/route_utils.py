from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException

T = TypeVar("T")

SERVICE_ERROR_RESPONSES = {
    400: {"description": "Input validation or domain rule violation."},
    502: {"description": "Upstream NDBC archive failed or returned an undecodable payload."},
}


def call_service_or_http(
    call: Callable[[], T],
    *,
    logger: logging.Logger,
    endpoint: str,
    context: dict[str, Any] | None = None,
) -> T:
    try:
        return call()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        context_text = ""
        if context:
            context_text = " " + " ".join(f"{key}={value}" for key, value in context.items())
        logger.warning("Upstream NDBC failure on %s endpoint%s: detail=%s", endpoint, context_text, str(exc))
        raise HTTPException(status_code=502, detail=str(exc)) from exc
