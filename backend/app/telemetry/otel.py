from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any

logger = logging.getLogger("app.telemetry")


@contextmanager
def start_span(name: str, attributes: dict[str, Any] | None = None):
    span: dict[str, Any] = {"name": name, "attributes": dict(attributes or {})}
    started = time.monotonic()
    try:
        yield span
    except Exception as exc:
        span["status"] = "error"
        span["error"] = type(exc).__name__
        raise
    else:
        span["status"] = "ok"
    finally:
        span["durationMs"] = round((time.monotonic() - started) * 1000, 1)
        logger.debug(
            "span %s finished status=%s duration_ms=%s",
            name,
            span.get("status", "error"),
            span["durationMs"],
        )
