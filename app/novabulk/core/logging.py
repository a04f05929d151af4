from __future__ import annotations

import json
import logging

from app.novabulk.core.config import settings


def configure_logging() -> None:
    level = logging.DEBUG if settings.ENVIRONMENT == "development" else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def log_json(logger: logging.Logger, payload: dict) -> None:
    """Emit one structured event per line; `event` stays the first key for grepping."""
    event = payload.get("event")
    ordered = {"event": event, **payload} if event else payload
    logger.info(json.dumps(ordered, ensure_ascii=False, default=str))
