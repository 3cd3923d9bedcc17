"""
Logging setup and one-line JSON event records.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

logger = logging.getLogger("slack_idea_bot")


def configure_logging() -> None:
    """Apply LOG_LEVEL (default INFO) to the bot logger, lowering the root level if needed."""
    level = logging.getLevelName((os.getenv("LOG_LEVEL") or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)
    root = logging.getLogger()
    if root.level > level:
        root.setLevel(level)


def log_event(msg: str, **fields: Any) -> None:
    """Log `{"msg": msg, **fields}` as one JSON line; non-JSON values are stringified."""
    logger.info(json.dumps({"msg": msg, **fields}, ensure_ascii=False, default=str))
