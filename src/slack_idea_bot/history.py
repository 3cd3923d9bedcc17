"""
Slack channel history fetch for the summarize command.
"""

from __future__ import annotations

import logging
from typing import Any

from slack_sdk.errors import SlackApiError

from .errors import HistoryFetchError

logger = logging.getLogger(__name__)


def fetch_history(client: Any, channel_id: str, count: int = 10) -> list[dict[str, Any]]:
    """Return up to `count` messages, newest first (Slack's order)."""
    try:
        resp = client.conversations_history(channel=channel_id, limit=count)
    except SlackApiError as e:
        raise HistoryFetchError(f"conversations.history failed: {e.response.get('error')}") from e
    except Exception as e:
        raise HistoryFetchError(f"conversations.history failed: {e}") from e
    msgs = resp.get("messages") or []
    return list(msgs) if isinstance(msgs, list) else []


def channel_history(client: Any, channel_id: str, count: int = 10) -> list[dict[str, Any]]:
    """Like fetch_history, but degrades to an empty list on failure."""
    try:
        return fetch_history(client, channel_id, count)
    except HistoryFetchError:
        logger.exception("Error fetching channel history")
        return []
