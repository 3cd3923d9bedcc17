"""
Error taxonomy shared by the bot components.
"""

from __future__ import annotations


class BotError(Exception):
    """Base class for failures raised by bot components."""


class TransportError(BotError):
    """Slack event verification or message send failed."""


class BackendError(BotError):
    """LLM call failed (network, auth, timeout) or returned a malformed payload."""


class TicketStoreError(BotError):
    """Notion page creation failed."""


class HistoryFetchError(BotError):
    """Slack channel history could not be retrieved."""
