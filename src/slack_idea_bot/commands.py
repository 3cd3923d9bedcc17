"""
Slash command names, fixed reply texts, and prompt/reply rendering utilities.
"""

from __future__ import annotations

from typing import Any

CMD_SUMMARIZE = "/summarize"
CMD_CLEAR_CONTEXT = "/clear_context"
CMD_SWITCH_AI = "/switch_ai"

MESSAGE_ERROR_TEXT = "Sorry, there was an error processing your request."
SUMMARIZE_ERROR_TEXT = "Sorry, there was an error summarizing the messages."
CONTEXT_CLEARED_TEXT = "Conversation context has been cleared."


def history_text(messages: list[dict[str, Any]]) -> str:
    """Join message texts oldest-first; Slack returns history newest-first."""
    return "\n".join((m.get("text") or "") for m in reversed(messages))


def build_summary_prompt(conversation: str) -> str:
    return f"Please summarize the following conversation:\n\n{conversation}\n\nSummary:"


def render_summary(backend_label: str, summary: str) -> str:
    return f"Recent conversation summary (using {backend_label}):\n{summary}"


def render_switched(backend_label: str) -> str:
    return f"AI model switched to {backend_label}"


def annotate_ticket(reply: str, ticket_url: str | None) -> str:
    if not ticket_url:
        return reply
    return reply + f"\n\nI've created a Notion ticket for your idea: {ticket_url}"
