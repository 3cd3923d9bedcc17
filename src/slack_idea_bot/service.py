"""
Message and slash-command orchestration.

All mutable state (context windows, active backend) lives on the injected
collaborators, so each BotService is independent.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from slack_sdk.errors import SlackApiError

from . import commands, ideas
from .context_store import ContextStore, ConversationTurn, Role
from .errors import TicketStoreError, TransportError
from .history import channel_history
from .llm import BackendSelector
from .logs import log_event

logger = logging.getLogger(__name__)

Say = Callable[..., Any]


def _send(say: Say, text: str) -> None:
    try:
        say(text)
    except SlackApiError as e:
        raise TransportError(f"say failed: {e.response.get('error')}") from e


class BotService:
    def __init__(
        self,
        store: ContextStore,
        selector: BackendSelector,
        tickets: Any,
        history_count: int = 20,
    ) -> None:
        self.store = store
        self.selector = selector
        self.tickets = tickets
        self.history_count = history_count

    # ----- Message path -----
    def _file_ticket(self, text: str, user_id: str) -> str | None:
        # Ticket failures are logged; the reply still goes out without the link.
        try:
            url = self.tickets.file_ticket(text, user_id)
        except TicketStoreError as e:
            logger.exception("Error creating Notion ticket")
            log_event("ticket_error", user=user_id, error=str(e))
            return None
        log_event("ticket_created", user=user_id, url=url)
        return url

    def reply_to(self, user_id: str, text: str) -> str:
        window = self.store.append(user_id, ConversationTurn(Role.USER, text))

        is_idea = ideas.classify(self.selector, text)
        log_event("idea_classified", user=user_id, idea=is_idea)
        ticket_url = self._file_ticket(text, user_id) if is_idea else None

        backend = self.selector.current()
        t0 = time.time()
        reply = self.selector.complete_chat(window)
        log_event(
            "llm_ok",
            kind="chat",
            backend=backend.value,
            ms=int((time.time() - t0) * 1000),
            turns=len(window),
            out_chars=len(reply),
        )
        self.store.append(user_id, ConversationTurn(Role.ASSISTANT, reply))
        return commands.annotate_ticket(reply, ticket_url)

    def handle_message(self, message: dict[str, Any], say: Say) -> None:
        user_id = message.get("user")
        text = message.get("text")
        if not user_id or not text:
            log_event("ignored_message", subtype=message.get("subtype"))
            return
        log_event("message_received", user=user_id, chars=len(text))
        try:
            reply = self.reply_to(user_id, text)
        except Exception as e:
            logger.exception("Error processing message")
            log_event("message_failed", user=user_id, error=str(e))
            _send(say, commands.MESSAGE_ERROR_TEXT)
            return
        _send(say, reply)
        log_event("reply_sent", user=user_id, chars=len(reply))

    # ----- Commands (acked by the transport before these run) -----
    def summarize(self, client: Any, channel_id: str) -> str:
        messages = channel_history(client, channel_id, self.history_count)
        prompt = commands.build_summary_prompt(commands.history_text(messages))
        backend = self.selector.current()
        t0 = time.time()
        summary = self.selector.complete_single(prompt)
        log_event(
            "llm_ok",
            kind="summarize",
            backend=backend.value,
            ms=int((time.time() - t0) * 1000),
            prompt_chars=len(prompt),
            out_chars=len(summary),
        )
        return commands.render_summary(backend.label, summary)

    def handle_summarize(self, command: dict[str, Any], say: Say, client: Any) -> None:
        channel_id = command.get("channel_id") or ""
        try:
            text = self.summarize(client, channel_id)
        except Exception as e:
            logger.exception("Error processing summarize command")
            log_event("summarize_failed", channel=channel_id, error=str(e))
            _send(say, commands.SUMMARIZE_ERROR_TEXT)
            return
        _send(say, text)
        log_event("summarize_ok", channel=channel_id)

    def handle_clear_context(self, command: dict[str, Any], say: Say) -> None:
        user_id = command.get("user_id") or ""
        self.store.clear(user_id)
        log_event("context_cleared", user=user_id)
        _send(say, commands.CONTEXT_CLEARED_TEXT)

    def handle_switch_ai(self, command: dict[str, Any], say: Say) -> None:
        backend = self.selector.toggle()
        log_event("ai_switched", user=command.get("user_id"), backend=backend.value)
        _send(say, commands.render_switched(backend.label))
