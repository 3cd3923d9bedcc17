"""
Slack transport: AWS Lambda entry point, Bolt app wiring, and local server.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

from slack_bolt import App, BoltResponse
from slack_bolt.adapter.aws_lambda import SlackRequestHandler

from . import commands
from .config import Settings, load_settings
from .context_store import ContextStore
from .errors import TransportError
from .llm import build_selector
from .logs import configure_logging, log_event
from .notion import NotionClient, TicketFiler
from .service import BotService

logger = logging.getLogger(__name__)

_slack_handler: SlackRequestHandler | None = None


def _rid(context: Any) -> str | None:
    try:
        return getattr(context, "aws_request_id", None)
    except Exception:
        return None


def _response(status: int, body: dict[str, Any] | None = None) -> dict[str, Any]:
    res: dict[str, Any] = {"statusCode": status}
    if body is not None:
        res["headers"] = {"Content-Type": "application/json"}
        res["body"] = json.dumps(body, ensure_ascii=False)
    return res


def _get_body(event: dict[str, Any]) -> dict[str, Any]:
    body = event.get("body")
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body or b"")
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    try:
        parsed = json.loads(body or "{}")
    except ValueError:
        # Slash commands arrive form-encoded; only JSON bodies matter here
        return {}
    return parsed if isinstance(parsed, dict) else {}


def build_service(settings: Settings) -> BotService:
    tickets = TicketFiler(
        NotionClient(settings.notion_api_key or "", timeout=settings.http_timeout_seconds),
        settings.notion_database_id,
    )
    return BotService(
        ContextStore(settings.max_context_length),
        build_selector(settings),
        tickets,
        history_count=settings.summary_history_count,
    )


def ack_now(ack):
    ack()


def skip_redelivery(request, next):
    """Answer Slack's redeliveries with a bare 200 so nothing is processed twice."""
    retry_num = request.headers.get("x-slack-retry-num")
    if retry_num:
        log_event(
            "redelivery_ignored",
            retry=retry_num[0],
            reason=(request.headers.get("x-slack-retry-reason") or [None])[0],
        )
        return BoltResponse(status=200, body="")
    return next()


def _deliver(listener: str, fn, *args) -> None:
    # Lazy listeners run after the ack; Bolt only logs what escapes them.
    try:
        fn(*args)
    except TransportError as e:
        logger.exception("Slack send failed in %s", listener)
        log_event("transport_error", listener=listener, error=str(e))


def register_listeners(app: App, service: BotService) -> None:
    """Each listener acks first; the work runs as a Bolt lazy listener."""

    def reply_to_message(message, say):
        _deliver("message", service.handle_message, message, say)

    def run_summarize(command, say, client):
        _deliver(commands.CMD_SUMMARIZE, service.handle_summarize, command, say, client)

    def run_clear_context(command, say):
        _deliver(commands.CMD_CLEAR_CONTEXT, service.handle_clear_context, command, say)

    def run_switch_ai(command, say):
        _deliver(commands.CMD_SWITCH_AI, service.handle_switch_ai, command, say)

    app.message()(ack=ack_now, lazy=[reply_to_message])
    app.command(commands.CMD_SUMMARIZE)(ack=ack_now, lazy=[run_summarize])
    app.command(commands.CMD_CLEAR_CONTEXT)(ack=ack_now, lazy=[run_clear_context])
    app.command(commands.CMD_SWITCH_AI)(ack=ack_now, lazy=[run_switch_ai])


def build_app(
    settings: Settings,
    service: BotService | None = None,
    process_before_response: bool = True,
) -> App:
    """Bolt app with listeners bound to `service` (built from settings if omitted).

    Lambda needs process_before_response=True; lazy listeners then run in a
    separate async invocation of the same function.
    """
    app = App(
        token=settings.slack_bot_token,
        signing_secret=settings.slack_signing_secret,
        process_before_response=process_before_response,
        token_verification_enabled=False,
    )
    app.use(skip_redelivery)
    register_listeners(app, service or build_service(settings))
    return app


def _get_slack_handler() -> SlackRequestHandler:
    # Reused across warm invocations so context windows survive between events.
    global _slack_handler
    if _slack_handler is None:
        _slack_handler = SlackRequestHandler(build_app(load_settings()))
    return _slack_handler


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    configure_logging()

    payload = _get_body(event)
    if payload.get("type") == "url_verification":
        log_event("url_verification", rid=_rid(context))
        return _response(200, {"challenge": payload.get("challenge")})

    log_event(
        "event_received",
        rid=_rid(context),
        type=payload.get("type"),
        event_type=(payload.get("event") or {}).get("type")
        if isinstance(payload.get("event"), dict)
        else None,
    )
    return _get_slack_handler().handle(event, context)


def main() -> None:
    """Run Bolt's built-in HTTP server on PORT, serving /slack/events."""
    logging.basicConfig(level=logging.INFO)
    configure_logging()
    settings = load_settings()
    app = build_app(settings, process_before_response=False)
    log_event("app_start", port=settings.port)
    app.start(port=settings.port, path="/slack/events")
