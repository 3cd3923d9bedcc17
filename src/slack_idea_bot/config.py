"""
Bot settings read from the process environment.

Every setting has a default, so tests and local runs need no env file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _setting(name: str, default: str | None = None) -> str | None:
    # Unset and empty are different: an empty value is kept as-is.
    return os.environ.get(name, default)


@dataclass(frozen=True)
class Settings:
    slack_signing_secret: str | None
    slack_bot_token: str | None
    slack_app_token: str | None
    openai_api_key: str | None
    anthropic_api_key: str | None
    notion_api_key: str | None
    notion_database_id: str | None
    port: int
    default_backend: str
    gpt_model: str
    claude_provider: str
    claude_model: str
    llm_max_tokens: int
    llm_timeout_seconds: int
    http_timeout_seconds: int
    max_context_length: int
    summary_history_count: int


def load_settings() -> Settings:
    """Build Settings from SLACK_*, OPENAI_*, ANTHROPIC_*, NOTION_* and tuning env vars."""

    claude_provider = (_setting("CLAUDE_PROVIDER", "bedrock") or "bedrock").lower()
    # Bedrock and the Anthropic API name the same model differently
    default_claude = "anthropic.claude-v2" if claude_provider == "bedrock" else "claude-2"

    default_backend = (_setting("DEFAULT_AI", "gpt") or "gpt").lower()
    if default_backend not in ("gpt", "claude"):
        default_backend = "gpt"

    return Settings(
        slack_signing_secret=_setting("SLACK_SIGNING_SECRET"),
        slack_bot_token=_setting("SLACK_BOT_TOKEN"),
        slack_app_token=_setting("SLACK_APP_TOKEN"),
        openai_api_key=_setting("OPENAI_API_KEY"),
        anthropic_api_key=_setting("ANTHROPIC_API_KEY"),
        notion_api_key=_setting("NOTION_API_KEY"),
        notion_database_id=_setting("NOTION_DATABASE_ID"),
        port=int(_setting("PORT", "3000") or 3000),
        default_backend=default_backend,
        gpt_model=_setting("GPT_MODEL", "gpt-3.5-turbo") or "gpt-3.5-turbo",
        claude_provider=claude_provider,
        claude_model=_setting("CLAUDE_MODEL", default_claude) or default_claude,
        llm_max_tokens=int(_setting("LLM_MAX_TOKENS", "150") or 150),
        llm_timeout_seconds=int(_setting("LLM_TIMEOUT_SECONDS", "10") or 10),
        http_timeout_seconds=int(_setting("HTTP_TIMEOUT_SECONDS", "8") or 8),
        max_context_length=int(_setting("MAX_CONTEXT_LENGTH", "4096") or 4096),
        summary_history_count=int(_setting("SUMMARY_HISTORY_COUNT", "20") or 20),
    )
