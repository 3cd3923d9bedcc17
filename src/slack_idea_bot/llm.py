"""
LLM backends behind one completion contract.

GPT:    OpenAI Chat Completions (structured turn arrays).
CLAUDE: Anthropic text completions (flat "Human:/Assistant:" transcripts),
        sent through Bedrock (boto3) or the anthropic SDK.
"""

from __future__ import annotations

import enum
import importlib
import json
import threading
from collections.abc import Sequence
from typing import Any

from .context_store import ConversationTurn, Role
from .errors import BackendError


class Backend(str, enum.Enum):
    GPT = "gpt"
    CLAUDE = "claude"

    @property
    def label(self) -> str:
        return self.value.upper()


def _boto3():
    # Allow tests to monkeypatch module-level `boto3` symbol.
    return globals().get("boto3") or importlib.import_module("boto3")


def _bedrock_client():
    return _boto3().client("bedrock-runtime")


class GptBackend:
    """OpenAI chat-style backend."""

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        max_tokens: int = 150,
        timeout: float = 10,
        client: Any = None,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _openai(self) -> Any:
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    def _create(self, messages: list[dict[str, str]], max_tokens: int) -> str:
        try:
            resp = self._openai().chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
            )
        except Exception as e:
            raise BackendError(f"openai call failed: {e}") from e
        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise BackendError("openai response missing choices[0].message.content") from e
        if not isinstance(content, str):
            raise BackendError("openai response content is not text")
        return content.strip()

    def complete_chat(self, turns: Sequence[ConversationTurn]) -> str:
        return self._create([t.as_message() for t in turns], self.max_tokens)

    def complete_single(self, prompt: str, max_tokens: int | None = None) -> str:
        return self._create(
            [{"role": Role.USER.value, "content": prompt}], max_tokens or self.max_tokens
        )


def render_transcript(turns: Sequence[ConversationTurn]) -> str:
    """Flatten turns to the Human/Assistant prompt format, ending on an open Assistant turn."""
    lines = [
        f"\n\n{'Human' if t.role is Role.USER else 'Assistant'}: {t.content}" for t in turns
    ]
    return "".join(lines) + "\n\nAssistant:"


class ClaudeBackend:
    """Anthropic text-completion backend.

    ``provider`` is ``"bedrock"`` (boto3 ``bedrock-runtime``) or ``"anthropic"``
    (the ``anthropic`` SDK with ``api_key``). Both take ``prompt`` and
    ``max_tokens_to_sample`` and answer with ``completion``.
    """

    def __init__(
        self,
        model: str,
        provider: str = "bedrock",
        api_key: str | None = None,
        max_tokens: int = 150,
        timeout: float = 10,
        client: Any = None,
    ) -> None:
        self.model = model
        self.provider = provider
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _anthropic(self) -> Any:
        if self._client is None:
            from anthropic import Anthropic

            self._client = Anthropic(api_key=self._api_key, timeout=self._timeout)
        return self._client

    def _invoke_bedrock(self, prompt: str, max_tokens: int) -> Any:
        client = _bedrock_client()
        resp = client.invoke_model(
            modelId=self.model,
            body=json.dumps({"prompt": prompt, "max_tokens_to_sample": max_tokens}),
            accept="application/json",
            contentType="application/json",
        )
        data = json.loads(resp["body"].read())
        return data.get("completion") if isinstance(data, dict) else None

    def _invoke_anthropic(self, prompt: str, max_tokens: int) -> Any:
        resp = self._anthropic().completions.create(
            model=self.model,
            prompt=prompt,
            max_tokens_to_sample=max_tokens,
        )
        return getattr(resp, "completion", None)

    def _complete(self, prompt: str, max_tokens: int) -> str:
        try:
            if self.provider == "anthropic":
                text = self._invoke_anthropic(prompt, max_tokens)
            else:
                text = self._invoke_bedrock(prompt, max_tokens)
        except Exception as e:
            raise BackendError(f"claude call failed ({self.provider}): {e}") from e
        if not isinstance(text, str):
            raise BackendError("claude response missing 'completion'")
        return text.strip()

    def complete_chat(self, turns: Sequence[ConversationTurn]) -> str:
        return self._complete(render_transcript(turns), self.max_tokens)

    def complete_single(self, prompt: str, max_tokens: int | None = None) -> str:
        return self._complete(
            render_transcript([ConversationTurn(Role.USER, prompt)]),
            max_tokens or self.max_tokens,
        )


class BackendSelector:
    """Holds the active-backend flag and forwards completions to that backend."""

    def __init__(self, backends: dict[Backend, Any], initial: Backend = Backend.GPT) -> None:
        self._backends = backends
        self._active = initial
        self._lock = threading.Lock()

    def current(self) -> Backend:
        return self._active

    def toggle(self) -> Backend:
        with self._lock:
            self._active = Backend.CLAUDE if self._active is Backend.GPT else Backend.GPT
            return self._active

    def _backend(self) -> Any:
        return self._backends[self._active]

    def complete_chat(self, turns: Sequence[ConversationTurn]) -> str:
        return self._backend().complete_chat(turns)

    def complete_single(self, prompt: str, max_tokens: int | None = None) -> str:
        return self._backend().complete_single(prompt, max_tokens=max_tokens)


def build_selector(settings) -> BackendSelector:
    backends = {
        Backend.GPT: GptBackend(
            settings.gpt_model,
            api_key=settings.openai_api_key,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.llm_timeout_seconds,
        ),
        Backend.CLAUDE: ClaudeBackend(
            settings.claude_model,
            provider=settings.claude_provider,
            api_key=settings.anthropic_api_key,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.llm_timeout_seconds,
        ),
    }
    return BackendSelector(backends, initial=Backend(settings.default_backend))
