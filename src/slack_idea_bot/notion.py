"""
Minimal Notion API client using stdlib urllib, plus the idea-ticket filer.
"""

from __future__ import annotations

import json
import urllib.request
from typing import Any

from .errors import TicketStoreError

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
NOTION_PAGE_BASE_URL = "https://notion.so/"
TITLE_MAX_CHARS = 100


class NotionClient:
    def __init__(self, api_key: str, timeout: float = 8) -> None:
        self.api_key = api_key
        self.timeout = timeout

    # ----- Helpers -----
    def _post_json(self, path: str, payload: dict[str, Any]) -> Any:
        req = urllib.request.Request(
            NOTION_API_BASE + path,
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            headers={
                "User-Agent": "SlackIdeaBot/1.0",
                "Authorization": f"Bearer {self.api_key}",
                "Notion-Version": NOTION_VERSION,
                "Content-Type": "application/json",
            },
            method="POST",
        )
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
            data = resp.read()
        return json.loads(data.decode("utf-8"))

    # ----- Public APIs -----
    def create_page(
        self,
        database_id: str,
        properties: dict[str, Any],
        children: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "parent": {"database_id": database_id},
            "properties": properties,
        }
        if children:
            payload["children"] = children
        return self._post_json("/pages", payload)


def ticket_title(text: str) -> str:
    return text[:TITLE_MAX_CHARS] + ("..." if len(text) > TITLE_MAX_CHARS else "")


def page_url(page_id: str) -> str:
    return NOTION_PAGE_BASE_URL + page_id.replace("-", "")


def _rich_text(content: str) -> list[dict[str, Any]]:
    return [{"text": {"content": content}}]


def build_ticket(text: str, user_id: str) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """Return (properties, children) for an idea page."""
    properties = {
        "Title": {"title": _rich_text(ticket_title(text))},
        "Status": {"select": {"name": "New"}},
        "Source": {"rich_text": _rich_text(f"Slack User: {user_id}")},
    }
    children = [
        {
            "object": "block",
            "type": "paragraph",
            "paragraph": {"rich_text": _rich_text(text)},
        }
    ]
    return properties, children


class TicketFiler:
    def __init__(self, client: NotionClient, database_id: str | None) -> None:
        self.client = client
        self.database_id = database_id

    def file_ticket(self, text: str, user_id: str) -> str:
        """Create an idea page and return its display URL."""
        if not self.database_id:
            raise TicketStoreError("NOTION_DATABASE_ID not configured")
        properties, children = build_ticket(text, user_id)
        try:
            resp = self.client.create_page(self.database_id, properties, children)
        except Exception as e:
            raise TicketStoreError(f"notion create page failed: {e}") from e
        page_id = resp.get("id") if isinstance(resp, dict) else None
        if not isinstance(page_id, str) or not page_id:
            raise TicketStoreError("notion response missing page id")
        return page_url(page_id)
