import json

import pytest

import slack_idea_bot.notion as notion
from slack_idea_bot.errors import TicketStoreError
from slack_idea_bot.notion import NotionClient, TicketFiler, build_ticket, page_url, ticket_title


class FakeNotion:
    def __init__(self, resp=None, exc=None):
        self.resp = resp if resp is not None else {"id": "1234-abcd-5678"}
        self.exc = exc
        self.created = []

    def create_page(self, database_id, properties, children=None):
        self.created.append((database_id, properties, children))
        if self.exc:
            raise self.exc
        return self.resp


def test_ticket_title_short_text_unchanged():
    assert ticket_title("x" * 100) == "x" * 100


def test_ticket_title_long_text_truncated():
    text = "".join(str(i % 10) for i in range(150))
    assert ticket_title(text) == text[:100] + "..."


def test_page_url_strips_dashes():
    assert page_url("59833787-2cf9-4fdf-8782-e53db20768a5") == (
        "https://notion.so/598337872cf94fdf8782e53db20768a5"
    )


def test_build_ticket_fields():
    props, children = build_ticket("a great idea", "U123")
    assert props["Title"]["title"][0]["text"]["content"] == "a great idea"
    assert props["Status"] == {"select": {"name": "New"}}
    assert props["Source"]["rich_text"][0]["text"]["content"] == "Slack User: U123"
    assert children[0]["paragraph"]["rich_text"][0]["text"]["content"] == "a great idea"


def test_file_ticket_returns_url():
    fake = FakeNotion()
    filer = TicketFiler(fake, "db1")
    assert filer.file_ticket("idea", "U1") == "https://notion.so/1234abcd5678"
    assert fake.created[0][0] == "db1"


def test_file_ticket_store_failure():
    filer = TicketFiler(FakeNotion(exc=RuntimeError("503")), "db1")
    with pytest.raises(TicketStoreError):
        filer.file_ticket("idea", "U1")


def test_file_ticket_missing_id():
    with pytest.raises(TicketStoreError):
        TicketFiler(FakeNotion(resp={"object": "error"}), "db1").file_ticket("idea", "U1")


def test_file_ticket_requires_database():
    with pytest.raises(TicketStoreError):
        TicketFiler(FakeNotion(), None).file_ticket("idea", "U1")


def test_notion_client_posts_page(monkeypatch):
    seen = {}

    class Resp:
        def __enter__(self):
            return self

        def __exit__(self, *_a):
            return False

        def read(self):
            return json.dumps({"id": "p-1"}).encode("utf-8")

    def fake_urlopen(req, timeout=None):
        seen["url"] = req.full_url
        seen["auth"] = req.get_header("Authorization")
        seen["body"] = json.loads(req.data.decode("utf-8"))
        return Resp()

    monkeypatch.setattr(notion.urllib.request, "urlopen", fake_urlopen)
    client = NotionClient("secret")
    props, children = build_ticket("idea", "U1")

    assert client.create_page("db1", props, children) == {"id": "p-1"}
    assert seen["url"] == "https://api.notion.com/v1/pages"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"]["parent"] == {"database_id": "db1"}
    assert seen["body"]["children"] == children
