import pytest

from slack_idea_bot import ideas
from slack_idea_bot.errors import BackendError


class StubSelector:
    def __init__(self, answer=None, exc=None):
        self.answer = answer
        self.exc = exc
        self.prompts = []

    def complete_single(self, prompt, max_tokens=None):
        self.prompts.append((prompt, max_tokens))
        if self.exc:
            raise self.exc
        return self.answer


@pytest.mark.parametrize(
    "answer,expect",
    [
        ("true", True),
        (" TRUE\n", True),
        ("false", False),
        ("I don't know", False),
        ("true.", False),
        ("", False),
    ],
)
def test_classify_answers(answer, expect):
    sel = StubSelector(answer=answer)
    assert ideas.classify(sel, "We should build a dashboard") is expect


def test_classify_prompt_and_token_limit():
    sel = StubSelector(answer="true")
    ideas.classify(sel, "We should build a dashboard")
    prompt, max_tokens = sel.prompts[0]
    assert 'Message: "We should build a dashboard"' in prompt
    assert '"true" or "false"' in prompt
    assert max_tokens == ideas.CLASSIFY_MAX_TOKENS


@pytest.mark.parametrize("exc", [BackendError("down"), RuntimeError("boom")])
def test_classify_fails_closed(exc):
    assert ideas.classify(StubSelector(exc=exc), "anything") is False
