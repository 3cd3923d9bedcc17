"""
Idea classifier: one short completion deciding whether a message is a proposal.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

CLASSIFY_MAX_TOKENS = 10


def build_classify_prompt(text: str) -> str:
    return (
        "Does this message contain a new idea or proposal? "
        'Respond with only "true" or "false". '
        f'Message: "{text}"'
    )


def classify(selector, text: str) -> bool:
    """Return True iff the active backend answers exactly "true".

    Fails closed: any backend error counts as "not an idea".
    """
    try:
        out = selector.complete_single(build_classify_prompt(text), max_tokens=CLASSIFY_MAX_TOKENS)
    except Exception:
        logger.exception("Idea classification failed; treating as not an idea")
        return False
    return (out or "").strip().lower() == "true"
