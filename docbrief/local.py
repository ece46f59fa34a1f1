"""Extractive summarization without a network call.

Sentences are scored by the summed corpus frequency of their words and the
top-scoring ones form the short summary.  Derived values come from keyword
cues: sentences about deadlines, dates, amounts or officials feed
``relevance_to_officials``; sentences with obligation wording feed
``action_items``.
"""

import logging
import re
from collections import Counter

logger = logging.getLogger(__name__)

_SENTENCE_END = re.compile(r"[.!?]+")
_WORD = re.compile(r"\w+", re.UNICODE)

_RELEVANCE_CUES = re.compile(
    r"\b(deadline|due|until|dated?|tender|budget|amount|value|cost|fee|"
    r"official|officials|department|ministry|council|authority|committee|"
    r"jan(uary)?|feb(ruary)?|mar(ch)?|apr(il)?|jun(e)?|jul(y)?|aug(ust)?|"
    r"sep(tember)?|oct(ober)?|nov(ember)?|dec(ember)?)\b"
    r"|\d{1,2}[/.-]\d{1,2}[/.-]\d{2,4}|[$€£₹]\s?\d",
    re.IGNORECASE,
)
_ACTION_CUES = re.compile(
    r"\b(must|shall|should|required|requires|submit|prepare|upload|apply|"
    r"register|complete|provide|send|sign|attend|review|approve)\b",
    re.IGNORECASE,
)

_MAX_DERIVED_ITEMS = 3


def summarize_text_local(text: str, num_sentences: int = 5) -> dict | None:
    """Summarize ``text`` extractively.

    Args:
        text:          Extracted document text.
        num_sentences: Number of top-scoring sentences kept.

    Returns:
        A dict with the four structured record fields, or ``None`` when
        ``text`` is blank.
    """
    if not text.strip():
        return None

    sentences = [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]
    word_freq = Counter(w.lower() for s in sentences for w in _WORD.findall(s))

    scored = [
        (sum(word_freq[w.lower()] for w in _WORD.findall(s)), s) for s in sentences
    ]
    # sorted() is stable, so equal scores keep document order.
    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)
    top = [_collapse_ws(s) for _, s in scored[:num_sentences]]

    short_summary = ". ".join(top)
    if not short_summary.endswith("."):
        short_summary += "."

    relevance = _matching(sentences, _RELEVANCE_CUES)
    actions = _matching(sentences, _ACTION_CUES)
    logger.debug(
        "Local summary: %d sentences scored, %d relevance, %d action items",
        len(sentences),
        len(relevance),
        len(actions),
    )

    return {
        "short_summary": short_summary,
        "relevance_to_officials": relevance,
        "action_items": actions,
        "confidence_estimate": "medium",
    }


def _matching(sentences: list[str], pattern: re.Pattern) -> list[str]:
    hits: list[str] = []
    for sentence in sentences:
        item = _collapse_ws(sentence)
        if pattern.search(item) and item not in hits:
            hits.append(item)
        if len(hits) >= _MAX_DERIVED_ITEMS:
            break
    return hits


def _collapse_ws(text: str) -> str:
    return " ".join(text.split())
