"""Title normalization and lexical topic matching.

A topic signature is the sorted set of the first few meaningful words
of a title. Two titles denote the same story when their signatures are
equal or when enough of the smaller signature's words appear in the
other one.
"""

from __future__ import annotations

import re

MIN_WORD_LENGTH = 4
MAX_SIGNATURE_WORDS = 8
TOPIC_OVERLAP_THRESHOLD = 0.6

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Canonicalize a title into a comparable word signature.

    Lowercases, drops punctuation, discards words shorter than
    ``MIN_WORD_LENGTH``, keeps the first ``MAX_SIGNATURE_WORDS`` of the
    rest and returns them sorted and space-joined. Empty or
    all-short-word titles produce an empty signature.
    """
    text = _NON_ALNUM.sub("", title.lower())
    text = _WHITESPACE.sub(" ", text).strip()
    words = [w for w in text.split(" ") if len(w) >= MIN_WORD_LENGTH]
    return " ".join(sorted(words[:MAX_SIGNATURE_WORDS]))


def _word_set(signature: str) -> set[str]:
    return {w for w in signature.split(" ") if w}


def topic_overlap(title_a: str, title_b: str) -> float:
    """Share of the smaller signature's words found in the other one.

    Returns 1.0 for identical non-empty signatures and 0.0 when either
    signature is empty.
    """
    words_a = _word_set(normalize_title(title_a))
    words_b = _word_set(normalize_title(title_b))
    min_size = min(len(words_a), len(words_b))
    if min_size == 0:
        return 0.0
    return len(words_a & words_b) / min_size


def same_topic(title_a: str, title_b: str) -> bool:
    """Whether two titles report the same story.

    Equal signatures always match, including two empty ones.
    """
    if normalize_title(title_a) == normalize_title(title_b):
        return True
    return topic_overlap(title_a, title_b) >= TOPIC_OVERLAP_THRESHOLD
