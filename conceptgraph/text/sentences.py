"""
Regex sentence splitting used by every fallback path.

This is a cheap approximation: a sentence ends at a run of ``.``, ``!`` or
``?`` followed by whitespace or the end of the text. Abbreviations and
decimals are not special-cased.
"""

import re
from collections.abc import Iterator

_TERMINATOR = re.compile(r"[.!?]+(?=\s|$)")


class SentenceSequence:
    """Lazy, restartable iterable over the sentences of a text."""

    def __init__(self, text: str):
        self.text = text or ""

    def __iter__(self) -> Iterator[str]:
        start = 0
        for match in _TERMINATOR.finditer(self.text):
            sentence = self.text[start:match.end()].strip()
            start = match.end()
            if sentence:
                yield sentence
        tail = self.text[start:].strip()
        if tail:
            yield tail


def split_sentences(text: str) -> SentenceSequence:
    """Split text into sentence-like substrings."""
    return SentenceSequence(text)


def leading_sentences(text: str, max_chars: int) -> str:
    """
    Collect leading sentences while the joined result fits ``max_chars``.

    If the first sentence alone is longer than ``max_chars`` it is cut.
    """
    parts: list[str] = []
    length = 0
    for sentence in split_sentences(text):
        added = len(sentence) + (1 if parts else 0)
        if length + added > max_chars:
            break
        parts.append(sentence)
        length += added

    if not parts:
        return text.strip()[:max_chars].strip()
    return " ".join(parts)
