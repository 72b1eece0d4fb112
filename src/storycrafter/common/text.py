from __future__ import annotations

import re

WORD_PATTERN = re.compile(r"\S+")
_WHITESPACE = re.compile(r"\s+")
_TRAILING_PUNCTUATION = ".!?;:,"


def slugify(text: str) -> str:
    cleaned = "".join(ch.lower() if ch.isalnum() else "-" for ch in text)
    return "-".join(filter(None, cleaned.split("-")))[:80]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def clean_fragment(text: str) -> str:
    """Normalize a user phrase so it can sit in the middle of a sentence."""
    return collapse_whitespace(text).rstrip(_TRAILING_PUNCTUATION).strip()


def count_words(text: str) -> int:
    return len(WORD_PATTERN.findall(text))


def capitalize_first(sentence: str) -> str:
    if not sentence:
        return sentence
    return sentence[0].upper() + sentence[1:]


_ARTICLES = frozenset({"a", "an", "the"})
_PHRASE_BREAKS = frozenset(
    {
        "who", "whose", "that", "which", "where", "with", "from", "of", "in", "on",
        "at", "under", "above", "beneath", "near", "for", "by", "and", "between",
        "across", "over", "beyond", "along", "below", "around", "inside", "through",
        "beside", "behind", "to", "like",
    }
)


def clip_words(text: str, limit: int) -> str:
    words = text.split()
    return text if len(words) <= limit else " ".join(words[:limit])


def short_reference(phrase: str, max_words: int = 3) -> str:
    """Shorter way to mention ``phrase`` again, e.g. 'an old keeper who waits' -> 'the keeper'."""
    words = phrase.split()
    if len(words) <= max_words:
        return phrase
    head: list[str] = []
    for word in words:
        if head and word.lower().strip(",;:") in _PHRASE_BREAKS:
            break
        head.append(word.rstrip(",;:"))
    if head[0].lower() in _ARTICLES and len(head) > 1:
        return f"the {head[-1]}"
    return " ".join(head[:2])
