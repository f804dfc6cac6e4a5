"""
Trigram string similarity with the same semantics as PostgreSQL pg_trgm.

Each alphanumeric word is lower-cased and padded with two spaces in front and
one behind before being cut into trigrams, so "cat" yields
{"  c", " ca", "cat", "at "}. Similarity is the Jaccard ratio of the two
trigram sets.
"""
import re

_WORD_RE = re.compile(r"[^\W_]+")


def trigrams(value: str) -> set[str]:
    grams: set[str] = set()
    for word in _WORD_RE.findall(value.lower()):
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            grams.add(padded[i:i + 3])
    return grams


def similarity(a: str | None, b: str | None) -> float:
    if not a or not b:
        return 0.0
    left = trigrams(a)
    right = trigrams(b)
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)
