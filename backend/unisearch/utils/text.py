import re

HIGHLIGHT_OPEN = "<b>"
HIGHLIGHT_CLOSE = "</b>"

# unicode61 treats "_" as a separator, so underscore-only tokens index nothing
_WORD_CHAR_RE = re.compile(r"[^\W_]")


def build_match_expression(query: str, column: str | None = None) -> str | None:
    """Turn free text into an FTS5 MATCH expression.

    Every whitespace-separated token becomes a quoted prefix term and the
    terms are AND-ed together. With ``column`` set, each term is restricted
    to that column. Returns None when no token carries a letter or digit.
    """
    terms = []
    for token in query.split():
        if not _WORD_CHAR_RE.search(token):
            continue
        term = '"' + token.replace('"', '""') + '"*'
        if column:
            term = f"{column} : {term}"
        terms.append(term)
    if not terms:
        return None
    return " AND ".join(terms)


def like_pattern(query: str) -> str:
    """Substring LIKE pattern; pair with ESCAPE '\\'."""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def mark_occurrences(value: str | None, needle: str) -> str | None:
    """Wrap case-insensitive occurrences of ``needle`` in highlight markers."""
    if not value or not needle.strip():
        return None
    pattern = re.compile(re.escape(needle.strip()), re.IGNORECASE)
    if not pattern.search(value):
        return None
    return pattern.sub(lambda m: f"{HIGHLIGHT_OPEN}{m.group(0)}{HIGHLIGHT_CLOSE}", value)
