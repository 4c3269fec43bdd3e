"""Response cleanup and title helpers."""

import re

from vault_llm.config.assistant import Mode

QUERY_TITLE_CHARS = 50

_LEADING_FENCE = re.compile(r"\A```m(?:d|arkdown)\s*\n", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n```\s*\Z")
_MARKDOWN_FENCE = re.compile(r"```m(?:d|arkdown)", re.IGNORECASE)
_MARKDOWN_FENCE_LINE = re.compile(r"```m(?:d|arkdown)\s*\n", re.IGNORECASE)
_TITLE_DECORATION = re.compile(r"^[\"']|[\"']$|[.:]$")


def clean_markdown_response(text: str) -> str:
    """
    Remove markdown fences a backend wrapped around a generated note.

    Strips a leading ```` ```md ```` / ```` ```markdown ```` opener and a
    trailing ```` ``` ```` closer. If a tagged opener still appears later in
    the text (prose before the real content), everything before it is dropped
    along with the opener. Text without fences is returned unchanged.
    """
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)

    match = _MARKDOWN_FENCE.search(text)
    if match and match.start() > 0:
        text = text[match.start():]
        text = _MARKDOWN_FENCE_LINE.sub("", text, count=1)

    return text


def postprocess(mode: Mode | str, text: str) -> str:
    """Mode-dependent cleanup: create mode strips fences, query mode passes through."""
    if Mode(mode) == Mode.CREATE:
        return clean_markdown_response(text)
    return text


def clean_title(title: str) -> str:
    """Strip surrounding quotes and trailing punctuation from a generated title."""
    return _TITLE_DECORATION.sub("", title.strip()).strip()


def title_from_query(query: str, limit: int = QUERY_TITLE_CHARS) -> str:
    """Title derived from the query text, cut with an ellipsis past ``limit`` characters."""
    if len(query) > limit:
        return query[:limit].strip() + "..."
    return query.strip()
