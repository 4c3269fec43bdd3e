"""Citation and link normalization for generated text.

Two notations are recognized:

* wiki links: ``[[path]]`` and ``[[path#Section]]``;
* the looser ``path.md > Section Name`` form some backends produce, either
  bare or inside wiki brackets.

Both map to a canonical ``(path, fragment)`` pair where the fragment is the
section name lower-cased with whitespace runs replaced by ``-``.
"""

import re
from dataclasses import dataclass
from typing import Protocol

from vault_llm.context.assembler import FILE_MARKER

ARROW_SEPARATOR = " > "

_WIKI_LINK = re.compile(r"\[\[([^\]]+)\]\]")
_ARROW_LINK = re.compile(r"(?P<path>[^\s\[\]|]+\.md) > (?P<section>[^\n\[\],;|]+)")
_LINK_NOISE = re.compile(r"[\[\],]")
_WHITESPACE = re.compile(r"\s+")
_SOURCE_LINE = re.compile(r"^" + re.escape(FILE_MARKER) + r"(.+)$", re.MULTILINE)


class LinkResolver(Protocol):
    def resolve(self, link: str) -> object | None: ...


@dataclass(frozen=True)
class LinkReference:
    """A reference found in generated text."""

    path: str
    fragment: str | None = None
    raw: str = ""
    broken: bool = False

    @property
    def target(self) -> str:
        """Link target in ``path#fragment`` form."""
        return f"{self.path}#{self.fragment}" if self.fragment else self.path

    def to_wikilink(self) -> str:
        return f"[[{self.target}]]"


def slugify_fragment(section: str) -> str:
    return _WHITESPACE.sub("-", section.strip().lower())


def parse_reference(raw: str) -> LinkReference:
    """
    Split a link target into path and fragment.

    Brackets and commas are dropped first; ``a.md > My Section`` and
    ``a.md#My Section`` both become ``LinkReference("a.md", "my-section")``.
    """
    cleaned = _LINK_NOISE.sub("", raw).strip()
    path, fragment = cleaned, None

    if ARROW_SEPARATOR in cleaned:
        path, section = cleaned.split(ARROW_SEPARATOR, 1)
        fragment = slugify_fragment(section) or None
    elif "#" in cleaned:
        path, section = cleaned.split("#", 1)
        fragment = slugify_fragment(section) or None

    return LinkReference(path=path.strip(), fragment=fragment, raw=raw)


def _find_references(text: str) -> list[tuple[int, int, LinkReference]]:
    """(start, end, reference) for every notation, in text order, wiki links first on overlap."""
    found = []
    wiki_spans = []
    for match in _WIKI_LINK.finditer(text):
        wiki_spans.append(match.span())
        found.append((match.start(), match.end(), parse_reference(match.group(1))))

    for match in _ARROW_LINK.finditer(text):
        if any(start <= match.start() < end for start, end in wiki_spans):
            continue
        section = match.group("section").rstrip(" .")
        raw = f"{match.group('path')}{ARROW_SEPARATOR}{section}"
        end = match.start() + len(raw)
        found.append((match.start(), end, parse_reference(raw)))

    return sorted(found, key=lambda item: item[0])


def normalize(text: str, resolver: LinkResolver | None = None) -> list[LinkReference]:
    """
    Extract every reference from generated text.

    Args:
        text: Generated text
        resolver: Optional document store; references it cannot resolve are
            returned with ``broken=True``

    Returns:
        References in order of appearance
    """
    references = []
    for _, _, reference in _find_references(text):
        if resolver is not None and reference.path and resolver.resolve(reference.path) is None:
            reference = LinkReference(reference.path, reference.fragment, reference.raw, broken=True)
        references.append(reference)
    return references


def rewrite(text: str) -> str:
    """Replace every recognized reference with its canonical ``[[path#fragment]]`` form."""
    references = _find_references(text)
    if not references:
        return text

    parts = []
    position = 0
    for start, end, reference in references:
        if start < position:
            continue
        parts.append(text[position:start])
        parts.append(reference.to_wikilink())
        position = end
    parts.append(text[position:])
    return "".join(parts)


def extract_source_paths(context: str) -> list[str]:
    """Paths of the ``FILE:`` blocks in a context blob, in order, duplicates kept."""
    return _SOURCE_LINE.findall(context)
