"""Extraction of navigation lists from raw template markup."""

from __future__ import annotations

import logging
import re
from typing import Iterator

from ..titles import TitleNormalizer
from .models import INVALID_ITEM, ListEntry, NavList, NavListError, NavListErrorKind


logger = logging.getLogger(__name__)

_NOINCLUDE_RE = re.compile(r"<noinclude>.*?</noinclude>", re.DOTALL)
_TRANSCLUSION_TAGS = ("<includeonly>", "</includeonly>", "<onlyinclude>", "</onlyinclude>")
_LIST_ITEM_RE = re.compile(r"^\*([^|\n]+)(?:\|(.*))?$", re.MULTILINE)


def remove_comments(text: str) -> str:
    """Strip ``<!-- -->`` comments.

    An unterminated comment swallows the rest of the text. A comment that is
    alone on its line takes one of the surrounding newlines with it, so the
    lines around it stay adjacent.
    """

    while True:
        start = text.find("<!--")
        if start == -1:
            return text
        end = text.find("-->", start + 4)
        if end == -1:
            return text[:start]
        end += 3

        before = start
        while before > 0 and text[before - 1] == " ":
            before -= 1
        after = end
        while after < len(text) and text[after] == " ":
            after += 1

        if before > 0 and text[before - 1] == "\n" and after < len(text) and text[after] == "\n":
            text = text[: before - 1] + text[after:]
        else:
            text = text[:start] + text[end:]


def strip_excluded(raw_markup: str) -> str:
    """Return the part of a template that is visible when it is transcluded."""

    text = raw_markup.replace("\r\n", "\n")
    text = _NOINCLUDE_RE.sub("", text)
    for tag in _TRANSCLUSION_TAGS:
        text = text.replace(tag, "")
    return remove_comments(text)


def iter_list_items(text: str) -> Iterator[tuple[str, str]]:
    """Yield ``(name, display)`` for every top-level bullet line, unvalidated."""

    for match in _LIST_ITEM_RE.finditer(text):
        yield match.group(1), match.group(2) or ""


def extract_navlist(raw_markup: str, normalizer: TitleNormalizer) -> NavList:
    """Parse the bullet list of a template into a :class:`NavList`.

    Raises :class:`NavListError` with ``INVALID_LIST`` when the template has
    no list items outside its excluded regions.
    """

    entries: list[ListEntry] = []
    for name, display in iter_list_items(strip_excluded(raw_markup)):
        title = normalizer.normalize(name)
        if title is None:
            logger.debug("List item %r is not a valid title", name)
            entries.append(ListEntry(name=INVALID_ITEM))
            continue
        entries.append(ListEntry(name=title.text, display=display.strip()))

    if not entries:
        raise NavListError(NavListErrorKind.INVALID_LIST)

    logger.debug("Extracted %d list entries", len(entries))
    return NavList(tuple(entries))
