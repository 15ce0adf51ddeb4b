"""Formatting of page titles into slugs used by the official site's URLs."""

from __future__ import annotations

import re
from typing import Optional

from .navlist.models import NavListErrorKind


TOON_SUFFIX = " (toon)"

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^\w ]")
_SEPARATOR_RE = re.compile(r"[ _]+")


def format_url(text: str = "", *, current_title: Optional[str] = None) -> str:
    """Turn ``text`` into a lowercase, hyphen-separated slug.

    An empty ``text`` formats the current page title instead; without one the
    result is the ``NO TITLE OBJECT`` marker.
    """

    if text == "":
        if current_title is None:
            return NavListErrorKind.NO_TITLE_OBJECT.value
        text = current_title

    text = _WHITESPACE_RE.sub(" ", text.strip())
    if text.endswith(TOON_SUFFIX):
        text = text[: -len(TOON_SUFFIX)]
    text = text.lower()
    text = _DISALLOWED_RE.sub("", text)
    text = _SEPARATOR_RE.sub("-", text)

    # The official site puts a stray hyphen on this one URL.
    if text == "bottom-10":
        text += "-"
    return text
