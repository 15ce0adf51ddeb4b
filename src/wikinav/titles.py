"""Normalization of raw strings into canonical wiki page titles."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Iterable, Optional


DEFAULT_NAMESPACES = (
    "Talk",
    "User",
    "User talk",
    "Project",
    "Project talk",
    "File",
    "File talk",
    "MediaWiki",
    "MediaWiki talk",
    "Template",
    "Template talk",
    "Help",
    "Help talk",
    "Category",
    "Category talk",
)
NAMESPACE_ALIASES = {
    "image": "File",
    "image talk": "File talk",
}
MAX_TITLE_BYTES = 255

_WHITESPACE_RE = re.compile(r"[ _\xa0\u1680\u180e\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+")
_NAMESPACE_RE = re.compile(r"^(.+?) ?: ?(.*)$")
_ILLEGAL_RE = re.compile(r"[#<>\[\]|{}\x00-\x1f\x7f\ud800-\udfff\ufffd]|%[0-9A-Fa-f]{2}")
_RELATIVE_RE = re.compile(r"^\.\.?$|^\.\.?/|/\.\.?/|/\.\.?$")


@dataclass(frozen=True, slots=True)
class Title:
    """A validated page title split into namespace and text."""

    namespace: str
    text: str
    fragment: str = ""

    @property
    def prefixed_text(self) -> str:
        if self.namespace:
            return f"{self.namespace}:{self.text}"
        return self.text

    @property
    def key(self) -> str:
        """Storage key: the prefixed text with spaces as underscores."""

        return self.prefixed_text.replace(" ", "_")

    def __str__(self) -> str:
        return self.prefixed_text


class TitleNormalizer:
    """Validate and canonicalize page titles the way a MediaWiki install does.

    ``normalize`` returns ``None`` for anything that cannot be a page title;
    callers decide what an invalid title means for them.
    """

    def __init__(
        self,
        *,
        capital_links: bool = False,
        extra_namespaces: Iterable[str] = (),
    ) -> None:
        self.capital_links = capital_links
        self._namespaces: dict[str, str] = {}
        for name in (*DEFAULT_NAMESPACES, *extra_namespaces):
            self._namespaces[_namespace_lookup_key(name)] = name
        for alias, name in NAMESPACE_ALIASES.items():
            self._namespaces[alias] = name

    def canonical_namespace(self, name: str) -> Optional[str]:
        """Return the canonical spelling of ``name`` or ``None`` if unknown."""

        if not name:
            return ""
        return self._namespaces.get(_namespace_lookup_key(name))

    def normalize(self, raw: str, default_namespace: str = "") -> Optional[Title]:
        text = html.unescape(raw)
        text = _WHITESPACE_RE.sub(" ", text).strip(" ")

        namespace = self.canonical_namespace(default_namespace)
        if namespace is None:
            raise ValueError(f"Unknown namespace {default_namespace!r}")

        if text.startswith(":"):
            namespace = ""
            text = text[1:].lstrip(" ")

        match = _NAMESPACE_RE.match(text)
        if match:
            prefix = self.canonical_namespace(match.group(1))
            if prefix:
                namespace = prefix
                text = match.group(2)
                if not text:
                    return None

        fragment = ""
        if "#" in text:
            text, fragment = text.split("#", 1)
            text = text.rstrip(" ")

        if not text or not _is_legal(text):
            return None

        if self.capital_links:
            text = text[0].upper() + text[1:]
        return Title(namespace=namespace, text=text, fragment=fragment)


def _is_legal(text: str) -> bool:
    if _ILLEGAL_RE.search(text):
        return False
    if "." in text and _RELATIVE_RE.search(text):
        return False
    if "~~~" in text:
        return False
    # Namespace prefix is not counted towards the limit.
    return len(text.encode("utf-8")) <= MAX_TITLE_BYTES


def _namespace_lookup_key(name: str) -> str:
    return _WHITESPACE_RE.sub(" ", name).strip(" ").lower()
