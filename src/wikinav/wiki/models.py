"""Typed models for page documents served by a document store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from wikinav.titles import Title


@dataclass(slots=True)
class Document:
    """Raw markup of a page, or the fact that the page does not exist."""

    title: Title
    exists: bool
    raw_content: str = ""

    @classmethod
    def missing(cls, title: Title) -> "Document":
        return cls(title=title, exists=False)


class DocumentStore(Protocol):
    """Anything that can fetch the raw markup of a page by title."""

    def fetch(self, title: Title) -> Document:
        ...
