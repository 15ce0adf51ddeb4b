"""Local filesystem repository of wiki pages."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

import frontmatter

from wikinav.titles import Title, TitleNormalizer
from wikinav.wiki.models import Document


logger = logging.getLogger(__name__)

PAGE_SUFFIX = ".wiki"


class LocalRepository:
    """Serve pages stored as wikitext files with YAML frontmatter.

    A page's title comes from the ``title`` frontmatter key. Files without one
    are titled after their path: ``Template/Charnav-lookup.wiki`` is
    ``Template:Charnav-lookup`` when the first directory names a namespace.
    """

    def __init__(self, root: Path, *, normalizer: TitleNormalizer) -> None:
        self.root = root
        self.normalizer = normalizer
        self._index: Optional[dict[str, tuple[Title, Path]]] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fetch(self, title: Title) -> Document:
        """Return the page stored under ``title``."""

        entry = self._pages().get(title.key)
        if entry is None:
            logger.debug("No local page for %s", title)
            return Document.missing(title)
        _, path = entry
        post = frontmatter.load(path)
        return Document(title=title, exists=True, raw_content=post.content)

    def iter_titles(self) -> Iterable[Title]:
        for title, _ in self._pages().values():
            yield title

    def iter_page_files(self) -> Iterable[Path]:
        for candidate in sorted(self.root.rglob(f"*{PAGE_SUFFIX}")):
            if candidate.is_file():
                yield candidate

    def reload(self) -> None:
        """Forget the cached title index so new files are picked up."""

        self._index = None

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------
    def _pages(self) -> dict[str, tuple[Title, Path]]:
        if self._index is not None:
            return self._index
        if not self.root.is_dir():
            raise FileNotFoundError(f"Workspace directory {self.root} does not exist")

        index: dict[str, tuple[Title, Path]] = {}
        for path in self.iter_page_files():
            title = self._read_title(path)
            existing = index.get(title.key)
            if existing is not None:
                raise ValueError(
                    f"Pages {existing[1]} and {path} both claim the title {title.prefixed_text!r}"
                )
            index[title.key] = (title, path)

        logger.debug("Indexed %d page(s) under %s", len(index), self.root)
        self._index = index
        return index

    def _read_title(self, path: Path) -> Title:
        post = frontmatter.load(path)
        raw = post.metadata.get("title")
        if raw is None:
            raw = self._title_from_path(path)
        title = self.normalizer.normalize(str(raw))
        if title is None:
            raise ValueError(f"{path} has an invalid page title {raw!r}")
        return title

    def _title_from_path(self, path: Path) -> str:
        parts = path.relative_to(self.root).with_suffix("").parts
        if len(parts) > 1:
            namespace = self.normalizer.canonical_namespace(parts[0])
            if namespace:
                return f"{namespace}:{'/'.join(parts[1:])}"
        return "/".join(parts)
