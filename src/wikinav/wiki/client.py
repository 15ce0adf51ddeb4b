"""HTTP client wrapper for reading pages through the MediaWiki Action API."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import httpx

from wikinav.titles import Title

from .models import Document


logger = logging.getLogger(__name__)

DEFAULT_QUERY_PARAMS = {
    "action": "query",
    "prop": "revisions",
    "rvprop": "content",
    "rvslots": "main",
    "format": "json",
    "formatversion": "2",
}


class WikiClient:
    """Thin wrapper above the MediaWiki Action API (``api.php``)."""

    def __init__(
        self,
        *,
        api_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_url = api_url
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": "wikinav"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "WikiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401 - standard context manager signature
        self.close()

    # ------------------------------------------------------------------
    # Low-level helpers
    # ------------------------------------------------------------------
    def _request(self, params: dict) -> dict:
        response = self._client.get(self.api_url, params=params)
        response.raise_for_status()
        data = response.json()
        if "error" in data:
            error = data["error"]
            raise RuntimeError(f"MediaWiki API error {error.get('code')!r}: {error.get('info', '')}")
        return data

    # ------------------------------------------------------------------
    # Parsers
    # ------------------------------------------------------------------
    @staticmethod
    def _to_document(title: Title, page: Optional[dict]) -> Document:
        if page is None or page.get("missing") or page.get("invalid"):
            return Document.missing(title)
        revisions = page.get("revisions", [])
        if not revisions:
            return Document.missing(title)
        slot = revisions[0].get("slots", {}).get("main", {})
        return Document(title=title, exists=True, raw_content=slot.get("content", ""))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fetch(self, title: Title) -> Document:
        """Return the current revision of ``title``."""

        return self.fetch_many([title])[title.key]

    def fetch_many(self, titles: Iterable[Title]) -> dict[str, Document]:
        """Return documents for several titles, keyed by :attr:`Title.key`."""

        wanted = {title.prefixed_text: title for title in titles}
        if not wanted:
            return {}
        params = dict(DEFAULT_QUERY_PARAMS, titles="|".join(wanted))
        logger.debug("Fetching %d page(s) from %s", len(wanted), self.api_url)
        data = self._request(params)

        query = data.get("query", {})
        # The API reports the titles it rewrote; follow them back to the request.
        renamed = {item["to"]: item["from"] for item in query.get("normalized", [])}
        pages = {}
        for page in query.get("pages", []):
            requested = renamed.get(page.get("title"), page.get("title"))
            pages[requested] = page

        return {
            title.key: self._to_document(title, pages.get(prefixed))
            for prefixed, title in wanted.items()
        }
