from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from wikinav import config as config_module
from wikinav.titles import Title, TitleNormalizer
from wikinav.wiki.models import Document

CHARNAV = """\
* Homestar Runner
* Strong Bad
* The Cheat
* Strong Mad
* Strong Sad
* Pom Pom
* Marzipan
* Coach Z
* Bubs
* The King of Town
* The Poopsmith
* Homsar
<noinclude>

Explanatory text.

* This list
* Will NOT be included

</noinclude>
"""

HRENAV = """\
* Hremail 49
* Hremail 24
* Hremail 62
* Hremail 2000
* Hremail 7
* hremail 3184 | Hremail 3184
"""

NO_LIST = "A navigation box without any bullet list.\n"


class MemoryStore:
    """Document store backed by a dict of prefixed title -> markup."""

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = {title.replace(" ", "_"): text for title, text in pages.items()}
        self.fetched: list[Title] = []

    def fetch(self, title: Title) -> Document:
        self.fetched.append(title)
        text: Optional[str] = self.pages.get(title.key)
        if text is None:
            return Document.missing(title)
        return Document(title=title, exists=True, raw_content=text)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATHS", ())
    for name in ("WORKSPACE", "API_URL", "TIMEOUT", "CAPITAL_LINKS", "PAGE"):
        monkeypatch.delenv(f"WIKINAV_{name}", raising=False)


@pytest.fixture
def normalizer() -> TitleNormalizer:
    return TitleNormalizer(capital_links=True)


@pytest.fixture
def lowercase_normalizer() -> TitleNormalizer:
    return TitleNormalizer(capital_links=False)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore(
        {
            "Template:Charnav-lookup": CHARNAV,
            "Template:Hrenav-lookup": HRENAV,
            "Template:Charnav": NO_LIST,
        }
    )


@pytest.fixture
def lowercase_store() -> MemoryStore:
    return MemoryStore(
        {
            "Template:charnav-lookup": CHARNAV,
            "Template:hrenav-lookup": HRENAV,
        }
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "pages"
    (root / "Template").mkdir(parents=True)
    (root / "Template" / "charnav-lookup.wiki").write_text(CHARNAV, encoding="utf-8")
    (root / "hrenav.wiki").write_text(
        "---\ntitle: Template:hrenav-lookup\n---\n" + HRENAV,
        encoding="utf-8",
    )
    (root / "Template" / "charnav.wiki").write_text(NO_LIST, encoding="utf-8")
    return root


@pytest.fixture
def charnav_markup() -> str:
    return CHARNAV


@pytest.fixture
def hrenav_markup() -> str:
    return HRENAV


@pytest.fixture
def make_store():
    return MemoryStore
