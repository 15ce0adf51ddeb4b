"""Typed models for navigation list lookups."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


INVALID_ITEM = "INVALID LIST ITEM"


class NavListErrorKind(str, Enum):
    """Failure kinds; each value is the text substituted into the page."""

    INVALID_TEMPLATE_PARAMETER = "INVALID TEMPLATE PARAMETER"
    INVALID_TEMPLATE_NAME = "INVALID TEMPLATE NAME"
    INVALID_LIST = "INVALID LIST"
    NO_TITLE_OBJECT = "NO TITLE OBJECT"
    INVALID_INDEX = "INVALID INDEX"
    INDEX_OUT_OF_RANGE = "INDEX OUT OF RANGE"
    INVALID_LOOKUP_VALUE = "INVALID LOOKUP VALUE"
    INVALID_ACTION = "INVALID ACTION"
    ACTION_OFFSET_OUT_OF_RANGE = "ACTION OFFSET OUT OF RANGE"


class NavListError(Exception):
    """Raised while extracting or resolving a list; carries the failure kind."""

    def __init__(self, kind: NavListErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind


@dataclass(frozen=True, slots=True)
class ListEntry:
    """One bullet line of a navigation list."""

    name: str
    display: str = ""

    @property
    def is_valid(self) -> bool:
        return self.name != INVALID_ITEM


@dataclass(frozen=True, slots=True)
class NavList:
    """Circular list of entries in document order."""

    entries: tuple[ListEntry, ...]

    def __post_init__(self) -> None:
        if not self.entries:
            raise NavListError(NavListErrorKind.INVALID_LIST)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ListEntry]:
        return iter(self.entries)

    def __getitem__(self, key: int) -> ListEntry:
        return self.entries[key]

    @property
    def size(self) -> int:
        return len(self.entries)

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    @property
    def lookup_keys(self) -> list[str]:
        return [entry.name.lower() for entry in self.entries]

    def index_of(self, name: str) -> Optional[int]:
        """Return the first position whose name matches ``name`` case-insensitively."""

        wanted = name.lower()
        if wanted == INVALID_ITEM.lower():
            return None
        for index, key in enumerate(self.lookup_keys):
            if key == wanted:
                return index
        return None

    def wrap(self, key: int) -> int:
        """Map any integer onto ``[0, size)``."""

        return key % self.size


@dataclass(frozen=True, slots=True)
class LookupRequest:
    """Arguments of a single lookup, as supplied by the page author."""

    action: str = ""
    lookup_value: str = ""
    flag: str = ""


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Outcome of a lookup: either a value or the kind of failure."""

    value: Optional[str] = None
    error: Optional[NavListErrorKind] = None

    @classmethod
    def success(cls, value: str) -> "LookupResult":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: NavListErrorKind) -> "LookupResult":
        return cls(error=kind)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        """The string handed back to the page."""

        if self.error is not None:
            return self.error.value
        return self.value or ""
