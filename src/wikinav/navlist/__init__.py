"""Circular navigation lists built from template bullet lists."""

from .extractor import extract_navlist, iter_list_items, remove_comments, strip_excluded
from .models import (
    INVALID_ITEM,
    ListEntry,
    LookupRequest,
    LookupResult,
    NavList,
    NavListError,
    NavListErrorKind,
)
from .resolver import MAX_OFFSET, lookup, parse_number, render_entry, resolve, resolve_key

__all__ = [
    "INVALID_ITEM",
    "MAX_OFFSET",
    "ListEntry",
    "LookupRequest",
    "LookupResult",
    "NavList",
    "NavListError",
    "NavListErrorKind",
    "extract_navlist",
    "iter_list_items",
    "lookup",
    "parse_number",
    "remove_comments",
    "render_entry",
    "resolve",
    "resolve_key",
    "strip_excluded",
]
