"""Resolution of lookup requests against a circular navigation list."""

from __future__ import annotations

import logging
import re
from decimal import ROUND_DOWN, Decimal, DecimalException
from typing import Optional

from ..titles import TitleNormalizer
from .extractor import extract_navlist
from .models import LookupRequest, LookupResult, NavList, NavListError, NavListErrorKind


logger = logging.getLogger(__name__)

MAX_OFFSET = 1000

ACTION_SIZE = "size"
ACTION_FIRST = "first"
ACTION_LAST = "last"
ACTION_INDEX = "#"
ACTION_NEXT = "next"
ACTION_PREV = "prev"

FLAG_INDEX = "#"
FLAG_TARGET = "target"
FLAG_PIPE = "pipe"

_BLANK = r"[ \t\n\r\v\f]*"
_NUMERIC_RE = re.compile(
    rf"^{_BLANK}([+-]?)(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE]([+-]?)[0-9]+)?{_BLANK}$"
)


def parse_number(value: str) -> Optional[Decimal]:
    """Return ``value`` truncated toward zero, or ``None`` if it is not numeric.

    Decimal fractions and exponents are accepted, so ``"2.9"`` reads as 2.
    """

    match = _NUMERIC_RE.match(value)
    if not match:
        return None
    try:
        return Decimal(value.strip()).to_integral_value(rounding=ROUND_DOWN)
    except DecimalException:
        # Exponent is beyond what the decimal context can represent.
        sign, exponent_sign = match.groups()
        if exponent_sign == "-":
            return Decimal(0)
        return Decimal(f"{sign}Infinity")


def _bounded(number: Decimal, kind: NavListErrorKind) -> int:
    if number.copy_abs() > MAX_OFFSET:
        raise NavListError(kind)
    return int(number)


def _index_key(lookup_value: str) -> int:
    number = parse_number(lookup_value)
    if number is None:
        raise NavListError(NavListErrorKind.INVALID_INDEX)
    return _bounded(number, NavListErrorKind.INDEX_OUT_OF_RANGE) - 1


def _offset(action: str) -> int:
    if action == "":
        return 0
    if action == ACTION_NEXT:
        return 1
    if action == ACTION_PREV:
        return -1
    number = parse_number(action)
    if number is None:
        raise NavListError(NavListErrorKind.INVALID_ACTION)
    return _bounded(number, NavListErrorKind.ACTION_OFFSET_OUT_OF_RANGE)


def _relative_key(
    navlist: NavList,
    request: LookupRequest,
    *,
    normalizer: TitleNormalizer,
    current_title: Optional[str],
) -> int:
    lookup_value = request.lookup_value
    if lookup_value == "":
        if current_title is None:
            raise NavListError(NavListErrorKind.NO_TITLE_OBJECT)
        lookup_value = current_title

    title = normalizer.normalize(lookup_value)
    index = navlist.index_of(title.text) if title is not None else None
    if index is None:
        raise NavListError(NavListErrorKind.INVALID_LOOKUP_VALUE)

    return index + _offset(request.action)


def resolve_key(
    navlist: NavList,
    request: LookupRequest,
    *,
    normalizer: TitleNormalizer,
    current_title: Optional[str] = None,
) -> int:
    """Return the position addressed by ``request``, already wrapped into range."""

    action = request.action
    if action == ACTION_FIRST or (action == ACTION_INDEX and request.lookup_value == ACTION_FIRST):
        key = 0
    elif action == ACTION_LAST or (action == ACTION_INDEX and request.lookup_value == ACTION_LAST):
        key = navlist.size - 1
    elif action == ACTION_INDEX:
        key = _index_key(request.lookup_value)
    else:
        key = _relative_key(navlist, request, normalizer=normalizer, current_title=current_title)
    return navlist.wrap(key)


def render_entry(navlist: NavList, key: int, flag: str) -> str:
    """Format the entry at ``key`` according to the output flag."""

    if flag == FLAG_INDEX:
        return str(key + 1)
    entry = navlist[key]
    if entry.display == "" or flag == FLAG_TARGET:
        return entry.name
    if flag == FLAG_PIPE:
        return f"{entry.name}|{entry.display}"
    return entry.display


def resolve(
    navlist: NavList,
    request: LookupRequest,
    *,
    normalizer: TitleNormalizer,
    current_title: Optional[str] = None,
) -> LookupResult:
    """Resolve ``request`` against ``navlist``.

    ``current_title`` is the page the lookup is made from; it stands in for an
    empty lookup value in name-based lookups.
    """

    if request.action == ACTION_SIZE:
        return LookupResult.success(str(navlist.size))

    try:
        key = resolve_key(navlist, request, normalizer=normalizer, current_title=current_title)
    except NavListError as exc:
        logger.debug("Lookup %r failed: %s", request, exc.kind.value)
        return LookupResult.failure(exc.kind)

    logger.debug("Lookup %r resolved to position %d of %d", request, key + 1, navlist.size)
    return LookupResult.success(render_entry(navlist, key, request.flag))


def lookup(
    raw_markup: str,
    request: LookupRequest,
    *,
    normalizer: TitleNormalizer,
    current_title: Optional[str] = None,
) -> LookupResult:
    """Extract the list from ``raw_markup`` and resolve ``request`` against it."""

    try:
        navlist = extract_navlist(raw_markup, normalizer)
    except NavListError as exc:
        return LookupResult.failure(exc.kind)
    return resolve(navlist, request, normalizer=normalizer, current_title=current_title)
