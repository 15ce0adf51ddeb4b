from __future__ import annotations

from decimal import Decimal
from typing import Optional

import pytest

from wikinav.navlist import (
    ListEntry,
    LookupRequest,
    LookupResult,
    NavList,
    NavListError,
    NavListErrorKind,
    extract_navlist,
    lookup,
    parse_number,
    render_entry,
    resolve,
)
from wikinav.titles import TitleNormalizer


@pytest.fixture
def charnav(normalizer: TitleNormalizer, charnav_markup: str) -> NavList:
    return extract_navlist(charnav_markup, normalizer)


@pytest.fixture
def hrenav(lowercase_normalizer: TitleNormalizer, hrenav_markup: str) -> NavList:
    return extract_navlist(hrenav_markup, lowercase_normalizer)


@pytest.fixture
def abc() -> NavList:
    return NavList((ListEntry("A"), ListEntry("B"), ListEntry("C")))


def _text(
    navlist: NavList,
    normalizer: TitleNormalizer,
    action: str = "",
    lookup_value: str = "",
    flag: str = "",
    current_title: Optional[str] = None,
) -> str:
    request = LookupRequest(action=action, lookup_value=lookup_value, flag=flag)
    return resolve(navlist, request, normalizer=normalizer, current_title=current_title).text


@pytest.mark.parametrize(
    ("action", "lookup_value", "expected"),
    [
        ("next", "Homestar Runner", "Strong Bad"),
        ("prev", "Strong Bad", "Homestar Runner"),
        ("next", "Homsar", "Homestar Runner"),
        ("prev", "Homestar Runner", "Homsar"),
        ("+2", "Homestar Runner", "The Cheat"),
        ("2.9", "Homestar Runner", "The Cheat"),
        ("-2", "Homestar Runner", "The Poopsmith"),
        ("954", "Homestar Runner", "Marzipan"),
        ("0", "Homestar Runner", "Homestar Runner"),
        ("", "Homestar Runner", "Homestar Runner"),
        ("first", "", "Homestar Runner"),
        ("last", "", "Homsar"),
        ("#", "first", "Homestar Runner"),
        ("#", "1", "Homestar Runner"),
        ("#", "last", "Homsar"),
        ("#", "0", "Homsar"),
        ("#", "5", "Strong Sad"),
        ("#", "-5", "Marzipan"),
        ("#", "500", "Coach Z"),
        ("size", "", "12"),
    ],
)
def test_charnav_lookups(
    charnav: NavList,
    normalizer: TitleNormalizer,
    action: str,
    lookup_value: str,
    expected: str,
) -> None:
    assert _text(charnav, normalizer, action, lookup_value) == expected


@pytest.mark.parametrize(
    ("action", "lookup_value", "expected"),
    [
        ("invalid", "Homestar Runner", "INVALID ACTION"),
        ("10000", "Homestar Runner", "ACTION OFFSET OUT OF RANGE"),
        ("-1001", "Homestar Runner", "ACTION OFFSET OUT OF RANGE"),
        ("next", "Not in the List", "INVALID LOOKUP VALUE"),
        ("next", "Bad [[title]]", "INVALID LOOKUP VALUE"),
        ("next", "Bad\udcff", "INVALID LOOKUP VALUE"),
        ("#", "5000", "INDEX OUT OF RANGE"),
        ("#", "1e1000000000000000000000", "INDEX OUT OF RANGE"),
        ("1e1000000000000000000000", "Homsar", "ACTION OFFSET OUT OF RANGE"),
        ("-1e1000000000000000000000", "Homsar", "ACTION OFFSET OUT OF RANGE"),
        ("#", "five", "INVALID INDEX"),
        ("#", "", "INVALID INDEX"),
        ("#", "First", "INVALID INDEX"),
    ],
)
def test_charnav_errors(
    charnav: NavList,
    normalizer: TitleNormalizer,
    action: str,
    lookup_value: str,
    expected: str,
) -> None:
    assert _text(charnav, normalizer, action, lookup_value) == expected


def test_offsets_at_the_limit_are_accepted(charnav: NavList, normalizer: TitleNormalizer) -> None:
    # 1000 = 83 * 12 + 4
    assert _text(charnav, normalizer, "1000", "Homestar Runner") == "Strong Sad"
    assert _text(charnav, normalizer, "#", "-1000", "#") == "8"


def test_lookup_value_is_checked_before_action(charnav: NavList, normalizer: TitleNormalizer) -> None:
    assert _text(charnav, normalizer, "invalid", "Not in the List") == "INVALID LOOKUP VALUE"


def test_lookup_is_case_insensitive(charnav: NavList, normalizer: TitleNormalizer) -> None:
    assert _text(charnav, normalizer, "", "the king of town", "#") == "10"
    assert _text(charnav, normalizer, "next", "STRONG BAD") == "The Cheat"


def test_index_flag(charnav: NavList, normalizer: TitleNormalizer) -> None:
    assert _text(charnav, normalizer, "0", "Homestar Runner", "#") == "1"
    assert _text(charnav, normalizer, "next", "Homestar Runner", "#") == "2"
    assert _text(charnav, normalizer, "prev", "Homestar Runner", "#") == "12"
    assert _text(charnav, normalizer, "", "Pom Pom", "#") == "6"


def test_size_ignores_lookup_and_flag(charnav: NavList, normalizer: TitleNormalizer) -> None:
    assert _text(charnav, normalizer, "size", "Not in the List", "#") == "12"


def test_first_and_last_ignore_lookup_value(charnav: NavList, normalizer: TitleNormalizer) -> None:
    assert _text(charnav, normalizer, "first", "Not in the List") == "Homestar Runner"
    assert _text(charnav, normalizer, "last", "Bad [[title]]") == "Homsar"


def test_current_title_stands_in_for_empty_lookup(charnav: NavList, normalizer: TitleNormalizer) -> None:
    assert _text(charnav, normalizer, "next", current_title="Homestar Runner") == "Strong Bad"
    assert _text(charnav, normalizer, "", "", "#", current_title="Homestar Runner") == "1"
    assert _text(charnav, normalizer, "next", current_title="Main Page") == "INVALID LOOKUP VALUE"


def test_missing_current_title(charnav: NavList, normalizer: TitleNormalizer) -> None:
    assert _text(charnav, normalizer, "next") == "NO TITLE OBJECT"
    # Index lookups never consult the current page.
    assert _text(charnav, normalizer, "#", "2") == "Strong Bad"


@pytest.mark.parametrize(
    ("action", "lookup_value", "flag", "expected"),
    [
        ("prev", "Hremail 49", "", "Hremail 3184"),
        ("prev", "Hremail 49", "target", "hremail 3184"),
        ("prev", "Hremail 49", "pipe", "hremail 3184|Hremail 3184"),
        ("next", "Hremail 49", "", "Hremail 24"),
        ("next", "Hremail 49", "target", "Hremail 24"),
        ("next", "Hremail 49", "pipe", "Hremail 24"),
        ("#", "last", "", "Hremail 3184"),
        ("#", "6", "target", "hremail 3184"),
        ("#", "6", "pipe", "hremail 3184|Hremail 3184"),
        ("#", "6", "unknown", "Hremail 3184"),
    ],
)
def test_hrenav_flags(
    hrenav: NavList,
    lowercase_normalizer: TitleNormalizer,
    action: str,
    lookup_value: str,
    flag: str,
    expected: str,
) -> None:
    assert _text(hrenav, lowercase_normalizer, action, lookup_value, flag) == expected


def test_pipe_output_splits_back_into_entry(hrenav: NavList) -> None:
    for key, entry in enumerate(hrenav):
        if not entry.display:
            continue
        name, display = render_entry(hrenav, key, "pipe").split("|", 1)
        assert (name, display) == (entry.name, entry.display)


def test_scenario_next_wraps_around(abc: NavList, normalizer: TitleNormalizer) -> None:
    assert _text(abc, normalizer, "next", "B") == "C"
    assert _text(abc, normalizer, "next", "C") == "A"


def test_scenario_index_wraps_around(normalizer: TitleNormalizer) -> None:
    navlist = NavList((ListEntry("A"), ListEntry("B")))
    assert _text(navlist, normalizer, "#", "5") == "A"


def test_next_and_prev_for_every_entry(charnav: NavList, normalizer: TitleNormalizer) -> None:
    size = charnav.size
    for index, entry in enumerate(charnav):
        assert _text(charnav, normalizer, "next", entry.name) == charnav[(index + 1) % size].name
        assert _text(charnav, normalizer, "prev", entry.name) == charnav[(index - 1) % size].name


def test_lookups_are_periodic(charnav: NavList, normalizer: TitleNormalizer) -> None:
    size = charnav.size
    for offset in range(-40, 40):
        shifted = _text(charnav, normalizer, str(offset + size), "Strong Bad")
        assert _text(charnav, normalizer, str(offset), "Strong Bad") == shifted
        by_index = _text(charnav, normalizer, "#", str(offset + 1))
        assert by_index == _text(charnav, normalizer, "#", str(offset + 1 + size))


def test_invalid_item_occupies_a_slot(normalizer: TitleNormalizer) -> None:
    navlist = extract_navlist("* Strong Bad\n* Bad [[link]]\n* Homsar\n", normalizer)
    assert _text(navlist, normalizer, "next", "Strong Bad") == "INVALID LIST ITEM"
    assert _text(navlist, normalizer, "2", "Strong Bad") == "Homsar"
    assert _text(navlist, normalizer, "", "Invalid list item") == "INVALID LOOKUP VALUE"


def test_lookup_reports_invalid_list(normalizer: TitleNormalizer) -> None:
    result = lookup("No list here", LookupRequest(action="size"), normalizer=normalizer)
    assert result == LookupResult.failure(NavListErrorKind.INVALID_LIST)
    assert not result.ok
    assert result.text == "INVALID LIST"


def test_lookup_success(normalizer: TitleNormalizer, charnav_markup: str) -> None:
    result = lookup(charnav_markup, LookupRequest("next", "Bubs"), normalizer=normalizer)
    assert result.ok
    assert result.value == "The King of Town"
    assert result.text == "The King of Town"


def test_empty_navlist_cannot_be_built() -> None:
    with pytest.raises(NavListError) as excinfo:
        NavList(())
    assert excinfo.value.kind is NavListErrorKind.INVALID_LIST


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2", Decimal(2)),
        ("2.9", Decimal(2)),
        ("-2.9", Decimal(-2)),
        ("+3", Decimal(3)),
        (" 4 ", Decimal(4)),
        ("1e2", Decimal(100)),
        (".5", Decimal(0)),
        ("5.", Decimal(5)),
        ("", None),
        ("five", None),
        ("0x1A", None),
        ("1 2", None),
        ("--1", None),
    ],
)
def test_parse_number(value: str, expected: Optional[Decimal]) -> None:
    assert parse_number(value) == expected


def test_parse_number_with_extreme_exponents() -> None:
    assert parse_number("1e1000000000000000000000").copy_abs() > 1000
    assert parse_number("-1e1000000000000000000000") < -1000
    assert parse_number("1e-1000000000000000000000") == 0
