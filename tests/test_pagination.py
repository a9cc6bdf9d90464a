import math
from datetime import datetime

import pytest

from core.errors import ValidationError
from core.pagination import (
    last_page_size,
    page_count,
    page_offset,
    parse_optional_since,
    parse_window_start,
    positive_or_default,
)


@pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 99, 100, 101])
@pytest.mark.parametrize("size", [1, 7, 10, 100])
def test_page_count_is_ceiling(total, size):
    pages = page_count(total, size)
    assert pages == math.ceil(total / size)
    if total:
        assert 1 <= last_page_size(total, size) <= size
        assert (pages - 1) * size + last_page_size(total, size) == total


def test_page_count_rejects_zero_size():
    with pytest.raises(ValueError):
        page_count(10, 0)


def test_page_offset():
    assert page_offset(1, 10) == 0
    assert page_offset(3, 10) == 20
    assert page_offset(0, 10) == 0


@pytest.mark.parametrize("raw, expected", [("5", 5), (None, 3), ("", 3), ("abc", 3), ("0", 3), ("-2", 3)])
def test_positive_or_default(raw, expected):
    assert positive_or_default(raw, 3) == expected


@pytest.mark.parametrize("raw", [None, "", "0", "abc"])
def test_window_start_is_required(raw):
    with pytest.raises(ValidationError):
        parse_window_start(raw)


def test_window_start_parses_unix_seconds():
    assert parse_window_start("1700000000") == datetime.fromtimestamp(1700000000)


def test_optional_since_ignores_garbage():
    assert parse_optional_since(None) is None
    assert parse_optional_since("oops") is None
    assert parse_optional_since("1700000000") == datetime.fromtimestamp(1700000000)
