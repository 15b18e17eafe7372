from __future__ import annotations

import pytest

from src.attended_checkin.attended_checkin.common.id_lists import format_id_list, parse_id_list


def test_format_uses_trailing_comma():
    assert format_id_list([12, 47]) == "12,47,"


def test_format_empty_is_empty_string():
    assert format_id_list([]) == ""


@pytest.mark.parametrize(
    "value, expected",
    [
        ("12,47,", [12, 47]),
        ("12,47", [12, 47]),
        ("", []),
        (None, []),
        (" 3 , ,4,", [3, 4]),
    ],
)
def test_parse_tolerates_missing_or_stray_separators(value, expected):
    assert parse_id_list(value) == expected
