"""Pid token parsing tests."""

from __future__ import annotations

import pytest

from gracekill.lib.kill.targets import parse_targets


def test_space_and_comma_separated_tokens_flatten_in_order() -> None:
    assert parse_targets(["1234", "5678,9012", " 42 , 7"]) == [1234, 5678, 9012, 42, 7]


def test_duplicates_are_kept() -> None:
    assert parse_targets(["5,5", "5"]) == [5, 5, 5]


def test_zero_and_oversized_values_pass_through_for_dispatch() -> None:
    assert parse_targets(["0", "99999999999"]) == [0, 99999999999]


@pytest.mark.parametrize("token", ("abc", "-5", "1.5", "12,,13", "", "12,", "٣"))
def test_invalid_tokens_raise_value_error(token: str) -> None:
    with pytest.raises(ValueError, match="Invalid PID"):
        parse_targets([token])


def test_no_tokens_parse_to_empty_list() -> None:
    assert parse_targets([]) == []
