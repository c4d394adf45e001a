from __future__ import annotations

import pytest

try:  # import at module level; skip the whole module if unavailable
    from hypothesis import assume, given
    from hypothesis import strategies as st
except ImportError:  # pragma: no cover - tooling availability
    pytest.skip("hypothesis not available", allow_module_level=True)

from fsearch.filters import parse_permission_string, permission_digits, permission_string
from fsearch.matcher import NamePattern, matches

WORD = st.text(min_size=1, max_size=8, alphabet="abcdefghijklmnopqrstuvwxyz0123456789._-")
LETTERS = st.text(min_size=1, max_size=6, alphabet="abcdefghijklmnopqrstuvwxyz")
NAME = st.text(min_size=1, max_size=16).filter(lambda s: "+" not in s and "/" not in s)


def test_every_permission_triplet_round_trips() -> None:
    for mode in range(0o1000):
        text = permission_string(mode)
        assert parse_permission_string(text) == mode
        assert permission_digits(mode) == f"{mode:03o}"


@given(st.integers(min_value=0, max_value=0o177777))
def test_permission_string_ignores_non_permission_bits(mode: int) -> None:
    assert parse_permission_string(permission_string(mode)) == mode & 0o777


@given(NAME)
def test_plain_pattern_matches_its_own_name(name: str) -> None:
    assert NamePattern.parse(name).matches(name)


@given(WORD, WORD, st.integers(min_value=0, max_value=3))
def test_adjacent_tokens_match_with_absorbed_run(first: str, second: str, repeat: int) -> None:
    assume(second[0] != first[-1])
    name = first + first[-1] * repeat + second
    assert matches(f"{first}+{second}", True, name)


@given(LETTERS, LETTERS)
def test_tokens_out_of_order_do_not_match(first: str, second: str) -> None:
    assume(first not in second)
    name = second + "_" + first
    assert not matches(f"{first}+{second}", True, name)
