"""Tests for matching profile blocks to functions."""

from __future__ import annotations

import pytest

from covgate.correlator import correlate, is_disjoint, record_function_coverage
from covgate.profile import Profile
from tests.helpers.syntax_builders import function, profile_block, rng

FUNCTION_RANGE = rng(3, 1, 6, 2)


@pytest.mark.parametrize(
    ("description", "block", "expected"),
    [
        ("inside", rng(3, 12, 6, 2), False),
        ("identical", rng(3, 1, 6, 2), False),
        ("straddles start", rng(1, 5, 4, 1), False),
        ("straddles end", rng(5, 1, 9, 1), False),
        ("starts on a later line", rng(7, 1, 8, 1), True),
        ("starts exactly at the end", rng(6, 2, 8, 1), True),
        ("starts on the end line before the end", rng(6, 1, 8, 1), False),
        ("ends on an earlier line", rng(1, 1, 2, 9), True),
        ("ends exactly at the start", rng(1, 1, 3, 1), True),
        ("ends on the start line after the start", rng(1, 1, 3, 2), False),
    ],
)
def test_is_disjoint(description: str, block, expected: bool) -> None:
    assert is_disjoint(block, FUNCTION_RANGE) is expected, description


def test_correlate_matching_block() -> None:
    fn = function(body_range=FUNCTION_RANGE, statements=1)

    coverage = correlate(fn, [profile_block((3, 12), (6, 2), statements=1, hits=1)])

    assert (coverage.statement_count, coverage.executed_count) == (1, 1)
    assert coverage.name == "f"


def test_correlate_counts_overlapping_blocks_in_full() -> None:
    fn = function(body_range=FUNCTION_RANGE, statements=2)
    blocks = [
        profile_block((1, 1), (2, 5), statements=7, hits=1),
        profile_block((3, 12), (4, 10), statements=2, hits=3),
        profile_block((4, 10), (9, 2), statements=4, hits=0),
        profile_block((10, 1), (12, 2), statements=9, hits=1),
    ]

    coverage = correlate(fn, blocks)

    assert (coverage.statement_count, coverage.executed_count) == (6, 2)


def test_correlate_falls_back_to_extracted_statements() -> None:
    fn = function(body_range=FUNCTION_RANGE, statements=3)

    coverage = correlate(fn, [profile_block((20, 1), (22, 2), statements=5, hits=1)])

    assert (coverage.statement_count, coverage.executed_count) == (3, 0)


def test_correlate_keeps_profile_count_when_it_disagrees() -> None:
    fn = function(body_range=FUNCTION_RANGE, statements=3)

    coverage = correlate(fn, [profile_block((3, 12), (6, 2), statements=2, hits=1)])

    assert (coverage.statement_count, coverage.executed_count) == (2, 2)


def test_correlate_function_without_statements_or_blocks() -> None:
    coverage = correlate(function(body_range=FUNCTION_RANGE), [])

    assert (coverage.statement_count, coverage.executed_count) == (0, 0)


def test_record_function_coverage_without_profile() -> None:
    functions = [function("a", rng(1, 1, 3, 2), statements=1), function("b", rng(5, 1, 9, 2), statements=2)]

    coverages = record_function_coverage(functions, None)

    assert [(item.name, item.statement_count, item.executed_count) for item in coverages] == [
        ("a", 1, 0),
        ("b", 2, 0),
    ]
    assert all(item.profile is None for item in coverages)


def test_record_function_coverage_attaches_profile() -> None:
    profile = Profile(
        file_name="pkg/file.go",
        mode="count",
        blocks=(profile_block((1, 12), (3, 2), hits=2), profile_block((5, 12), (9, 2), statements=2, hits=0)),
    )
    functions = [function("a", rng(1, 1, 3, 2), statements=1), function("b", rng(5, 1, 9, 2), statements=2)]

    coverages = record_function_coverage(functions, profile)

    assert [(item.statement_count, item.executed_count) for item in coverages] == [(1, 1), (2, 0)]
    assert all(item.profile is profile for item in coverages)
