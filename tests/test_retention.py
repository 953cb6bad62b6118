"""Tests for daily pool retention."""

import pytest

from padpool.domain.retention import effective_days_to_keep, select_identifiers_to_delete
from padpool.models.dc_models import ServerDataMode

TEN_DAYS = [f"2024-01-{day:02d}" for day in range(1, 11)]


def test_keeps_newest_three() -> None:
    selected = select_identifiers_to_delete(TEN_DAYS, ServerDataMode.daily, 3)
    assert selected == [f"2024-01-{day:02d}" for day in range(1, 8)]


def test_indefinite_never_deletes() -> None:
    many = [f"2023-{month:02d}-{day:02d}" for month in range(1, 13) for day in range(1, 29)]
    assert select_identifiers_to_delete(many, ServerDataMode.daily, -1) == []


@pytest.mark.parametrize("days_to_keep", [-1, 0, 1, 3, 100])
def test_single_mode_never_deletes(days_to_keep: int) -> None:
    assert select_identifiers_to_delete(TEN_DAYS, ServerDataMode.single, days_to_keep) == []


@pytest.mark.parametrize("days_to_keep", [0, 1])
def test_zero_and_one_keep_only_newest(days_to_keep: int) -> None:
    selected = select_identifiers_to_delete(TEN_DAYS, ServerDataMode.daily, days_to_keep)
    assert selected == TEN_DAYS[:-1]


def test_below_minus_one_keeps_one() -> None:
    assert select_identifiers_to_delete(TEN_DAYS, ServerDataMode.daily, -5) == TEN_DAYS[:-1]


def test_within_limit_deletes_nothing() -> None:
    assert select_identifiers_to_delete(TEN_DAYS[:3], ServerDataMode.daily, 3) == []


def test_unsorted_input_still_evicts_oldest() -> None:
    shuffled = ["2024-01-03", "2024-01-01", "2024-01-04", "2024-01-02"]
    assert select_identifiers_to_delete(shuffled, ServerDataMode.daily, 2) == ["2024-01-01", "2024-01-02"]


def test_counts_stored_pools_not_elapsed_days() -> None:
    with_gap = ["2024-01-01", "2024-03-15", "2024-06-01"]
    assert select_identifiers_to_delete(with_gap, ServerDataMode.daily, 3) == []


def test_ignores_non_date_identifiers() -> None:
    identifiers = ["2024-01-01", "2024-01-02", "single"]
    assert select_identifiers_to_delete(identifiers, ServerDataMode.daily, 1) == ["2024-01-01"]


@pytest.mark.parametrize(
    "days_to_keep, expected",
    [(-1, None), (-2, 1), (0, 1), (1, 1), (2, 2), (7, 7)],
)
def test_effective_days_to_keep(days_to_keep: int, expected) -> None:
    assert effective_days_to_keep(days_to_keep) == expected
