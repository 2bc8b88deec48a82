from __future__ import annotations

import pytest

from xrefsync.domain.reconciliation import NonContiguousKeyError, build_units
from tests.helpers.associations import MARKER_TYPE, candidate_row, subject_row


def test_build_units_groups_contiguous_keys_in_order() -> None:
    rows = [
        subject_row(key=1),
        candidate_row(key=1, identifier="A"),
        subject_row(key=2),
        candidate_row(key=2, identifier="B"),
        candidate_row(key=2, identifier="C"),
    ]

    units = list(build_units(rows, expected_subject_type=MARKER_TYPE))

    assert [unit.key for unit in units] == [1, 2]
    assert units[0].rows == tuple(rows[:2])
    assert units[1].rows == tuple(rows[2:])
    assert all(unit.expected_subject_type == MARKER_TYPE for unit in units)


def test_build_units_is_lazy() -> None:
    consumed: list[int] = []

    def rows():
        for key in (1, 2, 3):
            consumed.append(key)
            yield candidate_row(key=key)

    units = build_units(rows(), expected_subject_type=MARKER_TYPE)
    first = next(units)

    assert first.key == 1
    assert consumed == [1, 2]


def test_build_units_rejects_reappearing_key() -> None:
    rows = [candidate_row(key=1), candidate_row(key=2), candidate_row(key=1)]

    units = build_units(rows, expected_subject_type=MARKER_TYPE)

    assert next(units).key == 1
    with pytest.raises(NonContiguousKeyError) as excinfo:
        list(units)
    assert excinfo.value.key == 1


def test_build_units_accepts_string_keys() -> None:
    rows = [candidate_row(key="batch-a"), candidate_row(key="batch-b")]

    units = list(build_units(rows, expected_subject_type=MARKER_TYPE))

    assert [unit.key for unit in units] == ["batch-a", "batch-b"]


def test_build_units_yields_nothing_for_empty_source() -> None:
    assert list(build_units([], expected_subject_type=MARKER_TYPE)) == []
