# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for sibling ordering helpers."""

from dataclasses import dataclass

import pytest

from src.domains.common.ordering import ReorderError, renumber, shift_after, validate_reorder


@dataclass
class Item:
    id: str
    order_index: int


class TestValidateReorder:
    """Tests for validate_reorder()."""

    def test_valid_permutation(self) -> None:
        result = validate_reorder(["a", "b", "c"], [("c", 0), ("a", 1), ("b", 2)])

        assert result == {"c": 0, "a": 1, "b": 2}

    def test_duplicate_ids(self) -> None:
        with pytest.raises(ReorderError) as exc_info:
            validate_reorder(["a", "b"], [("a", 0), ("a", 1)])

        assert exc_info.value.details == {"duplicate_ids": ["a"]}

    def test_unknown_ids(self) -> None:
        with pytest.raises(ReorderError) as exc_info:
            validate_reorder(["a", "b"], [("a", 0), ("b", 1), ("x", 2)])

        assert exc_info.value.details == {"unknown_ids": ["x"]}

    def test_missing_ids(self) -> None:
        """A partial payload is refused."""
        with pytest.raises(ReorderError) as exc_info:
            validate_reorder(["a", "b", "c"], [("a", 0), ("b", 1)])

        assert exc_info.value.details == {"missing_ids": ["c"]}

    def test_gap_in_indices(self) -> None:
        with pytest.raises(ReorderError) as exc_info:
            validate_reorder(["a", "b"], [("a", 0), ("b", 2)])

        assert exc_info.value.details["expected"] == [0, 1]
        assert exc_info.value.details["received"] == [0, 2]

    def test_repeated_index(self) -> None:
        with pytest.raises(ReorderError):
            validate_reorder(["a", "b"], [("a", 1), ("b", 1)])

    def test_is_a_value_error(self) -> None:
        assert issubclass(ReorderError, ValueError)


class TestRenumber:
    """Tests for renumber()."""

    def test_closes_gaps(self) -> None:
        items = [Item("a", 0), Item("c", 4), Item("b", 2)]

        changed = renumber(items)

        assert changed == 2
        assert {i.id: i.order_index for i in items} == {"a": 0, "b": 1, "c": 2}

    def test_already_contiguous(self) -> None:
        items = [Item("a", 0), Item("b", 1)]

        assert renumber(items) == 0


class TestShiftAfter:
    """Tests for shift_after()."""

    def test_shifts_items_at_and_after_position(self) -> None:
        items = [Item("a", 0), Item("b", 1), Item("c", 2)]

        shift_after(items, 1)

        assert [i.order_index for i in items] == [0, 2, 3]

    def test_negative_delta(self) -> None:
        items = [Item("a", 0), Item("b", 2)]

        shift_after(items, 2, delta=-1)

        assert [i.order_index for i in items] == [0, 1]
