"""
Tests for stable task ordering.
"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_task
from knapsack_planner.exceptions import InvalidArgumentError
from knapsack_planner.models import SortKey
from knapsack_planner.ordering import (
    arrange_for_display,
    make_comparator,
    merge_sort,
    order_tasks,
    resolve_sort_key,
)


@pytest.fixture
def tied_tasks():
    """Tasks with repeated importance values, ids in input order"""
    return [
        make_task(1, 3, 30),
        make_task(2, 1, 10),
        make_task(3, 3, 20),
        make_task(4, 2, 40),
        make_task(5, 1, 50),
    ]


def ids(tasks):
    return [task.id for task in tasks]


class TestOrderTasks:
    """Test cases for single-key ordering."""

    def test_ascending_keeps_tie_order(self, tied_tasks):
        result = order_tasks(tied_tasks, SortKey.IMPORTANCE, ascending=True)

        assert ids(result) == [2, 5, 4, 1, 3]

    def test_descending_keeps_tie_order(self, tied_tasks):
        """Tied tasks stay in input order when sorting descending."""
        result = order_tasks(tied_tasks, SortKey.IMPORTANCE, ascending=False)

        assert ids(result) == [1, 3, 4, 2, 5]

    def test_descending_is_not_reversed_ascending(self, tied_tasks):
        """Reversing the ascending output would flip tied tasks."""
        ascending = order_tasks(tied_tasks, SortKey.IMPORTANCE, ascending=True)
        descending = order_tasks(tied_tasks, SortKey.IMPORTANCE, ascending=False)

        assert ids(descending) != ids(list(reversed(ascending)))
        assert ids(list(reversed(ascending))) == [3, 1, 4, 5, 2]

    @pytest.mark.parametrize("ascending", [True, False])
    def test_idempotent(self, tied_tasks, ascending):
        once = order_tasks(tied_tasks, SortKey.IMPORTANCE, ascending)
        twice = order_tasks(once, SortKey.IMPORTANCE, ascending)

        assert ids(twice) == ids(once)

    def test_sort_by_time(self, tied_tasks):
        result = order_tasks(tied_tasks, SortKey.TIME)

        assert ids(result) == [2, 3, 1, 4, 5]

    def test_sort_by_name_is_lexicographic(self):
        tasks = [
            make_task(1, 1, 1, name="banana"),
            make_task(2, 1, 1, name="apple"),
            make_task(3, 1, 1, name="Apple"),
            make_task(4, 1, 1, name="apple"),
        ]

        result = order_tasks(tasks, SortKey.NAME)

        assert ids(result) == [3, 2, 4, 1]

    def test_sort_by_created_at(self):
        base = datetime(2025, 6, 23, 9, 0)
        tasks = [
            make_task(1, 1, 1, created_at=base + timedelta(hours=2)),
            make_task(2, 1, 1, created_at=base),
            make_task(3, 1, 1, created_at=base + timedelta(hours=1)),
        ]

        result = order_tasks(tasks, SortKey.CREATED_AT, ascending=False)

        assert ids(result) == [1, 3, 2]

    def test_sort_by_id_recency(self):
        tasks = [make_task(1700000000300, 1, 1), make_task(1700000000100, 1, 1)]

        result = order_tasks(tasks, SortKey.ID, ascending=False)

        assert ids(result) == [1700000000300, 1700000000100]

    def test_digit_string_ids_compare_numerically(self):
        """Digit-string ids compare by value, so "10" is newer than "9"."""
        tasks = [make_task("9", 1, 1), make_task("10", 1, 1)]

        result = order_tasks(tasks, SortKey.ID, ascending=False)

        assert ids(result) == ["10", "9"]

    def test_int_and_digit_string_ids_mix(self):
        tasks = [make_task(12, 1, 1), make_task("9", 1, 1), make_task(10, 1, 1)]

        result = order_tasks(tasks, SortKey.ID)

        assert ids(result) == ["9", 10, 12]

    def test_text_ids_follow_numeric_ids(self):
        """Mixed id types order instead of failing."""
        tasks = [make_task("abc", 1, 1), make_task(7, 1, 1), make_task("abb", 1, 1)]

        assert ids(order_tasks(tasks, SortKey.ID)) == [7, "abb", "abc"]
        assert ids(order_tasks(tasks, SortKey.ID, ascending=False)) == ["abc", "abb", 7]

    def test_naive_and_aware_timestamps_mix(self):
        """Naive timestamps are compared as UTC."""
        tasks = [
            make_task(1, 1, 1, created_at=datetime(2025, 1, 1, 1, 0)),
            make_task(2, 1, 1, created_at=datetime(2025, 1, 1, tzinfo=timezone.utc)),
            make_task(
                3, 1, 1,
                created_at=datetime(2025, 1, 1, 3, 30, tzinfo=timezone(timedelta(hours=3))),
            ),
        ]

        result = order_tasks(tasks, SortKey.CREATED_AT)

        assert ids(result) == [2, 3, 1]

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("importance", SortKey.IMPORTANCE),
            ("IMPORTANCE", SortKey.IMPORTANCE),
            ("createdAt", SortKey.CREATED_AT),
            ("created_at", SortKey.CREATED_AT),
            ("id", SortKey.ID),
        ],
    )
    def test_string_keys(self, name, expected):
        assert resolve_sort_key(name) is expected

    @pytest.mark.parametrize("key", ["priority", "", "completed"])
    def test_unknown_key_is_rejected(self, tied_tasks, key):
        with pytest.raises(InvalidArgumentError) as exc_info:
            order_tasks(tied_tasks, key)
        assert exc_info.value.field == "key"

    def test_input_is_not_modified(self, tied_tasks):
        before = list(tied_tasks)

        result = order_tasks(tied_tasks, SortKey.IMPORTANCE)

        assert tied_tasks == before
        assert result is not tied_tasks

    def test_empty_and_single(self):
        single = [make_task(1, 1, 1)]

        assert order_tasks([], SortKey.TIME) == []
        assert ids(order_tasks(single, SortKey.TIME)) == [1]
        assert order_tasks(single, SortKey.TIME) is not single

    def test_accepts_tuples(self, tied_tasks):
        result = order_tasks(tuple(tied_tasks), SortKey.IMPORTANCE)

        assert isinstance(result, list)
        assert ids(result) == [2, 5, 4, 1, 3]


class TestMergeSort:
    """Test cases for the comparator-driven merge sort."""

    def test_comparator_direction(self):
        low, high = make_task(1, 1, 1), make_task(2, 9, 1)

        assert make_comparator(SortKey.IMPORTANCE, True)(low, high) == -1
        assert make_comparator(SortKey.IMPORTANCE, False)(low, high) == 1
        assert make_comparator(SortKey.TIME, False)(low, high) == 0

    def test_large_input_is_stable(self):
        tasks = [make_task(i, i % 4, 1) for i in range(101)]

        result = merge_sort(tasks, make_comparator(SortKey.IMPORTANCE, False))

        expected = sorted(tasks, key=lambda t: -t.importance)
        assert ids(result) == ids(expected)


class TestArrangeForDisplay:
    """Test cases for the combined pending/completed listing."""

    def test_pending_first_then_completed_by_id(self):
        tasks = [
            make_task(5, 1, 10, completed=True),
            make_task(1, 2, 10),
            make_task(3, 9, 10, completed=True),
            make_task(2, 7, 10),
            make_task(4, 2, 10),
        ]

        result = arrange_for_display(tasks, SortKey.IMPORTANCE, ascending=False)

        assert ids(result) == [2, 1, 4, 3, 5]

    def test_defaults_to_importance_descending(self):
        tasks = [make_task(1, 1, 10), make_task(2, 5, 10)]

        assert ids(arrange_for_display(tasks)) == [2, 1]

    def test_completed_tasks_with_mixed_ids(self):
        tasks = [
            make_task("abc", 1, 1, completed=True),
            make_task(1, 1, 1, completed=True),
            make_task(2, 1, 1),
        ]

        assert ids(arrange_for_display(tasks)) == [2, 1, "abc"]

    def test_unknown_key_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            arrange_for_display([make_task(1, 1, 1)], "colour")
