"""
Stable task ordering for display.

Tasks are sorted with a recursive merge sort so that tasks comparing equal
keep their input order in both directions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from knapsack_planner.exceptions import InvalidArgumentError
from knapsack_planner.models import SortKey, Task

logger = logging.getLogger(__name__)

Comparator = Callable[[Task, Task], int]


def _timestamp_key(value: datetime) -> datetime:
    # Naive timestamps are read as UTC so they compare with aware ones
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _recency_key(value: int | str) -> tuple[int, Any]:
    """Numeric ids (including digit strings) by value, then other ids as text."""
    if isinstance(value, (int, float)):
        return (0, value)
    text = str(value)
    if text.isdigit():
        return (0, int(text))
    return (1, text)


_FIELD_GETTERS: dict[SortKey, Callable[[Task], Any]] = {
    SortKey.IMPORTANCE: lambda task: task.importance,
    SortKey.TIME: lambda task: task.time,
    SortKey.NAME: lambda task: task.name,
    SortKey.CREATED_AT: lambda task: _timestamp_key(task.created_at),
    SortKey.ID: lambda task: _recency_key(task.id),
}


def resolve_sort_key(key: SortKey | str) -> SortKey:
    """Map a key name onto SortKey, rejecting anything unrecognized."""
    if isinstance(key, SortKey):
        return key
    try:
        return SortKey(key)
    except ValueError as e:
        raise InvalidArgumentError(
            f"unknown sort key {key!r}; expected one of {[k.value for k in SortKey]}",
            "key",
        ) from e


def make_comparator(key: SortKey | str, ascending: bool = True) -> Comparator:
    """Build a three-way comparator; descending negates the result."""
    getter = _FIELD_GETTERS[resolve_sort_key(key)]
    direction = 1 if ascending else -1

    def compare(a: Task, b: Task) -> int:
        left, right = getter(a), getter(b)
        if left < right:
            return -direction
        if left > right:
            return direction
        return 0

    return compare


def _merge(left: list[Task], right: list[Task], compare: Comparator) -> list[Task]:
    merged: list[Task] = []
    i = j = 0
    while i < len(left) and j < len(right):
        # Left half wins ties
        if compare(left[i], right[j]) <= 0:
            merged.append(left[i])
            i += 1
        else:
            merged.append(right[j])
            j += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


def merge_sort(tasks: Sequence[Task], compare: Comparator) -> list[Task]:
    if len(tasks) <= 1:
        return list(tasks)
    middle = len(tasks) // 2
    left = merge_sort(tasks[:middle], compare)
    right = merge_sort(tasks[middle:], compare)
    return _merge(left, right, compare)


def order_tasks(
    tasks: Sequence[Task], key: SortKey | str, ascending: bool = True
) -> list[Task]:
    """
    Return a new list of tasks sorted by one field.

    Args:
        tasks: Tasks to order; the sequence is not modified
        key: Field to compare (importance, time, name, created_at or id)
        ascending: False sorts descending while keeping tied tasks in
            input order

    Returns:
        Sorted copy of tasks

    Raises:
        InvalidArgumentError: If key is not a recognized sort key
    """
    compare = make_comparator(key, ascending)
    return merge_sort(list(tasks), compare)


def arrange_for_display(
    tasks: Sequence[Task],
    sort_by: SortKey | str = SortKey.IMPORTANCE,
    ascending: bool = False,
) -> list[Task]:
    """Pending tasks in the chosen order, then completed tasks by id."""
    sort_key = resolve_sort_key(sort_by)
    pending = [task for task in tasks if not task.completed]
    completed = [task for task in tasks if task.completed]
    logger.debug(
        f"Arranging {len(pending)} pending and {len(completed)} completed tasks "
        f"by {sort_key.value} ({'asc' if ascending else 'desc'})"
    )
    return order_tasks(pending, sort_key, ascending) + order_tasks(
        completed, SortKey.ID, True
    )
