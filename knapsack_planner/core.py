"""
Core task selection using 0/1 knapsack dynamic programming.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Real

from knapsack_planner.config import settings
from knapsack_planner.exceptions import InvalidArgumentError, ResourceExhaustedError
from knapsack_planner.models import SelectionResult, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectorConfig:
    max_table_cells: int = 0  # 0 means use settings.max_table_cells

    @property
    def cell_limit(self) -> int:
        return self.max_table_cells or settings.max_table_cells


def _require_finite(value: object, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgumentError(f"expected a number, got {value!r}", field)
    if not math.isfinite(value):
        raise InvalidArgumentError(f"expected a finite number, got {value!r}", field)
    return value


def _truncated_cost(task: Task) -> int:
    return math.floor(task.time)


class KnapsackSelector:
    """Selects the most valuable task subset that fits a time budget."""

    def __init__(self, tasks: Sequence[Task], budget: float, config: SelectorConfig):
        self.tasks = list(tasks)
        self.budget = budget
        self.config = config
        self.capacity = math.floor(budget)
        self.costs = self._prepare_costs()

    def _prepare_costs(self) -> list[int]:
        """Validate numeric fields and convert durations to whole minutes."""
        costs = []
        for i, task in enumerate(self.tasks):
            _require_finite(task.importance, f"tasks[{i}].importance")
            _require_finite(task.time, f"tasks[{i}].time")
            if task.time < 0:
                raise InvalidArgumentError(
                    f"time must not be negative, got {task.time!r}", f"tasks[{i}].time"
                )
            costs.append(_truncated_cost(task))
        return costs

    def is_degenerate(self) -> bool:
        """True when no task fits, so only the single-task fallback applies."""
        return self.capacity <= 0 or all(cost > self.capacity for cost in self.costs)

    def fallback(self) -> SelectionResult:
        """
        Suggest the single most important task, ignoring the budget.

        Ties on importance go to the shorter task, then to the earlier one.
        """
        best = min(self.tasks, key=lambda task: (-task.importance, task.time))
        logger.debug(
            f"Budget {self.budget} fits no task; falling back to task {best.id}"
        )
        return SelectionResult(
            selected_tasks=[best],
            total_value=best.importance,
            remaining_time=0,
        )

    def solve(self) -> SelectionResult:
        """Fill the DP table and reconstruct the optimal subset."""
        n = len(self.tasks)
        capacity = self.capacity
        cells = (n + 1) * (capacity + 1)
        if cells > self.config.cell_limit:
            raise ResourceExhaustedError(
                f"Selection table needs {cells} cells for {n} tasks and budget "
                f"{capacity}; limit is {self.config.cell_limit}",
                cells=cells,
            )
        logger.debug(f"Building {n + 1}x{capacity + 1} selection table")

        try:
            dp = [[0] * (capacity + 1) for _ in range(n + 1)]
            included = [[False] * (capacity + 1) for _ in range(n + 1)]
        except MemoryError as e:
            raise ResourceExhaustedError(
                f"Could not allocate selection table of {cells} cells", cells=cells
            ) from e

        for i in range(1, n + 1):
            cost = self.costs[i - 1]
            value = self.tasks[i - 1].importance
            previous = dp[i - 1]
            row = dp[i]
            for w in range(capacity + 1):
                if cost <= w:
                    include_value = value + previous[w - cost]
                    exclude_value = previous[w]
                    # Ties keep the task out
                    if include_value > exclude_value:
                        row[w] = include_value
                        included[i][w] = True
                    else:
                        row[w] = exclude_value
                else:
                    row[w] = previous[w]

        return self._process_solution(dp, included)

    def _process_solution(
        self, dp: list[list[float]], included: list[list[bool]]
    ) -> SelectionResult:
        """Walk the table backwards, yielding tasks in reverse input order."""
        n = len(self.tasks)
        selected: list[Task] = []
        remaining = self.capacity

        for i in range(n, 0, -1):
            if included[i][remaining]:
                selected.append(self.tasks[i - 1])
                remaining -= self.costs[i - 1]

        return SelectionResult(
            selected_tasks=selected,
            total_value=dp[n][self.capacity],
            remaining_time=remaining,
        )


def select_tasks(
    tasks: Sequence[Task],
    budget: float,
    *,
    config: SelectorConfig | None = None,
) -> SelectionResult:
    """
    Select the subset of tasks with maximum total importance within a budget.

    Args:
        tasks: Candidate tasks; completion state is not consulted
        budget: Available time in minutes, floored before use
        config: Optional selector limits

    Returns:
        SelectionResult with the chosen tasks, their total importance and
        the unused budget

    Raises:
        InvalidArgumentError: If the budget or a task field is not a finite
            number, or a task has negative time
        ResourceExhaustedError: If the DP table would exceed the cell limit
    """
    if config is None:
        config = SelectorConfig()

    _require_finite(budget, "budget")

    if not tasks:
        return SelectionResult(selected_tasks=[], total_value=0, remaining_time=budget)

    selector = KnapsackSelector(tasks, budget, config)
    if selector.is_degenerate():
        return selector.fallback()
    return selector.solve()


def plan_tasks(
    tasks: Sequence[Task],
    budget: float,
    *,
    config: SelectorConfig | None = None,
) -> SelectionResult:
    """Select from the tasks that are not completed yet."""
    pending = [task for task in tasks if not task.completed]
    logger.debug(
        f"Planning {len(pending)} pending of {len(tasks)} tasks within {budget} minutes"
    )
    return select_tasks(pending, budget, config=config)
