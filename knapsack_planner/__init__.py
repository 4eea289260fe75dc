"""
Knapsack Planner Package

Picks the most valuable set of tasks that fits a time budget, and orders
tasks stably for display.
"""

from .api import order_tasks_api, select_tasks_api
from .core import SelectorConfig, plan_tasks, select_tasks
from .exceptions import InvalidArgumentError, PlannerError, ResourceExhaustedError
from .models import PlanSummary, SelectionResult, SortKey, Task
from .ordering import arrange_for_display, order_tasks

__version__ = "0.1.0"
__all__ = [
    "arrange_for_display",
    "InvalidArgumentError",
    "order_tasks",
    "order_tasks_api",
    "plan_tasks",
    "PlannerError",
    "PlanSummary",
    "ResourceExhaustedError",
    "select_tasks",
    "select_tasks_api",
    "SelectionResult",
    "SelectorConfig",
    "SortKey",
    "Task",
]
