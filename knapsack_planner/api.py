"""
API wrapper functions for task selection and ordering.
"""

import logging
import math
import uuid
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from .core import plan_tasks, select_tasks
from .exceptions import PlannerError
from .models import (
    OrderRequest,
    OrderResponse,
    PlanSummary,
    SelectionRequest,
    SelectionResponse,
    SelectionResult,
    Task,
)
from .ordering import order_tasks

logger = logging.getLogger(__name__)


def select_tasks_api(request_data: dict[str, Any]) -> dict[str, Any]:
    """
    API wrapper for budget-constrained task selection.

    Args:
        request_data: Dictionary containing selection request data

    Returns:
        Dictionary containing selection response data. Invalid requests
        produce success=False with an error code instead of raising.
    """
    request_id = str(uuid.uuid4())
    try:
        request = SelectionRequest(**request_data)
        response = run_selection(request, request_id)

    except ValidationError as e:
        logger.warning(f"Selection {request_id} rejected: {e.error_count()} errors")
        response = SelectionResponse(
            success=False,
            error_code="VALIDATION_ERROR",
            message=str(e),
            request_id=request_id,
        )
    except PlannerError as e:
        logger.warning(f"Selection {request_id} failed: {e.message}")
        response = SelectionResponse(
            success=False,
            error_code=e.error_code,
            message=e.message,
            request_id=request_id,
        )

    return response.model_dump()


def run_selection(request: SelectionRequest, request_id: str) -> SelectionResponse:
    """Run the optimizer for a parsed request and attach display figures."""
    if request.exclude_completed:
        result = plan_tasks(request.tasks, request.time_budget)
    else:
        result = select_tasks(request.tasks, request.time_budget)

    logger.info(
        f"Selection {request_id}: {len(result.selected_tasks)} of "
        f"{len(request.tasks)} tasks, value {result.total_value}"
    )
    return SelectionResponse(
        success=True,
        result=result,
        summary=summarize_selection(result, request.time_budget),
        request_id=request_id,
    )


def order_tasks_api(request_data: dict[str, Any]) -> dict[str, Any]:
    """
    API wrapper for task ordering.

    Raises:
        pydantic.ValidationError: If the request body is malformed
    """
    request = OrderRequest(**request_data)
    ordered = order_tasks(request.tasks, request.sort_by, request.ascending)
    return OrderResponse(tasks=ordered).model_dump()


def create_task_from_dict(task_data: dict[str, Any]) -> Task:
    """
    Create Task instance from loosely-typed dictionary data.

    Accepts either ``created_at`` or ``createdAt``, as an ISO string,
    a datetime or epoch milliseconds.
    """
    created_raw = task_data.get("created_at", task_data.get("createdAt"))
    created_at = None
    if isinstance(created_raw, datetime):
        created_at = created_raw
    elif isinstance(created_raw, str) and created_raw:
        try:
            created_at = datetime.fromisoformat(created_raw)
        except ValueError:
            created_at = None
    elif isinstance(created_raw, (int, float)) and not isinstance(created_raw, bool):
        created_at = datetime.fromtimestamp(created_raw / 1000)

    fields: dict[str, Any] = {
        "id": task_data["id"],
        "name": str(task_data.get("name", "")),
        "importance": _to_number(task_data["importance"]),
        "time": _to_number(task_data["time"]),
        "completed": bool(task_data.get("completed", False)),
    }
    if created_at is not None:
        fields["created_at"] = created_at
    return Task(**fields)


def _to_number(value: Any) -> int | float:
    if isinstance(value, str):
        number = float(value)
        return int(number) if number.is_integer() else number
    return value


def format_minutes(minutes: float) -> str:
    """
    Format a minute count as hours and minutes.

    Example:
        >>> format_minutes(90)
        '1h 30m'
    """
    total = math.floor(abs(minutes))
    sign = "-" if minutes < 0 and total > 0 else ""
    hours, mins = divmod(total, 60)
    if hours == 0:
        return f"{sign}{mins}m"
    if mins == 0:
        return f"{sign}{hours}h"
    return f"{sign}{hours}h {mins}m"


def summarize_selection(result: SelectionResult, time_budget: float) -> PlanSummary:
    """Compute used time and utilization for a selection result."""
    time_used = time_budget - result.remaining_time
    if time_budget > 0:
        utilization = round(time_used / time_budget * 100)
    else:
        utilization = 0
    return PlanSummary(
        total_value=result.total_value,
        time_budget=time_budget,
        time_used=time_used,
        remaining_time=result.remaining_time,
        utilization_percent=utilization,
        task_count=len(result.selected_tasks),
    )


def format_selection_result(
    result: SelectionResult, time_budget: float
) -> dict[str, Any]:
    """
    Format SelectionResult for API response.

    Args:
        result: SelectionResult instance
        time_budget: Budget the selection was computed for

    Returns:
        Formatted dictionary
    """
    summary = summarize_selection(result, time_budget)
    return {
        "selected_tasks": [
            {
                "id": task.id,
                "name": task.name,
                "importance": task.importance,
                "time": task.time,
                "time_display": format_minutes(task.time),
            }
            for task in result.selected_tasks
        ],
        "total_value": result.total_value,
        "time_used": summary.time_used,
        "time_used_display": format_minutes(summary.time_used),
        "remaining_time": result.remaining_time,
        "remaining_time_display": format_minutes(result.remaining_time),
        "utilization_percent": summary.utilization_percent,
    }


def validate_selection_request(request_data: dict[str, Any]) -> str | None:
    """
    Validate selection request data.

    Args:
        request_data: Dictionary containing request data

    Returns:
        Error message if validation fails, None if valid
    """
    if "tasks" not in request_data:
        return "Missing required field: tasks"

    tasks = request_data["tasks"]
    if not isinstance(tasks, list):
        return "Tasks must be a list"

    for i, task in enumerate(tasks):
        if not isinstance(task, dict):
            return f"Task {i} must be a dictionary"

        for field in ("id", "importance", "time"):
            if field not in task:
                return f"Task {i} missing required field: {field}"

        for field in ("importance", "time"):
            value = task[field]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return f"Task {i} field {field} must be a number"
            if not math.isfinite(value):
                return f"Task {i} field {field} must be finite"

    if "time_budget" in request_data:
        budget = request_data["time_budget"]
        if isinstance(budget, bool) or not isinstance(budget, (int, float)):
            return "time_budget must be a number"
        if not math.isfinite(budget):
            return "time_budget must be finite"

    return None
