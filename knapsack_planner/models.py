"""
Data models for task selection and ordering using Pydantic.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from knapsack_planner.config import settings


class SortKey(str, Enum):
    """Task fields the orderer knows how to compare."""

    IMPORTANCE = "importance"
    TIME = "time"
    NAME = "name"
    CREATED_AT = "created_at"
    ID = "id"  # Recency: newer tasks carry larger ids

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "createdat":
                return cls.CREATED_AT
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class Task(BaseModel):
    """Candidate task supplied by the collaborator."""

    model_config = ConfigDict(frozen=True)

    id: int | str = Field(..., description="Unique task identifier")
    name: str = Field("", description="Task description")
    importance: int | float = Field(..., description="Value gained by doing the task")
    time: int | float = Field(..., description="Estimated duration in minutes")
    completed: bool = Field(False, description="Whether the task is already done")
    created_at: datetime = Field(
        default_factory=datetime.now,
        validation_alias=AliasChoices("created_at", "createdAt"),
        description="Creation timestamp",
    )


class SelectionResult(BaseModel):
    """Result of budget-constrained task selection."""

    selected_tasks: list[Task] = Field(
        default_factory=list, description="Chosen tasks, in reconstruction order"
    )
    total_value: int | float = Field(0, description="Sum of selected importance")
    remaining_time: int | float = Field(0, description="Unused budget in minutes")

    @property
    def selected_ids(self) -> list[int | str]:
        return [task.id for task in self.selected_tasks]


class PlanSummary(BaseModel):
    """Figures the presentation layer shows next to a selection."""

    total_value: int | float
    time_budget: int | float
    time_used: int | float
    remaining_time: int | float
    utilization_percent: int
    task_count: int


class SelectionRequest(BaseModel):
    """Request model for task selection API."""

    tasks: list[Task] = Field(..., description="Candidate tasks")
    time_budget: float = Field(
        default_factory=lambda: settings.default_time_budget,
        description="Available time in minutes",
    )
    exclude_completed: bool = Field(
        True, description="Drop completed tasks before optimizing"
    )


class SelectionResponse(BaseModel):
    """Response model for task selection API."""

    success: bool = Field(..., description="Whether selection succeeded")
    result: SelectionResult | None = Field(None, description="Selection result")
    summary: PlanSummary | None = Field(None, description="Display figures")
    error_code: str | None = Field(None, description="Error code on failure")
    message: str | None = Field(None, description="Error message on failure")
    request_id: str | None = Field(None, description="Request identifier")
    generated_at: datetime = Field(
        default_factory=datetime.now, description="Response generation time"
    )


class OrderRequest(BaseModel):
    """Request model for task ordering API."""

    tasks: list[Task] = Field(..., description="Tasks to order")
    sort_by: str = Field(
        default_factory=lambda: settings.default_sort_key, description="Sort key name"
    )
    ascending: bool = Field(
        default_factory=lambda: settings.default_sort_ascending,
        description="Sort direction",
    )

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, v: str) -> str:
        try:
            return SortKey(v).value
        except ValueError as e:
            raise ValueError(
                f"sort_by must be one of {[k.value for k in SortKey]}"
            ) from e


class OrderResponse(BaseModel):
    """Response model for task ordering API."""

    tasks: list[Task] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Standard error body returned by the HTTP layer."""

    detail: str
    error_code: str
    path: str | None = None
    errors: list[dict[str, Any]] = Field(default_factory=list)
