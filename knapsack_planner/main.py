"""
HTTP interface for the knapsack planner.
"""

import logging
import uuid

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from knapsack_planner.api import run_selection
from knapsack_planner.config import settings
from knapsack_planner.exceptions import (
    InvalidArgumentError,
    PlannerError,
    ResourceExhaustedError,
)
from knapsack_planner.models import (
    ErrorResponse,
    OrderRequest,
    OrderResponse,
    SelectionRequest,
    SelectionResponse,
)
from knapsack_planner.ordering import arrange_for_display, order_tasks

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plan", tags=["plan"])


@router.post(
    "/select",
    response_model=SelectionResponse,
    responses={
        413: {"model": ErrorResponse, "description": "Budget too large"},
        422: {"model": ErrorResponse, "description": "Invalid task data"},
    },
)
def select(request: SelectionRequest) -> SelectionResponse:
    """Pick the most valuable tasks that fit within the time budget."""
    request_id = str(uuid.uuid4())
    logger.info(
        f"Selection {request_id}: {len(request.tasks)} tasks, "
        f"budget {request.time_budget}"
    )
    return run_selection(request, request_id)


@router.post("/order", response_model=OrderResponse)
def order(request: OrderRequest) -> OrderResponse:
    """Sort tasks by a single field."""
    return OrderResponse(
        tasks=order_tasks(request.tasks, request.sort_by, request.ascending)
    )


@router.post("/display", response_model=OrderResponse)
def display(request: OrderRequest) -> OrderResponse:
    """Pending tasks in the requested order, followed by completed ones."""
    return OrderResponse(
        tasks=arrange_for_display(request.tasks, request.sort_by, request.ascending)
    )


async def planner_exception_handler(request: Request, exc: PlannerError):
    """Handle planner errors"""
    status_code = status.HTTP_400_BAD_REQUEST
    if isinstance(exc, InvalidArgumentError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, ResourceExhaustedError):
        status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            detail=exc.message,
            error_code=exc.error_code or "PLANNER_ERROR",
            path=str(request.url),
        ).model_dump(),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            detail="Request validation failed",
            error_code="VALIDATION_ERROR",
            path=str(request.url),
            errors=errors,
        ).model_dump(),
    )


def create_app() -> FastAPI:
    app = FastAPI(title=settings.api_title, version=settings.api_version)
    app.add_exception_handler(PlannerError, planner_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(router, prefix="/api")

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
