"""
Error types raised by the planner core.
"""


class PlannerError(Exception):
    """Base exception for knapsack planner errors"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class InvalidArgumentError(PlannerError):
    """Raised when an argument cannot be used for selection or ordering"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        if field:
            message = f"Invalid value for '{field}': {message}"
        super().__init__(message, "INVALID_ARGUMENT")


class ResourceExhaustedError(PlannerError):
    """Raised when the optimization table would not fit in memory"""

    def __init__(self, message: str, cells: int | None = None):
        self.cells = cells
        super().__init__(message, "RESOURCE_EXHAUSTED")
