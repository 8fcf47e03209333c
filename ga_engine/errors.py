"""
Error types for the genetic algorithm engine.
Structured errors carrying a machine-readable code and details.
"""

from typing import Any, Dict, List, Optional


class GAError(Exception):
    """Base exception for genetic algorithm errors."""

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly error payload."""
        return {
            "error": {
                "code": self.code,
                "message": str(self),
                "details": self.details,
            }
        }


class AllocationFailure(GAError):
    """Raised when a population or fitness buffer cannot be allocated."""

    def __init__(self, what: str, size: int):
        super().__init__(
            f"Could not allocate {what} of size {size}",
            "ALLOCATION_FAILURE",
            {"what": what, "size": size},
        )


class EmptyPopulationError(GAError):
    """Raised when an operation needs at least one individual."""

    def __init__(self, operation: str):
        super().__init__(
            f"Cannot run {operation} on an empty population",
            "EMPTY_POPULATION",
            {"operation": operation},
        )


class InvalidConfigError(GAError):
    """Raised when configuration is invalid."""

    def __init__(self, errors: List[str]):
        super().__init__(
            "Invalid configuration: " + "; ".join(errors),
            "INVALID_CONFIG",
            {"errors": errors},
        )
