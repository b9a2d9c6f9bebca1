"""
Calculation Errors

Every validation failure raised by the calculation engine derives from
CalculationError, which is a ValueError so callers that already catch
ValueError keep working.
"""

from typing import Optional, Sequence


class CalculationError(ValueError):
    """Base class for rejected calculation inputs."""

    field: Optional[str] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "field": self.field,
        }


class MissingUnknownError(CalculationError):
    """No unknown variable was selected."""

    def __init__(self, message: str = "An unknown to solve for must be selected"):
        super().__init__(message)


class InvalidFieldError(CalculationError):
    """A required field is missing, non-finite, or not positive."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Field {field} must be a positive number")


class InsufficientInputsError(CalculationError):
    """Not enough known values to determine the unknown."""

    def __init__(self, message: str, missing: Sequence[str] = ()):
        super().__init__(message)
        self.missing = list(missing)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["missing"] = self.missing
        return data


class DomainError(CalculationError):
    """The inputs are valid but no closed-form formula covers them."""

    def __init__(self, reason: str, field: Optional[str] = None):
        self.reason = reason
        self.field = field
        super().__init__(reason)


class DivisionByZeroError(CalculationError):
    """A formula denominator evaluates to zero."""

    def __init__(self, message: str = "Calculation would divide by zero"):
        super().__init__(message)
