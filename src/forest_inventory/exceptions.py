"""
Custom exceptions for forest inventory analysis.
Every error raised by the package derives from ForestInventoryError.
"""
from typing import Any


class ForestInventoryError(Exception):
    """Base exception for all forest inventory errors."""
    pass


class ConfigurationError(ForestInventoryError):
    """Raised for missing or malformed configuration files and unknown model names."""
    pass


class ParameterError(ForestInventoryError):
    """Raised when an analysis parameter is out of bounds."""
    pass


class InvalidParameterError(ParameterError):
    """Raised when a parameter value is invalid."""
    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        message = f"Invalid value for parameter '{param_name}': {value}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class DataError(ForestInventoryError):
    """Raised for unreadable or unsupported inventory data."""
    pass


class InvalidDataError(DataError):
    """Raised when a tree record or input file fails validation."""
    def __init__(self, data_description: str, reason: str):
        self.data_description = data_description
        self.reason = reason
        super().__init__(f"Invalid {data_description}: {reason}")


class InsufficientDataError(ForestInventoryError):
    """Raised when an analysis precondition on sample size is not met."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Insufficient data: {reason}")


class AnalysisError(ForestInventoryError):
    """Raised when a numerical computation fails."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Analysis error: {reason}")


# Validation utilities
def validate_positive(value: float, param_name: str) -> float:
    """Validate that a value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error message

    Returns:
        The validated value

    Raises:
        InvalidParameterError: If value is not positive
    """
    if value <= 0:
        raise InvalidParameterError(param_name, value, "must be positive")
    return value


def validate_open_proportion(value: float, param_name: str) -> float:
    """Validate that a value lies strictly between 0 and 1."""
    if not 0 < value < 1:
        raise InvalidParameterError(param_name, value, "must be strictly between 0 and 1")
    return value
