from __future__ import annotations


class PeriodValidationError(ValueError):
    """A report period parameter is missing or out of range.

    ``reason`` is machine-readable: ``missing_parameter`` or
    ``invalid_period_value``; ``parameter`` names the offending query field.
    """

    MISSING_PARAMETER = "missing_parameter"
    INVALID_PERIOD_VALUE = "invalid_period_value"

    def __init__(self, reason: str, parameter: str, message: str | None = None) -> None:
        self.reason = reason
        self.parameter = parameter
        self.message = message or f"{parameter}: {reason.replace('_', ' ')}"
        super().__init__(self.message)

    @classmethod
    def missing(cls, parameter: str) -> "PeriodValidationError":
        return cls(cls.MISSING_PARAMETER, parameter, f"{parameter} parameter is required")

    @classmethod
    def invalid(cls, parameter: str, detail: str | None = None) -> "PeriodValidationError":
        message = f"invalid value for {parameter}"
        if detail:
            message = f"{message}: {detail}"
        return cls(cls.INVALID_PERIOD_VALUE, parameter, message)


class ComputationError(Exception):
    """A single record cannot be attributed during aggregation."""

    def __init__(self, message: str, record_id=None) -> None:
        self.record_id = record_id
        super().__init__(message)
