"""Custom exceptions for Bross sequential analysis."""

from __future__ import annotations


class SeqPlanError(ValueError):
    """Base class for precondition failures raised by the core."""

    error_code = "SEQPLAN"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"{self.error_code}: {message}")

    def __reduce__(self):
        # __init__ adds the prefix, so pickle the bare message
        return (type(self), (self.message,))


class InvalidInputError(SeqPlanError):
    """Raised when the pair matrix is not an N-by-2 matrix of 0/1 values."""

    error_code = "SEQPLAN_INVALID_INPUT"


class InvalidMapError(SeqPlanError):
    """Raised when a decision map is not 31x31 or holds unknown region codes."""

    error_code = "SEQPLAN_INVALID_MAP"


class OutOfBoundsError(SeqPlanError):
    """Raised when a walk step would leave the decision map."""

    error_code = "SEQPLAN_OUT_OF_BOUNDS"


class InvalidArgumentError(SeqPlanError):
    """Raised for bad run parameters (iterations, alpha, workers)."""

    error_code = "SEQPLAN_INVALID_ARGUMENT"
