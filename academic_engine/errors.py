"""Exception types raised by the academic performance engine."""

from typing import Optional


class AcademicEngineError(Exception):
    """Base class for all engine errors."""


class InvalidWeightConfiguration(AcademicEngineError, ValueError):
    """A component weight table is unusable (non-positive, duplicate or unknown type)."""


class MalformedGradeEntry(AcademicEngineError, ValueError):
    """A graded entry carries a score outside the 0-10 scale."""


class SubjectAggregationError(AcademicEngineError):
    """
    A single subject could not be aggregated.

    Raised by the report compiler so the caller knows which subject and
    period failed. The original exception is chained as ``__cause__``.
    """

    def __init__(self, subject_id: str, period_label: str, reason: str, cause: Optional[Exception] = None):
        self.subject_id = subject_id
        self.period_label = period_label
        self.reason = reason
        self.cause = cause
        super().__init__(f"Subject {subject_id!r} failed for period {period_label!r}: {reason}")
