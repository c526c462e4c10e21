"""Assembles the per-student, per-period performance report."""

import logging
from typing import List, Optional, Sequence, Tuple

from academic_engine.attendance import AttendanceAggregator
from academic_engine.errors import AcademicEngineError, SubjectAggregationError
from academic_engine.models import (
    AttendanceMark,
    ComponentScoreSet,
    ConductRating,
    PerformanceReport,
    SubjectAverage,
    SubjectFailure,
)
from academic_engine.periods import PeriodGPACalculator, cumulative, progress_to_next
from academic_engine.risk import RiskAssessor
from academic_engine.subjects import SubjectAggregator
from academic_engine.trends import TrendAnalyzer

logger = logging.getLogger(__name__)

RAISE = 'raise'
SKIP = 'skip'


class ReportCompiler:
    """
    Runs the engine for one student and period.

    Holds only stateless collaborators, so one compiler can be shared
    across threads.
    """

    def __init__(
        self,
        subject_aggregator: Optional[SubjectAggregator] = None,
        gpa_calculator: Optional[PeriodGPACalculator] = None,
        attendance_aggregator: Optional[AttendanceAggregator] = None,
        trend_analyzer: Optional[TrendAnalyzer] = None,
        risk_assessor: Optional[RiskAssessor] = None
    ):
        self.subject_aggregator = subject_aggregator or SubjectAggregator()
        self.gpa_calculator = gpa_calculator or PeriodGPACalculator()
        self.attendance_aggregator = attendance_aggregator or AttendanceAggregator()
        self.trend_analyzer = trend_analyzer or TrendAnalyzer()
        self.risk_assessor = risk_assessor or RiskAssessor()

    def _aggregate_subjects(
        self,
        period_label: str,
        score_sets: Sequence[ComponentScoreSet],
        on_subject_error: str
    ) -> Tuple[List[SubjectAverage], List[SubjectFailure]]:
        averages: List[SubjectAverage] = []
        failures: List[SubjectFailure] = []
        for score_set in score_sets:
            try:
                averages.append(self.subject_aggregator.aggregate(score_set))
            except AcademicEngineError as e:
                error = SubjectAggregationError(score_set.subject_id, period_label, str(e), cause=e)
                if on_subject_error != SKIP:
                    raise error from e
                logger.warning("Skipping subject: %s", error)
                failures.append(SubjectFailure(
                    subject_id=score_set.subject_id,
                    period_label=period_label,
                    reason=str(e),
                ))
        return averages, failures

    def compile(
        self,
        student_id: str,
        period_label: str,
        score_sets: Sequence[ComponentScoreSet],
        conduct: Optional[ConductRating] = None,
        attendance_marks: Sequence[AttendanceMark] = (),
        prior_gpas: Sequence[float] = (),
        weaknesses: Sequence[str] = (),
        on_subject_error: str = RAISE
    ) -> PerformanceReport:
        """
        Compile a performance report.

        Args:
            student_id: Student identifier
            period_label: Semester or year label
            score_sets: One ComponentScoreSet per subject
            conduct: Conduct rating for the period, if recorded
            attendance_marks: Daily marks for the period, oldest first
            prior_gpas: GPAs of earlier periods, oldest first
            weaknesses: Subjects where the student trails the class average
            on_subject_error: 'raise' to abort on a failing subject, 'skip' to
                leave it out of the GPA and list it in ``failed_subjects``

        Raises:
            SubjectAggregationError: a subject failed and on_subject_error is 'raise'
        """
        if on_subject_error not in (RAISE, SKIP):
            raise ValueError(f"on_subject_error must be {RAISE!r} or {SKIP!r}, got {on_subject_error!r}")

        averages, failures = self._aggregate_subjects(period_label, score_sets, on_subject_error)
        semester_gpa = self.gpa_calculator.calculate(period_label, averages, conduct)

        history = list(prior_gpas) + [semester_gpa.gpa]
        attendance = self.attendance_aggregator.summarize(list(attendance_marks))
        trend = self.trend_analyzer.analyze(history)
        risk = self.risk_assessor.assess(semester_gpa.gpa, trend, attendance.rate, weaknesses)

        logger.info(
            "Compiled report for %s (%s): gpa=%.2f standing=%s risk=%s",
            student_id, period_label, semester_gpa.gpa, semester_gpa.standing.code.value, risk.level.value
        )

        return PerformanceReport(
            student_id=student_id,
            period_label=period_label,
            semester_gpa=semester_gpa,
            cumulative_gpa=cumulative(history),
            standing_progress=progress_to_next(semester_gpa.gpa, conduct),
            attendance=attendance,
            trend=trend,
            risk=risk,
            failed_subjects=failures,
        )
