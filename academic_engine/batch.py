"""Batch report compilation over many students."""

import concurrent.futures
import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd
from pydantic import Field

from academic_engine import config
from academic_engine.comparison import class_rankings, finals_frame, weaknesses_by_student
from academic_engine.errors import AcademicEngineError
from academic_engine.models import (
    AttendanceMark,
    ClassRank,
    ComponentScoreSet,
    ConductRating,
    FrozenModel,
    PerformanceReport,
    RiskLevel,
    StandingCode,
    SubjectAverage,
)
from academic_engine.periods import PASSING_GPA
from academic_engine.report import SKIP, ReportCompiler
from academic_engine.risk import GOOD_GPA
from academic_engine.rounding import round_half_up
from academic_engine.subjects import SubjectAggregator

logger = logging.getLogger(__name__)

AT_RISK_LEVELS = (RiskLevel.HIGH, RiskLevel.CRITICAL)


class ReportRequest(FrozenModel):
    """Inputs for one student's report, as fetched by the data-access layer."""
    student_id: str
    period_label: str
    score_sets: List[ComponentScoreSet] = Field(default_factory=list)
    conduct: Optional[ConductRating] = None
    attendance_marks: List[AttendanceMark] = Field(default_factory=list)
    prior_gpas: List[float] = Field(default_factory=list)
    weaknesses: Optional[List[str]] = None


class BatchOutcome(FrozenModel):
    student_id: str
    report: Optional[PerformanceReport] = None
    error: Optional[str] = None
    error_type: Optional[str] = None


def with_class_weaknesses(
    requests: Sequence[ReportRequest],
    aggregator: Optional[SubjectAggregator] = None,
    margin: Optional[float] = None
) -> List[ReportRequest]:
    """
    Fill in ``weaknesses`` by comparing each student with the rest of the batch.

    Requests that already carry weaknesses are returned unchanged. Subjects
    that fail to aggregate are left out of the comparison.
    """
    aggregator = aggregator or SubjectAggregator()
    averages: Dict[str, List[SubjectAverage]] = {}
    for request in requests:
        subject_averages = []
        for score_set in request.score_sets:
            try:
                subject_averages.append(aggregator.aggregate(score_set))
            except AcademicEngineError as e:
                logger.warning(
                    "Excluding subject %s of student %s from class comparison: %s",
                    score_set.subject_id, request.student_id, e
                )
        averages[request.student_id] = subject_averages

    weaknesses = weaknesses_by_student(finals_frame(averages), margin)
    return [
        request if request.weaknesses is not None
        else request.model_copy(update={'weaknesses': weaknesses.get(request.student_id, [])})
        for request in requests
    ]


def _compile_one(compiler: ReportCompiler, request: ReportRequest, on_subject_error: str) -> PerformanceReport:
    return compiler.compile(
        student_id=request.student_id,
        period_label=request.period_label,
        score_sets=request.score_sets,
        conduct=request.conduct,
        attendance_marks=request.attendance_marks,
        prior_gpas=request.prior_gpas,
        weaknesses=request.weaknesses or [],
        on_subject_error=on_subject_error,
    )


def compile_batch(
    requests: Sequence[ReportRequest],
    compiler: Optional[ReportCompiler] = None,
    max_workers: Optional[int] = None,
    on_subject_error: str = SKIP
) -> List[BatchOutcome]:
    """
    Compile reports for many students in parallel.

    A subject that fails to aggregate is left out of that student's report
    and listed in ``failed_subjects``. Pass ``on_subject_error='raise'`` to
    fail the whole student instead. Any failure is recorded on that
    student's outcome and the rest of the batch carries on. Outcomes are
    returned in request order.
    """
    compiler = compiler or ReportCompiler()
    max_workers = max_workers or config.BATCH_MAX_WORKERS
    outcomes: List[Optional[BatchOutcome]] = [None] * len(requests)

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_compile_one, compiler, request, on_subject_error): index
            for index, request in enumerate(requests)
        }
        for future in concurrent.futures.as_completed(futures):
            index = futures[future]
            student_id = requests[index].student_id
            try:
                outcomes[index] = BatchOutcome(student_id=student_id, report=future.result())
            except Exception as e:
                logger.error("Report for student %s failed: %s", student_id, e)
                outcomes[index] = BatchOutcome(
                    student_id=student_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    failed = sum(1 for o in outcomes if o.error is not None)
    logger.info("Batch compiled: %d students, %d failed", len(outcomes), failed)
    return outcomes


def reports_frame(reports: Sequence[PerformanceReport]) -> pd.DataFrame:
    """One row per report, for dashboards and exports."""
    columns = [
        'student_id', 'period_label', 'gpa', 'standing', 'cumulative_gpa',
        'attendance_rate', 'trend', 'trend_magnitude', 'risk_level',
    ]
    rows = [
        {
            'student_id': r.student_id,
            'period_label': r.period_label,
            'gpa': r.semester_gpa.gpa,
            'standing': r.semester_gpa.standing.code.value,
            'cumulative_gpa': r.cumulative_gpa,
            'attendance_rate': r.attendance.rate,
            'trend': r.trend.direction.value,
            'trend_magnitude': r.trend.magnitude,
            'risk_level': r.risk.level.value,
        }
        for r in reports
    ]
    return pd.DataFrame(rows, columns=columns)


def rank_reports(reports: Sequence[PerformanceReport]) -> Dict[str, ClassRank]:
    """Class rank and percentile of each student by period GPA."""
    return class_rankings({r.student_id: r.semester_gpa.gpa for r in reports})


def summarize(reports: Sequence[PerformanceReport]) -> Dict:
    """
    Class-level summary of compiled reports.

    Returns:
        Dict with student count, average GPA, pass/excellent rates (%),
        standing distribution, average attendance and at-risk students
    """
    df = reports_frame(reports)
    distribution = {code.value: 0 for code in StandingCode}

    if df.empty:
        return {
            'student_count': 0,
            'average_gpa': 0.0,
            'pass_rate': 0.0,
            'excellent_rate': 0.0,
            'standing_distribution': distribution,
            'attendance_rate': 0.0,
            'at_risk_students': [],
        }

    distribution.update(df['standing'].value_counts().to_dict())
    at_risk = df[df['risk_level'].isin([level.value for level in AT_RISK_LEVELS])].sort_values('gpa')

    return {
        'student_count': int(len(df)),
        'average_gpa': round_half_up(float(df['gpa'].mean())),
        'pass_rate': round_half_up(float((df['gpa'] >= PASSING_GPA).mean() * 100)),
        'excellent_rate': round_half_up(float((df['gpa'] >= GOOD_GPA).mean() * 100)),
        'standing_distribution': {k: int(v) for k, v in distribution.items()},
        'attendance_rate': round_half_up(float(df['attendance_rate'].mean())),
        'at_risk_students': [
            {'student_id': row.student_id, 'gpa': float(row.gpa), 'risk_level': row.risk_level}
            for row in at_risk.itertuples(index=False)
        ],
    }
