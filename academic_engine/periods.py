"""Period GPA and academic standing classification."""

import logging
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

from academic_engine.models import (
    AcademicStanding,
    ConductRating,
    SemesterGPA,
    StandingCode,
    StandingProgress,
    SubjectAverage,
)
from academic_engine.rounding import round_half_up

logger = logging.getLogger(__name__)

# Absent conduct is treated as the most permissive rating that still
# blocks the excellent tier.
DEFAULT_CONDUCT = ConductRating.GOOD

PASSING_GPA = 5.0


class StandingRule(NamedTuple):
    code: StandingCode
    min_gpa: float
    allows: Callable[[ConductRating], bool]


# Evaluated top-down, first match wins. Only the upper three tiers look at conduct.
STANDING_RULES: List[StandingRule] = [
    StandingRule(StandingCode.EXCELLENT, 9.0, lambda conduct: conduct == ConductRating.EXCELLENT),
    StandingRule(StandingCode.GOOD, 8.0, lambda conduct: conduct != ConductRating.WEAK),
    StandingRule(StandingCode.FAIR, 6.5, lambda conduct: conduct != ConductRating.WEAK),
    StandingRule(StandingCode.AVERAGE, PASSING_GPA, lambda conduct: True),
    StandingRule(StandingCode.WEAK, 0.0, lambda conduct: True),
]

STANDINGS: Dict[StandingCode, AcademicStanding] = {
    StandingCode.EXCELLENT: AcademicStanding(
        code=StandingCode.EXCELLENT,
        label='Excellent',
        label_vi='Xuất sắc',
        description='Outstanding academic performance with excellent conduct',
    ),
    StandingCode.GOOD: AcademicStanding(
        code=StandingCode.GOOD,
        label='Good',
        label_vi='Giỏi',
        description='Strong academic performance with good conduct',
    ),
    StandingCode.FAIR: AcademicStanding(
        code=StandingCode.FAIR,
        label='Fair',
        label_vi='Khá',
        description='Satisfactory academic performance',
    ),
    StandingCode.AVERAGE: AcademicStanding(
        code=StandingCode.AVERAGE,
        label='Average',
        label_vi='Trung bình',
        description='Average academic performance, needs improvement',
    ),
    StandingCode.WEAK: AcademicStanding(
        code=StandingCode.WEAK,
        label='Weak',
        label_vi='Yếu',
        description='Below average performance, significant improvement needed',
    ),
}

FOUR_POINT_SCALE = [
    (9.0, 4.0),
    (8.5, 3.7),
    (8.0, 3.5),
    (7.0, 3.0),
    (6.5, 2.5),
    (5.5, 2.0),
    (5.0, 1.5),
    (4.0, 1.0),
]


def classify(gpa: float, conduct: Optional[ConductRating] = None) -> AcademicStanding:
    """
    Map a GPA and conduct rating to an academic standing.

    Args:
        gpa: Period GPA on the 10-point scale
        conduct: Conduct rating, or None to classify on GPA alone

    Returns:
        The standing of the first matching rule
    """
    conduct = conduct if conduct is not None else DEFAULT_CONDUCT
    for rule in STANDING_RULES:
        if gpa >= rule.min_gpa and rule.allows(conduct):
            return STANDINGS[rule.code]
    return STANDINGS[StandingCode.WEAK]


def cumulative(gpas: Sequence[float]) -> float:
    """Mean of several period GPAs."""
    if not gpas:
        return 0.0
    return round_half_up(sum(gpas) / len(gpas))


def to_four_point_scale(gpa: float) -> float:
    """Convert a 10-point GPA to the 4.0 scale used for international transcripts."""
    for minimum, points in FOUR_POINT_SCALE:
        if gpa >= minimum:
            return points
    return 0.0


def progress_to_next(gpa: float, conduct: Optional[ConductRating] = None) -> StandingProgress:
    """
    How far a GPA is from the next standing tier.

    Progress is measured on GPA only; a conduct gate on the next tier is
    not reflected in ``points_needed``.
    """
    current = classify(gpa, conduct)
    codes = [rule.code for rule in STANDING_RULES]
    index = codes.index(current.code)
    if index == 0:
        return StandingProgress(next_standing=None, points_needed=0.0, progress_percent=100.0)

    current_rule = STANDING_RULES[index]
    next_rule = STANDING_RULES[index - 1]
    band = next_rule.min_gpa - current_rule.min_gpa
    progress = (gpa - current_rule.min_gpa) / band * 100 if band > 0 else 100.0

    return StandingProgress(
        next_standing=next_rule.code,
        points_needed=round_half_up(max(0.0, next_rule.min_gpa - gpa)),
        progress_percent=round_half_up(min(100.0, max(0.0, progress))),
    )


class PeriodGPACalculator:
    """Averages subject finals for a period and classifies the result."""

    def calculate(
        self,
        period_label: str,
        subjects: Sequence[SubjectAverage],
        conduct: Optional[ConductRating] = None
    ) -> SemesterGPA:
        if subjects:
            gpa = round_half_up(sum(s.final_grade for s in subjects) / len(subjects))
        else:
            gpa = 0.0

        standing = classify(gpa, conduct)
        logger.debug(
            "Period %s: %d subjects, gpa=%.2f, standing=%s",
            period_label, len(subjects), gpa, standing.code.value
        )

        return SemesterGPA(
            period_label=period_label,
            gpa=gpa,
            subject_averages=list(subjects),
            standing=standing,
            conduct=conduct,
        )
