"""Period-over-period improvement and milestone tracking."""

import logging
import math
from typing import List

from academic_engine.messages import improvement_message
from academic_engine.models import ImprovementMetrics, Milestone
from academic_engine.periods import PASSING_GPA
from academic_engine.risk import GOOD_GPA
from academic_engine.rounding import round_half_up
from academic_engine.trends import TREND_DEADBAND

logger = logging.getLogger(__name__)

EXCELLENT_GPA = 9.0
FULL_ATTENDANCE = 100.0


def improvement_metrics(current_gpa: float, previous_gpa: float, target_gpa: float = GOOD_GPA) -> ImprovementMetrics:
    """
    Compare two consecutive period GPAs against a target GPA.

    ``projected_periods`` is how many more periods at the current pace it
    takes to reach the target: 0 once reached, None when grades are not
    rising.
    """
    improvement = round_half_up(current_gpa - previous_gpa)
    gap = round_half_up(target_gpa - current_gpa)

    if gap <= 0:
        projected = 0
    elif improvement > 0:
        projected = math.ceil(round_half_up(gap / improvement, 6))
    else:
        projected = None

    percent = int(round_half_up(improvement / previous_gpa * 100, 0)) if previous_gpa > 0 else 0
    on_track = improvement >= 0 and (current_gpa >= target_gpa or improvement >= TREND_DEADBAND)

    logger.debug("Improvement %.2f -> %.2f: %+.2f, projected=%s", previous_gpa, current_gpa, improvement, projected)

    return ImprovementMetrics(
        improvement=improvement,
        improvement_percent=percent,
        on_track=on_track,
        projected_periods=projected,
        message=improvement_message(improvement, current_gpa, target_gpa),
    )


def _progress_towards(value: float, goal: float) -> float:
    return round_half_up(min(100.0, value / goal * 100))


def milestones(
    gpa: float,
    attendance_rate: float,
    completed_assignments: int = 0,
    total_assignments: int = 0
) -> List[Milestone]:
    """Achievement badges for one period, each with percent progress towards it."""
    return [
        Milestone(
            id='excellent_gpa',
            title=f'Excellent student (GPA >= {EXCELLENT_GPA:.1f})',
            achieved=gpa >= EXCELLENT_GPA,
            progress=_progress_towards(gpa, EXCELLENT_GPA),
        ),
        Milestone(
            id='good_gpa',
            title=f'Good student (GPA >= {GOOD_GPA:.1f})',
            achieved=gpa >= GOOD_GPA,
            progress=_progress_towards(gpa, GOOD_GPA),
        ),
        Milestone(
            id='perfect_attendance',
            title='Perfect attendance',
            achieved=attendance_rate >= FULL_ATTENDANCE,
            progress=round_half_up(attendance_rate),
        ),
        Milestone(
            id='all_assignments',
            title='All assignments completed',
            achieved=total_assignments > 0 and completed_assignments >= total_assignments,
            progress=_progress_towards(completed_assignments, total_assignments) if total_assignments > 0 else 0.0,
        ),
        Milestone(
            id='passing',
            title=f'Passing (GPA >= {PASSING_GPA:.1f})',
            achieved=gpa >= PASSING_GPA,
            progress=_progress_towards(gpa, PASSING_GPA),
        ),
    ]
