"""Attendance reduction: counts, rate, streak and a short trend signal."""

import logging
from typing import List, Sequence

from academic_engine.models import AttendanceMark, AttendanceStatus, AttendanceSummary, TrendDirection
from academic_engine.rounding import round_half_up

logger = logging.getLogger(__name__)

ATTENDED = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)

# Minimum countable marks before a trend is reported, and the
# percentage-point change treated as noise.
TREND_MIN_MARKS = 4
TREND_DEADBAND = 5.0


def _attended_ratio(marks: Sequence[AttendanceMark]) -> float:
    attended = sum(1 for m in marks if m.status in ATTENDED)
    return attended / len(marks) * 100


def attendance_streak(marks: Sequence[AttendanceMark]) -> int:
    """Consecutive attended days counted back from the latest mark; excused days are skipped."""
    streak = 0
    for mark in reversed(marks):
        if mark.status == AttendanceStatus.EXCUSED:
            continue
        if mark.status not in ATTENDED:
            break
        streak += 1
    return streak


def attendance_trend(marks: Sequence[AttendanceMark]) -> TrendDirection:
    """Compare the attended ratio of the earlier half of the marks with the later half."""
    countable: List[AttendanceMark] = [m for m in marks if m.status != AttendanceStatus.EXCUSED]
    if len(countable) < TREND_MIN_MARKS:
        return TrendDirection.STABLE

    middle = len(countable) // 2
    change = _attended_ratio(countable[middle:]) - _attended_ratio(countable[:middle])
    if change > TREND_DEADBAND:
        return TrendDirection.IMPROVING
    if change < -TREND_DEADBAND:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


class AttendanceAggregator:
    """Reduces a period's daily marks (oldest first) to an AttendanceSummary."""

    def summarize(self, marks: Sequence[AttendanceMark]) -> AttendanceSummary:
        present = sum(1 for m in marks if m.status == AttendanceStatus.PRESENT)
        absent = sum(1 for m in marks if m.status == AttendanceStatus.ABSENT)
        late = sum(1 for m in marks if m.status == AttendanceStatus.LATE)
        excused = sum(1 for m in marks if m.status == AttendanceStatus.EXCUSED)
        total = len(marks)

        # Excused days stay in the denominator; a student with no marks at
        # all is not penalised.
        rate = round_half_up((present + late) / total * 100) if total > 0 else 100.0

        logger.debug("Attendance: %d marks, %d excused, rate=%.2f", total, excused, rate)

        return AttendanceSummary(
            total_days=total,
            present_days=present,
            absent_days=absent,
            late_days=late,
            excused_days=excused,
            rate=rate,
            streak=attendance_streak(marks),
            trend=attendance_trend(marks),
        )
