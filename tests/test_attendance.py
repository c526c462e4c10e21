"""Unit tests for attendance aggregation."""

from academic_engine.attendance import AttendanceAggregator, attendance_streak, attendance_trend
from academic_engine.models import AttendanceMark, AttendanceStatus, TrendDirection

P = AttendanceStatus.PRESENT
A = AttendanceStatus.ABSENT
L = AttendanceStatus.LATE
E = AttendanceStatus.EXCUSED


def marks(*statuses):
    return [AttendanceMark(status=s) for s in statuses]


def test_no_marks_is_full_attendance():
    summary = AttendanceAggregator().summarize([])

    assert summary.rate == 100.0
    assert summary.total_days == 0
    assert summary.streak == 0
    assert summary.trend == TrendDirection.STABLE


def test_counts_and_rate():
    summary = AttendanceAggregator().summarize(marks(P, P, L, A))

    assert summary.total_days == 4
    assert summary.present_days == 2
    assert summary.late_days == 1
    assert summary.absent_days == 1
    assert summary.excused_days == 0
    # Late counts as attended
    assert summary.rate == 75.0


def test_excused_days_count_in_total():
    summary = AttendanceAggregator().summarize(marks(P, E, A, P))

    assert summary.total_days == 4
    assert summary.excused_days == 1
    assert summary.rate == 50.0

    assert AttendanceAggregator().summarize(marks(P, P, P, E)).rate == 75.0
    # Only an empty period defaults to full attendance
    assert AttendanceAggregator().summarize(marks(E, E)).rate == 0.0


def test_streak():
    assert attendance_streak(marks(P, A, P, L, E, P)) == 3
    assert attendance_streak(marks(P, P, A)) == 0
    assert attendance_streak(marks(E, E)) == 0


def test_trend():
    assert attendance_trend(marks(A, A, P, P, P, P)) == TrendDirection.IMPROVING
    assert attendance_trend(marks(P, P, P, P, A, A)) == TrendDirection.DECLINING
    assert attendance_trend(marks(P, A, P, A)) == TrendDirection.STABLE
    # Too few countable marks
    assert attendance_trend(marks(A, P, P, E, E)) == TrendDirection.STABLE


def test_summary_includes_streak_and_trend():
    summary = AttendanceAggregator().summarize(marks(A, A, P, P, P, P))

    assert summary.streak == 4
    assert summary.trend == TrendDirection.IMPROVING
