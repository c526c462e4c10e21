"""Unit tests for risk assessment."""

from academic_engine import messages
from academic_engine.models import RiskLevel, TrendDirection, TrendResult
from academic_engine.risk import RiskAssessor, get_risk_level

STABLE = TrendResult(direction=TrendDirection.STABLE, magnitude=0.0)
IMPROVING = TrendResult(direction=TrendDirection.IMPROVING, magnitude=0.5)
DECLINING = TrendResult(direction=TrendDirection.DECLINING, magnitude=-0.8)

LEVEL_RANK = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2, RiskLevel.CRITICAL: 3}


def test_get_risk_level():
    """Test risk level assignment."""
    assert get_risk_level(3.99, 100.0) == RiskLevel.CRITICAL
    assert get_risk_level(4.0, 100.0) == RiskLevel.HIGH
    assert get_risk_level(4.99, 100.0) == RiskLevel.HIGH
    assert get_risk_level(5.0, 100.0) == RiskLevel.MEDIUM
    assert get_risk_level(6.49, 100.0) == RiskLevel.MEDIUM
    assert get_risk_level(6.5, 100.0) == RiskLevel.LOW

    # Attendance alone lifts risk to medium
    assert get_risk_level(9.0, 79.9) == RiskLevel.MEDIUM
    assert get_risk_level(9.0, 80.0) == RiskLevel.LOW


def test_risk_monotonic_in_gpa():
    """Risk never increases as GPA increases."""
    gpas = [0.0, 3.99, 4.0, 4.99, 5.0, 6.49, 6.5, 8.0, 10.0]
    for attendance in (60.0, 85.0, 100.0):
        ranks = [LEVEL_RANK[get_risk_level(g, attendance)] for g in gpas]
        assert ranks == sorted(ranks, reverse=True)


def test_recommendations_for_good_student():
    result = RiskAssessor().assess(8.0, IMPROVING, 92.0)

    assert result.level == RiskLevel.LOW
    assert result.recommendations == [
        messages.GPA_GOOD,
        messages.TREND_IMPROVING,
        "Maintain current study habits",
    ]
    assert result.factors == []
    assert result.explanation is None


def test_recommendations_capped_at_five():
    result = RiskAssessor().assess(3.0, DECLINING, 70.0, ['Mathematics', 'Physics'])

    assert result.level == RiskLevel.CRITICAL
    assert len(result.recommendations) == 5
    assert result.recommendations[0] == messages.GPA_CRITICAL
    assert result.recommendations[1] == messages.TREND_DECLINING
    assert result.recommendations[2] == messages.attendance_message(70.0)
    assert result.recommendations[3] == "Focus on improving: Mathematics, Physics"
    assert result.recommendations[4] == "Join remedial classes or extra tutoring"
    assert len(set(result.recommendations)) == len(result.recommendations)


def test_gpa_messages_are_exclusive():
    tier_messages = {messages.GPA_CRITICAL, messages.GPA_HIGH, messages.GPA_BELOW_FAIR, messages.GPA_GOOD}
    for gpa in (2.0, 4.5, 6.0, 7.0, 9.0):
        result = RiskAssessor().assess(gpa, STABLE, 100.0)
        assert len(tier_messages.intersection(result.recommendations)) <= 1


def test_no_padding():
    """A fair student with nothing to flag gets a single generic message."""
    result = RiskAssessor().assess(7.0, STABLE, 95.0)

    assert result.level == RiskLevel.LOW
    assert result.recommendations == ["Maintain current study habits"]


def test_medium_risk_from_attendance():
    result = RiskAssessor().assess(7.5, STABLE, 75.0)

    assert result.level == RiskLevel.MEDIUM
    assert result.recommendations == [
        messages.attendance_message(75.0),
        "Review study methods",
        "Draw up a detailed weekly study plan",
    ]


def test_risk_factors_and_explanation():
    result = RiskAssessor().assess(4.5, DECLINING, 85.0)

    assert result.level == RiskLevel.HIGH
    types = [f.type for f in result.factors]
    assert types == ['low_performance', 'grade_decline', 'attendance']
    assert result.factors[0].severity == 'high'
    assert result.factors[1].severity == 'high'
    assert result.factors[2].severity == 'medium'
    assert " | " in result.explanation
