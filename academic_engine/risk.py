"""Risk level and recommendations from GPA, trend and attendance."""

import logging
from typing import List, Optional, Sequence

from academic_engine import messages
from academic_engine.models import RiskAssessment, RiskFactor, RiskLevel, TrendDirection, TrendResult

logger = logging.getLogger(__name__)

CRITICAL_GPA = 4.0
HIGH_GPA = 5.0
MEDIUM_GPA = 6.5
GOOD_GPA = 8.0
MEDIUM_ATTENDANCE = 80.0
ATTENDANCE_WARNING = 90.0

MAX_RECOMMENDATIONS = 5
MAX_GENERIC_RECOMMENDATIONS = 2


def get_risk_level(gpa: float, attendance_rate: float) -> RiskLevel:
    """
    Categorize risk, evaluated top-down.

    Args:
        gpa: Current GPA (0-10)
        attendance_rate: Attendance percentage (0-100)

    Returns:
        Risk level
    """
    if gpa < CRITICAL_GPA:
        return RiskLevel.CRITICAL
    elif gpa < HIGH_GPA:
        return RiskLevel.HIGH
    elif gpa < MEDIUM_GPA or attendance_rate < MEDIUM_ATTENDANCE:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW


def gpa_message(gpa: float) -> Optional[str]:
    if gpa < CRITICAL_GPA:
        return messages.GPA_CRITICAL
    if gpa < HIGH_GPA:
        return messages.GPA_HIGH
    if gpa < MEDIUM_GPA:
        return messages.GPA_BELOW_FAIR
    if gpa >= GOOD_GPA:
        return messages.GPA_GOOD
    return None


def trend_message(trend: TrendResult) -> Optional[str]:
    if trend.direction == TrendDirection.DECLINING:
        return messages.TREND_DECLINING
    if trend.direction == TrendDirection.IMPROVING:
        return messages.TREND_IMPROVING
    return None


def get_risk_factors(
    gpa: float,
    trend: TrendResult,
    attendance_rate: float,
    weaknesses: Sequence[str]
) -> List[RiskFactor]:
    """Contributing factors, used to explain the assessment."""
    factors = []
    if gpa < HIGH_GPA:
        factors.append(RiskFactor(
            type='low_performance', severity='high',
            description=f"GPA {gpa:.2f} is below the passing mark"
        ))
    elif gpa < MEDIUM_GPA:
        factors.append(RiskFactor(
            type='low_performance', severity='medium',
            description=f"GPA {gpa:.2f} is in the average band"
        ))

    if trend.direction == TrendDirection.DECLINING:
        severity = 'high' if trend.magnitude < -0.5 else 'medium'
        factors.append(RiskFactor(
            type='grade_decline', severity=severity,
            description=f"GPA fell {abs(trend.magnitude):.2f} since the previous period"
        ))

    if attendance_rate < MEDIUM_ATTENDANCE:
        factors.append(RiskFactor(
            type='attendance', severity='high',
            description=f"Attendance only {attendance_rate:.1f}%"
        ))
    elif attendance_rate < ATTENDANCE_WARNING:
        factors.append(RiskFactor(
            type='attendance', severity='medium',
            description=f"Attendance {attendance_rate:.1f}%"
        ))

    if weaknesses:
        factors.append(RiskFactor(
            type='weak_subjects', severity='low',
            description=f"Below class average in {', '.join(weaknesses)}"
        ))
    return factors


def get_recommendations(
    level: RiskLevel,
    gpa: float,
    trend: TrendResult,
    attendance_rate: float,
    weaknesses: Sequence[str]
) -> List[str]:
    """
    Ordered, deduplicated recommendations, at most five.

    Each rule contributes at most one message, in priority order: GPA tier,
    trend, attendance, weak subjects, then up to two generic messages for
    the risk level. The list is never padded.
    """
    candidates = [
        gpa_message(gpa),
        trend_message(trend),
        messages.attendance_message(attendance_rate) if attendance_rate < ATTENDANCE_WARNING else None,
        messages.weaknesses_message(weaknesses) if weaknesses else None,
    ]
    candidates.extend(messages.GENERIC_BY_LEVEL[level][:MAX_GENERIC_RECOMMENDATIONS])

    recommendations: List[str] = []
    for text in candidates:
        if text is None or text in recommendations:
            continue
        recommendations.append(text)
    return recommendations[:MAX_RECOMMENDATIONS]


class RiskAssessor:
    """Blends GPA, trend and attendance into a risk assessment."""

    def assess(
        self,
        gpa: float,
        trend: TrendResult,
        attendance_rate: float,
        weaknesses: Sequence[str] = ()
    ) -> RiskAssessment:
        weaknesses = list(weaknesses)
        level = get_risk_level(gpa, attendance_rate)
        factors = get_risk_factors(gpa, trend, attendance_rate, weaknesses)
        recommendations = get_recommendations(level, gpa, trend, attendance_rate, weaknesses)

        explanation = " | ".join(f.description for f in factors) if factors else None

        logger.debug("Risk: gpa=%.2f attendance=%.2f level=%s", gpa, attendance_rate, level.value)

        return RiskAssessment(
            level=level,
            recommendations=recommendations,
            factors=factors,
            explanation=explanation,
        )
