"""Recommendation texts used by the risk assessor."""

from typing import Dict, List, Sequence

from academic_engine.models import RiskLevel

GPA_CRITICAL = "Grades need immediate improvement to avoid failing the school year"
GPA_HIGH = "Meet the homeroom teacher and parents to agree on a support plan"
GPA_BELOW_FAIR = "Extra effort is needed to move up from Average to Fair standing"
GPA_GOOD = "Keep it up and consider entering academic competitions"

TREND_DECLINING = "Grades are trending down; review study methods"
TREND_IMPROVING = "Grades are improving; keep up the momentum"

GENERIC_BY_LEVEL: Dict[RiskLevel, List[str]] = {
    RiskLevel.CRITICAL: [
        "Join remedial classes or extra tutoring",
        "Contact parents to arrange additional support at home",
    ],
    RiskLevel.HIGH: [
        "Join remedial classes or extra tutoring",
        "Ask subject teachers for one-to-one help",
    ],
    RiskLevel.MEDIUM: [
        "Review study methods",
        "Draw up a detailed weekly study plan",
    ],
    RiskLevel.LOW: [
        "Maintain current study habits",
    ],
}


def attendance_message(rate: float) -> str:
    return f"Improve attendance (currently {rate:.1f}%) to avoid missing lessons"


def weaknesses_message(weaknesses: Sequence[str]) -> str:
    return f"Focus on improving: {', '.join(weaknesses)}"


def improvement_message(improvement: float, current_gpa: float, target_gpa: float) -> str:
    if current_gpa >= target_gpa:
        return f"Target of {target_gpa:.1f} reached"
    if improvement > 0.5:
        return f"Outstanding progress, up {improvement:.2f} points"
    if improvement > 0:
        return f"Making progress, up {improvement:.2f} points"
    if improvement == 0:
        return "Grades are steady; more effort is needed to reach the target"
    return f"Down {abs(improvement):.2f} points; grades need to improve"
