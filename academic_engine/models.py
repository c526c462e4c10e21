"""Data models for the academic performance engine."""

from datetime import date
from enum import Enum
from typing import Optional, Dict, List, Iterable

from pydantic import BaseModel, ConfigDict, Field


class ComponentType(str, Enum):
    """Graded instruments of the 10-point scale."""
    ORAL = 'oral'
    FIFTEEN_MIN = 'fifteen_min'
    ONE_PERIOD = 'one_period'
    MIDTERM = 'midterm'
    FINAL = 'final'


DEFAULT_WEIGHTS: Dict[ComponentType, float] = {
    ComponentType.ORAL: 1,
    ComponentType.FIFTEEN_MIN: 1,
    ComponentType.ONE_PERIOD: 2,
    ComponentType.MIDTERM: 2,
    ComponentType.FINAL: 3,
}


class ConductRating(str, Enum):
    """Conduct (hạnh kiểm) rating supplied by the homeroom teacher."""
    EXCELLENT = 'excellent'
    GOOD = 'good'
    FAIR = 'fair'
    AVERAGE = 'average'
    WEAK = 'weak'

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['ConductRating']:
        """Accept either the code or the Vietnamese label stored by the school records."""
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        if text in _CONDUCT_LABELS_VI:
            return _CONDUCT_LABELS_VI[text]
        return cls(text.lower())


_CONDUCT_LABELS_VI = {
    'Xuất sắc': ConductRating.EXCELLENT,
    'Tốt': ConductRating.GOOD,
    'Khá': ConductRating.FAIR,
    'Trung bình': ConductRating.AVERAGE,
    'Yếu': ConductRating.WEAK,
}


class StandingCode(str, Enum):
    EXCELLENT = 'excellent'
    GOOD = 'good'
    FAIR = 'fair'
    AVERAGE = 'average'
    WEAK = 'weak'


class TrendDirection(str, Enum):
    IMPROVING = 'improving'
    STABLE = 'stable'
    DECLINING = 'declining'


class AttendanceStatus(str, Enum):
    PRESENT = 'present'
    ABSENT = 'absent'
    LATE = 'late'
    EXCUSED = 'excused'


class RiskLevel(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class GradeEntry(FrozenModel):
    """One recorded score."""
    component_type: ComponentType
    points_earned: Optional[float] = None
    is_excused: bool = False
    is_missing: bool = False


class ComponentScoreSet(FrozenModel):
    """All graded entries of one subject in one period, grouped by component type."""
    subject_id: str
    subject_name: str
    entries: Dict[ComponentType, List[GradeEntry]] = Field(default_factory=dict)
    weights: Optional[Dict[ComponentType, float]] = None
    drop_lowest: Dict[ComponentType, int] = Field(default_factory=dict)

    @classmethod
    def from_entries(
        cls,
        subject_id: str,
        subject_name: str,
        entries: Iterable[GradeEntry],
        **kwargs
    ) -> 'ComponentScoreSet':
        """Group a flat list of entries by their component type."""
        grouped: Dict[ComponentType, List[GradeEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.component_type, []).append(entry)
        return cls(subject_id=subject_id, subject_name=subject_name, entries=grouped, **kwargs)


class SubjectAverage(FrozenModel):
    """Final grade of one subject."""
    subject_id: str
    subject_name: str
    final_grade: float
    component_averages: Dict[ComponentType, Optional[float]]


class AcademicStanding(FrozenModel):
    code: StandingCode
    label: str
    label_vi: str
    description: str


class StandingProgress(FrozenModel):
    next_standing: Optional[StandingCode] = None
    points_needed: float
    progress_percent: float


class SemesterGPA(FrozenModel):
    period_label: str
    gpa: float
    subject_averages: List[SubjectAverage]
    standing: AcademicStanding
    conduct: Optional[ConductRating] = None


class AttendanceMark(FrozenModel):
    status: AttendanceStatus
    marked_on: Optional[date] = None


class AttendanceSummary(FrozenModel):
    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    excused_days: int
    rate: float
    streak: int = 0
    trend: TrendDirection = TrendDirection.STABLE


class TrendResult(FrozenModel):
    direction: TrendDirection
    magnitude: float
    slope: float = 0.0
    projected_next_gpa: Optional[float] = None
    confidence: float = 0.0


class RiskFactor(FrozenModel):
    type: str
    severity: str
    description: str


class RiskAssessment(FrozenModel):
    level: RiskLevel
    recommendations: List[str]
    factors: List[RiskFactor] = Field(default_factory=list)
    explanation: Optional[str] = None


class RequiredFinalScore(FrozenModel):
    required_score: float
    is_possible: bool
    message: str


class ClassRank(FrozenModel):
    rank: int
    class_size: int
    percentile: int


class ImprovementMetrics(FrozenModel):
    """Change between two consecutive period GPAs, measured against a target."""
    improvement: float
    improvement_percent: int
    on_track: bool
    projected_periods: Optional[int] = None
    message: str


class Milestone(FrozenModel):
    id: str
    title: str
    achieved: bool
    progress: float


class SubjectFailure(FrozenModel):
    subject_id: str
    period_label: str
    reason: str


class PerformanceReport(FrozenModel):
    """Everything computed for one student in one period."""
    student_id: str
    period_label: str
    semester_gpa: SemesterGPA
    cumulative_gpa: float
    standing_progress: StandingProgress
    attendance: AttendanceSummary
    trend: TrendResult
    risk: RiskAssessment
    failed_subjects: List[SubjectFailure] = Field(default_factory=list)
