"""Class comparison: strengths and weaknesses relative to the class average."""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from academic_engine import config
from academic_engine.models import ClassRank, SubjectAverage
from academic_engine.rounding import round_half_up


def finals_frame(subject_averages: Mapping[str, Sequence[SubjectAverage]]) -> pd.DataFrame:
    """
    Build a student x subject table of final grades.

    Args:
        subject_averages: Subject averages keyed by student id

    Returns:
        DataFrame indexed by student id with one column per subject name;
        subjects a student does not take are NaN
    """
    rows = {
        student_id: {s.subject_name: s.final_grade for s in averages}
        for student_id, averages in subject_averages.items()
    }
    frame = pd.DataFrame.from_dict(rows, orient='index')
    frame.index.name = 'student_id'
    return frame


def class_averages(frame: pd.DataFrame) -> pd.Series:
    """Per-subject class mean, ignoring students without a grade."""
    return frame.mean(axis=0, skipna=True)


def strengths_and_weaknesses(
    frame: pd.DataFrame,
    student_id: str,
    margin: Optional[float] = None,
    limit: int = 3
) -> Tuple[List[str], List[str]]:
    """
    Subjects where a student is clearly above or below the class mean.

    Strengths are ordered best first, weaknesses worst first; each list
    holds at most ``limit`` subjects.
    """
    margin = config.WEAKNESS_MARGIN if margin is None else margin
    if student_id not in frame.index:
        return [], []

    diff = (frame.loc[student_id] - class_averages(frame)).dropna().round(2)

    strengths = diff[diff > margin].sort_values(ascending=False).head(limit)
    weaknesses = diff[diff < -margin].sort_values(ascending=True).head(limit)
    return strengths.index.tolist(), weaknesses.index.tolist()


def weaknesses_by_student(frame: pd.DataFrame, margin: Optional[float] = None) -> Dict[str, List[str]]:
    return {
        student_id: strengths_and_weaknesses(frame, student_id, margin)[1]
        for student_id in frame.index
    }


def class_rankings(gpas: Mapping[str, float]) -> Dict[str, ClassRank]:
    """
    Rank students by GPA, best first.

    Tied students share the better rank (1, 2, 2, 4) and the same
    percentile, ``(class_size - rank + 1) / class_size * 100``.

    Args:
        gpas: Period GPA keyed by student id

    Returns:
        ClassRank keyed by student id
    """
    if not gpas:
        return {}

    series = pd.Series(gpas, dtype=float)
    ranks = series.rank(method='min', ascending=False).astype(int)
    total = len(series)
    return {
        student_id: ClassRank(
            rank=int(rank),
            class_size=total,
            percentile=int(round_half_up((total - rank + 1) / total * 100, 0)),
        )
        for student_id, rank in ranks.items()
    }
