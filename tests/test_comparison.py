"""Unit tests for class comparison."""

import pandas as pd

from academic_engine.comparison import (
    class_averages,
    class_rankings,
    finals_frame,
    strengths_and_weaknesses,
    weaknesses_by_student,
)
from academic_engine.models import ClassRank, ComponentType, SubjectAverage


def averages(**finals):
    return [
        SubjectAverage(
            subject_id=name.lower(),
            subject_name=name,
            final_grade=grade,
            component_averages={c: None for c in ComponentType},
        )
        for name, grade in finals.items()
    ]


def class_frame():
    return pd.DataFrame(
        {
            'Mathematics': [9.0, 7.0, 5.0],
            'Literature': [5.0, 7.0, 9.0],
            'English': [7.0, 7.0, 7.0],
        },
        index=['s1', 's2', 's3'],
    )


def test_finals_frame():
    frame = finals_frame({
        's1': averages(Mathematics=8.0, Literature=6.5),
        's2': averages(Mathematics=7.0),
    })

    assert set(frame.columns) == {'Mathematics', 'Literature'}
    assert frame.loc['s1', 'Literature'] == 6.5
    assert pd.isna(frame.loc['s2', 'Literature'])


def test_class_averages_ignore_missing():
    frame = finals_frame({
        's1': averages(Mathematics=8.0, Literature=6.0),
        's2': averages(Mathematics=6.0),
    })
    means = class_averages(frame)

    assert means['Mathematics'] == 7.0
    assert means['Literature'] == 6.0


def test_strengths_and_weaknesses():
    strengths, weaknesses = strengths_and_weaknesses(class_frame(), 's1', margin=0.5)

    assert strengths == ['Mathematics']
    assert weaknesses == ['Literature']

    # Average student has neither
    assert strengths_and_weaknesses(class_frame(), 's2', margin=0.5) == ([], [])

    # Unknown student
    assert strengths_and_weaknesses(class_frame(), 'missing', margin=0.5) == ([], [])


def test_margin_is_strict():
    frame = pd.DataFrame({'Mathematics': [7.5, 6.5]}, index=['s1', 's2'])
    assert strengths_and_weaknesses(frame, 's1', margin=0.5) == ([], [])


def test_weaknesses_ordered_worst_first():
    frame = pd.DataFrame(
        {
            'Mathematics': [4.0, 8.0],
            'Physics': [6.0, 8.0],
            'Chemistry': [7.0, 7.0],
        },
        index=['s1', 's2'],
    )
    _, weaknesses = strengths_and_weaknesses(frame, 's1', margin=0.5)
    assert weaknesses == ['Mathematics', 'Physics']


def test_weaknesses_by_student():
    result = weaknesses_by_student(class_frame(), margin=0.5)

    assert result == {'s1': ['Literature'], 's2': [], 's3': ['Mathematics']}


def test_class_rankings_share_rank_on_ties():
    rankings = class_rankings({'s1': 7.0, 's2': 9.0, 's3': 7.0, 's4': 5.0})

    assert rankings['s2'] == ClassRank(rank=1, class_size=4, percentile=100)
    assert rankings['s1'] == ClassRank(rank=2, class_size=4, percentile=75)
    assert rankings['s3'] == rankings['s1']
    assert rankings['s4'].rank == 4
    assert rankings['s4'].percentile == 25


def test_class_rankings_empty():
    assert class_rankings({}) == {}
