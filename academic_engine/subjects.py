"""Subject-level aggregation: component averages and the weighted subject final."""

import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union, Iterable

from academic_engine import config
from academic_engine.errors import InvalidWeightConfiguration, MalformedGradeEntry
from academic_engine.models import (
    ComponentScoreSet,
    ComponentType,
    GradeEntry,
    RequiredFinalScore,
    SubjectAverage,
)
from academic_engine.rounding import round_half_up

logger = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 10.0

WeightTable = Union[Mapping[ComponentType, float], Iterable[Tuple[ComponentType, float]]]


def validate_weights(weights: WeightTable) -> Dict[ComponentType, float]:
    """
    Normalize and validate a component weight table.

    Args:
        weights: Mapping or sequence of (component type, weight) pairs

    Returns:
        Validated mapping

    Raises:
        InvalidWeightConfiguration: weight not a positive finite number,
            unknown or duplicated type
    """
    pairs = weights.items() if isinstance(weights, Mapping) else weights
    table: Dict[ComponentType, float] = {}
    for key, weight in pairs:
        try:
            component = ComponentType(key)
        except ValueError as e:
            raise InvalidWeightConfiguration(f"Unknown component type {key!r}") from e
        if component in table:
            raise InvalidWeightConfiguration(f"Duplicate weight for component {component.value!r}")
        try:
            value = float(weight)
        except (TypeError, ValueError) as e:
            raise InvalidWeightConfiguration(
                f"Weight for component {component.value!r} is not a number: {weight!r}"
            ) from e
        if not math.isfinite(value) or value <= 0:
            raise InvalidWeightConfiguration(
                f"Weight for component {component.value!r} must be positive and finite, got {weight!r}"
            )
        table[component] = value
    return table


def drop_lowest(scores: Sequence[float], n: int) -> List[float]:
    """
    Remove the ``n`` lowest scores.

    ``n`` is clamped to ``count - 1`` so a non-empty list never becomes
    empty. The input is not modified; the result is sorted ascending.
    """
    ordered = sorted(scores)
    if not ordered:
        return []
    n = max(0, min(int(n), len(ordered) - 1))
    return ordered[n:]


def average_assignments(scores: Sequence[float], drop_lowest_n: int = 0) -> Optional[float]:
    """Mean of a homogeneous score list after dropping the lowest ``drop_lowest_n``."""
    kept = drop_lowest(scores, drop_lowest_n)
    if not kept:
        return None
    return round_half_up(sum(kept) / len(kept))


def _check_entry(entry: GradeEntry) -> None:
    if entry.is_excused or entry.points_earned is None:
        return
    if not MIN_SCORE <= entry.points_earned <= MAX_SCORE:
        raise MalformedGradeEntry(
            f"{entry.component_type.value} score {entry.points_earned} is outside "
            f"[{MIN_SCORE:g}, {MAX_SCORE:g}]"
        )


def contributing_scores(entries: Sequence[GradeEntry]) -> List[float]:
    """
    Scores that count toward a component average.

    Excused entries are ignored, missing entries without a score count as 0
    and entries that were simply not graded yet are skipped.
    """
    scores = []
    for entry in entries:
        _check_entry(entry)
        if entry.is_excused:
            continue
        if entry.points_earned is None:
            if entry.is_missing:
                scores.append(0.0)
            continue
        scores.append(float(entry.points_earned))
    return scores


class SubjectAggregator:
    """Computes a subject's final grade from its component score set."""

    def __init__(self, weights: Optional[WeightTable] = None):
        self._weights = weights if weights is not None else config.COMPONENT_WEIGHTS

    @property
    def weights(self) -> Dict[ComponentType, float]:
        return validate_weights(self._weights)

    def component_average(self, score_set: ComponentScoreSet, component: ComponentType) -> Optional[float]:
        """Unrounded mean of one component, or None when nothing contributes."""
        scores = contributing_scores(score_set.entries.get(component, []))
        n = score_set.drop_lowest.get(component, 0)
        if n:
            scores = drop_lowest(scores, n)
        if not scores:
            return None
        return sum(scores) / len(scores)

    def aggregate(self, score_set: ComponentScoreSet) -> SubjectAverage:
        """
        Weighted final grade of one subject.

        Components without contributing entries are left out of both the
        weighted sum and the total weight, so a subject need not have every
        component graded.

        Raises:
            InvalidWeightConfiguration: the weight table is unusable
            MalformedGradeEntry: a score lies outside the 0-10 scale
        """
        weights = validate_weights(score_set.weights if score_set.weights is not None else self._weights)

        unknown = [c.value for c in score_set.entries if c not in weights]
        if unknown:
            raise InvalidWeightConfiguration(
                f"No weight configured for component(s): {', '.join(sorted(unknown))}"
            )

        averages: Dict[ComponentType, Optional[float]] = {}
        weighted_sum = 0.0
        total_weight = 0.0
        for component in ComponentType:
            average = self.component_average(score_set, component)
            averages[component] = average
            if average is None or component not in weights:
                continue
            weighted_sum += average * weights[component]
            total_weight += weights[component]

        final_grade = weighted_sum / total_weight if total_weight > 0 else 0.0

        logger.debug(
            "Subject %s: weighted_sum=%.4f total_weight=%.1f final=%.4f",
            score_set.subject_id, weighted_sum, total_weight, final_grade
        )

        return SubjectAverage(
            subject_id=score_set.subject_id,
            subject_name=score_set.subject_name,
            final_grade=round_half_up(final_grade),
            component_averages={c: (None if a is None else round_half_up(a)) for c, a in averages.items()},
        )

    def required_final_score(self, score_set: ComponentScoreSet, target: float) -> RequiredFinalScore:
        """
        Score needed on the final component for the subject to reach ``target``.

        Existing final entries are ignored; every other graded component keeps
        its current average.
        """
        weights = validate_weights(score_set.weights if score_set.weights is not None else self._weights)
        if ComponentType.FINAL not in weights:
            raise InvalidWeightConfiguration("No weight configured for the final component")

        current_sum = 0.0
        current_weight = 0.0
        for component, weight in weights.items():
            if component == ComponentType.FINAL:
                continue
            average = self.component_average(score_set, component)
            if average is None:
                continue
            current_sum += average * weight
            current_weight += weight

        final_weight = weights[ComponentType.FINAL]
        required = (target * (current_weight + final_weight) - current_sum) / final_weight

        if required > MAX_SCORE:
            return RequiredFinalScore(
                required_score=MAX_SCORE,
                is_possible=False,
                message=f"Cannot reach {target:g} even with a perfect final exam"
            )
        if required < MIN_SCORE:
            return RequiredFinalScore(
                required_score=MIN_SCORE,
                is_possible=True,
                message=f"Already certain to reach {target:g} or higher"
            )
        required = round_half_up(required)
        return RequiredFinalScore(
            required_score=required,
            is_possible=True,
            message=f"Needs at least {required:.1f} on the final exam"
        )
