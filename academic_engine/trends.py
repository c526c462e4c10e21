"""GPA trend across consecutive periods."""

import logging
from typing import Sequence

import numpy as np

from academic_engine.models import TrendDirection, TrendResult
from academic_engine.rounding import round_half_up

logger = logging.getLogger(__name__)

# Period-to-period changes within this band are noise, not a trend.
TREND_DEADBAND = 0.2

# Float subtraction noise, e.g. 7.2 - 7.0 == 0.2000000000000002
EPSILON = 1e-9

MIN_GPA = 0.0
MAX_GPA = 10.0


def direction_for(delta: float) -> TrendDirection:
    if delta > TREND_DEADBAND + EPSILON:
        return TrendDirection.IMPROVING
    if delta < -TREND_DEADBAND - EPSILON:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


class TrendAnalyzer:
    """Derives trend direction and a linear projection from a GPA history."""

    def analyze(self, gpas: Sequence[float]) -> TrendResult:
        """
        Analyze a chronologically ordered GPA history (oldest first).

        Direction and magnitude compare only the latest two periods. The
        slope, projection and confidence come from a least-squares line over
        the whole history.
        """
        history = [float(g) for g in gpas]

        if len(history) < 2:
            return TrendResult(
                direction=TrendDirection.STABLE,
                magnitude=0.0,
                slope=0.0,
                projected_next_gpa=history[-1] if history else None,
                confidence=0.0,
            )

        delta = history[-1] - history[-2]
        direction = direction_for(delta)

        x = np.arange(len(history), dtype=float)
        y = np.array(history)
        slope, intercept = np.polyfit(x, y, 1)
        projected = float(np.clip(intercept + slope * len(history), MIN_GPA, MAX_GPA))

        fitted = intercept + slope * x
        ss_total = float(np.sum((y - y.mean()) ** 2))
        ss_residual = float(np.sum((y - fitted) ** 2))
        r2 = 1 - ss_residual / ss_total if ss_total > 0 else 0.0

        logger.debug("Trend over %d periods: delta=%.2f direction=%s", len(history), delta, direction.value)

        return TrendResult(
            direction=direction,
            magnitude=round_half_up(delta),
            slope=round_half_up(float(slope), 3),
            projected_next_gpa=round_half_up(projected),
            confidence=float(round(max(0.0, r2) * 100)),
        )
