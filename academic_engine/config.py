"""Environment-driven configuration for the academic performance engine."""

import os
import logging
import math
from typing import Dict, Optional

from dotenv import load_dotenv

from academic_engine.errors import InvalidWeightConfiguration
from academic_engine.models import ComponentType, DEFAULT_WEIGHTS

# Load environment variables
load_dotenv()

LOG_LEVEL = os.getenv('ENGINE_LOG_LEVEL', 'INFO').upper()

WEAKNESS_MARGIN = float(os.getenv('ENGINE_WEAKNESS_MARGIN', '0.5'))


def _parse_max_workers(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    workers = int(raw)
    if workers < 1:
        raise ValueError(f"ENGINE_BATCH_MAX_WORKERS must be >= 1, got {workers}")
    return workers


BATCH_MAX_WORKERS = _parse_max_workers(os.getenv('ENGINE_BATCH_MAX_WORKERS'))


def parse_weights(weights_str: Optional[str]) -> Dict[ComponentType, float]:
    """
    Parse a weight table such as ``oral:1,fifteen_min:1,one_period:2``.

    Args:
        weights_str: Comma separated ``type:weight`` pairs, or None/empty for defaults

    Returns:
        Mapping of component type to weight
    """
    if not weights_str or not weights_str.strip():
        return dict(DEFAULT_WEIGHTS)

    weights: Dict[ComponentType, float] = {}
    for item in weights_str.split(','):
        if not item.strip():
            continue
        try:
            key, value = item.split(':')
            component = ComponentType(key.strip())
            weight = float(value.strip())
        except ValueError as e:
            raise InvalidWeightConfiguration(f"Cannot parse weight entry {item!r}: {e}") from e
        if component in weights:
            raise InvalidWeightConfiguration(f"Duplicate weight for component {component.value!r}")
        if not math.isfinite(weight) or weight <= 0:
            raise InvalidWeightConfiguration(
                f"Weight for component {component.value!r} must be positive and finite, got {weight!r}"
            )
        weights[component] = weight
    return weights


COMPONENT_WEIGHTS = parse_weights(os.getenv('ENGINE_DEFAULT_WEIGHTS'))


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the configured log level to the engine loggers."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    logging.getLogger('academic_engine').setLevel(level or LOG_LEVEL)
