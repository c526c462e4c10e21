"""Unit tests for configuration parsing."""

import logging

import pytest

from academic_engine.config import configure_logging, parse_weights
from academic_engine.errors import InvalidWeightConfiguration
from academic_engine.models import ComponentType, DEFAULT_WEIGHTS


def test_parse_weights_defaults():
    assert parse_weights(None) == DEFAULT_WEIGHTS
    assert parse_weights('  ') == DEFAULT_WEIGHTS


def test_parse_weights():
    weights = parse_weights('oral:1, final:4,')

    assert weights == {ComponentType.ORAL: 1.0, ComponentType.FINAL: 4.0}


def test_parse_weights_rejects_bad_input():
    with pytest.raises(InvalidWeightConfiguration):
        parse_weights('oral:1,oral:2')

    with pytest.raises(InvalidWeightConfiguration):
        parse_weights('homework:1')

    with pytest.raises(InvalidWeightConfiguration):
        parse_weights('oral=1')

    with pytest.raises(InvalidWeightConfiguration):
        parse_weights('oral:1,final:nan')

    with pytest.raises(InvalidWeightConfiguration):
        parse_weights('oral:1,final:inf')

    with pytest.raises(InvalidWeightConfiguration):
        parse_weights('oral:0')


def test_configure_logging():
    configure_logging('DEBUG')
    assert logging.getLogger('academic_engine').level == logging.DEBUG
