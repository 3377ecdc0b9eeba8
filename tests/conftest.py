"""
Shared fixtures for the metrics tests.
"""

from __future__ import annotations

import warnings

import pytest

from exceptions import UndefinedMetricWarning

BINARY_OBSERVED = [0, 1, 1, 0, 1, 0, 0, 1, 1, 0]
BINARY_PREDICTED = [0, 0, 1, 0, 1, 1, 0, 1, 0, 0]

MULTICLASS_OBSERVED = [0, 1, 1, 0, 1, 2, 0, 1, 2]
MULTICLASS_PREDICTED = [0, 2, 1, 0, 2, 1, 0, 0, 2]


@pytest.fixture
def binary_labels() -> tuple[list[int], list[int]]:
    """Ten-example binary scenario with TP=3, FP=1, FN=2, TN=4 for class 1."""
    return BINARY_OBSERVED, BINARY_PREDICTED


@pytest.fixture
def multiclass_labels() -> tuple[list[int], list[int]]:
    """Nine-example three-class scenario with accuracy 5/9."""
    return MULTICLASS_OBSERVED, MULTICLASS_PREDICTED


@pytest.fixture
def no_metric_warnings():
    """Fail the test if an UndefinedMetricWarning is emitted."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", UndefinedMetricWarning)
        yield
