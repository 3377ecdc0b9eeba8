"""
Errors and warnings raised while computing classification metrics
"""

from typing import Any, Hashable, Iterable, Sequence

from sklearn.exceptions import UndefinedMetricWarning as _SklearnUndefinedMetricWarning


class MetricsError(Exception):
    """Base exception for metric computation"""

    pass


class LengthMismatchError(MetricsError, ValueError):
    """Raised when observed and predicted sequences differ in length"""

    def __init__(self, observed_length: int, predicted_length: int) -> None:
        self.observed_length = observed_length
        self.predicted_length = predicted_length
        super().__init__(
            f"observed and predicted must have the same length, "
            f"got {observed_length} and {predicted_length}"
        )


class EmptyInputError(MetricsError, ValueError):
    """Raised when there are no examples to evaluate"""

    def __init__(self) -> None:
        super().__init__("at least one example is required")


class UnknownAverageModeError(MetricsError, ValueError):
    """Raised when an average mode outside the supported set is requested"""

    def __init__(self, value: Any, valid_modes: Sequence[str]) -> None:
        self.value = value
        self.valid_modes = list(valid_modes)
        super().__init__(
            f"unknown average mode {value!r}, expected one of {self.valid_modes}"
        )


class UnknownLabelError(MetricsError, ValueError):
    """Raised when a label is missing from the class set it must belong to"""

    def __init__(self, labels: Iterable[Hashable], known: Iterable[Hashable]) -> None:
        self.labels = list(labels)
        self.known = list(known)
        super().__init__(f"labels {self.labels!r} not in class set {self.known!r}")


class UndefinedMetricWarning(_SklearnUndefinedMetricWarning):
    """Precision or recall had a zero denominator and was set to 0.0"""

    pass
