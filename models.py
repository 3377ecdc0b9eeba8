"""
Data models for classification metrics
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from exceptions import UnknownAverageModeError, UnknownLabelError


Label = Hashable
LabelSequence = Sequence[Label]


def label_keys(labels: Sequence[Label]) -> List[str]:
    """
    String form of each label for JSON keys

    Raises:
        ValueError: If two labels share a string form, e.g. 1 and "1"
    """
    keys = [str(label) for label in labels]
    if len(set(keys)) != len(keys):
        clashing = sorted({key for key in keys if keys.count(key) > 1})
        raise ValueError(f"labels {list(labels)!r} collide as JSON keys {clashing}")
    return keys


class AverageMode(str, Enum):
    """How per-class scores are reduced to a single number"""
    NONE = "none"
    MACRO = "macro"
    MICRO = "micro"
    WEIGHTED = "weighted"
    BINARY = "binary"

    @classmethod
    def parse(cls, value: Union["AverageMode", str, None]) -> "AverageMode":
        """
        Resolve a user supplied average mode

        Args:
            value: An AverageMode, its string value, or None (same as "none")

        Returns:
            The matching AverageMode

        Raises:
            UnknownAverageModeError: If value names no known mode
        """
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise UnknownAverageModeError(value, [mode.value for mode in cls])


@dataclass(frozen=True, eq=False)
class ConfusionMatrix:
    """
    Counts of (true class, predicted class) pairs

    counts[i, j] is the number of examples whose true class is labels[i]
    and whose predicted class is labels[j]. The array is read-only.
    """
    labels: Tuple[Label, ...]
    counts: np.ndarray
    _index: Dict[Label, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        labels = tuple(self.labels)
        if len(set(labels)) != len(labels):
            duplicates = [label for label in dict.fromkeys(labels) if labels.count(label) > 1]
            raise UnknownLabelError(duplicates, labels)

        raw = np.asarray(self.counts)
        if raw.dtype.kind not in "biuf":
            raise ValueError(f"counts must be numeric, got dtype {raw.dtype}")
        if raw.dtype.kind == "f" and not np.all(raw == np.floor(raw)):
            raise ValueError("counts must be whole numbers")
        if raw.size and raw.min() < 0:
            raise ValueError("counts must be non-negative")
        counts = raw.astype(np.int64)
        n = len(labels)
        if counts.shape != (n, n):
            raise ValueError(f"counts must have shape ({n}, {n}), got {counts.shape}")
        counts.setflags(write=False)
        object.__setattr__(self, "counts", counts)
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "_index", {label: i for i, label in enumerate(labels)})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfusionMatrix):
            return NotImplemented
        return self.labels == other.labels and np.array_equal(self.counts, other.counts)

    def __hash__(self) -> int:
        return hash((self.labels, self.counts.tobytes()))

    @property
    def n_samples(self) -> int:
        return int(self.counts.sum())

    @property
    def n_classes(self) -> int:
        return len(self.labels)

    def index_of(self, label: Label) -> int:
        """Position of a label in the class set"""
        try:
            return self._index[label]
        except KeyError:
            raise UnknownLabelError([label], self.labels) from None

    def count(self, true_label: Label, predicted_label: Label) -> int:
        return int(self.counts[self.index_of(true_label), self.index_of(predicted_label)])

    def support(self, label: Label) -> int:
        """Number of examples whose true class is label"""
        return int(self.counts[self.index_of(label)].sum())

    def correct(self) -> int:
        return int(np.trace(self.counts))

    def to_frame(self) -> pd.DataFrame:
        """Matrix as a DataFrame with true classes as rows"""
        return pd.DataFrame(
            self.counts,
            index=pd.Index(list(self.labels), name="true"),
            columns=pd.Index(list(self.labels), name="predicted"),
        )

    def tolist(self) -> List[List[int]]:
        return self.counts.tolist()


@dataclass(frozen=True)
class PerClassMetrics:
    """One-vs-rest counts and scores for a single class"""
    label: Label
    tp: int
    fp: int
    fn: int
    tn: int
    precision: float
    recall: float
    f1: float

    @property
    def support(self) -> int:
        return self.tp + self.fn

    def to_dict(self) -> Dict[str, float]:
        return {
            "precision": self.precision,
            "recall": self.recall,
            "f1": self.f1,
            "support": self.support,
            "tp": self.tp,
            "fp": self.fp,
            "fn": self.fn,
            "tn": self.tn,
        }


@dataclass(frozen=True)
class AggregateMetrics:
    """Accuracy and macro/micro/weighted reductions of per-class scores"""
    accuracy: float
    macro_precision: float
    macro_recall: float
    macro_f1: float
    micro_precision: float
    micro_recall: float
    micro_f1: float
    weighted_precision: float
    weighted_recall: float
    weighted_f1: float

    def get(self, metric: str, mode: AverageMode) -> float:
        """Look up e.g. ("f1", AverageMode.MACRO) -> macro_f1"""
        if mode not in (AverageMode.MACRO, AverageMode.MICRO, AverageMode.WEIGHTED):
            raise ValueError(f"{mode.value!r} is not an aggregate mode")
        return getattr(self, f"{mode.value}_{metric}")


@dataclass
class ExperimentMetrics:
    """Metrics for one evaluated pair of label sequences"""
    name: str
    accuracy: float
    aggregate: AggregateMetrics
    per_class_metrics: Dict[Label, PerClassMetrics]
    confusion_matrix: List[List[int]]
    class_names: List[Label]
    total_samples: int
    pos_label: Optional[Label] = None

    @property
    def macro_f1(self) -> float:
        return self.aggregate.macro_f1

    @property
    def macro_precision(self) -> float:
        return self.aggregate.macro_precision

    @property
    def macro_recall(self) -> float:
        return self.aggregate.macro_recall

    def to_dict(self) -> Dict[str, Any]:
        """JSON friendly view; class labels become strings"""
        keys = label_keys(list(self.per_class_metrics))
        return {
            "name": self.name,
            "accuracy": self.accuracy,
            "macro_precision": self.aggregate.macro_precision,
            "macro_recall": self.aggregate.macro_recall,
            "macro_f1": self.aggregate.macro_f1,
            "micro_precision": self.aggregate.micro_precision,
            "micro_recall": self.aggregate.micro_recall,
            "micro_f1": self.aggregate.micro_f1,
            "weighted_precision": self.aggregate.weighted_precision,
            "weighted_recall": self.aggregate.weighted_recall,
            "weighted_f1": self.aggregate.weighted_f1,
            "per_class": {
                key: m.to_dict() for key, m in zip(keys, self.per_class_metrics.values())
            },
            "confusion_matrix": self.confusion_matrix,
            "class_names": label_keys(self.class_names),
            "total_samples": self.total_samples,
            "pos_label": None if self.pos_label is None else str(self.pos_label),
        }
