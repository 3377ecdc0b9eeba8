"""
Metrics computation for classification experiments

Builds a confusion matrix from observed/predicted label sequences and
derives accuracy, per-class precision/recall/F1 and their macro, micro
and weighted averages from it.
"""

import warnings
from itertools import chain
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from exceptions import (
    EmptyInputError,
    LengthMismatchError,
    UndefinedMetricWarning,
    UnknownLabelError,
)
from models import (
    AggregateMetrics,
    AverageMode,
    ConfusionMatrix,
    ExperimentMetrics,
    Label,
    LabelSequence,
    PerClassMetrics,
)


METRIC_NAMES = ("precision", "recall", "f1")
SUMMARY_ROWS = ("accuracy", "macro avg", "weighted avg", "micro avg")

AverageArg = Union[AverageMode, str, None]
MetricResult = Union[float, Dict[Label, float]]


def _safe_divide(numerator: int, denominator: int, metric: str, label: Label) -> float:
    if denominator == 0:
        reason = "predicted" if metric == "precision" else "true"
        warnings.warn(
            f"{metric.capitalize()} is ill-defined for class {label!r} "
            f"(no {reason} samples) and is set to 0.0",
            UndefinedMetricWarning,
            stacklevel=3,
        )
        return 0.0
    return numerator / denominator


def _f1(precision: float, recall: float) -> float:
    if precision + recall == 0:
        return 0.0
    return 2 * precision * recall / (precision + recall)


def _class_set(
    observed: LabelSequence,
    predicted: LabelSequence,
    labels: Optional[Sequence[Label]],
) -> List[Label]:
    seen = list(dict.fromkeys(chain(observed, predicted)))
    if labels is None:
        return seen

    labels = list(labels)
    known = set(labels)
    if len(known) != len(labels):
        duplicates = [label for label in dict.fromkeys(labels) if labels.count(label) > 1]
        raise UnknownLabelError(duplicates, labels)
    missing = [label for label in seen if label not in known]
    if missing:
        raise UnknownLabelError(missing, labels)
    return labels


def build_confusion_matrix(
    observed: LabelSequence,
    predicted: LabelSequence,
    labels: Optional[Sequence[Label]] = None,
) -> ConfusionMatrix:
    """
    Count (true, predicted) label pairs

    Args:
        observed: Ground truth labels
        predicted: Predicted labels, aligned with observed
        labels: Optional class order; may add classes absent from the data

    Returns:
        ConfusionMatrix over the class set

    Raises:
        LengthMismatchError: If the sequences differ in length
        EmptyInputError: If there are no examples
        UnknownLabelError: If labels omits a class present in the data
    """
    observed = list(observed)
    predicted = list(predicted)
    if len(observed) != len(predicted):
        raise LengthMismatchError(len(observed), len(predicted))
    if not observed:
        raise EmptyInputError()

    class_set = _class_set(observed, predicted, labels)
    index = {label: i for i, label in enumerate(class_set)}

    counts = np.zeros((len(class_set), len(class_set)), dtype=np.int64)
    rows = np.fromiter((index[t] for t in observed), dtype=np.intp, count=len(observed))
    cols = np.fromiter((index[p] for p in predicted), dtype=np.intp, count=len(predicted))
    np.add.at(counts, (rows, cols), 1)

    return ConfusionMatrix(labels=tuple(class_set), counts=counts)


def compute_accuracy(cm: ConfusionMatrix) -> float:
    """Fraction of examples on the diagonal"""
    n = cm.n_samples
    if n == 0:
        raise EmptyInputError()
    return cm.correct() / n


def compute_per_class_metrics(cm: ConfusionMatrix, label: Label) -> PerClassMetrics:
    """
    One-vs-rest counts and scores for a single class

    Precision and recall with a zero denominator are reported as 0.0 and
    an UndefinedMetricWarning is emitted.
    """
    i = cm.index_of(label)
    n = cm.n_samples
    tp = int(cm.counts[i, i])
    fp = int(cm.counts[:, i].sum()) - tp
    fn = int(cm.counts[i, :].sum()) - tp
    tn = n - tp - fp - fn

    precision = _safe_divide(tp, tp + fp, "precision", label)
    recall = _safe_divide(tp, tp + fn, "recall", label)

    return PerClassMetrics(
        label=label,
        tp=tp,
        fp=fp,
        fn=fn,
        tn=tn,
        precision=precision,
        recall=recall,
        f1=_f1(precision, recall),
    )


def compute_all_per_class_metrics(cm: ConfusionMatrix) -> List[PerClassMetrics]:
    return [compute_per_class_metrics(cm, label) for label in cm.labels]


def compute_aggregate(
    per_class: Sequence[PerClassMetrics],
    cm: ConfusionMatrix,
) -> AggregateMetrics:
    """
    Reduce per-class metrics to accuracy plus macro, micro and weighted averages

    Micro averaging pools TP/FP/FN over all classes. Every misclassification
    is an FP for the predicted class and an FN for the true class, so for
    single-label data the micro scores all equal accuracy.
    """
    n = cm.n_samples
    values = {
        name: np.array([getattr(m, name) for m in per_class], dtype=float)
        for name in METRIC_NAMES
    }
    weights = np.array([m.support for m in per_class], dtype=float) / n

    global_tp = sum(m.tp for m in per_class)
    global_fp = sum(m.fp for m in per_class)
    global_fn = sum(m.fn for m in per_class)
    micro_precision = global_tp / (global_tp + global_fp) if global_tp + global_fp else 0.0
    micro_recall = global_tp / (global_tp + global_fn) if global_tp + global_fn else 0.0

    return AggregateMetrics(
        accuracy=compute_accuracy(cm),
        macro_precision=float(np.mean(values["precision"])),
        macro_recall=float(np.mean(values["recall"])),
        macro_f1=float(np.mean(values["f1"])),
        micro_precision=micro_precision,
        micro_recall=micro_recall,
        micro_f1=_f1(micro_precision, micro_recall),
        weighted_precision=float(np.dot(weights, values["precision"])),
        weighted_recall=float(np.dot(weights, values["recall"])),
        weighted_f1=float(np.dot(weights, values["f1"])),
    )


def aggregate_metric(
    per_class: Sequence[PerClassMetrics],
    cm: ConfusionMatrix,
    metric: str,
    mode: AverageMode,
    pos_label: Label = 1,
) -> MetricResult:
    """Reduce one metric according to an already parsed AverageMode"""
    if metric not in METRIC_NAMES:
        raise ValueError(f"unknown metric {metric!r}, expected one of {list(METRIC_NAMES)}")

    if mode is AverageMode.NONE:
        return {m.label: getattr(m, metric) for m in per_class}
    if mode is AverageMode.BINARY:
        by_label = {m.label: m for m in per_class}
        if pos_label not in by_label:
            raise UnknownLabelError([pos_label], cm.labels)
        return getattr(by_label[pos_label], metric)
    return compute_aggregate(per_class, cm).get(metric, mode)


def _score(
    metric: str,
    observed: LabelSequence,
    predicted: LabelSequence,
    average: AverageArg,
    pos_label: Label,
    labels: Optional[Sequence[Label]],
) -> MetricResult:
    mode = AverageMode.parse(average)
    cm = build_confusion_matrix(observed, predicted, labels=labels)

    if mode is AverageMode.BINARY:
        # only the positive class is scored, so other classes do not warn
        return getattr(compute_per_class_metrics(cm, pos_label), metric)
    return aggregate_metric(compute_all_per_class_metrics(cm), cm, metric, mode, pos_label)


def confusion_matrix(
    observed: LabelSequence,
    predicted: LabelSequence,
    labels: Optional[Sequence[Label]] = None,
) -> ConfusionMatrix:
    return build_confusion_matrix(observed, predicted, labels=labels)


def accuracy(observed: LabelSequence, predicted: LabelSequence) -> float:
    return compute_accuracy(build_confusion_matrix(observed, predicted))


def precision(
    observed: LabelSequence,
    predicted: LabelSequence,
    average: AverageArg = "macro",
    pos_label: Label = 1,
    labels: Optional[Sequence[Label]] = None,
) -> MetricResult:
    """
    Precision TP / (TP + FP)

    Args:
        observed: Ground truth labels
        predicted: Predicted labels
        average: "none" for a per-class dict, "macro", "micro", "weighted",
            or "binary" for the score of pos_label alone
        pos_label: Positive class used when average is "binary"
        labels: Optional class order; may add classes absent from the data

    Returns:
        A float, or a dict of class -> score when average is "none"
    """
    return _score("precision", observed, predicted, average, pos_label, labels)


def recall(
    observed: LabelSequence,
    predicted: LabelSequence,
    average: AverageArg = "macro",
    pos_label: Label = 1,
    labels: Optional[Sequence[Label]] = None,
) -> MetricResult:
    """Recall TP / (TP + FN); arguments as for precision()"""
    return _score("recall", observed, predicted, average, pos_label, labels)


def f1_score(
    observed: LabelSequence,
    predicted: LabelSequence,
    average: AverageArg = "macro",
    pos_label: Label = 1,
    labels: Optional[Sequence[Label]] = None,
) -> MetricResult:
    """Harmonic mean of precision and recall; arguments as for precision()"""
    return _score("f1", observed, predicted, average, pos_label, labels)


def summary(
    observed: LabelSequence,
    predicted: LabelSequence,
    labels: Optional[Sequence[Label]] = None,
) -> pd.DataFrame:
    """
    Per-class and aggregate metrics as a table

    One row per class followed by "accuracy", "macro avg", "weighted avg"
    and "micro avg" rows, with columns precision, recall, f1 and support.
    The accuracy row holds the accuracy in the f1 column only.

    Raises:
        ValueError: If a class label equals one of the aggregate row names
    """
    cm = build_confusion_matrix(observed, predicted, labels=labels)
    reserved = [label for label in cm.labels if isinstance(label, str) and label in SUMMARY_ROWS]
    if reserved:
        raise ValueError(f"class labels {reserved} clash with summary rows {list(SUMMARY_ROWS)}")
    per_class = compute_all_per_class_metrics(cm)
    agg = compute_aggregate(per_class, cm)
    n = cm.n_samples

    rows = [[m.precision, m.recall, m.f1, m.support] for m in per_class]
    rows.append([np.nan, np.nan, agg.accuracy, n])
    for mode in (AverageMode.MACRO, AverageMode.WEIGHTED, AverageMode.MICRO):
        rows.append([agg.get(name, mode) for name in METRIC_NAMES] + [n])

    index = list(cm.labels) + list(SUMMARY_ROWS)
    table = pd.DataFrame(rows, index=pd.Index(index, dtype=object), columns=list(METRIC_NAMES) + ["support"])
    table["support"] = table["support"].astype(int)
    return table


def compute_metrics(
    observed: LabelSequence,
    predicted: LabelSequence,
    name: str,
    labels: Optional[Sequence[Label]] = None,
    pos_label: Optional[Label] = None,
) -> ExperimentMetrics:
    """
    Compute classification metrics for a pair of label sequences

    Args:
        observed: Ground truth labels
        predicted: Predicted labels
        name: Name recorded with the metrics
        labels: Optional class order
        pos_label: Positive class of a binary task, recorded for reporting

    Returns:
        ExperimentMetrics object with all computed metrics
    """
    cm = build_confusion_matrix(observed, predicted, labels=labels)
    if pos_label is not None and pos_label not in cm.labels:
        raise UnknownLabelError([pos_label], cm.labels)

    per_class = compute_all_per_class_metrics(cm)
    agg = compute_aggregate(per_class, cm)

    return ExperimentMetrics(
        name=name,
        accuracy=agg.accuracy,
        aggregate=agg,
        per_class_metrics={m.label: m for m in per_class},
        confusion_matrix=cm.tolist(),
        class_names=list(cm.labels),
        total_samples=cm.n_samples,
        pos_label=pos_label,
    )
