"""
Experiment execution and result saving
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Tuple

import pandas as pd

from dataset import get_dataset
from metrics import compute_metrics, summary
from models import ExperimentMetrics


def result_stem(name: str) -> str:
    """Clean a metrics name for use as a file name prefix"""
    stem = name.replace("\\", "/").split("/")[-1].replace("-", "_").lower()
    return stem or "results"


def run_experiment(dataset_name: str = "multiclass") -> Tuple[ExperimentMetrics, pd.DataFrame]:
    """
    Compute and print metrics for one illustrative dataset

    Args:
        dataset_name: Name of a dataset from dataset.EXAMPLES

    Returns:
        Tuple of (metrics, summary table)
    """
    dataset = get_dataset(dataset_name)

    print("\n" + "="*70)
    print(f"  DATASET: {dataset.name}")
    print(f"  {dataset.description}")
    print(f"  Samples: {len(dataset)}")
    print("="*70 + "\n")

    print(f"[*] Observed:  {list(dataset.observed)}")
    print(f"[*] Predicted: {list(dataset.predicted)}")

    metrics = compute_metrics(
        dataset.observed,
        dataset.predicted,
        name=dataset.name,
        pos_label=dataset.pos_label,
    )
    table = summary(dataset.observed, dataset.predicted, labels=metrics.class_names)

    print("\n" + "="*70)
    print("  RESULTS")
    print("="*70)
    print(f"\n  Accuracy:        {metrics.accuracy:.2%}")
    print(f"  Macro Precision: {metrics.macro_precision:.2%}")
    print(f"  Macro Recall:    {metrics.macro_recall:.2%}")
    print(f"  Macro F1:        {metrics.macro_f1:.2%}")

    if dataset.pos_label is not None:
        pos = metrics.per_class_metrics[dataset.pos_label]
        print(f"\n  Positive class {dataset.pos_label!r}: "
              f"TP={pos.tp} FP={pos.fp} FN={pos.fn} TN={pos.tn}")
        print(f"    Precision: {pos.precision:.2%}")
        print(f"    Recall:    {pos.recall:.2%}")
        print(f"    F1:        {pos.f1:.2%}")

    print("\n  Per-class F1 scores:")
    for label, m in sorted(metrics.per_class_metrics.items(), key=lambda x: -x[1].f1):
        print(f"    {str(label):25s}: {m.f1:.2%} (n={m.support})")

    print("\n  Summary:")
    print(table.to_string(float_format=lambda v: f"{v:.3f}", na_rep=""))

    return metrics, table


def save_results(metrics: ExperimentMetrics, output_dir: str = "results") -> Path:
    """
    Save experiment metrics to a JSON file

    Args:
        metrics: Experiment metrics
        output_dir: Directory to save results

    Returns:
        Path of the written file
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    metrics_dict = metrics.to_dict()
    metrics_dict["timestamp"] = datetime.now().isoformat()

    metrics_file = output_path / f"{result_stem(metrics.name)}_metrics.json"
    with open(metrics_file, 'w', encoding='utf-8') as f:
        json.dump(metrics_dict, f, indent=2, ensure_ascii=False)
    print(f"\n[OK] Saved metrics to {metrics_file}")

    return metrics_file
