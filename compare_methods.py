"""
Compare two sets of predictions scored against the same ground truth
"""

import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional

from experiment import result_stem
from metrics import compute_metrics
from models import Label, LabelSequence, label_keys


METRICS_TO_COMPARE = [
    ("Accuracy", "accuracy"),
    ("Macro Precision", "macro_precision"),
    ("Macro Recall", "macro_recall"),
    ("Macro F1", "macro_f1"),
    ("Weighted F1", "weighted_f1"),
]


def majority_baseline(observed: LabelSequence) -> List[Label]:
    """Predict the most frequent observed class for every example"""
    if not observed:
        return []
    most_common = Counter(observed).most_common(1)[0][0]
    return [most_common] * len(observed)


def compare_predictions(
    observed: LabelSequence,
    predicted_a: LabelSequence,
    predicted_b: LabelSequence,
    name_a: str = "method_a",
    name_b: str = "method_b",
    output_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Score two prediction sequences and print how they differ

    Both sequences are scored over the same class set so that per-class
    rows line up even when one method never predicts a class.

    Returns:
        Dict with both metric sets and per-class F1 differences
    """
    class_names = list(dict.fromkeys([*observed, *predicted_a, *predicted_b]))
    metrics_a = compute_metrics(observed, predicted_a, name=name_a, labels=class_names)
    metrics_b = compute_metrics(observed, predicted_b, name=name_b, labels=class_names)

    print("\n" + "="*70)
    print(f"  COMPARING {name_a.upper()} vs {name_b.upper()}")
    print("="*70)

    print(f"\n{'Metric':<25} {name_a:<15} {name_b:<15} {'Difference':<15}")
    print("-" * 70)

    results_comparison = {name_a: {}, name_b: {}}
    for metric_name, metric_key in METRICS_TO_COMPARE:
        a_val = getattr(metrics_a.aggregate, metric_key)
        b_val = getattr(metrics_b.aggregate, metric_key)
        results_comparison[name_a][metric_key] = a_val
        results_comparison[name_b][metric_key] = b_val
        diff = b_val - a_val
        diff_pct = (diff / a_val * 100) if a_val > 0 else 0

        print(f"{metric_name:<25} {a_val:>6.2%}      {b_val:>6.2%}      {diff:>+6.2%} ({diff_pct:+.1f}%)")

    print("\n" + "="*70)
    print("  PER-CLASS F1 SCORE COMPARISON")
    print("="*70)
    print(f"\n{'Class':<25} {name_a + ' F1':<15} {name_b + ' F1':<15} {'Difference':<15}")
    print("-" * 70)

    per_class_comparison = {}
    for label in class_names:
        a_f1 = metrics_a.per_class_metrics[label].f1
        b_f1 = metrics_b.per_class_metrics[label].f1
        per_class_comparison[label] = {
            f"{name_a}_f1": a_f1,
            f"{name_b}_f1": b_f1,
            "difference": b_f1 - a_f1,
        }
        print(f"{str(label):<25} {a_f1:>6.2%}      {b_f1:>6.2%}      {b_f1 - a_f1:>+6.2%}")

    comparison_data = {
        "methods": [name_a, name_b],
        "total_samples": metrics_a.total_samples,
        name_a: results_comparison[name_a],
        name_b: results_comparison[name_b],
        "per_class_comparison": per_class_comparison,
    }

    if output_dir is not None:
        comparison_file = Path(output_dir) / f"{result_stem(name_a)}_vs_{result_stem(name_b)}_comparison.json"
        comparison_file.parent.mkdir(parents=True, exist_ok=True)
        serializable = dict(comparison_data)
        serializable["per_class_comparison"] = dict(
            zip(label_keys(list(per_class_comparison)), per_class_comparison.values())
        )
        with open(comparison_file, 'w', encoding='utf-8') as f:
            json.dump(serializable, f, indent=2, ensure_ascii=False)
        print(f"\n[OK] Comparison saved to {comparison_file}")

    accuracy_improvement = metrics_b.accuracy - metrics_a.accuracy
    print(f"\n{name_b} changes Accuracy by: {accuracy_improvement:+.2%}")
    if accuracy_improvement > 0:
        print(f"[+] {name_b} is more accurate")
    elif accuracy_improvement < 0:
        print(f"[!] {name_b} is less accurate")
    else:
        print("[=] Both methods are equally accurate")

    comparison_data["metrics"] = {name_a: metrics_a, name_b: metrics_b}
    return comparison_data


if __name__ == "__main__":
    import argparse

    from dataset import get_dataset, list_datasets

    parser = argparse.ArgumentParser(description="Compare predictions against a majority-class baseline")
    parser.add_argument("--dataset", type=str, default="multiclass", choices=list_datasets(),
                        help="Illustrative dataset to evaluate")
    parser.add_argument("--output", type=str, default="results", help="Directory for the comparison JSON")

    args = parser.parse_args()

    data = get_dataset(args.dataset)
    compare_predictions(
        data.observed,
        majority_baseline(data.observed),
        data.predicted,
        name_a="baseline",
        name_b=data.name,
        output_dir=args.output,
    )
