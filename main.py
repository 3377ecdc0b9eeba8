"""
Classification metrics walkthrough

Computes accuracy, precision, recall and F1 for small illustrative
datasets and prints per-class and averaged results.
"""

from typing import List, Optional, Sequence

from dataset import list_datasets
from experiment import run_experiment, save_results
from models import ExperimentMetrics


def run_all(
    names: Sequence[str],
    output_dir: str = "results",
    save: bool = True
) -> List[ExperimentMetrics]:
    """Run each named dataset in turn, saving results unless save is False"""
    print("\n" + "="*70)
    print("  CLASSIFICATION METRICS: ACCURACY, PRECISION, RECALL, F1")
    print(f"  Datasets: {', '.join(names)}")
    print("="*70)

    all_metrics = []
    for name in names:
        metrics, _ = run_experiment(name)
        if save:
            save_results(metrics, output_dir=output_dir)
        all_metrics.append(metrics)

    print("\n[OK] Evaluation completed!")
    return all_metrics


def main(argv: Optional[Sequence[str]] = None):
    import argparse

    parser = argparse.ArgumentParser(description="Classification metrics on illustrative datasets")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--dataset", type=str, default="multiclass", choices=list_datasets(),
                       help="Dataset to evaluate")
    group.add_argument("--all", action="store_true", help="Evaluate every dataset")
    parser.add_argument("--output", type=str, default="results", help="Directory for metrics JSON")
    parser.add_argument("--no-save", action="store_true", help="Print results without saving them")

    args = parser.parse_args(argv)

    names = list_datasets() if args.all else [args.dataset]
    run_all(names, output_dir=args.output, save=not args.no_save)


if __name__ == "__main__":
    main()
