"""
Illustrative label datasets for demonstrating classification metrics
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from models import Label


@dataclass(frozen=True)
class LabelDataset:
    """Ground truth and predictions for a small worked example"""
    name: str
    description: str
    observed: Tuple[Label, ...]
    predicted: Tuple[Label, ...]
    pos_label: Optional[Label] = None

    def __post_init__(self):
        if len(self.observed) != len(self.predicted):
            raise ValueError(
                f"dataset {self.name!r}: {len(self.observed)} observed labels "
                f"but {len(self.predicted)} predicted"
            )

    def __len__(self) -> int:
        return len(self.observed)


EXAMPLES: Dict[str, LabelDataset] = {
    "binary": LabelDataset(
        name="binary",
        description="Spam filter on ten emails (1 = spam)",
        observed=(0, 1, 1, 0, 1, 0, 0, 1, 1, 0),
        predicted=(0, 0, 1, 0, 1, 1, 0, 1, 0, 0),
        pos_label=1,
    ),
    "multiclass": LabelDataset(
        name="multiclass",
        description="Three-class problem with nine examples",
        observed=(0, 1, 1, 0, 1, 2, 0, 1, 2),
        predicted=(0, 2, 1, 0, 2, 1, 0, 0, 2),
    ),
    "animals": LabelDataset(
        name="animals",
        description="Image classifier on twelve animal photos",
        observed=(
            "cat", "cat", "cat", "cat", "dog", "dog",
            "dog", "dog", "dog", "rabbit", "rabbit", "rabbit",
        ),
        predicted=(
            "cat", "cat", "dog", "cat", "dog", "dog",
            "cat", "dog", "dog", "rabbit", "dog", "rabbit",
        ),
    ),
}


def list_datasets() -> List[str]:
    return list(EXAMPLES)


def get_dataset(name: str) -> LabelDataset:
    """
    Look up an illustrative dataset by name

    Raises:
        KeyError: If no dataset has that name
    """
    try:
        return EXAMPLES[name]
    except KeyError:
        raise KeyError(f"unknown dataset {name!r}, available: {list_datasets()}") from None
