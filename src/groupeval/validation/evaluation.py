"""
Evaluation Accumulator
========================
Collects (true, predicted) labels over any number of folds and renders a
summary block and a confusion matrix, in the layout of the classic Weka
``Evaluation`` output:

    Correctly Classified Instances            36           90.0000 %
    Incorrectly Classified Instances           4           10.0000 %
    ...

     a  b   <-- classified as
    18  2 |  a = rest
     2 18 |  b = stress

Labels are sorted before rendering so reports are deterministic.
"""

import string
from typing import List, Sequence

import numpy as np
from sklearn.metrics import (
    accuracy_score, balanced_accuracy_score, cohen_kappa_score,
    confusion_matrix, f1_score,
)


def _column_key(i: int) -> str:
    letters = string.ascii_lowercase
    return letters[i] if i < len(letters) else f"{letters[i % 26]}{i // 26}"


class Evaluation:
    """Running evaluation statistics across folds."""

    def __init__(self):
        self._y_true: List[str] = []
        self._y_pred: List[str] = []
        self.train_sizes: List[int] = []
        self.test_sizes: List[int] = []

    def record(self, y_true: Sequence, y_pred: Sequence, n_train: int = 0):
        """Add one evaluated fold."""
        y_true = [str(v) for v in y_true]
        y_pred = [str(v) for v in y_pred]
        if len(y_true) != len(y_pred):
            raise ValueError(
                f"Got {len(y_true)} true labels but {len(y_pred)} predictions"
            )
        self._y_true.extend(y_true)
        self._y_pred.extend(y_pred)
        self.train_sizes.append(int(n_train))
        self.test_sizes.append(len(y_true))

    def merge(self, other: "Evaluation"):
        self._y_true.extend(other._y_true)
        self._y_pred.extend(other._y_pred)
        self.train_sizes.extend(other.train_sizes)
        self.test_sizes.extend(other.test_sizes)

    # ─────────────────────── Statistics ───────────────────────

    @property
    def labels(self) -> List[str]:
        return sorted(set(self._y_true) | set(self._y_pred))

    @property
    def n_instances(self) -> int:
        return len(self._y_true)

    @property
    def n_correct(self) -> int:
        return int(sum(t == p for t, p in zip(self._y_true, self._y_pred)))

    @property
    def accuracy(self) -> float:
        if not self._y_true:
            return float("nan")
        return float(accuracy_score(self._y_true, self._y_pred))

    @property
    def balanced_accuracy(self) -> float:
        if not self._y_true:
            return float("nan")
        return float(balanced_accuracy_score(self._y_true, self._y_pred))

    @property
    def kappa(self) -> float:
        if len(self.labels) < 2:
            return float("nan")
        return float(cohen_kappa_score(self._y_true, self._y_pred))

    @property
    def macro_f1(self) -> float:
        if not self._y_true:
            return float("nan")
        return float(f1_score(self._y_true, self._y_pred, labels=self.labels,
                              average="macro", zero_division=0))

    # ─────────────────────── Rendering ───────────────────────

    def summary_string(self, title: str = "") -> str:
        lines = [title] if title else []
        n = self.n_instances
        if n == 0:
            lines.append("No instances evaluated.")
            return "\n".join(lines)

        correct = self.n_correct
        lines.append(f"{'Correctly Classified Instances':<36s}{correct:>8d}"
                     f"{100.0 * correct / n:>18.4f} %")
        lines.append(f"{'Incorrectly Classified Instances':<36s}{n - correct:>8d}"
                     f"{100.0 * (n - correct) / n:>18.4f} %")
        lines.append(f"{'Kappa statistic':<36s}{self.kappa:>8.4f}")
        lines.append(f"{'Balanced accuracy':<36s}{self.balanced_accuracy:>8.4f}")
        lines.append(f"{'Macro F1':<36s}{self.macro_f1:>8.4f}")
        lines.append(f"{'Total Number of Instances':<36s}{n:>8d}")
        return "\n".join(lines)

    def matrix_string(self, title: str = "") -> str:
        lines = [title] if title else []
        labels = self.labels
        if not labels:
            lines.append("(empty)")
            return "\n".join(lines)

        cm = confusion_matrix(self._y_true, self._y_pred, labels=labels)
        keys = [_column_key(i) for i in range(len(labels))]
        width = max(max(len(k) for k in keys), len(str(int(np.max(cm))))) + 1

        lines.append("".join(k.rjust(width) for k in keys) + "   <-- classified as")
        for key, label, row in zip(keys, labels, cm):
            cells = "".join(str(int(v)).rjust(width) for v in row)
            lines.append(f"{cells} | {key.rjust(width)} = {label}")
        return "\n".join(lines)
