"""
Dataset Model
===============
An ordered table of rows sharing a schema of named attributes (numeric or
categorical), with one attribute designated as the class (prediction target).

Backed by a pandas DataFrame. ``copy()`` returns a Dataset that shares no
mutable state with the original, so concurrent workers can delete rows and
attributes on their own view without observing each other.
"""

from typing import List, Optional

import numpy as np
import pandas as pd
from pandas.api.types import is_numeric_dtype

from groupeval.errors import ConfigurationError


class Dataset:
    """Tabular dataset with a designated class attribute."""

    def __init__(self, frame: pd.DataFrame, class_attribute: str, name: str = "dataset"):
        if class_attribute not in frame.columns:
            raise ConfigurationError(
                f"Class attribute '{class_attribute}' not in dataset {name}. "
                f"Available: {list(frame.columns)}"
            )
        self.frame = frame
        self.class_attribute = class_attribute
        self.name = name

    def __len__(self) -> int:
        return len(self.frame)

    def __repr__(self) -> str:
        return (f"Dataset(name={self.name!r}, rows={len(self)}, "
                f"attributes={len(self.attributes)}, class={self.class_attribute!r})")

    # ─────────────────────── Schema ───────────────────────

    @property
    def attributes(self) -> List[str]:
        return list(self.frame.columns)

    @property
    def numeric_attributes(self) -> List[str]:
        return [c for c in self.frame.columns if is_numeric_dtype(self.frame[c])]

    def has_attribute(self, name: str) -> bool:
        return name in self.frame.columns

    # ─────────────────────── Views ───────────────────────

    def copy(self) -> "Dataset":
        return Dataset(self.frame.copy(deep=True), self.class_attribute, self.name)

    def subset(self, mask: np.ndarray) -> "Dataset":
        """Rows where ``mask`` is True, as an independent copy (index kept)."""
        return Dataset(self.frame.loc[np.asarray(mask, dtype=bool)].copy(),
                       self.class_attribute, self.name)

    def take(self, positions: np.ndarray) -> "Dataset":
        """Rows at the given integer positions, as an independent copy."""
        return Dataset(self.frame.iloc[positions].copy(), self.class_attribute, self.name)

    def features(self) -> pd.DataFrame:
        return self.frame.drop(columns=[self.class_attribute])

    def labels(self) -> np.ndarray:
        return self.frame[self.class_attribute].astype(str).to_numpy()

    # ─────────────────────── In-place mutation ───────────────────────

    def remove_attribute(self, name: str) -> None:
        if name not in self.frame.columns:
            raise ConfigurationError(f"Attribute '{name}' not in dataset {self.name}")
        if name == self.class_attribute:
            raise ConfigurationError(
                f"Cannot remove class attribute '{name}'; retarget the class first"
            )
        self.frame = self.frame.drop(columns=[name])

    def set_class(self, name: str) -> None:
        if name not in self.frame.columns:
            raise ConfigurationError(f"Attribute '{name}' not in dataset {self.name}")
        self.class_attribute = name

    def value_counts(self, attribute: Optional[str] = None) -> pd.Series:
        """Row count per value of ``attribute`` (defaults to the class)."""
        column = attribute or self.class_attribute
        return self.frame[column].astype(str).value_counts(sort=False)
