"""
Group Fingerprints
====================
The user column must be deleted before training, yet every group-aware
split still needs to know which user a row belongs to. Each row is keyed by
its numeric feature vector (the "fingerprint"), recorded together with its
user BEFORE the column is removed:

    fmap = build_fingerprint_map(dataset, "username")
    view = drop_attribute(dataset, "username")
    resolve_group(fmap, view.frame.iloc[0])   # -> "alice"

Fingerprints are the exact float64 byte image of the numeric attributes, in
schema order, so the map key is bit-identical and NaN-safe. The fingerprint
columns are fixed when the map is built, so lookups do not depend on later
column deletions or reordering.

Known limitation: two rows with identical numeric values but different users
collide; the later row wins. Collisions are counted on the map.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple, Union

import numpy as np
import pandas as pd

from groupeval.data.dataset import Dataset
from groupeval.errors import ConfigurationError, FingerprintLookupError


def numeric_fingerprint(values) -> bytes:
    return np.ascontiguousarray(values, dtype=np.float64).tobytes()


@dataclass
class FingerprintMap:
    columns: Tuple[str, ...]
    groups: Dict[bytes, str] = field(default_factory=dict)
    collisions: int = 0

    def __len__(self) -> int:
        return len(self.groups)

    def resolve(self, row: Union[pd.Series, Mapping]) -> str:
        try:
            values = [row[c] for c in self.columns]
        except KeyError as e:
            raise FingerprintLookupError(f"Row is missing fingerprint column {e}") from e
        key = numeric_fingerprint(values)
        try:
            return self.groups[key]
        except KeyError:
            raise FingerprintLookupError(
                f"No group recorded for row with values {values}"
            ) from None

    def resolve_frame(self, frame: pd.DataFrame) -> np.ndarray:
        """Group of every row of ``frame``, in row order."""
        missing = [c for c in self.columns if c not in frame.columns]
        if missing:
            raise FingerprintLookupError(f"Frame is missing fingerprint columns {missing}")

        matrix = frame[list(self.columns)].to_numpy(dtype=np.float64)
        resolved = np.empty(len(matrix), dtype=object)
        for i, vector in enumerate(matrix):
            key = numeric_fingerprint(vector)
            group = self.groups.get(key)
            if group is None:
                raise FingerprintLookupError(
                    f"No group recorded for row {frame.index[i]!r} with values {vector.tolist()}"
                )
            resolved[i] = group
        return resolved


def build_fingerprint_map(
    dataset: Dataset,
    group_attribute: str,
    verbose: bool = False,
) -> FingerprintMap:
    """
    Record the group of every row, keyed by its numeric fingerprint.

    Must run before the group attribute is removed. The class attribute is
    left out of the fingerprint so that retargeting the class does not break
    lookups.
    """
    if not dataset.has_attribute(group_attribute):
        raise ConfigurationError(
            f"Group attribute '{group_attribute}' not in dataset {dataset.name}"
        )

    columns = tuple(
        c for c in dataset.numeric_attributes
        if c not in (group_attribute, dataset.class_attribute)
    )
    if not columns:
        raise ConfigurationError(
            f"Dataset {dataset.name} has no numeric attributes to fingerprint rows with"
        )

    fmap = FingerprintMap(columns=columns)
    matrix = dataset.frame[list(columns)].to_numpy(dtype=np.float64)
    owners = dataset.frame[group_attribute].astype(str).to_numpy()

    for vector, owner in zip(matrix, owners):
        key = numeric_fingerprint(vector)
        previous = fmap.groups.get(key)
        if previous is not None and previous != owner:
            fmap.collisions += 1
        fmap.groups[key] = owner

    if verbose and fmap.collisions:
        print(f"  [WARN] {dataset.name}: {fmap.collisions} fingerprint collision(s) "
              f"between different groups; later rows win")
    return fmap


def resolve_group(fmap: FingerprintMap, row: Union[pd.Series, Mapping]) -> str:
    """Group owning ``row``; raises FingerprintLookupError if unknown."""
    return fmap.resolve(row)
