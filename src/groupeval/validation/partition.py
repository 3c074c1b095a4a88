"""
Group-Filtered Dataset Views
==============================
Every function returns an independent Dataset copy and leaves its input
untouched; row order and index labels are preserved. Group membership is
looked up through the fingerprint map, so these work after the group column
has been dropped.
"""

from typing import Iterable, List

import numpy as np

from groupeval.data.dataset import Dataset
from groupeval.errors import ConfigurationError
from groupeval.validation.fingerprint import FingerprintMap


def _group_mask(dataset: Dataset, fmap: FingerprintMap, groups: Iterable[str]) -> np.ndarray:
    wanted = {str(g) for g in groups}
    resolved = fmap.resolve_frame(dataset.frame)
    return np.fromiter((g in wanted for g in resolved), dtype=bool, count=len(resolved))


def keep_only(dataset: Dataset, fmap: FingerprintMap, groups: Iterable[str]) -> Dataset:
    """Rows whose group is in ``groups``."""
    return dataset.subset(_group_mask(dataset, fmap, groups))


def exclude(dataset: Dataset, fmap: FingerprintMap, groups: Iterable[str]) -> Dataset:
    """Rows whose group is NOT in ``groups``."""
    return dataset.subset(~_group_mask(dataset, fmap, groups))


def keep_only_one(dataset: Dataset, fmap: FingerprintMap, group: str) -> Dataset:
    return keep_only(dataset, fmap, [group])


def exclude_one(dataset: Dataset, fmap: FingerprintMap, group: str) -> Dataset:
    return exclude(dataset, fmap, [group])


def drop_attribute(dataset: Dataset, attribute: str) -> Dataset:
    """Copy of ``dataset`` without ``attribute`` (e.g. the user column)."""
    view = dataset.copy()
    view.remove_attribute(attribute)
    return view


def retarget(dataset: Dataset, class_attribute: str) -> Dataset:
    """Copy of ``dataset`` predicting ``class_attribute`` instead."""
    view = dataset.copy()
    view.set_class(class_attribute)
    return view


def extract_groups(dataset: Dataset, group_attribute: str) -> List[str]:
    """The group universe: distinct group values in order of first appearance."""
    if not dataset.has_attribute(group_attribute):
        raise ConfigurationError(
            f"Cannot enumerate groups: attribute '{group_attribute}' "
            f"not in dataset {dataset.name}"
        )
    values = dataset.frame[group_attribute].astype(str)
    return list(dict.fromkeys(values))
