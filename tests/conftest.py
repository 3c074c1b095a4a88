"""Pytest fixtures for groupeval tests."""

import time
from pathlib import Path
from typing import Callable

import numpy as np
import pandas as pd
import pytest
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.naive_bayes import GaussianNB
from sklearn.tree import DecisionTreeClassifier

from groupeval.data.dataset import Dataset
from groupeval.validation.baselines import ModelSpec


def make_frame(n_groups: int = 4, rows_per_group: int = 10, seed: int = 0) -> pd.DataFrame:
    """Synthetic users: 3 numeric attributes, balanced rest/stress label."""
    rng = np.random.RandomState(seed)
    rows = []
    for g in range(n_groups):
        for i in range(rows_per_group):
            label = "stress" if i % 2 else "rest"
            rows.append({
                "hr_mean": rng.normal(3.0 if label == "stress" else 0.0, 1.0),
                "eda_mean": rng.normal(float(g), 1.0),
                "noise": rng.normal(0.0, 1.0),
                "username": f"u{g}",
                "sampleClass": label,
            })
    return pd.DataFrame(rows)


class ExplodingClassifier(ClassifierMixin, BaseEstimator):
    def fit(self, X, y):
        raise RuntimeError("boom")

    def predict(self, X):
        raise RuntimeError("boom")


class SlowNaiveBayes(GaussianNB):
    def fit(self, X, y, sample_weight=None):
        time.sleep(0.05)
        return super().fit(X, y, sample_weight=sample_weight)


@pytest.fixture
def make_dataset() -> Callable[..., Dataset]:
    def factory(n_groups: int = 4, rows_per_group: int = 10, seed: int = 0) -> Dataset:
        return Dataset(make_frame(n_groups, rows_per_group, seed), "sampleClass", name="synthetic")
    return factory


@pytest.fixture
def dataset(make_dataset) -> Dataset:
    """4 users x 10 rows."""
    return make_dataset()


@pytest.fixture
def nb_spec() -> ModelSpec:
    return ModelSpec("NB", GaussianNB)


@pytest.fixture
def fast_catalog() -> list:
    # deliberately not in name order
    return [
        ModelSpec("NB", GaussianNB),
        ModelSpec("J48", lambda: DecisionTreeClassifier(random_state=0)),
    ]


@pytest.fixture
def exploding_spec() -> ModelSpec:
    return ModelSpec("BOOM", ExplodingClassifier)


@pytest.fixture
def slow_spec() -> ModelSpec:
    return ModelSpec("AAA_SLOW", SlowNaiveBayes)


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    def writer(name: str = "users.csv", n_groups: int = 4, rows_per_group: int = 10,
               seed: int = 0, directory: Path = tmp_path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        make_frame(n_groups, rows_per_group, seed).to_csv(path, index=False)
        return path
    return writer
