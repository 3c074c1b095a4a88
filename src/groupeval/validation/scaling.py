"""
In-Fold Feature Preprocessing
===============================
Column transforms applied INSIDE every train/test split: fitted on the
training rows only, then applied to the held-out rows.

  numeric attributes     → median imputation + RobustScaler
  categorical attributes → one-hot (categories unseen in training ignored)
"""

from typing import Callable

import pandas as pd
from pandas.api.types import is_numeric_dtype
from sklearn.compose import ColumnTransformer
from sklearn.impute import SimpleImputer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, RobustScaler


def get_scaler_factory(features: pd.DataFrame) -> Callable[[], ColumnTransformer]:
    """
    Return a factory producing a fresh, unfitted column transformer for the
    schema of ``features``.
    """
    numeric_cols = [c for c in features.columns if is_numeric_dtype(features[c])]
    categorical_cols = [c for c in features.columns if c not in numeric_cols]

    def factory():
        transformers = []
        if numeric_cols:
            transformers.append((
                "numeric",
                Pipeline([("impute", SimpleImputer(strategy="median")),
                          ("scale", RobustScaler())]),
                numeric_cols,
            ))
        if categorical_cols:
            transformers.append((
                "categorical",
                OneHotEncoder(handle_unknown="ignore", sparse_output=False),
                categorical_cols,
            ))
        return ColumnTransformer(transformers, remainder="drop")

    return factory


def build_model_pipeline(model, features: pd.DataFrame) -> Pipeline:
    """Preprocessing for ``features`` followed by ``model``, unfitted."""
    return Pipeline([
        ("prep", get_scaler_factory(features)()),
        ("model", model),
    ])
