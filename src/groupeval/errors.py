"""
Error Kinds
=============
  ConfigurationError      invalid/contradictory options, empty group universe
  FingerprintLookupError  a row's fingerprint is missing from the map (fatal)
  DatasetLoadError        unreadable or malformed input file (fatal)
  ModelTrainingError      classifier failure, fatal for ONE model only

Nothing is retried: every operation is deterministic given a seed.
"""

from pathlib import Path
from typing import Union


class GroupEvalError(Exception):
    """Base class for all groupeval errors."""


class ConfigurationError(GroupEvalError, ValueError):
    pass


class FingerprintLookupError(GroupEvalError, LookupError):
    pass


class DatasetLoadError(GroupEvalError):
    """Input file could not be loaded; carries the offending path."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot load dataset {self.path}: {reason}")


class ModelTrainingError(GroupEvalError):
    """A classifier raised while being built, fitted or used to predict."""

    def __init__(self, model_name: str, cause: BaseException):
        self.model_name = model_name
        self.cause = cause
        super().__init__(f"{model_name}: {type(cause).__name__}: {cause}")
