"""
Validation Modes
==================
Immutable configuration values, one class per evaluation strategy. The
engine dispatches on the mode's type; a mode is never mutated after
construction.

  RandomKFold            shuffled k-fold, user column dropped
  GroupStratifiedKFold   fold = position of the row's user in the universe
  LeaveOneGroupOut       train on all other users, test on one user
  PerGroupKFold          k-fold inside every single user, pooled
  ExternalTestSet        train on the full dataset, test on a separate file
  IdentityPrediction     predict the USER instead of the class (leakage probe)
  ConvergenceStudy       any of the above on random user subsets of size 2..N
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from groupeval.config.settings import EXPERIMENT
from groupeval.errors import ConfigurationError


@dataclass(frozen=True)
class RandomKFold:
    n_folds: int = EXPERIMENT["n_folds"]
    seed: int = EXPERIMENT["seed"]
    label = "random k-fold"


@dataclass(frozen=True)
class GroupStratifiedKFold:
    n_folds: int = EXPERIMENT["n_folds"]
    label = "group-stratified k-fold"


@dataclass(frozen=True)
class LeaveOneGroupOut:
    label = "leave-one-group-out"


@dataclass(frozen=True)
class PerGroupKFold:
    n_folds: int = EXPERIMENT["n_folds"]
    seed: int = EXPERIMENT["seed"]
    per_group_report: bool = False
    label = "per-group k-fold"


@dataclass(frozen=True)
class ExternalTestSet:
    test_path: Path
    label = "external test set"


@dataclass(frozen=True)
class IdentityPrediction:
    n_folds: int = EXPERIMENT["n_folds"]
    seed: int = EXPERIMENT["seed"]
    label = "group identity baseline"


GroupAwareMode = Union[RandomKFold, GroupStratifiedKFold, LeaveOneGroupOut,
                       PerGroupKFold, IdentityPrediction]


@dataclass(frozen=True)
class ConvergenceStudy:
    inner: GroupAwareMode
    max_per_size: int = EXPERIMENT["convergence_max_per_size"]
    seed: int = EXPERIMENT["seed"]

    def __post_init__(self):
        if isinstance(self.inner, (ExternalTestSet, ConvergenceStudy)):
            raise ConfigurationError(
                f"Convergence study cannot wrap {type(self.inner).__name__}"
            )
        if self.max_per_size < 1:
            raise ConfigurationError(f"max_per_size must be >= 1, got {self.max_per_size}")

    @property
    def label(self) -> str:
        return f"convergence ({self.inner.label})"


ValidationMode = Union[GroupAwareMode, ExternalTestSet, ConvergenceStudy]


def mode_from_options(options) -> ValidationMode:
    """Translate validated ``ExperimentOptions`` into a validation mode."""
    if options.predict_group_identity:
        mode = IdentityPrediction(n_folds=options.n_folds, seed=options.seed)
    elif options.external_test_file is not None:
        return ExternalTestSet(test_path=Path(options.external_test_file))
    elif options.personal_only:
        mode = PerGroupKFold(n_folds=options.n_folds, seed=options.seed,
                             per_group_report=options.per_group_report)
    elif options.per_group_report:
        mode = LeaveOneGroupOut()
    elif options.random_fold:
        mode = RandomKFold(n_folds=options.n_folds, seed=options.seed)
    else:
        mode = GroupStratifiedKFold(n_folds=options.n_folds)

    if options.convergence:
        return ConvergenceStudy(inner=mode,
                                max_per_size=options.convergence_max_per_size,
                                seed=options.seed)
    return mode
