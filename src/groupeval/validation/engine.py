"""
Validation Mode Engine
========================
Runs one model under one validation mode and returns the evaluation(s).

Order of operations is fixed for every mode:
  1. Enumerate the group universe and build the fingerprint map on the FULL
     dataset, while the user column still exists.
  2. Drop the user column (or, for the identity baseline, make it the class),
     so the model never sees it as a feature.
  3. Split through the fingerprint map, fit on the training rows only,
     predict the held-out rows, accumulate into an Evaluation.

Classifier failures are wrapped in ModelTrainingError; configuration
problems (no groups, too few rows) raise ConfigurationError.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
from sklearn.model_selection import KFold, PredefinedSplit

from groupeval.config.settings import GROUP_ATTRIBUTE, IDENTITY
from groupeval.data.dataset import Dataset
from groupeval.errors import ConfigurationError, ModelTrainingError
from groupeval.validation.baselines import ModelSpec
from groupeval.validation.evaluation import Evaluation
from groupeval.validation.fingerprint import FingerprintMap, build_fingerprint_map
from groupeval.validation.modes import (
    ConvergenceStudy, ExternalTestSet, GroupStratifiedKFold, IdentityPrediction,
    LeaveOneGroupOut, PerGroupKFold, RandomKFold, ValidationMode,
)
from groupeval.validation.partition import (
    drop_attribute, exclude_one, extract_groups, keep_only, keep_only_one, retarget,
)
from groupeval.validation.sampling import generate_group_subsets
from groupeval.validation.scaling import build_model_pipeline


# ─────────────────────── Results ───────────────────────

@dataclass
class ResultBlock:
    title: str
    evaluation: Evaluation
    notes: List[str] = field(default_factory=list)


@dataclass
class CurvePoint:
    n_groups: int
    mean_accuracy: float
    n_subsets: int


@dataclass
class ValidationOutcome:
    mode: str
    blocks: List[ResultBlock] = field(default_factory=list)
    curve: Optional[List[CurvePoint]] = None

    @property
    def accuracy(self) -> float:
        """Accuracy pooled over every block."""
        pooled = Evaluation()
        for block in self.blocks:
            pooled.merge(block.evaluation)
        return pooled.accuracy


@dataclass
class GroupContext:
    """Everything a mode needs: the full dataset plus its group bookkeeping."""
    dataset: Dataset
    group_attribute: str
    fingerprints: FingerprintMap
    groups: List[str]
    test_dataset: Optional[Dataset] = None

    def restricted_to(self, subset: List[str]) -> "GroupContext":
        members = set(subset)
        return GroupContext(
            dataset=keep_only(self.dataset, self.fingerprints, members),
            group_attribute=self.group_attribute,
            fingerprints=self.fingerprints,
            groups=[g for g in self.groups if g in members],
            test_dataset=self.test_dataset,
        )


def prepare_context(
    dataset: Dataset,
    group_attribute: str = GROUP_ATTRIBUTE,
    test_dataset: Optional[Dataset] = None,
    verbose: bool = False,
) -> GroupContext:
    groups = extract_groups(dataset, group_attribute)
    fmap = build_fingerprint_map(dataset, group_attribute, verbose=verbose)
    return GroupContext(dataset, group_attribute, fmap, groups, test_dataset)


# ─────────────────────── Shared helpers ───────────────────────

def _fit_predict(spec: ModelSpec, train: Dataset, test: Dataset):
    """Fit a fresh model on ``train``; return (true, predicted) labels of ``test``."""
    features = train.features()
    try:
        pipeline = build_model_pipeline(spec.factory(), features)
        pipeline.fit(features, train.labels())
        y_pred = pipeline.predict(test.features())
    except Exception as e:
        raise ModelTrainingError(spec.name, e) from e
    return test.labels(), y_pred


def _kfold(n_rows: int, n_folds: int, seed: int) -> KFold:
    if n_rows < 2:
        raise ConfigurationError(f"k-fold cross-validation needs >= 2 rows, got {n_rows}")
    return KFold(n_splits=min(n_folds, n_rows), shuffle=True, random_state=seed)


def _cross_validate(spec: ModelSpec, dataset: Dataset, splitter,
                    evaluation: Evaluation) -> Evaluation:
    positions = np.arange(len(dataset))
    for train_idx, test_idx in splitter.split(positions):
        train, test = dataset.take(train_idx), dataset.take(test_idx)
        y_true, y_pred = _fit_predict(spec, train, test)
        evaluation.record(y_true, y_pred, n_train=len(train))
    return evaluation


def _require_groups(ctx: GroupContext, mode, minimum: int = 1):
    if len(ctx.groups) < minimum:
        raise ConfigurationError(
            f"{mode.label} needs at least {minimum} group(s) in "
            f"'{ctx.group_attribute}', found {len(ctx.groups)}"
        )


def _log_block(verbose: bool, spec: ModelSpec, what: str, evaluation: Evaluation):
    if verbose:
        print(f"  [{spec.name}] {what:<20s} acc={evaluation.accuracy:.3f}  "
              f"(train={sum(evaluation.train_sizes)}, test={evaluation.n_instances})")


# ─────────────────────── Modes ───────────────────────

def _random_kfold(mode: RandomKFold, ctx: GroupContext, spec: ModelSpec, verbose: bool):
    data = drop_attribute(ctx.dataset, ctx.group_attribute)
    evaluation = _cross_validate(spec, data, _kfold(len(data), mode.n_folds, mode.seed),
                                 Evaluation())
    _log_block(verbose, spec, mode.label, evaluation)
    return ValidationOutcome(mode.label, [ResultBlock(spec.name, evaluation)])


def _group_stratified_kfold(mode: GroupStratifiedKFold, ctx: GroupContext,
                            spec: ModelSpec, verbose: bool):
    _require_groups(ctx, mode, minimum=2)
    position = {g: i for i, g in enumerate(ctx.groups)}
    resolved = ctx.fingerprints.resolve_frame(ctx.dataset.frame)
    # All rows of one group share a fold; folds with no group are skipped
    test_fold = np.array([position[g] % mode.n_folds for g in resolved])

    data = drop_attribute(ctx.dataset, ctx.group_attribute)
    evaluation = _cross_validate(spec, data, PredefinedSplit(test_fold), Evaluation())
    _log_block(verbose, spec, mode.label, evaluation)
    return ValidationOutcome(
        mode.label,
        [ResultBlock(spec.name, evaluation,
                     notes=[f"Groups: {len(ctx.groups)} in "
                            f"{min(mode.n_folds, len(ctx.groups))} folds"])],
    )


def _leave_one_group_out(mode: LeaveOneGroupOut, ctx: GroupContext,
                         spec: ModelSpec, verbose: bool):
    _require_groups(ctx, mode, minimum=2)
    data = drop_attribute(ctx.dataset, ctx.group_attribute)

    blocks = []
    for group in ctx.groups:
        train = exclude_one(data, ctx.fingerprints, group)
        test = keep_only_one(data, ctx.fingerprints, group)
        evaluation = Evaluation()
        y_true, y_pred = _fit_predict(spec, train, test)
        evaluation.record(y_true, y_pred, n_train=len(train))
        _log_block(verbose, spec, group, evaluation)
        blocks.append(ResultBlock(
            f"{spec.name} / {group}", evaluation,
            notes=[f"Training instances: {len(train)}", f"Test instances: {len(test)}"],
        ))
    return ValidationOutcome(mode.label, blocks)


def _per_group_kfold(mode: PerGroupKFold, ctx: GroupContext, spec: ModelSpec, verbose: bool):
    _require_groups(ctx, mode)
    data = drop_attribute(ctx.dataset, ctx.group_attribute)

    pooled = Evaluation()
    blocks = []
    for group in ctx.groups:
        own = keep_only_one(data, ctx.fingerprints, group)
        target = Evaluation() if mode.per_group_report else pooled
        before = target.n_instances
        _cross_validate(spec, own, _kfold(len(own), mode.n_folds, mode.seed), target)
        if verbose:
            print(f"  [{spec.name}] {group:<20s} {target.n_instances - before} rows evaluated")
        if mode.per_group_report:
            blocks.append(ResultBlock(f"{spec.name} / {group}", target,
                                      notes=[f"Group instances: {len(own)}"]))

    if not mode.per_group_report:
        blocks = [ResultBlock(spec.name, pooled, notes=[f"Groups: {len(ctx.groups)}"])]
    return ValidationOutcome(mode.label, blocks)


def _external_test_set(mode: ExternalTestSet, ctx: GroupContext,
                       spec: ModelSpec, verbose: bool):
    if ctx.test_dataset is None:
        raise ConfigurationError(f"No test dataset loaded for {mode.test_path}")
    train = drop_attribute(ctx.dataset, ctx.group_attribute)
    test = ctx.test_dataset.copy()
    if test.has_attribute(ctx.group_attribute):
        test.remove_attribute(ctx.group_attribute)

    evaluation = Evaluation()
    y_true, y_pred = _fit_predict(spec, train, test)
    evaluation.record(y_true, y_pred, n_train=len(train))
    _log_block(verbose, spec, mode.label, evaluation)
    return ValidationOutcome(mode.label, [ResultBlock(
        spec.name, evaluation, notes=[f"Test set: {test.name}"],
    )])


def _identity_verdict(ratio: float) -> str:
    if ratio > IDENTITY["encoding_ratio_high"]:
        return "HIGH_GROUP_ENCODING"
    if ratio > IDENTITY["encoding_ratio_moderate"]:
        return "MODERATE_GROUP_ENCODING"
    return "LOW_GROUP_ENCODING"


def _identity_prediction(mode: IdentityPrediction, ctx: GroupContext,
                         spec: ModelSpec, verbose: bool):
    """
    Predict the group from the features. Accuracy far above chance
    (1 / n_groups) means the features identify users.
    """
    _require_groups(ctx, mode, minimum=2)
    data = retarget(ctx.dataset, ctx.group_attribute)
    data.remove_attribute(ctx.dataset.class_attribute)

    evaluation = _cross_validate(spec, data, _kfold(len(data), mode.n_folds, mode.seed),
                                 Evaluation())
    chance = 1.0 / len(ctx.groups)
    ratio = evaluation.accuracy / chance
    _log_block(verbose, spec, mode.label, evaluation)
    return ValidationOutcome(mode.label, [ResultBlock(
        spec.name, evaluation,
        notes=[f"Chance level: {chance:.4f}",
               f"Encoding ratio: {ratio:.2f}x chance ({_identity_verdict(ratio)})"],
    )])


def _convergence_study(mode: ConvergenceStudy, ctx: GroupContext,
                       spec: ModelSpec, verbose: bool):
    """
    Accuracy of the inner mode on random group subsets of size 2..N,
    averaged per size. The number of subsets per size is bounded by
    C(N, size), so the size-N point is the single full-dataset run.
    """
    _require_groups(ctx, mode, minimum=2)
    rng = np.random.RandomState(mode.seed)
    handler = _handler_for(mode.inner)

    accuracies: Dict[int, List[float]] = {}
    for size, subset in generate_group_subsets(ctx.groups, mode.max_per_size, rng):
        outcome = handler(mode.inner, ctx.restricted_to(subset), spec, False)
        accuracies.setdefault(size, []).append(outcome.accuracy)

    curve = [
        CurvePoint(size, float(np.mean(accs)), len(accs))
        for size, accs in sorted(accuracies.items())
    ]
    if verbose:
        for point in curve:
            print(f"  [{spec.name}] k={point.n_groups:2d} groups: "
                  f"acc={point.mean_accuracy:.3f}  ({point.n_subsets} subsets)")
    return ValidationOutcome(mode.label, blocks=[], curve=curve)


_HANDLERS = {
    RandomKFold: _random_kfold,
    GroupStratifiedKFold: _group_stratified_kfold,
    LeaveOneGroupOut: _leave_one_group_out,
    PerGroupKFold: _per_group_kfold,
    ExternalTestSet: _external_test_set,
    IdentityPrediction: _identity_prediction,
    ConvergenceStudy: _convergence_study,
}


def _handler_for(mode):
    try:
        return _HANDLERS[type(mode)]
    except KeyError:
        raise ConfigurationError(f"Unknown validation mode: {mode!r}") from None


# ─────────────────────── Entry point ───────────────────────

def evaluate(
    mode: ValidationMode,
    dataset: Dataset,
    spec: ModelSpec,
    group_attribute: str = GROUP_ATTRIBUTE,
    test_dataset: Optional[Dataset] = None,
    verbose: bool = False,
) -> ValidationOutcome:
    """
    Evaluate one model on ``dataset`` under ``mode``.

    Args:
        mode: validation mode value
        dataset: full dataset, group attribute still present (not modified)
        spec: model descriptor; its factory is called once per fit
        group_attribute: name of the hidden grouping column
        test_dataset: held-out data, required for ExternalTestSet
        verbose: print per-group / per-size progress

    Returns:
        ValidationOutcome with result blocks (or a curve for convergence)
    """
    handler = _handler_for(mode)
    ctx = prepare_context(dataset, group_attribute, test_dataset, verbose=verbose)
    return handler(mode, ctx, spec, verbose)
