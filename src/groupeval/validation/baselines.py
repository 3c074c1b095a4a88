"""
Model Catalog
===============
Named classifier descriptors evaluated side by side:

  RF    — Random Forest (primary model)
  J48   — Decision Tree (C4.5-style name; CART in scikit-learn)
  IB3   — 3-nearest-neighbour (instance-based learner, k=3)
  NB    — Gaussian Naive Bayes
  MLP   — Multilayer Perceptron

plus a Random Forest parameter sweep (RF1_default … RF10) and an optional
attribute-selection pre-step wrapped around any model.

Every descriptor carries a FACTORY, so each fold trains a fresh instance.
"""

from dataclasses import dataclass
from typing import Any, Callable, List

from sklearn.ensemble import RandomForestClassifier
from sklearn.feature_selection import SequentialFeatureSelector
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import KNeighborsClassifier
from sklearn.neural_network import MLPClassifier
from sklearn.pipeline import Pipeline
from sklearn.tree import DecisionTreeClassifier

from groupeval.config.settings import EXPERIMENT
from groupeval.errors import ConfigurationError

PRIMARY_MODEL = "RF"


@dataclass(frozen=True)
class ModelSpec:
    name: str
    factory: Callable[[], Any]


def _random_forest(seed: int, n_estimators: int, max_features, max_depth):
    def factory():
        return RandomForestClassifier(
            n_estimators=n_estimators,
            max_features=max_features,
            max_depth=max_depth,
            random_state=seed,
            n_jobs=1,
        )
    return factory


def default_models(seed: int = EXPERIMENT["seed"]) -> List[ModelSpec]:
    """The fixed catalog: one model per classifier family."""
    return [
        ModelSpec("RF", _random_forest(seed, n_estimators=50, max_features="sqrt", max_depth=25)),
        ModelSpec("J48", lambda: DecisionTreeClassifier(random_state=seed)),
        ModelSpec("IB3", lambda: KNeighborsClassifier(n_neighbors=EXPERIMENT["knn_neighbours"])),
        ModelSpec("NB", GaussianNB),
        ModelSpec("MLP", lambda: MLPClassifier(
            hidden_layer_sizes=(64, 32),
            activation="relu",
            max_iter=500,
            random_state=seed,
        )),
    ]


def random_forest_grid(seed: int = EXPERIMENT["seed"]) -> List[ModelSpec]:
    """
    Random Forest parameter sweep.

    max_features=None considers every attribute at every split,
    "log2" samples about log2(M) attributes per split,
    max_depth=None grows trees without limit.
    """
    grid = [
        ("RF1_default", 50, "sqrt", 25),
        ("RF2", 200, None, None),    # give it time, no limits
        ("RF3", 200, None, 50),      # like RF2 but depth-limited against overfitting
        ("RF4", 100, "log2", 50),
        ("RF5", 200, None, 50),
        ("RF6", 150, "log2", 50),
        ("RF7", 100, "log2", 75),
        ("RF8", 75, "log2", 50),
        ("RF9", 100, "log2", 30),
        ("RF10", 75, None, 50),
    ]
    return [
        ModelSpec(name, _random_forest(seed, n_estimators, max_features, max_depth))
        for name, n_estimators, max_features, max_depth in grid
    ]


def with_feature_selection(spec: ModelSpec) -> ModelSpec:
    """
    Prefix the model with backward greedy attribute selection.

    Attributes are removed one at a time while a naive Bayes evaluator's
    cross-validated accuracy does not drop.
    """
    inner = spec.factory

    def factory():
        return Pipeline([
            ("select", SequentialFeatureSelector(
                GaussianNB(),
                direction="backward",
                n_features_to_select="auto",
                tol=0.0,
                cv=3,
            )),
            ("model", inner()),
        ])

    return ModelSpec(spec.name, factory)


def check_unique_names(catalog: List[ModelSpec]):
    seen = set()
    for spec in catalog:
        if spec.name in seen:
            raise ConfigurationError(f"Duplicate model description '{spec.name}' in catalog")
        seen.add(spec.name)


def build_catalog(options) -> List[ModelSpec]:
    """
    Model catalog selected by ``ExperimentOptions``.

    primary RF only by default; every family with ``all_models``; the RF
    sweep with ``vary_model_params``; each wrapped in attribute selection
    with ``feature_selection``.
    """
    if options.vary_model_params:
        catalog = random_forest_grid(options.seed)
    elif options.all_models:
        catalog = default_models(options.seed)
    else:
        catalog = [s for s in default_models(options.seed) if s.name == PRIMARY_MODEL]

    if options.feature_selection:
        catalog = [with_feature_selection(s) for s in catalog]

    check_unique_names(catalog)
    return catalog
