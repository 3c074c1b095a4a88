"""
Experiment Options
====================
The configuration surface of one experiment. Contradictory combinations
are rejected at construction time, before anything is loaded or trained.

  random_fold             unstratified random k-fold instead of user-stratified
  feature_selection       wrap each model in an attribute-selection pre-step
  all_models              every catalog model instead of only the primary one
  vary_model_params       Random Forest parameter sweep instead of the catalog
  personal_only           per-user evaluation only (k-fold inside each user)
  per_group_report        one result block per user
  convergence             learning curve over random user subsets
  predict_group_identity  predict the user instead of the class (baseline)
  external_test_file      held-out test dataset
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from groupeval.config.settings import CLASS_ATTRIBUTE, EXPERIMENT, GROUP_ATTRIBUTE
from groupeval.errors import ConfigurationError


@dataclass(frozen=True)
class ExperimentOptions:
    random_fold: bool = False
    feature_selection: bool = False
    all_models: bool = False
    vary_model_params: bool = False
    personal_only: bool = False
    per_group_report: bool = False
    convergence: bool = False
    predict_group_identity: bool = False
    external_test_file: Optional[Path] = None

    class_attribute: str = CLASS_ATTRIBUTE
    group_attribute: str = GROUP_ATTRIBUTE
    n_folds: int = EXPERIMENT["n_folds"]
    seed: int = EXPERIMENT["seed"]
    convergence_max_per_size: int = EXPERIMENT["convergence_max_per_size"]

    def __post_init__(self):
        problems = self.problems()
        if problems:
            raise ConfigurationError("Invalid options: " + "; ".join(problems))

    def problems(self) -> List[str]:
        """Every violated constraint, as human-readable messages."""
        found = []
        if self.all_models and self.vary_model_params:
            found.append("all_models and vary_model_params are mutually exclusive")

        if self.predict_group_identity:
            if self.personal_only:
                found.append("predict_group_identity is meaningless with personal_only "
                             "(the group is constant inside one group)")
            if self.per_group_report:
                found.append("predict_group_identity cannot report per group")

        if self.external_test_file is not None:
            for flag in ("convergence", "personal_only", "per_group_report",
                         "predict_group_identity", "random_fold"):
                if getattr(self, flag):
                    found.append(f"external_test_file cannot be combined with {flag}")

        if self.convergence and self.per_group_report:
            found.append("convergence averages over groups and cannot report per group")
        if self.random_fold and self.per_group_report and not self.personal_only:
            found.append("random_fold contradicts per_group_report (leave-one-group-out)")

        if self.class_attribute == self.group_attribute:
            found.append("class_attribute and group_attribute must differ")
        if self.n_folds < 2:
            found.append(f"n_folds must be >= 2, got {self.n_folds}")
        if self.convergence_max_per_size < 1:
            found.append(
                f"convergence_max_per_size must be >= 1, got {self.convergence_max_per_size}"
            )
        return found
