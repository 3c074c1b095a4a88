"""
groupeval — Group-Aware Classifier Evaluation
================================================
Evaluate classifiers on tabular datasets that carry a hidden grouping key
("user") next to the real prediction target:

  - Strip the grouping attribute before training (no identity leakage)
  - Rejoin group membership through numeric row fingerprints
  - Group-aware cross-validation (leave-one-group-out, per-group k-fold, ...)
  - Learning curves over random group subsets (convergence study)
  - Concurrent per-model evaluation with a deterministic text report
"""

__version__ = "0.1.0"
