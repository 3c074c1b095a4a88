"""
groupeval – Central Configuration
===================================
Attribute names, pipeline constants and sampling caps live here so that every
module imports ONE source of truth.
"""

import os

# ──────────────────────────── Dataset Schema ──────────────────────────
CLASS_ATTRIBUTE   = "sampleClass"    # real prediction target
GROUP_ATTRIBUTE   = "username"       # hidden grouping key, never a feature
SUPPORTED_SUFFIXES = (".csv", ".arff")

# ──────────────────────────── Experiment ──────────────────────────────
EXPERIMENT = {
    "n_folds":                  10,
    "seed":                     int(os.environ.get("GROUPEVAL_SEED", "1")),
    # Convergence study: at most this many random group subsets per size
    "convergence_max_per_size": 5,
    "knn_neighbours":           3,
}

# ──────────────────────────── Report ──────────────────────────────────
REPORT_RULE_WIDTH = 60

# ──────────────────────────── Identity Baseline ───────────────────────
# Accuracy of predicting the user, relative to chance (1 / n_users)
IDENTITY = {
    "encoding_ratio_high":     5.0,
    "encoding_ratio_moderate": 2.0,
}
