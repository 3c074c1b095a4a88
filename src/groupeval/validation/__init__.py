"""
groupeval — Validation Module
================================
  - Binomial bound + distinct random group subsets (convergence sampling)
  - Group fingerprints (rejoin users after the user column is dropped)
  - Group-filtered dataset views (keep only / exclude)
  - Validation modes (k-fold, group-stratified, LOGO, per-group, external
    test set, identity baseline, convergence study)
  - Text report generation
"""
