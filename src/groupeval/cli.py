"""
groupeval command line
========================
Evaluate classifiers on a dataset file (or a directory of them) without
letting the user column leak into training.

Usage:
    groupeval data/users.arff
    groupeval data/users.arff --all-models --per-group-report
    groupeval data/ --convergence --max-subsets 10
    groupeval data/train.csv --test-file data/test.csv --output reports/run.txt
"""

import argparse
from pathlib import Path

from groupeval.config.options import ExperimentOptions
from groupeval.config.settings import CLASS_ATTRIBUTE, EXPERIMENT, GROUP_ATTRIBUTE
from groupeval.data.loader import describe_dataset, list_dataset_files, load_dataset
from groupeval.errors import ConfigurationError, DatasetLoadError
from groupeval.experiment import run_experiment
from groupeval.utils.io_utils import save_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="groupeval",
        description="Group-aware classifier evaluation",
    )
    parser.add_argument("input", type=Path, help="Dataset file or directory of dataset files")

    modes = parser.add_argument_group("validation")
    modes.add_argument("--random-fold", action="store_true",
                       help="Unstratified random k-fold instead of group-stratified folds")
    modes.add_argument("--personal-only", action="store_true",
                       help="Evaluate inside every group separately (k-fold per group)")
    modes.add_argument("--per-group-report", action="store_true",
                       help="One result block per group (leave-one-group-out)")
    modes.add_argument("--convergence", action="store_true",
                       help="Learning curve over random group subsets of size 2..N")
    modes.add_argument("--predict-group-identity", action="store_true",
                       help="Predict the group instead of the class (leakage baseline)")
    modes.add_argument("--test-file", type=Path, default=None,
                       help="Held-out test dataset (external test-set validation)")

    models = parser.add_argument_group("models")
    models.add_argument("--all-models", action="store_true",
                        help="Evaluate every catalog model, not only the primary RF")
    models.add_argument("--vary-model-params", action="store_true",
                        help="Random Forest parameter sweep instead of the catalog")
    models.add_argument("--feature-selection", action="store_true",
                        help="Wrap each model in backward greedy attribute selection")

    parser.add_argument("--class-attribute", default=CLASS_ATTRIBUTE)
    parser.add_argument("--group-attribute", default=GROUP_ATTRIBUTE)
    parser.add_argument("--folds", type=int, default=EXPERIMENT["n_folds"])
    parser.add_argument("--seed", type=int, default=EXPERIMENT["seed"])
    parser.add_argument("--max-subsets", type=int,
                        default=EXPERIMENT["convergence_max_per_size"],
                        help="Convergence: max random subsets per subset size")
    parser.add_argument("--output", type=Path, default=None, help="Also write the report here")
    parser.add_argument("--describe", action="store_true",
                        help="Print a dataset summary before evaluating")
    parser.add_argument("--quiet", action="store_true", help="No progress output")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = ExperimentOptions(
            random_fold=args.random_fold,
            feature_selection=args.feature_selection,
            all_models=args.all_models,
            vary_model_params=args.vary_model_params,
            personal_only=args.personal_only,
            per_group_report=args.per_group_report,
            convergence=args.convergence,
            predict_group_identity=args.predict_group_identity,
            external_test_file=args.test_file,
            class_attribute=args.class_attribute,
            group_attribute=args.group_attribute,
            n_folds=args.folds,
            seed=args.seed,
            convergence_max_per_size=args.max_subsets,
        )
    except ConfigurationError as e:
        parser.error(str(e))

    verbose = not args.quiet
    try:
        if args.describe:
            files = list_dataset_files(args.input) if args.input.is_dir() else [args.input]
            for file in files:
                describe_dataset(load_dataset(file, options.class_attribute),
                                 options.group_attribute)
        report = run_experiment(args.input, options, verbose=verbose)
    except (ConfigurationError, DatasetLoadError) as e:
        parser.exit(1, f"groupeval: error: {e}\n")

    print(report)
    if args.output:
        save_report(report, args.output)


if __name__ == "__main__":
    main()
