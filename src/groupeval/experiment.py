"""
Experiment Orchestrator
=========================
Fans out one worker per model (and, for a directory, one per dataset file),
waits for ALL of them, then renders the results sorted by name.

  - Flat, uncapped fan-out: one thread per model, no pool limit
  - Every worker evaluates its own private copy of the dataset
  - The only shared structure is the results dict; inserts are serialised by
    a lock and every worker owns a unique key
  - A ModelTrainingError is confined to its worker: that model's block is
    replaced by an error line, its siblings are still reported
  - Any other error is fatal and re-raised once every worker has finished

Usage:
    from groupeval.config.options import ExperimentOptions
    from groupeval.experiment import run_experiment
    report = run_experiment(Path("data/users.arff"), ExperimentOptions(all_models=True))
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Union

from groupeval.config.options import ExperimentOptions
from groupeval.data.dataset import Dataset
from groupeval.data.loader import list_dataset_files, load_dataset
from groupeval.errors import DatasetLoadError, ModelTrainingError
from groupeval.validation.baselines import ModelSpec, build_catalog, check_unique_names
from groupeval.validation.engine import evaluate
from groupeval.validation.modes import ExternalTestSet, ValidationMode, mode_from_options
from groupeval.validation.report_generator import (
    render_experiment_report, render_failure, render_file_report, render_model_report,
)


def _run_all(tasks: List, worker, name: str) -> None:
    """Run ``worker(task)`` for every task concurrently; block until all end."""
    if not tasks:
        return
    with ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix=name) as pool:
        futures = [pool.submit(worker, task) for task in tasks]
    # Leaving the with-block joined every worker; surface the first fatal error
    for future in futures:
        future.result()


def evaluate_dataset(
    dataset: Dataset,
    mode: ValidationMode,
    catalog: List[ModelSpec],
    options: ExperimentOptions,
    test_dataset: Optional[Dataset] = None,
    verbose: bool = False,
) -> str:
    """Evaluate every model of ``catalog`` on ``dataset``; return the file report."""
    check_unique_names(catalog)
    results_by_model: Dict[str, str] = {}
    lock = threading.Lock()

    def worker(spec: ModelSpec):
        own = dataset.copy()
        try:
            outcome = evaluate(mode, own, spec,
                               group_attribute=options.group_attribute,
                               test_dataset=test_dataset,
                               verbose=verbose)
            text = render_model_report(spec.name, outcome)
        except ModelTrainingError as e:
            if verbose:
                print(f"  [ERROR] {e}")
            text = render_failure(spec.name, e)
        with lock:
            results_by_model[spec.name] = text

    if verbose:
        print("\n" + "=" * 60)
        print(f"  Now evaluating {dataset.name}: {mode.label}, {len(catalog)} model(s)")
        print("=" * 60)

    _run_all(catalog, worker, name="model")
    return render_file_report(dataset.name, mode.label, results_by_model)


def evaluate_file(
    path: Union[str, Path],
    options: ExperimentOptions,
    catalog: Optional[List[ModelSpec]] = None,
    verbose: bool = False,
) -> str:
    """Load one dataset file (and the external test set) and evaluate it."""
    mode = mode_from_options(options)
    catalog = build_catalog(options) if catalog is None else catalog

    dataset = load_dataset(path, options.class_attribute, seed=options.seed)
    test_dataset = None
    if isinstance(mode, ExternalTestSet):
        test_dataset = load_dataset(mode.test_path, options.class_attribute)

    return evaluate_dataset(dataset, mode, catalog, options,
                            test_dataset=test_dataset, verbose=verbose)


def run_experiment(
    path: Union[str, Path],
    options: ExperimentOptions,
    catalog: Optional[List[ModelSpec]] = None,
    verbose: bool = False,
) -> str:
    """
    Evaluate a dataset file, or every dataset file of a directory.

    Directory files are processed concurrently, one task per file, and the
    file reports are concatenated in file-name order.
    """
    path = Path(path)
    if not path.is_dir():
        return evaluate_file(path, options, catalog, verbose)

    files = list_dataset_files(path)
    if not files:
        raise DatasetLoadError(path, "directory contains no dataset files")

    reports_by_file: Dict[str, str] = {}
    lock = threading.Lock()

    def worker(file: Path):
        report = evaluate_file(file, options, catalog, verbose)
        with lock:
            reports_by_file[file.name] = report

    _run_all(files, worker, name="file")
    return render_experiment_report(reports_by_file)
