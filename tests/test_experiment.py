"""Tests for the experiment orchestrator."""

from pathlib import Path

import pytest

from groupeval.config.options import ExperimentOptions
from groupeval.errors import ConfigurationError, DatasetLoadError
from groupeval.experiment import evaluate_dataset, evaluate_file, run_experiment
from groupeval.validation.baselines import ModelSpec
from groupeval.validation.modes import RandomKFold


class TestEvaluateFile:
    def test_identical_runs_give_identical_reports(self, write_csv, fast_catalog) -> None:
        path = write_csv()
        options = ExperimentOptions(random_fold=True, seed=11)

        first = run_experiment(path, options, catalog=fast_catalog)
        second = run_experiment(path, options, catalog=fast_catalog)
        assert first == second

    def test_header_and_name_sorted_blocks(self, write_csv, fast_catalog) -> None:
        report = evaluate_file(write_csv(), ExperimentOptions(), catalog=fast_catalog)

        assert "Evaluating file users.csv (group-stratified k-fold)" in report
        assert report.index("+++ TRAINING J48 +++") < report.index("+++ TRAINING NB +++")
        assert "=== Confusion Matrix of NB ===" in report

    def test_sorted_regardless_of_completion_order(self, write_csv, slow_spec, fast_catalog) -> None:
        report = evaluate_file(write_csv(), ExperimentOptions(random_fold=True),
                               catalog=fast_catalog + [slow_spec])
        positions = [report.index(f"+++ TRAINING {n} +++") for n in ("AAA_SLOW", "J48", "NB")]
        assert positions == sorted(positions)

    def test_leave_one_group_out_report(self, write_csv, fast_catalog) -> None:
        report = evaluate_file(write_csv(), ExperimentOptions(per_group_report=True),
                               catalog=fast_catalog[:1])

        assert report.count("=== Results of NB / u") == 4
        assert report.count("Training instances: 30") == 4
        assert report.count("Test instances: 10") == 4

    def test_convergence_report(self, write_csv, fast_catalog) -> None:
        report = evaluate_file(write_csv(), ExperimentOptions(convergence=True),
                               catalog=fast_catalog[:1])

        lines = report.splitlines()
        start = lines.index("subsetSize,avgAccuracy")
        sizes = [int(line.split(",")[0]) for line in lines[start + 1:start + 4]]
        assert sizes == [2, 3, 4]

    def test_external_test_file(self, write_csv, fast_catalog, tmp_path) -> None:
        test_path = write_csv("holdout.csv", n_groups=2, seed=9)
        options = ExperimentOptions(external_test_file=test_path)
        report = evaluate_file(write_csv(), options, catalog=fast_catalog)

        assert "Test set: holdout.csv" in report


class TestFailureIsolation:
    def test_failed_model_reported_siblings_kept(self, write_csv, fast_catalog, exploding_spec) -> None:
        report = evaluate_file(write_csv(), ExperimentOptions(random_fold=True),
                               catalog=fast_catalog + [exploding_spec])

        assert "!!! BOOM failed: RuntimeError: boom" in report
        assert "=== Results of NB ===" in report
        assert "=== Results of J48 ===" in report

    def test_model_that_cannot_be_built_reported(self, write_csv, fast_catalog) -> None:
        def cannot_build():
            raise RuntimeError("cannot build")

        report = evaluate_file(write_csv(), ExperimentOptions(random_fold=True),
                               catalog=fast_catalog + [ModelSpec("BAD", cannot_build)])

        assert "!!! BAD failed: RuntimeError: cannot build" in report
        assert "=== Results of NB ===" in report
        assert "=== Results of J48 ===" in report

    def test_configuration_errors_are_fatal(self, write_csv, fast_catalog) -> None:
        options = ExperimentOptions(group_attribute="nobody")
        with pytest.raises(ConfigurationError):
            evaluate_file(write_csv(), options, catalog=fast_catalog)

    def test_duplicate_model_names_rejected(self, dataset, fast_catalog) -> None:
        with pytest.raises(ConfigurationError):
            evaluate_dataset(dataset, RandomKFold(), fast_catalog + fast_catalog[:1],
                             ExperimentOptions())

    def test_workers_do_not_share_dataset(self, dataset, fast_catalog) -> None:
        before = dataset.frame.copy()
        evaluate_dataset(dataset, RandomKFold(), fast_catalog, ExperimentOptions())
        assert dataset.frame.equals(before)
        assert "username" in dataset.attributes


class TestDirectory:
    def test_one_report_per_file_in_name_order(self, write_csv, fast_catalog, tmp_path) -> None:
        data_dir = tmp_path / "data"
        write_csv("b_users.csv", seed=2, directory=data_dir)
        write_csv("a_users.csv", seed=1, directory=data_dir)
        (data_dir / "notes.txt").write_text("ignored")

        report = run_experiment(data_dir, ExperimentOptions(random_fold=True), catalog=fast_catalog)

        assert report.count("Evaluating file") == 2
        assert report.index("Evaluating file a_users.csv") < report.index("Evaluating file b_users.csv")

    def test_empty_directory(self, tmp_path: Path) -> None:
        with pytest.raises(DatasetLoadError):
            run_experiment(tmp_path, ExperimentOptions())

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DatasetLoadError) as info:
            run_experiment(tmp_path / "nope.csv", ExperimentOptions())
        assert info.value.path == tmp_path / "nope.csv"
