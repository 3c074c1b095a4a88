"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from groupeval.cli import main


def test_prints_report(write_csv, capsys) -> None:
    main([str(write_csv()), "--quiet", "--random-fold", "--folds", "3"])
    out = capsys.readouterr().out

    assert "Evaluating file users.csv (random k-fold)" in out
    assert "+++ TRAINING RF +++" in out


def test_writes_output_file(write_csv, tmp_path: Path, capsys) -> None:
    output = tmp_path / "reports" / "run.txt"
    main([str(write_csv()), "--quiet", "--per-group-report", "--output", str(output)])

    assert output.exists()
    assert output.read_text(encoding="utf-8").count("=== Results of RF / u") == 4


def test_invalid_combination_exits(write_csv) -> None:
    with pytest.raises(SystemExit) as info:
        main([str(write_csv()), "--all-models", "--vary-model-params"])
    assert info.value.code == 2


def test_missing_input_exits(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as info:
        main([str(tmp_path / "missing.csv"), "--quiet"])
    assert info.value.code == 1
    assert "missing.csv" in capsys.readouterr().err
