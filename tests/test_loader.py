"""Tests for dataset loading."""

from pathlib import Path

import pytest

from groupeval.data.loader import describe_dataset, list_dataset_files, load_dataset
from groupeval.errors import DatasetLoadError

ARFF = """@relation users

@attribute hr_mean numeric
@attribute eda_mean numeric
@attribute username {alice,bob}
@attribute sampleClass {rest,stress}

@data
0.1,1.5,alice,rest
2.9,1.7,alice,stress
0.3,4.1,bob,rest
3.2,3.9,bob,stress
"""

STRING_ARFF = """@relation users

@attribute hr_mean numeric
@attribute eda_mean numeric
@attribute username string
@attribute sampleClass {rest,stress}

@data
0.1,1.5,alice,rest
2.9,1.7,alice,stress
% second user
0.3,4.1,bob,rest
3.2,3.9,bob,stress
"""


class TestLoadDataset:
    def test_csv(self, write_csv) -> None:
        dataset = load_dataset(write_csv())

        assert len(dataset) == 40
        assert dataset.class_attribute == "sampleClass"
        assert dataset.name == "users.csv"
        assert dataset.numeric_attributes == ["hr_mean", "eda_mean", "noise"]

    def test_seeded_shuffle_is_reproducible(self, write_csv) -> None:
        path = write_csv()
        first = load_dataset(path, seed=4)
        second = load_dataset(path, seed=4)
        plain = load_dataset(path)

        assert first.frame.equals(second.frame)
        assert sorted(first.frame["hr_mean"]) == sorted(plain.frame["hr_mean"])
        assert list(first.frame.index) == list(range(40))

    def test_arff_nominal_values_decoded(self, tmp_path: Path) -> None:
        path = tmp_path / "users.arff"
        path.write_text(ARFF)
        dataset = load_dataset(path)

        assert len(dataset) == 4
        assert list(dataset.frame["username"]) == ["alice", "alice", "bob", "bob"]
        assert set(dataset.labels()) == {"rest", "stress"}
        assert dataset.numeric_attributes == ["hr_mean", "eda_mean"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DatasetLoadError) as info:
            load_dataset(tmp_path / "missing.csv")
        assert info.value.path == tmp_path / "missing.csv"

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "users.json"
        path.write_text("{}")
        with pytest.raises(DatasetLoadError):
            load_dataset(path)

    def test_missing_class_attribute(self, write_csv) -> None:
        with pytest.raises(DatasetLoadError) as info:
            load_dataset(write_csv(), class_attribute="label")
        assert "label" in str(info.value)

    def test_malformed_arff(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.arff"
        path.write_text("this is not arff\n")
        with pytest.raises(DatasetLoadError) as info:
            load_dataset(path)
        assert info.value.path == path
        assert info.value.reason

    def test_arff_string_attribute_loaded_as_nominal(self, tmp_path: Path) -> None:
        path = tmp_path / "users.arff"
        path.write_text(STRING_ARFF)
        dataset = load_dataset(path)

        assert list(dataset.frame["username"]) == ["alice", "alice", "bob", "bob"]
        assert dataset.numeric_attributes == ["hr_mean", "eda_mean"]

    def test_arff_string_attribute_without_values(self, tmp_path: Path) -> None:
        path = tmp_path / "users.arff"
        path.write_text(STRING_ARFF.replace(",alice,", ",?,").replace(",bob,", ",?,"))
        with pytest.raises(DatasetLoadError) as info:
            load_dataset(path)
        assert "string attribute" in info.value.reason


def test_list_dataset_files(tmp_path: Path) -> None:
    for name in ("b.csv", "a.arff", "c.txt"):
        (tmp_path / name).write_text("x")
    (tmp_path / "sub.csv").mkdir()

    assert [p.name for p in list_dataset_files(tmp_path)] == ["a.arff", "b.csv"]


def test_describe_dataset(write_csv, capsys) -> None:
    describe_dataset(load_dataset(write_csv()))
    out = capsys.readouterr().out

    assert "Samples:       40" in out
    assert "Groups:        4 (username)" in out
    assert "classes" in out
    assert "u3" in out
