"""
Dataset Loader
================
Unified loading of attribute-typed tabular files into a ``Dataset``.
Handles CSV (header row) and ARFF (Weka format, nominal attributes decoded).

Usage:
    from groupeval.data.loader import load_dataset, describe_dataset
    dataset = load_dataset(Path("data/users.arff"), seed=1)
"""

import csv
import io
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd
from scipy.io import arff

from groupeval.config.settings import CLASS_ATTRIBUTE, GROUP_ATTRIBUTE, SUPPORTED_SUFFIXES
from groupeval.data.dataset import Dataset
from groupeval.errors import DatasetLoadError


# ─────────────────────── Readers ───────────────────────

def _read_csv(path: Path) -> pd.DataFrame:
    return pd.read_csv(path)


_STRING_ATTRIBUTE = re.compile(
    r"^\s*@attribute\s+(?P<name>'[^']*'|\"[^\"]*\"|\S+)\s+string\s*$", re.IGNORECASE
)
_NEEDS_QUOTES = re.compile(r"[\s,{}'\"%]")


def _quote_nominal(value: str) -> str:
    if _NEEDS_QUOTES.search(value):
        return "'" + value.replace("'", "\\'") + "'"
    return value


def _declare_string_attributes_nominal(text: str) -> str:
    """
    Rewrite ``@attribute name string`` as a nominal attribute over the
    values observed in the @data section (scipy cannot parse string
    attributes). Text without string attributes is returned unchanged.
    """
    lines = text.splitlines()
    string_columns: Dict[int, int] = {}  # header line -> column position
    column = 0
    data_start = None
    for i, line in enumerate(lines):
        keyword = line.strip().lower()
        if keyword.startswith("@attribute"):
            if _STRING_ATTRIBUTE.match(line):
                string_columns[i] = column
            column += 1
        elif keyword.startswith("@data"):
            data_start = i + 1
            break

    if not string_columns or data_start is None:
        return text

    data_lines = [
        l for l in lines[data_start:]
        if l.strip() and not l.lstrip().startswith("%")
    ]
    rows = list(csv.reader(data_lines, quotechar="'", skipinitialspace=True))

    for i, position in string_columns.items():
        name = _STRING_ATTRIBUTE.match(lines[i]).group("name")
        values = dict.fromkeys(
            row[position].strip() for row in rows
            if len(row) > position and row[position].strip() != "?"
        )
        if not values:
            raise ValueError(f"string attribute {name} has no values in @data")
        lines[i] = f"@attribute {name} {{{','.join(_quote_nominal(v) for v in values)}}}"
    return "\n".join(lines) + "\n"


def _read_arff(path: Path) -> pd.DataFrame:
    text = _declare_string_attributes_nominal(path.read_text(encoding="utf-8"))
    data, _meta = arff.loadarff(io.StringIO(text))
    df = pd.DataFrame(data)
    # Nominal attributes come back as bytes
    for col in df.columns:
        if df[col].dtype == object:
            df[col] = df[col].str.decode("utf-8")
    return df


_READERS = {
    ".csv": _read_csv,
    ".arff": _read_arff,
}


def load_dataset(
    path: Union[str, Path],
    class_attribute: str = CLASS_ATTRIBUTE,
    seed: Optional[int] = None,
) -> Dataset:
    """
    Load a dataset file and designate its class attribute.

    Args:
        path: .csv or .arff file
        class_attribute: name of the prediction target column
        seed: when given, rows are shuffled with this seed (reproducible)

    Returns:
        Dataset with categorical columns cast to str
    """
    path = Path(path)
    if not path.is_file():
        raise DatasetLoadError(path, "file not found")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise DatasetLoadError(
            path, f"unsupported format '{path.suffix}' (expected one of {SUPPORTED_SUFFIXES})"
        )

    # scipy's ARFF reader raises StopIteration on a missing header and
    # NotImplementedError on attribute types it cannot parse
    try:
        df = reader(path)
    except (arff.ArffError, ValueError, OSError, UnicodeDecodeError, pd.errors.ParserError,
            StopIteration, NotImplementedError) as e:
        raise DatasetLoadError(path, str(e) or f"malformed file ({type(e).__name__})") from e

    if df.empty:
        raise DatasetLoadError(path, "no rows")
    if class_attribute not in df.columns:
        raise DatasetLoadError(
            path, f"class attribute '{class_attribute}' not found in {list(df.columns)}"
        )

    for col in df.columns:
        if df[col].dtype == object:
            df[col] = df[col].astype(str)

    if seed is not None:
        df = df.sample(frac=1.0, random_state=seed).reset_index(drop=True)

    return Dataset(df, class_attribute, name=path.name)


def list_dataset_files(directory: Union[str, Path]) -> List[Path]:
    """Supported dataset files directly inside ``directory``, sorted by name."""
    directory = Path(directory)
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
    )


# ─────────────────────── Utility ───────────────────────

def describe_dataset(dataset: Dataset, group_attribute: str = GROUP_ATTRIBUTE):
    """Print summary statistics for a loaded dataset."""
    numeric = dataset.frame[dataset.numeric_attributes]
    print(f"\n{'='*60}")
    print(f"  {dataset.name} Summary")
    print(f"{'='*60}")
    print(f"  Samples:       {len(dataset):,}")
    print(f"  Attributes:    {len(dataset.attributes)} ({len(numeric.columns)} numeric)")
    print(f"  Class:         {dataset.class_attribute}")
    if dataset.has_attribute(group_attribute):
        groups = dataset.value_counts(group_attribute)
        print(f"  Groups:        {len(groups)} ({group_attribute})")
    if not numeric.empty:
        print(f"  Value range:   [{np.nanmin(numeric.values):.4f}, {np.nanmax(numeric.values):.4f}]")
        print(f"  NaN count:     {int(numeric.isna().sum().sum())}")
    print(f"{'='*60}\n")

    if dataset.has_attribute(group_attribute):
        table = (
            dataset.frame.groupby(dataset.frame[group_attribute].astype(str), sort=True)[
                dataset.class_attribute
            ]
            .agg(rows="size", classes="nunique")
            .reset_index()
            .rename(columns={group_attribute: "group"})
        )
        print(table.to_string(index=False))
