"""Dataset normalization: resolve loosely-typed payloads into one of four shapes."""

import io
import json
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)

_NUMBER_SPLIT = re.compile(r"[,\s]+")


class DatasetKind(str, Enum):
    """Shapes a dataset payload can take."""

    ROW_SEQUENCE = "row_sequence"
    COLUMN_MAP = "column_map"
    SINGLE_RECORD = "single_record"
    NUMERIC_SEQUENCE = "numeric_sequence"


def is_finite_number(value: Any) -> bool:
    """True for ints and floats that are neither NaN nor infinite. Booleans are not numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def finite_numbers(values: Any) -> List[float]:
    """Keep only the finite numbers of a sequence, in order."""
    if not isinstance(values, (list, tuple)):
        return []
    return [v for v in values if is_finite_number(v)]


def _coerce_cell(text: str, number: float) -> Any:
    if text == "":
        return None
    if pd.isna(number) or not math.isfinite(number):
        return text
    try:
        return int(text)
    except ValueError:
        return float(number)


def _parse_csv(text: str) -> List[Dict[str, Any]]:
    # Cells are typed one by one; a text cell must not turn its whole column into strings
    df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]

    columns = {}
    for name in df.columns:
        cells = df[name].fillna("").str.strip()
        numbers = pd.to_numeric(cells, errors="coerce")
        columns[name] = [_coerce_cell(t, n) for t, n in zip(cells.tolist(), numbers.tolist())]

    return pd.DataFrame(columns, dtype=object).to_dict(orient="records")


def parse_raw_text(text: str, data_format: Optional[str] = None) -> Any:
    """Parse pasted text: JSON first, then CSV with a header row, then a list of numbers.

    Args:
        text: Raw text as submitted
        data_format: Optional hint ("json", "csv" or "array")

    Returns:
        A JSON-like Python value (list of records, list of numbers, or whatever JSON held)
    """
    stripped = text.strip()
    if not stripped:
        return []

    if data_format not in ("csv", "array"):
        try:
            return json.loads(stripped)
        except ValueError:
            if data_format == "json":
                logger.warning("Data declared as JSON could not be parsed, trying other formats")

    lines = stripped.splitlines()
    if len(lines) > 1 and data_format != "array":
        try:
            return _parse_csv(stripped)
        except (ValueError, pd.errors.ParserError) as e:
            logger.warning(f"CSV parsing failed ({e}), reading text as a list of numbers")

    numbers = []
    for token in _NUMBER_SPLIT.split(stripped):
        try:
            value = float(token)
        except ValueError:
            continue
        if math.isfinite(value):
            numbers.append(int(value) if value.is_integer() and "." not in token else value)
    return numbers


@dataclass(frozen=True)
class Dataset:
    """A payload resolved to exactly one shape.

    ``payload`` holds the parsed value; downstream code goes through the accessors
    rather than inspecting it.
    """

    kind: DatasetKind
    payload: Any

    @classmethod
    def resolve(cls, data: Any, data_format: Optional[str] = None) -> "Dataset":
        """Resolve a raw payload into a Dataset."""
        if isinstance(data, Dataset):
            return data
        if isinstance(data, str):
            data = parse_raw_text(data, data_format)

        if isinstance(data, (list, tuple)):
            items = list(data)
            if items and isinstance(items[0], dict):
                return cls(DatasetKind.ROW_SEQUENCE, items)
            return cls(DatasetKind.NUMERIC_SEQUENCE, items)

        if isinstance(data, dict):
            # The first column decides: a list there means column-oriented data
            if data and isinstance(next(iter(data.values())), list):
                return cls(DatasetKind.COLUMN_MAP, data)
            return cls(DatasetKind.SINGLE_RECORD, data)

        if data is None:
            return cls(DatasetKind.NUMERIC_SEQUENCE, [])
        return cls(DatasetKind.NUMERIC_SEQUENCE, [data])

    def records(self) -> List[Any]:
        """Row view of the dataset.

        Column maps are zipped by index over the length of the first column;
        cells past the end of a shorter column are None.
        """
        if self.kind == DatasetKind.ROW_SEQUENCE:
            return list(self.payload)
        if self.kind == DatasetKind.SINGLE_RECORD:
            return [self.payload]
        if self.kind == DatasetKind.COLUMN_MAP:
            return list(self._zip_columns())
        return []

    def _zip_columns(self) -> Iterator[Dict[str, Any]]:
        keys = list(self.payload.keys())
        for i in range(len(self.payload[keys[0]])):
            row = {}
            for key in keys:
                column = self.payload[key]
                row[key] = column[i] if isinstance(column, list) and i < len(column) else None
            yield row

    def column(self, name: Optional[str] = None) -> List[float]:
        """Finite numeric values of one column, or of the whole sequence for numeric data."""
        if self.kind == DatasetKind.NUMERIC_SEQUENCE:
            return finite_numbers(self.payload)
        if not name:
            return []
        if self.kind == DatasetKind.ROW_SEQUENCE:
            return finite_numbers(
                [row.get(name) if isinstance(row, dict) else None for row in self.payload]
            )
        # Mappings only yield values when the field holds a list
        return finite_numbers(self.payload.get(name))

    def describe(self) -> str:
        """Short shape summary for logs. Never includes values."""
        if self.kind == DatasetKind.COLUMN_MAP:
            return f"{self.kind.value} with {len(self.payload)} columns"
        if self.kind == DatasetKind.SINGLE_RECORD:
            return f"{self.kind.value} with {len(self.payload)} fields"
        return f"{self.kind.value} with {len(self.payload)} items"


def resolve_dataset(data: Any, data_format: Optional[str] = None) -> Dataset:
    """Resolve a request payload into a Dataset."""
    return Dataset.resolve(data, data_format)


def extract_column(data: Any, column: Optional[str] = None) -> List[float]:
    """Finite numbers for ``column`` of ``data``. Returns an empty list rather than failing."""
    return Dataset.resolve(data).column(column)


def build_preview(data: Any, budget: int = 5000) -> str:
    """Compact JSON of the payload, cut to ``budget`` characters and suffixed with an ellipsis."""
    if isinstance(data, Dataset):
        data = data.payload
    serialized = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)
    return serialized[:budget] + "..."
