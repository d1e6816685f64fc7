"""Deterministic statistical tools.

Every function here is pure: no I/O and no shared state. Results are plain dicts
with camelCase keys because they are serialized straight back to the language
model and to API clients.

Quantiles use the nearest-rank rule without interpolation: the value at index
``floor(n * fraction)`` of the ascending-sorted sample. For even-length input the
median is therefore the upper of the two middle values.
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from labmind.services.exceptions import InvalidInputError

from .normalizer import Dataset, DatasetKind, finite_numbers, is_finite_number

logger = logging.getLogger(__name__)

NO_VALID_DATA = "No valid numerical data found"
DEFAULT_OUTLIER_THRESHOLD = 1.5

# Sentinel for a field absent from a record
_ABSENT = object()


def nearest_rank(ordered: Sequence[float], fraction: float) -> float:
    """Value at rank ``floor(n * fraction)`` of an ascending-sorted, non-empty sample."""
    return ordered[math.floor(len(ordered) * fraction)]


def _quartiles(ordered: Sequence[float]) -> tuple:
    q1 = nearest_rank(ordered, 0.25)
    q3 = nearest_rank(ordered, 0.75)
    return q1, q3, q3 - q1


def calculate_statistics(values: Any) -> Dict[str, Any]:
    """Descriptive statistics of a numeric sequence.

    Args:
        values: Sequence of values; anything that is not a finite number is ignored

    Returns:
        count, mean, median, stdDev, variance (population), min, max, q1, q3,
        iqr, range and coefficientOfVariation

    Raises:
        InvalidInputError: If ``values`` is not a non-empty sequence or holds no finite numbers
    """
    if not isinstance(values, (list, tuple)) or len(values) == 0:
        raise InvalidInputError("Invalid data provided for statistics calculation")

    numeric = finite_numbers(values)
    if not numeric:
        raise InvalidInputError(NO_VALID_DATA)

    ordered = sorted(numeric)
    arr = np.asarray(numeric, dtype=float)
    mean = float(arr.mean())
    variance = float(np.mean((arr - mean) ** 2))
    std_dev = math.sqrt(variance)
    q1, q3, iqr = _quartiles(ordered)
    minimum, maximum = ordered[0], ordered[-1]

    return {
        "count": len(numeric),
        "mean": mean,
        "median": nearest_rank(ordered, 0.5),
        "stdDev": std_dev,
        "variance": variance,
        "min": minimum,
        "max": maximum,
        "q1": q1,
        "q3": q3,
        "iqr": iqr,
        "range": maximum - minimum,
        "coefficientOfVariation": std_dev / mean if mean != 0 else 0,
    }


def detect_outliers(
    values: Any,
    method: Optional[str] = None,
    threshold: Optional[float] = None,
) -> Dict[str, Any]:
    """Flag values outside ``[q1 - threshold*iqr, q3 + threshold*iqr]``.

    ``method`` is echoed in the result but the interquartile-range bounds are applied
    whatever it says, including "zscore".

    Indices refer to positions in ``values`` as given.
    """
    if not isinstance(values, (list, tuple)):
        raise InvalidInputError("Invalid data provided for outlier detection")

    indexed = [(i, v) for i, v in enumerate(values) if is_finite_number(v)]
    if not indexed:
        return {"outliers": [], "message": NO_VALID_DATA}

    ordered = sorted(v for _, v in indexed)
    q1, q3, iqr = _quartiles(ordered)
    threshold = float(threshold) if threshold else DEFAULT_OUTLIER_THRESHOLD
    lower = q1 - threshold * iqr
    upper = q3 + threshold * iqr

    outliers = [{"index": i, "value": v} for i, v in indexed if v < lower or v > upper]

    return {
        "outliers": outliers,
        "count": len(outliers),
        "percentage": len(outliers) / len(indexed) * 100,
        "method": method or "iqr",
    }


def _coerces_to_number(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return not math.isnan(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            # whitespace-only text reads as zero
            return True
        try:
            return not math.isnan(float(text))
        except ValueError:
            return False
    return False


def _is_blank(value: Any) -> bool:
    return value is None or value is _ABSENT or (isinstance(value, str) and value == "")


def _is_missing(value: Any) -> bool:
    """Null, absent, empty string, or anything that does not read as a number."""
    return _is_blank(value) or not _coerces_to_number(value)


def _value_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _quality_rows(dataset: Dataset) -> List[Any]:
    # Bare value lists are checked as rows of scalars so duplicates still count
    if dataset.kind == DatasetKind.NUMERIC_SEQUENCE:
        return list(dataset.payload)
    return dataset.records()


def check_data_quality(data: Any, columns: Optional[List[str]] = None) -> Dict[str, Any]:
    """Missing values, value kinds and duplicate records of a dataset.

    Args:
        data: Records, a column map, a single record, or a raw payload
        columns: Columns to check; defaults to the fields of the first record

    Returns:
        totalRows, totalColumns, missingValues (count and percentage per column),
        duplicates and dataTypes (value kinds seen per column)
    """
    dataset = Dataset.resolve(data)
    rows = _quality_rows(dataset)

    if not isinstance(columns, list) or not columns:
        columns = list(rows[0].keys()) if rows and isinstance(rows[0], dict) else []

    report: Dict[str, Any] = {
        "totalRows": len(rows),
        "totalColumns": len(columns),
        "missingValues": {},
        "duplicates": 0,
        "dataTypes": {},
    }

    for col in columns:
        values = [row.get(col, _ABSENT) if isinstance(row, dict) else _ABSENT for row in rows]
        missing = sum(1 for v in values if _is_missing(v))
        report["missingValues"][col] = {
            "count": missing,
            "percentage": missing / len(rows) * 100 if rows else 0,
        }

        present = [v for v in values if not _is_blank(v)]
        if present:
            report["dataTypes"][col] = list(dict.fromkeys(_value_kind(v) for v in present))

    serialized = [json.dumps(row, sort_keys=True, default=str) for row in rows]
    report["duplicates"] = len(serialized) - len(set(serialized))

    return report


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson coefficient from raw sums; 0 when either side has no variance."""
    n = len(x)
    if n != len(y) or n == 0:
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    sum_x, sum_y = float(xs.sum()), float(ys.sum())
    sum_xy = float(np.dot(xs, ys))
    sum_xx = float(np.dot(xs, xs))
    sum_yy = float(np.dot(ys, ys))

    numerator = n * sum_xy - sum_x * sum_y
    denominator_sq = (n * sum_xx - sum_x * sum_x) * (n * sum_yy - sum_y * sum_y)
    if denominator_sq <= 0:
        return 0.0
    return numerator / math.sqrt(denominator_sq)


def correlation_analysis(
    data: Any,
    variables: Optional[List[str]] = None,
    method: Optional[str] = None,
) -> Dict[str, Any]:
    """Pairwise correlations over ``variables``, self-pairs included.

    Each column is filtered to finite numbers on its own. A pair is reported only
    when both filtered columns have the same length and more than one value.
    ``method`` is echoed; the coefficient is always Pearson's.
    """
    dataset = Dataset.resolve(data)
    if dataset.kind == DatasetKind.NUMERIC_SEQUENCE:
        raise InvalidInputError("Invalid data format for correlation analysis")

    rows = dataset.records()
    variables = variables if isinstance(variables, list) else []

    def column_values(name: str) -> List[float]:
        return finite_numbers([row.get(name) if isinstance(row, dict) else None for row in rows])

    correlations: Dict[str, float] = {}
    for i, first in enumerate(variables):
        for second in variables[i:]:
            xs = column_values(first)
            ys = column_values(second)
            if len(xs) == len(ys) and len(xs) > 1:
                correlations[f"{first}_{second}"] = pearson_correlation(xs, ys)

    return {
        "method": method or "pearson",
        "correlations": correlations,
        "variables": variables,
    }


# goal keyword, required variable counts, suggestions
VISUALIZATION_RULES = [
    (
        "distribution",
        lambda num, cat, temp: num > 0,
        [
            ("histogram", "Best for showing distribution of numerical data"),
            ("box_plot", "Shows distribution, quartiles, and outliers"),
            ("violin_plot", "Combines distribution and density information"),
        ],
    ),
    (
        "comparison",
        lambda num, cat, temp: cat > 0 and num > 0,
        [
            ("bar_chart", "Compare categories using numerical values"),
            ("box_plot", "Compare distributions across categories"),
        ],
    ),
    (
        "correlation",
        lambda num, cat, temp: num >= 2,
        [
            ("scatter_plot", "Show relationships between two numerical variables"),
            ("correlation_heatmap", "Visualize correlation matrix"),
        ],
    ),
    (
        "trend",
        lambda num, cat, temp: temp > 0,
        [
            ("line_chart", "Show trends over time"),
            ("area_chart", "Emphasize cumulative trends"),
        ],
    ),
]

FALLBACK_VISUALIZATIONS = [
    ("scatter_plot", "General purpose visualization"),
    ("bar_chart", "Good for categorical data"),
]


def suggest_visualizations(
    variables: Optional[List[Dict[str, str]]] = None,
    goal: Optional[str] = None,
) -> Dict[str, Any]:
    """Chart types suited to the variable mix and the goal keywords.

    Args:
        variables: ``[{"name": ..., "type": "numerical|categorical|temporal|text"}]``
        goal: Free text; matched by substring against distribution, comparison,
            correlation and trend

    Returns:
        suggestions (type and reason), variablesAnalyzed and recommended
    """
    variables = variables if isinstance(variables, list) else []
    goal = str(goal) if goal else "general"

    types = [v.get("type") for v in variables if isinstance(v, dict)]
    num_vars = types.count("numerical")
    cat_vars = types.count("categorical")
    temp_vars = types.count("temporal")

    suggestions = []
    for keyword, applies, charts in VISUALIZATION_RULES:
        if keyword in goal and applies(num_vars, cat_vars, temp_vars):
            suggestions.extend({"type": t, "reason": r} for t, r in charts)

    if not suggestions:
        suggestions = [{"type": t, "reason": r} for t, r in FALLBACK_VISUALIZATIONS]

    return {
        "suggestions": suggestions,
        "variablesAnalyzed": len(variables),
        "recommended": suggestions[0]["type"],
    }


def generate_insights(analysis_results: Any = None, context: Optional[str] = None) -> Dict[str, Any]:
    """Marker tool: insights are written by the language model from the results it passes in."""
    return {
        "message": "Insights will be generated by the AI model based on analysis results",
        "analysisResults": analysis_results,
    }
