"""Tool catalog exposed to the language model.

Schemas are in Anthropic tool format (name, description, input_schema), which
LangChain's ``bind_tools`` accepts for every supported provider.
"""

import copy
from enum import Enum
from typing import Any, Dict, List


class ToolName(str, Enum):
    """Names of the tools the model may call."""

    CALCULATE_STATISTICS = "calculate_statistics"
    DETECT_OUTLIERS = "detect_outliers"
    CHECK_DATA_QUALITY = "check_data_quality"
    SUGGEST_VISUALIZATIONS = "suggest_visualizations"
    CORRELATION_ANALYSIS = "correlation_analysis"
    GENERATE_INSIGHTS = "generate_insights"


TOOL_DEFINITIONS = (
    {
        "name": ToolName.CALCULATE_STATISTICS.value,
        "description": (
            "Calculate descriptive statistics for numerical data including mean, median, "
            "standard deviation, variance, min, max, quartiles, interquartile range and "
            "coefficient of variation."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "data": {
                    "type": "array",
                    "items": {"type": "number"},
                    "description": "Array of numerical values to analyze",
                },
                "column": {
                    "type": "string",
                    "description": "Column name if data is a table of records or columns",
                },
            },
            "required": ["data"],
        },
    },
    {
        "name": ToolName.DETECT_OUTLIERS.value,
        "description": (
            "Detect outliers in numerical data using the IQR (Interquartile Range) method. "
            "Returns indices and values of outliers."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "data": {
                    "type": "array",
                    "items": {"type": "number"},
                    "description": "Array of numerical values",
                },
                "method": {
                    "type": "string",
                    "enum": ["iqr", "zscore"],
                    "default": "iqr",
                    "description": "Method to use for outlier detection",
                },
                "threshold": {
                    "type": "number",
                    "default": 1.5,
                    "description": "Threshold multiplier for the IQR bounds",
                },
            },
            "required": ["data"],
        },
    },
    {
        "name": ToolName.CHECK_DATA_QUALITY.value,
        "description": (
            "Analyze data quality including missing values, duplicates, data types and "
            "data completeness metrics."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "data": {
                    "type": "object",
                    "description": "Dataset object or array to analyze",
                },
                "columns": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Column names if analyzing structured data",
                },
            },
            "required": ["data"],
        },
    },
    {
        "name": ToolName.SUGGEST_VISUALIZATIONS.value,
        "description": (
            "Suggest appropriate visualization types based on data characteristics. "
            "Considers data types and the analysis goal."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "data": {
                    "type": "object",
                    "description": "Dataset to analyze for visualization recommendations",
                },
                "variables": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string"},
                            "type": {
                                "type": "string",
                                "enum": ["numerical", "categorical", "temporal", "text"],
                            },
                        },
                    },
                    "description": "Variables in the dataset with their types",
                },
                "goal": {
                    "type": "string",
                    "description": "Analysis goal (distribution, correlation, comparison, trends, etc.)",
                },
            },
            "required": ["data"],
        },
    },
    {
        "name": ToolName.CORRELATION_ANALYSIS.value,
        "description": (
            "Calculate correlations between numerical variables and identify strong "
            "relationships."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "data": {
                    "type": "object",
                    "description": "Dataset with multiple numerical columns",
                },
                "variables": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "List of numerical column names to correlate",
                },
                "method": {
                    "type": "string",
                    "enum": ["pearson", "spearman", "kendall"],
                    "default": "pearson",
                    "description": "Correlation method to use",
                },
            },
            "required": ["data", "variables"],
        },
    },
    {
        "name": ToolName.GENERATE_INSIGHTS.value,
        "description": (
            "Generate high-level insights and patterns from the data analysis results. "
            "Summarizes findings, identifies trends, and provides actionable recommendations."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "analysisResults": {
                    "type": "object",
                    "description": "Results from previous analysis tools",
                },
                "context": {
                    "type": "string",
                    "description": "Additional context or research questions",
                },
            },
            "required": ["analysisResults"],
        },
    },
)


def get_tool_definitions() -> List[Dict[str, Any]]:
    """Copies of the tool definitions, safe to hand to client libraries."""
    return copy.deepcopy(list(TOOL_DEFINITIONS))


def get_tool_names() -> List[str]:
    """Names of all catalog tools, in catalog order."""
    return [tool["name"] for tool in TOOL_DEFINITIONS]
