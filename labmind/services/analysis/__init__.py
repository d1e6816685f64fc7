# Tool-augmented data analysis
from .dispatcher import ToolDispatcher
from .normalizer import Dataset, DatasetKind, extract_column, parse_raw_text, resolve_dataset
from .orchestrator import AnalysisGraphState, AnalysisOrchestrator, get_orchestrator
from .tool_catalog import TOOL_DEFINITIONS, ToolName, get_tool_definitions, get_tool_names

__all__ = [
    # Data
    "Dataset",
    "DatasetKind",
    "extract_column",
    "parse_raw_text",
    "resolve_dataset",
    # Tools
    "TOOL_DEFINITIONS",
    "ToolName",
    "ToolDispatcher",
    "get_tool_definitions",
    "get_tool_names",
    # Orchestration
    "AnalysisGraphState",
    "AnalysisOrchestrator",
    "get_orchestrator",
]
