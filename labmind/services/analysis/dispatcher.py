"""Tool dispatcher: runs model-requested tools against the request dataset."""

import logging
from typing import Any, Callable, Dict, List, Optional

from labmind.models import ToolInvocation, ToolResult

from . import statistics
from .normalizer import Dataset, DatasetKind
from .tool_catalog import ToolName

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Dict[str, Any]]


class ToolDispatcher:
    """Maps tool names to statistics functions through a closed handler table.

    A tool that fails, or a name outside the catalog, produces an ``{"error": ...}``
    payload instead of an exception, so one bad call never aborts the conversation.
    """

    def __init__(self, dataset: Dataset, default_outlier_threshold: float = 1.5):
        """Initialize the dispatcher.

        Args:
            dataset: The request's normalized dataset, used when a call omits ``data``
            default_outlier_threshold: IQR multiplier used when a call omits ``threshold``
        """
        self.dataset = dataset
        self.default_outlier_threshold = default_outlier_threshold
        self._handlers: Dict[ToolName, ToolHandler] = {
            ToolName.CALCULATE_STATISTICS: self._calculate_statistics,
            ToolName.DETECT_OUTLIERS: self._detect_outliers,
            ToolName.CHECK_DATA_QUALITY: self._check_data_quality,
            ToolName.SUGGEST_VISUALIZATIONS: self._suggest_visualizations,
            ToolName.CORRELATION_ANALYSIS: self._correlation_analysis,
            ToolName.GENERATE_INSIGHTS: self._generate_insights,
        }

    def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Run one tool and return its payload."""
        try:
            tool = ToolName(name)
        except ValueError:
            logger.warning(f"Model requested unknown tool: {name}")
            return {"error": f"Unknown tool: {name}"}

        arguments = arguments if isinstance(arguments, dict) else {}
        try:
            return self._handlers[tool](arguments)
        except Exception as e:
            logger.warning(f"Tool {name} failed: {e}")
            return {"error": str(e)}

    def execute(self, invocations: List[ToolInvocation]) -> List[ToolResult]:
        """Run every invocation in order; one result per invocation, ids preserved."""
        results = []
        for invocation in invocations:
            logger.info(f"Executing tool {invocation.name} (id={invocation.id})")
            payload = self.dispatch(invocation.name, invocation.arguments)
            results.append(ToolResult(id=invocation.id, name=invocation.name, payload=payload))

        failed = sum(1 for r in results if r.failed)
        logger.info(f"Executed {len(results)} tool calls, {failed} failed")
        return results

    def _source(self, arguments: Dict[str, Any]) -> Dataset:
        # Empty or missing data falls back to the request dataset
        return Dataset.resolve(arguments.get("data") or self.dataset)

    def _numeric_values(self, arguments: Dict[str, Any]) -> Any:
        source = self._source(arguments)
        if source.kind == DatasetKind.NUMERIC_SEQUENCE:
            # Unfiltered, so outlier indices point into the list the model sent
            return source.payload
        return source.column(arguments.get("column"))

    def _calculate_statistics(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return statistics.calculate_statistics(self._numeric_values(arguments))

    def _detect_outliers(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return statistics.detect_outliers(
            self._numeric_values(arguments),
            method=arguments.get("method"),
            threshold=arguments.get("threshold") or self.default_outlier_threshold,
        )

    def _check_data_quality(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return statistics.check_data_quality(self._source(arguments), arguments.get("columns"))

    def _suggest_visualizations(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return statistics.suggest_visualizations(arguments.get("variables"), arguments.get("goal"))

    def _correlation_analysis(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return statistics.correlation_analysis(
            self._source(arguments),
            arguments.get("variables"),
            method=arguments.get("method"),
        )

    def _generate_insights(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return statistics.generate_insights(
            arguments.get("analysisResults"), arguments.get("context")
        )
