"""Analysis Orchestrator - drives the two-round tool-calling conversation with LangGraph."""

import json
import logging
import operator
from typing import Annotated, Any, Dict, List, Optional, TypedDict

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage, ToolMessage
from langgraph.graph import END, StateGraph

from labmind.config import config
from labmind.models import AnalyzeRequest, AnalyzeResponse, ToolInvocation, ToolResult
from labmind.services.llm_service import LLMService, get_llm_service

from .assembler import assemble_response, extract_text
from .dispatcher import ToolDispatcher
from .normalizer import Dataset, build_preview, resolve_dataset
from .prompts import DEFAULT_REQUEST, SYSTEM_PROMPT, USER_MESSAGE_TEMPLATE
from .tool_catalog import get_tool_definitions

logger = logging.getLogger(__name__)


class AnalysisGraphState(TypedDict):
    """State carried through the analysis graph.

    ``messages`` is append-only: every node returns new messages and the whole
    log is sent to the model on each call.
    """

    messages: Annotated[List[BaseMessage], operator.add]
    dataset: Dataset
    tool_invocations: List[ToolInvocation]
    tool_results: List[ToolResult]
    analysis: str
    response: Optional[AnalyzeResponse]


class AnalysisOrchestrator:
    """Runs one analysis request against the language model.

    Flow:
    1. plan - the model sees the data preview and the tool catalog
    2. execute_tools - requested tools run in order (skipped when none were requested)
    3. synthesize - the model gets the tool results and writes the final analysis
    4. assemble - narrative and tool trace become the response

    Only one round of tools runs; calls requested during synthesis are not executed.
    """

    def __init__(
        self,
        llm_service: Optional[LLMService] = None,
        preview_char_budget: Optional[int] = None,
        default_outlier_threshold: Optional[float] = None,
    ):
        """Initialize the orchestrator.

        Args:
            llm_service: LLM service to use; defaults to the configured provider
            preview_char_budget: Characters of serialized data put in the first prompt
            default_outlier_threshold: IQR multiplier for outlier calls without one
        """
        analysis_config = config.get_analysis_config()
        self.llm_service = llm_service or get_llm_service()
        self.preview_char_budget = preview_char_budget or analysis_config["preview_char_budget"]
        self.default_outlier_threshold = (
            default_outlier_threshold or analysis_config["default_outlier_threshold"]
        )
        self.tools = get_tool_definitions()
        self._graph = self._build_graph()

    def _build_graph(self) -> StateGraph:
        """Build the analysis graph.

        Flow:
        plan -> route_after_plan -> execute_tools -> synthesize -> assemble -> END
                                 \\-> assemble -> END
        """
        workflow = StateGraph(AnalysisGraphState)

        workflow.add_node("plan", self._plan)
        workflow.add_node("execute_tools", self._execute_tools)
        workflow.add_node("synthesize", self._synthesize)
        workflow.add_node("assemble", self._assemble)

        workflow.set_entry_point("plan")

        workflow.add_conditional_edges(
            "plan",
            self._route_after_plan,
            {
                "execute_tools": "execute_tools",
                "assemble": "assemble",
            },
        )
        workflow.add_edge("execute_tools", "synthesize")
        workflow.add_edge("synthesize", "assemble")
        workflow.add_edge("assemble", END)

        return workflow.compile()

    def build_user_message(
        self,
        analysis_type: str,
        user_query: Optional[str],
        dataset: Dataset,
    ) -> str:
        """The caller's question, or a default request naming the analysis type, plus a data preview."""
        request = (user_query or "").strip() or DEFAULT_REQUEST.format(analysis_type=analysis_type)
        preview = build_preview(dataset, self.preview_char_budget)
        return USER_MESSAGE_TEMPLATE.format(request=request, preview=preview)

    async def analyze(self, request: AnalyzeRequest) -> AnalyzeResponse:
        """Run the full conversation for one request.

        Raises:
            ConfigurationError: If the language model is not configured
            UpstreamServiceError: If either model call fails
        """
        self.llm_service.ensure_configured()

        data_format = request.data_format.value if request.data_format else None
        dataset = resolve_dataset(request.data, data_format)
        analysis_type = request.analysis_type.value
        logger.info(f"Starting {analysis_type} analysis on {dataset.describe()}")

        initial_state: AnalysisGraphState = {
            "messages": [
                SystemMessage(content=SYSTEM_PROMPT),
                HumanMessage(content=self.build_user_message(analysis_type, request.user_query, dataset)),
            ],
            "dataset": dataset,
            "tool_invocations": [],
            "tool_results": [],
            "analysis": "",
            "response": None,
        }

        result = await self._graph.ainvoke(initial_state)
        return result["response"]

    async def _plan(self, state: AnalysisGraphState) -> Dict[str, Any]:
        """First model call: analyze the request and pick tools."""
        response = await self.llm_service.invoke_with_tools(state["messages"], self.tools)

        invocations = [
            ToolInvocation(id=call["id"], name=call["name"], arguments=call.get("args") or {})
            for call in response.tool_calls
        ]
        logger.info(f"Plan requested {len(invocations)} tool calls: {[i.name for i in invocations]}")

        return {
            "messages": [response],
            "tool_invocations": invocations,
            "analysis": extract_text(response),
        }

    def _route_after_plan(self, state: AnalysisGraphState) -> str:
        """Execute tools when the model asked for any, otherwise finish."""
        if state.get("tool_invocations"):
            logger.info("Routing: plan -> execute_tools")
            return "execute_tools"

        logger.info("Routing: plan -> assemble (no tools requested)")
        return "assemble"

    async def _execute_tools(self, state: AnalysisGraphState) -> Dict[str, Any]:
        """Run every requested tool and append one tool message per result."""
        dispatcher = ToolDispatcher(
            state["dataset"], default_outlier_threshold=self.default_outlier_threshold
        )
        results = dispatcher.execute(state["tool_invocations"])

        tool_messages = [
            ToolMessage(
                content=json.dumps(result.payload, default=str),
                tool_call_id=result.id,
                name=result.name,
            )
            for result in results
        ]
        return {"messages": tool_messages, "tool_results": results}

    async def _synthesize(self, state: AnalysisGraphState) -> Dict[str, Any]:
        """Second model call: write the analysis from the tool results."""
        response = await self.llm_service.invoke_with_tools(state["messages"], self.tools)

        if response.tool_calls:
            logger.warning(
                f"Ignoring {len(response.tool_calls)} tool calls requested during synthesis"
            )

        return {"messages": [response], "analysis": extract_text(response)}

    def _assemble(self, state: AnalysisGraphState) -> Dict[str, Any]:
        """Build the outward response."""
        response = assemble_response(
            state.get("analysis", ""),
            state.get("tool_results"),
            model=self.llm_service.model,
        )
        return {"response": response}


def get_orchestrator(llm_service: Optional[LLMService] = None) -> AnalysisOrchestrator:
    """Factory function to get an analysis orchestrator."""
    return AnalysisOrchestrator(llm_service=llm_service)
