"""Builds the outward response from the final model turn and the tool trace."""

from typing import List, Optional

from langchain_core.messages import BaseMessage

from labmind.models import AnalyzeResponse, ToolResult


def extract_text(message: BaseMessage) -> str:
    """Text blocks of a model turn joined by blank lines; tool-use blocks are skipped."""
    content = message.content
    if isinstance(content, str):
        return content

    texts = []
    for block in content:
        if isinstance(block, str):
            texts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            texts.append(block.get("text", ""))
    return "\n\n".join(texts)


def assemble_response(
    analysis: str,
    tool_results: Optional[List[ToolResult]],
    model: Optional[str] = None,
) -> AnalyzeResponse:
    """Successful response; ``toolResults`` is left out when no tool ran."""
    return AnalyzeResponse(
        success=True,
        analysis=analysis,
        tool_results=list(tool_results) if tool_results else None,
        model=model,
    )
