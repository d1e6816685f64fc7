"""Models for the tool-calling analysis conversation."""

from typing import Any

from pydantic import BaseModel, Field


class ToolInvocation(BaseModel):
    """One tool call requested by the model."""

    id: str = Field(..., description="Correlation id assigned by the model")
    name: str = Field(..., description="Name of the requested tool")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class ToolResult(BaseModel):
    """Outcome of executing one tool invocation."""

    id: str = Field(..., description="Id of the invocation this result answers")
    name: str = Field(..., description="Name of the tool that ran")
    payload: dict[str, Any] = Field(
        ..., description="Tool output, or {'error': message} when the tool failed"
    )

    @property
    def failed(self) -> bool:
        return "error" in self.payload
