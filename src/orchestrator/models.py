"""
src/orchestrator/models.py

Pydantic models for the message trace, tool-calling I/O and run results.
"""


import json
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


Role = Literal["system", "user", "assistant", "tool"]


class ToolCall(BaseModel):

    id: Optional[str] = None
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    raw_arguments: str = "{}"
    parse_error: Optional[str] = None  # set when the call cannot be executed as sent

    @property
    def call_id(self) -> str:
        """The id tool-result messages are tagged with; falls back to the tool name."""

        return self.id or self.name


class Message(BaseModel):

    role: Role
    content: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)
    tool_call_id: Optional[str] = None
    name: Optional[str] = None

    def to_openai(self) -> Dict[str, Any]:
        """Render as a Chat Completions message dict."""

        out: Dict[str, Any] = {"role": self.role, "content": self.content}

        if self.role == "assistant" and self.tool_calls:
            out["content"] = self.content or None
            out["tool_calls"] = [
                {
                    "id": tc.call_id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": tc.raw_arguments},
                }
                for tc in self.tool_calls
            ]
        if self.role == "tool":
            out["tool_call_id"] = self.tool_call_id
            if self.name:
                out["name"] = self.name

        return out


class ModelResponse(BaseModel):

    content: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)

    def to_message(self) -> Message:

        return Message(role="assistant", content=self.content, tool_calls=list(self.tool_calls))


class ToolInvocationRecord(BaseModel):

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    success: bool
    output: Any = None
    error: Optional[str] = None
    tool_call_id: Optional[str] = None

    def to_content(self) -> str:
        """Content of the tool-result message handed back to the model."""

        if self.success:
            return json.dumps(self.output, ensure_ascii=False, default=str)

        return f"Error: {self.error}"


class RunResult(BaseModel):

    query: str
    output: str
    messages: List[Message]
    tool_results: List[ToolInvocationRecord]
    provider: str
    model: str
    iterations: int = 0
