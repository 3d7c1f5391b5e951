"""
src/orchestrator/errors.py

Error taxonomy for the agent.

Only ConfigurationError and NotInitializedError ever reach the caller of the
orchestrator. ToolInvocationError is raised by tools and absorbed by the router
into a failed ToolInvocationRecord, which is handed back to the model.
"""


from typing import Optional


class AgentError(Exception):
    """Base class for agent errors."""


class ConfigurationError(AgentError):
    """Missing credential, unsupported provider or a bad tool registry."""


class NotInitializedError(AgentError):
    """run() was called before initialize()."""


class ToolInvocationError(AgentError):
    """A tool's own execution failed. `hint` tells the model how to recover."""

    def __init__(self, message: str, *, tool: Optional[str] = None, hint: Optional[str] = None):

        super().__init__(message)
        self.tool = tool
        self.hint = hint

    def __str__(self) -> str:

        msg = super().__str__()

        return f"{msg} (hint: {self.hint})" if self.hint else msg
