"""
src/orchestrator/router.py

Router: runs the bounded function-calling loop, executes tools, and returns a tidy result.
"""


import logging
from typing import List, Optional

from pydantic import ValidationError

from config import MAX_ITERATIONS, MIN_OUTPUT_LENGTH, ModelClientConfig
from orchestrator.errors import NotInitializedError
from orchestrator.formatting import format_tool_results, output_contains_tool_data
from orchestrator.llm_openai import ModelClient, build_model_client
from orchestrator.models import Message, RunResult, ToolCall, ToolInvocationRecord
from orchestrator.registry import ToolRegistry


logger = logging.getLogger(__name__)

MAX_ITERATIONS_OUTPUT = "Maximum iterations reached without completing the task."


class ToolCallingOrchestrator:
    """
    Mediates between a chat model and a tool registry.

    Each run() owns its message list and tool records; the registry and model
    client are read-only after initialize(), so one orchestrator can serve
    concurrent runs.
    """

    def __init__(self, *, max_iterations: int = MAX_ITERATIONS, min_output_length: int = MIN_OUTPUT_LENGTH):

        self.max_iterations = max_iterations
        self.min_output_length = min_output_length
        self._system_prompt: str = ""
        self._registry: Optional[ToolRegistry] = None
        self._client: Optional[ModelClient] = None
        self._config: Optional[ModelClientConfig] = None

    # -------- Setup -------------------------------------------------------------
    def initialize(
            self,
            system_prompt: str,
            registry: ToolRegistry,
            config: ModelClientConfig,
            *,
            model_client: Optional[ModelClient] = None,
    ) -> None:
        """
        Bind the prompt and tools and prepare the model client.

        Raises:
            ConfigurationError if the selected provider is missing a credential.
        """

        config.validate_credentials()
        client = model_client or build_model_client(config)

        self._system_prompt = system_prompt
        self._registry = registry
        self._config = config
        self._client = client

        logger.info("Available tools: %s", ", ".join(registry.names()))

    @property
    def is_ready(self) -> bool:

        return self._client is not None

    @property
    def available_tools(self) -> List[str]:

        return self._registry.names() if self._registry else []

    @property
    def provider(self) -> Optional[str]:

        return self._config.provider.value if self._config else None

    @property
    def model(self) -> Optional[str]:

        return self._config.model if self._config else None

    # -------- Tool execution bridge ---------------------------------------------
    async def _execute_tool(self, tc: ToolCall) -> ToolInvocationRecord:
        """Run one requested call. Every failure becomes a record, never an exception."""

        def failed(error: str) -> ToolInvocationRecord:
            logger.error("Tool error in %s: %s", tc.name, error)
            return ToolInvocationRecord(
                name=tc.name, arguments=tc.arguments, success=False, error=error, tool_call_id=tc.call_id
            )

        if tc.parse_error:
            return failed(tc.parse_error)

        tool = self._registry.get(tc.name)
        if tool is None:
            hint = self._registry.suggest(tc.name)
            return failed(f"Tool '{tc.name}' not found" + (f". Did you mean '{hint}'?" if hint else ""))

        logger.info("Executing tool: %s %s", tc.name, tc.arguments)
        try:
            out = await tool.invoke(tc.arguments)
        except ValidationError as e:
            return failed(f"Invalid arguments for {tc.name}: {e}")
        except Exception as e:
            return failed(str(e) or e.__class__.__name__)

        logger.debug("Tool result: %s", out)

        return ToolInvocationRecord(
            name=tc.name, arguments=tc.arguments, success=True, output=out, tool_call_id=tc.call_id
        )

    def _finalise_output(self, output: str, tool_results: List[ToolInvocationRecord]) -> str:
        """Fall back to, or append, the formatted tool results when the answer lacks them."""

        if not tool_results:
            return output
        if not output or len(output.strip()) < self.min_output_length:
            return format_tool_results(tool_results)
        if not output_contains_tool_data(output, tool_results):
            return output + "\n\n" + format_tool_results(tool_results)

        return output

    # -------- Orchestrate -------------------------------------------------------
    async def run(self, query: str) -> RunResult:
        """
        Entry point: call the model, execute any requested tools, feed results back,
        repeat until a plain answer or the iteration cap.
        """

        if not self.is_ready:
            raise NotInitializedError("Agent not initialized. Call initialize() first.")

        messages: List[Message] = [
            Message(role="system", content=self._system_prompt),
            Message(role="user", content=query),
        ]
        tool_results: List[ToolInvocationRecord] = []
        tool_specs = self._registry.specs()
        iteration = 0

        def result(output: str) -> RunResult:
            return RunResult(
                query=query,
                output=output,
                messages=messages,
                tool_results=tool_results,
                provider=self.provider,
                model=self.model,
                iterations=iteration,
            )

        while iteration < self.max_iterations:
            iteration += 1
            response = await self._client.complete(list(messages), tool_specs)
            messages.append(response.to_message())

            # If the model returned a normal message and no tool calls, we are done
            if not response.tool_calls:
                return result(self._finalise_output(response.content, tool_results))

            # Execute each tool call in order, feed back results
            for tc in response.tool_calls:
                record = await self._execute_tool(tc)
                tool_results.append(record)
                messages.append(Message(
                    role="tool",
                    content=record.to_content(),
                    tool_call_id=tc.call_id,
                    name=tc.name,
                ))

        logger.warning("Stopped after %d iterations without a final answer", iteration)

        return result(MAX_ITERATIONS_OUTPUT)
