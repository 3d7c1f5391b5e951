"""
src/orchestrator/llm_openai.py

OpenAI client wrapper for function calling.
- OpenAIChatModel.complete(): one model call, normalised into a ModelResponse
- extract_tool_calls(): tool calls from a response message, never raises on bad JSON
- build_model_client(): picks endpoint + credentials for openai / gemini / ollama

Gemini and Ollama are both reached through their OpenAI-compatible endpoints,
so one client class covers all three providers.
"""


import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from openai import AsyncOpenAI

from config import ModelClientConfig
from orchestrator.models import Message, ModelResponse, ToolCall


logger = logging.getLogger(__name__)


class ModelClient(Protocol):

    async def complete(self, messages: Sequence[Message], tools: List[Dict[str, Any]]) -> ModelResponse:
        ...


def extract_tool_calls(message: Any) -> List[ToolCall]:
    """
    Normalise tool calls from an OpenAI response message.

    Malformed argument JSON does not raise: the call is kept with `parse_error`
    set so the router can record it as a failed invocation.
    """

    out: List[ToolCall] = []
    tcs = getattr(message, "tool_calls", None)

    if not tcs:
        return out

    for tc in tcs:
        fn = getattr(tc, "function", None)
        kind = getattr(tc, "type", "function")
        if kind != "function" or fn is None:
            name = getattr(fn, "name", None) or getattr(getattr(tc, kind, None), "name", None) or kind
            out.append(ToolCall(id=tc.id, name=name, parse_error=f"Unsupported tool call type: {kind}"))
            continue

        raw = fn.arguments or "{}"
        args: Dict[str, Any] = {}
        error = None
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, dict):
                args = parsed
            else:
                error = f"Tool arguments must be a JSON object, got {type(parsed).__name__}"
        except json.JSONDecodeError as e:
            error = f"Could not parse tool arguments: {e}"

        out.append(ToolCall(id=tc.id, name=fn.name, arguments=args, raw_arguments=raw, parse_error=error))

    return out


class OpenAIChatModel:
    """Chat Completions client with tools bound at call time."""

    def __init__(self, config: ModelClientConfig, *, temperature: float = 0.2, client: Optional[AsyncOpenAI] = None):

        self.config = config
        self.temperature = temperature
        self.client = client or AsyncOpenAI(
            # the local endpoint ignores the key but the SDK insists on one
            api_key=config.api_key or "ollama",
            base_url=config.resolved_base_url(),
        )

    async def complete(self, messages: Sequence[Message], tools: List[Dict[str, Any]]) -> ModelResponse:
        """
        Low-level call to Chat Completions with the tool specs.
        Returns the first choice as a ModelResponse.
        """

        kwargs: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [m.to_openai() for m in messages],
            "temperature": self.temperature,
        }
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"

        resp = await self.client.chat.completions.create(**kwargs)
        choice = resp.choices[0]
        content = choice.message.content
        if content is not None and not isinstance(content, str):
            content = json.dumps(content, ensure_ascii=False)

        return ModelResponse(content=content or "", tool_calls=extract_tool_calls(choice.message))


def build_model_client(config: ModelClientConfig) -> ModelClient:
    """Validate credentials for the selected provider and build its client."""

    config.validate_credentials()
    logger.info("Initializing %s with model: %s", config.provider.value, config.model)

    return OpenAIChatModel(config)
