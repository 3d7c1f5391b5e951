"""
src/orchestrator/registry.py

Tool registry: name -> descriptor (schema + callable), frozen once built.
"""


import inspect
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel, ConfigDict
from rapidfuzz import fuzz, process

from orchestrator.errors import ConfigurationError


def _tool_spec(name: str, description: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    """Build an OpenAI function spec."""

    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": parameters.get("properties", {}),
                "required": parameters.get("required", []),
                "additionalProperties": False,
            },
        },
    }


class ToolDescriptor(BaseModel):
    """
    A named, schema-described callable the model may invoke.

    `args_schema` validates the model's arguments and doubles as the JSON schema
    we advertise. `func` receives the validated fields as keyword arguments and may
    be sync or async.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    description: str
    args_schema: Type[BaseModel]
    func: Callable[..., Any]

    def spec(self) -> Dict[str, Any]:

        return _tool_spec(self.name, self.description, self.args_schema.model_json_schema())

    async def invoke(self, arguments: Dict[str, Any]) -> Any:
        """Validate `arguments`, call the tool, await the result if needed."""

        validated = self.args_schema.model_validate(arguments)
        result = self.func(**validated.model_dump())

        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, BaseModel):
            result = result.model_dump()

        return result


class ToolRegistry:
    """Read-only mapping of tool name to descriptor. Safe to share across runs."""

    def __init__(self, tools: Iterable[ToolDescriptor]):

        table: Dict[str, ToolDescriptor] = {}

        for tool in tools:
            if tool.name in table:
                raise ConfigurationError(f"Duplicate tool name: {tool.name}")
            table[tool.name] = tool

        self._tools = MappingProxyType(table)

    def __len__(self) -> int:

        return len(self._tools)

    def __contains__(self, name: object) -> bool:

        return name in self._tools

    def get(self, name: str) -> Optional[ToolDescriptor]:

        return self._tools.get(name)

    def names(self) -> List[str]:

        return list(self._tools)

    def specs(self) -> List[Dict[str, Any]]:
        """JSON schemas describing the tools we expose to the model."""

        return [t.spec() for t in self._tools.values()]

    def suggest(self, name: str, cutoff: int = 70) -> Optional[str]:
        """Closest registered tool name, for 'did you mean' hints."""

        if not self._tools or not name:
            return None

        match = process.extractOne(
            name,
            self.names(),
            scorer=fuzz.WRatio,
            processor=lambda s: s.replace("_", " ").lower(),
            score_cutoff=cutoff,
        )

        return match[0] if match else None
