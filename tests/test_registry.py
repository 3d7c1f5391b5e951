"""
Unit tests for orchestrator/registry.py.
"""

import pytest
from pydantic import BaseModel, Field, ValidationError

from orchestrator.errors import ConfigurationError
from orchestrator.registry import ToolDescriptor, ToolRegistry

from conftest import echo_tool, pool_tool


class AmountArgs(BaseModel):
    chain: str = Field(description="Chain id")
    amount: float = Field(gt=0)


def bond(chain: str, amount: float):
    return {"chain": chain, "bonded": amount}


def test_duplicate_names_are_rejected():
    with pytest.raises(ConfigurationError, match="Duplicate tool name: echo"):
        ToolRegistry([echo_tool(), echo_tool()])


def test_lookup_and_names():
    registry = ToolRegistry([pool_tool({}), echo_tool()])

    assert len(registry) == 2
    assert "echo" in registry
    assert registry.get("echo").description == "Echo text back."
    assert registry.get("nope") is None
    assert registry.names() == ["list_nomination_pools", "echo"]


def test_registry_is_read_only():
    registry = ToolRegistry([echo_tool()])

    with pytest.raises(TypeError):
        registry._tools["other"] = echo_tool()


def test_specs_follow_openai_function_format():
    tool = ToolDescriptor(name="bond_extra", description="Bond more.", args_schema=AmountArgs, func=bond)

    spec = ToolRegistry([tool]).specs()[0]

    assert spec["type"] == "function"
    fn = spec["function"]
    assert fn["name"] == "bond_extra"
    assert fn["description"] == "Bond more."
    assert fn["parameters"]["type"] == "object"
    assert set(fn["parameters"]["properties"]) == {"chain", "amount"}
    assert fn["parameters"]["properties"]["chain"]["description"] == "Chain id"
    assert sorted(fn["parameters"]["required"]) == ["amount", "chain"]
    assert fn["parameters"]["additionalProperties"] is False


@pytest.mark.asyncio
async def test_invoke_validates_and_coerces():
    tool = ToolDescriptor(name="bond_extra", description="Bond more.", args_schema=AmountArgs, func=bond)

    assert await tool.invoke({"chain": "west", "amount": "1.5"}) == {"chain": "west", "bonded": 1.5}

    with pytest.raises(ValidationError):
        await tool.invoke({"chain": "west", "amount": -1})


@pytest.mark.asyncio
async def test_invoke_awaits_async_tools_and_dumps_models():
    class Receipt(BaseModel):
        status: str

    async def finalize(chain: str, amount: float):
        return Receipt(status=f"finalized on {chain}")

    tool = ToolDescriptor(name="tx", description="tx", args_schema=AmountArgs, func=finalize)

    assert await tool.invoke({"chain": "west", "amount": 1}) == {"status": "finalized on west"}


def test_suggest_closest_name():
    registry = ToolRegistry([pool_tool({}), echo_tool()])

    assert registry.suggest("list_pools") == "list_nomination_pools"
    assert registry.suggest("zzz") is None
    assert ToolRegistry([]).suggest("echo") is None
