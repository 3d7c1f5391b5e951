# conftest.py
# Shared fixtures: a scripted stand-in for the chat model, a small chain
# snapshot, and helpers for building tool calls.

import json
from typing import Any, Dict, List, Optional

import pytest
from pydantic import BaseModel

from config import ModelClientConfig
from context.chains import ChainConnections
from orchestrator.models import ModelResponse, ToolCall
from orchestrator.registry import ToolDescriptor, ToolRegistry


ALICE = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
BOB = "5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty"
DAVE = "5DAAnrj7VHTznn2AWBemMuyBwZWs6FNFjdyVXUeYum3PTXFy"


def tool_call(name: str, args: Optional[Dict[str, Any]] = None, id: Optional[str] = "call_1") -> ToolCall:
    args = args or {}
    return ToolCall(id=id, name=name, arguments=args, raw_arguments=json.dumps(args))


def calls(*tcs: ToolCall) -> ModelResponse:
    return ModelResponse(content="", tool_calls=list(tcs))


def answer(text: str) -> ModelResponse:
    return ModelResponse(content=text)


class ScriptedModel:
    """Returns the scripted responses in order; the last one repeats forever."""

    def __init__(self, *responses: ModelResponse):
        self.responses = list(responses)
        self.seen: List[list] = []
        self.tools_seen: List[list] = []

    async def complete(self, messages, tools):
        self.seen.append(list(messages))
        self.tools_seen.append(tools)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    @property
    def call_count(self) -> int:
        return len(self.seen)


class PoolArgs(BaseModel):
    chain: str


class EchoArgs(BaseModel):
    text: str


def pool_tool(payload: Dict[str, Any]) -> ToolDescriptor:
    return ToolDescriptor(
        name="list_nomination_pools",
        description="List pools.",
        args_schema=PoolArgs,
        func=lambda chain: payload,
    )


def echo_tool() -> ToolDescriptor:
    async def echo(text: str) -> Dict[str, str]:
        return {"echo": text}

    return ToolDescriptor(name="echo", description="Echo text back.", args_schema=EchoArgs, func=echo)


@pytest.fixture
def ollama_config():
    return ModelClientConfig(provider="ollama", model="llama3.2:3b")


@pytest.fixture
def registry():
    return ToolRegistry([pool_tool({"pools": [{"id": 7, "memberCount": 3}]}), echo_tool()])


@pytest.fixture
def snapshot():
    return {
        "west": {
            "display_name": "Westend",
            "kind": "relay",
            "token": "WND",
            "block_number": 100,
            "pools": [
                {"id": 1, "state": "Open", "points": 1200, "member_count": 2,
                 "roles": {"depositor": ALICE, "root": ALICE, "nominator": BOB, "bouncer": None}},
                {"id": 3, "state": "Blocked", "points": 99, "member_count": 1,
                 "roles": {"depositor": DAVE, "root": DAVE, "nominator": None, "bouncer": None}},
            ],
            "members": {
                ALICE: {"pool_id": 1, "points": 1000, "unbonding": 0, "pending_rewards": 2.5},
                BOB: {"pool_id": 1, "points": 200, "unbonding": 0, "pending_rewards": 0},
                DAVE: {"pool_id": 3, "points": 99, "unbonding": 0, "pending_rewards": 0},
            },
        },
        "west_asset_hub": {"display_name": "Westend Asset Hub", "kind": "asset_hub", "token": "WND"},
        "polkadot": {"kind": "relay", "token": "DOT", "pools": [], "members": {}},
    }


@pytest.fixture
def connections(snapshot):
    return ChainConnections(snapshot, initialized=["west", "west_asset_hub"])
