"""
src/tools/pools.py: read-side nomination pool tools

This module provides tool factories bound to a ChainConnections:
- list_nomination_pools(chain): pools on a relay chain (first 20)
- check_user_pool(chain, account): which pool an account has joined
- ensure_chain_api(chain_id): initialise a chain connection

Tools raise ToolInvocationError with a hint the model can act on, e.g. "call
ensure_chain_api first". The router turns that into a tool-result message.
"""


from typing import Any, Callable, Dict

from pydantic import BaseModel, Field

from context import selectors
from context.chains import ChainConnections, ChainNotInitializedError, map_to_relay_chain, resolve_chain_id
from context.loader import ChainState
from orchestrator.errors import ToolInvocationError
from orchestrator.registry import ToolDescriptor


MAX_LISTED_POOLS = 20


class PoolInfoArgs(BaseModel):

    chain: str = Field(
        description=(
            "The relay chain to query pools from (e.g., 'paseo', 'west', 'polkadot', 'kusama'). "
            "Nomination pools exist on relay chains, not asset hub chains."
        )
    )


class CheckUserPoolArgs(BaseModel):

    chain: str = Field(description="Chain to query (e.g., 'paseo', 'west', 'polkadot')")
    account: str = Field(description="Account address to check (SS58)")


class EnsureChainApiArgs(BaseModel):

    chain_id: str = Field(description="The chain ID to initialize (e.g., 'paseo', 'west_asset_hub', 'polkadot_asset_hub')")


def normalise_chain(connections: ChainConnections, chain: str) -> str:
    """Accept display names like "Westend" as well as ids."""

    if chain in connections.known_chains():
        return chain

    return resolve_chain_id(chain, default=chain)


def require_api(connections: ChainConnections, chain: str, tool: str) -> ChainState:
    """Internal: the initialised chain, or a recoverable tool error."""

    chain = normalise_chain(connections, chain)
    try:
        return connections.get_api(chain)
    except ChainNotInitializedError:
        raise ToolInvocationError(
            f'Chain API not initialized for "{chain}".',
            tool=tool,
            hint=f'call ensure_chain_api first with chain_id: "{chain}"',
        ) from None


def require_pools(state: ChainState, tool: str) -> None:

    if not state.has_nomination_pools:
        raise ToolInvocationError(
            f"NominationPools pallet not available on {state.chain_id}. Nomination pools only exist on relay chains.",
            tool=tool,
            hint=f'use the relay chain "{map_to_relay_chain(state.chain_id)}"',
        )


def make_list_nomination_pools(connections: ChainConnections) -> Callable[..., Dict[str, Any]]:

    def list_nomination_pools(chain: str) -> Dict[str, Any]:
        state = require_api(connections, chain, "list_nomination_pools")
        require_pools(state, "list_nomination_pools")

        total = len(state.pools)
        if total == 0:
            return {"chain": state.chain_id, "pool_count": 0, "pools": [], "message": "No nomination pools found on this chain."}

        message = (
            f"Showing first {MAX_LISTED_POOLS} of {total} pools."
            if total > MAX_LISTED_POOLS
            else f"Found {total} nomination pool(s)."
        )

        return {
            "chain": state.chain_id,
            "pool_count": total,
            "pools": selectors.list_pools(state, limit=MAX_LISTED_POOLS),
            "message": message,
        }

    return list_nomination_pools


def make_check_user_pool(connections: ChainConnections) -> Callable[..., Dict[str, Any]]:

    def check_user_pool(chain: str, account: str) -> Dict[str, Any]:
        state = require_api(connections, chain, "check_user_pool")
        require_pools(state, "check_user_pool")

        account = account.strip()
        pool_id = selectors.find_member_pool(state, account)
        if pool_id is None:
            return {
                "chain": state.chain_id,
                "account": account,
                "joined": False,
                "message": "Account is not a member of any nomination pool.",
            }

        return {"chain": state.chain_id, "account": account, "joined": True, "pool_id": pool_id}

    return check_user_pool


def make_ensure_chain_api(connections: ChainConnections) -> Callable[..., Dict[str, Any]]:

    def ensure_chain_api(chain_id: str) -> Dict[str, Any]:
        chain_id = normalise_chain(connections, chain_id)
        try:
            connections.initialize_api(chain_id)
        except ValueError as e:
            raise ToolInvocationError(str(e), tool="ensure_chain_api") from None

        return {"success": True, "chain_id": chain_id, "message": f"Initialized API for {chain_id}"}

    return ensure_chain_api


def build_pool_tools(connections: ChainConnections) -> list:

    return [
        ToolDescriptor(
            name="list_nomination_pools",
            description=(
                "Get information about all nomination pools on a specific relay chain. Returns pool IDs, "
                "states, member counts, and other details. Nomination pools exist on RELAY chains like "
                "'paseo', 'west', 'polkadot', 'kusama', NOT on asset hub chains."
            ),
            args_schema=PoolInfoArgs,
            func=make_list_nomination_pools(connections),
        ),
        ToolDescriptor(
            name="check_user_pool",
            description="Check which nomination pool (if any) an account has joined on a given chain.",
            args_schema=CheckUserPoolArgs,
            func=make_check_user_pool(connections),
        ),
        ToolDescriptor(
            name="ensure_chain_api",
            description=(
                "Initialize the API connection for a specific chain. Call this when you encounter "
                "'API not found' or 'chain not initialized' errors."
            ),
            args_schema=EnsureChainApiArgs,
            func=make_ensure_chain_api(connections),
        ),
    ]
