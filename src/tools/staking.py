"""
src/tools/staking.py: nomination pool transactions

This module provides:
- join_pool(chain, pool_id, amount): join a pool with an initial bond
- bond_extra(chain, amount): bond more into the signer's pool
- unbond(chain, amount): move bonded points to unbonding
- withdraw_unbonded(chain): release unbonded funds (leaves the pool when nothing is bonded)
- claim_rewards(chain): pay out pending rewards
- build_staking_tools(connections, account): every staking tool as ToolDescriptors

Design notes:
* Session-only: transactions mutate the in-memory ChainState, not the snapshot file.
* Asset hub ids are accepted and settled on their relay chain (west_asset_hub -> west).
* Receipts mirror what a wallet reports: status, block hash, tx hash, events.
* Points are bonded 1:1 with tokens; unbonding ignores the era delay.
"""


from __future__ import annotations
from typing import Any, Dict, List
import hashlib

from pydantic import BaseModel, Field

from context import selectors
from context.chains import ChainConnections, map_to_relay_chain
from context.loader import ChainState
from orchestrator.errors import ToolInvocationError
from orchestrator.registry import ToolDescriptor
from tools.pools import build_pool_tools, normalise_chain, require_api, require_pools


# --- Argument schemas ------------------------------------------------------------
class ChainArgs(BaseModel):

    chain: str = Field(description="Chain the user is staking on (e.g., 'west_asset_hub', 'paseo')")


class AmountArgs(ChainArgs):

    amount: float = Field(gt=0, description="Amount of tokens, in whole units (e.g., 0.5)")


class JoinPoolArgs(AmountArgs):

    pool_id: int = Field(ge=0, description="ID of the nomination pool to join")


# --- Private helpers -------------------------------------------------------------
def _amount(x: float) -> float:

    return round(float(x), 10)


def _hash(*parts: Any) -> str:

    return "0x" + hashlib.blake2b(":".join(str(p) for p in parts).encode(), digest_size=32).hexdigest()


def _receipt(state: ChainState, account: str, call: str, events: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Internal: advance one block and return a finalized receipt for `call`."""

    state.block_number += 1

    return {
        "status": "finalized",
        "chain": state.chain_id,
        "block_number": state.block_number,
        "block_hash": _hash(state.chain_id, state.block_number),
        "tx_hash": _hash(state.chain_id, account, call, state.block_number),
        "events": events,
    }


def _relay_state(connections: ChainConnections, chain: str, tool: str) -> ChainState:

    state = require_api(connections, map_to_relay_chain(normalise_chain(connections, chain)), tool)
    require_pools(state, tool)

    return state


def _require_member(state: ChainState, account: str, tool: str) -> Dict[str, Any]:

    member = state.members.get(account)

    if not member:
        raise ToolInvocationError(
            f"Account {account} is not a member of any nomination pool on {state.chain_id}.",
            tool=tool,
            hint="join a pool first with join_pool",
        )

    return member


def _pool_of(state: ChainState, member: Dict[str, Any]) -> Dict[str, Any]:

    pool = selectors.get_pool(state, member["pool_id"])
    if pool is None:
        raise ToolInvocationError(f"Pool {member['pool_id']} no longer exists on {state.chain_id}.")

    return pool


def _event(method: str, **data: Any) -> Dict[str, Any]:

    return {"section": "NominationPools", "method": method, "data": data}


# --- Public API ------------------------------------------------------------------
class StakingTools:
    """Transactions signed by `account` against a session's chain connections."""

    def __init__(self, connections: ChainConnections, account: str):

        self.connections = connections
        self.account = account.strip()

    def join_pool(self, *, chain: str, pool_id: int, amount: float) -> Dict[str, Any]:
        """
        Join `pool_id` bonding `amount` tokens.

        Raises:
            ToolInvocationError if the pool is missing or not Open, or the
            account already belongs to a pool.
        """

        state = _relay_state(self.connections, chain, "join_pool")
        pool = selectors.get_pool(state, pool_id)

        if pool is None:
            raise ToolInvocationError(f"Pool {pool_id} not found on {state.chain_id}.", hint="list pools with list_nomination_pools")
        if pool.get("state", "Open") != "Open":
            raise ToolInvocationError(f"Pool {pool_id} is {pool.get('state')} and cannot be joined.")

        current = selectors.find_member_pool(state, self.account)
        if current is not None:
            raise ToolInvocationError(
                f"Account is already a member of pool {current} on {state.chain_id}.",
                hint="use bond_extra to add to the existing bond",
            )

        amount = _amount(amount)
        pool["points"] = _amount(float(pool.get("points", 0)) + amount)
        pool["member_count"] = int(pool.get("member_count", 0)) + 1
        state.members[self.account] = {"pool_id": int(pool_id), "points": amount, "unbonding": 0.0, "pending_rewards": 0.0}

        return _receipt(state, self.account, "join_pool", [
            _event("Bonded", member=self.account, pool_id=int(pool_id), bonded=amount, joined=True),
        ])

    def bond_extra(self, *, chain: str, amount: float) -> Dict[str, Any]:

        state = _relay_state(self.connections, chain, "bond_extra")
        member = _require_member(state, self.account, "bond_extra")
        pool = _pool_of(state, member)

        amount = _amount(amount)
        member["points"] = _amount(member["points"] + amount)
        pool["points"] = _amount(float(pool.get("points", 0)) + amount)

        return _receipt(state, self.account, "bond_extra", [
            _event("Bonded", member=self.account, pool_id=member["pool_id"], bonded=amount, joined=False),
        ])

    def unbond(self, *, chain: str, amount: float) -> Dict[str, Any]:

        state = _relay_state(self.connections, chain, "unbond")
        member = _require_member(state, self.account, "unbond")
        pool = _pool_of(state, member)

        amount = _amount(amount)
        if amount > member["points"]:
            raise ToolInvocationError(
                f"Cannot unbond {amount} {state.token}: only {member['points']} {state.token} bonded."
            )

        member["points"] = _amount(member["points"] - amount)
        member["unbonding"] = _amount(member.get("unbonding", 0.0) + amount)
        pool["points"] = _amount(float(pool.get("points", 0)) - amount)

        return _receipt(state, self.account, "unbond", [
            _event("Unbonded", member=self.account, pool_id=member["pool_id"], balance=amount),
        ])

    def withdraw_unbonded(self, *, chain: str) -> Dict[str, Any]:

        state = _relay_state(self.connections, chain, "withdraw_unbonded")
        member = _require_member(state, self.account, "withdraw_unbonded")

        released = member.get("unbonding", 0.0)
        if released <= 0:
            raise ToolInvocationError("Nothing to withdraw.", hint="unbond tokens first with unbond")

        pool = _pool_of(state, member)
        member["unbonding"] = 0.0
        events = [_event("Withdrawn", member=self.account, pool_id=member["pool_id"], balance=released)]

        if member["points"] <= 0:
            pool["member_count"] = max(0, int(pool.get("member_count", 0)) - 1)
            del state.members[self.account]
            events.append(_event("MemberRemoved", member=self.account, pool_id=member["pool_id"]))

        return _receipt(state, self.account, "withdraw_unbonded", events)

    def claim_rewards(self, *, chain: str) -> Dict[str, Any]:

        state = _relay_state(self.connections, chain, "claim_rewards")
        member = _require_member(state, self.account, "claim_rewards")

        payout = member.get("pending_rewards", 0.0)
        if payout <= 0:
            raise ToolInvocationError("No pending rewards to claim.")

        member["pending_rewards"] = 0.0

        return _receipt(state, self.account, "claim_rewards", [
            _event("PaidOut", member=self.account, pool_id=member["pool_id"], payout=payout),
        ])


def build_staking_tools(connections: ChainConnections, account: str) -> List[ToolDescriptor]:
    """Pool queries plus transactions signed by `account`."""

    tx = StakingTools(connections, account)

    return build_pool_tools(connections) + [
        ToolDescriptor(
            name="join_pool",
            description="Join a nomination pool by bonding an initial amount of tokens.",
            args_schema=JoinPoolArgs,
            func=tx.join_pool,
        ),
        ToolDescriptor(
            name="bond_extra",
            description="Bond additional tokens into the nomination pool the account already belongs to.",
            args_schema=AmountArgs,
            func=tx.bond_extra,
        ),
        ToolDescriptor(
            name="unbond",
            description="Start unbonding tokens from the account's nomination pool.",
            args_schema=AmountArgs,
            func=tx.unbond,
        ),
        ToolDescriptor(
            name="withdraw_unbonded",
            description="Withdraw tokens that have finished unbonding from the nomination pool.",
            args_schema=ChainArgs,
            func=tx.withdraw_unbonded,
        ),
        ToolDescriptor(
            name="claim_rewards",
            description="Claim pending staking rewards from the account's nomination pool.",
            args_schema=ChainArgs,
            func=tx.claim_rewards,
        ),
    ]
