"""
src/orchestrator/formatting.py

Deterministic rendering of tool results for the final answer, plus the
heuristic that decides whether the model's own text already mentions them.

The heuristic is plain substring matching: it only checks that a key identifying
field (pool id or member count) appears literally in the lower-cased answer.
Reformatted numbers ("1,024" vs "1024") count as missing.
"""


import json
import re
from typing import Any, Dict, List, Optional, Sequence

from orchestrator.models import ToolInvocationRecord


POOL_LISTING_TOOL = "list_nomination_pools"

TRANSACTION_TITLES: Dict[str, str] = {
    "join_pool": "Pool Joined Successfully!",
    "bond_extra": "Bond Extra Successful!",
    "unbond": "Unbond Initiated!",
    "withdraw_unbonded": "Withdrawal Successful!",
    "claim_rewards": "Rewards Claimed!",
}


def _field(d: Dict[str, Any], snake: str, camel: Optional[str] = None) -> Any:
    """Read a payload field written either snake_case or camelCase."""

    if snake in d:
        return d[snake]

    return d.get(camel) if camel else None


def _json_block(obj: Any) -> str:

    return f"```json\n{json.dumps(obj, indent=2, ensure_ascii=False, default=str)}\n```"


def truncate_address(addr: Optional[str]) -> Optional[str]:
    """Shorten long addresses/hashes to 'abcdefgh...uvwxyz'."""

    if not addr or len(addr) < 16:
        return addr

    return f"{addr[:8]}...{addr[-6:]}"


def output_contains_tool_data(output: str, records: Sequence[ToolInvocationRecord]) -> bool:
    """
    Return False if a successful pool listing returned pools but the output
    mentions none of their ids or member counts. Every other tool counts as referenced.
    """

    lowered = (output or "").lower()

    for rec in records:
        if not rec.success or rec.name != POOL_LISTING_TOOL or not isinstance(rec.output, dict):
            continue

        pools = rec.output.get("pools")
        if not isinstance(pools, list) or not pools:
            continue

        mentioned = False
        for pool in pools:
            if not isinstance(pool, dict):
                continue
            keys = [pool.get("id"), _field(pool, "member_count", "memberCount")]
            if any(k is not None and str(k).lower() in lowered for k in keys):
                mentioned = True
                break

        if not mentioned:
            return False

    return True


def format_pool_info(result: Any) -> str:

    if not result:
        return "No pool information available."

    out = "**Nomination Pools Information**\n\n"

    if isinstance(result, dict) and isinstance(result.get("pools"), list):
        pools = result["pools"]
        chain = result.get("chain")

        if not pools:
            return out + f"No nomination pools found on {chain}."

        count = _field(result, "pool_count", "poolCount") or len(pools)
        out += f"Found **{count}** pool(s) on **{chain}**:\n\n"

        for pool in pools:
            out += "---\n"
            out += f"**Pool #{pool.get('id')}**\n"
            if pool.get("state"):
                out += f"- State: {pool['state']}\n"
            members = _field(pool, "member_count", "memberCount")
            if members is not None:
                out += f"- Members: {members}\n"
            if pool.get("points"):
                out += f"- Points: {pool['points']}\n"
            roles = pool.get("roles")
            if roles:
                out += f"- Depositor: {truncate_address(roles.get('depositor'))}\n"
                if roles.get("root"):
                    out += f"- Root: {truncate_address(roles['root'])}\n"
                if roles.get("nominator"):
                    out += f"- Nominator: {truncate_address(roles['nominator'])}\n"
            out += "\n"

        if result.get("message"):
            out += f"*{result['message']}*\n"
    elif isinstance(result, dict):
        if result.get("error"):
            out += f"**Error:** {result['error']}\n"
            if result.get("hint"):
                out += f"*Hint: {result['hint']}*\n"
        else:
            out += _json_block(result)

    return out


def format_transaction_result(result: Any) -> str:

    if not result:
        return "Transaction completed."
    if not isinstance(result, dict):
        return _json_block(result)

    out = ""
    if result.get("status"):
        out += f"- Status: {result['status']}\n"
    block_hash = _field(result, "block_hash", "blockHash")
    if block_hash:
        out += f"- Block Hash: {truncate_address(block_hash)}\n"
    tx_hash = _field(result, "tx_hash", "txHash")
    if tx_hash:
        out += f"- Tx Hash: {truncate_address(tx_hash)}\n"
    if result.get("events") is not None:
        out += f"- Events: {len(result['events'])} event(s)\n"

    return out or _json_block(result)


def _title(name: str) -> str:

    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name.replace("_", " "))


def format_tool_results(records: Sequence[ToolInvocationRecord]) -> str:
    """Render every record, in order, as markdown."""

    parts: List[str] = []

    for rec in records:
        if not rec.success:
            parts.append(f"**Error in {rec.name}:** {rec.error}")
        elif rec.name == POOL_LISTING_TOOL:
            parts.append(format_pool_info(rec.output))
        elif rec.name in TRANSACTION_TITLES:
            parts.append(f"**{TRANSACTION_TITLES[rec.name]}**\n{format_transaction_result(rec.output)}")
        else:
            parts.append(f"**{_title(rec.name)} Result:**\n{_json_block(rec.output)}")

    return "\n\n".join(parts)
