"""
src/context/selectors.py
"""


from typing import Any, Dict, List, Optional

from .loader import ChainState


def list_pools(state: ChainState, limit: int = 20) -> List[Dict[str, Any]]:
    """First `limit` pools in id order, shaped for the model."""

    out = []

    for pool in sorted(state.pools, key=lambda p: int(p["id"]))[:limit]:
        roles = pool.get("roles", {})
        out.append({
            "id": int(pool["id"]),
            "state": pool.get("state", "Unknown"),
            "points": str(pool.get("points", 0)),
            "member_count": int(pool.get("member_count", 0)),
            "roles": {
                "depositor": roles.get("depositor", "Unknown"),
                "root": roles.get("root"),
                "nominator": roles.get("nominator"),
                "bouncer": roles.get("bouncer"),
            },
        })

    return out


def get_pool(state: ChainState, pool_id: int) -> Optional[Dict[str, Any]]:

    return next((p for p in state.pools if int(p["id"]) == int(pool_id)), None)


def find_member_pool(state: ChainState, account: str) -> Optional[int]:
    """Pool id the account belongs to, or None."""

    member = state.members.get(account.strip())

    return int(member["pool_id"]) if member else None
