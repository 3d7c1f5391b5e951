"""
src/context/loader.py

Loads the local chain snapshot (data/chains.json) that stands in for live
chain state during a demo session. Tools mutate the in-memory ChainState;
the file on disk stays the seed.
"""


import json
from pathlib import Path
from typing import Any, Dict
import os


SNAPSHOT_PATH = Path(os.getenv("STAKING_SNAPSHOT", Path(__file__).resolve().parents[2] / "data" / "chains.json"))


class ChainState:

    def __init__(self, chain_id: str, data: Dict[str, Any]):

        self.chain_id = chain_id
        self.display_name = data.get("display_name", chain_id)
        self.kind = data.get("kind", "relay")
        self.token = data.get("token", "DOT")
        self.block_number = int(data.get("block_number", 0))
        self.pools = data.get("pools", [])
        # account -> {"pool_id", "points", "unbonding", "pending_rewards"}
        self.members = data.get("members", {})

    @property
    def has_nomination_pools(self) -> bool:

        return self.kind == "relay"


def load_snapshot(path: Path = SNAPSHOT_PATH) -> Dict[str, Dict[str, Any]]:
    """Return the raw per-chain data keyed by chain id."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Chain snapshot not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    # Sanity checks
    chains = data.get("chains")
    if not isinstance(chains, dict) or not chains:
        raise ValueError("chains.json missing 'chains'")

    for chain_id, chain in chains.items():
        if chain.get("kind") not in ("relay", "asset_hub"):
            raise ValueError(f"chain '{chain_id}' has invalid kind {chain.get('kind')!r}")

    return chains
