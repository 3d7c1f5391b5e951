"""
src/context/chains.py

Per-session chain connections and chain-name normalisation.

ChainConnections is passed explicitly to the tools that need it; there is no
process-wide api cache.
"""


import copy
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .loader import SNAPSHOT_PATH, ChainState, load_snapshot


logger = logging.getLogger(__name__)

# Wallet chain names -> chain ids
CHAIN_MAPPING: Dict[str, str] = {
    "westend asset hub": "west_asset_hub",
    "westend assethub": "west_asset_hub",
    "westend-asset-hub": "west_asset_hub",
    "west_asset_hub": "west_asset_hub",
    "polkadot asset hub": "polkadot_asset_hub",
    "polkadot assethub": "polkadot_asset_hub",
    "polkadot-asset-hub": "polkadot_asset_hub",
    "polkadot_asset_hub": "polkadot_asset_hub",
    "kusama asset hub": "kusama_asset_hub",
    "kusama assethub": "kusama_asset_hub",
    "kusama-asset-hub": "kusama_asset_hub",
    "kusama_asset_hub": "kusama_asset_hub",
    "paseo asset hub": "paseo_asset_hub",
    "paseo assethub": "paseo_asset_hub",
    "paseo-asset-hub": "paseo_asset_hub",
    "paseo_asset_hub": "paseo_asset_hub",
    "polkadot": "polkadot",
    "kusama": "kusama",
    "westend": "west",
    "west": "west",
    "paseo": "paseo",
}

# Checked in order: asset hubs before relay chains
_RELAY_KEYWORDS = [("paseo", "paseo"), ("westend", "west"), ("west", "west"), ("polkadot", "polkadot"), ("kusama", "kusama")]


class ChainNotInitializedError(LookupError):
    pass


def resolve_chain_id(chain_name: Optional[str], default: str = "west_asset_hub") -> str:
    """Map a wallet-reported chain name to a chain id."""

    if not chain_name:
        return default

    normalized = chain_name.lower().strip()
    if normalized in CHAIN_MAPPING:
        return CHAIN_MAPPING[normalized]

    is_hub = "asset" in normalized or "hub" in normalized
    for keyword, relay in _RELAY_KEYWORDS:
        if keyword in normalized:
            return f"{relay}_asset_hub" if is_hub else relay

    return default


def map_to_relay_chain(chain_id: str) -> str:
    """Asset hub ids map to their relay chain; relay ids map to themselves."""

    return chain_id[: -len("_asset_hub")] if chain_id.endswith("_asset_hub") else chain_id


class ChainConnections:
    """The chains this session may use, and which of them are initialized."""

    def __init__(self, snapshot: Dict[str, Dict], *, initialized: Optional[List[str]] = None):

        self._snapshot = snapshot
        self._apis: Dict[str, ChainState] = {}

        for chain_id in initialized or []:
            self.initialize_api(chain_id)

    @classmethod
    def from_file(cls, path: Path = SNAPSHOT_PATH, **kwargs) -> "ChainConnections":

        return cls(load_snapshot(path), **kwargs)

    def known_chains(self) -> List[str]:

        return list(self._snapshot)

    def is_initialized(self, chain_id: str) -> bool:

        return chain_id in self._apis

    def initialize_api(self, chain_id: str) -> ChainState:
        """Connect to `chain_id`. Idempotent."""

        if chain_id in self._apis:
            return self._apis[chain_id]
        if chain_id not in self._snapshot:
            raise ValueError(f"Unknown chain '{chain_id}'. Known chains: {', '.join(self.known_chains())}")

        logger.info("Initializing API for chain: %s", chain_id)
        state = ChainState(chain_id, copy.deepcopy(self._snapshot[chain_id]))
        self._apis[chain_id] = state

        return state

    def get_api(self, chain_id: str) -> ChainState:

        try:
            return self._apis[chain_id]
        except KeyError:
            raise ChainNotInitializedError(chain_id) from None
