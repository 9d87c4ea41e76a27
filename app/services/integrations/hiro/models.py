"""Hiro API specific data models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class ChainTip:
    """Current chain tip information."""

    block_height: int
    block_hash: str = ""
    index_block_hash: str = ""
    burn_block_height: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChainTip":
        return cls(
            block_height=int(data.get("block_height", 0)),
            block_hash=data.get("block_hash", "") or "",
            index_block_hash=data.get("index_block_hash", "") or "",
            burn_block_height=data.get("burn_block_height"),
        )


@dataclass
class HiroApiInfo:
    """Hiro API server information from the ``/extended`` status endpoint."""

    server_version: str
    status: str
    chain_tip: Optional[ChainTip] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HiroApiInfo":
        # Some deployments only include a subset of fields
        chain_tip = data.get("chain_tip")
        return cls(
            server_version=data.get("server_version", "") or "",
            status=data.get("status", "") or "",
            chain_tip=(
                ChainTip.from_dict(chain_tip) if isinstance(chain_tip, Mapping) else None
            ),
        )


@dataclass
class AddressTransactionsPage:
    """One page of ``/extended/v1/address/{principal}/transactions``."""

    limit: int
    offset: int
    total: int
    results: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AddressTransactionsPage":
        results = data.get("results")
        return cls(
            limit=int(data.get("limit", 0)),
            offset=int(data.get("offset", 0)),
            total=int(data.get("total", 0)),
            results=[tx for tx in results if isinstance(tx, dict)]
            if isinstance(results, list)
            else [],
        )
