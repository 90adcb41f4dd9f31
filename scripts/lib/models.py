"""
Data models for multi-chain address checks.

This module defines the chain descriptors consumed by the scanner, the
per-endpoint AddressInfo record and the ChainResult rows of the final report.
"""

from dataclasses import dataclass
from typing import List, Tuple


# CSV column order for output
CSV_COLUMNS = [
    "chain_id",
    "chain_name",
    "symbol",
    "balance",
    "tx_count",
    "is_contract",
    "has_activity",
    "explorer_url",
]


@dataclass(frozen=True)
class ChainDescriptor:
    """
    Static description of one EVM chain.

    rpc_urls is ordered by preference; the scanner tries them in this order.
    """

    chain_id: int
    name: str
    symbol: str
    rpc_urls: Tuple[str, ...] = ()
    explorer_url: str = ""
    is_testnet: bool = False


@dataclass
class AddressInfo:
    """Address state reported by a single RPC endpoint."""

    balance_wei: str = ""  # Hex string. Empty means the endpoint gave no answer
    balance_eth: str = "0"
    tx_count: int = 0
    is_contract: bool = False
    has_token_activity: bool = False  # Only checked for non-contracts

    @property
    def responded(self) -> bool:
        return self.balance_wei != ""


@dataclass(frozen=True)
class ChainResult:
    """One row of the aggregated multi-chain report."""

    chain_id: int
    chain_name: str
    symbol: str
    balance_eth: str
    tx_count: int
    is_contract: bool
    has_activity: bool  # balance > 0 OR tx_count > 0
    explorer_url: str = ""

    def to_csv_row(self) -> List[str]:
        """Convert result to a CSV row (list of strings)."""
        return [
            str(self.chain_id),
            self.chain_name,
            self.symbol,
            self.balance_eth,
            str(self.tx_count),
            "true" if self.is_contract else "false",
            "true" if self.has_activity else "false",
            self.explorer_url,
        ]
