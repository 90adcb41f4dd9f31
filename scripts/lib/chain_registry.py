"""
Registry of EVM chains and their public RPC endpoints.

Chain metadata comes from chainlist.org's rpcs.json, cached on disk. The file
is downloaded on first use or on demand and parsed into ChainDescriptor
records.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from .models import ChainDescriptor

CHAINLIST_RPCS_URL = "https://chainlist.org/rpcs.json"
DEFAULT_RPCS_FILE = Path("data") / "rpcs.json"
DEFAULT_SYMBOL = "ETH"
DOWNLOAD_TIMEOUT = 30.0  # seconds


class ChainRegistryError(Exception):
    """Exception raised when chain data cannot be fetched or read."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _rpc_urls(entry: Dict[str, Any]) -> List[str]:
    """Extract endpoint URLs, which may be plain strings or {"url": ...} objects."""
    urls: List[str] = []
    for rpc in entry.get("rpc") or []:
        if isinstance(rpc, str):
            urls.append(rpc)
        elif isinstance(rpc, dict) and rpc.get("url"):
            urls.append(rpc["url"])
    return urls


def _explorer_url(entry: Dict[str, Any]) -> str:
    explorers = entry.get("explorers") or []
    if explorers and isinstance(explorers[0], dict):
        return explorers[0].get("url", "")
    return entry.get("infoURL") or ""


def parse_chain(entry: Dict[str, Any]) -> Optional[ChainDescriptor]:
    """
    Convert one chainlist entry to a ChainDescriptor.

    Returns:
        ChainDescriptor, or None for entries without a numeric chain ID
    """
    try:
        chain_id = int(entry.get("chainId") or 0)
    except (TypeError, ValueError):
        return None
    if not chain_id:
        return None

    native = entry.get("nativeCurrency")
    if not isinstance(native, dict):
        native = {}

    return ChainDescriptor(
        chain_id=chain_id,
        name=entry.get("name") or "Unknown",
        symbol=native.get("symbol") or DEFAULT_SYMBOL,
        rpc_urls=tuple(_rpc_urls(entry)),
        explorer_url=_explorer_url(entry),
        is_testnet=bool(entry.get("isTestnet", False)),
    )


def parse_chains(data: Any) -> List[ChainDescriptor]:
    """Parse a chainlist rpcs.json document."""
    if not isinstance(data, list):
        raise ChainRegistryError("Chain data must be a JSON array")

    chains: List[ChainDescriptor] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        chain = parse_chain(entry)
        if chain is not None:
            chains.append(chain)
    return chains


class ChainRegistry:
    """
    Lookup of known chains, backed by a cached chainlist file.

    Chains are read-only once loaded; scans receive them as-is.
    """

    def __init__(
        self,
        rpcs_file: Union[str, Path] = DEFAULT_RPCS_FILE,
        source_url: str = CHAINLIST_RPCS_URL,
    ):
        self.rpcs_file = Path(rpcs_file)
        self.source_url = source_url
        self._chains: List[ChainDescriptor] = []

    def update(self) -> Path:
        """
        Download the chain list and write it to the cache file.

        Returns:
            Path of the written file

        Raises:
            ChainRegistryError: If the download fails or is not a chain list.
                The existing cache file is left untouched in that case.
        """
        try:
            response = requests.get(self.source_url, timeout=DOWNLOAD_TIMEOUT)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise ChainRegistryError(
                f"Failed to fetch RPCs: {e}",
                status_code=e.response.status_code if e.response is not None else None,
            ) from e
        except requests.RequestException as e:
            raise ChainRegistryError(f"Failed to fetch RPCs: {e}") from e

        try:
            parse_chains(response.json())
        except ValueError as e:
            raise ChainRegistryError(f"Failed to fetch RPCs: response is not JSON: {e}") from e

        self.rpcs_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.rpcs_file.with_name(self.rpcs_file.name + ".tmp")
        tmp_file.write_bytes(response.content)
        os.replace(tmp_file, self.rpcs_file)
        return self.rpcs_file

    def load(self, force_update: bool = False) -> List[ChainDescriptor]:
        """
        Load chains from the cache file, downloading it first if needed.

        A failed forced update falls back to the existing cache file with a
        warning on stderr.

        Args:
            force_update: Re-download even if the cache file exists

        Raises:
            ChainRegistryError: If no cache exists and the download fails, or
                the file cannot be parsed
        """
        if not self.rpcs_file.exists():
            self.update()
        elif force_update:
            try:
                self.update()
            except ChainRegistryError as e:
                print(f"Warning: {e}. Using cached {self.rpcs_file}", file=sys.stderr)

        try:
            with open(self.rpcs_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ChainRegistryError(f"Cannot read {self.rpcs_file}: {e}") from e

        self._chains = parse_chains(data)
        return self._chains

    def get_all(self) -> List[ChainDescriptor]:
        return list(self._chains)

    def get_by_id(self, chain_id: int) -> Optional[ChainDescriptor]:
        for chain in self._chains:
            if chain.chain_id == chain_id:
                return chain
        return None

    def get_by_name(self, name: str) -> Optional[ChainDescriptor]:
        """Find a chain by name, ignoring case."""
        wanted = name.lower()
        for chain in self._chains:
            if chain.name.lower() == wanted:
                return chain
        return None

    def count(self) -> int:
        return len(self._chains)
