"""
Concurrent scanner that checks one address across many EVM chains.

Each chain is investigated by trying its usable RPC endpoints in order until
one answers. Chains are spread over a fixed pool of worker threads that pull
work from a shared index and append results to a shared, lock-protected list.
The final report is sorted by chain ID.
"""

import sys
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence, TextIO, Tuple

from .models import AddressInfo, ChainDescriptor, ChainResult
from .rpc_client import RpcClient

DEFAULT_WORKER_COUNT = 8

HTTP_SCHEMES = ("http://", "https://")


def is_usable_endpoint(url: str) -> bool:
    """
    Return True if the endpoint can be queried over plain HTTP(S).

    WebSocket URLs and URLs with unresolved template placeholders such as
    "${INFURA_API_KEY}" or "{API_KEY}" are skipped.
    """
    if not url.lower().startswith(HTTP_SCHEMES):
        return False
    return "{" not in url


def has_activity(info: AddressInfo) -> bool:
    """An address is active on a chain if it holds a balance or has sent transactions."""
    return info.balance_eth != "0" or info.tx_count > 0


class ProgressReporter:
    """Writes progress lines from concurrent workers one at a time."""

    def __init__(self, stream: Optional[TextIO] = None, enabled: bool = True):
        self.stream = stream
        self.enabled = enabled
        self.lock = threading.Lock()

    def write(self, message: str) -> None:
        if not self.enabled:
            return
        with self.lock:
            self.emit_unlocked(message)

    def emit_unlocked(self, message: str) -> None:
        """Write without taking the lock. The caller must hold self.lock."""
        stream = self.stream or sys.stderr
        print(message, file=stream, flush=True)


@dataclass(frozen=True)
class ScanTarget:
    """A chain selected for scanning together with its usable endpoints."""

    index: int  # 1-based position in the input list, for display only
    chain: ChainDescriptor
    endpoints: Tuple[str, ...]


class ScanContext:
    """
    State shared by the workers of a single scan.

    Owns the work claim index, the completed counter and the result list.
    Targets are read-only; results are only ever appended.
    """

    def __init__(self, targets: Sequence[ScanTarget], reporter: ProgressReporter):
        self.targets = list(targets)
        self.total = len(self.targets)
        self.reporter = reporter
        self.completed = 0
        self._next_index = 0
        self._claim_lock = threading.Lock()
        self._results: List[ChainResult] = []
        self._results_lock = threading.Lock()

    def claim_next(self) -> Optional[ScanTarget]:
        """Claim the next unprocessed target, or None when the queue is exhausted."""
        with self._claim_lock:
            if self._next_index >= self.total:
                return None
            target = self.targets[self._next_index]
            self._next_index += 1
        return target

    def add_result(self, result: ChainResult) -> None:
        with self._results_lock:
            self._results.append(result)

    def mark_completed(self, target: ScanTarget, outcome: str) -> None:
        """Bump the completed counter and print the update as one step."""
        with self.reporter.lock:
            self.completed += 1
            if self.reporter.enabled:
                self.reporter.emit_unlocked(
                    f"[{self.completed}/{self.total}] {target.chain.name}: {outcome}"
                )

    def sorted_results(self) -> List[ChainResult]:
        with self._results_lock:
            return sorted(self._results, key=lambda r: r.chain_id)


class MultiChainScanner:
    """
    Checks an address on every given chain using a pool of worker threads.

    Chains whose endpoints all fail are left out of the report; omission means
    "could not be confirmed", not "no activity".
    """

    def __init__(self, client: RpcClient, reporter: Optional[ProgressReporter] = None):
        """
        Initialize the scanner.

        Args:
            client: RpcClient used for every endpoint attempt
            reporter: Destination for progress lines (stderr if None)
        """
        self.client = client
        self.reporter = reporter or ProgressReporter()

    def filter_chains(
        self,
        chains: Sequence[ChainDescriptor],
        include_testnets: bool = False,
    ) -> List[ScanTarget]:
        """
        Select chains worth scanning.

        Drops testnets unless requested and chains without a usable endpoint.
        Repeated chain IDs keep only their first usable entry.
        """
        targets: List[ScanTarget] = []
        seen_ids = set()

        for position, chain in enumerate(chains, start=1):
            if chain.is_testnet and not include_testnets:
                continue

            endpoints = tuple(url for url in chain.rpc_urls if is_usable_endpoint(url))
            if not endpoints or chain.chain_id in seen_ids:
                continue

            seen_ids.add(chain.chain_id)
            targets.append(ScanTarget(index=position, chain=chain, endpoints=endpoints))

        return targets

    def resolve_chain(
        self,
        target: ScanTarget,
        address: str,
    ) -> Optional[Tuple[AddressInfo, str]]:
        """
        Query the chain's endpoints in order until one answers.

        Returns:
            (AddressInfo, endpoint URL) from the first responding endpoint,
            or None if every endpoint failed
        """
        for url in target.endpoints:
            self.reporter.write(f"[#{target.index}] {target.chain.name} -> {url}")

            info = self.client.check_address(url, address)
            if info.responded:
                return info, url

            self.reporter.write("  (no response, trying next RPC...)")

        return None

    def _process(
        self,
        context: ScanContext,
        target: ScanTarget,
        address: str,
        only_with_activity: bool,
    ) -> None:
        resolved = self.resolve_chain(target, address)
        if resolved is None:
            context.mark_completed(target, "no endpoint responded")
            return

        info, url = resolved
        active = has_activity(info)

        if only_with_activity and not active:
            context.mark_completed(target, "no activity")
            return

        chain = target.chain
        context.add_result(
            ChainResult(
                chain_id=chain.chain_id,
                chain_name=chain.name,
                symbol=chain.symbol,
                balance_eth=info.balance_eth or "0",
                tx_count=info.tx_count,
                is_contract=info.is_contract,
                has_activity=active,
                explorer_url=chain.explorer_url,
            )
        )
        context.mark_completed(
            target, f"{info.balance_eth} {chain.symbol}, {info.tx_count} tx via {url}"
        )

    def _worker_loop(self, context: ScanContext, address: str, only_with_activity: bool) -> None:
        while True:
            target = context.claim_next()
            if target is None:
                return
            try:
                self._process(context, target, address, only_with_activity)
            except Exception as exc:
                context.mark_completed(target, f"error: {exc}")

    def scan(
        self,
        address: str,
        chains: Sequence[ChainDescriptor],
        include_testnets: bool = False,
        only_with_activity: bool = True,
        worker_count: int = DEFAULT_WORKER_COUNT,
    ) -> List[ChainResult]:
        """
        Scan an address across chains.

        Args:
            address: EVM address (0x...)
            chains: Chains to check, endpoints in preference order
            include_testnets: Also scan testnet chains
            only_with_activity: Drop chains with zero balance and zero nonce
            worker_count: Number of worker threads (capped at the chain count)

        Returns:
            At most one ChainResult per chain, sorted by chain_id

        Raises:
            ValueError: If worker_count is less than 1
        """
        if worker_count < 1:
            raise ValueError(f"worker_count must be at least 1, got {worker_count}")

        targets = self.filter_chains(chains, include_testnets)
        if not targets:
            self.reporter.write("No chains with usable RPC endpoints to scan.")
            return []

        context = ScanContext(targets, self.reporter)
        pool_size = min(worker_count, context.total)
        self.reporter.write(f"Scanning {context.total} chain(s) with {pool_size} worker(s)...")

        workers = [
            threading.Thread(
                target=self._worker_loop,
                args=(context, address, only_with_activity),
                name=f"chain-scan-{i}",
                daemon=True,
            )
            for i in range(pool_size)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        self.reporter.write("\nScan complete.")

        return context.sorted_results()
