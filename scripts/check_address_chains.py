#!/usr/bin/env python3
"""
Check an EVM address and find the chains it is active on.

This script validates an address (optionally verifying or fixing its EIP-55
checksum) and can scan every known EVM chain concurrently for balances and
transaction counts, printing a table of the chains with activity.
"""

import argparse
import sys
from typing import List, Optional

from scripts.lib import address as addr
from scripts.lib.chain_registry import ChainRegistry, ChainRegistryError, DEFAULT_RPCS_FILE
from scripts.lib.formatters import format_chain_list, format_results_table, write_csv
from scripts.lib.models import ChainResult
from scripts.lib.multi_chain_scanner import DEFAULT_WORKER_COUNT, MultiChainScanner
from scripts.lib.rpc_client import RpcClient
from scripts.lib.transport import DEFAULT_TIMEOUT, HttpTransport


def log(message: str) -> None:
    """Log a status message to stderr."""
    print(message, file=sys.stderr)


def positive_int(value: str) -> int:
    """argparse type for a strictly positive integer."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def positive_float(value: str) -> float:
    """argparse type for a strictly positive number of seconds."""
    number = float(value)
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def run_scan(
    address: str,
    registry: ChainRegistry,
    include_testnets: bool,
    only_with_activity: bool,
    worker_count: int,
    timeout: float,
) -> List[ChainResult]:
    """
    Scan the address on every chain in the registry.

    Returns:
        ChainResult rows sorted by chain ID
    """
    transport = HttpTransport(timeout=timeout, pool_size=worker_count)
    try:
        scanner = MultiChainScanner(RpcClient(transport))
        return scanner.scan(
            address,
            registry.get_all(),
            include_testnets=include_testnets,
            only_with_activity=only_with_activity,
            worker_count=worker_count,
        )
    finally:
        transport.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate an EVM address and check its activity across chains.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate and print the checksummed form
  %(prog)s 0x... --fix

  # Scan all mainnets for balances and transactions
  %(prog)s 0x... --scan --workers 16

  # Refresh the RPC list from chainlist.org and list chains
  %(prog)s --update-rpcs --list-chains
        """,
    )

    parser.add_argument("address", nargs="?", help="EVM address (0x...)")
    parser.add_argument("-c", "--checksum", action="store_true", help="Verify EIP-55 checksum")
    parser.add_argument("-f", "--fix", action="store_true", help="Output checksummed address")
    parser.add_argument("-l", "--list-chains", action="store_true", help="List supported chains")
    parser.add_argument(
        "-u", "--update-rpcs", action="store_true", help="Update RPCs from chainlist.org"
    )
    parser.add_argument(
        "-s", "--scan", action="store_true", help="Scan all chains for balance and transactions"
    )
    parser.add_argument("--testnets", action="store_true", help="Include testnet chains in the scan")
    parser.add_argument(
        "--all",
        action="store_true",
        help="Report every chain that answered, not only chains with activity",
    )
    parser.add_argument(
        "--workers",
        type=positive_int,
        default=DEFAULT_WORKER_COUNT,
        help=f"Concurrent chain workers (default: {DEFAULT_WORKER_COUNT})",
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--rpcs-file",
        default=str(DEFAULT_RPCS_FILE),
        help=f"Cached chainlist file (default: {DEFAULT_RPCS_FILE})",
    )
    parser.add_argument(
        "--output",
        help="Also write scan results as CSV (timestamp auto-appended).",
    )

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    registry = ChainRegistry(parsed_args.rpcs_file)
    needs_chains = parsed_args.list_chains or parsed_args.update_rpcs or parsed_args.scan

    if parsed_args.update_rpcs:
        log("Fetching RPCs from chainlist.org...")
        try:
            log(f"RPCs saved to {registry.update()}")
        except ChainRegistryError as e:
            if not registry.rpcs_file.exists():
                log(f"Error initializing chain registry: {e}")
                return 1
            log(f"Warning: {e}. Using cached {registry.rpcs_file}")

    if needs_chains:
        try:
            registry.load()
        except ChainRegistryError as e:
            log(f"Error initializing chain registry: {e}")
            return 1

    if parsed_args.list_chains:
        print(format_chain_list(registry.get_all()))
        return 0

    if parsed_args.address is None:
        if parsed_args.update_rpcs:
            return 0
        parser.print_usage(sys.stderr)
        return 1

    address = parsed_args.address

    if not addr.is_valid(address):
        log("Error: Invalid address format")
        return 1

    print("Valid EVM address")

    if addr.is_zero(address):
        print("Warning: Zero address (burn)")

    if parsed_args.checksum:
        if addr.verify_checksum(address):
            print("Valid checksum")
        else:
            print("Invalid checksum")
            return 1

    if parsed_args.fix:
        print(addr.to_checksum(address))

    if parsed_args.scan:
        results = run_scan(
            address,
            registry,
            include_testnets=parsed_args.testnets,
            only_with_activity=not parsed_args.all,
            worker_count=parsed_args.workers,
            timeout=parsed_args.timeout,
        )
        print(format_results_table(results))

        if parsed_args.output:
            output_file = write_csv(results, parsed_args.output)
            log(f"\nResults written to: {output_file}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
