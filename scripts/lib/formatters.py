"""
Output formatters for multi-chain address reports.

This module renders scan results as a fixed-width table, lists known chains,
and writes CSV exports with timestamp-based filenames.
"""

import csv
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from .models import CSV_COLUMNS, ChainDescriptor, ChainResult

TABLE_WIDTH = 80
NAME_WIDTH = 25
BALANCE_WIDTH = 25


def _truncate_name(name: str) -> str:
    if len(name) > NAME_WIDTH - 1:
        return name[: NAME_WIDTH - 4] + "..."
    return name


def format_results_table(results: Sequence[ChainResult]) -> str:
    """
    Render scan results as a table.

    Args:
        results: ChainResult rows, already sorted

    Returns:
        Multi-line table text (no trailing newline)
    """
    if not results:
        return "No activity found on any chain."

    rule = "-" * TABLE_WIDTH
    lines = [
        f"Found activity on {len(results)} chain(s):",
        rule,
        f"{'ChainID':<8}{'Network':<{NAME_WIDTH}}{'Symbol':<8}{'Balance':<{BALANCE_WIDTH}}{'TX Count':<10}",
        rule,
    ]

    for r in results:
        balance = f"{r.balance_eth} {r.symbol}"[: BALANCE_WIDTH - 1]
        lines.append(
            f"{r.chain_id:<8}{_truncate_name(r.chain_name):<{NAME_WIDTH}}"
            f"{r.symbol:<8}{balance:<{BALANCE_WIDTH}}{r.tx_count:<10}"
        )

    lines.append(rule)
    return "\n".join(lines)


def format_chain_list(chains: Sequence[ChainDescriptor]) -> str:
    """Render the known chains, one per line."""
    lines = [f"Supported EVM Chains ({len(chains)})", "-" * 50]
    for chain in chains:
        network_type = "Testnet" if chain.is_testnet else "Mainnet"
        lines.append(f"{chain.chain_id:<12}{chain.name:<18}{chain.symbol:<6}{network_type}")
    return "\n".join(lines)


def generate_timestamp() -> str:
    """
    Generate a timestamp string for filenames.

    Returns:
        Timestamp in YYYYMMDD_HHMMSS format
    """
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def generate_filename(base_path: str, timestamp: Optional[str] = None) -> str:
    """
    Generate a timestamped filename for a CSV export.

    Examples:
        generate_filename("chains.csv", "20241214_153022")
        -> "chains_20241214_153022.csv"
    """
    if timestamp is None:
        timestamp = generate_timestamp()

    path = Path(base_path)
    suffix = path.suffix or ".csv"
    return str(path.parent / f"{path.stem}_{timestamp}{suffix}")


def write_csv_to_stream(results: List[ChainResult], stream: TextIO) -> None:
    """
    Write results to a CSV stream.

    Args:
        results: List of ChainResult objects to write
        stream: File-like object to write to
    """
    writer = csv.writer(stream)
    writer.writerow(CSV_COLUMNS)

    for result in results:
        writer.writerow(result.to_csv_row())


def write_csv(results: List[ChainResult], output_path: Optional[str] = None) -> Optional[str]:
    """
    Write results to a CSV file or stdout.

    Returns:
        The written file path if output_path was given, otherwise None
    """
    if output_path is None:
        write_csv_to_stream(results, sys.stdout)
        return None

    output_file = generate_filename(output_path)
    with open(output_file, "w", newline="", encoding="utf-8") as f:
        write_csv_to_stream(results, f)

    return output_file
