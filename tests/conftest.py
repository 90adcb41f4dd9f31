"""
Pytest configuration and shared fixtures for evm-address-checker tests.
"""

import pytest

from scripts.lib.models import ChainDescriptor


@pytest.fixture
def sample_wallet_address():
    """Sample Ethereum wallet address for testing."""
    return "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"  # vitalik.eth


@pytest.fixture
def rpc_url():
    """Mock RPC endpoint URL for testing."""
    return "https://rpc.example.org"


@pytest.fixture
def sample_chains():
    """A small chain list mixing mainnets, a testnet and unusable endpoints."""
    return [
        ChainDescriptor(
            chain_id=137,
            name="Polygon Mainnet",
            symbol="POL",
            rpc_urls=("https://polygon-a.example.org", "https://polygon-b.example.org"),
            explorer_url="https://polygonscan.com",
        ),
        ChainDescriptor(
            chain_id=1,
            name="Ethereum Mainnet",
            symbol="ETH",
            rpc_urls=("https://eth.example.org",),
            explorer_url="https://etherscan.io",
        ),
        ChainDescriptor(
            chain_id=11155111,
            name="Sepolia",
            symbol="ETH",
            rpc_urls=("https://sepolia.example.org",),
            is_testnet=True,
        ),
        ChainDescriptor(
            chain_id=56,
            name="BNB Smart Chain Mainnet",
            symbol="BNB",
            rpc_urls=(
                "wss://bsc.example.org",
                "https://bsc.example.org/${API_KEY}",
            ),
        ),
    ]
