"""
Unit tests for the data models.

Tests follow the Given/When/Then pattern for clarity.
"""

import dataclasses

import pytest

from scripts.lib.models import AddressInfo, ChainDescriptor, ChainResult, CSV_COLUMNS


class TestAddressInfo:
    """Tests for the AddressInfo model."""

    def test_defaults_signal_no_response(self):
        """
        Given a freshly created AddressInfo
        When inspecting its fields
        Then it should carry the "no answer" defaults
        """
        # When
        info = AddressInfo()

        # Then
        assert info.balance_wei == ""
        assert info.balance_eth == "0"
        assert info.tx_count == 0
        assert info.is_contract is False
        assert info.has_token_activity is False
        assert info.responded is False

    def test_zero_balance_counts_as_response(self):
        """
        Given an AddressInfo with an explicit zero balance
        When checking whether the endpoint responded
        Then it should be treated as a response
        """
        # When
        info = AddressInfo(balance_wei="0x0")

        # Then
        assert info.responded is True


class TestChainDescriptor:
    """Tests for the ChainDescriptor model."""

    def test_is_immutable(self):
        """
        Given a ChainDescriptor
        When trying to change a field
        Then a FrozenInstanceError should be raised
        """
        # Given
        chain = ChainDescriptor(chain_id=1, name="Ethereum Mainnet", symbol="ETH")

        # When / Then
        with pytest.raises(dataclasses.FrozenInstanceError):
            chain.name = "Other"  # type: ignore[misc]

    def test_defaults(self):
        """
        Given a ChainDescriptor with only required fields
        When inspecting optional fields
        Then they should default to empty/mainnet
        """
        # When
        chain = ChainDescriptor(chain_id=10, name="OP Mainnet", symbol="ETH")

        # Then
        assert chain.rpc_urls == ()
        assert chain.explorer_url == ""
        assert chain.is_testnet is False


class TestChainResult:
    """Tests for the ChainResult model."""

    def test_to_csv_row_follows_column_order(self):
        """
        Given a ChainResult
        When converting to a CSV row
        Then values should follow CSV_COLUMNS order as strings
        """
        # Given
        result = ChainResult(
            chain_id=1,
            chain_name="Ethereum Mainnet",
            symbol="ETH",
            balance_eth="1.5",
            tx_count=42,
            is_contract=False,
            has_activity=True,
            explorer_url="https://etherscan.io",
        )

        # When
        row = result.to_csv_row()

        # Then
        assert len(row) == len(CSV_COLUMNS)
        assert row == [
            "1",
            "Ethereum Mainnet",
            "ETH",
            "1.5",
            "42",
            "false",
            "true",
            "https://etherscan.io",
        ]
