"""
JSON-RPC client for querying address state on an EVM node.

Every query targets one endpoint URL. Failures of any kind (transport errors,
JSON-RPC error replies, missing or mistyped results) are reported as absent
values so callers can fail over to the next endpoint.
"""

from typing import Any, Dict, List, Optional

from .hex_codec import hex_to_uint, strip_hex_prefix, wei_hex_to_eth
from .models import AddressInfo
from .transport import BaseTransport, HttpTransport, TransportError

JSONRPC_VERSION = "2.0"

# keccak256("Transfer(address,address,uint256)")
TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"

TOPIC_HEX_LEN = 64  # 32 bytes


class RpcError(Exception):
    """Exception raised when a JSON-RPC call yields no usable result."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def build_request(method: str, params: List[Any], request_id: int = 1) -> Dict[str, Any]:
    """Build a JSON-RPC 2.0 request envelope."""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "method": method,
        "params": params,
        "id": request_id,
    }


def address_to_topic(address: str) -> str:
    """
    Left-pad an address to a 32-byte log topic.

    Examples:
        address_to_topic("0xAbC...") -> "0x000000000000000000000000abc..."
    """
    return "0x" + strip_hex_prefix(address).lower().rjust(TOPIC_HEX_LEN, "0")


class RpcClient:
    """
    Address queries over JSON-RPC.

    The client holds no per-endpoint state and can be shared by concurrent
    workers as long as the transport can.
    """

    def __init__(self, transport: Optional[BaseTransport] = None):
        """
        Initialize the client.

        Args:
            transport: Transport used to reach endpoints (HttpTransport if None)
        """
        self.transport = transport or HttpTransport()

    def _request(self, url: str, method: str, params: List[Any]) -> Any:
        """
        Make a JSON-RPC request and return its 'result' member.

        Raises:
            RpcError: If the call failed or the reply carries no result
        """
        payload = build_request(method, params)

        try:
            data = self.transport.post_json(url, payload)
        except TransportError as e:
            raise RpcError(f"{method} failed: {e}", status_code=e.status_code) from e

        if not isinstance(data, dict):
            raise RpcError(f"{method} returned a malformed reply")

        if "error" in data:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcError(
                    f"API error: {error.get('message', str(error))}",
                    status_code=error.get("code"),
                )
            raise RpcError(f"API error: {error}")

        if "result" not in data:
            raise RpcError(f"{method} reply has no result")

        return data["result"]

    def get_balance(self, url: str, address: str) -> Optional[str]:
        """
        Get the native balance of an address.

        Returns:
            Balance in wei as a hex string, or None on error
        """
        try:
            result = self._request(url, "eth_getBalance", [address, "latest"])
        except RpcError:
            return None

        if isinstance(result, str):
            return result
        return None

    def get_transaction_count(self, url: str, address: str) -> Optional[int]:
        """
        Get the transaction count (nonce) of an address.

        Returns:
            Transaction count, or None on error. Unparsable hex decodes to 0.
        """
        try:
            result = self._request(url, "eth_getTransactionCount", [address, "latest"])
        except RpcError:
            return None

        if isinstance(result, str):
            return hex_to_uint(result)
        return None

    def is_contract(self, url: str, address: str) -> bool:
        """Return True if the address has deployed code. False on error."""
        try:
            result = self._request(url, "eth_getCode", [address, "latest"])
        except RpcError:
            return False

        # "0x" (or nothing) means an externally owned account
        return isinstance(result, str) and len(result) > 2

    def _has_transfer_logs(self, url: str, topics: List[Optional[str]]) -> bool:
        log_filter = {
            "fromBlock": "earliest",
            "toBlock": "latest",
            "topics": topics,
        }
        try:
            result = self._request(url, "eth_getLogs", [log_filter])
        except RpcError:
            return False

        return isinstance(result, list) and len(result) > 0

    def has_token_activity(self, url: str, address: str) -> bool:
        """
        Check whether the address ever sent or received ERC-20 tokens.

        Looks for Transfer events with the address as recipient first, then as
        sender. Returns False if neither query finds logs or both fail.
        """
        topic = address_to_topic(address)

        if self._has_transfer_logs(url, [TRANSFER_TOPIC, None, topic]):
            return True

        return self._has_transfer_logs(url, [TRANSFER_TOPIC, topic, None])

    def check_address(self, url: str, address: str) -> AddressInfo:
        """
        Collect balance, nonce and contract status for an address.

        A failed sub-query leaves its field at the default. An empty
        balance_wei on the returned record means the endpoint did not answer.
        """
        info = AddressInfo()

        balance = self.get_balance(url, address)
        if balance is not None:
            info.balance_wei = balance
            info.balance_eth = wei_hex_to_eth(balance)

        tx_count = self.get_transaction_count(url, address)
        if tx_count is not None:
            info.tx_count = tx_count

        info.is_contract = self.is_contract(url, address)

        # Log scans are expensive; contracts skip them
        if not info.is_contract:
            info.has_token_activity = self.has_token_activity(url, address)

        return info
