"""Chain client adapter for anonvote-ops.

Flows depend on the `ChainClient` protocol only; `Web3ChainClient` is the
web3.py-backed implementation used by the command-line tools.
"""

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol, Sequence

import requests
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import Web3Exception

from .exceptions import ChainError

LOGGER = logging.getLogger(__name__)

# Errors raised by web3.py, its HTTP transport and older RPC error paths
_RPC_ERRORS = (Web3Exception, requests.RequestException, ValueError)


@dataclass(frozen=True)
class TransactionResult:
    """Confirmed transaction."""

    transaction_hash: str
    block_number: int
    contract_address: Optional[str] = None


class ChainClient(Protocol):
    """Operations the deployment, inspection and simulation flows rely on."""

    def signers(self) -> List[str]: ...

    def get_balance(self, address: str) -> int: ...

    def block_number(self) -> int: ...

    def chain_id(self) -> int: ...

    def deploy(
        self,
        abi: List[Dict[str, Any]],
        bytecode: str,
        args: Sequence[Any] = (),
        sender: Optional[str] = None,
    ) -> TransactionResult: ...

    def call(
        self, address: str, abi: List[Dict[str, Any]], function: str, *args: Any
    ) -> Any: ...

    def transact(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function: str,
        *args: Any,
        sender: Optional[str] = None,
    ) -> TransactionResult: ...

    def wait_for_confirmations(self, transaction_hash: str, confirmations: int) -> None: ...


def _hex(value: Any) -> str:
    return value if isinstance(value, str) else Web3.to_hex(value)


def format_ether(wei: int) -> str:
    """Render a wei amount in ether."""
    value = Decimal(wei) / Decimal(10**18)
    return format(value.normalize(), "f") if value else "0.0"


class Web3ChainClient:
    """ChainClient backed by a web3.py HTTP provider."""

    def __init__(
        self,
        w3: Web3,
        private_key: Optional[str] = None,
        receipt_timeout: float = 120,
        poll_interval: float = 2.0,
    ):
        """
        Initialize the client.

        Args:
            w3: Connected Web3 instance
            private_key: Signing key; when None, node-managed accounts are used
            receipt_timeout: Seconds to wait for each transaction receipt
            poll_interval: Seconds between block-number polls while waiting
                           for confirmations
        """
        self._w3 = w3
        self._receipt_timeout = receipt_timeout
        self._poll_interval = poll_interval
        self._local_accounts: Dict[str, LocalAccount] = {}
        if private_key:
            account = Account.from_key(private_key)
            self._local_accounts[account.address] = account

    @classmethod
    def from_rpc_url(
        cls, rpc_url: str, private_key: Optional[str] = None, timeout: int = 30
    ) -> "Web3ChainClient":
        """Connect to an HTTP JSON-RPC endpoint."""
        w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
        return cls(w3, private_key=private_key)

    def signers(self) -> List[str]:
        if self._local_accounts:
            return list(self._local_accounts)
        try:
            return [Web3.to_checksum_address(a) for a in self._w3.eth.accounts]
        except _RPC_ERRORS as e:
            raise ChainError(f"Failed to list accounts: {e}") from e

    def get_balance(self, address: str) -> int:
        try:
            return int(self._w3.eth.get_balance(Web3.to_checksum_address(address)))
        except _RPC_ERRORS as e:
            raise ChainError(f"Failed to get balance of {address}: {e}") from e

    def block_number(self) -> int:
        try:
            return int(self._w3.eth.block_number)
        except _RPC_ERRORS as e:
            raise ChainError(f"Failed to get block number: {e}") from e

    def chain_id(self) -> int:
        try:
            return int(self._w3.eth.chain_id)
        except _RPC_ERRORS as e:
            raise ChainError(f"Failed to get chain id: {e}") from e

    def deploy(
        self,
        abi: List[Dict[str, Any]],
        bytecode: str,
        args: Sequence[Any] = (),
        sender: Optional[str] = None,
    ) -> TransactionResult:
        sender = self._resolve_sender(sender)
        factory = self._w3.eth.contract(abi=abi, bytecode=bytecode)
        try:
            tx_hash = self._send(factory.constructor(*args), sender)
        except _RPC_ERRORS as e:
            raise ChainError(f"Contract deployment failed: {e}") from e

        result = self._wait_for_receipt(tx_hash)
        if result.contract_address is None:
            raise ChainError(
                f"Deployment receipt {result.transaction_hash} has no contract address"
            )
        return result

    def call(
        self, address: str, abi: List[Dict[str, Any]], function: str, *args: Any
    ) -> Any:
        contract = self._w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        try:
            return getattr(contract.functions, function)(*args).call()
        except _RPC_ERRORS as e:
            raise ChainError(f"Call {function} failed: {e}") from e

    def transact(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function: str,
        *args: Any,
        sender: Optional[str] = None,
    ) -> TransactionResult:
        sender = self._resolve_sender(sender)
        contract = self._w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        try:
            tx_hash = self._send(getattr(contract.functions, function)(*args), sender)
        except _RPC_ERRORS as e:
            raise ChainError(f"Transaction {function} failed: {e}") from e
        return self._wait_for_receipt(tx_hash)

    def wait_for_confirmations(self, transaction_hash: str, confirmations: int) -> None:
        """Block until the transaction is buried under `confirmations` blocks."""
        receipt = self._wait_for_receipt(transaction_hash)
        target = receipt.block_number + confirmations - 1
        while self.block_number() < target:
            LOGGER.debug("Waiting for block %d (confirmations=%d)", target, confirmations)
            time.sleep(self._poll_interval)

    def _resolve_sender(self, sender: Optional[str]) -> str:
        if sender is not None:
            return Web3.to_checksum_address(sender)
        signers = self.signers()
        if not signers:
            raise ChainError("No signer available")
        return signers[0]

    def _send(self, call: Any, sender: str) -> Any:
        account = self._local_accounts.get(sender)
        if account is None:
            # Node-managed account (hardhat node, ganache)
            return call.transact({"from": sender})

        tx = call.build_transaction(
            {
                "from": sender,
                "nonce": self._w3.eth.get_transaction_count(sender, "pending"),
            }
        )
        signed = account.sign_transaction(tx)
        return self._w3.eth.send_raw_transaction(signed.raw_transaction)

    def _wait_for_receipt(self, tx_hash: Any) -> TransactionResult:
        try:
            receipt = self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout
            )
        except _RPC_ERRORS as e:
            raise ChainError(f"Failed waiting for transaction {_hex(tx_hash)}: {e}") from e

        tx_hex = _hex(receipt["transactionHash"])
        if receipt["status"] != 1:
            raise ChainError(f"Transaction {tx_hex} reverted")

        return TransactionResult(
            transaction_hash=tx_hex,
            block_number=int(receipt["blockNumber"]),
            contract_address=receipt.get("contractAddress"),
        )
