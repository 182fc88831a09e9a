"""
EVM transaction signing and sending using web3.py

Transactions are either signed locally with a private key (EVMSigner) or
handed to the provider's own account management via eth_sendTransaction,
which is how a browser wallet or an unlocked node account signs.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Dict, Any, Tuple

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3, HTTPProvider
from web3.exceptions import TimeExhausted
from web3.middleware import ExtraDataToPOAMiddleware

from ..errors import SignerError, TransactionError
from ..types import TxResult, EVMChain
from ..config import config as global_config

logger = logging.getLogger(__name__)


class EVMSigner:
    """
    Local EVM signer using eth_account

    Usage:
        # From private key
        signer = EVMSigner.from_private_key("0x...")

        # From environment variable
        signer = EVMSigner.from_env()

        raw_tx, tx_hash = signer.sign_transaction(tx_dict)
    """

    def __init__(self, account: LocalAccount):
        self._account = account

    @property
    def address(self) -> str:
        """Get wallet address (checksummed)"""
        return self._account.address

    def sign_transaction(self, tx_dict: Dict[str, Any]) -> Tuple[bytes, str]:
        """
        Sign a transaction

        Args:
            tx_dict: Transaction dictionary with to, data, value, gas, gasPrice, nonce, chainId

        Returns:
            (raw_tx_bytes, tx_hash_hex)
        """
        try:
            signed = self._account.sign_transaction(tx_dict)
        except (TypeError, ValueError) as e:
            raise SignerError.failed(str(e)) from e
        return signed.raw_transaction, Web3.to_hex(signed.hash)

    @classmethod
    def from_private_key(cls, private_key: str) -> "EVMSigner":
        """
        Create signer from private key

        Args:
            private_key: Hex-encoded private key (with or without 0x prefix)
        """
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key

        account = Account.from_key(private_key)
        return cls(account)

    @classmethod
    def from_env(cls, env_var: Optional[str] = None) -> "EVMSigner":
        """
        Create signer from environment variable

        Raises:
            SignerError: If environment variable is not set
        """
        env_var = env_var or global_config.signer.private_key_env
        private_key = os.getenv(env_var, "")
        if not private_key:
            raise SignerError.not_configured()

        return cls.from_private_key(private_key)

    @classmethod
    def from_keystore(cls, keystore_path: str, password: str) -> "EVMSigner":
        """Create signer from encrypted keystore JSON file"""
        with open(keystore_path, "r") as f:
            keystore = f.read()

        private_key = Account.decrypt(keystore, password)
        return cls(Account.from_key(private_key))

    def __repr__(self) -> str:
        return f"EVMSigner(address={self.address})"


def create_evm_signer(
    private_key: Optional[str] = None,
    keystore_path: Optional[str] = None,
    keystore_password: Optional[str] = None,
) -> EVMSigner:
    """
    Create EVM signer based on configuration

    Priority:
    1. private_key: Use provided private key
    2. keystore_path + keystore_password: Load from keystore file
    3. Private key environment variable (EVM_PRIVATE_KEY by default)

    Raises:
        SignerError: If no valid signer configuration found
    """
    if private_key is not None:
        return EVMSigner.from_private_key(private_key)

    keystore_path = keystore_path or global_config.signer.keystore_path or None
    if keystore_path is not None and keystore_password is not None:
        return EVMSigner.from_keystore(keystore_path, keystore_password)

    return EVMSigner.from_env()


def create_web3(
    rpc_url: str,
    chain_id: Optional[int] = None,
    timeout: Optional[float] = None,
) -> Web3:
    """
    Create Web3 instance for a chain

    Args:
        rpc_url: RPC endpoint URL
        chain_id: Chain ID. If None, detected from the RPC.
        timeout: Request timeout in seconds
    """
    timeout = timeout or global_config.chain.rpc_timeout
    web3 = Web3(HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

    if chain_id is None:
        chain_id = web3.eth.chain_id

    if chain_id in {c.value for c in EVMChain} and EVMChain(chain_id).is_poa:
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    return web3


def wait_for_success(
    web3: Web3,
    tx_hash,
    timeout: Optional[float] = None,
) -> TxResult:
    """
    Block until the transaction is mined

    Raises:
        TransactionError: If the receipt does not arrive in time or status != 1
    """
    timeout = timeout or global_config.tx.receipt_timeout
    tx_hash_hex = Web3.to_hex(tx_hash)

    try:
        receipt = web3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
    except TimeExhausted as e:
        raise TransactionError.timeout(tx_hash_hex, timeout, e) from e

    if receipt["status"] != 1:
        logger.error(f"Transaction {tx_hash_hex} reverted in block {receipt.get('blockNumber')}")
        raise TransactionError.reverted(tx_hash_hex, dict(receipt))

    return TxResult.from_receipt(tx_hash_hex, receipt)


def send_transaction(
    web3: Web3,
    tx_dict: Dict[str, Any],
    signer: Optional[EVMSigner] = None,
    wait: bool = True,
    timeout: Optional[float] = None,
) -> TxResult:
    """
    Send a transaction and (by default) wait until it is mined successfully

    With a signer the transaction is completed (nonce, chainId, gas, gasPrice),
    signed locally and broadcast raw. Without one it is passed to
    eth_sendTransaction for the provider to sign from tx_dict["from"].

    Args:
        web3: Web3 instance connected to RPC
        tx_dict: Transaction fields (from, to, data, value, gas, gasPrice...)
        signer: Optional local signer
        wait: Wait for the receipt
        timeout: Receipt timeout in seconds

    Returns:
        TxResult (PENDING when wait is False)

    Raises:
        SignerError: If tx_dict["from"] is not the signer's address
        TransactionError: If sending fails, times out or reverts
    """
    tx = {k: v for k, v in tx_dict.items() if v is not None}
    if tx.get("to"):
        tx["to"] = Web3.to_checksum_address(tx["to"])
    # Zero means "let the node decide"
    for key in ("gas", "gasPrice"):
        if key in tx and not tx[key]:
            del tx[key]

    if signer is not None:
        from_address = tx.pop("from", signer.address)
        if from_address.lower() != signer.address.lower():
            raise SignerError.address_mismatch(signer.address, from_address)

        tx.setdefault("nonce", web3.eth.get_transaction_count(signer.address, "pending"))
        tx.setdefault("chainId", web3.eth.chain_id)
        if "gas" not in tx:
            tx["gas"] = web3.eth.estimate_gas({**tx, "from": signer.address})
        if "gasPrice" not in tx and "maxFeePerGas" not in tx:
            tx["gasPrice"] = web3.eth.gas_price

        raw_tx, _ = signer.sign_transaction(tx)
        try:
            tx_hash = web3.eth.send_raw_transaction(raw_tx)
        except Exception as e:
            raise TransactionError.send_failed(e) from e
    else:
        tx["from"] = Web3.to_checksum_address(tx["from"])
        try:
            tx_hash = web3.eth.send_transaction(tx)
        except Exception as e:
            raise TransactionError.send_failed(e) from e

    logger.debug(f"Broadcast transaction {Web3.to_hex(tx_hash)}")

    if not wait:
        return TxResult.pending(Web3.to_hex(tx_hash))

    return wait_for_success(web3, tx_hash, timeout=timeout)
