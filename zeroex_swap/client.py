"""
ZeroExClient - entry point for swapping tokens through the 0x Swap API

Wires together the web3 connection, the signer, the 0x API client and the
functional modules (swap, wallet).
"""

from __future__ import annotations

import os
from typing import Callable, Dict, Optional, Union, TYPE_CHECKING

from web3 import Web3

from .config import config
from .errors import ConfigurationError
from .infra.erc20 import ERC20Token, Amount
from .infra.evm_signer import EVMSigner, create_web3
from .protocols.zeroex import ZeroExAPI
from .types import SwapResult, EVMChain, resolve_token_address, is_native_token

if TYPE_CHECKING:
    from .modules.swap import SwapModule
    from .modules.wallet import WalletModule


class ZeroExClient:
    """
    0x swap client

    Provides access to:
    - swap: balance check, allowance, quote and swap execution
    - wallet: balances and transfers

    Usage:
        client = ZeroExClient(
            rpc_url="https://kovan.infura.io/v3/<key>",
            chain_id=42,
            private_key="0x...",
        )
        result = client.perform_swap(buy="WETH", sell="DAI", amount=Decimal("20"))

        # Provider-managed account (node or wallet signs eth_sendTransaction)
        client = ZeroExClient(rpc_url=..., from_address="0xMyAddress")
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        chain_id: Optional[int] = None,
        signer: Optional[EVMSigner] = None,
        private_key: Optional[str] = None,
        from_address: Optional[str] = None,
        api_key: Optional[str] = None,
        web3: Optional[Web3] = None,
        api: Optional[ZeroExAPI] = None,
        alert: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize ZeroExClient

        Args:
            rpc_url: RPC endpoint URL (defaults to ETH_RPC_URL)
            chain_id: Chain ID (defaults to CHAIN_ID, Kovan)
            signer: Local signer
            private_key: Hex private key, used when no signer is given
            from_address: Taker address when the provider signs transactions
            api_key: 0x API key (defaults to ZEROEX_API_KEY)
            web3: Pre-built Web3 instance (skips rpc_url)
            api: Pre-built 0x API client
            alert: Callback for user-facing alerts
        """
        self._chain_id = EVMChain.from_value(
            chain_id if chain_id is not None else config.chain.chain_id
        ).value

        if web3 is None:
            rpc_url = rpc_url or config.chain.rpc_url
            if not rpc_url:
                raise ConfigurationError.missing("ETH_RPC_URL", "Pass rpc_url or set ETH_RPC_URL.")
            web3 = create_web3(rpc_url, self._chain_id)
        self._web3 = web3

        if signer is None and private_key is not None:
            signer = EVMSigner.from_private_key(private_key)
        if signer is None and os.getenv(config.signer.private_key_env):
            signer = EVMSigner.from_env()
        self._signer = signer

        if self._signer is not None:
            self._address = self._signer.address
        elif from_address:
            self._address = Web3.to_checksum_address(from_address)
        else:
            raise ConfigurationError.missing(
                "signer or from_address",
                "Provide a private key, set EVM_PRIVATE_KEY, or pass the provider-managed from_address.",
            )

        self._api = api or ZeroExAPI(chain_id=self._chain_id, api_key=api_key)
        self._alert = alert
        self._tokens: Dict[str, ERC20Token] = {}

        self._swap: Optional["SwapModule"] = None
        self._wallet: Optional["WalletModule"] = None

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def web3(self) -> Web3:
        return self._web3

    @property
    def signer(self) -> Optional[EVMSigner]:
        return self._signer

    @property
    def address(self) -> str:
        """Taker address"""
        return self._address

    @property
    def api(self) -> ZeroExAPI:
        return self._api

    @property
    def swap(self) -> "SwapModule":
        """
        Swap module

        Provides:
        - perform_swap(buy_token, sell_token, amount, from_address)
        - quote(buy_token, sell_token, amount)
        - ensure_allowance(sell_token, amount, owner)
        """
        if self._swap is None:
            from .modules.swap import SwapModule
            self._swap = SwapModule(self._web3, self._api, signer=self._signer, alert=self._alert)
        return self._swap

    @property
    def wallet(self) -> "WalletModule":
        """
        Wallet module

        Provides:
        - balance(token), native_balance()
        - token_info(token)
        - transfer(token, to, amount)
        """
        if self._wallet is None:
            from .modules.wallet import WalletModule
            self._wallet = WalletModule(self)
        return self._wallet

    def token(self, token: str) -> ERC20Token:
        """
        ERC20 wrapper for a symbol ("DAI") or address on this chain

        Raises:
            ConfigurationError: For unknown symbols or the native coin
        """
        address = resolve_token_address(token, self._chain_id)
        if is_native_token(address):
            raise ConfigurationError.invalid(
                "token", f"{token} is the native coin; use its wrapped ERC20 instead"
            )

        key = address.lower()
        if key not in self._tokens:
            self._tokens[key] = ERC20Token(self._web3, address, signer=self._signer)
        return self._tokens[key]

    def perform_swap(
        self,
        buy: Union[ERC20Token, str],
        sell: Union[ERC20Token, str],
        amount: Amount,
        slippage_percentage: Optional[float] = None,
    ) -> SwapResult:
        """Swap `amount` units of `sell` for `buy` from the client's address"""
        buy_token = buy if isinstance(buy, ERC20Token) else self.token(buy)
        sell_token = sell if isinstance(sell, ERC20Token) else self.token(sell)
        return self.swap.perform_swap(
            buy_token,
            sell_token,
            amount,
            self._address,
            slippage_percentage=slippage_percentage,
        )

    def close(self):
        """Close the API client"""
        self._api.close()

    def __enter__(self) -> "ZeroExClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"ZeroExClient(chain_id={self._chain_id}, address={self._address[:10]}...)"
