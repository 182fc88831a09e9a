"""
Wallet Module

Balance queries and plain token transfers for the client's address.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Any, TYPE_CHECKING, Union

from ..infra.erc20 import ERC20Token, Amount, to_base_units, to_unit_amount
from ..types import TxResult

if TYPE_CHECKING:
    from ..client import ZeroExClient

logger = logging.getLogger(__name__)


class WalletModule:
    """
    Wallet operations

    Usage:
        client.wallet.balance("DAI")         # Decimal("100")
        client.wallet.native_balance()       # Decimal("0.52")
        client.wallet.transfer("DAI", "0x...", Decimal("1.5"))
    """

    def __init__(self, client: "ZeroExClient"):
        self._client = client

    def _resolve(self, token: Union[ERC20Token, str]) -> ERC20Token:
        if isinstance(token, ERC20Token):
            return token
        return self._client.token(token)

    def balance_raw(self, token: Union[ERC20Token, str]) -> int:
        """Token balance in base units"""
        return self._resolve(token).balance_of(self._client.address)

    def balance(self, token: Union[ERC20Token, str]) -> Decimal:
        """Token balance in unit terms"""
        erc20 = self._resolve(token)
        return to_unit_amount(erc20.balance_of(self._client.address), erc20.decimals())

    def native_balance(self) -> Decimal:
        """Native coin balance (ETH/BNB/MATIC)"""
        raw = self._client.web3.eth.get_balance(self._client.address)
        return to_unit_amount(raw, 18)

    def token_info(self, token: Union[ERC20Token, str]) -> Dict[str, Any]:
        """Name, symbol, decimals and the client's balance of a token"""
        erc20 = self._resolve(token)
        decimals = erc20.decimals()
        return {
            "address": erc20.address,
            "name": erc20.name(),
            "symbol": erc20.symbol(),
            "decimals": decimals,
            "balance": to_unit_amount(erc20.balance_of(self._client.address), decimals),
        }

    def transfer(self, token: Union[ERC20Token, str], to: str, amount: Amount) -> TxResult:
        """Transfer `amount` units of `token` from the client's address"""
        erc20 = self._resolve(token)
        raw_amount = to_base_units(amount, erc20.decimals())
        return erc20.transfer(to, raw_amount, self._client.address, signer=self._client.signer)
