"""
Swap Module

Performs a trade by requesting a quote from the 0x API and filling that
quote on the blockchain:

1. Does the taker have enough balance of the sell token?
2. Is the 0x proxy allowed to withdraw that amount? If not, approve it.
3. Request a quote from the swap endpoint.
4. Send the transaction generated by the API and wait until it is mined.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Optional, Union

from web3 import Web3

from ..types import SwapQuote, SwapResult, TxResult
from ..infra.erc20 import (
    ERC20Token,
    Amount,
    MAX_UINT256,
    as_decimal,
    to_base_units,
    to_unit_amount,
    round_amount,
)
from ..infra.evm_signer import EVMSigner, send_transaction
from ..infra.correlation import CorrelationContext, log_with_correlation
from ..protocols.zeroex import ZeroExAPI, get_allowance_spender
from ..errors import InsufficientFunds
from ..config import config

logger = logging.getLogger(__name__)

NOT_ENOUGH_BALANCE = "Not Enough Balance"

TokenLike = Union[ERC20Token, str]


def _log_alert(message: str) -> None:
    logger.warning(message)


def _token_address(token: TokenLike) -> str:
    return token.address if isinstance(token, ERC20Token) else token


class SwapModule:
    """
    Token swaps through the 0x Swap API

    Usage:
        swap = SwapModule(web3, ZeroExAPI(chain_id=42), signer=signer)
        result = swap.perform_swap(dai, weth, Decimal("20.5"), signer.address)
        print(result.tx.tx_hash)
    """

    def __init__(
        self,
        web3: Web3,
        api: ZeroExAPI,
        signer: Optional[EVMSigner] = None,
        spender: Optional[str] = None,
        alert: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize swap module

        Args:
            web3: Web3 instance used to send transactions
            api: 0x API client
            signer: Local signer; without one, transactions go through
                eth_sendTransaction and the provider signs them
            spender: Contract to approve (defaults to the proxy that fills
                quotes of the API's swap version on this chain)
            alert: Callback used to tell the user about a failed precondition
        """
        self._web3 = web3
        self._api = api
        self._signer = signer
        self._spender = Web3.to_checksum_address(
            spender
            or config.zeroex.erc20_proxy
            or get_allowance_spender(api.chain_id, api.swap_version)
        )
        self._alert = alert or _log_alert

    @property
    def spender(self) -> str:
        """Address that receives the ERC20 allowance"""
        return self._spender

    @property
    def api(self) -> ZeroExAPI:
        return self._api

    def check_balance(self, sell_token: ERC20Token, amount: Amount, owner: str) -> Decimal:
        """
        Verify `owner` holds at least `amount` of `sell_token`

        The on-chain balance is rounded to two decimal places before the
        comparison.

        Returns:
            The rounded balance

        Raises:
            InsufficientFunds: After alerting the user, if the balance is too low
        """
        amount = as_decimal(amount)
        decimals = sell_token.decimals()
        balance = round_amount(
            to_unit_amount(sell_token.balance_of(owner), decimals),
            config.trading.comparison_precision,
        )

        if balance < amount:
            self._alert(NOT_ENOUGH_BALANCE)
            raise InsufficientFunds.token_balance(sell_token.address, amount, balance)

        return balance

    def ensure_allowance(
        self,
        sell_token: ERC20Token,
        amount: Amount,
        owner: str,
        unlimited: Optional[bool] = None,
    ) -> Optional[TxResult]:
        """
        Approve the spender for `amount` unless the current allowance covers it

        Args:
            sell_token: Token being sold
            amount: Amount in unit terms
            owner: Address the tokens are pulled from
            unlimited: Approve MAX_UINT256 instead of exactly `amount`

        Returns:
            Mined approval transaction, or None if no approval was needed
        """
        amount = as_decimal(amount)
        decimals = sell_token.decimals()
        allowance = round_amount(
            to_unit_amount(sell_token.allowance(owner, self._spender), decimals),
            config.trading.comparison_precision,
        )

        if allowance >= amount:
            log_with_correlation(
                logging.DEBUG,
                f"Allowance {allowance} already covers {amount}",
                "ensure_allowance",
                log=logger,
            )
            return None

        if unlimited is None:
            unlimited = config.trading.unlimited_approval
        approve_amount = MAX_UINT256 if unlimited else to_base_units(amount, decimals)

        result = sell_token.approve(self._spender, approve_amount, owner, signer=self._signer)
        log_with_correlation(
            logging.INFO,
            f"Approval mined: {result.tx_hash} (block {result.block_number})",
            "ensure_allowance",
            log=logger,
        )
        return result

    def quote(
        self,
        buy_token: TokenLike,
        sell_token: ERC20Token,
        amount_to_sell: Amount,
        from_address: Optional[str] = None,
        slippage_percentage: Optional[float] = None,
    ) -> SwapQuote:
        """
        Request a swap quote for selling `amount_to_sell` units of `sell_token`

        No balance or allowance checks are made and nothing is sent.
        """
        sell_amount = to_base_units(amount_to_sell, sell_token.decimals())
        return self._api.get_quote(
            buy_token=_token_address(buy_token),
            sell_token=sell_token.address,
            sell_amount=sell_amount,
            taker_address=from_address,
            slippage_percentage=slippage_percentage,
        )

    def price(
        self,
        buy_token: TokenLike,
        sell_token: ERC20Token,
        amount_to_sell: Amount,
    ) -> Decimal:
        """Indicative price (buy token per sell token)"""
        sell_amount = to_base_units(amount_to_sell, sell_token.decimals())
        return self._api.get_price(
            buy_token=_token_address(buy_token),
            sell_token=sell_token.address,
            sell_amount=sell_amount,
        ).price

    def perform_swap(
        self,
        buy_token: TokenLike,
        sell_token: ERC20Token,
        amount_to_sell: Amount,
        from_address: str,
        slippage_percentage: Optional[float] = None,
    ) -> SwapResult:
        """
        Sell `amount_to_sell` units of `sell_token` for `buy_token`

        Args:
            buy_token: Token to buy (wrapper or address)
            sell_token: Token to sell
            amount_to_sell: Human-readable amount, e.g. Decimal("133.23")
            from_address: Address that performs the transaction
            slippage_percentage: Optional slippage passed to the quote

        Returns:
            SwapResult with the quote, the optional approval and the swap tx

        Raises:
            InvalidAmount: If `amount_to_sell` is negative, not finite or has
                more decimal places than the sell token.
            InsufficientFunds: If the balance is below `amount_to_sell`.
                Nothing else is caught: API errors and reverted transactions
                propagate as QuoteError / TransactionError.
        """
        amount = as_decimal(amount_to_sell)
        # Reject unrepresentable amounts before reading balance or allowance
        to_base_units(amount, sell_token.decimals())

        with CorrelationContext("swap"):
            log_with_correlation(
                logging.INFO,
                f"Selling {amount} of {sell_token.address} for {_token_address(buy_token)}",
                "perform_swap",
                log=logger,
            )

            self.check_balance(sell_token, amount, from_address)

            approval = self.ensure_allowance(sell_token, amount, from_address)

            quote = self.quote(
                buy_token,
                sell_token,
                amount,
                from_address=from_address,
                slippage_percentage=slippage_percentage,
            )
            tx_params = quote.to_tx_params(from_address)
            if config.tx.quote_gas_multiplier != 1.0 and tx_params["gas"]:
                tx_params["gas"] = int(tx_params["gas"] * config.tx.quote_gas_multiplier)

            log_with_correlation(
                logging.INFO,
                f"Ethereum transaction generated by the 0x API: {tx_params}",
                "perform_swap",
                log=logger,
            )
            log_with_correlation(
                logging.INFO,
                f"Orders used to perform the swap: {quote.orders}",
                "perform_swap",
                log=logger,
            )

            tx = send_transaction(self._web3, tx_params, signer=self._signer)
            log_with_correlation(
                logging.INFO,
                f"Transaction {tx.tx_hash} was mined successfully",
                "perform_swap",
                log=logger,
            )

            return SwapResult(quote=quote, tx=tx, approval=approval)
