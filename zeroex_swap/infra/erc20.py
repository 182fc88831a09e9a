"""
ERC20 token wrapper and unit conversion

Ethereum only stores integers, so a human-readable amount (133.232) is kept
on chain as a big integer plus the token's number of decimal places.

    USDC has 6 decimals:  5     -> 5000000
    DAI has 18 decimals:  20.5  -> 20500000000000000000
"""

from __future__ import annotations

import decimal
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from web3 import Web3

from ..errors import InvalidAmount
from ..types import TxResult
from ..config import config as global_config
from .evm_signer import EVMSigner, send_transaction

logger = logging.getLogger(__name__)

Amount = Union[Decimal, int, float, str]

# Enough digits for any uint256
_UINT256_CONTEXT = decimal.Context(prec=80)

MAX_UINT256 = 2 ** 256 - 1

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"},
        ],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_to", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
]


def as_decimal(amount: Amount) -> Decimal:
    """
    Convert a user supplied amount to Decimal without float artifacts

    Raises:
        InvalidAmount: If the amount is not a finite number (NaN, Infinity)
    """
    if isinstance(amount, Decimal):
        value = amount
    else:
        try:
            value = Decimal(str(amount) if isinstance(amount, float) else amount)
        except (decimal.InvalidOperation, TypeError, ValueError) as e:
            raise InvalidAmount(f"Not a number: {amount!r}", amount=amount) from e

    if not value.is_finite():
        raise InvalidAmount.not_finite(amount)
    return value


def to_base_units(amount: Amount, decimals: int) -> int:
    """
    Convert a unit amount into base units (amount * 10**decimals)

    Raises:
        InvalidAmount: If the amount is negative or has more decimal places
            than the token supports
    """
    value = as_decimal(amount)
    if value < 0:
        raise InvalidAmount.negative(amount)

    scaled = value.scaleb(decimals, context=_UINT256_CONTEXT)
    if scaled != scaled.to_integral_value(context=_UINT256_CONTEXT):
        raise InvalidAmount.too_many_decimals(amount, decimals)
    return int(scaled)


def to_unit_amount(raw_amount: int, decimals: int) -> Decimal:
    """Convert base units into a unit amount (raw / 10**decimals)"""
    return Decimal(int(raw_amount)).scaleb(-decimals, context=_UINT256_CONTEXT)


def round_amount(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up to a fixed number of decimal places"""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=_UINT256_CONTEXT)


class ERC20Token:
    """
    Thin wrapper around an ERC20 contract

    Reading a value (name, decimals, balance) does NOT require a transaction.
    approve and transfer send one and wait until it is mined.

    Usage:
        dai = ERC20Token(web3, "0x4817...703E")
        dai.name()                       # "DAI"
        dai.decimals()                   # 18
        dai.balance_of("0xSomeAddress")  # 100000000000000000000

        dai.transfer("0xSomeOtherAddress", 10 ** 20, from_address="0xMyAddress")
    """

    def __init__(
        self,
        web3: Web3,
        address: str,
        signer: Optional[EVMSigner] = None,
    ):
        self._web3 = web3
        self._address = Web3.to_checksum_address(address)
        self._signer = signer
        self._contract = web3.eth.contract(address=self._address, abi=ERC20_ABI)
        self._decimals: Optional[int] = None
        self._symbol: Optional[str] = None

    @property
    def address(self) -> str:
        return self._address

    @property
    def web3(self) -> Web3:
        return self._web3

    def name(self) -> str:
        return self._contract.functions.name().call()

    def symbol(self) -> str:
        if self._symbol is None:
            self._symbol = self._contract.functions.symbol().call()
        return self._symbol

    def decimals(self) -> int:
        # Immutable for every sane token, so read it once
        if self._decimals is None:
            self._decimals = int(self._contract.functions.decimals().call())
        return self._decimals

    def balance_of(self, owner: str) -> int:
        return self._contract.functions.balanceOf(Web3.to_checksum_address(owner)).call()

    def allowance(self, owner: str, spender: str) -> int:
        return self._contract.functions.allowance(
            Web3.to_checksum_address(owner),
            Web3.to_checksum_address(spender),
        ).call()

    def approve(
        self,
        spender: str,
        amount: int,
        from_address: str,
        signer: Optional[EVMSigner] = None,
    ) -> TxResult:
        """Allow `spender` to move `amount` base units on behalf of `from_address`"""
        fn = self._contract.functions.approve(Web3.to_checksum_address(spender), int(amount))
        logger.info(f"Approving {spender} to spend {amount} of {self._address}")
        return self._send(fn, from_address, signer)

    def transfer(
        self,
        to: str,
        amount: int,
        from_address: str,
        signer: Optional[EVMSigner] = None,
    ) -> TxResult:
        """Send `amount` base units to `to`"""
        fn = self._contract.functions.transfer(Web3.to_checksum_address(to), int(amount))
        logger.info(f"Transferring {amount} of {self._address} to {to}")
        return self._send(fn, from_address, signer)

    def to_base_units(self, amount: Amount) -> int:
        return to_base_units(amount, self.decimals())

    def to_unit_amount(self, raw_amount: int) -> Decimal:
        return to_unit_amount(raw_amount, self.decimals())

    def _estimate_gas(self, fn, from_address: str) -> int:
        try:
            estimated = fn.estimate_gas({"from": from_address})
            return int(estimated * global_config.tx.approve_gas_multiplier)
        except Exception as e:
            # Some proxy tokens fail estimation but execute fine
            fallback = global_config.tx.approve_gas_fallback
            logger.warning(f"Gas estimation failed for {self._address}, using {fallback}: {e}")
            return fallback

    def _send(self, fn, from_address: str, signer: Optional[EVMSigner] = None) -> TxResult:
        from_address = Web3.to_checksum_address(from_address)
        tx = fn.build_transaction({
            "from": from_address,
            "gas": self._estimate_gas(fn, from_address),
        })
        return send_transaction(self._web3, tx, signer=signer or self._signer)

    def __repr__(self) -> str:
        return f"ERC20Token(address={self._address})"


def convert_value_from_human(token: ERC20Token, amount: Amount) -> int:
    """
    Convert a human-readable amount of `token` into base units

    Reads the token's decimals from chain, e.g. 5 USDC -> 5000000.
    """
    return to_base_units(amount, token.decimals())
