"""
Result type definitions for transactions and quotes
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


class TxStatus(Enum):
    """Transaction status"""
    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"


@dataclass
class TxResult:
    """
    Mined (or broadcast) transaction

    Attributes:
        tx_hash: Transaction hash (0x-prefixed hex)
        status: Transaction status
        block_number: Block the transaction was mined in
        gas_used: Gas consumed
        effective_gas_price: Price paid per gas unit in wei
        receipt: Raw receipt as a plain dict
    """
    tx_hash: str
    status: TxStatus
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    effective_gas_price: Optional[int] = None
    receipt: Optional[Dict[str, Any]] = None

    @property
    def is_success(self) -> bool:
        return self.status == TxStatus.SUCCESS

    @property
    def fee_wei(self) -> Optional[int]:
        """Total fee paid in wei"""
        if self.gas_used is None or self.effective_gas_price is None:
            return None
        return self.gas_used * self.effective_gas_price

    @classmethod
    def from_receipt(cls, tx_hash: str, receipt: Dict[str, Any]) -> "TxResult":
        return cls(
            tx_hash=tx_hash,
            status=TxStatus.SUCCESS if receipt.get("status") == 1 else TxStatus.FAILED,
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
            effective_gas_price=receipt.get("effectiveGasPrice"),
            receipt=dict(receipt),
        )

    @classmethod
    def pending(cls, tx_hash: str) -> "TxResult":
        return cls(tx_hash=tx_hash, status=TxStatus.PENDING)

    def __str__(self) -> str:
        return f"TxResult({self.status.value}, {self.tx_hash[:18]}...)"


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(value)


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal(0)
    return Decimal(str(value))


@dataclass
class SwapQuote:
    """
    Swap quote returned by the 0x API

    Carries both the pricing information and the ready-to-send Ethereum
    transaction (to/data/value/gas/gasPrice) generated by the API.
    """
    to: str
    data: str
    value: int = 0
    gas: int = 0
    gas_price: int = 0
    price: Decimal = Decimal(0)
    guaranteed_price: Decimal = Decimal(0)
    buy_amount: int = 0
    sell_amount: int = 0
    buy_token_address: str = ""
    sell_token_address: str = ""
    allowance_target: Optional[str] = None
    protocol_fee: int = 0
    sources: List[Dict[str, Any]] = field(default_factory=list)
    orders: List[Dict[str, Any]] = field(default_factory=list)
    raw_response: Optional[Dict[str, Any]] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "SwapQuote":
        """Build from the JSON body of /swap/{version}/quote"""
        return cls(
            to=data.get("to", ""),
            data=data.get("data", "0x"),
            value=_to_int(data.get("value")),
            gas=_to_int(data.get("gas") or data.get("estimatedGas")),
            gas_price=_to_int(data.get("gasPrice")),
            price=_to_decimal(data.get("price")),
            guaranteed_price=_to_decimal(data.get("guaranteedPrice")),
            buy_amount=_to_int(data.get("buyAmount")),
            sell_amount=_to_int(data.get("sellAmount")),
            buy_token_address=data.get("buyTokenAddress", ""),
            sell_token_address=data.get("sellTokenAddress", ""),
            allowance_target=data.get("allowanceTarget"),
            protocol_fee=_to_int(data.get("protocolFee")),
            sources=[s for s in data.get("sources", []) if _to_decimal(s.get("proportion")) > 0],
            orders=list(data.get("orders", [])),
            raw_response=data,
        )

    @property
    def route(self) -> List[str]:
        """Names of the liquidity sources actually used"""
        return [s.get("name", "") for s in self.sources]

    def to_tx_params(self, from_address: str) -> Dict[str, Any]:
        """Transaction fields for sending this quote from `from_address`"""
        return {
            "from": from_address,
            "to": self.to,
            "data": self.data,
            "gas": self.gas,
            "gasPrice": self.gas_price,
            "value": self.value,
        }

    def __str__(self) -> str:
        return f"SwapQuote({self.sell_amount} -> {self.buy_amount}, price={self.price})"


@dataclass
class SwapResult:
    """
    Outcome of a full swap workflow

    Attributes:
        quote: Quote the swap transaction was built from
        tx: Mined swap transaction
        approval: Approval transaction, None when the allowance already sufficed
    """
    quote: SwapQuote
    tx: TxResult
    approval: Optional[TxResult] = None

    @property
    def is_success(self) -> bool:
        return self.tx.is_success

    @property
    def approved(self) -> bool:
        return self.approval is not None
