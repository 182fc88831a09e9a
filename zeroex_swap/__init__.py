"""
zeroex_swap - Token swaps through the 0x Swap API

Workflow:
- Check the taker's sell-token balance
- Approve the 0x proxy when the allowance is too low
- Fetch a swap quote from the 0x API
- Send the transaction generated by the API

Supported chains: Ethereum, Ropsten, Kovan, BSC, Polygon
"""

from .client import ZeroExClient
from .types import (
    TxResult,
    TxStatus,
    SwapQuote,
    SwapResult,
    EVMChain,
    EVMToken,
    NATIVE_TOKEN_ADDRESS,
)
from .errors import (
    ErrorCode,
    ZeroExSwapError,
    QuoteError,
    InsufficientFunds,
    InvalidAmount,
    TransactionError,
    SignerError,
    ConfigurationError,
)
from .modules import SwapModule, WalletModule
from .infra import (
    EVMSigner,
    ERC20Token,
    create_web3,
    create_evm_signer,
    to_base_units,
    to_unit_amount,
    convert_value_from_human,
)
from .protocols.zeroex import ZeroExAPI
from .config import setup_logging

__all__ = [
    # Client
    "ZeroExClient",
    # Types
    "TxResult",
    "TxStatus",
    "SwapQuote",
    "SwapResult",
    "EVMChain",
    "EVMToken",
    "NATIVE_TOKEN_ADDRESS",
    # Errors
    "ErrorCode",
    "ZeroExSwapError",
    "QuoteError",
    "InsufficientFunds",
    "InvalidAmount",
    "TransactionError",
    "SignerError",
    "ConfigurationError",
    # Modules
    "SwapModule",
    "WalletModule",
    # Infrastructure
    "EVMSigner",
    "ERC20Token",
    "create_web3",
    "create_evm_signer",
    "to_base_units",
    "to_unit_amount",
    "convert_value_from_human",
    "ZeroExAPI",
    "setup_logging",
]

__version__ = "1.0.0"
