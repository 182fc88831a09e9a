"""
Type definitions for zeroex_swap
"""

from .result import TxResult, TxStatus, SwapQuote, SwapResult
from .tokens import (
    EVMChain,
    EVMToken,
    NATIVE_TOKEN_ADDRESS,
    TOKENS,
    get_token,
    get_token_by_address,
    is_address,
    resolve_token_address,
    is_native_token,
)

__all__ = [
    "TxResult",
    "TxStatus",
    "SwapQuote",
    "SwapResult",
    "EVMChain",
    "EVMToken",
    "NATIVE_TOKEN_ADDRESS",
    "TOKENS",
    "get_token",
    "get_token_by_address",
    "is_address",
    "resolve_token_address",
    "is_native_token",
]
