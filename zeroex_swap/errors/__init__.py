"""
Error definitions for zeroex_swap
"""

from .exceptions import (
    ErrorCode,
    ZeroExSwapError,
    QuoteError,
    InsufficientFunds,
    InvalidAmount,
    TransactionError,
    SignerError,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "ZeroExSwapError",
    "QuoteError",
    "InsufficientFunds",
    "InvalidAmount",
    "TransactionError",
    "SignerError",
    "ConfigurationError",
]
