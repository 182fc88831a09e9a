"""
Functional modules for zeroex_swap

Provides:
- SwapModule: balance check, allowance, quote and swap execution
- WalletModule: balances and transfers
"""

from .swap import SwapModule, NOT_ENOUGH_BALANCE
from .wallet import WalletModule

__all__ = [
    "SwapModule",
    "NOT_ENOUGH_BALANCE",
    "WalletModule",
]
