"""
0x Swap API protocol support

Usage:
    from zeroex_swap.protocols.zeroex import ZeroExAPI

    api = ZeroExAPI(chain_id=1)
    quote = api.get_quote(buy_token, sell_token, sell_amount, taker_address)
"""

from .api import ZeroExAPI
from .constants import (
    SWAP_API_HOSTS,
    ERC20_PROXY_ADDRESSES,
    EXCHANGE_PROXY_ADDRESS,
    get_api_host,
    get_allowance_spender,
)

__all__ = [
    "ZeroExAPI",
    "SWAP_API_HOSTS",
    "ERC20_PROXY_ADDRESSES",
    "EXCHANGE_PROXY_ADDRESS",
    "get_api_host",
    "get_allowance_spender",
]
