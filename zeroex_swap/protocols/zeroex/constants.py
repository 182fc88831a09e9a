"""
0x deployment constants

Swap API hosts per chain and the contract that must be approved to move the
taker's sell token.
"""

from typing import Dict

from ...errors import ConfigurationError

SWAP_API_HOSTS: Dict[int, str] = {
    1: "https://api.0x.org",
    3: "https://ropsten.api.0x.org",
    42: "https://kovan.api.0x.org",
    56: "https://bsc.api.0x.org",
    137: "https://polygon.api.0x.org",
}

# ERC20Proxy of the 0x v3 deployment (contract-addresses package), used by /swap/v0
ERC20_PROXY_ADDRESSES: Dict[int, str] = {
    1: "0x95e6f48254609a6ee006f7d493c8e5fb97094cef",
    3: "0xf1ec01d6236d3cd881a0bf0130ea25fe4234003e",
    42: "0xf1ec01d6236d3cd881a0bf0130ea25fe4234003e",
}

# /swap/v1 quotes and chains without a v3 ERC20Proxy pull funds through the
# exchange proxy
EXCHANGE_PROXY_ADDRESS = "0xdef1c0ded9bec7f1a1670819833240f027b25eff"


def get_api_host(chain_id: int) -> str:
    """Swap API host for a chain"""
    if chain_id not in SWAP_API_HOSTS:
        raise ConfigurationError.invalid(
            "chain_id",
            f"No 0x Swap API for chain {chain_id}. Set ZEROEX_API_URL to use a custom endpoint."
        )
    return SWAP_API_HOSTS[chain_id]


def get_allowance_spender(chain_id: int, swap_version: str = "v1") -> str:
    """Contract the taker approves before swapping on `chain_id` with `swap_version` quotes"""
    if swap_version == "v0":
        return ERC20_PROXY_ADDRESSES.get(chain_id, EXCHANGE_PROXY_ADDRESS)
    return EXCHANGE_PROXY_ADDRESS
