"""
Infrastructure layer for zeroex_swap

Provides:
- EVMSigner: local transaction signing using eth_account
- send_transaction: sign/send and wait for a successful receipt
- ERC20Token: ERC20 contract wrapper plus unit conversion helpers
- CorrelationContext: per-operation log correlation
"""

from .evm_signer import (
    EVMSigner,
    create_web3,
    create_evm_signer,
    send_transaction,
    wait_for_success,
)
from .erc20 import (
    ERC20Token,
    ERC20_ABI,
    MAX_UINT256,
    to_base_units,
    to_unit_amount,
    round_amount,
    convert_value_from_human,
)
from .correlation import (
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
    log_with_correlation,
)

__all__ = [
    "EVMSigner",
    "create_web3",
    "create_evm_signer",
    "send_transaction",
    "wait_for_success",
    "ERC20Token",
    "ERC20_ABI",
    "MAX_UINT256",
    "to_base_units",
    "to_unit_amount",
    "round_amount",
    "convert_value_from_human",
    "CorrelationContext",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
    "log_with_correlation",
]
