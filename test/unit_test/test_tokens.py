"""
Unit tests for the token registry and unit conversion (no network access)
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from zeroex_swap.types.tokens import (
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
from zeroex_swap.infra.erc20 import (
    MAX_UINT256,
    as_decimal,
    to_base_units,
    to_unit_amount,
    round_amount,
)
from zeroex_swap.errors import ConfigurationError, InvalidAmount


KOVAN_DAI = "0x48178164eB4769BB919414Adc980b659a634703E"


def test_evm_chain_from_value():
    """Chain ids and names resolve to EVMChain"""
    assert EVMChain.from_value(1) == EVMChain.ETH
    assert EVMChain.from_value("42") == EVMChain.KOVAN
    assert EVMChain.from_value("Kovan") == EVMChain.KOVAN
    assert EVMChain.from_value("bsc") == EVMChain.BSC
    assert EVMChain.from_value(EVMChain.POLYGON) == EVMChain.POLYGON

    with pytest.raises(ConfigurationError):
        EVMChain.from_value("solana")
    with pytest.raises(ConfigurationError):
        EVMChain.from_value(999)


def test_evm_chain_properties():
    assert EVMChain.KOVAN.is_testnet
    assert not EVMChain.ETH.is_testnet
    assert EVMChain.BSC.is_poa
    assert not EVMChain.ETH.is_poa
    assert EVMChain.BSC.native_symbol == "BNB"
    assert EVMChain.POLYGON.native_symbol == "MATIC"
    assert EVMChain.KOVAN.native_symbol == "ETH"


def test_registry_lookup():
    """Symbols and addresses resolve to registry tokens"""
    dai = get_token("dai", 42)
    assert dai is not None
    assert dai.address == KOVAN_DAI
    assert dai.decimals == 18
    assert str(dai) == "DAI"

    assert get_token("USDC", 1).decimals == 6
    assert get_token("UNKNOWN", 1) is None
    assert get_token("DAI", 999) is None

    assert get_token_by_address(KOVAN_DAI.lower(), 42) == dai
    assert get_token_by_address(KOVAN_DAI, 1) is None


def test_registry_entries_are_consistent():
    """Every registry token is filed under its own chain and symbol"""
    for chain_id, tokens in TOKENS.items():
        for symbol, token in tokens.items():
            assert token.chain_id == chain_id
            assert token.symbol == symbol
            assert is_address(token.address)


def test_evm_token_frozen():
    token = EVMToken(KOVAN_DAI, "DAI", 18)
    with pytest.raises(Exception):
        token.symbol = "FAKE"


def test_is_address():
    assert is_address(KOVAN_DAI)
    assert is_address("0x" + "0" * 40)
    assert not is_address("DAI")
    assert not is_address("0x1234")
    assert not is_address("0x" + "z" * 40)


def test_resolve_token_address():
    assert resolve_token_address("DAI", 42) == KOVAN_DAI
    assert resolve_token_address("eth", 42) == NATIVE_TOKEN_ADDRESS
    assert resolve_token_address("BNB", 56) == NATIVE_TOKEN_ADDRESS

    # Addresses are passed through unchanged
    addr = "0x1234567890123456789012345678901234567890"
    assert resolve_token_address(addr, 1) == addr

    with pytest.raises(ConfigurationError) as exc_info:
        resolve_token_address("NOPE", 42)
    assert "Unknown token" in str(exc_info.value)


def test_is_native_token():
    assert is_native_token(NATIVE_TOKEN_ADDRESS)
    assert is_native_token(NATIVE_TOKEN_ADDRESS.lower())
    assert not is_native_token(KOVAN_DAI)


def test_to_base_units_usdc_and_dai():
    """USDC has 6 decimals, DAI has 18"""
    assert to_base_units(5, 6) == 5000000
    assert to_base_units(Decimal("20.5"), 18) == 20500000000000000000
    assert to_base_units("133.232", 18) == 133232000000000000000
    assert to_base_units(0, 18) == 0


def test_to_base_units_float_has_no_artifacts():
    # float 0.1 is not exactly representable; str() round-trips it
    assert to_base_units(0.1, 18) == 10 ** 17
    assert to_base_units(20.5, 18) == 20500000000000000000


def test_to_base_units_rejects_bad_amounts():
    with pytest.raises(InvalidAmount):
        to_base_units("1.0000001", 6)
    with pytest.raises(InvalidAmount):
        to_base_units(-1, 18)
    with pytest.raises(InvalidAmount):
        as_decimal("abc")


def test_non_finite_amounts_rejected():
    """NaN and Infinity are refused whatever type they arrive as"""
    for amount in ("NaN", "Infinity", "-Infinity", float("nan"), float("inf"), Decimal("NaN"), Decimal("sNaN")):
        with pytest.raises(InvalidAmount) as exc_info:
            as_decimal(amount)
        assert "finite" in exc_info.value.message

    with pytest.raises(InvalidAmount):
        to_base_units("NaN", 18)
    with pytest.raises(InvalidAmount):
        to_base_units(Decimal("Infinity"), 6)


def test_to_base_units_uint256_range():
    huge = to_unit_amount(MAX_UINT256, 18)
    assert to_base_units(huge, 18) == MAX_UINT256


def test_to_unit_amount():
    assert to_unit_amount(5000000, 6) == Decimal("5")
    assert to_unit_amount(20500000000000000000, 18) == Decimal("20.5")
    assert to_unit_amount(1, 18) == Decimal("0.000000000000000001")


def test_round_amount_half_up():
    assert round_amount(Decimal("19.995")) == Decimal("20.00")
    assert round_amount(Decimal("19.994")) == Decimal("19.99")
    assert round_amount(Decimal("0.005")) == Decimal("0.01")
    assert round_amount(Decimal("1.23456"), 4) == Decimal("1.2346")
