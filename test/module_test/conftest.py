"""
Shared configuration and fixtures for module integration tests.

WARNING: These tests execute real transactions and spend real tokens!

Environment Variables:
    ETH_RPC_URL: RPC endpoint URL (required)
    EVM_PRIVATE_KEY: Hex encoded private key (required)
    CHAIN_ID: Chain to trade on (default: 42, Kovan)
    SWAP_TEST_AMOUNT: Amount of DAI to sell (default: 1)
"""

import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# Load .env file
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env_or_fail(key: str) -> str:
    """Get required environment variable or raise error"""
    value = os.getenv(key)
    if not value:
        raise EnvironmentError(
            f"Missing required environment variable: {key}\n"
            f"Please set {key} in your .env file or environment."
        )
    return value


def skip_if_no_config():
    """Check if required config is available, return skip message if not"""
    try:
        get_env_or_fail("ETH_RPC_URL")
        get_env_or_fail("EVM_PRIVATE_KEY")
        return None
    except EnvironmentError as e:
        return str(e)


def get_test_amount() -> Decimal:
    return Decimal(os.getenv("SWAP_TEST_AMOUNT", "1"))


def create_client():
    """Create ZeroExClient with live RPC and real wallet"""
    from zeroex_swap import ZeroExClient, setup_logging

    setup_logging()
    return ZeroExClient(
        rpc_url=get_env_or_fail("ETH_RPC_URL"),
        private_key=get_env_or_fail("EVM_PRIVATE_KEY"),
    )


# Pytest fixtures
@pytest.fixture(scope="module")
def client():
    """Create ZeroExClient fixture for tests"""
    skip_msg = skip_if_no_config()
    if skip_msg:
        pytest.skip(skip_msg)
    zx = create_client()
    yield zx
    zx.close()


@pytest.fixture
def amount():
    """Amount of DAI to sell"""
    return get_test_amount()
