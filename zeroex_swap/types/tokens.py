"""
EVM chain and token registry

Token address mappings and decimals for common tokens on the chains the
0x Swap API serves. Used to resolve symbols like "DAI" to contract addresses.
"""

from typing import Dict, Optional
from enum import Enum
from dataclasses import dataclass

from ..errors import ConfigurationError


class EVMChain(Enum):
    """Supported EVM chains"""
    ETH = 1
    ROPSTEN = 3
    KOVAN = 42
    BSC = 56
    POLYGON = 137

    @classmethod
    def from_value(cls, value) -> "EVMChain":
        """Resolve a chain id or name (case-insensitive)"""
        if isinstance(value, EVMChain):
            return value
        text = str(value).strip().lower()
        aliases = {
            "eth": cls.ETH, "ethereum": cls.ETH, "mainnet": cls.ETH,
            "ropsten": cls.ROPSTEN,
            "kovan": cls.KOVAN,
            "bsc": cls.BSC, "bnb": cls.BSC,
            "polygon": cls.POLYGON, "matic": cls.POLYGON,
        }
        if text in aliases:
            return aliases[text]
        try:
            return cls(int(text))
        except ValueError:
            raise ConfigurationError.invalid(
                "chain",
                f"Unknown chain: {value}. Supported: {', '.join(c.name.lower() for c in cls)}"
            )

    @property
    def is_testnet(self) -> bool:
        return self in (EVMChain.ROPSTEN, EVMChain.KOVAN)

    @property
    def is_poa(self) -> bool:
        """Chains whose blocks carry oversized extraData"""
        return self in (EVMChain.KOVAN, EVMChain.BSC, EVMChain.POLYGON)

    @property
    def native_symbol(self) -> str:
        if self == EVMChain.BSC:
            return "BNB"
        if self == EVMChain.POLYGON:
            return "MATIC"
        return "ETH"


@dataclass(frozen=True)
class EVMToken:
    """EVM token information"""
    address: str
    symbol: str
    decimals: int
    name: str = ""
    chain_id: int = 1

    def __str__(self) -> str:
        return self.symbol


# Placeholder address the 0x API accepts for the chain's native coin
NATIVE_TOKEN_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"


TOKENS: Dict[int, Dict[str, EVMToken]] = {
    EVMChain.ETH.value: {
        "WETH": EVMToken("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", "WETH", 18, "Wrapped Ether", 1),
        "DAI": EVMToken("0x6B175474E89094C44Da98b954EedeaC495271d0F", "DAI", 18, "Dai Stablecoin", 1),
        "USDC": EVMToken("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "USDC", 6, "USD Coin", 1),
        "USDT": EVMToken("0xdAC17F958D2ee523a2206206994597C13D831ec7", "USDT", 6, "Tether USD", 1),
        "WBTC": EVMToken("0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599", "WBTC", 8, "Wrapped BTC", 1),
        "ZRX": EVMToken("0xE41d2489571d322189246DaFA5ebDe1F4699F498", "ZRX", 18, "0x Protocol Token", 1),
    },
    EVMChain.KOVAN.value: {
        "WETH": EVMToken("0xd0A1E359811322d97991E03f863a0C30C2cF029C", "WETH", 18, "Wrapped Ether", 42),
        # Fake DAI used by the 0x Kovan faucet
        "DAI": EVMToken("0x48178164eB4769BB919414Adc980b659a634703E", "DAI", 18, "Dai Stablecoin", 42),
        "ZRX": EVMToken("0x2002D3812F58e35F0EA1fFbf80A75a38c32175fA", "ZRX", 18, "0x Protocol Token", 42),
    },
    EVMChain.BSC.value: {
        "WBNB": EVMToken("0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c", "WBNB", 18, "Wrapped BNB", 56),
        "USDT": EVMToken("0x55d398326f99059fF775485246999027B3197955", "USDT", 18, "Tether USD", 56),
        "BUSD": EVMToken("0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56", "BUSD", 18, "Binance USD", 56),
        "CAKE": EVMToken("0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82", "CAKE", 18, "PancakeSwap Token", 56),
    },
    EVMChain.POLYGON.value: {
        "WMATIC": EVMToken("0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270", "WMATIC", 18, "Wrapped Matic", 137),
        "USDC": EVMToken("0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174", "USDC", 6, "USD Coin (PoS)", 137),
        "DAI": EVMToken("0x8f3Cf7ad23Cd3CaDbD9735AFf958023239c6A063", "DAI", 18, "Dai Stablecoin (PoS)", 137),
    },
}


def get_token(symbol: str, chain_id: int) -> Optional[EVMToken]:
    """Look up a registry token by symbol, None if unknown"""
    return TOKENS.get(chain_id, {}).get(symbol.upper())


def get_token_by_address(address: str, chain_id: int) -> Optional[EVMToken]:
    """Look up a registry token by address (case-insensitive)"""
    address_lower = address.lower()
    for token in TOKENS.get(chain_id, {}).values():
        if token.address.lower() == address_lower:
            return token
    return None


def is_address(value: str) -> bool:
    """True for 0x-prefixed 20-byte hex strings"""
    if not value.startswith("0x") or len(value) != 42:
        return False
    try:
        int(value[2:], 16)
    except ValueError:
        return False
    return True


def resolve_token_address(token: str, chain_id: int) -> str:
    """
    Resolve token symbol or address to address

    Args:
        token: Token symbol (e.g., "DAI") or address (0x...)
        chain_id: Chain ID

    Returns:
        Token address

    Raises:
        ConfigurationError: If token symbol is unknown and not an address
    """
    if is_address(token):
        return token

    if token.upper() == EVMChain.from_value(chain_id).native_symbol:
        return NATIVE_TOKEN_ADDRESS

    registry_token = get_token(token, chain_id)
    if registry_token:
        return registry_token.address

    raise ConfigurationError.invalid("token", f"Unknown token: {token} on chain {chain_id}")


def is_native_token(address: str) -> bool:
    """True if address is the native-coin placeholder"""
    return address.lower() == NATIVE_TOKEN_ADDRESS.lower()
