"""
Configuration management for zeroex_swap

Loads settings from environment variables and .env file.
Includes logging configuration with file output and correlation ID support.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from dotenv import load_dotenv


def _load_env_file():
    """Load .env file from project root"""
    current = Path(__file__).parent.parent  # zeroex_swap package parent
    env_file = current / ".env"

    if env_file.exists():
        load_dotenv(env_file)


# Load .env on module import
_load_env_file()


def _get_env(key: str, default: Optional[str] = "") -> Optional[str]:
    """Get environment variable with default"""
    value = os.getenv(key)
    if value is None:
        return default
    return value


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid float value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as int"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid int value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as bool"""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class ChainConfig:
    """Chain and RPC settings"""
    # Kovan testnet by default (chain the 0x tutorial contracts are deployed on)
    chain_id: int = field(default_factory=lambda: _get_env_int("CHAIN_ID", 42))
    rpc_url: str = field(default_factory=lambda: _get_env("ETH_RPC_URL", ""))
    rpc_timeout: float = field(default_factory=lambda: _get_env_float("RPC_TIMEOUT_SECONDS", 30.0))


@dataclass
class SignerConfig:
    """Local signer settings"""
    private_key_env: str = field(default_factory=lambda: _get_env("SIGNER_PRIVATE_KEY_ENV", "EVM_PRIVATE_KEY"))
    keystore_path: str = field(default_factory=lambda: _get_env("EVM_KEYSTORE_PATH", ""))


@dataclass
class ZeroExConfig:
    """0x Swap API configuration"""
    # Overrides the per-chain host when set (e.g. a self-hosted 0x API)
    base_url: str = field(default_factory=lambda: _get_env("ZEROEX_API_URL", ""))
    api_key: Optional[str] = field(default_factory=lambda: _get_env("ZEROEX_API_KEY", None))
    swap_version: str = field(default_factory=lambda: _get_env("ZEROEX_SWAP_VERSION", "v1"))
    timeout: float = field(default_factory=lambda: _get_env_float("ZEROEX_TIMEOUT", 30.0))
    max_retries: int = field(default_factory=lambda: _get_env_int("ZEROEX_MAX_RETRIES", 3))
    retry_delay: float = field(default_factory=lambda: _get_env_float("ZEROEX_RETRY_DELAY", 1.0))
    # Overrides the ERC20 proxy looked up from the contract-address table
    erc20_proxy: str = field(default_factory=lambda: _get_env("ZEROEX_ERC20_PROXY", ""))


@dataclass
class TxConfig:
    """Transaction settings"""
    receipt_timeout: float = field(default_factory=lambda: _get_env_float("TX_RECEIPT_TIMEOUT", 120.0))
    # Buffer applied to estimate_gas for approve/transfer
    approve_gas_multiplier: float = field(default_factory=lambda: _get_env_float("APPROVE_GAS_MULTIPLIER", 1.2))
    # Used when estimate_gas fails for a plain ERC20 call
    approve_gas_fallback: int = field(default_factory=lambda: _get_env_int("APPROVE_GAS_FALLBACK", 150_000))
    # Multiplier applied to the gas limit returned by the quote (1.0 = send as quoted)
    quote_gas_multiplier: float = field(default_factory=lambda: _get_env_float("QUOTE_GAS_MULTIPLIER", 1.0))


@dataclass
class TradingConfig:
    """Default swap parameters"""
    # Approve exactly the amount being sold unless set
    unlimited_approval: bool = field(default_factory=lambda: _get_env_bool("UNLIMITED_APPROVAL", False))
    # Decimal places used when comparing balance/allowance to the amount to sell
    comparison_precision: int = field(default_factory=lambda: _get_env_int("COMPARISON_PRECISION", 2))


def _get_default_log_path() -> str:
    """Get default log file path under zeroex_swap/log/ with UTC timestamp"""
    from datetime import datetime, timezone
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_dir = Path(__file__).parent / "log"
    return str(log_dir / f"zeroex_swap_{timestamp}.log")


@dataclass
class LoggingConfig:
    """
    Logging configuration with file output and correlation ID support.

    Environment variables:
        LOG_FILE: Path to log file (empty disables file logging)
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
        LOG_FORMAT: Custom log format string
        LOG_CONSOLE: Enable console output (default: true)
        LOG_MAX_BYTES: Max log file size before rotation (default: 10MB)
        LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)
    """
    log_file: str = field(default_factory=lambda: _get_env("LOG_FILE", _get_default_log_path()))
    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: _get_env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    console_output: bool = field(default_factory=lambda: _get_env_bool("LOG_CONSOLE", True))
    max_bytes: int = field(default_factory=lambda: _get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB
    backup_count: int = field(default_factory=lambda: _get_env_int("LOG_BACKUP_COUNT", 5))

    @property
    def level(self) -> int:
        """Get numeric log level"""
        return getattr(logging, self.log_level.upper(), logging.INFO)


@dataclass
class Config:
    """
    Main configuration container

    Usage:
        from zeroex_swap.config import config

        print(config.chain.rpc_url)
        print(config.zeroex.swap_version)
    """
    chain: ChainConfig = field(default_factory=ChainConfig)
    signer: SignerConfig = field(default_factory=SignerConfig)
    zeroex: ZeroExConfig = field(default_factory=ZeroExConfig)
    tx: TxConfig = field(default_factory=TxConfig)
    trading: TradingConfig = field(default_factory=TradingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        """Reload configuration from environment"""
        _load_env_file()
        return cls()


# Global config instance
config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config


def reload_config() -> Config:
    """Reload and return new configuration"""
    global config
    config = Config.reload()
    return config


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "zeroex_swap",
) -> logging.Logger:
    """
    Set up logging based on configuration.

    Creates handlers for file and/or console output with rotation.
    The log file directory is created automatically if it doesn't exist.

    Args:
        log_config: Logging configuration (uses global config if None)
        logger_name: Name of the logger to configure

    Returns:
        Configured logger instance
    """
    if log_config is None:
        log_config = config.logging

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_config.level)

    # Close before removing to flush buffers and release file handles
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(log_config.log_format)

    handlers: List[logging.Handler] = []

    if log_config.log_file:
        from logging.handlers import RotatingFileHandler

        log_path = Path(log_config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding='utf-8',
        )
        file_handler.setLevel(log_config.level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if log_config.console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_config.level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    for handler in handlers:
        logger.addHandler(handler)

    if log_config.log_file:
        logger.info(f"Logging initialized: file={log_config.log_file}, level={log_config.log_level}")

    return logger
