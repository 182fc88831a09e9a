"""
Exception definitions for zeroex_swap
"""

from enum import Enum
from typing import Optional
from decimal import Decimal


class ErrorCode(Enum):
    """
    Unified error codes for swap operations

    1xxx - Quote API errors
    2xxx - Transaction errors
    3xxx - Amount/balance errors
    6xxx - Signer errors
    9xxx - Configuration errors
    """
    # Quote API errors
    QUOTE_REJECTED = "1001"
    QUOTE_UNAVAILABLE = "1002"

    # Transaction errors
    TX_SEND_FAILED = "2001"
    TX_REVERTED = "2002"
    TX_TIMEOUT = "2003"

    # Amount/balance errors
    INSUFFICIENT_BALANCE = "3001"
    AMOUNT_INVALID = "3002"

    # Signer errors
    SIGNER_NOT_CONFIGURED = "6001"
    SIGNER_FAILED = "6002"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class ZeroExSwapError(Exception):
    """
    Base exception for all zeroex_swap errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class QuoteError(ZeroExSwapError):
    """
    The swap API refused or failed to produce a quote

    Raised when:
    - The API answers 4xx (bad params, no liquidity, validation failure)
    - Retries against 5xx/timeouts are exhausted
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.QUOTE_REJECTED,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            original_error=original_error,
            details={"status_code": status_code, "reason": reason},
        )
        self.status_code = status_code
        self.reason = reason

    @classmethod
    def rejected(cls, status_code: int, reason: str) -> "QuoteError":
        return cls(
            f"Swap API error (HTTP {status_code}): {reason}",
            ErrorCode.QUOTE_REJECTED,
            status_code=status_code,
            reason=reason,
        )

    @classmethod
    def unavailable(cls, reason: str, error: Exception = None) -> "QuoteError":
        return cls(
            f"Swap API unavailable: {reason}",
            ErrorCode.QUOTE_UNAVAILABLE,
            reason=reason,
            recoverable=True,
            original_error=error,
        )


class InsufficientFunds(ZeroExSwapError):
    """
    Insufficient balance - not recoverable without deposit

    Raised when the taker holds less of the sell token than it wants to sell.
    """

    def __init__(
        self,
        message: str,
        token: Optional[str] = None,
        required: Optional[Decimal] = None,
        available: Optional[Decimal] = None,
    ):
        super().__init__(
            message,
            ErrorCode.INSUFFICIENT_BALANCE,
            recoverable=False,
            details={
                "token": token,
                "required": str(required) if required is not None else None,
                "available": str(available) if available is not None else None,
            },
        )
        self.token = token
        self.required = required
        self.available = available

    @classmethod
    def token_balance(cls, token: str, required: Decimal, available: Decimal) -> "InsufficientFunds":
        return cls(
            f"Not Enough Balance: {token} need {required}, have {available}",
            token=token,
            required=required,
            available=available,
        )


class InvalidAmount(ZeroExSwapError):
    """Amount cannot be represented in the token's base units"""

    def __init__(self, message: str, amount=None, decimals: Optional[int] = None):
        super().__init__(
            message,
            ErrorCode.AMOUNT_INVALID,
            recoverable=False,
            details={"amount": str(amount), "decimals": decimals},
        )
        self.amount = amount
        self.decimals = decimals

    @classmethod
    def too_many_decimals(cls, amount, decimals: int) -> "InvalidAmount":
        return cls(
            f"Invalid unit amount: {amount} - Too many decimal places (max {decimals})",
            amount=amount,
            decimals=decimals,
        )

    @classmethod
    def not_finite(cls, amount) -> "InvalidAmount":
        return cls(f"Amount must be a finite number: {amount!r}", amount=amount)

    @classmethod
    def negative(cls, amount) -> "InvalidAmount":
        return cls(f"Amount must not be negative: {amount}", amount=amount)


class TransactionError(ZeroExSwapError):
    """
    Transaction execution errors

    Raised when:
    - Sending the transaction fails
    - The transaction is mined but reverted
    - The receipt does not arrive in time
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        tx_hash: Optional[str] = None,
        receipt: Optional[dict] = None,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            original_error=original_error,
            details={"tx_hash": tx_hash},
        )
        self.tx_hash = tx_hash
        self.receipt = receipt

    @classmethod
    def send_failed(cls, error: Exception) -> "TransactionError":
        # Network issues are worth another try
        text = str(error).lower()
        recoverable = "timeout" in text or "connection" in text
        return cls(
            f"Failed to send transaction: {error}",
            ErrorCode.TX_SEND_FAILED,
            recoverable=recoverable,
            original_error=error,
        )

    @classmethod
    def reverted(cls, tx_hash: str, receipt: Optional[dict] = None) -> "TransactionError":
        return cls(
            f"Transaction {tx_hash} reverted",
            ErrorCode.TX_REVERTED,
            tx_hash=tx_hash,
            receipt=receipt,
        )

    @classmethod
    def timeout(cls, tx_hash: str, timeout_seconds: float, error: Exception = None) -> "TransactionError":
        return cls(
            f"Transaction {tx_hash} not mined after {timeout_seconds}s",
            ErrorCode.TX_TIMEOUT,
            tx_hash=tx_hash,
            recoverable=True,
            original_error=error,
        )


class SignerError(ZeroExSwapError):
    """
    Signing-related errors

    Raised when:
    - No signer configured
    - Signing operation fails
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SIGNER_FAILED,
        recoverable: bool = False,
    ):
        super().__init__(message, code, recoverable=recoverable)

    @classmethod
    def not_configured(cls) -> "SignerError":
        return cls(
            "No signer configured. Provide a private key or set EVM_PRIVATE_KEY.",
            ErrorCode.SIGNER_NOT_CONFIGURED,
        )

    @classmethod
    def failed(cls, reason: str) -> "SignerError":
        return cls(f"Signing failed: {reason}", ErrorCode.SIGNER_FAILED)

    @classmethod
    def address_mismatch(cls, signer_address: str, from_address: str) -> "SignerError":
        return cls(
            f"Signer {signer_address} cannot send from {from_address}",
            ErrorCode.SIGNER_FAILED,
        )


class ConfigurationError(ZeroExSwapError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str, hint: str = "") -> "ConfigurationError":
        message = f"Missing required configuration: {param}"
        if hint:
            message += f". {hint}"
        return cls(message, ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
