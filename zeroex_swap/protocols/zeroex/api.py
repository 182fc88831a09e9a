"""
0x Swap API Client

REST client for the 0x Swap API (https://0x.org/docs/api#swap).
The quote endpoint returns a ready-to-send Ethereum transaction that fills
the best combination of orders and AMM liquidity for the requested trade.
"""

import logging
import time
from typing import Optional, Dict, Any

import httpx

from ...types import SwapQuote
from ...errors import QuoteError
from ...config import config as global_config
from .constants import get_api_host

logger = logging.getLogger(__name__)


def _error_reason(response: httpx.Response) -> str:
    """Best-effort human readable reason from a 0x error body"""
    try:
        body = response.json()
    except ValueError:
        return response.text[:500] if response.text else f"HTTP {response.status_code}"

    if not isinstance(body, dict):
        return str(body)[:500]

    reason = body.get("reason") or body.get("message") or body.get("error") or str(body)
    validation = body.get("validationErrors") or []
    details = [
        f"{item.get('field')}: {item.get('reason')}"
        for item in validation
        if isinstance(item, dict)
    ]
    if details:
        reason = f"{reason} ({'; '.join(details)})"
    return reason


class ZeroExAPI:
    """
    0x Swap API client

    Provides:
    - Swap quotes with transaction data (/swap/{version}/quote)
    - Indicative prices (/swap/{version}/price)

    Usage:
        api = ZeroExAPI(chain_id=42)  # Kovan
        quote = api.get_quote(
            buy_token="0x...",
            sell_token="0x...",
            sell_amount=1000000000000000000,
            taker_address="0xYourAddress",
        )
    """

    def __init__(
        self,
        chain_id: Optional[int] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        swap_version: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ):
        """
        Initialize 0x API client

        Args:
            chain_id: Chain ID used to pick the API host
            api_key: Optional 0x API key (sent as 0x-api-key header)
            base_url: API host override (e.g. a self-hosted instance)
            swap_version: Swap endpoint version ("v1" by default)
            timeout: Request timeout in seconds
            max_retries: Attempts for timeouts, transport errors and 5xx
            retry_delay: Base delay between attempts in seconds
        """
        cfg = global_config.zeroex
        self._chain_id = chain_id if chain_id is not None else global_config.chain.chain_id
        self._api_key = api_key or cfg.api_key
        self._base_url = (base_url or cfg.base_url or get_api_host(self._chain_id)).rstrip("/")
        self._swap_version = swap_version or cfg.swap_version
        self._timeout = timeout or cfg.timeout
        self._max_retries = max(1, max_retries if max_retries is not None else cfg.max_retries)
        self._retry_delay = retry_delay if retry_delay is not None else cfg.retry_delay
        self._client: Optional[httpx.Client] = None

    @property
    def chain_id(self) -> int:
        """Chain ID this client is configured for"""
        return self._chain_id

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def swap_version(self) -> str:
        return self._swap_version

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client with auth headers"""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["0x-api-key"] = self._api_key

            self._client = httpx.Client(
                timeout=self._timeout,
                headers=headers,
            )
        return self._client

    def _build_url(self, endpoint: str) -> str:
        return f"{self._base_url}/swap/{self._swap_version}/{endpoint}"

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        GET with retries

        Raises:
            QuoteError: On 4xx immediately, or when all retries fail
        """
        client = self._get_client()
        url = self._build_url(endpoint)
        last_error: Optional[QuoteError] = None

        for attempt in range(self._max_retries):
            if attempt > 0:
                time.sleep(self._retry_delay * attempt)

            try:
                response = client.get(url, params=params)
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError as e:
                    raise QuoteError.unavailable("invalid JSON", e) from e

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                reason = _error_reason(e.response)
                logger.warning(f"0x API error (attempt {attempt + 1}): HTTP {status} {reason}")

                # Don't retry client errors (4xx)
                if 400 <= status < 500:
                    raise QuoteError.rejected(status, reason) from e
                last_error = QuoteError.unavailable(f"HTTP {status} {reason}", e)

            except httpx.TimeoutException as e:
                logger.warning(f"0x API timeout (attempt {attempt + 1})")
                last_error = QuoteError.unavailable("timeout", e)

            except httpx.RequestError as e:
                logger.warning(f"0x API request error (attempt {attempt + 1}): {e}")
                last_error = QuoteError.unavailable(f"request error: {e}", e)

        raise last_error or QuoteError.unavailable("request failed")

    @staticmethod
    def _swap_params(
        buy_token: str,
        sell_token: str,
        sell_amount: int,
        taker_address: Optional[str],
        slippage_percentage: Optional[float],
        gas_price: Optional[int],
    ) -> Dict[str, str]:
        params = {
            "buyToken": buy_token,
            "sellToken": sell_token,
            "sellAmount": str(sell_amount),
        }
        if taker_address:
            params["takerAddress"] = taker_address
        if slippage_percentage is not None:
            params["slippagePercentage"] = str(slippage_percentage)
        if gas_price is not None:
            params["gasPrice"] = str(gas_price)
        return params

    def get_quote(
        self,
        buy_token: str,
        sell_token: str,
        sell_amount: int,
        taker_address: Optional[str] = None,
        slippage_percentage: Optional[float] = None,
        gas_price: Optional[int] = None,
    ) -> SwapQuote:
        """
        Get a firm swap quote including the transaction to send

        Args:
            buy_token: Address (or symbol) of the token to buy
            sell_token: Address (or symbol) of the token to sell
            sell_amount: Amount to sell in base units
            taker_address: Address that will send the transaction; lets the
                API validate balance/allowance and estimate gas accurately
            slippage_percentage: Max acceptable slippage (0.01 = 1%)
            gas_price: Gas price in wei to build the transaction with

        Returns:
            SwapQuote with transaction fields and pricing
        """
        params = self._swap_params(
            buy_token, sell_token, sell_amount, taker_address, slippage_percentage, gas_price,
        )
        data = self._get("quote", params)
        return SwapQuote.from_response(data)

    def get_price(
        self,
        buy_token: str,
        sell_token: str,
        sell_amount: int,
        taker_address: Optional[str] = None,
    ) -> SwapQuote:
        """
        Get an indicative price (no transaction data)

        Same parameters as get_quote; the returned quote has empty `to`/`data`.
        """
        params = self._swap_params(buy_token, sell_token, sell_amount, taker_address, None, None)
        data = self._get("price", params)
        return SwapQuote.from_response(data)

    def close(self):
        """Close HTTP client"""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "ZeroExAPI":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"ZeroExAPI(chain_id={self._chain_id}, base_url={self._base_url})"
