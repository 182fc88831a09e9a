"""
Test Swap Module

Tests for the balance / allowance / quote / send workflow with mocked
token contracts, 0x API and transaction sending.
"""

import sys
import unittest
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from web3 import Web3

from zeroex_swap.modules.swap import SwapModule, NOT_ENOUGH_BALANCE
from zeroex_swap.infra.erc20 import ERC20Token, MAX_UINT256
from zeroex_swap.protocols.zeroex import ZeroExAPI
from zeroex_swap.types import SwapQuote, TxResult, TxStatus
from zeroex_swap.errors import InsufficientFunds, InvalidAmount, QuoteError, TransactionError

TAKER = Web3.to_checksum_address("0x5409ed021d9299bf6814279a6a1411a7e866a631")
SPENDER = Web3.to_checksum_address("0xf1ec01d6236d3cd881a0bf0130ea25fe4234003e")
DAI = Web3.to_checksum_address("0x48178164eb4769bb919414adc980b659a634703e")
WETH = Web3.to_checksum_address("0xd0a1e359811322d97991e03f863a0c30c2cf029c")
EXCHANGE = "0xdef1c0ded9bec7f1a1670819833240f027b25eff"

ONE = 10 ** 18


def _config(unlimited=False, precision=2, gas_multiplier=1.0, erc20_proxy=""):
    cfg = MagicMock()
    cfg.trading.unlimited_approval = unlimited
    cfg.trading.comparison_precision = precision
    cfg.tx.quote_gas_multiplier = gas_multiplier
    cfg.zeroex.erc20_proxy = erc20_proxy
    return cfg


def _token(address, balance=0, allowance=0, decimals=18):
    token = MagicMock(spec=ERC20Token)
    token.address = address
    token.decimals.return_value = decimals
    token.balance_of.return_value = balance
    token.allowance.return_value = allowance
    token.approve.return_value = TxResult(
        tx_hash="0xapprove", status=TxStatus.SUCCESS, block_number=10
    )
    return token


def _quote():
    return SwapQuote(
        to=EXCHANGE,
        data="0xd9627aa4",
        value=0,
        gas=250_000,
        gas_price=5_000_000_000,
        price=Decimal("0.0005"),
        buy_amount=10 ** 16,
        sell_amount=20 * ONE,
        orders=[{"source": "Uniswap", "makerAmount": "10000000000000000"}],
    )


class SwapTestCase(unittest.TestCase):

    def setUp(self):
        self.cfg_patch = patch("zeroex_swap.modules.swap.config", _config())
        self.cfg_patch.start()
        self.send_patch = patch("zeroex_swap.modules.swap.send_transaction")
        self.mock_send = self.send_patch.start()
        self.mock_send.return_value = TxResult(
            tx_hash="0xswap", status=TxStatus.SUCCESS, block_number=11
        )

        self.web3 = MagicMock()
        self.api = MagicMock(spec=ZeroExAPI)
        self.api.chain_id = 42
        self.api.get_quote.return_value = _quote()
        self.alert = MagicMock()
        self.swap = SwapModule(self.web3, self.api, spender=SPENDER, alert=self.alert)

        self.dai = _token(DAI, balance=100 * ONE, allowance=0)
        self.weth = _token(WETH)

    def tearDown(self):
        self.send_patch.stop()
        self.cfg_patch.stop()


class TestPerformSwap(SwapTestCase):

    def test_full_workflow_order(self):
        calls = []
        self.dai.balance_of.side_effect = lambda owner: calls.append("balance") or 100 * ONE
        self.dai.allowance.side_effect = lambda owner, spender: calls.append("allowance") or 0
        approval = self.dai.approve.return_value
        self.dai.approve.side_effect = lambda *a, **kw: calls.append("approve") or approval
        quote = _quote()
        self.api.get_quote.side_effect = lambda **kw: calls.append("quote") or quote
        swap_tx = self.mock_send.return_value
        self.mock_send.side_effect = lambda *a, **kw: calls.append("send") or swap_tx

        result = self.swap.perform_swap(self.weth, self.dai, Decimal("20.5"), TAKER)

        self.assertEqual(calls, ["balance", "allowance", "approve", "quote", "send"])
        self.assertTrue(result.is_success)
        self.assertTrue(result.approved)
        self.assertIs(result.quote, quote)
        self.alert.assert_not_called()

    def test_quote_request_params(self):
        self.swap.perform_swap(self.weth, self.dai, Decimal("20.5"), TAKER)

        self.api.get_quote.assert_called_once_with(
            buy_token=WETH,
            sell_token=DAI,
            sell_amount=20500000000000000000,
            taker_address=TAKER,
            slippage_percentage=None,
        )

    def test_buy_token_as_address(self):
        self.swap.perform_swap(WETH, self.dai, 1, TAKER, slippage_percentage=0.01)

        kwargs = self.api.get_quote.call_args[1]
        self.assertEqual(kwargs["buy_token"], WETH)
        self.assertEqual(kwargs["slippage_percentage"], 0.01)

    def test_sends_quote_transaction(self):
        self.swap.perform_swap(self.weth, self.dai, 20, TAKER)

        self.mock_send.assert_called_once_with(
            self.web3,
            {
                "from": TAKER,
                "to": EXCHANGE,
                "data": "0xd9627aa4",
                "gas": 250_000,
                "gasPrice": 5_000_000_000,
                "value": 0,
            },
            signer=None,
        )

    def test_quote_gas_multiplier(self):
        with patch("zeroex_swap.modules.swap.config", _config(gas_multiplier=1.5)):
            self.swap.perform_swap(self.weth, self.dai, 20, TAKER)

        tx_params = self.mock_send.call_args[0][1]
        self.assertEqual(tx_params["gas"], 375_000)

    def test_insufficient_balance(self):
        self.dai.balance_of.return_value = 10 * ONE

        with self.assertRaises(InsufficientFunds) as ctx:
            self.swap.perform_swap(self.weth, self.dai, 20, TAKER)

        self.alert.assert_called_once_with(NOT_ENOUGH_BALANCE)
        self.assertEqual(ctx.exception.available, Decimal("10.00"))
        self.dai.allowance.assert_not_called()
        self.dai.approve.assert_not_called()
        self.api.get_quote.assert_not_called()
        self.mock_send.assert_not_called()

    def test_balance_rounded_before_comparison(self):
        # 19.995 rounds half-up to 20.00
        self.dai.balance_of.return_value = 19_995 * 10 ** 15
        self.swap.perform_swap(self.weth, self.dai, 20, TAKER)
        self.alert.assert_not_called()

        # 19.994 rounds to 19.99
        self.dai.balance_of.return_value = 19_994 * 10 ** 15
        with self.assertRaises(InsufficientFunds):
            self.swap.perform_swap(self.weth, self.dai, 20, TAKER)

    def test_allowance_sufficient_skips_approve(self):
        self.dai.allowance.return_value = 50 * ONE

        result = self.swap.perform_swap(self.weth, self.dai, 20, TAKER)

        self.dai.allowance.assert_called_once_with(TAKER, SPENDER)
        self.dai.approve.assert_not_called()
        self.assertIsNone(result.approval)
        self.assertFalse(result.approved)

    def test_approves_exact_amount(self):
        self.dai.allowance.return_value = 5 * ONE

        self.swap.perform_swap(self.weth, self.dai, Decimal("20.5"), TAKER)

        self.dai.approve.assert_called_once_with(
            SPENDER, 20500000000000000000, TAKER, signer=None
        )

    def test_invalid_amount_rejected_before_any_step(self):
        for amount in ("NaN", Decimal("Infinity"), "20.0000000000000000001", -1):
            with self.subTest(amount=amount):
                with self.assertRaises(InvalidAmount):
                    self.swap.perform_swap(self.weth, self.dai, amount, TAKER)

        self.dai.balance_of.assert_not_called()
        self.dai.allowance.assert_not_called()
        self.dai.approve.assert_not_called()
        self.api.get_quote.assert_not_called()
        self.mock_send.assert_not_called()
        self.alert.assert_not_called()

    def test_too_precise_for_sell_token_decimals(self):
        usdc = _token(DAI, balance=100 * 10 ** 6, decimals=6)

        with self.assertRaises(InvalidAmount) as ctx:
            self.swap.perform_swap(self.weth, usdc, "1.0000001", TAKER)

        self.assertEqual(ctx.exception.decimals, 6)
        usdc.balance_of.assert_not_called()
        self.api.get_quote.assert_not_called()

    def test_quote_error_propagates(self):
        self.api.get_quote.side_effect = QuoteError.rejected(400, "Insufficient liquidity")

        with self.assertRaises(QuoteError):
            self.swap.perform_swap(self.weth, self.dai, 20, TAKER)
        self.mock_send.assert_not_called()

    def test_reverted_swap_propagates(self):
        self.mock_send.side_effect = TransactionError.reverted("0xswap", {"status": 0})

        with self.assertRaises(TransactionError):
            self.swap.perform_swap(self.weth, self.dai, 20, TAKER)


class TestAllowance(SwapTestCase):

    def test_unlimited_approval(self):
        self.swap.ensure_allowance(self.dai, 1, TAKER, unlimited=True)
        self.dai.approve.assert_called_once_with(SPENDER, MAX_UINT256, TAKER, signer=None)

    def test_unlimited_from_config(self):
        with patch("zeroex_swap.modules.swap.config", _config(unlimited=True)):
            self.swap.ensure_allowance(self.dai, 1, TAKER)
        self.assertEqual(self.dai.approve.call_args[0][1], MAX_UINT256)

    def test_approval_uses_module_signer(self):
        signer = MagicMock()
        swap = SwapModule(self.web3, self.api, signer=signer, spender=SPENDER)
        swap.ensure_allowance(self.dai, 1, TAKER)
        self.assertIs(self.dai.approve.call_args[1]["signer"], signer)

    def test_allowance_rounded_before_comparison(self):
        # 19.995 rounds half-up to 20.00
        self.dai.allowance.return_value = 19_995 * 10 ** 15
        self.assertIsNone(self.swap.ensure_allowance(self.dai, 20, TAKER))
        self.dai.approve.assert_not_called()

        # 19.994 rounds to 19.99
        self.dai.allowance.return_value = 19_994 * 10 ** 15
        approval = self.swap.ensure_allowance(self.dai, 20, TAKER)
        self.dai.approve.assert_called_once_with(SPENDER, 20 * ONE, TAKER, signer=None)
        self.assertEqual(approval.tx_hash, "0xapprove")


class TestSpender(unittest.TestCase):

    def _api(self, chain_id, swap_version="v1"):
        api = MagicMock(spec=ZeroExAPI)
        api.chain_id = chain_id
        api.swap_version = swap_version
        return api

    @patch("zeroex_swap.modules.swap.config", _config())
    def test_v0_quotes_use_erc20_proxy(self):
        swap = SwapModule(MagicMock(), self._api(42, "v0"))
        self.assertEqual(swap.spender, SPENDER)

    @patch("zeroex_swap.modules.swap.config", _config())
    def test_v1_quotes_use_exchange_proxy(self):
        # Kovan has a v3 ERC20Proxy, but v1 quotes are filled by the exchange proxy
        swap = SwapModule(MagicMock(), self._api(42, "v1"))
        self.assertEqual(swap.spender, Web3.to_checksum_address(EXCHANGE))

        swap = SwapModule(MagicMock(), self._api(1, "v1"))
        self.assertEqual(swap.spender, Web3.to_checksum_address(EXCHANGE))

    @patch("zeroex_swap.modules.swap.config", _config())
    def test_unknown_chain_uses_exchange_proxy(self):
        swap = SwapModule(MagicMock(), self._api(137, "v0"))
        self.assertEqual(swap.spender, Web3.to_checksum_address(EXCHANGE))

    @patch("zeroex_swap.modules.swap.config", _config(erc20_proxy=WETH))
    def test_configured_spender(self):
        for version in ("v0", "v1"):
            swap = SwapModule(MagicMock(), self._api(42, version))
            self.assertEqual(swap.spender, WETH)


class TestQuoteAndPrice(SwapTestCase):

    def test_quote_without_taker(self):
        quote = self.swap.quote(self.weth, self.dai, 1)

        self.assertEqual(quote.gas, 250_000)
        self.assertIsNone(self.api.get_quote.call_args[1]["taker_address"])
        self.dai.balance_of.assert_not_called()

    def test_price(self):
        self.api.get_price.return_value = _quote()

        price = self.swap.price(self.weth, self.dai, 1)

        self.assertEqual(price, Decimal("0.0005"))
        self.api.get_price.assert_called_once_with(
            buy_token=WETH, sell_token=DAI, sell_amount=ONE,
        )


if __name__ == "__main__":
    unittest.main()
