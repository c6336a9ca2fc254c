# /test/test_strategies.py
# Tests the liquidation pipeline end to end against the mock adapter.

import pytest
from web3 import Web3

from flashliq.adapters.mock import MockFlashLiquidator
from flashliq.core.config import Settings
from flashliq.core.errors import ConfigurationError, ContractRevert, MalformedPathError, TransportError
from flashliq.core.models import ApprovedBounds, NotProfitable, Quote, Thresholds
from flashliq.core.path import encode_path_text
from flashliq.strategies.flash_liquidation import FlashLiquidationStrategy

# --- Constants for testing ---
POSITION = "0x1111111111111111111111111111111111111111"
PATH_TEXT = "0xA/500/0xB"
NOW = 1_700_000_000
PROFIT = 5 * 10**17
PROFITABLE_QUOTE = Quote(success=True, amount_in=100, amount_out=200, profit=PROFIT)

# --- Pytest Fixture for Test Setup ---

@pytest.fixture
def mock_env():
    """A mock liquidator and a strategy with a 0.4 token threshold and 1% slippage."""
    liquidator = MockFlashLiquidator()
    strategy = FlashLiquidationStrategy(
        liquidator,
        Thresholds(min_profit=4 * 10**17, slippage_pct=1),
        gas_limit=1_500_000,
        deadline_window=60,
        clock=lambda: NOW,
    )
    return strategy, liquidator

# --- Test Cases ---

@pytest.mark.asyncio
async def test_profitable_quote_is_submitted_with_bounds(mock_env):
    """
    GIVEN a quote above the profit threshold
    WHEN the strategy runs
    THEN exactly one flashLiquidate is sent with slippage and deadline bounds.
    """
    strategy, liquidator = mock_env
    path_bytes = encode_path_text(PATH_TEXT)
    liquidator.set_quote(POSITION, path_bytes, PROFITABLE_QUOTE)

    outcome = await strategy.run(POSITION, PATH_TEXT)

    assert outcome.submitted
    assert outcome.tx_hash == "0xfake_tx_hash_0"
    assert len(liquidator.sent_transactions) == 1
    sent = liquidator.sent_transactions[0]
    assert sent["gas"] == 1_500_000
    assert sent["params"] == outcome.params
    assert outcome.params.as_args() == (
        Web3.to_checksum_address(POSITION),
        Web3.to_checksum_address(liquidator.executor_address),
        200,
        101,
        PROFIT * 99 // 100,
        NOW + 60,
        path_bytes,
    )


@pytest.mark.asyncio
async def test_quote_at_threshold_is_not_submitted(mock_env):
    strategy, liquidator = mock_env
    strategy.thresholds = Thresholds(min_profit=PROFIT, slippage_pct=1)
    liquidator.set_quote(POSITION, encode_path_text(PATH_TEXT), PROFITABLE_QUOTE)

    outcome = await strategy.run(POSITION, PATH_TEXT)

    assert outcome.decision == NotProfitable(reason="below_threshold")
    assert outcome.params is None
    assert not outcome.submitted
    assert liquidator.sent_transactions == []


@pytest.mark.asyncio
async def test_unsuccessful_quote_is_not_submitted(mock_env):
    strategy, liquidator = mock_env
    liquidator.set_quote(
        POSITION, encode_path_text(PATH_TEXT), Quote(success=False, amount_in=100, amount_out=200, profit=10**30)
    )

    outcome = await strategy.run(POSITION, PATH_TEXT)

    assert outcome.decision == NotProfitable(reason="quote_unsuccessful")
    assert liquidator.sent_transactions == []


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_path", ["0xA/500", "0xA/fee/0xB"])
async def test_malformed_path_fails_before_any_network_call(mock_env, bad_path):
    strategy, liquidator = mock_env

    with pytest.raises(MalformedPathError):
        await strategy.run(POSITION, bad_path)

    assert liquidator.quote_calls == []
    assert liquidator.sent_transactions == []


@pytest.mark.asyncio
async def test_invalid_position_fails_before_any_network_call(mock_env):
    strategy, liquidator = mock_env

    with pytest.raises(ConfigurationError):
        await strategy.run("not-an-address", PATH_TEXT)

    assert liquidator.quote_calls == []


@pytest.mark.asyncio
async def test_quote_transport_error_propagates_unchanged(mock_env):
    strategy, liquidator = mock_env
    error = TransportError("connection reset")
    liquidator.fail_next_quote(error)

    with pytest.raises(TransportError) as excinfo:
        await strategy.run(POSITION, PATH_TEXT)

    assert excinfo.value is error
    assert liquidator.sent_transactions == []


@pytest.mark.asyncio
async def test_submission_failure_is_not_retried(mock_env):
    strategy, liquidator = mock_env
    liquidator.set_quote(POSITION, encode_path_text(PATH_TEXT), PROFITABLE_QUOTE)
    liquidator.fail_next_submission()

    with pytest.raises(ContractRevert):
        await strategy.run(POSITION, PATH_TEXT)

    assert liquidator.sent_transactions == []
    assert len(liquidator.quote_calls) == 1


@pytest.mark.asyncio
async def test_simulation_never_submits(mock_env):
    strategy, liquidator = mock_env
    liquidator.set_quote(POSITION, encode_path_text(PATH_TEXT), PROFITABLE_QUOTE)

    outcome = await strategy.simulate(POSITION, PATH_TEXT)

    assert isinstance(outcome.decision, ApprovedBounds)
    assert outcome.params is None
    assert liquidator.sent_transactions == []


@pytest.mark.asyncio
async def test_pre_encoded_path_is_used_as_is(mock_env):
    strategy, liquidator = mock_env
    path_bytes = encode_path_text(PATH_TEXT)
    liquidator.set_quote(POSITION, path_bytes, PROFITABLE_QUOTE)

    outcome = await strategy.run(POSITION, "0x" + path_bytes.hex(), encoded=True)

    assert liquidator.quote_calls == [(Web3.to_checksum_address(POSITION), path_bytes)]
    assert outcome.params.path == path_bytes


@pytest.mark.asyncio
async def test_independent_strategies_do_not_share_thresholds():
    liquidator = MockFlashLiquidator()
    liquidator.set_quote(POSITION, encode_path_text(PATH_TEXT), PROFITABLE_QUOTE)
    strict = FlashLiquidationStrategy(liquidator, Thresholds(min_profit=PROFIT, slippage_pct=1), gas_limit=1, clock=lambda: NOW)
    loose = FlashLiquidationStrategy(liquidator, Thresholds(min_profit=0, slippage_pct=1), gas_limit=1, clock=lambda: NOW)

    assert not (await strict.run(POSITION, PATH_TEXT)).submitted
    assert (await loose.run(POSITION, PATH_TEXT)).submitted


def test_from_settings_parses_thresholds_without_floats():
    settings = Settings(MIN_PROFIT="0.4", SLIPPAGE_PCT=2, GAS_LIMIT=900_000, DEADLINE_WINDOW_SECONDS=30)
    strategy = FlashLiquidationStrategy.from_settings(MockFlashLiquidator(), settings)

    assert strategy.thresholds == Thresholds(min_profit=4 * 10**17, slippage_pct=2)
    assert strategy.gas_limit == 900_000
    assert strategy.deadline_window == 30


def test_from_settings_rejects_bad_thresholds():
    with pytest.raises(ConfigurationError):
        FlashLiquidationStrategy.from_settings(MockFlashLiquidator(), Settings(MIN_PROFIT="0.4.1"))
