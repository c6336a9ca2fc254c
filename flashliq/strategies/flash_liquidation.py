# /flashliq/strategies/flash_liquidation.py
# The liquidation pipeline: encode path -> quote -> evaluate -> submit.
# Each step finishes before the next starts; nothing is re-evaluated once
# submission begins.

import time
from typing import Callable

from web3 import Web3

from flashliq.core.config import Settings
from flashliq.core.errors import ConfigurationError
from flashliq.core.evaluator import evaluate
from flashliq.core.execution import build_execution_params
from flashliq.core.logger import get_logger, bind_position, NOT_PROFITABLE, ERRORS_LOGGED
from flashliq.core.models import LiquidationOutcome, Thresholds
from flashliq.core.path import encode_path, parse_encoded_path, parse_path
from flashliq.strategies.base import AbstractStrategy

log = get_logger(__name__)


class FlashLiquidationStrategy(AbstractStrategy):
    """
    Runs one flash liquidation decision for one position.

    All configuration is passed in, so several instances (for different
    positions or thresholds) can run side by side in one process.
    """
    def __init__(
        self,
        liquidator,
        thresholds: Thresholds,
        gas_limit: int,
        deadline_window: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        if gas_limit <= 0:
            raise ConfigurationError("gas_limit must be positive")
        if deadline_window <= 0:
            raise ConfigurationError("deadline_window must be positive")
        self.liquidator = liquidator
        self.thresholds = thresholds
        self.gas_limit = gas_limit
        self.deadline_window = deadline_window
        self.clock = clock
        log.info(
            "FLASH_LIQUIDATION_STRATEGY_INITIALIZED",
            min_profit=thresholds.min_profit,
            slippage_pct=thresholds.slippage_pct,
            gas_limit=gas_limit,
            deadline_window=deadline_window,
        )

    @classmethod
    def from_settings(cls, liquidator, settings: Settings) -> "FlashLiquidationStrategy":
        try:
            thresholds = Thresholds.parse(settings.MIN_PROFIT, settings.SLIPPAGE_PCT, settings.PROFIT_TOKEN_DECIMALS)
        except ValueError as e:
            raise ConfigurationError(f"Invalid profit thresholds: {e}") from e
        return cls(
            liquidator,
            thresholds,
            gas_limit=settings.GAS_LIMIT,
            deadline_window=settings.DEADLINE_WINDOW_SECONDS,
        )

    async def simulate(self, position_ref: str, path_text: str, encoded: bool = False) -> LiquidationOutcome:
        return await self._execute(position_ref, path_text, encoded, submit=False)

    async def run(self, position_ref: str, path_text: str, encoded: bool = False) -> LiquidationOutcome:
        return await self._execute(position_ref, path_text, encoded, submit=True)

    async def _execute(self, position_ref: str, path_text: str, encoded: bool, submit: bool) -> LiquidationOutcome:
        # Malformed input must fail before any network call.
        if not Web3.is_address(position_ref):
            raise ConfigurationError(f"Position reference is not an address: {position_ref!r}")
        position_ref = Web3.to_checksum_address(position_ref)
        swap_path = parse_encoded_path(path_text) if encoded else parse_path(path_text)
        path_bytes = encode_path(swap_path)
        bind_position(position_ref)
        log.info("SWAP_PATH_ENCODED", path=str(swap_path), encoded="0x" + path_bytes.hex())

        try:
            quote = await self.liquidator.find_best_quote(position_ref, path_bytes)
        except Exception as e:
            ERRORS_LOGGED.labels("quote").inc()
            log.error("QUOTE_FAILED", error=str(e), error_type=type(e).__name__)
            raise

        decision = evaluate(quote, self.thresholds)
        outcome = LiquidationOutcome(position_ref=position_ref, path=swap_path, quote=quote, decision=decision)
        if not decision.approved:
            NOT_PROFITABLE.labels(decision.reason).inc()
            log.info("NOT_PROFITABLE", reason=decision.reason)
            return outcome

        if not submit:
            log.info("SIMULATION_APPROVED_NOT_SUBMITTED")
            return outcome

        params = build_execution_params(
            position_ref,
            self.liquidator.executor_address,
            decision,
            path_bytes,
            now=self.clock(),
            deadline_window=self.deadline_window,
        )
        log.info("EXECUTION_PARAMS_BUILT", **params.model_dump(mode="json"))
        try:
            tx_hash = await self.liquidator.flash_liquidate(params, self.gas_limit)
        except Exception as e:
            ERRORS_LOGGED.labels("submission").inc()
            log.error("SUBMISSION_FAILED", error=str(e), error_type=type(e).__name__)
            raise
        return outcome.model_copy(update={"params": params, "tx_hash": tx_hash})
