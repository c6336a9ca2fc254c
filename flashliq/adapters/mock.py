# /flashliq/adapters/mock.py
# Test implementations of the flash liquidator adapter, so the pipeline can be
# exercised without a node.

from typing import List, Dict, Tuple

from flashliq.core.errors import ContractRevert, TransportError
from flashliq.core.logger import get_logger
from flashliq.core.models import ExecutionParams, Quote

log = get_logger(__name__)


class MockFlashLiquidator:
    """
    A mock FlashLiquidatorAdapter. Quotes are preset per (position, path);
    every call is recorded so tests can assert what reached the "network".
    """
    def __init__(self, executor_address: str = "0x00000000000000000000000000000000000000E1"):
        self.executor_address = executor_address
        self.quotes: Dict[Tuple[str, bytes], Quote] = {}
        self.quote_calls: List[Tuple[str, bytes]] = []
        self.sent_transactions: List[Dict] = []
        self._quote_failure: Exception | None = None
        self._submit_failure: Exception | None = None
        log.info("MOCK_FLASH_LIQUIDATOR_INITIALIZED", executor=executor_address)

    def set_quote(self, position_ref: str, path: bytes, quote: Quote):
        self.quotes[(position_ref.lower(), path)] = quote

    def fail_next_quote(self, error: Exception | None = None):
        self._quote_failure = error or TransportError("Forced quote failure for testing.")

    def fail_next_submission(self, error: Exception | None = None):
        self._submit_failure = error or ContractRevert("Forced revert for testing.")

    async def find_best_quote(self, position_ref: str, path: bytes) -> Quote:
        self.quote_calls.append((position_ref, path))
        if self._quote_failure is not None:
            error, self._quote_failure = self._quote_failure, None
            raise error
        key = (position_ref.lower(), path)
        if key not in self.quotes:
            raise ValueError(f"No mock quote set for {position_ref} and path 0x{path.hex()}")
        return self.quotes[key]

    async def flash_liquidate(self, params: ExecutionParams, gas_limit: int) -> str:
        if self._submit_failure is not None:
            error, self._submit_failure = self._submit_failure, None
            log.error("MOCK_SUBMISSION_FORCED_FAILURE", error=str(error))
            raise error
        tx_hash = f"0xfake_tx_hash_{len(self.sent_transactions)}"
        self.sent_transactions.append({"hash": tx_hash, "params": params, "gas": gas_limit})
        log.info("MOCK_FLASH_LIQUIDATION_SENT", tx_hash=tx_hash)
        return tx_hash
