# /flashliq/core/errors.py
# Failure taxonomy of the liquidation pipeline. A quote that is not worth
# executing is not an error; see NotProfitable in flashliq.core.models.


class FlashLiquidationError(Exception):
    """Base class for every failure the pipeline surfaces to its caller."""


class MalformedPathError(FlashLiquidationError, ValueError):
    """Route text or encoded path violates the address/fee alternation."""


class TransportError(FlashLiquidationError):
    """RPC or network failure during the quote or the submission.

    The original exception is always chained as ``__cause__``.
    """


class ContractRevert(FlashLiquidationError):
    """The flash liquidator rejected the call."""

    def __init__(self, message: str, tx_hash: str | None = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class ConfigurationError(FlashLiquidationError, ValueError):
    pass
