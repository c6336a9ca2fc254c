# /flashliq/core/execution.py
from web3 import Web3

from flashliq.core.models import ApprovedBounds, ExecutionParams


def compute_deadline(now: float, window_seconds: int) -> int:
    """Unix second after which the contract must reject the transaction."""
    if window_seconds <= 0:
        raise ValueError("deadline window must be positive")
    return int(now) + window_seconds


def build_execution_params(
    position_ref: str,
    recipient: str,
    bounds: ApprovedBounds,
    path: bytes,
    *,
    now: float,
    deadline_window: int,
) -> ExecutionParams:
    """
    Assembles the flashLiquidate arguments for an approved quote.

    ``recipient`` must be the signer's own address; proceeds are never routed
    to anyone else.
    """
    return ExecutionParams(
        position_ref=Web3.to_checksum_address(position_ref),
        recipient=Web3.to_checksum_address(recipient),
        amount_out_min=bounds.amount_out_min,
        amount_in_max=bounds.amount_in_max,
        profit_min=bounds.profit_min,
        deadline=compute_deadline(now, deadline_window),
        path=path,
    )
