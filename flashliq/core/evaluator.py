# /flashliq/core/evaluator.py
# Decides whether a quote is worth executing and derives the on-chain bounds.
# Integer arithmetic only: the contract compares these values with its own
# uint256 math, so any float rounding would drift from it.

from flashliq.core.logger import get_logger
from flashliq.core.models import ApprovedBounds, Decision, NotProfitable, Quote, Thresholds

log = get_logger(__name__)

PERCENT = 100


def evaluate(quote: Quote, thresholds: Thresholds) -> Decision:
    """
    Applies the profit threshold and slippage tolerance to a fresh quote.

    The threshold is strict: a quote whose profit equals ``min_profit`` is
    rejected, since state can move against us before inclusion.

    Returns:
        ApprovedBounds when the liquidation should be sent, otherwise
        NotProfitable with the reason.
    """
    if not quote.success:
        log.info("QUOTE_NOT_PROFITABLE", reason="quote_unsuccessful")
        return NotProfitable(reason="quote_unsuccessful")

    if quote.profit <= thresholds.min_profit:
        log.info("QUOTE_NOT_PROFITABLE", reason="below_threshold", profit=quote.profit, min_profit=thresholds.min_profit)
        return NotProfitable(reason="below_threshold")

    pct = thresholds.slippage_pct
    # profit > min_profit >= 0 here, so floor division truncates toward zero.
    bounds = ApprovedBounds(
        amount_out_min=quote.amount_out,
        amount_in_max=quote.amount_in * (PERCENT + pct) // PERCENT,
        profit_min=quote.profit * (PERCENT - pct) // PERCENT,
    )
    log.info(
        "QUOTE_APPROVED",
        profit=quote.profit,
        amount_in_max=bounds.amount_in_max,
        profit_min=bounds.profit_min,
        slippage_pct=pct,
    )
    return bounds
