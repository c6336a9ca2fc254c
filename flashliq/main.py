# /flashliq/main.py
# Command-line entrypoint: one liquidation decision per process run.
#
#   flashliq <POSITION> <PATH> [--encoded] [--dry-run] [--wait]
#
# PATH is "TOKEN/FEE/TOKEN/..." or, with --encoded, an already packed hex path.
import argparse
import asyncio
import sys

from flashliq.core.config import settings
from flashliq.core.config_validator import validate as validate_config
from flashliq.core.errors import ConfigurationError, ContractRevert, MalformedPathError, TransportError
from flashliq.core.logger import configure_logging, get_logger
from flashliq.core.path import parse_encoded_path, parse_path
from flashliq.core.rpc import ensure_connected, make_web3
from flashliq.core.tx import TransactionSigner
from flashliq.adapters.flash_liquidator import FlashLiquidatorAdapter, RetryingFlashLiquidatorAdapter
from flashliq.strategies.flash_liquidation import FlashLiquidationStrategy

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="flashliq", description="Quote and execute a flash liquidation.")
    parser.add_argument("position", help="address of the liquidity position to liquidate")
    parser.add_argument("path", help="swap path, TOKEN/FEE/TOKEN/...")
    parser.add_argument("--encoded", action="store_true", help="PATH is already a packed hex path")
    parser.add_argument("--dry-run", action="store_true", help="quote and evaluate only, never submit")
    parser.add_argument("--wait", action="store_true", help="wait for the receipt and fail on revert")
    return parser.parse_args(argv)


async def main(args: argparse.Namespace) -> int:
    log = get_logger("FlashLiq.System")
    validate_config(settings, require_signer=not args.dry_run)
    # Bad route text is rejected before any RPC traffic.
    (parse_encoded_path if args.encoded else parse_path)(args.path)

    w3 = make_web3(settings.rpc_url, settings.RPC_TIMEOUT_SECONDS)
    await ensure_connected(w3)
    signer = None
    if not args.dry_run:
        signer = TransactionSigner(w3, settings.EXECUTOR_PRIVATE_KEY.get_secret_value(), settings.chain_id)

    adapter_cls = RetryingFlashLiquidatorAdapter if settings.RETRY_QUOTES else FlashLiquidatorAdapter
    liquidator = adapter_cls(w3, settings.FLASH_LIQUIDATOR_ADDRESS, signer)
    strategy = FlashLiquidationStrategy.from_settings(liquidator, settings)

    if args.dry_run:
        outcome = await strategy.simulate(args.position, args.path, encoded=args.encoded)
    else:
        outcome = await strategy.run(args.position, args.path, encoded=args.encoded)
    print(outcome.model_dump_json(indent=2))

    if outcome.submitted and args.wait:
        await signer.wait_for_receipt(outcome.tx_hash, timeout=settings.RECEIPT_TIMEOUT_SECONDS)
    elif not outcome.decision.approved:
        print("not profitable...")

    log.info("FLASH_LIQUIDATION_RUN_COMPLETE", submitted=outcome.submitted)
    return EXIT_OK


def run(argv=None) -> int:
    configure_logging()
    args = parse_args(argv)
    log = get_logger("FlashLiq.System")
    try:
        return asyncio.run(main(args))
    except (MalformedPathError, ConfigurationError) as e:
        log.error("INVALID_INPUT", error=str(e))
        return EXIT_BAD_INPUT
    except (TransportError, ContractRevert) as e:
        log.error("RUN_FAILED", error=str(e), error_type=type(e).__name__)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(run())
