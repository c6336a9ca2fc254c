# /flashliq/adapters/flash_liquidator.py
# Adapter for the deployed UniswapFlashLiquidation contract: the read-only
# quote simulation and the single state-changing liquidation call.

from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError

from flashliq.abis.flash_liquidator import FLASH_LIQUIDATOR_ABI
from flashliq.core.decorators import retriable_network_call
from flashliq.core.errors import ConfigurationError, ContractRevert, TransportError
from flashliq.core.logger import get_logger, LIQUIDATIONS_SUBMITTED, QUOTES_REQUESTED
from flashliq.core.models import ExecutionParams, Quote
from flashliq.core.rpc import TRANSPORT_EXCEPTIONS
from flashliq.core.tx import TransactionSigner

log = get_logger(__name__)


class FlashLiquidatorAdapter:
    """
    Talks to one flash liquidator deployment.

    The adapter never retries. Transport failures surface as TransportError so
    the caller can apply its own policy; a reverted simulation is reported as
    an unsuccessful Quote because it only means no route was found.
    """
    def __init__(self, w3: AsyncWeb3, liquidator_address: str, signer: TransactionSigner | None = None):
        self.w3 = w3
        self.liquidator_address = Web3.to_checksum_address(liquidator_address)
        self.contract = self.w3.eth.contract(address=self.liquidator_address, abi=FLASH_LIQUIDATOR_ABI)
        self.signer = signer
        log.info("FLASH_LIQUIDATOR_ADAPTER_INITIALIZED", liquidator=self.liquidator_address)

    @property
    def executor_address(self) -> str:
        """Address that signs, and receives the proceeds of, every liquidation."""
        if self.signer is None:
            raise ConfigurationError("No signer configured; only simulation is available.")
        return self.signer.address

    async def find_best_quote(self, position_ref: str, path: bytes) -> Quote:
        QUOTES_REQUESTED.inc()
        try:
            raw = await self.contract.functions.findBestQuoteStatic(
                Web3.to_checksum_address(position_ref), path
            ).call()
        except ContractLogicError as e:
            log.warning("QUOTE_SIMULATION_REVERTED", position_ref=position_ref, error=str(e))
            return Quote.unsuccessful()
        except TRANSPORT_EXCEPTIONS as e:
            log.error("QUOTE_TRANSPORT_FAILURE", position_ref=position_ref, error=str(e))
            raise TransportError(f"findBestQuoteStatic failed: {e}") from e

        success, amount_in, amount_out, profit = raw
        quote = Quote(success=bool(success), amount_in=int(amount_in), amount_out=int(amount_out), profit=int(profit))
        log.info("QUOTE_RECEIVED", position_ref=position_ref, **quote.model_dump())
        return quote

    async def flash_liquidate(self, params: ExecutionParams, gas_limit: int) -> str:
        """
        Builds and broadcasts flashLiquidate with a fixed gas ceiling.

        Returns:
            The transaction hash. Inclusion is not awaited here.
        """
        sender = self.executor_address
        try:
            tx_params = await self.contract.functions.flashLiquidate(*params.as_args()).build_transaction({
                'from': sender,
                'gas': gas_limit,
            })
        except ContractLogicError as e:
            raise ContractRevert(f"flashLiquidate rejected: {e}") from e
        except TRANSPORT_EXCEPTIONS as e:
            raise TransportError(f"flashLiquidate could not be built: {e}") from e

        tx_hash = await self.signer.send_transaction(tx_params)
        LIQUIDATIONS_SUBMITTED.inc()
        log.info(
            "FLASH_LIQUIDATION_SUBMITTED",
            tx_hash=tx_hash,
            position_ref=params.position_ref,
            deadline=params.deadline,
            gas_limit=gas_limit,
        )
        return tx_hash


class RetryingFlashLiquidatorAdapter(FlashLiquidatorAdapter):
    """Caller-side policy: retries the read-only quote on transport failures.

    Submission is inherited unchanged and is never retried.
    """
    @retriable_network_call
    async def find_best_quote(self, position_ref: str, path: bytes) -> Quote:
        return await super().find_best_quote(position_ref, path)
