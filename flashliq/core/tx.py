# /flashliq/core/tx.py
# Signing collaborator: owns the executor key, fills nonce and chain id, and
# broadcasts. No resubmission and no durable nonce tracking; every call sends
# exactly one transaction.
from typing import Dict, Any

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError

from flashliq.core.errors import ContractRevert, TransportError
from flashliq.core.logger import get_logger
from flashliq.core.rpc import TRANSPORT_EXCEPTIONS

log = get_logger(__name__)


class TransactionSigner:
    """Signs and broadcasts transactions for a single executor account."""
    def __init__(self, w3: AsyncWeb3, private_key: str, chain_id: int):
        self.w3 = w3
        self.account: LocalAccount = Account.from_key(private_key)
        self.address = self.account.address
        self.chain_id = chain_id
        log.info("TRANSACTION_SIGNER_INITIALIZED", address=self.address, chain_id=chain_id)

    async def send_transaction(self, tx_params: Dict[str, Any]) -> str:
        """Signs ``tx_params`` with the executor key and broadcasts it once.

        Returns:
            The 0x-prefixed transaction hash.
        """
        try:
            nonce = await self.w3.eth.get_transaction_count(self.address, "pending")
            full_tx_params = {
                **tx_params,
                'from': self.address,
                'nonce': nonce,
                'chainId': self.chain_id,
            }
            signed_tx = self.account.sign_transaction(full_tx_params)
            tx_hash = Web3.to_hex(await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction))
        except ContractLogicError as e:
            log.error("TRANSACTION_REJECTED_AS_REVERT", error=str(e))
            raise ContractRevert(f"Node rejected transaction: {e}") from e
        except TRANSPORT_EXCEPTIONS as e:
            log.error("TRANSACTION_BROADCAST_FAILURE", error=str(e), exc_info=True)
            raise TransportError(f"Broadcast failed: {e}") from e

        log.info("TRANSACTION_BROADCASTED", tx_hash=tx_hash, nonce=nonce)
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str, timeout: int = 120) -> Dict[str, Any]:
        """Waits for inclusion; a status-0 receipt raises ContractRevert."""
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TRANSPORT_EXCEPTIONS as e:
            raise TransportError(f"Receipt for {tx_hash} unavailable: {e}") from e
        if receipt["status"] == 0:
            log.error("TRANSACTION_REVERTED", tx_hash=tx_hash, block=receipt.get("blockNumber"))
            raise ContractRevert("flashLiquidate reverted on-chain.", tx_hash=tx_hash)
        log.info("TRANSACTION_CONFIRMED", tx_hash=tx_hash, block=receipt.get("blockNumber"), gas_used=receipt.get("gasUsed"))
        return receipt
