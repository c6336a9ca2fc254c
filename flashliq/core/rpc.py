# /flashliq/core/rpc.py
# Builds the async Web3 client for the single configured endpoint.

import asyncio

import aiohttp
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception

from flashliq.core.errors import TransportError
from flashliq.core.logger import get_logger

log = get_logger(__name__)

# Failures that mean "the node could not answer", as opposed to a revert.
TRANSPORT_EXCEPTIONS = (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError, OSError)


def make_web3(rpc_url: str, timeout: int = 10) -> AsyncWeb3:
    if not rpc_url:
        raise TransportError("No RPC endpoint configured.")
    w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)}))
    log.info("ASYNC_WEB3_PROVIDER_CREATED", timeout=timeout)
    return w3


async def ensure_connected(w3: AsyncWeb3) -> None:
    try:
        connected = await w3.is_connected()
    except TRANSPORT_EXCEPTIONS as e:
        raise TransportError(f"RPC endpoint unreachable: {e}") from e
    if not connected:
        raise TransportError("RPC endpoint unreachable.")
