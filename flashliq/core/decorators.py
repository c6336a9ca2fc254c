# /flashliq/core/decorators.py
# Reusable decorators for operational resilience.
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential, before_sleep_log
from flashliq.core.errors import TransportError
from flashliq.core.logger import get_logger
import logging

log = get_logger(__name__)

# Retry policy for read-only network calls. Never wrap a state-changing call
# with this: a broadcast that timed out may still have landed.
retriable_network_call = retry(
    retry=retry_if_exception_type(TransportError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    before_sleep=before_sleep_log(log, logging.WARNING),
    reraise=True # Re-raise the last exception after retries are exhausted
)
