# /flashliq/core/config_validator.py
# Run at startup to validate configuration and secrets before any RPC traffic.
from web3 import Web3

from flashliq.core.config import Settings, settings as default_settings
from flashliq.core.errors import ConfigurationError
from flashliq.core.logger import log

def validate(settings: Settings = default_settings, require_signer: bool = True):
    log.info("--- CONFIG VALIDATION START ---")
    required_vars = ['ETH_RPC_URL', 'FLASH_LIQUIDATOR_ADDRESS']
    if require_signer:
        required_vars.append('EXECUTOR_PRIVATE_KEY')
    errors = []

    for var in required_vars:
        if not getattr(settings, var, None):
            errors.append(f"Missing required configuration: {var}")

    if settings.FLASH_LIQUIDATOR_ADDRESS and not Web3.is_address(settings.FLASH_LIQUIDATOR_ADDRESS.lower()):
        errors.append(f"FLASH_LIQUIDATOR_ADDRESS is not an address: {settings.FLASH_LIQUIDATOR_ADDRESS}")
    if settings.GAS_LIMIT <= 0:
        errors.append("GAS_LIMIT must be positive")
    if settings.DEADLINE_WINDOW_SECONDS <= 0:
        errors.append("DEADLINE_WINDOW_SECONDS must be positive")
    if not 0 <= settings.SLIPPAGE_PCT <= 100:
        errors.append("SLIPPAGE_PCT must be between 0 and 100")

    if errors:
        for error in errors:
            log.critical(error)
        raise ConfigurationError("System configuration is incomplete. Halting.")

    log.info("--- CONFIG VALIDATION PASSED ---")
