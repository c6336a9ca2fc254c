# /flashliq/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr

# Optimism deployment of UniswapFlashLiquidation.
DEFAULT_FLASH_LIQUIDATOR_ADDRESS = "0x5927b63E88764D6250b7801eBfDEb7B6c1ac35d0"


class Settings(BaseSettings):
    # Core Executor
    EXECUTOR_PRIVATE_KEY: SecretStr | None = None

    # RPC endpoint (single endpoint; the pipeline receives it explicitly)
    ETH_RPC_URL: SecretStr | None = None
    RPC_TIMEOUT_SECONDS: int = 10

    # Chain configuration
    chain_id: int = 10
    FLASH_LIQUIDATOR_ADDRESS: str = DEFAULT_FLASH_LIQUIDATOR_ADDRESS

    # Execution bounds
    GAS_LIMIT: int = 1_500_000
    DEADLINE_WINDOW_SECONDS: int = 60
    # Whole-token amount, parsed with Decimal and scaled by PROFIT_TOKEN_DECIMALS
    MIN_PROFIT: str = "0.4"
    PROFIT_TOKEN_DECIMALS: int = 18
    SLIPPAGE_PCT: int = 1

    # Caller-side policy
    RETRY_QUOTES: bool = True
    RECEIPT_TIMEOUT_SECONDS: int = 120

    LOG_SIGNING_KEY: SecretStr | None = None
    SENTRY_DSN: SecretStr | None = None

    # Operational Settings
    LOG_LEVEL: str = "INFO"
    SESSION_DIR: str = "/tmp/flashliq_session" # For the signed audit log

    @property
    def rpc_url(self) -> str | None:
        """Plain RPC URL, or ``None`` when no endpoint is configured."""
        if self.ETH_RPC_URL is None:
            return None
        return self.ETH_RPC_URL.get_secret_value()

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

try:
    settings = Settings()
except Exception as e:
    # Late import to avoid circular dependency only for logging the failure
    try:
        from flashliq.core.logger import get_logger
        log = get_logger("FlashLiq.Config")
        log.critical("FAILED_TO_LOAD_SETTINGS", error=str(e))
    except Exception:
        print("FAILED_TO_LOAD_SETTINGS", e)
    raise SystemExit(1) from e
