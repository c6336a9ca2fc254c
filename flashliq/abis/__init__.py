from flashliq.abis.flash_liquidator import FLASH_LIQUIDATOR_ABI

__all__ = ["FLASH_LIQUIDATOR_ABI"]
