# /flashliq/abis/flash_liquidator.py
# The two UniswapFlashLiquidation entry points this client calls.
FLASH_LIQUIDATOR_ABI = [
    {"inputs": [{"internalType": "address", "name": "lp", "type": "address"}, {"internalType": "bytes", "name": "swapPath", "type": "bytes"}], "name": "findBestQuoteStatic", "outputs": [{"components": [{"internalType": "bool", "name": "success", "type": "bool"}, {"internalType": "uint256", "name": "amountIn", "type": "uint256"}, {"internalType": "uint256", "name": "amountOut", "type": "uint256"}, {"internalType": "uint256", "name": "profit", "type": "uint256"}], "internalType": "struct UniswapFlashLiquidation.Quote", "name": "quote", "type": "tuple"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"internalType": "address", "name": "lp", "type": "address"}, {"internalType": "address", "name": "recipient", "type": "address"}, {"internalType": "uint256", "name": "amountOutMin", "type": "uint256"}, {"internalType": "uint256", "name": "amountInMax", "type": "uint256"}, {"internalType": "uint256", "name": "profitMin", "type": "uint256"}, {"internalType": "uint256", "name": "deadline", "type": "uint256"}, {"internalType": "bytes", "name": "swapPath", "type": "bytes"}], "name": "flashLiquidate", "outputs": [], "stateMutability": "nonpayable", "type": "function"}
]
