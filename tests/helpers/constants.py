"""Shared address constants for tests.

All addresses are lowercase for consistency with normalize_address().

Usage:
    from tests.helpers import WETH, USDC
    # or
    from tests.helpers.constants import WETH, USDC
"""

# =============================================================================
# Mainnet tokens
# =============================================================================

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"  # Wrapped Ether (18 decimals)
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"  # USD Coin (6 decimals)
DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"  # Dai Stablecoin (18 decimals)
USDT = "0xdac17f958d2ee523a2206206994597c13d831ec7"  # Tether USD (6 decimals)
WBTC = "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599"  # Wrapped Bitcoin (8 decimals)
NATIVE = "0x0000000000000000000000000000000000000000"  # Native ETH placeholder

# =============================================================================
# Pools
# =============================================================================

WETH_USDC_V2 = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"
WETH_USDC_SUSHI = "0x397ff1542f962076d0bfe58ea045ffa2d347aca0"
WETH_DAI_V2 = "0xa478c2975ab1ea89e8196811f51a7b7ade33eb11"
DAI_USDC_V2 = "0xae461ca67b15dc8dc81ce7615e0320da1a9ab8d5"
WBTC_WETH_V2 = "0xbb2b8038a1640196fbe3e38816f3e67cba72d940"
WETH_USDC_V3 = "0x88e6a0c2ddd26feeb64f039a2c41296fcb3f5640"
# V4 pool ids are 32-byte keys, not addresses
WETH_USDC_V4 = "0x21c67e77068de97969ba93d4aab21826d33ca12bb9f565d8496e8fda8a82ca27"
USDC_DAI_V4 = "0xe018f09af38956affdfeab72c2cefbcd4e6fee44d09df7525ec9dba3e51356a5"
BALANCER_WETH_DAI = "0x0b09dea16768f0799065c475be02919503cb2a3500020000000000000000001a"

# =============================================================================
# Ethereum deployment (matches the bundled config)
# =============================================================================

ROUTER = "0xfd0b31d2e955fa55e3fa641fe90e08b677188d35"
UNISWAP_V2_EXECUTOR = "0x5615deb798bb3e4dfa0139dfa1b3d433cc23b72f"
SUSHISWAP_V2_EXECUTOR = "0x2c6a3cd97c6283b95ac8c5a4459ebb0d5fd404f4"
UNISWAP_V3_EXECUTOR = "0x2e234dae75c793f67a35089c9d99245e1c58470b"
UNISWAP_V4_EXECUTOR = "0xf62849f9a0b5bf2913b396098f7c7019b51a820a"
BALANCER_V2_EXECUTOR = "0x1d1499e622d69689cdf9004d05ec547d650ff211"
BEBOP_EXECUTOR = "0xa0cb889707d426a7a386870a03bc70d1b0697598"
BALANCER_VAULT = "0xba12222222228d8ba445958a75a0704d566bf2c8"
BEBOP_SETTLEMENT = "0xbbbbbbb520d69a9775e85b458c58c648259fad5f"

# =============================================================================
# Accounts
# =============================================================================

SENDER = "0xcd09f75e2bf2a4d11f3ab23f1389fcc1621c0cc2"
RECEIVER = "0xcd09f75e2bf2a4d11f3ab23f1389fcc1621c0cc2"

# Well-known development key (anvil account 0); never holds real funds
SWAPPER_PK = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
SWAPPER = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"
