"""Contract constants shared by the pricing engines and the route optimizer.

Values must match the deployed Curve contracts exactly; changing any of
them breaks bit-for-bit parity with on-chain get_dy.
"""

# Both pool families handled here are two-coin pools
N_COINS = 2

# 18-decimal fixed point used for balances, rates and price_scale
PRECISION = 10**18

# Fees are expressed with 10 decimals (1e10 == 100%)
FEE_DENOMINATOR = 10**10

# StableSwap: A() is multiplied by A_PRECISION before use (A_precise)
A_PRECISION = 100

# CryptoSwap: A() already returns A * N**N * A_MULTIPLIER
A_MULTIPLIER = 10_000

# Newton iteration bound used by every solver in the contracts
MAX_ITERATIONS = 255

# Peg-point binary search stops once the bracket is this narrow (10 tokens)
PEG_SEARCH_TOLERANCE = 10 * PRECISION

# Pool parameters are refreshed about once per block
POOL_PARAMS_CACHE_TTL = 12.0
