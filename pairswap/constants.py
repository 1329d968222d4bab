"""Protocol constants for pairswap.

Centralizes the fee schedule, display scaling and well-known addresses.
"""

# The null identity. Registry lookups return it on a miss and it is never a
# valid asset, pair or recipient.
ZERO_ADDRESS = "0x" + "00" * 20

# Fee denominator in basis points (10000 = 100%)
BPS_DENOMINATOR = 10_000

# Fee taken from the input side of every swap (100 bps = 1%)
# Fixed per pair at deployment; there is no way to change it afterwards.
DEFAULT_FEE_BPS = 100

# Scale factor for quote_price_ratio (display only, never used in settlement)
PRICE_RATIO_SCALE = 1000

# 1 whole unit for 18-decimal assets, used by the demo and tests
UNIT = 10**18
