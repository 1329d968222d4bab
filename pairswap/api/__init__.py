"""HTTP API for the pairswap devnet."""
