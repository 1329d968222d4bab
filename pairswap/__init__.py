"""pairswap - constant-product exchange pairs with a routing registry."""

from pairswap.chain import Chain
from pairswap.pair import Pair
from pairswap.registry import Registry
from pairswap.token import Token

__version__ = "0.1.0"
__all__ = ["Chain", "Pair", "Registry", "Token", "__version__"]
