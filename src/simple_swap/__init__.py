from simple_swap.core.engine import SimpleSwap
from simple_swap.core.assets import AssetLedger, MintableToken
from simple_swap.core.guards import ZERO_ADDRESS
from simple_swap.core.pricing import FEE_DENOMINATOR, FEE_NUMERATOR, PRICE_SCALE, get_amount_out, get_price

__version__ = "1.0.0"
