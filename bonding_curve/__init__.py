"""
Constant-product bonding-curve market maker.

Pricing and settlement core for token launches: virtual + real reserves,
integer-only quotes, fee extraction and the completion gate on withdrawal.
"""

__version__ = "0.1.0"
