"""
Custody state for the bonding-curve platform
"""

from .balances import NATIVE_ASSET, BalanceTable

__all__ = [
    "BalanceTable",
    "NATIVE_ASSET",
]
