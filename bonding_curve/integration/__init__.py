"""
Integration layer: the platform shell that commits core decisions to custody.
"""

from .platform import CurveHandle, Platform, curve_account

__all__ = [
    "CurveHandle",
    "Platform",
    "curve_account",
]
