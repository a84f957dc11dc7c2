"""
Kernel layer.

Small, integer-only building blocks shared by the curve engine. Nothing here
knows about curves; it only knows about widths and rounding.
"""
