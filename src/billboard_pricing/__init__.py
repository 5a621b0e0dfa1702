"""
Billboard Pricing Package

Price resolution and quote generation for billboard advertising space.
Resolves rental prices using Size → Level → Customer Type lookup with a
daily rate or fixed-duration package, plus optional installation fees.
"""

__version__ = "1.0.0"
