"""
M3 Mobile x Treolan catalog proxy.
"""

__version__ = "6.0.0"
