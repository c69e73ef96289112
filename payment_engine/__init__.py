"""
Payment Engine

A streaming transaction engine that applies deposits, withdrawals and the
dispute lifecycle to client accounts, using Decimal for all monetary math.
"""

__version__ = "1.0.0"
