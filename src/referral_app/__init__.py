"""
Referral App - PyQt6 desktop host for the referral network engine.
"""

__version__ = "0.1.0"
