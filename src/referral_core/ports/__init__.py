"""
Ports (interfaces) for the referral engine.

These define the contracts that adapters must implement.
This enables dependency injection and testing with in-memory sources.
"""

from .client_port import ClientSourcePort

__all__ = ["ClientSourcePort"]
