"""
Adapters for the referral engine.

Implementations of the port interfaces.
"""

from .json_clients import JsonClientSource, StaticClientSource, record_from_dict, parse_timestamp

__all__ = ["JsonClientSource", "StaticClientSource", "record_from_dict", "parse_timestamp"]
