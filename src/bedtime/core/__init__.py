"""Core utilities and configuration for Bedtime Stories.

This module contains:
- Configuration and settings management
- Security utilities (PIN hashing, bearer token verification)
"""
from .config import Settings, configure_logging, get_settings
from .security import (
    create_access_token,
    decode_access_token,
    hash_pin,
    is_valid_pin,
    verify_pin,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "configure_logging",
    # Security - PIN
    "hash_pin",
    "verify_pin",
    "is_valid_pin",
    # Security - tokens
    "create_access_token",
    "decode_access_token",
]
