"""
SpoolVault — Shared slowapi rate limiter instance.

Import this module in any router that needs @limiter.limit() decorators.
Key function: get_remote_address (IP-based limiting).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
