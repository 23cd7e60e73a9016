"""GlotPress download module."""

from .client import RateLimitedClient
from .gp_client import GlotPressClient, join_url

__all__ = [
    "RateLimitedClient",
    "GlotPressClient",
    "join_url",
]
