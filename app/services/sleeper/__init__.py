"""
Sleeper service package: the remote league API client.
"""

from .client import SleeperClient

__all__ = ["SleeperClient"]
