"""
Market agents
"""

from .firm import Firm
from .household import Household

__all__ = ["Firm", "Household"]
