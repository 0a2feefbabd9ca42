"""
econsim - single-good double auction markets for agent-based economies
"""

__version__ = "1.0.0"
