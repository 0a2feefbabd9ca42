"""
Goods traded in the simulated economy.
"""

from enum import Enum


class Good(Enum):
    """Closed enumeration of tradable goods. Each good has its own market."""
    LABOUR = "LABOUR"
    FOOD = "FOOD"
    CLOTHING = "CLOTHING"
    SHELTER = "SHELTER"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def consumer_goods(cls):
        """Goods produced by firms and bought by households."""
        return [good for good in cls if good is not cls.LABOUR]
