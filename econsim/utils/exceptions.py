"""
Custom exceptions for the market engine

This module defines a hierarchy of exceptions used throughout the market engine
and the simulation built on top of it.
"""


class BaseMarketException(Exception):
    """Base exception class for all market exceptions."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidOrderException(BaseMarketException):
    """Raised when an order contains invalid parameters or fails validation."""
    pass


class InvalidQuantityException(InvalidOrderException):
    """Raised when size is invalid (zero, negative, fractional, or exceeds limits)."""
    pass


class PriceOutOfBoundsException(InvalidOrderException):
    """Raised when a price is outside acceptable bounds."""
    pass


class InvalidSideException(InvalidOrderException):
    """Raised when an order side is not BUY or SELL."""
    pass


class InvalidAgentException(InvalidOrderException):
    """Raised when an order owner cannot receive market notifications."""
    pass


class OrderBookException(BaseMarketException):
    """Raised for general order book operation errors."""
    pass


class DuplicateOrderException(OrderBookException):
    """Raised when attempting to add an order that already exists."""
    pass


class ConfigurationException(BaseMarketException):
    """Raised when simulation parameters are invalid."""
    pass
