"""
Input validation utilities

This module provides validation functions for order prices, sizes, sides and
owners so malformed orders never reach an order book.
"""

from typing import Any, Optional

from .exceptions import (
    InvalidAgentException,
    InvalidQuantityException,
    InvalidSideException,
    PriceOutOfBoundsException,
)


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid price or size
    return isinstance(value, int) and not isinstance(value, bool)


def validate_price(price: Any, max_price: Optional[int] = None) -> bool:
    """
    Validate a price value.

    Prices are whole monetary units; zero is a legitimate price.

    Args:
        price: Price to validate
        max_price: Optional upper bound (inclusive)

    Returns:
        True if price is valid

    Raises:
        PriceOutOfBoundsException: If price is not a non-negative integer
            or exceeds the maximum
    """
    if not _is_int(price):
        raise PriceOutOfBoundsException(
            f"Price must be an integer, got {price!r}",
            details={"price": repr(price)}
        )

    if price < 0:
        raise PriceOutOfBoundsException(
            f"Price cannot be negative, got {price}",
            details={"price": price}
        )

    if max_price is not None and price > max_price:
        raise PriceOutOfBoundsException(
            f"Price {price} exceeds maximum {max_price}",
            details={"price": price, "max": max_price}
        )

    return True


def validate_size(size: Any, max_size: Optional[int] = None) -> bool:
    """
    Validate an order size.

    Args:
        size: Size to validate
        max_size: Optional upper bound (inclusive)

    Returns:
        True if size is valid

    Raises:
        InvalidQuantityException: If size is not a positive integer or
            exceeds the maximum
    """
    if not _is_int(size):
        raise InvalidQuantityException(
            f"Size must be an integer, got {size!r}",
            details={"size": repr(size)}
        )

    if size <= 0:
        raise InvalidQuantityException(
            f"Size must be positive, got {size}",
            details={"size": size}
        )

    if max_size is not None and size > max_size:
        raise InvalidQuantityException(
            f"Size {size} exceeds maximum {max_size}",
            details={"size": size, "max": max_size}
        )

    return True


def validate_side(side: Any) -> bool:
    """Check that side is a member of the Side enum."""
    from ..core.order import Side

    if not isinstance(side, Side):
        raise InvalidSideException(
            f"Invalid side: {side!r}",
            details={"side": repr(side), "valid_sides": [s.value for s in Side]}
        )
    return True


def validate_owner(owner: Any) -> bool:
    """
    Check that an order owner can receive fill notifications.

    Any object exposing callable ``on_fill`` and ``on_unfilled`` is accepted;
    agents do not have to inherit from MarketAgent.
    """
    for method in ("on_fill", "on_unfilled"):
        if not callable(getattr(owner, method, None)):
            raise InvalidAgentException(
                f"Order owner {owner!r} does not implement {method}()",
                details={"owner": repr(owner), "missing": method}
            )
    return True
