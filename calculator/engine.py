"""
Stateless arithmetic and geometric operations.

The exponentiation function and the circle constant are injectable so the
numeric back-end can be swapped without touching call sites.
"""
import math
from typing import Callable, Optional

Number = float
PowFn = Callable[[float, float], float]


class CalculatorError(Exception):
    """Base class for calculation failures."""
    pass


class DivisionByZeroError(CalculatorError, ZeroDivisionError):
    """Raised when the divisor of a division is zero."""
    pass


def add(x: Number, y: Number) -> Number:
    return x + y


def subtract(x: Number, y: Number) -> Number:
    return x - y


def multiply(x: Number, y: Number) -> Number:
    return x * y


def divide(x: Number, y: Number) -> Number:
    """
    Divide x by y.

    Raises:
        DivisionByZeroError: If y is zero
    """
    if y == 0:
        raise DivisionByZeroError(f"Cannot divide {x} by zero")
    return x / y


def power(x: Number, y: Number, pow_fn: Optional[PowFn] = None) -> Number:
    """
    Raise x to the power y.

    Args:
        x: Base
        y: Exponent
        pow_fn: Exponentiation function, defaults to math.pow

    Returns:
        pow_fn(x, y)

    Raises:
        DivisionByZeroError: If x is zero and y is negative
    """
    if x == 0 and y < 0:
        raise DivisionByZeroError(f"Cannot raise zero to negative power {y}")
    if pow_fn is None:
        pow_fn = math.pow
    return pow_fn(x, y)


def circle_area(radius: Number, pi_value: Optional[Number] = None) -> Number:
    """
    Area of a circle.

    A negative radius is not rejected; the area is still pi * r * r.

    Args:
        radius: Circle radius
        pi_value: Value used for pi, defaults to math.pi

    Returns:
        pi_value * radius * radius
    """
    if pi_value is None:
        pi_value = math.pi
    return pi_value * radius * radius
