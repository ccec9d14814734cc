"""
The runtime value domain and the rules every operator site relies on:
truthiness, equality and the textual form written by `print`.
"""

import math
from decimal import Decimal
from typing import Union

from .callables import LoxCallable, LoxInstance

# nil is None; numbers are always float, never int or bool.
Value = Union[float, str, bool, None, LoxCallable, LoxInstance]


def is_number(value: Value) -> bool:
    return isinstance(value, float)


def is_truthy(value: Value) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: Value, right: Value) -> bool:
    if left is None or right is None:
        return left is None and right is None
    # bool is a subclass of int in Python, never let `true == 1` through.
    if isinstance(left, (bool, float, str)) or isinstance(right, (bool, float, str)):
        return type(left) is type(right) and left == right
    return left is right


def stringify(value: Value) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def _format_number(number: float) -> str:
    """
    Renders a number as ECMAScript Number::toString does: integral values below
    1e21 in full, exponent form only outside [1e-6, 1e21).
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"

    sign = "-" if number < 0 else ""
    # repr gives the shortest digit string that round-trips.
    _, digit_tuple, exponent = Decimal(repr(abs(number))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
        text = f"{mantissa}e{'+' if n - 1 >= 0 else '-'}{abs(n - 1)}"
    return sign + text
