"""
Checked unsigned integer arithmetic.

Amounts live in the uint256 domain and day numbers in the uint32 domain.
Nothing here wraps or saturates: any result outside [0, bound] raises
ArithmeticFault, so callers compute every new value before they write any
of them.
"""

from __future__ import annotations

from .constants import UINT32_MAX, UINT256_MAX
from .exceptions import ArithmeticFault


def require_uint(value: int, bound: int = UINT256_MAX, label: str = "value") -> int:
    """Return ``value`` if it is an int within [0, bound], else raise."""
    # bool is an int subclass; True/False are never valid amounts
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{label} must be an integer, got {type(value).__name__}")
    if value < 0 or value > bound:
        raise ArithmeticFault(
            f"{label} out of range ({value} not in [0, {bound}])",
            details={"label": label, "value": value, "bound": bound},
        )
    return value


def checked_add(a: int, b: int, bound: int = UINT256_MAX) -> int:
    result = a + b
    if result > bound:
        raise ArithmeticFault(
            f"addition overflow ({a} + {b} > {bound})",
            details={"op": "add", "a": a, "b": b, "bound": bound},
        )
    return result


def checked_sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticFault(
            f"subtraction underflow ({a} - {b} < 0)",
            details={"op": "sub", "a": a, "b": b},
        )
    return a - b


def checked_mul(a: int, b: int, bound: int = UINT256_MAX) -> int:
    result = a * b
    if result > bound:
        raise ArithmeticFault(
            f"multiplication overflow ({a} * {b} > {bound})",
            details={"op": "mul", "a": a, "b": b, "bound": bound},
        )
    return result


def checked_div(a: int, b: int) -> int:
    """Truncating division; division by zero is an arithmetic fault, not a crash."""
    if b == 0:
        raise ArithmeticFault("division by zero", details={"op": "div", "a": a})
    return a // b


def u256_add(a: int, b: int) -> int:
    return checked_add(a, b, UINT256_MAX)


def u256_sub(a: int, b: int) -> int:
    return checked_sub(a, b)


def u256_mul(a: int, b: int) -> int:
    return checked_mul(a, b, UINT256_MAX)


def u32_add(a: int, b: int) -> int:
    return checked_add(a, b, UINT32_MAX)


def u32_sub(a: int, b: int) -> int:
    return checked_sub(a, b)
