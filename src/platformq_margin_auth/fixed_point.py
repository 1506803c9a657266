"""
Fixed-point helpers for proportional token amounts.
"""

from .types import DivisionByZero, InvalidTerms


def partial_amount(numerator: int, denominator: int, target: int) -> int:
    """
    Scale target by numerator / denominator, rounding toward zero.

    Multiplication happens before division on Python ints, so nothing is lost
    to overflow or intermediate truncation. The result never rounds in the
    recipient's favor: ``partial_amount(n, d, t) * d <= n * t``.

    Raises:
        DivisionByZero: If denominator is zero
        InvalidTerms: If any operand is negative or not an integer
    """
    for name, value in (("numerator", numerator), ("denominator", denominator), ("target", target)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidTerms(f"{name} must be an integer, got {type(value).__name__}", field=name)
        if value < 0:
            raise InvalidTerms(f"{name} must be non-negative, got {value}", field=name)

    if denominator == 0:
        raise DivisionByZero("Partial amount denominator is zero", field="denominator")

    return numerator * target // denominator
