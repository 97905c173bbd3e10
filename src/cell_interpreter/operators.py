from decimal import ROUND_DOWN, Decimal
from typing import Callable

from cell_interpreter.errors import DivideByZero

TRUE = Decimal(1)
FALSE = Decimal(0)


def _check_divisor(right: Decimal, op: str) -> None:
    if right == 0:
        raise DivideByZero(f"Division by zero in '{op}'")


def add(left: Decimal, right: Decimal) -> Decimal:
    return left + right


def subtract(left: Decimal, right: Decimal) -> Decimal:
    return left - right


def multiply(left: Decimal, right: Decimal) -> Decimal:
    return left * right


def divide(left: Decimal, right: Decimal) -> Decimal:
    _check_divisor(right, "/")
    return left / right


def modulo(left: Decimal, right: Decimal) -> Decimal:
    """Remainder with the sign of the dividend (Decimal semantics)."""
    _check_divisor(right, "mod")
    return left % right


def integer_divide(left: Decimal, right: Decimal) -> Decimal:
    """Divide, then truncate the quotient toward zero.

    The quotient is rounded to the context precision before truncation, so
    this is not always the same as `left // right`.
    """
    _check_divisor(right, "div")
    return (left / right).to_integral_value(rounding=ROUND_DOWN)


def eq(left: Decimal, right: Decimal) -> Decimal:
    return TRUE if left == right else FALSE


def neq(left: Decimal, right: Decimal) -> Decimal:
    return TRUE if left != right else FALSE


def lt(left: Decimal, right: Decimal) -> Decimal:
    return TRUE if left < right else FALSE


def gt(left: Decimal, right: Decimal) -> Decimal:
    return TRUE if left > right else FALSE


def lte(left: Decimal, right: Decimal) -> Decimal:
    return TRUE if left <= right else FALSE


def gte(left: Decimal, right: Decimal) -> Decimal:
    return TRUE if left >= right else FALSE


def increment(value: Decimal) -> Decimal:
    return value + 1


def decrement(value: Decimal) -> Decimal:
    return value - 1


BINARY_OPERATORS: dict[str, Callable[[Decimal, Decimal], Decimal]] = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "/": divide,
    "mod": modulo,
    "div": integer_divide,
    "=": eq,
    "<>": neq,
    "<": lt,
    ">": gt,
    "<=": lte,
    ">=": gte,
}

UNARY_FUNCTIONS: dict[str, Callable[[Decimal], Decimal]] = {
    "inc": increment,
    "dec": decrement,
}
