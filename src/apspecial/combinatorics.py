from __future__ import annotations

import math
from typing import Iterator

from . import checks
from .apnum import Float, integer
from .precision import EXACT


def _check_int(n, label: str) -> int:
    checks.check_integer(n, label)
    return n if isinstance(n, int) else n.real.to_int()


def factorial_int(n: int) -> int:
    if n < 0:
        raise checks.DomainError("Factorial of negative number", "factorial.ofNegative")
    return math.factorial(n)


def double_factorial_int(n: int) -> int:
    if n < 0:
        raise checks.DomainError("Double factorial of negative number", "doubleFactorial.ofNegative")
    result = 1
    for k in range(n, 1, -2):
        result *= k
    return result


def binomial_int(n: int, k: int) -> int:
    """Integer binomial coefficient extended to negative arguments.

    Negative ``n`` uses ``(-1)**k * C(k - n - 1, k)`` for ``k >= 0`` and
    ``(-1)**(n - k) * C(-k - 1, n - k)`` for ``k <= n``; everything else is zero.
    """
    if n >= 0:
        return math.comb(n, k) if 0 <= k <= n else 0
    if k >= 0:
        value = math.comb(k - n - 1, k)
        return -value if k & 1 else value
    if k <= n:
        value = math.comb(-k - 1, n - k)
        return -value if (n - k) & 1 else value
    return 0


def binomials(n: int, start: int = 0) -> Iterator[int]:
    """``C(n, start), C(n, start + 1), .., C(n, n)``."""
    value = 1
    for i in range(n + 1):
        if i > 0:
            value = value * (n - i + 1) // i
        if i >= start:
            yield value


def fibonacci_int(n: int) -> int:
    """Fibonacci number by fast doubling, with ``F(-n) = (-1)**(n + 1) F(n)``."""
    if n < 0:
        value = fibonacci_int(-n)
        return value if n & 1 else -value
    a, b = 0, 1
    for bit in bin(n)[2:]:
        a, b = a * (2 * b - a), a * a + b * b
        if bit == "1":
            a, b = b, a + b
    return a


def _unsigned_s1_row(n: int, max_degree: int) -> list[int]:
    # Coefficients of x (x + 1) ... (x + n - 1), truncated to max_degree
    row = [1]
    for m in range(n):
        nxt = [0] * min(len(row) + 1, max_degree + 1)
        for i, c in enumerate(row):
            if i < len(nxt):
                nxt[i] += c * m
            if i + 1 < len(nxt):
                nxt[i + 1] += c
        row = nxt
    return row + [0] * (max_degree + 1 - len(row))


def stirling_s1_int(n: int, k: int) -> int:
    """Signed Stirling number of the first kind ``s(n, k)``."""
    if n < 0 or k < 0:
        raise ValueError("stirling_s1: arguments must be non-negative")
    if k == n:
        s1 = 1
    elif k > n or k == 0:
        s1 = 0
    elif k == 1:
        s1 = math.factorial(n - 1)
    elif k == n - 1:
        s1 = math.comb(n, 2)
    elif k == n - 2:
        s1 = math.comb(n, 3) * (3 * n - 1) // 4
    elif k == n - 3:
        s1 = math.comb(n, 2) * math.comb(n, 4)
    else:
        s1 = _unsigned_s1_row(n, k)[k]
    return s1 if (n - k) & 1 == 0 else -s1


def stirling_s1s(n: int) -> list[int]:
    """``[s(n, 0), .., s(n, n)]``."""
    if n < 0:
        raise ValueError("stirling_s1s: argument must be non-negative")
    row = _unsigned_s1_row(n, n)
    return [c if (n - k) & 1 == 0 else -c for k, c in enumerate(row)]


def stirling_s2_int(n: int, k: int) -> int:
    """Stirling number of the second kind ``S(n, k)``."""
    if n < 0 or k < 0:
        raise ValueError("stirling_s2: arguments must be non-negative")
    if k == n:
        return 1
    if k > n or k == 0:
        return 0
    if k == 1:
        return 1
    if k == n - 1:
        return math.comb(n, 2)
    if k == 2:
        return 2 ** (n - 1) - 1
    total = 0
    for i, c in enumerate(binomials(k)):
        term = c * i**n
        total = total + term if (k - i) & 1 == 0 else total - term
    return total // math.factorial(k)


def stirling_s2s(n: int) -> Iterator[int]:
    """``S(n, 0), .., S(n, n)`` from the triangular recurrence on ``k``."""
    if n < 0:
        raise ValueError("stirling_s2s: argument must be non-negative")
    s2 = [1 if n == 0 else 0]
    yield s2[0]
    fact = 1
    for k in range(1, n + 1):
        fact *= k
        value = k**n
        factor = 1
        for r in range(1, k):
            factor *= k - r + 1
            value -= s2[r] * factor
        s2.append(value // fact)
        yield s2[k]


def _as_float(value: int, radix: int) -> Float:
    return integer(value, radix)


def factorial(n, prec: int = EXACT, radix: int = 10) -> Float:
    n = _check_int(n, "factorial")
    return _as_float(factorial_int(n), radix).with_precision(prec)


def double_factorial(n, prec: int = EXACT, radix: int = 10) -> Float:
    n = _check_int(n, "double_factorial")
    return _as_float(double_factorial_int(n), radix).with_precision(prec)


def fibonacci(n, radix: int = 10) -> Float:
    return _as_float(fibonacci_int(_check_int(n, "fibonacci")), radix)


def stirling_s1(n, k, radix: int = 10) -> Float:
    return _as_float(stirling_s1_int(_check_int(n, "stirling_s1"), _check_int(k, "stirling_s1")), radix)


def stirling_s2(n, k, radix: int = 10) -> Float:
    return _as_float(stirling_s2_int(_check_int(n, "stirling_s2"), _check_int(k, "stirling_s2")), radix)


__all__ = [
    "factorial_int",
    "double_factorial_int",
    "binomial_int",
    "binomials",
    "fibonacci_int",
    "stirling_s1_int",
    "stirling_s1s",
    "stirling_s2_int",
    "stirling_s2s",
    "factorial",
    "double_factorial",
    "fibonacci",
    "stirling_s1",
    "stirling_s2",
]
