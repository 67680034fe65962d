from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Iterator

from . import checks
from . import precision
from .apnum import Complex, Float, as_complex, from_fraction
from .precision import EXACT

logger = logging.getLogger(__name__)

SMALL_INDEX_LIMIT = 2000
BIG_THRESHOLD = 200000


def _akiyama_tanigawa() -> Iterator[Fraction]:
    """B_0, B_1, B_2, ... with the convention ``B_1 = -1/2``."""
    row: list[int] = []
    denominator = 1
    n = 0
    while True:
        n1 = n + 1
        for i in range(n):
            row[i] *= n1
        row.append(denominator)
        denominator *= n1
        for i in range(n, 0, -1):
            row[i - 1] = (row[i - 1] - row[i]) * i
        numerator = row[0]
        if n == 1:
            numerator = -numerator
        n += 1
        yield Fraction(numerator, denominator)


def tangent_numbers(n: int) -> list[int]:
    """Tangent numbers ``T_1 .. T_n`` by the Brent-Harvey in-place recurrence."""
    t = [0] * (n + 1)
    if n == 0:
        return []
    t[1] = 1
    for k in range(2, n + 1):
        t[k] = (k - 1) * t[k - 1]
    for k in range(2, n + 1):
        for j in range(k, n + 1):
            t[j] = (j - k) * t[j - 1] + (j - k + 2) * t[j]
    return t[1:]


def _even_from_tangent(k: int, tk: int) -> Fraction:
    two2k = 1 << (2 * k)
    b = Fraction(2 * k * tk, two2k * (two2k - 1))
    return b if k & 1 else -b


def _bernoulli_small(n: int) -> Fraction:
    total = Fraction(0)
    for k in range(1, n + 1):
        binomial = 1
        part = 0
        for v in range(1, k + 1):
            binomial = binomial * (k + 1 - v) // v
            term = binomial * v**n
            part = part + term if v & 1 == 0 else part - term
        total += Fraction(part, k + 1)
    return total


def _bernoulli_big(n: int) -> Fraction:
    k = n // 2
    logger.debug("bernoulli number B_%d from tangent numbers", n)
    return _even_from_tangent(k, tangent_numbers(k)[-1])


def bernoulli_number(n: int) -> Fraction:
    """Exact Bernoulli number ``B_n`` with ``B_1 = -1/2``."""
    if not isinstance(n, int) or n < 0:
        raise ValueError(f"bernoulli_number: expected a non-negative integer, got {n}")
    if n == 0:
        return Fraction(1)
    if n == 1:
        return Fraction(-1, 2)
    if n & 1:
        return Fraction(0)
    if n <= SMALL_INDEX_LIMIT:
        return _bernoulli_small(n)
    return _bernoulli_big(n)


def bernoulli_float(n: int, prec: int = EXACT, radix: int = 10) -> Float:
    """``B_n`` as a Float; exact precision raises unless the fraction terminates in the radix."""
    value = bernoulli_number(n)
    if prec >= EXACT:
        try:
            return from_fraction(value, EXACT, radix)
        except checks.InfiniteExpansionError as exc:
            raise checks.InfiniteExpansionError(
                "Cannot represent Bernoulli number to infinite precision", "bernoulli.infinitePrecision"
            ) from exc
    return from_fraction(value, prec, radix)


def _tangent_iterator(n: int) -> Iterator[Fraction]:
    for k, tk in enumerate(tangent_numbers(n), start=1):
        yield _even_from_tangent(k, tk)


def bernoullis(n: int) -> Iterator[Fraction]:
    """``B_0 .. B_n`` in order; large ``n`` precomputes the even ones from tangent numbers."""
    if n <= BIG_THRESHOLD:
        gen = _akiyama_tanigawa()
        for _ in range(n + 1):
            yield next(gen)
        return
    logger.debug("bernoulli sequence up to %d from tangent numbers", n)
    evens = _tangent_iterator(n // 2)
    for k in range(n + 1):
        if k == 0:
            yield Fraction(1)
        elif k == 1:
            yield Fraction(-1, 2)
        elif k & 1:
            yield Fraction(0)
        else:
            yield next(evens)


def bernoullis2(n: int) -> Iterator[Fraction]:
    """Even Bernoulli numbers ``B_2, B_4, .., B_2n``."""
    if 2 * n <= BIG_THRESHOLD:
        gen = _akiyama_tanigawa()
        next(gen)
        for _ in range(n):
            next(gen)
            yield next(gen)
        return
    logger.debug("even bernoulli sequence up to %d from tangent numbers", 2 * n)
    yield from _tangent_iterator(n)


def bernoulli_polynomial(n: int, z):
    """``B_n(z)`` by Horner over ``C(n, k) B_k``; exact when ``z`` is exact and the value terminates."""
    checks.check_nonnegative(n, "bernoulli_polynomial")
    z = as_complex(z)
    radix = z.radix
    prec = z.precision
    cp = EXACT if prec >= EXACT else precision.extend(prec)
    result = None
    for k, b in enumerate(bernoullis(n)):
        c = math.comb(n, k) * b
        try:
            coeff = from_fraction(c, cp, radix)
        except checks.InfiniteExpansionError as exc:
            raise checks.InfiniteExpansionError(
                "Cannot calculate Bernoulli polynomial to infinite precision", "bernoulliB.infinitePrecision"
            ) from exc
        result = Complex(coeff) if result is None else result * z + coeff
    return result if prec >= EXACT else result.limit_precision(prec)


def _euler_at_zero(k: int, b_next: Fraction) -> Fraction:
    # E_k(0) = -2 (2**(k+1) - 1) B_(k+1) / (k + 1)
    if k == 0:
        return Fraction(1)
    return -2 * ((1 << (k + 1)) - 1) * b_next / (k + 1)


def euler_polynomial(n: int, z):
    """``E_n(z)`` by Horner over ``C(n, k) E_k(0)``; exact when ``z`` is exact and the value terminates."""
    checks.check_nonnegative(n, "euler_polynomial")
    z = as_complex(z)
    radix = z.radix
    prec = z.precision
    cp = EXACT if prec >= EXACT else precision.extend(prec)
    numbers = list(bernoullis(n + 1))
    result = None
    for k in range(n + 1):
        c = math.comb(n, k) * _euler_at_zero(k, numbers[k + 1])
        try:
            coeff = from_fraction(c, cp, radix)
        except checks.InfiniteExpansionError as exc:
            raise checks.InfiniteExpansionError(
                "Cannot calculate Euler polynomial to infinite precision", "eulerE.infinitePrecision"
            ) from exc
        result = Complex(coeff) if result is None else result * z + coeff
    return result if prec >= EXACT else result.limit_precision(prec)


def euler_number(n: int) -> int:
    """Euler (secant) number ``E_n``; zero for odd ``n``."""
    if not isinstance(n, int) or n < 0:
        raise ValueError(f"euler_number: expected a non-negative integer, got {n}")
    if n & 1:
        return 0
    # E_2m = -sum_{k<m} C(2m, 2k) E_2k
    evens = [1]
    for m in range(1, n // 2 + 1):
        total = 0
        binomial = 1
        for k in range(m):
            if k > 0:
                binomial = binomial * (2 * m - 2 * k + 2) * (2 * m - 2 * k + 1) // ((2 * k - 1) * (2 * k))
            total += binomial * evens[k]
        evens.append(-total)
    return evens[n // 2]


__all__ = [
    "SMALL_INDEX_LIMIT",
    "BIG_THRESHOLD",
    "tangent_numbers",
    "bernoulli_number",
    "bernoulli_float",
    "bernoullis",
    "bernoullis2",
    "bernoulli_polynomial",
    "euler_number",
    "euler_polynomial",
]
