from __future__ import annotations

import logging
import threading
from math import isqrt, log

from . import checks
from .apnum import Float
from .precision import EXACT

logger = logging.getLogger(__name__)

_GUARD_DIGITS = 10
_CHUDNOVSKY_C3_OVER_24 = 640320**3 // 24
_CHUDNOVSKY_DIGITS_PER_TERM = 14.181647462725477

_CACHE: dict[tuple[str, int], Float] = {}
_LOCKS: dict[tuple[str, int], threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _key_lock(key: tuple[str, int]) -> threading.Lock:
    with _LOCKS_GUARD:
        lock = _LOCKS.get(key)
        if lock is None:
            lock = _LOCKS[key] = threading.Lock()
        return lock


def _cached(name: str, prec: int, radix: int, compute) -> Float:
    checks.check_radix(radix, f"constants.{name}")
    if prec >= EXACT:
        raise checks.InfiniteExpansionError(
            f"Cannot calculate {name} to infinite precision", f"{name}.infinitePrecision"
        )
    checks.check_positive(prec, f"constants.{name}")
    key = (name, radix)
    hit = _CACHE.get(key)
    if hit is not None and hit.precision >= prec:
        return hit.limit_precision(prec)
    with _key_lock(key):
        hit = _CACHE.get(key)
        if hit is not None and hit.precision >= prec:
            return hit.limit_precision(prec)
        logger.debug("computing %s to %d digits in radix %d", name, prec, radix)
        wp = prec + _GUARD_DIGITS
        fixed = compute(wp, radix)
        value = Float(fixed, -wp, prec, radix)
        _CACHE[key] = value
    return value


def _chudnovsky(a: int, b: int) -> tuple[int, int, int]:
    if b - a == 1:
        if a == 0:
            p = q = 1
        else:
            p = (6 * a - 5) * (2 * a - 1) * (6 * a - 1)
            q = a * a * a * _CHUDNOVSKY_C3_OVER_24
        t = p * (13591409 + 545140134 * a)
        if a & 1:
            t = -t
        return p, q, t
    m = (a + b) // 2
    p1, q1, t1 = _chudnovsky(a, m)
    p2, q2, t2 = _chudnovsky(m, b)
    return p1 * p2, q1 * q2, q2 * t1 + p1 * t2


def _pi_fixed(wp: int, radix: int) -> int:
    one = radix**wp
    terms = int(wp * log(radix) / log(10) / _CHUDNOVSKY_DIGITS_PER_TERM) + 2
    _, q, t = _chudnovsky(0, terms)
    sqrt_c = isqrt(10005 * one * one)
    return q * 426880 * sqrt_c // t


def _e_fixed(wp: int, radix: int) -> int:
    term = radix**wp
    total = 0
    k = 0
    while term:
        total += term
        k += 1
        term //= k
    return total


def _atanh_inverse_fixed(p: int, q: int, one: int) -> int:
    """Fixed-point ``atanh(p/q)`` for ``|p/q| < 1``."""
    if p < 0:
        # Odd function; floor division of a negative term never reaches zero
        return -_atanh_inverse_fixed(-p, q, one)
    term = one * p // q
    p2 = p * p
    q2 = q * q
    total = 0
    k = 0
    while term:
        total += term // (2 * k + 1)
        term = term * p2 // q2
        k += 1
    return total


def _log2_fixed(one: int) -> int:
    return 2 * _atanh_inverse_fixed(1, 3, one)


def _log_radix_fixed(wp: int, radix: int) -> int:
    one = radix**wp
    a = max(1, round(log(radix) / log(2)))
    power = 1 << a
    result = a * _log2_fixed(one)
    if power != radix:
        result += 2 * _atanh_inverse_fixed(radix - power, radix + power, one)
    return result


def _euler_fixed(wp: int, radix: int) -> int:
    # Brent-McMillan with n a power of two so that log(n) is a multiple of log(2)
    one = radix**wp
    bits = 1
    while (1 << bits) * 4 < wp * log(radix) + 4:
        bits += 1
    n = 1 << bits
    n2 = n * n
    u = a = -bits * _log2_fixed(one)
    v = b = one
    k = 1
    while True:
        b = b * n2 // (k * k)
        a = (a * n2 // k + b) // k
        u += a
        v += b
        if a == 0 and b == 0:
            break
        k += 1
    return u * one // v


def pi(prec: int, radix: int = 10) -> Float:
    return _cached("pi", prec, radix, _pi_fixed)


def e(prec: int, radix: int = 10) -> Float:
    return _cached("e", prec, radix, _e_fixed)


def euler_gamma(prec: int, radix: int = 10) -> Float:
    return _cached("euler", prec, radix, _euler_fixed)


def log_radix(prec: int, radix: int = 10) -> Float:
    return _cached("logRadix", prec, radix, _log_radix_fixed)


def clear_cache() -> None:
    with _LOCKS_GUARD:
        _CACHE.clear()


__all__ = ["pi", "e", "euler_gamma", "log_radix", "clear_cache"]
