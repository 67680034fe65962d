from __future__ import annotations

import logging
from typing import Callable

from . import checks
from . import precision
from .apnum import Complex, Float, as_complex, integer, zero
from .precision import EXACT
from .roots import acb_sqrt, arb_sqrt

logger = logging.getLogger(__name__)

# Digits of agreement after which quadratic convergence is assumed
CONVERGING = 1000


def _consume(consumer, a, c2, wp: int):
    if consumer is None:
        return c2
    c = (c2 / (4 * a)).ensure_precision(wp)
    c2 = (c * c).ensure_precision(wp)
    consumer(c2)
    return c2


def _iterate(a, b, target: int, sqrt, consumer):
    wp = precision.extend(target)
    a = a.ensure_precision(wp)
    b = b.ensure_precision(wp)
    half = (wp + 1) // 2
    c2 = None
    if consumer is not None:
        c2 = (a * a - b * b).ensure_precision(wp)
        consumer(c2)
    prec = 0
    steps = 0
    while prec < CONVERGING and prec < half:
        t = (a + b).limit_precision(wp) / 2
        b = sqrt(a * b, t)
        a = t.ensure_precision(wp)
        b = b.ensure_precision(wp)
        prec = a.equal_digits(b)
        c2 = _consume(consumer, a, c2, wp)
        steps += 1
    while prec <= half:
        t = (a + b) / 2
        b = sqrt(a * b, t)
        a = t.ensure_precision(wp)
        b = b.ensure_precision(wp)
        prec *= 2
        c2 = _consume(consumer, a, c2, wp)
        steps += 1
    result = (a + b) / 2
    _consume(consumer, result, c2, wp)
    logger.debug("agm converged in %d steps at %d digits", steps, wp)
    return result.set_precision(target)


def _real_sqrt(x: Float, reference: Float) -> Float:
    return arb_sqrt(x)


def _right_sqrt(z: Complex, reference: Complex) -> Complex:
    """Square root of ``z`` on the side that keeps ``|a - b| <= |a + b|``."""
    result = acb_sqrt(z)
    dp = precision.double_precision(z.radix)
    approx = result.limit_precision(dp)
    approx_ref = reference.limit_precision(dp)
    c = _compare(approx_ref - approx, approx_ref + approx)
    if c == 0:
        c = _compare(reference - result, reference + result)
    if c > 0 or (c == 0 and (result / reference).imag.signum() <= 0):
        result = -result
    return result


def _compare(x: Complex, y: Complex) -> int:
    nx = x.norm()
    ny = y.norm()
    return (nx > ny) - (nx < ny)


def arb_agm(a: Float, b: Float, consumer: Callable | None = None) -> Float:
    checks.check_same_radix(a, b, "agm.arb_agm")
    if a.is_zero() or b.is_zero():
        return zero(a.radix)
    if a.signum() != b.signum():
        raise checks.DomainError("AGM of values with different signs; result would be complex", "agm.complex")
    if a == b:
        return a.with_precision(min(a.precision, b.precision))
    target = min(a.precision, b.precision)
    if target >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate agm to infinite precision", "agm.infinitePrecision")
    if a.signum() < 0:
        return -_iterate(-a, -b, target, _real_sqrt, consumer)
    return _iterate(a, b, target, _real_sqrt, consumer)


def acb_agm(a, b, consumer: Callable | None = None) -> Complex:
    a = as_complex(a)
    b = as_complex(b)
    checks.check_same_radix(a, b, "agm.acb_agm")
    if a.is_zero() or b.is_zero():
        return Complex(zero(a.radix))
    if a.is_real() and b.is_real() and a.real.signum() == b.real.signum():
        return Complex(arb_agm(a.real, b.real, consumer))
    if a == b:
        return a.with_precision(min(a.precision, b.precision))
    if a == -b:
        return Complex(zero(a.radix))
    target = min(a.precision, b.precision)
    if target >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate agm to infinite precision", "agm.infinitePrecision")
    return _iterate(a, b, target, _right_sqrt, consumer)


def agm_step(a, b):
    """One AGM step ``((a + b) / 2, sqrt(a * b))`` on the principal-compatible branch."""
    t = (a + b) / integer(2, a.radix)
    if isinstance(a, Float) and isinstance(b, Float) and a.signum() == b.signum():
        g = arb_sqrt(a * b)
        return t, (-g if a.signum() < 0 else g)
    return t, _right_sqrt(as_complex(a) * as_complex(b), as_complex(t))


__all__ = ["CONVERGING", "arb_agm", "acb_agm", "agm_step"]
