from __future__ import annotations

import logging
import math
from fractions import Fraction

from . import checks
from . import constants
from . import fpwrap
from . import precision
from .acb_core import acb_pow
from .apnum import Complex, Float, as_complex, from_fraction, one, zero
from .bernoulli import bernoulli_number, bernoulli_polynomial, bernoullis2
from .precision import EXACT, EXTRA_PRECISION
from .series_utils import finish, is_nonpositive_integer, real_result, with_escalation

logger = logging.getLogger(__name__)

_CLOSED_FORM_MAX_INDEX = 100
_MAX_TERMS = 1 << 40


def _half(radix: int) -> Float:
    return from_fraction(Fraction(1, 2), EXACT, radix)


def _scale_of_log(value: float, radix: int) -> int:
    # Scale of a positive number given its natural log
    return math.floor(value / math.log(radix)) + 1


def _zeta_scale(s: Complex, a: Complex) -> int:
    radix = s.radix
    try:
        estimate = fpwrap.hurwitz_log_scale(s.to_complex(), a.to_complex())
    except checks.OverflowError:
        return 0
    if not math.isfinite(estimate):
        return 0
    return min(0, _scale_of_log(estimate, radix))


def _truncation(s: Complex, a: Complex, target_scale: int, prec: int) -> int:
    """Smallest N (with M = N) whose remainder bound falls below ``radix**target_scale``."""
    ln_r = math.log(s.radix)
    sd = s.to_complex()
    ad = a.to_complex()

    def small_enough(n: int) -> bool:
        return fpwrap.hurwitz_log_bound(sd, ad, n, n) / ln_r < target_scale

    lowest = max(2 - a.real.truncate().to_int(), int((1 - sd.real) / 2) + 1, 1)
    n = max(prec, lowest)
    if not small_enough(n):
        lo = n
        while not small_enough(n):
            lo = n
            n *= 2
            if n > _MAX_TERMS:
                raise checks.LossOfPrecisionError("Hurwitz zeta truncation order out of range", "lossOfPrecision")
        hi = n
    else:
        hi = n
        while hi // 2 >= lowest and small_enough(hi // 2):
            hi //= 2
        lo = max(lowest, hi // 2)
        if small_enough(lo):
            return lo
    while hi - lo > 1:
        mid = (lo + hi) // 2
        if small_enough(mid):
            hi = mid
        else:
            lo = mid
    return hi


def _euler_maclaurin(s: Complex, a: Complex, n: int, m: int, wp: int) -> Complex:
    """``S + I + T`` with ``n`` direct terms and a tail of order ``m``."""
    radix = s.radix
    minus_s = -s
    total = Complex(zero(radix))
    for k in range(n):
        total = total + acb_pow(a + k, minus_s)
    an = a + n
    integral = acb_pow(an, 1 - s) / (s - 1)
    an2 = an * an
    factor = s / an
    tail = Complex(_half(radix))
    for k, b2k in enumerate(bernoullis2(m), start=1):
        factor = factor / ((2 * k - 1) * (2 * k))
        tail = tail + factor * from_fraction(b2k, wp, radix)
        factor = factor * (s + (2 * k - 1)) * (s + 2 * k) / an2
    tail = tail * acb_pow(an, minus_s)
    return total + integral + tail


def _hurwitz_general(s: Complex, a: Complex, prec: int) -> Complex:
    base_scale = _zeta_scale(s, a) - prec

    def evaluate(extra: int):
        wp = precision.extend(prec, EXTRA_PRECISION + extra)
        ss = s.ensure_precision(wp)
        aa = a.ensure_precision(wp)
        n = _truncation(ss, aa, base_scale - extra, prec + extra)
        logger.debug("hurwitz zeta with N = M = %d at %d digits", n, wp)
        result = _euler_maclaurin(ss, aa, n, n, wp)
        shortfall = prec - result.precision
        return result, (extra + shortfall if shortfall > 0 else 0)

    return finish(with_escalation(evaluate, "hurwitz zeta"), prec)


def acb_dirichlet_hurwitz(s, a) -> Complex:
    """Hurwitz zeta ``sum_k (a + k)**(-s)`` continued to the complex plane."""
    s = as_complex(s)
    a = as_complex(a)
    checks.check_same_radix(s, a, "acb_dirichlet_hurwitz")
    radix = s.radix
    if s == 1:
        raise checks.DomainError("Zeta of first argument one", "zeta.pole")
    if s.is_zero():
        return Complex(_half(radix)) - a
    if is_nonpositive_integer(a):
        if s.real.signum() < 0:
            # Shift a up to one; zero terms vanish for re(s) < 0
            t = Complex(zero(radix))
            aa = a
            while aa.real.signum() <= 0:
                if not aa.is_zero():
                    t = t + acb_pow(aa, -s)
                aa = aa + 1
            return acb_dirichlet_hurwitz(s, aa) + t
        raise checks.DomainError("Hurwitz zeta of nonpositive integer", "zeta.pole")
    if is_nonpositive_integer(s):
        n1 = 1 - s.real.to_int()
        p = min(s.precision, a.precision)
        aa = a if p >= EXACT else a.limit_precision(p)
        return -bernoulli_polynomial(n1, aa) / n1
    prec = min(s.precision, a.precision)
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate zeta to infinite precision", "zeta.infinitePrecision")
    return _hurwitz_general(s, a, prec)


def _zeta_even(n: int, prec: int, radix: int) -> Float:
    # zeta(2n) = (-1)**(n + 1) B_2n (2 pi)**2n / (2 (2n)!)
    wp = precision.extend(prec)
    two_pi = constants.pi(wp, radix) * 2
    b = abs(bernoulli_number(2 * n)) / (2 * math.factorial(2 * n))
    return (from_fraction(b, wp, radix) * two_pi ** (2 * n)).with_precision(prec)


def acb_dirichlet_zeta(s) -> Complex:
    """Riemann zeta."""
    s = as_complex(s)
    radix = s.radix
    if s == 1:
        raise checks.DomainError("Zeta of one", "zeta.pole")
    if s.is_zero():
        return Complex(-_half(radix))
    if s.is_integer() and s.real.signum() > 0:
        prec = s.precision
        if prec >= EXACT:
            raise checks.InfiniteExpansionError("Cannot calculate zeta to infinite precision", "zeta.infinitePrecision")
        k = s.real.to_int()
        if k & 1 == 0 and k // 2 <= _CLOSED_FORM_MAX_INDEX:
            return Complex(_zeta_even(k // 2, prec, radix))
    elif s.is_integer() and s.real.to_int() & 1 == 0:
        # Trivial zeros
        return Complex(zero(radix))
    return acb_dirichlet_hurwitz(s, Complex(one(radix)))


def arb_dirichlet_zeta(s) -> Float:
    return real_result(acb_dirichlet_zeta(s), "zeta")


def arb_dirichlet_hurwitz(s, a) -> Float:
    return real_result(acb_dirichlet_hurwitz(s, a), "zeta")


__all__ = [
    "acb_dirichlet_zeta",
    "acb_dirichlet_hurwitz",
    "arb_dirichlet_zeta",
    "arb_dirichlet_hurwitz",
]
