from __future__ import annotations

import logging
import math

from . import checks
from . import constants
from . import precision
from .acb_core import acb_exp, acb_log, acb_pow
from .apnum import Complex, as_complex, integer, one, zero
from .gamma import acb_hypgeom_gamma
from .precision import EXACT, EXTRA_PRECISION
from .series_utils import continued_fraction, is_nonpositive_integer, real_result, reduce_margin, with_escalation

logger = logging.getLogger(__name__)

UPPER = "upper"
LOWER = "lower"

# Empirically tuned trial run used to pick the faster continued fraction
TRIAL_DIGITS = 50
TRIAL_ITERATIONS = 50


def _upper_sequences(a: Complex, z: Complex):
    def a_fn(n: int):
        return 1 if n == 1 else (a - (n - 1)) * (n - 1)

    def b_fn(n: int):
        return z - a + (2 * n - 1)

    return a_fn, b_fn


def _lower_sequences(a: Complex, z: Complex):
    def a_fn(n: int):
        if n == 1:
            return 1
        if n & 1 == 0:
            return (1 - n // 2 - a) * z
        return z * (n // 2)

    def b_fn(n: int):
        return a + (n - 1)

    return a_fn, b_fn


_SEQUENCES = {UPPER: _upper_sequences, LOWER: _lower_sequences}


def must_use_lower(z: Complex) -> bool:
    return (z.real.signum() <= 0 or z.real.scale < 0) and z.imag.scale < 0


def use_lower(a: Complex, z: Complex) -> bool:
    return z.scale < a.scale or must_use_lower(z)


def use_upper(a: Complex, z: Complex) -> bool:
    return a.scale < z.scale


def maybe_unstable(a: Complex, z: Complex) -> bool:
    return abs(a.scale - z.scale) <= 1 and a.scale > 0 and z.scale > 0


def fastest(a: Complex, z: Complex) -> str:
    """Pick the continued fraction that converges in fewer steps on a low-precision dry run."""
    radix = z.radix
    trial = max(1, int(TRIAL_DIGITS / math.log10(radix)))
    aa = a.with_precision(trial)
    zz = z.with_precision(trial)
    best = None
    for kind in (UPPER, LOWER):
        a_fn, b_fn = _SEQUENCES[kind](aa, zz)
        try:
            cf = continued_fraction(a_fn, b_fn, radix, trial, TRIAL_ITERATIONS)
        except checks.DomainError:
            continue
        key = (cf.iterations, -cf.delta.equal_digits(one(radix)))
        if best is None or key < best[0]:
            best = (key, kind)
    kind = UPPER if best is None else best[1]
    logger.debug("incomplete gamma continued fraction: %s", kind)
    return kind


def _g(kind: str, a: Complex, z: Complex) -> Complex:
    """``cf * z**a * exp(-z)`` for the upper or lower continued fraction."""
    radix = z.radix

    def evaluate(extra: int):
        ax = a.extend_precision(EXTRA_PRECISION + extra)
        zx = z.extend_precision(EXTRA_PRECISION + extra)
        wp = min(ax.precision, zx.precision)
        a_fn, b_fn = _SEQUENCES[kind](ax, zx)
        cf = continued_fraction(a_fn, b_fn, radix, wp, stable_steps=2)
        value = cf.value * acb_exp(ax * acb_log(zx) - zx)
        loss = extra + EXTRA_PRECISION if cf.anomalous else 0
        return reduce_margin(value, EXTRA_PRECISION + extra), loss

    return with_escalation(evaluate, f"{kind} incomplete gamma continued fraction")


def _lower_series(a: Complex, z: Complex) -> Complex:
    """Power series of the lower incomplete gamma for small ``|z|``."""
    radix = z.radix
    aa = a.extend_precision()
    zz = z.extend_precision()
    target = min(aa.precision, zz.precision)
    za = acb_pow(zz, aa)
    n = 0
    if zz.real.signum() >= 0:
        f = Complex(one(radix))
        total = za / aa
        while True:
            n += 1
            za = za * zz
            f = f * n
            t = za / (f * (aa + n))
            total = total - t if n & 1 else total + t
            if t.is_zero() or total.scale - t.scale >= target:
                break
    else:
        za = za * acb_exp(-zz)
        f = aa
        total = za / f
        while True:
            aa = aa + 1
            za = za * zz
            f = f * aa
            t = za / f
            total = total + t
            if t.is_zero() or total.scale - t.scale >= target:
                break
    return reduce_margin(total, EXTRA_PRECISION)


def e1(z) -> Complex:
    """Exponential integral ``E1(z)``."""
    z = as_complex(z)
    radix = z.radix
    if z.is_zero():
        raise checks.DomainError("Exponential integral of zero", "expint.ofZero")
    prec = z.precision
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate exponential integral to infinite precision", "expint.infinitePrecision")
    if z.scale <= 1 or (z.real.signum() < 0 and abs(z.imag) <= -z.real):
        zd = z.to_complex()
        # Terms peak near exp(|z|) while the sum is near exp(-z)
        extra = EXTRA_PRECISION + max(0, int((abs(zd) + zd.real) / math.log(radix)) + 1)
        zz = z.extend_precision(extra)
        mz = -zz
        s = mz
        total = mz
        k = 1
        while True:
            k += 1
            s = s * mz / k
            t = s / k
            total = total + t
            if t.is_zero() or total.scale - t.scale >= zz.precision:
                break
        euler = constants.euler_gamma(zz.precision, radix)
        result = -acb_log(zz) - euler - total
        return reduce_margin(result, extra)

    def evaluate(extra: int):
        zz = z.extend_precision(EXTRA_PRECISION + extra)
        wp = zz.precision
        unit = one(radix)

        def a_fn(k: int):
            return 1 if k == 1 else k // 2

        def b_fn(k: int):
            return unit if k & 1 == 0 else zz

        cf = continued_fraction(a_fn, b_fn, radix, wp, stable_steps=2)
        value = acb_exp(-zz) * cf.value
        loss = extra + EXTRA_PRECISION if cf.anomalous else 0
        return reduce_margin(value, EXTRA_PRECISION + extra), loss

    return with_escalation(evaluate, "exponential integral continued fraction")


def _upper_nonpositive_integer(n: int, z: Complex) -> Complex:
    # gamma(-n, z) = (-1)**n / n! * E1(z) - exp(-z) * sum_k z**(k - n - 1) / prod_{j<k} (j - n)
    radix = z.radix
    zz = z.extend_precision()
    result = e1(zz)
    if n == 0:
        return reduce_margin(result, EXTRA_PRECISION)
    result = result / math.factorial(n)
    if n & 1:
        result = -result
    mn = -n
    s = acb_pow(zz, Complex(integer(-n, radix))) / mn
    total = s
    for _ in range(2, n + 1):
        mn += 1
        s = s * zz / mn
        total = total + s
    result = result - acb_exp(-zz) * total
    return reduce_margin(result, EXTRA_PRECISION)


def upper_gamma(a: Complex, z: Complex) -> Complex:
    if is_nonpositive_integer(a):
        return _upper_nonpositive_integer(-a.real.to_int(), z)
    if use_lower(a, z) or (maybe_unstable(a, z) and fastest(a, z) == LOWER):
        return acb_hypgeom_gamma(a) - lower_gamma(a, z, force_lower=True)
    return _g(UPPER, a, z)


def lower_gamma(a: Complex, z: Complex, force_lower: bool = False) -> Complex:
    if is_nonpositive_integer(a):
        raise checks.DomainError("Lower gamma of nonpositive integer", "lowerGamma.ofNonpositiveInteger")
    if z.scale <= 0:
        return _lower_series(a, z)
    if not force_lower and not must_use_lower(z):
        if use_upper(a, z) or (maybe_unstable(a, z) and fastest(a, z) == UPPER):
            return acb_hypgeom_gamma(a) - _g(UPPER, a, z)
    return _g(LOWER, a, z)


def _prepare(*values) -> tuple[list[Complex], int]:
    values = [as_complex(v) for v in values]
    prec = min(v.precision for v in values)
    if prec < EXACT:
        values = [v.limit_precision(prec) for v in values]
    return values, prec


def acb_hypgeom_gamma_upper(a, z) -> Complex:
    """Upper incomplete gamma ``gamma(a, z)``."""
    (a, z), prec = _prepare(a, z)
    if z.is_zero():
        if a.real.signum() <= 0:
            raise checks.DomainError("Upper gamma of zero with nonpositive real part", "upperGamma.ofZero")
        return acb_hypgeom_gamma(a)
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate upper gamma to infinite precision", "upperGamma.infinitePrecision")
    return upper_gamma(a, z)


def acb_hypgeom_gamma_lower(a, z) -> Complex:
    """Lower incomplete gamma ``gamma(a) - gamma(a, z)``."""
    (a, z), prec = _prepare(a, z)
    if is_nonpositive_integer(a):
        raise checks.DomainError("Lower gamma of nonpositive integer", "lowerGamma.ofNonpositiveInteger")
    if z.is_zero():
        if a.real.signum() <= 0:
            raise checks.DomainError("Lower gamma of zero with nonpositive real part", "lowerGamma.ofZero")
        return Complex(zero(z.radix))
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate lower gamma to infinite precision", "lowerGamma.infinitePrecision")
    return lower_gamma(a, z)


def acb_hypgeom_gamma_between(a, z0, z1) -> Complex:
    """Generalized incomplete gamma ``gamma(a, z0) - gamma(a, z1)``."""
    (a, z0, z1), prec = _prepare(a, z0, z1)
    radix = a.radix
    if a.is_zero() and z0.is_zero() and z1.is_zero():
        raise checks.DomainError("Gamma of zero", "gamma.ofZero")
    if z0 == z1:
        return Complex(zero(radix))
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate incomplete gamma to infinite precision", "upperGamma.infinitePrecision")
    if z0.is_zero():
        return lower_gamma(a, z1)
    if z1.is_zero():
        return -lower_gamma(a, z0)
    if use_lower(a, z0) and use_lower(a, z1) and not is_nonpositive_integer(a):
        return lower_gamma(a, z1) - lower_gamma(a, z0)
    return upper_gamma(a, z0) - upper_gamma(a, z1)


def acb_hypgeom_expint(s, z) -> Complex:
    """Generalized exponential integral ``E_s(z) = z**(s - 1) gamma(1 - s, z)``."""
    (s, z), prec = _prepare(s, z)
    if s == 1:
        return e1(z)
    if z.is_zero():
        if s.real <= one(s.radix):
            raise checks.DomainError("Exponential integral of zero", "expint.ofZero")
        return 1 / (s - 1)
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate exponential integral to infinite precision", "expint.infinitePrecision")
    extra = precision.small_extra_precision(s.radix)
    ss = s.extend_precision(extra)
    zz = z.extend_precision(extra)
    result = acb_pow(zz, ss - 1) * upper_gamma(1 - ss, zz)
    return reduce_margin(result, extra)


def arb_hypgeom_gamma_upper(a, x):
    return real_result(acb_hypgeom_gamma_upper(a, x), "upperGamma")


def arb_hypgeom_gamma_lower(a, x):
    return real_result(acb_hypgeom_gamma_lower(a, x), "lowerGamma")


def arb_hypgeom_expint(s, x):
    return real_result(acb_hypgeom_expint(s, x), "expint")


__all__ = [
    "UPPER",
    "LOWER",
    "TRIAL_DIGITS",
    "TRIAL_ITERATIONS",
    "must_use_lower",
    "use_lower",
    "use_upper",
    "maybe_unstable",
    "fastest",
    "upper_gamma",
    "lower_gamma",
    "e1",
    "acb_hypgeom_gamma_upper",
    "acb_hypgeom_gamma_lower",
    "acb_hypgeom_gamma_between",
    "acb_hypgeom_expint",
    "arb_hypgeom_gamma_upper",
    "arb_hypgeom_gamma_lower",
    "arb_hypgeom_expint",
]
