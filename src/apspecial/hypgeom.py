from __future__ import annotations

import logging
import math
from typing import Callable

from . import checks
from . import constants
from . import fpwrap
from . import precision
from .acb_core import acb_exp, acb_pow, acb_sin
from .apnum import Complex, Float, as_complex, one, zero
from .gamma import acb_hypgeom_beta, acb_hypgeom_gamma, acb_hypgeom_rgamma
from .precision import EXACT
from .series_utils import (
    asymptotic_series,
    finish,
    hypergeometric_series,
    is_nonpositive_integer,
    min_nonpositive_integer,
    parameters_precision,
    real_result,
    reduce_margin,
    with_escalation,
)

logger = logging.getLogger(__name__)

# Above this transformed modulus the Gosper recurrence replaces the series
TRANSFORM_LIMIT = 0.8


def _coerce(a, b, z) -> tuple[list[Complex], list[Complex], Complex, int]:
    a = [as_complex(x) for x in a]
    b = [as_complex(x) for x in b]
    z = as_complex(z)
    for x in a + b:
        checks.check_same_radix(x, z, "hypergeometric")
    prec = parameters_precision(z, *a, *b)
    if prec < EXACT:
        a = [x.limit_precision(prec) for x in a]
        b = [x.limit_precision(prec) for x in b]
        z = z.limit_precision(prec)
    return a, b, z, prec


def _min_n(b) -> int:
    if not b:
        return 1
    lowest = min(x.real for x in b)
    return max(1, -lowest.truncate().to_int()) + 1


def nudge(loss: int, wp: int, radix: int) -> Float:
    """``0.1 * radix**-loss`` in the radix, carrying ``wp`` digits."""
    return one(radix).scaled(-1 - loss).with_precision(wp)


def _widen(x: Complex, offset: Float) -> Complex:
    # Same value, with digits down to the offset's last digit
    return Complex(x.real.with_precision(EXACT) + offset - offset, x.imag)


def _gamma(z: Complex, prec: int) -> Complex:
    return acb_hypgeom_gamma(precision.ensure_gamma_precision(z, prec))


class _Gauss:
    """Working state of one 2F1 evaluation; the parameter adjustments raise its precision."""

    def __init__(self, a: Complex, b: Complex, c: Complex, z: Complex, prec: int):
        self.a = a
        self.b = b
        self.c = c
        self.z = z
        self.prec = prec
        self.radix = z.radix

    def ensure(self) -> None:
        p = self.prec
        self.a = self.a.ensure_precision(p)
        self.b = self.b.ensure_precision(p)
        self.c = self.c.ensure_precision(p)
        self.z = self.z.ensure_precision(p)

    def _digit_loss(self, d: Complex) -> int:
        rounded = zero(self.radix) if d.scale <= 0 else d.real.round_half_even()
        diff = d - rounded
        return self.prec if diff.is_zero() else -diff.scale

    def separate_ab(self) -> None:
        """Keep ``a - b`` away from an integer so the T2 and T3 prefactor stays finite."""
        ab = self.a - self.b
        if ab.is_integer():
            loss = self.prec
            self.prec = precision.extend(self.prec, loss)
            offset = nudge(loss, self.prec, self.radix)
            self.a = Complex(self.a.real.with_precision(EXACT) + offset, self.a.imag)
            self.b = _widen(self.b, offset)
            self.ensure()
            return
        loss = self._digit_loss(ab)
        if loss > 0:
            self.prec = precision.extend(self.prec, loss)
            offset = nudge(loss, self.prec, self.radix)
            self.a = _widen(self.a, offset)
            self.b = _widen(self.b, offset)
            self.ensure()

    def separate_cab(self) -> None:
        """Keep ``c - a - b`` away from an integer for T4 and T5."""
        cab = self.c - self.a - self.b
        if cab.is_integer():
            loss = self.prec
            self.prec = precision.extend(self.prec, loss)
            offset = nudge(loss, self.prec, self.radix)
            self.c = Complex(self.c.real.with_precision(EXACT) + offset, self.c.imag)
            self.a = _widen(self.a, offset)
            self.b = _widen(self.b, offset)
            self.ensure()
            return
        loss = self._digit_loss(cab)
        if loss > 0:
            self.prec = precision.extend(self.prec, loss)
            offset = nudge(loss, self.prec, self.radix)
            self.c = _widen(self.c, offset)
            self.a = _widen(self.a, offset)
            self.b = _widen(self.b, offset)
            self.ensure()

    def series(self, a: Complex, b: Complex, c: Complex, z: Complex) -> Complex:
        return hypergeometric_series([a, b], [c], z, _min_n([c]), self.prec)

    def connection(self, s, c, base1, exp1, g1, g2, a1, b1, c1, base2, exp2, base3, exp3, g3, g4, a2, b2, c2, zt):
        """``gamma(c) pi / sin(pi s) * (term1 - term2)`` for a two-term connection formula."""
        p = self.prec
        pi = constants.pi(p, self.radix)
        if is_nonpositive_integer(g1) or is_nonpositive_integer(g2):
            term1 = Complex(zero(self.radix))
        else:
            term1 = acb_pow(base1, exp1) / (_gamma(g1, p) * _gamma(g2, p) * _gamma(c1, p)) * self.series(a1, b1, c1, zt)
        if is_nonpositive_integer(g3) or is_nonpositive_integer(g4):
            term2 = Complex(zero(self.radix))
        else:
            term2 = (
                acb_pow(base2, exp2)
                * acb_pow(base3, exp3)
                / (_gamma(g3, p) * _gamma(g4, p) * _gamma(c2, p))
                * self.series(a2, b2, c2, zt)
            )
        return _gamma(c, p) * pi / acb_sin(s * pi) * (term1 - term2)


def _t0(g: _Gauss) -> Complex:
    return g.series(g.a, g.b, g.c, g.z)


def _t1(g: _Gauss) -> Complex:
    a, b, c, z = g.a, g.b, g.c, g.z
    z1 = 1 - z
    zt = z / (z - 1)
    s = c - a
    t = c - b
    if is_nonpositive_integer(s) and (not t.is_integer() or t.real.signum() > 0 or s.real >= t.real):
        return acb_pow(z1, -b) * g.series(s, b, c, zt)
    return acb_pow(z1, -a) * g.series(a, t, c, zt)


def _t2(g: _Gauss) -> Complex:
    g.separate_ab()
    a, b, c, z = g.a, g.b, g.c, g.z
    u = Complex(one(g.radix))
    return g.connection(
        b - a, c, -z, -a, b, c - a, a, a - c + 1, a - b + 1, -z, -b, u, u, a, c - b, b, b - c + 1, b - a + 1, 1 / z
    )


def _t3(g: _Gauss) -> Complex:
    g.separate_ab()
    a, b, c, z = g.a, g.b, g.c, g.z
    u = Complex(one(g.radix))
    z1 = 1 - z
    return g.connection(b - a, c, z1, -a, b, c - a, a, c - b, a - b + 1, z1, -b, u, u, a, c - b, b, c - a, b - a + 1, 1 / z1)


def _t4(g: _Gauss) -> Complex:
    g.separate_cab()
    a, b, c, z = g.a, g.b, g.c, g.z
    u = Complex(one(g.radix))
    z1 = 1 - z
    cab = c - a - b
    return g.connection(cab, c, u, u, c - a, c - b, a, b, 1 - cab, z1, cab, u, u, a, b, c - a, c - b, cab + 1, z1)


def _t5(g: _Gauss) -> Complex:
    g.separate_cab()
    a, b, c, z = g.a, g.b, g.c, g.z
    z1 = 1 - z
    cab = c - a - b
    return g.connection(
        cab, c, z, -a, c - a, c - b, a, a - c + 1, 1 - cab, z1, cab, z, a - c, a, b, c - a, 1 - a, cab + 1, 1 - 1 / z
    )


TRANSFORMS: tuple[Callable[[_Gauss], Complex], ...] = (_t0, _t1, _t2, _t3, _t4, _t5)


def select_transformation(z: Complex) -> tuple[int, float]:
    """Index of the 2F1 identity with the smallest transformed argument, and that modulus."""
    moduli = fpwrap.hyp2f1_transform_moduli(z.to_complex())
    best = min(range(len(moduli)), key=lambda k: moduli[k] if math.isfinite(moduli[k]) else math.inf)
    return best, moduli[best]


def _gosper(a: Complex, b: Complex, c: Complex, z: Complex, prec: int) -> Complex:
    """Gosper's recurrence for 2F1 near ``exp(+-i pi / 3)`` where no transformation helps.

    The running sum may cancel below its peak; those digits are reserved on a retry.
    """
    radix = z.radix

    def evaluate(extra: int):
        wp = precision.extend(prec, extra)
        aa, bb, cc, zz = (v.ensure_precision(wp) for v in (a, b, c, z))
        d = Complex(zero(radix))
        e = Complex(one(radix))
        f = Complex(zero(radix))
        z1 = (1 - zz).ensure_precision(wp)
        z12 = z1 * 2
        z2 = (zz - 2).ensure_precision(wp)
        abz = aa * bb * zz
        c2 = cc / 2
        c12 = (cc + 1).ensure_precision(wp) / 2
        cba = (cc - bb - aa).ensure_precision(wp)
        peak = None
        k = 0
        while True:
            kc2 = c2 + k
            kakbz = (aa + k) * (bb + k) * zz
            divisor = 1 / ((kc2 * (k + 1) * 4) * (c12 + k))
            d1 = kakbz * (e - (cba + k) * d * zz / z1) * divisor
            e1 = kakbz * (abz * d / z1 + (cc + k) * e) * divisor
            f1 = f - d * ((cba * zz + z2 * k - cc) * k - abz) / (kc2 * z12) + e
            d = d1.ensure_precision(wp)
            e = e1.ensure_precision(wp)
            f = f1.ensure_precision(wp)
            if not f.is_zero():
                peak = f.scale if peak is None else max(peak, f.scale)
            k += 1
            if d.scale < -wp and e.scale < -wp:
                break
        if f.is_zero():
            return f, extra + wp
        return f, peak - f.scale

    return finish(with_escalation(evaluate, "2f1 Gosper recurrence"), prec)


def _gauss_at_one(a: Complex, b: Complex, c: Complex, prec: int) -> Complex:
    if (a.real + b.real - c.real).signum() >= 0:
        raise checks.ConvergenceError("Gauss series does not converge at one", "hypergeometric.divergent")
    s = c - a
    t = c - b
    if is_nonpositive_integer(s) or is_nonpositive_integer(t):
        return Complex(zero(c.radix))
    cab = s - b
    return _gamma(c, prec) * _gamma(cab, prec) / (_gamma(s, prec) * _gamma(t, prec))


def _hyp2f1(a: Complex, b: Complex, c: Complex, z: Complex, prec: int) -> Complex:
    if z == 1:
        return _gauss_at_one(a, b, c, prec)
    if prec >= EXACT:
        raise checks.InfiniteExpansionError(
            "Cannot calculate hypergeometric function to infinite precision", "hypergeometric.infinitePrecision"
        )
    index, modulus = select_transformation(z)
    if modulus > TRANSFORM_LIMIT:
        logger.debug("2f1 Gosper recurrence, best transformed modulus %.3g", modulus)
        result = _gosper(a, b, c, z, prec)
    else:
        logger.debug("2f1 transformation T%d, transformed modulus %.3g", index, modulus)
        result = TRANSFORMS[index](_Gauss(a, b, c, z, prec))
    return result.limit_precision(prec)


def acb_hypgeom_pfq(a, b, z) -> Complex:
    """Generalized hypergeometric ``pFq(a; b; z)``.

    Series with ``p > q + 1`` only converge at zero or when they terminate. For
    ``p == q + 1`` beyond 2F1 the argument must lie inside the unit disk.
    """
    a, b, z, prec = _coerce(a, b, z)
    radix = z.radix
    if z.is_zero():
        return Complex(one(radix).with_precision(prec))
    min_a = min_nonpositive_integer(a)
    min_b = min_nonpositive_integer(b)
    if min_b is not None and (min_a is None or min_a < min_b):
        raise checks.DomainError("Hypergeometric function with a nonpositive integer denominator parameter", "divide.byZero")
    if min_a is not None:
        return hypergeometric_series(a, b, z, -min_a.to_int(), prec)
    if len(a) == 2 and len(b) == 1:
        return _hyp2f1(a[0], a[1], b[0], z, prec)
    if len(a) > len(b) + 1:
        raise checks.ConvergenceError("Hypergeometric series does not converge", "hypergeometric.divergent")
    if prec >= EXACT:
        raise checks.InfiniteExpansionError(
            "Cannot calculate hypergeometric function to infinite precision", "hypergeometric.infinitePrecision"
        )
    if not a and not b:
        return acb_exp(z)
    if len(a) == 1 and not b:
        return acb_pow(1 - z, -a[0])
    if len(a) == len(b) + 1 and abs(z.to_complex()) >= 1.0:
        raise checks.ConvergenceError("Hypergeometric series does not converge", "hypergeometric.divergent")
    return hypergeometric_series(a, b, z, _min_n(b), prec)


def acb_hypgeom_pfq_regularized(a, b, z) -> Complex:
    """``pFq(a; b; z) / prod(gamma(b))``, finite at nonpositive integer ``b``.

    With ``m`` the most negative integer among ``b`` the leading ``m + 1`` terms
    vanish and the rest is ``z**(m+1) prod((a)_(m+1)) / ((m+1)! prod(gamma(b+m+1)))``
    times ``F(a+m+1, 1; b+m+1, m+2; z)``.
    """
    a, b, z, prec = _coerce(a, b, z)
    radix = z.radix
    lowest = min_nonpositive_integer(b)
    if lowest is None:
        value = acb_hypgeom_pfq(a, b, z)
        for bj in b:
            value = value * acb_hypgeom_rgamma(bj)
        return value
    m1 = 1 - lowest.to_int()
    factor = acb_pow(z, Complex(one(radix) * m1)) / math.factorial(m1)
    for ai in a:
        for k in range(m1):
            factor = factor * (ai + k)
    if factor.is_zero():
        return factor
    for bj in b:
        factor = factor * acb_hypgeom_rgamma(bj + m1)
    unit = Complex(one(radix).with_precision(prec))
    shifted_a = [ai + m1 for ai in a] + [unit]
    shifted_b = [bj + m1 for bj in b] + [unit * (m1 + 1)]
    return factor * acb_hypgeom_pfq(shifted_a, shifted_b, z)


def acb_hypgeom_0f1(a, z, regularized: bool = False) -> Complex:
    if regularized:
        return acb_hypgeom_pfq_regularized([], [a], z)
    return acb_hypgeom_pfq([], [a], z)


def acb_hypgeom_1f1(a, b, z, regularized: bool = False) -> Complex:
    """Kummer's confluent hypergeometric function ``M(a, b, z)``."""
    if regularized:
        return acb_hypgeom_pfq_regularized([a], [b], z)
    return acb_hypgeom_pfq([a], [b], z)


def acb_hypgeom_2f1(a, b, c, z, regularized: bool = False) -> Complex:
    """Gauss hypergeometric function."""
    if regularized:
        return acb_hypgeom_pfq_regularized([a, b], [c], z)
    return acb_hypgeom_pfq([a, b], [c], z)


def integer_parameter_limit(
    nu: Complex, target: int, label: str, evaluate: Callable[[Complex, int], Complex]
) -> Complex:
    """Evaluate a formula with a removable singularity at integer ``nu``.

    An integer ``nu`` is moved off the integer by ``0.1 * radix**-wp`` after
    doubling the working precision, a near-integer one reserves the digits it
    shares with the integer. ``evaluate(nu, wp)`` is repeated at higher precision
    while its result carries fewer than ``target`` digits.
    """
    radix = nu.radix
    wp = precision.extend(target, precision.small_extra_precision(radix))
    if nu.is_integer():
        loss = wp
        wp = precision.extend(wp, loss)
        nu = Complex(nu.real.with_precision(EXACT) + nudge(loss, wp, radix), nu.imag)
    else:
        diff = nu - nu.real.round_half_even()
        loss = min(wp, -diff.scale)
        if loss > 0:
            wp = precision.extend(wp, loss)

    def attempt(extra: int):
        p = precision.extend(wp, extra)
        result = evaluate(nu.ensure_precision(p), p)
        shortfall = p if result.is_zero() else target - result.precision
        return result, (extra + shortfall if shortfall > 0 else 0)

    return finish(with_escalation(attempt, label), target)


def _u_asymptotic(a: Complex, b: Complex, z: Complex, prec: int) -> Complex | None:
    # U ~ z**-a 2F0(a, a - b + 1;; -1/z); None when the smallest term is too big
    try:
        series = asymptotic_series([a, a - b + 1], [], -1 / z, prec)
    except checks.ConvergenceError:
        return None
    return acb_pow(z, -a) * series


def hypergeometric_u(a: Complex, b: Complex, z: Complex, asymptotic_only: bool = False) -> Complex | None:
    """Tricomi ``U(a, b, z)``; with ``asymptotic_only`` returns None instead of falling back."""
    radix = z.radix
    prec = parameters_precision(a, b, z)
    extra = precision.small_extra_precision(radix)
    wp = precision.extend(prec, extra)
    if is_nonpositive_integer(a) or is_nonpositive_integer(a - b + 1):
        aa = a.ensure_precision(wp)
        bb = b.ensure_precision(wp)
        zz = z.ensure_precision(wp)
        return reduce_margin(acb_pow(zz, -aa) * asymptotic_series([aa, aa - bb + 1], [], -1 / zz, wp), extra)
    # The smallest term of the divergent series is about exp(-|z|)
    if abs(z.to_complex()) * 2 >= prec * math.log(radix):
        value = _u_asymptotic(a.ensure_precision(wp), b.ensure_precision(wp), z.ensure_precision(wp), wp)
        if value is not None:
            return reduce_margin(value, extra)
    if asymptotic_only:
        return None

    def kummer(bb: Complex, p: int) -> Complex:
        aa = a.ensure_precision(p)
        zz = z.ensure_precision(p)
        pi = constants.pi(p, radix)
        first = acb_hypgeom_1f1(aa, bb, zz, regularized=True) * acb_hypgeom_rgamma(aa - bb + 1)
        second = acb_pow(zz, 1 - bb) * acb_hypgeom_1f1(aa - bb + 1, 2 - bb, zz, regularized=True) * acb_hypgeom_rgamma(aa)
        return pi / acb_sin(pi * bb) * (first - second)

    return integer_parameter_limit(b, prec, "hypergeometric U", kummer)


def acb_hypgeom_u(a, b, z) -> Complex:
    """Tricomi confluent hypergeometric function ``U(a, b, z)``."""
    (a, b), _, z, prec = _coerce([a, b], [], z)
    if z.is_zero():
        if b.real < one(z.radix):
            return _gamma(1 - b, prec) * acb_hypgeom_rgamma(a - b + 1)
        raise checks.DomainError("Hypergeometric U of zero", "hypergeometricU.ofZero")
    if prec >= EXACT:
        raise checks.InfiniteExpansionError(
            "Cannot calculate hypergeometric U to infinite precision", "hypergeometric.infinitePrecision"
        )
    return hypergeometric_u(a, b, z)


def _beta_lower(z: Complex, a: Complex, b: Complex, prec: int) -> Complex:
    # B(z; a, b) = z**a / a * 2F1(a, 1 - b; a + 1; z)
    wp = precision.extend(prec, 1)
    return acb_pow(z, a) / a * acb_hypgeom_2f1(a, (1 - b).ensure_precision(prec), (a + 1).ensure_precision(wp), z)


def acb_hypgeom_beta_lower(a, b, z, regularized: bool = False) -> Complex:
    """Incomplete beta ``B(z; a, b)``, or ``I_z(a, b)`` when regularized."""
    (a, b), _, z, prec = _coerce([a, b], [], z)
    if is_nonpositive_integer(a):
        raise checks.DomainError("Incomplete beta with a nonpositive integer", "betaIncomplete.withNonpositiveInteger")
    if z.is_zero():
        return z
    extra = precision.small_extra_precision(z.radix)
    wp = precision.extend(prec, extra)
    result = _beta_lower(z.ensure_precision(wp), a.ensure_precision(wp), b, wp)
    if regularized:
        result = result / acb_hypgeom_beta(a.ensure_precision(wp), b.ensure_precision(wp))
    return reduce_margin(result, extra)


def acb_hypgeom_beta_between(a, b, z1, z2) -> Complex:
    """Generalized incomplete beta ``B(z2; a, b) - B(z1; a, b)``."""
    (a, b, z1), _, z2, prec = _coerce([a, b, z1], [], z2)
    if z1 == z2:
        return Complex(zero(z1.radix))
    if is_nonpositive_integer(a):
        raise checks.DomainError(
            "Generalized incomplete beta with a nonpositive integer", "betaIncompleteGeneralized.withNonpositiveInteger"
        )
    extra = precision.small_extra_precision(z1.radix)
    wp = precision.extend(prec, extra)
    aa = a.ensure_precision(wp)
    result = _beta_lower(z2.ensure_precision(wp), aa, b, wp) - _beta_lower(z1.ensure_precision(wp), aa, b, wp)
    return reduce_margin(result, extra)


def arb_hypgeom_pfq(a, b, x):
    return real_result(acb_hypgeom_pfq(a, b, x), "hypergeometricPFQ")


def arb_hypgeom_0f1(a, x, regularized: bool = False):
    return real_result(acb_hypgeom_0f1(a, x, regularized), "hypergeometric0F1")


def arb_hypgeom_1f1(a, b, x, regularized: bool = False):
    return real_result(acb_hypgeom_1f1(a, b, x, regularized), "hypergeometric1F1")


def arb_hypgeom_2f1(a, b, c, x, regularized: bool = False):
    return real_result(acb_hypgeom_2f1(a, b, c, x, regularized), "hypergeometric2F1")


def arb_hypgeom_u(a, b, x):
    return real_result(acb_hypgeom_u(a, b, x), "hypergeometricU")


def arb_hypgeom_beta_lower(a, b, x, regularized: bool = False):
    return real_result(acb_hypgeom_beta_lower(a, b, x, regularized), "betaIncomplete")


__all__ = [
    "TRANSFORM_LIMIT",
    "TRANSFORMS",
    "nudge",
    "select_transformation",
    "integer_parameter_limit",
    "hypergeometric_u",
    "acb_hypgeom_pfq",
    "acb_hypgeom_pfq_regularized",
    "acb_hypgeom_0f1",
    "acb_hypgeom_1f1",
    "acb_hypgeom_2f1",
    "acb_hypgeom_u",
    "acb_hypgeom_beta_lower",
    "acb_hypgeom_beta_between",
    "arb_hypgeom_pfq",
    "arb_hypgeom_0f1",
    "arb_hypgeom_1f1",
    "arb_hypgeom_2f1",
    "arb_hypgeom_u",
    "arb_hypgeom_beta_lower",
]
