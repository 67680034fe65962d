from __future__ import annotations

import logging
from fractions import Fraction
from typing import Callable, NamedTuple

from . import checks
from . import precision
from .apnum import Complex, Float, as_complex, from_fraction, one, zero
from .precision import EXACT, EXTRA_PRECISION

logger = logging.getLogger(__name__)


class ContinuedFractionResult(NamedTuple):
    value: Complex
    delta: Complex
    iterations: int
    anomalous: bool


def is_nonpositive_integer(z) -> bool:
    return z.is_integer() and z.real.signum() <= 0


def min_nonpositive_integer(values) -> Float | None:
    found = [v.real for v in values if is_nonpositive_integer(v)]
    return min(found) if found else None


def parameters_precision(*values) -> int:
    return min(v.precision for v in values)


def complex_ulp(z) -> Float:
    re = z.real.ulp()
    im = z.imag.ulp()
    return re if re >= im else im


def real_result(value, name: str) -> Float:
    """Real part of ``value``, raising when a real-only call yields a complex number."""
    if isinstance(value, Float):
        return value
    if not value.imag.is_zero():
        raise checks.DomainError(f"{name}: result would be complex", f"{name}.complexResult")
    return value.real


def finish(value, prec: int):
    """Narrow ``value`` to at most ``prec`` digits; fewer trusted digits are kept as they are."""
    if value.is_zero() or value.precision <= prec:
        return value
    return value.set_precision(prec)


def reduce_margin(value, margin: int):
    """Drop ``margin`` working digits again, relative to the larger component."""
    if value.is_zero() or value.precision >= EXACT:
        return value
    return value.set_precision(precision.reduce(value.precision, margin))


def with_escalation(evaluate: Callable[[int], tuple], label: str):
    """Call ``evaluate(extra)`` until the digit loss it reports fits into ``extra``.

    ``evaluate`` returns ``(value, loss)``. Each retry reserves the previously
    reported loss; the number of retries is bounded by ``max_escalations``.
    """
    extra = 0
    for attempt in range(precision.get_max_escalations() + 1):
        value, loss = evaluate(extra)
        if loss <= extra:
            return value
        logger.debug("%s lost %d digits with %d reserved, retry %d", label, loss, extra, attempt + 1)
        extra = loss
    raise checks.LossOfPrecisionError(f"{label}: precision escalation bound exceeded", "lossOfPrecision")


def evaluate_to_target(z, prec: int, target: int, label: str, combine: Callable):
    """Repeat ``combine(z, wp)`` at higher precision while its result has fewer than ``target`` digits.

    A zero result counts as a total loss of the working digits.
    """
    radix = z.radix
    base = precision.extend(prec, precision.small_extra_precision(radix))

    def evaluate(extra: int):
        wp = precision.extend(base, extra)
        result = combine(z.ensure_precision(wp), wp)
        shortfall = wp if result.is_zero() else target - result.precision
        return result, (extra + shortfall if shortfall > 0 else 0)

    return finish(with_escalation(evaluate, label), target)


def _complex_fraction(z) -> tuple[Fraction, Fraction]:
    return z.real.to_fraction(), z.imag.to_fraction()


def _cf_mul(x, y):
    return x[0] * y[0] - x[1] * y[1], x[0] * y[1] + x[1] * y[0]


def _cf_div(x, y):
    n = y[0] * y[0] + y[1] * y[1]
    return (x[0] * y[0] + x[1] * y[1]) / n, (x[1] * y[0] - x[0] * y[1]) / n


def _exact_polynomial(a, b, z) -> Complex:
    """Terminating series summed in rational arithmetic."""
    radix = z.radix
    a = [_complex_fraction(x) for x in a]
    b = [_complex_fraction(x) for x in b]
    zf = _complex_fraction(z)
    term = (Fraction(1), Fraction(0))
    total = term
    i = 0
    while True:
        i += 1
        num = term
        for j, aj in enumerate(a):
            num = _cf_mul(num, aj)
            a[j] = (aj[0] + 1, aj[1])
        if num == (0, 0):
            break
        num = _cf_mul(num, zf)
        den = (Fraction(i), Fraction(0))
        for j, bj in enumerate(b):
            den = _cf_mul(den, bj)
            b[j] = (bj[0] + 1, bj[1])
        term = _cf_div(num, den)
        total = (total[0] + term[0], total[1] + term[1])
    try:
        return Complex(from_fraction(total[0], EXACT, radix), from_fraction(total[1], EXACT, radix))
    except checks.InfiniteExpansionError as exc:
        raise checks.InfiniteExpansionError(
            "Cannot calculate hypergeometric polynomial to infinite precision", "hypergeometric.infinitePrecision"
        ) from exc


def _sum_terms(a, b, z, min_n: int, prec: int):
    radix = z.radix
    unit = one(radix)
    numerator = Complex(unit)
    denominator = Complex(unit)
    s = Complex(unit)
    max_scale = None
    a = list(a)
    b = list(b)
    i = 0
    while True:
        i += 1
        for j in range(len(a)):
            numerator = numerator * a[j]
            a[j] = a[j] + 1
        if numerator.is_zero():
            return s, max_scale, True
        numerator = numerator * z
        for j in range(len(b)):
            denominator = denominator * b[j]
            b[j] = b[j] + 1
        denominator = denominator * i
        t = numerator / denominator
        s = s + t
        if not s.is_zero():
            max_scale = s.scale if max_scale is None else max(max_scale, s.scale)
        if i <= min_n or s.is_zero():
            continue
        if s.scale - t.scale > prec:
            return s, max_scale, False


def hypergeometric_series(a, b, z, min_n: int, prec: int | None = None) -> Complex:
    """Sum ``pFq(a; b; z)`` term by term with cancellation detection.

    Terms are added until they no longer touch the ``prec`` leading digits of
    the sum, but never before ``min_n`` terms. The digits lost from the peak of
    the partial sums are reserved on a retry with every operand widened.
    """
    a = [as_complex(x) for x in a]
    b = [as_complex(x) for x in b]
    z = as_complex(z)
    if prec is None:
        prec = parameters_precision(z, *a, *b)
    if prec >= EXACT:
        if min_nonpositive_integer(a) is None:
            raise checks.InfiniteExpansionError(
                "Cannot calculate hypergeometric series to infinite precision", "hypergeometric.infinitePrecision"
            )
        return _exact_polynomial(a, b, z)

    def evaluate(extra: int):
        if extra > 0:
            wp = precision.extend(prec, extra)
            aa = [x.ensure_precision(wp) for x in a]
            bb = [x.ensure_precision(wp) for x in b]
            zz = z.ensure_precision(wp)
        else:
            wp = prec
            aa, bb, zz = a, b, z
        s, max_scale, polynomial = _sum_terms(aa, bb, zz, min_n, prec)
        if polynomial:
            return s, 0
        loss = wp if s.is_zero() else max_scale - s.scale
        if prec - s.precision > 1:
            loss = precision.extend(loss, prec - s.precision)
        return s, loss

    return with_escalation(evaluate, "hypergeometric series")


def _parameter_transient(values) -> int:
    # Terms may grow while the rising factorials of large parameters dominate
    bound = 1
    for v in values:
        if not v.real.is_zero():
            bound = max(bound, abs(v.real.truncate().to_int()))
    return bound + 1


def asymptotic_series(a, b, z, prec: int | None = None) -> Complex:
    """Sum a divergent ``pFq(a; b; z)`` (``p > q + 1``) up to its smallest term.

    A terminating series is summed completely. Otherwise the sum must reach
    ``prec`` digits before the terms start growing again, else the
    ``hypergeometric.divergent`` error is raised.
    """
    a = [as_complex(x) for x in a]
    b = [as_complex(x) for x in b]
    z = as_complex(z)
    if prec is None:
        prec = parameters_precision(z, *a, *b)
    minimum = min_nonpositive_integer(a)
    if minimum is not None:
        if prec >= EXACT:
            return _exact_polynomial(a, b, z)
        s, _, _ = _sum_terms(a, b, z, -minimum.to_int() + 1, prec)
        return s
    if prec >= EXACT:
        raise checks.InfiniteExpansionError(
            "Cannot calculate asymptotic series to infinite precision", "hypergeometric.infinitePrecision"
        )
    transient = _parameter_transient(a + b)

    def evaluate(extra: int):
        wp = precision.extend(prec, extra)
        aa = [x.ensure_precision(wp) for x in a]
        bb = [x.ensure_precision(wp) for x in b]
        zz = z.ensure_precision(wp)
        unit = one(z.radix)
        term = Complex(unit)
        s = Complex(unit)
        max_scale = s.scale
        last_scale = term.scale
        i = 0
        while True:
            i += 1
            for j in range(len(aa)):
                term = term * aa[j]
                aa[j] = aa[j] + 1
            term = term * zz
            for j in range(len(bb)):
                term = term / bb[j]
                bb[j] = bb[j] + 1
            term = term / i
            if i > transient and term.scale > last_scale:
                raise checks.ConvergenceError("Asymptotic series does not converge", "hypergeometric.divergent")
            last_scale = term.scale
            s = s + term
            if s.is_zero():
                continue
            max_scale = max(max_scale, s.scale)
            if s.scale - term.scale > prec:
                break
        loss = max_scale - s.scale
        return s, loss

    return with_escalation(evaluate, "asymptotic series")


def _tiny(bn, wp: int) -> Complex:
    u = complex_ulp(bn)
    if u.is_zero():
        u = one(bn.radix).scaled(bn.scale - wp) if not bn.is_zero() else one(bn.radix)
    return Complex(u.scaled(-wp).with_precision(EXACT))


def _at(x, wp: int, radix: int):
    if isinstance(x, (int, Fraction)):
        return Complex(from_fraction(x, wp, radix))
    return as_complex(x).with_precision(wp)


def continued_fraction(
    a_fn: Callable[[int], object],
    b_fn: Callable[[int], object],
    radix: int,
    wp: int,
    max_iterations: int | None = None,
    stable_steps: int = 1,
) -> ContinuedFractionResult:
    """Modified Lentz evaluation of ``a1/(b1 + a2/(b2 + ...))``.

    Stops once the multiplicative update ``delta`` matches one to
    ``wp - EXTRA_PRECISION // 2`` digits on ``stable_steps`` consecutive
    iterations, or after ``max_iterations``; the value is then good to about
    that many digits, not ``wp``. The result is flagged anomalous when the
    value moved by more than round-off during the extra stable steps.
    """
    unit = one(radix)
    target = wp - EXTRA_PRECISION // 2
    # Round-off alone moves f by a few units in the last target digit
    tolerance = target - EXTRA_PRECISION // 2
    n = 1
    an = _at(a_fn(n), wp, radix)
    bn = _at(b_fn(n), wp, radix)
    tiny = _tiny(bn, wp)
    if bn.is_zero():
        bn = tiny
    f = an / bn
    c = an / tiny
    d = unit / bn
    stable = 0
    first = None
    anomalous = False
    while True:
        n += 1
        an = _at(a_fn(n), wp, radix)
        bn = _at(b_fn(n), wp, radix)
        d = (d * an + bn).ensure_precision(wp)
        if d.is_zero():
            d = _tiny(bn, wp)
        c = (bn + an / c).ensure_precision(wp)
        if c.is_zero():
            c = _tiny(bn, wp)
        d = unit / d
        delta = c * d
        f = f * delta
        if delta.equal_digits(unit) >= target:
            stable += 1
            if first is None:
                first = f
            elif f.equal_digits(first) < tolerance:
                anomalous = True
            if stable >= stable_steps:
                break
        else:
            stable = 0
            first = None
        if max_iterations is not None and n > max_iterations:
            break
    return ContinuedFractionResult(f, delta, n, anomalous)


NEWTON_MAX_ITERATIONS = 200


def newton_refine(f: Callable, fprime: Callable, x, target: int, label: str):
    """Newton iteration from the seed ``x`` until the correction is ``target`` digits below ``x``.

    The working precision follows the digits gained, four times the last
    correction gap, and never exceeds ``target + EXTRA_PRECISION``. A
    correction that rounds to zero ends the iteration only at that cap.
    """
    wp = x.precision
    cap = precision.extend(target)
    for _ in range(NEWTON_MAX_ITERATIONS):
        d = f(x) / fprime(x)
        if d.is_zero():
            if wp >= cap:
                return x.with_precision(target)
            # The residual cancelled to nothing at this precision; look again with more digits
            wp = min(2 * wp, cap)
            x = x.with_precision(wp)
            continue
        gap = x.scale - d.scale
        if gap > 0:
            wp = min(max(wp, 4 * gap), cap)
        x = (x - d).with_precision(wp)
        if gap >= target:
            return x.with_precision(target)
    raise checks.ConvergenceError(f"{label}: Newton iteration did not converge", "newton.nonConvergent")


__all__ = [
    "ContinuedFractionResult",
    "NEWTON_MAX_ITERATIONS",
    "newton_refine",
    "is_nonpositive_integer",
    "min_nonpositive_integer",
    "parameters_precision",
    "complex_ulp",
    "real_result",
    "finish",
    "reduce_margin",
    "with_escalation",
    "evaluate_to_target",
    "hypergeometric_series",
    "asymptotic_series",
    "continued_fraction",
]
