from __future__ import annotations

from fractions import Fraction

from . import checks
from . import constants
from . import precision
from .acb_core import acb_log
from .apnum import Complex, Float, as_complex, from_fraction, one
from .elementary import unit_i
from .hypgeom import acb_hypgeom_pfq
from .incgamma import e1
from .precision import EXACT
from .series_utils import finish, real_result


def _q(value, prec: int, radix: int) -> Complex:
    return Complex(from_fraction(Fraction(value), prec, radix))


def _prepare(z, name: str) -> tuple[Complex, int, int]:
    """Return ``z`` widened for the oscillating exponentials, with target and working precision."""
    z = as_complex(z)
    prec = z.precision
    if prec >= EXACT:
        raise checks.InfiniteExpansionError(f"Cannot calculate {name} to infinite precision", f"{name}.infinitePrecision")
    extra = precision.small_extra_precision(z.radix) + max(0, z.scale)
    wp = precision.extend(prec, extra)
    return z.ensure_precision(wp), prec, wp


def _pi_i(wp: int, radix: int, numerator: int, denominator: int = 1) -> Complex:
    return unit_i(radix) * (constants.pi(wp, radix) * numerator / denominator)


def acb_hypgeom_ei(z) -> Complex:
    """Exponential integral ``Ei(z) = -E1(-z)`` plus the branch term of the principal log."""
    z = as_complex(z)
    if z.is_zero():
        raise checks.DomainError("Exponential integral Ei of zero", "expIntegralEi.ofZero")
    zz, prec, wp = _prepare(z, "expIntegralEi")
    radix = z.radix
    result = -e1(-zz)
    if z.is_real():
        if z.real.signum() > 0:
            result = result - _pi_i(wp, radix, 1)
        return finish(Complex(result.real), prec)
    result = result + _pi_i(wp, radix, z.imag.signum())
    return finish(result, prec)


def acb_hypgeom_li(z) -> Complex:
    """Logarithmic integral ``li(z) = Ei(log(z))``."""
    z = as_complex(z)
    if z.is_zero():
        return z
    if z == 1:
        raise checks.DomainError("Logarithmic integral of one", "logIntegral.ofOne")
    return acb_hypgeom_ei(acb_log(z))


def _si_adjust(z: Complex) -> int:
    s = z.real.signum()
    return 1 if s > 0 or (s == 0 and z.imag.signum() > 0) else -1


def acb_hypgeom_si(z) -> Complex:
    """Sine integral."""
    z = as_complex(z)
    if z.is_zero():
        return z
    zz, prec, wp = _prepare(z, "sinIntegral")
    radix = z.radix
    if z.scale > 0:
        i = unit_i(radix)
        # (E1(iz) - E1(-iz)) / 2i + pi/2, the sign follows the half plane
        result = (e1(i * zz) - e1(-i * zz)) / (2 * i) + constants.pi(wp, radix) * _si_adjust(z) / 2
    else:
        half = _q(Fraction(1, 2), wp, radix)
        three_halves = half * 3
        result = zz * acb_hypgeom_pfq([half], [three_halves, three_halves], -zz * zz / 4)
    if z.is_real():
        result = Complex(result.real)
    return finish(result, prec)


def _ci_adjust(z: Complex) -> int:
    s = z.real.signum()
    if s < 0:
        return -1 if z.imag.signum() < 0 else 1
    if s == 0 and z.imag.signum() < 0:
        return -1
    return 0


def acb_hypgeom_ci(z) -> Complex:
    """Cosine integral, with the branch cut of ``log(z)``."""
    z = as_complex(z)
    if z.is_zero():
        raise checks.DomainError("Cosine integral of zero", "cosIntegral.ofZero")
    zz, prec, wp = _prepare(z, "cosIntegral")
    radix = z.radix
    if z.scale > 0:
        i = unit_i(radix)
        result = -(e1(i * zz) + e1(-i * zz)) / 2
        adjust = _ci_adjust(z)
        if adjust:
            result = result + _pi_i(wp, radix, adjust)
    else:
        unit = Complex(one(radix).with_precision(wp))
        z24 = -zz * zz / 4
        series = acb_hypgeom_pfq([unit, unit], [unit * 2, unit * 2, _q(Fraction(3, 2), wp, radix)], z24)
        result = z24 * series + acb_log(zz) + constants.euler_gamma(wp, radix)
    if z.is_real() and z.real.signum() > 0:
        result = Complex(result.real)
    return finish(result, prec)


def acb_hypgeom_shi(z) -> Complex:
    """Hyperbolic sine integral ``-i Si(i z)``."""
    z = as_complex(z)
    i = unit_i(z.radix)
    result = -i * acb_hypgeom_si(i * z)
    return Complex(result.real) if z.is_real() else result


def acb_hypgeom_chi(z) -> Complex:
    """Hyperbolic cosine integral ``Ci(i z) - i pi/2``, shifted by ``2 pi i`` in the upper left quadrant."""
    z = as_complex(z)
    if z.is_zero():
        raise checks.DomainError("Hyperbolic cosine integral of zero", "coshIntegral.ofZero")
    radix = z.radix
    i = unit_i(radix)
    value = acb_hypgeom_ci(i * z)
    prec = z.precision
    wp = precision.extend(prec, precision.small_extra_precision(radix))
    numerator = 3 if z.real.signum() < 0 and z.imag.signum() >= 0 else -1
    result = value + _pi_i(wp, radix, numerator, 2)
    if z.is_real() and z.real.signum() > 0:
        result = Complex(result.real)
    return finish(result, prec)


def arb_hypgeom_ei(x) -> Float:
    return real_result(acb_hypgeom_ei(x), "expIntegralEi")


def arb_hypgeom_li(x) -> Float:
    return real_result(acb_hypgeom_li(x), "logIntegral")


def arb_hypgeom_si(x) -> Float:
    return real_result(acb_hypgeom_si(x), "sinIntegral")


def arb_hypgeom_ci(x) -> Float:
    return real_result(acb_hypgeom_ci(x), "cosIntegral")


def arb_hypgeom_shi(x) -> Float:
    return real_result(acb_hypgeom_shi(x), "sinhIntegral")


def arb_hypgeom_chi(x) -> Float:
    return real_result(acb_hypgeom_chi(x), "coshIntegral")


__all__ = [
    "acb_hypgeom_ei",
    "acb_hypgeom_li",
    "acb_hypgeom_si",
    "acb_hypgeom_ci",
    "acb_hypgeom_shi",
    "acb_hypgeom_chi",
    "arb_hypgeom_ei",
    "arb_hypgeom_li",
    "arb_hypgeom_si",
    "arb_hypgeom_ci",
    "arb_hypgeom_shi",
    "arb_hypgeom_chi",
]
