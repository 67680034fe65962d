from __future__ import annotations

import logging
import math
from fractions import Fraction

from . import checks
from . import constants
from . import fpwrap
from . import precision
from .apnum import Complex, Float, as_complex, as_float, from_double, from_fraction, one, zero
from .arb_core import arb_exp
from .elementary import unit_i
from .hypgeom import acb_hypgeom_pfq
from .incgamma import upper_gamma
from .precision import EXACT
from .roots import arb_sqrt
from .series_utils import finish, newton_refine, real_result, reduce_margin

logger = logging.getLogger(__name__)

# erfinv switches to the erfc equation above |y| = 1/2


def _q(value, prec: int, radix: int) -> Complex:
    return Complex(from_fraction(Fraction(value), prec, radix))


def _sqrt_pi(prec: int, radix: int) -> Float:
    return arb_sqrt(constants.pi(prec, radix))


def _infinite(name: str):
    return checks.InfiniteExpansionError(f"Cannot calculate {name} to infinite precision", f"{name}.infinitePrecision")


def _left_half(z: Complex) -> bool:
    s = z.real.signum()
    return s < 0 or (s == 0 and z.imag.signum() < 0)


def _erf_upper(zz: Complex, wp: int) -> Complex:
    # Gamma(1/2, z**2) / sqrt(pi), that is erfc(z) for re(z) > 0
    radix = zz.radix
    return upper_gamma(_q(Fraction(1, 2), wp, radix), zz * zz) / _sqrt_pi(wp, radix)


def acb_hypgeom_erf(z) -> Complex:
    """Error function; large arguments go through the upper incomplete gamma."""
    z = as_complex(z)
    if z.is_zero():
        return z
    prec = z.precision
    if prec >= EXACT:
        raise _infinite("erf")
    radix = z.radix
    extra = precision.small_extra_precision(radix)
    wp = precision.extend(prec, extra)
    zz = z.ensure_precision(wp)
    if z.scale > 0:
        result = 1 - _erf_upper(zz, wp)
        if _left_half(z):
            result = -result
    else:
        half = _q(Fraction(1, 2), wp, radix)
        series = acb_hypgeom_pfq([half], [half * 3], -zz * zz)
        result = zz * 2 / _sqrt_pi(wp, radix) * series
    return reduce_margin(result, extra)


def acb_hypgeom_erfc(z) -> Complex:
    """Complementary error function ``1 - erf(z)``."""
    z = as_complex(z)
    if z.is_zero():
        return Complex(one(z.radix))
    prec = z.precision
    if prec >= EXACT:
        raise _infinite("erfc")
    if z.scale > 0 and z.real.signum() > 0:
        extra = precision.small_extra_precision(z.radix)
        wp = precision.extend(prec, extra)
        return reduce_margin(_erf_upper(z.ensure_precision(wp), wp), extra)
    return 1 - acb_hypgeom_erf(z)


def acb_hypgeom_erfi(z) -> Complex:
    """Imaginary error function ``-i erf(i z)``."""
    z = as_complex(z)
    i = unit_i(z.radix)
    result = -i * acb_hypgeom_erf(i * z)
    return Complex(result.real) if z.is_real() else result


def _fresnel_series(z: Complex, wp: int) -> tuple[Complex, Complex]:
    radix = z.radix
    pi = constants.pi(wp, radix)
    z2 = z * z
    w = -(pi * pi) * z2 * z2 / 16
    s = pi * z2 * z / 6 * acb_hypgeom_pfq(
        [_q(Fraction(3, 4), wp, radix)], [_q(Fraction(3, 2), wp, radix), _q(Fraction(7, 4), wp, radix)], w
    )
    c = z * acb_hypgeom_pfq(
        [_q(Fraction(1, 4), wp, radix)], [_q(Fraction(1, 2), wp, radix), _q(Fraction(5, 4), wp, radix)], w
    )
    return s, c


def _fresnel_erf(z: Complex, wp: int) -> tuple[Complex, Complex]:
    # C + iS = (1 + i)/2 erf((1 - i)/2 sqrt(pi) z), split with both diagonal directions
    radix = z.radix
    i = unit_i(radix)
    h = _sqrt_pi(wp, radix) * z / 2
    plus = acb_hypgeom_erf((1 + i) * h)
    minus = acb_hypgeom_erf((1 - i) * h)
    s = (1 + i) * (plus - i * minus) / 4
    c = (1 - i) * (plus + i * minus) / 4
    return s, c


def acb_hypgeom_fresnel(z, normalized: bool = False) -> tuple[Complex, Complex]:
    """Fresnel integrals ``(S(z), C(z))``.

    Normalized integrals use ``sin(pi t**2 / 2)`` and ``cos(pi t**2 / 2)``, the
    unnormalized ones ``sin(t**2)`` and ``cos(t**2)``.
    """
    z = as_complex(z)
    if z.is_zero():
        return z, z
    prec = z.precision
    if prec >= EXACT:
        raise _infinite("fresnel")
    radix = z.radix
    # The phase pi z**2 / 2 needs about twice the scale of z in extra digits
    extra = precision.small_extra_precision(radix) + 2 * max(0, z.scale)
    wp = precision.extend(prec, extra)
    zz = z.ensure_precision(wp)
    factor = None
    if not normalized:
        factor = arb_sqrt(constants.pi(wp, radix) / 2)
        zz = zz / factor
    if zz.scale > 0:
        s, c = _fresnel_erf(zz, wp)
    else:
        s, c = _fresnel_series(zz, wp)
    if factor is not None:
        s = s * factor
        c = c * factor
    if z.is_real():
        s = Complex(s.real)
        c = Complex(c.real)
    return finish(s, prec), finish(c, prec)


def acb_hypgeom_fresnel_s(z, normalized: bool = True) -> Complex:
    return acb_hypgeom_fresnel(z, normalized)[0]


def acb_hypgeom_fresnel_c(z, normalized: bool = True) -> Complex:
    return acb_hypgeom_fresnel(z, normalized)[1]


def _erf_slope(x: Float) -> Float:
    return 2 * arb_exp(-(x * x)) / _sqrt_pi(x.precision, x.radix)


def _seed(value: float, radix: int) -> Float:
    return from_double(value, precision.double_precision(radix), radix)


def _erfinv_central(y: Float, target: int) -> Float:
    """Root of ``erf(x) = y`` for ``|y| <= 1/2``."""
    if y.is_zero():
        return y
    radix = y.radix
    extra = precision.small_extra_precision(radix)

    def f(x: Float) -> Float:
        return acb_hypgeom_erf(x.extend_precision(extra)).real - y

    x = _seed(fpwrap.double_erfinv(y.to_double()), radix)
    return newton_refine(f, _erf_slope, x, target, "inverse erf")


def _erfcinv_tail(q: Float, target: int) -> Float:
    """Root of ``erfc(x) = q`` for ``0 < q <= 1/2``."""
    radix = q.radix
    extra = precision.small_extra_precision(radix)
    qd = q.to_double()
    if qd > 1e-300:
        seed = fpwrap.double_erfcinv(qd)
    else:
        m, s = q.double_parts()
        seed = fpwrap.double_erfc_tail_seed(-(math.log(m) + s * math.log(radix)))

    def f(x: Float) -> Float:
        return acb_hypgeom_erfc(x.extend_precision(extra)).real - q

    def fprime(x: Float) -> Float:
        return -_erf_slope(x)

    logger.debug("inverse erfc tail, seed %.17g", seed)
    return newton_refine(f, fprime, _seed(seed, radix), target, "inverse erfc")


def arb_hypgeom_erfinv(x) -> Float:
    """Inverse error function on ``(-1, 1)``."""
    y = as_float(x)
    if y.is_zero():
        return y
    radix = y.radix
    unit = one(radix)
    ay = abs(y)
    if ay == unit:
        raise checks.DomainError("Inverse erf of one", "inverseErf.ofOne")
    if ay > unit:
        raise checks.DomainError("Inverse erf outside (-1, 1)", "inverseErf.outOfRange")
    prec = y.precision
    if prec >= EXACT:
        raise _infinite("inverseErf")
    if ay * 2 <= 1:
        return _erfinv_central(y, prec)
    q = unit - ay
    result = _erfcinv_tail(q, q.precision)
    return -result if y.signum() < 0 else result


def arb_hypgeom_erfcinv(x) -> Float:
    """Inverse complementary error function on ``(0, 2)``."""
    q = as_float(x)
    radix = q.radix
    if q == 1:
        return zero(radix)
    if q.signum() <= 0 or q >= 2:
        if q.is_zero() or q == 2:
            raise checks.DomainError("Inverse erfc of zero or two", "inverseErfc.ofBoundary")
        raise checks.DomainError("Inverse erfc outside (0, 2)", "inverseErfc.outOfRange")
    prec = q.precision
    if prec >= EXACT:
        raise _infinite("inverseErfc")
    if q > 1:
        upper = 2 - q
        if upper * 2 <= 1:
            return -_erfcinv_tail(upper, upper.precision)
    elif q * 2 <= 1:
        return _erfcinv_tail(q, prec)
    y = 1 - q
    return _erfinv_central(y, max(1, y.precision))


def arb_hypgeom_erf(x) -> Float:
    return real_result(acb_hypgeom_erf(x), "erf")


def arb_hypgeom_erfc(x) -> Float:
    return real_result(acb_hypgeom_erfc(x), "erfc")


def arb_hypgeom_erfi(x) -> Float:
    return real_result(acb_hypgeom_erfi(x), "erfi")


def arb_hypgeom_fresnel(x, normalized: bool = False) -> tuple[Float, Float]:
    s, c = acb_hypgeom_fresnel(x, normalized)
    return real_result(s, "fresnelS"), real_result(c, "fresnelC")


__all__ = [
    "acb_hypgeom_erf",
    "acb_hypgeom_erfc",
    "acb_hypgeom_erfi",
    "acb_hypgeom_fresnel",
    "acb_hypgeom_fresnel_s",
    "acb_hypgeom_fresnel_c",
    "arb_hypgeom_erf",
    "arb_hypgeom_erfc",
    "arb_hypgeom_erfi",
    "arb_hypgeom_erfinv",
    "arb_hypgeom_erfcinv",
    "arb_hypgeom_fresnel",
]
