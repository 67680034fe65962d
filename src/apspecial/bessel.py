from __future__ import annotations

import logging
from fractions import Fraction
from typing import Callable

from . import checks
from . import constants
from . import precision
from .acb_core import acb_cos, acb_exp, acb_pow, acb_sin
from .apnum import Complex, Float, as_complex, from_fraction, integer, one, zero
from .gamma import acb_hypgeom_rgamma
from .hypgeom import acb_hypgeom_0f1, acb_hypgeom_pfq_regularized, hypergeometric_u, integer_parameter_limit
from .precision import EXACT
from .roots import arb_inverse_root, arb_sqrt
from .series_utils import evaluate_to_target, real_result, reduce_margin

logger = logging.getLogger(__name__)


def _q(value, prec: int, radix: int) -> Complex:
    return Complex(from_fraction(Fraction(value), prec, radix))


def _coerce(nu, z) -> tuple[Complex, Complex, int]:
    nu = as_complex(nu)
    z = as_complex(z)
    checks.check_same_radix(nu, z, "bessel")
    prec = min(nu.precision, z.precision)
    if prec < EXACT:
        nu = nu.limit_precision(prec)
        z = z.limit_precision(prec)
    return nu, z, prec


def _infinite(name: str):
    return checks.InfiniteExpansionError(f"Cannot calculate {name} to infinite precision", f"{name}.infinitePrecision")


def _at_zero(nu: Complex, name: str) -> Complex:
    # J and I at the origin
    radix = nu.radix
    if nu.is_zero():
        return Complex(one(radix))
    if nu.is_integer() or nu.real.signum() > 0:
        return Complex(zero(radix))
    raise checks.DomainError(f"{name} of zero with nonpositive order", f"{name}.ofZero")


def _j_or_i(nu: Complex, z: Complex, sign: int) -> Complex:
    """``(z/2)**nu 0F1~(nu + 1; sign z**2/4)`` at the precision of the operands."""
    half_z = z / 2
    w = half_z * half_z
    if sign < 0:
        w = -w
    return acb_pow(half_z, nu) * acb_hypgeom_0f1(nu + 1, w, regularized=True)


def _bessel_first_kind(nu, z, sign: int, name: str) -> Complex:
    nu, z, prec = _coerce(nu, z)
    if z.is_zero():
        return _at_zero(nu, name)
    if prec >= EXACT:
        raise _infinite(name)
    extra = precision.small_extra_precision(z.radix)
    wp = precision.extend(prec, extra)
    result = _j_or_i(nu.ensure_precision(wp), z.ensure_precision(wp), sign)
    return reduce_margin(result, extra)


def acb_hypgeom_bessel_j(nu, z) -> Complex:
    """Bessel function of the first kind."""
    return _bessel_first_kind(nu, z, -1, "besselJ")


def acb_hypgeom_bessel_i(nu, z) -> Complex:
    """Modified Bessel function of the first kind."""
    return _bessel_first_kind(nu, z, 1, "besselI")


def acb_hypgeom_bessel_y(nu, z) -> Complex:
    """Bessel function of the second kind, ``(J_nu cos(pi nu) - J_-nu) / sin(pi nu)``.

    At integer order the formula is evaluated at a neighbouring order with the
    working precision doubled, see ``integer_parameter_limit``.
    """
    nu, z, prec = _coerce(nu, z)
    if z.is_zero():
        raise checks.DomainError("Bessel Y of zero", "besselY.ofZero")
    if prec >= EXACT:
        raise _infinite("besselY")
    radix = z.radix

    def evaluate(n: Complex, wp: int) -> Complex:
        zz = z.ensure_precision(wp)
        pi_nu = constants.pi(wp, radix) * n
        return (_j_or_i(n, zz, -1) * acb_cos(pi_nu) - _j_or_i(-n, zz, -1)) / acb_sin(pi_nu)

    return integer_parameter_limit(nu, prec, "bessel Y", evaluate)


def acb_hypgeom_bessel_k(nu, z) -> Complex:
    """Modified Bessel function of the second kind.

    Large arguments use ``sqrt(pi) (2z)**nu exp(-z) U(nu + 1/2, 2nu + 1, 2z)``,
    the rest ``pi (I_-nu - I_nu) / (2 sin(pi nu))``.
    """
    nu, z, prec = _coerce(nu, z)
    if z.is_zero():
        raise checks.DomainError("Bessel K of zero", "besselK.ofZero")
    if prec >= EXACT:
        raise _infinite("besselK")
    radix = z.radix
    extra = precision.small_extra_precision(radix)
    wp = precision.extend(prec, extra)
    nn = nu.ensure_precision(wp)
    z2 = z.ensure_precision(wp) * 2
    u = hypergeometric_u(nn + _q(Fraction(1, 2), wp, radix), nn * 2 + 1, z2, asymptotic_only=True)
    if u is not None:
        logger.debug("bessel K from the asymptotic U expansion")
        sqrt_pi = arb_sqrt(constants.pi(wp, radix))
        return reduce_margin(u * sqrt_pi * acb_pow(z2, nn) * acb_exp(-z2 / 2), extra)

    def evaluate(n: Complex, p: int) -> Complex:
        zz = z.ensure_precision(p)
        pi = constants.pi(p, radix)
        return pi * (_j_or_i(-n, zz, 1) - _j_or_i(n, zz, 1)) / (2 * acb_sin(pi * n))

    return integer_parameter_limit(nu, prec, "bessel K", evaluate)


def _airy_constants(wp: int, radix: int) -> tuple[Float, Float, Complex, Complex]:
    three = integer(3, radix).with_precision(wp)
    c3 = arb_inverse_root(three, 3)
    c6 = arb_inverse_root(three, 6)
    rg13 = acb_hypgeom_rgamma(_q(Fraction(1, 3), wp, radix))
    rg23 = acb_hypgeom_rgamma(_q(Fraction(2, 3), wp, radix))
    return c3, c6, rg13, rg23


def _airy_f(b: Fraction, z39: Complex, wp: int) -> Complex:
    return acb_hypgeom_0f1(_q(b, wp, z39.radix), z39)


def _ai(z: Complex, wp: int) -> Complex:
    c3, _, rg13, rg23 = _airy_constants(wp, z.radix)
    z39 = z * z * z / 9
    return c3 * c3 * rg23 * _airy_f(Fraction(2, 3), z39, wp) - z * c3 * rg13 * _airy_f(Fraction(4, 3), z39, wp)


def _ai_prime(z: Complex, wp: int) -> Complex:
    c3, _, rg13, rg23 = _airy_constants(wp, z.radix)
    z39 = z * z * z / 9
    return z * z / 2 * c3 * c3 * rg23 * _airy_f(Fraction(5, 3), z39, wp) - c3 * rg13 * _airy_f(Fraction(1, 3), z39, wp)


def _bi(z: Complex, wp: int) -> Complex:
    _, c6, rg13, rg23 = _airy_constants(wp, z.radix)
    z39 = z * z * z / 9
    return c6 * rg23 * _airy_f(Fraction(2, 3), z39, wp) + z * rg13 / c6 * _airy_f(Fraction(4, 3), z39, wp)


def _bi_prime(z: Complex, wp: int) -> Complex:
    _, c6, rg13, rg23 = _airy_constants(wp, z.radix)
    z39 = z * z * z / 9
    return rg13 / c6 * _airy_f(Fraction(1, 3), z39, wp) + z * z / 2 * c6 * rg23 * _airy_f(Fraction(5, 3), z39, wp)


def _airy(z, combine: Callable[[Complex, int], Complex], name: str) -> Complex:
    z = as_complex(z)
    prec = z.precision
    if prec >= EXACT:
        raise _infinite(name)
    # The relative condition number grows like |z|**(3/2)
    target = prec - max(0, (3 * z.scale) // 2)
    if target <= 0:
        raise checks.LossOfPrecisionError(f"{name}: argument too large for its precision", "lossOfPrecision")
    result = evaluate_to_target(z, prec, target, name, combine)
    return Complex(result.real) if z.is_real() else result


def acb_hypgeom_airy_ai(z) -> Complex:
    return _airy(z, _ai, "airyAi")


def acb_hypgeom_airy_ai_prime(z) -> Complex:
    return _airy(z, _ai_prime, "airyAiPrime")


def acb_hypgeom_airy_bi(z) -> Complex:
    return _airy(z, _bi, "airyBi")


def acb_hypgeom_airy_bi_prime(z) -> Complex:
    return _airy(z, _bi_prime, "airyBiPrime")


def acb_hypgeom_airy(z) -> tuple[Complex, Complex, Complex, Complex]:
    """``(Ai(z), Ai'(z), Bi(z), Bi'(z))``."""
    return (
        acb_hypgeom_airy_ai(z),
        acb_hypgeom_airy_ai_prime(z),
        acb_hypgeom_airy_bi(z),
        acb_hypgeom_airy_bi_prime(z),
    )


def _struve(nu, z, sign: int, name: str) -> Complex:
    nu, z, prec = _coerce(nu, z)
    radix = z.radix
    if z.is_zero():
        if (nu + 1).real.signum() > 0:
            return Complex(zero(radix))
        raise checks.DomainError(f"{name} of zero", f"{name}.ofZero")
    if prec >= EXACT:
        raise _infinite(name)

    def combine(zz: Complex, wp: int) -> Complex:
        n = nu.ensure_precision(wp)
        half_z = zz / 2
        w = half_z * half_z
        if sign < 0:
            w = -w
        three_halves = _q(Fraction(3, 2), wp, radix)
        unit = Complex(one(radix).with_precision(wp))
        return acb_pow(half_z, n + 1) * acb_hypgeom_pfq_regularized([unit], [three_halves, n + three_halves], w)

    return evaluate_to_target(z, prec, prec, name, combine)


def acb_hypgeom_struve_h(nu, z) -> Complex:
    """Struve function ``H_nu(z)``."""
    return _struve(nu, z, -1, "struveH")


def acb_hypgeom_struve_l(nu, z) -> Complex:
    """Modified Struve function ``L_nu(z)``."""
    return _struve(nu, z, 1, "struveL")


def _anger_weber_parts(nu: Complex, z: Complex, wp: int):
    radix = z.radix
    unit = Complex(one(radix).with_precision(wp))
    half_nu = nu / 2
    pi_half_nu = constants.pi(wp, radix) * half_nu
    s = acb_sin(pi_half_nu)
    c = acb_cos(pi_half_nu)
    w = -z * z / 4
    three_halves = _q(Fraction(3, 2), wp, radix)
    odd = acb_hypgeom_pfq_regularized([unit], [three_halves - half_nu, three_halves + half_nu], w)
    even = acb_hypgeom_pfq_regularized([unit], [unit - half_nu, unit + half_nu], w)
    return s, c, odd, even


def acb_hypgeom_anger_j(nu, z) -> Complex:
    """Anger function ``J_nu(z)``."""
    nu, z, prec = _coerce(nu, z)
    if prec >= EXACT:
        raise _infinite("angerJ")

    def combine(zz: Complex, wp: int) -> Complex:
        s, c, odd, even = _anger_weber_parts(nu.ensure_precision(wp), zz, wp)
        return zz / 2 * s * odd + c * even

    return evaluate_to_target(z, prec, prec, "angerJ", combine)


def acb_hypgeom_weber_e(nu, z) -> Complex:
    """Weber function ``E_nu(z)``."""
    nu, z, prec = _coerce(nu, z)
    if prec >= EXACT:
        raise _infinite("weberE")

    def combine(zz: Complex, wp: int) -> Complex:
        s, c, odd, even = _anger_weber_parts(nu.ensure_precision(wp), zz, wp)
        return s * even - zz / 2 * c * odd

    return evaluate_to_target(z, prec, prec, "weberE", combine)


def arb_hypgeom_bessel_j(nu, x) -> Float:
    return real_result(acb_hypgeom_bessel_j(nu, x), "besselJ")


def arb_hypgeom_bessel_i(nu, x) -> Float:
    return real_result(acb_hypgeom_bessel_i(nu, x), "besselI")


def arb_hypgeom_bessel_y(nu, x) -> Float:
    return real_result(acb_hypgeom_bessel_y(nu, x), "besselY")


def arb_hypgeom_bessel_k(nu, x) -> Float:
    return real_result(acb_hypgeom_bessel_k(nu, x), "besselK")


def arb_hypgeom_airy(x) -> tuple[Float, Float, Float, Float]:
    return tuple(real_result(v, "airy") for v in acb_hypgeom_airy(x))


def arb_hypgeom_struve_h(nu, x) -> Float:
    return real_result(acb_hypgeom_struve_h(nu, x), "struveH")


def arb_hypgeom_struve_l(nu, x) -> Float:
    return real_result(acb_hypgeom_struve_l(nu, x), "struveL")


__all__ = [
    "acb_hypgeom_bessel_j",
    "acb_hypgeom_bessel_i",
    "acb_hypgeom_bessel_y",
    "acb_hypgeom_bessel_k",
    "acb_hypgeom_airy",
    "acb_hypgeom_airy_ai",
    "acb_hypgeom_airy_ai_prime",
    "acb_hypgeom_airy_bi",
    "acb_hypgeom_airy_bi_prime",
    "acb_hypgeom_struve_h",
    "acb_hypgeom_struve_l",
    "acb_hypgeom_anger_j",
    "acb_hypgeom_weber_e",
    "arb_hypgeom_bessel_j",
    "arb_hypgeom_bessel_i",
    "arb_hypgeom_bessel_y",
    "arb_hypgeom_bessel_k",
    "arb_hypgeom_airy",
    "arb_hypgeom_struve_h",
    "arb_hypgeom_struve_l",
]
