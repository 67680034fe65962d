from __future__ import annotations

from fractions import Fraction

from . import checks
from . import constants
from . import precision
from .apnum import Complex, Float, as_float, equal_digits, from_fraction, one, zero
from .elementary import (
    check_pow,
    exp_kernel,
    fmod,
    integer_power,
    is_small_integer,
    log_kernel,
    pow_kernel,
)
from .precision import EXACT
from .roots import arb_cbrt, arb_inverse_root, arb_root, arb_sqrt


def _pi(prec: int, radix: int) -> Float:
    return constants.pi(prec, radix)


def arb_exp(x) -> Float:
    x = as_float(x)
    return exp_kernel(x)


def arb_log(x, base=None) -> Float:
    x = as_float(x)
    if x.is_zero():
        raise checks.DomainError("Logarithm of zero", "log.ofZero")
    if x.signum() < 0:
        raise checks.DomainError("Logarithm of negative number; result would be complex", "log.ofNegative")
    if base is None:
        if x == 1:
            return zero(x.radix)
        return log_kernel(x)
    b = as_float(base)
    if b.is_zero() or b.signum() < 0:
        raise checks.DomainError("Logarithm base must be positive", "log.ofNegative")
    target = min(x.precision, b.precision)
    unit = one(x.radix)
    x = x.limit_precision(precision.extend(target, equal_digits(unit, x)))
    b = b.limit_precision(precision.extend(target, equal_digits(unit, b)))
    lx = zero(x.radix) if x == 1 else log_kernel(x)
    return lx / log_kernel(b)


def arb_pow(x, y) -> Float:
    x = as_float(x)
    y = as_float(y)
    target = min(x.precision, y.precision)
    result = check_pow(x, y, target)
    if result is not None:
        return result
    if is_small_integer(y):
        return integer_power(x, y.to_int(), target)
    if x.signum() < 0:
        raise checks.DomainError("Power of negative number to non-integer; result would be complex", "pow.negativeToNonInteger")
    return pow_kernel(x, y)


def _exp_i(x: Float) -> Complex:
    return exp_kernel(Complex(zero(x.radix), x))


def arb_sin(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return x
    return _exp_i(x).imag


def arb_cos(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return one(x.radix)
    return _exp_i(x).real


def arb_tan(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return x
    w = _exp_i(x)
    return w.imag / w.real


def arb_sinh(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return x
    w = exp_kernel(x)
    return (w - 1 / w) / 2


def arb_cosh(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return one(x.radix)
    w = exp_kernel(x)
    return (w + 1 / w) / 2


def arb_tanh(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return x
    negate = x.signum() > 0
    w = exp_kernel(2 * (-x if negate else x))
    w = (w - 1) / (w + 1)
    return -w if negate else w


def arb_atan2(y, x) -> Float:
    y = as_float(y)
    x = as_float(x)
    radix = x.radix
    if x.is_zero() and y.is_zero():
        raise checks.DomainError("Angle of (0, 0)", "atan2.ofZero")
    if y.is_zero():
        return zero(radix) if x.signum() > 0 else _pi(x.precision, radix)
    if x.is_zero():
        half_pi = _pi(y.precision, radix) / 2
        return half_pi if y.signum() > 0 else -half_pi
    return log_kernel(Complex(x, y)).imag


def arb_atan(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return x
    return arb_atan2(x, one(x.radix))


def arb_asin(x) -> Float:
    x = as_float(x)
    unit = one(x.radix)
    if abs(x) > unit:
        raise checks.DomainError("Inverse sine of value outside [-1, 1]; result would be complex", "asin.outOfRange")
    if x.is_zero():
        return x
    return arb_atan2(x, arb_sqrt(1 - x * x))


def arb_acos(x, prec: int | None = None) -> Float:
    """Inverse cosine; ``prec`` sets the precision of ``acos(0) = pi/2``."""
    x = as_float(x)
    radix = x.radix
    if abs(x) > one(radix):
        raise checks.DomainError("Inverse cosine of value outside [-1, 1]; result would be complex", "acos.outOfRange")
    if x.is_zero():
        return _pi(x.precision if prec is None else prec, radix) / 2
    if x == 1:
        return zero(radix)
    return arb_atan2(arb_sqrt(1 - x * x), x)


def _small_argument(x: Float) -> tuple[Float, int]:
    # Extra working digits keep the relative accuracy of x for tiny arguments
    extra = max(0, -x.scale)
    return (x.extend_precision(extra) if extra else x), extra


def arb_asinh(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return x
    xs, extra = _small_argument(abs(x))
    r = log_kernel(xs + arb_sqrt(xs * xs + 1))
    if extra:
        r = r.limit_precision(x.precision)
    return -r if x.signum() < 0 else r


def arb_acosh(x) -> Float:
    x = as_float(x)
    if x < one(x.radix):
        raise checks.DomainError("Inverse hyperbolic cosine of value below one", "acosh.outOfRange")
    if x == 1:
        return zero(x.radix)
    return log_kernel(x + arb_sqrt(x * x - 1))


def arb_atanh(x) -> Float:
    x = as_float(x)
    if abs(x) >= one(x.radix):
        raise checks.DomainError("Inverse hyperbolic tangent of value outside (-1, 1)", "atanh.outOfRange")
    if x.is_zero():
        return x
    xs, extra = _small_argument(x)
    r = log_kernel((1 + xs) / (1 - xs)) / 2
    if extra:
        r = r.limit_precision(x.precision)
    return r


def arb_sinc(x) -> Float:
    x = as_float(x)
    if x.is_zero():
        return one(x.radix)
    return arb_sin(x) / x


def arb_logistic_sigmoid(x) -> Float:
    x = as_float(x)
    radix = x.radix
    if x.is_zero():
        return from_fraction(Fraction(1, 2), EXACT, radix)
    prec = x.precision
    e = one(radix) if x.scale < -prec else exp_kernel(-x)
    unit = one(radix)
    return unit.with_precision(prec) / (unit.with_precision(precision.extend(prec, equal_digits(e, -unit))) + e)


def arb_abs(x) -> Float:
    return abs(as_float(x))


def arb_fmod(x, y) -> Float:
    return fmod(as_float(x), as_float(y))


__all__ = [
    "arb_exp",
    "arb_log",
    "arb_pow",
    "arb_sqrt",
    "arb_cbrt",
    "arb_root",
    "arb_inverse_root",
    "arb_sin",
    "arb_cos",
    "arb_tan",
    "arb_sinh",
    "arb_cosh",
    "arb_tanh",
    "arb_atan2",
    "arb_atan",
    "arb_asin",
    "arb_acos",
    "arb_asinh",
    "arb_acosh",
    "arb_atanh",
    "arb_sinc",
    "arb_logistic_sigmoid",
    "arb_abs",
    "arb_fmod",
]
