from __future__ import annotations

import logging
from math import log

from . import checks
from . import constants
from . import fpwrap
from . import precision
from .agm import acb_agm, arb_agm
from .apnum import Complex, Float, equal_digits, from_double, integer, one, zero
from .precision import EXACT
from .roots import arb_sqrt, last_iteration_extend, newton_schedule

logger = logging.getLogger(__name__)

_RAW_LOG_EXTRA = 25


def abs_value(z) -> Float:
    if isinstance(z, Float):
        return abs(z)
    if z.imag.is_zero():
        return abs(z.real)
    if z.real.is_zero():
        return abs(z.imag)
    return arb_sqrt(z.norm())


def fmod(x: Float, y: Float) -> Float:
    """``x - trunc(x / y) * y`` with the sign of ``x``."""
    if y.is_zero() or x.is_zero():
        return zero(x.radix)
    if x.is_exact() and y.is_exact():
        q = int(x.to_fraction() / y.to_fraction())
    else:
        if x.scale - y.scale > min(x.precision, y.precision):
            # Every digit of x belongs to the integer quotient
            return zero(x.radix)
        q = (x / y).truncate().to_int()
    return x - integer(q, x.radix) * y


def raw_log(z):
    """AGM logarithm for ``z`` of scale zero; not accurate for large ``|z|``."""
    radix = z.radix
    target = z.precision
    wp = precision.extend(target)
    n = target // 2 + _RAW_LOG_EXTRA
    z = z.extend_precision(_RAW_LOG_EXTRA).scaled(-n)
    e = one(radix).with_precision(wp).scaled(-n)
    agme = arb_agm(one(radix), e).extend_precision()
    if isinstance(z, Float):
        agmez = arb_agm(one(radix), z).extend_precision()
    else:
        agmez = acb_agm(Complex(one(radix)), z).extend_precision()
    pi = constants.pi(wp, radix)
    result = pi * (agmez - agme) / (2 * agme * agmez)
    return result.set_precision(target)


def _log_scale_digits(scale: int, radix: int) -> int:
    """Leading digits of ``log|x|`` before the radix point, from the scale of ``x``."""
    magnitude = (scale - 1 if scale > 1 else -scale) * log(radix)
    if magnitude <= 1:
        return 0
    return int(log(magnitude) / log(radix) + 1e-12)


def log_kernel(z):
    """Principal logarithm of a positive Float or a non-zero Complex."""
    radix = z.radix
    target = z.precision
    if target >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate logarithm to infinite precision", "log.infinitePrecision")
    x = abs_value(z)
    if x.scale > 1 or x.scale < 0:
        target = precision.extend(target, _log_scale_digits(x.scale, radix))
    bias = None
    if not isinstance(z, Float) and z.real.signum() < 0:
        pi = constants.pi(precision.extend(target, 1 if radix <= 3 else 0), radix)
        bias = pi if z.imag.signum() >= 0 else -pi
        z = -z
    s = z.scale
    result = raw_log(z.scaled(-s)).extend_precision()
    if s != 0:
        log_r = constants.log_radix(precision.extend(target), radix)
        result = result + integer(s, radix) * log_r
    real_prec = max(target - equal_digits(one(radix), x), 1)
    if isinstance(result, Float):
        return result.with_precision(real_prec)
    imag_prec = max(target - 1 + result.imag.scale, 1)
    im = result.imag.with_precision(imag_prec)
    if bias is not None:
        im = im + bias
    return Complex(result.real.with_precision(real_prec), im)


def _exp_precisions(x: Float, y: Float) -> int:
    if not x.is_zero() and x.precision < EXACT and x.precision + 1 - x.scale <= 0:
        raise checks.LossOfPrecisionError("Complete loss of accurate digits in real part", "real.lossOfPrecision")
    if not y.is_zero() and y.precision < EXACT and y.precision < y.scale:
        raise checks.LossOfPrecisionError("Complete loss of accurate digits in imaginary part", "imag.lossOfPrecision")
    real_prec = EXACT if x.is_zero() or x.precision >= EXACT else x.precision + 1 - x.scale
    imag_prec = EXACT if y.is_zero() or y.precision >= EXACT else 1 + y.precision - y.scale
    return min(real_prec, imag_prec)


def _reduce_angle(y: Float, target: int) -> tuple[Float, bool]:
    """Reduce ``y`` into ``(-pi/2, pi/2]``; the flag tells if ``exp`` must be negated."""
    radix = y.radix
    if y.scale > 1:
        logger.debug("angle reduction with %d extra digits of pi", y.scale)
    pi = constants.pi(precision.extend(target, y.scale), radix)
    two_pi = pi + pi
    half_pi = pi / 2
    y = fmod(y, two_pi)
    if y > pi:
        y = y - two_pi
    elif y <= -pi:
        y = y + two_pi
    if y > half_pi:
        return y - pi, True
    if y <= -half_pi:
        return y + pi, True
    return y, False


def _exp_seed_real(x: Float, dp: int) -> Float:
    radix = x.radix
    if x.is_zero():
        return one(radix)
    if x.scale < -(dp // 2):
        return one(radix).with_precision(-2 * x.scale) + x
    sp = max(0, x.scale) + dp
    scaled = x.with_precision(sp) / constants.log_radix(sp, radix)
    whole = scaled.truncate()
    frac = scaled - whole
    seed = from_double(fpwrap.double_pow(float(radix), frac.to_double()), dp, radix)
    return seed.scaled(whole.to_int())


def _exp_seed_imag(y: Float, dp: int):
    radix = y.radix
    if y.is_zero():
        return None
    if y.scale < -(dp // 2):
        return Complex(one(radix).with_precision(-2 * y.scale), y.with_precision(-y.scale))
    c = fpwrap.cdouble_cis(y.to_double())
    return Complex(from_double(c.real, dp, radix), from_double(c.imag, dp, radix))


def exp_kernel(z):
    """``exp`` of a Float or Complex by Newton iteration on the logarithm."""
    radix = z.radix
    x, y = z.real, z.imag
    if x.is_zero() and y.is_zero():
        return one(radix) if isinstance(z, Float) else Complex(one(radix))
    target = _exp_precisions(x, y)
    if target >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate exponent to infinite precision", "exp.infinitePrecision")
    negate = False
    if y.scale > 0:
        y, negate = _reduce_angle(y, target)
    dp = precision.double_precision(radix)
    result = _exp_seed_real(x, dp)
    rotation = _exp_seed_imag(y, dp)
    if rotation is not None:
        result = result * rotation
    elif not isinstance(z, Float):
        result = Complex(result)
    w = x if isinstance(z, Float) else Complex(x, y)
    prec = result.precision
    iterations, precising = newton_schedule(prec, target)
    if iterations > 0:
        constants.log_radix(target, radix)
    w = w.extend_precision()
    # log(result) must be good to target digits after the radix point, not just relative
    guard = max(0, x.scale)
    while iterations > 0:
        iterations -= 1
        prec *= 2
        result = result.set_precision(min(prec, target))
        t = last_iteration_extend(iterations, precising, log_kernel(result.extend_precision(guard)))
        t = w - t
        if iterations < precising:
            t = t.with_precision(prec // 2)
        result = last_iteration_extend(iterations, precising, result)
        result = result + result * t
        if iterations == precising:
            t = last_iteration_extend(iterations, -1, log_kernel(result.extend_precision(guard)))
            result = last_iteration_extend(iterations, -1, result)
            result = result + result * (w - t)
    if negate:
        result = -result
    return result.set_precision(target)


def check_pow(z, w, target: int):
    """Closed-form powers; returns None when the general algorithm is needed."""
    radix = z.radix
    if w.is_zero():
        if z.is_zero():
            raise checks.DomainError("Zero to power zero", "pow.zeroToZero")
        return one(radix) if isinstance(z, Float) else Complex(one(radix))
    if z.is_zero():
        if w.real.signum() <= 0:
            if w.imag.is_zero():
                raise checks.DomainError("Zero to power of negative number", "pow.zeroToNegative")
            raise checks.DomainError("Zero to power of number with nonpositive real part", "pow.zeroToNonpositiveReal")
        return z
    if z == 1 or w == 1:
        return z.with_precision(target)
    return None


def pow_kernel(z, w):
    """``z**w`` through ``exp(w * log(z))`` for real or complex operands."""
    target = min(z.precision, w.precision)
    result = check_pow(z, w, target)
    if result is not None:
        return result
    if target >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate power to infinite precision", "pow.infinitePrecision")
    radix = z.radix
    if z.imag.is_zero() and z.real.signum() > 0:
        x = z.real
        target = precision.extend(target, equal_digits(one(radix), x))
        lz = log_kernel(x.limit_precision(target))
    else:
        z = z if isinstance(z, Complex) else Complex(z)
        lz = log_kernel(z.limit_precision(target))
    return exp_kernel(w * lz)


def integer_power(z, n: int, target: int):
    """``z**n`` for an integer ``n`` by repeated squaring at the target precision."""
    if target < EXACT:
        z = z.limit_precision(target)
    return z**n


def is_small_integer(w, limit: int = 1 << 63) -> bool:
    return w.is_integer() and abs(w.real.to_fraction()) < limit


def unit_i(radix: int) -> Complex:
    return Complex(zero(radix), one(radix))


__all__ = [
    "abs_value",
    "fmod",
    "raw_log",
    "log_kernel",
    "exp_kernel",
    "check_pow",
    "pow_kernel",
    "integer_power",
    "is_small_integer",
    "unit_i",
]
