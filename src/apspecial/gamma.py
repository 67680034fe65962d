from __future__ import annotations

import math
from fractions import Fraction

from . import checks
from . import constants
from . import precision
from .acb_core import acb_cot, acb_exp, acb_log, acb_pow, acb_sin
from .apnum import Complex, Float, as_complex, from_double, from_fraction, integer, one, zero
from .arb_core import arb_cos, arb_exp, arb_inverse_root, arb_sin, arb_sqrt
from .bernoulli import bernoullis2
from .combinatorics import binomial_int, factorial_int
from .dirichlet import acb_dirichlet_hurwitz, acb_dirichlet_zeta
from .elementary import unit_i
from .precision import EXACT
from .series_utils import finish, is_nonpositive_integer, real_result, reduce_margin

_LOG_2PI = math.log(2 * math.pi)
_BINOMIAL_EXACT_LIMIT = 1 << 20


def _half(radix: int) -> Float:
    return from_fraction(Fraction(1, 2), EXACT, radix)


def _exact(z: Complex) -> Complex:
    return z.with_precision(EXACT)


def _factorial_is_cheaper(n: int, prec: int) -> bool:
    if prec >= EXACT or n <= 2:
        return True
    lp = math.log(prec)
    factorial_effort = lp * prec * math.log(n) * n / 2e6
    gamma_effort = lp * prec * prec
    return factorial_effort < gamma_effort


def _shift_count(x: Float, threshold: float) -> int:
    """Recurrence steps that move ``x`` past ``threshold``, zero when already there."""
    if x >= from_double(threshold, radix=x.radix):
        return 0
    return max(1, math.ceil(threshold - x.to_double()))


def _insignificant(total, term) -> bool:
    return term.is_zero() or precision.matching_precisions(total, term)[1] == 0


# -- gamma ---------------------------------------------------------------


def _gamma_spouge(z: Complex, prec: int) -> Complex:
    """Spouge's approximation for ``re(z) >= 0``."""
    radix = z.radix
    ln_r = math.log(radix)
    a1 = int(prec / _LOG_2PI * ln_r)
    wp = precision.extend(prec, int(prec * 0.5) + 20)
    zz = z.ensure_precision(wp) - 1
    a = a1 + 1
    pi = constants.pi(wp, radix)
    total = Complex(arb_sqrt(pi * 2))
    e = constants.e(wp, radix)
    divisor = arb_exp(integer(-a1, radix).with_precision(wp))
    for k in range(1, a1 + 1):
        ak = integer(a - k, radix).with_precision(wp)
        ck = arb_inverse_root(ak, 2) * ak**k / divisor
        total = total + ck / (zz + k)
        if k < a1:
            divisor = divisor * (-e * k)
    shifted = zz + a
    result = acb_pow(shifted, zz + _half(radix)) * acb_exp(-shifted) * total

    norm_scale = result.scale * ln_r
    p = prec
    if norm_scale > 0 and z.real.scale > 0:
        p -= int(1.01 * math.log(norm_scale) / ln_r)
    elif norm_scale < 0:
        p -= int(1.148 * math.log(-norm_scale) / ln_r)
    if p <= 0:
        raise checks.LossOfPrecisionError("Complete loss of accurate digits", "lossOfPrecision")
    return finish(result, p)


def _gamma_reflected(z: Complex, prec: int) -> Complex:
    radix = z.radix
    loss = precision.digit_loss_near_integer(z)
    if loss >= prec:
        raise checks.DomainError("Gamma of negative integer within precision", "gamma.ofNegativeIntegerWithinPrecision")
    target = prec - loss
    extra = precision.small_extra_precision(radix)
    wp = precision.extend(prec, extra)
    w = -z.ensure_precision(wp)
    pi = constants.pi(precision.extend(wp, max(0, z.scale)), radix)
    result = -pi / (w * acb_sin(pi * w) * _gamma_spouge(w, wp))
    return finish(result, target)


def acb_hypgeom_gamma(z) -> Complex:
    z = as_complex(z)
    radix = z.radix
    if z == 1:
        return z
    prec = z.precision
    if z.is_zero():
        raise checks.DomainError("Gamma of zero", "gamma.ofZero")
    if z.is_integer():
        if z.real.signum() < 0:
            raise checks.DomainError("Gamma of negative integer", "gamma.ofNegativeInteger")
        n = z.real.to_int()
        if _factorial_is_cheaper(n, prec):
            return Complex(integer(factorial_int(n - 1), radix).with_precision(prec))
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate gamma to infinite precision", "gamma.infinitePrecision")
    if z.scale < -prec:
        return 1 / z
    if z.real.signum() < 0:
        return _gamma_reflected(z, prec)
    return _gamma_spouge(z, prec)


def arb_hypgeom_gamma(x) -> Float:
    return real_result(acb_hypgeom_gamma(x), "gamma")


def acb_hypgeom_rgamma(z) -> Complex:
    """Reciprocal gamma, zero at the poles."""
    z = as_complex(z)
    if is_nonpositive_integer(z):
        return Complex(zero(z.radix))
    return 1 / acb_hypgeom_gamma(z)


def arb_hypgeom_rgamma(x) -> Float:
    return real_result(acb_hypgeom_rgamma(x), "rgamma")


# -- log gamma -----------------------------------------------------------


def _exp_no_loss(w: Complex) -> Complex:
    x = w.real
    if x.signum() < 0 and x.precision < EXACT and x.precision + 1 - x.scale <= 0:
        # exp of the real part is below every trusted digit
        w = Complex(x.with_precision(max(1, x.scale)), w.imag)
    return acb_exp(w)


def _log_sin_pi(z: Complex) -> Complex:
    """``log(sin(pi z))`` continued across the real axis."""
    radix = z.radix
    prec = z.precision
    n = z.real.floor()
    pi = constants.pi(precision.extend(prec, max(0, z.scale)), radix)
    zz = z - n
    i = unit_i(radix)
    half = _half(radix)
    unit = one(radix)
    if zz.imag > unit:
        w = _exp_no_loss(2 * i * pi * zz)
        result = acb_log((1 - w) / 2) - i * pi * (zz - half)
    elif zz.imag < -unit:
        w = _exp_no_loss(-2 * i * pi * zz)
        result = acb_log((1 - w) / 2) + i * pi * (zz - half)
    else:
        result = acb_log(acb_sin(pi * zz))
    if n.is_zero():
        return result
    offset = Complex(zero(radix), pi * n)
    return result - offset if z.imag.signum() >= 0 else result + offset


def _log_pochhammer(z: Complex, n: int) -> Complex:
    """``log((z)_n)`` on the branch continuous with the principal ``log_gamma``."""
    conj = z.imag.signum() < 0
    if conj:
        z = z.conj()
    s = z
    m = 0
    for k in range(1, n):
        t = s * (z + k)
        if s.imag.signum() >= 0 and t.imag.signum() < 0:
            m += 2
        s = t
    if s.real.signum() < 0:
        m += 1 if s.imag.signum() >= 0 else -1
        s = -s
    result = acb_log(s)
    if m:
        result = result + Complex(zero(z.radix), constants.pi(result.precision, z.radix) * m)
    return result.conj() if conj else result


def _lgamma_positive(z: Complex) -> Complex:
    """Stirling series after shifting ``re(z)`` up past the crossover point."""
    radix = z.radix
    prec = z.precision
    ln_r = math.log(radix)
    wp = precision.extend(prec)
    adjust = math.log(prec) + 1
    w = max(1.0, (prec + adjust) * ln_r - _LOG_2PI)
    n = math.ceil(0.5 * (1 + w - math.log(w)))
    z_real = n * math.exp((4 * n - 1) / (2 * n - 4 * n * n)) / math.pi
    zz = z.ensure_precision(wp)
    total = Complex(zero(radix))
    shift = _shift_count(z.real, z_real)
    if shift:
        total = -_log_pochhammer(zz, shift)
        zz = zz + shift
    two_pi = constants.pi(wp, radix) * 2
    total = total + (zz - _half(radix)) * acb_log(zz) - zz + acb_log(Complex(two_pi)) / 2
    z2 = zz * zz
    zp = zz
    for k, b2k in enumerate(bernoullis2(n + 1), start=1):
        term = from_fraction(b2k, wp, radix) / (2 * k * (2 * k - 1)) / zp
        if _insignificant(total, term):
            break
        total = total + term
        zp = zp * z2
    return finish(total, prec)


def acb_hypgeom_lgamma(z) -> Complex:
    """Principal branch of ``log(gamma(z))``."""
    z = as_complex(z)
    radix = z.radix
    if z.is_zero():
        raise checks.DomainError("Logarithm of gamma of zero", "logGamma.ofZero")
    if is_nonpositive_integer(z):
        raise checks.DomainError("Logarithm of gamma of negative integer", "logGamma.ofNegativeInteger")
    if z == 1 or z == 2:
        return Complex(zero(radix))
    prec = z.precision
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate logGamma to infinite precision", "logGamma.infinitePrecision")
    if z.real.signum() > 0:
        return _lgamma_positive(z)
    extra = precision.small_extra_precision(radix)
    zz = z.extend_precision(extra)
    pi = constants.pi(precision.extend(prec, extra), radix)
    log_pi = acb_log(Complex(pi))
    if z.scale < -prec:
        result = log_pi - acb_log(pi * zz) - _lgamma_positive(-zz) - acb_log(-zz)
    else:
        result = log_pi - _log_sin_pi(zz) - _lgamma_positive(1 - zz)
    return reduce_margin(result, extra)


def arb_hypgeom_lgamma(x) -> Float:
    return real_result(acb_hypgeom_lgamma(x), "logGamma")


# -- digamma and polygamma ---------------------------------------------


def _cot_pi(z: Complex, pi: Float) -> Complex:
    if z.is_real():
        x = pi * z.real
        return Complex(arb_cos(x) / arb_sin(x))
    return acb_cot(pi * z)


def _digamma_positive(z: Complex) -> Complex:
    radix = z.radix
    prec = z.precision
    ln_r = math.log(radix)
    wp = precision.extend(prec)
    w = (prec + math.log(prec) + 1) * ln_r + 1
    n = math.ceil(0.5 * (w - math.log(w)))
    z_real = math.exp(-0.5 / n) * n / math.pi
    zz = z.ensure_precision(wp)
    total = Complex(zero(radix))
    shift = _shift_count(z.real, z_real)
    for k in range(shift):
        total = total - 1 / (zz + k)
    zz = zz + shift
    total = total + acb_log(zz) - 1 / (2 * zz)
    z2 = zz * zz
    zp = z2
    for k, b2k in enumerate(bernoullis2(n + 1), start=1):
        term = from_fraction(b2k, wp, radix) / (2 * k) / zp
        if _insignificant(total, term):
            break
        total = total - term
        zp = zp * z2
    return finish(total, prec)


def acb_hypgeom_digamma(z) -> Complex:
    z = as_complex(z)
    radix = z.radix
    prec = z.precision
    if is_nonpositive_integer(z):
        raise checks.DomainError("Digamma of nonpositive integer", "digamma.ofNonpositiveInteger")
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate digamma to infinite precision", "digamma.infinitePrecision")
    if z.real.signum() > 0:
        return _digamma_positive(z)
    extra = precision.small_extra_precision(radix)
    zz = z.extend_precision(extra)
    pi = constants.pi(precision.extend(prec, extra + max(0, z.scale)), radix)
    cot = _cot_pi(zz, pi)
    if z.scale < -prec:
        result = _digamma_positive(-zz) - pi * cot - 1 / zz
    else:
        result = _digamma_positive(1 - zz) - pi * cot
    return reduce_margin(result, extra)


def arb_hypgeom_digamma(x) -> Float:
    return real_result(acb_hypgeom_digamma(x), "digamma")


def acb_hypgeom_polygamma(n, z) -> Complex:
    """``psi^(n)(z) = (-1)**(n + 1) n! zeta(n + 1, z)`` for ``n >= 1``."""
    checks.check_integer(n, "acb_hypgeom_polygamma")
    n = n if isinstance(n, int) else n.real.to_int()
    z = as_complex(z)
    radix = z.radix
    if n < 0:
        raise checks.DomainError("Polygamma of negative order", "polygamma.ofNegativeOrder")
    if is_nonpositive_integer(z):
        raise checks.DomainError("Polygamma of nonpositive integer", "polygamma.ofNonpositiveInteger")
    if n == 0:
        return acb_hypgeom_digamma(z)
    if z.precision >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate polygamma to infinite precision", "polygamma.infinitePrecision")
    extra = precision.small_extra_precision(radix)
    zz = z.extend_precision(extra)
    result = acb_dirichlet_hurwitz(Complex(integer(n + 1, radix)), zz) * factorial_int(n)
    if n & 1 == 0:
        result = -result
    return reduce_margin(result, extra)


def arb_hypgeom_polygamma(n, x) -> Float:
    return real_result(acb_hypgeom_polygamma(n, x), "polygamma")


# -- beta, pochhammer, binomial, harmonic ----------------------------------


def acb_hypgeom_beta(a, b) -> Complex:
    """Complete beta ``gamma(a) gamma(b) / gamma(a + b)``."""
    a = as_complex(a)
    b = as_complex(b)
    radix = a.radix
    a_pole = is_nonpositive_integer(a)
    b_pole = is_nonpositive_integer(b)
    ab_pole = is_nonpositive_integer(_exact(a) + _exact(b))
    if ((a_pole or b_pole) and not ab_pole) or (a_pole and b_pole):
        raise checks.DomainError("Beta is infinite", "beta.infinite")
    if ab_pole and not (a_pole or b_pole):
        return Complex(zero(radix))
    if a_pole or b_pole:
        if a_pole:
            a, b = b, a
        return acb_hypgeom_gamma(a) / acb_hypgeom_rising(b, a)
    prec = min(a.precision, b.precision)
    extra = precision.small_extra_precision(radix)
    wp = precision.extend(prec, extra)
    aa = precision.ensure_gamma_precision(a, wp)
    bb = precision.ensure_gamma_precision(b, wp)
    ab = precision.ensure_gamma_precision(aa + bb, wp)
    result = acb_hypgeom_gamma(aa) * acb_hypgeom_gamma(bb) / acb_hypgeom_gamma(ab)
    return finish(reduce_margin(result, extra) if prec < EXACT else result, prec)


def arb_hypgeom_beta(a, b) -> Float:
    return real_result(acb_hypgeom_beta(a, b), "beta")


def acb_hypgeom_rising(z, n) -> Complex:
    """Pochhammer symbol ``(z)_n = gamma(z + n) / gamma(z)`` with the poles cancelled."""
    z = as_complex(z)
    n = as_complex(n)
    radix = z.radix
    if n.is_zero():
        return Complex(one(radix))
    prec = min(z.precision, n.precision)
    zn = _exact(z) + _exact(n)
    if is_nonpositive_integer(z):
        if is_nonpositive_integer(zn):
            result = acb_hypgeom_rising(1 - z - n, n)
            return -result if n.real.truncate().to_int() & 1 else result
        return Complex(zero(radix))
    if n.is_integer() and 0 < n.real.to_int() and (prec >= EXACT or n.real.to_int() <= prec):
        count = n.real.to_int()
        zz = z if prec >= EXACT else z.ensure_precision(precision.extend(prec))
        result = zz
        for k in range(1, count):
            result = result * (zz + k)
        return finish(result, prec)
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate pochhammer to infinite precision", "pochhammer.infinitePrecision")
    extra = precision.small_extra_precision(radix)
    wp = precision.extend(prec, extra)
    top = precision.ensure_gamma_precision(zn.with_precision(wp), wp)
    bottom = precision.ensure_gamma_precision(z.with_precision(wp), wp)
    return finish(acb_hypgeom_gamma(top) / acb_hypgeom_gamma(bottom), prec)


def arb_hypgeom_rising(x, n) -> Float:
    return real_result(acb_hypgeom_rising(x, n), "pochhammer")


def acb_hypgeom_binomial(n, k) -> Complex:
    """Binomial coefficient; integer arguments follow the negative-argument extension."""
    n = as_complex(n)
    k = as_complex(k)
    radix = n.radix
    prec = min(n.precision, k.precision)
    if n.is_integer() and k.is_integer():
        ni = n.real.to_int()
        ki = k.real.to_int()
        if prec >= EXACT or (abs(ni) < _BINOMIAL_EXACT_LIMIT and abs(ki) < _BINOMIAL_EXACT_LIMIT):
            return Complex(integer(binomial_int(ni, ki), radix).with_precision(prec))
    nk = _exact(n) - _exact(k)
    if (k.is_integer() and k.real.signum() < 0) or (nk.is_integer() and nk.real.signum() < 0):
        return Complex(zero(radix))
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate binomial to infinite precision", "binomial.infinitePrecision")
    extra = precision.small_extra_precision(radix)
    wp = precision.extend(prec, extra)
    nn = n.ensure_precision(wp)
    kk = k.ensure_precision(wp)
    top = acb_hypgeom_gamma(precision.ensure_gamma_precision(nn + 1, wp))
    left = acb_hypgeom_gamma(precision.ensure_gamma_precision(kk + 1, wp))
    right = acb_hypgeom_gamma(precision.ensure_gamma_precision(nn - kk + 1, wp))
    return finish(reduce_margin(top / (left * right), extra), prec)


def arb_hypgeom_binomial(n, k) -> Float:
    return real_result(acb_hypgeom_binomial(n, k), "binomial")


def acb_hypgeom_harmonic(z, r=None) -> Complex:
    """Harmonic number ``H(z)`` or the generalized ``H(z, r) = zeta(r) - zeta(r, z + 1)``."""
    z = as_complex(z)
    radix = z.radix
    if r is None:
        if z.is_zero():
            return z
        prec = z.precision
        if prec >= EXACT:
            raise checks.InfiniteExpansionError("Cannot calculate harmonic number to infinite precision", "harmonic.infinitePrecision")
        extra = precision.small_extra_precision(radix)
        zz = z.extend_precision(extra)
        euler = constants.euler_gamma(precision.extend(prec, extra), radix)
        return reduce_margin(acb_hypgeom_digamma(zz + 1) + euler, extra)
    r = as_complex(r)
    if z.is_zero() or r.is_zero():
        return z
    if r == 1:
        return acb_hypgeom_harmonic(z)
    return acb_dirichlet_zeta(r) - acb_dirichlet_hurwitz(r, z + 1)


def arb_hypgeom_harmonic(x, r=None) -> Float:
    return real_result(acb_hypgeom_harmonic(x, r), "harmonic")


__all__ = [
    "acb_hypgeom_gamma",
    "arb_hypgeom_gamma",
    "acb_hypgeom_rgamma",
    "arb_hypgeom_rgamma",
    "acb_hypgeom_lgamma",
    "arb_hypgeom_lgamma",
    "acb_hypgeom_digamma",
    "arb_hypgeom_digamma",
    "acb_hypgeom_polygamma",
    "arb_hypgeom_polygamma",
    "acb_hypgeom_beta",
    "arb_hypgeom_beta",
    "acb_hypgeom_rising",
    "arb_hypgeom_rising",
    "acb_hypgeom_binomial",
    "arb_hypgeom_binomial",
    "acb_hypgeom_harmonic",
    "arb_hypgeom_harmonic",
]
