from __future__ import annotations

import math
from fractions import Fraction

from . import checks
from . import constants
from . import precision
from .acb_core import acb_acos, acb_cos, acb_exp, acb_pow, acb_sin
from .apnum import Complex, Float, as_complex, from_fraction, integer, one, zero
from .bernoulli import bernoulli_polynomial, euler_polynomial
from .elementary import unit_i
from .gamma import acb_hypgeom_gamma, acb_hypgeom_rgamma, acb_hypgeom_rising
from .hypgeom import acb_hypgeom_1f1, acb_hypgeom_2f1
from .precision import EXACT
from .roots import acb_sqrt, arb_sqrt
from .series_utils import (
    evaluate_to_target,
    finish,
    is_nonpositive_integer,
    real_result,
    reduce_margin,
    with_escalation,
)


def _q(value, prec: int, radix: int) -> Complex:
    return Complex(from_fraction(Fraction(value), prec, radix))


def _unit(radix: int, prec: int) -> Complex:
    return Complex(one(radix).with_precision(prec))


def _coerce(label: str, *values) -> tuple[list[Complex], int]:
    values = [as_complex(v) for v in values]
    for v in values[1:]:
        checks.check_same_radix(values[0], v, label)
    prec = min(v.precision for v in values)
    if prec < EXACT:
        values = [v.limit_precision(prec) for v in values]
    return values, prec


def _widen(values: list[Complex], prec: int) -> tuple[list[Complex], int, int]:
    """Operands at working precision with the reserved digits; exact operands stay exact."""
    if prec >= EXACT:
        return values, EXACT, 0
    extra = precision.small_extra_precision(values[0].radix)
    wp = precision.extend(prec, extra)
    return [v.ensure_precision(wp) for v in values], wp, extra


def _infinite(name: str):
    return checks.InfiniteExpansionError(f"Cannot calculate {name} to infinite precision", f"{name}.infinitePrecision")


def _real_if(result: Complex, *inputs: Complex) -> Complex:
    if all(v.is_real() for v in inputs):
        return Complex(result.real)
    return result


def _nonnegative_integer(z: Complex) -> bool:
    return z.is_integer() and z.real.signum() >= 0


def _power(x: Complex, k: int):
    return x**k if k else 1


def _two_pow(w: Complex, wp: int) -> Complex:
    return acb_pow(Complex(integer(2, w.radix).with_precision(wp)), w)


def _sqrt_pi(wp: int, radix: int) -> Float:
    return arb_sqrt(constants.pi(wp, radix))


def _hermite_recurrence(n: int, z: Complex) -> Complex:
    previous, current = Complex(one(z.radix)), z * 2
    for k in range(1, n):
        previous, current = current, z * 2 * current - previous * (2 * k)
    return current


def acb_hypgeom_hermite_h(nu, z) -> Complex:
    """Hermite function ``H_nu(z)``.

    Built from the even and odd Kummer functions,
    ``2**nu sqrt(pi) (M(-nu/2, 1/2, z**2) / gamma((1-nu)/2) - 2z M((1-nu)/2, 3/2, z**2) / gamma(-nu/2))``.
    Exact arguments of non-negative integer order give the exact polynomial.
    """
    (nu, z), prec = _coerce("hermiteH", nu, z)
    radix = z.radix
    if nu.is_zero():
        return _unit(radix, prec)
    if prec >= EXACT:
        if _nonnegative_integer(nu):
            return _hermite_recurrence(nu.real.to_int(), z)
        raise _infinite("hermiteH")
    if z.is_zero():
        if _nonnegative_integer(nu) and nu.real.to_int() & 1:
            return Complex(zero(radix))
        (nn,), wp, extra = _widen([nu], prec)
        result = _two_pow(nn, wp) * _sqrt_pi(wp, radix) * acb_hypgeom_rgamma((1 - nn) / 2)
        return _real_if(reduce_margin(result, extra), nu)

    def combine(zz: Complex, wp: int) -> Complex:
        nn = nu.ensure_precision(wp)
        half = _q(Fraction(1, 2), wp, radix)
        z2 = zz * zz
        even = acb_hypgeom_rgamma((1 - nn) / 2)
        odd = acb_hypgeom_rgamma(-nn / 2)
        total = Complex(zero(radix))
        # A term vanishes when its gamma sits on a pole
        if not even.is_zero():
            total = total + acb_hypgeom_1f1(-nn / 2, half, z2) * even
        if not odd.is_zero():
            total = total - zz * 2 * acb_hypgeom_1f1((1 - nn) / 2, half * 3, z2) * odd
        return total * _two_pow(nn, wp) * _sqrt_pi(wp, radix)

    return _real_if(evaluate_to_target(z, prec, prec, "hermiteH", combine), nu, z)


def acb_hypgeom_laguerre_l(nu, m, z) -> Complex:
    """Generalized Laguerre function ``L_nu^m(z) = (nu + 1)_m M~(-nu, m + 1, z)``."""
    (nu, m, z), prec = _coerce("laguerreL", nu, m, z)
    (nn, mm, zz), wp, extra = _widen([nu, m, z], prec)
    if mm.is_zero():
        result = acb_hypgeom_1f1(-nn, _unit(z.radix, wp), zz)
    else:
        result = acb_hypgeom_rising(nn + 1, mm) * acb_hypgeom_1f1(-nn, mm + 1, zz, regularized=True)
    return reduce_margin(result, extra)


def acb_hypgeom_legendre_p(nu, mu, z) -> Complex:
    """Legendre function of the first kind, ``((1+z)/(1-z))**(mu/2) 2F1~(-nu, nu+1; 1-mu; (1-z)/2)``."""
    (nu, mu, z), prec = _coerce("legendreP", nu, mu, z)
    (nn, mm, zz), wp, extra = _widen([nu, mu, z], prec)
    result = acb_hypgeom_2f1(-nn, nn + 1, 1 - mm, (1 - zz) / 2, regularized=True)
    if not mm.is_zero():
        half_mu = mm / 2
        result = result * acb_pow(1 + zz, half_mu) / acb_pow(1 - zz, half_mu)
    return reduce_margin(result, extra)


def acb_hypgeom_legendre_q(nu, mu, z) -> Complex:
    """Legendre function of the second kind.

    Uses the expansion around the origin,
    ``2**mu pi (1 - z**2)**(-mu/2) (cos(pi(nu+mu)/2) p1 z/2 F_odd - sin(pi(nu+mu)/2) p2/2 F_even)``
    with ``p1 = ((1+nu-mu)/2)_(1/2+mu)`` and ``p2 = ((2+nu-mu)/2)_(mu-1/2)``.
    """
    (nu, mu, z), prec = _coerce("legendreQ", nu, mu, z)
    if prec >= EXACT:
        raise _infinite("legendreQ")
    radix = z.radix
    # At z = +-1 a vanishing result is genuine
    at_one = z * z == 1
    base = precision.extend(prec, precision.small_extra_precision(radix))

    def evaluate(extra: int):
        wp = precision.extend(base, extra)
        nn, mm, zz = (v.with_precision(wp) for v in (nu, mu, z))
        half = _q(Fraction(1, 2), wp, radix)
        pi = constants.pi(wp, radix)
        nm = nn + mm
        z2 = zz * zz
        p1 = acb_hypgeom_rising((1 + nn - mm) / 2, half + mm)
        p2 = acb_hypgeom_rising((2 + nn - mm) / 2, mm - half)
        total = Complex(zero(radix))
        if not p1.is_zero():
            odd = acb_hypgeom_2f1((1 - nm) / 2, (nn - mm) / 2 + 1, half * 3, z2, regularized=True)
            total = total + acb_cos(pi * nm / 2) * p1 * zz / 2 * odd
        if not p2.is_zero():
            even = acb_hypgeom_2f1(-nm / 2, (nn - mm + 1) / 2, half, z2, regularized=True)
            total = total - acb_sin(pi * nm / 2) * p2 / 2 * even
        result = total * pi
        if not mm.is_zero():
            result = result * _two_pow(mm, wp) * acb_pow(1 - z2, -mm / 2)
        if result.is_zero():
            return result, (0 if at_one else extra + wp)
        shortfall = prec - result.precision
        return result, (extra + shortfall if shortfall > 0 else 0)

    return finish(with_escalation(evaluate, "legendreQ"), prec)


def acb_hypgeom_spherical_y(n, m, theta, phi) -> Complex:
    """Spherical harmonic ``Y_n^m(theta, phi)``, normalized over the unit sphere."""
    (n, m, theta, phi), prec = _coerce("sphericalY", n, m, theta, phi)
    radix = theta.radix
    if n.is_integer() and m.is_integer():
        ni = n.real.to_int()
        mi = m.real.to_int()
        if ni < 0:
            ni = -ni - 1
        if ni < abs(mi):
            return Complex(zero(radix))
        if prec >= EXACT:
            raise _infinite("sphericalY")
        (tt, pp), wp, extra = _widen([theta, phi], prec)
        ratio = from_fraction(Fraction((2 * ni + 1) * math.factorial(ni - mi), math.factorial(ni + mi)), wp, radix)
        factor = arb_sqrt(ratio / (constants.pi(wp, radix) * 4))
        legendre = acb_hypgeom_legendre_p(
            Complex(integer(ni, radix)), Complex(integer(mi, radix)), acb_cos(tt)
        )
        result = factor * acb_exp(unit_i(radix) * pp * mi) * legendre
        return reduce_margin(result, extra)
    if (n * 2 + 1).is_zero():
        return Complex(zero(radix))
    if prec >= EXACT:
        raise _infinite("sphericalY")
    (nn, mm, tt, pp), wp, extra = _widen([n, m, theta, phi], prec)
    result = acb_sqrt((nn * 2 + 1) / (constants.pi(wp, radix) * 4))
    if not mm.is_zero():
        if is_nonpositive_integer(nn + mm + 1):
            return Complex(zero(radix))
        top = precision.ensure_gamma_precision(nn - mm + 1, wp)
        bottom = precision.ensure_gamma_precision(nn + mm + 1, wp)
        result = result * acb_sqrt(acb_hypgeom_gamma(top)) / acb_sqrt(acb_hypgeom_gamma(bottom))
        result = result * acb_exp(unit_i(radix) * mm * pp)
    result = result * acb_hypgeom_legendre_p(nn, mm, acb_cos(tt))
    return reduce_margin(result, extra)


def _chebyshev_recurrence(n: int, z: Complex, first: Complex) -> Complex:
    previous, current = Complex(one(z.radix)), first
    for _ in range(1, n):
        previous, current = current, z * 2 * current - previous
    return current


def _chebyshev_real(result: Complex, nu: Complex, z: Complex) -> Complex:
    # Real order and real z above -1 stay on the real axis
    if nu.is_real() and z.is_real() and (nu.is_integer() or z.real >= -1):
        return Complex(result.real)
    return result


def acb_hypgeom_chebyshev_t(nu, z) -> Complex:
    """Chebyshev function of the first kind ``cos(nu acos(z))``."""
    (nu, z), prec = _coerce("chebyshevT", nu, z)
    radix = z.radix
    if nu.is_zero():
        return _unit(radix, prec)
    if nu.is_integer() and prec >= EXACT:
        n = abs(nu.real.to_int())
        return _chebyshev_recurrence(n, z, z)
    if prec >= EXACT:
        raise _infinite("chebyshevT")
    extra = precision.small_extra_precision(radix) + max(0, nu.scale)
    wp = precision.extend(prec, extra)
    result = acb_cos(nu.ensure_precision(wp) * acb_acos(z.ensure_precision(wp), wp))
    return _chebyshev_real(reduce_margin(result, extra), nu, z)


def acb_hypgeom_chebyshev_u(nu, z) -> Complex:
    """Chebyshev function of the second kind ``sin((nu + 1) acos(z)) / sqrt(1 - z**2)``."""
    (nu, z), prec = _coerce("chebyshevU", nu, z)
    radix = z.radix
    if nu.is_zero():
        return _unit(radix, prec)
    if z == 1:
        return nu + 1
    if z == -1 and nu.is_integer():
        value = nu + 1
        return -value if nu.real.to_int() & 1 else value
    if nu.is_integer() and prec >= EXACT:
        n = nu.real.to_int()
        if n == -1:
            return Complex(zero(radix))
        # U_-n = -U_(n-2)
        if n < 0:
            return -_chebyshev_recurrence(-n - 2, z, z * 2) if n < -2 else -Complex(one(radix))
        return _chebyshev_recurrence(n, z, z * 2)
    if prec >= EXACT:
        raise _infinite("chebyshevU")
    extra = precision.small_extra_precision(radix) + max(0, nu.scale)
    wp = precision.extend(prec, extra)
    zz = z.ensure_precision(wp)
    angle = acb_acos(zz, wp)
    result = acb_sin((nu.ensure_precision(wp) + 1) * angle) / acb_sqrt(1 - zz * zz)
    return _chebyshev_real(reduce_margin(result, extra), nu, z)


def _gegenbauer_sum(n: int, lam: Complex, z: Complex) -> Complex:
    # n! C_n(z) = sum_k (-1)**k n!/(k! (n-2k)!) (lam)_(n-k) (2z)**(n-2k)
    rising = [Complex(one(z.radix))]
    for k in range(n):
        rising.append(rising[-1] * (lam + k))
    z2 = z * 2
    total = Complex(zero(z.radix))
    nf = math.factorial(n)
    for k in range(n // 2 + 1):
        coefficient = nf // (math.factorial(k) * math.factorial(n - 2 * k))
        term = rising[n - k] * _power(z2, n - 2 * k) * coefficient
        total = total - term if k & 1 else total + term
    return total / nf


def acb_hypgeom_gegenbauer_c(nu, lam, z) -> Complex:
    """Gegenbauer function ``C_nu^lam(z)``.

    With ``lam`` None this is the normalized limit ``(2/nu) T_nu(z)`` at ``lam = 0``.
    Non-negative integer degree sums the explicit polynomial, anything else uses
    ``(2lam)_nu / nu! * 2F1(-nu, nu + 2lam; lam + 1/2; (1-z)/2)``.
    """
    if lam is None:
        nu = as_complex(nu)
        return acb_hypgeom_chebyshev_t(nu, z) * 2 / nu
    (nu, lam, z), prec = _coerce("gegenbauerC", nu, lam, z)
    radix = z.radix
    if lam.is_zero():
        return lam
    (nn, ll, zz), wp, extra = _widen([nu, lam, z], prec)
    if _nonnegative_integer(nu):
        return reduce_margin(_gegenbauer_sum(nu.real.to_int(), ll, zz), extra)
    if prec >= EXACT:
        raise _infinite("gegenbauerC")
    nu1 = nn + 1
    if is_nonpositive_integer(nu1):
        if is_nonpositive_integer(ll):
            return Complex(zero(radix))
        factor = acb_hypgeom_rising(nu1, ll * 2 - 1) * acb_hypgeom_rgamma(ll)
    else:
        factor = acb_hypgeom_rising(ll, nn + ll) * acb_hypgeom_rgamma(nu1)
    if factor.is_zero():
        return factor
    half = _q(Fraction(1, 2), wp, radix)
    series = acb_hypgeom_2f1(-nn, nn + ll * 2, ll + half, (1 - zz) / 2, regularized=True)
    result = factor * _two_pow(1 - ll * 2, wp) * _sqrt_pi(wp, radix) * series
    return reduce_margin(result, extra)


def _jacobi_sum(n: int, a: Complex, b: Complex, z: Complex) -> Complex:
    # 2**n n! P_n = sum_k C(n, k) (-n)_k (a+b+n+1)_k (a+1+k)_(n-k) 2**(n-k) (1-z)**k
    unit = Complex(one(z.radix))
    tail = [unit] * (n + 1)
    for k in range(n - 1, -1, -1):
        tail[k] = tail[k + 1] * (a + 1 + k)
    w = 1 - z
    head = unit
    total = Complex(zero(z.radix))
    nf = math.factorial(n)
    for k in range(n + 1):
        signed = math.comb(n, k) * nf // math.factorial(n - k) * (1 << (n - k))
        term = head * tail[k] * _power(w, k) * signed
        total = total - term if k & 1 else total + term
        head = head * (a + b + n + 1 + k)
    return total / (nf << n)


def acb_hypgeom_jacobi_p(nu, a, b, z) -> Complex:
    """Jacobi function ``P_nu^(a,b)(z) = (nu + 1)_a 2F1~(-nu, a + b + nu + 1; a + 1; (1-z)/2)``."""
    (nu, a, b, z), prec = _coerce("jacobiP", nu, a, b, z)
    (nn, aa, bb, zz), wp, extra = _widen([nu, a, b, z], prec)
    if _nonnegative_integer(nu):
        return reduce_margin(_jacobi_sum(nu.real.to_int(), aa, bb, zz), extra)
    result = acb_hypgeom_rising(nn + 1, aa) * acb_hypgeom_2f1(
        -nn, aa + bb + nn + 1, aa + 1, (1 - zz) / 2, regularized=True
    )
    return reduce_margin(result, extra)


def _fibonacci_recurrence(n: int, z: Complex) -> Complex:
    previous, current = Complex(zero(z.radix)), Complex(one(z.radix))
    for _ in range(1, abs(n)):
        previous, current = current, z * current + previous
    if n < 0 and n & 1 == 0:
        return -current
    return current


def acb_fibonacci_poly(nu, z) -> Complex:
    """Fibonacci function ``F_nu(z) = (w**nu - cos(pi nu) w**-nu) / sqrt(z**2 + 4)``, ``w = (z + sqrt(z**2 + 4))/2``."""
    (nu, z), prec = _coerce("fibonacci", nu, z)
    radix = z.radix
    if nu.is_zero():
        return Complex(zero(radix))
    if nu.is_integer():
        n = nu.real.to_int()
        if prec >= EXACT:
            return _fibonacci_recurrence(n, z)
        if z * z == -4:
            # F_n(2i) = n i**(n-1) on the branch points of the square root
            i = unit_i(radix) if z.imag.signum() > 0 else -unit_i(radix)
            return (-nu * i ** (n % 4 + 1)).limit_precision(prec)
    if prec >= EXACT:
        raise _infinite("fibonacci")
    extra = precision.small_extra_precision(radix) + max(0, nu.scale)
    wp = precision.extend(prec, extra)
    nn = nu.ensure_precision(wp)
    cos_pi_nu = acb_cos(constants.pi(wp, radix) * nn)
    if z.is_zero():
        return _real_if(reduce_margin((1 - cos_pi_nu) / 2, extra), nu)

    def combine(zz: Complex, p: int) -> Complex:
        n = nu.ensure_precision(p)
        s = acb_sqrt(zz * zz + 4)
        w = acb_pow((zz + s) / 2, n)
        return (w - acb_cos(constants.pi(p, radix) * n) / w) / s

    return _real_if(evaluate_to_target(z, wp, prec, "fibonacci", combine), nu, z)


def _polynomial_precision(n: int, radix: int) -> int:
    # Horner over Bernoulli-sized coefficients cancels about n log10(e) digits in radix 10
    return math.ceil(2.7 * n / math.log(radix))


def acb_bernoulli_poly(n: int, z) -> Complex:
    """Bernoulli polynomial ``B_n(z)``."""
    checks.check_nonnegative(n, "bernoulliB")
    z = as_complex(z)
    prec = z.precision
    if n == 0:
        return _unit(z.radix, prec)
    if prec >= EXACT:
        return bernoulli_polynomial(n, z)
    wp = precision.extend(prec, _polynomial_precision(n, z.radix))
    return bernoulli_polynomial(n, z.ensure_precision(wp)).limit_precision(prec)


def acb_euler_poly(n: int, z) -> Complex:
    """Euler polynomial ``E_n(z)``."""
    checks.check_nonnegative(n, "eulerE")
    z = as_complex(z)
    prec = z.precision
    if n == 0:
        return _unit(z.radix, prec)
    if prec >= EXACT:
        return euler_polynomial(n, z)
    wp = precision.extend(prec, _polynomial_precision(n, z.radix))
    return euler_polynomial(n, z.ensure_precision(wp)).limit_precision(prec)


def arb_hypgeom_hermite_h(nu, x) -> Float:
    return real_result(acb_hypgeom_hermite_h(nu, x), "hermiteH")


def arb_hypgeom_laguerre_l(nu, m, x) -> Float:
    return real_result(acb_hypgeom_laguerre_l(nu, m, x), "laguerreL")


def arb_hypgeom_legendre_p(nu, mu, x) -> Float:
    return real_result(acb_hypgeom_legendre_p(nu, mu, x), "legendreP")


def arb_hypgeom_legendre_q(nu, mu, x) -> Float:
    return real_result(acb_hypgeom_legendre_q(nu, mu, x), "legendreQ")


def arb_hypgeom_chebyshev_t(nu, x) -> Float:
    return real_result(acb_hypgeom_chebyshev_t(nu, x), "chebyshevT")


def arb_hypgeom_chebyshev_u(nu, x) -> Float:
    return real_result(acb_hypgeom_chebyshev_u(nu, x), "chebyshevU")


def arb_hypgeom_gegenbauer_c(nu, lam, x) -> Float:
    return real_result(acb_hypgeom_gegenbauer_c(nu, lam, x), "gegenbauerC")


def arb_hypgeom_jacobi_p(nu, a, b, x) -> Float:
    return real_result(acb_hypgeom_jacobi_p(nu, a, b, x), "jacobiP")


def arb_fibonacci_poly(nu, x) -> Float:
    return real_result(acb_fibonacci_poly(nu, x), "fibonacci")


def arb_bernoulli_poly(n: int, x) -> Float:
    return real_result(acb_bernoulli_poly(n, x), "bernoulliB")


def arb_euler_poly(n: int, x) -> Float:
    return real_result(acb_euler_poly(n, x), "eulerE")


__all__ = [
    "acb_hypgeom_hermite_h",
    "acb_hypgeom_laguerre_l",
    "acb_hypgeom_legendre_p",
    "acb_hypgeom_legendre_q",
    "acb_hypgeom_spherical_y",
    "acb_hypgeom_chebyshev_t",
    "acb_hypgeom_chebyshev_u",
    "acb_hypgeom_gegenbauer_c",
    "acb_hypgeom_jacobi_p",
    "acb_fibonacci_poly",
    "acb_bernoulli_poly",
    "acb_euler_poly",
    "arb_hypgeom_hermite_h",
    "arb_hypgeom_laguerre_l",
    "arb_hypgeom_legendre_p",
    "arb_hypgeom_legendre_q",
    "arb_hypgeom_chebyshev_t",
    "arb_hypgeom_chebyshev_u",
    "arb_hypgeom_gegenbauer_c",
    "arb_hypgeom_jacobi_p",
    "arb_fibonacci_poly",
    "arb_bernoulli_poly",
    "arb_euler_poly",
]
