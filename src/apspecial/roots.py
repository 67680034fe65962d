from __future__ import annotations

from math import copysign, isqrt

from . import checks
from . import fpwrap
from . import precision
from .apnum import Complex, Float, as_complex, from_double, one, zero
from .precision import EXACT, EXTRA_PRECISION

_SEED_NOISE = 1e-14


def newton_schedule(start: int, target: int) -> tuple[int, int]:
    """Number of precision doublings from ``start`` to ``target`` and the precising iteration index."""
    iterations = 0
    max_prec = start
    while max_prec < target:
        iterations += 1
        max_prec <<= 1
    precising = iterations
    min_prec = start
    while precising > 0:
        if (min_prec - EXTRA_PRECISION) << precising >= target:
            break
        precising -= 1
        min_prec <<= 1
    return iterations, precising


def last_iteration_extend(iteration: int, precising: int, x):
    if iteration == 0 and precising != 0:
        return x.extend_precision()
    return x


def _iroot(m: int, n: int) -> int:
    if m < 2:
        return m
    if n == 2:
        return isqrt(m)
    x = 1 << ((m.bit_length() + n - 1) // n)
    while True:
        y = ((n - 1) * x + m // x ** (n - 1)) // n
        if y >= x:
            return x
        x = y


def _exact_root(x: Float, n: int) -> Float:
    # Exact value has an exact root only if it is a perfect power in the radix
    man, exp = x.man, x.exp
    radix = x.radix
    shift = exp % n
    man = man * radix**shift
    exp -= shift
    r = _iroot(man, n)
    if r**n != man:
        raise checks.InfiniteExpansionError(
            "Cannot calculate root to infinite precision", "root.infinitePrecision"
        )
    return Float(r, exp // n, EXACT, radix)


def _newton_inverse_root(z, n: int, result, start: int, target: int):
    iterations, precising = newton_schedule(start, target)
    z = z.extend_precision()
    prec = start
    while iterations > 0:
        iterations -= 1
        prec *= 2
        result = result.set_precision(min(prec, target))
        t = result**n
        t = last_iteration_extend(iterations, precising, t)
        t = 1 - z * t
        if iterations < precising:
            t = t.limit_precision(prec // 2)
        result = last_iteration_extend(iterations, precising, result)
        result = result + result * t / n
        if iterations == precising:
            t = result**n
            t = last_iteration_extend(iterations, -1, t)
            result = last_iteration_extend(iterations, -1, result)
            result = result + result * (1 - z * t) / n
    return result.set_precision(target)


def _inverse_root_positive(x: Float, n: int) -> Float:
    if x == 1:
        return x
    target = x.precision
    if target >= EXACT:
        return 1 / _exact_root(x, n)
    radix = x.radix
    dp = precision.double_precision(radix)
    m, s = x.double_parts()
    q, rem = divmod(s, n)
    seed = from_double(fpwrap.double_inverse_root_seed(m, n, rem, radix), dp, radix).scaled(-q)
    return _newton_inverse_root(x, n, seed, dp, target)


def arb_inverse_root(x: Float, n: int) -> Float:
    if x.is_zero():
        raise checks.DomainError("Inverse root of zero", "inverseRoot.ofZero")
    if n == 0:
        raise checks.DomainError("Inverse zeroth root", "inverseRoot.zeroth")
    if x.signum() < 0 and n % 2 == 0:
        raise checks.DomainError("Inverse root of negative number; result would be complex", "inverseRoot.ofNegative")
    if n < 0:
        return arb_root(x, -n)
    if x.signum() < 0:
        return -_inverse_root_positive(-x, n)
    return _inverse_root_positive(x, n)


def arb_root(x: Float, n: int) -> Float:
    if n == 0:
        raise checks.DomainError("Zeroth root", "root.zeroth")
    if x.is_zero():
        if n < 0:
            raise checks.DomainError("Inverse root of zero", "inverseRoot.ofZero")
        return x
    if n == 1:
        return x
    if n < 0:
        return arb_inverse_root(x, -n)
    if x.signum() < 0:
        if n % 2 == 0:
            raise checks.DomainError("Even root of negative number; result would be complex", "root.ofNegative")
        return -arb_root(-x, n)
    if x.precision >= EXACT:
        return _exact_root(x, n)
    if n == 2:
        return x * _inverse_root_positive(x, 2)
    return 1 / _inverse_root_positive(x, n)


def arb_sqrt(x: Float) -> Float:
    return arb_root(x, 2)


def arb_cbrt(x: Float) -> Float:
    return arb_root(x, 3)


def _complex_seed(z: Complex, n: int, k: int) -> Complex:
    radix = z.radix
    dp = precision.double_precision(radix)
    m, s = z.double_parts()
    if m.imag == 0.0 and not z.imag.is_zero():
        # Keep the side of the branch cut
        m = complex(m.real, copysign(0.0, z.imag.signum()))
    q, rem = divmod(s, n)
    w = fpwrap.cdouble_inverse_root_seed(m, n, rem, radix)
    if k:
        w = w * fpwrap.cdouble_root_of_unity(-k, n)
    # Round-off residue of a rotation must not seed a spurious component
    tiny = _SEED_NOISE * abs(w)
    re = from_double(w.real, dp, radix) if abs(w.real) > tiny else zero(radix)
    im = from_double(w.imag, dp, radix) if abs(w.imag) > tiny else zero(radix)
    return Complex(re, im).scaled(-q)


def _inverse_root_abs(z: Complex, n: int, k: int) -> Complex:
    radix = z.radix
    if k == 0 and z == 1:
        return z
    if n == 2 and z.is_real() and z.real.signum() < 0:
        # Pure imaginary result without round-off in the real part
        y = arb_inverse_root(-z.real, 2)
        return Complex(zero(radix), -y if k == 0 else y)
    if k == 0 and z.is_real() and z.real.signum() > 0:
        return Complex(_inverse_root_positive(z.real, n))
    target = z.precision
    if target >= EXACT:
        raise checks.InfiniteExpansionError(
            "Cannot calculate inverse root to infinite precision", "inverseRoot.infinitePrecision"
        )
    dp = precision.double_precision(radix)
    seed = _complex_seed(z, n, k)
    return _newton_inverse_root(z, n, seed, dp, target)


def acb_inverse_root(z, n: int, k: int = 0) -> Complex:
    """Branch ``k`` of ``z**(-1/n)``, that is ``1 / acb_root(z, n, k)``."""
    z = as_complex(z)
    if z.is_zero():
        raise checks.DomainError("Inverse root of zero", "inverseRoot.ofZero")
    if n == 0:
        raise checks.DomainError("Inverse zeroth root", "inverseRoot.zeroth")
    k %= abs(n)
    if n < 0:
        return acb_root(z, -n, k)
    return _inverse_root_abs(z, n, k)


def acb_root(z, n: int, k: int = 0) -> Complex:
    """Branch ``k`` of the n-th root: ``|z|**(1/n) * exp(i*(arg(z) + 2*pi*k)/n)``."""
    z = as_complex(z)
    if n == 0:
        raise checks.DomainError("Zeroth root", "root.zeroth")
    if z.is_zero():
        if n < 0:
            raise checks.DomainError("Inverse root of zero", "inverseRoot.ofZero")
        return z
    if n == 1:
        return z
    k %= abs(n)
    if k == 0 and z.is_real() and z.real.signum() > 0:
        return Complex(arb_root(z.real, n))
    if n < 0:
        return _inverse_root_abs(z, -n, k)
    if n == 2:
        return z * _inverse_root_abs(z, 2, k)
    return 1 / _inverse_root_abs(z, n, k)


def acb_sqrt(z) -> Complex:
    return acb_root(z, 2)


def acb_cbrt(z) -> Complex:
    return acb_root(z, 3)


def acb_all_roots(z, n: int) -> list[Complex]:
    """All ``|n|`` branches of the n-th root (inverse roots for negative ``n``), branch 0 first."""
    z = as_complex(z)
    if n == 0:
        raise checks.DomainError("Zeroth root", "root.zeroth")
    if n == 1:
        return [z]
    if z.is_zero():
        if n < 0:
            raise checks.DomainError("Inverse root of zero", "inverseRoot.ofZero")
        return [z] * n
    inverse = n < 0
    n = abs(n)
    prec = z.precision
    z = z.extend_precision()
    w = acb_root(Complex(one(z.radix).with_precision(precision.extend(prec))), n, 1)
    if inverse:
        w = w.conj()
    r = _inverse_root_abs(z, n, 0) if inverse else acb_root(z, n)
    out = [r.limit_precision(prec)]
    for _ in range(1, n):
        r = r * w
        out.append(r.limit_precision(prec))
    return out


__all__ = [
    "newton_schedule",
    "last_iteration_extend",
    "arb_inverse_root",
    "arb_root",
    "arb_sqrt",
    "arb_cbrt",
    "acb_inverse_root",
    "acb_root",
    "acb_sqrt",
    "acb_cbrt",
    "acb_all_roots",
]
