from __future__ import annotations

import math

from . import checks
from . import constants
from . import precision
from .acb_core import acb_exp, acb_log, acb_pow
from .apnum import Complex, Float, as_complex, zero
from .dirichlet import acb_dirichlet_hurwitz, acb_dirichlet_zeta
from .elementary import unit_i
from .gamma import acb_hypgeom_gamma
from .hypgeom import integer_parameter_limit
from .precision import EXACT
from .series_utils import real_result, reduce_margin


def eulerian_numbers(n: int) -> list[int]:
    """Row ``A(n, 0) .. A(n, n - 1)`` of the Eulerian numbers, ``[1]`` for ``n = 0``."""
    row = [1]
    for m in range(2, n + 1):
        row = [(k + 1) * (row[k] if k < len(row) else 0) + (m - k) * (row[k - 1] if k > 0 else 0) for k in range(m)]
    return row


def _polylog_negative(n: int, z: Complex) -> Complex:
    # Li_-n(z) = z sum_k A(n, k) z**k / (1 - z)**(n + 1)
    w = 1 - z
    if n == 0:
        return z / w
    total = Complex(zero(z.radix))
    for coefficient in reversed(eulerian_numbers(n)):
        total = total * z + coefficient
    return z * total / w ** (n + 1)


def _on_unit_segment(z: Complex) -> bool:
    return z.is_real() and z.real.signum() > 0 and z.real < 1


def acb_polylog(nu, z) -> Complex:
    """Polylogarithm ``Li_nu(z)``.

    Nonpositive integer order is a rational function of ``z``. Otherwise the
    value comes from Jonquiere's inversion through Hurwitz zeta,
    ``(2 pi)**(nu-1) i gamma(1-nu) (zeta(1-nu, L) / e**(i pi nu/2) - e**(i pi nu/2) zeta(1-nu, 1-L))``
    with ``L = log(z) / (2 pi i)`` on a branch continuous off the cut ``[1, inf)``.
    Integer order moves off the integer, see ``integer_parameter_limit``.
    """
    nu = as_complex(nu)
    z = as_complex(z)
    checks.check_same_radix(nu, z, "acb_polylog")
    if z.is_zero():
        return z
    radix = z.radix
    prec = min(nu.precision, z.precision)
    if z == 1:
        if nu.real <= 1:
            raise checks.DomainError("Polylogarithm is infinite", "polylog.infinite")
        return acb_dirichlet_zeta(nu)
    if nu.is_integer() and nu.real.signum() <= 0:
        n = -nu.real.to_int()
        if prec >= EXACT:
            return _polylog_negative(n, z)
        extra = precision.small_extra_precision(radix)
        result = _polylog_negative(n, z.limit_precision(prec).ensure_precision(precision.extend(prec, extra)))
        return reduce_margin(result, extra)
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate polylogarithm to infinite precision", "polylog.infinitePrecision")
    if nu == 1:
        extra = precision.small_extra_precision(radix)
        return reduce_margin(-acb_log(1 - z.limit_precision(prec).ensure_precision(precision.extend(prec, extra))), extra)
    unit_segment = _on_unit_segment(z)
    # Hurwitz zeta at 1 - nu cancels about 2.7 re(nu) / ln(radix) digits
    growth = max(0, math.ceil(nu.real.to_double()))
    target = prec
    reserve = max(0, math.ceil(2.7 * growth / math.log(radix)) - precision.small_extra_precision(radix))

    def evaluate(n: Complex, p: int) -> Complex:
        wp = precision.extend(p, reserve)
        n = n.ensure_precision(wp)
        zz = z.ensure_precision(wp)
        pi = constants.pi(wp, radix)
        i = unit_i(radix)
        if unit_segment:
            log_z = acb_log(zz)
        else:
            log_z = acb_log(-zz) + pi * i
        ell = log_z / (pi * 2 * i)
        s = 1 - n
        rotation = acb_exp(pi * n * i / 2)
        gamma = acb_hypgeom_gamma(precision.ensure_gamma_precision(s, wp))
        first = acb_dirichlet_hurwitz(s, ell) / rotation
        second = rotation * acb_dirichlet_hurwitz(s, 1 - ell)
        return acb_pow(Complex(pi * 2), -s) * i * gamma * (first - second)

    result = integer_parameter_limit(nu.limit_precision(prec), target, "polylog", evaluate)
    if nu.is_real() and z.is_real() and z.real < 1:
        return Complex(result.real)
    return result


def arb_polylog(nu, x) -> Float:
    return real_result(acb_polylog(nu, x), "polylog")


__all__ = ["eulerian_numbers", "acb_polylog", "arb_polylog"]
