from __future__ import annotations

import logging
import math

from . import checks
from . import constants
from . import fpwrap
from . import precision
from .acb_core import acb_exp, acb_log
from .apnum import Complex, Float, as_complex, from_double
from .elementary import unit_i
from .precision import EXACT
from .series_utils import newton_refine, real_result

logger = logging.getLogger(__name__)

# Beyond this decimal exponent the double seed over- or underflows
DOUBLE_SEED_EXPONENT = 300


def _branch_distance(z: Complex, prec: int) -> Complex:
    # e z + 1, zero at the branch point -1/e
    wp = precision.extend(prec)
    return z.ensure_precision(wp) * constants.e(wp, z.radix) + 1


def _seed(z: Complex, k: int) -> Complex:
    radix = z.radix
    dp = precision.double_precision(radix)
    if abs(z.scale) * math.log10(radix) < DOUBLE_SEED_EXPONENT:
        w = fpwrap.cdouble_lambertw(z.to_complex(), k)
        return Complex(from_double(w.real, dp, radix), from_double(w.imag, dp, radix))
    if k == 0 and z.scale < 0:
        return z.limit_precision(dp)
    # W_k(z) ~ L - log(L) with L = log(z) + 2 pi i k
    logger.debug("lambert W seed from the asymptotic expansion, scale %d", z.scale)
    zz = z.limit_precision(dp)
    ell = acb_log(zz)
    if k:
        ell = ell + unit_i(radix) * (constants.pi(dp, radix) * (2 * k))
    return ell - acb_log(ell)


def acb_lambertw(z, k: int = 0) -> Complex:
    """Lambert W function ``W_k(z)``, the solution of ``w exp(w) = z`` on branch ``k``.

    Close to the branch point ``-1/e`` on the branches that meet there the result
    carries about half of the digits ``e z + 1`` shares with zero fewer.
    """
    checks.check_integer(k, "acb_lambertw")
    k = int(k)
    z = as_complex(z)
    radix = z.radix
    if z.is_zero():
        if k != 0:
            raise checks.DomainError("Lambert W of zero on a nonzero branch", "lambertW.branch")
        return z
    prec = z.precision
    if prec >= EXACT:
        raise checks.InfiniteExpansionError("Cannot calculate Lambert W to infinite precision", "lambertW.infinitePrecision")
    target = prec
    distance = None
    if k in (-1, 0, 1):
        distance = _branch_distance(z, prec)
        if distance.is_zero():
            target = max(1, prec // 2)
        elif distance.scale < 0:
            target = max(1, prec + distance.scale // 2)
    full = precision.extend(prec)

    def f(w: Complex) -> Complex:
        ww = w.ensure_precision(full)
        return ww * acb_exp(ww) - z

    def fprime(w: Complex) -> Complex:
        return acb_exp(w) * (w + 1)

    w = newton_refine(f, fprime, _seed(z, k), target, "lambert W")
    if z.is_real() and distance is not None and distance.real.signum() >= 0:
        if k == 0 or (k == -1 and z.real.signum() < 0):
            return Complex(w.real)
    return w


def arb_lambertw(x, k: int = 0) -> Float:
    """Real Lambert W, principal branch for ``k = 0`` and the lower branch for ``k = -1``."""
    if k not in (0, -1):
        raise ValueError(f"arb_lambertw: expected branch 0 or -1, got {k}")
    return real_result(acb_lambertw(x, k), "lambertW")


__all__ = ["DOUBLE_SEED_EXPONENT", "acb_lambertw", "arb_lambertw"]
