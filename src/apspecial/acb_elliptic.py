from __future__ import annotations

from . import checks
from . import constants
from . import precision
from .acb_core import acb_sqrt
from .agm import acb_agm
from .apnum import Complex, Float, as_complex, one, zero
from .precision import EXACT
from .series_utils import real_result, reduce_margin


def _prepare(m, name: str) -> tuple[Complex, int, int]:
    m = as_complex(m)
    if m == 1:
        raise checks.DomainError(f"{name} of one", f"{name}.ofOne")
    prec = m.precision
    if prec >= EXACT:
        raise checks.InfiniteExpansionError(f"Cannot calculate {name} to infinite precision", f"{name}.infinitePrecision")
    extra = precision.small_extra_precision(m.radix)
    return m.ensure_precision(precision.extend(prec, extra)), prec, extra


def _k_from_agm(agm: Complex) -> Complex:
    return constants.pi(agm.precision, agm.radix) / (2 * agm)


def acb_elliptic_k(m) -> Complex:
    """Complete elliptic integral of the first kind, ``K(m) = pi / (2 agm(1, sqrt(1 - m)))``."""
    mm, _, extra = _prepare(m, "ellipticK")
    unit = Complex(one(mm.radix).with_precision(mm.precision))
    return reduce_margin(_k_from_agm(acb_agm(unit, acb_sqrt(1 - mm))), extra)


def acb_elliptic_e(m) -> Complex:
    """Complete elliptic integral of the second kind.

    Uses ``E(m) = K(m) (1 - sum 2**(n-1) c_n**2)`` with ``c_n`` the half
    differences of the AGM iterates starting from ``c_0**2 = m``.
    """
    m = as_complex(m)
    if m == 1:
        return m
    mm, _, extra = _prepare(m, "ellipticE")
    radix = mm.radix
    unit = Complex(one(radix).with_precision(mm.precision))
    terms = []

    def consume(c2):
        terms.append(c2)

    agm = acb_agm(unit, acb_sqrt(1 - mm), consume)
    total = Complex(zero(radix))
    weight = unit / 2
    for c2 in terms:
        total = total + weight * c2
        weight = weight * 2
    return reduce_margin(_k_from_agm(agm) * (1 - total), extra)


def arb_elliptic_k(m) -> Float:
    return real_result(acb_elliptic_k(m), "ellipticK")


def arb_elliptic_e(m) -> Float:
    return real_result(acb_elliptic_e(m), "ellipticE")


__all__ = ["acb_elliptic_k", "acb_elliptic_e", "arb_elliptic_k", "arb_elliptic_e"]
