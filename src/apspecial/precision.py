from __future__ import annotations

import sys
from contextlib import contextmanager
from math import ceil, log

from . import checks

EXACT = sys.maxsize
EXTRA_PRECISION = 20

_DPS = 50
_RADIX = 10
_MAX_ESCALATIONS = 8


def set_dps(dps: int) -> None:
    global _DPS
    checks.check_positive(dps, "precision.set_dps")
    _DPS = int(dps)


def get_dps() -> int:
    return _DPS


def set_radix(radix: int) -> None:
    global _RADIX
    checks.check_radix(radix, "precision.set_radix")
    _RADIX = int(radix)


def get_radix() -> int:
    return _RADIX


def set_max_escalations(count: int) -> None:
    global _MAX_ESCALATIONS
    checks.check_positive(count, "precision.set_max_escalations")
    _MAX_ESCALATIONS = int(count)


def get_max_escalations() -> int:
    return _MAX_ESCALATIONS


@contextmanager
def workdps(dps: int):
    old = _DPS
    set_dps(dps)
    try:
        yield
    finally:
        set_dps(old)


@contextmanager
def workradix(radix: int):
    old = _RADIX
    set_radix(radix)
    try:
        yield
    finally:
        set_radix(old)


def is_exact(prec: int) -> bool:
    return prec >= EXACT


def extend(prec: int, extra: int = EXTRA_PRECISION) -> int:
    if prec >= EXACT:
        return EXACT
    return min(EXACT, prec + extra)


def reduce(prec: int, margin: int = EXTRA_PRECISION) -> int:
    if prec >= EXACT:
        return EXACT
    prec = prec - margin
    if prec <= 0:
        raise checks.LossOfPrecisionError("Complete loss of accurate digits", "lossOfPrecision")
    return prec


def small_extra_precision(radix: int) -> int:
    return min(3, int(ceil(5 / log(radix))))


def double_precision(radix: int) -> int:
    # Digits of a native double in the given radix
    return int(ceil(53 * log(2) / log(radix)))


def digits_from_dps(dps: int, radix: int) -> int:
    return int(ceil(dps * log(10) / log(radix)))


def ensure(x, prec: int):
    return x.ensure_precision(prec)


def limit(x, prec: int):
    return x.limit_precision(prec)


def reduce_or_zero(x, margin: int = EXTRA_PRECISION):
    return x.reduce_or_zero(margin)


def matching_precisions(x, y) -> tuple[int, int]:
    if x.is_zero() or y.is_zero():
        return 0, 0
    x_scale = x.scale
    y_scale = y.scale
    max_scale = max(x_scale, y_scale)
    x_diff = max_scale - x_scale
    y_diff = max_scale - y_scale
    max_prec = min(
        EXACT if x.precision >= EXACT else x.precision + x_diff,
        EXACT if y.precision >= EXACT else y.precision + y_diff,
    )
    if max_prec >= EXACT:
        return EXACT, EXACT
    dest_x = 0 if max_prec - x_diff <= 0 else max_prec - x_diff
    dest_y = 0 if max_prec - y_diff <= 0 else max_prec - y_diff
    return dest_x, dest_y


def matching_precisions4(a, b, c, d) -> tuple[int, int, int]:
    """Working precisions for the products ``a*b`` and ``c*d`` before ``a*b - c*d``."""
    ab_prec = 0 if a.is_zero() or b.is_zero() else min(a.precision, b.precision)
    cd_prec = 0 if c.is_zero() or d.is_zero() else min(c.precision, d.precision)
    if ab_prec == 0 or cd_prec == 0:
        return ab_prec, cd_prec, max(ab_prec, cd_prec)
    ab_scale = a.scale + b.scale
    cd_scale = c.scale + d.scale
    max_scale = max(ab_scale, cd_scale)
    ab_diff = max_scale - ab_scale
    cd_diff = max_scale - cd_scale
    max_prec = min(
        EXACT if ab_prec >= EXACT else ab_prec + ab_diff,
        EXACT if cd_prec >= EXACT else cd_prec + cd_diff,
    )
    if max_prec >= EXACT:
        return EXACT, EXACT, EXACT
    # One extra digit since the product scale may be one less
    dest_ab = 0 if max_prec - ab_diff <= 0 else max_prec - ab_diff + 1
    dest_cd = 0 if max_prec - cd_diff <= 0 else max_prec - cd_diff + 1
    return dest_ab, dest_cd, max_prec


def digit_loss_near_integer(z) -> int:
    """Digits lost when ``z`` sits close to a non-positive integer, 0 otherwise."""
    rounded = z.real.round_half_even()
    if rounded.signum() >= 0:
        return 0
    diff = z - rounded
    if diff.is_zero():
        return EXACT
    return max(0, -diff.scale)


def ensure_gamma_precision(z, prec: int):
    """Return ``z`` widened so that gamma(z) keeps ``prec`` digits near a pole."""
    loss = min(prec, digit_loss_near_integer(z))
    if loss > 0:
        prec = extend(prec, loss)
    return z.ensure_precision(prec)


__all__ = [
    "EXACT",
    "EXTRA_PRECISION",
    "set_dps",
    "get_dps",
    "set_radix",
    "get_radix",
    "set_max_escalations",
    "get_max_escalations",
    "workdps",
    "workradix",
    "is_exact",
    "extend",
    "reduce",
    "small_extra_precision",
    "double_precision",
    "digits_from_dps",
    "ensure",
    "limit",
    "reduce_or_zero",
    "matching_precisions",
    "matching_precisions4",
    "digit_loss_near_integer",
    "ensure_gamma_precision",
]
