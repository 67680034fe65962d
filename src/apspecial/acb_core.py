from __future__ import annotations

from . import arb_core
from . import checks
from . import constants
from . import precision
from .apnum import Complex, Float, as_complex, equal_digits, one, zero
from .elementary import abs_value, exp_kernel, log_kernel, pow_kernel, unit_i
from .roots import acb_all_roots, acb_cbrt, acb_inverse_root, acb_root, acb_sqrt


def _one(z: Complex) -> Complex:
    return Complex(one(z.radix))


def acb_abs(z) -> Float:
    return abs_value(as_complex(z))


def acb_norm(z) -> Float:
    return as_complex(z).norm()


def acb_arg(z) -> Float:
    z = as_complex(z)
    return arb_core.arb_atan2(z.imag, z.real)


def acb_exp(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_exp(z.real))
    return exp_kernel(z)


def acb_log(z, base=None) -> Complex:
    z = as_complex(z)
    if base is not None:
        w = as_complex(base)
        if z.is_real() and z.real.signum() > 0 and w.is_real() and w.real.signum() > 0:
            return Complex(arb_core.arb_log(z.real, w.real))
        return acb_log(z) / acb_log(w)
    if z.is_zero():
        raise checks.DomainError("Logarithm of zero", "log.ofZero")
    if z.is_real():
        if z.real.signum() > 0:
            return Complex(arb_core.arb_log(z.real))
        x = -z.real
        re = zero(z.radix) if x == 1 else arb_core.arb_log(x)
        return Complex(re, constants.pi(z.precision, z.radix))
    return log_kernel(z)


def acb_pow(z, w) -> Complex:
    z = as_complex(z)
    w = as_complex(w)
    if z.is_real() and w.is_real() and (z.real.signum() >= 0 or w.is_integer()):
        return Complex(arb_core.arb_pow(z.real, w.real))
    return pow_kernel(z, w)


def acb_sin(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_sin(z.real))
    w = exp_kernel(unit_i(z.radix) * z)
    return (1 / w - w) * unit_i(z.radix) / 2


def acb_cos(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_cos(z.real))
    w = exp_kernel(unit_i(z.radix) * z)
    return (w + 1 / w) / 2


def acb_sinh(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_sinh(z.real))
    w = exp_kernel(z)
    return (w - 1 / w) / 2


def acb_cosh(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_cosh(z.real))
    w = exp_kernel(z)
    return (w + 1 / w) / 2


def acb_tan(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_tan(z.real))
    # Keep |exp(2iz)| <= 1
    negate = z.imag.signum() < 0
    if negate:
        z = -z
    i = unit_i(z.radix)
    w = exp_kernel(2 * i * z)
    w = i * (1 - w) / (1 + w)
    return -w if negate else w


def acb_tanh(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_tanh(z.real))
    negate = z.real.signum() > 0
    if negate:
        z = -z
    w = exp_kernel(2 * z)
    w = (w - 1) / (w + 1)
    return -w if negate else w


def acb_cot(z) -> Complex:
    z = as_complex(z)
    negate = z.imag.signum() < 0
    if negate:
        z = -z
    i = unit_i(z.radix)
    w = exp_kernel(2 * i * z)
    w = i * (2 * w / (w - 1) - 1)
    return -w if negate else w


def acb_asin(z) -> Complex:
    z = as_complex(z)
    unit = one(z.radix)
    if z.is_real() and abs(z.real) <= unit:
        return Complex(arb_core.arb_asin(z.real))
    i = unit_i(z.radix)
    if z.imag.signum() > 0 or (z.imag.is_zero() and z.real.signum() < 0):
        return i * log_kernel(acb_sqrt(1 - z * z) - i * z)
    return -(i * log_kernel(i * z + acb_sqrt(1 - z * z)))


def acb_acos(z, prec: int | None = None) -> Complex:
    """Inverse cosine; ``prec`` sets the precision of ``acos(0) = pi/2``."""
    z = as_complex(z)
    unit = one(z.radix)
    if z.is_real() and abs(z.real) <= unit:
        return Complex(arb_core.arb_acos(z.real, prec))
    i = unit_i(z.radix)
    s = acb_sqrt(z * z - 1)
    if z.real.signum() > 0 or (z.real.is_zero() and z.imag.signum() > 0):
        w = i * log_kernel(z + s)
    else:
        w = i * log_kernel(z - s)
    if z.imag.signum() < 0 or (z.imag.is_zero() and z.real.signum() > 0):
        return w
    return -w


def acb_asinh(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_asinh(z.real))
    s = acb_sqrt(z * z + 1)
    if z.real.signum() > 0 or (z.real.is_zero() and z.imag.signum() > 0):
        return log_kernel(s + z)
    return -log_kernel(s - z)


def acb_acosh(z, prec: int | None = None) -> Complex:
    z = as_complex(z)
    if z.is_zero():
        p = z.precision if prec is None else prec
        return Complex(zero(z.radix), constants.pi(p, z.radix) / 2)
    if z.is_real() and z.real >= 1:
        return Complex(arb_core.arb_acosh(z.real))
    s = acb_sqrt(z * z - 1)
    if z.real.signum() > 0 or (z.real.is_zero() and z.imag.signum() >= 0):
        return log_kernel(z + s)
    return log_kernel(z - s)


def acb_atan(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_atan(z.real))
    i = unit_i(z.radix)
    if z == i or z == -i:
        raise checks.DomainError("Inverse tangent of the imaginary unit", "atan.ofImaginaryUnit")
    w = log_kernel((i + z) / (i - z)) * i / 2
    if z.real.is_zero() and z.imag.signum() > 0:
        return Complex(-w.real, w.imag)
    return w


def acb_atanh(z) -> Complex:
    z = as_complex(z)
    unit = one(z.radix)
    if z.is_real() and abs(z.real) < unit:
        return Complex(arb_core.arb_atanh(z.real))
    if z == 1 or z == -1:
        raise checks.DomainError("Inverse hyperbolic tangent of one", "atanh.ofOne")
    w = acb_log((1 + z) / (1 - z)) / 2
    if z.real.signum() > 0 and z.imag.is_zero():
        return w.conj()
    return w


def acb_sinc(z) -> Complex:
    z = as_complex(z)
    if z.is_zero():
        return _one(z)
    return acb_sin(z) / z


def acb_logistic_sigmoid(z) -> Complex:
    z = as_complex(z)
    if z.is_real():
        return Complex(arb_core.arb_logistic_sigmoid(z.real))
    radix = z.radix
    prec = z.precision
    unit = one(radix)
    e = _one(z) if z.scale < -prec else exp_kernel(-z)
    denom = unit.with_precision(precision.extend(prec, equal_digits(e, -unit))) + e
    if denom.is_zero():
        raise checks.DomainError("Logistic sigmoid pole at an odd multiple of pi i", "logisticSigmoid.ofPole")
    return unit.with_precision(prec) / denom


__all__ = [
    "acb_abs",
    "acb_norm",
    "acb_arg",
    "acb_exp",
    "acb_log",
    "acb_pow",
    "acb_sqrt",
    "acb_cbrt",
    "acb_root",
    "acb_inverse_root",
    "acb_all_roots",
    "acb_sin",
    "acb_cos",
    "acb_tan",
    "acb_cot",
    "acb_sinh",
    "acb_cosh",
    "acb_tanh",
    "acb_asin",
    "acb_acos",
    "acb_asinh",
    "acb_acosh",
    "acb_atan",
    "acb_atanh",
    "acb_sinc",
    "acb_logistic_sigmoid",
]
