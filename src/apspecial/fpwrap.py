from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.scipy import special as jsp_special

jax.config.update("jax_enable_x64", True)

_W_ITERS = 8


def double_exp(x: float) -> float:
    return float(jnp.exp(jnp.float64(x)))


def double_log(x: float) -> float:
    return float(jnp.log(jnp.float64(x)))


def double_pow(x: float, y: float) -> float:
    return float(jnp.power(jnp.float64(x), jnp.float64(y)))


def cdouble_exp(z: complex) -> complex:
    return complex(jnp.exp(jnp.complex128(z)))


def cdouble_log(z: complex) -> complex:
    return complex(jnp.log(jnp.complex128(z)))


def cdouble_cis(theta: float) -> complex:
    t = jnp.float64(theta)
    return complex(float(jnp.cos(t)), float(jnp.sin(t)))


def double_inverse_root_seed(m: float, n: int, rem: int, radix: int) -> float:
    """``m**(-1/n) * radix**(-rem/n)`` for ``0 < m < 1``."""
    m = jnp.float64(m)
    return float(jnp.power(m, -1.0 / n) * jnp.power(jnp.float64(radix), -jnp.float64(rem) / n))


def cdouble_inverse_root_seed(m: complex, n: int, rem: int, radix: int) -> complex:
    """Principal ``m**(-1/n) * radix**(-rem/n)`` for complex ``m`` with ``|m| < 1``."""
    w = jnp.exp(-jnp.log(jnp.complex128(m)) / n)
    return complex(w * jnp.power(jnp.float64(radix), -jnp.float64(rem) / n))


def cdouble_root_of_unity(k: int, n: int) -> complex:
    theta = 2.0 * jnp.pi * jnp.float64(k) / jnp.float64(n)
    return complex(jnp.cos(theta) + 1j * jnp.sin(theta))


def cdouble_lambertw(z: complex, k: int = 0) -> complex:
    """Lambert W branch ``k`` in double precision via Halley's iteration."""
    z = jnp.complex128(z)
    two_pi_k = 2j * jnp.pi * k
    if k == 0 and abs(complex(z)) < 3.0:
        branch_point = complex(z + jnp.exp(-1.0))
        if abs(branch_point) < 0.3:
            p = jnp.sqrt(2.0 * (jnp.e * z + 1.0))
            w = -1.0 + p - p * p / 3.0 + 11.0 / 72.0 * p**3
        elif complex(z).real >= -0.5:
            w = jnp.log1p(z)
        else:
            lz = jnp.log(z)
            w = lz - jnp.log(lz)
    elif k == -1 and abs(complex(z + jnp.exp(-1.0))) < 0.3 and complex(z).imag == 0.0:
        p = -jnp.sqrt(2.0 * (jnp.e * z + 1.0))
        w = -1.0 + p - p * p / 3.0 + 11.0 / 72.0 * p**3
    else:
        lz = jnp.log(z) + two_pi_k
        w = lz - jnp.log(lz)
    for _ in range(_W_ITERS):
        ew = jnp.exp(w)
        f = w * ew - z
        wp1 = w + 1.0
        denom = ew * wp1 - (w + 2.0) * f / (2.0 * wp1)
        w = jnp.where(jnp.abs(denom) > 0, w - f / denom, w)
    return complex(w)


def double_erfinv(y: float) -> float:
    return float(jsp_special.erfinv(jnp.float64(y)))


def double_erfcinv(q: float) -> float:
    # erfc(x) = q  <=>  x = -ndtri(q / 2) / sqrt(2)
    return float(-jsp_special.ndtri(jnp.float64(q) / 2.0) / jnp.sqrt(2.0))


def double_erfc_tail_seed(t: float) -> float:
    """Root of ``x**2 + log(x) + log(pi) / 2 = t``, the tail of ``erfc(x) = exp(-t)``."""
    t = jnp.float64(t)
    x = jnp.sqrt(t)
    for _ in range(4):
        x = jnp.sqrt(jnp.maximum(t - jnp.log(x) - 0.5 * jnp.log(jnp.pi), 0.25))
    return float(x)


def _hyp2f1_arguments(z: jax.Array) -> jax.Array:
    one = jnp.complex128(1.0)
    return jnp.stack(
        [
            z,
            z / (z - one),
            one / z,
            one / (one - z),
            one - z,
            one - one / z,
        ]
    )


def hyp2f1_transform_moduli(z: complex) -> list[float]:
    """Moduli of the six transformed 2F1 arguments, NaN/inf where not applicable."""
    out = _hyp2f1_transform_moduli_jit(jnp.complex128(z))
    return [float(v) for v in out]


def _hyp2f1_transform_moduli(z: jax.Array) -> jax.Array:
    return jnp.abs(_hyp2f1_arguments(z))


_hyp2f1_transform_moduli_jit = jax.jit(_hyp2f1_transform_moduli)


def hurwitz_log_scale(s: complex, a: complex) -> float:
    """Natural log of |a**(1 - s) / (s - 1)|, the size of the integral term."""
    s = jnp.complex128(s)
    a = jnp.complex128(a)
    value = jnp.real((1.0 - s) * jnp.log(a)) - jnp.log(jnp.abs(s - 1.0))
    return float(value)


def hurwitz_log_bound(s: complex, a: complex, n: int, m: int) -> float:
    """Natural log of the Euler-Maclaurin remainder bound for N = n terms and order m.

    ``R = 4 |(s)_2m| / (2 pi)**2m * K * J(n + alpha, sigma + 2m)`` with
    ``K = exp(max(0, tau * atan(beta / (alpha + n))))`` and
    ``J(A, B) = 1 / ((B - 1) * A**(B - 1))``. Returns ``inf`` outside the
    region where the bound holds.
    """
    sigma, tau = s.real, s.imag
    alpha, beta = a.real, a.imag
    big_a = n + alpha
    big_b = sigma + 2 * m
    if big_a <= 0.0 or big_b <= 1.0:
        return float("inf")
    k = jnp.arange(2 * m, dtype=jnp.float64)
    # Each factor counts at least one, so s next to a nonpositive integer still bounds
    log_poch = jnp.sum(jnp.log(jnp.maximum(jnp.abs(jnp.complex128(s) + k), 1.0)))
    k_term = jnp.maximum(0.0, tau * jnp.arctan(beta / big_a))
    value = (
        jnp.log(4.0)
        + log_poch
        - 2 * m * jnp.log(2.0 * jnp.pi)
        + k_term
        - jnp.log(big_b - 1.0)
        - (big_b - 1.0) * jnp.log(jnp.float64(big_a))
    )
    return float(value)


__all__ = [
    "double_exp",
    "double_log",
    "double_pow",
    "cdouble_exp",
    "cdouble_log",
    "cdouble_cis",
    "double_inverse_root_seed",
    "cdouble_inverse_root_seed",
    "cdouble_root_of_unity",
    "cdouble_lambertw",
    "double_erfinv",
    "double_erfcinv",
    "double_erfc_tail_seed",
    "hyp2f1_transform_moduli",
    "hurwitz_log_scale",
    "hurwitz_log_bound",
]
