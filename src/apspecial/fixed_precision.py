from __future__ import annotations

import functools
from fractions import Fraction

from . import acb_core
from . import acb_elliptic
from . import agm
from . import bessel
from . import checks
from . import constants
from . import dirichlet
from . import erf
from . import expint
from . import gamma
from . import hypgeom
from . import incgamma
from . import lambertw
from . import orthopoly
from . import parallel
from . import polylog
from . import roots
from .apnum import Complex, Float, as_complex, cpx, equal_digits, one, real, zero
from .elementary import abs_value, check_pow
from .precision import ensure_gamma_precision, extend, get_radix


# Input precision rules. Each takes the configured precision and an argument
# already in the working radix and returns the argument set up for evaluation.

def _value_rule(prec: int, x):
    return x.with_precision(prec)


def _trig_part(prec: int, x: Float) -> Float:
    # Periodic functions need the integer digits on top of the fraction
    return x.with_precision(extend(prec, max(0, x.scale)))


def _exp_part(prec: int, x: Float) -> Float:
    scale = x.scale
    if scale <= -prec:
        return zero(x.radix)
    if scale < 0:
        return x.with_precision(prec + scale)
    if scale > 1:
        return x.with_precision(prec + scale - 1)
    return x.with_precision(prec)


def _trig_rule(prec: int, z):
    if isinstance(z, Float):
        return _trig_part(prec, z)
    return Complex(_trig_part(prec, z.real), _trig_part(prec, z.imag))


def _exp_rule(prec: int, z):
    if isinstance(z, Float):
        return _exp_part(prec, z)
    return Complex(_exp_part(prec, z.real), _trig_part(prec, z.imag))


def _trig_exp_rule(prec: int, z):
    if isinstance(z, Float):
        return _trig_part(prec, z)
    return Complex(_trig_part(prec, z.real), _exp_part(prec, z.imag))


def _log_rule(prec: int, z):
    # log(z) near one cancels the digits z shares with one
    size = abs_value(z) if isinstance(z, Complex) else z
    return z.with_precision(extend(prec, equal_digits(size, one(z.radix))))


def _gamma_rule(prec: int, z):
    widened = _trig_rule(prec, z)
    return ensure_gamma_precision(widened, widened.precision)


def _erf_rule(prec: int, z):
    scale = z.scale
    if scale > 0:
        return z.with_precision(extend(prec, 2 * scale))
    return z.with_precision(prec)


V = _value_rule
T = _trig_rule
X = _exp_rule
TX = _trig_exp_rule
L = _log_rule
G = _gamma_rule
E = _erf_rule
# Orders and branches passed through untouched
N = None


# name -> (function, argument rules, returns the argument when it is tiny, passes prec)
_RULES: dict[str, tuple] = {
    "abs": (acb_core.acb_abs, (V,), False, False),
    "norm": (acb_core.acb_norm, (V,), False, False),
    "arg": (acb_core.acb_arg, (V,), False, False),
    "sqrt": (acb_core.acb_sqrt, (V,), False, False),
    "cbrt": (acb_core.acb_cbrt, (V,), False, False),
    "root": (roots.acb_root, (V, N, N), False, False),
    "inverse_root": (roots.acb_inverse_root, (V, N, N), False, False),
    "all_roots": (roots.acb_all_roots, (V, N), False, False),
    "agm": (agm.acb_agm, (V, V), False, False),
    "w": (lambertw.acb_lambertw, (V, N), False, False),
    "exp": (acb_core.acb_exp, (X,), False, False),
    "log": (acb_core.acb_log, (L, V), False, False),
    "sin": (acb_core.acb_sin, (TX,), True, False),
    "cos": (acb_core.acb_cos, (TX,), False, False),
    "tan": (acb_core.acb_tan, (TX,), True, False),
    "cot": (acb_core.acb_cot, (TX,), False, False),
    "sinc": (acb_core.acb_sinc, (TX,), False, False),
    "sinh": (acb_core.acb_sinh, (X,), True, False),
    "cosh": (acb_core.acb_cosh, (X,), False, False),
    "tanh": (acb_core.acb_tanh, (X,), True, False),
    "logistic_sigmoid": (acb_core.acb_logistic_sigmoid, (X,), False, False),
    "asin": (acb_core.acb_asin, (V,), False, False),
    "acos": (acb_core.acb_acos, (V,), False, True),
    "atan": (acb_core.acb_atan, (V,), False, False),
    "asinh": (acb_core.acb_asinh, (V,), False, False),
    "acosh": (acb_core.acb_acosh, (V,), False, True),
    "atanh": (acb_core.acb_atanh, (V,), False, False),
    "gamma": (gamma.acb_hypgeom_gamma, (G,), False, False),
    "rgamma": (gamma.acb_hypgeom_rgamma, (G,), False, False),
    "log_gamma": (gamma.acb_hypgeom_lgamma, (V,), False, False),
    "digamma": (gamma.acb_hypgeom_digamma, (V,), False, False),
    "polygamma": (gamma.acb_hypgeom_polygamma, (N, V), False, False),
    "beta": (gamma.acb_hypgeom_beta, (V, V), False, False),
    "pochhammer": (gamma.acb_hypgeom_rising, (V, V), False, False),
    "binomial": (gamma.acb_hypgeom_binomial, (G, G), False, False),
    "harmonic_number": (gamma.acb_hypgeom_harmonic, (V, V), False, False),
    "gamma_upper": (incgamma.acb_hypgeom_gamma_upper, (G, V), False, False),
    "gamma_lower": (incgamma.acb_hypgeom_gamma_lower, (G, V), False, False),
    "gamma_between": (incgamma.acb_hypgeom_gamma_between, (G, V, V), False, False),
    "expint_e": (incgamma.acb_hypgeom_expint, (V, V), False, False),
    "zeta": (dirichlet.acb_dirichlet_zeta, (T,), False, False),
    "hurwitz_zeta": (dirichlet.acb_dirichlet_hurwitz, (T, V), False, False),
    "polylog": (polylog.acb_polylog, (V, V), False, False),
    "hypergeometric_0f1": (hypgeom.acb_hypgeom_0f1, (V, V), False, False),
    "hypergeometric_1f1": (hypgeom.acb_hypgeom_1f1, (V, V, V), False, False),
    "hypergeometric_2f1": (hypgeom.acb_hypgeom_2f1, (V, V, V, V), False, False),
    "hypergeometric_pfq": (hypgeom.acb_hypgeom_pfq, (V, V, V), False, False),
    "hypergeometric_u": (hypgeom.acb_hypgeom_u, (V, V, V), False, False),
    "beta_incomplete": (hypgeom.acb_hypgeom_beta_lower, (V, V, V), False, False),
    "beta_between": (hypgeom.acb_hypgeom_beta_between, (V, V, V, V), False, False),
    "erf": (erf.acb_hypgeom_erf, (E,), False, False),
    "erfc": (erf.acb_hypgeom_erfc, (E,), False, False),
    "erfi": (erf.acb_hypgeom_erfi, (E,), False, False),
    "inverse_erf": (erf.arb_hypgeom_erfinv, (V,), False, False),
    "inverse_erfc": (erf.arb_hypgeom_erfcinv, (V,), False, False),
    "fresnel_s": (erf.acb_hypgeom_fresnel_s, (V,), False, False),
    "fresnel_c": (erf.acb_hypgeom_fresnel_c, (V,), False, False),
    "exp_integral_ei": (expint.acb_hypgeom_ei, (V,), False, False),
    "log_integral": (expint.acb_hypgeom_li, (L,), False, False),
    "sin_integral": (expint.acb_hypgeom_si, (V,), False, False),
    "cos_integral": (expint.acb_hypgeom_ci, (V,), False, False),
    "sinh_integral": (expint.acb_hypgeom_shi, (V,), False, False),
    "cosh_integral": (expint.acb_hypgeom_chi, (V,), False, False),
    "airy_ai": (bessel.acb_hypgeom_airy_ai, (V,), False, False),
    "airy_ai_prime": (bessel.acb_hypgeom_airy_ai_prime, (V,), False, False),
    "airy_bi": (bessel.acb_hypgeom_airy_bi, (V,), False, False),
    "airy_bi_prime": (bessel.acb_hypgeom_airy_bi_prime, (V,), False, False),
    "bessel_j": (bessel.acb_hypgeom_bessel_j, (V, V), False, False),
    "bessel_i": (bessel.acb_hypgeom_bessel_i, (V, V), False, False),
    "bessel_y": (bessel.acb_hypgeom_bessel_y, (V, V), False, False),
    "bessel_k": (bessel.acb_hypgeom_bessel_k, (V, V), False, False),
    "struve_h": (bessel.acb_hypgeom_struve_h, (V, V), False, False),
    "struve_l": (bessel.acb_hypgeom_struve_l, (V, V), False, False),
    "anger_j": (bessel.acb_hypgeom_anger_j, (V, V), False, False),
    "weber_e": (bessel.acb_hypgeom_weber_e, (V, V), False, False),
    "elliptic_k": (acb_elliptic.acb_elliptic_k, (V,), False, False),
    "elliptic_e": (acb_elliptic.acb_elliptic_e, (V,), False, False),
    "hermite_h": (orthopoly.acb_hypgeom_hermite_h, (V, V), False, False),
    "laguerre_l": (orthopoly.acb_hypgeom_laguerre_l, (V, V, V), False, False),
    "legendre_p": (orthopoly.acb_hypgeom_legendre_p, (V, V, V), False, False),
    "legendre_q": (orthopoly.acb_hypgeom_legendre_q, (V, V, V), False, False),
    "spherical_harmonic": (orthopoly.acb_hypgeom_spherical_y, (V, V, V, V), False, False),
    "chebyshev_t": (orthopoly.acb_hypgeom_chebyshev_t, (V, V), False, False),
    "chebyshev_u": (orthopoly.acb_hypgeom_chebyshev_u, (V, V), False, False),
    "gegenbauer_c": (orthopoly.acb_hypgeom_gegenbauer_c, (V, V, V), False, False),
    "jacobi_p": (orthopoly.acb_hypgeom_jacobi_p, (V, V, V, V), False, False),
    "fibonacci": (orthopoly.acb_fibonacci_poly, (T, V), False, False),
    "bernoulli_b": (orthopoly.acb_bernoulli_poly, (N, V), False, False),
    "euler_e": (orthopoly.acb_euler_poly, (N, V), False, False),
}


def _is_real_input(x) -> bool:
    if isinstance(x, (list, tuple)):
        return all(_is_real_input(v) for v in x)
    return x is None or isinstance(x, (bool, int, float, Fraction, str, Float))


class FixedPrecision:
    """Evaluate every function at one configured precision and radix.

    Arguments are first set up by a per-function rule: plain functions see the
    configured precision, periodic ones get the integer digits of the argument
    on top, exponentials drop the digits the result cannot carry. Results are
    always returned at exactly the configured precision. When all arguments are
    real and the result is real a ``Float`` comes back, otherwise a ``Complex``.
    """

    def __init__(self, precision: int, radix: int | None = None):
        checks.check_positive(precision, "FixedPrecision")
        if radix is None:
            radix = get_radix()
        checks.check_radix(radix, "FixedPrecision")
        self._prec = precision
        self._radix = radix

    @property
    def precision(self) -> int:
        return self._prec

    @property
    def radix(self) -> int:
        return self._radix

    def __repr__(self) -> str:
        return f"FixedPrecision(precision={self._prec}, radix={self._radix})"

    def _convert(self, x):
        if isinstance(x, (list, tuple)):
            return [self._convert(v) for v in x]
        if x is None:
            return None
        if isinstance(x, (Complex, complex)):
            return cpx(x, radix=self._radix)
        return real(x, radix=self._radix)

    def _prepare(self, rule, x):
        if rule is None or x is None:
            return x
        x = self._convert(x)
        if isinstance(x, list):
            return [rule(self._prec, v) for v in x]
        return rule(self._prec, x)

    def value_of(self, z, real_input: bool = False):
        """Return ``z`` at the configured precision."""
        if isinstance(z, (list, tuple)):
            return [self.value_of(v, real_input) for v in z]
        if isinstance(z, Complex):
            if real_input and z.is_real():
                return z.real.set_precision(self._prec)
            return z.set_precision(self._prec)
        if isinstance(z, Float):
            return z.set_precision(self._prec)
        return self.value_of(self._convert(z), real_input)

    def set_precision(self, z):
        return self.value_of(z, _is_real_input(z))

    def add(self, z, w):
        return self._binary(z, w, lambda a, b: a + b)

    def subtract(self, z, w):
        return self._binary(z, w, lambda a, b: a - b)

    def multiply(self, z, w):
        return self._binary(z, w, lambda a, b: a * b)

    def divide(self, z, w):
        return self._binary(z, w, lambda a, b: a / b)

    def negate(self, z):
        return self.value_of(-self._prepare(V, z), _is_real_input(z))

    def _binary(self, z, w, op):
        a = self._prepare(V, z)
        b = self._prepare(V, w)
        return self.value_of(op(a, b), _is_real_input(z) and _is_real_input(w))

    def pow(self, z, w):
        """``z**w``; an integer exponent is repeated multiplication, anything else ``exp(w log z)``."""
        real_input = _is_real_input(z) and _is_real_input(w)
        if isinstance(w, int) and not isinstance(w, bool):
            return self.value_of(self._prepare(V, z) ** w, real_input)
        zz = self._prepare(V, z)
        ww = self._prepare(V, w)
        special = check_pow(as_complex(zz), as_complex(ww), self._prec)
        if special is not None:
            return self.value_of(special, real_input)
        return self.exp(self.multiply(self.log(z), w))

    def product(self, *values):
        return self.value_of(parallel.product(*[self._prepare(V, v) for v in values]), _is_real_input(values))

    def sum(self, *values):
        return self.value_of(parallel.sum(*[self._prepare(V, v) for v in values]), _is_real_input(values))

    def pi(self) -> Float:
        return constants.pi(self._prec, self._radix)

    def e(self) -> Float:
        return constants.e(self._prec, self._radix)

    def euler(self) -> Float:
        return constants.euler_gamma(self._prec, self._radix)

    def zero(self) -> Float:
        return zero(self._radix)

    def one(self) -> Float:
        return one(self._radix).with_precision(self._prec)


def _make_method(name: str, fn, rules: tuple, small_linear: bool, pass_prec: bool):
    @functools.wraps(fn)
    def method(self, *args, **kwargs):
        real_input = _is_real_input(args)
        if small_linear:
            raw = self._convert(args[0])
            if raw.scale <= -self._prec:
                # f(z) = z to the configured precision
                return self.value_of(raw, real_input)
        prepared = [self._prepare(rule, x) for rule, x in zip(rules, args)]
        prepared.extend(args[len(rules):])
        if pass_prec:
            kwargs.setdefault("prec", self._prec)
        return self.value_of(fn(*prepared, **kwargs), real_input)

    method.__name__ = name
    method.__qualname__ = f"FixedPrecision.{name}"
    return method


for _name, (_fn, _rules, _small, _pass_prec) in _RULES.items():
    setattr(FixedPrecision, _name, _make_method(_name, _fn, _rules, _small, _pass_prec))


__all__ = ["FixedPrecision"]
