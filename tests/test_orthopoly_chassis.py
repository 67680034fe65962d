from fractions import Fraction

import mpmath
import pytest

from apspecial import constants
from apspecial import orthopoly
from apspecial.apnum import Complex, cpx, real
from apspecial.arb_core import arb_atanh, arb_cos, arb_sin
from apspecial.acb_core import acb_exp
from apspecial.elementary import unit_i
from apspecial.roots import arb_sqrt

from tests._test_checks import _agrees, _check, _close, _reference


def _r(value, prec=40):
    return real(value, prec)


def test_hermite_exact_polynomial():
    _check(orthopoly.acb_hypgeom_hermite_h(real(3), real(2)) == 40)
    _check(orthopoly.acb_hypgeom_hermite_h(real(0), real(2)) == 1)


def test_hermite_integer_order_from_kummer_functions():
    _close(orthopoly.arb_hypgeom_hermite_h(real(3), _r("0.5")), real(-5), 36)
    _close(orthopoly.arb_hypgeom_hermite_h(_r(2), Complex(real(0))), real(-2), 36)
    _check(orthopoly.acb_hypgeom_hermite_h(_r(3), Complex(real(0))).is_zero())


def test_hermite_recurrence_for_fractional_order():
    # H_{nu+1} = 2z H_nu - 2 nu H_{nu-1}
    nu = _r("0.5")
    z = _r("0.7")
    h = orthopoly.arb_hypgeom_hermite_h
    _close(h(nu + 1, z), 2 * z * h(nu, z) - 2 * nu * h(nu - 1, z), 33)


def test_laguerre():
    _check(orthopoly.acb_hypgeom_laguerre_l(real(2), real(0), real(1)) * 2 == -1)
    _close(orthopoly.arb_hypgeom_laguerre_l(real(2), real(1), _r(1)), real(Fraction(1, 2), 50), 36)


def test_laguerre_recurrence_for_fractional_degree():
    # (nu+1) L_{nu+1} = (2nu + 1 - z) L_nu - nu L_{nu-1}
    nu = _r("0.5")
    z = _r("1.25")
    lag = orthopoly.arb_hypgeom_laguerre_l
    zero = real(0)
    _close((nu + 1) * lag(nu + 1, zero, z), (2 * nu + 1 - z) * lag(nu, zero, z) - nu * lag(nu - 1, zero, z), 33)


def test_legendre_p():
    _close(orthopoly.arb_hypgeom_legendre_p(real(2), real(0), _r("0.5")), real(Fraction(-1, 8), 50), 36)
    _close(orthopoly.arb_hypgeom_legendre_p(real(1), real(1), _r("0.6")), real(Fraction(-4, 5), 50), 35)


def test_legendre_p_bonnet_recurrence():
    # (nu+1) P_{nu+1} = (2nu+1) z P_nu - nu P_{nu-1}
    nu = _r(1) / 3
    z = _r("0.4")
    p = orthopoly.arb_hypgeom_legendre_p
    zero = real(0)
    _close((nu + 1) * p(nu + 1, zero, z), (2 * nu + 1) * z * p(nu, zero, z) - nu * p(nu - 1, zero, z), 33)


def test_legendre_q_low_degrees():
    x = _r("0.5")
    q0 = orthopoly.arb_hypgeom_legendre_q(real(0), real(0), x)
    _close(q0, arb_atanh(x), 35)
    q1 = orthopoly.arb_hypgeom_legendre_q(real(1), real(0), x)
    _close(q1, x * arb_atanh(x) - 1, 35)


def test_legendre_q_exact_fractional_degree():
    # Exact parameters with a finite-precision argument
    value = orthopoly.arb_hypgeom_legendre_q(real(Fraction(1, 2)), real(0), _r("0.3"))
    _agrees(value, _reference(mpmath.legenq, "0.5", 0, "0.3", type=2), 30)


def test_spherical_harmonics():
    theta = _r("0.7")
    phi = _r("0.3")
    four_pi = constants.pi(50) * 4
    y00 = orthopoly.acb_hypgeom_spherical_y(real(0), real(0), theta, phi)
    _close(y00, Complex(arb_sqrt(1 / four_pi)), 36)
    y10 = orthopoly.acb_hypgeom_spherical_y(real(1), real(0), theta, phi)
    _close(y10, Complex(arb_sqrt(3 / four_pi) * arb_cos(theta)), 35)
    y11 = orthopoly.acb_hypgeom_spherical_y(real(1), real(1), theta, phi)
    expected = -arb_sqrt(3 / (four_pi * 2)) * arb_sin(theta) * acb_exp(unit_i(10) * phi)
    _close(y11, expected, 34)
    _check(orthopoly.acb_hypgeom_spherical_y(real(1), real(2), theta, phi).is_zero())


def test_chebyshev_exact_and_general():
    half = real(Fraction(1, 2))
    _check(orthopoly.acb_hypgeom_chebyshev_t(real(3), half) == -1)
    _check(orthopoly.acb_hypgeom_chebyshev_u(real(2), real(Fraction(3, 2))) == 8)
    _check(orthopoly.acb_hypgeom_chebyshev_u(real(-3), half) == -1)
    _close(orthopoly.arb_hypgeom_chebyshev_t(_r("0.5"), _r("0.5")), arb_sqrt(_r(3, 50)) / 2, 36)
    t = orthopoly.acb_hypgeom_chebyshev_t(_r("0.5"), _r(2))
    _check(t.is_real())
    _close(t, Complex(arb_sqrt(_r("1.5", 50))), 35)
    _close(orthopoly.acb_hypgeom_chebyshev_u(_r("0.5"), real(1)), Complex(_r("1.5")), 39)


def test_gegenbauer():
    _check(orthopoly.acb_hypgeom_gegenbauer_c(real(2), real(Fraction(3, 2)), real(Fraction(1, 2))) * 8 == 3)
    nu = _r("0.5")
    x = _r("0.3")
    _close(orthopoly.acb_hypgeom_gegenbauer_c(nu, real(1), x), orthopoly.acb_hypgeom_chebyshev_u(nu, x), 33)
    limit = orthopoly.acb_hypgeom_gegenbauer_c(nu, None, _r("0.5"))
    _close(limit, Complex(arb_sqrt(_r(3, 50)) * 2), 35)


def test_jacobi():
    p = orthopoly.acb_hypgeom_jacobi_p(real(1), real(Fraction(1, 2)), real(Fraction(3, 2)), real(Fraction(1, 2)))
    _check(p * 2 == 1)
    nu = _r(1) / 3
    z = _r("0.4")
    _close(
        orthopoly.acb_hypgeom_jacobi_p(nu, real(0), real(0), z),
        orthopoly.acb_hypgeom_legendre_p(nu, real(0), z),
        35,
    )


def test_fibonacci_polynomials():
    _check(orthopoly.acb_fibonacci_poly(real(5), real(2)) == 29)
    _check(orthopoly.acb_fibonacci_poly(real(-4), real(1)) == -3)
    _close(orthopoly.arb_fibonacci_poly(real(5), _r(2)), real(29), 35)
    # F_{nu+1} = z F_nu + F_{nu-1}
    nu = _r("0.5")
    z = _r("1.5")
    f = orthopoly.arb_fibonacci_poly
    _close(f(nu + 1, z), z * f(nu, z) + f(nu - 1, z), 33)


@pytest.mark.parametrize("z", [cpx("0.5", 0, 40), cpx(3, 1, 40)])
def test_bernoulli_and_euler_polynomials(z):
    b2 = orthopoly.acb_bernoulli_poly(2, z)
    _close(b2, z * z - z + real(Fraction(1, 6), 60), 36)
    e1 = orthopoly.acb_euler_poly(1, z)
    _close(e1, z - Fraction(1, 2), 36)
    _check(orthopoly.acb_bernoulli_poly(0, z) == 1)


def test_real_wrappers_return_floats():
    u = orthopoly.arb_hypgeom_chebyshev_u(real(2), _r("1.5"))
    _check(u == 8)
    c = orthopoly.arb_hypgeom_gegenbauer_c(real(2), real(Fraction(3, 2)), real(Fraction(1, 2)))
    _check(c * 8 == 3)
    p = orthopoly.arb_hypgeom_jacobi_p(real(1), real(Fraction(1, 2)), real(Fraction(3, 2)), real(Fraction(1, 2)))
    _check(p * 2 == 1)
    b2 = orthopoly.arb_bernoulli_poly(2, _r("0.5"))
    _close(b2 * 12, real(-1), 36)
    e1 = orthopoly.arb_euler_poly(1, _r(2))
    _check(e1.precision == 40)
    _close(e1, real(Fraction(3, 2)), 38)
    _check(orthopoly.arb_euler_poly(0, _r(2)) == 1)
