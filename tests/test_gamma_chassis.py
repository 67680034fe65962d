from fractions import Fraction

import pytest

from apspecial import arb_core
from apspecial import checks
from apspecial import constants
from apspecial import gamma
from apspecial.acb_core import acb_exp, acb_sin
from apspecial.apnum import Complex, cpx, real

from tests._test_checks import _check, _close


def _sqrt_pi(prec):
    return arb_core.arb_sqrt(constants.pi(prec))


def test_gamma_of_one_half_is_sqrt_pi():
    _close(gamma.arb_hypgeom_gamma(real("0.5", 40)), _sqrt_pi(60), 35)


def test_gamma_of_integers_is_factorial():
    _check(gamma.arb_hypgeom_gamma(real(5, 30)) == 24)
    _check(gamma.arb_hypgeom_gamma(real(1, 30)) == 1)
    _check(gamma.arb_hypgeom_gamma(real(21)) == 2432902008176640000)


def test_gamma_poles_and_exactness():
    with pytest.raises(checks.DomainError) as info:
        gamma.acb_hypgeom_gamma(real(0))
    _check(info.value.code == "gamma.ofZero")
    with pytest.raises(checks.DomainError) as info:
        gamma.acb_hypgeom_gamma(real(-3, 20))
    _check(info.value.code == "gamma.ofNegativeInteger")
    with pytest.raises(checks.InfiniteExpansionError) as info:
        gamma.acb_hypgeom_gamma(real(Fraction(1, 2)))
    _check(info.value.code == "gamma.infinitePrecision")


def test_gamma_recurrence_complex():
    z = cpx("2.3", "1.7", 40)
    _close(gamma.acb_hypgeom_gamma(z + 1), z * gamma.acb_hypgeom_gamma(z), 33)


def test_gamma_reflection_for_negative_argument():
    # gamma(-5/2) = -8 sqrt(pi) / 15
    value = gamma.arb_hypgeom_gamma(real("-2.5", 40))
    _close(value, -_sqrt_pi(60) * 8 / 15, 33)
    z = cpx("-3.25", "0.5", 40)
    product = gamma.acb_hypgeom_gamma(z) * gamma.acb_hypgeom_gamma(1 - z)
    pi = constants.pi(50)
    _close(product, Complex(pi) / acb_sin(pi * z), 30)


def test_gamma_near_pole_keeps_fewer_digits():
    value = gamma.arb_hypgeom_gamma(real("-2.000001", 30))
    _check(value.precision <= 25)
    _check(value.signum() < 0)
    _check(value.scale == 6)


def test_rgamma_vanishes_at_poles():
    _check(gamma.acb_hypgeom_rgamma(real(-2)).is_zero())
    _check(gamma.arb_hypgeom_rgamma(real(3, 20)) == Fraction(1, 2))


def test_lgamma_values_and_branch():
    _check(gamma.acb_hypgeom_lgamma(real(1, 20)).is_zero())
    _check(gamma.acb_hypgeom_lgamma(real(2, 20)).is_zero())
    _close(gamma.arb_hypgeom_lgamma(real(10, 40)), arb_core.arb_log(real(362880, 50)), 35)
    w = gamma.acb_hypgeom_lgamma(real("-2.5", 40))
    _close(w.imag, constants.pi(50) * -3, 35)
    _close(w.real, arb_core.arb_log(_sqrt_pi(60) * 8 / 15), 30)
    z = cpx(3, 4, 40)
    _close(acb_exp(gamma.acb_hypgeom_lgamma(z)), gamma.acb_hypgeom_gamma(z), 30)
    with pytest.raises(checks.DomainError) as info:
        gamma.acb_hypgeom_lgamma(real(-1))
    _check(info.value.code == "logGamma.ofNegativeInteger")


def test_digamma():
    _close(gamma.arb_hypgeom_digamma(real(1, 40)), -constants.euler_gamma(50), 35)
    # psi(z) = psi(z + 1) - 1 / z
    shifted = gamma.arb_hypgeom_digamma(real("0.7", 40)) + real(10, 40) / 3
    _close(gamma.arb_hypgeom_digamma(real("-0.3", 40)), shifted, 30)
    with pytest.raises(checks.DomainError) as info:
        gamma.acb_hypgeom_digamma(real(0))
    _check(info.value.code == "digamma.ofNonpositiveInteger")


def test_polygamma():
    pi = constants.pi(50)
    _close(gamma.arb_hypgeom_polygamma(1, real(1, 40)), pi * pi / 6, 33)
    _close(gamma.arb_hypgeom_polygamma(0, real(1, 40)), -constants.euler_gamma(50), 35)
    with pytest.raises(checks.DomainError) as info:
        gamma.acb_hypgeom_polygamma(-1, real(1, 40))
    _check(info.value.code == "polygamma.ofNegativeOrder")


def test_beta():
    _close(gamma.arb_hypgeom_beta(real(2, 30), real(3, 30)), real(1, 40) / 12, 27)
    _check(gamma.acb_hypgeom_beta(real(1), real(4)) * 4 == 1)
    _check(gamma.acb_hypgeom_beta(real(-2), real(1)) * 2 == -1)
    _check(gamma.acb_hypgeom_beta(real("2.5", 20), real("-2.5", 20)).is_zero())
    with pytest.raises(checks.DomainError) as info:
        gamma.acb_hypgeom_beta(real(-1), real(3))
    _check(info.value.code == "beta.infinite")


def test_pochhammer():
    _check(gamma.acb_hypgeom_rising(real(3), real(4)) == 360)
    _check(gamma.acb_hypgeom_rising(real(-3), real(2)) == 6)
    _check(gamma.acb_hypgeom_rising(real(-3), real(5)).is_zero())
    _check(gamma.acb_hypgeom_rising(real(7, 20), real(0)) == 1)
    half = real("0.5", 30)
    _close(gamma.arb_hypgeom_rising(half, half), 1 / _sqrt_pi(50), 26)
    # An exact base takes its digits from the order
    _close(gamma.arb_hypgeom_rising(real(Fraction(1, 2)), half), 1 / _sqrt_pi(50), 26)


def test_binomial():
    _check(gamma.acb_hypgeom_binomial(real(5), real(2)) == 10)
    _check(gamma.acb_hypgeom_binomial(real(-4), real(2)) == 10)
    _close(gamma.arb_hypgeom_binomial(real("2.5", 30), real(2, 30)), real(Fraction(15, 8)), 25)
    _check(gamma.acb_hypgeom_binomial(real("2.5", 30), real(-1, 30)).is_zero())


def test_harmonic_numbers():
    _close(gamma.arb_hypgeom_harmonic(real(10, 40)), real(7381, 40) / 2520, 33)
    _check(gamma.acb_hypgeom_harmonic(real(0)).is_zero())
    # H(3, 2) = 1 + 1/4 + 1/9
    _close(gamma.arb_hypgeom_harmonic(real(3, 40), real(2, 40)), real(49, 40) / 36, 30)
