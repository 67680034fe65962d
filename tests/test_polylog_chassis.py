from fractions import Fraction

import pytest

from apspecial import checks
from apspecial import constants
from apspecial import polylog
from apspecial.apnum import Complex, cpx, real
from apspecial.arb_core import arb_log
from apspecial.dirichlet import arb_dirichlet_zeta
from apspecial.roots import arb_sqrt

from tests._test_checks import _check, _close

CATALAN = "0.9159655941772190150546035149"


def test_eulerian_numbers():
    _check(polylog.eulerian_numbers(0) == [1])
    _check(polylog.eulerian_numbers(1) == [1])
    _check(polylog.eulerian_numbers(3) == [1, 4, 1])
    _check(polylog.eulerian_numbers(5) == [1, 26, 66, 26, 1])


def test_nonpositive_order_is_rational():
    half = real(Fraction(1, 2))
    _check(polylog.acb_polylog(real(0), half) == 1)
    _check(polylog.acb_polylog(real(-1), half) == 2)
    _check(polylog.acb_polylog(real(-2), half) == 6)
    _check(polylog.acb_polylog(real(-3), half) == 26)
    _close(polylog.arb_polylog(real(-2), real("0.5", 40)), real(6), 38)


def test_order_one_is_a_logarithm():
    _close(polylog.arb_polylog(real(1), real("0.5", 40)), arb_log(real(2, 50)), 37)


def test_dilogarithm_values():
    pi2 = constants.pi(50) ** 2
    ln2 = arb_log(real(2, 50))
    _close(polylog.arb_polylog(real(2), real("0.5", 40)), pi2 / 12 - ln2 * ln2 / 2, 35)
    _close(polylog.arb_polylog(real(2), real(-1, 40)), -pi2 / 12, 35)
    w = polylog.acb_polylog(real(2), cpx(0, 1, 40))
    _close(w.real, -pi2 / 48, 35)
    _check(w.imag.to_string().startswith(CATALAN))


def test_trilogarithm_at_one_half():
    ln2 = arb_log(real(2, 50))
    expected = arb_dirichlet_zeta(real(3, 50)) * 7 / 8 - constants.pi(50) ** 2 * ln2 / 12 + ln2**3 / 6
    _close(polylog.arb_polylog(real(3), real("0.5", 40)), expected, 35)


def test_fractional_order_matches_power_series():
    z = Fraction(1, 4)
    expected = real(0, 60)
    for k in range(1, 80):
        expected = expected + real(z**k, 70) / arb_sqrt(real(k, 70))
    _close(polylog.arb_polylog(real("0.5", 40), real("0.25", 40)), expected, 35)


def test_value_at_one_is_zeta():
    _close(polylog.arb_polylog(real(3, 40), real(1)), arb_dirichlet_zeta(real(3, 50)), 37)
    with pytest.raises(checks.DomainError) as info:
        polylog.acb_polylog(real(1), cpx(1, 0))
    _check(info.value.code == "polylog.infinite")


def test_zero_argument_and_exact_errors():
    _check(polylog.acb_polylog(real(2, 20), Complex(real(0))).is_zero())
    with pytest.raises(checks.InfiniteExpansionError) as info:
        polylog.acb_polylog(real(Fraction(1, 2)), real(Fraction(1, 4)))
    _check(info.value.code == "polylog.infinitePrecision")
