from fractions import Fraction

import mpmath
import pytest

from apspecial import checks
from apspecial import constants
from apspecial import dirichlet
from apspecial.acb_core import acb_pow
from apspecial.apnum import cpx, real

from tests._test_checks import _agrees, _check, _close, _reference

APERY_50 = "1.2020569031595942853997381615114499907649862923404"


def test_zeta_two_is_pi_squared_over_six():
    pi = constants.pi(60)
    _close(dirichlet.arb_dirichlet_zeta(real(2, 50)), pi * pi / 6, 48)


def test_zeta_three():
    _check(dirichlet.arb_dirichlet_zeta(real(3, 60)).to_string().startswith(APERY_50[:48]))


def test_zeta_special_values():
    _check(dirichlet.arb_dirichlet_zeta(real(0)) == Fraction(-1, 2))
    _close(dirichlet.arb_dirichlet_zeta(real(-1, 20)), real(-1, 30) / 12, 18)
    _close(dirichlet.arb_dirichlet_zeta(real(-3, 20)), real(1, 30) / 120, 18)
    _check(dirichlet.arb_dirichlet_zeta(real(-2, 20)).is_zero())
    _check(dirichlet.arb_dirichlet_zeta(real(-10)).is_zero())


def test_zeta_errors():
    with pytest.raises(checks.DomainError) as info:
        dirichlet.acb_dirichlet_zeta(real(1, 10))
    _check(info.value.code == "zeta.pole")
    with pytest.raises(checks.InfiniteExpansionError) as info:
        dirichlet.acb_dirichlet_zeta(real(2))
    _check(info.value.code == "zeta.infinitePrecision")


def test_zeta_of_noninteger_and_complex_arguments():
    # zeta(1/2) = -1.4603545088095868128894991525152980125...
    _check(dirichlet.arb_dirichlet_zeta(real("0.5", 40)).to_string().startswith("-1.46035450880958681288949915251529801"))
    s = cpx("0.5", "14.134725141734693790457251983562470270784257115699", 50)
    _check(dirichlet.acb_dirichlet_zeta(s).scale < -40)


def test_zeta_functional_equation_region():
    # zeta(-1/2) = -0.2078862249773545660...
    _check(dirichlet.arb_dirichlet_zeta(real("-0.5", 30)).to_string().startswith("-0.2078862249773545660"))


def test_hurwitz_zeta_shift_and_half():
    s = cpx(3, 1, 40)
    a = cpx("0.75", "0.5", 40)
    difference = dirichlet.acb_dirichlet_hurwitz(s, a) - dirichlet.acb_dirichlet_hurwitz(s, a + 1)
    _close(difference, acb_pow(a, -s), 33)
    pi = constants.pi(60)
    _close(dirichlet.arb_dirichlet_hurwitz(real(2, 40), real("0.5", 40)), pi * pi / 2, 37)


def test_hurwitz_special_values():
    _check(dirichlet.acb_dirichlet_hurwitz(real(0), real(Fraction(1, 4))) * 4 == 1)
    # zeta(-1, -2) = -B_2(-2) / 2
    _close(dirichlet.arb_dirichlet_hurwitz(real(-1, 20), real(-2, 20)), real(-37, 30) / 12, 17)
    with pytest.raises(checks.DomainError) as info:
        dirichlet.acb_dirichlet_hurwitz(real(2, 10), real(-1, 10))
    _check(info.value.code == "zeta.pole")
    with pytest.raises(checks.DomainError):
        dirichlet.acb_dirichlet_hurwitz(real(1, 10), real(2, 10))


def test_hurwitz_next_to_a_nonpositive_integer():
    s = "-1.00000000000000000001"
    value = dirichlet.arb_dirichlet_hurwitz(real(s, 60), real("0.3", 60))
    _check(value.precision >= 55)
    _agrees(value, _reference(mpmath.zeta, s, "0.3"), 55)
