import pytest

from apspecial import checks
from apspecial.agm import acb_agm, agm_step, arb_agm
from apspecial.apnum import Complex, cpx, real
from apspecial.roots import arb_sqrt

from tests._test_checks import _check, _close

# agm(1, sqrt(2)), the reciprocal of Gauss's constant
AGM_1_SQRT2 = "1.1981402347355922074399224922"


def test_agm_of_one_and_sqrt_two():
    g = arb_agm(real(1, 60), arb_sqrt(real(2, 60)))
    _check(g.to_string().startswith(AGM_1_SQRT2))


def test_agm_fixed_point():
    a = real(7, 40) / 3
    _check(arb_agm(a, a) == a)
    z = cpx(real(2, 30), real(-1, 30))
    _check(acb_agm(z, z) == z)


def test_agm_step_invariance_real():
    a = real(3, 50)
    b = real(11, 50) / 7
    t, g = agm_step(a, b)
    _close(arb_agm(a, b), arb_agm(t, g), 47)


def test_agm_step_invariance_complex():
    a = cpx(real(1, 50), real(2, 50))
    b = cpx(real(-3, 50), real("0.5", 50))
    t, g = agm_step(a, b)
    _close(acb_agm(a, b), acb_agm(t, g), 45)


def test_agm_negative_pair_and_opposites():
    a = real(-2, 30)
    b = real(-5, 30)
    _close(arb_agm(a, b), -arb_agm(-a, -b), 29)
    z = cpx(real(1, 20), real(1, 20))
    _check(acb_agm(z, -z).is_zero())


def test_agm_errors():
    with pytest.raises(checks.DomainError) as info:
        arb_agm(real(1, 10), real(-1, 10))
    _check(info.value.code == "agm.complex")
    with pytest.raises(checks.InfiniteExpansionError) as info:
        arb_agm(real(1), real(2))
    _check(info.value.code == "agm.infinitePrecision")
    _check(acb_agm(Complex(real(0)), cpx(1, 1, 10)).is_zero())


def test_agm_consumer_sees_shrinking_terms():
    terms = []
    arb_agm(real(1, 40), real("0.5", 40), terms.append)
    _check(len(terms) >= 3)
    _check(terms[-1].scale < terms[0].scale)
