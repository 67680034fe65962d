from fractions import Fraction

import mpmath
import pytest

from apspecial import arb_core
from apspecial import checks
from apspecial import constants
from apspecial.apnum import one, real

from tests._test_checks import _agrees, _check, _close, _reference

LOG2_50 = "0.69314718055994530941723212145817656807550013436025"


def test_exp_of_one_is_e():
    x = arb_core.arb_exp(real(1, 60))
    _check(x.precision == 60)
    _close(x, constants.e(80), 58)


def test_log_two_digits():
    _check(arb_core.arb_log(real(2, 60)).to_string().startswith(LOG2_50))


@pytest.mark.parametrize(
    "x",
    [
        real(7, 40) / 3,
        real(12345678, 40),
        (real(1, 40) / 3).scaled(-50),
        (real(1, 40) / 3).scaled(300),
        real("0.9999999", 40),
    ],
)
def test_exp_log_round_trip(x):
    _close(arb_core.arb_exp(arb_core.arb_log(x)), x, 35)


@pytest.mark.parametrize("x", ["-116.2", "-300.25", "250.5"])
def test_exp_of_large_arguments_keeps_its_tagged_digits(x):
    value = arb_core.arb_exp(real(x, 40))
    _check(value.precision == 40 + 1 - real(x).scale)
    _agrees(value, _reference(mpmath.exp, x), value.precision - 1)


def test_log_of_tiny_numbers_gains_leading_digits():
    x = real(1, 40) / real("3e50", 40)
    value = arb_core.arb_log(x)
    _check(value.precision > 40)
    with mpmath.workdps(80):
        reference = mpmath.log(1 / mpmath.mpf("3e50"))
    _agrees(value, reference, 40)
    _close(arb_core.arb_exp(value), x, 37)


def test_exp_precision_tracks_argument_scale():
    _check(arb_core.arb_exp(real(100, 50)).precision == 48)
    with pytest.raises(checks.LossOfPrecisionError) as info:
        arb_core.arb_exp(real(10**60, 20))
    _check(info.value.code == "real.lossOfPrecision")


def test_more_precision_never_means_fewer_correct_digits():
    reference = constants.e(120)
    previous = 0
    for prec in (10, 20, 40, 80):
        got = arb_core.arb_exp(real(1, prec)).equal_digits(reference)
        _check(got >= previous)
        previous = got


def test_log_errors_and_special_values():
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_log(real(0))
    _check(info.value.code == "log.ofZero")
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_log(real(-1, 10))
    _check(info.value.code == "log.ofNegative")
    _check(arb_core.arb_log(real(1, 10)).is_zero())
    with pytest.raises(checks.InfiniteExpansionError):
        arb_core.arb_log(real(2))


def test_log_with_base():
    _close(arb_core.arb_log(real(8, 30), real(2, 30)), real(3), 28)
    _close(arb_core.arb_log(real(1000, 30), real(10, 30)), real(3), 28)


def test_pow_special_cases():
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_pow(real(0), real(0))
    _check(info.value.code == "pow.zeroToZero")
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_pow(real(0), real(-2, 10))
    _check(info.value.code == "pow.zeroToNegative")
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_pow(real(-2, 10), real("0.5", 10))
    _check(info.value.code == "pow.negativeToNonInteger")
    _check(arb_core.arb_pow(real(5, 10), real(0)) == 1)
    _check(arb_core.arb_pow(real(1, 10), real(7, 10) / 3) == 1)
    _check(arb_core.arb_pow(real(-2, 10), real(3)) == -8)


def test_pow_half_is_sqrt():
    _close(arb_core.arb_pow(real(2, 50), real("0.5", 50)), arb_core.arb_sqrt(real(2, 50)), 47)


def test_trig_pythagoras():
    for x in (real(7, 50) / 3, real(-12, 50), real(10**20, 60)):
        s = arb_core.arb_sin(x)
        c = arb_core.arb_cos(x)
        _close(s * s + c * c, one(10), 30)


def test_trig_special_angles():
    pi = constants.pi(50)
    _close(arb_core.arb_sin(pi / 6), real(Fraction(1, 2)), 47)
    _close(arb_core.arb_cos(pi / 3), real(Fraction(1, 2)), 47)
    _close(arb_core.arb_tan(pi / 4), real(1), 47)
    _check(arb_core.arb_cos(real(0)) == 1)


def test_inverse_trig_round_trips():
    x = real(3, 40) / 7
    _close(arb_core.arb_asin(arb_core.arb_sin(x)), x, 36)
    _close(arb_core.arb_acos(arb_core.arb_cos(x)), x, 36)
    _close(arb_core.arb_atan(arb_core.arb_tan(x)), x, 36)
    _close(arb_core.arb_asinh(arb_core.arb_sinh(x)), x, 36)
    _close(arb_core.arb_atanh(arb_core.arb_tanh(x)), x, 36)
    y = real(5, 40) / 2
    _close(arb_core.arb_acosh(arb_core.arb_cosh(y)), y, 36)


def test_inverse_trig_domains():
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_asin(real(2, 10))
    _check(info.value.code == "asin.outOfRange")
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_acosh(real("0.5", 10))
    _check(info.value.code == "acosh.outOfRange")
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_atanh(real(1, 10))
    _check(info.value.code == "atanh.outOfRange")
    _close(arb_core.arb_acos(real(0), 30), constants.pi(40) / 2, 29)


def test_atan2_quadrants():
    pi = constants.pi(40)
    one_ = real(1, 40)
    _close(arb_core.arb_atan2(one_, one_), pi / 4, 37)
    _close(arb_core.arb_atan2(one_, -one_), pi * 3 / 4, 37)
    _close(arb_core.arb_atan2(-one_, -one_), -pi * 3 / 4, 37)
    _close(arb_core.arb_atan2(real(0), -one_), pi, 38)
    with pytest.raises(checks.DomainError) as info:
        arb_core.arb_atan2(real(0), real(0))
    _check(info.value.code == "atan2.ofZero")


def test_hyperbolic_identities():
    x = real(9, 40) / 4
    s = arb_core.arb_sinh(x)
    c = arb_core.arb_cosh(x)
    _close(c * c - s * s, one(10), 34)
    _close(arb_core.arb_tanh(x), s / c, 37)


def test_sinc_sigmoid_fmod():
    _check(arb_core.arb_sinc(real(0)) == 1)
    _check(arb_core.arb_logistic_sigmoid(real(0)) == Fraction(1, 2))
    x = real(3, 40) / 2
    total = arb_core.arb_logistic_sigmoid(x) + arb_core.arb_logistic_sigmoid(-x)
    _close(total, one(10), 37)
    _check(arb_core.arb_fmod(real(7), real(3)) == 1)
    _check(arb_core.arb_fmod(real(-7), real(3)) == -1)
    _check(arb_core.arb_abs(real(-4, 10)) == 4)
