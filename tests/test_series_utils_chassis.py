from fractions import Fraction
import math

import pytest

from apspecial import arb_core
from apspecial import checks
from apspecial import constants
from apspecial import precision
from apspecial import roots
from apspecial import series_utils
from apspecial.apnum import Complex, real

from tests._test_checks import _check, _close


def test_zero_f_zero_is_exp():
    s = series_utils.hypergeometric_series([], [], real(1, 40), 0)
    _close(s, constants.e(60), 37)


def test_cancelling_series_escalates():
    s = series_utils.hypergeometric_series([], [], real(-30, 30), 0)
    _close(s, arb_core.arb_exp(real(-30, 40)), 27)


def test_terminating_series_is_exact():
    # 1F1(-3; 1; 3) = L_3(3) = 1
    s = series_utils.hypergeometric_series([real(-3)], [real(1)], real(3), 0)
    _check(s == 1)
    _check(s.precision == precision.EXACT)


def test_exact_infinite_series_raises():
    with pytest.raises(checks.InfiniteExpansionError) as info:
        series_utils.hypergeometric_series([], [], real(1), 0)
    _check(info.value.code == "hypergeometric.infinitePrecision")


def test_asymptotic_series_stops_at_small_terms():
    x = Fraction(-1, 100)
    s = series_utils.asymptotic_series([real(1), real(1)], [], real(x, 20))
    expected = sum(math.factorial(n) * x**n for n in range(21))
    _close(s, real(expected, 40), 19)


def test_asymptotic_series_divergence_is_reported():
    with pytest.raises(checks.ConvergenceError) as info:
        series_utils.asymptotic_series([real(1), real(1)], [], real(Fraction(-1, 10), 10))
    _check(info.value.code == "hypergeometric.divergent")


def test_continued_fractions():
    golden = series_utils.continued_fraction(lambda n: 1, lambda n: 1, 10, 40)
    expected = (roots.arb_sqrt(real(5, 50)) - 1) / 2
    _close(golden.value, expected, 28)
    _check(golden.iterations > 10)
    silver = series_utils.continued_fraction(lambda n: 1, lambda n: 2, 10, 40)
    _close(silver.value, roots.arb_sqrt(real(2, 50)) - 1, 28)
    steady = series_utils.continued_fraction(lambda n: 1, lambda n: 2, 10, 40, stable_steps=2)
    _check(not steady.anomalous)
    _close(steady.value, silver.value, 28)


def test_newton_refine_converges_and_fails():
    # At two digits the residual of the seed cancels to zero
    x = series_utils.newton_refine(lambda x: x * x - 2, lambda x: 2 * x, real("1.4", 2), 40, "sqrt2")
    _check(x.precision == 40)
    _close(x, roots.arb_sqrt(real(2, 60)), 38)
    with pytest.raises(checks.ConvergenceError) as info:
        series_utils.newton_refine(lambda x: x * x + 1, lambda x: 2 * x, real("0.5", 10), 20, "noroot")
    _check(info.value.code == "newton.nonConvergent")


def test_with_escalation_reserves_reported_loss():
    calls = []

    def evaluate(extra):
        calls.append(extra)
        return extra, 5

    _check(series_utils.with_escalation(evaluate, "fixed loss") == 5)
    _check(calls == [0, 5])

    def growing(extra):
        return extra, extra + 1

    with pytest.raises(checks.LossOfPrecisionError):
        series_utils.with_escalation(growing, "growing loss")


def test_result_helpers():
    z = Complex(real(1, 10), real(1, 10))
    with pytest.raises(checks.DomainError) as info:
        series_utils.real_result(z, "f")
    _check(info.value.code == "f.complexResult")
    _check(series_utils.real_result(Complex(real(2, 10)), "f") == 2)
    _check(series_utils.finish(real(1, 30) / 3, 10).precision == 10)
    _check(series_utils.finish(real(1, 5) / 3, 10).precision == 5)
    _check(series_utils.reduce_margin(real(1, 30) / 3, 5).precision == 25)
    _check(series_utils.is_nonpositive_integer(Complex(real(-2))))
    _check(not series_utils.is_nonpositive_integer(Complex(real(2))))
    _check(series_utils.min_nonpositive_integer([Complex(real(-1)), Complex(real(-4)), Complex(real(3))]) == -4)
