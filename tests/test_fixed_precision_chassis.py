from fractions import Fraction

import pytest

from apspecial import constants
from apspecial.apnum import Complex, Float, real
from apspecial.fixed_precision import FixedPrecision
from apspecial.roots import arb_sqrt

from tests._test_checks import _check, _close

J0_ONE = "0.76519768655796655144971752610266"


@pytest.fixture
def fp():
    return FixedPrecision(40)


def test_gamma_of_one_half(fp):
    g = fp.gamma("0.5")
    _check(isinstance(g, Float))
    _check(g.precision == 40)
    _close(g, arb_sqrt(constants.pi(50)), 38)


def test_zeta_and_lambert_w(fp):
    _close(fp.zeta(2), constants.pi(50) ** 2 / 6, 38)
    _check(fp.w(0).is_zero())
    _close(fp.w(fp.e()), real(1), 38)


def test_results_carry_the_configured_precision(fp):
    for value in (fp.exp(1), fp.log(3), fp.sin(100), fp.bessel_j(0, 1), fp.erf("0.5")):
        _check(value.precision == 40)
    _check(fp.bessel_j(0, 1).to_string().startswith(J0_ONE))


def test_tiny_argument_of_odd_function_is_returned(fp):
    _check(fp.sin("1e-50") == Fraction(1, 10**50))
    _check(fp.tanh("1e-45") == Fraction(1, 10**45))


def test_complex_results(fp):
    root = fp.sqrt(-4)
    _check(isinstance(root, Complex))
    _check(root.real.is_zero())
    _close(root.imag, real(2), 39)
    _check(isinstance(fp.exp(complex(0, 1)), Complex))


def test_arithmetic(fp):
    _check(fp.add(1, 2) == 3)
    _check(fp.divide(1, 3).precision == 40)
    _check(fp.pow(2, 10) == 1024)
    _close(fp.pow(2, "0.5"), arb_sqrt(real(2, 50)), 38)
    _check(fp.product(1, 2, 3, 4) == 24)
    _check(fp.sum(1, 2, 3, 4) == 10)
    _check(fp.negate(5) == -5)


def test_constants_in_another_radix():
    hex_fp = FixedPrecision(20, 16)
    _check(hex_fp.pi().to_string().startswith("3.243f6a8885"))
    _check(hex_fp.one() == 1)
    _check(hex_fp.radix == 16 and hex_fp.precision == 20)


def test_methods_are_named_after_their_function():
    _check(FixedPrecision.gamma.__name__ == "gamma")
    _check(FixedPrecision.bessel_k.__qualname__ == "FixedPrecision.bessel_k")
    _check(repr(FixedPrecision(12)) == "FixedPrecision(precision=12, radix=10)")


def test_invalid_configuration():
    with pytest.raises(ValueError):
        FixedPrecision(0)
    with pytest.raises(ValueError):
        FixedPrecision(10, 40)
