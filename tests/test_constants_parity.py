import mpmath
import pytest

from apspecial import constants
from apspecial.validation import parity_enabled

from tests._test_checks import _agrees
pytestmark = pytest.mark.parity
if not parity_enabled():
    pytest.skip("Parity tests disabled. Set APSPECIAL_RUN_PARITY=1 to enable.", allow_module_level=True)


def _mp(name: str, dps: int):
    with mpmath.workdps(dps):
        return +getattr(mpmath, name)


def test_pi_to_a_thousand_digits():
    _agrees(constants.pi(1000), _mp("pi", 1050), 998)


def test_e_and_euler_constant():
    _agrees(constants.e(500), _mp("e", 550), 498)
    _agrees(constants.euler_gamma(300), _mp("euler", 350), 298)


def test_log_radix():
    with mpmath.workdps(250):
        ref = mpmath.log(10)
    _agrees(constants.log_radix(200, 10), ref, 198)


def test_pi_in_binary_and_hexadecimal():
    # 300 bits and 200 hex digits hold about 90 and 240 decimals
    _agrees(constants.pi(300, 2), _mp("pi", 120), 88)
    _agrees(constants.pi(200, 16), _mp("pi", 280), 238)
