import mpmath
import pytest

from apspecial import acb_core
from apspecial.validation import parity_enabled

from tests._test_checks import _parity
pytestmark = pytest.mark.parity
if not parity_enabled():
    pytest.skip("Parity tests disabled. Set APSPECIAL_RUN_PARITY=1 to enable.", allow_module_level=True)

POINTS = [("1.5", "-2"), ("-0.25", "3"), ("0.125", "0.5")]

FUNCTIONS = [
    (acb_core.acb_exp, mpmath.exp),
    (acb_core.acb_log, mpmath.log),
    (acb_core.acb_sqrt, mpmath.sqrt),
    (acb_core.acb_sin, mpmath.sin),
    (acb_core.acb_cos, mpmath.cos),
    (acb_core.acb_tan, mpmath.tan),
    (acb_core.acb_sinh, mpmath.sinh),
    (acb_core.acb_cosh, mpmath.cosh),
    (acb_core.acb_tanh, mpmath.tanh),
    (acb_core.acb_asin, mpmath.asin),
    (acb_core.acb_acos, mpmath.acos),
    (acb_core.acb_atan, mpmath.atan),
    (acb_core.acb_asinh, mpmath.asinh),
    (acb_core.acb_acosh, mpmath.acosh),
    (acb_core.acb_atanh, mpmath.atanh),
]


@pytest.mark.parametrize("z", POINTS)
@pytest.mark.parametrize("fn, mp_fn", FUNCTIONS)
def test_complex_elementary_functions(fn, mp_fn, z):
    _parity(fn, mp_fn, (z,), 33)


def test_complex_power():
    _parity(acb_core.acb_pow, mpmath.power, (("2", "1"), ("0.5", "-1.5")), 34)
