import mpmath
import pytest

from apspecial import expint
from apspecial.validation import parity_enabled

from tests._test_checks import _parity
pytestmark = pytest.mark.parity
if not parity_enabled():
    pytest.skip("Parity tests disabled. Set APSPECIAL_RUN_PARITY=1 to enable.", allow_module_level=True)

POINTS = ["0.5", "3.75", "25", ("1", "2"), ("4", "-1")]


@pytest.mark.parametrize("z", POINTS)
@pytest.mark.parametrize(
    "fn, mp_fn",
    [
        (expint.acb_hypgeom_ei, mpmath.ei),
        (expint.acb_hypgeom_si, mpmath.si),
        (expint.acb_hypgeom_ci, mpmath.ci),
        (expint.acb_hypgeom_shi, mpmath.shi),
        (expint.acb_hypgeom_chi, mpmath.chi),
    ],
)
def test_exponential_and_trigonometric_integrals(fn, mp_fn, z):
    _parity(fn, mp_fn, (z,), 30)


@pytest.mark.parametrize("z", ["2", "0.5", "1000", ("3", "1")])
def test_logarithmic_integral(z):
    _parity(expint.acb_hypgeom_li, mpmath.li, (z,), 30)
