import mpmath
import pytest

from apspecial import polylog
from apspecial.validation import parity_enabled

from tests._test_checks import _parity
pytestmark = pytest.mark.parity
if not parity_enabled():
    pytest.skip("Parity tests disabled. Set APSPECIAL_RUN_PARITY=1 to enable.", allow_module_level=True)


@pytest.mark.parametrize(
    "nu, z",
    [
        ("2.5", "0.7"),
        ("3", ("0.5", "0.5")),
        ("1.5", "-0.8"),
        ("-2", "0.3"),
        ("2", ("-2", "1")),
        ("0.5", "0.25"),
    ],
)
def test_polylog(nu, z):
    _parity(polylog.acb_polylog, mpmath.polylog, (nu, z), 32)
