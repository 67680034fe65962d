import mpmath
import pytest

from apspecial import lambertw
from apspecial.validation import parity_enabled

from tests._test_checks import _parity
pytestmark = pytest.mark.parity
if not parity_enabled():
    pytest.skip("Parity tests disabled. Set APSPECIAL_RUN_PARITY=1 to enable.", allow_module_level=True)


@pytest.mark.parametrize("z", ["1", "0.001", "-0.3", "1e50", ("-2", "3")])
def test_principal_branch(z):
    _parity(lambertw.acb_lambertw, mpmath.lambertw, (z,), 33)


@pytest.mark.parametrize("z, k", [("-0.2", -1), ("2", 1), (("1", "-1"), -3)])
def test_other_branches(z, k):
    _parity(lambda w: lambertw.acb_lambertw(w, k), lambda w: mpmath.lambertw(w, k), (z,), 32)
