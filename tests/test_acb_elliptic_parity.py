import mpmath
import pytest

from apspecial import acb_elliptic
from apspecial import agm
from apspecial.validation import parity_enabled

from tests._test_checks import _parity
pytestmark = pytest.mark.parity
if not parity_enabled():
    pytest.skip("Parity tests disabled. Set APSPECIAL_RUN_PARITY=1 to enable.", allow_module_level=True)


@pytest.mark.parametrize("m", ["0.5", "0.999", "-3", "5", ("0.25", "0.75")])
def test_complete_elliptic_integrals(m):
    _parity(acb_elliptic.acb_elliptic_k, mpmath.ellipk, (m,), 33)
    _parity(acb_elliptic.acb_elliptic_e, mpmath.ellipe, (m,), 33)


@pytest.mark.parametrize("a, b", [("1", "2"), ("0.001", "1000")])
def test_real_agm(a, b):
    _parity(agm.arb_agm, mpmath.agm, (a, b), 35)
