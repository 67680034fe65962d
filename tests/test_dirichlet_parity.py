import mpmath
import pytest

from apspecial import dirichlet
from apspecial.validation import parity_enabled

from tests._test_checks import _parity
pytestmark = pytest.mark.parity
if not parity_enabled():
    pytest.skip("Parity tests disabled. Set APSPECIAL_RUN_PARITY=1 to enable.", allow_module_level=True)


@pytest.mark.parametrize("s", ["3.5", "-7.5", "0.75", ("0.5", "14"), ("2", "-30")])
def test_riemann_zeta(s):
    _parity(dirichlet.acb_dirichlet_zeta, mpmath.zeta, (s,), 32)


@pytest.mark.parametrize(
    "s, a",
    [
        ("2.5", "0.3"),
        (("1.5", "1"), "2.25"),
        ("-1.5", "0.75"),
        ("4", ("1", "1")),
    ],
)
def test_hurwitz_zeta(s, a):
    _parity(dirichlet.acb_dirichlet_hurwitz, mpmath.zeta, (s, a), 32)
