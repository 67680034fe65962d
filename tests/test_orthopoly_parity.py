import mpmath
import pytest

from apspecial import orthopoly
from apspecial.validation import parity_enabled

from tests._test_checks import _parity
pytestmark = pytest.mark.parity
if not parity_enabled():
    pytest.skip("Parity tests disabled. Set APSPECIAL_RUN_PARITY=1 to enable.", allow_module_level=True)


@pytest.mark.parametrize("nu, z", [("5", "1.5"), ("2.5", "0.75"), ("-1.5", ("1", "1"))])
def test_hermite(nu, z):
    _parity(orthopoly.acb_hypgeom_hermite_h, mpmath.hermite, (nu, z), 30)


@pytest.mark.parametrize("nu, m, z", [("4", "0", "1.5"), ("2.5", "1.5", "0.75"), ("3", "0.5", ("2", "1"))])
def test_laguerre(nu, m, z):
    _parity(orthopoly.acb_hypgeom_laguerre_l, mpmath.laguerre, (nu, m, z), 30)


@pytest.mark.parametrize("nu, mu, x", [("3", "0", "0.3"), ("2.5", "0.5", "-0.4"), ("4", "2", "0.75")])
def test_legendre(nu, mu, x):
    _parity(orthopoly.acb_hypgeom_legendre_p, mpmath.legenp, (nu, mu, x), 30, type=2)
    _parity(orthopoly.acb_hypgeom_legendre_q, mpmath.legenq, (nu, mu, x), 28, type=2)


@pytest.mark.parametrize("n, m", [(2, 1), (3, -2), (5, 5)])
def test_spherical_harmonics(n, m):
    _parity(orthopoly.acb_hypgeom_spherical_y, mpmath.spherharm, (n, m, "0.7", "1.9"), 30)


@pytest.mark.parametrize("nu, z", [("5", "0.3"), ("2.5", "0.75"), ("3", ("1", "2"))])
def test_chebyshev(nu, z):
    _parity(orthopoly.acb_hypgeom_chebyshev_t, mpmath.chebyt, (nu, z), 30)
    _parity(orthopoly.acb_hypgeom_chebyshev_u, mpmath.chebyu, (nu, z), 30)


def test_gegenbauer_and_jacobi():
    _parity(orthopoly.acb_hypgeom_gegenbauer_c, mpmath.gegenbauer, ("3.5", "0.25", "0.6"), 30)
    _parity(orthopoly.acb_hypgeom_jacobi_p, mpmath.jacobi, ("2.5", "0.5", "1.5", "0.3"), 30)
