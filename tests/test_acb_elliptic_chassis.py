import pytest

from apspecial import acb_elliptic
from apspecial import checks
from apspecial import constants
from apspecial.apnum import Complex, cpx, real
from apspecial.roots import arb_sqrt

from tests._test_checks import _check, _close

K_HALF = "1.85407467730137191843385034719526004621"
E_HALF = "1.35064388104767550252017473533872584134"


def test_values_at_one_half():
    _check(acb_elliptic.arb_elliptic_k(real("0.5", 50)).to_string().startswith(K_HALF))
    _check(acb_elliptic.arb_elliptic_e(real("0.5", 50)).to_string().startswith(E_HALF))


def test_small_parameter_approaches_pi_over_two():
    m = real("1e-30", 40)
    half_pi = constants.pi(50) / 2
    _close(acb_elliptic.arb_elliptic_k(m), half_pi, 29)
    _close(acb_elliptic.arb_elliptic_e(m), half_pi, 29)


@pytest.mark.parametrize("m", [cpx("0.3", 0, 40), cpx("0.9", 0, 40), cpx("0.25", "0.75", 40)])
def test_legendre_relation(m):
    mc = 1 - m
    k = acb_elliptic.acb_elliptic_k(m)
    e = acb_elliptic.acb_elliptic_e(m)
    kc = acb_elliptic.acb_elliptic_k(mc)
    ec = acb_elliptic.acb_elliptic_e(mc)
    _close(e * kc + ec * k - k * kc, Complex(constants.pi(50) / 2), 33)


def test_parameters_off_the_unit_interval():
    k_half = acb_elliptic.arb_elliptic_k(real("0.5", 50))
    expected = k_half / arb_sqrt(real(2, 50))
    _close(acb_elliptic.arb_elliptic_k(real(-1, 40)), expected, 37)
    k2 = acb_elliptic.acb_elliptic_k(cpx(2, 0, 40))
    _close(k2.real, expected, 37)
    _close(k2.imag, -expected, 37)
    with pytest.raises(checks.DomainError) as info:
        acb_elliptic.arb_elliptic_k(real(2, 40))
    _check(info.value.code == "ellipticK.complexResult")


def test_complex_parameter_conjugate_symmetry():
    m = cpx("0.25", "0.75", 40)
    _close(acb_elliptic.acb_elliptic_k(m.conj()), acb_elliptic.acb_elliptic_k(m).conj(), 36)
    _close(acb_elliptic.acb_elliptic_e(m.conj()), acb_elliptic.acb_elliptic_e(m).conj(), 36)


def test_special_parameters():
    _check(acb_elliptic.acb_elliptic_e(cpx(1, 0)) == 1)
    with pytest.raises(checks.DomainError) as info:
        acb_elliptic.acb_elliptic_k(cpx(1, 0))
    _check(info.value.code == "ellipticK.ofOne")
    with pytest.raises(checks.InfiniteExpansionError) as info:
        acb_elliptic.acb_elliptic_e(Complex(real(0)))
    _check(info.value.code == "ellipticE.infinitePrecision")
