from fractions import Fraction

import pytest

from apspecial import checks
from apspecial import roots
from apspecial.apnum import Complex, cpx, real
from apspecial.precision import EXACT

from tests._test_checks import _check, _close

SQRT2_50 = "1.4142135623730950488016887242096980785696718753769"


def test_sqrt_two_digits():
    s = roots.arb_sqrt(real(2, 60))
    _check(s.precision == 60)
    _check(s.to_string().startswith(SQRT2_50))


@pytest.mark.parametrize("shift", [-5000, -400, -300, -30, 0, 1, 30, 300, 309, 400, 5000])
def test_sqrt_squares_back_across_magnitudes(shift):
    x = (real(3, 40) / 7).scaled(shift)
    s = roots.arb_sqrt(x)
    _close(s * s, x, 38)


@pytest.mark.parametrize("radix", [2, 3, 16, 36])
def test_roots_in_other_radices(radix):
    x = real(5, 50, radix)
    for n in (2, 3, 7):
        r = roots.arb_root(x, n)
        _close(r**n, x, 45)


def test_exact_roots():
    _check(roots.arb_root(real(27), 3) == 3)
    _check(roots.arb_root(real(-8), 3) == -2)
    _check(roots.arb_sqrt(real(Fraction(1, 4))) == Fraction(1, 2))
    _check(roots.arb_sqrt(real(Fraction(1, 4))).precision == EXACT)
    with pytest.raises(checks.InfiniteExpansionError):
        roots.arb_sqrt(real(2))


def test_root_error_codes():
    with pytest.raises(checks.DomainError) as info:
        roots.arb_root(real(2, 10), 0)
    _check(info.value.code == "root.zeroth")
    with pytest.raises(checks.DomainError) as info:
        roots.arb_inverse_root(real(0), 2)
    _check(info.value.code == "inverseRoot.ofZero")
    with pytest.raises(checks.DomainError) as info:
        roots.arb_sqrt(real(-4, 10))
    _check(info.value.code == "root.ofNegative")
    with pytest.raises(checks.DomainError) as info:
        roots.acb_inverse_root(cpx(1, 1, 10), 0)
    _check(info.value.code == "inverseRoot.zeroth")


def test_sqrt_of_negative_real_is_imaginary():
    w = roots.acb_sqrt(cpx(-4, 0, 20))
    _check(w.real.is_zero())
    _close(w.imag, real(2), 18)


def test_complex_root_branches():
    z = cpx(real(1, 40), real(1, 40))
    for k in range(5):
        r = roots.acb_root(z, 5, k)
        _close(r**5, z, 36)
    # principal branch has the smallest argument
    principal = roots.acb_root(z, 5)
    _check(principal.real.signum() > 0)
    _check(principal.imag.signum() > 0)


def test_inverse_root_times_root_is_one():
    z = cpx(real(-3, 40), real(2, 40))
    product = roots.acb_inverse_root(z, 2) * roots.acb_sqrt(z)
    _close(product, Complex(real(1)), 37)


def test_all_roots_of_eight():
    out = roots.acb_all_roots(cpx(8, 0, 30), 3)
    _check(len(out) == 3)
    _close(out[0], Complex(real(2)), 28)
    for r in out:
        _close(r**3, Complex(real(8)), 27)
    _check(out[1].imag.signum() > 0)
    _check(out[2].imag.signum() < 0)


def test_newton_schedule_precising_index():
    iterations, precising = roots.newton_schedule(16, 1000)
    _check(iterations == 6)
    _check(0 <= precising <= iterations)
    _check(roots.newton_schedule(16, 10) == (0, 0))
