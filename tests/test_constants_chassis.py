import math
import threading

import mpmath
import pytest

from apspecial import checks
from apspecial import constants
from apspecial.precision import EXACT

from tests._test_checks import _agrees, _check, _close

PI_50 = "3.14159265358979323846264338327950288419716939937510"
E_50 = "2.71828182845904523536028747135266249775724709369995"
EULER_50 = "0.57721566490153286060651209008240243104215933593992"


def test_pi_leading_digits():
    _check(constants.pi(60).to_string().startswith(PI_50))
    _check(constants.pi(1).to_string() == "3")


def test_pi_thousand_digits_is_stable_under_more_precision():
    p1000 = constants.pi(1000)
    _check(p1000.precision == 1000)
    _check(p1000.to_string().startswith(PI_50))
    _close(p1000, constants.pi(1100), 999)


def test_pi_thousand_digits_match_reference():
    with mpmath.workdps(1030):
        reference = +mpmath.pi
    _agrees(constants.pi(1000), reference, 999)
    _agrees(constants.pi(1000, 16), reference, int(1000 * math.log10(16)) - 2)


def test_e_and_euler_leading_digits():
    _check(constants.e(60).to_string().startswith(E_50))
    _check(constants.euler_gamma(60).to_string().startswith(EULER_50))


def test_constants_in_other_radices():
    _check(constants.pi(30, 16).to_string().startswith("3.243f6a8885a308d3"))
    _check(constants.pi(40, 2).to_string().startswith("11.00100100001111110110101010001"))
    _check(constants.e(20, 16).to_string().startswith("2.b7e151628aed2a6"))


def test_log_radix():
    _check(constants.log_radix(40, 10).to_string().startswith("2.302585092994045684017991454684"))


@pytest.mark.parametrize("radix", [2, 3, 5, 6, 7, 10, 12, 16, 36])
def test_log_radix_in_every_radix(radix):
    # Radices below their nearest power of two sum a negative atanh series
    got = constants.log_radix(60, radix).to_double()
    _check(abs(got - math.log(radix)) < 1e-15 * math.log(radix))


def test_cache_never_returns_lower_precision():
    constants.clear_cache()
    low = constants.pi(20)
    high = constants.pi(200)
    _check(high.precision == 200)
    _check(constants.pi(20).precision == 20)
    _close(low, high, 19)


def test_concurrent_requests_share_one_computation():
    constants.clear_cache()
    results = []

    def worker():
        results.append(constants.euler_gamma(300, 10))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    _check(len(results) == 8)
    for r in results:
        _check(r == results[0])
        _check(r.precision == 300)


def test_infinite_precision_constant_raises():
    with pytest.raises(checks.InfiniteExpansionError) as info:
        constants.pi(EXACT)
    _check(info.value.code == "pi.infinitePrecision")
