import math

import pytest

from apspecial import checks
from apspecial import combinatorics
from apspecial.apnum import real
from apspecial.precision import EXACT

from tests._test_checks import _check


def test_factorials():
    _check(combinatorics.factorial_int(0) == 1)
    _check(combinatorics.factorial_int(20) == 2432902008176640000)
    _check(combinatorics.double_factorial_int(9) == 945)
    _check(combinatorics.double_factorial_int(10) == 3840)
    _check(combinatorics.double_factorial_int(0) == 1)
    _check(combinatorics.double_factorial(7) == 105)
    _check(combinatorics.double_factorial(31, 5).precision == 5)
    with pytest.raises(checks.DomainError) as info:
        combinatorics.factorial(-1)
    _check(info.value.code == "factorial.ofNegative")
    x = combinatorics.factorial(25, 10)
    _check(x.precision == 10)
    _check(combinatorics.factorial(real(5)) == 120)
    _check(combinatorics.factorial(5, radix=16).radix == 16)
    with pytest.raises(ValueError):
        combinatorics.factorial(real("2.5"))


@pytest.mark.parametrize(
    "n,k,expected",
    [
        (5, 2, 10),
        (5, 7, 0),
        (-1, 3, -1),
        (-4, 2, 10),
        (-3, -5, 6),
        (-3, -1, 0),
    ],
)
def test_binomial_with_negative_arguments(n, k, expected):
    _check(combinatorics.binomial_int(n, k) == expected)


def test_binomial_row():
    _check(list(combinatorics.binomials(5)) == [1, 5, 10, 10, 5, 1])
    _check(list(combinatorics.binomials(5, 3)) == [10, 5, 1])


def test_fibonacci_doubling_and_negative_index():
    _check([combinatorics.fibonacci_int(n) for n in range(10)] == [0, 1, 1, 2, 3, 5, 8, 13, 21, 34])
    _check(combinatorics.fibonacci_int(100) == 354224848179261915075)
    _check(combinatorics.fibonacci_int(-8) == -21)
    _check(combinatorics.fibonacci_int(-7) == 13)
    _check(combinatorics.fibonacci(30).precision == EXACT)


def test_stirling_first_kind():
    # s(6, k), k = 0..6
    row = [0, -120, 274, -225, 85, -15, 1]
    _check(combinatorics.stirling_s1s(6) == row)
    for k, value in enumerate(row):
        _check(combinatorics.stirling_s1_int(6, k) == value)
    _check(combinatorics.stirling_s1_int(10, 5) == -269325)
    _check(sum(abs(v) for v in combinatorics.stirling_s1s(9)) == math.factorial(9))


def test_stirling_second_kind():
    row = [0, 1, 31, 90, 65, 15, 1]
    _check(list(combinatorics.stirling_s2s(6)) == row)
    for k, value in enumerate(row):
        _check(combinatorics.stirling_s2_int(6, k) == value)
    _check(combinatorics.stirling_s2_int(10, 5) == 42525)
    _check(list(combinatorics.stirling_s2s(0)) == [1])
    _check(combinatorics.stirling_s2(7, 3) == 301)
    with pytest.raises(ValueError):
        combinatorics.stirling_s2_int(-1, 0)
