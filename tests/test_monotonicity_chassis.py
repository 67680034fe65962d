import mpmath
import pytest

from apspecial import arb_core
from apspecial import gamma
from apspecial import hypgeom

from tests._test_checks import _arg, _check, _reference, _to_mpmath

PRECISIONS = (10, 20, 40, 80)


def _correct_digits(value, reference) -> float:
    with mpmath.workdps(150):
        err = abs(_to_mpmath(value) - reference) / abs(reference)
        if err == 0:
            return 150.0
        return float(-mpmath.log10(err))


@pytest.mark.parametrize(
    "fn, mp_fn, args",
    [
        (arb_core.arb_exp, mpmath.exp, ("1.7",)),
        (arb_core.arb_exp, mpmath.exp, ("-116.2",)),
        (arb_core.arb_log, mpmath.log, ("7.3",)),
        (arb_core.arb_log, mpmath.log, ("0.000000000000000000000000000031",)),
        (gamma.arb_hypgeom_gamma, mpmath.gamma, ("3.7",)),
        (hypgeom.arb_hypgeom_2f1, mpmath.hyp2f1, ("0.5", "1.25", "2.5", "0.6")),
    ],
)
def test_more_precision_never_loses_correct_digits(fn, mp_fn, args):
    reference = _reference(mp_fn, *args, dps=150)
    previous = 0.0
    for prec in PRECISIONS:
        value = fn(*[_arg(v, prec) for v in args])
        got = _correct_digits(value, reference)
        _check(got >= previous, f"{prec} digits: {got:.1f} correct after {previous:.1f}")
        # Each result carries about the digits it is tagged with
        _check(got >= value.precision - 1.5, f"{prec} digits: {got:.1f} correct, tagged {value.precision}")
        previous = got
