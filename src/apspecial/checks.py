from __future__ import annotations

import builtins


class ApfloatError(ArithmeticError):
    """Base class of every numeric failure raised by the engine.

    ``code`` is a stable identifier for the failure case (for example
    ``"gamma.ofZero"``) that callers can match on instead of the message.
    """

    def __init__(self, message: str, code: str | None = None, *args):
        super().__init__(message)
        self.code = code
        self.args_detail = args

    def __str__(self) -> str:
        msg = super().__str__()
        if self.code is None:
            return msg
        return f"{msg} [{self.code}]"


class DomainError(ApfloatError):
    pass


class InfiniteExpansionError(ApfloatError):
    pass


class LossOfPrecisionError(ApfloatError):
    pass


class OverflowError(ApfloatError, builtins.OverflowError):
    pass


class ConvergenceError(DomainError):
    pass


def _debug_check(cond, msg: str, *args) -> None:
    if not cond:
        raise ValueError(msg.format(*args))


def check_in_set(val: str, allowed: tuple[str, ...], label: str) -> None:
    _debug_check(val in allowed, "{}: expected one of {}, got {}", label, allowed, val)


def check_radix(radix: int, label: str) -> None:
    _debug_check(isinstance(radix, int) and 2 <= radix <= 36, "{}: radix must be in 2..36, got {}", label, radix)


def check_positive(n: int, label: str) -> None:
    _debug_check(isinstance(n, int) and n > 0, "{}: expected a positive integer, got {}", label, n)


def check_nonnegative(n: int, label: str) -> None:
    _debug_check(isinstance(n, int) and n >= 0, "{}: expected a non-negative integer, got {}", label, n)


def check_integer(n, label: str) -> None:
    ok = isinstance(n, int) and not isinstance(n, bool)
    if not ok and hasattr(n, "is_integer") and hasattr(n, "radix"):
        ok = n.is_integer()
    _debug_check(ok, "{}: expected an integer, got {}", label, n)


def check_same_radix(x, y, label: str) -> None:
    _debug_check(x.radix == y.radix, "{}: radix mismatch {} != {}", label, x.radix, y.radix)


def domain(cond, message: str, code: str) -> None:
    if not cond:
        raise DomainError(message, code)


__all__ = [
    "ApfloatError",
    "DomainError",
    "InfiniteExpansionError",
    "LossOfPrecisionError",
    "OverflowError",
    "ConvergenceError",
    "check_in_set",
    "check_radix",
    "check_positive",
    "check_nonnegative",
    "check_integer",
    "check_same_radix",
    "domain",
]
