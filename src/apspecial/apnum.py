from __future__ import annotations

from fractions import Fraction
from functools import lru_cache, total_ordering
from math import ceil, gcd, log

from . import checks
from . import precision
from .precision import EXACT, EXTRA_PRECISION

ZERO_SCALE = -(1 << 62)

_DIGIT_CHARS = "0123456789abcdefghijklmnopqrstuvwxyz"
_PARSE_CHUNK = 1000
_FORMAT_CHUNK = 64


@lru_cache(maxsize=1024)
def _pow(radix: int, n: int) -> int:
    return radix**n


@lru_cache(maxsize=64)
def _bits_per_digit(radix: int) -> float:
    return log(radix) / log(2)


def _power_of_two_exponent(radix: int) -> int:
    return radix.bit_length() - 1 if radix & (radix - 1) == 0 else 0


def ndigits(m: int, radix: int) -> int:
    """Number of radix digits in ``|m|``; zero has no digits."""
    if m < 0:
        m = -m
    if m == 0:
        return 0
    bits = m.bit_length()
    k = _power_of_two_exponent(radix)
    if k:
        return (bits + k - 1) // k
    d = max(1, int((bits - 1) / _bits_per_digit(radix)))
    while _pow(radix, d) <= m:
        d += 1
    while d > 1 and _pow(radix, d - 1) > m:
        d -= 1
    return d


def _round_mantissa(man: int, exp: int, prec: int, radix: int, nd: int) -> tuple[int, int, int]:
    if nd <= prec:
        return man, exp, nd
    k = nd - prec
    p = _pow(radix, k)
    q, r = divmod(-man if man < 0 else man, p)
    if 2 * r >= p:
        q += 1
        if q == _pow(radix, prec):
            q = _pow(radix, prec - 1)
            k += 1
    return (-q if man < 0 else q), exp + k, prec


def _strip_zeros(man: int, exp: int, radix: int) -> tuple[int, int]:
    if man == 0:
        return 0, 0
    while man % radix == 0:
        man //= radix
        exp += 1
    return man, exp


def _digits_to_int(s: str, radix: int) -> int:
    if len(s) <= _PARSE_CHUNK:
        return int(s, radix) if s else 0
    half = len(s) // 2
    return _digits_to_int(s[:half], radix) * _pow(radix, len(s) - half) + _digits_to_int(s[half:], radix)


def _int_to_digits(n: int, radix: int, width: int = 0) -> str:
    if n < _pow(radix, _FORMAT_CHUNK):
        out = []
        while n:
            n, r = divmod(n, radix)
            out.append(_DIGIT_CHARS[r])
        s = "".join(reversed(out))
        return s.rjust(width, "0") if width else (s or "0")
    nd = ndigits(n, radix)
    low = nd // 2
    hi, lo = divmod(n, _pow(radix, low))
    s = _int_to_digits(hi, radix, max(0, width - low)) + _int_to_digits(lo, radix, low)
    return s


@total_ordering
class Float:
    """Immutable radix floating-point value ``man * radix**exp`` with a tracked precision.

    ``precision`` counts the trustworthy significant digits, or is ``EXACT`` for an
    error-free value. Zero is always exact.
    """

    __slots__ = ("_man", "_exp", "_prec", "_radix", "_nd")

    def __init__(self, man: int = 0, exp: int = 0, prec: int = EXACT, radix: int = 10):
        if man == 0 or prec <= 0:
            self._man = 0
            self._exp = 0
            self._prec = EXACT
            self._nd = 0
        else:
            nd = ndigits(man, radix)
            if prec < EXACT:
                man, exp, nd = _round_mantissa(man, exp, prec, radix, nd)
            self._man = man
            self._exp = exp
            self._prec = prec
            self._nd = nd
        self._radix = radix

    @property
    def man(self) -> int:
        return self._man

    @property
    def exp(self) -> int:
        return self._exp

    @property
    def precision(self) -> int:
        return self._prec

    @property
    def radix(self) -> int:
        return self._radix

    @property
    def scale(self) -> int:
        if self._man == 0:
            return ZERO_SCALE
        return self._exp + self._nd

    @property
    def size(self) -> int:
        return self._nd

    @property
    def real(self) -> Float:
        return self

    @property
    def imag(self) -> Float:
        return zero(self._radix)

    def signum(self) -> int:
        return (self._man > 0) - (self._man < 0)

    def is_zero(self) -> bool:
        return self._man == 0

    def is_real(self) -> bool:
        return True

    def is_exact(self) -> bool:
        return self._prec >= EXACT

    def is_integer(self) -> bool:
        if self._man == 0 or self._exp >= 0:
            return True
        if self.scale <= 0:
            return False
        return self._man % _pow(self._radix, -self._exp) == 0

    def _new(self, man: int, exp: int, prec: int) -> Float:
        return Float(man, exp, prec, self._radix)

    def with_precision(self, prec: int) -> Float:
        checks.check_positive(prec, "Float.with_precision")
        if self._man == 0 or prec == self._prec:
            return self
        return self._new(self._man, self._exp, prec)

    def ensure_precision(self, prec: int) -> Float:
        return self.with_precision(prec) if prec > self._prec else self

    def limit_precision(self, prec: int) -> Float:
        return self.with_precision(prec) if prec < self._prec else self

    def extend_precision(self, extra: int = EXTRA_PRECISION) -> Float:
        return self.with_precision(precision.extend(self._prec, extra)) if self._man else self

    def set_precision(self, prec: int) -> Float:
        return self.with_precision(prec)

    def reduce_or_zero(self, margin: int) -> Float:
        if self._prec >= EXACT:
            return self
        prec = self._prec - margin
        if prec <= 0:
            return zero(self._radix)
        return self.with_precision(prec)

    def scaled(self, n: int) -> Float:
        """Multiply by ``radix**n`` without touching the precision."""
        if self._man == 0:
            return self
        return self._new(self._man, self._exp + n, self._prec)

    def conj(self) -> Float:
        return self

    def __neg__(self) -> Float:
        if self._man == 0:
            return self
        return self._new(-self._man, self._exp, self._prec)

    def __pos__(self) -> Float:
        return self

    def __abs__(self) -> Float:
        return -self if self._man < 0 else self

    def __bool__(self) -> bool:
        return self._man != 0

    def _coerce(self, other):
        if isinstance(other, Float):
            checks.check_same_radix(self, other, "Float")
            return other
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            return Float(other, 0, EXACT, self._radix)
        if isinstance(other, Fraction):
            return from_fraction(other, EXACT, self._radix)
        return NotImplemented

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _add(self, other)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _add(self, -other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _add(other, -self)

    def __mul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _mul(self, other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _div(self, other)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _div(other, self)

    def __pow__(self, n):
        if not isinstance(n, int) or isinstance(n, bool):
            return NotImplemented
        if n == 0:
            if self._man == 0:
                raise checks.DomainError("Zero to power zero", "pow.zeroToZero")
            return one(self._radix)
        if n < 0:
            return _div(one(self._radix), self**-n)
        prec = self._prec
        man = self._man
        exp = self._exp
        if prec < EXACT:
            # Keep a few guard digits, one per doubling level
            guard = prec + n.bit_length() + 2
            result = Float(1, 0, EXACT, self._radix)
            base = self.with_precision(guard) if self._nd > guard else Float(man, exp, guard, self._radix)
            while n:
                if n & 1:
                    result = result * base
                n >>= 1
                if n:
                    base = base * base
            return result.with_precision(prec)
        return Float(man**n, exp * n, EXACT, self._radix)

    def _cmp(self, other) -> int:
        sx = self.signum()
        sy = other.signum()
        if sx != sy:
            return -1 if sx < sy else 1
        if sx == 0:
            return 0
        if self.scale != other.scale:
            c = 1 if self.scale > other.scale else -1
            return c if sx > 0 else -c
        e = min(self._exp, other._exp)
        a = self._man * _pow(self._radix, self._exp - e)
        b = other._man * _pow(self._radix, other._exp - e)
        return (a > b) - (a < b)

    def __eq__(self, other):
        if isinstance(other, Complex):
            return other.imag.is_zero() and self == other.real
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._cmp(other) == 0

    def __lt__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._cmp(other) < 0

    def __hash__(self):
        man, exp = _strip_zeros(self._man, self._exp, self._radix)
        return hash((man, exp, self._radix))

    def truncate(self) -> Float:
        if self._exp >= 0 or self._man == 0:
            return self._new(self._man, self._exp, EXACT)
        if self.scale <= 0:
            return zero(self._radix)
        q = abs(self._man) // _pow(self._radix, -self._exp)
        return self._new(-q if self._man < 0 else q, 0, EXACT)

    def floor(self) -> Float:
        t = self.truncate()
        if self._man < 0 and t != self:
            return t - 1
        return t

    def ceil(self) -> Float:
        t = self.truncate()
        if self._man > 0 and t != self:
            return t + 1
        return t

    def round_half_even(self) -> Float:
        if self.is_integer():
            return self.truncate()
        fl = self.floor()
        twice = (self - fl) * 2
        twice = twice.with_precision(EXACT) if not twice.is_zero() else twice
        c = twice._cmp(one(self._radix))
        if c < 0:
            return fl
        if c > 0:
            return fl + 1
        return fl if fl.to_int() % 2 == 0 else fl + 1

    def frac(self) -> Float:
        return self - self.truncate()

    def to_int(self) -> int:
        t = self.truncate()
        if t._man == 0:
            return 0
        return t._man * _pow(self._radix, t._exp)

    def __int__(self) -> int:
        return self.to_int()

    def to_fraction(self) -> Fraction:
        if self._exp >= 0:
            return Fraction(self._man * _pow(self._radix, self._exp))
        return Fraction(self._man, _pow(self._radix, -self._exp))

    def double_parts(self) -> tuple[float, int]:
        """Return ``(m, s)`` with ``self == m * radix**s`` and ``1/radix <= |m| < 1``."""
        if self._man == 0:
            return 0.0, 0
        nd = self._nd
        m = abs(self._man)
        if nd > 20:
            m = m // _pow(self._radix, nd - 20)
            nd = 20
        value = m / _pow(self._radix, nd)
        return (value if self._man > 0 else -value), self.scale

    def to_double(self) -> float:
        if self._man == 0:
            return 0.0
        bits = self.scale * _bits_per_digit(self._radix)
        if bits > 1025:
            raise checks.OverflowError("Value too large for a double", "double.overflow")
        if bits < -1080:
            return 0.0
        m = abs(self._man)
        e = self._exp
        if self._nd > 20:
            m = m // _pow(self._radix, self._nd - 20)
            e += self._nd - 20
        value = float(Fraction(m) * Fraction(self._radix) ** e)
        return value if self._man > 0 else -value

    def __float__(self) -> float:
        return self.to_double()

    def ulp(self) -> Float:
        if self._man == 0 or self._prec >= EXACT:
            return zero(self._radix)
        return self._new(1, self.scale - self._prec, EXACT)

    def equal_digits(self, other) -> int:
        return equal_digits(self, other)

    def to_radix(self, radix: int) -> Float:
        checks.check_radix(radix, "Float.to_radix")
        if radix == self._radix:
            return self
        if self._prec >= EXACT:
            return from_fraction(self.to_fraction(), EXACT, radix)
        prec = int(ceil(self._prec * log(self._radix) / log(radix)))
        return from_fraction(self.to_fraction(), prec, radix)

    def to_string(self, pretty: bool = True) -> str:
        if self._man == 0:
            return "0"
        digits = _int_to_digits(abs(self._man), self._radix)
        sign = "-" if self._man < 0 else ""
        scale = self.scale
        if pretty and -20 < scale <= max(len(digits), 60) + 1:
            if scale <= 0:
                text = "0." + "0" * (-scale) + digits.rstrip("0")
            elif scale >= len(digits):
                text = digits + "0" * (scale - len(digits))
            else:
                frac = digits[scale:].rstrip("0")
                text = digits[:scale] + ("." + frac if frac else "")
            return sign + text
        frac = digits[1:].rstrip("0")
        return f"{sign}{digits[0]}{'.' + frac if frac else ''}e{scale - 1}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        prec = "EXACT" if self._prec >= EXACT else str(self._prec)
        return f"Float('{self.to_string()}', prec={prec}, radix={self._radix})"


def _lsd(x: Float) -> int | None:
    if x._prec >= EXACT:
        return None
    return x.scale - x._prec


def _trim_below(x: Float, position: int) -> Float | None:
    """Round ``x`` so that no digit sits below ``position``; None if nothing remains."""
    if x._exp >= position:
        return x
    keep = x.scale - position
    if keep <= 0:
        return None
    man, exp, _ = _round_mantissa(x._man, x._exp, keep, x._radix, x._nd)
    return Float(man, exp, x._prec, x._radix)


def _add(x: Float, y: Float) -> Float:
    if y._man == 0:
        return x
    if x._man == 0:
        return y
    radix = x._radix
    lx = _lsd(x)
    ly = _lsd(y)
    if lx is None and ly is None:
        lsd = None
    elif lx is None:
        lsd = ly
    elif ly is None:
        lsd = lx
    else:
        lsd = max(lx, ly)
    if lsd is not None:
        tx = _trim_below(x, lsd - 2)
        ty = _trim_below(y, lsd - 2)
        if tx is None:
            return y
        if ty is None:
            return x
        x, y = tx, ty
    e = min(x._exp, y._exp)
    m = x._man * _pow(radix, x._exp - e) + y._man * _pow(radix, y._exp - e)
    if m == 0:
        return zero(radix)
    if lsd is None:
        return Float(m, e, EXACT, radix)
    prec = e + ndigits(m, radix) - lsd
    if prec <= 0:
        return zero(radix)
    return Float(m, e, prec, radix)


def _mul(x: Float, y: Float) -> Float:
    radix = x._radix
    if x._man == 0 or y._man == 0:
        return zero(radix)
    prec = min(x._prec, y._prec)
    xm, xe, ym, ye = x._man, x._exp, y._man, y._exp
    if prec < EXACT:
        if x._nd > prec + 2:
            xm, xe, _ = _round_mantissa(xm, xe, prec + 2, radix, x._nd)
        if y._nd > prec + 2:
            ym, ye, _ = _round_mantissa(ym, ye, prec + 2, radix, y._nd)
    return Float(xm * ym, xe + ye, prec, radix)


def _exact_div(x: Float, y: Float) -> Float:
    radix = x._radix
    q = Fraction(x._man, y._man)
    den = q.denominator
    k = 0
    t = den
    while t != 1:
        g = gcd(t, radix)
        if g == 1:
            raise checks.InfiniteExpansionError(
                "Cannot perform inexact division to infinite precision", "divide.infinitePrecision"
            )
        t //= g
        k += 1
    man = q.numerator * (_pow(radix, k) // den)
    return Float(man, x._exp - y._exp - k, EXACT, radix)


def _div(x: Float, y: Float) -> Float:
    radix = x._radix
    if y._man == 0:
        raise checks.DomainError("Division by zero", "divide.byZero")
    if x._man == 0:
        return zero(radix)
    prec = min(x._prec, y._prec)
    if prec >= EXACT:
        return _exact_div(x, y)
    xm, xe, xn = x._man, x._exp, x._nd
    ym, ye, yn = y._man, y._exp, y._nd
    if xn > prec + 2:
        xm, xe, xn = _round_mantissa(xm, xe, prec + 2, radix, xn)
    if yn > prec + 2:
        ym, ye, yn = _round_mantissa(ym, ye, prec + 2, radix, yn)
    shift = max(0, prec + 3 + yn - xn)
    num = abs(xm) * _pow(radix, shift)
    q = num // abs(ym)
    if (xm < 0) != (ym < 0):
        q = -q
    return Float(q, xe - ye - shift, prec, radix)


def equal_digits(x, y) -> int:
    """Count of leading digits shared by ``x`` and ``y`` relative to the larger scale."""
    prec = min(x.precision, y.precision)
    diff = _exact_difference(x, y)
    if diff is None:
        return prec
    top = max(x.scale, y.scale)
    if top == ZERO_SCALE:
        return prec
    return max(0, min(prec, top - diff))


def _exact_difference(x, y) -> int | None:
    """Scale of the exact value ``x - y``, or None when they are equal."""
    scales = []
    for a, b in ((x.real, y.real), (x.imag, y.imag)):
        if a._man == 0 and b._man == 0:
            continue
        a = a.with_precision(EXACT) if a._man else a
        b = b.with_precision(EXACT) if b._man else b
        d = _add(a, -b)
        if d._man != 0:
            scales.append(d.scale)
    return max(scales) if scales else None


class Complex:
    """Immutable pair of same-radix Floats."""

    __slots__ = ("_re", "_im")

    def __init__(self, real: Float, imag: Float | None = None):
        if imag is None:
            imag = zero(real.radix)
        checks.check_same_radix(real, imag, "Complex")
        self._re = real
        self._im = imag

    @property
    def real(self) -> Float:
        return self._re

    @property
    def imag(self) -> Float:
        return self._im

    @property
    def radix(self) -> int:
        return self._re._radix

    @property
    def precision(self) -> int:
        # Digits relative to the larger component
        re, im = self._re, self._im
        if re._man == 0 or im._man == 0:
            return min(re._prec, im._prec)
        s = self.scale
        return min(precision.extend(re._prec, s - re.scale), precision.extend(im._prec, s - im.scale))

    @property
    def scale(self) -> int:
        return max(self._re.scale, self._im.scale)

    @property
    def size(self) -> int:
        return max(self._re.size, self._im.size)

    def is_zero(self) -> bool:
        return self._re._man == 0 and self._im._man == 0

    def is_real(self) -> bool:
        return self._im._man == 0

    def is_integer(self) -> bool:
        return self._im._man == 0 and self._re.is_integer()

    def with_precision(self, prec: int) -> Complex:
        return Complex(self._re.with_precision(prec), self._im.with_precision(prec))

    def ensure_precision(self, prec: int) -> Complex:
        return Complex(self._re.ensure_precision(prec), self._im.ensure_precision(prec))

    def limit_precision(self, prec: int) -> Complex:
        return Complex(self._re.limit_precision(prec), self._im.limit_precision(prec))

    def extend_precision(self, extra: int = EXTRA_PRECISION) -> Complex:
        return Complex(self._re.extend_precision(extra), self._im.extend_precision(extra))

    def set_precision(self, prec: int) -> Complex:
        """Shift both component precisions so that ``self.precision == prec``.

        A component that ends up with no digits left becomes zero.
        """
        re, im = self._re, self._im
        if re._man == 0:
            return Complex(re, im.with_precision(prec))
        if im._man == 0:
            return Complex(re.with_precision(prec), im)
        current = self.precision
        if current >= EXACT:
            return self.with_precision(prec)
        change = prec - current
        new_re = EXACT if re._prec >= EXACT else re._prec + change
        new_im = EXACT if im._prec >= EXACT else im._prec + change
        if new_re <= 0:
            return Complex(zero(self.radix), im.with_precision(prec))
        if new_im <= 0:
            return Complex(re.with_precision(prec), zero(self.radix))
        return Complex(re.with_precision(min(new_re, EXACT)), im.with_precision(min(new_im, EXACT)))

    def reduce_or_zero(self, margin: int) -> Complex:
        return Complex(self._re.reduce_or_zero(margin), self._im.reduce_or_zero(margin))

    def scaled(self, n: int) -> Complex:
        return Complex(self._re.scaled(n), self._im.scaled(n))

    def conj(self) -> Complex:
        return Complex(self._re, -self._im)

    def norm(self) -> Float:
        return self._re * self._re + self._im * self._im

    def __neg__(self) -> Complex:
        return Complex(-self._re, -self._im)

    def __pos__(self) -> Complex:
        return self

    def __bool__(self) -> bool:
        return not self.is_zero()

    def _coerce(self, other):
        if isinstance(other, Complex):
            checks.check_same_radix(self, other, "Complex")
            return other
        if isinstance(other, Float):
            checks.check_same_radix(self, other, "Complex")
            return Complex(other)
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, (int, Fraction)):
            return Complex(self._re._coerce(other))
        return NotImplemented

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return Complex(self._re + other._re, self._im + other._im)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return Complex(self._re - other._re, self._im - other._im)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other - self

    def __mul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        a, b = self._re, self._im
        c, d = other._re, other._im
        if d._man == 0:
            return Complex(a * c, b * c)
        if b._man == 0:
            return Complex(a * c, a * d)
        return Complex(a * c - b * d, a * d + b * c)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _complex_div(self, other)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _complex_div(other, self)

    def __pow__(self, n):
        if not isinstance(n, int) or isinstance(n, bool):
            return NotImplemented
        if n == 0:
            if self.is_zero():
                raise checks.DomainError("Zero to power zero", "pow.zeroToZero")
            return Complex(one(self.radix))
        if n < 0:
            return _complex_div(Complex(one(self.radix)), self**-n)
        prec = self.precision
        base = self if prec >= EXACT else self.ensure_precision(prec + n.bit_length() + 2)
        result = None
        while n:
            if n & 1:
                result = base if result is None else result * base
            n >>= 1
            if n:
                base = base * base
        return result if prec >= EXACT else result.limit_precision(prec)

    def __eq__(self, other):
        if isinstance(other, (Float, int)) and not isinstance(other, bool):
            return self._im._man == 0 and self._re == other
        if isinstance(other, Complex):
            return self._re == other._re and self._im == other._im
        return NotImplemented

    def __hash__(self):
        if self._im._man == 0:
            return hash(self._re)
        return hash((self._re, self._im))

    def equal_digits(self, other) -> int:
        return equal_digits(self, other)

    def double_parts(self) -> tuple[complex, int]:
        """Return ``(m, s)`` with ``self == m * radix**s`` and ``|m|`` below one."""
        s = self.scale
        if s == ZERO_SCALE:
            return 0j, 0
        re_m, re_s = self._re.double_parts()
        im_m, im_s = self._im.double_parts()
        radix = float(self.radix)
        re = re_m * radix ** (re_s - s) if re_m and re_s - s > -330 else 0.0
        im = im_m * radix ** (im_s - s) if im_m and im_s - s > -330 else 0.0
        return complex(re, im), s

    def to_complex(self) -> complex:
        return complex(self._re.to_double(), self._im.to_double())

    def __complex__(self) -> complex:
        return self.to_complex()

    def to_string(self, pretty: bool = True) -> str:
        if self._im._man == 0:
            return self._re.to_string(pretty)
        return f"({self._re.to_string(pretty)}, {self._im.to_string(pretty)})"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Complex({self._re!r}, {self._im!r})"


def _complex_div(x: Complex, y: Complex) -> Complex:
    c, d = y._re, y._im
    if d._man == 0:
        if c._man == 0:
            raise checks.DomainError("Division by zero", "divide.byZero")
        return Complex(x._re / c, x._im / c)
    if c._man == 0:
        return Complex(x._im / d, -(x._re / d))
    n = y.norm()
    num = x * y.conj()
    return Complex(num._re / n, num._im / n)


@lru_cache(maxsize=64)
def zero(radix: int = 10) -> Float:
    return Float(0, 0, EXACT, radix)


@lru_cache(maxsize=64)
def one(radix: int = 10) -> Float:
    return Float(1, 0, EXACT, radix)


def integer(n: int, radix: int = 10) -> Float:
    return Float(int(n), 0, EXACT, radix)


def from_fraction(q: Fraction, prec: int = EXACT, radix: int = 10) -> Float:
    q = Fraction(q)
    num, den = q.numerator, q.denominator
    if num == 0:
        return zero(radix)
    if den == 1:
        return Float(num, 0, prec, radix)
    if prec >= EXACT:
        return _exact_div(Float(num, 0, EXACT, radix), Float(den, 0, EXACT, radix))
    shift = max(0, prec + 3 + ndigits(den, radix) - ndigits(num, radix))
    man = abs(num) * _pow(radix, shift) // den
    return Float(-man if num < 0 else man, -shift, prec, radix)


def from_double(d: float, prec: int | None = None, radix: int = 10) -> Float:
    if d != d or d in (float("inf"), float("-inf")):
        raise ValueError(f"apnum.from_double: not a finite double: {d}")
    if prec is None:
        prec = precision.double_precision(radix)
    return from_fraction(Fraction(d), prec, radix)


def from_string(text: str, prec: int | None = None, radix: int = 10) -> Float:
    checks.check_radix(radix, "apnum.from_string")
    s = text.strip().lower().replace("_", "")
    sign = 1
    if s and s[0] in "+-":
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    exponent = 0
    marker = "e" if radix <= 14 else "@"
    if marker in s:
        s, _, tail = s.partition(marker)
        exponent = int(tail, 10)
    whole, _, frac = s.partition(".")
    digits = (whole + frac).lstrip("0")
    if not (whole + frac) or any(c not in _DIGIT_CHARS[:radix] for c in whole + frac):
        raise ValueError(f"apnum.from_string: invalid number {text!r} for radix {radix}")
    man = _digits_to_int(digits, radix) if digits else 0
    if prec is None:
        prec = max(1, len(digits)) if digits else EXACT
    return Float(sign * man, exponent - len(frac), prec, radix)


def real(value, prec: int | None = None, radix: int | None = None) -> Float:
    """Build a Float from an int, str, float, Fraction or Float."""
    if radix is None:
        radix = value.radix if isinstance(value, Float) else precision.get_radix()
    checks.check_radix(radix, "apnum.real")
    if isinstance(value, Float):
        x = value.to_radix(radix)
        return x if prec is None else x.with_precision(prec)
    if isinstance(value, bool):
        raise TypeError("apnum.real: bool is not a number")
    if isinstance(value, int):
        return Float(value, 0, EXACT if prec is None else prec, radix)
    if isinstance(value, str):
        return from_string(value, prec, radix)
    if isinstance(value, float):
        return from_double(value, prec, radix)
    if isinstance(value, Fraction):
        return from_fraction(value, EXACT if prec is None else prec, radix)
    raise TypeError(f"apnum.real: unsupported type {type(value).__name__}")


def cpx(re, im=0, prec: int | None = None, radix: int | None = None) -> Complex:
    """Build a Complex from two real-like values or a Python complex."""
    if isinstance(re, Complex):
        z = re
        if radix is not None and radix != z.radix:
            z = Complex(z.real.to_radix(radix), z.imag.to_radix(radix))
        return z if prec is None else z.with_precision(prec)
    if isinstance(re, complex):
        re, im = re.real, re.imag
    if radix is None:
        radix = re.radix if isinstance(re, Float) else precision.get_radix()
    return Complex(real(re, prec, radix), real(im, prec, radix))


def as_complex(z) -> Complex:
    if isinstance(z, Complex):
        return z
    if isinstance(z, Float):
        return Complex(z)
    return cpx(z)


def as_float(x) -> Float:
    if isinstance(x, Float):
        return x
    if isinstance(x, Complex):
        if not x.is_real():
            raise ValueError("apnum.as_float: value has a non-zero imaginary part")
        return x.real
    return real(x)


__all__ = [
    "ZERO_SCALE",
    "Float",
    "Complex",
    "ndigits",
    "equal_digits",
    "zero",
    "one",
    "integer",
    "from_fraction",
    "from_double",
    "from_string",
    "real",
    "cpx",
    "as_complex",
    "as_float",
]
