"""Immutable arbitrary-precision signed integers.

``BigInteger`` pairs a canonical magnitude (see ``digits``) with a sign flag.
Every operation returns a new value; operands are never mutated, so results
can be shared and methods chained freely::

    >>> BigInteger(5).add(7).multiply(-3)
    BigInteger('-36')

Decision branches are annotated with their branch-IDs (see
``contract.build_contract``) so white-box tests can trace coverage back to the
contract.
"""
from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Union

import digits
import magnitude
from digits import Magnitude
from errors import InvalidInteger, ShiftOutOfRange, UnsupportedExponent

Operand = Union["BigInteger", int, float, str]

SMALL_LIMIT = 999

# Bit width of the words used for two's-complement emulation.
_WORD_BITS = 30
_WORD_MASK = (1 << _WORD_BITS) - 1


@dataclass(frozen=True)
class DivModResult:
    """Quotient and remainder of a truncating division."""

    quotient: BigInteger
    remainder: BigInteger

    def __iter__(self) -> Iterator[BigInteger]:
        return iter((self.quotient, self.remainder))


class BigInteger:
    """An immutable signed integer of unbounded magnitude."""

    __slots__ = ("_magnitude", "_negative")

    _magnitude: Magnitude
    _negative: bool

    def __new__(
        cls,
        value: Any = None,
        base: Any = None,
        alphabet: str | None = None,
        case_sensitive: bool = False,
    ) -> BigInteger:
        if value is None:
            return ZERO
        if base is None and alphabet is None:
            return parse_value(value)
        import radix
        if isinstance(value, BigInteger):
            value = value.to_string()
        elif not isinstance(value, str):
            value = str(parse_value(value))
        return radix.parse_integer(
            value,
            10 if base is None else base,
            alphabet=alphabet,
            case_sensitive=case_sensitive,
        )

    @classmethod
    def _build(cls, mag: Magnitude, negative: bool) -> BigInteger:
        obj = object.__new__(cls)
        object.__setattr__(obj, "_magnitude", mag)
        object.__setattr__(obj, "_negative", negative)
        return obj

    @classmethod
    def _from_magnitude(cls, mag: Magnitude, negative: bool = False) -> BigInteger:
        """Wrap a canonical magnitude, reusing cached small values."""
        if len(mag) == 1 and mag[0] <= SMALL_LIMIT:
            return _SMALL[-mag[0] if negative else mag[0]]
        return cls._build(mag, negative)

    @classmethod
    def from_digits(cls, values: Iterable[int], negative: bool = False) -> BigInteger:
        """Build from raw little-endian base-``digits.BASE`` digits.

        Every digit is validated; out-of-range digits raise ``InvalidInteger``.
        """
        return cls._from_magnitude(digits.from_sequence(values), negative)

    # -- immutability -------------------------------------------------------

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("BigInteger is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("BigInteger is immutable")

    def __reduce__(self):
        return (BigInteger, (self.to_string(),))

    def __copy__(self) -> BigInteger:
        return self

    def __deepcopy__(self, memo: dict) -> BigInteger:
        return self

    # -- sign and magnitude -------------------------------------------------

    def abs(self) -> BigInteger:
        if not self._negative:
            return self
        return BigInteger._from_magnitude(self._magnitude)

    def negate(self) -> BigInteger:
        if self.is_zero():
            return self
        return BigInteger._from_magnitude(self._magnitude, not self._negative)

    # -- addition / subtraction --------------------------------------------

    def add(self, other: Operand) -> BigInteger:
        """Sum, reconciling signs before delegating to magnitude arithmetic.

        Branches: ADD-SAME-SIGN, ADD-CANCEL, ADD-LEFT-LARGER, ADD-RIGHT-LARGER
        """
        other = parse_value(other)
        a, b = self._magnitude, other._magnitude

        if self._negative == other._negative:                     # ADD-SAME-SIGN
            return BigInteger._from_magnitude(magnitude.add(a, b), self._negative)

        order = magnitude.compare(a, b)
        if order == 0:                                            # ADD-CANCEL
            return ZERO
        if order > 0:                                             # ADD-LEFT-LARGER
            return BigInteger._from_magnitude(
                magnitude.subtract(a, b), self._negative
            )
        return BigInteger._from_magnitude(                        # ADD-RIGHT-LARGER
            magnitude.subtract(b, a), other._negative
        )

    plus = add

    def subtract(self, other: Operand) -> BigInteger:
        return self.add(parse_value(other).negate())

    minus = subtract

    def next(self) -> BigInteger:
        return self.add(ONE)

    def prev(self) -> BigInteger:
        return self.add(MINUS_ONE)

    # -- multiplication -----------------------------------------------------

    def multiply(self, other: Operand) -> BigInteger:
        """Product; negative iff exactly one operand is negative.

        Branches: MUL-ZERO, MUL-SIGN
        """
        other = parse_value(other)
        if self.is_zero() or other.is_zero():                     # MUL-ZERO
            return ZERO
        product = magnitude.multiply(self._magnitude, other._magnitude)
        return BigInteger._from_magnitude(                        # MUL-SIGN
            product, self._negative != other._negative
        )

    times = multiply

    def square(self) -> BigInteger:
        return BigInteger._from_magnitude(magnitude.square(self._magnitude))

    # -- division -----------------------------------------------------------

    def divmod(self, other: Operand) -> DivModResult:
        """Truncating division; the remainder takes the dividend's sign.

        Branches: DIV-ZERO, DIV-SIGN
        """
        other = parse_value(other)
        q, r = magnitude.div_mod(self._magnitude, other._magnitude)  # DIV-ZERO
        return DivModResult(                                      # DIV-SIGN
            quotient=BigInteger._from_magnitude(
                q, self._negative != other._negative
            ),
            remainder=BigInteger._from_magnitude(r, self._negative),
        )

    def divide(self, other: Operand) -> BigInteger:
        return self.divmod(other).quotient

    over = divide

    def mod(self, other: Operand) -> BigInteger:
        return self.divmod(other).remainder

    remainder = mod

    def is_divisible_by(self, other: Operand) -> bool:
        other = parse_value(other)
        if other.is_zero():
            return False
        if other.is_unit():
            return True
        return self.mod(other).is_zero()

    # -- exponentiation -----------------------------------------------------

    def pow(self, exponent: Operand) -> BigInteger:
        """Repeated squaring.  Negative exponents give zero; 0 ** 0 is 1.

        Branches: POW-NEGATIVE, POW-ZERO, POW-UNIT-BASE, POW-TOO-LARGE
        """
        exponent = parse_value(exponent)
        if exponent.is_negative():                                # POW-NEGATIVE
            return ZERO
        if exponent.is_zero():                                    # POW-ZERO
            return ONE
        if self.is_zero() or self.is_unit():                      # POW-UNIT-BASE
            if self._negative and exponent.is_even():
                return ONE
            return self
        if not digits.is_safe(exponent._magnitude):               # POW-TOO-LARGE
            raise UnsupportedExponent(exponent, "exponent is too large")
        n = digits.to_int(exponent._magnitude)
        return BigInteger._from_magnitude(
            magnitude.power(self._magnitude, n),
            self._negative and n & 1 == 1,
        )

    def mod_pow(self, exponent: Operand, modulus: Operand) -> BigInteger:
        import number_theory
        return number_theory.mod_pow(self, exponent, modulus)

    def mod_inv(self, modulus: Operand) -> BigInteger:
        import number_theory
        return number_theory.mod_inv(self, modulus)

    # -- comparison ---------------------------------------------------------

    def compare(self, other: Operand) -> int:
        """Three-way comparison returning -1, 0 or 1."""
        other = parse_value(other)
        if self._negative != other._negative:
            return -1 if self._negative else 1
        order = magnitude.compare(self._magnitude, other._magnitude)
        return -order if self._negative else order

    compare_to = compare

    def compare_abs(self, other: Operand) -> int:
        return magnitude.compare(self._magnitude, parse_value(other)._magnitude)

    def equals(self, other: Operand) -> bool:
        return self.compare(other) == 0

    eq = equals

    def not_equals(self, other: Operand) -> bool:
        return self.compare(other) != 0

    neq = not_equals

    def lesser(self, other: Operand) -> bool:
        return self.compare(other) < 0

    lt = lesser

    def lesser_or_equals(self, other: Operand) -> bool:
        return self.compare(other) <= 0

    leq = lesser_or_equals

    def greater(self, other: Operand) -> bool:
        return self.compare(other) > 0

    gt = greater

    def greater_or_equals(self, other: Operand) -> bool:
        return self.compare(other) >= 0

    geq = greater_or_equals

    # -- predicates ---------------------------------------------------------

    def is_even(self) -> bool:
        return self._magnitude[0] % 2 == 0

    def is_odd(self) -> bool:
        return self._magnitude[0] % 2 == 1

    def is_zero(self) -> bool:
        return digits.is_zero(self._magnitude)

    def is_negative(self) -> bool:
        return self._negative

    def is_positive(self) -> bool:
        return not self._negative and not self.is_zero()

    def is_unit(self) -> bool:
        return self._magnitude == digits.ONE

    def is_prime(self, strict: bool = False) -> bool:
        import number_theory
        return number_theory.is_prime(self, strict=strict)

    def is_probable_prime(self, iterations: int | None = None, rng=None) -> bool:
        import number_theory
        return number_theory.is_probable_prime(self, iterations=iterations, rng=rng)

    # -- bitwise ------------------------------------------------------------

    def _twos_complement_words(self) -> tuple[list[int], int]:
        """Finite words plus the fill word that repeats above them forever."""
        if not self._negative:
            return magnitude.to_words(self._magnitude, _WORD_BITS), 0
        # -m is ~(m - 1) in infinite two's complement.
        below = magnitude.subtract_small(self._magnitude, 1)
        words = magnitude.to_words(below, _WORD_BITS)
        return [w ^ _WORD_MASK for w in words], _WORD_MASK

    def _bitwise(self, other: Operand, fn: Callable[[int, int], int]) -> BigInteger:
        """Apply ``fn`` word by word to sign-extended operands.

        Branches: BIT-NONNEGATIVE-RESULT, BIT-NEGATIVE-RESULT
        """
        other = parse_value(other)
        words_a, fill_a = self._twos_complement_words()
        words_b, fill_b = other._twos_complement_words()
        width = max(len(words_a), len(words_b))
        words_a += [fill_a] * (width - len(words_a))
        words_b += [fill_b] * (width - len(words_b))

        result = [fn(x, y) & _WORD_MASK for x, y in zip(words_a, words_b)]
        fill = fn(fill_a, fill_b) & _WORD_MASK

        if fill == 0:                                             # BIT-NONNEGATIVE-RESULT
            return BigInteger._from_magnitude(
                magnitude.from_words(result, _WORD_BITS)
            )
        inverted = [w ^ _WORD_MASK for w in result]               # BIT-NEGATIVE-RESULT
        mag = magnitude.add_small(magnitude.from_words(inverted, _WORD_BITS), 1)
        return BigInteger._from_magnitude(mag, True)

    def and_(self, other: Operand) -> BigInteger:
        return self._bitwise(other, operator.and_)

    def or_(self, other: Operand) -> BigInteger:
        return self._bitwise(other, operator.or_)

    def xor(self, other: Operand) -> BigInteger:
        return self._bitwise(other, operator.xor)

    def not_(self) -> BigInteger:
        return self.negate().prev()

    def bit_length(self) -> int:
        """Bits needed for the value, excluding the two's-complement sign bit."""
        mag = self._magnitude
        if self._negative:
            mag = magnitude.subtract_small(mag, 1)
        if digits.is_zero(mag):
            return 0
        words = magnitude.to_words(mag, _WORD_BITS)
        return (len(words) - 1) * _WORD_BITS + words[-1].bit_length()

    # -- shifts -------------------------------------------------------------

    @staticmethod
    def _shift_amount(n: Operand) -> int:
        """Branches: SHIFT-IN-RANGE, SHIFT-OUT-OF-RANGE"""
        amount = parse_value(n)
        if not digits.is_safe(amount._magnitude):                 # SHIFT-OUT-OF-RANGE
            raise ShiftOutOfRange(amount)
        value = digits.to_int(amount._magnitude)                  # SHIFT-IN-RANGE
        return -value if amount._negative else value

    def shift_left(self, n: Operand) -> BigInteger:
        """Multiply by 2 ** n; a negative n shifts right.

        Branches: SHIFT-REVERSED
        """
        amount = self._shift_amount(n)
        if amount < 0:                                            # SHIFT-REVERSED
            return self._shift_right(-amount)
        return self._shift_left(amount)

    def shift_right(self, n: Operand) -> BigInteger:
        """Floor-divide by 2 ** n; a negative n shifts left.

        Branches: SHIFT-REVERSED, SHIFT-FLOOR-NEGATIVE
        """
        amount = self._shift_amount(n)
        if amount < 0:                                            # SHIFT-REVERSED
            return self._shift_left(-amount)
        return self._shift_right(amount)

    def _shift_left(self, amount: int) -> BigInteger:
        if amount == 0 or self.is_zero():
            return self
        if amount < _WORD_BITS:
            mag = magnitude.multiply_small(self._magnitude, 1 << amount)
        else:
            mag = magnitude.multiply(
                self._magnitude, magnitude.power((2,), amount)
            )
        return BigInteger._from_magnitude(mag, self._negative)

    def _shift_right(self, amount: int) -> BigInteger:
        if amount == 0 or self.is_zero():
            return self
        if amount < _WORD_BITS:
            q, r = magnitude.div_mod_small(self._magnitude, 1 << amount)
            exact = r == 0
        else:
            if amount >= self.bit_length() + 1:
                return MINUS_ONE if self._negative else ZERO
            q, rem = magnitude.div_mod(
                self._magnitude, magnitude.power((2,), amount)
            )
            exact = digits.is_zero(rem)
        result = BigInteger._from_magnitude(q, self._negative)
        if self._negative and not exact:                          # SHIFT-FLOOR-NEGATIVE
            return result.prev()
        return result

    # -- conversion ---------------------------------------------------------

    def to_string(self, radix: Operand = 10, alphabet: str | None = None) -> str:
        if alphabet is None and isinstance(radix, int) and radix == 10:
            text = digits.to_decimal(self._magnitude)
            return "-" + text if self._negative else text
        import radix as radix_module
        return radix_module.format_integer(self, radix, alphabet=alphabet)

    def to_array(self, radix: Operand = 10):
        import radix as radix_module
        return radix_module.to_base(self, radix)

    def to_number(self) -> float:
        """Nearest float, correctly rounded from the exact decimal value."""
        return float(self.to_string())

    value_of = to_number

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"BigInteger('{self.to_string()}')"

    def __int__(self) -> int:
        value = digits.to_int(self._magnitude)
        return -value if self._negative else value

    __index__ = __int__

    def __float__(self) -> float:
        return self.to_number()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __hash__(self) -> int:
        return hash(int(self))

    # -- Python operators ---------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        other = _operand(other)
        if other is None:
            return NotImplemented
        return self.compare(other) == 0

    def __ne__(self, other: Any) -> bool:
        other = _operand(other)
        if other is None:
            return NotImplemented
        return self.compare(other) != 0

    def __lt__(self, other: Any) -> bool:
        other = _operand(other)
        if other is None:
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: Any) -> bool:
        other = _operand(other)
        if other is None:
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: Any) -> bool:
        other = _operand(other)
        if other is None:
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: Any) -> bool:
        other = _operand(other)
        if other is None:
            return NotImplemented
        return self.compare(other) >= 0

    def __neg__(self) -> BigInteger:
        return self.negate()

    def __pos__(self) -> BigInteger:
        return self

    def __abs__(self) -> BigInteger:
        return self.abs()

    def __invert__(self) -> BigInteger:
        return self.not_()

    def __pow__(self, exponent: Any, modulus: Any = None) -> BigInteger:
        exponent = _operand(exponent)
        if exponent is None:
            return NotImplemented
        if modulus is None:
            return self.pow(exponent)
        return self.mod_pow(exponent, modulus)

    def __lshift__(self, n: Any) -> BigInteger:
        n = _operand(n)
        if n is None:
            return NotImplemented
        return self.shift_left(n)

    def __rshift__(self, n: Any) -> BigInteger:
        n = _operand(n)
        if n is None:
            return NotImplemented
        return self.shift_right(n)


def _binary_operator(name: str, method: Callable, reflected: bool = False) -> Callable:
    def op(self: BigInteger, other: Any) -> BigInteger:
        other = _operand(other)
        if other is None:
            return NotImplemented
        if reflected:
            return method(other, self)
        return method(self, other)
    op.__name__ = name
    return op


for _name, _method in (
    ("add", BigInteger.add),
    ("sub", BigInteger.subtract),
    ("mul", BigInteger.multiply),
    ("and", BigInteger.and_),
    ("or", BigInteger.or_),
    ("xor", BigInteger.xor),
):
    for _dunder, _reflected in ((f"__{_name}__", False), (f"__r{_name}__", True)):
        setattr(BigInteger, _dunder, _binary_operator(_dunder, _method, _reflected))
del _name, _method, _dunder, _reflected


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

def parse_value(value: Operand) -> BigInteger:
    """Coerce a BigInteger, int, integral float or decimal string."""
    if isinstance(value, BigInteger):
        return value
    if isinstance(value, int):
        if -SMALL_LIMIT <= value <= SMALL_LIMIT:
            return _SMALL[value]
        return BigInteger._build(digits.from_int(abs(value)), value < 0)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise InvalidInteger(value, "not a finite number")
        if not value.is_integer():
            raise InvalidInteger(value, "not an integer")
        return parse_value(int(value))
    if isinstance(value, str):
        import radix
        return radix.parse_decimal(value)
    raise TypeError(f"Cannot interpret {type(value).__name__} as an integer")


def _operand(value: Any) -> BigInteger | None:
    """Operator coercion: ints and BigIntegers only, None otherwise."""
    if isinstance(value, BigInteger):
        return value
    if isinstance(value, int):
        return parse_value(value)
    return None


# ---------------------------------------------------------------------------
# Constants and the small-value table
# ---------------------------------------------------------------------------

class SmallIntegerTable:
    """Read-only table of the pre-built values in [-SMALL_LIMIT, SMALL_LIMIT].

    Indexing is by value, so ``SMALL_INTEGERS[-5]`` is minus five rather
    than the fifth entry from the end.
    """

    def __init__(self, limit: int) -> None:
        self._limit = limit
        self._values = [
            BigInteger._build((abs(v),), v < 0)
            for v in range(-limit, limit + 1)
        ]

    def __getitem__(self, value: int) -> BigInteger:
        if not -self._limit <= value <= self._limit:
            raise IndexError(f"{value} is outside [-{self._limit}, {self._limit}]")
        return self._values[value + self._limit]

    def __contains__(self, value: Any) -> bool:
        return isinstance(value, int) and -self._limit <= value <= self._limit

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[BigInteger]:
        return iter(self._values)


_SMALL = SmallIntegerTable(SMALL_LIMIT)
SMALL_INTEGERS = _SMALL

ZERO = _SMALL[0]
ONE = _SMALL[1]
MINUS_ONE = _SMALL[-1]


# ---------------------------------------------------------------------------
# Free functions
# ---------------------------------------------------------------------------

def is_instance(value: Any) -> bool:
    return isinstance(value, BigInteger)


def maximum(a: Operand, b: Operand) -> BigInteger:
    a, b = parse_value(a), parse_value(b)
    return a if a.greater(b) else b


def minimum(a: Operand, b: Operand) -> BigInteger:
    a, b = parse_value(a), parse_value(b)
    return a if a.lesser(b) else b


def gcd(a: Operand, b: Operand) -> BigInteger:
    import number_theory
    return number_theory.gcd(a, b)


def lcm(a: Operand, b: Operand) -> BigInteger:
    import number_theory
    return number_theory.lcm(a, b)


def rand_between(a: Operand, b: Operand, rng=None) -> BigInteger:
    import number_theory
    return number_theory.rand_between(a, b, rng=rng)


def from_array(values, base: Operand = 10, is_negative: bool = False) -> BigInteger:
    import radix
    return radix.from_array(values, base, is_negative=is_negative)
