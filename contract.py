"""Machine-readable contract for BigInteger.

Each binary operation is described by:
- postconditions: what the result must satisfy, checked against Python's
  native ``int`` as an oracle
- error conditions: which inputs must raise which exception
- algebraic properties: relationships between BigInteger results

Validation tools iterate over the contract to drive conformance tests and
the counterexample search.

Layers
------
OperationContract   per-operation contract (post/error/properties)
BranchSpec          every decision point white-box tests must cover
IntegerContract     the full contract
build_contract()    constructs the IntegerContract
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from biginteger import ZERO, BigInteger
from errors import DivisionByZero, InvalidBaseZero, ShiftOutOfRange

SHIFT_LIMIT = 2 ** 53


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many BigInteger values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationContract:
    name: str
    method: str         # BigInteger method implementing the operation
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]

    def invoke(self, a: int, b: int):
        return getattr(BigInteger(a), self.method)(b)


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class IntegerContract:
    operations: dict[str, OperationContract]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    @property
    def branch_ids(self) -> set[str]:
        return {b.id for b in self.branches}


# ---------------------------------------------------------------------------
# Oracle helpers
# ---------------------------------------------------------------------------

def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity; BigInteger truncates.
    """
    q, r = divmod(a, b)
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def truncmod(a: int, b: int) -> int:
    """Remainder matching ``truncdiv``; takes the sign of ``a``."""
    return a - b * truncdiv(a, b)


def shifted(a: int, n: int) -> int:
    """``a * 2**n`` rounded toward negative infinity, for either sign of n."""
    return a << n if n >= 0 else a >> -n


def _result(value: BigInteger) -> int:
    return int(value)


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def _exact(name: str, description: str, oracle: Callable[[int, int], int]):
    return Postcondition(
        name, description,
        lambda a, b, result: _result(result) == oracle(a, b),
    )


def build_contract() -> IntegerContract:
    """Construct the full BigInteger contract."""

    # ------------------------------------------------------------------ add
    add_contract = OperationContract(
        name="add",
        method="add",
        postconditions=[
            _exact("result_correct", "Result equals the exact sum",
                   lambda a, b: a + b),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "a + b == b + a", 2,
                lambda a, b: a.add(b).equals(b.add(a)),
            ),
            AlgebraicProperty(
                "inverse", "(a + b) - b == a", 2,
                lambda a, b: a.add(b).subtract(b).equals(a),
            ),
            AlgebraicProperty(
                "successor", "a < a + 1", 1,
                lambda a: a.lesser(a.next()),
            ),
        ],
    )

    # ------------------------------------------------------------------ subtract
    subtract_contract = OperationContract(
        name="subtract",
        method="subtract",
        postconditions=[
            _exact("result_correct", "Result equals the exact difference",
                   lambda a, b: a - b),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "self_inverse", "a - a == 0", 1,
                lambda a: a.subtract(a).is_zero(),
            ),
            AlgebraicProperty(
                "antisymmetry", "a - b == -(b - a)", 2,
                lambda a, b: a.subtract(b).equals(b.subtract(a).negate()),
            ),
        ],
    )

    # ------------------------------------------------------------------ multiply
    multiply_contract = OperationContract(
        name="multiply",
        method="multiply",
        postconditions=[
            _exact("result_correct", "Result equals the exact product",
                   lambda a, b: a * b),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "a * b == b * a", 2,
                lambda a, b: a.multiply(b).equals(b.multiply(a)),
            ),
            AlgebraicProperty(
                "zero", "a * 0 == 0", 1,
                lambda a: a.multiply(ZERO).is_zero(),
            ),
            AlgebraicProperty(
                "square", "a.square() == a * a", 1,
                lambda a: a.square().equals(a.multiply(a)),
            ),
        ],
    )

    # ------------------------------------------------------------------ divide
    division_by_zero = ErrorCondition(
        "div_by_zero_error",
        "DivisionByZero when the divisor is zero",
        lambda a, b: b == 0,
        DivisionByZero,
    )
    divide_contract = OperationContract(
        name="divide",
        method="divide",
        postconditions=[
            _exact("result_correct", "Result equals the truncating quotient",
                   truncdiv),
        ],
        error_conditions=[division_by_zero],
        properties=[
            AlgebraicProperty(
                "division_identity", "(a / b) * b + a % b == a", 2,
                lambda a, b: (
                    b.is_zero()
                    or a.divide(b).multiply(b).add(a.mod(b)).equals(a)
                ),
            ),
            AlgebraicProperty(
                "self", "a / a == 1 for a != 0", 1,
                lambda a: a.is_zero() or a.divide(a).is_unit(),
            ),
        ],
    )

    # ------------------------------------------------------------------ mod
    mod_contract = OperationContract(
        name="mod",
        method="mod",
        postconditions=[
            _exact("result_correct", "Result equals the truncating remainder",
                   truncmod),
            Postcondition(
                "remainder_sign",
                "Non-zero remainder has the sign of the dividend",
                lambda a, b, result: (
                    result.is_zero() or result.is_negative() == (a < 0)
                ),
            ),
            Postcondition(
                "remainder_bound",
                "|remainder| < |divisor|",
                lambda a, b, result: abs(_result(result)) < abs(b),
            ),
        ],
        error_conditions=[division_by_zero],
        properties=[],
    )

    # ------------------------------------------------------------------ bitwise
    and_contract = OperationContract(
        name="and",
        method="and_",
        postconditions=[
            _exact("result_correct", "Two's-complement AND", lambda a, b: a & b),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "idempotent", "a & a == a", 1,
                lambda a: a.and_(a).equals(a),
            ),
            AlgebraicProperty(
                "complement", "a & ~a == 0", 1,
                lambda a: a.and_(a.not_()).is_zero(),
            ),
        ],
    )
    or_contract = OperationContract(
        name="or",
        method="or_",
        postconditions=[
            _exact("result_correct", "Two's-complement OR", lambda a, b: a | b),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "idempotent", "a | a == a", 1,
                lambda a: a.or_(a).equals(a),
            ),
            AlgebraicProperty(
                "de_morgan", "~(a | b) == ~a & ~b", 2,
                lambda a, b: a.or_(b).not_().equals(a.not_().and_(b.not_())),
            ),
        ],
    )
    xor_contract = OperationContract(
        name="xor",
        method="xor",
        postconditions=[
            _exact("result_correct", "Two's-complement XOR", lambda a, b: a ^ b),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "self_zero", "a ^ a == 0", 1,
                lambda a: a.xor(a).is_zero(),
            ),
            AlgebraicProperty(
                "involution", "~~a == a", 1,
                lambda a: a.not_().not_().equals(a),
            ),
        ],
    )

    # ------------------------------------------------------------------ shifts
    shift_range = ErrorCondition(
        "shift_out_of_range",
        "ShiftOutOfRange when |n| exceeds 2**53",
        lambda a, n: abs(n) > SHIFT_LIMIT,
        ShiftOutOfRange,
    )
    shift_left_contract = OperationContract(
        name="shift_left",
        method="shift_left",
        postconditions=[
            _exact("result_correct", "Result equals floor(a * 2**n)", shifted),
        ],
        error_conditions=[shift_range],
        properties=[
            AlgebraicProperty(
                "reversal", "a << -n == a >> n", 2,
                lambda a, n: (
                    n.compare_abs(64) > 0
                    or a.shift_left(n.negate()).equals(a.shift_right(n))
                ),
            ),
        ],
    )
    shift_right_contract = OperationContract(
        name="shift_right",
        method="shift_right",
        postconditions=[
            _exact("result_correct", "Result equals floor(a / 2**n)",
                   lambda a, n: shifted(a, -n)),
        ],
        error_conditions=[shift_range],
        properties=[],
    )

    # ------------------------------------------------------------------ compare
    compare_contract = OperationContract(
        name="compare",
        method="compare",
        postconditions=[
            Postcondition(
                "result_correct", "Result is the sign of a - b",
                lambda a, b, result: result == (a > b) - (a < b),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "reflexive", "compare(a, a) == 0", 1,
                lambda a: a.compare(a) == 0,
            ),
            AlgebraicProperty(
                "abs_negation", "compare_abs(a, -a) == 0", 1,
                lambda a: a.compare_abs(a.negate()) == 0,
            ),
            AlgebraicProperty(
                "antisymmetric", "compare(a, b) == -compare(b, a)", 2,
                lambda a, b: a.compare(b) == -b.compare(a),
            ),
        ],
    )

    # ------------------------------------------------------------------ format
    format_contract = OperationContract(
        name="format",
        method="to_string",
        postconditions=[
            Postcondition(
                "round_trip", "parse(format(a, base), base) == a",
                lambda a, base, result: BigInteger(result, base).equals(a),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "base_zero",
                "InvalidBaseZero for a non-zero value in base 0",
                lambda a, base: base == 0 and a != 0,
                InvalidBaseZero,
            ),
        ],
        properties=[],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # Addition sign reconciliation (BigInteger.add)
        BranchSpec(
            "ADD-SAME-SIGN",
            "Same signs: magnitudes add, sign kept",
            "a.negative == b.negative",
            "add",
        ),
        BranchSpec(
            "ADD-CANCEL",
            "Opposite signs, equal magnitudes: zero",
            "signs differ and |a| == |b|",
            "add",
        ),
        BranchSpec(
            "ADD-LEFT-LARGER",
            "Opposite signs, left magnitude larger: sign of a",
            "signs differ and |a| > |b|",
            "add",
        ),
        BranchSpec(
            "ADD-RIGHT-LARGER",
            "Opposite signs, right magnitude larger: sign of b",
            "signs differ and |a| < |b|",
            "add",
        ),
        # Multiplication
        BranchSpec(
            "MUL-ZERO",
            "Zero operand forces a zero result",
            "a == 0 or b == 0",
            "multiply",
        ),
        BranchSpec(
            "MUL-SIGN",
            "Negative iff exactly one operand is negative",
            "a != 0 and b != 0",
            "multiply",
        ),
        # Division
        BranchSpec(
            "DIV-ZERO",
            "DivisionByZero on a zero divisor",
            "b == 0",
            "divmod",
        ),
        BranchSpec(
            "DIV-SIGN",
            "Quotient negative iff signs differ, remainder follows dividend",
            "b != 0",
            "divmod",
        ),
        # Exponentiation
        BranchSpec(
            "POW-NEGATIVE",
            "Negative exponent gives zero",
            "exponent < 0",
            "pow",
        ),
        BranchSpec(
            "POW-ZERO",
            "Zero exponent gives one",
            "exponent == 0",
            "pow",
        ),
        BranchSpec(
            "POW-UNIT-BASE",
            "Base 0, 1 or -1 short-circuits",
            "|base| <= 1",
            "pow",
        ),
        BranchSpec(
            "POW-TOO-LARGE",
            "UnsupportedExponent above 2**53",
            "exponent > 2**53 and |base| > 1",
            "pow",
        ),
        # Bitwise
        BranchSpec(
            "BIT-NONNEGATIVE-RESULT",
            "Result sign word is zero",
            "op(fill_a, fill_b) == 0",
            "bitwise",
        ),
        BranchSpec(
            "BIT-NEGATIVE-RESULT",
            "Result sign word is all ones; decode from two's complement",
            "op(fill_a, fill_b) != 0",
            "bitwise",
        ),
        # Shifts
        BranchSpec(
            "SHIFT-IN-RANGE",
            "Shift amount within [-2**53, 2**53]",
            "|n| <= 2**53",
            "shift",
        ),
        BranchSpec(
            "SHIFT-OUT-OF-RANGE",
            "ShiftOutOfRange beyond 2**53",
            "|n| > 2**53",
            "shift",
        ),
        BranchSpec(
            "SHIFT-REVERSED",
            "Negative amount shifts the other way",
            "n < 0",
            "shift",
        ),
        BranchSpec(
            "SHIFT-FLOOR-NEGATIVE",
            "Right shift of a negative value rounds toward -inf",
            "a < 0 and a % 2**n != 0",
            "shift",
        ),
        # Radix conversion
        BranchSpec(
            "RADIX-DECIMAL",
            "Base 10 with the default alphabet uses the strict decimal path",
            "base == 10 and alphabet is None",
            "parse",
        ),
        BranchSpec(
            "RADIX-BRACKET",
            "Bracket digit <N> in the input",
            "'<' in text",
            "parse",
        ),
        BranchSpec(
            "RADIX-DIGIT-RANGE",
            "Digit not below |base| is rejected",
            "digit >= |base| and not (digit == 1 and |base| == 1)",
            "parse",
        ),
        BranchSpec(
            "RADIX-ZERO-OK",
            "Zero in base 0",
            "base == 0 and value == 0",
            "to_base",
        ),
        BranchSpec(
            "RADIX-ZERO-ERROR",
            "Non-zero value in base 0",
            "base == 0 and value != 0",
            "to_base",
        ),
        BranchSpec(
            "RADIX-MINUS-ONE",
            "Alternating 1/0 expansion in base -1",
            "base == -1",
            "to_base",
        ),
        BranchSpec(
            "RADIX-UNARY",
            "Repeated ones in base 1",
            "base == 1",
            "to_base",
        ),
        BranchSpec(
            "RADIX-NEG-ADJUST",
            "Negative remainder in a negative base is lifted",
            "remainder < 0",
            "to_base",
        ),
        # Number theory
        BranchSpec(
            "MODPOW-ZERO-MODULUS",
            "DivisionByZero for a zero modulus",
            "modulus == 0",
            "mod_pow",
        ),
        BranchSpec(
            "MODPOW-NEGATIVE-EXPONENT",
            "Negative exponent goes through the modular inverse",
            "exponent < 0",
            "mod_pow",
        ),
        BranchSpec(
            "PRIME-BELOW-TWO",
            "Values below two are not prime",
            "|n| < 2",
            "is_prime",
        ),
        BranchSpec(
            "PRIME-TRIAL",
            "Trial division settles the value",
            "|n| < trial_division_limit ** 2 or small factor found",
            "is_prime",
        ),
        BranchSpec(
            "PRIME-MR-FIXED",
            "Miller-Rabin with the fixed witness set",
            "|n| < DETERMINISTIC_BOUND",
            "is_prime",
        ),
        BranchSpec(
            "PRIME-MR-GROWING",
            "Miller-Rabin with a witness count growing with ln n",
            "|n| >= DETERMINISTIC_BOUND",
            "is_prime",
        ),
    ]

    return IntegerContract(
        operations={
            "add": add_contract,
            "subtract": subtract_contract,
            "multiply": multiply_contract,
            "divide": divide_contract,
            "mod": mod_contract,
            "and": and_contract,
            "or": or_contract,
            "xor": xor_contract,
            "shift_left": shift_left_contract,
            "shift_right": shift_right_contract,
            "compare": compare_contract,
            "format": format_contract,
        },
        branches=branches,
    )
