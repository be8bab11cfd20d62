from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from . import fields as fd
from .errors import ExponentRangeError, SignificandUnderflowError
from .fields import DOUBLE, FieldTriple

logger = logging.getLogger(__name__)

HIDDEN_BIT = DOUBLE.hidden_bit
CARRY_LIMIT = HIDDEN_BIT << 1
# Hidden bit plus carry plus guard room; anything shifted further is gone.
MAX_ALIGN_SHIFT = 64


@dataclass(frozen=True, eq=False, repr=False, init=False)
class FloatValue:
    """A float kept together with its bit pattern and decomposed fields.

    All three members are produced in one step and cannot be changed
    afterwards. Equality compares bit patterns, so ``0.0`` and ``-0.0`` are
    different values while two floats with the same encoding are equal.
    Plain floats and ints compare by the pattern of their float conversion.

    Only normalized, finite numbers are meaningful operands for the
    arithmetic: zero, subnormal, infinity and NaN patterns are decoded as if
    they were normalized.
    """

    value: float
    bits: int
    fields: FieldTriple

    def __init__(self, value: float) -> None:
        value = float(value)
        bits = fd.encode(value)
        self._init(value, bits, fd.decompose(bits))

    def _init(self, value: float, bits: int, fields: FieldTriple) -> None:
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "bits", bits)
        object.__setattr__(self, "fields", fields)

    @classmethod
    def _make(cls, value: float, bits: int, fields: FieldTriple) -> FloatValue:
        instance = cls.__new__(cls)
        instance._init(value, bits, fields)
        return instance

    @classmethod
    def from_fields(cls, fields: FieldTriple) -> FloatValue:
        return cls._make(fd.decode(fields), fd.reassemble(fields), fields)

    @classmethod
    def from_bits(cls, bits: int) -> FloatValue:
        return cls.from_fields(fd.decompose(bits))

    @classmethod
    def from_bit_text(cls, text: str) -> FloatValue:
        return cls.from_bits(fd.parse_bit_text(text))

    def __float__(self) -> float:
        return self.value

    def __add__(self, other: Any) -> FloatValue:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return add(self, other)

    def __radd__(self, other: Any) -> FloatValue:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return add(other, self)

    def __sub__(self, other: Any) -> FloatValue:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return subtract(self, other)

    def __rsub__(self, other: Any) -> FloatValue:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return subtract(other, self)

    def __neg__(self) -> FloatValue:
        return negate(self)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FloatValue):
            return self.bits == other.bits
        if isinstance(other, int) and not isinstance(other, bool):
            try:
                converted = float(other)
            except OverflowError:
                return False
            # Ints a float cannot hold exactly never match.
            if converted != other:
                return False
            other = converted
        if isinstance(other, float):
            return self.bits == fd.encode(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"FloatValue({self.value!r})"

    def describe(self) -> str:
        return f"{fd.format_bit_text(self.fields)}\n{fd.format_decode_formula(self.fields)}"


def _coerce(other: Any) -> FloatValue | None:
    if isinstance(other, FloatValue):
        return other
    if isinstance(other, (float, int)) and not isinstance(other, bool):
        return FloatValue(other)
    return None


def _order(left: FieldTriple, right: FieldTriple) -> tuple[FieldTriple, FieldTriple]:
    if (left.exponent, left.mantissa) < (right.exponent, right.mantissa):
        return right, left
    return left, right


def _align(larger: FieldTriple, smaller: FieldTriple) -> tuple[int, int]:
    """Restore hidden bits and shift the smaller significand onto the larger exponent.

    Bits shifted out on the right are dropped, with no guard or sticky bit.
    """
    delta = larger.exponent - smaller.exponent
    sig_larger = larger.mantissa + HIDDEN_BIT
    if delta > MAX_ALIGN_SHIFT:
        logger.debug("alignment shift %d clamped, smaller operand dropped", delta)
        return sig_larger, 0
    return sig_larger, (smaller.mantissa + HIDDEN_BIT) >> delta


def _combine(sig_larger: int, sig_smaller: int, same_sign: bool) -> int:
    if same_sign:
        return sig_larger + sig_smaller
    if sig_larger < sig_smaller:
        raise SignificandUnderflowError(
            f"Significand {sig_smaller:#x} exceeds {sig_larger:#x} in subtraction"
        )
    return sig_larger - sig_smaller


def _normalize(significand: int, exponent: int) -> tuple[int, int]:
    """Bring a non-zero significand back into ``[2^52, 2^53)``.

    A carry is absorbed by a right shift that drops the lowest bit.
    """
    shift = 0
    while significand >= CARRY_LIMIT:
        significand >>= 1
        exponent += 1
        shift += 1
    while significand < HIDDEN_BIT:
        significand <<= 1
        exponent -= 1
        shift -= 1
    if shift:
        logger.debug("normalized significand by %+d, exponent now %d", shift, exponent)

    if not 0 < exponent < DOUBLE.exponent_mask:
        raise ExponentRangeError(
            f"Result exponent field {exponent} outside normal range "
            f"1..{DOUBLE.exponent_mask - 1}"
        )
    return significand, exponent


def add(left: FloatValue, right: FloatValue) -> FloatValue:
    larger, smaller = _order(left.fields, right.fields)
    sig_larger, sig_smaller = _align(larger, smaller)
    significand = _combine(sig_larger, sig_smaller, larger.sign == smaller.sign)

    if significand == 0:
        logger.debug("operands cancel exactly, returning +0.0")
        return FloatValue(0.0)

    significand, exponent = _normalize(significand, larger.exponent)
    result = FieldTriple(
        sign=larger.sign,
        exponent=exponent,
        mantissa=significand - HIDDEN_BIT,
    )
    return FloatValue.from_fields(result)


def subtract(left: FloatValue, right: FloatValue) -> FloatValue:
    return add(left, negate(right))


def negate(operand: FloatValue) -> FloatValue:
    bits = operand.bits ^ (1 << DOUBLE.sign_shift)
    return FloatValue._make(-operand.value, bits, fd.negate(operand.fields))
