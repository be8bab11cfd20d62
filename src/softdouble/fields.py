from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True)
class BinaryFormat:
    name: str
    bits: int
    exponent_bits: int
    mantissa_bits: int
    numpy_dtype: Any

    @property
    def bias(self) -> int:
        return (1 << (self.exponent_bits - 1)) - 1

    @property
    def sign_shift(self) -> int:
        return self.bits - 1

    @property
    def exponent_mask(self) -> int:
        return (1 << self.exponent_bits) - 1

    @property
    def mantissa_mask(self) -> int:
        return (1 << self.mantissa_bits) - 1

    @property
    def hidden_bit(self) -> int:
        return 1 << self.mantissa_bits


DOUBLE = BinaryFormat(
    name="double",
    bits=64,
    exponent_bits=11,
    mantissa_bits=52,
    numpy_dtype=np.float64,
)


@dataclass(frozen=True)
class FieldTriple:
    """Sign, biased exponent and stored mantissa of a binary64 pattern.

    Fields are masked to their widths on construction. The implicit leading
    bit is not part of ``mantissa``.
    """

    sign: int
    exponent: int
    mantissa: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "sign", self.sign & 0b1)
        object.__setattr__(self, "exponent", self.exponent & DOUBLE.exponent_mask)
        object.__setattr__(self, "mantissa", self.mantissa & DOUBLE.mantissa_mask)


def encode(value: float) -> int:
    np_value = np.array([value], dtype=DOUBLE.numpy_dtype)
    return int(np_value.view(np.uint64)[0])


def decompose(pattern: int) -> FieldTriple:
    return FieldTriple(
        sign=pattern >> DOUBLE.sign_shift,
        exponent=pattern >> DOUBLE.mantissa_bits,
        mantissa=pattern,
    )


def decode(fields: FieldTriple) -> float:
    """Rebuild a float as ``(-1)^s * 2^(e - bias) * (1 + sum of mantissa bits)``.

    The mantissa factor is summed bit by bit rather than reinterpreted, so
    each step of the encoding stays visible. Every pattern is read as a
    normalized number: zero, subnormal, infinity and NaN encodings give
    numerically meaningless results. An exponent factor past the float range
    gives a signed infinity.
    """
    sign_factor = (-1.0) ** fields.sign

    mantissa_factor = 1.0
    for i in range(DOUBLE.mantissa_bits):
        if not (fields.mantissa >> i) & 0b1:
            continue
        mantissa_factor += 2.0 ** (i - DOUBLE.mantissa_bits)

    try:
        exponent_factor = math.ldexp(1.0, fields.exponent - DOUBLE.bias)
    except OverflowError:
        return math.copysign(math.inf, sign_factor)

    return sign_factor * exponent_factor * mantissa_factor


def reassemble(fields: FieldTriple) -> int:
    return (
        (fields.sign << DOUBLE.sign_shift)
        | (fields.exponent << DOUBLE.mantissa_bits)
        | fields.mantissa
    )


def negate(fields: FieldTriple) -> FieldTriple:
    return FieldTriple(
        sign=fields.sign ^ 0b1,
        exponent=fields.exponent,
        mantissa=fields.mantissa,
    )


def parse_bit_text(text: str) -> int:
    """Read a pattern written as binary digits, ignoring whitespace and ``_``."""
    digits = "".join(ch for ch in text if not ch.isspace() and ch != "_")
    stray = sorted(set(digits) - {"0", "1"})
    if stray:
        raise ValueError(f"Non-binary characters {''.join(stray)!r} in {text!r}")
    if len(digits) != DOUBLE.bits:
        raise ValueError(
            f"{DOUBLE.name} pattern needs {DOUBLE.bits} binary digits, got {len(digits)}"
        )
    return int(digits, 2)


def format_bit_text(fields: FieldTriple) -> str:
    return (
        f"{fields.sign:01b} | "
        f"{fields.exponent:0{DOUBLE.exponent_bits}b} | "
        f"{fields.mantissa:0{DOUBLE.mantissa_bits}b}"
    )


def format_decode_formula(fields: FieldTriple) -> str:
    return (
        f"(-1)^{fields.sign} * (1 + {fields.mantissa}/2^{DOUBLE.mantissa_bits}) "
        f"* 2^({fields.exponent}-{DOUBLE.bias})"
    )
