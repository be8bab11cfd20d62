from .arith import FloatValue, add, negate, subtract
from .errors import ExponentRangeError, SignificandUnderflowError, SoftDoubleError
from .fields import (
    DOUBLE,
    BinaryFormat,
    FieldTriple,
    decode,
    decompose,
    encode,
    format_bit_text,
    format_decode_formula,
    parse_bit_text,
    reassemble,
)

__all__ = [
    "DOUBLE",
    "BinaryFormat",
    "ExponentRangeError",
    "FieldTriple",
    "FloatValue",
    "SignificandUnderflowError",
    "SoftDoubleError",
    "add",
    "decode",
    "decompose",
    "encode",
    "format_bit_text",
    "format_decode_formula",
    "negate",
    "parse_bit_text",
    "reassemble",
    "subtract",
]
