from __future__ import annotations


class SoftDoubleError(ArithmeticError):
    """Base class for invariant violations raised by the arithmetic engine."""


class SignificandUnderflowError(SoftDoubleError):
    """The smaller operand's significand exceeded the larger one's in a subtraction."""


class ExponentRangeError(SoftDoubleError):
    """A normalized result exponent left the range of normal binary64 numbers."""
