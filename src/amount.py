import re
from dataclasses import dataclass

from errors import PaymentsError

SCALE = 10_000
FRACTION_DIGITS = 4

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DIGITS = frozenset("0123456789")


class AmountError(PaymentsError):
    """Base class for amount parsing and arithmetic errors."""


class AmountParseError(AmountError):
    def __init__(self, text: str):
        super().__init__(f"Amount parsing error: {text}")
        self.text = text


class AmountOverflowError(AmountError):
    def __init__(self):
        super().__init__("Overflow error while creating Amount")


class AmountUnderflowError(AmountError):
    def __init__(self):
        super().__init__("Underflow error while creating Amount")


def _parse_i64(text: str) -> int:
    """Parse a signed 64-bit integer, raising ValueError on anything else."""
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer literal: {text!r}")
    value = int(text)
    if not I64_MIN <= value <= I64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


@dataclass(frozen=True, order=True)
class Amount:
    """
    Fixed-point money value with four fractional digits.

    Stored as a signed 64-bit count of 1/10000 units so that arithmetic is exact.
    Every operation returns a new Amount; add and sub fail instead of wrapping.
    """

    scaled: int = 0

    def __post_init__(self):
        if not I64_MIN <= self.scaled <= I64_MAX:
            raise AmountOverflowError()

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0)

    @classmethod
    def parse(cls, text: str) -> "Amount":
        """
        Parse a decimal string such as "12.5", ".05" or "-3".

        Fractional digits beyond the fourth are truncated. An integer-only value
        that parses but does not fit once scaled raises AmountOverflowError; any
        other malformed or out-of-range input raises AmountParseError.
        """
        text = text.strip()
        if not text:
            raise AmountParseError(text)

        parts = text.split(".")
        if len(parts) > 2:
            raise AmountParseError(text)

        integer_part = parts[0] or "0"

        if len(parts) == 1:
            try:
                value = _parse_i64(integer_part)
            except ValueError:
                raise AmountParseError(text) from None
            scaled = value * SCALE
            if not I64_MIN <= scaled <= I64_MAX:
                raise AmountOverflowError()
            return cls(scaled)

        fraction_part = parts[1] or "0000"
        if not all(c in _DIGITS for c in fraction_part):
            raise AmountParseError(text)
        fraction_part = fraction_part[:FRACTION_DIGITS].ljust(FRACTION_DIGITS, "0")

        try:
            return cls(_parse_i64(integer_part + fraction_part))
        except ValueError:
            raise AmountParseError(text) from None

    def add(self, other: "Amount") -> "Amount":
        total = self.scaled + other.scaled
        if not I64_MIN <= total <= I64_MAX:
            raise AmountOverflowError()
        return Amount(total)

    def sub(self, other: "Amount") -> "Amount":
        difference = self.scaled - other.scaled
        if not I64_MIN <= difference <= I64_MAX:
            raise AmountUnderflowError()
        return Amount(difference)

    def is_negative(self) -> bool:
        return self.scaled < 0

    def __str__(self) -> str:
        sign = "-" if self.scaled < 0 else ""
        whole, fraction = divmod(abs(self.scaled), SCALE)
        return f"{sign}{whole}.{fraction:04d}"

    def __repr__(self) -> str:
        return f"Amount({self})"
