"""Input masks for text fields.

A mask re-formats what the user typed every time the field is updated, so
the stored raw value is always in display format. Parsers receive the masked
string; ``unmask`` turns it back into something ``int``/``float`` accept.
"""
from dataclasses import dataclass

PLACEHOLDER = "#"


@dataclass(frozen=True)
class StringMask:
    """Fixed-shape mask such as ``###.###.###-##``.

    Every ``#`` takes one digit of the input; other characters are inserted
    as literals once a digit follows them.
    """
    pattern: str

    def apply(self, raw: str) -> str:
        digits = [c for c in raw if c.isdigit()]
        result = []
        for char in self.pattern:
            if not digits:
                break
            if char == PLACEHOLDER:
                result.append(digits.pop(0))
            else:
                result.append(char)
        return "".join(result)

    def unmask(self, masked: str) -> str:
        return "".join(c for c in masked if c.isdigit())


@dataclass(frozen=True)
class NumberMask:
    """Decimal number mask with grouped thousands, e.g. ``12.345,67``."""
    decimal_digits: int = 2
    decimal_separator: str = "."
    thousands_separator: str = ","

    def apply(self, raw: str) -> str:
        if not any(c.isdigit() for c in raw):
            return ""
        negative = raw.strip().startswith("-")
        integer_part, has_separator, decimal_part = raw.partition(self.decimal_separator)
        integer_digits = "".join(c for c in integer_part if c.isdigit()).lstrip("0") or "0"
        decimal_digits = "".join(c for c in decimal_part if c.isdigit())[:self.decimal_digits]

        groups = []
        while integer_digits:
            groups.insert(0, integer_digits[-3:])
            integer_digits = integer_digits[:-3]
        masked = self.thousands_separator.join(groups)

        if has_separator and self.decimal_digits > 0:
            masked = f"{masked}{self.decimal_separator}{decimal_digits}"
        return f"-{masked}" if negative else masked

    def unmask(self, masked: str) -> str:
        return masked.replace(self.thousands_separator, "").replace(self.decimal_separator, ".")
