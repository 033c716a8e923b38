"""
Phone number schema
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NUMBER_LENGTH = 10

_NON_DIGIT = re.compile(r"[^0-9]")


class PhoneNumber(BaseModel):
    """
    A candidate number of exactly 10 digits, kept in original form.

    Never mutated; the classifier works on a transformed copy.
    """
    model_config = ConfigDict(frozen=True)

    digits: tuple[int, ...] = Field(
        description="Original digits",
        min_length=NUMBER_LENGTH,
        max_length=NUMBER_LENGTH,
    )

    @field_validator("digits")
    @classmethod
    def _check_range(cls, digits: tuple[int, ...]) -> tuple[int, ...]:
        if any(not 0 <= d <= 9 for d in digits):
            raise ValueError("every digit must be within 0-9")
        return digits

    @classmethod
    def parse(cls, line: str) -> Optional["PhoneNumber"]:
        """
        Extracts a number from a raw input line.

        Only the first whitespace-separated token is read; separators
        inside it ("090-123.4567") are stripped. Returns None unless
        exactly 10 digits remain.
        """
        tokens = line.split()
        if not tokens:
            return None
        digits = _NON_DIGIT.sub("", tokens[0])
        if len(digits) != NUMBER_LENGTH:
            return None
        return cls(digits=tuple(int(ch) for ch in digits))

    @property
    def text(self) -> str:
        return "".join(str(d) for d in self.digits)

    @property
    def transformed(self) -> tuple[int, ...]:
        """Copy of the digits with 0 -> 5, used for element classification."""
        # domain imports this module
        from nguhanh.domain.elements import transform
        return transform(self.digits)

    @property
    def first_half(self) -> tuple[int, ...]:
        return self.digits[:5]

    @property
    def second_half(self) -> tuple[int, ...]:
        return self.digits[5:]

    @property
    def suffix(self) -> tuple[int, ...]:
        return self.digits[-3:]

    def __str__(self) -> str:
        return self.text
