"""
Element classifier
Digit classification, the relation matrix and per-menh role lookup.
"""

from typing import NamedTuple, Sequence

from nguhanh.schemas.element import Element


class InvalidDigitError(ValueError):
    """A value outside 0-9 reached the classifier."""


# 0 never reaches the table after transform(), but it stays total over 0-9
DIGIT_ELEMENTS: tuple[Element, ...] = (
    Element.THO,   # 0
    Element.THUY,  # 1
    Element.THO,   # 2
    Element.MOC,   # 3
    Element.MOC,   # 4
    Element.THO,   # 5
    Element.KIM,   # 6
    Element.KIM,   # 7
    Element.THO,   # 8
    Element.HOA,   # 9
)

# [from][to], indexed by Element
RELATION_MATRIX: tuple[tuple[int, ...], ...] = (
    # Thủy, Thổ, Mộc, Kim, Hỏa
    (0, -1, 1, 0, -1),   # Thủy
    (1, 0, -1, 0, 1),    # Thổ
    (0, 1, 0, -1, 1),    # Mộc
    (1, 0, 1, 0, -1),    # Kim
    (-1, 1, 0, 1, 0),    # Hỏa
)


def classify(digit: int) -> Element:
    """Maps a single digit to its element."""
    if isinstance(digit, bool) or not isinstance(digit, int) or not 0 <= digit <= 9:
        raise InvalidDigitError(f"digit out of range 0-9: {digit!r}")
    return DIGIT_ELEMENTS[digit]


def transform(digits: Sequence[int]) -> tuple[int, ...]:
    """Returns a copy of the digits with every 0 replaced by 5."""
    return tuple(5 if d == 0 else d for d in digits)


def element_counts(transformed: Sequence[int]) -> dict[Element, int]:
    """Counts each element over the digits; absent elements count 0."""
    counts = {element: 0 for element in Element}
    for digit in transformed:
        counts[classify(digit)] += 1
    return counts


def relation(first: Element, second: Element) -> int:
    """Relation of the ordered pair (first -> second)."""
    return RELATION_MATRIX[first][second]


class ElementRoles(NamedTuple):
    """
    Roles of the five elements relative to one menh

    - sinh: generates the menh (favorable)
    - cung: same as the menh (favorable)
    - bi_khac: the menh overcomes it (mildly unfavorable)
    - khac: overcomes the menh (unfavorable)
    - sinh_xuat: the menh generates it (mildly unfavorable)
    """
    sinh: Element
    cung: Element
    bi_khac: Element
    khac: Element
    sinh_xuat: Element

    def role_of(self, element: Element) -> str:
        for role, member in zip(self._fields, self):
            if member == element:
                return role
        raise ValueError(f"{element!r} has no role")  # unreachable for a full table


ROLE_TABLE: dict[Element, ElementRoles] = {
    Element.KIM: ElementRoles(Element.THO, Element.KIM, Element.MOC, Element.HOA, Element.THUY),
    Element.MOC: ElementRoles(Element.THUY, Element.MOC, Element.THO, Element.KIM, Element.HOA),
    Element.THUY: ElementRoles(Element.KIM, Element.THUY, Element.HOA, Element.THO, Element.MOC),
    Element.HOA: ElementRoles(Element.MOC, Element.HOA, Element.KIM, Element.THUY, Element.THO),
    Element.THO: ElementRoles(Element.HOA, Element.THO, Element.THUY, Element.MOC, Element.KIM),
}


def roles(menh: Element) -> ElementRoles:
    """Role quintuple for the given menh."""
    return ROLE_TABLE[Element(menh)]
