"""
Element schema
The five Ngũ Hành elements.
"""

import unicodedata
from enum import IntEnum


class Element(IntEnum):
    """Ngũ Hành element, usable directly as a 0-4 index"""
    THUY = 0  # Water
    THO = 1   # Earth
    MOC = 2   # Wood
    KIM = 3   # Metal
    HOA = 4   # Fire

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def english(self) -> str:
        return _ENGLISH[self]

    @classmethod
    def from_name(cls, value) -> "Element":
        """
        Resolves an element from its internal name, Vietnamese label
        (with or without diacritics), English name or 0-4 index.

        Raises:
            ValueError: the value names no element
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)

        key = _fold(str(value))
        if key.isdigit():
            return cls(int(key))
        try:
            return _LOOKUP[key]
        except KeyError:
            raise ValueError(f"unknown element: {value!r}") from None


_LABELS = {
    Element.THUY: "Thủy",
    Element.THO: "Thổ",
    Element.MOC: "Mộc",
    Element.KIM: "Kim",
    Element.HOA: "Hỏa",
}

_ENGLISH = {
    Element.THUY: "Water",
    Element.THO: "Earth",
    Element.MOC: "Wood",
    Element.KIM: "Metal",
    Element.HOA: "Fire",
}


def _fold(text: str) -> str:
    """Lower-cases and strips Vietnamese diacritics ("Thủy" -> "thuy")."""
    text = text.strip().lower().replace("đ", "d")
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_LOOKUP = {}
for _element in Element:
    for _name in (_element.name, _LABELS[_element], _ENGLISH[_element]):
        _LOOKUP[_fold(_name)] = _element
