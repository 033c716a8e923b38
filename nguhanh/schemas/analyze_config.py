"""
Analysis configuration schema
Reference element, filter thresholds and score weights for one run.
"""

import json
from enum import Enum
from typing import Any, Optional

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from .element import Element


class AnalysisMode(str, Enum):
    """Filtering pipeline selector"""
    COMPATIBILITY = "Compatibility"
    ABSOLUTE_BALANCE = "AbsoluteBalance"


def parse_digit_list(text: Optional[str]) -> frozenset[int]:
    """
    Parses a comma-separated digit list ("8, 9,x" -> {8, 9}).

    Entries that are not a single decimal digit are dropped.
    """
    if not text:
        return frozenset()
    digits = set()
    for entry in str(text).split(","):
        entry = entry.strip()
        if len(entry) == 1 and entry in "0123456789":
            digits.add(int(entry))
    return frozenset(digits)


class AnalyzeConfig(BaseModel):
    """
    Analysis configuration

    Built once per run and read-only afterwards. Any field that is
    missing or fails validation takes its default value; the rest of
    the payload is kept.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        # NaN / Infinity weights fall back to the default like any other bad value
        allow_inf_nan=False,
        json_schema_extra={
            "example": {
                "mode": "Compatibility",
                "user_menh": "Kim",
                "filter_khac_max": 1,
                "toggle_suffix_filter": True,
                "suffix_value": "8,9",
            }
        },
    )

    # === Mode ===
    mode: AnalysisMode = Field(
        default=AnalysisMode.COMPATIBILITY,
        description="Compatibility or AbsoluteBalance"
    )
    user_menh: Element = Field(
        default=Element.KIM,
        description="Reference element (menh)",
        examples=["Kim", "Thủy", "Fire"]
    )

    # === Score weights ===
    score_sinh: float = Field(default=3.0, description="Weight of the element generating the menh")
    score_cung: float = Field(default=2.0, description="Weight of the menh element itself")
    score_bi_khac: float = Field(default=1.0, description="Weight of the element the menh overcomes")
    score_sinh_xuat: float = Field(default=-1.0, description="Weight of the element the menh generates")
    score_khac: float = Field(default=-3.0, description="Weight of the element overcoming the menh")

    # === Filter thresholds ===
    filter_khac_max: int = Field(default=1, description="Max count of the overcoming element")
    filter_bi_khac_max: int = Field(default=2, description="Max count of the overcome element")
    filter_sinh_min: int = Field(default=2, description="Min count of the generating element")
    filter_cung_min: int = Field(default=2, description="Min count of the menh element")
    filter_tong_max: int = Field(default=5, description="Max combined count of generating + menh")
    filter_any_max: int = Field(default=4, description="Max count of any single element")

    # === Toggles ===
    toggle_static_balance: bool = Field(default=True, description="Parity and digit-sum check")
    toggle_completeness: bool = Field(default=True, description="Require all five elements")

    # === Custom filters ===
    toggle_prefix_filter: bool = False
    prefix_value: str = Field(default="", examples=["090"])
    toggle_suffix_filter: bool = False
    suffix_value: str = Field(default="", description="Comma-separated digits", examples=["8,9"])
    toggle_blacklist_filter: bool = False
    blacklist_digits: str = Field(default="", description="Comma-separated digits", examples=["4,7"])

    @field_validator("user_menh", mode="before")
    @classmethod
    def _resolve_menh(cls, value: Any) -> Element:
        return Element.from_name(value)

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_error(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        try:
            return handler(value)
        except (ValidationError, ValueError) as e:
            default = cls.model_fields[info.field_name].get_default(call_default_factory=True)
            logger.warning(f"Config field {info.field_name}={value!r} is invalid, using {default!r}: {e}")
            return default

    # === Derived values ===

    @property
    def prefix(self) -> str:
        return self.prefix_value.strip()

    @property
    def suffix_required(self) -> frozenset[int]:
        return parse_digit_list(self.suffix_value)

    @property
    def blacklist(self) -> frozenset[int]:
        return parse_digit_list(self.blacklist_digits)

    @classmethod
    def from_payload(cls, payload: Any) -> "AnalyzeConfig":
        """
        Builds a config from a boundary payload (mapping or JSON text).

        An undecodable payload yields the default configuration.
        """
        if payload is None:
            return cls()

        if isinstance(payload, (str, bytes, bytearray)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                logger.warning(f"Config payload is not valid JSON, using defaults: {e}")
                return cls()

        if not isinstance(payload, dict):
            logger.warning(f"Config payload is not an object ({type(payload).__name__}), using defaults")
            return cls()

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Config payload rejected, using defaults: {e}")
            return cls()
