"""
Schema package
pydantic models for the analysis configuration, numbers and results.
"""

from .element import Element
from .analyze_config import AnalysisMode, AnalyzeConfig, parse_digit_list
from .phone import PhoneNumber, NUMBER_LENGTH
from .results import (
    MALFORMED_REASON,
    FilterStage,
    FilterResult,
    ScoreResult,
    Evaluation,
    Valid,
    Invalid,
    CheckOutcome,
    RankedNumber,
    AnalysisReport,
)

__all__ = [
    "Element",
    "AnalysisMode",
    "AnalyzeConfig",
    "parse_digit_list",
    "PhoneNumber",
    "NUMBER_LENGTH",
    "MALFORMED_REASON",
    "FilterStage",
    "FilterResult",
    "ScoreResult",
    "Evaluation",
    "Valid",
    "Invalid",
    "CheckOutcome",
    "RankedNumber",
    "AnalysisReport",
]
