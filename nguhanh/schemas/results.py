"""
Result schemas
Outputs of the filters, the scorer and the analysis pipeline.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .element import Element
from .analyze_config import AnalysisMode

MALFORMED_REASON = "must have 10 digits"


class FilterStage(str, Enum):
    """Pipeline stage that can reject a number"""
    PARSE = "parse"
    CUSTOM = "custom"
    STATIC_BALANCE = "static_balance"
    ELEMENTAL = "elemental"


class FilterResult(BaseModel):
    """
    Outcome of one filter stage
    On failure, names the first failing check and the reason.
    """
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    stage: FilterStage
    passed: bool
    failed_check: Optional[str] = Field(
        default=None,
        description="First failing check",
        examples=["blacklist", "completeness"]
    )
    reason: str = Field(
        default="",
        description="Human-readable rejection reason",
        examples=["Blacklist: contains forbidden digit(s) 7"]
    )


class ScoreResult(BaseModel):
    """Score breakdown for one number"""
    adjacency: float = Field(description="Sum of the relation matrix over adjacent pairs")
    compatibility: Optional[float] = Field(
        default=None,
        description="Role-weighted sum (Compatibility mode only)"
    )
    total: float = Field(description="Final score")


class Evaluation(BaseModel):
    """
    Pipeline outcome for one input line
    Either accepted with a score, or rejected by a filter stage.
    """
    raw: str
    number: Optional[str] = None
    counts: Optional[dict[Element, int]] = None
    score: Optional[ScoreResult] = None
    rejection: Optional[FilterResult] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None and self.score is not None

    def to_outcome(self) -> "CheckOutcome":
        if self.accepted:
            return Valid(score=self.score.total)
        return Invalid(reason=self.rejection.reason)


class Valid(BaseModel):
    """Single-check verdict: the number passes every filter"""
    score: float

    def tagged(self) -> dict:
        return {"Valid": {"score": self.score}}


class Invalid(BaseModel):
    """Single-check verdict: the number is rejected"""
    reason: str

    def tagged(self) -> dict:
        return {"Invalid": {"reason": self.reason}}


CheckOutcome = Union[Valid, Invalid]


class RankedNumber(BaseModel):
    """Accepted number in the batch output"""
    number: str = Field(examples=["0912345678"])
    score: float
    rank: Optional[int] = Field(default=None, description="1-based rank")


class AnalysisReport(BaseModel):
    """
    Batch run result
    Ranked accepted numbers plus per-stage rejection counts.
    """
    model_config = ConfigDict(use_enum_values=True)

    created_at: datetime = Field(default_factory=datetime.now)
    mode: AnalysisMode
    user_menh: Element
    total_count: int = Field(description="Input lines")
    malformed_count: int = Field(default=0, description="Lines without exactly 10 digits")
    passed_count: int = Field(description="Numbers passing every filter")
    rejected_by_stage: dict[str, int] = Field(
        default_factory=dict,
        description="Rejections per stage",
        examples=[{"custom": 12, "static_balance": 340, "elemental": 901}]
    )
    results: list[RankedNumber] = Field(
        default_factory=list,
        description="Accepted numbers by descending score"
    )
    summary: str = ""
