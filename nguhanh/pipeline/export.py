"""
Result export
Plain-text rendering of ranked results.
"""

from datetime import datetime
from typing import Iterable, Optional

from nguhanh.schemas.results import RankedNumber


def format_result_line(result: RankedNumber) -> str:
    """'0912345678  score=6.80'"""
    return f"{result.number}  score={result.score:.2f}"


def format_results(results: Iterable[RankedNumber]) -> str:
    return "\n".join(format_result_line(r) for r in results)


def result_filename(now: Optional[datetime] = None) -> str:
    """Timestamped download name, e.g. ket_qua_20250101_093000.txt"""
    now = now or datetime.now()
    return f"ket_qua_{now:%Y%m%d_%H%M%S}.txt"
