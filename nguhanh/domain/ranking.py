"""
Result ranking
"""

from typing import Iterable

from nguhanh.schemas.results import RankedNumber

# decimal places compared when ranking; weighted sums carry float noise beyond this
SCORE_PRECISION = 9


def rank_results(results: Iterable[RankedNumber]) -> list[RankedNumber]:
    """
    Sorts by descending score and assigns 1-based ranks.

    The sort is stable: numbers with equal scores keep their input order.
    Scores are compared after rounding, so 5.8 and 5.800000000000001
    count as equal.
    """
    ordered = sorted(results, key=lambda r: round(r.score, SCORE_PRECISION), reverse=True)
    return [r.model_copy(update={"rank": i}) for i, r in enumerate(ordered, 1)]
