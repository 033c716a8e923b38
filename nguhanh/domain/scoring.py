"""
Scoring engine
Adjacency and compatibility scores over the transformed digits.
"""

from typing import Sequence

from loguru import logger

from nguhanh.schemas.analyze_config import AnalysisMode, AnalyzeConfig
from nguhanh.schemas.results import ScoreResult
from .elements import Element, classify, relation, roles


class ScoringEngine:
    """
    Rule-based scoring engine

    Compatibility mode blends both parts; AbsoluteBalance mode uses the
    adjacency score alone.
    """

    # final score blend (Compatibility mode)
    WEIGHTS = {
        "adjacency": 0.4,
        "compatibility": 0.6,
    }

    def score(self, transformed: Sequence[int], config: AnalyzeConfig) -> ScoreResult:
        """
        Scores one number.

        Args:
            transformed: digits after the 0 -> 5 transform
            config: analysis configuration

        Returns:
            ScoreResult: breakdown and final score
        """
        adjacency = self.adjacency_score(transformed)

        if config.mode == AnalysisMode.ABSOLUTE_BALANCE:
            result = ScoreResult(adjacency=adjacency, total=adjacency)
        else:
            compatibility = self.compatibility_score(transformed, config)
            total = (
                self.WEIGHTS["adjacency"] * adjacency
                + self.WEIGHTS["compatibility"] * compatibility
            )
            result = ScoreResult(adjacency=adjacency, compatibility=compatibility, total=total)

        logger.debug(f"Score for {''.join(map(str, transformed))}: {result.total:.2f}")
        return result

    def adjacency_score(self, transformed: Sequence[int]) -> float:
        """Sum of relation(a, b) over the 9 ordered adjacent pairs."""
        elements = [classify(d) for d in transformed]
        return float(sum(relation(a, b) for a, b in zip(elements, elements[1:])))

    def compatibility_score(self, transformed: Sequence[int], config: AnalyzeConfig) -> float:
        """Sum of the role weight of each digit's element."""
        weights = self.role_weights(config)
        return float(sum(weights[classify(d)] for d in transformed))

    def role_weights(self, config: AnalyzeConfig) -> dict[Element, float]:
        """Weight per element for the configured menh."""
        r = roles(config.user_menh)
        return {element: getattr(config, f"score_{r.role_of(element)}") for element in Element}
