"""
Pipeline Orchestrator
Runs the filter stages and the scorer per number, in batch or single-check mode.
"""

from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from itertools import repeat
from typing import Iterable, Optional

from loguru import logger

from nguhanh.config import settings, setup_logging
from nguhanh.domain.elements import element_counts
from nguhanh.domain.filters import (
    AbsoluteBalanceFilter,
    CompatibilityFilter,
    CustomFilterSet,
    StaticBalanceFilter,
)
from nguhanh.domain.ranking import rank_results
from nguhanh.domain.scoring import ScoringEngine
from nguhanh.schemas.analyze_config import AnalysisMode, AnalyzeConfig
from nguhanh.schemas.phone import PhoneNumber
from nguhanh.schemas.results import (
    MALFORMED_REASON,
    AnalysisReport,
    CheckOutcome,
    Evaluation,
    FilterResult,
    FilterStage,
    RankedNumber,
)

# stateless engines, shared by every evaluation (and by every worker process)
_custom_filters = CustomFilterSet()
_static_filter = StaticBalanceFilter()
_mode_filters = {
    AnalysisMode.COMPATIBILITY: CompatibilityFilter(),
    AnalysisMode.ABSOLUTE_BALANCE: AbsoluteBalanceFilter(),
}
_scoring = ScoringEngine()


def evaluate_line(line: str, config: AnalyzeConfig) -> Evaluation:
    """
    Runs one raw input line through every stage.

    Stage order: parse -> custom filters -> static balance ->
    transform -> mode filter -> score. The first failing stage ends
    the evaluation.
    """
    number = PhoneNumber.parse(line)
    if number is None:
        return Evaluation(
            raw=line,
            rejection=FilterResult(
                stage=FilterStage.PARSE,
                passed=False,
                failed_check="length",
                reason=MALFORMED_REASON,
            ),
        )

    for stage in (_custom_filters, _static_filter):
        result = stage.check(number, config)
        if not result.passed:
            return Evaluation(raw=line, number=number.text, rejection=result)

    transformed = number.transformed
    counts = element_counts(transformed)

    result = _mode_filters[AnalysisMode(config.mode)].check(counts, config)
    if not result.passed:
        return Evaluation(raw=line, number=number.text, counts=counts, rejection=result)

    return Evaluation(
        raw=line,
        number=number.text,
        counts=counts,
        score=_scoring.score(transformed, config),
    )


class AnalysisPipeline:
    """
    Analysis pipeline

    Both entry points share evaluate_line(), so a number accepted in a
    batch run always checks Valid with the same score:

    [Batch]  analyze(lines) -> AnalysisReport (rejects dropped, ranked)
    [Single] check(line)    -> Valid{score} | Invalid{reason}
    """

    def __init__(self, config: Optional[AnalyzeConfig] = None, max_workers: Optional[int] = None):
        self.config = config or AnalyzeConfig()
        self.max_workers = settings.MAX_WORKERS if max_workers is None else max_workers
        self.logger = logger.bind(component="Pipeline")

    def evaluate(self, line: str) -> Evaluation:
        return evaluate_line(line, self.config)

    def check(self, line: str) -> CheckOutcome:
        """
        Single-number check

        Returns:
            Valid with the final score, or Invalid with the reason of
            the first failing check
        """
        evaluation = self.evaluate(line)
        outcome = evaluation.to_outcome()
        self.logger.debug(f"Check {line.strip()!r}: {outcome}")
        return outcome

    def analyze(self, lines: Iterable[str]) -> AnalysisReport:
        """
        Batch run over input lines
        """
        lines = list(lines)
        self.logger.info(
            f"Analyzing {len(lines)} lines "
            f"(mode={AnalysisMode(self.config.mode).value}, menh={self.config.user_menh.label})"
        )

        evaluations = self._evaluate_all(lines)

        accepted = []
        rejected_by_stage = Counter()
        for evaluation in evaluations:
            if evaluation.accepted:
                accepted.append(RankedNumber(number=evaluation.number, score=evaluation.score.total))
            else:
                rejected_by_stage[evaluation.rejection.stage] += 1

        results = rank_results(accepted)
        malformed = rejected_by_stage.get(FilterStage.PARSE.value, 0)

        self.logger.info(f"Analysis complete: {len(results)}/{len(lines)} passed")
        return AnalysisReport(
            mode=self.config.mode,
            user_menh=self.config.user_menh,
            total_count=len(lines),
            malformed_count=malformed,
            passed_count=len(results),
            rejected_by_stage=dict(rejected_by_stage),
            results=results,
            summary=self._summary(len(lines), malformed, len(results)),
        )

    def _evaluate_all(self, lines: list[str]) -> list[Evaluation]:
        """Evaluates in input order, in worker processes for large batches."""
        if self.max_workers > 1 and len(lines) >= settings.PARALLEL_MIN_LINES:
            chunksize = max(1, len(lines) // (self.max_workers * 4))
            self.logger.info(f"Evaluating with {self.max_workers} workers (chunksize={chunksize})")
            with ProcessPoolExecutor(
                max_workers=self.max_workers,
                initializer=setup_logging,
                initargs=(settings.LOG_LEVEL,),
            ) as executor:
                # map() yields in submission order regardless of completion order
                return list(executor.map(evaluate_line, lines, repeat(self.config), chunksize=chunksize))
        return [evaluate_line(line, self.config) for line in lines]

    def _summary(self, total: int, malformed: int, passed: int) -> str:
        if passed == 0:
            return f"None of {total} numbers passed the filters. Try relaxing the thresholds."
        summary = f"{passed} of {total} numbers passed the filters."
        if malformed:
            summary += f" {malformed} lines did not contain 10 digits."
        return summary
