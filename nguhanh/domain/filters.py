"""
Filter engines
Rule-based filters applied to a number before scoring.
"""

from typing import Callable, Sequence

from loguru import logger

from nguhanh.schemas.analyze_config import AnalyzeConfig
from nguhanh.schemas.phone import PhoneNumber
from nguhanh.schemas.results import FilterResult, FilterStage
from .elements import Element, roles

CheckResult = tuple[bool, str]


def _join(digits) -> str:
    return ", ".join(str(d) for d in sorted(digits))


class _FilterBase:
    """
    Runs an ordered list of checks and stops at the first failure.
    """

    stage: FilterStage

    def _run(self, checks: list[tuple[str, Callable[[], CheckResult]]]) -> FilterResult:
        for check_name, check in checks:
            is_pass, reason = check()
            if not is_pass:
                logger.debug(f"{self.stage.value}/{check_name}: {reason}")
                return FilterResult(
                    stage=self.stage,
                    passed=False,
                    failed_check=check_name,
                    reason=reason,
                )
        return FilterResult(stage=self.stage, passed=True)


class StaticBalanceFilter(_FilterBase):
    """
    Parity and digit-sum sanity check on the original digits.
    Independent of the menh.
    """

    stage = FilterStage.STATIC_BALANCE

    def check(self, number: PhoneNumber, config: AnalyzeConfig) -> FilterResult:
        if not config.toggle_static_balance:
            return FilterResult(stage=self.stage, passed=True)
        return self._run([
            ("parity", lambda: self._check_parity(number.digits)),
            ("digit_sum", lambda: self._check_sums(number)),
        ])

    def _check_parity(self, digits: Sequence[int]) -> CheckResult:
        even_count = sum(1 for d in digits if d % 2 == 0)
        if even_count in (4, 5):
            return True, ""
        return False, f"Static balance: {even_count} even digits (need 4 or 5)"

    def _check_sums(self, number: PhoneNumber) -> CheckResult:
        first, second = sum(number.first_half), sum(number.second_half)
        if first % 8 == 0:
            return False, f"Static balance: sum of first 5 digits ({first}) is divisible by 8"
        if second % 8 == 0:
            return False, f"Static balance: sum of last 5 digits ({second}) is divisible by 8"
        return True, ""


class CustomFilterSet(_FilterBase):
    """
    User-defined prefix / suffix / blacklist filters on the original digits.
    Each one is inert unless toggled on and given a non-empty value.
    """

    stage = FilterStage.CUSTOM

    def check(self, number: PhoneNumber, config: AnalyzeConfig) -> FilterResult:
        checks = []
        if config.toggle_prefix_filter:
            checks.append(("prefix", lambda: self._check_prefix(number, config.prefix)))
        if config.toggle_suffix_filter:
            checks.append(("suffix", lambda: self._check_suffix(number, config.suffix_required)))
        if config.toggle_blacklist_filter:
            checks.append(("blacklist", lambda: self._check_blacklist(number, config.blacklist)))
        return self._run(checks)

    def _check_prefix(self, number: PhoneNumber, prefix: str) -> CheckResult:
        if not prefix or number.text.startswith(prefix):
            return True, ""
        return False, f"Prefix: does not start with {prefix}"

    def _check_suffix(self, number: PhoneNumber, required: frozenset[int]) -> CheckResult:
        missing = required - set(number.suffix)
        if not missing:
            return True, ""
        tail = "".join(str(d) for d in number.suffix)
        return False, f"Suffix: last 3 digits {tail} are missing {_join(missing)}"

    def _check_blacklist(self, number: PhoneNumber, forbidden: frozenset[int]) -> CheckResult:
        found = forbidden & set(number.digits)
        if not found:
            return True, ""
        return False, f"Blacklist: contains forbidden digit(s) {_join(found)}"


class CompatibilityFilter(_FilterBase):
    """
    Element-count filter relative to the user's menh.

    Checks run in a fixed order (completeness, dominance, khac, bi_khac,
    sinh, cung, tong); the first failure is reported.
    """

    stage = FilterStage.ELEMENTAL

    def check(self, counts: dict[Element, int], config: AnalyzeConfig) -> FilterResult:
        r = roles(config.user_menh)
        checks = []
        if config.toggle_completeness:
            checks.append(("completeness", lambda: self._check_completeness(counts)))
        checks += [
            ("dominance", lambda: self._check_dominance(counts, config.filter_any_max)),
            ("khac_max", lambda: self._check_max(
                "Overcoming", r.khac, counts[r.khac], config.filter_khac_max)),
            ("bi_khac_max", lambda: self._check_max(
                "Overcome", r.bi_khac, counts[r.bi_khac], config.filter_bi_khac_max)),
            ("sinh_min", lambda: self._check_min(
                "Generating", r.sinh, counts[r.sinh], config.filter_sinh_min)),
            ("cung_min", lambda: self._check_min(
                "Same", r.cung, counts[r.cung], config.filter_cung_min)),
            ("tong_max", lambda: self._check_tong(
                counts[r.sinh] + counts[r.cung], config.filter_tong_max)),
        ]
        return self._run(checks)

    def _check_completeness(self, counts: dict[Element, int]) -> CheckResult:
        missing = [e.label for e in Element if counts[e] == 0]
        if not missing:
            return True, ""
        return False, f"Completeness: missing element(s) {', '.join(missing)}"

    def _check_dominance(self, counts: dict[Element, int], any_max: int) -> CheckResult:
        for element in Element:
            if counts[element] > any_max:
                return False, f"Dominance: {element.label} appears {counts[element]} times (max {any_max})"
        return True, ""

    def _check_max(self, role: str, element: Element, count: int, max_val: int) -> CheckResult:
        if count <= max_val:
            return True, ""
        return False, f"{role} element {element.label} appears {count} times (max {max_val})"

    def _check_min(self, role: str, element: Element, count: int, min_val: int) -> CheckResult:
        if count >= min_val:
            return True, ""
        return False, f"{role} element {element.label} appears {count} times (min {min_val})"

    def _check_tong(self, total: int, max_val: int) -> CheckResult:
        if total <= max_val:
            return True, ""
        return False, f"Generating + same elements appear {total} times (max {max_val})"


class AbsoluteBalanceFilter(_FilterBase):
    """
    Every element must appear exactly twice. Ignores the menh.
    """

    stage = FilterStage.ELEMENTAL

    def check(self, counts: dict[Element, int], config: AnalyzeConfig) -> FilterResult:
        return self._run([("absolute_balance", lambda: self._check_two_each(counts))])

    def _check_two_each(self, counts: dict[Element, int]) -> CheckResult:
        if all(counts[e] == 2 for e in Element):
            return True, ""
        layout = ", ".join(f"{e.label} {counts[e]}" for e in Element)
        return False, f"Absolute balance: need 2 of each element, got {layout}"
