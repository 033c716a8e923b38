"""
Tests - filter engines
"""

import pytest

from nguhanh.domain.elements import element_counts, transform
from nguhanh.domain.filters import (
    AbsoluteBalanceFilter,
    CompatibilityFilter,
    CustomFilterSet,
    StaticBalanceFilter,
)
from nguhanh.schemas import AnalyzeConfig, Element, FilterStage, PhoneNumber


def _number(text: str) -> PhoneNumber:
    return PhoneNumber.parse(text)


def _counts(text: str) -> dict:
    return element_counts(transform(_number(text).digits))


def _counts_of(thuy=0, tho=0, moc=0, kim=0, hoa=0) -> dict:
    return {Element.THUY: thuy, Element.THO: tho, Element.MOC: moc, Element.KIM: kim, Element.HOA: hoa}


class TestStaticBalanceFilter:
    """Parity and digit-sum check"""

    def setup_method(self):
        self.filter = StaticBalanceFilter()
        self.config = AnalyzeConfig()

    def test_pass(self):
        """0123456789: 5 even digits, sums 10 and 35"""
        result = self.filter.check(_number("0123456789"), self.config)
        assert result.passed
        assert result.stage == FilterStage.STATIC_BALANCE

    def test_fail_parity(self):
        result = self.filter.check(_number("1111111111"), self.config)
        assert not result.passed
        assert result.failed_check == "parity"
        assert "0 even digits" in result.reason

    @pytest.mark.parametrize("text", ["2468013579", "2468113579"])
    def test_parity_bounds(self, text):
        """4 or 5 even digits pass the parity check"""
        result = self.filter.check(_number(text), self.config)
        assert result.failed_check != "parity"

    def test_fail_first_sum(self):
        result = self.filter.check(_number("0000813579"), self.config)
        assert not result.passed
        assert result.failed_check == "digit_sum"
        assert "first 5 digits (8)" in result.reason

    def test_fail_last_sum(self):
        result = self.filter.check(_number("1357900008"), self.config)
        assert not result.passed
        assert "last 5 digits (8)" in result.reason

    def test_toggle_off(self):
        config = AnalyzeConfig(toggle_static_balance=False)
        assert self.filter.check(_number("1111111111"), config).passed


class TestCustomFilterSet:
    """Prefix / suffix / blacklist"""

    def setup_method(self):
        self.filter = CustomFilterSet()
        self.number = _number("1193428567")

    def test_all_off(self):
        assert self.filter.check(self.number, AnalyzeConfig()).passed

    def test_prefix_pass(self):
        config = AnalyzeConfig(toggle_prefix_filter=True, prefix_value="119")
        assert self.filter.check(self.number, config).passed

    def test_prefix_fail(self):
        config = AnalyzeConfig(toggle_prefix_filter=True, prefix_value="090")
        result = self.filter.check(self.number, config)
        assert not result.passed
        assert result.failed_check == "prefix"
        assert result.reason.startswith("Prefix")

    @pytest.mark.parametrize("prefix", ["", "   "])
    def test_empty_prefix_is_inert(self, prefix):
        config = AnalyzeConfig(toggle_prefix_filter=True, prefix_value=prefix)
        assert self.filter.check(self.number, config).passed

    def test_prefix_ignored_when_toggle_off(self):
        config = AnalyzeConfig(toggle_prefix_filter=False, prefix_value="090")
        assert self.filter.check(self.number, config).passed

    def test_suffix_subset_pass(self):
        """required {8, 9} within last 3 digits {8, 9, 1}"""
        config = AnalyzeConfig(toggle_suffix_filter=True, suffix_value="8,9")
        assert self.filter.check(_number("1342567891"), config).passed

    def test_suffix_missing_digit(self):
        """last 3 digits {8, 1, 1} lack 9"""
        config = AnalyzeConfig(toggle_suffix_filter=True, suffix_value="8,9")
        result = self.filter.check(_number("9342567811"), config)
        assert not result.passed
        assert result.failed_check == "suffix"
        assert "missing 9" in result.reason

    def test_suffix_duplicates_collapse(self):
        config = AnalyzeConfig(toggle_suffix_filter=True, suffix_value="1,1,1")
        assert self.filter.check(_number("9342567811"), config).passed

    def test_suffix_only_last_three(self):
        """a digit earlier in the number does not satisfy the suffix"""
        config = AnalyzeConfig(toggle_suffix_filter=True, suffix_value="3")
        assert not self.filter.check(_number("9342567811"), config).passed

    def test_suffix_malformed_entries_dropped(self):
        """'x' and '12' are dropped, leaving {8}"""
        config = AnalyzeConfig(toggle_suffix_filter=True, suffix_value="x, 8 ,12,")
        assert self.filter.check(_number("9342567811"), config).passed

    def test_suffix_unparsable_is_inert(self):
        config = AnalyzeConfig(toggle_suffix_filter=True, suffix_value="a,b")
        assert self.filter.check(self.number, config).passed

    def test_blacklist_fail(self):
        config = AnalyzeConfig(toggle_blacklist_filter=True, blacklist_digits="3,7")
        result = self.filter.check(self.number, config)
        assert not result.passed
        assert result.failed_check == "blacklist"
        assert result.reason == "Blacklist: contains forbidden digit(s) 3, 7"

    def test_blacklist_pass(self):
        config = AnalyzeConfig(toggle_blacklist_filter=True, blacklist_digits="0")
        assert self.filter.check(self.number, config).passed

    def test_blacklist_empty_is_inert(self):
        config = AnalyzeConfig(toggle_blacklist_filter=True, blacklist_digits=" , ")
        assert self.filter.check(self.number, config).passed

    def test_order_prefix_first(self):
        """prefix is reported before suffix and blacklist"""
        config = AnalyzeConfig(
            toggle_prefix_filter=True, prefix_value="090",
            toggle_suffix_filter=True, suffix_value="0",
            toggle_blacklist_filter=True, blacklist_digits="1",
        )
        assert self.filter.check(self.number, config).failed_check == "prefix"


class TestCompatibilityFilter:
    """Element-count filter (menh Kim unless noted)"""

    def setup_method(self):
        self.filter = CompatibilityFilter()
        self.config = AnalyzeConfig(user_menh=Element.KIM)

    def test_pass(self):
        result = self.filter.check(_counts("1193428567"), self.config)
        assert result.passed
        assert result.stage == FilterStage.ELEMENTAL

    def test_completeness(self):
        """1111111111 only holds Thủy"""
        config = AnalyzeConfig(user_menh=Element.THUY)
        result = self.filter.check(_counts("1111111111"), config)
        assert not result.passed
        assert result.failed_check == "completeness"
        assert "Thổ, Mộc, Kim, Hỏa" in result.reason

    def test_completeness_toggle_off(self):
        config = AnalyzeConfig(user_menh=Element.THUY, toggle_completeness=False)
        result = self.filter.check(_counts("1111111111"), config)
        assert result.failed_check == "dominance"

    def test_dominance(self):
        counts = _counts_of(thuy=1, tho=5, moc=1, kim=2, hoa=1)
        result = self.filter.check(counts, self.config)
        assert result.failed_check == "dominance"
        assert "Thổ appears 5 times (max 4)" in result.reason

    def test_khac_max(self):
        """Hỏa overcomes Kim"""
        counts = _counts_of(thuy=1, tho=3, moc=1, kim=3, hoa=2)
        assert self.filter.check(counts, self.config).failed_check == "khac_max"

    def test_bi_khac_max(self):
        """Kim overcomes Mộc"""
        counts = _counts_of(thuy=1, tho=2, moc=3, kim=3, hoa=1)
        assert self.filter.check(counts, self.config).failed_check == "bi_khac_max"

    def test_sinh_min(self):
        counts = _counts_of(thuy=3, tho=1, moc=2, kim=3, hoa=1)
        assert self.filter.check(counts, self.config).failed_check == "sinh_min"

    def test_cung_min(self):
        counts = _counts_of(thuy=3, tho=3, moc=2, kim=1, hoa=1)
        assert self.filter.check(counts, self.config).failed_check == "cung_min"

    def test_tong_max(self):
        """0123456789: Thổ 4 + Kim 2 = 6 > 5"""
        result = self.filter.check(_counts("0123456789"), self.config)
        assert result.failed_check == "tong_max"
        assert "6 times (max 5)" in result.reason

    def test_thresholds_from_config(self):
        config = AnalyzeConfig(user_menh=Element.KIM, filter_tong_max=6)
        assert self.filter.check(_counts("0123456789"), config).passed

    def test_first_failure_reported(self):
        """completeness wins over dominance"""
        counts = _counts_of(thuy=0, tho=6, moc=2, kim=1, hoa=1)
        assert self.filter.check(counts, self.config).failed_check == "completeness"


class TestAbsoluteBalanceFilter:
    """Two of each element"""

    def setup_method(self):
        self.filter = AbsoluteBalanceFilter()

    @pytest.mark.parametrize("menh", list(Element))
    def test_pass_any_menh(self, menh):
        config = AnalyzeConfig(user_menh=menh)
        assert self.filter.check(_counts("1293418967"), config).passed

    def test_fail(self):
        result = self.filter.check(_counts("1193428567"), AnalyzeConfig())
        assert not result.passed
        assert result.reason.startswith("Absolute balance")

    def test_ignores_compatibility_thresholds(self):
        config = AnalyzeConfig(filter_any_max=1, filter_khac_max=0, toggle_completeness=True)
        assert self.filter.check(_counts("1293418967"), config).passed
