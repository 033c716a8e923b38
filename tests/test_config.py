"""
Tests - analysis configuration
"""

import json

import pytest
from pydantic import ValidationError

from nguhanh.config import Settings, settings, setup_logging
from nguhanh.schemas import AnalysisMode, AnalyzeConfig, Element, parse_digit_list


class TestDefaults:
    """Default configuration"""

    def test_defaults(self):
        config = AnalyzeConfig()
        assert config.mode == AnalysisMode.COMPATIBILITY
        assert config.user_menh == Element.KIM
        assert (config.score_sinh, config.score_cung, config.score_bi_khac,
                config.score_sinh_xuat, config.score_khac) == (3, 2, 1, -1, -3)
        assert (config.filter_khac_max, config.filter_bi_khac_max, config.filter_sinh_min,
                config.filter_cung_min, config.filter_tong_max, config.filter_any_max) == (1, 2, 2, 2, 5, 4)
        assert config.toggle_static_balance is True
        assert config.toggle_completeness is True
        assert not (config.toggle_prefix_filter or config.toggle_suffix_filter or config.toggle_blacklist_filter)

    def test_frozen(self):
        config = AnalyzeConfig()
        with pytest.raises(ValidationError):
            config.filter_any_max = 9


class TestFromPayload:
    """Boundary decoding"""

    def test_mapping(self):
        config = AnalyzeConfig.from_payload({
            "mode": "AbsoluteBalance",
            "user_menh": "Thủy",
            "filter_any_max": 3,
            "suffix_value": "8,9",
        })
        assert config.mode == AnalysisMode.ABSOLUTE_BALANCE
        assert config.user_menh == Element.THUY
        assert config.filter_any_max == 3
        assert config.suffix_required == {8, 9}

    def test_json_text(self):
        payload = json.dumps({"user_menh": "Hoa", "score_khac": -5.5})
        config = AnalyzeConfig.from_payload(payload)
        assert config.user_menh == Element.HOA
        assert config.score_khac == -5.5

    def test_invalid_field_falls_back(self):
        """one bad field does not discard the others"""
        config = AnalyzeConfig.from_payload({
            "filter_khac_max": "abc",
            "filter_sinh_min": 3,
            "user_menh": "Gold",
            "mode": "Bogus",
        })
        assert config.filter_khac_max == 1
        assert config.filter_sinh_min == 3
        assert config.user_menh == Element.KIM
        assert config.mode == AnalysisMode.COMPATIBILITY

    def test_nan_threshold_falls_back(self):
        """a cleared numeric input arrives as NaN"""
        config = AnalyzeConfig.from_payload('{"filter_any_max": NaN, "score_sinh": null}')
        assert config.filter_any_max == 4
        assert config.score_sinh == 3

    def test_non_finite_weights_fall_back(self):
        """NaN / Infinity weights would poison every score"""
        config = AnalyzeConfig.from_payload(
            '{"score_sinh": NaN, "score_khac": Infinity, "score_cung": -Infinity, "score_bi_khac": 0.5}'
        )
        assert config.score_sinh == 3.0
        assert config.score_khac == -3.0
        assert config.score_cung == 2.0
        assert config.score_bi_khac == 0.5

    @pytest.mark.parametrize("payload", [None, "not json", "[1, 2]", 42, ["mode"]])
    def test_undecodable_payload(self, payload):
        assert AnalyzeConfig.from_payload(payload) == AnalyzeConfig()

    def test_unknown_keys_ignored(self):
        assert AnalyzeConfig.from_payload({"colour": "red"}) == AnalyzeConfig()

    @pytest.mark.parametrize("menh,expected", [
        ("Kim", Element.KIM), ("moc", Element.MOC), ("Fire", Element.HOA), ("THO", Element.THO), (0, Element.THUY),
    ])
    def test_menh_names(self, menh, expected):
        assert AnalyzeConfig.from_payload({"user_menh": menh}).user_menh == expected


class TestSettings:
    """Runtime settings"""

    def test_fields(self):
        assert set(Settings.model_fields) == {
            "LOG_LEVEL", "INPUT_FILE", "OUTPUT_FILE", "MAX_WORKERS", "PARALLEL_MIN_LINES",
        }

    def test_setup_logging_records_level(self, monkeypatch):
        """the applied level is what worker processes are started with"""
        monkeypatch.setattr(settings, "LOG_LEVEL", "INFO")
        setup_logging("warning")
        assert settings.LOG_LEVEL == "WARNING"
        setup_logging()
        assert settings.LOG_LEVEL == "WARNING"


class TestDigitLists:
    """Comma-separated digit lists"""

    @pytest.mark.parametrize("text,expected", [
        ("8,9", {8, 9}),
        (" 8 , 9 ", {8, 9}),
        ("9,9,9", {9}),
        ("8,x,12,,9", {8, 9}),
        ("", set()),
        ("abc", set()),
        (None, set()),
    ])
    def test_parse(self, text, expected):
        assert parse_digit_list(text) == expected

    def test_prefix_stripped(self):
        assert AnalyzeConfig(prefix_value=" 090 ").prefix == "090"

    def test_blacklist(self):
        assert AnalyzeConfig(blacklist_digits="4,7").blacklist == {4, 7}
