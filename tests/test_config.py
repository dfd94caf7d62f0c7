import json
import math

import pytest

from tools.accessibility_checker.accessibility_config import (
    AccessibilityCheckConfig,
    coerce_min_contrast,
    rules_from_payload,
)


@pytest.mark.parametrize("value, expected", [
    (None, 3.0),
    ("abc", 3.0),
    ("", 3.0),
    (math.nan, 3.0),
    (math.inf, 3.0),
    (-math.inf, 3.0),
    (0, 3.0),
    (-1, 3.0),
    ({}, 3.0),
    (10 ** 400, 3.0),
    ("4.5", 4.5),
    (7, 7.0),
    (1.25, 1.25),
])
def test_coerce_min_contrast(value, expected):
    assert coerce_min_contrast(value) == expected


def test_rules_default_to_enabled():
    assert rules_from_payload(None) == {"color_independence": True, "contrast": True, "auto_content": True}
    assert rules_from_payload("nope") == {"color_independence": True, "contrast": True, "auto_content": True}


def test_rules_map_protocol_keys():
    rules = rules_from_payload({"colorIndependence": False, "autoContent": 0, "unknownRule": False})
    assert rules == {"color_independence": False, "contrast": True, "auto_content": False}


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "config.json"
    config = AccessibilityCheckConfig(min_contrast=4.5, scope="page", locale="ko", min_severity="error")
    config.enabled_checks["auto_content"] = False
    config.save(path)

    loaded = AccessibilityCheckConfig.load(path)
    assert loaded == config


def test_missing_file_gives_defaults(tmp_path):
    assert AccessibilityCheckConfig.load(tmp_path / "absent.json") == AccessibilityCheckConfig()


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", "\"just a string\""])
def test_corrupted_file_gives_defaults(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    assert AccessibilityCheckConfig.load(path) == AccessibilityCheckConfig()


def test_invalid_values_are_replaced_individually(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "enabled_checks": {"contrast": False, "bogus": True},
        "min_contrast": -2,
        "scope": "galaxy",
        "locale": "xx",
        "min_severity": "fatal",
    }), encoding="utf-8")

    config = AccessibilityCheckConfig.load(path)
    assert config.enabled_checks == {"color_independence": True, "contrast": False, "auto_content": True}
    assert config.min_contrast == 3.0
    assert config.scope == "document"
    assert config.locale == "en"
    assert config.min_severity == "warn"


def test_save_to_unwritable_path_does_not_raise(tmp_path):
    AccessibilityCheckConfig().save(tmp_path / "missing-dir" / "config.json")


def test_to_payload_uses_protocol_keys():
    config = AccessibilityCheckConfig(min_contrast=4.5, scope="selection")
    config.enabled_checks["contrast"] = False
    assert config.to_payload() == {
        "scope": "selection",
        "rules": {"colorIndependence": True, "contrast": False, "autoContent": True},
        "minContrast": 4.5,
    }


def test_severity_filter():
    config = AccessibilityCheckConfig()
    assert config.should_show_severity("warn")
    config.min_severity = "error"
    assert config.should_show_severity("error")
    assert not config.should_show_severity("warn")


def test_oversized_threshold_in_file_gives_default(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"min_contrast": 1' + "0" * 400 + ', "scope": "page"}', encoding="utf-8")
    config = AccessibilityCheckConfig.load(path)
    assert config.min_contrast == 3.0
    assert config.scope == "page"
