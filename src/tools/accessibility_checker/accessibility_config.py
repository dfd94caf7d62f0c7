"""
Accessibility Checker - Configuration Management

Configuration for which checks run, the contrast threshold, the default
scope and the message locale. Settings are persisted to JSON for user
preference retention.
"""

import json
import logging
import math
import os
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from tools.accessibility_checker.accessibility_types import (
    AccessibilityCheckType,
    CHECK_TYPE_CONFIG_KEYS,
    CHECK_TYPE_PROTOCOL_KEYS,
    DEFAULT_MIN_CONTRAST,
)
from tools.accessibility_checker.messages import DEFAULT_LOCALE, SUPPORTED_LOCALES


logger = logging.getLogger(__name__)

SCOPE_SELECTION = "selection"
SCOPE_PAGE = "page"
SCOPE_DOCUMENT = "document"
VALID_SCOPES = (SCOPE_SELECTION, SCOPE_PAGE, SCOPE_DOCUMENT)


def get_config_path() -> Path:
    """Get the path to the config file in AppData"""
    if os.name == 'nt':  # Windows
        appdata = os.environ.get('APPDATA', os.path.expanduser('~'))
        config_dir = Path(appdata) / 'Design-A11y-Checker'
    else:  # Linux/Mac
        config_dir = Path.home() / '.config' / 'design-a11y-checker'

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / 'accessibility_config.json'


def coerce_min_contrast(value: Any, default: float = DEFAULT_MIN_CONTRAST) -> float:
    """
    Coerce a requested contrast threshold to a positive number.

    Non-numeric, NaN, infinite, zero and negative values fall back to the default.
    """
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number) or number <= 0:
        return default
    return number


def rules_from_payload(raw_rules: Any) -> Dict[str, bool]:
    """
    Map protocol rule flags (camelCase) to config keys.

    Unspecified rules are enabled.
    """
    rules = {key: True for key in CHECK_TYPE_CONFIG_KEYS.values()}
    if not isinstance(raw_rules, dict):
        return rules
    for check_type in AccessibilityCheckType:
        protocol_key = CHECK_TYPE_PROTOCOL_KEYS[check_type]
        if protocol_key in raw_rules:
            rules[CHECK_TYPE_CONFIG_KEYS[check_type]] = bool(raw_rules[protocol_key])
    return rules


@dataclass
class AccessibilityCheckConfig:
    """Configuration for accessibility checks"""

    # Which checks to run (all enabled by default)
    enabled_checks: Dict[str, bool] = field(default_factory=lambda: {
        "color_independence": True,
        "contrast": True,
        "auto_content": True,
    })

    # Minimum contrast ratio for text and shapes
    min_contrast: float = DEFAULT_MIN_CONTRAST

    # Which roots to walk: "selection", "page" or "document"
    scope: str = SCOPE_DOCUMENT

    # Message language: "en" or "ko"
    locale: str = DEFAULT_LOCALE

    # Severity filtering for display
    # Values: "error" (errors only), "warn" (all)
    min_severity: str = "warn"

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to JSON file"""
        if path is None:
            path = get_config_path()

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self), f, indent=2)
        except (OSError, TypeError) as e:
            logger.warning(f"Could not save accessibility config: {e}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'AccessibilityCheckConfig':
        """Load config from JSON file, returns defaults if not found"""
        if path is None:
            path = get_config_path()

        try:
            if path.exists():
                with open(path, 'r', encoding='utf-8') as f:
                    data = json.load(f)

                # Handle potential missing keys from older config files
                config = cls()
                if isinstance(data.get('enabled_checks'), dict):
                    for key in config.enabled_checks:
                        if key in data['enabled_checks']:
                            config.enabled_checks[key] = bool(data['enabled_checks'][key])
                if 'min_contrast' in data:
                    config.min_contrast = coerce_min_contrast(data['min_contrast'])
                if data.get('scope') in VALID_SCOPES:
                    config.scope = data['scope']
                if data.get('locale') in SUPPORTED_LOCALES:
                    config.locale = data['locale']
                if data.get('min_severity') in ("error", "warn"):
                    config.min_severity = data['min_severity']

                return config
        except (OSError, ValueError, AttributeError, OverflowError) as e:
            logger.warning(f"Could not load accessibility config: {e}")

        return cls()  # Return defaults

    def is_check_enabled(self, check_type: str) -> bool:
        """Check if a specific check type is enabled"""
        return self.enabled_checks.get(check_type, True)

    def should_show_severity(self, severity: str) -> bool:
        """Determine if an issue should be shown based on severity filter

        Args:
            severity: "error" or "warn"

        Returns:
            True if the issue should be displayed
        """
        severity_order = {"error": 2, "warn": 1}
        min_level = severity_order.get(self.min_severity, 1)
        issue_level = severity_order.get(severity, 1)
        return issue_level >= min_level

    def to_payload(self) -> Dict[str, Any]:
        """Build a run-checks payload from these settings"""
        return {
            "scope": self.scope,
            "rules": {
                CHECK_TYPE_PROTOCOL_KEYS[check_type]: self.is_check_enabled(config_key)
                for check_type, config_key in CHECK_TYPE_CONFIG_KEYS.items()
            },
            "minContrast": self.min_contrast,
        }


# Singleton instance for the UI
_config_instance: Optional[AccessibilityCheckConfig] = None


def get_config() -> AccessibilityCheckConfig:
    """Get the global config instance (loads from file on first access)"""
    global _config_instance
    if _config_instance is None:
        _config_instance = AccessibilityCheckConfig.load()
    return _config_instance


def save_config() -> None:
    """Save the global config instance to file"""
    if _config_instance is not None:
        _config_instance.save()


def reset_config() -> AccessibilityCheckConfig:
    """Reset config to defaults and save"""
    global _config_instance
    _config_instance = AccessibilityCheckConfig()
    _config_instance.save()
    return _config_instance
