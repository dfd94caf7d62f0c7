"""
Accessibility Checker Tool Package

Checks design documents for color-only indicators, insufficient contrast and
auto-rotating content without controls.
"""

from tools.accessibility_checker.tool import AccessibilityCheckerTool

__all__ = ['AccessibilityCheckerTool']

__version__ = "1.0.0"
