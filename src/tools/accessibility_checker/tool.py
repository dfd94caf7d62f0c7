"""
Accessibility Checker Tool - Main tool implementation

This implements the BaseTool interface for Accessibility Checker functionality.
Analyzes design documents for color-only indicators, low contrast and
auto-rotating content without controls.
"""

from typing import Dict, Any, TYPE_CHECKING
from core.tool_manager import BaseTool

if TYPE_CHECKING:
    from core.ui_base import BaseToolTab


class AccessibilityCheckerTool(BaseTool):
    """
    Accessibility Checker Tool - Analyzes design documents for accessibility
    issues: color independence, contrast and auto-rotating content.
    """

    def __init__(self):
        super().__init__(
            tool_id="accessibility_checker",
            name="Accessibility Checker",
            description="Check design documents for color-only indicators, low contrast and uncontrolled carousels",
            version="1.0.0"
        )

    def create_ui_tab(self, parent, main_app) -> 'BaseToolTab':
        """Create the Accessibility Checker UI tab"""
        from tools.accessibility_checker.accessibility_ui import AccessibilityCheckerTab
        return AccessibilityCheckerTab(parent, main_app)

    def get_tab_title(self) -> str:
        """Get the display title for the tab"""
        return "Accessibility Checker"

    def get_help_content(self) -> Dict[str, Any]:
        """Get help content for the Accessibility Checker tool"""
        return {
            "title": "Accessibility Checker - Help",
            "sections": [
                {
                    "title": "Quick Start",
                    "items": [
                        "1. Open a design document exported as JSON",
                        "2. Choose the scope: selection, current page or whole document",
                        "3. Pick the checks to run and the minimum contrast ratio",
                        "4. Click 'RUN CHECKS' and review the issue list",
                        "5. Double-click an issue to select the node in the document"
                    ]
                },
                {
                    "title": "Checks & WCAG Criteria",
                    "items": [
                        "Color Independence (WCAG 1.4.1 Use of Color): Indicator rows (page dots, steppers) must not mark the active item by color alone",
                        "Contrast (WCAG 1.4.3 / 1.4.11): Text and shape fills must meet the minimum ratio against the nearest ancestor fill",
                        "Auto-rotating Content (WCAG 2.2.2 Pause, Stop, Hide): Carousels and rolling banners need previous/next, pause or full view controls"
                    ]
                },
                {
                    "title": "Contrast Threshold",
                    "items": [
                        "Default minimum ratio is 3:1",
                        "Use 4.5:1 for normal body text (Level AA)",
                        "Only solid fills are evaluated; gradients and images are skipped",
                        "Nodes without a filled ancestor are compared against white"
                    ]
                },
                {
                    "title": "Issue Severity Levels",
                    "items": [
                        "ERROR (Red): Text below the contrast threshold",
                        "WARNING (Yellow): Likely problems that need a designer's judgement"
                    ]
                },
                {
                    "title": "Important Notes",
                    "items": [
                        "This tool is read-only - it does not modify your document",
                        "Carousel detection is keyword based and may report extra warnings",
                        "Automated checks are a starting point - manual review recommended"
                    ]
                }
            ],
            "warnings": [
                "Hidden nodes and everything under them are skipped",
                "Auto-rotating content is inferred from names and text, not from prototype settings"
            ]
        }

    def can_run(self) -> bool:
        """Check if the Accessibility Checker tool can run"""
        try:
            from tools.accessibility_checker.accessibility_analyzer import AccessibilityAnalyzer  # noqa: F401
            return True
        except ImportError as e:
            self.logger.error(f"Accessibility Checker dependencies not available: {e}")
            return False
