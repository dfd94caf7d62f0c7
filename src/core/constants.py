"""
Design Accessibility Checker - Application Constants
"""

class AppConstants:
    """Essential application constants."""

    # =============================================================================
    # CORE APPLICATION INFO
    # =============================================================================

    APP_NAME = "Design Accessibility Checker"
    APP_VERSION = "v1.0"
    WINDOW_TITLE = APP_NAME
    WINDOW_SIZE = "1200x820"
    MIN_WINDOW_SIZE = (960, 640)

    # =============================================================================
    # TOOL ORDER - Controls notebook tab order
    # =============================================================================

    TOOL_ORDER = [
        "accessibility_checker",
    ]

    # =============================================================================
    # THEME COLORS
    # =============================================================================

    DEFAULT_THEME = 'light'

    THEMES = {
        'light': {
            'background': '#ffffff',
            'section_bg': '#f5f5f7',
            'border': '#d8d8e0',
            'text_primary': '#1a1a2e',
            'text_secondary': '#4a4a5e',
            'text_muted': '#808090',
            'success': '#059669',
            'warning': '#d97706',
            'error': '#dc2626',
            'info': '#2563eb',
        },
        'dark': {
            'background': '#0d0d1a',
            'section_bg': '#161627',
            'border': '#3d3d5c',
            'text_primary': '#ffffff',
            'text_secondary': '#c0c0d0',
            'text_muted': '#808090',
            'success': '#10b981',
            'warning': '#f5751f',
            'error': '#ef4444',
            'info': '#3b82f6',
        },
    }

    @classmethod
    def get_colors(cls, theme: str = None) -> dict:
        """Get colors for specified theme (or current default)"""
        theme = theme or cls.DEFAULT_THEME
        return cls.THEMES.get(theme, cls.THEMES[cls.DEFAULT_THEME])

    # =============================================================================
    # TECHNICAL CONFIGURATION
    # =============================================================================

    # File settings
    MAX_RECENT_FILES = 10


# =============================================================================
# CENTRALIZED ERROR MESSAGES
# =============================================================================

class ErrorMessages:
    """Centralized error message strings for consistent UI messaging."""

    # Dialog titles
    FILE_NOT_FOUND = "File Not Found"
    INVALID_INPUT = "Invalid Input"
    OPERATION_FAILED = "Operation Failed"
    WARNING = "Warning"

    # Common message bodies
    NO_FILE_SELECTED = "Please open a document first."
    NO_RESULTS = "Please run the checks first."



__all__ = ['AppConstants', 'ErrorMessages']
