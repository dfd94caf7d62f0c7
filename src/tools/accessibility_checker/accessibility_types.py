"""
Accessibility Checker - Data Types and Models

Data classes for representing accessibility check results, issues, and the
per-run analysis context, plus the shape/keyword tables the checks use.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Set
from enum import Enum

from core.document_tree import VisualNode, Paint


class AccessibilitySeverity(Enum):
    """Severity levels for accessibility issues"""
    ERROR = "error"   # Text contrast failures
    WARNING = "warn"  # Likely problems that need a designer's judgement


class AccessibilityCheckType(Enum):
    """Types of accessibility checks performed"""
    COLOR_INDEPENDENCE = "color-independence"
    CONTRAST = "contrast"
    AUTO_CONTENT = "auto-content"


# Display names for check types
CHECK_TYPE_DISPLAY_NAMES = {
    AccessibilityCheckType.COLOR_INDEPENDENCE: "Color Independence",
    AccessibilityCheckType.CONTRAST: "Contrast",
    AccessibilityCheckType.AUTO_CONTENT: "Auto-rotating Content",
}

# Config keys (snake_case) and protocol keys (camelCase) per check type
CHECK_TYPE_CONFIG_KEYS = {
    AccessibilityCheckType.COLOR_INDEPENDENCE: "color_independence",
    AccessibilityCheckType.CONTRAST: "contrast",
    AccessibilityCheckType.AUTO_CONTENT: "auto_content",
}

CHECK_TYPE_PROTOCOL_KEYS = {
    AccessibilityCheckType.COLOR_INDEPENDENCE: "colorIndependence",
    AccessibilityCheckType.CONTRAST: "contrast",
    AccessibilityCheckType.AUTO_CONTENT: "autoContent",
}


@dataclass(frozen=True)
class AccessibilityIssue:
    """Represents a single accessibility issue found in the document"""
    node_id: str
    page_name: str
    node_name: str
    check_type: AccessibilityCheckType
    severity: AccessibilitySeverity
    message: str
    suggestion: str

    @classmethod
    def for_node(cls, node: VisualNode, check_type: 'AccessibilityCheckType',
                 severity: 'AccessibilitySeverity', message: str,
                 suggestion: str) -> 'AccessibilityIssue':
        """Build an issue for a node, filling in its id, page and name"""
        return cls(
            node_id=node.id,
            page_name=node.page_name(),
            node_name=node.name,
            check_type=check_type,
            severity=severity,
            message=message,
            suggestion=suggestion,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dictionary shape used by the results message"""
        return {
            "nodeId": self.node_id,
            "page": self.page_name,
            "name": self.node_name,
            "type": self.check_type.value,
            "severity": self.severity.value,
            "message": self.message,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class Rect:
    """Axis-aligned bounding box in document space"""
    x: float
    y: float
    width: float
    height: float

    @property
    def cx(self) -> float:
        return self.x + self.width / 2

    @property
    def cy(self) -> float:
        return self.y + self.height / 2


@dataclass
class IndicatorCandidate:
    """A small filled shape that may belong to an indicator row"""
    node: VisualNode
    rect: Rect
    fill: Paint


@dataclass
class ClusterAnalysis:
    """A validated indicator cluster and the items flagged as color-only focus"""
    focus_items: List[IndicatorCandidate]
    items: List[IndicatorCandidate]


@dataclass
class AnalysisContext:
    """
    State for exactly one analysis run.

    Created fresh per run and passed into every check. The two id sets only
    grow during a run, which caps indicator output at one issue per node.
    """
    rules: Dict[str, bool]
    min_contrast: float
    locale: str = "en"
    issues: List[AccessibilityIssue] = field(default_factory=list)
    checked_indicator_containers: Set[str] = field(default_factory=set)
    indicator_issued: Set[str] = field(default_factory=set)
    nodes_visited: int = 0

    def is_rule_enabled(self, check_type: AccessibilityCheckType) -> bool:
        return bool(self.rules.get(CHECK_TYPE_CONFIG_KEYS[check_type], True))


@dataclass
class AccessibilityAnalysisResult:
    """Complete result of an accessibility analysis"""
    document_name: str = ""
    scope: str = "document"
    min_contrast: float = 3.0

    issues: List[AccessibilityIssue] = field(default_factory=list)

    # Summary counts
    total_issues: int = 0
    errors: int = 0
    warnings: int = 0
    nodes_visited: int = 0

    # Per-check issue counts
    issues_by_type: Dict[AccessibilityCheckType, int] = field(default_factory=dict)

    # Metadata
    analysis_timestamp: str = ""
    analysis_duration_ms: int = 0

    def __post_init__(self):
        """Initialize issues_by_type with all check types"""
        if not self.issues_by_type:
            self.issues_by_type = {check_type: 0 for check_type in AccessibilityCheckType}

    def update_counts(self):
        """Recalculate summary counts from issues list"""
        self.total_issues = len(self.issues)
        self.errors = sum(1 for i in self.issues if i.severity == AccessibilitySeverity.ERROR)
        self.warnings = sum(1 for i in self.issues if i.severity == AccessibilitySeverity.WARNING)

        self.issues_by_type = {check_type: 0 for check_type in AccessibilityCheckType}
        for issue in self.issues:
            self.issues_by_type[issue.check_type] += 1

    def get_issues_by_type(self, check_type: AccessibilityCheckType) -> List[AccessibilityIssue]:
        """Get all issues of a specific type"""
        return [i for i in self.issues if i.check_type == check_type]

    def get_issues_by_severity(self, severity: AccessibilitySeverity) -> List[AccessibilityIssue]:
        """Get all issues of a specific severity"""
        return [i for i in self.issues if i.severity == severity]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "document_name": self.document_name,
            "scope": self.scope,
            "min_contrast": self.min_contrast,
            "total_issues": self.total_issues,
            "errors": self.errors,
            "warnings": self.warnings,
            "nodes_visited": self.nodes_visited,
            "issues_by_type": {k.value: v for k, v in self.issues_by_type.items()},
            "issues": [i.to_dict() for i in self.issues],
            "analysis_timestamp": self.analysis_timestamp,
            "analysis_duration_ms": self.analysis_duration_ms,
        }


# =============================================================================
# SHAPE TABLES
# =============================================================================

# Shapes that can act as color-coded indicator dots
COLOR_INDICATOR_TYPES = {
    "RECTANGLE",
    "ELLIPSE",
    "POLYGON",
    "STAR",
    "VECTOR",
    "LINE",
}

# Shapes whose fill is checked for contrast against the background
CONTRAST_SHAPE_TYPES = COLOR_INDICATOR_TYPES | {"BOOLEAN_OPERATION"}

# Name fragments marking large decorative backgrounds
BACKGROUND_NAME_PATTERNS = ["bg", "background", "container", "frame"]

DEFAULT_MIN_CONTRAST = 3.0

# Indicator geometry gates (document units)
INDICATOR_MIN_SIDE = 2
INDICATOR_MAX_SHORT_SIDE = 24
INDICATOR_MAX_LONG_SIDE = 640
INDICATOR_MAX_ASPECT = 120
INDICATOR_CLUSTER_GAP = 72
INDICATOR_MAX_SPREAD = 720
INDICATOR_MIN_CLUSTER_SIZE = 3
INDICATOR_CROSS_AXIS_FACTOR = 1.5
INDICATOR_ALONG_AXIS_FACTOR = 4
INDICATOR_MAX_SIZE_RATIO = 1.4
INDICATOR_MAX_ASPECT_RATIO = 1.6

# Slide-index to pause-control proximity (document units)
NEARBY_MAX_DX = 160
NEARBY_MAX_DY = 120


# =============================================================================
# AUTO-ROTATING CONTENT KEYWORDS (English and Korean)
# =============================================================================

AUTO_CONTENT_KEYWORDS = [
    "carousel", "slider", "auto", "rolling", "banner", "slide",
    "자동", "슬라이드", "배너", "롤링",
]

PREV_KEYWORDS = ["prev", "previous", "이전", "이전보기", "이전글", "이전배너"]

NEXT_KEYWORDS = ["next", "다음", "다음보기", "다음글", "다음배너"]

PAUSE_TEXT_KEYWORDS = ["pause", "stop", "정지", "일시정지", "멈춤", "재생", "play", "멈추기"]

PAUSE_GLYPHS = ["❚", "❙", "❚❚", "⏸", "⏯", "■", "▶", "⏵", "⏹"]

FULL_VIEW_KEYWORDS = ["full", "전체 보기", "전체보기"]

# "2 / 5" style slide counters
SLIDE_INDEX_PATTERN = r"\s*[0-9]+\s*/\s*[0-9]+\s*"
