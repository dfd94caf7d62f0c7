"""
Accessibility Checker - Issue message catalogue

User-facing issue text per locale. Message templates are filled with
str.format; unknown locales fall back to English.
"""

from typing import Dict

DEFAULT_LOCALE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "indicator.message": "Indicator group detected that differs only by color.",
        "indicator.suggestion": "Distinguish the active state by pattern, border, or text as well as color.",
        "contrast.text.message": "{node_type} contrast {ratio}:1 is below the {threshold}:1 minimum",
        "contrast.text.suggestion": "Adjust the foreground/background colors or add a supporting color.",
        "contrast.shape.message": "Shape/icon contrast {ratio}:1 is below the {threshold}:1 minimum",
        "contrast.shape.suggestion": "Increase the color contrast so the shape stands out from its background.",
        "auto.slide_index.message": (
            "No play/pause control found near the slide indicator (e.g. 1/4). "
            "If this content rotates automatically, add a play/pause control or a full view."
        ),
        "auto.slide_index.suggestion": "For auto-playing content, add a play/pause control or a full view.",
        "auto.generic.message": (
            "Looks like auto-rotating content, but no controls "
            "(previous/next/pause/full view) were found."
        ),
        "auto.generic.suggestion": "Provide previous/next, pause, or full view controls for the banner/slider.",
    },
    "ko": {
        "indicator.message": "색상만 다른 인디케이터 그룹이 감지되었습니다.",
        "indicator.suggestion": "활성 상태를 패턴, 테두리, 텍스트 등 색 이외 수단으로도 구분하세요.",
        "contrast.text.message": "{node_type} 대비 {ratio}:1, 기준 {threshold}:1 미만",
        "contrast.text.suggestion": "전경·배경 색상을 재조정하거나 보조 색을 추가하세요.",
        "contrast.shape.message": "도형/아이콘 대비 {ratio}:1, 기준 {threshold}:1 미만",
        "contrast.shape.suggestion": "배경과 구분될 수 있도록 색 대비를 높이십시오.",
        "auto.slide_index.message": (
            "슬라이드 지표(예: 1/4) 근처에서 재생/멈춤 컨트롤을 찾지 못했습니다. "
            "자동재생이면 재생/멈춤 컨트롤 혹은 전체보기를 추가해 주세요."
        ),
        "auto.slide_index.suggestion": "자동 재생인 경우 재생/멈춤 컨트롤 또는 전체 보기를 추가해 주세요.",
        "auto.generic.message": "자동 전환 콘텐츠로 추정되지만 제어(이전/다음/정지/전체보기)를 찾지 못했습니다.",
        "auto.generic.suggestion": "배너/슬라이더에 이전·다음·정지 또는 전체보기 컨트롤을 제공하세요.",
    },
}

SUPPORTED_LOCALES = sorted(MESSAGES)


def format_number(value: float) -> str:
    """Round to 2 decimals and drop trailing zeros (3.0 -> '3', 4.567 -> '4.57')"""
    return f"{round(value, 2):g}"


def get_message(key: str, locale: str = DEFAULT_LOCALE, **kwargs) -> str:
    """Look up a message for a locale and fill in its placeholders"""
    catalogue = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    template = catalogue.get(key, MESSAGES[DEFAULT_LOCALE][key])
    return template.format(**kwargs) if kwargs else template
