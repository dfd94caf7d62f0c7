"""
Accessibility Checker - Message protocol

Dispatches messages from the presentation surface to the analyzer and the
document provider:

- run-checks   -> posts {"type": "results", "issues": [...]}
- select-node  -> selects the node and focuses the viewport (no response)
- close        -> ends the session (no response)

Malformed or unknown messages are ignored.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from core.document_provider import DocumentProvider
from tools.accessibility_checker.accessibility_analyzer import AccessibilityAnalyzer
from tools.accessibility_checker.accessibility_types import AccessibilityAnalysisResult
from tools.accessibility_checker.messages import DEFAULT_LOCALE


MSG_RUN_CHECKS = "run-checks"
MSG_SELECT_NODE = "select-node"
MSG_CLOSE = "close"
MSG_RESULTS = "results"


class AccessibilityMessageHandler:
    """Routes protocol messages for one document session"""

    def __init__(self, document: DocumentProvider,
                 post_message: Callable[[Dict[str, Any]], None],
                 on_close: Optional[Callable[[], None]] = None,
                 locale: str = DEFAULT_LOCALE,
                 logger_callback: Optional[Callable[[str], None]] = None,
                 progress_callback: Optional[Callable[[int, str], None]] = None):
        self.logger = logging.getLogger(__name__)
        self.document = document
        self.post_message = post_message
        self.on_close = on_close or document.close
        self.analyzer = AccessibilityAnalyzer(
            logger_callback=logger_callback,
            progress_callback=progress_callback,
            locale=locale,
        )
        self.last_result: Optional[AccessibilityAnalysisResult] = None

    def handle_message(self, msg: Any) -> None:
        """Dispatch a single message; anything unrecognized is dropped"""
        if not isinstance(msg, dict):
            self.logger.debug(f"Ignoring non-object message: {msg!r}")
            return

        msg_type = msg.get('type')
        if msg_type == MSG_RUN_CHECKS:
            self._handle_run_checks(msg)
        elif msg_type == MSG_SELECT_NODE:
            self._handle_select_node(msg)
        elif msg_type == MSG_CLOSE:
            self.logger.info("Close requested")
            self.on_close()
        else:
            self.logger.debug(f"Ignoring message with unknown type: {msg_type!r}")

    def _handle_run_checks(self, msg: Dict[str, Any]) -> None:
        payload = msg.get('payload')
        if not isinstance(payload, dict):
            payload = msg

        result = self.analyzer.run_checks_from_payload(self.document, payload)
        self.last_result = result
        issues: List[Dict[str, Any]] = [issue.to_dict() for issue in result.issues]
        self.post_message({"type": MSG_RESULTS, "issues": issues})

    def _handle_select_node(self, msg: Dict[str, Any]) -> None:
        node_id = msg.get('nodeId')
        node = self.document.get_node_by_id(node_id) if isinstance(node_id, str) else None
        if node is None:
            self.logger.debug(f"select-node: no node with id {node_id!r}")
            return
        self.document.set_selection([node])
        self.document.scroll_and_zoom_into_view([node])
