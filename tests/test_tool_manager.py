from unittest import mock

import pytest

from core.tool_manager import BaseTool, ToolManager, ToolRegistrationError
from tools.accessibility_checker import AccessibilityCheckerTool


class StubTool(BaseTool):
    def __init__(self, tool_id="stub", runnable=True, broken_tab=False):
        super().__init__(tool_id, "Stub", "A tool for tests")
        self.runnable = runnable
        self.broken_tab = broken_tab

    def create_ui_tab(self, parent, main_app):
        if self.broken_tab:
            raise RuntimeError("no display")
        tab = mock.Mock()
        tab.get_frame.return_value = f"frame-{self.tool_id}"
        return tab

    def get_tab_title(self):
        return f"Stub {self.tool_id}"

    def get_help_content(self):
        return {"title": "Stub help"}

    def can_run(self):
        return self.runnable


@pytest.fixture
def manager():
    messages = []
    mgr = ToolManager(logger_callback=messages.append)
    mgr.messages = messages
    return mgr


def test_register(manager):
    tool = StubTool()
    manager.register_tool(tool)
    assert manager.get_all_tools() == [tool]
    assert "Registered tool: Stub (v1.0.0)" in manager.messages


def test_registration_errors(manager):
    manager.register_tool(StubTool())
    with pytest.raises(ToolRegistrationError, match="already registered"):
        manager.register_tool(StubTool())
    with pytest.raises(ToolRegistrationError, match="Not a BaseTool"):
        manager.register_tool(object())
    with pytest.raises(ToolRegistrationError, match="cannot run"):
        manager.register_tool(StubTool("broken", runnable=False))


def test_discovery_registers_the_accessibility_checker(manager):
    assert manager.discover_and_register_tools("tools") == 1
    [tool] = manager.get_all_tools()
    assert isinstance(tool, AccessibilityCheckerTool)
    assert tool.get_tab_title() == "Accessibility Checker"


def test_discovery_of_missing_package(manager):
    assert manager.discover_and_register_tools("no_such_tools_package") == 0
    assert any("Tool discovery failed" in m for m in manager.messages)


def test_tools_follow_tool_order(manager):
    manager.register_tool(StubTool("zzz"))
    manager.register_tool(AccessibilityCheckerTool())
    assert [t.tool_id for t in manager.get_all_tools()] == ["accessibility_checker", "zzz"]


def test_create_tool_tabs_skips_tools_that_fail(manager):
    manager.register_tool(StubTool("good"))
    manager.register_tool(StubTool("bad", broken_tab=True))
    notebook = mock.Mock()

    tabs = manager.create_tool_tabs(notebook, main_app=None)

    assert list(tabs) == ["good"]
    notebook.add.assert_called_once_with("frame-good", text="Stub good")
    assert any("Could not build tab for Stub: no display" in m for m in manager.messages)


def test_help_content_has_sections():
    help_content = AccessibilityCheckerTool().get_help_content()
    titles = [s["title"] for s in help_content["sections"]]
    assert "Quick Start" in titles
    assert help_content["warnings"]
