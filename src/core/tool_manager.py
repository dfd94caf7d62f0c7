"""
Tool Manager - discovers checker tools and builds their notebook tabs

Each package under ``tools`` exposes one ``*Tool`` class deriving from
BaseTool. The application window asks the manager to find them, then to
create one tab per tool in AppConstants.TOOL_ORDER.
"""

import importlib
import logging
import pkgutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type

from core.constants import AppConstants


class ToolRegistrationError(Exception):
    """Raised when a tool cannot be added to the registry."""
    pass


class BaseTool(ABC):
    """
    Interface every tool package implements: identity, a tab, help text.
    """

    def __init__(self, tool_id: str, name: str, description: str, version: str = "1.0.0"):
        self.tool_id = tool_id
        self.name = name
        self.description = description
        self.version = version
        self._logger = None

    @property
    def logger(self):
        if self._logger is None:
            self._logger = logging.getLogger(f"tool.{self.tool_id}")
        return self._logger

    @abstractmethod
    def create_ui_tab(self, parent, main_app) -> 'BaseToolTab':
        """Build the tool's tab inside the notebook ``parent``"""
        pass

    @abstractmethod
    def get_tab_title(self) -> str:
        pass

    @abstractmethod
    def get_help_content(self) -> Dict[str, Any]:
        """Help dialog content: title, sections of items, warnings"""
        pass

    def can_run(self) -> bool:
        """Whether the tool's own modules import cleanly"""
        return True


class ToolManager:
    """
    Registry of tools, keyed by tool id.
    """

    def __init__(self, logger_callback: Optional[Callable[[str], None]] = None):
        self._tools: Dict[str, BaseTool] = {}
        self.logger = logging.getLogger(__name__)
        self.logger_callback = logger_callback or self.logger.info

    def register_tool(self, tool: BaseTool) -> None:
        """
        Add a tool to the registry.

        Raises:
            ToolRegistrationError: For non-tools, duplicate ids and tools that cannot run
        """
        if not isinstance(tool, BaseTool):
            raise ToolRegistrationError(f"Not a BaseTool subclass: {type(tool).__name__}")
        if tool.tool_id in self._tools:
            raise ToolRegistrationError(f"Tool id '{tool.tool_id}' is already registered")
        if not tool.can_run():
            raise ToolRegistrationError(f"Tool '{tool.tool_id}' cannot run")

        self._tools[tool.tool_id] = tool
        self.logger_callback(f"Registered tool: {tool.name} (v{tool.version})")

    def get_all_tools(self) -> List[BaseTool]:
        """Registered tools in TOOL_ORDER; unlisted tools follow in registration order"""
        order = AppConstants.TOOL_ORDER

        def position(tool: BaseTool) -> int:
            return order.index(tool.tool_id) if tool.tool_id in order else len(order)

        return sorted(self._tools.values(), key=position)

    def create_tool_tabs(self, notebook, main_app) -> Dict[str, 'BaseToolTab']:
        """
        Add one notebook tab per tool.

        A tool whose tab fails to build is logged and left out; the others
        still load.
        """
        tabs: Dict[str, 'BaseToolTab'] = {}
        for tool in self.get_all_tools():
            try:
                tab = tool.create_ui_tab(notebook, main_app)
                notebook.add(tab.get_frame(), text=tool.get_tab_title())
            except Exception as e:
                self.logger.exception(f"Could not build tab for {tool.name}")
                self.logger_callback(f"Could not build tab for {tool.name}: {e}")
                continue
            tabs[tool.tool_id] = tab
        return tabs

    def discover_and_register_tools(self, package_name: str = "tools") -> int:
        """
        Import every sub-package of ``package_name`` and register its tool class.

        Returns:
            Number of tools registered
        """
        try:
            package = importlib.import_module(package_name)
        except ImportError as e:
            self.logger_callback(f"Tool discovery failed: {e}")
            return 0

        count = 0
        package_dir = Path(package.__file__).parent
        for _finder, name, ispkg in pkgutil.iter_modules([str(package_dir)]):
            if not ispkg:
                continue
            try:
                module = importlib.import_module(f"{package_name}.{name}")
                tool_class = self._find_tool_class(module)
                if tool_class is None:
                    continue
                self.register_tool(tool_class())
                count += 1
            except (ImportError, ToolRegistrationError) as e:
                self.logger_callback(f"Skipping tool package '{name}': {e}")

        self.logger_callback(f"Tool discovery complete: {count} tools registered")
        return count

    @staticmethod
    def _find_tool_class(module) -> Optional[Type[BaseTool]]:
        for attr in dir(module):
            candidate = getattr(module, attr)
            if (isinstance(candidate, type) and issubclass(candidate, BaseTool)
                    and candidate is not BaseTool and attr.endswith('Tool')):
                return candidate
        return None


_tool_manager: Optional[ToolManager] = None


def get_tool_manager() -> ToolManager:
    """Process-wide manager used by the application window"""
    global _tool_manager
    if _tool_manager is None:
        _tool_manager = ToolManager()
    return _tool_manager
