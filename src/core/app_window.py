"""
Main application window with Tool Manager integration

Hosts every registered tool tab in a notebook. Tools are discovered
automatically from the tools package.
"""

import logging
import tkinter as tk
from tkinter import ttk, messagebox
from typing import Dict, Optional

from core.constants import AppConstants
from core.tool_manager import ToolManager, get_tool_manager


class DesignA11yCheckerApp:
    """
    Tabbed application shell; one notebook tab per enabled tool.
    """

    def __init__(self, tool_manager: Optional[ToolManager] = None):
        self.logger = logging.getLogger(__name__)
        self.tool_manager = tool_manager or get_tool_manager()
        self.root: Optional[tk.Tk] = None
        self.notebook: Optional[ttk.Notebook] = None
        self.tool_tabs: Dict[str, object] = {}

        self._initialize_tools()

    def _initialize_tools(self):
        """Discover and register all tools"""
        if not self.tool_manager.get_all_tools():
            registered_count = self.tool_manager.discover_and_register_tools("tools")
            if registered_count == 0:
                self.logger.warning("No tools were discovered")

    def create_ui(self) -> tk.Tk:
        """Create the main tabbed user interface"""
        root = tk.Tk()
        root.title(f"{AppConstants.WINDOW_TITLE} {AppConstants.APP_VERSION}")
        root.geometry(AppConstants.WINDOW_SIZE)
        root.minsize(*AppConstants.MIN_WINDOW_SIZE)
        self.root = root

        main_frame = ttk.Frame(root, padding="10")
        main_frame.pack(fill=tk.BOTH, expand=True)

        self.notebook = ttk.Notebook(main_frame)
        self.notebook.pack(fill=tk.BOTH, expand=True)
        self.notebook.bind('<<NotebookTabChanged>>', self._on_tab_changed)

        self.tool_tabs = self.tool_manager.create_tool_tabs(self.notebook, self)
        if not self.tool_tabs:
            self._show_no_tools_error()
        else:
            self.notebook.select(0)

        root.protocol("WM_DELETE_WINDOW", self._on_close)
        return root

    def _on_tab_changed(self, event=None):
        for tab in self.tool_tabs.values():
            if str(tab.get_frame()) == self.notebook.select():
                tab.on_tab_activated()

    def _show_no_tools_error(self):
        error_frame = ttk.Frame(self.notebook, padding="20")
        self.notebook.add(error_frame, text="No Tools")
        ttk.Label(error_frame, text="No tools could be loaded.\nCheck the log for details.",
                  justify=tk.CENTER).pack(expand=True)

    def _on_close(self):
        for tab in self.tool_tabs.values():
            try:
                tab.on_close()
            except Exception:
                self.logger.exception("Error while closing tab")
        self.root.destroy()

    def open_document(self, path: str, tool_id: str = "accessibility_checker") -> None:
        """Open a document in a tool tab once the main loop is running"""
        tab = self.tool_tabs.get(tool_id)
        if tab is None:
            self.logger.warning(f"Cannot open {path}: tool '{tool_id}' is not loaded")
            return
        tab.path_var.set(path)
        self.root.after(0, lambda: tab._open_document(path))

    def run(self, document_path: Optional[str] = None) -> None:
        root = self.create_ui()
        if document_path:
            self.open_document(document_path)
        root.mainloop()

    def show_error(self, title: str, message: str):
        """Show error dialog"""
        messagebox.showerror(title, message)
