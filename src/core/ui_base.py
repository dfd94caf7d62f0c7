"""
Base UI components and patterns for tool tabs

Provides the BaseToolTab foundation shared by all tool tabs: log area,
progress bar, background runner with main-thread callbacks, file input
rows, message boxes and help windows.
"""

import tkinter as tk
from tkinter import ttk, messagebox, scrolledtext, filedialog
import threading
import json
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any, Callable, List
from abc import ABC, abstractmethod

from core.constants import AppConstants


logger = logging.getLogger(__name__)


def get_settings_dir() -> Path:
    """Per-user settings directory"""
    if os.name == 'nt':  # Windows
        appdata = os.environ.get('APPDATA', os.path.expanduser('~'))
        return Path(appdata) / 'Design-A11y-Checker'
    return Path.home() / '.config' / 'design-a11y-checker'


class RecentFilesManager:
    """
    Manages recent files list with persistence.
    Stores recently used file paths per tool.
    """

    MAX_RECENT = AppConstants.MAX_RECENT_FILES
    _instance: Optional['RecentFilesManager'] = None

    def __init__(self, settings_path: Optional[Path] = None):
        self._settings_path = settings_path or get_settings_dir() / "recent_files.json"
        self._recent_files: Dict[str, List[str]] = {}
        self._load_recent_files()

    @classmethod
    def get_instance(cls) -> 'RecentFilesManager':
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = RecentFilesManager()
        return cls._instance

    def _load_recent_files(self):
        """Load recent files from settings"""
        try:
            if self._settings_path.exists():
                with open(self._settings_path, 'r', encoding='utf-8') as f:
                    settings = json.load(f)
                self._recent_files = settings.get('recent_files', {})
        except (OSError, ValueError, AttributeError) as e:
            logger.debug(f"Could not read recent files: {e}")
            self._recent_files = {}

    def _save_recent_files(self):
        """Save recent files to settings"""
        try:
            self._settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._settings_path, 'w', encoding='utf-8') as f:
                json.dump({'recent_files': self._recent_files}, f, indent=2)
        except OSError as e:
            logger.debug(f"Could not save recent files: {e}")

    def add_file(self, tool_id: str, file_path: str):
        """Add a file to the recent list for a tool"""
        files = self._recent_files.setdefault(tool_id, [])

        # Remove if already exists (to move to top)
        if file_path in files:
            files.remove(file_path)
        files.insert(0, file_path)

        self._recent_files[tool_id] = files[:self.MAX_RECENT]
        self._save_recent_files()

    def get_recent(self, tool_id: str) -> List[str]:
        """Get recent files for a tool (only existing files)"""
        files = self._recent_files.get(tool_id, [])
        return [f for f in files if Path(f).exists()]


def get_recent_files_manager() -> RecentFilesManager:
    """Get the global recent files manager instance"""
    return RecentFilesManager.get_instance()


class BaseToolTab(ABC):
    """
    Base class for tool UI tabs.
    Provides common UI patterns and functionality.
    """

    def __init__(self, parent, main_app, tool_id: str, tool_name: str):
        self.parent = parent
        self.main_app = main_app
        self.tool_id = tool_id
        self.tool_name = tool_name

        # Create main frame for this tab
        self.frame = ttk.Frame(parent, padding="12")

        # Common UI state
        self.is_busy = False
        self.progress_bar = None
        self.progress_frame = None
        self.log_text = None
        self.colors = AppConstants.get_colors()

    def get_frame(self) -> ttk.Frame:
        """Return the main frame for this tab"""
        return self.frame

    @abstractmethod
    def setup_ui(self) -> None:
        """Setup the UI for this tab - must be implemented by subclasses"""
        pass

    @abstractmethod
    def reset_tab(self) -> None:
        """Reset the tab to initial state - must be implemented by subclasses"""
        pass

    @abstractmethod
    def show_help_dialog(self) -> None:
        """Show help dialog for this tab - must be implemented by subclasses"""
        pass

    def on_tab_activated(self) -> None:
        """Called when this tab becomes active (user switches to it)."""
        pass

    def on_close(self) -> None:
        """Called when the application window is closing."""
        pass

    def add_recent_file(self, file_path: str):
        get_recent_files_manager().add_file(self.tool_id, file_path)

    def get_recent_files(self) -> List[str]:
        return get_recent_files_manager().get_recent(self.tool_id)

    # =========================================================================
    # MESSAGE BOXES
    # =========================================================================

    def show_error(self, title: str, message: str):
        messagebox.showerror(title, message, parent=self.frame.winfo_toplevel())

    def show_warning(self, title: str, message: str):
        messagebox.showwarning(title, message, parent=self.frame.winfo_toplevel())

    # =========================================================================
    # COMMON SECTIONS
    # =========================================================================

    def create_file_input_section(self, parent: ttk.Widget, title: str,
                                  file_types: List[tuple],
                                  on_browse: Optional[Callable[[str], None]] = None) -> Dict[str, Any]:
        """Create a labelled file path row with a Browse button

        Returns:
            Dict with 'frame', 'path_var', 'entry', 'browse_button'
        """
        frame = ttk.LabelFrame(parent, text=title, padding="8")
        path_var = tk.StringVar()

        recent = self.get_recent_files()
        entry = ttk.Combobox(frame, textvariable=path_var, values=recent)
        entry.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(0, 8))

        def browse_file_command():
            self._browse_file(path_var, file_types)
            if on_browse and path_var.get():
                on_browse(path_var.get())

        browse_button = ttk.Button(frame, text="Browse...", command=browse_file_command)
        browse_button.pack(side=tk.RIGHT)

        return {
            'frame': frame,
            'path_var': path_var,
            'entry': entry,
            'browse_button': browse_button,
        }

    def create_log_section(self, parent: ttk.Widget, title: str = "Analysis & Progress Log") -> Dict[str, Any]:
        """Create a read-only log area with Export/Clear buttons

        Returns:
            Dict with 'frame', 'text_widget'
        """
        frame = ttk.LabelFrame(parent, text=title, padding="8")

        self.log_text = scrolledtext.ScrolledText(frame, height=8, wrap=tk.WORD, state=tk.DISABLED,
                                                  font=('Consolas', 9))
        self.log_text.pack(fill=tk.BOTH, expand=True)

        button_row = ttk.Frame(frame)
        button_row.pack(fill=tk.X, pady=(6, 0))

        def export_log_command():
            self._export_log(self.log_text)

        def clear_log_command():
            self._clear_log(self.log_text)

        ttk.Button(button_row, text="Export Log", command=export_log_command).pack(side=tk.RIGHT)
        ttk.Button(button_row, text="Clear Log", command=clear_log_command).pack(side=tk.RIGHT, padx=(0, 6))

        return {
            'frame': frame,
            'text_widget': self.log_text,
        }

    def create_progress_bar(self, parent: ttk.Widget) -> Dict[str, Any]:
        """Create a standardized progress bar

        Returns:
            Dict with 'frame', 'progress_bar'
        """
        self.progress_frame = ttk.Frame(parent)
        self.progress_bar = ttk.Progressbar(self.progress_frame, mode='determinate', maximum=100)
        self.progress_bar.pack(fill='x')

        return {
            'frame': self.progress_frame,
            'progress_bar': self.progress_bar
        }

    def log_message(self, message: str):
        """Log message to the tab's log area"""
        if self.log_text:
            self.log_text.config(state=tk.NORMAL)
            self.log_text.insert(tk.END, message + "\n")
            self.log_text.config(state=tk.DISABLED)
            self.log_text.see(tk.END)

    def update_progress(self, progress_percent: int, message: str = "", show: bool = True):
        """Update progress bar

        Args:
            progress_percent: Progress percentage (0-100)
            message: Status message, written to the log
            show: Whether to show or reset progress
        """
        if show:
            if self.progress_bar:
                self.progress_bar['value'] = progress_percent
            if message:
                self.log_message(f"{progress_percent}% - {message}")
            self.is_busy = progress_percent < 100
        else:
            if self.progress_bar:
                self.progress_bar['value'] = 0
            self.is_busy = False

    def run_in_background(self, target_func: Callable,
                          success_callback: Callable = None,
                          error_callback: Callable = None):
        """
        Run a function in background thread; callbacks run on the Tk main thread.

        Args:
            target_func: Function to run in background
            success_callback: Called on success with result
            error_callback: Called on error with exception
        """

        def thread_target():
            result = None
            caught_error = None

            try:
                result = target_func()
            except Exception as e:
                logger.exception("Background operation failed")
                caught_error = e

            def schedule_callbacks():
                try:
                    if caught_error is not None:
                        if error_callback:
                            error_callback(caught_error)
                        else:
                            self._default_error_handler(caught_error)
                    elif success_callback:
                        success_callback(result)
                except Exception as callback_error:
                    logger.exception("Callback error")
                    self._default_error_handler(callback_error)

            self.frame.after(0, schedule_callbacks)

        thread = threading.Thread(target=thread_target, daemon=True)
        thread.start()
        return thread

    def _default_error_handler(self, error: Exception):
        """Default error handler"""
        self.log_message(f"Error: {error}")
        self.show_error("Error", str(error))

    def _browse_file(self, path_var: tk.StringVar, file_types: List[tuple]):
        """Common file browsing logic"""
        file_path = filedialog.askopenfilename(
            title="Select File",
            filetypes=file_types
        )
        if file_path:
            path_var.set(file_path)

    def _export_log(self, log_widget):
        """Export log content to file"""
        log_content = log_widget.get(1.0, tk.END)
        file_path = filedialog.asksaveasfilename(
            title="Export Log", defaultextension=".txt",
            filetypes=[("Text Files", "*.txt"), ("All Files", "*.*")]
        )
        if not file_path:
            return

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(f"{self.tool_name} - Analysis Log\n")
                f.write(f"{'=' * 50}\n\n")
                f.write(log_content)
        except OSError as e:
            self.show_error("Export Error", f"Failed to export log: {e}")
            return

        self.log_message(f"Log exported to: {file_path}")

    def _clear_log(self, log_widget):
        """Clear log content"""
        log_widget.config(state=tk.NORMAL)
        log_widget.delete(1.0, tk.END)
        log_widget.config(state=tk.DISABLED)
        self._show_welcome_message()

    def _show_welcome_message(self):
        """Show welcome message - can be overridden by subclasses"""
        self.log_message(f"Welcome to {self.tool_name}!")
        self.log_message("=" * 60)

    def create_help_window(self, title: str, content: Dict[str, Any]) -> tk.Toplevel:
        """Render a tool's help content (title, sections, warnings) in a dialog"""
        window = tk.Toplevel(self.frame.winfo_toplevel())
        window.title(title)
        window.geometry("640x560")
        window.transient(self.frame.winfo_toplevel())

        text = scrolledtext.ScrolledText(window, wrap=tk.WORD, padx=12, pady=12)
        text.pack(fill=tk.BOTH, expand=True)
        text.tag_configure('heading', font=('Segoe UI', 11, 'bold'))
        text.tag_configure('warning', foreground=self.colors['warning'])

        for section in content.get('sections', []):
            text.insert(tk.END, section['title'] + "\n", 'heading')
            for item in section.get('items', []):
                text.insert(tk.END, f"  {item}\n")
            text.insert(tk.END, "\n")

        warnings = content.get('warnings', [])
        if warnings:
            text.insert(tk.END, "Warnings\n", 'heading')
            for item in warnings:
                text.insert(tk.END, f"  {item}\n", 'warning')

        text.config(state=tk.DISABLED)

        def close_window(event=None):
            window.destroy()

        window.bind('<Escape>', close_window)
        ttk.Button(window, text="Close", command=close_window).pack(pady=8)
        return window
