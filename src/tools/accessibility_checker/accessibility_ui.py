"""
Accessibility Checker UI - User interface for accessibility analysis

This module provides the user interface for the Accessibility Checker tool,
following the established patterns from other tools in the suite. The tab
never calls the analyzer directly: it posts protocol messages to an
AccessibilityMessageHandler and renders the "results" messages it gets back.
"""

import tkinter as tk
from tkinter import ttk, filedialog
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.cloud.figma_client import FigmaFileClient
from core.constants import ErrorMessages
from core.document_provider import DocumentProvider
from core.document_reader import DocumentReader, DocumentLoadError
from core.ui_base import BaseToolTab
from tools.accessibility_checker.accessibility_config import (
    SCOPE_DOCUMENT,
    SCOPE_PAGE,
    SCOPE_SELECTION,
    coerce_min_contrast,
    get_config,
    reset_config,
    save_config,
)
from tools.accessibility_checker.accessibility_types import (
    AccessibilityCheckType,
    CHECK_TYPE_CONFIG_KEYS,
    CHECK_TYPE_DISPLAY_NAMES,
)
from tools.accessibility_checker.message_handler import (
    AccessibilityMessageHandler,
    MSG_CLOSE,
    MSG_RESULTS,
    MSG_RUN_CHECKS,
    MSG_SELECT_NODE,
)
from tools.accessibility_checker.messages import SUPPORTED_LOCALES
from tools.accessibility_checker.report_export import export_csv, export_json


SCOPE_LABELS = [
    (SCOPE_SELECTION, "Selection"),
    (SCOPE_PAGE, "Current page"),
    (SCOPE_DOCUMENT, "Whole document"),
]

SEVERITY_DISPLAY = {
    "error": "Error",
    "warn": "Warning",
}

TYPE_DISPLAY = {check_type.value: name for check_type, name in CHECK_TYPE_DISPLAY_NAMES.items()}


class AccessibilityCheckerTab(BaseToolTab):
    """
    Accessibility Checker tab: document chooser, run options, issue list and details.
    """

    def __init__(self, parent, main_app):
        super().__init__(parent, main_app, "accessibility_checker", "Accessibility Checker")

        self.config = get_config()
        self.reader = DocumentReader()
        self.document: Optional[DocumentProvider] = None
        self.handler: Optional[AccessibilityMessageHandler] = None
        self.current_issues: List[Dict[str, Any]] = []
        self._running = False

        # Option variables
        self.path_var: Optional[tk.StringVar] = None
        self.figma_key_var = tk.StringVar()
        self.scope_var = tk.StringVar(value=self.config.scope)
        self.min_contrast_var = tk.StringVar(value=f"{self.config.min_contrast:g}")
        self.locale_var = tk.StringVar(value=self.config.locale)
        self.errors_only_var = tk.BooleanVar(value=self.config.min_severity == "error")
        self.rule_vars: Dict[AccessibilityCheckType, tk.BooleanVar] = {
            check_type: tk.BooleanVar(value=self.config.is_check_enabled(config_key))
            for check_type, config_key in CHECK_TYPE_CONFIG_KEYS.items()
        }

        self.setup_ui()
        self._show_welcome_message()

    def _show_welcome_message(self):
        self.log_message("Welcome to the Accessibility Checker!")
        self.log_message("=" * 60)
        self.log_message("Open a design document (JSON export) or enter a Figma file key,")
        self.log_message("pick the checks to run and click RUN CHECKS.")

    # =========================================================================
    # LAYOUT
    # =========================================================================

    def setup_ui(self) -> None:
        self.frame.columnconfigure(0, weight=1)
        self.frame.rowconfigure(2, weight=1)

        self._setup_file_input_section()
        self._setup_options_section()
        self._setup_results_section()
        self._setup_log_section()

    def _setup_file_input_section(self):
        section = self.create_file_input_section(
            self.frame, "Design Document",
            file_types=[("Design documents", "*.json"), ("All files", "*.*")],
            on_browse=self._open_document,
        )
        section['frame'].grid(row=0, column=0, sticky=(tk.W, tk.E), pady=(0, 8))
        self.path_var = section['path_var']
        section['entry'].bind('<Return>', lambda event: self._open_document(self.path_var.get()))
        section['entry'].bind('<<ComboboxSelected>>', lambda event: self._open_document(self.path_var.get()))

        figma_row = ttk.Frame(section['frame'])
        figma_row.pack(side=tk.BOTTOM, fill=tk.X, pady=(6, 0), before=section['entry'])
        ttk.Label(figma_row, text="Figma file key:").pack(side=tk.LEFT)
        ttk.Entry(figma_row, textvariable=self.figma_key_var, width=32).pack(side=tk.LEFT, padx=6)
        ttk.Button(figma_row, text="Fetch", command=self._fetch_figma_document).pack(side=tk.LEFT)
        self.close_button = ttk.Button(figma_row, text="Close Document", command=self._close_document,
                                       state=tk.DISABLED)
        self.close_button.pack(side=tk.RIGHT)

    def _setup_options_section(self):
        options = ttk.LabelFrame(self.frame, text="Checks", padding="8")
        options.grid(row=1, column=0, sticky=(tk.W, tk.E), pady=(0, 8))

        scope_frame = ttk.Frame(options)
        scope_frame.pack(side=tk.LEFT, padx=(0, 16), anchor=tk.N)
        ttk.Label(scope_frame, text="Scope", font=('Segoe UI', 9, 'bold')).pack(anchor=tk.W)
        for value, label in SCOPE_LABELS:
            ttk.Radiobutton(scope_frame, text=label, value=value,
                            variable=self.scope_var).pack(anchor=tk.W)

        rules_frame = ttk.Frame(options)
        rules_frame.pack(side=tk.LEFT, padx=(0, 16), anchor=tk.N)
        ttk.Label(rules_frame, text="Rules", font=('Segoe UI', 9, 'bold')).pack(anchor=tk.W)
        for check_type, var in self.rule_vars.items():
            ttk.Checkbutton(rules_frame, text=CHECK_TYPE_DISPLAY_NAMES[check_type],
                            variable=var).pack(anchor=tk.W)

        settings_frame = ttk.Frame(options)
        settings_frame.pack(side=tk.LEFT, anchor=tk.N)
        ttk.Label(settings_frame, text="Minimum contrast (x:1)").grid(row=0, column=0, sticky=tk.W)
        ttk.Entry(settings_frame, textvariable=self.min_contrast_var, width=8).grid(
            row=0, column=1, sticky=tk.W, padx=6)
        ttk.Label(settings_frame, text="Message language").grid(row=1, column=0, sticky=tk.W, pady=(4, 0))
        ttk.Combobox(settings_frame, textvariable=self.locale_var, values=SUPPORTED_LOCALES,
                     state='readonly', width=6).grid(row=1, column=1, sticky=tk.W, padx=6, pady=(4, 0))
        ttk.Checkbutton(settings_frame, text="Show errors only", variable=self.errors_only_var,
                        command=self._refresh_issue_list).grid(row=2, column=0, columnspan=2,
                                                               sticky=tk.W, pady=(4, 0))

        buttons = ttk.Frame(options)
        buttons.pack(side=tk.RIGHT, anchor=tk.N)
        self.run_button = ttk.Button(buttons, text="RUN CHECKS", command=self._run_checks, state=tk.DISABLED)
        self.run_button.pack(fill=tk.X)
        self.export_button = ttk.Button(buttons, text="EXPORT REPORT", command=self._export_report,
                                        state=tk.DISABLED)
        self.export_button.pack(fill=tk.X, pady=(6, 0))
        ttk.Button(buttons, text="Reset Settings", command=self._reset_settings).pack(fill=tk.X, pady=(6, 0))
        ttk.Button(buttons, text="Help", command=self.show_help_dialog).pack(fill=tk.X, pady=(6, 0))

    def _setup_results_section(self):
        results = ttk.LabelFrame(self.frame, text="Issues", padding="8")
        results.grid(row=2, column=0, sticky=(tk.W, tk.E, tk.N, tk.S), pady=(0, 8))
        results.columnconfigure(0, weight=3)
        results.columnconfigure(2, weight=2)
        results.rowconfigure(0, weight=1)

        columns = ('page', 'name', 'type', 'severity', 'message')
        self.issue_tree = ttk.Treeview(results, columns=columns, show='headings', selectmode='browse')
        headings = {
            'page': ("Page", 120),
            'name': ("Node", 160),
            'type': ("Check", 140),
            'severity': ("Severity", 70),
            'message': ("Message", 360),
        }
        for column, (text, width) in headings.items():
            self.issue_tree.heading(column, text=text)
            self.issue_tree.column(column, width=width, anchor=tk.W)
        self.issue_tree.tag_configure('error', foreground=self.colors['error'])
        self.issue_tree.tag_configure('warn', foreground=self.colors['warning'])
        self.issue_tree.grid(row=0, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))

        scrollbar = ttk.Scrollbar(results, orient=tk.VERTICAL, command=self.issue_tree.yview)
        scrollbar.grid(row=0, column=1, sticky=(tk.N, tk.S))
        self.issue_tree.configure(yscrollcommand=scrollbar.set)

        self.issue_tree.bind('<<TreeviewSelect>>', self._on_issue_selected)
        self.issue_tree.bind('<Double-1>', self._on_issue_double_click)

        self.details_text = tk.Text(results, wrap=tk.WORD, height=10, width=40, state=tk.DISABLED,
                                    font=('Segoe UI', 9))
        self.details_text.grid(row=0, column=2, sticky=(tk.W, tk.E, tk.N, tk.S), padx=(8, 0))
        self.details_text.tag_config('header', font=('Segoe UI', 10, 'bold'))
        self.details_text.tag_config('muted', foreground=self.colors['text_muted'])

    def _setup_log_section(self):
        log = self.create_log_section(self.frame)
        log['frame'].grid(row=3, column=0, sticky=(tk.W, tk.E))
        progress = self.create_progress_bar(log['frame'])
        progress['frame'].pack(side=tk.BOTTOM, fill=tk.X, pady=(6, 0))

    # =========================================================================
    # DOCUMENT LIFECYCLE
    # =========================================================================

    def _open_document(self, path: str):
        path = (path or "").strip().strip('"')
        if not path:
            return
        validation = self.reader.validate_document_file(path)
        if not validation['valid']:
            self.show_error(ErrorMessages.FILE_NOT_FOUND, validation['error'])
            return

        self.log_message(f"Opening: {path}")
        self.run_in_background(
            lambda: self.reader.load_file(path),
            success_callback=lambda document: self._on_document_loaded(document, path),
            error_callback=self._on_load_error,
        )

    def _fetch_figma_document(self):
        file_key = self.figma_key_var.get().strip()
        if not file_key:
            self.show_warning(ErrorMessages.INVALID_INPUT, "Please enter a Figma file key.")
            return

        self.log_message(f"Fetching Figma file: {file_key}")
        client = FigmaFileClient()
        self.run_in_background(
            lambda: client.load_document(file_key),
            success_callback=lambda document: self._on_document_loaded(document, None),
            error_callback=self._on_load_error,
        )

    def _on_document_loaded(self, document: DocumentProvider, path: Optional[str]):
        if self.handler is not None:
            self._close_document()

        self.document = document
        self.handler = AccessibilityMessageHandler(
            document,
            post_message=self._receive_message,
            on_close=self._on_document_closed,
            locale=self.locale_var.get(),
            logger_callback=self.log_message,
            progress_callback=self._update_progress_safe,
        )
        if path:
            self.add_recent_file(path)

        page_count = len(document.pages)
        self.log_message(f"Loaded '{getattr(document, 'name', '')}': {page_count} pages")
        if self.reader.skipped_nodes:
            self.log_message(f"  {self.reader.skipped_nodes} nodes without an id were skipped")
        self.run_button.config(state=tk.NORMAL)
        self.close_button.config(state=tk.NORMAL)
        self._clear_results()

    def _on_load_error(self, error: Exception):
        if isinstance(error, DocumentLoadError):
            self.log_message(f"Could not load document: {error}")
            self.show_error(ErrorMessages.OPERATION_FAILED, str(error))
        else:
            self._default_error_handler(error)

    def _close_document(self):
        if self.handler is not None:
            self.handler.handle_message({"type": MSG_CLOSE})

    def _on_document_closed(self):
        if self.document is not None:
            self.document.close()
        self.document = None
        self.handler = None
        self.run_button.config(state=tk.DISABLED)
        self.close_button.config(state=tk.DISABLED)
        self.export_button.config(state=tk.DISABLED)
        self.log_message("Document closed")

    # =========================================================================
    # RUNNING CHECKS
    # =========================================================================

    def _build_payload(self) -> Dict[str, Any]:
        """Read the option widgets into a run-checks payload and persist them"""
        raw_contrast = self.min_contrast_var.get().strip()
        min_contrast = coerce_min_contrast(raw_contrast)
        if raw_contrast and f"{min_contrast:g}" != raw_contrast:
            self.log_message(f"Minimum contrast '{raw_contrast}' is not a positive number, using {min_contrast:g}")
            self.min_contrast_var.set(f"{min_contrast:g}")

        self.config.scope = self.scope_var.get()
        self.config.min_contrast = min_contrast
        self.config.locale = self.locale_var.get()
        self.config.min_severity = "error" if self.errors_only_var.get() else "warn"
        for check_type, var in self.rule_vars.items():
            self.config.enabled_checks[CHECK_TYPE_CONFIG_KEYS[check_type]] = bool(var.get())
        save_config()

        return self.config.to_payload()

    def _run_checks(self):
        """Post run-checks on a worker thread; only one run at a time"""
        if self.handler is None:
            self.show_warning(ErrorMessages.WARNING, ErrorMessages.NO_FILE_SELECTED)
            return
        if self._running:
            return

        payload = self._build_payload()
        self.handler.analyzer.locale = self.config.locale
        self._running = True
        self.run_button.config(state=tk.DISABLED)
        self._clear_results()
        self.update_progress(1, "Starting checks...")

        handler = self.handler
        self.run_in_background(
            lambda: handler.handle_message({"type": MSG_RUN_CHECKS, "payload": payload}),
            success_callback=lambda _result: self._on_run_finished(),
            error_callback=self._on_run_error,
        )

    def _receive_message(self, msg: Dict[str, Any]):
        """post_message target; called on the worker thread"""
        self.frame.after(0, lambda: self._on_message(msg))

    def _on_message(self, msg: Dict[str, Any]):
        if msg.get('type') == MSG_RESULTS:
            self.current_issues = list(msg.get('issues', []))
            self._refresh_issue_list()

    def _on_run_finished(self):
        self._running = False
        if self.handler is not None:
            self.run_button.config(state=tk.NORMAL)
            self.export_button.config(state=tk.NORMAL)
        self.update_progress(100, "")
        self.log_message(f"{len(self.current_issues)} issues found")

    def _on_run_error(self, error: Exception):
        self._running = False
        if self.handler is not None:
            self.run_button.config(state=tk.NORMAL)
        self.update_progress(0, "", show=False)
        self._default_error_handler(error)

    def _update_progress_safe(self, percent: int, message: str):
        """Thread-safe progress update"""
        self.frame.after(0, lambda: self.update_progress(percent, message))

    # =========================================================================
    # RESULTS
    # =========================================================================

    def _clear_results(self):
        self.current_issues = []
        self.issue_tree.delete(*self.issue_tree.get_children())
        self._show_details(None)

    def _refresh_issue_list(self):
        self.issue_tree.delete(*self.issue_tree.get_children())
        errors_only = self.errors_only_var.get()
        for index, issue in enumerate(self.current_issues):
            if errors_only and issue.get('severity') != "error":
                continue
            severity = issue.get('severity', '')
            self.issue_tree.insert('', tk.END, iid=str(index), tags=(severity,), values=(
                issue.get('page', ''),
                issue.get('name', ''),
                TYPE_DISPLAY.get(issue.get('type'), issue.get('type', '')),
                SEVERITY_DISPLAY.get(severity, severity),
                issue.get('message', ''),
            ))
        self._show_details(None)

    def _selected_issue(self) -> Optional[Dict[str, Any]]:
        selection = self.issue_tree.selection()
        if not selection:
            return None
        return self.current_issues[int(selection[0])]

    def _on_issue_selected(self, event=None):
        self._show_details(self._selected_issue())

    def _on_issue_double_click(self, event=None):
        issue = self._selected_issue()
        if issue is None or self.handler is None:
            return
        self.handler.handle_message({"type": MSG_SELECT_NODE, "nodeId": issue['nodeId']})
        self.log_message(f"Selected node {issue['nodeId']} ({issue.get('name', '')})")

    def _show_details(self, issue: Optional[Dict[str, Any]]):
        self.details_text.config(state=tk.NORMAL)
        self.details_text.delete(1.0, tk.END)
        if issue is None:
            if self.current_issues:
                self.details_text.insert(tk.END, "Select an issue to see details.\n"
                                                 "Double-click to select the node.", 'muted')
            else:
                self.details_text.insert(tk.END, "No issues to show.", 'muted')
        else:
            self.details_text.insert(tk.END, f"{issue.get('name', '')}\n", 'header')
            self.details_text.insert(tk.END, f"{issue.get('page', '')} - {issue['nodeId']}\n\n", 'muted')
            self.details_text.insert(tk.END, f"{issue.get('message', '')}\n\n")
            self.details_text.insert(tk.END, "Suggestion\n", 'header')
            self.details_text.insert(tk.END, f"{issue.get('suggestion', '')}\n")
        self.details_text.config(state=tk.DISABLED)

    def _export_report(self):
        """Export the last run as JSON or CSV, chosen by file extension"""
        result = self.handler.last_result if self.handler is not None else None
        if result is None:
            self.show_warning(ErrorMessages.WARNING, ErrorMessages.NO_RESULTS)
            return

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_path = filedialog.asksaveasfilename(
            title="Save Accessibility Report",
            defaultextension=".csv",
            initialfile=f"accessibility_report_{timestamp}.csv",
            filetypes=[("CSV files", "*.csv"), ("JSON files", "*.json"), ("All files", "*.*")]
        )
        if not file_path:
            return

        try:
            if Path(file_path).suffix.lower() == ".json":
                export_json(result, file_path)
            else:
                export_csv(result, file_path)
        except OSError as e:
            self.log_message(f"Failed to export report: {e}")
            self.show_error(ErrorMessages.OPERATION_FAILED, f"Failed to export report:\n{e}")
            return

        self.log_message(f"Report exported to: {file_path}")

    # =========================================================================
    # TAB LIFECYCLE
    # =========================================================================

    def _reset_settings(self):
        self.config = reset_config()
        self.scope_var.set(self.config.scope)
        self.min_contrast_var.set(f"{self.config.min_contrast:g}")
        self.locale_var.set(self.config.locale)
        self.errors_only_var.set(False)
        for check_type, var in self.rule_vars.items():
            var.set(self.config.is_check_enabled(CHECK_TYPE_CONFIG_KEYS[check_type]))
        self.log_message("Settings reset to defaults")

    def reset_tab(self) -> None:
        """Reset tab to initial state"""
        self._close_document()
        if self.path_var is not None:
            self.path_var.set("")
        self.figma_key_var.set("")
        self._clear_results()
        self.update_progress(0, "", show=False)
        if self.log_text:
            self._clear_log(self.log_text)

    def on_close(self) -> None:
        self._close_document()

    def show_help_dialog(self) -> None:
        from tools.accessibility_checker.tool import AccessibilityCheckerTool
        content = AccessibilityCheckerTool().get_help_content()
        self.create_help_window(content['title'], content)

    def log_message(self, message: str) -> None:
        """Add message to log (thread-safe)"""
        if threading.current_thread() is threading.main_thread():
            super().log_message(message)
        else:
            self.frame.after(0, lambda: super(AccessibilityCheckerTab, self).log_message(message))
