"""
Tools package - one sub-package per tool, discovered by the ToolManager.
"""
