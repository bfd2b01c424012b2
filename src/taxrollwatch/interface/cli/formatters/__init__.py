"""
Rich formatters for CLI output.
"""

from .report_formatters import ReportFormatter

__all__ = ["ReportFormatter"]
