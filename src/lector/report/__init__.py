"""
Report module - persists review reports as markdown.
"""

from .writer import (
    DEFAULT_FILENAME,
    DEFAULT_OUTPUT_DIR,
    ReportWriteResult,
    render_report,
    format_timestamp,
    write_review_report
)

__all__ = [
    "DEFAULT_FILENAME",
    "DEFAULT_OUTPUT_DIR",
    "ReportWriteResult",
    "render_report",
    "format_timestamp",
    "write_review_report",
]
