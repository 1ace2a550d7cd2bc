"""
Markdown review report writing.

Reports are written to a temporary file next to the destination and moved
into place, so a failed write never leaves a truncated report behind.
Failures are returned as ReportWriteResult(success=False), never raised.
"""

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import InputError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "code-review.md"
DEFAULT_OUTPUT_DIR = "."

REPORT_TITLE = "# Code Review Report"
REVIEW_AGENT_NAME = "AI Code Reviewer"
REPORT_FOOTER = "*This review was automatically generated by the AI Code Review Agent.*"


@dataclass
class ReportWriteResult:
    """Outcome of writing a review report"""
    success: bool
    message: str
    path: Optional[str] = None
    size: Optional[int] = None  # Characters written
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.success:
            data["path"] = self.path
            data["size"] = self.size
        else:
            data["error"] = self.error
        return data


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2026-01-02T03:04:05.678Z"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_report(content: str, include_metadata: bool = True, timestamp: Optional[str] = None) -> str:
    """
    Build the report text.

    Args:
        content: Review body (markdown)
        include_metadata: Wrap the body in a titled header and footer
        timestamp: Header timestamp (default: now, UTC)

    Returns:
        Full report text
    """
    if not include_metadata:
        return content

    timestamp = timestamp or format_timestamp(datetime.now(timezone.utc))
    header = (
        f"{REPORT_TITLE}\n\n"
        f"**Generated on:** {timestamp}\n"
        f"**Review Agent:** {REVIEW_AGENT_NAME}\n\n"
        f"---\n\n"
    )
    footer = f"\n\n---\n\n{REPORT_FOOTER}\n"
    return header + content + footer


def _target_mode(path: Path) -> int:
    """Mode of the report being replaced, or the umask default for a new file"""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _atomic_write(path: Path, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        # mkstemp creates 0600
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def write_review_report(
    content: str,
    filename: str = DEFAULT_FILENAME,
    output_dir: str = DEFAULT_OUTPUT_DIR,
    include_metadata: bool = True,
    now: Optional[datetime] = None
) -> ReportWriteResult:
    """
    Write review content to a markdown file.

    The output directory must already exist; it is never created.

    Args:
        content: Review body
        filename: Destination file name
        output_dir: Destination directory
        include_metadata: Add the timestamped header and footer
        now: Timestamp for the header (default: current UTC time)

    Returns:
        ReportWriteResult describing the written file or the failure

    Raises:
        InputError: If content is not a string or filename is empty
    """
    if not isinstance(content, str):
        raise InputError("content must be a string")
    if not isinstance(filename, str) or not filename.strip():
        raise InputError("filename must be a non-empty string")

    output_path = Path(output_dir or DEFAULT_OUTPUT_DIR) / filename
    timestamp = format_timestamp(now) if now else None
    report = render_report(content, include_metadata, timestamp)

    try:
        if not output_path.parent.is_dir():
            raise FileNotFoundError(f"Output directory does not exist: {output_path.parent}")
        _atomic_write(output_path, report)
    except (OSError, UnicodeError) as e:
        logger.warning(f"Failed to write review to {output_path}: {e}")
        return ReportWriteResult(
            success=False,
            message="Failed to write review file",
            error=str(e),
        )

    logger.info(f"Review written to {output_path} ({len(report)} chars)")
    return ReportWriteResult(
        success=True,
        message=f"Review written to {output_path}",
        path=str(output_path),
        size=len(report),
    )
