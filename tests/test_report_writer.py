"""Tests for the markdown report writer."""

import os
import stat
from datetime import datetime, timezone

import pytest

from lector.errors import InputError
from lector.report import format_timestamp, render_report, write_review_report
from lector.report import writer as writer_module

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


class TestRenderReport:

    def test_with_metadata(self):
        text = render_report("## Findings\n\nLooks good.", True, "2026-01-02T03:04:05.678Z")
        assert text == (
            "# Code Review Report\n\n"
            "**Generated on:** 2026-01-02T03:04:05.678Z\n"
            "**Review Agent:** AI Code Reviewer\n\n"
            "---\n\n"
            "## Findings\n\nLooks good."
            "\n\n---\n\n"
            "*This review was automatically generated by the AI Code Review Agent.*\n"
        )

    def test_without_metadata_is_verbatim(self):
        assert render_report("raw body", include_metadata=False) == "raw body"

    def test_timestamp_format(self):
        assert format_timestamp(FIXED_NOW) == "2026-01-02T03:04:05.678Z"

    def test_naive_timestamp_treated_as_utc(self):
        assert format_timestamp(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02T03:04:05.000Z"


class TestWriteReviewReport:

    def test_writes_file(self, tmp_path):
        result = write_review_report("Body", "review.md", str(tmp_path), now=FIXED_NOW)

        path = tmp_path / "review.md"
        written = path.read_text(encoding="utf-8")
        assert result.success
        assert result.path == str(path)
        assert result.size == len(written)
        assert result.message == f"Review written to {path}"
        assert "**Generated on:** 2026-01-02T03:04:05.678Z" in written
        assert result.to_dict() == {
            "success": True,
            "message": result.message,
            "path": str(path),
            "size": result.size,
        }

    def test_without_metadata(self, tmp_path):
        result = write_review_report("Body only", "plain.md", str(tmp_path), include_metadata=False)
        assert (tmp_path / "plain.md").read_text(encoding="utf-8") == "Body only"
        assert result.size == len("Body only")

    def test_unicode_content(self, tmp_path):
        write_review_report("Revisión ✅ 完了", "u.md", str(tmp_path), include_metadata=False)
        assert (tmp_path / "u.md").read_text(encoding="utf-8") == "Revisión ✅ 完了"

    def test_overwrites_existing_report(self, tmp_path):
        (tmp_path / "review.md").write_text("old")
        write_review_report("new", "review.md", str(tmp_path), include_metadata=False)
        assert (tmp_path / "review.md").read_text() == "new"

    def test_missing_directory_is_failure(self, tmp_path):
        missing = tmp_path / "nope"

        result = write_review_report("Body", "review.md", str(missing))

        assert not result.success
        assert result.message == "Failed to write review file"
        assert result.error
        assert not missing.exists()
        assert set(result.to_dict()) == {"success", "message", "error"}

    def test_failed_move_leaves_no_partial_files(self, tmp_path, monkeypatch):
        (tmp_path / "review.md").write_text("previous review")

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(writer_module.os, "replace", broken_replace)

        result = write_review_report("Body", "review.md", str(tmp_path))

        assert not result.success
        assert result.error == "disk full"
        assert os.listdir(tmp_path) == ["review.md"]
        assert (tmp_path / "review.md").read_text() == "previous review"

    def test_unencodable_content_is_failure(self, tmp_path):
        result = write_review_report("bad \ud800 text", "review.md", str(tmp_path))

        assert not result.success
        assert result.message == "Failed to write review file"
        assert "surrogates not allowed" in result.error
        assert os.listdir(tmp_path) == []

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_new_report_follows_umask(self, tmp_path):
        previous = os.umask(0o022)
        try:
            write_review_report("Body", "review.md", str(tmp_path))
        finally:
            os.umask(previous)

        assert stat.S_IMODE(os.stat(tmp_path / "review.md").st_mode) == 0o644

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_overwrite_keeps_existing_mode(self, tmp_path):
        existing = tmp_path / "review.md"
        existing.write_text("old")
        os.chmod(existing, 0o640)

        write_review_report("new", "review.md", str(tmp_path))

        assert stat.S_IMODE(os.stat(existing).st_mode) == 0o640

    @pytest.mark.parametrize("filename", ["", "  "])
    def test_empty_filename(self, tmp_path, filename):
        with pytest.raises(InputError):
            write_review_report("Body", filename, str(tmp_path))

    def test_content_must_be_text(self, tmp_path):
        with pytest.raises(InputError):
            write_review_report(None, "review.md", str(tmp_path))
