"""
Code review tool handlers.

These wrap the change-set reader, the commit message builder and the
report writer so the review agent can call them. Collaborator failures are
returned as error responses rather than raised.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from .base import BaseToolHandler, ToolDefinition, ToolResponse, ToolCategory
from ..commit import CommitType, DEFAULT_MAX_LENGTH, generate_commit_message, parse_commit_type
from ..errors import CollaboratorError, InputError
from ..repository import ChangeSetReader
from ..report import DEFAULT_FILENAME, DEFAULT_OUTPUT_DIR, write_review_report

logger = logging.getLogger(__name__)


class GetFileChangesHandler(BaseToolHandler):
    """
    Tool to list the unstaged changes of a directory with full diff text.
    """

    REQUIRED_STRINGS = ("root_dir",)

    def __init__(self, reader: Optional[ChangeSetReader] = None):
        self.reader = reader or ChangeSetReader()

    @property
    def name(self) -> str:
        return "get_file_changes_in_directory"

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.GIT

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description="""Gets the code changes made in given directory.

Returns a list of changed files with their full unified diff (working tree vs index).
Build output directories and lockfiles are excluded.
Returns an empty list when the directory is not inside a git repository.""",
            input_schema={
                "type": "object",
                "properties": {
                    "root_dir": {
                        "type": "string",
                        "description": "The root directory"
                    }
                },
                "required": ["root_dir"]
            },
            category=self.category
        )

    async def execute(self, input_data: Dict[str, Any], context: Any) -> ToolResponse:
        root_dir = input_data["root_dir"]

        try:
            loop = asyncio.get_running_loop()
            diffs = await loop.run_in_executor(None, lambda: self.reader.read_file_diffs(root_dir))
        except CollaboratorError as e:
            return self._error_response(e)

        logger.info(f"Found {len(diffs)} changed file(s) in {root_dir}")
        return self._success_response(
            diffs,
            metadata={
                "root_dir": root_dir,
                "files": [d["file"] for d in diffs],
                "operation": self.name
            }
        )


class GenerateCommitMessageHandler(BaseToolHandler):
    """
    Tool to suggest a conventional commit message from staged (or unstaged) changes.
    """

    REQUIRED_STRINGS = ("root_dir",)
    OPTIONAL_FIELDS = {"type": (str,), "max_length": (int,)}

    def __init__(self, reader: Optional[ChangeSetReader] = None, default_max_length: int = DEFAULT_MAX_LENGTH):
        self.reader = reader or ChangeSetReader()
        self.default_max_length = default_max_length

    @property
    def name(self) -> str:
        return "generate_commit_message"

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.COMMIT

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description="""Generates a conventional commit message based on staged or unstaged changes in the repository.

- Staged changes are described as `type: update <file>` or `type: update <N> files`, with line stats when they fit.
- If nothing is staged, lists the unstaged files and suggests staging them first.
- If there are no changes at all, returns "No changes detected".

Leave `type` empty to let the change shape decide it.""",
            input_schema={
                "type": "object",
                "properties": {
                    "root_dir": {
                        "type": "string",
                        "description": "The root directory"
                    },
                    "type": {
                        "type": "string",
                        "enum": CommitType.values(),
                        "description": "The type of commit (conventional commits)"
                    },
                    "max_length": {
                        "type": "integer",
                        "description": "Maximum length of the commit message",
                        "default": self.default_max_length
                    }
                },
                "required": ["root_dir"]
            },
            category=self.category
        )

    def validate_input(self, input_data: Dict[str, Any]) -> None:
        super().validate_input(input_data)
        parse_commit_type(input_data.get("type"))
        max_length = input_data.get("max_length")
        if max_length is not None and max_length <= 0:
            raise InputError("'max_length' must be a positive integer")

    async def execute(self, input_data: Dict[str, Any], context: Any) -> ToolResponse:
        root_dir = input_data["root_dir"]
        commit_type = input_data.get("type")
        max_length = input_data.get("max_length")
        if max_length is None:
            max_length = self.default_max_length

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None,
            lambda: generate_commit_message(root_dir, commit_type, max_length, reader=self.reader)
        )

        metadata = {
            "root_dir": root_dir,
            "status": result.status.value,
            "commit_message": result.commit.text if result.commit else None,
            "operation": self.name
        }
        if not result.success:
            metadata["error"] = True
            metadata["error_message"] = result.error
        return ToolResponse(content=result.to_dict(), metadata=metadata)


class WriteReviewHandler(BaseToolHandler):
    """
    Tool to persist review content as a markdown file.
    """

    REQUIRED_STRINGS = ("content",)
    OPTIONAL_FIELDS = {"filename": (str,), "output_dir": (str,), "include_metadata": (bool,)}

    def __init__(
        self,
        default_filename: str = DEFAULT_FILENAME,
        default_output_dir: str = DEFAULT_OUTPUT_DIR,
        default_include_metadata: bool = True
    ):
        self.default_filename = default_filename
        self.default_output_dir = default_output_dir
        self.default_include_metadata = default_include_metadata

    @property
    def name(self) -> str:
        return "write_review_to_markdown"

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.REPORT

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description="""Writes code review content to a markdown file with optional metadata.

With `include_metadata` the review is wrapped in a "Code Review Report" title, a generation timestamp and a footer.
The output directory must already exist.""",
            input_schema={
                "type": "object",
                "properties": {
                    "content": {
                        "type": "string",
                        "description": "The review content to write"
                    },
                    "filename": {
                        "type": "string",
                        "description": "The filename for the review",
                        "default": self.default_filename
                    },
                    "output_dir": {
                        "type": "string",
                        "description": "The directory to write the review file to",
                        "default": self.default_output_dir
                    },
                    "include_metadata": {
                        "type": "boolean",
                        "description": "Whether to include metadata like timestamp and summary",
                        "default": self.default_include_metadata
                    }
                },
                "required": ["content"]
            },
            category=self.category
        )

    async def execute(self, input_data: Dict[str, Any], context: Any) -> ToolResponse:
        include_metadata = input_data.get("include_metadata")
        if include_metadata is None:
            include_metadata = self.default_include_metadata

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None,
            lambda: write_review_report(
                content=input_data["content"],
                filename=input_data.get("filename") or self.default_filename,
                output_dir=input_data.get("output_dir") or self.default_output_dir,
                include_metadata=include_metadata
            )
        )

        metadata = {"report_path": result.path, "operation": self.name}
        if not result.success:
            metadata["error"] = True
            metadata["error_message"] = result.error
        return ToolResponse(content=result.to_dict(), metadata=metadata)
