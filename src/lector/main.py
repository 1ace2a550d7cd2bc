"""
HTTP service for Lector - AI-assisted code review of local git changes.

Exposes the review tools directly and runs the LLM review agent on demand.
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from . import __version__
from .agent import ReviewTask, TaskConfig, build_review_prompt
from .commit import generate_commit_message
from .config import LectorConfig
from .errors import CollaboratorError, InputError, format_error_for_user
from .llm import ILLMProvider, create_llm_provider
from .report import write_review_report
from .repository import ChangeSetReader
from .tools import create_default_tool_executor

logger = logging.getLogger(__name__)


app = FastAPI(title="Lector - AI Code Review Assistant", version=__version__)

# Global configuration, read once from the environment
_config: Optional[LectorConfig] = None


def get_config() -> LectorConfig:
    """Get or create the service configuration."""
    global _config

    if _config is None:
        _config = LectorConfig.from_env()
        logger.info(f"Configuration loaded: {_config.to_dict()}")

    return _config


def get_reader(config: LectorConfig = Depends(get_config)) -> ChangeSetReader:
    return ChangeSetReader(exclude_patterns=config.exclude_patterns)


def get_llm_provider(config: LectorConfig = Depends(get_config)) -> ILLMProvider:
    """Create the LLM provider for one review run."""
    try:
        return create_llm_provider(
            provider_type=config.llm_provider,
            model_id=config.llm_model_id,
            api_key=config.llm_api_key
        )
    except ValueError as e:
        logger.error(f"LLM provider misconfigured: {e}")
        raise HTTPException(status_code=500, detail=format_error_for_user(e))


class CommitMessageRequest(BaseModel):
    root_dir: str = Field(..., min_length=1)
    type: Optional[str] = None
    max_length: Optional[int] = None


class ReportRequest(BaseModel):
    content: str
    filename: Optional[str] = None
    output_dir: Optional[str] = None
    include_metadata: Optional[bool] = None


class ReviewRequest(BaseModel):
    root_dir: str = Field(..., min_length=1)
    prompt: Optional[str] = None
    filename: Optional[str] = None
    output_dir: Optional[str] = None


@app.get("/changes")
def list_changes(
    root_dir: str,
    staged: bool = False,
    reader: ChangeSetReader = Depends(get_reader)
):
    """Summarize the staged or unstaged changes of a directory."""
    try:
        summary = reader.read(root_dir, staged=staged)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CollaboratorError as e:
        logger.error(f"Reading changes in {root_dir} failed: {e}")
        raise HTTPException(status_code=500, detail=format_error_for_user(e))

    return {
        "root_dir": root_dir,
        "staged": staged,
        "files": [delta.to_dict() for delta in summary],
        "total_insertions": summary.total_insertions,
        "total_deletions": summary.total_deletions
    }


@app.post("/commit-message")
def commit_message(
    request: CommitMessageRequest,
    config: LectorConfig = Depends(get_config),
    reader: ChangeSetReader = Depends(get_reader)
):
    """Suggest a conventional commit message for a directory."""
    max_length = config.commit_max_length if request.max_length is None else request.max_length
    try:
        result = generate_commit_message(
            request.root_dir,
            commit_type=request.type or None,
            max_length=max_length,
            reader=reader
        )
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result.to_dict()


@app.post("/reports")
def write_report(request: ReportRequest, config: LectorConfig = Depends(get_config)):
    """Write review content to a markdown report."""
    include_metadata = config.include_metadata if request.include_metadata is None else request.include_metadata
    try:
        result = write_review_report(
            content=request.content,
            filename=request.filename or config.report_filename,
            output_dir=request.output_dir or config.output_dir,
            include_metadata=include_metadata
        )
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result.to_dict()


@app.post("/review")
async def review(
    request: ReviewRequest,
    config: LectorConfig = Depends(get_config),
    reader: ChangeSetReader = Depends(get_reader),
    llm_provider: ILLMProvider = Depends(get_llm_provider)
):
    """Run the review agent over a directory's changes."""
    report_filename = request.filename or config.report_filename
    output_dir = request.output_dir or config.output_dir

    task = ReviewTask(
        config=TaskConfig(
            root_dir=request.root_dir,
            max_steps=config.max_steps,
            report_filename=report_filename,
            output_dir=output_dir
        ),
        llm_provider=llm_provider,
        tool_executor=create_default_tool_executor(
            reader=reader,
            commit_max_length=config.commit_max_length,
            report_filename=report_filename,
            output_dir=output_dir,
            include_metadata=config.include_metadata
        )
    )
    prompt = request.prompt or build_review_prompt(request.root_dir, report_filename)

    try:
        return await task.execute(prompt)
    except Exception as e:
        logger.error(f"Review of {request.root_dir} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=format_error_for_user(e, step="review", format_type="markdown")
        )
    finally:
        await llm_provider.close()


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "lector"
    }


@app.get("/")
async def root():
    """Root endpoint with service info"""
    return {
        "name": "Lector",
        "description": "AI-Assisted Code Review for Local Git Changes",
        "version": f"v{__version__}",
        "tools": [
            "get_file_changes_in_directory",
            "generate_commit_message",
            "write_review_to_markdown"
        ],
        "endpoints": ["/changes", "/commit-message", "/reports", "/review", "/health"]
    }
