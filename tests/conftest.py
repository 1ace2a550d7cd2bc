"""Shared fixtures: throwaway git repositories and a scripted LLM provider."""

import copy
import subprocess
from pathlib import Path

import pytest

from lector.llm import AssistantMessage, ILLMProvider, ModelInfo, ModelProvider

APP_SOURCE = "def main():\n    return 1\n"


def run_git(repo: Path, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True, text=True)
    return result.stdout


@pytest.fixture
def git_repo(tmp_path):
    """A repository with one commit holding README.md and app.py."""
    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")
    run_git(repo, "config", "user.email", "test@example.com")
    run_git(repo, "config", "user.name", "Test User")
    run_git(repo, "config", "commit.gpgsign", "false")
    (repo / "README.md").write_text("# Test Repo\n")
    (repo / "app.py").write_text(APP_SOURCE)
    run_git(repo, "add", ".")
    run_git(repo, "commit", "-q", "-m", "Initial commit")
    return repo


@pytest.fixture
def git(git_repo):
    """Run git commands inside git_repo."""
    def _git(*args: str) -> str:
        return run_git(git_repo, *args)
    return _git


@pytest.fixture
def plain_dir(tmp_path):
    """A directory that is not inside any git work tree."""
    path = tmp_path / "plain"
    path.mkdir()
    (path / "notes.txt").write_text("hello\n")
    return path


class ScriptedProvider(ILLMProvider):
    """Replays canned assistant messages and records every request."""

    def __init__(self, responses=(), default=None):
        self.responses = list(responses)
        self.default = default or self.text_reply("Review complete.")
        self.calls = []
        self.closed = False

    @property
    def model_info(self) -> ModelInfo:
        return ModelInfo(
            id="scripted",
            name="Scripted",
            provider=ModelProvider.OLLAMA,
            context_window=8192
        )

    async def create_message(self, system_prompt, messages, tools=None, temperature=0.2, max_tokens=4096):
        self.calls.append({
            "system_prompt": system_prompt,
            "messages": copy.deepcopy(messages),
            "tools": tools
        })
        if self.responses:
            return self.responses.pop(0)
        return self.default

    async def close(self) -> None:
        self.closed = True

    @staticmethod
    def text_reply(text: str) -> AssistantMessage:
        return AssistantMessage(content=[{"type": "text", "text": text}], stop_reason="end_turn")

    @staticmethod
    def tool_call(name: str, tool_input: dict, call_id: str = "call_1", text: str = "") -> AssistantMessage:
        content = [{"type": "text", "text": text}] if text else []
        content.append({"type": "tool_use", "id": call_id, "name": name, "input": tool_input})
        return AssistantMessage(content=content, stop_reason="tool_use")


class FailingProvider(ScriptedProvider):
    """Raises on every request."""

    def __init__(self, error: Exception):
        super().__init__()
        self.error = error

    async def create_message(self, system_prompt, messages, tools=None, temperature=0.2, max_tokens=4096):
        self.calls.append({"system_prompt": system_prompt, "messages": messages, "tools": tools})
        raise self.error


@pytest.fixture
def scripted_provider():
    """The ScriptedProvider class, for building providers with canned replies."""
    return ScriptedProvider


@pytest.fixture
def failing_provider():
    return FailingProvider
