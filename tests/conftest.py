"""Shared test fixtures and configuration."""

import json
import logging
import tempfile
from pathlib import Path
from typing import Optional

import pytest

from commitcoach.config import Settings, LLMProvider
from commitcoach.deadline import Deadline
from commitcoach.git.base import BaseGitBackend
from commitcoach.git.client import DRY_RUN_PREFIX
from commitcoach.git.exceptions import GitError
from commitcoach.llm.base import BaseLLMProvider, SuggestInput
from commitcoach.suggestions.models import CommitSuggestion


class FakeGit(BaseGitBackend):
    """In-memory git backend that records commits."""

    def __init__(self, diff: str = "", in_repo: bool = True, commit_hash: str = "abc1234"):
        self.diff = diff
        self.in_repo = in_repo
        self.commit_hash = commit_hash
        self.repo_error: Optional[GitError] = None
        self.diff_error: Optional[GitError] = None
        self.commit_error: Optional[GitError] = None
        self.commits: list[str] = []
        self.commit_calls = 0
        self.diff_calls = 0

    def is_in_repository(self, deadline: Optional[Deadline] = None) -> bool:
        if self.repo_error:
            raise self.repo_error
        return self.in_repo

    def staged_diff(self, deadline: Optional[Deadline] = None) -> str:
        self.diff_calls += 1
        if self.diff_error:
            raise self.diff_error
        return self.diff

    def commit(self, message: str, dry_run: bool = False, deadline: Optional[Deadline] = None) -> str:
        self.commit_calls += 1
        if self.commit_error:
            raise self.commit_error
        if dry_run:
            return DRY_RUN_PREFIX + message
        self.commits.append(message)
        return self.commit_hash


class FakeProvider(BaseLLMProvider):
    """Provider returning a canned raw response and recording its inputs."""

    name = "fake"

    def __init__(self, response: str = "", error: Optional[Exception] = None):
        super().__init__(model="fake-model")
        self.response = response
        self.error = error
        self.calls = 0
        self.inputs: list[SuggestInput] = []

    def _complete(self, system_prompt, user_prompt, suggest_input, deadline) -> str:
        self.calls += 1
        self.inputs.append(suggest_input)
        if self.error:
            raise self.error
        return self.response


class ListProvider(BaseLLMProvider):
    """Provider that returns a fixed list of candidates without parsing."""

    name = "list"

    def __init__(self, candidates: list[CommitSuggestion]):
        super().__init__(model="list-model")
        self.candidates = candidates
        self.calls = 0

    def suggest_commits(self, suggest_input, deadline=None):
        self.calls += 1
        return list(self.candidates)

    def _complete(self, system_prompt, user_prompt, suggest_input, deadline) -> str:
        raise NotImplementedError


def make_response(suggestions: list[dict]) -> str:
    """Encode suggestions the way a provider would return them."""
    return json.dumps({"suggestions": suggestions})


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_diff_small():
    """A five-line diff adding a print statement."""
    return """diff --git a/main.go b/main.go
--- a/main.go
+++ b/main.go
@@ -1,3 +1,4 @@
+	fmt.Println("hello")
"""


@pytest.fixture
def sample_diff_large():
    """A diff of well over 10,000 bytes."""
    header = (
        "diff --git a/big.py b/big.py\n"
        "--- a/big.py\n"
        "+++ b/big.py\n"
        "@@ -0,0 +1,400 @@\n"
    )
    body = "".join(f"+# padding line {i:04d} to make this diff large\n" for i in range(400))
    return header + body


@pytest.fixture
def sample_diff_with_secret():
    """A diff that adds an API key."""
    return """diff --git a/settings.py b/settings.py
--- a/settings.py
+++ b/settings.py
@@ -1,2 +1,3 @@
+OPENAI_KEY = "sk-abcdefghijklmnopqrstuvwxyz123456"
"""


@pytest.fixture
def valid_suggestions():
    """Three valid raw suggestions, one with a breaking-change footer."""
    return [
        {"type": "feat", "subject": "add hello output", "body": "Print a greeting on start.", "footer": ""},
        {"type": "fix", "subject": "correct greeting text", "body": "", "footer": ""},
        {
            "type": "refactor",
            "subject": "restructure main entry point",
            "body": "Move startup code into a function.",
            "footer": "BREAKING CHANGE: main no longer exits with status 2",
        },
    ]


@pytest.fixture
def valid_response(valid_suggestions):
    """Raw provider response carrying the three valid suggestions."""
    return make_response(valid_suggestions)


@pytest.fixture
def fake_git(sample_diff_small):
    """Fake git backend with a small staged diff."""
    return FakeGit(diff=sample_diff_small)


@pytest.fixture
def fake_provider(valid_response):
    """Fake provider returning three valid suggestions."""
    return FakeProvider(response=valid_response)


@pytest.fixture
def mock_settings():
    """Settings using the mock provider."""
    return Settings(provider=LLMProvider.MOCK, model="mock", confirm_send=False)


@pytest.fixture
def config_dir(temp_dir, mocker):
    """Point the global config directory at a temporary location."""
    config_dir = temp_dir / ".commitcoach"
    mocker.patch("commitcoach.global_config._CONFIG_DIR", config_dir)
    return config_dir


@pytest.fixture(autouse=True)
def reset_commitcoach_logger():
    """Undo configure_logging so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("commitcoach")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def response_factory():
    """Build raw provider responses from suggestion dicts."""
    return make_response


@pytest.fixture
def git_factory():
    """The FakeGit class, for tests that need a custom fake."""
    return FakeGit


@pytest.fixture
def provider_factory():
    """The FakeProvider class, for tests that need a custom fake."""
    return FakeProvider


@pytest.fixture
def list_provider_factory():
    """The ListProvider class, for tests that bypass response parsing."""
    return ListProvider
