"""Shared fixtures for the validator tests."""

import os
from typing import Any, Dict
from unittest.mock import patch

import pytest

from namespace_validator.config import Settings
from namespace_validator.models.pull_request import PullRequestContext
from tests._fixtures.fake_github import API_URL, COMMENTS_URL, FakeGitHub


@pytest.fixture
def github():
    """Fake GitHub with the happy-path fixtures of the acme organization."""
    fake = FakeGitHub()
    fake.add_member("platform", "alice")
    fake.add_repository("acme/widgets")
    return fake


@pytest.fixture
def pr_context():
    return PullRequestContext(
        author="alice",
        organization="acme",
        comments_url=COMMENTS_URL,
        number=7,
        repository="acme/namespaces",
        head_sha="abc123",
    )


@pytest.fixture
def clean_env():
    """Run with no GitHub-related environment variables and no .env file."""
    with patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def make_settings(clean_env):
    def _make(**overrides: Any) -> Settings:
        values: Dict[str, Any] = {"github_token": "test-token", "github_api_url": API_URL}
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make
