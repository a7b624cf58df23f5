"""Shared fixtures for the i18n_sync test suite."""

import os
import tempfile

# Keep the module-level log file out of the working tree.
os.environ.setdefault('I18N_LOG_FILE', os.path.join(tempfile.gettempdir(), 'i18n_sync_tests.log'))

import pytest

from fake_github import API_URL, FakeGitHub
from helpers import MemoryHost
from i18n_sync.config import SyncSettings
from i18n_sync.github_client import GitHubClient
from i18n_sync.sync_flow import SyncOrchestrator


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def client(github: FakeGitHub) -> GitHubClient:
    return GitHubClient("test-token", github.owner, github.repo, session=github, api_url=API_URL)


@pytest.fixture
def settings() -> SyncSettings:
    return SyncSettings(
        token="test-token",
        repo="acme/app",
        branch="main",
        translations_folder="src",
        translations_filename="translations.yaml",
        languages="en_US,de_DE",
    )


@pytest.fixture
def host(settings: SyncSettings) -> MemoryHost:
    return MemoryHost(settings=settings.to_dict())


@pytest.fixture
def messages() -> list:
    return []


@pytest.fixture
def orchestrator(host: MemoryHost, github: FakeGitHub, messages: list) -> SyncOrchestrator:
    def factory(settings: SyncSettings) -> GitHubClient:
        owner, repo = settings.owner_and_repo()
        return GitHubClient(settings.token, owner, repo, session=github, api_url=API_URL)

    orchestrator = SyncOrchestrator(host, client_factory=factory, emit=messages.append)
    orchestrator.start()
    return orchestrator
