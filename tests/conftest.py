"""
Core pytest configuration and fixtures for chatcompare testing.

This module provides shared test fixtures, configuration, and utilities for
the client, store and dispatcher tests.
"""

from typing import List
from unittest.mock import MagicMock

import pytest
from chatcompare.client import BackendClient
from chatcompare.config import ClientConfig, Settings
from chatcompare.dispatcher import Dispatcher, build_envelope
from chatcompare.llm import Echo
from chatcompare.models import ChatMessage
from chatcompare.store import InMemory

# ===== ENVIRONMENT =====


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real API keys in the developer's environment out of the tests."""
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.delenv("CHATCOMPARE_API_KEY", raising=False)


# ===== TEST DATA FIXTURES =====


@pytest.fixture
def targets() -> List[str]:
    return ["openai/gpt-4o-mini", "deepseek/deepseek-chat", "qwen/qwen2.5-7b-instruct"]


@pytest.fixture
def envelope() -> List[ChatMessage]:
    return build_envelope("Hello there")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        api_key="sk-or-test",
        credentials_path=tmp_path / "credentials.json",
    )


# ===== COMPONENT FIXTURES =====


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(credential="sk-or-test")


@pytest.fixture
def echo() -> Echo:
    return Echo()


@pytest.fixture
def client(echo, config) -> BackendClient:
    return BackendClient(echo, config)


@pytest.fixture
def store() -> InMemory:
    return InMemory()


@pytest.fixture
def dispatcher(client, store) -> Dispatcher:
    return Dispatcher(client, store)


# ===== MOCK FIXTURES =====


@pytest.fixture
def completion_response():
    """Builds an object shaped like an openai ChatCompletion."""

    def make(content="Mock LLM response", usage=(10, 20, 30)):
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        if usage is None:
            response.usage = None
        else:
            response.usage.prompt_tokens = usage[0]
            response.usage.completion_tokens = usage[1]
            response.usage.total_tokens = usage[2]
        return response

    return make


# ===== CONFIGURATION =====


def pytest_configure(config):
    """Pytest configuration."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "slow: marks tests as slow-running")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
