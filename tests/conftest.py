"""
Shared fixtures for the test suite.
"""

import pytest

from tests.helpers import FakeGeminiClient


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_client():
    return FakeGeminiClient()
