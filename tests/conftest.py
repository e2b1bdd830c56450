"""
Shared fixtures for engine tests.
"""

import pytest

from chess_review.config import EngineConfig
from chess_review.engine.session import EngineSession
from tests.scripted_engine import ScriptedTransport, search_output


@pytest.fixture
def fast_config():
    """Config with short timeouts so failing tests fail quickly."""
    return EngineConfig(init_timeout=0.5, request_timeout=0.5)


@pytest.fixture
def transport():
    return ScriptedTransport(
        {"go": search_output("e2e4", (1, "cp", 30, "e2e4 e7e5"), (2, "cp", -10, "d2d4 d7d5"))}
    )


@pytest.fixture
def session(transport, fast_config):
    """An initialized session over the scripted engine."""
    session = EngineSession(transport=transport, config=fast_config)
    session.initialize()
    yield session
    session.shutdown()
