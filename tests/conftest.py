import os
import sys
import tempfile
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# keep test runs from writing into the project logs/ directory
os.environ.setdefault("CM_SERVICE_LOG_DIR", tempfile.mkdtemp(prefix="cm-service-logs-"))

from core.config_manager import ServiceConfig  # noqa: E402
from core.llm_adapter import BaseLLMAdapter, LLMResponse  # noqa: E402


class FakeLLM(BaseLLMAdapter):
    """Replays scripted outcomes; an Exception instance is raised instead of returned."""

    provider = "fake"

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    def create(self, params):
        self.calls.append(params)
        outcome = self.outcomes.pop(0) if self.outcomes else ""
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=params.model)


@pytest.fixture
def config():
    return ServiceConfig(openai_api_key="sk-test")


@pytest.fixture
def fake_llm():
    return FakeLLM()
