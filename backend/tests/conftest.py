import os
import sys
from pathlib import Path

import pytest
import sentry_sdk
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Disable outbound Sentry calls during tests
sentry_sdk.init = lambda *args, **kwargs: None  # type: ignore[assignment]
os.environ["SENTRY_DSN"] = ""
# Local (haversine) strategy unless a test wires a remote resolver explicitly
os.environ["GOOGLE_API_KEY"] = ""

from backend.app.main import create_app  # noqa: E402
from backend.app.settings import Settings  # noqa: E402


@pytest.fixture
def local_settings() -> Settings:
    return Settings(GOOGLE_API_KEY=None, SENTRY_DSN=None, CORS_ORIGIN="*")


@pytest.fixture
def client(local_settings: Settings) -> TestClient:
    return TestClient(create_app(local_settings), base_url="http://api.testserver")
