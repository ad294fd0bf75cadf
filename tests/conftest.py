# tests/conftest.py
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest
import pytest_asyncio
from utils.logger import logger
from infra.http_client import HttpClient
from exchange.models import Credentials

BASE = "https://api.binance.us"
FIXED_TS = 1700000000000
API_KEY = "test_api_key_0123456789"
SECRET_KEY = "test_secret_key_0123456789"


@pytest.fixture
def credentials():
    return Credentials(api_key=API_KEY, secret_key=SECRET_KEY)


@pytest_asyncio.fixture
async def http_client(monkeypatch):
    """
    HttpClient as an async context manager so the session is cleaned up; the
    signing clock is pinned to FIXED_TS.
    """
    async with HttpClient(BASE) as client:
        monkeypatch.setattr(client, "_timestamp_ms", lambda: FIXED_TS)
        yield client


@pytest.fixture
def log_records():
    """Collect loguru messages emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
