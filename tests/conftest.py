import pytest
from scarestamps.core import config

@pytest.fixture(autouse=True)
def setup_test_environment():
    """Restore mutable settings after every test"""
    original_timeout = config.settings.FETCH_TIMEOUT_MS
    original_api_key = config.settings.SCARE_API_KEY
    original_max_results = config.settings.MAX_RESULTS

    yield

    config.settings.FETCH_TIMEOUT_MS = original_timeout
    config.settings.SCARE_API_KEY = original_api_key
    config.settings.MAX_RESULTS = original_max_results
