"""Project-level pytest configuration."""

import pytest

from prompt_client.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_client_settings(monkeypatch, tmp_path):
    """Keep client tests away from the user's real vote ledger and environment."""
    monkeypatch.setenv("VOTE_LEDGER_PATH", str(tmp_path / "votes.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
