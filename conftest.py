import pytest

from blockstore import config


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Each test sees the on-disk defaults unless it points elsewhere."""
    monkeypatch.delenv("BLOCKSTORE_CONFIG", raising=False)
    monkeypatch.delenv("BLOCKSTORE_TRACE", raising=False)
    config.reload()
    yield
    config.reload()
