import pytest

from coordkit.provider_registry import credential_key, iter_providers


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the data directory at tmp_path and hide real provider keys."""
    monkeypatch.setenv("COORDKIT_HOME", str(tmp_path))
    for p in iter_providers():
        monkeypatch.delenv(credential_key(p.provider_id), raising=False)
    monkeypatch.delenv("TIMEZONEDB_API_KEY", raising=False)
    monkeypatch.delenv("NOMINATIM_USER_AGENT", raising=False)
    return tmp_path
