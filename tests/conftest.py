import pytest


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    # keep the developer's settings files and sysfs out of the tests
    monkeypatch.setenv("FWATTR_CONFIG", str(tmp_path / "no-settings.ini"))
    monkeypatch.setenv("FWATTR_SYSFS_ROOT", str(tmp_path / "no-sysfs"))
    monkeypatch.delenv("FWATTR_LOG_LEVEL", raising=False)
