from pathlib import Path

from ccrm.config import Settings


def test_defaults_point_at_home_directory(monkeypatch):
    monkeypatch.delenv("CCRM_DATA_FOLDER", raising=False)
    monkeypatch.delenv("CCRM_MAX_CREDITS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.data_folder == Path.home() / "ccrm_data"
    assert settings.max_credits == 18
    assert settings.export_folder == settings.data_folder / "export"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CCRM_DATA_FOLDER", str(tmp_path))
    monkeypatch.setenv("CCRM_MAX_CREDITS", "24")
    settings = Settings(_env_file=None)
    assert settings.data_folder == tmp_path
    assert settings.max_credits == 24


def test_timestamp_is_path_safe():
    settings = Settings(_env_file=None)
    stamps = {settings.timestamp() for _ in range(3)}
    for stamp in stamps:
        assert ":" not in stamp and "/" not in stamp and "+" not in stamp
