from pathlib import Path

import pytest

from hermie import config


def test_defaults(monkeypatch):
    for name in (
        "HERMIE_DATA_DIR",
        "HERMIE_STORE",
        "HERMIE_ACQUISITION",
        "HERMIE_UNDO_WINDOW_MS",
        "HERMIE_CANCEL_GRACE_MS",
        "HERMIE_POLL_ATTEMPTS",
        "HERMIE_POLL_INTERVAL_MS",
        "CORS_ORIGINS",
        "ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)

    assert config.get_data_dir() == Path("~/.hermie").expanduser()
    assert config.get_db_path().name == "db.sqlite"
    assert config.get_store_backend() == "sqlite"
    assert config.get_acquisition_method() == "auto"
    assert config.get_undo_window_ms() == 5000
    assert config.get_cancel_grace_ms() == 250
    assert config.get_poll_attempts() == 60
    assert config.get_poll_interval_ms() == 500
    assert "http://localhost:3000" in config.get_cors_origins()
    assert config.is_production() is False


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("HERMIE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HERMIE_STORE", " Memory ")
    monkeypatch.setenv("HERMIE_ACQUISITION", "snip")
    monkeypatch.setenv("HERMIE_UNDO_WINDOW_MS", "8000")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("ENVIRONMENT", "production")

    assert config.get_db_path() == tmp_path / "db.sqlite"
    assert config.get_store_backend() == "memory"
    assert config.get_acquisition_method() == "snip"
    assert config.get_undo_window_ms() == 8000
    assert config.get_cors_origins() == ["http://a.test", "http://b.test"]
    assert config.is_production() is True


@pytest.mark.parametrize(
    ("name", "value", "getter"),
    [
        ("HERMIE_STORE", "postgres", config.get_store_backend),
        ("HERMIE_ACQUISITION", "webcam", config.get_acquisition_method),
        ("HERMIE_UNDO_WINDOW_MS", "five seconds", config.get_undo_window_ms),
        ("HERMIE_CANCEL_GRACE_MS", "-1", config.get_cancel_grace_ms),
        ("HERMIE_POLL_ATTEMPTS", "0", config.get_poll_attempts),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value, getter):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        getter()
