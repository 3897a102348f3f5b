"""Tests for configuration loading."""

import doughplan.persistence as persistence
from doughplan.config import load_config
from doughplan.persistence import (
    InMemoryScheduleRepository,
    SQLiteScheduleRepository,
    get_repository,
)


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "doughplan.yaml"
    config_path.write_text(
        """
tracking:
  on_time_tolerance_minutes: 10
  max_retries: 3
defaults:
  room_temp_c: 25
"""
    )
    monkeypatch.setenv("DOUGHPLAN_CONFIG", str(config_path))
    monkeypatch.delenv("DOUGHPLAN_DATABASE_URL", raising=False)

    config = load_config()
    assert config.tracking.on_time_tolerance_minutes == 10
    assert config.tracking.max_retries == 3
    assert config.tracking.default_reminder_lead_minutes == 15
    assert config.defaults.room_temp_c == 25
    assert config.defaults.fridge_temp_c == 4
    assert config.database_url is None


def test_missing_config_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("DOUGHPLAN_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.delenv("DOUGHPLAN_DATABASE_URL", raising=False)
    config = load_config()
    assert config.tracking.on_time_tolerance_minutes == 5
    assert config.database_url is None


def test_database_url_env_override(tmp_path, monkeypatch):
    config_path = tmp_path / "doughplan.yaml"
    config_path.write_text("database_url: sqlite:///from-file.db\n")
    monkeypatch.setenv("DOUGHPLAN_CONFIG", str(config_path))
    monkeypatch.setenv("DOUGHPLAN_DATABASE_URL", "sqlite:///from-env.db")
    assert load_config().database_url == "sqlite:///from-env.db"


def test_get_repository_uses_config(tmp_path, monkeypatch):
    monkeypatch.setattr(persistence, "_repository_instance", None)
    db_path = tmp_path / "plan.db"
    monkeypatch.setenv("DOUGHPLAN_DATABASE_URL", f"sqlite://{db_path}")

    repo = get_repository()
    assert isinstance(repo, SQLiteScheduleRepository)
    assert repo.db_path == str(db_path)
    assert get_repository() is repo


def test_get_repository_defaults_to_memory(tmp_path, monkeypatch):
    monkeypatch.setattr(persistence, "_repository_instance", None)
    monkeypatch.setenv("DOUGHPLAN_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.delenv("DOUGHPLAN_DATABASE_URL", raising=False)
    assert isinstance(get_repository(), InMemoryScheduleRepository)
