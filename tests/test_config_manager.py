# tests/test_config_manager.py
import logging

import pytest

from sleep_tracker.config.config_manager import DEFAULT_CONFIG, ConfigManager
from sleep_tracker.utils.logging_config import setup_logging


def test_missing_file_uses_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        config = ConfigManager(str(tmp_path / "absent.yaml"))

    assert config.config == DEFAULT_CONFIG
    assert config.get('charts.minimum_scale.duration') == 1
    assert "not found" in caplog.text


def test_yaml_overrides_are_merged_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("storage:\n  data_dir: /tmp/sleep\ncharts:\n  score_unit: points\n")

    config = ConfigManager(str(path))

    assert config.get('storage.data_dir') == "/tmp/sleep"
    assert config.get('charts.score_unit') == "points"
    assert config.get('charts.minimum_scale.score') == 10


def test_unknown_key_returns_default(tmp_path):
    config = ConfigManager(str(tmp_path / "absent.yaml"))
    assert config.get('charts.colors.bar', 'teal') == 'teal'
    assert config.get('storage.data_dir.nested') is None


def test_non_mapping_file_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        ConfigManager(str(path))


def test_defaults_are_not_shared_between_instances(tmp_path):
    first = ConfigManager(str(tmp_path / "absent.yaml"))
    first.config['charts']['minimum_scale']['duration'] = 99

    second = ConfigManager(str(tmp_path / "absent.yaml"))
    assert second.get('charts.minimum_scale.duration') == 1


def test_setup_logging_creates_log_directory(tmp_path, monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    log_file = tmp_path / "logs" / "sleep_tracker.log"

    setup_logging('DEBUG', str(log_file))
    logging.getLogger("sleep_tracker.test").info("hello")
    for handler in root.handlers:
        handler.flush()

    assert log_file.exists()
    assert "sleep_tracker.test - INFO - hello" in log_file.read_text()
    for handler in root.handlers:
        handler.close()
