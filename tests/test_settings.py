from __future__ import annotations

import pytest

from vbox_guest_setup.settings import DEFAULT_LOG_PATH, Settings, load_settings


def test_defaults_when_no_config(tmp_path):
    s = load_settings(str(tmp_path / "missing.yaml"))
    assert s.log_path == DEFAULT_LOG_PATH
    assert s.mount_point == "/mnt/vbox_ga"
    assert s.autostart_dir == "/etc/xdg/autostart"
    assert s.gdm_config == "/etc/gdm3/custom.conf"
    assert s.download_base_url == "https://download.virtualbox.org/virtualbox"
    assert s.fallback_version == "7.1.8"
    assert s.reboot_delay == 5.0
    assert s.dry_run is False


def test_yaml_overrides(tmp_path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(
        "paths:\n  mount_point: /media/ga\n"
        "download:\n  fallback_version: '7.0.20'\n  timeout: 10\n"
        "reboot_delay: 0\n"
        "dry_run: true\n",
        encoding="utf-8",
    )
    s = load_settings(str(cfg))
    assert s.mount_point == "/media/ga"
    assert s.fallback_version == "7.0.20"
    assert s.download_timeout == 10.0
    assert s.reboot_delay == 0.0
    assert s.dry_run is True
    assert s.iso_dir == "/tmp"


def test_env_var_selects_config(tmp_path, monkeypatch):
    cfg = tmp_path / "env.yaml"
    cfg.write_text("download:\n  fallback_version: '6.1.50'\n", encoding="utf-8")
    monkeypatch.setenv("VBOX_GUEST_SETUP_CONFIG", str(cfg))
    assert load_settings().fallback_version == "6.1.50"


def test_non_mapping_rejected(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(str(cfg))


def test_empty_file_is_defaults(tmp_path):
    cfg = tmp_path / "empty.yaml"
    cfg.write_text("", encoding="utf-8")
    assert load_settings(str(cfg)) == Settings()


def test_zero_values_are_kept():
    s = Settings(raw={"download": {"timeout": 0}, "reboot_delay": 0})
    assert s.download_timeout == 0.0
    assert s.reboot_delay == 0.0
    assert Settings().download_timeout == 60.0
