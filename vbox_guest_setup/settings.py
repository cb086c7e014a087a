from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_ENV_VAR = "VBOX_GUEST_SETUP_CONFIG"
DEFAULT_CONFIG_PATH = "/etc/vbox-guest-setup.yaml"

DEFAULT_LOG_PATH = "/var/log/vbox-guest-setup.log"
DEFAULT_BASE_URL = "https://download.virtualbox.org/virtualbox"
DEFAULT_FALLBACK_VERSION = "7.1.8"


@dataclass(frozen=True)
class Settings:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    def _path(self, key: str, default: str) -> str:
        return str(self._section("paths").get(key) or default)

    @property
    def log_path(self) -> str:
        return self._path("log", DEFAULT_LOG_PATH)

    @property
    def dmi_product_name(self) -> str:
        return self._path("dmi_product_name", "/sys/class/dmi/id/product_name")

    @property
    def proc_modules(self) -> str:
        return self._path("proc_modules", "/proc/modules")

    @property
    def iso_dir(self) -> str:
        return self._path("iso_dir", "/tmp")

    @property
    def mount_point(self) -> str:
        return self._path("mount_point", "/mnt/vbox_ga")

    @property
    def autostart_dir(self) -> str:
        return self._path("autostart_dir", "/etc/xdg/autostart")

    @property
    def gdm_config(self) -> str:
        return self._path("gdm_config", "/etc/gdm3/custom.conf")

    @property
    def download_base_url(self) -> str:
        return str(self._section("download").get("base_url") or DEFAULT_BASE_URL).rstrip("/")

    @property
    def fallback_version(self) -> str:
        return str(self._section("download").get("fallback_version") or DEFAULT_FALLBACK_VERSION)

    @property
    def download_timeout(self) -> float:
        value = self._section("download").get("timeout")
        return 60.0 if value is None else float(value)

    @property
    def reboot_delay(self) -> float:
        value = self.raw.get("reboot_delay")
        return 5.0 if value is None else float(value)

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))


def config_path_from_env() -> str:
    return os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def load_settings(path: Optional[str] = None) -> Settings:
    """Load optional YAML settings; a missing file yields the defaults."""

    p = Path(path or config_path_from_env())
    if not p.exists():
        return Settings()

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError(f"PyYAML is required to read {p}") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")

    return Settings(raw=raw)
