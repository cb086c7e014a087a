from __future__ import annotations

import logging
from pathlib import Path

from .command import command_exists, ensure_dir, run_cmd, spawn_detached, write_file

logger = logging.getLogger(__name__)

CLIENT = "VBoxClient"
AUTOSTART_NAME = "vboxclient-clipboard.desktop"

AUTOSTART_ENTRY = """\
[Desktop Entry]
Type=Application
Name=VirtualBox Clipboard
Exec=sh -c 'pgrep -x VBoxClient >/dev/null || (VBoxClient --clipboard &)'
OnlyShowIn=GNOME;Unity;X-Cinnamon;MATE;XFCE;LXQt;LXDE;
X-GNOME-Autostart-Phase=Initialization
X-GNOME-Autostart-enabled=true
NoDisplay=true
"""


def client_available() -> bool:
    return command_exists(CLIENT)


def client_running(*, dry_run: bool = False) -> bool:
    r = run_cmd(["pgrep", "-x", CLIENT], check=False, dry_run=dry_run)
    return r.ok


def kill_client(*, dry_run: bool = False) -> bool:
    # pkill exits 1 when nothing matched, which is the state we want anyway.
    r = run_cmd(["pkill", "-x", CLIENT], check=False, dry_run=dry_run)
    return r.returncode in (0, 1)


def start_clipboard_client(*, dry_run: bool = False) -> bool:
    return spawn_detached([CLIENT, "--clipboard"], dry_run=dry_run)


def write_autostart_entry(autostart_dir: str, *, dry_run: bool = False) -> str:
    ensure_dir(autostart_dir, dry_run=dry_run)
    path = str(Path(autostart_dir) / AUTOSTART_NAME)
    write_file(path, AUTOSTART_ENTRY, dry_run=dry_run)
    return path
