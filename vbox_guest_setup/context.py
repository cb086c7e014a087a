from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .settings import Settings


@dataclass(frozen=True)
class Options:
    """What the user asked for on the command line."""

    reboot: bool = True
    pinned_version: Optional[str] = None
    force_xorg: bool = True


@dataclass(frozen=True)
class SetupContext:
    options: Options
    settings: Settings = field(default_factory=Settings)

    @property
    def dry_run(self) -> bool:
        return self.settings.dry_run
