from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..context import SetupContext
from ..decision import decide_iso_fallback, iso_name, iso_url, parse_reported_version
from ..errors import FatalError
from ..lib.command import command_exists, run_cmd
from ..lib.iso import download_iso, find_installer, mounted_image, remove_iso, run_installer
from ..lib.kmod import is_module_loaded
from ..logging_utils import success
from ..outcome import ActionResult, Outcome, StepResult

logger = logging.getLogger(__name__)


def query_guest_version(*, dry_run: bool = False) -> Optional[str]:
    """Version reported by an already installed VBoxControl, if any."""

    if not command_exists("VBoxControl"):
        return None
    r = run_cmd(["VBoxControl", "--version"], check=False, dry_run=dry_run)
    if not r.ok:
        return None
    return parse_reported_version(r.stdout)


class IsoFallbackStep:
    """Install from the vendor ISO when pinned, or when the native module is still missing.

    Download, mount, a missing installer and a failing installer are all fatal.
    """

    step_id = "30_iso_fallback"

    def run(self, ctx: SetupContext) -> StepResult:
        result = StepResult(self.step_id)
        settings = ctx.settings
        dry_run = ctx.dry_run
        pin = ctx.options.pinned_version

        loaded = is_module_loaded("vboxguest", proc_modules=settings.proc_modules)
        result.add(ActionResult.from_flag("module_loaded", loaded))

        reported = None if (pin or loaded) else query_guest_version(dry_run=dry_run)
        plan = decide_iso_fallback(pin, loaded, reported, settings.fallback_version)
        if not plan.should_download:
            logger.debug("vboxguest is loaded; ISO install not needed")
            result.add(ActionResult("iso_install", Outcome.SKIPPED, "native module loaded"))
            return result

        if pin:
            logger.info("Using requested GA version: %s", plan.version)
        else:
            logger.warning("Falling back to ISO method. Version: %s", plan.version)

        url = iso_url(settings.download_base_url, plan.version)
        iso_path = str(Path(settings.iso_dir) / iso_name(plan.version))
        download_iso(url, iso_path, timeout=settings.download_timeout, dry_run=dry_run)
        result.add(ActionResult("download", Outcome.OK, url))

        # The image is only needed while mounted.
        try:
            with mounted_image(iso_path, settings.mount_point, dry_run=dry_run) as mnt:
                installer = find_installer(mnt, dry_run=dry_run)
                if installer is None:
                    raise FatalError("Installer not found inside ISO")
                run_installer(installer, dry_run=dry_run)
                success(logger, "ISO installer completed.")
        finally:
            remove_iso(iso_path, dry_run=dry_run)

        result.add(ActionResult("iso_install", Outcome.OK, plan.version))
        return result
