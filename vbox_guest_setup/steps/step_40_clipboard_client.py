from __future__ import annotations

import logging

from ..context import SetupContext
from ..lib.desktop import client_available, kill_client, start_clipboard_client, write_autostart_entry
from ..logging_utils import success
from ..outcome import ActionResult, Outcome, StepResult

logger = logging.getLogger(__name__)


class ClipboardClientStep:
    step_id = "40_clipboard_client"

    def run(self, ctx: SetupContext) -> StepResult:
        result = StepResult(self.step_id)
        dry_run = ctx.dry_run

        logger.info("Starting clipboard integration client...")
        if client_available():
            result.add(ActionResult.from_flag("client_kill", kill_client(dry_run=dry_run)))
            started = result.add(ActionResult.from_flag("client_start", start_clipboard_client(dry_run=dry_run)))
            if not started.ok:
                logger.warning("Could not start VBoxClient --clipboard; autostart will retry at login.")
        else:
            logger.warning(
                "VBoxClient not found in PATH yet (will be available after reboot if ISO install just occurred)."
            )
            result.add(ActionResult("client_start", Outcome.SKIPPED, "VBoxClient not in PATH"))

        # Written on every run in case the distro packages did not ship one.
        try:
            path = write_autostart_entry(ctx.settings.autostart_dir, dry_run=dry_run)
        except (OSError, RuntimeError) as e:
            logger.warning("Could not write autostart entry: %s", e)
            result.add(ActionResult("autostart_entry", Outcome.FAILED, str(e)))
        else:
            success(logger, "Autostart entry ensured at %s", path)
            result.add(ActionResult("autostart_entry", Outcome.OK, path))
        return result
