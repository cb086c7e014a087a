from __future__ import annotations

import logging

from ..context import SetupContext
from ..lib.desktop import client_running
from ..lib.kmod import is_module_loaded
from ..logging_utils import success
from ..outcome import ActionResult, Outcome, StepResult

logger = logging.getLogger(__name__)


class VerifyStep:
    """Informational only: nothing here changes control flow or the exit code."""

    step_id = "80_verify"

    def run(self, ctx: SetupContext) -> StepResult:
        result = StepResult(self.step_id)

        loaded = is_module_loaded("vboxguest", proc_modules=ctx.settings.proc_modules)
        if loaded:
            success(logger, "vboxguest kernel module is loaded.")
        else:
            logger.warning("vboxguest module is not loaded yet; reboot will usually fix this.")
        result.add(ActionResult.from_flag("module_loaded", loaded))

        if ctx.dry_run:
            # pgrep is not actually run, so there is nothing to report.
            logger.info("Dry run: VBoxClient state not checked.")
            result.add(ActionResult("client_running", Outcome.UNKNOWN, "dry run"))
        else:
            running = client_running()
            if running:
                success(logger, "VBoxClient is running for clipboard.")
            else:
                logger.warning("VBoxClient is not running yet; it will start on next login due to autostart.")
            result.add(ActionResult.from_flag("client_running", running))

        success(logger, "All done. A reboot/login cycle ensures everything is cleanly started.")
        logger.info("Make sure host VM setting 'Shared Clipboard: Bidirectional' is enabled.")
        logger.info("Terminal paste: Ctrl+Shift+V; GUI apps: Ctrl+V.")
        return result
