from __future__ import annotations

import logging
import time
from typing import Callable

from ..context import SetupContext
from ..lib.command import run_cmd
from ..outcome import ActionResult, Outcome, StepResult

logger = logging.getLogger(__name__)


class RebootStep:
    step_id = "90_reboot"

    def __init__(self, sleep: Callable[[float], None] = time.sleep) -> None:
        self._sleep = sleep

    def run(self, ctx: SetupContext) -> StepResult:
        result = StepResult(self.step_id)
        dry_run = ctx.dry_run

        if not ctx.options.reboot:
            logger.warning("Skipping reboot. Please reboot this VM manually to finalize.")
            result.add(ActionResult("reboot", Outcome.SKIPPED, "--no-reboot"))
            return result

        delay = ctx.settings.reboot_delay
        logger.info("Rebooting in %g seconds... (use --no-reboot to skip)", delay)
        if not dry_run:
            self._sleep(delay)
        run_cmd(["sync"], check=False, dry_run=dry_run)
        result.add(ActionResult.from_cmd("reboot", run_cmd(["reboot"], check=False, dry_run=dry_run, privileged=True)))
        return result
