from __future__ import annotations

import logging

from ..context import SetupContext
from ..lib.kmod import GUEST_MODULES, GUEST_SERVICE, has_systemd, modprobe, systemctl
from ..outcome import ActionResult, Outcome, StepResult

logger = logging.getLogger(__name__)


class ActivateModulesStep:
    step_id = "20_activate_modules"

    def run(self, ctx: SetupContext) -> StepResult:
        result = StepResult(self.step_id)
        dry_run = ctx.dry_run

        logger.info("Ensuring services and modules are active...")
        if has_systemd():
            result.add(ActionResult.from_cmd("service_enable", systemctl("enable", GUEST_SERVICE, dry_run=dry_run)))
            result.add(ActionResult.from_cmd("service_restart", systemctl("restart", GUEST_SERVICE, dry_run=dry_run)))
        else:
            result.add(ActionResult("service_enable", Outcome.SKIPPED, "systemctl not available"))
            result.add(ActionResult("service_restart", Outcome.SKIPPED, "systemctl not available"))

        for mod in GUEST_MODULES:
            result.add(ActionResult.from_cmd(f"modprobe_{mod}", modprobe(mod, dry_run=dry_run)))

        # Load failures usually clear up after the ISO install or a reboot.
        for a in result.failed:
            logger.warning("Non-fatal: %s failed (%s)", a.name, a.detail)
        return result
