from .step_00_probe_environment import ProbeEnvironmentStep
from .step_10_install_packages import InstallPackagesStep
from .step_20_activate_modules import ActivateModulesStep
from .step_30_iso_fallback import IsoFallbackStep
from .step_40_clipboard_client import ClipboardClientStep
from .step_50_display_server import DisplayServerStep
from .step_80_verify import VerifyStep
from .step_90_reboot import RebootStep

__all__ = [
    "ProbeEnvironmentStep",
    "InstallPackagesStep",
    "ActivateModulesStep",
    "IsoFallbackStep",
    "ClipboardClientStep",
    "DisplayServerStep",
    "VerifyStep",
    "RebootStep",
]
