from .step_00_detect_platform import DetectPlatformStep
from .step_10_locate_manifest import LocateManifestStep
from .step_20_ensure_pixi import EnsurePixiStep
from .step_30_install_base import InstallBaseDependenciesStep
from .step_40_chained_tasks import ChainedTasksStep
from .step_50_verify_packages import VerifyPackagesStep
from .step_60_confirm_auxiliary_tool import ConfirmAuxiliaryToolStep

__all__ = [
    "DetectPlatformStep",
    "LocateManifestStep",
    "EnsurePixiStep",
    "InstallBaseDependenciesStep",
    "ChainedTasksStep",
    "VerifyPackagesStep",
    "ConfirmAuxiliaryToolStep",
]
