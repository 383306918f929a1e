"""Failures that abort the bootstrap pipeline.

Every error carries the process exit code it maps to. Nothing inside the
pipeline catches these; ``main()`` turns them into a ``[FAIL]`` line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .lib.rlang import PackageCheckResult


class BootstrapError(Exception):
    """Base error for pipeline failures."""

    exit_code: int = 1


class ConfigError(BootstrapError):
    """Raised when a configuration file is invalid."""


class UnsupportedPlatform(BootstrapError):
    """Raised when the host OS is not one we know how to provision."""

    def __init__(self, os_name: str, hint: str = "") -> None:
        self.os_name = os_name
        msg = f"Unsupported OS: {os_name}."
        if hint:
            msg = f"{msg} {hint}"
        super().__init__(msg)


class MissingManifest(BootstrapError):
    """Raised when the project manifest is not in the project directory."""

    def __init__(self, manifest_name: str, directory: str) -> None:
        self.manifest_name = manifest_name
        self.directory = directory
        super().__init__(
            f"{manifest_name} not found in {directory}. Run this script from the repo root."
        )


class ToolInstallFailed(BootstrapError):
    """Raised when a tool is still missing after running its installer."""

    def __init__(self, tool: str, hint: str = "") -> None:
        self.tool = tool
        msg = f"{tool} installation failed."
        if hint:
            msg = f"{msg} {hint}"
        super().__init__(msg)


class ExternalTaskFailed(BootstrapError):
    """Raised when an external command exits non-zero.

    The process exit code becomes the command's own return code.
    """

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = int(returncode)
        self.stderr = stderr
        super().__init__(f"Command failed ({self.returncode}): {' '.join(self.argv)}")

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        if self.returncode < 0:
            # Killed by a signal; report it the way a shell would.
            return 128 - self.returncode
        return self.returncode or 1


class VerificationIncomplete(BootstrapError):
    """Raised when one or more expected packages are not loadable."""

    def __init__(self, result: "PackageCheckResult") -> None:
        self.result = result
        super().__init__(
            f"{result.satisfied} / {result.total} packages verified "
            f"(missing: {', '.join(result.missing)})"
        )
