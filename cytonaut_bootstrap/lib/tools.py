from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import ToolInstallFailed

logger = logging.getLogger(__name__)


class EnsureOutcome(str, enum.Enum):
    INSTALLED = "installed"
    ALREADY_PRESENT = "already_present"


@dataclass(frozen=True)
class ToolStatus:
    name: str
    outcome: EnsureOutcome
    location: str


def ensure_tool(
    name: str,
    check_fn: Callable[[], Optional[str]],
    install_fn: Callable[[], object],
    *,
    recheck_fn: Optional[Callable[[], Optional[str]]] = None,
    hint: str = "",
) -> ToolStatus:
    """Make sure a tool is available, installing it at most once.

    ``check_fn`` returns the tool's location or None. If it finds the tool the
    installer is never called. Otherwise ``install_fn`` runs once and
    ``recheck_fn`` (default: ``check_fn``) must find it, or ToolInstallFailed
    is raised. There is no retry.
    """

    found = check_fn()
    if found:
        return ToolStatus(name=name, outcome=EnsureOutcome.ALREADY_PRESENT, location=found)

    logger.info("Installing %s …", name)
    install_fn()

    found = (recheck_fn or check_fn)()
    if not found:
        raise ToolInstallFailed(name, hint)
    return ToolStatus(name=name, outcome=EnsureOutcome.INSTALLED, location=found)
