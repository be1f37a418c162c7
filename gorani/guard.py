"""Volume guard for bulk capture operations."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from .config import DEFAULT_MAX_FILES, DEFAULT_PROTECTED_MARKERS
from .errors import PolicyViolation
from .logging import get_logger
from .ports import Confirm

REASON_ROOT_OR_HOME = "refuses whole-root/home capture"
REASON_PROTECTED = "protected workspace"
REASON_TOO_LARGE = "declined due to size"
REASON_UNCOUNTABLE = "unable to count files"


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of a guard check: proceed, or abort with a reason."""

    proceed: bool
    reason: Optional[str] = None
    file_count: Optional[int] = None

    @classmethod
    def Proceed(cls, file_count: Optional[int] = None) -> "GuardDecision":
        return cls(proceed=True, file_count=file_count)

    @classmethod
    def Abort(cls, reason: str, file_count: Optional[int] = None) -> "GuardDecision":
        return cls(proceed=False, reason=reason, file_count=file_count)


class VolumeGuard:
    """Refuses root/home/protected captures and confirms oversized ones."""

    def __init__(
        self,
        *,
        max_files: int = DEFAULT_MAX_FILES,
        protected_markers: Sequence[str] = DEFAULT_PROTECTED_MARKERS,
        home: Callable[[], Path] = Path.home,
    ) -> None:
        self.max_files = max_files
        self.protected_markers = tuple(protected_markers)
        self._home = home
        self.logger = get_logger("guard")

    def guard(self, path: str | Path, confirm: Confirm) -> GuardDecision:
        target = Path(path).expanduser().resolve()
        if self._is_root_or_home(target):
            return GuardDecision.Abort(REASON_ROOT_OR_HOME)

        if not target.is_dir():
            return GuardDecision.Proceed(file_count=1)

        marker = self._protected_marker(target)
        if marker is not None:
            self.logger.debug("Found protected marker %s in %s", marker, target)
            return GuardDecision.Abort(REASON_PROTECTED)

        try:
            count = count_files(target)
        except OSError as exc:
            self.logger.debug("File count failed for %s: %s", target, exc)
            return GuardDecision.Abort(REASON_UNCOUNTABLE)

        if count > self.max_files:
            question = f"The directory '{path}' contains {count} files. Proceed?"
            if not confirm(question):
                return GuardDecision.Abort(REASON_TOO_LARGE, file_count=count)
        return GuardDecision.Proceed(file_count=count)

    def enforce(self, path: str | Path, confirm: Confirm) -> GuardDecision:
        """Run ``guard`` and raise PolicyViolation when it aborts."""
        decision = self.guard(path, confirm)
        if not decision.proceed:
            raise PolicyViolation(decision.reason or "aborted", str(path))
        return decision

    def _is_root_or_home(self, target: Path) -> bool:
        if target == Path(target.anchor):
            return True
        try:
            home = self._home().expanduser().resolve()
        except RuntimeError:
            return False
        return target == home

    def _protected_marker(self, target: Path) -> Optional[str]:
        for marker in self.protected_markers:
            if (target / marker).exists():
                return marker
        return None


def count_files(root: Path) -> int:
    """Count files recursively, raising OSError when any directory is unreadable."""

    def _raise(exc: OSError) -> None:
        raise exc

    count = 0
    for _, _, filenames in os.walk(root, onerror=_raise):
        count += len(filenames)
    return count


__all__ = [
    "GuardDecision",
    "REASON_PROTECTED",
    "REASON_ROOT_OR_HOME",
    "REASON_TOO_LARGE",
    "REASON_UNCOUNTABLE",
    "VolumeGuard",
    "count_files",
]
