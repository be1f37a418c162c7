"""Read-only git helpers used to name smart-grab features."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

from .errors import GoraniError

_NON_FEATURE_BRANCHES = {"main", "master", "origin", "HEAD"}


class GitInspector:
    """Reads the active branch of a repository."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def current_branch(self, repo_path: str | Path = ".") -> Optional[str]:
        output = self._runner(["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=Path(repo_path))
        branch = output.strip()
        return branch or None

    def feature_branch(self, repo_path: str | Path = ".") -> Optional[str]:
        """Return the active branch unless it is a trunk branch."""
        branch = self.current_branch(repo_path)
        if branch is None or branch in _NON_FEATURE_BRANCHES:
            return None
        return branch

    @staticmethod
    def _default_runner(args: Sequence[str], *, cwd: Path) -> str:
        try:
            completed = subprocess.run(
                list(args),
                cwd=cwd,
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise GoraniError("git is not installed or not found in PATH") from exc
        except subprocess.CalledProcessError as exc:
            message = exc.stderr.strip() or str(exc.returncode)
            raise GoraniError(f"git {' '.join(args[1:])} failed: {message}") from exc
        return completed.stdout


__all__ = ["GitInspector"]
