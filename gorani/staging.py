"""Staging files exchanged with the editor and the reasoning service."""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

from .errors import FilesystemError, GoraniError

DEFAULT_EDITOR = "nvim"


class StagingArea:
    """Reads and writes ``input.md``/``output.md`` in a working directory."""

    def __init__(
        self,
        workdir: str | Path = ".",
        *,
        input_file: str = "input.md",
        output_file: str = "output.md",
        editor: str | None = None,
        runner: Callable[[Sequence[str]], int] | None = None,
    ) -> None:
        self.workdir = Path(workdir)
        self.input_path = self.workdir / input_file
        self.output_path = self.workdir / output_file
        self.editor = editor
        self._runner = runner or self._default_runner

    def write_input(self, text: str) -> Path:
        return _write(self.input_path, text)

    def read_input(self) -> str:
        return _read(self.input_path)

    def write_output(self, text: str) -> Path:
        return _write(self.output_path, text)

    def read_output(self) -> str:
        return _read(self.output_path)

    def edit_input(self) -> str:
        """Open the input file in the user's editor and return the edited text."""
        return self.open_in_editor(self.input_path)

    def open_in_editor(self, path: Path) -> str:
        if not path.exists():
            _write(path, "")
        command = [*shlex.split(self._resolve_editor()), str(path)]
        try:
            returncode = self._runner(command)
        except FileNotFoundError as exc:
            raise GoraniError(f"Unable to launch editor '{command[0]}'") from exc
        if returncode != 0:
            raise GoraniError(f"Editor exited with status {returncode}")
        return _read(path)

    def _resolve_editor(self) -> str:
        return self.editor or _first_env_value(("VISUAL", "EDITOR")) or DEFAULT_EDITOR

    @staticmethod
    def _default_runner(command: Sequence[str]) -> int:
        return subprocess.run(list(command), check=False).returncode


def _write(path: Path, text: str) -> Path:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Failed to write {path}: {exc}") from exc
    return path


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Failed to read {path}: {exc}") from exc


def _first_env_value(keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return None


__all__ = ["StagingArea"]
