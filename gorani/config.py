"""Settings read from an optional ``.gorani.yml`` in the target root."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import yaml

CONFIG_FILENAME = ".gorani.yml"

DEFAULT_MAX_FILES = 200
DEFAULT_PROTECTED_MARKERS: tuple[str, ...] = (".config", "ws_info.toml")
DEFAULT_CODE_EXTENSIONS: tuple[str, ...] = (
    ".go",
    ".py",
    ".js",
    ".java",
    ".cpp",
    ".c",
    ".cs",
    ".rb",
    ".php",
    ".html",
    ".css",
    ".sh",
)

_Number = TypeVar("_Number", int, float)


class ConfigError(RuntimeError):
    """Raised when .gorani.yml is malformed or holds an invalid value."""


@dataclass
class LLMConfig:
    """Connection settings for the reasoning service."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None

    def is_empty(self) -> bool:
        return all(value is None for value in vars(self).values())


@dataclass
class GuardConfig:
    max_files: int = DEFAULT_MAX_FILES
    protected_markers: List[str] = field(default_factory=lambda: list(DEFAULT_PROTECTED_MARKERS))


@dataclass
class StagingConfig:
    input_file: str = "input.md"
    output_file: str = "output.md"
    editor: Optional[str] = None


@dataclass
class GoraniConfig:
    """Everything a command needs from .gorani.yml, with defaults filled in."""

    root: Path
    llm: Optional[LLMConfig] = None
    guard: GuardConfig = field(default_factory=GuardConfig)
    staging: StagingConfig = field(default_factory=StagingConfig)
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_CODE_EXTENSIONS))


def load_config(path: Path) -> GoraniConfig:
    """Load the config beside ``path`` (a directory or a config file).

    A missing file yields defaults. Unknown keys are ignored; values of the
    wrong type fall back to the default for that key.
    """
    config_file = _locate(Path(path))
    config = GoraniConfig(root=config_file.parent)
    if not config_file.is_file():
        return config

    document = _parse(config_file)
    config.llm = _load_llm(_section(document, "llm"))
    config.guard = _load_guard(_section(document, "guard"))
    config.staging = _load_staging(_section(document, "staging"))
    if "extensions" in document:
        config.extensions = [_extension(item) for item in _strings(document["extensions"])]
    return config


def _locate(path: Path) -> Path:
    path = path.expanduser().resolve()
    if path.is_dir():
        return path / CONFIG_FILENAME
    return path if path.name == CONFIG_FILENAME else path.parent / CONFIG_FILENAME


def _parse(config_file: Path) -> Dict[str, Any]:
    try:
        document = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_file}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read {config_file}: {exc}") from exc
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
    return document


def _load_llm(section: Mapping[str, Any]) -> Optional[LLMConfig]:
    llm = LLMConfig(
        model=_text(section.get("model")),
        base_url=_text(section.get("base_url")),
        api_key=_text(section.get("api_key")),
        temperature=_number(section.get("temperature"), float),
        max_tokens=_number(section.get("max_tokens"), int),
        request_timeout=_number(section.get("request_timeout"), float),
    )
    return None if llm.is_empty() else llm


def _load_guard(section: Mapping[str, Any]) -> GuardConfig:
    guard = GuardConfig()
    max_files = _number(section.get("max_files"), int)
    if max_files is not None:
        if max_files < 0:
            raise ConfigError("guard.max_files must not be negative")
        guard.max_files = max_files
    if "protected_markers" in section:
        guard.protected_markers = _strings(section["protected_markers"])
    return guard


def _load_staging(section: Mapping[str, Any]) -> StagingConfig:
    defaults = StagingConfig()
    return StagingConfig(
        input_file=_text(section.get("input_file")) or defaults.input_file,
        output_file=_text(section.get("output_file")) or defaults.output_file,
        editor=_text(section.get("editor")),
    )


def _section(document: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = document.get(key)
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _number(value: Any, cast: Callable[[Any], _Number]) -> Optional[_Number]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        return None


def _strings(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value if not isinstance(item, (dict, list))]
    return []


def _extension(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GoraniConfig",
    "GuardConfig",
    "LLMConfig",
    "StagingConfig",
    "load_config",
]
