"""CLI entrypoints for gorani commands."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple

from . import clipboard
from .config import ConfigError
from .errors import GoraniError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .ports import terminal_confirm, terminal_read_line, terminal_read_secret


@dataclass(frozen=True)
class TreeArgs:
    path: str
    plain: bool


@dataclass(frozen=True)
class GrabArgs:
    paths: Tuple[str, ...]


@dataclass(frozen=True)
class PathArgs:
    path: str


@dataclass(frozen=True)
class SmartGrabArgs:
    path: str
    description: Optional[str]
    feature: Optional[str]


@dataclass(frozen=True)
class PrepareArgs:
    path: str
    task: str


@dataclass(frozen=True)
class PromptArgs:
    edit: bool


@dataclass(frozen=True)
class ApplyArgs:
    pass


@dataclass(frozen=True)
class CommandSpec:
    """One CLI command: how to declare, parse and run it."""

    name: str
    description: str
    configure: Callable[[argparse.ArgumentParser], None]
    parse: Callable[[argparse.Namespace], Any]
    run: Callable[[Orchestrator, Any], Optional[str]]


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
        "default": argparse.SUPPRESS if suppress_default else False,
    }
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_no_clipboard_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--no-clipboard",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Print results without copying them to the clipboard.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to inspect (defaults to current directory).",
    )


def _configure_tree(parser: argparse.ArgumentParser) -> None:
    _add_path_argument(parser)
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Print without colours even on a terminal.",
    )


def _configure_grab(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="*",
        help="Files, folders, or a filename to search for (defaults to current directory).",
    )


def _configure_smartgrab(parser: argparse.ArgumentParser) -> None:
    _add_path_argument(parser)
    parser.add_argument(
        "--description",
        help="Feature description; prompted for when omitted.",
    )
    parser.add_argument(
        "--feature",
        help="Feature name; defaults to the active git branch.",
    )


def _configure_prepare(parser: argparse.ArgumentParser) -> None:
    _add_path_argument(parser)
    parser.add_argument("--task", default="", help="Optional task description to include.")


def _configure_prompt(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--no-edit",
        action="store_true",
        help="Send the staged input file without opening an editor.",
    )


def _configure_nothing(parser: argparse.ArgumentParser) -> None:
    return None


def _tree_args(args: argparse.Namespace) -> TreeArgs:
    plain = bool(args.plain) or not sys.stdout.isatty()
    return TreeArgs(path=args.path, plain=plain)


def _run_tree(orchestrator: Orchestrator, args: TreeArgs) -> str:
    outcome = orchestrator.run_tree(args.path)
    return outcome.plain if args.plain else outcome.decorated


def _run_tree_func(orchestrator: Orchestrator, args: TreeArgs) -> str:
    outcome = orchestrator.run_tree(args.path, with_symbols=True)
    return outcome.plain if args.plain else outcome.decorated


def _run_grab(orchestrator: Orchestrator, args: GrabArgs) -> str:
    outcome = orchestrator.run_grab(args.paths)
    return f"Grabbed {len(outcome.sources)} source(s): {', '.join(outcome.sources)}"


def _run_grab_public(orchestrator: Orchestrator, args: PathArgs) -> str:
    listing = orchestrator.run_grab_public(args.path)
    return "Public Functions and Descriptions:\n" + listing


def _run_summary(orchestrator: Orchestrator, args: PathArgs) -> str:
    return orchestrator.run_summary(args.path)


def _run_smartgrab(orchestrator: Orchestrator, args: SmartGrabArgs) -> str:
    outcome = orchestrator.run_smartgrab(
        args.path, description=args.description, feature=args.feature
    )
    if outcome is None:
        return "No valid feature branch found. Aborting smart grab."
    files = ", ".join(outcome.selection.files) or "(none)"
    return f"Grabbed files for feature '{outcome.feature}': {files}"


def _run_prepare(orchestrator: Orchestrator, args: PrepareArgs) -> str:
    written = orchestrator.run_prepare(args.path, task=args.task)
    return f"Prompt prepared in {_relativize(written)}"


def _run_prompt(orchestrator: Orchestrator, args: PromptArgs) -> str:
    bundle = orchestrator.run_prompt(edit=args.edit)
    return (
        f"Response saved to {_relativize(orchestrator.staging.output_path)} "
        f"({bundle.filename}, {len(bundle.scripts)} script(s))"
    )


def _run_apply(orchestrator: Orchestrator, args: ApplyArgs) -> str:
    outcome = orchestrator.run_apply()
    if outcome.written is None:
        return "No scripts found in the stored response."
    return f"Wrote the first script to {_relativize(outcome.written)}"


def _build_commands() -> Mapping[str, CommandSpec]:
    specs = (
        CommandSpec(
            "tree",
            "Prints the directory tree structure",
            _configure_tree,
            _tree_args,
            _run_tree,
        ),
        CommandSpec(
            "tree-func",
            "Prints the directory tree structure with functions",
            _configure_tree,
            _tree_args,
            _run_tree_func,
        ),
        CommandSpec(
            "grab",
            "Grabs code files (file or folder auto-detected)",
            _configure_grab,
            lambda args: GrabArgs(paths=tuple(args.paths)),
            _run_grab,
        ),
        CommandSpec(
            "grab-public",
            "Prints public functions and their descriptions",
            _add_path_argument,
            lambda args: PathArgs(path=args.path),
            _run_grab_public,
        ),
        CommandSpec(
            "summary",
            "Grabs a summary of Go symbols (functions, structs, interfaces)",
            _add_path_argument,
            lambda args: PathArgs(path=args.path),
            _run_summary,
        ),
        CommandSpec(
            "smartgrab",
            "Sends a symbol summary to the reasoning service and grabs the files it selects",
            _configure_smartgrab,
            lambda args: SmartGrabArgs(
                path=args.path, description=args.description, feature=args.feature
            ),
            _run_smartgrab,
        ),
        CommandSpec(
            "prepare",
            "Writes an implementation prompt built from the function tree to the input file",
            _configure_prepare,
            lambda args: PrepareArgs(path=args.path, task=args.task),
            _run_prepare,
        ),
        CommandSpec(
            "prompt",
            "Edits the input file and sends it to the reasoning service for code",
            _configure_prompt,
            lambda args: PromptArgs(edit=not args.no_edit),
            _run_prompt,
        ),
        CommandSpec(
            "apply",
            "Writes the first script of the stored response to its filename",
            _configure_nothing,
            lambda args: ApplyArgs(),
            _run_apply,
        ),
    )
    return MappingProxyType({spec.name: spec for spec in specs})


COMMANDS: Mapping[str, CommandSpec] = _build_commands()


def command_catalog(commands: Mapping[str, CommandSpec] = COMMANDS) -> str:
    """Return the machine-readable command list."""
    catalog = [
        {"name": spec.name, "description": spec.description}
        for spec in sorted(commands.values(), key=lambda spec: spec.name)
    ]
    return json.dumps(catalog)


def _build_parser(commands: Mapping[str, CommandSpec] = COMMANDS) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gorani",
        description="Assemble source-code context for a reasoning service and grab what it selects.",
    )
    _add_verbose_option(parser)
    _add_no_clipboard_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "--list-commands",
        action="store_true",
        help="Print the command catalog as JSON and exit.",
    )
    subparsers = parser.add_subparsers(dest="command")
    for spec in commands.values():
        sub = subparsers.add_parser(spec.name, help=spec.description)
        _add_verbose_option(sub, suppress_default=True)
        _add_no_clipboard_option(sub, suppress_default=True)
        spec.configure(sub)
    return parser


def main(
    argv: list[str] | None = None,
    *,
    orchestrator_factory: Callable[..., Orchestrator] = Orchestrator,
    commands: Mapping[str, CommandSpec] = COMMANDS,
) -> None:
    """CLI entrypoint for gorani commands."""
    parser = _build_parser(commands)
    args = parser.parse_args(argv)

    if args.list_commands:
        print(command_catalog(commands))
        return
    if not args.command:
        parser.print_help()
        parser.exit(1)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    spec = commands[args.command]
    typed_args = spec.parse(args)

    try:
        orchestrator = orchestrator_factory(
            Path.cwd(),
            clipboard=None if args.no_clipboard else clipboard.copy,
            confirm=terminal_confirm,
            read_line=terminal_read_line,
            read_secret=terminal_read_secret,
        )
        message = spec.run(orchestrator, typed_args)
    except (GoraniError, ConfigError) as exc:
        parser.exit(1, f"gorani {spec.name} failed: {exc}\nRun with --verbose for more details.\n")
    except Exception as exc:  # pragma: no cover - last-resort guard
        parser.exit(1, f"gorani {spec.name} failed: {exc}\nRun with --verbose for more details.\n")

    if message:
        print(message.rstrip("\n"))


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
