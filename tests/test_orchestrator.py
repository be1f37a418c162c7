"""Tests for gorani.orchestrator."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gorani.errors import GoraniError, NotFoundError, PolicyViolation
from gorani.extractors import LexicalExtractor
from gorani.orchestrator import Orchestrator
from gorani.prompting import ContextRequest, ResponseVariant
from gorani.staging import StagingArea
from tests._fixtures.repo_builder import RepoBuilder


class RecordingClipboard:
    """Clipboard double that keeps every copied text."""

    def __init__(self) -> None:
        self.copies: list[str] = []

    def __call__(self, text: str) -> None:
        self.copies.append(text)


class RecordingClient:
    """Reasoning client double that returns a canned reply."""

    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.requests: list[ContextRequest] = []

    def complete(self, request: ContextRequest) -> str:
        self.requests.append(request)
        return self.reply


class FixedBranch:
    def __init__(self, branch: str | None) -> None:
        self.branch = branch

    def feature_branch(self, repo_path) -> str | None:
        return self.branch


def _seed(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "pkg/a.go": """
            package pkg

            // Foo formats x.
            func Foo(x int) string {
                return ""
            }
            """,
            "pkg/sub/b.go": """
            package sub

            func bar() {}
            """,
        }
    )


def _orchestrator(repo_builder: RepoBuilder, **overrides) -> Orchestrator:
    options = {
        "clipboard": RecordingClipboard(),
        "syntactic": LexicalExtractor(exported_only=True),
        "git": FixedBranch("login-flow"),
    }
    options.update(overrides)
    return Orchestrator(repo_builder.path(), **options)


def test_run_tree_with_symbols_copies_plain_output(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)
    clipboard = RecordingClipboard()
    orchestrator = _orchestrator(repo_builder, clipboard=clipboard)

    outcome = orchestrator.run_tree(with_symbols=True)

    assert clipboard.copies == [outcome.plain]
    assert "Foo(x int) -> string" in outcome.plain
    assert "bar()" in outcome.plain
    assert "\033[" in outcome.decorated
    assert "\033[" not in outcome.plain


def test_run_tree_without_symbols_lists_only_entries(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    outcome = _orchestrator(repo_builder).run_tree()

    assert "Foo" not in outcome.plain
    assert "└── pkg\n" in outcome.plain


def test_run_grab_single_file(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)
    clipboard = RecordingClipboard()

    outcome = _orchestrator(repo_builder, clipboard=clipboard).run_grab(["pkg/a.go"])

    assert outcome.text.startswith(f">>> {repo_builder.path('pkg/a.go')}\npackage pkg\n")
    assert clipboard.copies == [outcome.text]


def test_run_grab_finds_file_by_name(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    outcome = _orchestrator(repo_builder).run_grab(["b.go"])

    assert outcome.sources == [str(repo_builder.path("pkg/sub/b.go"))]


def test_run_grab_unknown_name_raises(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    with pytest.raises(NotFoundError):
        _orchestrator(repo_builder).run_grab(["nope.go"])


def test_run_grab_directory_collects_code_files(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    outcome = _orchestrator(repo_builder).run_grab(["pkg"])

    assert sorted(outcome.sources) == [
        str(repo_builder.path("pkg/a.go")),
        str(repo_builder.path("pkg/sub/b.go")),
    ]


def test_run_grab_multiple_directories_uses_folder_separator(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"one/a.go": "package one\n", "two/b.go": "package two\n"})

    outcome = _orchestrator(repo_builder).run_grab(["one", "two"])

    assert outcome.sources == ["one", "two"]
    assert outcome.text.count("\n===\n") == 1


def test_run_grab_multiple_files(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    outcome = _orchestrator(repo_builder).run_grab(["pkg/sub/b.go", "pkg/a.go"])

    assert outcome.sources == ["pkg/sub/b.go", "pkg/a.go"]
    assert outcome.text.index("b.go") < outcome.text.index("a.go")


def test_run_grab_rejects_mixed_targets(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    with pytest.raises(GoraniError):
        _orchestrator(repo_builder).run_grab(["pkg", "pkg/a.go"])


def test_run_grab_refuses_protected_workspace(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)
    repo_builder.write({"pkg/ws_info.toml": ""})
    clipboard = RecordingClipboard()

    with pytest.raises(PolicyViolation):
        _orchestrator(repo_builder, clipboard=clipboard).run_grab(["pkg"])

    assert clipboard.copies == []


def test_run_grab_public_lists_exported_docs(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    listing = _orchestrator(repo_builder).run_grab_public()

    assert listing == "- Foo: Foo formats x.\n"


def test_run_summary_copies_listing(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)
    clipboard = RecordingClipboard()

    summary = _orchestrator(repo_builder, clipboard=clipboard).run_summary("pkg")

    assert f"File: {repo_builder.path('pkg/a.go')}" in summary
    assert "  Function: Foo(x int) -> string" in summary
    assert "bar" not in summary
    assert clipboard.copies == [summary]


def test_run_smartgrab_grabs_selected_files(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)
    client = RecordingClient(json.dumps({"files": ["pkg/sub/b.go", "pkg/a.go"]}))
    clipboard = RecordingClipboard()
    orchestrator = _orchestrator(repo_builder, client=client, clipboard=clipboard)

    outcome = orchestrator.run_smartgrab(description="Add a login flow.")

    assert outcome is not None
    assert outcome.feature == "login-flow"
    assert outcome.selection.files == ["pkg/sub/b.go", "pkg/a.go"]
    assert outcome.payload.paths == [
        str(repo_builder.path("pkg/sub/b.go")),
        str(repo_builder.path("pkg/a.go")),
    ]
    assert clipboard.copies == [outcome.payload.text]
    request = client.requests[0]
    assert request.variant is ResponseVariant.FILE_SELECTION
    assert "I want to build a feature called login-flow." in request.prompt
    assert (repo_builder.path("input.md")).read_text(encoding="utf-8") == request.prompt
    assert json.loads(repo_builder.path("output.md").read_text(encoding="utf-8")) == {
        "files": ["pkg/sub/b.go", "pkg/a.go"]
    }


def test_run_smartgrab_asks_for_description(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)
    client = RecordingClient(json.dumps({"files": []}))
    prompts: list[str] = []

    def read_line(prompt: str) -> str:
        prompts.append(prompt)
        return "Typed description"

    outcome = _orchestrator(repo_builder, client=client, read_line=read_line).run_smartgrab()

    assert outcome is not None
    assert len(prompts) == 1
    assert "Typed description" in client.requests[0].prompt


def test_run_smartgrab_without_feature_branch_returns_none(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)
    client = RecordingClient("{}")

    outcome = _orchestrator(repo_builder, client=client, git=FixedBranch(None)).run_smartgrab(
        description="unused"
    )

    assert outcome is None
    assert client.requests == []


def test_run_prepare_writes_implementation_prompt(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    written = _orchestrator(repo_builder).run_prepare(task="Add tests.")

    text = written.read_text(encoding="utf-8")
    assert written == repo_builder.path("input.md")
    assert text.startswith("Task Description:\nAdd tests.\n")
    assert "Foo(x int) -> string" in text
    assert text.endswith("Please implement any missing functions or suggest improvements as needed.\n")


def test_run_prompt_sends_staged_input(repo_builder: RepoBuilder) -> None:
    reply = json.dumps({"filename": "out/main.go", "scripts": ["package main\n"]})
    client = RecordingClient(reply)
    orchestrator = _orchestrator(repo_builder, client=client)
    orchestrator.staging.write_input("Write main.\n")

    bundle = orchestrator.run_prompt(edit=False)

    assert bundle.filename == "out/main.go"
    assert client.requests[0].variant is ResponseVariant.CODE_BUNDLE
    assert client.requests[0].prompt == "Write main.\n"
    assert repo_builder.path("output.md").read_text(encoding="utf-8") == reply


def test_run_prompt_opens_editor_when_requested(repo_builder: RepoBuilder) -> None:
    client = RecordingClient(json.dumps({"filename": "x.go", "scripts": []}))

    def fake_editor(command) -> int:
        Path(command[-1]).write_text("Edited prompt\n", encoding="utf-8")
        return 0

    staging = StagingArea(repo_builder.path(), editor="vim", runner=fake_editor)
    _orchestrator(repo_builder, client=client, staging=staging).run_prompt()

    assert client.requests[0].prompt == "Edited prompt\n"


def test_run_prompt_rejects_empty_input(repo_builder: RepoBuilder) -> None:
    orchestrator = _orchestrator(repo_builder, client=RecordingClient("{}"))
    orchestrator.staging.write_input("   \n")

    with pytest.raises(GoraniError):
        orchestrator.run_prompt(edit=False)


def test_run_apply_writes_first_script(repo_builder: RepoBuilder) -> None:
    orchestrator = _orchestrator(repo_builder)
    orchestrator.staging.write_output(
        json.dumps({"filename": "cmd/main.go", "scripts": ["package main\n", "ignored"]})
    )

    outcome = orchestrator.run_apply()

    assert outcome.written == repo_builder.path("cmd/main.go")
    assert outcome.written.read_text(encoding="utf-8") == "package main\n"


def test_run_apply_without_scripts_writes_nothing(repo_builder: RepoBuilder) -> None:
    orchestrator = _orchestrator(repo_builder)
    orchestrator.staging.write_output(json.dumps({"filename": "cmd/main.go", "scripts": []}))

    outcome = orchestrator.run_apply()

    assert outcome.written is None
    assert not repo_builder.path("cmd/main.go").exists()
