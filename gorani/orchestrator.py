"""Pipeline orchestration for the gorani commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .collector import FileCollector, find_file
from .config import GoraniConfig, LLMConfig, load_config
from .errors import GoraniError, NotFoundError
from .extractors import LexicalExtractor, SymbolExtractor, TreeSitterExtractor
from .git import GitInspector
from .guard import VolumeGuard
from .llm.client import ReasoningClient
from .logging import get_logger
from .models import FileSummary, GrabPayload
from .ports import Confirm, ReadLine, ReadSecret, decline
from .prompting.builder import ContextRequest, PromptBuilder
from .prompting.constants import ResponseVariant
from .prompting.response import CodeBundle, FileSelection, parse_code_bundle, parse_file_selection
from .rendering import RenderStyle, TreeRenderer
from .staging import StagingArea
from .walker import TreeWalker


@dataclass
class TreeOutcome:
    """Rendered tree in both styles; ``plain`` is what gets transported."""

    plain: str
    decorated: str


@dataclass
class GrabOutcome:
    text: str
    sources: List[str]


@dataclass
class SmartGrabOutcome:
    feature: str
    request: ContextRequest
    selection: FileSelection
    payload: GrabPayload


@dataclass
class ApplyOutcome:
    bundle: CodeBundle
    written: Optional[Path]


class Orchestrator:
    """Coordinates walking, extraction, rendering, guarding and collection."""

    def __init__(
        self,
        workdir: str | Path = ".",
        *,
        config: GoraniConfig | None = None,
        walker: TreeWalker | None = None,
        lexical: SymbolExtractor | None = None,
        syntactic: SymbolExtractor | None = None,
        renderer: TreeRenderer | None = None,
        prompt_builder: PromptBuilder | None = None,
        collector: FileCollector | None = None,
        guard: VolumeGuard | None = None,
        client: ReasoningClient | None = None,
        staging: StagingArea | None = None,
        git: GitInspector | None = None,
        clipboard: Callable[[str], None] | None = None,
        confirm: Confirm = decline,
        read_line: ReadLine | None = None,
        read_secret: ReadSecret | None = None,
    ) -> None:
        self.workdir = Path(workdir)
        self.config = config or load_config(self.workdir)
        self.walker = walker or TreeWalker()
        self.lexical = lexical or LexicalExtractor()
        self.syntactic = syntactic or TreeSitterExtractor()
        self.renderer = renderer or TreeRenderer()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.collector = collector or FileCollector(
            extensions=self.config.extensions, walker=self.walker
        )
        self.guard = guard or VolumeGuard(
            max_files=self.config.guard.max_files,
            protected_markers=self.config.guard.protected_markers,
        )
        self.staging = staging or StagingArea(
            self.workdir,
            input_file=self.config.staging.input_file,
            output_file=self.config.staging.output_file,
            editor=self.config.staging.editor,
        )
        self.git = git or GitInspector()
        self.clipboard = clipboard
        self.confirm = confirm
        self.read_line = read_line
        self.read_secret = read_secret
        self._client = client
        self.logger = get_logger("orchestrator")

    def run_tree(self, path: str = ".", *, with_symbols: bool = False) -> TreeOutcome:
        """Render the directory tree, optionally with lexically extracted functions."""
        root = self._resolve(path)
        self.logger.debug("Walking %s", root)
        entries = self.walker.walk(root)
        summaries: Dict[str, FileSummary] = {}
        if with_symbols:
            summaries = self.lexical.extract_tree(entries)
            self.logger.debug("Extracted symbols from %d files", len(summaries))
        plain = self.renderer.render(entries, summaries, RenderStyle.PLAIN)
        decorated = self.renderer.render(entries, summaries, RenderStyle.DECORATED)
        self._copy(plain)
        return TreeOutcome(plain=plain, decorated=decorated)

    def run_grab(self, paths: Sequence[str] = ()) -> GrabOutcome:
        """Grab a file, a directory, a filename lookup, or several of one kind."""
        targets = list(paths) or ["./"]
        if len(targets) == 1:
            return self._grab_single(targets[0])

        resolved = [self._resolve(target) for target in targets]
        dirs = [target for target, path in zip(targets, resolved) if path.is_dir()]
        files = [target for target, path in zip(targets, resolved) if not path.is_dir()]
        if dirs and files:
            raise GoraniError("please provide either only files or only directories, not a mix")

        if dirs:
            for target in dirs:
                self.guard.enforce(self._resolve(target), self.confirm)
            text = self.collector.collect_directories(self._resolve(target) for target in dirs)
            self._copy(text)
            self.logger.info("Copied content of %d folders", len(dirs))
            return GrabOutcome(text=text, sources=dirs)

        payload = self.collector.collect(self._resolve(target) for target in files)
        self._copy(payload.text)
        self.logger.info("Copied content of %d files", len(files))
        return GrabOutcome(text=payload.text, sources=files)

    def run_grab_public(self, path: str = ".") -> str:
        """List exported functions with their doc comments."""
        extractor = LexicalExtractor(exported_only=True)
        summaries = extractor.extract_tree(self.walker.walk(self._resolve(path)))
        return self.renderer.render_public(summaries)

    def run_summary(self, path: str = ".") -> str:
        """Return the syntactic symbol summary for ``path`` and transport it."""
        summary = self._build_summary(path)
        self._copy(summary)
        return summary

    def run_smartgrab(
        self,
        path: str = ".",
        *,
        description: str | None = None,
        feature: str | None = None,
    ) -> Optional[SmartGrabOutcome]:
        """Ask the reasoning service which files a feature needs, then grab them."""
        feature = feature or self.git.feature_branch(self.workdir)
        if not feature:
            self.logger.info("No valid feature branch found; skipping smart grab")
            return None
        self.logger.info("Feature branch: %s", feature)

        if description is None:
            if self.read_line is None:
                raise GoraniError("A feature description is required")
            description = self.read_line("Please enter a detailed feature description: ")

        summary = self._build_summary(path)
        request = self.prompt_builder.build_feature_request(feature, description, summary)
        self.staging.write_input(request.prompt)
        self.logger.info("Prompt saved to %s", self.staging.input_path)

        reply = self._get_client().complete(request)
        self.staging.write_output(reply)
        self.logger.info("Response saved to %s", self.staging.output_path)

        selection = parse_file_selection(reply)
        self.logger.info("Files selected: %s", ", ".join(selection.files) or "(none)")
        payload = self.collector.collect(self._resolve(name) for name in selection.files)
        self._copy(payload.text)
        return SmartGrabOutcome(
            feature=feature, request=request, selection=selection, payload=payload
        )

    def run_prepare(self, path: str = ".", *, task: str = "") -> Path:
        """Write an implementation prompt built from the function tree."""
        root = self._resolve(path)
        entries = self.walker.walk(root)
        tree = self.renderer.render(entries, self.lexical.extract_tree(entries), RenderStyle.PLAIN)
        request = self.prompt_builder.build_implement_request(tree, task)
        written = self.staging.write_input(request.prompt)
        self.logger.info("Prompt prepared in %s", written)
        return written

    def run_prompt(self, *, edit: bool = True) -> CodeBundle:
        """Send the (optionally edited) input file and store the code bundle reply."""
        text = self.staging.edit_input() if edit else self.staging.read_input()
        if not text.strip():
            raise GoraniError(f"{self.staging.input_path} is empty")
        request = ContextRequest(
            task_description=text,
            rendered_summary="",
            variant=ResponseVariant.CODE_BUNDLE,
            prompt=text,
        )
        reply = self._get_client().complete(request)
        self.staging.write_output(reply)
        self.logger.info("Response saved to %s", self.staging.output_path)
        return parse_code_bundle(reply)

    def run_apply(self) -> ApplyOutcome:
        """Write the first script of the stored code bundle to its filename."""
        bundle = parse_code_bundle(self.staging.read_output())
        if not bundle.scripts:
            self.logger.info("No scripts found in the stored response")
            return ApplyOutcome(bundle=bundle, written=None)
        target = self._resolve(bundle.filename)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(bundle.scripts[0], encoding="utf-8")
        self.logger.info("Wrote the first script to %s", target)
        return ApplyOutcome(bundle=bundle, written=target)

    def _grab_single(self, target: str) -> GrabOutcome:
        path = self._resolve(target)
        if not path.exists():
            self.logger.info("Searching for file: %s", target)
            try:
                path = find_file(self.workdir, target)
            except NotFoundError as exc:
                raise NotFoundError(f"{target} not found") from exc

        decision = self.guard.enforce(path, self.confirm)
        if path.is_dir():
            self.logger.info("Grabbing %s files in directory %s", decision.file_count, target)
            payload = self.collector.collect_directory(path)
        else:
            self.logger.info("Grabbing single file: %s", path)
            payload = self.collector.collect([path])
        self._copy(payload.text)
        return GrabOutcome(text=payload.text, sources=payload.paths)

    def _build_summary(self, path: str) -> str:
        entries = self.walker.walk(self._resolve(path))
        summaries = self.syntactic.extract_tree(entries)
        skipped = sum(1 for summary in summaries.values() if summary.error)
        if skipped:
            self.logger.warning("%d files could not be parsed and were annotated", skipped)
        return self.renderer.render_summary(summaries)

    def _get_client(self) -> ReasoningClient:
        if self._client is None:
            llm = self.config.llm or LLMConfig()
            kwargs: Dict[str, Any] = {}
            if llm.api_key:
                kwargs["api_key"] = llm.api_key
            if llm.request_timeout:
                kwargs["request_timeout"] = llm.request_timeout
            self._client = ReasoningClient(
                model=llm.model,
                base_url=llm.base_url,
                temperature=llm.temperature,
                max_tokens=llm.max_tokens,
                read_secret=self.read_secret,
                **kwargs,
            )
        return self._client

    def _resolve(self, target: str | Path) -> Path:
        path = Path(target).expanduser()
        if path.is_absolute():
            return path
        return self.workdir / path

    def _copy(self, text: str) -> None:
        if self.clipboard is not None:
            self.clipboard(text)


__all__ = [
    "ApplyOutcome",
    "GrabOutcome",
    "Orchestrator",
    "SmartGrabOutcome",
    "TreeOutcome",
]
